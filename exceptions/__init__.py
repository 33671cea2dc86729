"""
Custom exceptions module.

Per-request errors are captured as structured results by the translation
service; ConfigLoadError is the only fatal error.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    ValidationError,

    # Request
    MissingFieldError,
    InvalidDirectionError,

    # Translation
    BlockParseError,
    VocabularyUnavailableError,

    # Startup
    ConfigLoadError,
)

__all__ = [
    # Base
    "AppError",
    "ValidationError",

    # Request
    "MissingFieldError",
    "InvalidDirectionError",

    # Translation
    "BlockParseError",
    "VocabularyUnavailableError",

    # Startup
    "ConfigLoadError",
]

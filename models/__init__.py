"""
Pydantic models for validation and serialization.
"""

from models.base import BaseSchema
from models.translation import (
    TranslateRequest,
    TranslateResponse,
    TranslateErrorResponse,
    DirectionsResponse,
)
from models.vocabulary import LocaleFile

__all__ = [
    "BaseSchema",
    "TranslateRequest",
    "TranslateResponse",
    "TranslateErrorResponse",
    "DirectionsResponse",
    "LocaleFile",
]

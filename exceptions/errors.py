"""
Custom exception classes for the application.

Per-request failures (parse, vocabulary) are captured by the translation
service and turned into structured results. Only ConfigLoadError is fatal.
"""

from typing import Optional, Any
from datetime import datetime, timezone


class AppError(Exception):
    """
    Base exception for all application errors.

    All custom exceptions inherit from this.

    Attributes:
        code: Error code (e.g., "PARSE_FAILED")
        message: Human-readable message
        status_code: HTTP status code
        details: Additional context
    """

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 500,
        details: Optional[dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to API response format."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "details": self.details,
                "timestamp": self.timestamp
            }
        }


class ValidationError(AppError):
    """Request validation failed (400)."""

    def __init__(
        self,
        message: str,
        code: str = "VALIDATION_ERROR",
        details: Optional[dict] = None
    ):
        super().__init__(
            code=code,
            message=message,
            status_code=400,
            details=details
        )


# ===================
# REQUEST ERRORS
# ===================

class MissingFieldError(ValidationError):
    """Required request field missing or empty."""

    def __init__(self, fields: list[str]):
        quoted = " or ".join(f'"{f}"' for f in fields)
        super().__init__(
            code="MISSING_FIELD",
            message=f"Missing {quoted} in request body.",
            details={"missing": fields}
        )


class InvalidDirectionError(ValidationError):
    """Direction is malformed or names an unsupported locale pair."""

    def __init__(self, direction: str, supported: Optional[list[str]] = None):
        details: dict[str, Any] = {"provided": direction}
        if supported is not None:
            details["valid"] = supported
        super().__init__(
            code="INVALID_DIRECTION",
            message='Invalid "direction". Use "{source}-to-{target}".',
            details=details
        )


# ===================
# TRANSLATION ERRORS
# ===================

class BlockParseError(AppError):
    """Block notation could not be parsed (500, recovered with fallback)."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ):
        details: dict[str, Any] = {}
        if line is not None:
            details["line"] = line
        if column is not None:
            details["column"] = column
        super().__init__(
            code="PARSE_FAILED",
            message=message,
            status_code=500,
            details=details
        )
        self.line = line
        self.column = column


class VocabularyUnavailableError(AppError):
    """Target language vocabulary is not loaded (500, recovered with fallback)."""

    def __init__(self, locale: str):
        super().__init__(
            code="VOCABULARY_UNAVAILABLE",
            message=f"Language data not loaded for '{locale}'",
            status_code=500,
            details={"locale": locale}
        )
        self.locale = locale


# ===================
# STARTUP ERRORS
# ===================

class ConfigLoadError(AppError):
    """Mapping or vocabulary artifact missing or corrupt at startup (fatal)."""

    def __init__(self, artifact: str, path: str, reason: str):
        super().__init__(
            code="CONFIG_LOAD_FAILED",
            message=f"Failed to load {artifact} from {path}: {reason}",
            status_code=500,
            details={"artifact": artifact, "path": path, "reason": reason}
        )

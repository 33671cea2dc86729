"""
Translation API models.

Request and response bodies for POST /translate. Field names on the wire
are camelCase (translatedCode) to match existing clients.
"""

from typing import Any, Optional
from pydantic import Field

from models.base import BaseSchema


class TranslateRequest(BaseSchema):
    """
    Translate request body.

    Both fields are optional at the schema level so the route can answer
    missing fields with a 400 instead of a 422.
    """

    code: Optional[str] = Field(None, description="Block notation source text")
    direction: Optional[str] = Field(
        None,
        description="Translation direction as {source}-to-{target}, e.g. en-to-ja",
        examples=["en-to-ja", "ja-to-en"],
    )


class TranslateResponse(BaseSchema):
    """Successful translation."""

    translated_code: str = Field(..., alias="translatedCode", description="Translated block notation")


class TranslateErrorResponse(BaseSchema):
    """Failed translation with best-effort fallback text."""

    error: dict[str, Any] = Field(..., description="Error code, message and details")
    translated_code: Optional[str] = Field(
        None,
        alias="translatedCode",
        description="Fallback text (input or untranslated serialization)",
    )


class DirectionsResponse(BaseSchema):
    """Directions the service can translate."""
    directions: list[str] = Field(default_factory=list)
    locales: list[str] = Field(default_factory=list)
    mapping_pair: str = Field(..., description="Locale pair the dropdown mapping is written for")

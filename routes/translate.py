"""
Translation API routes.

POST /translate turns block notation from one language into another.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
import structlog

from config import Settings, get_settings
from models.translation import (
    TranslateRequest,
    TranslateResponse,
    TranslateErrorResponse,
    DirectionsResponse,
)
from services.translation_service import Direction, TranslationService
from exceptions import AppError, MissingFieldError
from utils.text_utils import preview

logger = structlog.get_logger(__name__)

router = APIRouter()


# ===================
# DEPENDENCIES
# ===================

def get_translation_service(request: Request) -> TranslationService:
    """Translation service loaded at startup (see main.lifespan)."""
    return request.app.state.translation_service


# ===================
# EXCEPTION HANDLER
# ===================

def handle_error(e: Exception) -> JSONResponse:
    """Convert exception to JSON response."""
    if isinstance(e, AppError):
        return JSONResponse(
            status_code=e.status_code,
            content=e.to_dict()
        )
    logger.error("unexpected_error", error=str(e), type=type(e).__name__)
    return JSONResponse(
        status_code=500,
        content={
            "error": {
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred"
            }
        }
    )


# ===================
# ROUTES
# ===================

@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses={
        400: {"description": "Missing or invalid fields"},
        500: {"model": TranslateErrorResponse, "description": "Parse or vocabulary failure"},
    },
)
async def translate(
    body: TranslateRequest,
    service: TranslationService = Depends(get_translation_service),
    settings: Settings = Depends(get_settings),
):
    """
    Translate block notation.

    Rewrites block text into the target language, then dropdown values
    through the dropdown mapping.

    Returns:
        translatedCode on success

    Raises:
        400: code or direction missing, or direction malformed
        500: Parse failure or target language not loaded (with fallback translatedCode)
    """
    try:
        missing = [name for name in ("code", "direction") if not getattr(body, name)]
        if missing:
            raise MissingFieldError(missing)

        direction = Direction.parse(
            body.direction.strip(),
            supported=service.supported_directions(),
        )
    except AppError as e:
        return handle_error(e)

    logger.info(
        "translation_requested",
        direction=str(direction),
        code_preview=preview(body.code, settings.log_preview_chars),
    )

    result = service.translate(body.code, direction)

    if not result.success:
        logger.error(
            "translation_failed",
            direction=str(direction),
            code=result.error.code,
            error=result.error.message,
        )
        return JSONResponse(status_code=result.error.status_code, content=result.to_dict())

    logger.info("translation_succeeded", direction=str(direction))
    return TranslateResponse(translated_code=result.translated_code)


@router.get("/directions", response_model=DirectionsResponse)
async def list_directions(
    service: TranslationService = Depends(get_translation_service),
):
    """
    List translation directions.

    A direction is listed when both of its locales have a vocabulary.
    Dropdown values are only translated for the mapping's locale pair.
    """
    return DirectionsResponse(
        directions=service.supported_directions(),
        locales=service.registry.locales,
        mapping_pair=service.mapping_table.pair,
    )

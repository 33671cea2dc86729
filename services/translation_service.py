"""
Translation service.

Runs one request through parse → vocabulary translate → dropdown
substitute → serialize. Failures come back as a TranslationResult with a
best-effort fallback text; nothing is raised past translate().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union
import re
import structlog

from config import Settings
from exceptions import (
    AppError,
    BlockParseError,
    InvalidDirectionError,
    VocabularyUnavailableError,
)
from parsers.block_parser import parse_document
from services.dropdown_service import DropdownEngine, TreeDropdownEngine, get_dropdown_engine
from services.mapping_service import EMPTY_MAPPING, MappingTable, load_mapping_file
from services.vocabulary_service import VocabularyRegistry, load_vocabularies

logger = structlog.get_logger(__name__)

_DIRECTION = re.compile(r"^([A-Za-z]{2,3}(?:[-_][A-Za-z0-9]+)*)-to-([A-Za-z]{2,3}(?:[-_][A-Za-z0-9]+)*)$")


class TranslationStage(str, Enum):
    """Where a request ended up."""
    RECEIVED = "received"
    DONE = "done"
    PARSE_FAILED = "parse_failed"
    VOCABULARY_MISSING = "vocabulary_missing"


@dataclass(frozen=True)
class Direction:
    """Source and target locale of a request."""
    source: str
    target: str

    @classmethod
    def parse(cls, token: str, supported: Optional[list[str]] = None) -> "Direction":
        """
        Parse "{source}-to-{target}".

        Args:
            token: Direction token
            supported: Directions to list in the error details

        Raises:
            InvalidDirectionError: Token is malformed
        """
        match = _DIRECTION.match(token or "")
        if not match:
            raise InvalidDirectionError(token, supported)
        return cls(source=match.group(1), target=match.group(2))

    @property
    def languages(self) -> list[str]:
        """Parse languages: source first, target second to accept mixed input."""
        if self.source == self.target:
            return [self.source]
        return [self.source, self.target]

    def __str__(self) -> str:
        return f"{self.source}-to-{self.target}"


@dataclass
class TranslationResult:
    """Outcome of one translation request."""
    translated_code: Optional[str]
    stage: TranslationStage
    error: Optional[AppError] = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict:
        """Convert to API response format."""
        body: dict[str, Any] = {}
        if self.error is not None:
            body.update(self.error.to_dict())
        if self.translated_code is not None:
            body["translatedCode"] = self.translated_code
        return body


class TranslationService:
    """
    Block notation translator.

    Holds the read-only vocabulary registry, dropdown mapping table and
    dropdown engine. Safe to share between requests: translate() only
    mutates the Document it parses itself.
    """

    def __init__(
        self,
        registry: VocabularyRegistry,
        mapping_table: MappingTable,
        engine: Optional[DropdownEngine] = None,
    ):
        self.registry = registry
        self.mapping_table = mapping_table
        self.engine = engine or TreeDropdownEngine()

    def supported_directions(self) -> list[str]:
        locales = [l for l in self.registry.locales if self.registry.is_available(l)]
        return [
            f"{source}-to-{target}"
            for source in locales
            for target in locales
            if source != target
        ]

    def mapping_for(self, direction: Direction) -> Mapping[str, Any]:
        """Forward or inverse mapping; empty for pairs the table does not cover."""
        mapping = self.mapping_table.for_locales(direction.source, direction.target)
        return EMPTY_MAPPING if mapping is None else mapping

    def translate(
        self,
        source_text: str,
        direction: Union[Direction, str],
        mapping: Optional[Mapping[str, Any]] = None,
    ) -> TranslationResult:
        """
        Translate block notation text.

        Args:
            source_text: Block notation in the source language
            direction: Direction or "{source}-to-{target}" token
            mapping: Dropdown mapping override (defaults to mapping_for(direction))

        Returns:
            TranslationResult; on failure error is set and translated_code
            holds the input unchanged
        """
        try:
            if isinstance(direction, str):
                direction = Direction.parse(direction)
        except InvalidDirectionError as e:
            return TranslationResult(
                translated_code=source_text,
                stage=TranslationStage.RECEIVED,
                error=e,
            )

        log = logger.bind(direction=str(direction))

        try:
            document = parse_document(source_text, direction.languages, self.registry)
        except BlockParseError as e:
            log.warning("translation_parse_failed", error=e.message, **e.details)
            return TranslationResult(
                translated_code=source_text,
                stage=TranslationStage.PARSE_FAILED,
                error=e,
            )

        for locale in (direction.source, direction.target):
            if not self.registry.is_available(locale):
                error = VocabularyUnavailableError(locale)
                log.warning("translation_vocabulary_missing", locale=locale)
                return TranslationResult(
                    translated_code=source_text,
                    stage=TranslationStage.VOCABULARY_MISSING,
                    error=error,
                )

        translated_blocks = document.translate(self.registry.get(direction.target))

        if mapping is None:
            mapping = self.mapping_for(direction)
        text = self.engine.apply(document, mapping)

        log.debug(
            "translation_completed",
            blocks=translated_blocks,
            engine=self.engine.name,
            mapping_entries=len(mapping),
        )
        return TranslationResult(translated_code=text, stage=TranslationStage.DONE)


def build_translation_service(settings: Settings) -> TranslationService:
    """
    Load vocabularies and the dropdown mapping once.

    Raises:
        ConfigLoadError: A data file is missing or corrupt
    """
    registry = load_vocabularies(settings.locales_dir)
    mapping_table = load_mapping_file(
        settings.dropdown_map_path,
        source_locale=settings.mapping_source_locale,
        target_locale=settings.mapping_target_locale,
    )
    engine = get_dropdown_engine(
        settings.dropdown_strategy,
        require_marker=settings.pattern_require_marker,
    )
    logger.info(
        "translation_service_ready",
        locales=registry.locales,
        mapping_entries=len(mapping_table),
        engine=engine.name,
    )
    return TranslationService(registry, mapping_table, engine)

"""
Block vocabulary tables.

Each locale file maps canonical (English) block specs to the localized
block text, e.g. {"commands": {"move %1 steps": "%1 歩動かす"}}. English is
built from the union of all canonical specs, so only non-English locales
need a file. The registry is loaded once at startup and never mutated.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional, Sequence, Union
import json
import structlog

from pydantic import ValidationError as PydanticValidationError

from exceptions import ConfigLoadError
from models.vocabulary import LocaleFile
from utils.text_utils import normalize_spec_key

logger = structlog.get_logger(__name__)

BASE_LOCALE = "en"


@dataclass(frozen=True)
class CommandMatch:
    """A recognised block: its canonical spec and the template it matched."""
    canonical: str
    template: str
    locale: str


@dataclass(frozen=True)
class Vocabulary:
    """Block vocabulary for one locale."""
    locale: str
    commands: Mapping[str, str] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return bool(self.commands)


class VocabularyRegistry:
    """
    Read-only set of vocabularies keyed by locale.

    Builds a lookup index per locale from normalized block text to the
    canonical spec, used by the parser to recognise blocks.
    """

    def __init__(self, vocabularies: Mapping[str, Vocabulary]):
        self._vocabularies = MappingProxyType(dict(vocabularies))
        self._indexes = {
            locale: self._build_index(vocabulary)
            for locale, vocabulary in self._vocabularies.items()
        }

    @classmethod
    def from_tables(cls, tables: Mapping[str, Union[dict, LocaleFile]]) -> "VocabularyRegistry":
        """
        Build a registry from raw locale tables.

        The base locale gets identity commands over every canonical spec
        any table knows, merged with its own table if one was given.
        """
        parsed = {
            locale: table if isinstance(table, LocaleFile) else LocaleFile.model_validate(table)
            for locale, table in tables.items()
        }

        canonical: dict[str, str] = {}
        for table in parsed.values():
            for spec in table.commands:
                canonical.setdefault(spec, spec)

        base = parsed.pop(BASE_LOCALE, LocaleFile())
        vocabularies = {
            BASE_LOCALE: Vocabulary(
                locale=BASE_LOCALE,
                commands=MappingProxyType({**canonical, **base.commands}),
                aliases=MappingProxyType(dict(base.aliases)),
            )
        }
        for locale, table in parsed.items():
            vocabularies[locale] = Vocabulary(
                locale=locale,
                commands=MappingProxyType(dict(table.commands)),
                aliases=MappingProxyType(dict(table.aliases)),
            )

        return cls(vocabularies)

    @staticmethod
    def _build_index(vocabulary: Vocabulary) -> dict[str, CommandMatch]:
        index: dict[str, CommandMatch] = {}
        for spec, localized in vocabulary.commands.items():
            key = normalize_spec_key(localized)
            if key in index and index[key].canonical != spec:
                logger.debug(
                    "vocabulary_ambiguous_text",
                    locale=vocabulary.locale,
                    text=localized,
                    kept=index[key].canonical,
                    dropped=spec,
                )
                continue
            index[key] = CommandMatch(canonical=spec, template=localized, locale=vocabulary.locale)

        for alias, spec in vocabulary.aliases.items():
            index.setdefault(
                normalize_spec_key(alias),
                CommandMatch(canonical=spec, template=alias, locale=vocabulary.locale),
            )
        return index

    @property
    def locales(self) -> list[str]:
        return sorted(self._vocabularies)

    def get(self, locale: str) -> Optional[Vocabulary]:
        return self._vocabularies.get(locale)

    def is_available(self, locale: str) -> bool:
        """True if the locale is loaded and has a commands table."""
        vocabulary = self._vocabularies.get(locale)
        return bool(vocabulary and vocabulary.commands)

    def match(self, template: str, languages: Sequence[str]) -> Optional[CommandMatch]:
        """
        Find the canonical spec for block text.

        Languages are tried in order; unknown locales are skipped.

        Args:
            template: Block text with %n placeholders
            languages: Locales to try

        Returns:
            CommandMatch, or None if no language knows the text
        """
        key = normalize_spec_key(template)
        for locale in languages:
            index = self._indexes.get(locale)
            if index and key in index:
                return index[key]
        return None


def load_vocabularies(locales_dir: Union[str, Path]) -> VocabularyRegistry:
    """
    Load every <locale>.json in a directory.

    Raises:
        ConfigLoadError: Directory missing, or a file unreadable or invalid
    """
    directory = Path(locales_dir)
    if not directory.is_dir():
        raise ConfigLoadError("vocabulary", str(directory), "directory not found")

    tables: dict[str, LocaleFile] = {}
    for path in sorted(directory.glob("*.json")):
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            tables[path.stem] = LocaleFile.model_validate(raw)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("vocabulary_load_failed", path=str(path), error=str(e))
            raise ConfigLoadError("vocabulary", str(path), str(e))
        except PydanticValidationError as e:
            logger.error("vocabulary_invalid", path=str(path), errors=e.error_count())
            raise ConfigLoadError("vocabulary", str(path), "invalid locale table")

    registry = VocabularyRegistry.from_tables(tables)
    logger.info(
        "vocabularies_loaded",
        locales=registry.locales,
        commands={locale: len(registry.get(locale).commands) for locale in registry.locales},
    )
    return registry

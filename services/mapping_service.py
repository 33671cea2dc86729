"""
Dropdown mapping table.

Holds the source → target dropdown value mapping (e.g. "random position" →
"ランダムな位置") and its inverse. Loaded once at startup, read-only after.
"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union
import json
import structlog

from exceptions import ConfigLoadError

logger = structlog.get_logger(__name__)

EMPTY_MAPPING: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class MappingTable:
    """
    Forward and inverse dropdown mappings for one locale pair.

    Attributes:
        forward: source value → target value
        inverse: target value → source value (last pair wins on collision)
        source_locale: Locale of the forward keys
        target_locale: Locale of the forward values
    """
    forward: Mapping[str, Any] = field(default_factory=lambda: EMPTY_MAPPING)
    inverse: Mapping[str, Any] = field(default_factory=lambda: EMPTY_MAPPING)
    source_locale: str = "en"
    target_locale: str = "ja"

    def __len__(self) -> int:
        return len(self.forward)

    @property
    def pair(self) -> str:
        return f"{self.source_locale}-to-{self.target_locale}"

    def for_locales(self, source: str, target: str) -> Optional[Mapping[str, Any]]:
        """
        Pick the mapping for a translation direction.

        Returns:
            forward for source→target, inverse for target→source, an empty
            mapping when both locales are the same, None for other pairs
        """
        if (source, target) == (self.source_locale, self.target_locale):
            return self.forward
        if (source, target) == (self.target_locale, self.source_locale):
            return self.inverse
        if source == target:
            return EMPTY_MAPPING
        return None


def build_mapping_table(
    raw_pairs: Mapping[str, Any],
    source_locale: str = "en",
    target_locale: str = "ja",
) -> MappingTable:
    """
    Build a mapping table and its inverse.

    Values are not validated. When two source values share a target value
    the inverse keeps the later one. Values that cannot be dict keys (JSON
    arrays and objects) stay in forward but get no inverse entry.

    Args:
        raw_pairs: source value → target value
        source_locale: Locale of the keys
        target_locale: Locale of the values

    Returns:
        Immutable MappingTable
    """
    forward = dict(raw_pairs)
    inverse: dict[Any, str] = {}
    collisions: list[Any] = []
    unhashable: list[str] = []

    for source_value, target_value in forward.items():
        try:
            hash(target_value)
        except TypeError:
            unhashable.append(source_value)
            continue
        if target_value in inverse:
            collisions.append(target_value)
        inverse[target_value] = source_value

    if collisions:
        logger.warning(
            "dropdown_inverse_collision",
            count=len(collisions),
            values=collisions[:10],
        )
    if unhashable:
        logger.warning(
            "dropdown_inverse_skipped",
            count=len(unhashable),
            keys=unhashable[:10],
        )

    return MappingTable(
        forward=MappingProxyType(forward),
        inverse=MappingProxyType(inverse),
        source_locale=source_locale,
        target_locale=target_locale,
    )


def extract_pairs(raw: Any) -> dict:
    """
    Accept either a flat mapping or one wrapped in a "dropdowns" field.

    Raises:
        ValueError: Neither shape is a JSON object
    """
    if not isinstance(raw, dict):
        raise ValueError("mapping must be a JSON object")
    if isinstance(raw.get("dropdowns"), dict):
        return raw["dropdowns"]
    return raw


def load_mapping_file(
    path: Union[str, Path],
    source_locale: str = "en",
    target_locale: str = "ja",
) -> MappingTable:
    """
    Load the dropdown mapping JSON file.

    Raises:
        ConfigLoadError: File missing, unreadable, or not a JSON object
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        pairs = extract_pairs(raw)
    except (OSError, json.JSONDecodeError, ValueError) as e:
        logger.error("mapping_load_failed", path=str(path), error=str(e))
        raise ConfigLoadError("dropdown mapping", str(path), str(e))

    table = build_mapping_table(pairs, source_locale, target_locale)
    logger.info(
        "mapping_loaded",
        path=str(path),
        entries=len(table.forward),
        pair=table.pair,
    )
    return table

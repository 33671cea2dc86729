"""
Text utilities for comparing block text across languages.

Japanese input often mixes full-width and half-width characters, so block
lookups compare NFKC-normalized, case-folded, whitespace-collapsed text.
"""

import re
import unicodedata
from typing import Optional

_WHITESPACE = re.compile(r"\s+")
_PLACEHOLDER = re.compile(r"%\d+")
_PLACEHOLDER_SPACING = re.compile(r"\s*%\s*")


def collapse_whitespace(text: str) -> str:
    """
    Collapse runs of whitespace into single spaces and strip the ends.

    - "move   (10)  steps " → "move (10) steps"
    """
    return _WHITESPACE.sub(" ", text).strip()


def normalize_spec_key(spec: Optional[str]) -> str:
    """
    Normalize a block template for lookup.

    Handles width and case differences:
    - "Move %1 Steps" → "move%steps"
    - "％1 歩動かす" → "%歩動かす"

    Placeholders lose their index so templates that reorder inputs still
    compare equal on their literal text.

    Args:
        spec: Block template with %n placeholders

    Returns:
        Normalized key, or "" if input is empty
    """
    if not spec:
        return ""

    # NFKC folds full-width ASCII (％, １) into plain ASCII
    normalized = unicodedata.normalize("NFKC", spec)
    normalized = _PLACEHOLDER.sub("%", normalized)
    normalized = _PLACEHOLDER_SPACING.sub("%", collapse_whitespace(normalized))

    return normalized.casefold()


def placeholder_order(template: str) -> list[int]:
    """
    Return the 0-based input indexes in the order their placeholders appear.

    - "%2 を %1 にする" → [1, 0]
    """
    normalized = unicodedata.normalize("NFKC", template)
    return [int(m.group(0)[1:]) - 1 for m in _PLACEHOLDER.finditer(normalized)]


def preview(text: Optional[str], limit: int = 50) -> str:
    """Shorten text for log lines, marking truncation with '...'."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + "..."

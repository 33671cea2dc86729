"""
Dropdown value substitution.

Two interchangeable engines rewrite dropdown literals from one language's
values to another's:

    TreeDropdownEngine     rewrites Input nodes of a parsed Document
    PatternDropdownEngine  rewrites the serialized text with regexes

Both take a Document and return the serialized result, so callers never
depend on which one ran. The tree engine is the default: it only ever
touches dropdown-shaped inputs.
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping
import re
import structlog

from parsers.block_nodes import Document, Input

logger = structlog.get_logger(__name__)

# Optional selector arrow after a bracketed literal: "[value v]", "(value v)"
ARROW_MARKER = r"\s*v\s*"


# ===================
# PATTERN SUBSTITUTION
# ===================

def _compile_patterns(key: str, require_marker: bool) -> tuple[re.Pattern, re.Pattern]:
    escaped = re.escape(key)
    marker = f"({ARROW_MARKER})" if require_marker else f"({ARROW_MARKER})?"
    square = re.compile(rf"(\[){escaped}{marker}(\])")
    round_ = re.compile(rf"(\(){escaped}{marker}(\))")
    return square, round_


def substitute_text(
    text: str,
    mapping: Mapping[str, Any],
    require_marker: bool = False,
) -> str:
    """
    Replace bracketed dropdown literals in serialized block notation.

    Keys are applied longest first, each over the result of the previous
    one, so "dark red" is replaced before "red" can break it. Only the
    literal changes; brackets and the arrow marker are kept as found.

    Limitation: a target value that contains a later (shorter) source key
    in brackets will be rewritten again.

    Args:
        text: Serialized block notation
        mapping: Source value → target value
        require_marker: Only rewrite literals followed by the ' v' arrow

    Returns:
        Text with every recognised literal replaced
    """
    for key in sorted(mapping, key=lambda k: len(str(k)), reverse=True):
        key_text = str(key)
        if not key_text:
            continue

        replacement = str(mapping[key])

        def _swap(match: re.Match) -> str:
            return f"{match.group(1)}{replacement}{match.group(2) or ''}{match.group(3)}"

        for pattern in _compile_patterns(key_text, require_marker):
            text = pattern.sub(_swap, text)

    return text


# ===================
# TREE SUBSTITUTION
# ===================

def lookup_value(slot: Input) -> str:
    """The value a dropdown slot had before any rewrite."""
    if slot.menu_value is not None:
        return slot.menu_value
    return "" if slot.value is None else str(slot.value)


def substitute_tree(document: Document, mapping: Mapping[str, Any]) -> int:
    """
    Rewrite dropdown inputs of a parsed document in place.

    Only inputs classified as dropdowns are read. A value missing from the
    mapping is left as is. Key order does not matter: lookups are exact.

    Returns:
        Number of inputs rewritten
    """
    rewritten = 0
    for block in document.walk_blocks():
        for slot in block.inputs:
            if not slot.is_dropdown:
                continue

            original = lookup_value(slot)
            if original not in mapping:
                continue

            slot.set_value(mapping[original])
            rewritten += 1

    return rewritten


# ===================
# ENGINES
# ===================

class DropdownEngine(ABC):
    """Dropdown substitution over a parsed document."""

    name: str = ""

    @abstractmethod
    def apply(self, document: Document, mapping: Mapping[str, Any]) -> str:
        """Substitute dropdown values and return the serialized document."""


class TreeDropdownEngine(DropdownEngine):
    """Rewrites dropdown Input nodes, then serializes."""

    name = "tree"

    def apply(self, document: Document, mapping: Mapping[str, Any]) -> str:
        rewritten = substitute_tree(document, mapping)
        logger.debug("dropdowns_substituted", engine=self.name, rewritten=rewritten)
        return document.stringify()


class PatternDropdownEngine(DropdownEngine):
    """
    Serializes, then rewrites bracketed literals in the text.

    By default only literals carrying the arrow marker are rewritten, so
    free text such as "[Hello!]" is left alone. require_marker=False gives
    the looser match of substitute_text().
    """

    name = "pattern"

    def __init__(self, require_marker: bool = True):
        self.require_marker = require_marker

    def apply(self, document: Document, mapping: Mapping[str, Any]) -> str:
        text = substitute_text(document.stringify(), mapping, self.require_marker)
        logger.debug("dropdowns_substituted", engine=self.name, keys=len(mapping))
        return text


def get_dropdown_engine(strategy: str = "tree", require_marker: bool = True) -> DropdownEngine:
    """
    Create the engine for a strategy name.

    Raises:
        ValueError: Unknown strategy
    """
    if strategy == "tree":
        return TreeDropdownEngine()
    if strategy == "pattern":
        return PatternDropdownEngine(require_marker=require_marker)
    raise ValueError(f"Unknown dropdown strategy: {strategy}")

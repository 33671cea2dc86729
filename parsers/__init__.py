"""
Block notation parsers module.

Text → Document tree; Document.stringify() goes back to text.
"""

from parsers.block_parser import (
    BlockParser,
    parse_document,
)
from parsers.block_nodes import (
    Document,
    Script,
    Block,
    Input,
    Label,
    DROPDOWN_SHAPES,
    ingest,
)

__all__ = [
    "BlockParser",
    "parse_document",
    "Document",
    "Script",
    "Block",
    "Input",
    "Label",
    "DROPDOWN_SHAPES",
    "ingest",
]

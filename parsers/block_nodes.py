"""
Block notation document tree.

Document → Script → Block → Input, where an Input may hold a nested
reporter or boolean Block. The parser builds these; the dropdown engines
mutate Input values in place; stringify() turns the tree back into text.

Parsed nodes remember the text they were read from. A node prints that
text back until it is rewritten, so untouched parts of a document keep
their exact spacing and escapes.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Protocol
import re

from utils.text_utils import normalize_spec_key

# Input shapes that hold a closed-choice (menu) value
DROPDOWN_SHAPES = frozenset({"dropdown", "number-dropdown"})

INPUT_SHAPES = frozenset({"string", "number", "dropdown", "number-dropdown", "boolean", "block"})
BLOCK_SHAPES = frozenset({"stack", "reporter", "boolean"})

ARROW = "v"

# Characters the parser reads as brackets inside each literal kind
ROUND_SPECIAL = "[]()<>"
SQUARE_SPECIAL = "]"

_PLACEHOLDER = re.compile(r"%(\d+)")


def escape_literal(text: str, special: str) -> str:
    """Backslash-escape every character in `special`."""
    return "".join("\\" + char if char in special else char for char in text)


class CommandTable(Protocol):
    """Anything exposing canonical → localized block templates."""
    commands: Any


@dataclass
class Label:
    """Cached display text of a dropdown slot."""
    value: str


@dataclass
class Input:
    """
    One argument slot of a block.

    value is what gets printed; menu_value is the literal as it was parsed,
    kept so dropdown lookups never see an already-translated value.
    has_arrow is the legacy selector-arrow flag from loosely typed trees.
    raw is the bracketed source text; set_value() clears it.
    """
    shape: str
    value: Any = ""
    menu_value: Optional[str] = None
    label: Optional[Label] = None
    has_arrow: bool = False
    block: Optional["Block"] = None
    raw: Optional[str] = None
    arrow: str = f" {ARROW}"

    @property
    def is_dropdown(self) -> bool:
        """True for closed-choice slots: a dropdown shape, or the legacy arrow flag."""
        return self.shape in DROPDOWN_SHAPES or self.has_arrow

    @property
    def display_value(self) -> str:
        if self.label is not None:
            return str(self.label.value)
        return "" if self.value is None else str(self.value)

    def set_value(self, value: Any) -> None:
        """Replace the printed value (and cached label) of this slot."""
        self.value = value
        if self.label is not None:
            self.label.value = value
        self.raw = None

    def stringify(self) -> str:
        if self.block is not None:
            return self.block.stringify_inline()
        if self.raw is not None:
            return self.raw
        if self.shape == "boolean":
            return "<>"

        round_shape = self.shape in ("number", "number-dropdown")
        opener, closer = ("(", ")") if round_shape else ("[", "]")
        text = escape_literal(self.display_value, ROUND_SPECIAL if round_shape else SQUARE_SPECIAL)
        if self.is_dropdown:
            text = f"{text}{self.arrow}"
        return f"{opener}{text}{closer}"


@dataclass
class Block:
    """
    A block with its command text as a template.

    template uses %1..%n for inputs, numbered by position in `inputs`, and
    is the whitespace-collapsed text used for vocabulary lookups.
    source_template is the same text as written (spacing and escapes kept);
    it is printed until translate() swaps in another template.
    canonical is the language-neutral spec the parser recognised, or None
    when the block text is unknown (it is then printed as written).
    """
    template: str
    inputs: list[Input] = field(default_factory=list)
    canonical: Optional[str] = None
    shape: str = "stack"
    indent: str = ""
    comment: Optional[str] = None
    source_template: Optional[str] = None
    comment_raw: Optional[str] = None
    eol: str = ""

    def render(self) -> str:
        """Command text with every placeholder replaced by its input."""
        def _fill(match: re.Match) -> str:
            index = int(match.group(1)) - 1
            if 0 <= index < len(self.inputs):
                return self.inputs[index].stringify()
            return match.group(0)

        template = self.template if self.source_template is None else self.source_template
        return _PLACEHOLDER.sub(_fill, template)

    def stringify_inline(self) -> str:
        text = self.render()
        if self.shape == "reporter":
            return f"({text})"
        if self.shape == "boolean":
            return f"<{text}>"
        return text

    def stringify(self) -> str:
        text = self.indent + self.stringify_inline()
        if self.source_template is not None:
            return text + (self.comment_raw or "") + self.eol
        if self.comment is not None:
            text = f"{text} // {self.comment}" if text.strip() else f"{self.indent}// {self.comment}"
        return text + self.eol

    def translate(self, vocabulary: CommandTable) -> bool:
        """
        Swap in the vocabulary's template for this block only. Returns True on a hit.

        A block already written in the vocabulary's text keeps its source text.
        """
        if self.canonical is None:
            return False
        localized = vocabulary.commands.get(self.canonical)
        if not localized:
            return False
        if normalize_spec_key(localized) != normalize_spec_key(self.template):
            self.template = localized
            self.source_template = None
        return True

    def walk(self) -> Iterator["Block"]:
        """Yield this block, then every block nested in its inputs."""
        yield self
        for slot in self.inputs:
            if slot.block is not None:
                yield from slot.block.walk()


@dataclass
class Script:
    """
    A run of consecutive non-blank lines.

    separator is the text between the previous script and this one.
    """
    blocks: list[Block] = field(default_factory=list)
    separator: str = "\n\n"

    def stringify(self) -> str:
        return "\n".join(block.stringify() for block in self.blocks)


@dataclass
class Document:
    """
    Parsed block notation.

    leading/trailing keep the blank lines around the scripts so a document
    without translatable content prints back as it was read.
    """
    scripts: list[Script] = field(default_factory=list)
    leading: str = ""
    trailing: str = ""

    def walk_blocks(self) -> Iterator[Block]:
        for script in self.scripts:
            for block in script.blocks:
                yield from block.walk()

    def translate(self, vocabulary: CommandTable) -> int:
        """
        Rewrite block command text into the vocabulary's language.

        Dropdown values are left alone. Returns the number of blocks rewritten.
        """
        return sum(1 for block in self.walk_blocks() if block.translate(vocabulary))

    def stringify(self) -> str:
        parts = [self.leading]
        for index, script in enumerate(self.scripts):
            if index:
                parts.append(script.separator)
            parts.append(script.stringify())
        parts.append(self.trailing)
        return "".join(parts)


# ===================
# INGESTION
# ===================

def ingest(node: Any):
    """
    Convert a loosely typed node tree into Document/Script/Block/Input.

    Accepts the dict form other block tools emit: nodes flagged with
    isDocument/isScript/isBlock/isInput/isLabel/isIcon, block children mixing
    labels, icons, inputs and nested blocks, and inputs carrying shape,
    value, menu, label and hasArrow.

    Raises:
        ValueError: Node kind cannot be determined
    """
    if not isinstance(node, dict):
        raise ValueError(f"Cannot ingest node of type {type(node).__name__}")

    if node.get("isDocument") or ("scripts" in node and not node.get("isScript")):
        return Document(scripts=[ingest(s) for s in node.get("scripts", [])])

    if node.get("isScript"):
        return Script(blocks=[ingest(b) for b in node.get("blocks", [])])

    if node.get("isBlock"):
        return _ingest_block(node)

    if node.get("isInput"):
        return _ingest_input(node)

    raise ValueError(f"Unknown node kind: {sorted(node.keys())}")


def _ingest_block(node: dict) -> Block:
    parts: list[str] = []
    inputs: list[Input] = []

    for child in node.get("children", []):
        if not isinstance(child, dict):
            parts.append(str(child))
        elif child.get("isLabel"):
            parts.append(str(child.get("value", "")))
        elif child.get("isIcon"):
            parts.append("@" + str(child.get("name", "")))
        elif child.get("isBlock"):
            nested = _ingest_block(child)
            inputs.append(Input(shape="block", block=nested))
            parts.append(f"%{len(inputs)}")
        elif child.get("isInput"):
            inputs.append(_ingest_input(child))
            parts.append(f"%{len(inputs)}")
        else:
            raise ValueError(f"Unknown block child: {sorted(child.keys())}")

    shape = node.get("shape", "stack")
    if shape not in BLOCK_SHAPES:
        shape = "stack"

    return Block(
        template=" ".join(p for p in parts if p),
        inputs=inputs,
        canonical=node.get("canonical"),
        shape=shape,
    )


def _ingest_input(node: dict) -> Input:
    label = node.get("label")
    if isinstance(label, dict):
        label = Label(value=label.get("value", ""))
    elif isinstance(label, str):
        label = Label(value=label)
    else:
        label = None

    shape = node.get("shape", "string")
    if shape not in INPUT_SHAPES:
        shape = "string"

    menu = node.get("menu")
    return Input(
        shape=shape,
        value=node.get("value", ""),
        menu_value=None if menu is None else str(menu),
        label=label,
        has_arrow=bool(node.get("hasArrow")),
    )

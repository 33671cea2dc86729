"""
Block notation parser.

Turns scratchblocks-style text into a Document tree:

    when @greenFlag clicked
    move (10) steps
    go to [random position v]
    if <touching [mouse-pointer v]?> then

One block per line, scripts separated by blank lines. Inputs:
    [text]        string
    [text v]      dropdown
    (10) / ()     number
    (text v)      number-dropdown
    <>            empty boolean slot
    <...>         nested boolean block
    (...)         nested reporter block

Block text is matched against the vocabularies of the requested languages;
unknown blocks are kept as written. Every node records the text it was
read from, so stringify() gives back the input until something is rewritten.
"""

from typing import Optional, Protocol, Sequence, Union
import re
import structlog

from exceptions import BlockParseError
from parsers.block_nodes import Block, Document, Input, Label, Script
from utils.text_utils import collapse_whitespace, placeholder_order

logger = structlog.get_logger(__name__)


_NUMBER = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)(e[+-]?\d+)?$", re.IGNORECASE)
_ARROW_SUFFIX = re.compile(r"^(.*?)(\s+v)$", re.DOTALL)
_PLACEHOLDER = re.compile(r"%\d+")
_ESCAPE = re.compile(r"\\([\[\]()<>])")

Part = Union[str, Input]


def _unescape(text: str) -> str:
    return _ESCAPE.sub(r"\1", text)


def _renumber(template: str, order: list[int]) -> str:
    numbering = iter(order)
    return _PLACEHOLDER.sub(lambda m: f"%{next(numbering) + 1}", template)


class CommandMatcher(Protocol):
    """Resolves block text to its canonical spec (see VocabularyRegistry.match)."""

    def match(self, template: str, languages: Sequence[str]): ...


class BlockParser:
    """
    Line-oriented block notation parser.

    Args:
        matcher: Object with match(template, languages) returning a match
            with canonical and template attributes, or None
        languages: Locales to recognise block text in, in priority order
    """

    def __init__(self, matcher: Optional[CommandMatcher], languages: Sequence[str]):
        self.matcher = matcher
        self.languages = list(languages)
        self._line_no = 0

    def parse(self, text: str) -> Document:
        """
        Parse a whole document.

        Blank lines (and whatever whitespace they hold) are kept as the
        separators between scripts.

        Raises:
            BlockParseError: Unbalanced or mismatched brackets
        """
        lines = text.split("\n")
        non_blank = [i for i, line in enumerate(lines) if line.strip()]

        if not non_blank:
            return Document(leading=text)

        first, last = non_blank[0], non_blank[-1]
        document = Document(
            leading="".join(line + "\n" for line in lines[:first]),
            trailing="".join("\n" + line for line in lines[last + 1:]),
        )

        current: Optional[Script] = None
        gap: list[str] = []
        for index in range(first, last + 1):
            line = lines[index]
            if not line.strip():
                current = None
                gap.append(line)
                continue
            if current is None:
                current = Script(separator="\n" + "".join(blank + "\n" for blank in gap))
                document.scripts.append(current)
                gap = []
            self._line_no = index + 1
            current.blocks.append(self.parse_line(line))

        logger.debug(
            "document_parsed",
            scripts=len(document.scripts),
            languages=self.languages,
        )
        return document

    def parse_line(self, line: str) -> Block:
        """Parse one line into a stack block, keeping indentation, comment and line ending."""
        eol = ""
        if line.endswith("\r"):
            line, eol = line[:-1], "\r"

        stripped = line.lstrip()
        indent = line[: len(line) - len(stripped)]

        parts, _, comment_raw = self._scan(stripped, 0, closer=None)
        block = self._build_block(parts, shape="stack")
        block.indent = indent
        block.eol = eol
        if comment_raw is not None:
            block.comment_raw = comment_raw
            block.comment = comment_raw[2:].strip()
        return block

    # ===================
    # SCANNING
    # ===================

    def _scan(
        self,
        text: str,
        pos: int,
        closer: Optional[str],
    ) -> tuple[list[Part], int, Optional[str]]:
        """
        Collect text runs and inputs until `closer` (or end of line at top level).

        Text runs are returned as written, escapes included.

        Returns:
            (parts, position after closer, raw "//" comment at top level)
        """
        parts: list[Part] = []
        buffer: list[str] = []

        def flush():
            if buffer:
                parts.append("".join(buffer))
                buffer.clear()

        while pos < len(text):
            char = text[pos]

            if closer is None and text.startswith("//", pos):
                flush()
                return parts, len(text), text[pos:]

            if char == closer and not self._is_operator(text, pos):
                flush()
                return parts, pos + 1, None

            if char == "[":
                flush()
                slot, pos = self._scan_square(text, pos)
                parts.append(slot)
                continue

            if char == "(":
                flush()
                inner, end, _ = self._scan(text, pos + 1, closer=")")
                parts.append(self._round_input(inner, text[pos:end]))
                pos = end
                continue

            if char == "<" and not self._is_operator(text, pos):
                flush()
                inner, end, _ = self._scan(text, pos + 1, closer=">")
                parts.append(self._boolean_input(inner, text[pos:end]))
                pos = end
                continue

            if char in ")]" or (char == ">" and not self._is_operator(text, pos)):
                raise BlockParseError(
                    f"Unexpected '{char}'",
                    line=self._line_no,
                    column=pos + 1,
                )

            if char == "\\" and pos + 1 < len(text) and text[pos + 1] in "[]()<>":
                buffer.append(text[pos:pos + 2])
                pos += 2
                continue

            buffer.append(char)
            pos += 1

        if closer is not None:
            raise BlockParseError(
                f"Missing '{closer}'",
                line=self._line_no,
                column=len(text) + 1,
            )

        flush()
        return parts, pos, None

    def _scan_square(self, text: str, start: int) -> tuple[Input, int]:
        """Read a [literal] starting at its '[' up to the first unescaped ']'."""
        chars: list[str] = []
        pos = start + 1
        while pos < len(text):
            char = text[pos]
            if char == "\\" and pos + 1 < len(text) and text[pos + 1] == "]":
                chars.append("]")
                pos += 2
                continue
            if char == "]":
                literal = self._literal_input("".join(chars), text[start:pos + 1], square=True)
                return literal, pos + 1
            chars.append(char)
            pos += 1

        raise BlockParseError("Missing ']'", line=self._line_no, column=len(text) + 1)

    @staticmethod
    def _is_operator(text: str, pos: int) -> bool:
        """'<' or '>' with whitespace on both sides is a comparison, not a bracket."""
        if text[pos] not in "<>":
            return False
        before = text[pos - 1] if pos > 0 else ""
        after = text[pos + 1] if pos + 1 < len(text) else ""
        return before.isspace() and after.isspace()

    # ===================
    # INPUT CLASSIFICATION
    # ===================

    def _literal_input(self, content: str, raw: str, square: bool) -> Input:
        arrow = _ARROW_SUFFIX.match(content)
        if arrow:
            value = arrow.group(1)
            return Input(
                shape="dropdown" if square else "number-dropdown",
                value=value,
                menu_value=value,
                label=Label(value=value),
                raw=raw,
                arrow=arrow.group(2),
            )
        return Input(shape="string" if square else "number", value=content, raw=raw)

    def _round_input(self, inner: list[Part], raw: str) -> Input:
        if all(isinstance(p, str) for p in inner):
            content = _unescape("".join(inner))
            stripped = content.strip()
            if not stripped or _NUMBER.match(stripped):
                return Input(shape="number", value=stripped, raw=raw)
            if _ARROW_SUFFIX.match(content):
                return self._literal_input(content, raw, square=False)
        return Input(shape="block", block=self._build_block(inner, shape="reporter"))

    def _boolean_input(self, inner: list[Part], raw: str) -> Input:
        if all(isinstance(p, str) and not p.strip() for p in inner):
            return Input(shape="boolean", raw=raw)
        return Input(shape="block", block=self._build_block(inner, shape="boolean"))

    # ===================
    # BLOCK RECOGNITION
    # ===================

    def _build_block(self, parts: list[Part], shape: str) -> Block:
        pieces: list[str] = []
        inputs: list[Input] = []
        for part in parts:
            if isinstance(part, Input):
                inputs.append(part)
                pieces.append(f"%{len(inputs)}")
            else:
                pieces.append(part)

        source = "".join(pieces)
        block = Block(
            template=collapse_whitespace(_unescape(source)),
            inputs=inputs,
            shape=shape,
            source_template=source,
        )

        if self.matcher is not None and block.template:
            match = self.matcher.match(block.template, self.languages)
            if match is not None:
                self._apply_match(block, match)

        return block

    @staticmethod
    def _apply_match(block: Block, match) -> None:
        """
        Record the canonical spec and put inputs in canonical order.

        A localized template may place inputs differently ("%2 を %1 に");
        text order k maps to canonical slot order[k].
        """
        order = placeholder_order(match.template)
        count = len(block.inputs)
        if sorted(order) != list(range(count)):
            return
        if len(_PLACEHOLDER.findall(block.template)) != count:
            return

        canonical_inputs: list[Optional[Input]] = [None] * count
        for k, slot in enumerate(order):
            canonical_inputs[slot] = block.inputs[k]

        block.template = _renumber(block.template, order)
        if block.source_template is not None:
            block.source_template = _renumber(block.source_template, order)
        block.inputs = canonical_inputs
        block.canonical = match.canonical


def parse_document(
    text: str,
    languages: Sequence[str],
    matcher: Optional[CommandMatcher] = None,
) -> Document:
    """
    Parse block notation text.

    Args:
        text: Block notation source
        languages: Locales to recognise block text in
        matcher: Vocabulary lookup (usually a VocabularyRegistry)

    Returns:
        Document tree

    Raises:
        BlockParseError: If brackets are unbalanced or mismatched
    """
    return BlockParser(matcher, languages).parse(text)

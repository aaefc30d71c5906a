"""Parser recovering layers and bindings from ZMK keymap source.

The parser understands the output of ``KeymapGenerator`` plus the usual
hand-written variants. Layers are the children of the node marked
``compatible = "zmk,keymap"`` that carry a ``bindings`` property, so
behavior and combo definitions elsewhere in the file are ignored. Without
that marker any node with ``bindings`` is a layer, wherever it sits.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum

from pydantic import Field

from keyport.codec.behavior import BehaviorKind
from keyport.core.errors import ParseError
from keyport.models.keymap import KeymapMetadata, ParsedBinding, ParsedLayer
from keyport.models.results import BaseResult

from .tokenizer import Token, TokenType, tokenize_dt


logger = logging.getLogger(__name__)

_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_LINE_COMMENT = re.compile(r"//[^\n]*")
_DEFINE = re.compile(r"#define\s+([A-Za-z_]\w*)\s+(\S.*?)\s*$")
KEYMAP_COMPATIBLE = "zmk,keymap"

_METADATA_PATTERNS = {
    "device": re.compile(r"Device:\s*(\S+)"),
    "date": re.compile(r"Date:\s*(\S+)"),
    "version": re.compile(r"Version:\s*(\S+)"),
    "layer_count": re.compile(r"Layers:\s*(\d+)"),
}


class ParseErrorCode(str, Enum):
    """Failure codes reported by the parser."""

    INVALID_FORMAT = "INVALID_FORMAT"
    MISSING_KEYMAP = "MISSING_KEYMAP"
    INVALID_LAYER = "INVALID_LAYER"
    INVALID_BINDING = "INVALID_BINDING"
    UNKNOWN_BEHAVIOR = "UNKNOWN_BEHAVIOR"
    UNKNOWN_KEY = "UNKNOWN_KEY"


class ParseResult(BaseResult):
    """Layers recovered from keymap source."""

    layers: list[ParsedLayer] = Field(default_factory=list)
    metadata: KeymapMetadata | None = None
    defines: dict[str, str] = Field(default_factory=dict)

    @property
    def layer_constants(self) -> dict[str, int]:
        """``#define`` values that are plain integers, e.g. layer indices."""
        return {
            name: int(value)
            for name, value in self.defines.items()
            if value.isdecimal()
        }


def strip_comments(content: str) -> str:
    """Replace ``/* ... */`` and ``// ...`` comments with a single space."""
    without_blocks = _BLOCK_COMMENT.sub(" ", content)
    return _LINE_COMMENT.sub(" ", without_blocks)


def extract_metadata(content: str) -> KeymapMetadata:
    """Read export metadata from the first block comment of raw source."""
    comment = _BLOCK_COMMENT.search(content)
    if not comment:
        return KeymapMetadata()

    text = comment.group()
    values: dict[str, str | int] = {}
    for field_name, pattern in _METADATA_PATTERNS.items():
        match = pattern.search(text)
        if match:
            values[field_name] = match.group(1)

    if "layer_count" in values:
        values["layer_count"] = int(values["layer_count"])
    return KeymapMetadata(**values)


def parse_binding(binding: str) -> ParsedBinding:
    """Split a binding such as ``&kp A`` into tag and parameters."""
    parts = binding.strip().removeprefix("&").split()
    if not parts:
        return ParsedBinding(behavior_tag="")
    return ParsedBinding(behavior_tag=parts[0], params=parts[1:])


def tokenize_bindings(text: str, warnings: list[str] | None = None) -> list[str]:
    """Group a binding list into one string per binding.

    Each ``&`` token starts a binding that consumes as many following tokens
    as its behavior takes, stopping early at the next ``&`` token. Unknown
    behaviors consume one parameter and are reported through ``warnings``.

    Args:
        text: Contents of a ``bindings = < ... >`` list
        warnings: Optional list collecting unknown-behavior notes

    Returns:
        Binding strings such as ``&kp A`` or ``&lt 1 TAB``
    """
    tokens = text.split()
    bindings: list[str] = []
    index = 0

    while index < len(tokens):
        token = tokens[index]
        if not token.startswith("&"):
            logger.debug("Skipping stray token %r in bindings", token)
            index += 1
            continue

        tag = token[1:]
        kind = BehaviorKind.from_tag(tag)
        params: list[str] = []
        for candidate in tokens[index + 1 : index + 1 + kind.max_tokens]:
            if candidate.startswith("&"):
                break
            params.append(candidate)

        binding = " ".join([token, *params])
        bindings.append(binding)
        if kind is BehaviorKind.UNKNOWN and warnings is not None:
            warnings.append(f"Unknown behavior: {tag} in binding: {binding}")

        index += 1 + len(params)

    return bindings


@dataclass
class _Block:
    name: str
    start: int
    line: int
    label: str | None = None
    display_name: str | None = None
    bindings_text: str | None = None
    has_bindings: bool = False
    compatible: str | None = None
    parent: "_Block | None" = None


def _in_keymap(block: _Block) -> bool:
    return block.parent is not None and block.parent.compatible == KEYMAP_COMPATIBLE


class _LayerExtractor:
    """Walk the token stream tracking brace depth to find layer blocks."""

    def __init__(self, source: str, tokens: list[Token]) -> None:
        self.source = source
        self.tokens = tokens
        self.stack: list[_Block] = []
        self.closed: list[_Block] = []
        self.defines: dict[str, str] = {}
        self.warnings: list[str] = []

    def run(self) -> list[_Block]:
        index = 0
        while self.tokens[index].type is not TokenType.EOF:
            token = self.tokens[index]

            if token.type is TokenType.PREPROCESSOR:
                self._read_define(token)
                index += 1
            elif token.type is TokenType.LBRACE:
                parent = self.stack[-1] if self.stack else None
                self.stack.append(
                    _Block(
                        self._block_name(index), token.start, token.line, parent=parent
                    )
                )
                index += 1
            elif token.type is TokenType.RBRACE:
                if self.stack:
                    self.closed.append(self.stack.pop())
                else:
                    logger.debug("Unmatched '}' at line %d", token.line)
                index += 1
            elif (
                token.type is TokenType.IDENTIFIER
                and self.stack
                and self.tokens[index + 1].type is TokenType.EQUALS
            ):
                index = self._read_property(index, self.stack[-1])
            else:
                index += 1

        while self.stack:
            block = self.stack.pop()
            self.warnings.append(f"Unclosed block '{block.name}' at line {block.line}")
            self.closed.append(block)

        layers = [block for block in self.closed if block.bindings_text is not None]
        if any(block.compatible == KEYMAP_COMPATIBLE for block in self.closed):
            skipped = [block.name for block in layers if not _in_keymap(block)]
            if skipped:
                logger.debug("Ignoring bindings outside the keymap node: %s", skipped)
            layers = [block for block in layers if _in_keymap(block)]
        return sorted(layers, key=lambda block: block.start)

    def _read_define(self, token: Token) -> None:
        match = _DEFINE.match(token.value)
        if match:
            self.defines[match.group(1)] = match.group(2)

    def _block_name(self, brace_index: int) -> str:
        if brace_index == 0:
            return ""
        previous = self.tokens[brace_index - 1]
        if previous.type in (TokenType.IDENTIFIER, TokenType.REFERENCE):
            return previous.value
        if previous.type is TokenType.SLASH:
            return "/"
        return ""

    def _read_property(self, index: int, block: _Block) -> int:
        name = self.tokens[index].value
        index += 2  # name and '='

        if name == "bindings":
            block.has_bindings = True
            index = self._read_bindings(index, block)
        elif name in ("label", "display-name", "compatible"):
            value = self.tokens[index]
            if value.type is TokenType.STRING:
                if name == "label":
                    block.label = value.value
                elif name == "display-name":
                    block.display_name = value.value
                else:
                    block.compatible = value.value

        # Skip the rest of the value without leaving the block
        while self.tokens[index].type not in (
            TokenType.SEMICOLON,
            TokenType.RBRACE,
            TokenType.EOF,
        ):
            index += 1
        if self.tokens[index].type is TokenType.SEMICOLON:
            index += 1
        return index

    def _read_bindings(self, index: int, block: _Block) -> int:
        if self.tokens[index].type is not TokenType.ANGLE_OPEN:
            logger.debug("Bindings of %r are not a cell list, skipping", block.name)
            return index

        groups: list[str] = []
        while self.tokens[index].type is TokenType.ANGLE_OPEN:
            open_token = self.tokens[index]
            close = index + 1
            while self.tokens[close].type is not TokenType.ANGLE_CLOSE:
                if self.tokens[close].type in (TokenType.SEMICOLON, TokenType.EOF):
                    raise ParseError(
                        f"Unterminated bindings list in '{block.name}' "
                        f"at line {open_token.line}",
                        {"layer": block.name, "line": open_token.line},
                    )
                close += 1

            groups.append(self.source[open_token.end : self.tokens[close].start])
            index = close + 1

            # bindings = <...>, <...>;
            if (
                self.tokens[index].type is TokenType.COMMA
                and self.tokens[index + 1].type is TokenType.ANGLE_OPEN
            ):
                index += 1

        block.bindings_text = " ".join(groups)
        return index


class DeviceTreeParser:
    """Parse ZMK keymap source into layers of raw binding strings."""

    def parse(self, content: str) -> ParseResult:
        """Parse keymap source.

        Args:
            content: Full text of a ``.keymap`` file

        Returns:
            ParseResult with layers in source order, header metadata and
            warnings; on failure ``error`` carries a ParseErrorCode
        """
        if not content or not content.strip():
            return _failure(ParseErrorCode.INVALID_FORMAT, "Empty file content")

        stripped = strip_comments(content)
        metadata = extract_metadata(content)

        if "keymap" not in stripped or "{" not in stripped:
            return _failure(
                ParseErrorCode.MISSING_KEYMAP, "No keymap structure found in file"
            )

        extractor = _LayerExtractor(stripped, tokenize_dt(stripped))
        try:
            blocks = extractor.run()
        except ParseError as e:
            logger.debug("Layer extraction failed: %s", e)
            return _failure(ParseErrorCode.INVALID_FORMAT, e.message, e.context)

        result = ParseResult(success=True, metadata=metadata, defines=extractor.defines)
        for warning in extractor.warnings:
            result.add_warning(warning)

        for block in blocks:
            warnings: list[str] = []
            bindings = tokenize_bindings(block.bindings_text or "", warnings)
            for warning in warnings:
                result.add_warning(warning)

            label = block.label if block.label is not None else block.display_name
            if label is None:
                label = block.name
            result.layers.append(ParsedLayer(label=label, bindings=bindings))

        logger.debug(
            "Parsed %d layers with %d warnings",
            len(result.layers),
            len(result.warnings),
        )
        return result


def _failure(
    code: ParseErrorCode, message: str, context: dict[str, object] | None = None
) -> ParseResult:
    result = ParseResult(success=False)
    result.fail(code.value, message, context)
    return result


def create_keymap_parser() -> DeviceTreeParser:
    """Create a DeviceTreeParser instance."""
    return DeviceTreeParser()


__all__ = [
    "ParseErrorCode",
    "ParseResult",
    "DeviceTreeParser",
    "create_keymap_parser",
    "strip_comments",
    "extract_metadata",
    "parse_binding",
    "tokenize_bindings",
]

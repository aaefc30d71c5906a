"""Lexer for the DeviceTree subset used by ZMK keymap files."""

import logging
import re
from dataclasses import dataclass
from enum import Enum


logger = logging.getLogger(__name__)


class TokenType(str, Enum):
    """Token categories produced by the lexer."""

    IDENTIFIER = "IDENTIFIER"
    STRING = "STRING"
    NUMBER = "NUMBER"
    REFERENCE = "REFERENCE"
    PREPROCESSOR = "PREPROCESSOR"
    LBRACE = "LBRACE"
    RBRACE = "RBRACE"
    ANGLE_OPEN = "ANGLE_OPEN"
    ANGLE_CLOSE = "ANGLE_CLOSE"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    SEMICOLON = "SEMICOLON"
    EQUALS = "EQUALS"
    COLON = "COLON"
    COMMA = "COMMA"
    SLASH = "SLASH"
    OTHER = "OTHER"
    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    """A lexed token with its position in the source text.

    ``value`` is the unquoted, unescaped text for strings and the raw text
    otherwise. ``start`` and ``end`` are character offsets so callers can
    slice the original source between two tokens.
    """

    type: TokenType
    value: str
    raw: str
    start: int
    end: int
    line: int
    column: int


_PUNCTUATION = {
    "{": TokenType.LBRACE,
    "}": TokenType.RBRACE,
    "<": TokenType.ANGLE_OPEN,
    ">": TokenType.ANGLE_CLOSE,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ";": TokenType.SEMICOLON,
    "=": TokenType.EQUALS,
    ":": TokenType.COLON,
    ",": TokenType.COMMA,
    "/": TokenType.SLASH,
}

_TOKEN_PATTERNS = [
    (TokenType.STRING, re.compile(r'"(?:[^"\\\n]|\\.)*"')),
    (TokenType.PREPROCESSOR, re.compile(r"#[^\n]*")),
    (TokenType.REFERENCE, re.compile(r"&[A-Za-z_][A-Za-z0-9_\-]*")),
    (TokenType.NUMBER, re.compile(r"0[xX][0-9a-fA-F]+|\d+(?![A-Za-z_])")),
    (TokenType.IDENTIFIER, re.compile(r"[A-Za-z0-9_][A-Za-z0-9_,.+\-@]*")),
]

_WHITESPACE = re.compile(r"\s+")
_UNTERMINATED_STRING = re.compile(r'"[^\n]*')
_STRING_ESCAPE = re.compile(r"\\(.)")


def unescape_string(value: str) -> str:
    """Undo backslash escapes inside a quoted string: ``\\"`` -> ``"``."""
    return _STRING_ESCAPE.sub(r"\1", value)


def tokenize_dt(source: str) -> list[Token]:
    """Split DeviceTree source into tokens.

    Comments are expected to be stripped beforehand. Strings are single
    tokens, so braces inside a label never affect nesting. An unterminated
    string runs to the end of its line.

    Args:
        source: DeviceTree text

    Returns:
        Tokens in source order, terminated by an EOF token
    """
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    length = len(source)

    while pos < length:
        whitespace = _WHITESPACE.match(source, pos)
        if whitespace:
            chunk = whitespace.group()
            newlines = chunk.count("\n")
            if newlines:
                line += newlines
                line_start = pos + chunk.rfind("\n") + 1
            pos = whitespace.end()
            continue

        column = pos - line_start + 1
        char = source[pos]

        if char in _PUNCTUATION:
            tokens.append(
                Token(_PUNCTUATION[char], char, char, pos, pos + 1, line, column)
            )
            pos += 1
            continue

        for token_type, pattern in _TOKEN_PATTERNS:
            match = pattern.match(source, pos)
            if match:
                raw = match.group()
                value = raw
                if token_type is TokenType.STRING:
                    value = unescape_string(raw[1:-1])
                tokens.append(
                    Token(token_type, value, raw, pos, match.end(), line, column)
                )
                pos = match.end()
                break
        else:
            if char == '"':
                match = _UNTERMINATED_STRING.match(source, pos)
                raw = match.group() if match else char
                logger.debug("Unterminated string at line %d column %d", line, column)
                end = pos + len(raw)
                value = unescape_string(raw[1:])
                tokens.append(
                    Token(TokenType.STRING, value, raw, pos, end, line, column)
                )
                pos = end
            else:
                tokens.append(
                    Token(TokenType.OTHER, char, char, pos, pos + 1, line, column)
                )
                pos += 1

    end_column = length - line_start + 1
    tokens.append(Token(TokenType.EOF, "", "", length, length, line, end_column))
    return tokens


__all__ = ["TokenType", "Token", "tokenize_dt", "unescape_string"]

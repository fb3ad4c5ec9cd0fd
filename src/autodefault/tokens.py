"""Token kinds, token trees, and source positions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto


class TokenKind(Enum):
    IDENT = auto()  # struct, Foo, r#type
    PUNCT = auto()  # single character: # , ; : = < > ...
    LITERAL = auto()  # "str", 'c', b"bytes", 42u8, 1.0e3
    LIFETIME = auto()  # 'a
    GROUP = auto()  # ( ... ), { ... }, [ ... ]
    EOF = auto()  # carries trailing trivia at top level


class Delimiter(Enum):
    PARENTHESIS = ("(", ")")
    BRACE = ("{", "}")
    BRACKET = ("[", "]")

    @property
    def open(self) -> str:
        return self.value[0]

    @property
    def close(self) -> str:
        return self.value[1]


@dataclass(frozen=True, slots=True)
class Position:
    """Source position, 1-based line and column, 0-based character offset."""

    line: int
    column: int
    offset: int


@dataclass(frozen=True, slots=True)
class Span:
    """Source range from start to end position."""

    start: Position
    end: Position


# Anchor used when no source token is available to point at.
CALL_SITE = Span(Position(1, 1, 0), Position(1, 1, 0))


@dataclass(frozen=True, slots=True)
class Token:
    """A token tree node.

    ``leading`` holds the whitespace and comments that preceded the token in
    the source; ``closing`` holds the same for a group's closing delimiter.
    Together they let untouched code render back byte for byte.
    """

    kind: TokenKind
    text: str
    span: Span
    leading: str = ""
    children: tuple[Token, ...] = ()
    closing: str = ""
    delimiter: Delimiter | None = None


def ident(name: str, span: Span, leading: str = "") -> Token:
    return Token(TokenKind.IDENT, name, span, leading)


def punct(ch: str, span: Span, leading: str = "") -> Token:
    return Token(TokenKind.PUNCT, ch, span, leading)


def literal(text: str, span: Span, leading: str = "") -> Token:
    return Token(TokenKind.LITERAL, text, span, leading)


def group(
    delimiter: Delimiter,
    children: tuple[Token, ...],
    span: Span,
    leading: str = "",
    closing: str = "",
) -> Token:
    return Token(TokenKind.GROUP, delimiter.open, span, leading, children, closing, delimiter)


def is_ident(tok: Token | None, name: str | None = None) -> bool:
    """Return True if tok is an identifier (optionally with the given name)."""
    if tok is None or tok.kind != TokenKind.IDENT:
        return False
    return name is None or tok.text == name


def is_punct(tok: Token | None, ch: str) -> bool:
    """Return True if tok is the punctuation character ch."""
    return tok is not None and tok.kind == TokenKind.PUNCT and tok.text == ch


def is_group(tok: Token | None, delimiter: Delimiter) -> bool:
    """Return True if tok is a group with the given delimiter."""
    return tok is not None and tok.kind == TokenKind.GROUP and tok.delimiter == delimiter


def describe(tok: Token) -> str:
    """Short human-readable form of a token for diagnostics."""
    if tok.kind == TokenKind.GROUP and tok.delimiter is not None:
        inner = "..." if tok.children else ""
        return f"{tok.delimiter.open}{inner}{tok.delimiter.close}"
    if tok.kind == TokenKind.EOF:
        return "end of input"
    return tok.text

"""Rust lexer: converts source text into token trees."""

from __future__ import annotations

import re

from autodefault.errors import LexError
from autodefault.tokens import Delimiter, Position, Span, Token, TokenKind

_OPENERS = {d.open: d for d in Delimiter}
_CLOSERS = {d.close: d for d in Delimiter}

_PUNCT_CHARS = frozenset("+-*/%^!&|=<>@.,;:#$?~\\")

# r"..", r#".."#, br"..", cr".."
_RAW_STRING_START = re.compile(r'(?:br|cr|r)(#*)"')
# "..", b"..", c".."
_STRING_START = re.compile(r'[bc]?"')

_NUMBER = re.compile(
    r"(?:0x[0-9a-fA-F_]+|0o[0-7_]+|0b[01_]+"
    r"|[0-9][0-9_]*(?:\.(?![.A-Za-z_])[0-9_]*)?(?:[eE][+-]?[0-9_]+)?)"
    r"[A-Za-z0-9_]*"
)


def _is_ident_start(ch: str) -> bool:
    return ch == "_" or ch.isalpha()


def _is_ident_continue(ch: str) -> bool:
    return ch == "_" or ch.isalnum()


class Lexer:
    """Tokenize Rust source text into a list of token trees."""

    def __init__(self, source: str, filename: str = "input.rs") -> None:
        self._source = source
        self._filename = filename
        self._pos = 0
        self._line = 1
        self._col = 1

    def tokenize(self) -> list[Token]:
        """Tokenize the full source; the last token is EOF with trailing trivia."""
        tokens, trailing = self._lex_sequence(None, None)
        end = self._current_pos()
        tokens.append(Token(TokenKind.EOF, "", Span(end, end), trailing))
        return tokens

    # ------------------------------------------------------------------
    # Position helpers
    # ------------------------------------------------------------------

    def _current_pos(self) -> Position:
        return Position(self._line, self._col, self._pos)

    def _peek(self, offset: int = 0) -> str:
        idx = self._pos + offset
        if idx < len(self._source):
            return self._source[idx]
        return ""

    def _at_end(self) -> bool:
        return self._pos >= len(self._source)

    def _advance(self) -> str:
        ch = self._source[self._pos]
        self._pos += 1
        if ch == "\n":
            self._line += 1
            self._col = 1
        else:
            self._col += 1
        return ch

    def _advance_n(self, count: int) -> str:
        return "".join(self._advance() for _ in range(count))

    def _error(self, message: str, pos: Position | None = None) -> LexError:
        if pos is None:
            pos = self._current_pos()
        return LexError(message, pos, self._source)

    # ------------------------------------------------------------------
    # Sequences and groups
    # ------------------------------------------------------------------

    def _lex_sequence(
        self, delimiter: Delimiter | None, opened_at: Position | None
    ) -> tuple[list[Token], str]:
        """Lex tokens until the matching closer (not consumed) or end of input.

        Returns the tokens and the trivia that precedes the closer.
        """
        tokens: list[Token] = []
        while True:
            leading = self._lex_trivia()

            if self._at_end():
                if delimiter is not None:
                    raise self._error(f"unclosed delimiter '{delimiter.open}'", opened_at)
                return tokens, leading

            ch = self._peek()
            if ch in _CLOSERS:
                if delimiter is None or _CLOSERS[ch] != delimiter:
                    raise self._error(f"unexpected closing delimiter '{ch}'")
                return tokens, leading

            tokens.append(self._lex_token(leading))

    def _lex_group(self, leading: str) -> Token:
        start = self._current_pos()
        delimiter = _OPENERS[self._advance()]
        children, closing = self._lex_sequence(delimiter, start)
        self._advance()  # closing delimiter
        return Token(
            TokenKind.GROUP,
            delimiter.open,
            Span(start, self._current_pos()),
            leading,
            tuple(children),
            closing,
            delimiter,
        )

    # ------------------------------------------------------------------
    # Trivia: whitespace and comments
    # ------------------------------------------------------------------

    def _lex_trivia(self) -> str:
        start = self._pos
        while not self._at_end():
            ch = self._peek()
            if ch.isspace():
                self._advance()
            elif ch == "/" and self._peek(1) == "/":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
            elif ch == "/" and self._peek(1) == "*":
                self._lex_block_comment()
            else:
                break
        return self._source[start : self._pos]

    def _lex_block_comment(self) -> None:
        start = self._current_pos()
        self._advance_n(2)
        depth = 1
        while depth > 0:
            if self._at_end():
                raise self._error("unterminated block comment", start)
            if self._peek() == "/" and self._peek(1) == "*":
                self._advance_n(2)
                depth += 1
            elif self._peek() == "*" and self._peek(1) == "/":
                self._advance_n(2)
                depth -= 1
            else:
                self._advance()

    # ------------------------------------------------------------------
    # Single tokens
    # ------------------------------------------------------------------

    def _lex_token(self, leading: str) -> Token:
        ch = self._peek()

        if ch in _OPENERS:
            return self._lex_group(leading)

        raw_match = _RAW_STRING_START.match(self._source, self._pos)
        if raw_match:
            return self._lex_raw_string(leading, len(raw_match.group(0)), len(raw_match.group(1)))

        if _STRING_START.match(self._source, self._pos):
            return self._lex_string(leading)

        if ch == "b" and self._peek(1) == "'":
            start = self._current_pos()
            self._advance()  # b prefix
            return self._lex_quote(leading, start)

        if ch == "r" and self._peek(1) == "#" and _is_ident_start(self._peek(2)):
            start = self._current_pos()
            self._advance_n(2)
            return self._lex_ident(leading, start)

        if _is_ident_start(ch):
            return self._lex_ident(leading, self._current_pos())

        if ch.isdigit():
            return self._lex_number(leading)

        if ch == "'":
            return self._lex_quote(leading, self._current_pos())

        if ch in _PUNCT_CHARS:
            start = self._current_pos()
            self._advance()
            return Token(TokenKind.PUNCT, ch, Span(start, self._current_pos()), leading)

        raise self._error(f"unexpected character '{ch}'")

    def _lex_ident(self, leading: str, start: Position) -> Token:
        while not self._at_end() and _is_ident_continue(self._peek()):
            self._advance()
        text = self._source[start.offset : self._pos]
        return Token(TokenKind.IDENT, text, Span(start, self._current_pos()), leading)

    def _lex_number(self, leading: str) -> Token:
        start = self._current_pos()
        match = _NUMBER.match(self._source, self._pos)
        assert match is not None  # current character is a digit
        self._advance_n(len(match.group(0)))
        return Token(TokenKind.LITERAL, match.group(0), Span(start, self._current_pos()), leading)

    def _lex_suffix(self) -> None:
        while not self._at_end() and _is_ident_continue(self._peek()):
            self._advance()

    def _lex_string(self, leading: str) -> Token:
        start = self._current_pos()
        while self._peek() != '"':
            self._advance()  # b / c prefix
        self._advance()  # opening quote
        while True:
            if self._at_end():
                raise self._error("unterminated string literal", start)
            ch = self._advance()
            if ch == "\\" and not self._at_end():
                self._advance()
            elif ch == '"':
                break
        self._lex_suffix()
        text = self._source[start.offset : self._pos]
        return Token(TokenKind.LITERAL, text, Span(start, self._current_pos()), leading)

    def _lex_raw_string(self, leading: str, prefix_len: int, hashes: int) -> Token:
        start = self._current_pos()
        self._advance_n(prefix_len)
        terminator = '"' + "#" * hashes
        end = self._source.find(terminator, self._pos)
        if end == -1:
            raise self._error("unterminated raw string literal", start)
        self._advance_n(end + len(terminator) - self._pos)
        self._lex_suffix()
        text = self._source[start.offset : self._pos]
        return Token(TokenKind.LITERAL, text, Span(start, self._current_pos()), leading)

    def _lex_quote(self, leading: str, start: Position) -> Token:
        """Lex a character literal or a lifetime, both introduced by a quote."""
        self._advance()  # opening quote

        if self._peek() == "\\":
            while True:
                if self._at_end() or self._peek() == "\n":
                    raise self._error("unterminated character literal", start)
                ch = self._advance()
                if ch == "\\":
                    self._advance()
                elif ch == "'":
                    break
        elif self._peek(1) == "'" and self._peek() not in ("", "\n"):
            self._advance_n(2)
        elif _is_ident_start(self._peek()):
            self._lex_suffix()
            text = self._source[start.offset : self._pos]
            return Token(TokenKind.LIFETIME, text, Span(start, self._current_pos()), leading)
        else:
            raise self._error("unterminated character literal", start)

        self._lex_suffix()
        text = self._source[start.offset : self._pos]
        return Token(TokenKind.LITERAL, text, Span(start, self._current_pos()), leading)


def tokenize(source: str, filename: str = "input.rs") -> list[Token]:
    """Convenience function: tokenize source text and return token list."""
    return Lexer(source, filename).tokenize()

"""Forward-only token cursor and the output sink the rewriters stream into."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from autodefault.tokens import Token


class Cursor:
    """Read a token sequence front to back with one token of lookahead."""

    def __init__(self, tokens: Iterable[Token]) -> None:
        self._tokens = tuple(tokens)
        self._pos = 0

    def peek(self) -> Token | None:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos]
        return None

    def next(self) -> Token | None:
        tok = self.peek()
        if tok is not None:
            self._pos += 1
        return tok


def merge_trivia(dropped: str, following: str) -> str:
    """Combine the trivia of removed tokens with the trivia of the next kept token.

    A removed annotation that sat on its own line takes that line break with
    it; comments above it are kept.
    """
    head, newline, rest = following.partition("\n")
    if not newline or head.strip():
        return dropped + following.lstrip(" \t")
    line_start = dropped.rfind("\n") + 1
    if line_start:
        return dropped[:line_start] + rest
    return dropped + rest.lstrip(" \t")


class Sink:
    """Collects output tokens, carrying comments over from dropped tokens."""

    def __init__(self) -> None:
        self._tokens: list[Token] = []
        self._pending: str | None = None

    def push(self, tok: Token | None) -> None:
        if tok is None:
            return
        if self._pending is not None:
            tok = replace(tok, leading=merge_trivia(self._pending, tok.leading))
            self._pending = None
        self._tokens.append(tok)

    def extend(self, tokens: Iterable[Token]) -> None:
        for tok in tokens:
            self.push(tok)

    def drop(self, tok: Token) -> None:
        """Leave tok out of the output, keeping its leading trivia for what follows."""
        if self._pending is None:
            self._pending = tok.leading
        else:
            self._pending = merge_trivia(self._pending, tok.leading)

    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    def into_group(self, source: Token) -> Token:
        """Return source with its children replaced by the collected tokens."""
        closing = source.closing
        if self._pending is not None:
            closing = merge_trivia(self._pending, closing)
            self._pending = None
        return replace(source, children=tuple(self._tokens), closing=closing)

"""Source renderer: converts token trees back to text."""

from __future__ import annotations

from collections.abc import Iterable

from autodefault.tokens import Token, TokenKind


def render(tokens: Iterable[Token]) -> str:
    """Render tokens, with their original spacing and comments, to source text."""
    parts: list[str] = []
    _render_into(tokens, parts)
    return "".join(parts)


def _render_into(tokens: Iterable[Token], parts: list[str]) -> None:
    for tok in tokens:
        parts.append(tok.leading)
        parts.append(tok.text)
        if tok.kind == TokenKind.GROUP and tok.delimiter is not None:
            _render_into(tok.children, parts)
            parts.append(tok.closing)
            parts.append(tok.delimiter.close)

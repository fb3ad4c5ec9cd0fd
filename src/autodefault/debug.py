"""--debug token tree dump to stderr."""

from __future__ import annotations

import sys
from collections.abc import Iterable
from typing import TextIO

from autodefault.tokens import Token, TokenKind


def dump_tokens(tokens: Iterable[Token], *, file: TextIO | None = None) -> None:
    """Print a human-readable token tree to *file* (stderr by default)."""
    out = file if file is not None else sys.stderr
    for tok in tokens:
        _dump_token(tok, 0, out)


def _indent(depth: int) -> str:
    return "  " * depth


def _dump_token(tok: Token, depth: int, f: TextIO) -> None:
    pos = f"{tok.span.start.line}:{tok.span.start.column}"
    if tok.kind == TokenKind.GROUP and tok.delimiter is not None:
        f.write(f"{_indent(depth)}Group {tok.delimiter.open}{tok.delimiter.close} @{pos}\n")
        for child in tok.children:
            _dump_token(child, depth + 1, f)
    elif tok.kind == TokenKind.EOF:
        f.write(f"{_indent(depth)}Eof @{pos}\n")
    else:
        f.write(f"{_indent(depth)}{tok.kind.name.capitalize()} {tok.text!r} @{pos}\n")

"""Shared test fixtures and helpers."""

from __future__ import annotations

import pytest

from autodefault.diagnostics import DiagnosticKind
from autodefault.lexer import tokenize
from autodefault.render import render
from autodefault.rewrite import RewriteResult, rewrite
from autodefault.tokens import Token, TokenKind

DEFAULT = " = ::core::default::Default::default()"


def _strip_eof(tokens: list[Token]) -> list[Token]:
    return [t for t in tokens if t.kind != TokenKind.EOF]


@pytest.fixture
def lex():
    """Return a helper that tokenizes source and returns tokens (excluding EOF)."""

    def _lex(source: str) -> list[Token]:
        return _strip_eof(tokenize(source))

    return _lex


@pytest.fixture
def run():
    """Return a helper that rewrites an item given as source text."""

    def _run(item: str, args: str = "") -> RewriteResult:
        return rewrite(_strip_eof(tokenize(args)), _strip_eof(tokenize(item)))

    return _run


def text(result: RewriteResult) -> str:
    """Render the rewritten declaration (without diagnostics)."""
    return render(result.tokens)


def kinds(result: RewriteResult) -> list[DiagnosticKind]:
    return [d.kind for d in result.diagnostics]


def assert_kinds(tokens: list[Token], expected: list[TokenKind]) -> None:
    """Assert that the token kinds match the expected list."""
    actual = [t.kind for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"


def assert_texts(tokens: list[Token], expected: list[str]) -> None:
    """Assert that the token texts match the expected list."""
    actual = [t.text for t in tokens]
    assert actual == expected, f"Expected {expected}, got {actual}"

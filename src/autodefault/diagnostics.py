"""Diagnostics and the token fragments the rewriter synthesizes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from autodefault.errors import format_snippet
from autodefault.tokens import Delimiter, Span, Token, group, ident, literal, punct


class DiagnosticKind(Enum):
    USAGE = "usage"  # arguments passed to the invocation
    SHAPE = "shape"  # not a struct/enum with a body (fatal)
    SKIP_PLACEMENT = "skip-placement"  # skip on the item itself or a unit/tuple variant
    DUPLICATE_SKIP = "duplicate-skip"
    SKIP_SYNTAX = "skip-syntax"  # malformed skip annotation


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A message anchored at a source span."""

    kind: DiagnosticKind
    message: str
    span: Span

    def to_tokens(self) -> tuple[Token, ...]:
        """``::core::compile_error! { "message" }`` at this diagnostic's span."""
        span = self.span
        return (
            *_path(("core", "compile_error"), span, leading="\n"),
            punct("!", span),
            group(
                Delimiter.BRACE,
                (literal(_string_literal(self.message), span, leading=" "),),
                span,
                leading=" ",
                closing=" ",
            ),
        )

    def format(self, source: str, filename: str = "input.rs") -> str:
        return format_snippet(self.message, self.span, source, filename)


def default_initializer(span: Span) -> tuple[Token, ...]:
    """`` = ::core::default::Default::default()`` carrying the field's span."""
    return (
        punct("=", span, leading=" "),
        *_path(("core", "default", "Default", "default"), span, leading=" "),
        group(Delimiter.PARENTHESIS, (), span),
    )


def _path(segments: tuple[str, ...], span: Span, leading: str = "") -> list[Token]:
    # ::a::b::c
    tokens: list[Token] = []
    for segment in segments:
        tokens.append(punct(":", span, leading if not tokens else ""))
        tokens.append(punct(":", span))
        tokens.append(ident(segment, span))
    return tokens


def _string_literal(text: str) -> str:
    escaped = (
        text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n").replace("\r", "\\r")
    )
    return f'"{escaped}"'

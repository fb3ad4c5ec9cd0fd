"""Recognition of the ``#[auto_default(skip)]`` opt-out annotation."""

from __future__ import annotations

from dataclasses import dataclass

from autodefault.context import RewriteContext
from autodefault.cursor import Cursor
from autodefault.diagnostics import DiagnosticKind
from autodefault.tokens import Delimiter, Span, Token, describe, is_group, is_ident, is_punct


@dataclass(frozen=True, slots=True)
class SkipAnnotation:
    """An annotation in the skip namespace.

    ``valid`` annotations point at their marker; invalid ones point at the
    token that broke the expected shape and have already been reported.
    """

    valid: bool
    span: Span


def resolve_annotation(attr: Token, ctx: RewriteContext) -> SkipAnnotation | None:
    """Classify the bracket group of one ``#[...]`` annotation.

    Returns None when the annotation belongs to someone else and must be
    passed through untouched.
    """
    inner = Cursor(attr.children)
    head = inner.next()
    if not is_ident(head, ctx.namespace):
        return None
    assert head is not None
    # #[auto_default::something] is a path, not ours
    if is_punct(inner.peek(), ":"):
        return None

    args = inner.next()
    if args is None:
        return _invalid(ctx, f"expected `{ctx.skip_annotation}`", head.span)
    if not is_group(args, Delimiter.PARENTHESIS):
        return _invalid(ctx, f"expected parentheses: `{ctx.skip_annotation}`", args.span)

    extra = inner.next()
    if extra is not None:
        message = f"unexpected `{describe(extra)}` after `{ctx.skip_annotation}`"
        return _invalid(ctx, message, extra.span)

    marker_cursor = Cursor(args.children)
    marker = marker_cursor.next()
    if marker is None:
        return _invalid(ctx, f"expected `{ctx.marker}`", args.span)
    if not is_ident(marker, ctx.marker):
        message = f"expected `{ctx.marker}`, found `{describe(marker)}`"
        return _invalid(ctx, message, marker.span)

    trailing = marker_cursor.next()
    if trailing is not None:
        message = f"unexpected `{describe(trailing)}` after `{ctx.marker}`"
        return _invalid(ctx, message, trailing.span)

    return SkipAnnotation(True, marker.span)


def _invalid(ctx: RewriteContext, message: str, span: Span) -> SkipAnnotation:
    ctx.report(DiagnosticKind.SKIP_SYNTAX, message, span)
    return SkipAnnotation(False, span)


def report_misplaced(ctx: RewriteContext, span: Span) -> None:
    message = (
        f"`{ctx.skip_annotation}` can only be applied to fields "
        "and to enum variants with named fields"
    )
    ctx.report(DiagnosticKind.SKIP_PLACEMENT, message, span)


def report_duplicate(ctx: RewriteContext, span: Span) -> None:
    ctx.report(DiagnosticKind.DUPLICATE_SKIP, f"duplicate `{ctx.skip_annotation}`", span)

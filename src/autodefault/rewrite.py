"""Declaration rewriter, the entry point the macro host calls.

``rewrite(args, item)`` takes the tokens of the invocation arguments and of
the annotated ``struct`` or ``enum`` and returns the same declaration with
``= ::core::default::Default::default()`` added to every field that has no
default value, plus any diagnostics found along the way.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from autodefault.context import DEFAULT_MARKER, DEFAULT_NAMESPACE, RewriteContext
from autodefault.cursor import Cursor, Sink
from autodefault.diagnostics import Diagnostic, DiagnosticKind
from autodefault.errors import ShapeError
from autodefault.fields import rewrite_fields
from autodefault.streamers import stream_attrs, stream_ident, stream_vis
from autodefault.tokens import CALL_SITE, Delimiter, Span, Token, is_group, is_ident
from autodefault.variants import rewrite_variants

logger = logging.getLogger(__name__)


class ItemKind(Enum):
    STRUCT = "struct"
    ENUM = "enum"


@dataclass(frozen=True, slots=True)
class RewriteResult:
    """Rewritten declaration plus diagnostics in source order.

    ``tokens`` is empty when the item could not be rewritten at all.
    """

    tokens: tuple[Token, ...]
    diagnostics: tuple[Diagnostic, ...]
    fatal: bool = False
    injected: int = 0

    def output(self) -> tuple[Token, ...]:
        """The declaration followed by one ``compile_error!`` per diagnostic."""
        out = list(self.tokens)
        for diagnostic in self.diagnostics:
            out.extend(diagnostic.to_tokens())
        return tuple(out)


def rewrite(
    args: Iterable[Token],
    item: Iterable[Token],
    *,
    namespace: str = DEFAULT_NAMESPACE,
    marker: str = DEFAULT_MARKER,
    call_site: Span | None = None,
) -> RewriteResult:
    """Add default field values to the struct or enum in ``item``."""
    ctx = RewriteContext(namespace=namespace, marker=marker)

    first_arg = next(iter(args), None)
    if first_arg is not None:
        ctx.report(DiagnosticKind.USAGE, "no arguments expected", first_arg.span)

    try:
        tokens = _rewrite_item(Cursor(item), ctx, call_site or CALL_SITE)
    except ShapeError as exc:
        ctx.report(DiagnosticKind.SHAPE, exc.message, exc.span)
        logger.debug("could not rewrite item: %s", exc.message)
        return RewriteResult((), tuple(ctx.diagnostics), fatal=True)

    return RewriteResult(tokens, tuple(ctx.diagnostics), injected=ctx.injected)


def _rewrite_item(source: Cursor, ctx: RewriteContext, call_site: Span) -> tuple[Token, ...]:
    sink = Sink()

    stream_attrs(source, sink, ctx, allow_skip=False)
    stream_vis(source, sink)

    # pub(in crate) struct Foo
    #               ^^^^^^
    keyword = source.next()
    if is_ident(keyword, "struct"):
        kind = ItemKind.STRUCT
    elif is_ident(keyword, "enum"):
        kind = ItemKind.ENUM
    else:
        span = keyword.span if keyword is not None else call_site
        raise ShapeError("expected a `struct` or an `enum`", span)
    assert keyword is not None
    sink.push(keyword)

    # struct Foo
    #        ^^^
    name_span = stream_ident(source, sink)
    if name_span is None:
        raise ShapeError("expected an identifier", keyword.span)

    # struct Foo<Bar, Baz: Trait> where Baz: Quux { ... }
    #           ^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^^
    while True:
        tok = source.next()
        if tok is None:
            # `struct Foo;` and `struct Foo(u32);` end up here
            if kind is ItemKind.STRUCT:
                raise ShapeError("expected struct with named fields", name_span)
            raise ShapeError("expected enum body", name_span)
        if is_group(tok, Delimiter.BRACE):
            body = tok
            break
        sink.push(tok)

    if kind is ItemKind.STRUCT:
        sink.push(rewrite_fields(body, ctx))
    else:
        sink.push(rewrite_variants(body, ctx))

    # anything after the body is passed through
    while True:
        tok = source.next()
        if tok is None:
            break
        sink.push(tok)

    logger.debug(
        "rewrote %s at %d:%d, %d default value(s) added, %d diagnostic(s)",
        kind.value,
        keyword.span.start.line,
        keyword.span.start.column,
        ctx.injected,
        len(ctx.diagnostics),
    )
    return sink.tokens()

"""Variant rewriter: dispatches each enum variant by shape."""

from __future__ import annotations

from autodefault.context import RewriteContext
from autodefault.cursor import Cursor, Sink
from autodefault.fields import rewrite_fields
from autodefault.skip import report_misplaced
from autodefault.streamers import (
    stream_attrs,
    stream_discriminant_and_comma,
    stream_ident,
    stream_vis,
)
from autodefault.tokens import Delimiter, Token, is_group


def rewrite_variants(variants: Token, ctx: RewriteContext) -> Token:
    """Rewrite the brace group of an enum.

    Only variants with named fields are touched; unit and tuple variants are
    copied as they are.
    """
    source = Cursor(variants.children)
    sink = Sink()

    while True:
        skip = stream_attrs(source, sink, ctx, allow_skip=True)
        stream_vis(source, sink)
        if stream_ident(source, sink) is None:
            break

        tok = source.peek()
        if is_group(tok, Delimiter.BRACE):
            # Named { field: Type }
            named = source.next()
            assert named is not None
            sink.push(rewrite_fields(named, ctx, inherited_skip=skip is not None))
        else:
            # Tuple(u32) and Unit have no fields to leave without a default
            if skip is not None:
                report_misplaced(ctx, skip)
            if is_group(tok, Delimiter.PARENTHESIS):
                sink.push(source.next())

        stream_discriminant_and_comma(source, sink)

    return sink.into_group(variants)

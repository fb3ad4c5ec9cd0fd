"""Routines that copy small syntactic fragments from a cursor into a sink."""

from __future__ import annotations

from autodefault.context import RewriteContext
from autodefault.cursor import Cursor, Sink
from autodefault.skip import report_duplicate, report_misplaced, resolve_annotation
from autodefault.tokens import Delimiter, Span, is_group, is_ident, is_punct


def stream_attrs(
    source: Cursor, sink: Sink, ctx: RewriteContext, *, allow_skip: bool
) -> Span | None:
    """Stream ``#[...]`` annotations, removing the ones in the skip namespace.

    Returns the span of the first valid skip marker, or None.

    #[attr] #[attr] pub field: Type
    #[attr] #[attr] struct Foo
    """
    first: Span | None = None
    while is_punct(source.peek(), "#"):
        hash_tok = source.next()
        assert hash_tok is not None
        if not is_group(source.peek(), Delimiter.BRACKET):
            # `#!` or a stray `#`; not an outer annotation
            sink.push(hash_tok)
            continue
        attr = source.next()
        assert attr is not None

        annotation = resolve_annotation(attr, ctx)
        if annotation is None:
            sink.push(hash_tok)
            sink.push(attr)
            continue

        sink.drop(hash_tok)
        sink.drop(attr)
        if not annotation.valid:
            continue
        if first is None:
            first = annotation.span
            if not allow_skip:
                report_misplaced(ctx, annotation.span)
        else:
            report_duplicate(ctx, annotation.span)
    return first


def stream_vis(source: Cursor, sink: Sink) -> None:
    """Copy a visibility qualifier if present.

    pub(in crate) struct
    ^^^^^^^^^^^^^
    """
    if not is_ident(source.peek(), "pub"):
        return
    sink.push(source.next())
    if is_group(source.peek(), Delimiter.PARENTHESIS):
        sink.push(source.next())


def stream_ident(source: Cursor, sink: Sink) -> Span | None:
    """Copy the next token (an identifier) and return its span, or None at end of input."""
    tok = source.next()
    if tok is None:
        return None
    sink.push(tok)
    return tok.span


def stream_discriminant_and_comma(source: Cursor, sink: Sink) -> None:
    """Copy an enum variant's optional discriminant and its trailing comma.

    enum Example {
        Three,
             ^
        Two(u32) = 2,
                ^^^^^
    }
    """
    tok = source.next()
    if tok is None:
        # final variant without a comma
        return
    sink.push(tok)
    if is_punct(tok, ","):
        return
    # discriminant expression up to the next comma
    while True:
        tok = source.next()
        if tok is None:
            return
        sink.push(tok)
        if is_punct(tok, ","):
            return

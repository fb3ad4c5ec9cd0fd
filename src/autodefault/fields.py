"""Field-list rewriter: adds default field values to named fields."""

from __future__ import annotations

from autodefault.context import RewriteContext
from autodefault.cursor import Cursor, Sink
from autodefault.diagnostics import default_initializer
from autodefault.streamers import stream_attrs, stream_ident, stream_vis
from autodefault.tokens import Span, Token, TokenKind, is_punct


def rewrite_fields(fields: Token, ctx: RewriteContext, *, inherited_skip: bool = False) -> Token:
    """Rewrite the brace group of a struct or named enum variant.

    Every field without a default value gets ``= ::core::default::Default::default()``
    unless it, or the variant it belongs to, is marked with the skip annotation.
    """
    source = Cursor(fields.children)
    sink = Sink()

    while True:
        own_skip = stream_attrs(source, sink, ctx, allow_skip=True)
        stream_vis(source, sink)
        name_span = stream_ident(source, sink)
        if name_span is None:
            # no more fields, e.g. `struct Struct {}`
            break

        # field: Type
        #      ^
        sink.push(source.next())

        skip = inherited_skip or own_skip is not None
        if not _stream_field_rest(source, sink, ctx, name_span, skip):
            break

    return sink.into_group(fields)


def _stream_field_rest(
    source: Cursor, sink: Sink, ctx: RewriteContext, name_span: Span, skip: bool
) -> bool:
    """Stream a field's type and default value. Returns False at end of the list."""
    depth = 0
    prev: Token | None = None
    while True:
        tok = source.peek()

        # struct Foo {
        #     field: Type
        #                ^
        # }
        if tok is None:
            _inject(sink, ctx, name_span, skip)
            return False

        if depth == 0 and is_punct(tok, "="):
            return _stream_initializer(source, sink)

        # field: Type,
        #            ^
        if depth == 0 and is_punct(tok, ","):
            _inject(sink, ctx, name_span, skip)
            sink.push(source.next())
            return True

        # field: HashMap<K, V>
        #               ^    ^
        if is_punct(tok, "<"):
            depth += 1
        elif is_punct(tok, ">") and not is_punct(prev, "-") and depth > 0:
            depth -= 1

        prev = tok
        sink.push(source.next())


def _stream_initializer(source: Cursor, sink: Sink) -> bool:
    """Copy ``= expr`` up to and including the next top-level comma."""
    depth = 0
    prev: Token | None = None
    while True:
        tok = source.next()
        if tok is None:
            return False
        sink.push(tok)
        if depth == 0 and is_punct(tok, ","):
            return True
        # Vec::<A, B>::new()
        #      ^    ^
        # <HashMap<K, V> as Default>::default()
        # ^       ^    ^          ^
        if is_punct(tok, "<") and (depth > 0 or _opens_path(prev)):
            depth += 1
        elif is_punct(tok, ">") and depth > 0 and not is_punct(prev, "-"):
            depth -= 1
        prev = tok


def _opens_path(prev: Token | None) -> bool:
    """Whether a ``<`` following prev starts generic arguments or a qualified path.

    Turbofish ``::<`` and a ``<`` in operand position (after ``=``, ``,`` or an
    operator) open one. A ``<`` after an operand is a comparison or a shift.
    """
    if prev is None:
        return True
    return prev.kind == TokenKind.PUNCT and prev.text not in ("<", ">")


def _inject(sink: Sink, ctx: RewriteContext, name_span: Span, skip: bool) -> None:
    if skip:
        return
    sink.extend(default_initializer(name_span))
    ctx.injected += 1

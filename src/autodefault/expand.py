"""Source-file expander: applies ``#[auto_default]`` to every annotated item in a file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from autodefault.context import DEFAULT_MARKER, DEFAULT_NAMESPACE
from autodefault.cursor import Cursor, Sink
from autodefault.diagnostics import Diagnostic
from autodefault.lexer import tokenize
from autodefault.render import render
from autodefault.rewrite import rewrite
from autodefault.tokens import Delimiter, Token, TokenKind, is_group, is_ident, is_punct

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExpandResult:
    """Rewritten source text and every diagnostic, in source order."""

    text: str
    diagnostics: tuple[Diagnostic, ...]
    items: int
    injected: int


@dataclass(slots=True)
class _Expander:
    namespace: str
    marker: str
    emit_errors: bool
    diagnostics: list[Diagnostic] = field(default_factory=list)
    items: int = 0
    injected: int = 0

    def expand_stream(self, tokens: tuple[Token, ...] | list[Token]) -> tuple[Token, ...]:
        source = Cursor(tokens)
        sink = Sink()
        while True:
            tok = source.next()
            if tok is None:
                break

            if is_punct(tok, "#") and self._is_invocation(source.peek()):
                attr = source.next()
                assert attr is not None
                item = _collect_item(source)
                self._expand_item(tok, attr, item, sink)
            elif is_group(tok, Delimiter.BRACE):
                # mod foo { ... }, fn bodies, impl blocks
                sink.push(self._expand_group(tok))
            else:
                sink.push(tok)
        return sink.tokens()

    def _expand_group(self, group: Token) -> Token:
        return replace(group, children=self.expand_stream(group.children))

    def _is_invocation(self, tok: Token | None) -> bool:
        """``[auto_default]`` or ``[auto_default(...)]``."""
        if not is_group(tok, Delimiter.BRACKET):
            return False
        assert tok is not None
        children = tok.children
        if not children or not is_ident(children[0], self.namespace):
            return False
        if len(children) == 1:
            return True
        return len(children) == 2 and is_group(children[1], Delimiter.PARENTHESIS)

    def _expand_item(
        self, hash_tok: Token, attr: Token, item: list[Token], sink: Sink
    ) -> None:
        args = attr.children[1].children if len(attr.children) == 2 else ()
        result = rewrite(
            args, item, namespace=self.namespace, marker=self.marker, call_site=attr.span
        )
        self.diagnostics.extend(result.diagnostics)
        self.injected += result.injected

        if result.fatal and not self.emit_errors:
            logger.debug("leaving item at line %d unchanged", attr.span.start.line)
            sink.push(hash_tok)
            sink.push(attr)
            sink.extend(item)
            return

        if not result.fatal:
            self.items += 1
        sink.drop(hash_tok)
        sink.drop(attr)
        sink.extend(result.output() if self.emit_errors else result.tokens)


def _collect_item(source: Cursor) -> list[Token]:
    """Take tokens up to and including the item's body or terminating ``;``."""
    item: list[Token] = []
    while True:
        tok = source.peek()
        if tok is None or tok.kind == TokenKind.EOF:
            return item
        source.next()
        item.append(tok)
        if is_group(tok, Delimiter.BRACE) or is_punct(tok, ";"):
            return item


def expand(
    source: str,
    filename: str = "input.rs",
    *,
    namespace: str = DEFAULT_NAMESPACE,
    marker: str = DEFAULT_MARKER,
    emit_errors: bool = False,
) -> ExpandResult:
    """Rewrite every item annotated with ``#[namespace]`` in source."""
    tokens = tokenize(source, filename)
    expander = _Expander(namespace, marker, emit_errors)
    text = render(expander.expand_stream(tokens))
    logger.debug(
        "%s: %d item(s) rewritten, %d default value(s) added",
        filename,
        expander.items,
        expander.injected,
    )
    return ExpandResult(text, tuple(expander.diagnostics), expander.items, expander.injected)

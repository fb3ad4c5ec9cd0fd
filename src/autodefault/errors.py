"""Error types with formatted source context."""

from __future__ import annotations

from autodefault.tokens import Position, Span


def format_snippet(message: str, span: Span, source: str, filename: str = "input.rs") -> str:
    """Render an error message with the offending source line and carets."""
    lines = source.splitlines(keepends=True)
    line_idx = span.start.line - 1
    col = span.start.column

    # Build the source line (strip trailing newline for display)
    if 0 <= line_idx < len(lines):
        source_line = lines[line_idx].rstrip("\n").rstrip("\r")
    else:
        source_line = ""

    # Underline the full span when on one line, otherwise to end of line
    if span.end.line == span.start.line:
        underline_len = max(1, span.end.column - col)
    else:
        underline_len = max(1, len(source_line) - col + 1)

    pad = " " * (col - 1)
    carets = "^" * underline_len

    line_num = str(span.start.line)
    gutter_width = len(line_num) + 1

    blank_gutter = " " * gutter_width + "|"
    line_gutter = f"{line_num:>{gutter_width - 1}} |"

    return (
        f"error: {message}\n"
        f"{' ' * gutter_width}--> {filename}:{span.start.line}:{col}\n"
        f"{blank_gutter}\n"
        f"{line_gutter} {source_line}\n"
        f"{blank_gutter} {pad}{carets}"
    )


class LexError(Exception):
    """Raised on the first lexing error, with position and source context."""

    def __init__(self, message: str, position: Position, source: str) -> None:
        self.message = message
        self.position = position
        self.source = source
        super().__init__(self.format())

    def format(self, filename: str = "input.rs") -> str:
        span = Span(self.position, self.position)
        return format_snippet(self.message, span, self.source, filename)


class ShapeError(Exception):
    """Raised when an item is not a struct or enum the rewriter can handle.

    The rewriter catches this at its entry point and turns it into a fatal
    diagnostic; it never escapes ``rewrite()``.
    """

    def __init__(self, message: str, span: Span) -> None:
        self.message = message
        self.span = span
        super().__init__(message)

    def format(self, source: str, filename: str = "input.rs") -> str:
        return format_snippet(self.message, self.span, source, filename)

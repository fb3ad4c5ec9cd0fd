"""Default field values for Rust structs and enums."""

from __future__ import annotations

__version__ = "0.1.0"


def rewrite_source(source: str, filename: str = "input.rs") -> str:
    """Rewrite every ``#[auto_default]`` item in source and return the new text."""
    from autodefault.expand import expand

    return expand(source, filename).text

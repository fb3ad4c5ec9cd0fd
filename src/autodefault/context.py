"""Per-call state shared by the rewriters."""

from __future__ import annotations

from dataclasses import dataclass, field

from autodefault.diagnostics import Diagnostic, DiagnosticKind
from autodefault.tokens import Span

DEFAULT_NAMESPACE = "auto_default"
DEFAULT_MARKER = "skip"


@dataclass(slots=True)
class RewriteContext:
    """Owned by a single rewrite; diagnostics are kept in detection order."""

    namespace: str = DEFAULT_NAMESPACE
    marker: str = DEFAULT_MARKER
    diagnostics: list[Diagnostic] = field(default_factory=list)
    injected: int = 0

    @property
    def skip_annotation(self) -> str:
        return f"#[{self.namespace}({self.marker})]"

    def report(self, kind: DiagnosticKind, message: str, span: Span) -> None:
        self.diagnostics.append(Diagnostic(kind, message, span))

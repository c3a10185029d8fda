from __future__ import annotations

from typing import Iterable

from codegenfix.core.errors import UnknownDiagnosticError
from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Skip


class RuleRegistry:
    """Dispatches diagnostics to the one rule registered for their kind.

    Every known kind must be covered; ``UNKNOWN`` is fatal by construction.
    """

    def __init__(self, rules: Iterable[PatchRule]):
        self._by_kind: dict[DiagnosticKind, PatchRule] = {}
        for r in rules:
            if r.kind() in self._by_kind:
                raise ValueError(f"Duplicate rule for {r.kind().value}")
            self._by_kind[r.kind()] = r

        known = {k for k in DiagnosticKind if k is not DiagnosticKind.UNKNOWN}
        if DiagnosticKind.UNKNOWN in self._by_kind:
            raise ValueError("Unknown diagnostics cannot have a rule")
        missing = known - set(self._by_kind)
        if missing:
            raise ValueError(f"No rule for: {', '.join(sorted(k.value for k in missing))}")

    def list(self) -> list[str]:
        return sorted(k.value for k in self._by_kind)

    def get(self, kind: DiagnosticKind) -> PatchRule:
        return self._by_kind[kind]

    def dispatch(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        kind = diag.kind
        if kind is DiagnosticKind.UNKNOWN:
            raise UnknownDiagnosticError(ctx.file, diag)
        if diag.line in ctx.fixed_lines:
            return PatchOutcome([Skip("line already patched in this pass")])
        return self._by_kind[kind].apply(diag, line, ctx)

"""Lossy ``operator=`` translation.

Some assignments come out of the generator as ``a.operator=(b)``. The
compiler reports CS1525 on the artifact plus follow-on token errors
(CS1001, CS1002, CS1513) around it; only CS1525 carries the rewrite.
"""

from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Replace, Skip

ARTIFACT = ".operator="


class OperatorArtifactRule(PatchRule):
    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.INVALID_EXPRESSION_TERM

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if ARTIFACT not in line:
            raise self.contradiction(diag, ctx, f"no '{ARTIFACT}' artifact")
        return PatchOutcome([Replace(diag.line, line.replace(ARTIFACT, "="))])


class OperatorArtifactCompanionRule(PatchRule):
    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.UNEXPECTED_TOKEN

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        related = [
            e for e in ctx.errors
            if e.kind == DiagnosticKind.INVALID_EXPRESSION_TERM and abs(e.line - diag.line) <= 1
        ]
        if not related:
            raise self.contradiction(diag, ctx, "no invalid expression term reported on a related line")
        return PatchOutcome([Skip(f"follow-on of {related[0].code} on L{related[0].line}")])

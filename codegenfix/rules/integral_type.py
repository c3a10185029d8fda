import re

from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Replace

_NUINT_RE = re.compile(r"\bnuint\b")


class NativeIntegerRule(PatchRule):
    """CS1008: ClangSharp emits ``nuint`` where an enum base must be fixed-width."""

    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.INTEGRAL_TYPE_EXPECTED

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if not _NUINT_RE.search(line):
            raise self.contradiction(diag, ctx, "no 'nuint' keyword")
        return PatchOutcome([Replace(diag.line, _NUINT_RE.sub("uint", line))])

import re

from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Replace

REALLOC = "NativeMemory.Realloc"
_REALLOC_RE = re.compile(r"(?<![\w.])realloc(?=\s*\()")


class ReallocRule(PatchRule):
    """CS0103: the C ``realloc`` call is kept verbatim by the generator."""

    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.UNDEFINED_NAME

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if "'realloc'" not in diag.message or not _REALLOC_RE.search(line):
            raise self.contradiction(diag, ctx, "no bare 'realloc' call")
        return PatchOutcome([Replace(diag.line, _REALLOC_RE.sub(REALLOC, line))])

from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Replace

VTBL_ACCESS = "(self)->vtbl"
ADDRESS_CAST = "(&("


class VtableCastRule(PatchRule):
    """CS0242: the struct cast is applied to ``self->vtbl`` instead of ``self``.

    ``((T*)(self)->vtbl)->f(&(T*)(self)->container)`` becomes
    ``((T*)self)->vtbl->f(&((T*)self)->container)``.
    """

    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.VOID_POINTER_OPERATION

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if VTBL_ACCESS not in line or ADDRESS_CAST not in line:
            raise self.contradiction(diag, ctx, "no vtable dereference through a void pointer cast")

        start = line.index(VTBL_ACCESS) + len("(self)->")
        close = line.find(")", start)
        if close < 0:
            raise self.contradiction(diag, ctx, "vtable access is not parenthesized")

        fixed = line[:close] + line[close + 1:]
        fixed = fixed.replace("(self)->", "self)->")
        fixed = fixed.replace(ADDRESS_CAST, "(&((")
        return PatchOutcome([Replace(diag.line, fixed)])

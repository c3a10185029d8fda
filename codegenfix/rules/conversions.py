"""Boolean / integer width mismatches.

ClangSharp lowers C ``bool`` to ``byte`` in native signatures and keeps
``size_t`` as ``nuint``; the managed wrappers then disagree with the
signatures in both directions.
"""

from __future__ import annotations

import re

from codegenfix.core.util import replace_last
from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import PassContext, PatchOutcome, PatchRule, Replace

_TARGET_TYPE_RE = re.compile(r"\bto '([^']+)'")
_SIZEOF_RE = re.compile(r"(?<!\(uint\))\bsizeof\(")
# final argument of a call: an identifier or member access path
_SIZE_ARG_RE = re.compile(r"(?<=[,(])(\s*)([A-Za-z_]\w*(?:(?:->|\.)[A-Za-z_]\w*)*)\);(\s*)$")


class BoolReturnRule(PatchRule):
    """CS0029: a native ``byte`` result is assigned to ``bool __ret``."""

    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.IMPLICIT_CONVERSION

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if "bool __ret" not in line or ");" not in line:
            raise self.contradiction(diag, ctx, "not a 'bool __ret' call assignment")
        return PatchOutcome([Replace(diag.line, replace_last(line, ");", ") != 0;"))])


class ArgumentCastRule(PatchRule):
    """CS1503: an argument needs an explicit cast to the native parameter type."""

    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.ARGUMENT_CONVERSION

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        m = _TARGET_TYPE_RE.search(diag.message)
        target = m.group(1) if m else ""

        if target == "uint":
            if _SIZEOF_RE.search(line):
                return PatchOutcome([Replace(diag.line, _SIZEOF_RE.sub("(uint)sizeof(", line))])
            if "CopyBlock" in line:
                size = _SIZE_ARG_RE.search(line)
                if size:
                    fixed = line[:size.start()] + f"{size.group(1)}(uint){size.group(2)});{size.group(3)}"
                    return PatchOutcome([Replace(diag.line, fixed)])
            raise self.contradiction(diag, ctx, "no sizeof() or CopyBlock size argument to cast")

        if target == "byte":
            if ");" in line:
                return PatchOutcome([Replace(diag.line, replace_last(line, ");", " ? (byte)0x1 : (byte)0x0);"))])
            raise self.contradiction(diag, ctx, "no call argument to narrow")

        raise self.contradiction(diag, ctx, f"unexpected conversion target '{target}'")

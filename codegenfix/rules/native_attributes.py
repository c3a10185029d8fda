"""CS0246: the generator's NativeTypeName marker attribute is undefined.

ClangSharp annotates declarations with ``[NativeTypeName(...)]`` and
``[NativeInheritance(...)]`` but does not emit the attribute classes, so
their definitions (and the usings they need) are spliced into the file.
"""

from __future__ import annotations

from codegenfix.domain.models import Diagnostic, DiagnosticKind
from .base import InsertBlock, PassContext, PatchOutcome, PatchRule

MARKERS = ("NativeTypeNameAttribute", "NativeTypeName")
REQUIRED_USINGS = ("using System;", "using System.Diagnostics;")


class NativeTypeNameRule(PatchRule):
    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.MISSING_TYPE

    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome:
        if not any(m in diag.message for m in MARKERS):
            raise self.contradiction(diag, ctx, "missing type is not the NativeTypeName marker")
        if ctx.tree.find("class", "NativeTypeNameAttribute") is not None:
            raise self.contradiction(diag, ctx, "NativeTypeNameAttribute is already defined")

        namespaces = ctx.tree.of_kind("namespace")
        if not namespaces:
            raise self.contradiction(diag, ctx, "no namespace to host the attribute definitions")

        usings = ctx.tree.of_kind("using")
        missing = [
            u for u in REQUIRED_USINGS
            if not any(existing.name.startswith(u) for existing in usings)
        ]
        using_at = max(u.end_line for u in usings) + 1 if usings else 0

        ns = namespaces[0]
        body_at = (ns.body_start_line if ns.body_start_line is not None else ns.start_line) + 1
        if using_at <= body_at:
            body_at += len(missing)

        block: list[str] = []
        for definition in ctx.attribute_definitions:
            block.extend(definition)
            block.append("")

        actions = []
        if missing:
            actions.append(InsertBlock(using_at, missing))
        actions.append(InsertBlock(body_at, block))
        return PatchOutcome(actions, restart=True)

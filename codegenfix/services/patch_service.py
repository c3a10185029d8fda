"""Patch service: compile-diagnose-patch loop (phase A).

Flow:
  1. Compile the current buffer; fresh diagnostics + fresh tree
  2. No error diagnostics left -> fixed point, return the compile result
  3. Walk the errors in reported order, dispatching each to its rule:
     a. Replace actions rewrite one line and mark it fixed for this pass
     b. Skip actions leave the buffer alone
     c. A structural insertion ends the pass at once (positions are stale)
     d. Unknown codes and contradictions raise and abort the run
  4. Recompile and repeat

Diagnostics are never read against a tree older than the last mutation
that could move them: line-preserving replacements keep positions, and
any insertion forces a recompile.
"""

from __future__ import annotations

import logging

from codegenfix.core.errors import ContradictionError, ConvergenceError
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import CompileResult, Diagnostic, RunReport
from codegenfix.oracle.base import CompilerOracle
from codegenfix.rules.base import InsertBlock, PassContext, PatchOutcome, Replace, Skip
from codegenfix.rules.registry import RuleRegistry

logger = logging.getLogger(__name__)


class PatchService:
    def __init__(self, oracle: CompilerOracle, registry: RuleRegistry):
        self.oracle = oracle
        self.registry = registry

    def run(
        self,
        buffer: SourceBuffer,
        file: str,
        attribute_definitions: list[list[str]],
        report: RunReport | None = None,
    ) -> CompileResult:
        report = report or RunReport(file=file)

        while True:
            report.passes += 1
            pass_no = report.passes

            result = self.oracle.compile(buffer.text())
            errors = result.errors
            if not errors:
                logger.info("Pass %d: no errors left", pass_no, extra={"pass_no": pass_no})
                return result

            logger.info("Pass %d: %d errors", pass_no, len(errors), extra={"pass_no": pass_no})

            ctx = PassContext(
                file=file,
                buffer=buffer,
                tree=result.tree,
                errors=errors,
                attribute_definitions=attribute_definitions,
            )
            before = list(buffer.lines)

            for diag in errors:
                if not 0 <= diag.line < len(buffer):
                    raise ContradictionError(file, diag, "line is outside the source")

                outcome = self.registry.dispatch(diag, buffer[diag.line], ctx)
                self._apply(outcome, diag, ctx, report, pass_no)

                if outcome.restart:
                    report.restarts += 1
                    logger.info(
                        "Pass %d: structural insertion for %s, recompiling",
                        pass_no,
                        diag.code,
                        extra={"pass_no": pass_no, "diagnostic": str(diag)},
                    )
                    break

            if buffer.lines == before:
                raise ConvergenceError(
                    f"{file}: pass {pass_no} changed nothing while {len(errors)} errors remain "
                    f"(first: {errors[0]})"
                )

    @staticmethod
    def _apply(
        outcome: PatchOutcome,
        diag: Diagnostic,
        ctx: PassContext,
        report: RunReport,
        pass_no: int,
    ) -> None:
        changed = False
        for action in outcome.actions:
            if isinstance(action, Replace):
                ctx.buffer[action.line] = action.text
                ctx.fixed_lines.add(action.line)
                changed = True
            elif isinstance(action, InsertBlock):
                ctx.buffer.insert(action.at, action.lines)
                changed = True
            elif isinstance(action, Skip):
                logger.debug(
                    "Skipped %s: %s",
                    diag,
                    action.reason,
                    extra={"pass_no": pass_no},
                )

        if changed:
            report.patches[diag.code] += 1
            logger.info("Patched %s", diag, extra={"pass_no": pass_no, "diagnostic": diag.code})
        else:
            report.skipped += 1

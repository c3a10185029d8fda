"""Fatal error taxonomy.

Every error here aborts the run before the target file is written.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codegenfix.domain.models import Diagnostic


class CodeGenFixError(Exception):
    """Base class for every fatal pipeline error."""


class SetupError(CodeGenFixError):
    """Missing input file, template resource or toolchain."""


class OracleError(CodeGenFixError):
    """The compiler oracle failed without producing diagnostics."""


class HeaderParseError(CodeGenFixError):
    """The native header could not be parsed."""


class ConvergenceError(CodeGenFixError):
    """A patch pass made no progress while errors remain."""


class DiagnosticError(CodeGenFixError):
    """A diagnostic the pipeline refuses to patch."""

    reason = "unhandled diagnostic"

    def __init__(self, file: str, diagnostic: Diagnostic, detail: str | None = None):
        self.file = file
        self.diagnostic = diagnostic
        self.detail = detail
        super().__init__(self._format())

    def _format(self) -> str:
        d = self.diagnostic
        msg = f"{self.file}: L{d.line}: ({d.code}) {d.message}: {self.reason}"
        if self.detail:
            msg += f" ({self.detail})"
        return msg


class UnknownDiagnosticError(DiagnosticError):
    reason = "code contained an unknown error"


class ContradictionError(DiagnosticError):
    reason = "expected signature not found on line"

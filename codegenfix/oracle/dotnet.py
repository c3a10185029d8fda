from __future__ import annotations

import logging
import re
import shutil
import tempfile
from pathlib import Path

from codegenfix.core.config import settings
from codegenfix.core.errors import OracleError, SetupError
from codegenfix.core.util import run_cmd
from codegenfix.domain.models import CompileResult, Diagnostic
from .base import CompilerOracle
from .syntax import parse_source

logger = logging.getLogger(__name__)

SOURCE_NAME = "Interop.cs"
PROJECT_NAME = "Interop.csproj"

_PROJECT_TEMPLATE = """<Project Sdk="Microsoft.NET.Sdk">
  <PropertyGroup>
    <TargetFramework>{framework}</TargetFramework>
    <OutputType>Library</OutputType>
    <AllowUnsafeBlocks>true</AllowUnsafeBlocks>
    <LangVersion>latest</LangVersion>
    <Nullable>disable</Nullable>
    <ImplicitUsings>disable</ImplicitUsings>
    <Optimize>true</Optimize>
    <GenerateAssemblyInfo>false</GenerateAssemblyInfo>
  </PropertyGroup>
</Project>
"""

# Interop.cs(12,34): error CS1008: Type byte, ... expected [/tmp/x/Interop.csproj]
_DIAG_RE = re.compile(
    r"^(?P<file>.+?)\((?P<line>\d+),(?P<col>\d+)(?:,\d+,\d+)?\)\s*:\s*"
    r"(?P<sev>error|warning|info)\s+(?P<code>[A-Z]+\d+)\s*:\s*"
    r"(?P<msg>.*?)(?:\s+\[[^\]]*\])?\s*$"
)


def parse_build_output(output: str, source_name: str = SOURCE_NAME) -> list[Diagnostic]:
    """Extract diagnostics reported against *source_name* from MSBuild output.

    MSBuild positions are 1-based; returned diagnostics are 0-based.
    Duplicates are dropped, first report order is kept.
    """
    seen: set[tuple] = set()
    out: list[Diagnostic] = []
    for raw in output.splitlines():
        m = _DIAG_RE.match(raw.strip())
        if not m:
            continue
        if Path(m.group("file").replace("\\", "/")).name != source_name:
            continue
        diag = Diagnostic(
            code=m.group("code"),
            severity=m.group("sev"),
            message=m.group("msg"),
            line=int(m.group("line")) - 1,
            column=int(m.group("col")) - 1,
        )
        key = (diag.code, diag.severity, diag.line, diag.column, diag.message)
        if key in seen:
            continue
        seen.add(key)
        out.append(diag)
    return out


class DotnetOracle(CompilerOracle):
    """Compiles the buffer as a one-file class library with ``dotnet build``."""

    def __init__(
        self,
        dotnet: str | None = None,
        framework: str | None = None,
        timeout_sec: int | None = None,
    ):
        self.dotnet = dotnet or settings.DOTNET_EXE
        self.framework = framework or settings.DOTNET_TARGET_FRAMEWORK
        self.timeout_sec = timeout_sec or settings.COMPILE_TIMEOUT_SEC
        self._workdir: Path | None = None

    def name(self) -> str:
        return "dotnet"

    def __enter__(self) -> DotnetOracle:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        if self._workdir is not None:
            shutil.rmtree(self._workdir, ignore_errors=True)
            self._workdir = None

    def _project_dir(self) -> Path:
        if self._workdir is None:
            if shutil.which(self.dotnet) is None:
                raise SetupError(f"Compiler not found: '{self.dotnet}' is not on PATH")
            self._workdir = Path(tempfile.mkdtemp(prefix="codegenfix-"))
            (self._workdir / PROJECT_NAME).write_text(
                _PROJECT_TEMPLATE.format(framework=self.framework),
                encoding="utf-8",
            )
        return self._workdir

    def compile(self, source_text: str) -> CompileResult:
        workdir = self._project_dir()
        (workdir / SOURCE_NAME).write_text(source_text, encoding="utf-8")

        r = run_cmd(
            [self.dotnet, "build", PROJECT_NAME, "-nologo", "-consoleLoggerParameters:NoSummary"],
            cwd=workdir,
            timeout_sec=self.timeout_sec,
        )
        diagnostics = parse_build_output(r.stdout + "\n" + r.stderr)
        errors = [d for d in diagnostics if d.is_error]

        if r.exit_code != 0 and not errors:
            tail = (r.stderr or r.stdout)[-2000:]
            raise OracleError(f"dotnet build failed (exit_code={r.exit_code}) without diagnostics:\n{tail}")

        logger.debug("Compiled %d lines: %d diagnostics", source_text.count("\n") + 1, len(diagnostics))
        return CompileResult(
            tree=parse_source(source_text),
            diagnostics=diagnostics,
            success=r.exit_code == 0 and not errors,
        )

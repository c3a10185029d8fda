import pytest

from conftest import ScriptedOracle, generator_quirks

from codegenfix.core.containers import build_rule_registry
from codegenfix.core.errors import ContradictionError, ConvergenceError, UnknownDiagnosticError
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import Diagnostic, DiagnosticKind, RunReport
from codegenfix.rules.base import PatchOutcome, PatchRule, Skip
from codegenfix.rules.registry import RuleRegistry
from codegenfix.services.patch_service import PatchService
from codegenfix.services.resource_service import ResourceService

CLEAN_SOURCE = """\
using System;

namespace memflowNET.Interop
{
    public enum Endianess : byte
    {
        Endianess_LittleEndian,
    }
}
"""


@pytest.fixture
def attribute_definitions():
    return ResourceService().load().attribute_definitions


def _run(oracle, text, attribute_definitions, registry=None):
    buffer = SourceBuffer.from_text(text)
    report = RunReport(file="Interop.cs")
    result = PatchService(oracle, registry or build_rule_registry()).run(
        buffer, "Interop.cs", attribute_definitions, report
    )
    return buffer, report, result


def test_clean_source_is_a_fixed_point(oracle, attribute_definitions):
    buffer, report, result = _run(oracle, CLEAN_SOURCE, attribute_definitions)

    assert oracle.calls == 1
    assert report.passes == 1
    assert not report.patches
    assert buffer.file_text() == CLEAN_SOURCE
    assert result.errors == []


def test_draft_converges_to_clean_compile(oracle, draft_source, attribute_definitions):
    buffer, report, result = _run(oracle, draft_source, attribute_definitions)

    assert generator_quirks(buffer.text()) == []
    assert result.errors == []
    # insertion pass, three rewriting passes worth of work, final clean compile
    assert report.passes == 4
    assert oracle.calls == 4
    assert report.restarts == 1
    assert dict(report.patches) == {
        "CS0246": 1,
        "CS1008": 1,
        "CS0242": 1,
        "CS0103": 1,
        "CS0029": 1,
    }
    # second CS0242 and the first CS0029 hit a line patched earlier in the pass
    assert report.skipped == 2

    lines = buffer.lines
    assert lines[:4] == [
        "using System.Runtime.CompilerServices;",
        "using System.Runtime.InteropServices;",
        "using System;",
        "using System.Diagnostics;",
    ]
    assert lines[6] == "{"
    assert lines[7] == attribute_definitions[0][0]
    assert "    public enum Level : uint" in lines
    assert (
        "            bool __ret = ((Keyboard*)self)->vtbl->is_down(&((Keyboard*)self)->container, vk) != 0;"
        in lines
    )
    assert "            return NativeMemory.Realloc(buf, size);" in lines


def test_structural_insertion_ends_the_pass(oracle, draft_source, attribute_definitions):
    _run(oracle, draft_source, attribute_definitions)

    after_insertion = oracle.sources[1]
    assert "class NativeTypeNameAttribute" in after_insertion
    # nothing else was touched before the recompile
    assert "enum Level : nuint" in after_insertion
    assert "realloc(buf, size)" in after_insertion


def test_repaired_output_is_idempotent(oracle, draft_source, attribute_definitions):
    buffer, _, _ = _run(oracle, draft_source, attribute_definitions)
    repaired = buffer.file_text()

    second = ScriptedOracle()
    buffer2, report2, _ = _run(second, repaired, attribute_definitions)

    assert second.calls == 1
    assert not report2.patches
    assert buffer2.file_text() == repaired


def test_unknown_code_aborts_without_patching(attribute_definitions):
    def diagnose(text):
        return [
            Diagnostic("CS1008", "error", "Type expected", 4),
            Diagnostic("CS0117", "error", "'Methods' does not contain a definition for 'x'", 5),
        ]

    source = CLEAN_SOURCE.replace(": byte", ": nuint")
    oracle = ScriptedOracle(diagnose=diagnose)
    buffer = SourceBuffer.from_text(source)

    with pytest.raises(UnknownDiagnosticError):
        PatchService(oracle, build_rule_registry()).run(buffer, "Interop.cs", attribute_definitions)

    assert oracle.calls == 1


def test_diagnostic_past_end_of_source_is_a_contradiction(attribute_definitions):
    oracle = ScriptedOracle(diagnose=lambda text: [Diagnostic("CS1008", "error", "Type expected", 400)])
    with pytest.raises(ContradictionError, match="outside the source"):
        _run(oracle, CLEAN_SOURCE, attribute_definitions)


class _SkipAll(PatchRule):
    def kind(self):
        return DiagnosticKind.UNDEFINED_NAME

    def apply(self, diag, line, ctx):
        return PatchOutcome([Skip("never fixed")])


def test_pass_without_progress_raises_convergence_error(attribute_definitions):
    defaults = build_rule_registry()
    registry = RuleRegistry(
        [
            defaults.get(k)
            for k in DiagnosticKind
            if k not in (DiagnosticKind.UNKNOWN, DiagnosticKind.UNDEFINED_NAME)
        ]
        + [_SkipAll()]
    )
    oracle = ScriptedOracle(
        diagnose=lambda text: [Diagnostic("CS0103", "error", "The name 'free' does not exist", 1)]
    )

    with pytest.raises(ConvergenceError, match="changed nothing"):
        _run(oracle, CLEAN_SOURCE, attribute_definitions, registry)
    assert oracle.calls == 1


def test_warnings_do_not_keep_the_loop_running(attribute_definitions):
    oracle = ScriptedOracle(
        diagnose=lambda text: [Diagnostic("CS0168", "warning", "The variable 'e' is declared but never used", 1)]
    )
    _, report, result = _run(oracle, CLEAN_SOURCE, attribute_definitions)

    assert report.passes == 1
    assert len(result.diagnostics) == 1
    assert result.errors == []

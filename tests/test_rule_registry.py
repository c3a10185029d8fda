import pytest

from codegenfix.core.containers import build_rule_registry
from codegenfix.core.errors import UnknownDiagnosticError
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import Diagnostic, DiagnosticKind, ParsedTree
from codegenfix.rules.base import PassContext, Skip
from codegenfix.rules.integral_type import NativeIntegerRule
from codegenfix.rules.registry import RuleRegistry


def _ctx(lines):
    return PassContext(
        file="Interop.cs",
        buffer=SourceBuffer(lines),
        tree=ParsedTree(),
        errors=[],
        attribute_definitions=[],
    )


def test_default_registry_covers_every_known_kind():
    r = build_rule_registry()
    expected = sorted(k.value for k in DiagnosticKind if k is not DiagnosticKind.UNKNOWN)
    assert r.list() == expected


@pytest.mark.parametrize(
    "code,kind",
    [
        ("CS0246", DiagnosticKind.MISSING_TYPE),
        ("CS1008", DiagnosticKind.INTEGRAL_TYPE_EXPECTED),
        ("CS1525", DiagnosticKind.INVALID_EXPRESSION_TERM),
        ("CS1001", DiagnosticKind.UNEXPECTED_TOKEN),
        ("CS1002", DiagnosticKind.UNEXPECTED_TOKEN),
        ("CS1513", DiagnosticKind.UNEXPECTED_TOKEN),
        ("CS0242", DiagnosticKind.VOID_POINTER_OPERATION),
        ("CS0029", DiagnosticKind.IMPLICIT_CONVERSION),
        ("CS1503", DiagnosticKind.ARGUMENT_CONVERSION),
        ("CS0103", DiagnosticKind.UNDEFINED_NAME),
        ("CS0117", DiagnosticKind.UNKNOWN),
    ],
)
def test_codes_map_to_closed_kind_set(code, kind):
    assert DiagnosticKind.from_code(code) is kind


def test_registry_rejects_incomplete_rule_set():
    with pytest.raises(ValueError, match="No rule for"):
        RuleRegistry([NativeIntegerRule()])


def test_registry_rejects_duplicate_rules():
    rules = [NativeIntegerRule(), NativeIntegerRule()]
    with pytest.raises(ValueError, match="Duplicate"):
        RuleRegistry(rules)


def test_unknown_code_is_fatal():
    r = build_rule_registry()
    diag = Diagnostic("CS0117", "error", "'Foo' does not contain a definition for 'Bar'", 0)
    with pytest.raises(UnknownDiagnosticError) as exc:
        r.dispatch(diag, "Foo.Bar();", _ctx(["Foo.Bar();"]))
    assert "(CS0117)" in str(exc.value)
    assert "unknown error" in str(exc.value)


def test_unknown_code_is_fatal_even_on_fixed_line():
    r = build_rule_registry()
    ctx = _ctx(["x"])
    ctx.fixed_lines.add(0)
    with pytest.raises(UnknownDiagnosticError):
        r.dispatch(Diagnostic("CS9999", "error", "?", 0), "x", ctx)


def test_diagnostic_on_fixed_line_is_skipped():
    r = build_rule_registry()
    ctx = _ctx(["uint a; // already patched"])
    ctx.fixed_lines.add(0)
    outcome = r.dispatch(Diagnostic("CS1008", "error", "Type expected", 0), ctx.buffer[0], ctx)
    assert isinstance(outcome.actions[0], Skip)

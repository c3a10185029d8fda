from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

Severity = Literal["error", "warning", "info", "hidden"]
DeclKind = Literal["using", "namespace", "class", "struct", "enum", "interface", "member"]
NativeKind = Literal["enum", "struct", "function"]


class DiagnosticKind(str, Enum):
    """Closed set of diagnostic classes the patch rules understand."""

    MISSING_TYPE = "missing_type"
    INTEGRAL_TYPE_EXPECTED = "integral_type_expected"
    INVALID_EXPRESSION_TERM = "invalid_expression_term"
    UNEXPECTED_TOKEN = "unexpected_token"
    VOID_POINTER_OPERATION = "void_pointer_operation"
    IMPLICIT_CONVERSION = "implicit_conversion"
    ARGUMENT_CONVERSION = "argument_conversion"
    UNDEFINED_NAME = "undefined_name"
    UNKNOWN = "unknown"

    @classmethod
    def from_code(cls, code: str) -> DiagnosticKind:
        return _KIND_BY_CODE.get(code, cls.UNKNOWN)


_KIND_BY_CODE: dict[str, DiagnosticKind] = {
    # The type or namespace name could not be found
    "CS0246": DiagnosticKind.MISSING_TYPE,
    # Type byte, sbyte, short, ushort, int, uint, long, or ulong expected
    "CS1008": DiagnosticKind.INTEGRAL_TYPE_EXPECTED,
    # Invalid expression term
    "CS1525": DiagnosticKind.INVALID_EXPRESSION_TERM,
    # Identifier / ';' / '}' expected
    "CS1001": DiagnosticKind.UNEXPECTED_TOKEN,
    "CS1002": DiagnosticKind.UNEXPECTED_TOKEN,
    "CS1513": DiagnosticKind.UNEXPECTED_TOKEN,
    # Operation is undefined on void pointers
    "CS0242": DiagnosticKind.VOID_POINTER_OPERATION,
    # Cannot implicitly convert type
    "CS0029": DiagnosticKind.IMPLICIT_CONVERSION,
    # Argument cannot convert from type to type
    "CS1503": DiagnosticKind.ARGUMENT_CONVERSION,
    # The name does not exist in the current context
    "CS0103": DiagnosticKind.UNDEFINED_NAME,
}


@dataclass(frozen=True)
class Diagnostic:
    code: str
    severity: Severity
    message: str
    line: int
    column: int = 0

    @property
    def kind(self) -> DiagnosticKind:
        return DiagnosticKind.from_code(self.code)

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def __str__(self) -> str:
        return f"L{self.line}: ({self.code}) {self.message}"


@dataclass
class Declaration:
    """One declaration of the C# syntax tree, positions are 0-based lines."""

    kind: DeclKind
    name: str
    start_line: int
    end_line: int
    # Line holding the opening brace of the body, None when there is no body
    body_start_line: int | None = None
    members: list[Declaration] = field(default_factory=list)
    node_type: str = ""


@dataclass
class ParsedTree:
    declarations: list[Declaration] = field(default_factory=list)
    has_errors: bool = False

    def of_kind(self, kind: DeclKind) -> list[Declaration]:
        return [d for d in self.declarations if d.kind == kind]

    def find(self, kind: DeclKind, name: str, ignore_case: bool = False) -> Declaration | None:
        """First declaration of *kind* named *name*, in discovery order."""
        wanted = name.casefold() if ignore_case else name
        for d in self.of_kind(kind):
            have = d.name.casefold() if ignore_case else d.name
            if have == wanted:
                return d
        return None


@dataclass
class CompileResult:
    tree: ParsedTree
    diagnostics: list[Diagnostic]
    success: bool

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]


@dataclass(frozen=True)
class NativeDeclaration:
    name: str
    kind: NativeKind
    comment_fragments: tuple[str, ...] | None = None


@dataclass
class RunReport:
    file: str
    passes: int = 0
    patches: Counter = field(default_factory=Counter)
    skipped: int = 0
    restarts: int = 0
    structs_normalized: list[str] = field(default_factory=list)
    comments_inserted: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "passes": self.passes,
            "patches": dict(sorted(self.patches.items())),
            "patch_total": sum(self.patches.values()),
            "skipped": self.skipped,
            "restarts": self.restarts,
            "structs_normalized": list(self.structs_normalized),
            "comments_inserted": self.comments_inserted,
        }

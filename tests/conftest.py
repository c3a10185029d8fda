import logging
import re
from pathlib import Path
from typing import Callable

import pytest

from codegenfix.core.config import settings
from codegenfix.domain.models import CompileResult, Diagnostic, ParsedTree
from codegenfix.oracle.base import CompilerOracle
from codegenfix.oracle.syntax import parse_source

RESOURCE_DIR = Path(__file__).resolve().parent.parent / "codegenfix" / "source_definitions"

# Draft bindings as the generator leaves them: missing attribute classes,
# nuint enum base, void* vtable cast, byte/bool return and a bare realloc.
DRAFT_SOURCE = """\
using System.Runtime.CompilerServices;
using System.Runtime.InteropServices;

namespace memflowNET.Interop
{
    [NativeTypeName("uint8_t")]
    public enum Endianess : byte
    {
        Endianess_LittleEndian,
        Endianess_BigEndian,
    }

    [NativeTypeName("uintptr_t")]
    public enum Level : nuint
    {
        Level_Error = 1,
        Level_Warn,
    }

    public partial struct ProcessInfo
    {
        [NativeTypeName("Address")]
        public ulong address;

        [NativeTypeName("Pid")]
        public uint pid;
    }

    public static unsafe partial class Methods
    {
        [DllImport("libmemflow_ffi", CallingConvention = CallingConvention.Cdecl, ExactSpelling = true)]
        public static extern void log_init(LevelFilter level_filter);

        public static bool keyboard_is_down(void* self, int vk)
        {
            bool __ret = ((Keyboard*)(self)->vtbl)->is_down(&(Keyboard*)(self)->container, vk);
            return __ret;
        }

        public static void* grow(void* buf, nuint size)
        {
            return realloc(buf, size);
        }
    }
}
"""

CS0246_MSG = (
    "The type or namespace name 'NativeTypeNameAttribute' could not be found "
    "(are you missing a using directive or an assembly reference?)"
)


def generator_quirks(source_text: str) -> list[Diagnostic]:
    """Report the errors a C# compiler gives for the known generator quirks."""
    lines = source_text.split("\n")
    defined = any("class NativeTypeNameAttribute" in line for line in lines)
    out: list[Diagnostic] = []
    for i, line in enumerate(lines):
        if "[NativeTypeName(" in line and not defined:
            out.append(Diagnostic("CS0246", "error", CS0246_MSG, i, line.index("NativeTypeName")))
        if re.search(r"enum \w+ : nuint", line):
            out.append(Diagnostic(
                "CS1008", "error",
                "Type byte, sbyte, short, ushort, int, uint, long, or ulong expected", i, 0,
            ))
        if ".operator=" in line:
            out.append(Diagnostic("CS1525", "error", "Invalid expression term '='", i, 0))
            out.append(Diagnostic("CS1002", "error", "; expected", i, 0))
        if "(self)->vtbl" in line:
            msg = "The operation in question is undefined on void pointers"
            out.append(Diagnostic("CS0242", "error", msg, i, 10))
            out.append(Diagnostic("CS0242", "error", msg, i, 60))
        if "bool __ret" in line and "!= 0" not in line:
            out.append(Diagnostic("CS0029", "error", "Cannot implicitly convert type 'byte' to 'bool'", i, 0))
        if re.search(r"(?<![\w.])realloc\(", line):
            out.append(Diagnostic(
                "CS0103", "error", "The name 'realloc' does not exist in the current context", i, 0,
            ))
    return out


class ScriptedOracle(CompilerOracle):
    """Compiler stand-in: diagnostics from a function of the source text."""

    def __init__(
        self,
        diagnose: Callable[[str], list[Diagnostic]] = generator_quirks,
        tree_factory: Callable[[str], ParsedTree] = parse_source,
    ):
        self.diagnose = diagnose
        self.tree_factory = tree_factory
        self.sources: list[str] = []

    @property
    def calls(self) -> int:
        return len(self.sources)

    def name(self) -> str:
        return "scripted"

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return None

    def compile(self, source_text: str) -> CompileResult:
        self.sources.append(source_text)
        diags = self.diagnose(source_text)
        return CompileResult(
            tree=self.tree_factory(source_text),
            diagnostics=diags,
            success=not any(d.is_error for d in diags),
        )


@pytest.fixture(autouse=True)
def _use_packaged_resources(monkeypatch):
    """Point resource lookups at the packaged templates regardless of env."""
    monkeypatch.setattr(settings, "RESOURCE_DIR", str(RESOURCE_DIR))


@pytest.fixture(autouse=True)
def _restore_root_logging():
    """setup_logging() swaps the root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def resource_dir() -> Path:
    return RESOURCE_DIR


@pytest.fixture
def draft_source() -> str:
    return DRAFT_SOURCE


@pytest.fixture
def oracle() -> ScriptedOracle:
    return ScriptedOracle()

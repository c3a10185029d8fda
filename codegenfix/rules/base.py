from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Union

from codegenfix.core.errors import ContradictionError
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import Diagnostic, DiagnosticKind, ParsedTree


@dataclass
class Replace:
    line: int
    text: str


@dataclass
class InsertBlock:
    """Insert *lines* before index *at* of the buffer as left by earlier actions."""
    at: int
    lines: list[str]


@dataclass
class Skip:
    reason: str


PatchAction = Union[Replace, InsertBlock, Skip]


@dataclass
class PatchOutcome:
    actions: list[PatchAction]
    # structural insertions invalidate every remaining diagnostic of the pass
    restart: bool = False


@dataclass
class PassContext:
    file: str
    buffer: SourceBuffer
    tree: ParsedTree
    errors: list[Diagnostic]
    attribute_definitions: list[list[str]]
    fixed_lines: set[int] = field(default_factory=set)


class PatchRule(ABC):
    @abstractmethod
    def kind(self) -> DiagnosticKind: ...

    @abstractmethod
    def apply(self, diag: Diagnostic, line: str, ctx: PassContext) -> PatchOutcome: ...

    @staticmethod
    def contradiction(diag: Diagnostic, ctx: PassContext, detail: str) -> ContradictionError:
        return ContradictionError(ctx.file, diag, detail)

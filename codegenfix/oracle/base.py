from __future__ import annotations
from abc import ABC, abstractmethod

from codegenfix.domain.models import CompileResult


class CompilerOracle(ABC):
    @abstractmethod
    def name(self) -> str: ...

    @abstractmethod
    def compile(self, source_text: str) -> CompileResult: ...

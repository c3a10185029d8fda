from __future__ import annotations

from typing import Iterable


class SourceBuffer:
    """In-memory, line-addressed copy of the file being repaired (0-based)."""

    def __init__(self, lines: Iterable[str], trailing_newline: bool = False):
        self.lines: list[str] = list(lines)
        self.trailing_newline = trailing_newline

    @classmethod
    def from_text(cls, text: str) -> SourceBuffer:
        return cls(text.splitlines(), trailing_newline=text.endswith(("\n", "\r")))

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def __setitem__(self, index: int, text: str) -> None:
        self.lines[index] = text

    def insert(self, at: int, block: list[str]) -> None:
        self.lines[at:at] = block

    def replace_span(self, start: int, end: int, block: list[str]) -> None:
        """Replace lines ``start..end`` (inclusive) with *block*."""
        self.lines[start:end + 1] = block

    def text(self) -> str:
        """Full source as compiled; lines are joined with ``\\n``."""
        return "\n".join(self.lines)

    def file_text(self) -> str:
        text = self.text()
        return text + "\n" if self.trailing_newline else text

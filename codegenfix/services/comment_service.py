"""Comment correlation (phase B).

Lifts documentation comments from the native header onto the matching
C# declarations. Matching is by case-insensitive name within a kind:
enums to enums, structs to structs, and functions to the members of the
aggregate container class. The first declaration discovered wins on both
sides; anything unmatched is left alone.

Every inserted block shifts the lines below it, so original positions
from the tree are translated through a :class:`DriftIndex` that is
updated after each insertion. Groups are processed enums, structs,
functions, each in ascending source order.
"""

from __future__ import annotations

import logging
from typing import Iterable

from codegenfix.core.config import settings
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.drift import DriftIndex
from codegenfix.domain.models import Declaration, NativeDeclaration, NativeKind, ParsedTree

logger = logging.getLogger(__name__)

INDENT = "    "


def build_doc_block(fragments: Iterable[str], level: int = 1) -> list[str]:
    indent = INDENT * level
    block = [f"{indent}/// <summary>"]
    block.extend(f"{indent}/// {fragment}" for fragment in fragments)
    block.append(f"{indent}/// </summary>")
    return block


def _first_by_name(decls: Iterable) -> dict:
    out: dict = {}
    for d in decls:
        out.setdefault(d.name.casefold(), d)
    return out


class CommentCorrelator:
    def __init__(self, container: str | None = None):
        self.container = container or settings.AGGREGATE_CONTAINER

    def match(
        self,
        tree: ParsedTree,
        natives: list[NativeDeclaration],
    ) -> list[tuple[Declaration, NativeDeclaration, int]]:
        """Return (target, native, indent level) in insertion order."""
        groups: list[tuple[NativeKind, list[Declaration], int]] = [
            ("enum", tree.of_kind("enum"), 1),
            ("struct", tree.of_kind("struct"), 1),
            ("function", self._container_members(tree), 2),
        ]

        ordered = []
        for kind, targets, level in groups:
            by_name = _first_by_name(targets)
            documented = _first_by_name(
                n for n in natives if n.kind == kind and n.comment_fragments
            )

            pairs = []
            for key, native in documented.items():
                target = by_name.get(key)
                if target is not None:
                    pairs.append((target, native, level))

            pairs.sort(key=lambda p: p[0].start_line)
            ordered.extend(pairs)
        return ordered

    def run(
        self,
        buffer: SourceBuffer,
        tree: ParsedTree,
        natives: list[NativeDeclaration],
    ) -> tuple[DriftIndex, int]:
        drift = DriftIndex(len(buffer))
        inserted = 0

        for target, native, level in self.match(tree, natives):
            block = build_doc_block(native.comment_fragments, level)
            buffer.insert(drift.current(target.start_line), block)
            drift.shift(target.start_line, len(block))
            inserted += 1
            logger.debug("Documented %s %s (%d lines)", native.kind, target.name, len(block))

        logger.info("Inserted %d documentation blocks", inserted)
        return drift, inserted

    def _container_members(self, tree: ParsedTree) -> list[Declaration]:
        container = tree.find("class", self.container, ignore_case=True)
        if container is None:
            logger.warning("Container class %s not found, functions left undocumented", self.container)
            return []
        return container.members

from __future__ import annotations

import logging

from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import ParsedTree

logger = logging.getLogger(__name__)


class StructNormalizer:
    """Replaces generator-inferred struct layouts with hand-written ones.

    The templates carry explicit field offsets for native tagged unions the
    generator cannot lay out; they are spliced in verbatim.
    """

    def __init__(self, templates: dict[str, list[str]]):
        self.templates = templates

    def run(self, buffer: SourceBuffer, tree: ParsedTree) -> list[str]:
        spans = []
        for name, template in self.templates.items():
            decl = tree.find("struct", name)
            if decl is None:
                logger.warning("Struct %s not found, template not applied", name)
                continue
            spans.append((decl.start_line, decl.end_line, name, template))

        # bottom-up so earlier spans keep their positions
        for start, end, name, template in sorted(spans, reverse=True):
            buffer.replace_span(start, end, list(template))
            logger.info("Replaced struct %s (L%d-L%d) with its template", name, start, end)

        return [name for _, _, name, _ in sorted(spans)]

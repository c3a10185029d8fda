"""Native header parser backed by libclang.

Collects the enums, struct definitions and functions declared in the
header itself (not in anything it includes) together with their
documentation comments, split into fragments.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from clang.cindex import CursorKind, Diagnostic as ClangDiagnostic, Index, TranslationUnit

from codegenfix.core.errors import HeaderParseError, SetupError
from codegenfix.domain.models import NativeDeclaration, NativeKind

logger = logging.getLogger(__name__)

_KINDS: dict[CursorKind, NativeKind] = {
    CursorKind.ENUM_DECL: "enum",
    CursorKind.STRUCT_DECL: "struct",
    CursorKind.FUNCTION_DECL: "function",
}

_MARKER_RE = re.compile(r"^(?:/\*\*?|\*/|\*|///?!?|//)\s?")


def comment_fragments(raw_comment: str | None) -> tuple[str, ...] | None:
    """Split a raw C comment into documentation fragments.

    Comment markers are stripped; each paragraph (blank-line separated)
    becomes one fragment with its lines joined by a single space.
    """
    if not raw_comment:
        return None

    paragraphs: list[list[str]] = [[]]
    for line in raw_comment.splitlines():
        text = line.strip()
        if text.endswith("*/"):
            text = text[:-2].rstrip()
        text = _MARKER_RE.sub("", text, count=1).strip()
        if text in ("", "*", "/"):
            if paragraphs[-1]:
                paragraphs.append([])
            continue
        paragraphs[-1].append(text)

    fragments = tuple(" ".join(p) for p in paragraphs if p)
    return fragments or None


def parse_header(path: Path, args: list[str] | None = None) -> list[NativeDeclaration]:
    if not path.exists():
        raise SetupError(f"Native header not found: {path}")

    index = Index.create()
    tu = index.parse(
        str(path),
        args=args or ["-x", "c", "-std=c11"],
        options=TranslationUnit.PARSE_SKIP_FUNCTION_BODIES,
    )

    fatal = [d for d in tu.diagnostics if d.severity >= ClangDiagnostic.Error]
    if fatal:
        first = fatal[0]
        raise HeaderParseError(f"{path}: L{first.location.line}: {first.spelling}")

    header = path.resolve()
    out: list[NativeDeclaration] = []
    for cursor in tu.cursor.get_children():
        kind = _KINDS.get(cursor.kind)
        if kind is None:
            continue
        if cursor.location.file is None or Path(cursor.location.file.name).resolve() != header:
            continue
        if kind == "struct" and not cursor.is_definition():
            continue
        if not cursor.spelling or cursor.is_anonymous():
            continue
        out.append(NativeDeclaration(
            name=cursor.spelling,
            kind=kind,
            comment_fragments=comment_fragments(cursor.raw_comment),
        ))

    logger.info("Parsed %d native declarations from %s", len(out), path.name)
    return out

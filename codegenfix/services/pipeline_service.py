"""Pipeline: repair a generated interop file end to end.

Flow:
  1. Setup: read the target file and every template resource; anything
     missing aborts before a single line is touched
  2. Phase A: compile-diagnose-patch until no error diagnostics remain
  3. Replace hand-laid-out structs with their templates
  4. Recompile for fresh positions
  5. Phase B: lift header comments onto the matching declarations
  6. Overwrite the target file, once
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from codegenfix.core.errors import SetupError
from codegenfix.domain.buffer import SourceBuffer
from codegenfix.domain.models import NativeDeclaration, RunReport
from codegenfix.header.clang_parser import parse_header
from codegenfix.oracle.base import CompilerOracle
from codegenfix.rules.registry import RuleRegistry
from codegenfix.services.comment_service import CommentCorrelator
from codegenfix.services.patch_service import PatchService
from codegenfix.services.resource_service import ResourceService
from codegenfix.services.struct_service import StructNormalizer

logger = logging.getLogger(__name__)

HeaderParser = Callable[[Path], list[NativeDeclaration]]


class PipelineService:
    def __init__(
        self,
        oracle: CompilerOracle,
        registry: RuleRegistry,
        resources: ResourceService,
        header_parser: HeaderParser | None = None,
        correlator: CommentCorrelator | None = None,
        progress: Callable[[str], None] | None = None,
    ):
        self.oracle = oracle
        self.registry = registry
        self.resources = resources
        self.header_parser = header_parser or parse_header
        self.correlator = correlator or CommentCorrelator()
        self.progress = progress or (lambda msg: None)

    def repair(self, source_text: str, file: str = "<memory>") -> tuple[str, RunReport]:
        """Run both phases on *source_text* and return the repaired text."""
        templates = self.resources.load()
        buffer = SourceBuffer.from_text(source_text)
        report = RunReport(file=file)

        self.progress("Fixing compile errors...")
        result = PatchService(self.oracle, self.registry).run(
            buffer,
            file,
            templates.attribute_definitions,
            report,
        )

        self.progress("Replacing explicit struct layouts...")
        report.structs_normalized = StructNormalizer(templates.struct_templates).run(buffer, result.tree)

        # recompile so declaration positions match the normalized buffer
        result = self.oracle.compile(buffer.text())

        self.progress("Adding native documentation...")
        natives = self.header_parser(templates.header_path)
        _, report.comments_inserted = self.correlator.run(buffer, result.tree, natives)

        logger.info("Run complete", extra={"file": file})
        logger.info("Report: %s", report.to_dict(), extra={"file": file})
        return buffer.file_text(), report

    def run(self, path: Path) -> RunReport:
        if not path.is_file():
            raise SetupError(f"Generated interop file not found: {path}")

        self.progress(f"Trying to parse '{path}'")
        source_text = path.read_text(encoding="utf-8")
        repaired, report = self.repair(source_text, file=str(path))

        path.write_text(repaired, encoding="utf-8")
        return report

#!/usr/bin/env python3
"""Repair a generated C# interop file in place.

    codegenfix [PATH]

PATH defaults to ``INTEROP_FILE``. The file is only written when every
phase succeeds; any fatal error exits with status 1 and leaves it as is.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from codegenfix.core.config import settings
from codegenfix.core.containers import build_oracle, build_rule_registry
from codegenfix.core.errors import CodeGenFixError
from codegenfix.core.logging import setup_logging
from codegenfix.services.pipeline_service import PipelineService
from codegenfix.services.resource_service import ResourceService


def _progress(msg: str) -> None:
    print(f"[codegenfix] {msg}", flush=True)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(prog="codegenfix", description="Fix a generated C# interop file")
    ap.add_argument("path", nargs="?", default=settings.INTEROP_FILE, help="interop source to repair in place")
    args = ap.parse_args(argv)

    setup_logging()

    try:
        with build_oracle() as oracle:
            pipeline = PipelineService(
                oracle=oracle,
                registry=build_rule_registry(),
                resources=ResourceService(),
                progress=_progress,
            )
            report = pipeline.run(Path(args.path))
    except CodeGenFixError as e:
        print(f"[codegenfix] FAILED: {e}", file=sys.stderr)
        return 1

    _progress(
        f"{report.passes} passes, {sum(report.patches.values())} patches, "
        f"{len(report.structs_normalized)} structs, {report.comments_inserted} comments"
    )
    _progress("Finished...")
    return 0


if __name__ == "__main__":
    sys.exit(main())

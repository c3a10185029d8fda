from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from codegenfix.core.config import settings
from codegenfix.core.errors import SetupError
from codegenfix.domain.schemas import ResourceManifest


@dataclass
class TemplateSet:
    attribute_definitions: list[list[str]]
    # struct name -> replacement lines
    struct_templates: dict[str, list[str]]
    header_path: Path


class ResourceService:
    """
    Owns the template resource directory layout.
    """

    def __init__(self, resource_dir: Path | None = None, manifest: ResourceManifest | None = None):
        self.resource_dir = Path(resource_dir or settings.RESOURCE_DIR)
        self.manifest = manifest or ResourceService.default_manifest()

    @staticmethod
    def default_manifest() -> ResourceManifest:
        return ResourceManifest(
            struct_templates=settings.normalized_structs(),
            header=settings.HEADER_FILE,
        )

    def path(self, name: str) -> Path:
        return self.resource_dir / name

    def missing(self) -> list[str]:
        return [n for n in self.manifest.required_files() if not self.path(n).is_file()]

    def read_template(self, name: str) -> list[str]:
        p = self.path(name)
        if not p.is_file():
            raise SetupError(f"Template resource not found: {p}")
        return p.read_text(encoding="utf-8").splitlines()

    def load(self) -> TemplateSet:
        """Read every resource up front; any missing file aborts the run."""
        missing = self.missing()
        if missing:
            raise SetupError(
                f"Missing template resources in {self.resource_dir}: {', '.join(missing)}"
            )

        return TemplateSet(
            attribute_definitions=[self.read_template(n) for n in self.manifest.attribute_templates],
            struct_templates={
                name: self.read_template(tpl)
                for name, tpl in self.manifest.struct_templates.items()
            },
            header_path=self.path(self.manifest.header),
        )

import os
from pathlib import Path

from pydantic import BaseModel

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


class Settings(BaseModel):
    # Target interop file (overridden by the CLI path argument)
    INTEROP_FILE: str = os.getenv(
        "INTEROP_FILE",
        str(_PACKAGE_DIR.parent / "memflow.NET" / "memflow.NET" / "memflowInterop.cs"),
    )

    # Template resources
    RESOURCE_DIR: str = os.getenv("RESOURCE_DIR", str(_PACKAGE_DIR / "source_definitions"))
    HEADER_FILE: str = os.getenv("HEADER_FILE", "memflow.h")

    # Name=template pairs, replaced wholesale once compilation is clean
    NORMALIZED_STRUCTS: str = os.getenv("NORMALIZED_STRUCTS", "ProcessInfo=ProcessInfo.cx")

    # Class holding every exported entry point
    AGGREGATE_CONTAINER: str = os.getenv("AGGREGATE_CONTAINER", "Methods")

    # Compiler oracle
    DOTNET_EXE: str = os.getenv("DOTNET_EXE", "dotnet")
    DOTNET_TARGET_FRAMEWORK: str = os.getenv("DOTNET_TARGET_FRAMEWORK", "net8.0")
    COMPILE_TIMEOUT_SEC: int = int(os.getenv("COMPILE_TIMEOUT_SEC", "600"))

    def normalized_structs(self) -> dict[str, str]:
        """Parse ``NORMALIZED_STRUCTS`` into an ordered name -> template mapping."""
        out: dict[str, str] = {}
        for item in self.NORMALIZED_STRUCTS.split(","):
            item = item.strip()
            if not item:
                continue
            name, _, template = item.partition("=")
            out[name.strip()] = template.strip() or f"{name.strip()}.cx"
        return out


settings = Settings()

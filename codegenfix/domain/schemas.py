from pydantic import BaseModel


class ResourceManifest(BaseModel):
    """Named template resources a run depends on."""

    # NativeTypeNameAttribute first: both are spliced at the same line
    attribute_templates: list[str] = [
        "NativeTypeNameAttribute.cx",
        "NativeInheritanceAttribute.cx",
    ]

    # struct name -> replacement template
    struct_templates: dict[str, str] = {"ProcessInfo": "ProcessInfo.cx"}

    header: str = "memflow.h"

    def template_files(self) -> list[str]:
        return [*self.attribute_templates, *self.struct_templates.values()]

    def required_files(self) -> list[str]:
        return [*self.template_files(), self.header]

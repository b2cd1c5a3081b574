"""Configuration domain entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ExtensionKeys:
    """Schema keys outside JSON Schema that the renderer understands."""

    webgl: str = "gltf_webgl"
    detailed_description: str = "gltf_detailedDescription"
    enum_names: str = "gltf_enumNames"


@dataclass(frozen=True)
class RenderSettings:
    """Rendering options read from a settings file or the command line."""

    header_level: int = 1
    suppress_warnings: bool = False
    schema_relative_base_path: str | None = None
    debug: bool = False
    extensions: ExtensionKeys = field(default_factory=ExtensionKeys)


@dataclass(frozen=True)
class GenerationOptions:  # pylint: disable=too-many-instance-attributes
    """Everything one documentation generation needs."""

    schema: Mapping[str, Any]
    file_name: str = ""
    base_path: str = ""
    debug: bool = False
    header_level: int = 1
    suppress_warnings: bool = False
    schema_relative_base_path: str | None = None
    extensions: ExtensionKeys = field(default_factory=ExtensionKeys)

    @classmethod
    def from_settings(
        cls,
        schema: Mapping[str, Any],
        settings: RenderSettings,
        *,
        file_name: str = "",
        base_path: str = "",
    ) -> GenerationOptions:
        return cls(
            schema=schema,
            file_name=file_name,
            base_path=base_path,
            debug=settings.debug,
            header_level=settings.header_level,
            suppress_warnings=settings.suppress_warnings,
            schema_relative_base_path=settings.schema_relative_base_path,
            extensions=settings.extensions,
        )

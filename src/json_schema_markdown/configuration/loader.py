"""Render settings loader service."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from .runtime_settings import ExtensionKeys, RenderSettings


class ConfigurationError(Exception):
    """Raised when the settings file is invalid."""


def load_render_settings(config_path: Path | str) -> RenderSettings:
    """Load and validate a YAML or JSON settings file."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read settings file {path}: {exc}") from exc
    try:
        parsed = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse settings file: {exc}") from exc

    if parsed is None:
        parsed = {}

    if not isinstance(parsed, Mapping):
        raise ConfigurationError("Settings root must be a mapping.")

    rendering = _optional_mapping(parsed.get("rendering"), "rendering")
    return RenderSettings(
        header_level=_require_positive_int(
            rendering.get("header_level", 1), "rendering.header_level"
        ),
        suppress_warnings=_require_bool(
            rendering.get("suppress_warnings", False), "rendering.suppress_warnings"
        ),
        schema_relative_base_path=_optional_string(
            rendering.get("schema_relative_base_path"), "rendering.schema_relative_base_path"
        ),
        debug=_require_bool(parsed.get("debug", False), "debug"),
        extensions=_parse_extensions_section(parsed.get("extensions")),
    )


def apply_overrides(settings: RenderSettings, **overrides: Any) -> RenderSettings:
    """Return `settings` with every override that is not None applied."""
    changes = {name: value for name, value in overrides.items() if value is not None}
    if "header_level" in changes:
        _require_positive_int(changes["header_level"], "header_level")
    return replace(settings, **changes)


def _parse_extensions_section(value: Any) -> ExtensionKeys:
    section = _optional_mapping(value, "extensions")
    defaults = ExtensionKeys()
    return ExtensionKeys(
        webgl=_optional_string(section.get("webgl_key"), "extensions.webgl_key")
        or defaults.webgl,
        detailed_description=_optional_string(
            section.get("detailed_description_key"), "extensions.detailed_description_key"
        )
        or defaults.detailed_description,
        enum_names=_optional_string(section.get("enum_names_key"), "extensions.enum_names_key")
        or defaults.enum_names,
    )


def _optional_mapping(value: Any, section_name: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"Settings section '{section_name}' must be a mapping.")
    return value


def _optional_string(value: Any, field_name: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigurationError(f"{field_name} must be a string.")
    stripped = value.strip()
    return stripped or None


def _require_bool(value: Any, field_name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be true or false.")
    return value


def _require_positive_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if not isinstance(value, int):
        raise ConfigurationError(f"{field_name} must be an integer.")
    if value <= 0:
        raise ConfigurationError(f"{field_name} must be greater than zero.")
    return value

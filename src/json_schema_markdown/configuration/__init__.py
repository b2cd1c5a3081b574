"""Configuration domain exports."""

from .config_scaffold_builder import (
    DEFAULT_CONFIG_FILENAME,
    build_placeholder_settings,
    write_placeholder_settings,
)
from .loader import ConfigurationError, apply_overrides, load_render_settings
from .runtime_settings import ExtensionKeys, GenerationOptions, RenderSettings

__all__ = [
    "ExtensionKeys",
    "GenerationOptions",
    "RenderSettings",
    "ConfigurationError",
    "apply_overrides",
    "load_render_settings",
    "DEFAULT_CONFIG_FILENAME",
    "build_placeholder_settings",
    "write_placeholder_settings",
]

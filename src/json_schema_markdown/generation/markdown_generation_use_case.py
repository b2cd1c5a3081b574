"""Generation use-case service."""

from __future__ import annotations

import logging
from pathlib import Path

from json_schema_markdown.configuration import (
    ConfigurationError,
    GenerationOptions,
    RenderSettings,
    apply_overrides,
    load_render_settings,
)
from json_schema_markdown.markdown_rendering import render_document
from json_schema_markdown.schema_resolution import (
    SchemaError,
    SchemaResolutionError,
    load_schema_file,
)

from .generation_contracts import GenerationOutcome, GenerationRequest

LOGGER = logging.getLogger(__name__)


class GenerationExecutionError(Exception):
    """Raised when a generation use case cannot be completed."""


def execute_markdown_generation(request: GenerationRequest) -> GenerationOutcome:
    """Load settings and schema, render the document, and write it when requested."""
    try:
        settings = _load_settings(request)
        schema_path = Path(request.schema_path).resolve()
        schema = load_schema_file(schema_path)
        options = GenerationOptions.from_settings(
            schema,
            settings,
            file_name=schema_path.name,
            base_path=str(schema_path.parent),
        )
        document = render_document(options)
    except (ConfigurationError, SchemaError, SchemaResolutionError, OSError) as exc:
        raise GenerationExecutionError(str(exc)) from exc

    output_path = _write_output(document.markdown, request.output_path)
    LOGGER.info("documented %s", schema_path.name)
    return GenerationOutcome(
        markdown=document.markdown,
        output_path=output_path,
        draft_supported=document.draft_supported,
    )


def _load_settings(request: GenerationRequest) -> RenderSettings:
    settings = (
        load_render_settings(request.config_path) if request.config_path else RenderSettings()
    )
    return apply_overrides(
        settings,
        header_level=request.header_level,
        schema_relative_base_path=request.schema_relative_base_path,
        suppress_warnings=request.suppress_warnings,
        debug=request.debug,
    )


def _write_output(markdown: str, output_path: str | None) -> Path | None:
    if not output_path:
        return None
    destination = Path(output_path)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(markdown, encoding="utf-8")
    except OSError as exc:
        raise GenerationExecutionError(f"Failed to write {destination}: {exc}") from exc
    return destination.resolve()

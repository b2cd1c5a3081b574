"""Generation entities."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class GenerationRequest:  # pylint: disable=too-many-instance-attributes
    """Input contract for documenting one schema file."""

    schema_path: str
    output_path: str | None = None
    config_path: str | None = None
    header_level: int | None = None
    schema_relative_base_path: str | None = None
    suppress_warnings: bool | None = None
    debug: bool | None = None


@dataclass(frozen=True)
class GenerationOutcome:
    """Output contract for one completed generation."""

    markdown: str
    output_path: Path | None
    draft_supported: bool

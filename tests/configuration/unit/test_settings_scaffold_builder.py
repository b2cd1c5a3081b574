"""Settings scaffold builder tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from json_schema_markdown.configuration import (
    RenderSettings,
    build_placeholder_settings,
    load_render_settings,
    write_placeholder_settings,
)


def test_build_placeholder_settings_contains_all_sections() -> None:
    scaffold = build_placeholder_settings()

    assert "Settings template for json-schema-markdown" in scaffold
    assert "rendering:" in scaffold
    assert "extensions:" in scaffold
    assert "debug: false" in scaffold
    assert "<OPTIONAL>" in scaffold
    assert isinstance(yaml.safe_load(scaffold), dict)


def test_written_scaffold_loads_as_default_settings(tmp_path: Path) -> None:
    output_path = tmp_path / "schema-docs.yaml"

    written_path = write_placeholder_settings(output_path)

    assert written_path == output_path.resolve()
    assert load_render_settings(output_path) == RenderSettings()


def test_write_placeholder_settings_fails_when_file_exists(tmp_path: Path) -> None:
    output_path = tmp_path / "schema-docs.yaml"
    output_path.write_text("existing", encoding="utf-8")

    with pytest.raises(FileExistsError):
        write_placeholder_settings(output_path)

"""Settings scaffold generation helpers."""

from __future__ import annotations

from pathlib import Path

DEFAULT_CONFIG_FILENAME = "schema-docs.yaml"

_CONFIG_SCAFFOLD_TEMPLATE = """# Settings template for json-schema-markdown.
# Every value is <OPTIONAL>; delete a line to keep its default.

rendering:
  # Markdown header level of the "Objects" table of contents (types use level + 1).
  header_level: 1
  # Omit the visible warning for schemas without a title.
  suppress_warnings: false
  # Directory, relative to the generated document, where the schema files live.
  # Leave unset to skip the "JSON schema" link under each type.
  # schema_relative_base_path: "<OPTIONAL>"

# Log $ref resolution steps to stderr.
debug: false

extensions:
  # Schema keys carrying extra documentation outside JSON Schema itself.
  webgl_key: "gltf_webgl"
  detailed_description_key: "gltf_detailedDescription"
  enum_names_key: "gltf_enumNames"
"""


def build_placeholder_settings() -> str:
    """Return the commented YAML settings scaffold."""
    return _CONFIG_SCAFFOLD_TEMPLATE


def write_placeholder_settings(output_path: Path | str) -> Path:
    """Write the settings scaffold, refusing to overwrite an existing file."""
    path = Path(output_path)
    if path.exists():
        raise FileExistsError(f"Settings file already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(build_placeholder_settings(), encoding="utf-8")
    return path.resolve()

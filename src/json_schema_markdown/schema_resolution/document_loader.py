"""Schema document loading."""

from __future__ import annotations

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any


class SchemaError(Exception):
    """Raised for unreadable or malformed schema documents."""


def load_schema_document(text: str, *, source: str = "<inline>") -> dict[str, Any]:
    """Parse schema text into a mapping."""
    try:
        root = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaError(f"Invalid JSON schema in {source}: {exc}") from exc

    if not isinstance(root, Mapping):
        raise SchemaError(f"JSON schema root in {source} must be an object.")
    return dict(root)


def load_schema_file(path: Path | str) -> dict[str, Any]:
    """Read and parse one schema file from disk."""
    schema_path = Path(path)
    if not schema_path.is_file():
        raise SchemaError(f"Schema file not found: {schema_path}")
    try:
        text = schema_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read schema file {schema_path}: {exc}") from exc
    return load_schema_document(text, source=str(schema_path))

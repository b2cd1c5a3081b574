"""Schema resolution entities."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

SchemaNode = dict[str, Any]


@dataclass(frozen=True)
class RegisteredType:
    """Named schema together with the file it was declared in."""

    schema: SchemaNode
    file_name: str


TypeRegistry = Mapping[str, RegisteredType]


@dataclass(frozen=True)
class ResolvedSchema:
    """Root schema with every reference inlined, plus all reachable named schemas."""

    schema: SchemaNode
    registry: TypeRegistry
    draft_supported: bool = True

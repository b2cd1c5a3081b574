"""Schema resolution exports."""

from .document_loader import SchemaError, load_schema_document, load_schema_file
from .reference_resolver import (
    DRAFT3_SCHEMA_URI,
    DRAFT4_SCHEMA_URI,
    Draft3Resolver,
    Draft4Resolver,
    SchemaResolutionError,
    resolve_schema,
    select_resolver,
)
from .schema_models import RegisteredType, ResolvedSchema, TypeRegistry
from .type_ordering import TypeViews, order_types

__all__ = [
    "DRAFT3_SCHEMA_URI",
    "DRAFT4_SCHEMA_URI",
    "Draft3Resolver",
    "Draft4Resolver",
    "RegisteredType",
    "ResolvedSchema",
    "SchemaError",
    "SchemaResolutionError",
    "TypeRegistry",
    "TypeViews",
    "load_schema_document",
    "load_schema_file",
    "order_types",
    "resolve_schema",
    "select_resolver",
]

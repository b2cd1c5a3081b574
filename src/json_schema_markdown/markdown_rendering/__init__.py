"""Markdown rendering exports."""

from .auto_linking import auto_link
from .document_generator import (
    UNSUPPORTED_DRAFT_WARNING,
    GeneratedDocument,
    generate_markdown,
    render_document,
)
from .markdown_style import REQUIRED_ICON, DocumentStyle, MarkdownStyle, type_anchor
from .property_summaries import (
    PropertySummary,
    array_cardinality,
    enum_string,
    format_default,
    format_type,
    summarize_property,
)
from .schema_renderer import (
    MISSING_TITLE_WARNING,
    WARNING_MARKER,
    render_schema,
    render_table_of_contents,
)

__all__ = [
    "DocumentStyle",
    "GeneratedDocument",
    "MISSING_TITLE_WARNING",
    "MarkdownStyle",
    "PropertySummary",
    "REQUIRED_ICON",
    "UNSUPPORTED_DRAFT_WARNING",
    "WARNING_MARKER",
    "array_cardinality",
    "auto_link",
    "enum_string",
    "format_default",
    "format_type",
    "generate_markdown",
    "render_document",
    "render_schema",
    "render_table_of_contents",
    "summarize_property",
    "type_anchor",
]

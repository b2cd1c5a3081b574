"""Top-level Markdown generation for a resolved schema."""

from __future__ import annotations

from dataclasses import dataclass

from json_schema_markdown.configuration.runtime_settings import GenerationOptions
from json_schema_markdown.schema_resolution import TypeViews, resolve_schema

from .markdown_style import DocumentStyle, MarkdownStyle
from .schema_renderer import WARNING_MARKER, render_schema, render_table_of_contents

UNSUPPORTED_DRAFT_WARNING = (
    f"> {WARNING_MARKER}: Only JSON Schema 3 or 4 is supported. Treating as Schema 3.\n\n"
)


@dataclass(frozen=True)
class GeneratedDocument:
    """Rendered document plus whether its `$schema` draft was recognised."""

    markdown: str
    draft_supported: bool


def generate_markdown(options: GenerationOptions, *, style: DocumentStyle | None = None) -> str:
    """Resolve the schema in `options` and render the full document."""
    return render_document(options, style=style).markdown


def render_document(
    options: GenerationOptions, *, style: DocumentStyle | None = None
) -> GeneratedDocument:
    resolved_style = style or MarkdownStyle()
    resolved = resolve_schema(
        options.schema, options.file_name, options.base_path, options.debug
    )
    views = TypeViews.from_registry(resolved.registry)
    known_type_names = views.descending_names

    parts: list[str] = []
    if not resolved.draft_supported:
        parts.append(UNSUPPORTED_DRAFT_WARNING)

    root_title = resolved.schema.get("title")
    parts.append(
        render_table_of_contents(
            root_title if isinstance(root_title, str) else None,
            views.ascending,
            options.header_level,
            style=resolved_style,
        )
    )

    for _, registered in views.ascending:
        parts.append("\n\n")
        parts.append(
            render_schema(
                registered.schema,
                registered.file_name,
                options.header_level + 1,
                options.suppress_warnings,
                options.schema_relative_base_path,
                known_type_names,
                style=resolved_style,
                extensions=options.extensions,
            )
        )
    return GeneratedDocument(markdown="".join(parts), draft_supported=resolved.draft_supported)

"""Markdown rendering of one schema: summary table and per-property details."""

from __future__ import annotations

import posixpath
from collections.abc import Mapping, Sequence
from typing import Any

from json_schema_markdown.configuration.runtime_settings import ExtensionKeys
from json_schema_markdown.schema_resolution.type_ordering import OrderedTypes

from .auto_linking import auto_link
from .markdown_style import DocumentStyle, MarkdownStyle
from .property_summaries import enum_string, literal_text, summarize_property

WARNING_MARKER = "SCHEMA_DOC_WARNING"
MISSING_TITLE_WARNING = f"{WARNING_MARKER}: title not defined"
WEBGL_LABEL = "Related WebGL functions"


def render_table_of_contents(
    root_title: str | None,
    ordered_types: OrderedTypes,
    header_level: int,
    *,
    style: DocumentStyle | None = None,
) -> str:
    """Bulleted list linking every documented type."""
    resolved_style = style or MarkdownStyle()
    parts = [f"{resolved_style.header(header_level)} Objects\n"]
    for type_name, _ in ordered_types:
        entry = resolved_style.link_type(f"`{type_name}`", type_name)
        if type_name == root_title:
            entry += " (root object)"
        parts.append(resolved_style.bullet_item(entry))
    return "".join(parts)


def render_schema(  # pylint: disable=too-many-arguments
    schema: Mapping[str, Any],
    file_name: str,
    header_level: int,
    suppress_warnings: bool,
    schema_relative_base_path: str | None,
    known_type_names: Sequence[str],
    *,
    style: DocumentStyle | None = None,
    extensions: ExtensionKeys | None = None,
) -> str:
    """Render the section for one schema.

    `known_type_names` must be ordered longest first; it feeds auto-linking
    of every description in the section.
    """
    resolved_style = style or MarkdownStyle()
    keys = extensions or ExtensionKeys()
    parts: list[str] = []

    title = schema.get("title")
    if not isinstance(title, str):
        title = "" if suppress_warnings else MISSING_TITLE_WARNING
    parts.append(resolved_style.section(title, header_level))

    description = auto_link(schema.get("description"), known_type_names, resolved_style)
    if description is not None:
        parts.append(f"{description}\n\n")

    webgl = schema.get(keys.webgl)
    if webgl is not None:
        parts.append(f"{resolved_style.extension_label(WEBGL_LABEL)}: {webgl}\n\n")

    if schema.get("type") != "object":
        return "".join(parts)

    parts.append(_properties_summary(schema, known_type_names, resolved_style))

    if schema.get("additionalProperties", True) is False:
        parts.append("Additional properties are not allowed.\n\n")
    else:
        parts.append("Additional properties are allowed.\n\n")

    if schema_relative_base_path is not None:
        schema_link = posixpath.join(
            schema_relative_base_path.replace("\\", "/"), file_name.replace("\\", "/")
        )
        link = resolved_style.link(file_name, schema_link)
        parts.append(resolved_style.bullet_item(f"{resolved_style.bold('JSON schema')}: {link}"))
        parts.append("\n")

    parts.append(
        _properties_details(
            schema, title, header_level + 1, known_type_names, resolved_style, keys
        )
    )
    return "".join(parts)


def _properties_summary(
    schema: Mapping[str, Any], known_type_names: Sequence[str], style: DocumentStyle
) -> str:
    parts = [
        f"{style.properties_summary('Properties')}\n\n",
        "|   |Type|Description|Required|\n",
        "|---|----|-----------|--------|\n",
    ]
    for name, prop in _iter_properties(schema):
        summary = summarize_property(prop, known_type_names, style=style)
        required = (style.required_icon if summary.is_required else "") + summary.required
        parts.append(
            f"|{style.property_name_summary(name)}"
            f"|{summary.formatted_type}"
            f"|{summary.description or ''}"
            f"|{required}|\n"
        )
    parts.append("\n")
    return "".join(parts)


def _properties_details(  # pylint: disable=too-many-arguments
    schema: Mapping[str, Any],
    title: str,
    header_level: int,
    known_type_names: Sequence[str],
    style: DocumentStyle,
    keys: ExtensionKeys,
) -> str:
    header = style.header(header_level)
    parts: list[str] = []

    for name, prop in _iter_properties(schema):
        summary = summarize_property(prop, known_type_names, style=style)
        icon = style.required_icon if summary.is_required else ""
        parts.append(f"{header} {title}.{name}{icon}\n\n")

        detailed = auto_link(prop.get(keys.detailed_description), known_type_names, style)
        if detailed is not None:
            parts.append(f"{detailed}\n\n")
        elif summary.description is not None:
            parts.append(f"{summary.description}\n\n")

        parts.append(f"* {style.property_details('Type')}: {summary.formatted_type}\n")
        parts.extend(_items_constraints(prop, keys, style))
        parts.append(f"* {style.property_details('Required')}: {summary.required}\n")
        parts.extend(_property_constraints(prop, keys, style))

        webgl = prop.get(keys.webgl)
        if webgl is not None:
            parts.append(f"* {style.extension_label(WEBGL_LABEL)}: {webgl}\n")
        parts.append("\n")

    parts.append("\n")
    return "".join(parts)


def _items_constraints(
    prop: Mapping[str, Any], keys: ExtensionKeys, style: DocumentStyle
) -> list[str]:
    items = prop.get("items")
    items = items if isinstance(items, Mapping) else {}
    lines: list[str] = []

    if prop.get("uniqueItems") is True or items.get("uniqueItems") is True:
        lines.append("   * Each element in the array must be unique.\n")
    if not items:
        return lines

    minimum = _styled_bound(items.get("minimum"), style)
    maximum = _styled_bound(items.get("maximum"), style)
    at_least = "greater than"
    if items.get("exclusiveMinimum") is not True:
        at_least += " or equal to"
    at_most = "less than"
    if items.get("exclusiveMaximum") is not True:
        at_most += " or equal to"
    if minimum and maximum:
        lines.append(
            f"   * Each element in the array must be {at_least} {minimum} "
            f"and {at_most} {maximum}.\n"
        )
    elif minimum:
        lines.append(f"   * Each element in the array must be {at_least} {minimum}.\n")
    elif maximum:
        lines.append(f"   * Each element in the array must be {at_most} {maximum}.\n")

    min_length = _styled_bound(items.get("minLength"), style)
    max_length = _styled_bound(items.get("maxLength"), style)
    if min_length and max_length:
        lines.append(
            "   * Each element in the array must have length between "
            f"{min_length} and {max_length}.\n"
        )
    elif min_length:
        lines.append(
            "   * Each element in the array must have length greater than or equal to "
            f"{min_length}.\n"
        )
    elif max_length:
        lines.append(
            f"   * Each element in the array must have length less than or equal to {max_length}.\n"
        )

    allowed = enum_string(items, _type_or_none(items), enum_names_key=keys.enum_names, style=style)
    if allowed is not None:
        lines.append(
            f"   * Each element in the array must be one of the following values: {allowed}.\n"
        )
    return lines


def _property_constraints(
    prop: Mapping[str, Any], keys: ExtensionKeys, style: DocumentStyle
) -> list[str]:
    lines: list[str] = []

    minimum = prop.get("minimum")
    if minimum is not None:
        comparator = ">" if prop.get("exclusiveMinimum") is True else ">="
        value = style.min_max(f"{comparator} {literal_text(minimum)}")
        lines.append(f"* {style.property_details('Minimum')}: {value}\n")

    maximum = prop.get("maximum")
    if maximum is not None:
        comparator = "<" if prop.get("exclusiveMaximum") is True else "<="
        value = style.min_max(f"{comparator} {literal_text(maximum)}")
        lines.append(f"* {style.property_details('Maximum')}: {value}\n")

    format_name = prop.get("format")
    if format_name is not None:
        lines.append(f"* {style.property_details('Format')}: {format_name}\n")

    min_length = prop.get("minLength")
    if min_length is not None:
        value = style.min_max(f">= {literal_text(min_length)}")
        lines.append(f"* {style.property_details('Minimum Length')}: {value}\n")

    max_length = prop.get("maxLength")
    if max_length is not None:
        value = style.min_max(f"<= {literal_text(max_length)}")
        lines.append(f"* {style.property_details('Maximum Length')}: {value}\n")

    allowed = enum_string(prop, _type_or_none(prop), enum_names_key=keys.enum_names, style=style)
    if allowed is not None:
        lines.append(f"* {style.property_details('Allowed values')}: {allowed}\n")

    additional = prop.get("additionalProperties")
    if isinstance(additional, Mapping) and "type" in additional:
        prop_title = prop.get("title")
        if additional.get("type") == "object" and isinstance(prop_title, str):
            formatted = style.link_type(prop_title, prop_title)
        else:
            formatted = style.type_value(literal_text(additional["type"]))
        lines.append(f"* {style.property_details('Type of each property')}: {formatted}\n")
    return lines


def _iter_properties(schema: Mapping[str, Any]) -> list[tuple[str, Mapping[str, Any]]]:
    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return []
    return [(name, prop) for name, prop in properties.items() if isinstance(prop, Mapping)]


def _type_or_none(schema: Mapping[str, Any]) -> str | None:
    type_name = schema.get("type")
    return type_name if isinstance(type_name, str) else None


def _styled_bound(value: Any, style: DocumentStyle) -> str | None:
    if value is None:
        return None
    return style.min_max(literal_text(value))

"""Per-property type, default, and enum formatting."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .auto_linking import auto_link
from .markdown_style import DocumentStyle


@dataclass(frozen=True)
class PropertySummary:
    """One row of the properties summary table."""

    type_name: str
    formatted_type: str
    description: str | None
    required: str

    @property
    def is_required(self) -> bool:
        return self.required == "Yes"


def summarize_property(
    prop: Mapping[str, Any],
    known_type_names: Sequence[str],
    *,
    style: DocumentStyle,
) -> PropertySummary:
    """Compute the type, linked description, and required marker of a property."""
    type_name, formatted_type = format_type(prop, style=style)
    description = auto_link(prop.get("description"), known_type_names, style)

    if prop.get("required") is True:
        required = "Yes"
    elif "default" in prop:
        default_text = style.default_value(format_default(prop["default"]), type_name)
        required = f"No, default: {default_text}"
    else:
        required = "No"

    return PropertySummary(
        type_name=type_name,
        formatted_type=formatted_type,
        description=description,
        required=required,
    )


def format_type(prop: Mapping[str, Any], *, style: DocumentStyle) -> tuple[str, str]:
    """Return the plain and styled type of a property."""
    type_name = literal_text(prop.get("type", "any"))
    if type_name != "array":
        return type_name, style.type_value(type_name)

    array_info = array_cardinality(prop)
    items = prop.get("items")
    if isinstance(items, Mapping) and "type" in items:
        items_title = items.get("title")
        if items.get("type") == "object" and isinstance(items_title, str):
            formatted = style.link_type(items_title, items_title) + style.type_value(array_info)
            return items_title + array_info, formatted
        type_name = literal_text(items["type"]) + array_info
    else:
        type_name += array_info
    return type_name, style.type_value(type_name)


def array_cardinality(prop: Mapping[str, Any]) -> str:
    """Bracket suffix describing how many elements an array holds."""
    min_items = prop.get("minItems")
    max_items = prop.get("maxItems")
    if min_items is not None and min_items == max_items:
        inside = f"{min_items}"
    elif min_items is not None and max_items is not None:
        inside = f"{min_items}-{max_items}"
    elif min_items is not None:
        inside = f"{min_items}-*"
    elif max_items is not None:
        inside = f"*-{max_items}"
    else:
        inside = ""
    return f"[{inside}]"


def format_default(value: Any) -> str:
    if isinstance(value, list):
        return "[" + ",".join(_element_text(element) for element in value) + "]"
    if isinstance(value, Mapping):
        return json.dumps(value, separators=(",", ":"))
    return literal_text(value)


def enum_string(
    schema: Mapping[str, Any],
    type_name: str | None,
    *,
    enum_names_key: str,
    style: DocumentStyle,
) -> str | None:
    """Comma-separated allowed values, or None when the schema has no enum."""
    values = schema.get("enum")
    if not isinstance(values, list):
        return None

    names = schema.get(enum_names_key)
    elements = []
    for index, value in enumerate(values):
        element = literal_text(value)
        if isinstance(names, list) and index < len(names):
            element += f" ({names[index]})"
        elements.append(style.enum_element(element, type_name))
    return ", ".join(elements)


def literal_text(value: Any) -> str:
    """Text of a JSON scalar as it appears in the schema source."""
    if isinstance(value, bool) or value is None:
        return json.dumps(value)
    if isinstance(value, list):
        return ", ".join(literal_text(item) for item in value)
    return str(value)


def _element_text(value: Any) -> str:
    if isinstance(value, (list, Mapping)):
        return json.dumps(value, separators=(",", ":"))
    return literal_text(value)

"""Markup primitives used by the renderer."""

from __future__ import annotations

import re
from typing import Protocol

REQUIRED_ICON = " :white_check_mark: "


class DocumentStyle(Protocol):
    """Formatting strategy the renderer writes through."""

    required_icon: str

    def header(self, level: int) -> str: ...

    def section(self, title: str, level: int) -> str: ...

    def bullet_item(self, item: str, indentation_level: int = 0) -> str: ...

    def bold(self, text: str) -> str: ...

    def link(self, text: str, target: str) -> str: ...

    def link_type(self, text: str, type_name: str) -> str: ...

    def type_value(self, type_name: str) -> str: ...

    def enum_element(self, value: str, type_name: str | None) -> str: ...

    def default_value(self, value: str, type_name: str | None) -> str: ...

    def min_max(self, value: str) -> str: ...

    def property_name_summary(self, name: str) -> str: ...

    def properties_summary(self, label: str) -> str: ...

    def property_details(self, label: str) -> str: ...

    def extension_label(self, label: str) -> str: ...


class MarkdownStyle:
    """GitHub-flavoured Markdown with `reference-<title>` anchors."""

    required_icon = REQUIRED_ICON

    def header(self, level: int) -> str:
        return "#" * level

    def section(self, title: str, level: int) -> str:
        anchor = f'<a name="{type_anchor(title)}"></a>\n' if title else ""
        return f"{anchor}{self.header(level)} {title}\n\n"

    def bullet_item(self, item: str, indentation_level: int = 0) -> str:
        return f"{'  ' * indentation_level}* {item}\n"

    def bold(self, text: str) -> str:
        return f"**{text}**"

    def link(self, text: str, target: str) -> str:
        if not text or not target:
            return text
        return f"[{text}]({target})"

    def link_type(self, text: str, type_name: str) -> str:
        return self.link(text, f"#{type_anchor(type_name)}")

    def type_value(self, type_name: str) -> str:
        return f"`{type_name}`"

    def enum_element(self, value: str, type_name: str | None) -> str:
        return _quoted_literal(value, type_name)

    def default_value(self, value: str, type_name: str | None) -> str:
        return _quoted_literal(value, type_name)

    def min_max(self, value: str) -> str:
        return f"`{value}`"

    def property_name_summary(self, name: str) -> str:
        return self.bold(name)

    def properties_summary(self, label: str) -> str:
        return self.bold(label)

    def property_details(self, label: str) -> str:
        return self.bold(label)

    def extension_label(self, label: str) -> str:
        return self.bold(label)


def type_anchor(title: str) -> str:
    """Anchor name shared by section headers and links to them."""
    return "reference-" + re.sub(r"\s+", "-", title.strip().lower())


def _quoted_literal(value: str, type_name: str | None) -> str:
    if type_name == "string":
        return f'`"{value}"`'
    return f"`{value}`"

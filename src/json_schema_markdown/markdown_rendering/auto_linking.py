"""Turn bare type names inside free text into links to their sections."""

from __future__ import annotations

from collections.abc import Sequence

from .markdown_style import DocumentStyle, MarkdownStyle


def auto_link(
    text: str | None,
    known_type_names: Sequence[str],
    style: DocumentStyle | None = None,
) -> str | None:
    """Link every occurrence of a known type name in `text`.

    `known_type_names` must be ordered longest first. Spans produced by an
    earlier, longer name are frozen so a shorter name that is a substring of
    it never matches inside the link. A name that appears inside an unrelated
    word is still linked.
    """
    if text is None:
        return None
    resolved_style = style or MarkdownStyle()

    # (chunk, linked) pairs; linked chunks are never scanned again.
    segments: list[tuple[str, bool]] = [(text, False)]
    for type_name in known_type_names:
        if not type_name:
            continue
        segments = _link_segments(segments, type_name, resolved_style)
    return "".join(chunk for chunk, _ in segments)


def _link_segments(
    segments: list[tuple[str, bool]], type_name: str, style: DocumentStyle
) -> list[tuple[str, bool]]:
    linked_name = style.link_type(type_name, type_name)
    updated: list[tuple[str, bool]] = []
    for chunk, linked in segments:
        if linked or type_name not in chunk:
            updated.append((chunk, linked))
            continue
        for index, piece in enumerate(chunk.split(type_name)):
            if index:
                updated.append((linked_name, True))
            if piece:
                updated.append((piece, False))
    return updated

"""Render JSON Schema documents (draft 3 and draft 4) as Markdown reference docs."""

import logging

from .markdown_rendering import generate_markdown

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = ["generate_markdown"]

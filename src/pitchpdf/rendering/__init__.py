"""HTML rendering of paginated proposals (Jinja2 templates + CSS fragments)."""

from __future__ import annotations

from .renderer import combine_styles, generate_html_document, render_block, render_document

__all__ = ["combine_styles", "generate_html_document", "render_block", "render_document"]

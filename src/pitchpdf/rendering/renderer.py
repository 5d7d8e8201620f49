"""
Renderer: paginated document -> markup fragments and a full HTML document.

Pipeline
--------
``render_document(fields)`` runs every stage in order:

    compose_document -> apply_layout -> apply_flow -> paginate_by_groups

and renders each placed block through :data:`BLOCK_RENDERERS`, a table keyed
by :class:`BlockType` that covers every member. A type missing from the
table is a programmer error and raises through :func:`never`.

``generate_html_document`` assembles the output into a single
``<!DOCTYPE html>`` string for an external rasterizer.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import Any, Final

from pitchpdf.core.contracts.block import Block, BlockType
from pitchpdf.core.contracts.document import DocumentModel
from pitchpdf.core.contracts.fields import ProposalFields
from pitchpdf.core.contracts.page import Dimensions, Page, PaginationResult
from pitchpdf.core.contracts.render import (
    PageSize,
    RenderedBlock,
    RenderedPage,
    RenderMeta,
    RenderOutput,
)
from pitchpdf.core.result import never
from pitchpdf.core.settings import get_logger
from pitchpdf.engine.composer import DEFAULT_CLIENT_NAME, compose_document
from pitchpdf.engine.flow import apply_flow
from pitchpdf.engine.layout import apply_layout, with_page_size
from pitchpdf.engine.pagination import paginate_by_groups

from . import styles
from .templates import get_template

log = get_logger(__name__)

StyleFn = Callable[[], str]

# Template name and stylesheet fragment for each block type.
BLOCK_RENDERERS: Final[dict[BlockType, tuple[str, StyleFn]]] = {
    BlockType.HEADER: ("header.html", styles.header_styles),
    BlockType.CLIENT: ("client.html", styles.client_styles),
    BlockType.TWO_COLUMN: ("two_column.html", styles.two_column_styles),
    BlockType.SECTION: ("section.html", styles.section_styles),
    BlockType.GRID: ("grid.html", styles.grid_styles),
    BlockType.TIMELINE: ("timeline.html", styles.timeline_styles),
    BlockType.INVESTMENT: ("investment.html", styles.investment_styles),
    BlockType.FOOTER: ("footer.html", styles.footer_styles),
    BlockType.DIVIDER: ("divider.html", styles.divider_styles),
    BlockType.SPACER: ("spacer.html", styles.spacer_styles),
}


# ---- Blocks and pages ----


def render_block(block: Block) -> RenderedBlock:
    """Render one block into its markup and stylesheet fragment."""
    entry = BLOCK_RENDERERS.get(block.type)
    if entry is None:
        never(f"no renderer registered for block type {block.type!r}")
    template_name, style_fn = entry
    html = get_template(template_name).render(
        block=block,
        content=block.content,
        alt_bg=block.metadata.alternate_background,
    )
    return RenderedBlock(id=block.id, type=block.type, html=html, styles=style_fn())


def render_page(page: Page, doc: DocumentModel | None = None) -> RenderedPage:
    """Render every block of ``page``, preferring the full block from ``doc``."""
    by_id = {b.id: b for b in doc.blocks} if doc is not None else {}
    return RenderedPage(
        number=page.number,
        is_first=page.is_first,
        is_last=page.is_last,
        dimensions=Dimensions(width=page.width, height=page.height),
        blocks=[render_block(by_id.get(b.id, b)) for b in page.blocks],
    )


# ---- Assembly ----


def combine_styles(output: RenderOutput) -> str:
    """Global styles followed by every distinct block fragment, first-seen order."""
    fragments: list[str] = [output.styles]
    fragments.extend(b.styles for page in output.pages for b in page.blocks if b.styles)
    return "\n".join(dict.fromkeys(fragments))


def generate_html_document(output: RenderOutput) -> str:
    """Wrap the rendered pages and combined styles in a complete HTML document."""
    return get_template("document.html").render(
        title=output.meta.project_title,
        styles=combine_styles(output),
        pages=output.pages,
    )


def render_paginated(
    doc: DocumentModel,
    pagination: PaginationResult,
    *,
    client_name: str | None = None,
    project_title: str | None = None,
    generated_at: datetime | None = None,
) -> RenderOutput:
    """Render an already-paginated document."""
    width = pagination.pages[0].width if pagination.pages else doc.layout.width
    height = pagination.pages[0].height if pagination.pages else doc.layout.height
    return RenderOutput(
        meta=RenderMeta(
            client_name=client_name or DEFAULT_CLIENT_NAME,
            project_title=project_title or "Proposal",
            page_count=pagination.page_count,
            generated_at=generated_at or datetime.now(UTC),
        ),
        page_size=PageSize(width=width, height=height, format=doc.layout.format),
        pages=[render_page(page, doc) for page in pagination.pages],
        styles=styles.global_styles(width),
    )


def render_document(
    fields: ProposalFields | Mapping[str, Any] | None,
    *,
    now: datetime | None = None,
    page_height: float | None = None,
    page_width: float | None = None,
) -> RenderOutput:
    """
    Run the full pipeline on ``fields`` and render every page.

    Parameters
    ----------
    fields : ProposalFields | Mapping[str, Any] | None
        Proposal form values (camelCase or snake_case keys).
    now : datetime | None
        Fixed composition instant for reproducible ids and dates.
    page_height, page_width : float | None
        Page bounds override; default to settings (A4).

    Returns
    -------
    RenderOutput
        Page fragments plus global styles. Pass it to
        :func:`generate_html_document` for a single HTML string.
    """
    record = ProposalFields.from_mapping(fields)
    doc = with_page_size(compose_document(record, now=now), page_height, page_width)
    flowed = apply_flow(apply_layout(doc))
    pagination = paginate_by_groups(flowed)
    output = render_paginated(
        flowed,
        pagination,
        client_name=record.client_name,
        project_title=record.project_title,
        generated_at=now,
    )
    log.info(
        "Rendered %d block(s) on %d page(s)",
        sum(len(p.blocks) for p in output.pages),
        output.meta.page_count,
    )
    return output


__all__ = [
    "BLOCK_RENDERERS",
    "combine_styles",
    "generate_html_document",
    "render_block",
    "render_document",
    "render_page",
    "render_paginated",
]

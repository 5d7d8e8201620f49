"""
Layout Calculator: attach a resolved box model to every block.

Layout is horizontal and stylistic only. Heights computed here are the
rule-table minimums plus padding and margins, so ``layout_meta.page_count``
is an approximation that the Flow Engine and Paginator later supersede.

Margin collapse follows the CSS model: a block's top margin is reduced by the
previous block's bottom margin and floored at zero.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Final

from pitchpdf.core.contracts.block import (
    Block,
    BlockType,
    BoxModel,
    BoxSpacing,
    ComputedLayout,
    LayoutHint,
    Position,
)
from pitchpdf.core.contracts.document import DocumentModel, LayoutMeta
from pitchpdf.core.settings import get_logger

from .tokens import (
    BLOCK_TYPOGRAPHY,
    CENTERED_INSET,
    PADDED_INSET,
    PAGE_HEIGHT,
    PAGE_WIDTH,
    SPACING,
    get_container_style,
)

log = get_logger(__name__)

BLOCK_MARGINS: Final[dict[BlockType, BoxSpacing]] = {
    BlockType.HEADER: BoxSpacing(),
    BlockType.CLIENT: BoxSpacing(),
    BlockType.TWO_COLUMN: BoxSpacing(top=SPACING["lg"], bottom=SPACING["lg"]),
    BlockType.SECTION: BoxSpacing(),
    BlockType.GRID: BoxSpacing(),
    BlockType.TIMELINE: BoxSpacing(),
    BlockType.INVESTMENT: BoxSpacing(
        top=SPACING["lg"], right=SPACING["xl"], bottom=SPACING["lg"], left=SPACING["xl"]
    ),
    BlockType.FOOTER: BoxSpacing(),
    BlockType.DIVIDER: BoxSpacing(top=SPACING["sm"], bottom=SPACING["sm"]),
    BlockType.SPACER: BoxSpacing(),
}


# ---- Alignment ----


class HorizontalAlign(StrEnum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"
    STRETCH = "stretch"


class VerticalAlign(StrEnum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"
    BASELINE = "baseline"


_HORIZONTAL_CSS: Final[dict[str, dict[str, str]]] = {
    HorizontalAlign.LEFT: {"text-align": "left", "justify-content": "flex-start"},
    HorizontalAlign.CENTER: {"text-align": "center", "justify-content": "center"},
    HorizontalAlign.RIGHT: {"text-align": "right", "justify-content": "flex-end"},
    HorizontalAlign.STRETCH: {"text-align": "left", "justify-content": "stretch"},
}

_VERTICAL_CSS: Final[dict[str, str]] = {
    VerticalAlign.TOP: "flex-start",
    VerticalAlign.MIDDLE: "center",
    VerticalAlign.BOTTOM: "flex-end",
    VerticalAlign.BASELINE: "baseline",
}


def get_alignment_styles(horizontal: str | None, vertical: str | None = None) -> dict[str, str]:
    """Map alignment names to CSS declarations; unknown names contribute nothing."""
    styles: dict[str, str] = {}
    if horizontal is not None:
        styles.update(_HORIZONTAL_CSS.get(horizontal, {}))
    if vertical is not None and vertical in _VERTICAL_CSS:
        styles["align-items"] = _VERTICAL_CSS[vertical]
    return styles


# ---- Context ----


@dataclass(frozen=True, slots=True)
class LayoutContext:
    """Running state threaded block-to-block through :func:`apply_layout`."""

    page_width: float = PAGE_WIDTH
    page_height: float = PAGE_HEIGHT
    container_width: float = PAGE_WIDTH
    current_y: float = 0
    total_height: float = 0
    previous_block: Block | None = None
    layouts: tuple[tuple[str, ComputedLayout], ...] = field(default_factory=tuple)

    def advance(self, block: Block, layout: ComputedLayout) -> LayoutContext:
        """Return the context after ``block`` has been laid out."""
        height = layout.min_height + layout.padding.vertical + layout.margin.vertical
        return replace(
            self,
            current_y=self.current_y + height,
            total_height=self.total_height + height,
            previous_block=block,
            layouts=(*self.layouts, (block.id, layout)),
        )


def create_layout_context(
    page_width: float = PAGE_WIDTH, page_height: float = PAGE_HEIGHT
) -> LayoutContext:
    return LayoutContext(page_width=page_width, page_height=page_height, container_width=page_width)


# ---- Box model ----


def calculate_margins(block: Block, context: LayoutContext | None = None) -> BoxSpacing:
    """
    Margins for ``block`` with top-margin collapse.

    Returns a fresh :class:`BoxSpacing`; :data:`BLOCK_MARGINS` is never
    modified.
    """
    base = BLOCK_MARGINS[block.type]
    if context is None or context.previous_block is None:
        return base.model_copy()
    prev_bottom = BLOCK_MARGINS[context.previous_block.type].bottom
    return base.model_copy(update={"top": max(base.top - prev_bottom, 0)})


def calculate_section_layout(
    block: Block, context: LayoutContext | None = None
) -> tuple[float, float, BoxSpacing, BoxSpacing, Position]:
    """
    Width, content width, padding, margins and position for ``block``.

    ``padded`` blocks are inset by 32px on each side and ``centered`` blocks
    by 64px; every other hint keeps the container's own padding and the full
    container width.
    """
    ctx = context or LayoutContext()
    container = get_container_style(block.type, block.metadata.alternate_background)
    width = ctx.container_width

    inset: float = container.padding
    content_width = width
    if block.layout_hint == LayoutHint.PADDED:
        inset = PADDED_INSET
        content_width = width - 2 * inset
    elif block.layout_hint == LayoutHint.CENTERED:
        inset = CENTERED_INSET
        content_width = width - 2 * inset

    padding = BoxSpacing(
        top=container.padding, right=inset, bottom=container.padding, left=inset
    )
    return (
        width,
        content_width,
        padding,
        calculate_margins(block, ctx),
        Position(x=0, y=ctx.current_y),
    )


def calculate_block_layout(block: Block, context: LayoutContext | None = None) -> ComputedLayout:
    """Full :class:`ComputedLayout` for ``block`` at the context's position."""
    width, content_width, padding, margin, position = calculate_section_layout(block, context)
    container = get_container_style(block.type, block.metadata.alternate_background)
    rules = block.layout_rules
    return ComputedLayout(
        width=width,
        content_width=content_width,
        min_height=rules.min_height if rules else 0,
        max_height=rules.max_height if rules else None,
        padding=padding,
        margin=margin,
        position=position,
        box_model=BoxModel(
            width=width,
            content_width=content_width,
            padding=padding,
            margin=margin,
            border_radius=container.border_radius,
            background=container.background,
            shadow=container.shadow,
        ),
        typography=dict(BLOCK_TYPOGRAPHY[block.type]),
    )


# ---- Columns ----


@dataclass(frozen=True, slots=True)
class ColumnSlot:
    index: int
    x: float
    width: float
    gap: float


@dataclass(frozen=True, slots=True)
class ColumnLayout:
    column_count: int
    column_width: float
    gap: float
    total_width: float
    columns: tuple[ColumnSlot, ...]


def calculate_column_layout(
    column_count: int, container_width: float, gap: float = SPACING["lg"]
) -> ColumnLayout:
    """Split ``container_width`` into ``column_count`` equal columns separated by ``gap``."""
    if column_count < 1:
        raise ValueError("column_count must be at least 1")
    column_width = (container_width - gap * (column_count - 1)) / column_count
    slots = tuple(
        ColumnSlot(
            index=i,
            x=i * (column_width + gap),
            width=column_width,
            gap=gap if i < column_count - 1 else 0,
        )
        for i in range(column_count)
    )
    return ColumnLayout(
        column_count=column_count,
        column_width=column_width,
        gap=gap,
        total_width=container_width,
        columns=slots,
    )


def calculate_two_column_layout(container_width: float, gap: float = SPACING["lg"]) -> ColumnLayout:
    return calculate_column_layout(2, container_width, gap)


# ---- Document pass ----


def with_page_size(
    doc: DocumentModel,
    page_height: float | None = None,
    page_width: float | None = None,
) -> DocumentModel:
    """Return ``doc`` with its page bounds overridden where a value is given."""
    if page_height is None and page_width is None:
        return doc
    page = doc.layout.model_copy(
        update={
            "height": page_height if page_height is not None else doc.layout.height,
            "width": page_width if page_width is not None else doc.layout.width,
        }
    )
    return doc.model_copy(update={"layout": page})


def apply_layout(doc: DocumentModel) -> DocumentModel:
    """
    Attach :class:`ComputedLayout` to every block of ``doc``.

    Parameters
    ----------
    doc : DocumentModel
        Composed document. Not modified.

    Returns
    -------
    DocumentModel
        New document whose blocks carry ``computed_layout`` and whose
        ``layout_meta`` holds the approximate total height and page count.
    """
    ctx = create_layout_context(doc.layout.width, doc.layout.height)
    blocks: list[Block] = []
    for block in doc.blocks:
        layout = calculate_block_layout(block, ctx)
        ctx = ctx.advance(block, layout)
        blocks.append(block.model_copy(update={"computed_layout": layout}))

    meta = LayoutMeta(
        total_height=ctx.total_height,
        page_count=max(1, math.ceil(ctx.total_height / ctx.page_height)),
        page_width=ctx.page_width,
        page_height=ctx.page_height,
    )
    log.debug("Layout: %d blocks, approx height %.0f", len(blocks), ctx.total_height)
    return doc.model_copy(update={"blocks": blocks, "layout_meta": meta})


__all__ = [
    "BLOCK_MARGINS",
    "ColumnLayout",
    "ColumnSlot",
    "HorizontalAlign",
    "LayoutContext",
    "VerticalAlign",
    "apply_layout",
    "calculate_block_layout",
    "calculate_column_layout",
    "calculate_margins",
    "calculate_section_layout",
    "calculate_two_column_layout",
    "create_layout_context",
    "get_alignment_styles",
    "with_page_size",
]

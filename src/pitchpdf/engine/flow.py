"""
Flow Engine: content-aware heights, vertical stacking and flow groups.

Heights are heuristic. Text is measured by counting characters per line at
an average glyph width of half the font size, so results are stable and
reproducible rather than pixel-exact.

Flow groups
-----------
Blocks are partitioned, in order, into contiguous groups:

- ``header_group``    header + the client block following it (keep-together)
- ``content_group``   runs of body blocks (may split between blocks)
- ``highlight_group`` the investment callout (keep-together)
- ``footer_group``    the footer (keep-together, anchored to bottom)

Every block lands in exactly one group.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any, Final

from pitchpdf.core.contracts.block import (
    Block,
    BlockFlow,
    BlockType,
    FlowConstraints,
    FlowHint,
    FlowPosition,
    GridContent,
    GroupType,
    SectionContent,
    SpacerContent,
    TimelineContent,
    TwoColumnContent,
)
from pitchpdf.core.contracts.document import DocumentModel, FlowGroup, FlowMeta
from pitchpdf.core.settings import get_logger

from .tokens import PAGE_HEIGHT, SPACING, get_typography

log = get_logger(__name__)

BASE_BLOCK_HEIGHTS: Final[dict[BlockType, float]] = {
    BlockType.HEADER: 280,
    BlockType.CLIENT: 100,
    BlockType.TWO_COLUMN: 180,
    BlockType.SECTION: 120,
    BlockType.GRID: 150,
    BlockType.TIMELINE: 120,
    BlockType.INVESTMENT: 140,
    BlockType.FOOTER: 120,
    BlockType.DIVIDER: 24,
    BlockType.SPACER: 32,
}

TITLE_HEIGHT: Final = 30
GRID_ITEM_HEIGHT: Final = 80
TIMELINE_PHASE_HEIGHT: Final = 60
MIN_COLUMN_HEIGHT: Final = 100
DEFAULT_CONTAINER_WIDTH: Final = 700

_BODY = get_typography("body")


# ---- Text measurement ----


def estimate_text_height(
    text: str | None,
    font_size: float = _BODY.font_size,
    line_height: float = _BODY.line_height,
    container_width: float = DEFAULT_CONTAINER_WIDTH,
) -> float:
    """
    Estimate the rendered height of ``text``.

    Each explicit line wraps at ``floor(container_width / (font_size * 0.5))``
    characters and contributes at least one line, so blank lines still take
    vertical space.
    """
    if not text:
        return 0
    chars_per_line = max(1, math.floor(container_width / (font_size * 0.5)))
    total_lines = sum(math.ceil(len(line) / chars_per_line) or 1 for line in text.split("\n"))
    return total_lines * font_size * line_height


# ---- Per-type height estimators ----


@dataclass(frozen=True, slots=True)
class FlowContext:
    page_height: float = PAGE_HEIGHT
    container_width: float = DEFAULT_CONTAINER_WIDTH


def _fixed(block: Block, ctx: FlowContext) -> float:
    return BASE_BLOCK_HEIGHTS[block.type]


def _two_column_height(block: Block, ctx: FlowContext) -> float:
    content = block.content
    if not isinstance(content, TwoColumnContent) or not content.columns:
        return BASE_BLOCK_HEIGHTS[BlockType.TWO_COLUMN]
    column_width = ctx.container_width / 2 - 20
    heights = [
        TITLE_HEIGHT + estimate_text_height(col.body, container_width=column_width) + SPACING["lg"]
        for col in content.columns
    ]
    return max(*heights, MIN_COLUMN_HEIGHT) + SPACING["xl"] * 2


def _section_height(block: Block, ctx: FlowContext) -> float:
    body = block.content.body if isinstance(block.content, SectionContent) else None
    return (
        TITLE_HEIGHT
        + estimate_text_height(body, container_width=ctx.container_width)
        + SPACING["xl"] * 2
    )


def _grid_height(block: Block, ctx: FlowContext) -> float:
    content = block.content
    if not isinstance(content, GridContent) or not content.items:
        return BASE_BLOCK_HEIGHTS[BlockType.GRID]
    rows = math.ceil(len(content.items) / (content.columns or 2))
    return rows * GRID_ITEM_HEIGHT + SPACING["xl"] * 2 + TITLE_HEIGHT


def _timeline_height(block: Block, ctx: FlowContext) -> float:
    content = block.content
    if not isinstance(content, TimelineContent) or not content.phases:
        return BASE_BLOCK_HEIGHTS[BlockType.TIMELINE]
    return len(content.phases) * TIMELINE_PHASE_HEIGHT + SPACING["xl"] * 2 + TITLE_HEIGHT


def _spacer_height(block: Block, ctx: FlowContext) -> float:
    if isinstance(block.content, SpacerContent):
        return block.content.height
    return BASE_BLOCK_HEIGHTS[BlockType.SPACER]


HEIGHT_ESTIMATORS: Final[dict[BlockType, Callable[[Block, FlowContext], float]]] = {
    BlockType.HEADER: _fixed,
    BlockType.CLIENT: _fixed,
    BlockType.TWO_COLUMN: _two_column_height,
    BlockType.SECTION: _section_height,
    BlockType.GRID: _grid_height,
    BlockType.TIMELINE: _timeline_height,
    BlockType.INVESTMENT: _fixed,
    BlockType.FOOTER: _fixed,
    BlockType.DIVIDER: _fixed,
    BlockType.SPACER: _spacer_height,
}


def calculate_block_height(block: Block, context: FlowContext | None = None) -> float:
    """
    Estimate the rendered height of ``block``.

    The type-specific estimate is clamped into ``[min_height, max_height]``
    from the block's layout rules (no upper bound when ``max_height`` is
    unset).
    """
    ctx = context or FlowContext()
    height = HEIGHT_ESTIMATORS[block.type](block, ctx)
    rules = block.layout_rules
    min_height = rules.min_height if rules else 0
    max_height = rules.max_height if rules and rules.max_height is not None else math.inf
    return min(max(height, min_height), max_height)


def _height_of(block: Block) -> float:
    if block.flow is not None:
        return block.flow.height
    if block.flow_position is not None:
        return block.flow_position.height
    return calculate_block_height(block)


# ---- Constraints ----


_TYPE_CONSTRAINTS: Final[dict[BlockType, dict[str, Any]]] = {
    BlockType.HEADER: {"keep_together": True},
    BlockType.CLIENT: {"keep_with_previous": True},
    BlockType.TWO_COLUMN: {},
    BlockType.SECTION: {"avoid_orphan": True, "min_lines_on_page": 3},
    BlockType.GRID: {"avoid_orphan": True, "min_lines_on_page": 3},
    BlockType.TIMELINE: {"avoid_orphan": True, "min_lines_on_page": 3},
    BlockType.INVESTMENT: {"keep_together": True},
    BlockType.FOOTER: {"keep_together": True, "anchor_bottom": True},
    BlockType.DIVIDER: {},
    BlockType.SPACER: {},
}


def get_flow_constraints(block: Block) -> FlowConstraints:
    """Resolve keep/anchor constraints from the block flag, its type and its flow hint."""
    values: dict[str, Any] = {"keep_together": block.keep_together}
    values.update(_TYPE_CONSTRAINTS[block.type])
    rules = block.flow_rules
    if rules is not None:
        if rules.hint == FlowHint.KEEP_WITH_NEXT:
            values["keep_with_next"] = True
        if rules.hint == FlowHint.KEEP_WITH_PREVIOUS:
            values["keep_with_previous"] = True
        if rules.anchor_to_bottom:
            values["anchor_bottom"] = True
    return FlowConstraints(**values)


def _constraints_of(block: Block) -> FlowConstraints:
    return block.flow.constraints if block.flow is not None else get_flow_constraints(block)


def can_break_before(block: Block, previous: Block | None) -> bool:
    """Return False when ``block`` must stay with ``previous`` or vice versa."""
    if _constraints_of(block).keep_with_previous:
        return False
    if previous is not None and _constraints_of(previous).keep_with_next:
        return False
    return True


# ---- Groups ----


def _make_group(
    group_type: GroupType,
    blocks: Sequence[Block],
    index: int,
    *,
    keep_together: bool,
    break_before: bool = False,
    anchor_bottom: bool = False,
) -> FlowGroup:
    return FlowGroup(
        id=f"group_{group_type.value}_{index}",
        type=group_type,
        block_ids=[b.id for b in blocks],
        block_count=len(blocks),
        total_height=sum(_height_of(b) for b in blocks),
        keep_together=keep_together,
        break_before=break_before,
        anchor_bottom=anchor_bottom,
    )


def create_flow_groups(blocks: Sequence[Block]) -> list[FlowGroup]:
    """
    Partition ``blocks`` into contiguous flow groups, in order.

    A header immediately followed by a client forms one header group; a
    header or client on its own forms a single-block header group. Investment
    and footer blocks flush any pending content run first.
    """
    groups: list[FlowGroup] = []
    pending: list[Block] = []

    def emit(group_type: GroupType, members: Sequence[Block], **opts: bool) -> None:
        groups.append(_make_group(group_type, members, len(groups), **opts))

    def flush() -> None:
        if pending:
            emit(GroupType.CONTENT_GROUP, list(pending), keep_together=False)
            pending.clear()

    i = 0
    while i < len(blocks):
        block = blocks[i]
        if block.type == BlockType.HEADER:
            flush()
            nxt = blocks[i + 1] if i + 1 < len(blocks) else None
            if nxt is not None and nxt.type == BlockType.CLIENT:
                emit(GroupType.HEADER_GROUP, [block, nxt], keep_together=True)
                i += 2
                continue
            emit(GroupType.HEADER_GROUP, [block], keep_together=True)
        elif block.type == BlockType.CLIENT:
            flush()
            emit(GroupType.HEADER_GROUP, [block], keep_together=True)
        elif block.type == BlockType.INVESTMENT:
            flush()
            emit(GroupType.HIGHLIGHT_GROUP, [block], keep_together=True)
        elif block.type == BlockType.FOOTER:
            flush()
            emit(GroupType.FOOTER_GROUP, [block], keep_together=True, anchor_bottom=True)
        else:
            pending.append(block)
        i += 1
    flush()
    return groups


# ---- Stacking ----


def stack_blocks(blocks: Sequence[Block], start_y: float = 0) -> list[Block]:
    """Assign cumulative ``flow_position`` values starting at ``start_y``."""
    current_y = start_y
    stacked: list[Block] = []
    for block in blocks:
        height = _height_of(block)
        stacked.append(
            block.model_copy(update={"flow_position": FlowPosition(y=current_y, height=height)})
        )
        current_y += height
    return stacked


def get_total_stack_height(blocks: Sequence[Block]) -> float:
    return sum(_height_of(b) for b in blocks)


# ---- Overflow helpers ----


def check_overflow(block_height: float, available_space: float) -> bool:
    return block_height > available_space


@dataclass(frozen=True, slots=True)
class BreakPoint:
    """Result of :func:`find_break_point`; ``break_index`` is -1 when nothing fits."""

    break_index: int
    fits_count: int
    remaining_count: int


def find_break_point(
    blocks: Sequence[Block], available_space: float, context: FlowContext | None = None
) -> BreakPoint:
    """
    Find the last block index after which a page break may occur.

    Blocks are accumulated while they fit in ``available_space``. A fitting
    block that must stay with its successor (keep-together or
    keep-with-next) is not a valid break point unless it is the last block.
    """
    accumulated = 0.0
    break_index = -1
    for i, block in enumerate(blocks):
        height = (
            block.flow.height if block.flow is not None else calculate_block_height(block, context)
        )
        if check_overflow(accumulated + height, available_space):
            break
        accumulated += height
        hint = block.flow_rules.hint if block.flow_rules is not None else FlowHint.NORMAL
        sticky = block.keep_together or hint == FlowHint.KEEP_WITH_NEXT
        if not sticky or i == len(blocks) - 1:
            break_index = i
    return BreakPoint(
        break_index=break_index,
        fits_count=break_index + 1,
        remaining_count=len(blocks) - break_index - 1,
    )


# ---- Document pass ----


def apply_flow(doc: DocumentModel) -> DocumentModel:
    """
    Attach heights, constraints, stacking positions and flow groups.

    Parameters
    ----------
    doc : DocumentModel
        Document from the Layout Calculator (or the Composer). Not modified.

    Returns
    -------
    DocumentModel
        New document whose blocks carry ``flow`` and ``flow_position`` and
        whose ``flow_meta`` lists the flow groups.
    """
    ctx = FlowContext(page_height=doc.layout.height, container_width=doc.layout.width)
    measured = [
        block.model_copy(
            update={
                "flow": BlockFlow(
                    height=calculate_block_height(block, ctx),
                    constraints=get_flow_constraints(block),
                )
            }
        )
        for block in doc.blocks
    ]
    stacked = stack_blocks(measured)
    groups = create_flow_groups(stacked)
    total = get_total_stack_height(stacked)
    page_count = max(1, math.ceil(total / ctx.page_height))

    meta = FlowMeta(
        total_height=total,
        page_height=ctx.page_height,
        page_count=page_count,
        is_single_page=page_count == 1,
        groups=groups,
        group_count=len(groups),
    )
    log.debug("Flow: %d groups, total height %.0f (~%d pages)", len(groups), total, page_count)
    return doc.model_copy(update={"blocks": stacked, "flow_meta": meta})


def create_flow_ready_representation(doc: DocumentModel) -> dict[str, Any]:
    """JSON-safe view of the flowed document; runs :func:`apply_flow` if needed."""
    flowed = doc if doc.flow_meta is not None else apply_flow(doc)
    meta = flowed.flow_meta
    if meta is None:
        raise ValueError("flow pass produced no flow metadata")
    return {
        "blocks": [
            {
                "id": b.id,
                "type": b.type.value,
                "content": b.content.model_dump(mode="json"),
                "position": b.flow_position.model_dump() if b.flow_position else None,
                "constraints": b.flow.constraints.model_dump() if b.flow else None,
            }
            for b in flowed.blocks
        ],
        "groups": [g.model_dump(mode="json") for g in meta.groups],
        "meta": {
            "total_height": meta.total_height,
            "page_count": meta.page_count,
            "is_single_page": meta.is_single_page,
        },
    }


__all__ = [
    "BASE_BLOCK_HEIGHTS",
    "HEIGHT_ESTIMATORS",
    "BreakPoint",
    "FlowContext",
    "apply_flow",
    "calculate_block_height",
    "can_break_before",
    "check_overflow",
    "create_flow_groups",
    "create_flow_ready_representation",
    "estimate_text_height",
    "find_break_point",
    "get_flow_constraints",
    "get_total_stack_height",
    "stack_blocks",
]

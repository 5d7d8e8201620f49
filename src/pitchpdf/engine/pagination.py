"""
Paginator: distribute flowed blocks across fixed-size pages.

Blocks are never split. Keep-together groups move to a fresh page as a unit
when they don't fit; content groups fall back to block-by-block placement.
When a block can't fit and a break before it is forbidden, the block is
placed anyway and the page is flagged ``overflow``. No block is ever dropped.

Page offsets (``page_y``) are relative to the top of the block's page.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from pitchpdf.core.contracts.block import Block, BlockType
from pitchpdf.core.contracts.document import DocumentModel, FlowGroup, PageMeta
from pitchpdf.core.contracts.page import (
    Dimensions,
    MultiPageLayout,
    Page,
    PageView,
    PaginationResult,
    PlacedBlock,
    PlacedPosition,
)
from pitchpdf.core.settings import get_logger, load_settings

from .flow import apply_flow, calculate_block_height, create_flow_groups

log = get_logger(__name__)

NO_SPLIT_BLOCKS: Final[frozenset[BlockType]] = frozenset(
    {
        BlockType.HEADER,
        BlockType.CLIENT,
        BlockType.INVESTMENT,
        BlockType.TIMELINE,
        BlockType.FOOTER,
        BlockType.TWO_COLUMN,
        BlockType.GRID,
    }
)


# ---- Break rules ----


def can_split_block(block: Block) -> bool:
    """Return whether ``block`` may be split across pages.

    Always False: :data:`NO_SPLIT_BLOCKS` and keep-together blocks are
    hard-blocked, and no other type is split either.
    """
    if block.type in NO_SPLIT_BLOCKS:
        return False
    if block.flow is not None and block.flow.constraints.keep_together:
        return False
    # No splitter exists for the remaining types yet.
    return False


def can_break_before(block: Block, previous: Block | None) -> bool:
    """
    Return whether a new page may start right before ``block``.

    Forbidden before the first block, before a client block, before a
    keep-with-previous block and right after a keep-with-next block.
    """
    if previous is None:
        return False
    if block.type == BlockType.CLIENT:
        return False
    if previous.flow is not None and previous.flow.constraints.keep_with_next:
        return False
    if block.flow is not None and block.flow.constraints.keep_with_previous:
        return False
    return True


def block_fits_on_page(block_height: float, available_height: float) -> bool:
    return block_height <= available_height


# ---- Page model ----


def create_page(number: int, width: float | None = None, height: float | None = None) -> Page:
    cfg = load_settings()
    w = width if width is not None else cfg.page_width
    h = height if height is not None else cfg.page_height
    return Page(
        id=f"page_{number}",
        number=number,
        width=w,
        height=h,
        available_height=h,
        is_first=number == 1,
    )


def add_block_to_page(page: Page, block: Block, block_height: float | None = None) -> Page:
    """Append ``block`` at the page's current fill level and return the new page."""
    height = _height_of(block) if block_height is None else block_height
    placed = block.model_copy(update={"page_number": page.number, "page_y": page.used_height})
    used = page.used_height + height
    return page.model_copy(
        update={
            "blocks": [*page.blocks, placed],
            "used_height": used,
            "available_height": page.height - used,
            "overflow": page.overflow or used > page.height,
        }
    )


def _height_of(block: Block) -> float:
    return block.flow.height if block.flow is not None else calculate_block_height(block)


# ---- Pagination ----


class _PageCursor:
    """Accumulates closed pages and tracks the page being filled."""

    __slots__ = ("pages", "current", "width", "height")

    def __init__(self, width: float, height: float) -> None:
        self.width = width
        self.height = height
        self.pages: list[Page] = []
        self.current = create_page(1, width, height)

    @property
    def last_placed(self) -> Block | None:
        return self.current.blocks[-1] if self.current.blocks else None

    def new_page(self) -> None:
        self.pages.append(self.current)
        self.current = create_page(len(self.pages) + 1, self.width, self.height)

    def place(self, block: Block) -> None:
        was_overflowing = self.current.overflow
        self.current = add_block_to_page(self.current, block)
        if self.current.overflow and not was_overflowing:
            log.warning(
                "Block %s (%s) overflows page %d: used %.0f of %.0f",
                block.id,
                block.type.value,
                self.current.number,
                self.current.used_height,
                self.height,
            )

    def finish(self) -> list[Page]:
        if self.current.blocks or not self.pages:
            self.pages.append(self.current)
        last = len(self.pages) - 1
        return [
            page.model_copy(update={"is_first": i == 0, "is_last": i == last})
            for i, page in enumerate(self.pages)
        ]


def _result(pages: list[Page], group_count: int = 0) -> PaginationResult:
    return PaginationResult(
        pages=pages,
        page_count=len(pages),
        group_count=group_count,
        is_single_page=len(pages) == 1,
        overflow_pages=[p.number for p in pages if p.overflow],
    )


def _flowed(doc: DocumentModel) -> DocumentModel:
    return doc if doc.flow_meta is not None else apply_flow(doc)


def _geometry(
    doc: DocumentModel, page_height: float | None, page_width: float | None
) -> tuple[float, float]:
    cfg = load_settings()
    height = page_height if page_height is not None else (doc.layout.height or cfg.page_height)
    width = page_width if page_width is not None else (doc.layout.width or cfg.page_width)
    return width, height


def paginate_by_groups(
    doc: DocumentModel,
    page_height: float | None = None,
    page_width: float | None = None,
) -> PaginationResult:
    """
    Distribute ``doc``'s blocks across pages, group by group.

    Parameters
    ----------
    doc : DocumentModel
        Document to paginate. Flow is applied first when ``flow_meta`` is
        missing.
    page_height, page_width : float | None
        Page bounds; default to the document's page layout, then settings.

    Returns
    -------
    PaginationResult
        Pages in order. Every block appears exactly once, in document order.
    """
    flowed = _flowed(doc)
    width, height = _geometry(flowed, page_height, page_width)
    groups: Sequence[FlowGroup] = (
        flowed.flow_meta.groups
        if flowed.flow_meta is not None
        else create_flow_groups(flowed.blocks)
    )
    by_id = {b.id: b for b in flowed.blocks}
    cursor = _PageCursor(width, height)

    for group in groups:
        members = [by_id[bid] for bid in group.block_ids]
        if block_fits_on_page(group.total_height, cursor.current.available_height):
            for block in members:
                cursor.place(block)
            continue

        if group.keep_together and not cursor.current.is_empty:
            cursor.new_page()

        for block in members:
            if not block_fits_on_page(_height_of(block), cursor.current.available_height):
                if not cursor.current.is_empty and can_break_before(block, cursor.last_placed):
                    cursor.new_page()
            cursor.place(block)

    pages = cursor.finish()
    result = _result(pages, group_count=len(groups))
    log.debug(
        "Paginated %d blocks into %d page(s); overflow pages: %s",
        result.total_blocks,
        result.page_count,
        result.overflow_pages or "none",
    )
    return result


def paginate_document(
    doc: DocumentModel,
    page_height: float | None = None,
    page_width: float | None = None,
) -> PaginationResult:
    """
    Block-by-block pagination without group awareness.

    When a block doesn't fit and must stay with its predecessor, the
    predecessor moves to the next page with it, provided it isn't the only
    block on its page. Otherwise the block is placed and the page overflows.
    """
    flowed = _flowed(doc)
    width, height = _geometry(flowed, page_height, page_width)
    cursor = _PageCursor(width, height)
    previous: Block | None = None

    for block in flowed.blocks:
        if block_fits_on_page(_height_of(block), cursor.current.available_height):
            cursor.place(block)
        elif not cursor.current.is_empty and can_break_before(block, previous):
            cursor.new_page()
            cursor.place(block)
        elif previous is not None and len(cursor.current.blocks) > 1:
            kept = cursor.current.blocks[:-1]
            used = sum(_height_of(b) for b in kept)
            cursor.current = cursor.current.model_copy(
                update={
                    "blocks": kept,
                    "used_height": used,
                    "available_height": cursor.current.height - used,
                    "overflow": used > cursor.current.height,
                }
            )
            cursor.new_page()
            cursor.place(previous)
            cursor.place(block)
        else:
            cursor.place(block)
        previous = block

    return _result(cursor.finish())


# ---- Document integration ----


def attach_pagination(doc: DocumentModel, result: PaginationResult) -> DocumentModel:
    """Copy page placements from ``result`` onto ``doc`` and attach ``page_meta``."""
    placed = {b.id: b for page in result.pages for b in page.blocks}
    blocks = [
        block.model_copy(
            update={"page_number": placed[block.id].page_number, "page_y": placed[block.id].page_y}
        )
        for block in doc.blocks
    ]
    meta = PageMeta(
        page_count=result.page_count,
        is_single_page=result.is_single_page,
        overflow_pages=result.overflow_pages,
    )
    return doc.model_copy(
        update={
            "blocks": blocks,
            "page_meta": meta,
            "meta": doc.meta.model_copy(update={"page_count": result.page_count}),
        }
    )


def apply_pagination(
    doc: DocumentModel,
    page_height: float | None = None,
    page_width: float | None = None,
) -> DocumentModel:
    """Write ``page_number``/``page_y`` onto ``doc``'s blocks and attach ``page_meta``."""
    flowed = _flowed(doc)
    return attach_pagination(flowed, paginate_by_groups(flowed, page_height, page_width))


def create_multi_page_layout(
    doc: DocumentModel, pagination: PaginationResult | None = None
) -> MultiPageLayout:
    """Reshape a pagination result into the render-facing page layout."""
    result = pagination or paginate_by_groups(doc)
    width, height = _geometry(doc, None, None)
    return MultiPageLayout(
        document_id=doc.meta.client_name or "document",
        page_count=result.page_count,
        is_single_page=result.is_single_page,
        page_size=Dimensions(width=width, height=height),
        pages=[
            PageView(
                number=page.number,
                is_first=page.is_first,
                is_last=page.is_last,
                dimensions=Dimensions(width=page.width, height=page.height),
                used_height=page.used_height,
                overflow=page.overflow,
                blocks=[
                    PlacedBlock(
                        id=b.id,
                        type=b.type,
                        content=b.content,
                        position=PlacedPosition(y=b.page_y or 0, height=_height_of(b)),
                        emphasis=b.emphasis,
                    )
                    for b in page.blocks
                ],
            )
            for page in result.pages
        ],
    )


def get_page_for_block(layout: MultiPageLayout | PaginationResult, block_id: str) -> int | None:
    """Return the page number holding ``block_id``, or ``None``."""
    for page in layout.pages:
        if any(b.id == block_id for b in page.blocks):
            return page.number
    return None


__all__ = [
    "NO_SPLIT_BLOCKS",
    "add_block_to_page",
    "apply_pagination",
    "attach_pagination",
    "block_fits_on_page",
    "can_break_before",
    "can_split_block",
    "create_multi_page_layout",
    "create_page",
    "get_page_for_block",
    "paginate_by_groups",
    "paginate_document",
]

"""Page contracts produced by the Paginator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .block import Block, BlockContent, BlockType, Emphasis


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Page(_Frozen):
    """A fixed-size page holding blocks with page-relative ``page_y`` offsets.

    ``overflow`` is set when a placement had to exceed ``height`` rather than
    drop or split a block.
    """

    id: str
    number: int = Field(ge=1)
    width: float
    height: float
    blocks: list[Block] = Field(default_factory=list)
    used_height: float = 0
    available_height: float
    is_first: bool = False
    is_last: bool = False
    overflow: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.blocks


class PaginationResult(_Frozen):
    pages: list[Page]
    page_count: int
    group_count: int = 0
    is_single_page: bool
    overflow_pages: list[int] = Field(default_factory=list)

    @property
    def total_blocks(self) -> int:
        return sum(len(p.blocks) for p in self.pages)


class Dimensions(_Frozen):
    width: float
    height: float


class PlacedPosition(_Frozen):
    y: float
    height: float


class PlacedBlock(_Frozen):
    """Render-facing view of a block on a page."""

    id: str
    type: BlockType
    content: BlockContent
    position: PlacedPosition
    emphasis: Emphasis


class PageView(_Frozen):
    number: int
    is_first: bool
    is_last: bool
    dimensions: Dimensions
    used_height: float
    overflow: bool = False
    blocks: list[PlacedBlock]


class MultiPageLayout(_Frozen):
    """Pagination output reshaped for renderers."""

    version: str = "1.0"
    document_id: str
    page_count: int
    is_single_page: bool
    page_size: Dimensions
    pages: list[PageView]


__all__ = [
    "Dimensions",
    "MultiPageLayout",
    "Page",
    "PageView",
    "PaginationResult",
    "PlacedBlock",
    "PlacedPosition",
]

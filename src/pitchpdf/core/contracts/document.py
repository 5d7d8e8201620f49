"""Root aggregate passed through the pipeline.

Created fresh by the Composer for a single generation call, then re-issued
(never mutated) by each stage with one more metadata group:

- ``layout_meta`` by the Layout Calculator,
- ``flow_meta`` (including the flow groups) by the Flow Engine,
- ``page_meta`` by :func:`pitchpdf.engine.pagination.apply_pagination`.

The region ``hierarchy`` references blocks by id so that no block is ever
physically duplicated.
"""

from __future__ import annotations

from datetime import datetime
from enum import IntEnum, StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .block import Block, BlockType, BoxSpacing, GroupType

SCHEMA_VERSION = "2.0"


class Region(StrEnum):
    """Top-level document regions, independent of pagination."""

    HEADER = "header"
    BODY = "body"
    HIGHLIGHT = "highlight"
    FOOTER = "footer"


class HierarchyLevel(IntEnum):
    DOCUMENT = 0
    REGION = 1
    SECTION = 2
    BLOCK = 3
    ITEM = 4


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class HierarchyNode(_Frozen):
    """A block's placement in the region hierarchy."""

    block_id: str
    type: BlockType
    region: Region
    level: HierarchyLevel
    depth: int


class DocumentMeta(_Frozen):
    """Descriptive metadata and presence flags."""

    client_name: str
    client_company: str
    project_title: str
    block_count: int
    page_count: int = 1
    word_count: int
    has_timeline: bool
    has_pricing: bool
    has_scope: bool = False
    has_terms: bool = False


class PageLayout(_Frozen):
    """Physical page configuration."""

    format: str = "A4"
    orientation: Literal["portrait", "landscape"] = "portrait"
    width: float
    height: float
    margins: BoxSpacing = Field(default_factory=BoxSpacing)
    dpi: int = 96
    scale_factor: float = 1


class PageBreakHint(_Frozen):
    block_id: str
    type: Literal["before", "after"] = "before"


class DocumentFlowRules(_Frozen):
    """Document-level flow hints derived from block rules."""

    page_break_hints: list[PageBreakHint] = Field(default_factory=list)
    keep_together_groups: list[list[str]] = Field(default_factory=list)


class LayoutMeta(_Frozen):
    """Approximate totals from the Layout Calculator; superseded by pagination."""

    total_height: float
    page_count: int
    page_width: float
    page_height: float


class FlowGroup(_Frozen):
    """A contiguous run of blocks paginated under one policy."""

    id: str
    type: GroupType
    block_ids: list[str]
    block_count: int
    total_height: float
    keep_together: bool = True
    break_before: bool = False
    break_after: bool = False
    anchor_bottom: bool = False


class FlowMeta(_Frozen):
    total_height: float
    page_height: float
    page_count: int = Field(ge=1)
    is_single_page: bool
    groups: list[FlowGroup]
    group_count: int


class PageMeta(_Frozen):
    page_count: int = Field(ge=1)
    is_single_page: bool
    overflow_pages: list[int] = Field(default_factory=list)


class DocumentModel(_Frozen):
    """Root aggregate for one generation call."""

    version: str = SCHEMA_VERSION
    type: Literal["proposal"] = "proposal"
    created_at: datetime
    meta: DocumentMeta
    layout: PageLayout
    blocks: list[Block]
    hierarchy: dict[Region, list[HierarchyNode]]
    flow_rules: DocumentFlowRules = Field(default_factory=DocumentFlowRules)

    layout_meta: LayoutMeta | None = None
    flow_meta: FlowMeta | None = None
    page_meta: PageMeta | None = None

    def block_by_id(self, block_id: str) -> Block | None:
        """Return the block with ``block_id`` or ``None``."""
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def blocks_of_type(self, block_type: BlockType) -> list[Block]:
        """Return blocks of ``block_type`` in document order."""
        return [b for b in self.blocks if b.type == block_type]


__all__ = [
    "SCHEMA_VERSION",
    "DocumentFlowRules",
    "DocumentMeta",
    "DocumentModel",
    "FlowGroup",
    "FlowMeta",
    "HierarchyLevel",
    "HierarchyNode",
    "LayoutMeta",
    "PageBreakHint",
    "PageLayout",
    "PageMeta",
    "Region",
]

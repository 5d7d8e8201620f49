"""
Block Contract.

A :class:`Block` is the atomic unit of proposal content. The Composer emits a
flat, ordered list of blocks; every later stage returns *new* blocks that
carry one more group of stage-owned fields:

================  =========================================
Stage             Fields it introduces
================  =========================================
Composer          ``layout_rules``, ``flow_rules``, ``grouping``
Layout            ``computed_layout``
Flow              ``flow``, ``flow_position``
Paginator         ``page_number``, ``page_y``
================  =========================================

All models are frozen; stages derive new values with ``model_copy(update=...)``.
The block ``type`` is a closed :class:`BlockType` enum and ``content`` is a
discriminated union keyed on ``kind`` so serialized documents round-trip into
the right payload class.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

# --------------------------------------------------------------------------- #
# Closed vocabularies
# --------------------------------------------------------------------------- #


class BlockType(StrEnum):
    """Semantic purpose of a block."""

    HEADER = "header"
    CLIENT = "client"
    SECTION = "section"
    TIMELINE = "timeline"
    INVESTMENT = "investment"
    FOOTER = "footer"
    TWO_COLUMN = "two_column"
    GRID = "grid"
    DIVIDER = "divider"
    SPACER = "spacer"


class ContentType(StrEnum):
    """Semantic classification of a block payload."""

    TEXT = "text"
    LIST = "list"
    TIMELINE_ITEMS = "timeline_items"
    GRID_ITEMS = "grid_items"
    PRICING = "pricing"
    CONTACT = "contact"
    BRANDING = "branding"
    SIGNATURE = "signature"


class LayoutHint(StrEnum):
    """Requested width/alignment class."""

    FULL_WIDTH = "full_width"
    HALF_WIDTH = "half_width"
    THIRD_WIDTH = "third_width"
    TWO_THIRDS_WIDTH = "two_thirds_width"
    CENTERED = "centered"
    PADDED = "padded"
    TIGHT = "tight"
    BLEED = "bleed"


class Emphasis(StrEnum):
    """Visual weight tier; drives typography and color, not layout math."""

    HERO = "hero"
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"
    MUTED = "muted"


class FlowHint(StrEnum):
    """Per-type pagination hint assigned by the Composer."""

    NORMAL = "normal"
    BREAK_BEFORE = "break_before"
    BREAK_AFTER = "break_after"
    KEEP_WITH_NEXT = "keep_with_next"
    KEEP_WITH_PREVIOUS = "keep_with_previous"
    AVOID_BREAK = "avoid_break"


class GroupType(StrEnum):
    """Group membership used by grouping rules and flow groups."""

    HEADER_GROUP = "header_group"
    CONTENT_GROUP = "content_group"
    HIGHLIGHT_GROUP = "highlight_group"
    FOOTER_GROUP = "footer_group"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --------------------------------------------------------------------------- #
# Content payloads (discriminated on ``kind``)
# --------------------------------------------------------------------------- #


class HeaderContent(_Frozen):
    kind: Literal["header"] = "header"
    brand: str
    title: str
    subtitle: str
    badge: str
    date: str


class ClientContent(_Frozen):
    kind: Literal["client"] = "client"
    label: str
    name: str
    company: str


class Column(_Frozen):
    """One column of a two-column block."""

    id: str
    title: str
    body: str
    icon: str | None = None


class TwoColumnContent(_Frozen):
    kind: Literal["two_column"] = "two_column"
    columns: list[Column]
    column_count: int


class GridItem(_Frozen):
    """A scope-of-work deliverable; ``index`` is 1-based."""

    id: str
    index: int = Field(ge=1)
    content: str
    marker: bool = True
    display_index: str = Field(description="Zero-padded two-digit index, e.g. '01'.")


class GridContent(_Frozen):
    kind: Literal["grid"] = "grid"
    title: str
    items: list[GridItem]
    columns: int = Field(ge=1)
    anchor: bool = True


class TimelinePhase(_Frozen):
    """A timeline phase; ``phase`` is 1-based and ``label`` reads 'Phase N'."""

    id: str
    phase: int = Field(ge=1)
    label: str
    content: str


class TimelineContent(_Frozen):
    kind: Literal["timeline"] = "timeline"
    title: str
    phases: list[TimelinePhase]
    phase_count: int
    anchor: bool = True


class InvestmentContent(_Frozen):
    kind: Literal["investment"] = "investment"
    label: str
    amount: str


class SectionContent(_Frozen):
    kind: Literal["section"] = "section"
    title: str
    body: str
    icon: str | None = None
    anchor: bool = True


class PreparedBy(_Frozen):
    label: str
    contact: str


class Signature(_Frozen):
    label: str
    line: bool = True


class Branding(_Frozen):
    mark: str
    text: str


class FooterContent(_Frozen):
    kind: Literal["footer"] = "footer"
    prepared_by: PreparedBy
    signature: Signature
    branding: Branding


class DividerContent(_Frozen):
    kind: Literal["divider"] = "divider"
    style: Literal["solid", "dashed"] = "solid"


class SpacerContent(_Frozen):
    kind: Literal["spacer"] = "spacer"
    height: float = Field(default=32, ge=0)


BlockContent = Annotated[
    HeaderContent
    | ClientContent
    | TwoColumnContent
    | GridContent
    | TimelineContent
    | InvestmentContent
    | SectionContent
    | FooterContent
    | DividerContent
    | SpacerContent,
    Field(discriminator="kind"),
]


# --------------------------------------------------------------------------- #
# Stage-owned field groups
# --------------------------------------------------------------------------- #


class BoxSpacing(_Frozen):
    """Four-sided spacing (padding or margin) in logical pixels."""

    top: float = 0
    right: float = 0
    bottom: float = 0
    left: float = 0

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    @property
    def horizontal(self) -> float:
        return self.left + self.right


class LayoutRules(_Frozen):
    """Per-type box defaults attached by the Composer."""

    width: LayoutHint = LayoutHint.FULL_WIDTH
    height: str = "auto"
    min_height: float = 0
    max_height: float | None = None
    padding: BoxSpacing = Field(default_factory=BoxSpacing)
    margin: BoxSpacing = Field(default_factory=BoxSpacing)
    alignment: str | None = None
    overflow: str | None = None
    background: str | None = None
    columns: int | None = None
    column_gap: float | None = None
    column_width: LayoutHint | None = None
    gap: float | None = None
    item_gap: float | None = None
    marker_size: float | None = None
    line_width: float | None = None
    computed_width: str = "100%"


class FlowRules(_Frozen):
    """Pagination hints attached by the Composer."""

    hint: FlowHint = FlowHint.NORMAL
    min_content_height: float = 0
    orphan_lines: int = 0
    widow_lines: int = 0
    anchor_to_bottom: bool = False
    has_next: bool = False
    has_prev: bool = False


class Grouping(_Frozen):
    """Group membership attached by the Composer's grouping pass."""

    group: GroupType = GroupType.CONTENT_GROUP
    keep_together: bool = False
    priority: int = 2
    break_before: bool = False
    break_after: bool = False


class Position(_Frozen):
    x: float = 0
    y: float = 0


class BoxModel(_Frozen):
    """Resolved box model including the container's visual style."""

    width: float
    content_width: float
    padding: BoxSpacing
    margin: BoxSpacing
    border_radius: float
    background: str
    shadow: str


class ComputedLayout(_Frozen):
    """Spatial data attached by the Layout Calculator."""

    width: float
    content_width: float
    min_height: float
    max_height: float | None
    padding: BoxSpacing
    margin: BoxSpacing
    position: Position
    box_model: BoxModel
    typography: dict[str, str]


class FlowConstraints(_Frozen):
    """Resolved keep/anchor constraints for a block."""

    keep_together: bool = False
    keep_with_next: bool = False
    keep_with_previous: bool = False
    avoid_orphan: bool = False
    min_lines_on_page: int = 2
    anchor_bottom: bool = False


class BlockFlow(_Frozen):
    """Estimated height and constraints attached by the Flow Engine."""

    height: float = Field(ge=0)
    constraints: FlowConstraints


class FlowPosition(_Frozen):
    """Vertical stacking position within the whole document."""

    y: float
    height: float


class BlockMetadata(_Frozen):
    alternate_background: bool = False


# --------------------------------------------------------------------------- #
# Block
# --------------------------------------------------------------------------- #


class Block(_Frozen):
    """A typed unit of document content plus progressively attached metadata."""

    id: str = Field(..., description="Unique id, e.g. 'header_1_lq2k9x'.")
    type: BlockType
    content_type: ContentType = ContentType.TEXT
    content: BlockContent
    layout_hint: LayoutHint = LayoutHint.FULL_WIDTH
    emphasis: Emphasis = Emphasis.SECONDARY
    visible: bool = True
    order: int = Field(ge=0)
    metadata: BlockMetadata = Field(default_factory=BlockMetadata)
    keep_together: bool = False
    break_before: bool = False

    # --- Composer rule passes ---
    layout_rules: LayoutRules | None = None
    flow_rules: FlowRules | None = None
    grouping: Grouping | None = None

    # --- Layout Calculator ---
    computed_layout: ComputedLayout | None = None

    # --- Flow Engine ---
    flow: BlockFlow | None = None
    flow_position: FlowPosition | None = None

    # --- Paginator ---
    page_number: int | None = Field(default=None, ge=1)
    page_y: float | None = None


__all__ = [
    "Block",
    "BlockContent",
    "BlockFlow",
    "BlockMetadata",
    "BlockType",
    "BoxModel",
    "BoxSpacing",
    "Branding",
    "ClientContent",
    "Column",
    "ComputedLayout",
    "ContentType",
    "DividerContent",
    "Emphasis",
    "FlowConstraints",
    "FlowHint",
    "FlowPosition",
    "FlowRules",
    "FooterContent",
    "GridContent",
    "GridItem",
    "GroupType",
    "Grouping",
    "HeaderContent",
    "InvestmentContent",
    "LayoutHint",
    "LayoutRules",
    "Position",
    "PreparedBy",
    "SectionContent",
    "Signature",
    "SpacerContent",
    "TimelineContent",
    "TimelinePhase",
    "TwoColumnContent",
]

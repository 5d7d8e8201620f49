"""
Composer: proposal fields -> structured :class:`DocumentModel`.

The Composer is the first pipeline stage. It turns the flat form record into
an ordered list of typed blocks in canonical order::

    header, client, two_column?, grid?, timeline?, investment?, terms?, footer

and then runs four rule passes over the list:

1. layout rules   (per-type box defaults, :data:`LAYOUT_RULES`)
2. flow rules     (per-type pagination hints, :data:`FLOW_RULES`)
3. grouping rules (group membership and priority, :data:`GROUPING_RULES`)
4. hierarchy      (region and level by type, :data:`HIERARCHY_RULES`)

Every rule table is keyed by :class:`BlockType` and covers every member, so
adding a block type without deciding its rules fails loudly in the tests
rather than silently at render time.

Block ids come from a :class:`BlockIdSequence` owned by one call; passing the
same ``now`` twice yields identical ids and dates.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Final

from pitchpdf.core.contracts.block import (
    Block,
    BlockContent,
    BlockMetadata,
    BlockType,
    BoxSpacing,
    Branding,
    ClientContent,
    Column,
    ContentType,
    Emphasis,
    FlowHint,
    FlowRules,
    FooterContent,
    GridContent,
    GridItem,
    Grouping,
    GroupType,
    HeaderContent,
    InvestmentContent,
    LayoutHint,
    LayoutRules,
    PreparedBy,
    SectionContent,
    Signature,
    TimelineContent,
    TimelinePhase,
    TwoColumnContent,
)
from pitchpdf.core.contracts.document import (
    DocumentFlowRules,
    DocumentMeta,
    DocumentModel,
    HierarchyLevel,
    HierarchyNode,
    PageBreakHint,
    PageLayout,
    Region,
)
from pitchpdf.core.contracts.fields import ProposalFields, split_lines
from pitchpdf.core.settings import get_logger, load_settings

log = get_logger(__name__)

DEFAULT_TITLE: Final = "Project Proposal"
DEFAULT_CLIENT_NAME: Final = "Client Name"
DEFAULT_COMPANY: Final = "Company Name"
DEFAULT_CONTACT: Final = "Your Name\nCompany\ncontact@email.com"
UNTITLED: Final = "Untitled Proposal"

# --------------------------------------------------------------------------- #
# Rule tables
# --------------------------------------------------------------------------- #


def _box(
    top: float,
    right: float | None = None,
    bottom: float | None = None,
    left: float | None = None,
) -> BoxSpacing:
    """CSS shorthand: ``_box(32)`` or ``_box(24, 32)`` or all four sides."""
    right = top if right is None else right
    bottom = top if bottom is None else bottom
    left = right if left is None else left
    return BoxSpacing(top=top, right=right, bottom=bottom, left=left)


LAYOUT_RULES: Final[dict[BlockType, LayoutRules]] = {
    BlockType.HEADER: LayoutRules(
        min_height=200, max_height=350, alignment="center", overflow="hidden"
    ),
    BlockType.CLIENT: LayoutRules(
        min_height=80, padding=_box(24, 32), alignment="left", background="primary"
    ),
    BlockType.TWO_COLUMN: LayoutRules(
        column_gap=20,
        column_width=LayoutHint.HALF_WIDTH,
        padding=_box(24, 32),
        alignment="stretch",
    ),
    BlockType.SECTION: LayoutRules(padding=_box(32), alignment="left"),
    BlockType.GRID: LayoutRules(columns=2, gap=16, padding=_box(32)),
    BlockType.TIMELINE: LayoutRules(item_gap=16, marker_size=12, line_width=2, padding=_box(32)),
    BlockType.INVESTMENT: LayoutRules(
        min_height=120, padding=_box(40), alignment="center", background="accent"
    ),
    BlockType.FOOTER: LayoutRules(min_height=150, padding=_box(32, 32, 24), alignment="left"),
    BlockType.DIVIDER: LayoutRules(min_height=1, padding=_box(12, 32)),
    BlockType.SPACER: LayoutRules(min_height=0),
}

COMPUTED_WIDTH: Final[dict[LayoutHint, str]] = {
    LayoutHint.FULL_WIDTH: "100%",
    LayoutHint.HALF_WIDTH: "50%",
    LayoutHint.THIRD_WIDTH: "33.333%",
    LayoutHint.TWO_THIRDS_WIDTH: "66.666%",
    LayoutHint.CENTERED: "80%",
    LayoutHint.PADDED: "90%",
}

FLOW_RULES: Final[dict[BlockType, FlowRules]] = {
    BlockType.HEADER: FlowRules(hint=FlowHint.AVOID_BREAK, min_content_height=200),
    BlockType.CLIENT: FlowRules(hint=FlowHint.KEEP_WITH_PREVIOUS, min_content_height=80),
    BlockType.TWO_COLUMN: FlowRules(min_content_height=150, orphan_lines=2),
    BlockType.SECTION: FlowRules(min_content_height=100, orphan_lines=3, widow_lines=2),
    BlockType.GRID: FlowRules(),
    BlockType.TIMELINE: FlowRules(),
    BlockType.INVESTMENT: FlowRules(hint=FlowHint.AVOID_BREAK, min_content_height=120),
    BlockType.FOOTER: FlowRules(hint=FlowHint.AVOID_BREAK, anchor_to_bottom=True),
    BlockType.DIVIDER: FlowRules(),
    BlockType.SPACER: FlowRules(),
}

GROUPING_RULES: Final[dict[GroupType, Grouping]] = {
    GroupType.HEADER_GROUP: Grouping(
        group=GroupType.HEADER_GROUP, keep_together=True, priority=1
    ),
    GroupType.CONTENT_GROUP: Grouping(
        group=GroupType.CONTENT_GROUP, keep_together=False, priority=2
    ),
    GroupType.HIGHLIGHT_GROUP: Grouping(
        group=GroupType.HIGHLIGHT_GROUP, keep_together=True, priority=3, break_before=True
    ),
    GroupType.FOOTER_GROUP: Grouping(
        group=GroupType.FOOTER_GROUP, keep_together=True, priority=4
    ),
}

GROUP_MEMBERSHIP: Final[dict[BlockType, GroupType]] = {
    BlockType.HEADER: GroupType.HEADER_GROUP,
    BlockType.CLIENT: GroupType.HEADER_GROUP,
    BlockType.TWO_COLUMN: GroupType.CONTENT_GROUP,
    BlockType.SECTION: GroupType.CONTENT_GROUP,
    BlockType.GRID: GroupType.CONTENT_GROUP,
    BlockType.TIMELINE: GroupType.CONTENT_GROUP,
    BlockType.INVESTMENT: GroupType.HIGHLIGHT_GROUP,
    BlockType.FOOTER: GroupType.FOOTER_GROUP,
    BlockType.DIVIDER: GroupType.CONTENT_GROUP,
    BlockType.SPACER: GroupType.CONTENT_GROUP,
}

HIERARCHY_RULES: Final[dict[BlockType, tuple[Region, HierarchyLevel]]] = {
    BlockType.HEADER: (Region.HEADER, HierarchyLevel.SECTION),
    BlockType.CLIENT: (Region.HEADER, HierarchyLevel.BLOCK),
    BlockType.TWO_COLUMN: (Region.BODY, HierarchyLevel.SECTION),
    BlockType.SECTION: (Region.BODY, HierarchyLevel.SECTION),
    BlockType.GRID: (Region.BODY, HierarchyLevel.SECTION),
    BlockType.TIMELINE: (Region.BODY, HierarchyLevel.SECTION),
    BlockType.INVESTMENT: (Region.HIGHLIGHT, HierarchyLevel.SECTION),
    BlockType.FOOTER: (Region.FOOTER, HierarchyLevel.SECTION),
    BlockType.DIVIDER: (Region.BODY, HierarchyLevel.BLOCK),
    BlockType.SPACER: (Region.BODY, HierarchyLevel.BLOCK),
}


# --------------------------------------------------------------------------- #
# Ids
# --------------------------------------------------------------------------- #

_BASE36: Final = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base 36."""
    if value < 0:
        raise ValueError("to_base36 expects a non-negative integer")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


class BlockIdSequence:
    """
    Per-composition block id generator.

    Ids read ``{type}_{n}_{suffix}`` where ``n`` counts from 1 within this
    sequence and ``suffix`` is the base-36 millisecond timestamp of ``now``.
    Each :func:`compose_document` call owns its own sequence, so concurrent
    compositions never share a counter.
    """

    __slots__ = ("_count", "suffix")

    def __init__(self, now: datetime) -> None:
        self._count = 0
        self.suffix = to_base36(int(now.timestamp() * 1000))

    def next_id(self, block_type: BlockType) -> str:
        self._count += 1
        return f"{block_type.value}_{self._count}_{self.suffix}"

    @property
    def issued(self) -> int:
        """Number of ids handed out so far."""
        return self._count


# --------------------------------------------------------------------------- #
# Block factories
# --------------------------------------------------------------------------- #


def format_display_date(moment: datetime) -> str:
    """Format ``moment`` as ``'January 5, 2025'``."""
    return f"{moment.strftime('%B')} {moment.day}, {moment.year}"


def _make_block(
    ids: BlockIdSequence,
    block_type: BlockType,
    content: BlockContent,
    *,
    order: int,
    content_type: ContentType = ContentType.TEXT,
    layout_hint: LayoutHint = LayoutHint.FULL_WIDTH,
    emphasis: Emphasis = Emphasis.SECONDARY,
    keep_together: bool = False,
    alternate_background: bool = False,
) -> Block:
    return Block(
        id=ids.next_id(block_type),
        type=block_type,
        content_type=content_type,
        content=content,
        layout_hint=layout_hint,
        emphasis=emphasis,
        order=order,
        metadata=BlockMetadata(alternate_background=alternate_background),
        keep_together=keep_together,
    )


def _grid_items(lines: list[str], suffix: str) -> list[GridItem]:
    return [
        GridItem(
            id=f"item_{i}_{suffix}",
            index=i + 1,
            content=line,
            display_index=f"{i + 1:02d}",
        )
        for i, line in enumerate(lines)
    ]


def _timeline_phases(lines: list[str], suffix: str) -> list[TimelinePhase]:
    return [
        TimelinePhase(id=f"phase_{i}_{suffix}", phase=i + 1, label=f"Phase {i + 1}", content=line)
        for i, line in enumerate(lines)
    ]


def _create_blocks(
    fields: ProposalFields, ids: BlockIdSequence, now: datetime, brand: str
) -> list[Block]:
    """Build the unprocessed block list in canonical order."""
    blocks: list[Block] = []

    def add(block_type: BlockType, content: BlockContent, **options: Any) -> None:
        blocks.append(_make_block(ids, block_type, content, order=len(blocks), **options))

    add(
        BlockType.HEADER,
        HeaderContent(
            brand=brand,
            title=fields.project_title or DEFAULT_TITLE,
            subtitle="Professional Services Proposal",
            badge="PROPOSAL",
            date=format_display_date(now),
        ),
        emphasis=Emphasis.HERO,
        content_type=ContentType.BRANDING,
        keep_together=True,
    )

    add(
        BlockType.CLIENT,
        ClientContent(
            label="Prepared For",
            name=fields.client_name or DEFAULT_CLIENT_NAME,
            company=fields.client_company or DEFAULT_COMPANY,
        ),
        emphasis=Emphasis.PRIMARY,
        layout_hint=LayoutHint.PADDED,
        content_type=ContentType.CONTACT,
        keep_together=True,
    )

    columns: list[Column] = []
    if fields.problem_statement:
        columns.append(
            Column(
                id="challenge_col",
                title="The Challenge",
                body=fields.problem_statement,
                icon="challenge",
            )
        )
    if fields.proposed_solution:
        columns.append(
            Column(
                id="solution_col",
                title="Our Solution",
                body=fields.proposed_solution,
                icon="solution",
            )
        )
    if columns:
        add(BlockType.TWO_COLUMN, TwoColumnContent(columns=columns, column_count=len(columns)))

    scope = split_lines(fields.scope_of_work)
    if scope:
        add(
            BlockType.GRID,
            GridContent(
                title="Scope of Work",
                items=_grid_items(scope, ids.suffix),
                columns=min(len(scope), 2),
            ),
            content_type=ContentType.GRID_ITEMS,
            alternate_background=True,
        )

    phases = split_lines(fields.timeline)
    if phases:
        add(
            BlockType.TIMELINE,
            TimelineContent(
                title="Timeline",
                phases=_timeline_phases(phases, ids.suffix),
                phase_count=len(phases),
            ),
            content_type=ContentType.TIMELINE_ITEMS,
        )

    if fields.pricing:
        add(
            BlockType.INVESTMENT,
            InvestmentContent(label="Total Investment", amount=fields.pricing),
            emphasis=Emphasis.PRIMARY,
            layout_hint=LayoutHint.CENTERED,
            content_type=ContentType.PRICING,
            keep_together=True,
        )

    if fields.terms:
        add(
            BlockType.SECTION,
            SectionContent(title="Terms & Conditions", body=fields.terms),
            emphasis=Emphasis.TERTIARY,
            alternate_background=True,
        )

    add(
        BlockType.FOOTER,
        FooterContent(
            prepared_by=PreparedBy(
                label="Prepared By", contact=fields.contact_info or DEFAULT_CONTACT
            ),
            signature=Signature(label="Authorized Signature"),
            branding=Branding(mark=brand[:1].lower() or "p", text=f"{brand} Premium Document"),
        ),
        emphasis=Emphasis.MUTED,
        content_type=ContentType.CONTACT,
        keep_together=True,
    )
    return blocks


# --------------------------------------------------------------------------- #
# Rule passes
# --------------------------------------------------------------------------- #


def apply_layout_rules(block: Block) -> Block:
    """Attach the per-type :class:`LayoutRules` to ``block``.

    ``computed_width`` reflects the block's own layout hint, so a padded
    client panel reads ``90%`` and a centered investment callout ``80%``.
    """
    rules = LAYOUT_RULES[block.type].model_copy(
        update={"computed_width": COMPUTED_WIDTH.get(block.layout_hint, "100%")}
    )
    return block.model_copy(update={"layout_rules": rules})


def apply_flow_rules(blocks: list[Block]) -> list[Block]:
    """Attach per-type :class:`FlowRules`, with neighbour flags from the full list."""
    last = len(blocks) - 1
    return [
        block.model_copy(
            update={
                "flow_rules": FLOW_RULES[block.type].model_copy(
                    update={"has_next": i < last, "has_prev": i > 0}
                )
            }
        )
        for i, block in enumerate(blocks)
    ]


def apply_grouping_rules(blocks: list[Block]) -> list[Block]:
    """Attach group membership; types without a group land in ``content_group``."""
    return [
        block.model_copy(
            update={
                "grouping": GROUPING_RULES[
                    GROUP_MEMBERSHIP.get(block.type, GroupType.CONTENT_GROUP)
                ]
            }
        )
        for block in blocks
    ]


def build_hierarchy(blocks: list[Block]) -> dict[Region, list[HierarchyNode]]:
    """Bucket blocks into regions by reference (block id), preserving order."""
    hierarchy: dict[Region, list[HierarchyNode]] = {region: [] for region in Region}
    for block in blocks:
        region, level = HIERARCHY_RULES[block.type]
        hierarchy[region].append(
            HierarchyNode(
                block_id=block.id,
                type=block.type,
                region=region,
                level=level,
                depth=int(level),
            )
        )
    return hierarchy


def extract_page_break_hints(blocks: list[Block]) -> list[PageBreakHint]:
    return [
        PageBreakHint(block_id=b.id)
        for b in blocks
        if b.break_before
        or (b.flow_rules is not None and b.flow_rules.hint == FlowHint.BREAK_BEFORE)
    ]


def extract_keep_together_groups(blocks: list[Block]) -> list[list[str]]:
    """Return runs of consecutive keep-together block ids."""
    groups: list[list[str]] = []
    current: list[str] = []
    for block in blocks:
        if block.keep_together or (block.grouping is not None and block.grouping.keep_together):
            current.append(block.id)
        elif current:
            groups.append(current)
            current = []
    if current:
        groups.append(current)
    return groups


def estimate_word_count(blocks: list[Block]) -> int:
    """Rough word count: whitespace tokens of each block's compact JSON content."""
    count = 0
    for block in blocks:
        text = json.dumps(block.content.model_dump(mode="json"), separators=(",", ":"))
        count += len(text.split())
    return count


def _document_meta(fields: ProposalFields, blocks: list[Block]) -> DocumentMeta:
    present = {b.type for b in blocks}
    return DocumentMeta(
        client_name=fields.client_name or DEFAULT_CLIENT_NAME,
        client_company=fields.client_company or "",
        project_title=fields.project_title or UNTITLED,
        block_count=len(blocks),
        word_count=estimate_word_count(blocks),
        has_timeline=BlockType.TIMELINE in present,
        has_pricing=BlockType.INVESTMENT in present,
        has_scope=BlockType.GRID in present,
        has_terms=BlockType.SECTION in present,
    )


def _page_layout() -> PageLayout:
    cfg = load_settings()
    return PageLayout(width=cfg.page_width, height=cfg.page_height)


# --------------------------------------------------------------------------- #
# Public API
# --------------------------------------------------------------------------- #


def compose_document(
    fields: ProposalFields | Mapping[str, Any] | None,
    *,
    now: datetime | None = None,
    brand: str | None = None,
) -> DocumentModel:
    """
    Compose a proposal :class:`DocumentModel` from form fields.

    Parameters
    ----------
    fields : ProposalFields | Mapping[str, Any] | None
        Form values. camelCase and snake_case keys are both accepted; absent,
        empty and non-string values are treated as missing; whitespace-only
        text still emits its block, except scope and timeline, whose blank
        lines are dropped.
    now : datetime | None
        Composition instant used for block ids, the header date and
        ``created_at``. Defaults to the current UTC time.
    brand : str | None
        Brand name for the header strip and footer mark. Defaults to
        ``settings.brand_name``.

    Returns
    -------
    DocumentModel
        Fresh document with layout, flow and grouping rules attached to every
        block and the region hierarchy built.
    """
    record = ProposalFields.from_mapping(fields)
    moment = now or datetime.now(UTC)
    ids = BlockIdSequence(moment)
    brand_name = brand or load_settings().brand_name

    raw = _create_blocks(record, ids, moment, brand_name)
    blocks = apply_grouping_rules(apply_flow_rules([apply_layout_rules(b) for b in raw]))

    doc = DocumentModel(
        created_at=moment,
        meta=_document_meta(record, blocks),
        layout=_page_layout(),
        blocks=blocks,
        hierarchy=build_hierarchy(blocks),
        flow_rules=DocumentFlowRules(
            page_break_hints=extract_page_break_hints(blocks),
            keep_together_groups=extract_keep_together_groups(blocks),
        ),
    )
    log.debug("Composed %d blocks: %s", len(blocks), ", ".join(b.type.value for b in blocks))
    return doc


def create_layout_ready_representation(doc: DocumentModel) -> dict[str, Any]:
    """Return a region-keyed, JSON-safe view of ``doc`` for external renderers."""

    def node(block_id: str) -> dict[str, Any]:
        block = doc.block_by_id(block_id)
        if block is None:
            raise ValueError(f"hierarchy references unknown block {block_id}")
        return {
            "id": block.id,
            "type": block.type.value,
            "content": block.content.model_dump(mode="json"),
            "layout": block.layout_rules.model_dump(mode="json") if block.layout_rules else None,
            "emphasis": block.emphasis.value,
            "visible": block.visible,
        }

    return {
        "version": doc.version,
        "format": doc.layout.format,
        "dimensions": {"width": doc.layout.width, "height": doc.layout.height},
        "regions": {
            region.value: [node(n.block_id) for n in doc.hierarchy.get(region, [])]
            for region in Region
        },
        "flow_hints": doc.flow_rules.model_dump(mode="json"),
        "meta": doc.meta.model_dump(mode="json"),
    }


__all__ = [
    "COMPUTED_WIDTH",
    "DEFAULT_CLIENT_NAME",
    "DEFAULT_COMPANY",
    "DEFAULT_CONTACT",
    "DEFAULT_TITLE",
    "FLOW_RULES",
    "GROUPING_RULES",
    "GROUP_MEMBERSHIP",
    "HIERARCHY_RULES",
    "LAYOUT_RULES",
    "BlockIdSequence",
    "apply_flow_rules",
    "apply_grouping_rules",
    "apply_layout_rules",
    "build_hierarchy",
    "compose_document",
    "create_layout_ready_representation",
    "estimate_word_count",
    "extract_keep_together_groups",
    "extract_page_break_hints",
    "format_display_date",
    "to_base36",
]

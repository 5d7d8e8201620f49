"""
Tests for the Composer stage.

Scope
-----
- Block presence: optional blocks appear iff their field has content.
- Canonical ordering and strictly increasing ``order`` values.
- Placeholders for absent header/client/footer values.
- Determinism under a fixed ``now`` and per-call id sequences.
- Rule tables cover every :class:`BlockType`.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from pitchpdf.core.contracts.block import (
    BlockType,
    ClientContent,
    FooterContent,
    GridContent,
    GroupType,
    HeaderContent,
    TimelineContent,
    TwoColumnContent,
)
from pitchpdf.core.contracts.document import Region
from pitchpdf.engine.composer import (
    FLOW_RULES,
    GROUP_MEMBERSHIP,
    HIERARCHY_RULES,
    LAYOUT_RULES,
    BlockIdSequence,
    compose_document,
    create_layout_ready_representation,
    format_display_date,
    to_base36,
)
from pitchpdf.engine.validation import validate_document

CANONICAL = [
    BlockType.HEADER,
    BlockType.CLIENT,
    BlockType.TWO_COLUMN,
    BlockType.GRID,
    BlockType.TIMELINE,
    BlockType.INVESTMENT,
    BlockType.SECTION,
    BlockType.FOOTER,
]


def _types(fields: dict[str, Any], now: datetime) -> list[BlockType]:
    return [b.type for b in compose_document(fields, now=now).blocks]


# --------------------------------------------------------------------------- #
# Presence and ordering
# --------------------------------------------------------------------------- #


def test_empty_fields_yield_only_mandatory_blocks(now: datetime) -> None:
    """`{}` produces header, client and footer with placeholders, and validates."""
    doc = compose_document({}, now=now)

    assert [b.type for b in doc.blocks] == [BlockType.HEADER, BlockType.CLIENT, BlockType.FOOTER]
    assert validate_document(doc).valid

    header, client, footer = (b.content for b in doc.blocks)
    assert isinstance(header, HeaderContent) and header.title == "Project Proposal"
    assert header.date == "January 5, 2025"
    assert isinstance(client, ClientContent)
    assert (client.name, client.company) == ("Client Name", "Company Name")
    assert isinstance(footer, FooterContent)
    assert footer.prepared_by.contact == "Your Name\nCompany\ncontact@email.com"
    assert doc.meta.project_title == "Untitled Proposal"
    assert not doc.meta.has_timeline and not doc.meta.has_pricing


def test_full_fields_follow_canonical_order(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)

    assert [b.type for b in doc.blocks] == CANONICAL
    orders = [b.order for b in doc.blocks]
    assert orders == sorted(orders) and len(set(orders)) == len(orders)
    assert doc.meta.block_count == len(CANONICAL)
    assert doc.meta.has_timeline and doc.meta.has_pricing
    assert doc.meta.word_count > 0


@pytest.mark.parametrize(  # type: ignore[misc]
    ("field", "block_type"),
    [
        ("pricing", BlockType.INVESTMENT),
        ("terms", BlockType.SECTION),
        ("timeline", BlockType.TIMELINE),
        ("scopeOfWork", BlockType.GRID),
        ("problemStatement", BlockType.TWO_COLUMN),
    ],
)
def test_optional_block_presence(
    full_fields: dict[str, Any], now: datetime, field: str, block_type: BlockType
) -> None:
    """Each optional block exists iff its field is a non-empty string."""
    assert block_type in _types(full_fields, now)

    blank = {**full_fields, field: ""}
    if field == "problemStatement":
        blank["proposedSolution"] = ""
    assert block_type not in _types(blank, now)


def test_whitespace_only_text_still_emits_blocks(now: datetime) -> None:
    """Whitespace is content for free-text fields; only '' is absent."""
    doc = compose_document(
        {"pricing": " ", "problemStatement": "  ", "terms": "\t", "clientName": "  "}, now=now
    )

    assert [b.type for b in doc.blocks] == [
        BlockType.HEADER,
        BlockType.CLIENT,
        BlockType.TWO_COLUMN,
        BlockType.INVESTMENT,
        BlockType.SECTION,
        BlockType.FOOTER,
    ]
    (client,) = doc.blocks_of_type(BlockType.CLIENT)
    assert isinstance(client.content, ClientContent) and client.content.name == "  "


def test_blank_lines_never_make_grid_or_timeline(now: datetime) -> None:
    types = _types({"scopeOfWork": "   \n  ", "timeline": "\n \n"}, now)
    assert types == [BlockType.HEADER, BlockType.CLIENT, BlockType.FOOTER]


def test_non_string_values_are_treated_as_absent(now: datetime) -> None:
    types = _types({"pricing": 10000, "terms": None, "timeline": ["a", "b"]}, now)
    assert types == [BlockType.HEADER, BlockType.CLIENT, BlockType.FOOTER]


def test_snake_case_keys_are_accepted(now: datetime) -> None:
    doc = compose_document({"client_name": "Ada", "project_title": "Engine"}, now=now)
    assert doc.meta.client_name == "Ada"
    assert doc.meta.project_title == "Engine"


def test_two_column_with_single_side(now: datetime) -> None:
    doc = compose_document({"proposedSolution": "Rebuild it."}, now=now)
    (block,) = doc.blocks_of_type(BlockType.TWO_COLUMN)
    assert isinstance(block.content, TwoColumnContent)
    assert [c.title for c in block.content.columns] == ["Our Solution"]
    assert block.content.column_count == 1


# --------------------------------------------------------------------------- #
# Content details
# --------------------------------------------------------------------------- #


def test_scope_lines_become_indexed_grid_items(now: datetime) -> None:
    """Three scope lines give items '01', '02', '03' in a two-column grid."""
    doc = compose_document({"scopeOfWork": "Design\nDevelopment\nTesting"}, now=now)
    (grid,) = doc.blocks_of_type(BlockType.GRID)

    assert isinstance(grid.content, GridContent)
    assert [i.display_index for i in grid.content.items] == ["01", "02", "03"]
    assert [i.content for i in grid.content.items] == ["Design", "Development", "Testing"]
    assert grid.content.columns == 2
    assert grid.metadata.alternate_background


def test_single_scope_line_uses_one_column(now: datetime) -> None:
    doc = compose_document({"scopeOfWork": "Audit"}, now=now)
    (grid,) = doc.blocks_of_type(BlockType.GRID)
    assert isinstance(grid.content, GridContent) and grid.content.columns == 1


def test_timeline_skips_blank_lines(now: datetime) -> None:
    doc = compose_document({"timeline": "Kickoff\n\n  \nDelivery\n"}, now=now)
    (timeline,) = doc.blocks_of_type(BlockType.TIMELINE)
    assert isinstance(timeline.content, TimelineContent)
    assert [p.label for p in timeline.content.phases] == ["Phase 1", "Phase 2"]
    assert timeline.content.phase_count == 2


def test_brand_flows_into_header_and_footer(now: datetime) -> None:
    doc = compose_document({}, now=now, brand="Northwind")
    header = doc.blocks[0].content
    footer = doc.blocks[-1].content
    assert isinstance(header, HeaderContent) and header.brand == "Northwind"
    assert isinstance(footer, FooterContent)
    assert footer.branding.mark == "n"
    assert footer.branding.text == "Northwind Premium Document"


# --------------------------------------------------------------------------- #
# Ids and determinism
# --------------------------------------------------------------------------- #


def test_base36_encoding() -> None:
    assert to_base36(0) == "0"
    assert to_base36(35) == "z"
    assert to_base36(36) == "10"
    with pytest.raises(ValueError):
        to_base36(-1)


def test_block_ids_are_unique_and_typed(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    suffix = BlockIdSequence(now).suffix

    ids = [b.id for b in doc.blocks]
    assert len(set(ids)) == len(ids)
    assert ids[0] == f"header_1_{suffix}"
    assert ids[-1] == f"footer_{len(ids)}_{suffix}"


def test_each_call_owns_its_id_sequence(now: datetime) -> None:
    """Counters restart per call: no state leaks between compositions."""
    first = compose_document({"pricing": "$1"}, now=now)
    second = compose_document({}, now=now)
    assert first.blocks[0].id == second.blocks[0].id


def test_same_input_and_instant_is_deterministic(
    full_fields: dict[str, Any], now: datetime
) -> None:
    a = compose_document(full_fields, now=now)
    b = compose_document(full_fields, now=now)
    assert a.model_dump() == b.model_dump()


def test_display_date_format(now: datetime) -> None:
    assert format_display_date(now) == "January 5, 2025"


# --------------------------------------------------------------------------- #
# Rule passes
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(  # type: ignore[misc]
    "table", [LAYOUT_RULES, FLOW_RULES, GROUP_MEMBERSHIP, HIERARCHY_RULES]
)
def test_rule_tables_cover_every_block_type(table: dict[BlockType, Any]) -> None:
    assert set(table) == set(BlockType)


def test_rule_passes_attach_every_group(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    for block in doc.blocks:
        assert block.layout_rules is not None
        assert block.flow_rules is not None
        assert block.grouping is not None

    first, last = doc.blocks[0], doc.blocks[-1]
    assert first.flow_rules is not None and not first.flow_rules.has_prev
    assert last.flow_rules is not None and not last.flow_rules.has_next
    assert last.flow_rules.anchor_to_bottom

    (client,) = doc.blocks_of_type(BlockType.CLIENT)
    assert client.layout_rules is not None and client.layout_rules.computed_width == "90%"
    (investment,) = doc.blocks_of_type(BlockType.INVESTMENT)
    assert investment.grouping is not None
    assert investment.grouping.group == GroupType.HIGHLIGHT_GROUP


def test_hierarchy_references_blocks_by_id(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)

    assert set(doc.hierarchy) == set(Region)
    referenced = [n.block_id for nodes in doc.hierarchy.values() for n in nodes]
    assert sorted(referenced) == sorted(b.id for b in doc.blocks)
    assert [n.type for n in doc.hierarchy[Region.HEADER]] == [BlockType.HEADER, BlockType.CLIENT]
    assert [n.type for n in doc.hierarchy[Region.HIGHLIGHT]] == [BlockType.INVESTMENT]


def test_keep_together_runs(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    by_id = {b.id: b.type for b in doc.blocks}
    runs = [[by_id[i] for i in run] for run in doc.flow_rules.keep_together_groups]
    assert runs == [
        [BlockType.HEADER, BlockType.CLIENT],
        [BlockType.INVESTMENT],
        [BlockType.FOOTER],
    ]


def test_layout_ready_representation(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    view = create_layout_ready_representation(doc)

    assert view["dimensions"] == {"width": 794, "height": 1123}
    assert [n["type"] for n in view["regions"]["footer"]] == ["footer"]
    assert view["meta"]["client_name"] == "Jane Doe"


def test_layout_view_rejects_dangling_hierarchy_id(now: datetime) -> None:
    doc = compose_document({}, now=now)
    orphaned = doc.model_copy(update={"blocks": doc.blocks[:-1]})
    with pytest.raises(ValueError, match="unknown block"):
        create_layout_ready_representation(orphaned)

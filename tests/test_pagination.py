"""
Tests for the Paginator.

Scope
-----
- No duplication / no loss: concatenating pages reproduces the block list.
- Fit: pages that are not flagged ``overflow`` hold at most ``height``.
- Multi-page output for long proposals, first/last page flags.
- Overflow: oversized content is placed and flagged, never dropped.
- Break rules and the document integration helpers.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from pitchpdf.core.contracts.block import BlockType
from pitchpdf.core.contracts.document import DocumentModel
from pitchpdf.core.contracts.page import PaginationResult
from pitchpdf.engine.composer import compose_document
from pitchpdf.engine.flow import apply_flow
from pitchpdf.engine.layout import apply_layout
from pitchpdf.engine.pagination import (
    NO_SPLIT_BLOCKS,
    add_block_to_page,
    apply_pagination,
    block_fits_on_page,
    can_break_before,
    can_split_block,
    create_multi_page_layout,
    create_page,
    get_page_for_block,
    paginate_by_groups,
    paginate_document,
)


def _flowed(fields: dict[str, Any], now: datetime) -> DocumentModel:
    return apply_flow(apply_layout(compose_document(fields, now=now)))


def _ids(result: PaginationResult) -> list[str]:
    return [b.id for page in result.pages for b in page.blocks]


# --------------------------------------------------------------------------- #
# Core invariants
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("fixture", ["full_fields", "long_fields"])  # type: ignore[misc]
@pytest.mark.parametrize("page_height", [None, 700, 450])  # type: ignore[misc]
def test_no_duplication_no_loss(
    request: pytest.FixtureRequest, now: datetime, fixture: str, page_height: float | None
) -> None:
    doc = _flowed(request.getfixturevalue(fixture), now)
    result = paginate_by_groups(doc, page_height=page_height)
    assert _ids(result) == [b.id for b in doc.blocks]
    assert result.total_blocks == len(doc.blocks)


@pytest.mark.parametrize("page_height", [None, 700, 450])  # type: ignore[misc]
def test_pages_fit_unless_flagged(
    long_fields: dict[str, Any], now: datetime, page_height: float | None
) -> None:
    result = paginate_by_groups(_flowed(long_fields, now), page_height=page_height)
    for page in result.pages:
        used = sum(b.flow.height for b in page.blocks if b.flow)
        assert page.used_height == pytest.approx(used)
        if not page.overflow:
            assert page.used_height <= page.height
    assert result.overflow_pages == [p.number for p in result.pages if p.overflow]


def test_page_offsets_are_page_relative(long_fields: dict[str, Any], now: datetime) -> None:
    result = paginate_by_groups(_flowed(long_fields, now))
    for page in result.pages:
        assert page.blocks[0].page_y == 0
        for block in page.blocks:
            assert block.page_number == page.number


def test_short_proposal_is_single_page(now: datetime) -> None:
    result = paginate_by_groups(_flowed({"clientName": "Ada"}, now))
    assert result.page_count == 1 and result.is_single_page
    (page,) = result.pages
    assert page.is_first and page.is_last


def test_long_proposal_spans_pages(long_fields: dict[str, Any], now: datetime) -> None:
    """Total estimated height above 1123 forces more than one page."""
    doc = _flowed(long_fields, now)
    assert doc.flow_meta is not None and doc.flow_meta.total_height > 1123

    result = paginate_by_groups(doc)

    assert result.page_count > 1
    assert result.is_single_page is False
    assert result.pages[0].is_first and not result.pages[0].is_last
    assert result.pages[-1].is_last and not result.pages[-1].is_first
    assert [p.number for p in result.pages] == list(range(1, result.page_count + 1))


def test_header_and_client_share_a_page(long_fields: dict[str, Any], now: datetime) -> None:
    doc = _flowed(long_fields, now)
    result = paginate_by_groups(doc, page_height=450)
    header = doc.blocks_of_type(BlockType.HEADER)[0]
    client = doc.blocks_of_type(BlockType.CLIENT)[0]
    assert get_page_for_block(result, header.id) == get_page_for_block(result, client.id) == 1


def test_keep_together_group_moves_as_a_unit(full_fields: dict[str, Any], now: datetime) -> None:
    doc = _flowed(full_fields, now)
    (investment,) = doc.blocks_of_type(BlockType.INVESTMENT)
    (footer,) = doc.blocks_of_type(BlockType.FOOTER)

    result = paginate_by_groups(doc, page_height=500)
    investment_page = get_page_for_block(result, investment.id)
    page = result.pages[investment_page - 1] if investment_page else None
    assert page is not None
    # the investment callout never starts mid-way through an overflowing page
    assert not page.overflow or page.blocks[0].id == investment.id
    assert get_page_for_block(result, footer.id) == result.page_count


# --------------------------------------------------------------------------- #
# Overflow
# --------------------------------------------------------------------------- #


def test_oversized_content_is_flagged_not_dropped(now: datetime) -> None:
    """A page shorter than the header still receives header and client."""
    doc = _flowed({}, now)
    result = paginate_by_groups(doc, page_height=200)

    assert _ids(result) == [b.id for b in doc.blocks]
    assert 1 in result.overflow_pages
    first = result.pages[0]
    assert [b.type for b in first.blocks][:2] == [BlockType.HEADER, BlockType.CLIENT]
    assert first.overflow and first.used_height > first.height


def test_no_empty_pages(long_fields: dict[str, Any], now: datetime) -> None:
    for height in (200, 450, 1123):
        result = paginate_by_groups(_flowed(long_fields, now), page_height=height)
        assert all(page.blocks for page in result.pages)


# --------------------------------------------------------------------------- #
# Break rules
# --------------------------------------------------------------------------- #


def test_no_block_type_is_splittable(full_fields: dict[str, Any], now: datetime) -> None:
    doc = _flowed(full_fields, now)
    assert all(not can_split_block(b) for b in doc.blocks)
    assert BlockType.HEADER in NO_SPLIT_BLOCKS and BlockType.SECTION not in NO_SPLIT_BLOCKS


def test_can_break_before_rules(full_fields: dict[str, Any], now: datetime) -> None:
    doc = _flowed(full_fields, now)
    header, client, two_column = doc.blocks[:3]

    assert not can_break_before(header, None)
    assert not can_break_before(client, header)
    assert can_break_before(two_column, client)


def test_block_fits_on_page_is_inclusive() -> None:
    assert block_fits_on_page(300, 300)
    assert not block_fits_on_page(300.5, 300)


def test_add_block_to_page_tracks_fill(now: datetime) -> None:
    header = _flowed({}, now).blocks[0]
    page = add_block_to_page(create_page(1, 794, 300), header)

    assert page.used_height == 280 and page.available_height == 20
    assert page.blocks[0].page_number == 1 and page.blocks[0].page_y == 0
    assert not page.overflow
    assert add_block_to_page(page, header).overflow


# --------------------------------------------------------------------------- #
# Variants and document integration
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize("page_height", [None, 700, 450, 200])  # type: ignore[misc]
def test_block_paginator_keeps_every_block(
    long_fields: dict[str, Any], now: datetime, page_height: float | None
) -> None:
    doc = _flowed(long_fields, now)
    result = paginate_document(doc, page_height=page_height)
    assert _ids(result) == [b.id for b in doc.blocks]
    assert all(page.blocks for page in result.pages)


def test_apply_pagination_annotates_document(long_fields: dict[str, Any], now: datetime) -> None:
    doc = apply_pagination(compose_document(long_fields, now=now))

    assert doc.page_meta is not None
    assert doc.meta.page_count == doc.page_meta.page_count > 1
    assert all(b.page_number is not None and b.page_y is not None for b in doc.blocks)
    pages = [b.page_number for b in doc.blocks]
    assert pages == sorted(pages)


def test_multi_page_layout_view(long_fields: dict[str, Any], now: datetime) -> None:
    doc = _flowed(long_fields, now)
    result = paginate_by_groups(doc)
    view = create_multi_page_layout(doc, result)

    assert view.page_count == result.page_count
    assert view.page_size.height == 1123
    assert [b.id for p in view.pages for b in p.blocks] == _ids(result)
    assert get_page_for_block(view, doc.blocks[-1].id) == view.page_count
    assert get_page_for_block(view, "missing") is None

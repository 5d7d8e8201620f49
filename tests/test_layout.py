"""Tests for the Layout Calculator: box models, insets, margin collapse, columns."""

from __future__ import annotations

from datetime import datetime
from typing import Any

import pytest

from pitchpdf.core.contracts.block import BlockType
from pitchpdf.engine.composer import compose_document
from pitchpdf.engine.layout import (
    BLOCK_MARGINS,
    LayoutContext,
    apply_layout,
    calculate_column_layout,
    calculate_margins,
    calculate_two_column_layout,
    get_alignment_styles,
    with_page_size,
)
from pitchpdf.engine.tokens import BLOCK_TYPOGRAPHY, get_container_style


def test_every_block_gets_a_computed_layout(full_fields: dict[str, Any], now: datetime) -> None:
    doc = apply_layout(compose_document(full_fields, now=now))

    assert all(b.computed_layout is not None for b in doc.blocks)
    assert doc.layout_meta is not None
    assert doc.layout_meta.page_count >= 1
    assert doc.layout_meta.page_width == 794


def test_layout_does_not_mutate_input(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    apply_layout(doc)
    assert all(b.computed_layout is None for b in doc.blocks)
    assert doc.layout_meta is None


def test_padded_and_centered_insets(full_fields: dict[str, Any], now: datetime) -> None:
    doc = apply_layout(compose_document(full_fields, now=now))
    width = doc.layout.width

    (client,) = doc.blocks_of_type(BlockType.CLIENT)
    (investment,) = doc.blocks_of_type(BlockType.INVESTMENT)
    (header,) = doc.blocks_of_type(BlockType.HEADER)
    assert client.computed_layout is not None
    assert investment.computed_layout is not None
    assert header.computed_layout is not None

    assert client.computed_layout.content_width == width - 64
    assert investment.computed_layout.content_width == width - 128
    assert header.computed_layout.content_width == width


def test_positions_increase_down_the_page(full_fields: dict[str, Any], now: datetime) -> None:
    doc = apply_layout(compose_document(full_fields, now=now))
    ys = [b.computed_layout.position.y for b in doc.blocks if b.computed_layout]
    assert ys == sorted(ys)
    assert ys[0] == 0


def test_alternate_background_uses_striped_container(
    full_fields: dict[str, Any], now: datetime
) -> None:
    doc = apply_layout(compose_document(full_fields, now=now))
    (grid,) = doc.blocks_of_type(BlockType.GRID)
    assert grid.computed_layout is not None
    expected = get_container_style(BlockType.GRID, alternate_background=True).background
    assert grid.computed_layout.box_model.background == expected


def test_margin_collapse_works_on_copies(now: datetime) -> None:
    """A divider after a divider loses its top margin; the table is untouched."""
    doc = compose_document({}, now=now)
    divider_like = doc.blocks[0].model_copy(update={"type": BlockType.DIVIDER})

    ctx = LayoutContext(previous_block=divider_like)
    margins = calculate_margins(divider_like, ctx)

    assert margins.top == 0
    assert margins.bottom == BLOCK_MARGINS[BlockType.DIVIDER].bottom
    assert BLOCK_MARGINS[BlockType.DIVIDER].top == 12


def test_first_block_keeps_its_margins(now: datetime) -> None:
    doc = compose_document({"problemStatement": "x"}, now=now)
    (two_col,) = doc.blocks_of_type(BlockType.TWO_COLUMN)
    assert calculate_margins(two_col).top == BLOCK_MARGINS[BlockType.TWO_COLUMN].top


def test_column_layout_splits_width() -> None:
    layout = calculate_column_layout(2, 700, gap=20)
    assert layout.column_width == 340
    assert [c.x for c in layout.columns] == [0, 360]
    assert calculate_two_column_layout(700, gap=20) == layout


def test_column_layout_rejects_zero_columns() -> None:
    with pytest.raises(ValueError):
        calculate_column_layout(0, 700)


def test_alignment_styles() -> None:
    styles = get_alignment_styles("center", "middle")
    assert styles["text-align"] == "center"
    assert styles["align-items"] == "center"
    assert get_alignment_styles("diagonal") == {}


def test_with_page_size_overrides_only_given_bounds(now: datetime) -> None:
    doc = compose_document({}, now=now)
    resized = with_page_size(doc, page_height=600)
    assert (resized.layout.width, resized.layout.height) == (794, 600)
    assert with_page_size(doc) is doc


def test_typography_table_covers_every_block_type() -> None:
    assert set(BLOCK_TYPOGRAPHY) == set(BlockType)
    assert set(BLOCK_MARGINS) == set(BlockType)

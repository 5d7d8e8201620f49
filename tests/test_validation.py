"""Structural validation and JSON round-trip of documents."""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

import pytest
from pydantic import ValidationError

from pitchpdf.engine.composer import compose_document
from pitchpdf.engine.validation import (
    deserialize_document,
    serialize_document,
    validate_document,
)


def _raw(fields: dict[str, Any], now: datetime) -> dict[str, Any]:
    return compose_document(fields, now=now).model_dump(mode="json")


def test_composed_documents_are_valid(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    report = validate_document(doc)
    assert report.valid, report.errors
    assert report.warnings == []
    # the same document as a plain mapping
    assert validate_document(doc.model_dump(mode="json")).valid


def test_empty_mapping_reports_every_missing_section() -> None:
    report = validate_document({})
    assert not report.valid
    for message in (
        "Missing version",
        "Missing hierarchy",
        "Missing layout configuration",
        "Missing document metadata",
        "Missing blocks array",
        "Missing header block",
        "Missing footer block",
    ):
        assert message in report.errors


def test_empty_sections_count_as_present(now: datetime) -> None:
    raw = _raw({}, now)
    raw.update(meta={}, hierarchy={})
    report = validate_document(raw)
    assert "Missing document metadata" not in report.errors
    assert "Missing hierarchy" not in report.errors
    assert report.valid, report.errors

    raw["meta"] = None
    assert validate_document(raw).errors == ["Missing document metadata"]


def test_missing_footer(now: datetime) -> None:
    raw = _raw({}, now)
    raw["blocks"] = [b for b in raw["blocks"] if b["type"] != "footer"]
    report = validate_document(raw)
    assert report.errors == ["Missing footer block"]


def test_second_footer_is_an_error(now: datetime) -> None:
    raw = _raw({}, now)
    extra = {**raw["blocks"][-1], "id": "footer_99_x", "order": 99}
    raw["blocks"].append(extra)
    report = validate_document(raw)
    assert "Expected exactly one footer block, found 2" in report.errors


def test_duplicate_ids_and_order(now: datetime) -> None:
    raw = _raw({}, now)
    raw["blocks"][1]["id"] = raw["blocks"][0]["id"]
    raw["blocks"][2]["order"] = 0
    report = validate_document(raw)

    dup = raw["blocks"][0]["id"]
    assert f"Duplicate block id {dup}" in report.errors
    assert any("does not follow" in e for e in report.errors)


def test_block_without_id_or_type(now: datetime) -> None:
    raw = _raw({}, now)
    del raw["blocks"][1]["id"]
    del raw["blocks"][1]["type"]
    report = validate_document(raw)
    assert "Block at index 1 missing id" in report.errors
    assert "Block at index 1 missing type" in report.errors


def test_warnings_do_not_invalidate(now: datetime) -> None:
    raw = _raw({}, now)
    raw["version"] = "1.0"
    raw["blocks"][1]["type"] = "gallery"
    raw["blocks"][1]["content"] = None
    report = validate_document(raw)

    assert report.valid
    assert len(report.warnings) == 3
    assert any("unknown type 'gallery'" in w for w in report.warnings)
    assert any("has no content" in w for w in report.warnings)
    assert any("differs from current schema" in w for w in report.warnings)


def test_serialize_round_trip(full_fields: dict[str, Any], now: datetime) -> None:
    doc = compose_document(full_fields, now=now)
    text = serialize_document(doc)

    assert json.loads(text)["version"] == doc.version
    restored = deserialize_document(text)
    assert restored.model_dump(mode="json") == doc.model_dump(mode="json")
    assert deserialize_document(json.loads(text)).blocks[0].id == doc.blocks[0].id


def test_deserialize_rejects_bad_payloads() -> None:
    with pytest.raises(json.JSONDecodeError):
        deserialize_document("{not json")
    with pytest.raises(ValidationError):
        deserialize_document({"blocks": "nope"})

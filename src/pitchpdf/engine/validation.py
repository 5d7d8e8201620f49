"""
Structural validation and JSON (de)serialization of documents.

Validation is advisory: the pipeline never calls it. It accepts either a
:class:`DocumentModel` or a raw mapping (e.g. a hand-edited JSON file) and
reports problems as plain strings instead of raising, so that callers can
show every issue at once.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from pitchpdf.core.contracts.block import BlockType
from pitchpdf.core.contracts.document import SCHEMA_VERSION, DocumentModel

_REQUIRED_SECTIONS: tuple[tuple[str, str], ...] = (
    ("version", "Missing version"),
    ("hierarchy", "Missing hierarchy"),
    ("layout", "Missing layout configuration"),
    ("meta", "Missing document metadata"),
)


class ValidationReport(BaseModel):
    """Outcome of :func:`validate_document`."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def validate_document(doc: DocumentModel | Mapping[str, Any]) -> ValidationReport:
    """
    Check the structural invariants of a document.

    Errors
        missing top-level sections, no blocks list, no header block, not
        exactly one footer block, blocks without id or type, duplicate ids,
        non-increasing ``order`` values.
    Warnings
        blocks without content, unknown block types, a schema version other
        than the current one.
    """
    data: Mapping[str, Any] = doc.model_dump(mode="json") if isinstance(doc, DocumentModel) else doc
    errors: list[str] = []
    warnings: list[str] = []

    for key, message in _REQUIRED_SECTIONS:
        if data.get(key) is None:
            errors.append(message)

    blocks = data.get("blocks")
    if not isinstance(blocks, list):
        errors.append("Missing blocks array")
        blocks = []

    types = [b.get("type") for b in blocks if isinstance(b, Mapping)]
    if BlockType.HEADER.value not in types:
        errors.append("Missing header block")
    footers = types.count(BlockType.FOOTER.value)
    if footers == 0:
        errors.append("Missing footer block")
    elif footers > 1:
        errors.append(f"Expected exactly one footer block, found {footers}")

    known = {t.value for t in BlockType}
    previous_order: int | None = None
    for index, block in enumerate(blocks):
        if not isinstance(block, Mapping):
            errors.append(f"Block at index {index} is not an object")
            continue
        block_id = block.get("id")
        if not block_id:
            errors.append(f"Block at index {index} missing id")
        block_type = block.get("type")
        if not block_type:
            errors.append(f"Block at index {index} missing type")
        elif block_type not in known:
            warnings.append(f"Block {block_id} has unknown type {block_type!r}")
        if block.get("content") is None:
            warnings.append(f"Block {block_id} has no content")
        order = block.get("order")
        if isinstance(order, int):
            if previous_order is not None and order <= previous_order:
                errors.append(f"Block {block_id} order {order} does not follow {previous_order}")
            previous_order = order

    duplicates = sorted(
        bid for bid, n in Counter(b.get("id") for b in blocks if isinstance(b, Mapping)).items()
        if bid and n > 1
    )
    for bid in duplicates:
        errors.append(f"Duplicate block id {bid}")

    version = data.get("version")
    if version and version != SCHEMA_VERSION:
        warnings.append(
            f"Document version {version} differs from current schema {SCHEMA_VERSION}"
        )

    return ValidationReport(valid=not errors, errors=errors, warnings=warnings)


def serialize_document(doc: DocumentModel) -> str:
    """Serialize ``doc`` as indented JSON."""
    return doc.model_dump_json(indent=2)


def deserialize_document(payload: str | bytes | Mapping[str, Any]) -> DocumentModel:
    """
    Parse a document from JSON text or an already-decoded mapping.

    Raises
    ------
    pydantic.ValidationError
        If the payload does not match the document schema.
    json.JSONDecodeError
        If ``payload`` is text that is not valid JSON.
    """
    if isinstance(payload, str | bytes):
        return DocumentModel.model_validate(json.loads(payload))
    return DocumentModel.model_validate(dict(payload))


__all__ = [
    "ValidationReport",
    "deserialize_document",
    "serialize_document",
    "validate_document",
]

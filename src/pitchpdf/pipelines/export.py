"""
Export boundary: entitlement check, credit consumption, render, rasterize.

The engine never knows about users or billing. This module wraps
:func:`run_pipeline` with the checks an export endpoint performs before
handing the HTML to a PDF rasterizer:

1. a user id is required;
2. the :class:`EntitlementGate` decides whether the user may export, and why
   (active subscription, remaining credits);
3. a credit is consumed *before* rendering when the entitlement comes from
   credits;
4. the pipeline renders the proposal and, when a :class:`Rasterizer` is
   supplied, its bytes are attached to the artifact.

Expected failures come back as ``Err(str)``; only defects raise.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal, Protocol

from pydantic import BaseModel, ConfigDict

from pitchpdf.core.contracts.fields import ProposalFields
from pitchpdf.core.result import Result, err, ok
from pitchpdf.core.settings import get_logger

from .proposal import run_pipeline

log = get_logger(__name__)

_UNSAFE_FILENAME = re.compile(r"[^\w-]+")

EntitlementReason = Literal["subscription", "credits", "none", "error"]


class Entitlement(BaseModel):
    """Answer of an :class:`EntitlementGate` for one user."""

    model_config = ConfigDict(frozen=True)

    allowed: bool
    reason: EntitlementReason
    details: str | None = None


class EntitlementGate(Protocol):
    """External entitlement store (subscriptions and export credits)."""

    def check(self, user_id: str) -> Entitlement: ...

    def consume_credit(self, user_id: str) -> bool: ...


class Rasterizer(Protocol):
    """Converts a complete HTML document into PDF bytes."""

    def rasterize(self, html: str, *, width: float, height: float) -> bytes: ...


class ExportArtifact(BaseModel):
    """Result of a successful export."""

    model_config = ConfigDict(frozen=True)

    filename: str
    html: str
    page_count: int
    overflow_pages: list[int]
    pdf: bytes | None = None


def export_filename(fields: ProposalFields) -> str:
    """
    ``proposal-<client>.pdf``, where every run of characters other than
    letters, digits, ``_`` and ``-`` becomes a single dash.
    """
    client = _UNSAFE_FILENAME.sub("-", fields.client_name or "").strip("-")
    client = client or "client"
    return f"proposal-{client}.pdf"


def export_proposal(
    fields: ProposalFields | Mapping[str, Any] | None,
    *,
    user_id: str | None,
    gate: EntitlementGate,
    rasterizer: Rasterizer | None = None,
    now: datetime | None = None,
) -> Result[ExportArtifact, str]:
    """
    Gate, render and optionally rasterize a proposal for ``user_id``.

    Returns
    -------
    Result[ExportArtifact, str]
        ``Err`` with one of ``"User ID required"``, ``"Payment required"``,
        ``"System error: ..."``, ``"Failed to consume credit"`` or
        ``"Failed to generate PDF: ..."``.
    """
    if not user_id:
        return err("User ID required")

    entitlement = gate.check(user_id)
    if not entitlement.allowed:
        if entitlement.reason == "error":
            return err(f"System error: {entitlement.details or 'Unknown error'}")
        return err("Payment required")

    if entitlement.reason == "credits" and not gate.consume_credit(user_id):
        return err("Failed to consume credit")

    record = ProposalFields.from_mapping(fields)
    result = run_pipeline(record, now=now)
    pagination = result["pagination"]

    pdf: bytes | None = None
    if rasterizer is not None:
        page = result["output"].page_size
        try:
            pdf = rasterizer.rasterize(result["html"], width=page.width, height=page.height)
        except (OSError, RuntimeError, ValueError) as exc:
            log.error("Rasterizer failed for user %s: %s", user_id, exc)
            return err(f"Failed to generate PDF: {exc}")

    log.info(
        "Exported %d page(s) for user %s (%s)",
        pagination.page_count,
        user_id,
        entitlement.reason,
    )
    return ok(
        ExportArtifact(
            filename=export_filename(record),
            html=result["html"],
            page_count=pagination.page_count,
            overflow_pages=pagination.overflow_pages,
            pdf=pdf,
        )
    )


__all__ = [
    "Entitlement",
    "EntitlementGate",
    "ExportArtifact",
    "Rasterizer",
    "export_filename",
    "export_proposal",
]

"""
Tests for the export boundary.

The entitlement store and the rasterizer are external services; they are
replaced with small in-memory fakes that record how they were called.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

import pytest

from pitchpdf.core.contracts.fields import ProposalFields
from pitchpdf.pipelines.export import (
    Entitlement,
    ExportArtifact,
    export_filename,
    export_proposal,
)


@dataclass
class FakeGate:
    entitlement: Entitlement
    consume_ok: bool = True
    consumed: list[str] = field(default_factory=list)
    checked: list[str] = field(default_factory=list)

    def check(self, user_id: str) -> Entitlement:
        self.checked.append(user_id)
        return self.entitlement

    def consume_credit(self, user_id: str) -> bool:
        self.consumed.append(user_id)
        return self.consume_ok


@dataclass
class FakeRasterizer:
    fail_with: Exception | None = None
    calls: list[tuple[float, float]] = field(default_factory=list)

    def rasterize(self, html: str, *, width: float, height: float) -> bytes:
        self.calls.append((width, height))
        if self.fail_with is not None:
            raise self.fail_with
        return b"%PDF-1.7 " + html[:15].encode()


SUBSCRIBED = Entitlement(allowed=True, reason="subscription")
CREDITS = Entitlement(allowed=True, reason="credits")


def test_user_id_is_required(full_fields: dict[str, Any]) -> None:
    gate = FakeGate(SUBSCRIBED)
    result = export_proposal(full_fields, user_id="", gate=gate)
    assert result.is_err() and result.unwrap_err() == "User ID required"
    assert gate.checked == []


@pytest.mark.parametrize(  # type: ignore[misc]
    ("entitlement", "message"),
    [
        (Entitlement(allowed=False, reason="none"), "Payment required"),
        (Entitlement(allowed=False, reason="error", details="db down"), "System error: db down"),
        (Entitlement(allowed=False, reason="error"), "System error: Unknown error"),
    ],
)
def test_denied_entitlements(
    full_fields: dict[str, Any], entitlement: Entitlement, message: str
) -> None:
    gate = FakeGate(entitlement)
    result = export_proposal(full_fields, user_id="u1", gate=gate)
    assert result.unwrap_err() == message
    assert gate.consumed == []


def test_subscription_does_not_consume_credit(
    full_fields: dict[str, Any], now: datetime
) -> None:
    gate = FakeGate(SUBSCRIBED)
    result = export_proposal(full_fields, user_id="u1", gate=gate, now=now)

    artifact = result.unwrap()
    assert isinstance(artifact, ExportArtifact)
    assert gate.consumed == []
    assert artifact.filename == "proposal-Jane-Doe.pdf"
    assert artifact.html.startswith("<!DOCTYPE html>")
    assert artifact.pdf is None
    assert artifact.overflow_pages == []


def test_credits_are_consumed_once(full_fields: dict[str, Any], now: datetime) -> None:
    gate = FakeGate(CREDITS)
    result = export_proposal(full_fields, user_id="u1", gate=gate, now=now)
    assert result.is_ok()
    assert gate.consumed == ["u1"]


def test_failed_credit_consumption(full_fields: dict[str, Any]) -> None:
    gate = FakeGate(CREDITS, consume_ok=False)
    rasterizer = FakeRasterizer()
    result = export_proposal(full_fields, user_id="u1", gate=gate, rasterizer=rasterizer)
    assert result.unwrap_err() == "Failed to consume credit"
    assert rasterizer.calls == []


def test_rasterizer_receives_page_size(full_fields: dict[str, Any], now: datetime) -> None:
    rasterizer = FakeRasterizer()
    result = export_proposal(
        full_fields, user_id="u1", gate=FakeGate(SUBSCRIBED), rasterizer=rasterizer, now=now
    )
    artifact = result.unwrap()

    assert rasterizer.calls == [(794, 1123)]
    assert artifact.pdf is not None and artifact.pdf.startswith(b"%PDF")


def test_rasterizer_failure_is_reported(full_fields: dict[str, Any]) -> None:
    rasterizer = FakeRasterizer(fail_with=RuntimeError("browser crashed"))
    result = export_proposal(
        full_fields, user_id="u1", gate=FakeGate(SUBSCRIBED), rasterizer=rasterizer
    )
    assert result.unwrap_err() == "Failed to generate PDF: browser crashed"


def test_export_filename_defaults() -> None:
    assert export_filename(ProposalFields()) == "proposal-client.pdf"
    assert export_filename(ProposalFields(client_name=" Ada  Lovelace ")) == (
        "proposal-Ada-Lovelace.pdf"
    )


@pytest.mark.parametrize(  # type: ignore[misc]
    ("client", "expected"),
    [
        ("../../etc/x", "proposal-etc-x.pdf"),
        ("Acme, Inc.", "proposal-Acme-Inc.pdf"),
        ("Zoë_Studio", "proposal-Zoë_Studio.pdf"),
        ("///", "proposal-client.pdf"),
    ],
)
def test_export_filename_stays_a_plain_name(client: str, expected: str) -> None:
    assert export_filename(ProposalFields(client_name=client)) == expected

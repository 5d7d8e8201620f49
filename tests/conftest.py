"""Shared fixtures for the pitchpdf test-suite."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import UTC, datetime
from typing import Any

import pytest

from pitchpdf.core.settings import load_settings


@pytest.fixture(autouse=True)  # type: ignore[misc]
def _fresh_settings() -> Iterator[None]:
    """Rebuild settings around every test so env overrides never leak."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture  # type: ignore[misc]
def now() -> datetime:
    """A fixed composition instant: ids and dates become reproducible."""
    return datetime(2025, 1, 5, 12, 0, tzinfo=UTC)


@pytest.fixture  # type: ignore[misc]
def full_fields() -> dict[str, Any]:
    """Every form field filled in, camelCase keys as sent by the form layer."""
    return {
        "clientName": "Jane Doe",
        "clientCompany": "Acme Corp",
        "projectTitle": "Website Redesign",
        "problemStatement": "The current site is slow and hard to update.",
        "proposedSolution": "A static-first rebuild with a headless CMS.",
        "scopeOfWork": "Design\nDevelopment\nTesting",
        "timeline": "Weeks 1-2: discovery\nWeeks 3-6: build",
        "pricing": "$10,000",
        "terms": "50% upfront, 50% on delivery.",
        "contactInfo": "Sam Lee\nStudio North\nsam@studionorth.example",
    }


@pytest.fixture  # type: ignore[misc]
def long_fields(full_fields: dict[str, Any]) -> dict[str, Any]:
    """Enough scope, timeline and terms text to spill past one A4 page."""
    return {
        **full_fields,
        "scopeOfWork": "\n".join(f"Deliverable {i}" for i in range(1, 11)),
        "timeline": "\n".join(f"Phase step {i}" for i in range(1, 9)),
        "terms": "Payment is due within thirty days of invoice. " * 60,
    }

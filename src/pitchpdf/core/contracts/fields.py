"""Flat proposal input record handed over by the form layer.

Every field is an optional string. The form layer sends camelCase keys
(``clientName``), Python callers may use snake_case (``client_name``); both
are accepted. Unknown keys are ignored.

Malformed values are recovered locally: a non-string value, or the empty
string, is stored as ``None`` and the Composer treats the field as absent.
Whitespace-only text is kept; multi-line fields drop blank lines later in
:func:`split_lines`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ProposalFields(BaseModel):
    """Proposal form values consumed by :func:`pitchpdf.engine.composer.compose_document`."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    client_name: str | None = Field(default=None, description="Contact person at the client.")
    client_company: str | None = Field(default=None, description="Client organisation.")
    project_title: str | None = Field(default=None, description="Headline of the proposal.")
    problem_statement: str | None = Field(default=None, description="'The Challenge' column.")
    proposed_solution: str | None = Field(default=None, description="'Our Solution' column.")
    scope_of_work: str | None = Field(
        default=None, description="Newline-separated deliverables; one grid item per line."
    )
    timeline: str | None = Field(
        default=None, description="Newline-separated phases; one timeline phase per line."
    )
    pricing: str | None = Field(default=None, description="Free-text total investment.")
    terms: str | None = Field(default=None, description="Terms & conditions body.")
    contact_info: str | None = Field(
        default=None, description="Multi-line 'Prepared By' contact block."
    )

    @field_validator("*", mode="before")
    @classmethod
    def _absent_unless_text(cls, v: Any) -> str | None:
        """Treat non-string values and the empty string as absent."""
        if not isinstance(v, str) or v == "":
            return None
        return v

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | ProposalFields | None) -> ProposalFields:
        """Coerce an arbitrary key-value record into :class:`ProposalFields`."""
        if isinstance(data, ProposalFields):
            return data
        if data is None:
            return cls()
        return cls.model_validate(dict(data))


def split_lines(text: str | None) -> list[str]:
    """Split a multi-line field on ``\\n`` and drop blank lines.

    Returned lines are stripped of surrounding whitespace.
    """
    if not text:
        return []
    return [line.strip() for line in text.split("\n") if line.strip()]


__all__ = ["ProposalFields", "split_lines"]

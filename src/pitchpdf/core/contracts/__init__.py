"""Pydantic contracts shared by the pipeline stages.

- ``fields``   : :class:`ProposalFields` input record.
- ``block``    : :class:`Block` and its vocabularies and stage-owned field groups.
- ``document`` : :class:`DocumentModel` root aggregate, flow groups, metadata.
- ``page``     : :class:`Page` and pagination results.
- ``render``   : rendered fragments and :class:`RenderOutput`.
"""

from __future__ import annotations

from .block import Block, BlockType, ContentType, Emphasis, LayoutHint
from .document import SCHEMA_VERSION, DocumentModel, FlowGroup, Region
from .fields import ProposalFields
from .page import Page, PaginationResult
from .render import RenderOutput

__all__ = [
    "SCHEMA_VERSION",
    "Block",
    "BlockType",
    "ContentType",
    "DocumentModel",
    "Emphasis",
    "FlowGroup",
    "LayoutHint",
    "Page",
    "PaginationResult",
    "ProposalFields",
    "Region",
    "RenderOutput",
]

"""Render contracts: markup fragments and the assembled render output."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from .block import BlockType
from .page import Dimensions


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class RenderedBlock(_Frozen):
    """Markup and scoped stylesheet fragment for one block."""

    id: str
    type: BlockType
    html: str
    styles: str = ""


class RenderedPage(_Frozen):
    number: int
    is_first: bool
    is_last: bool
    dimensions: Dimensions
    blocks: list[RenderedBlock]


class RenderMeta(_Frozen):
    client_name: str
    project_title: str
    page_count: int
    generated_at: datetime


class PageSize(_Frozen):
    width: float
    height: float
    format: str = "A4"


class RenderOutput(_Frozen):
    """Everything a rasterizer needs: per-page fragments plus global styles."""

    version: str = "1.0"
    meta: RenderMeta
    page_size: PageSize
    pages: list[RenderedPage] = Field(default_factory=list)
    styles: str


__all__ = ["PageSize", "RenderMeta", "RenderOutput", "RenderedBlock", "RenderedPage"]

"""End-to-end pipelines built on the engine stages and the renderer."""

from __future__ import annotations

from .export import export_proposal
from .proposal import PipelineResult, run_pipeline

__all__ = ["PipelineResult", "export_proposal", "run_pipeline"]

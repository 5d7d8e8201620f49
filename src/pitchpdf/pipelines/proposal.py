"""
Proposal pipeline: from flat form fields to a paginated HTML document.

Flow Overview
-------------
1. **compose**  : :func:`compose_document` builds the ordered block list,
   rule passes and region hierarchy.
2. **layout**   : :func:`apply_layout` attaches box models.
3. **flow**     : :func:`apply_flow` estimates heights and forms flow groups.
4. **paginate** : :func:`paginate_by_groups` places blocks on pages; the
   placements are copied back onto the document.
5. **render**   : :func:`render_paginated` turns pages into markup and
   :func:`generate_html_document` assembles the final HTML string.

Every stage leaves a JSON-safe summary on a :class:`PipelineTrace`, so a run
can be inspected (or written to disk with :class:`TraceWriter`) without
re-running it. The stages themselves are pure; the trace is the only state
the pipeline carries between them.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from typing import Any, TypedDict

from pitchpdf.core.contracts.document import DocumentModel
from pitchpdf.core.contracts.fields import ProposalFields
from pitchpdf.core.contracts.page import PaginationResult
from pitchpdf.core.contracts.render import RenderOutput
from pitchpdf.core.settings import get_logger
from pitchpdf.core.tracing import PipelineTrace
from pitchpdf.engine.composer import compose_document
from pitchpdf.engine.flow import apply_flow
from pitchpdf.engine.layout import apply_layout, with_page_size
from pitchpdf.engine.pagination import attach_pagination, paginate_by_groups
from pitchpdf.rendering.renderer import generate_html_document, render_paginated

log = get_logger(__name__)


# --------------------------------------------------------------------------- #
# Public result types
# --------------------------------------------------------------------------- #


class PipelineResult(TypedDict):
    """Structured payload returned by :func:`run_pipeline`.

    Attributes
    ----------
    document:
        Fully annotated document (layout, flow and page placements).
    pagination:
        Pages with their blocks, overflow flags and page count.
    output:
        Rendered page fragments plus global styles.
    html:
        Complete ``<!DOCTYPE html>`` document for a rasterizer.
    trace:
        One snapshot per stage, in execution order.
    """

    document: DocumentModel
    pagination: PaginationResult
    output: RenderOutput
    html: str
    trace: PipelineTrace


# --------------------------------------------------------------------------- #
# Stage summaries
# --------------------------------------------------------------------------- #


def _compose_summary(doc: DocumentModel) -> dict[str, Any]:
    return {
        "block_count": doc.meta.block_count,
        "word_count": doc.meta.word_count,
        "block_types": [b.type for b in doc.blocks],
        "has_timeline": doc.meta.has_timeline,
        "has_pricing": doc.meta.has_pricing,
    }


def _flow_summary(doc: DocumentModel) -> dict[str, Any]:
    meta = doc.flow_meta
    if meta is None:
        return {}
    return {
        "total_height": meta.total_height,
        "estimated_pages": meta.page_count,
        "groups": [
            {"id": g.id, "type": g.type, "blocks": g.block_count, "height": g.total_height}
            for g in meta.groups
        ],
    }


def _pagination_summary(result: PaginationResult) -> dict[str, Any]:
    return {
        "page_count": result.page_count,
        "overflow_pages": result.overflow_pages,
        "pages": {
            str(page.number): [b.id for b in page.blocks] for page in result.pages
        },
    }


# --------------------------------------------------------------------------- #
# Entry point
# --------------------------------------------------------------------------- #


def run_pipeline(
    fields: ProposalFields | Mapping[str, Any] | None,
    *,
    now: datetime | None = None,
    page_height: float | None = None,
    page_width: float | None = None,
    trace: PipelineTrace | None = None,
) -> PipelineResult:
    """
    Run every stage on ``fields`` and return all intermediate artifacts.

    Parameters
    ----------
    fields:
        Proposal form values (camelCase or snake_case keys). Absent or blank
        values fall back to placeholders or drop the optional block.
    now:
        Fixed composition instant; makes ids, dates and the render timestamp
        reproducible.
    page_height, page_width:
        Page bounds override. Defaults come from settings (A4).
    trace:
        Recorder to append stage snapshots to. A fresh one is created when
        omitted.

    Returns
    -------
    PipelineResult
        Document, pagination, render output, HTML and trace.
    """
    record = ProposalFields.from_mapping(fields)
    recorder = trace if trace is not None else PipelineTrace()

    doc = with_page_size(compose_document(record, now=now), page_height, page_width)
    recorder.record("compose", _compose_summary(doc))

    doc = apply_layout(doc)
    recorder.record("layout", doc.layout_meta.model_dump() if doc.layout_meta else {})

    doc = apply_flow(doc)
    recorder.record("flow", _flow_summary(doc))

    pagination = paginate_by_groups(doc)
    doc = attach_pagination(doc, pagination)
    recorder.record("paginate", _pagination_summary(pagination))

    output = render_paginated(
        doc,
        pagination,
        client_name=record.client_name,
        project_title=record.project_title,
        generated_at=now,
    )
    html = generate_html_document(output)
    recorder.record("render", {"page_count": output.meta.page_count, "html_length": len(html)})

    log.info(
        "Pipeline finished: %d block(s), %d page(s), overflow on %s",
        pagination.total_blocks,
        pagination.page_count,
        pagination.overflow_pages or "none",
    )
    return {
        "document": doc,
        "pagination": pagination,
        "output": output,
        "html": html,
        "trace": recorder,
    }


__all__ = ["PipelineResult", "run_pipeline"]

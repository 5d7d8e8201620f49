"""Stage tracing: in-memory recorder, immutable snapshots and a JSON writer."""

from __future__ import annotations

from .recorder import PipelineTrace
from .snapshot import TraceSnapshot
from .storage import TraceWriter

__all__ = ["PipelineTrace", "TraceSnapshot", "TraceWriter"]

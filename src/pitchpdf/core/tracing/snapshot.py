"""
Trace snapshot record.

A snapshot is the JSON-safe summary a pipeline stage leaves behind (block
counts, heights, page assignments). Timestamps are stored as ISO-8601
strings so the writer can dump snapshots without custom encoders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class TraceSnapshot:
    """
    Immutable record of one pipeline stage.

    Attributes
    ----------
    timestamp : str
        UTC capture time, e.g. ``"2025-11-12T02:02:37.104Z"``.
    revision : int
        1-based position of the snapshot within its trace.
    note : str | None
        Stage label such as ``"compose"`` or ``"paginate"``.
    data : dict[str, Any]
        JSON-safe stage summary.
    """

    timestamp: str
    revision: int
    note: str | None
    data: dict[str, Any] = field(default_factory=dict)

"""
In-memory recorder for pipeline stage snapshots.

:class:`PipelineTrace` is handed to :func:`pitchpdf.pipelines.proposal.run_pipeline`,
which calls :meth:`PipelineTrace.record` once per stage. Values are converted
to JSON-safe structures at capture time so later stages cannot alter what an
earlier snapshot shows.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel

from .snapshot import TraceSnapshot


def _jsonify(value: Any) -> Any:
    """
    Return a JSON-safe copy of ``value``.

    - primitives are returned as-is
    - pydantic models are dumped in JSON mode
    - mappings get ``str`` keys, lists and tuples become lists
    - anything else falls back to ``repr``
    """
    if value is None or isinstance(value, bool | int | float | str):
        return value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return {str(k): _jsonify(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_jsonify(v) for v in value]
    return repr(value)


def _utc_stamp() -> str:
    return datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


class PipelineTrace:
    """Ordered, revisioned list of stage snapshots for one pipeline run."""

    __slots__ = ("_snapshots",)

    def __init__(self) -> None:
        self._snapshots: list[TraceSnapshot] = []

    def record(self, note: str, data: Mapping[str, Any] | None = None) -> TraceSnapshot:
        """Capture ``data`` under ``note`` and return the new snapshot."""
        snap = TraceSnapshot(
            timestamp=_utc_stamp(),
            revision=len(self._snapshots) + 1,
            note=note,
            data=_jsonify(dict(data or {})),
        )
        self._snapshots.append(snap)
        return snap

    def snapshots(self) -> tuple[TraceSnapshot, ...]:
        return tuple(self._snapshots)

    def notes(self) -> list[str | None]:
        """Stage labels in capture order."""
        return [s.note for s in self._snapshots]

    def latest(self) -> TraceSnapshot | None:
        return self._snapshots[-1] if self._snapshots else None

    def __len__(self) -> int:  # pragma: no cover - trivial
        return len(self._snapshots)


__all__ = ["PipelineTrace"]

"""Disk-backed writer for pipeline trace snapshots.

- Default directory: ``settings.trace_dir`` (``PITCHPDF_TRACE_DIR``) or ``artifacts/trace/``
- Filename pattern:  ``YYYYmmddTHHMMSSmmmZ_rev{rev:06d}_{note}.json``
- Content:           a JSON object mirroring :class:`TraceSnapshot`

Usage
-----
>>> writer = TraceWriter(Path("/tmp/trace"))
>>> paths = writer.write_all(trace.snapshots())
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable
from dataclasses import asdict
from pathlib import Path

from pitchpdf.core.settings import load_settings

from .snapshot import TraceSnapshot

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def _default_dir() -> Path:
    """Return the configured trace directory, or ``artifacts/trace``."""
    root = load_settings().trace_dir
    return Path(root) if root else Path("artifacts") / "trace"


class TraceWriter:
    """Persist trace snapshots to disk as JSON files."""

    def __init__(self, base_dir: Path | None = None) -> None:
        self.base_dir: Path = base_dir if base_dir is not None else _default_dir()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def write(self, snap: TraceSnapshot) -> Path:
        """Write ``snap`` to disk and return the created file path."""
        safe_ts = snap.timestamp.replace("-", "").replace(":", "").replace(".", "")
        suffix = f"_{_UNSAFE.sub('-', snap.note)}" if snap.note else ""
        path = self.base_dir / f"{safe_ts}_rev{snap.revision:06d}{suffix}.json"

        with path.open("w", encoding="utf-8") as f:
            json.dump(asdict(snap), f, ensure_ascii=False, indent=2)
            f.write("\n")
        return path

    def write_all(self, snaps: Iterable[TraceSnapshot]) -> list[Path]:
        return [self.write(s) for s in snaps]


__all__ = ["TraceWriter"]

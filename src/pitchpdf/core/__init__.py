"""Core package for pitchpdf: settings, result type, contracts and tracing.

Typical imports:
    from pitchpdf.core.settings import load_settings, get_logger
    from pitchpdf.core.contracts.document import DocumentModel
"""

from __future__ import annotations

__all__ = ["__doc__"]

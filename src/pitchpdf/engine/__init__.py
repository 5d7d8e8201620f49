"""Pipeline stages: Composer, Layout Calculator, Flow Engine, Paginator.

Each stage is a pure function over frozen :class:`~pitchpdf.core.contracts.DocumentModel`
values; :mod:`.tokens` holds the shared design tokens and :mod:`.validation`
the advisory structural checks.
"""

from __future__ import annotations

from .composer import compose_document
from .flow import apply_flow
from .layout import apply_layout
from .pagination import apply_pagination, paginate_by_groups
from .validation import validate_document

__all__ = [
    "apply_flow",
    "apply_layout",
    "apply_pagination",
    "compose_document",
    "paginate_by_groups",
    "validate_document",
]

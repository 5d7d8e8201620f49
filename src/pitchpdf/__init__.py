"""pitchpdf: proposal document composition and pagination.

The package turns a flat record of proposal fields into a paginated,
render-ready document model and a self-contained HTML string:

    compose -> layout -> flow -> paginate -> render

The stages live in :mod:`pitchpdf.engine`, markup generation in
:mod:`pitchpdf.rendering`, and traced end-to-end runs in
:mod:`pitchpdf.pipelines`.
"""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.2.0"

"""
Design tokens shared by layout, flow and rendering.

Spacing follows a 4px base unit; typography and color tokens feed both the
height heuristics (font size, line height) and the generated stylesheets.
Everything here is constant data; functions only look values up.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from pitchpdf.core.contracts.block import BlockType
from pitchpdf.core.settings import A4_HEIGHT, A4_WIDTH

# --------------------------------------------------------------------------- #
# Spacing
# --------------------------------------------------------------------------- #

SPACING_UNIT: Final = 4

SPACING: Final[dict[str, int]] = {
    "none": 0,
    "xxs": SPACING_UNIT,
    "xs": SPACING_UNIT * 2,
    "sm": SPACING_UNIT * 3,
    "md": SPACING_UNIT * 4,
    "lg": SPACING_UNIT * 6,
    "xl": SPACING_UNIT * 8,
    "xxl": SPACING_UNIT * 10,
    "xxxl": SPACING_UNIT * 12,
    "section": SPACING_UNIT * 16,
    "hero": SPACING_UNIT * 20,
}


# --------------------------------------------------------------------------- #
# Typography
# --------------------------------------------------------------------------- #

FONT_STACK: Final = "'Inter', system-ui, -apple-system, sans-serif"


@dataclass(frozen=True, slots=True)
class TypographyStyle:
    font_size: float
    font_weight: int
    line_height: float
    letter_spacing: float
    color: str
    text_transform: str | None = None
    font_family: str = FONT_STACK


TYPOGRAPHY: Final[dict[str, TypographyStyle]] = {
    "hero": TypographyStyle(42, 700, 1.1, -0.02, "#ffffff"),
    "h1": TypographyStyle(32, 700, 1.2, -0.01, "#1a1a2e"),
    "h2": TypographyStyle(24, 600, 1.3, -0.005, "#1a1a2e"),
    "h3": TypographyStyle(20, 600, 1.4, 0, "#1a1a2e"),
    "h4": TypographyStyle(16, 600, 1.4, 0, "#1a1a2e"),
    "body": TypographyStyle(14, 400, 1.6, 0, "#4a4a6a"),
    "body_large": TypographyStyle(16, 400, 1.6, 0, "#4a4a6a"),
    "caption": TypographyStyle(12, 500, 1.4, 0.02, "#8a8aaa", "uppercase"),
    "label": TypographyStyle(11, 600, 1.3, 0.05, "#6a6a8a", "uppercase"),
    "badge": TypographyStyle(10, 700, 1, 0.1, "#ffffff", "uppercase"),
}


def get_typography(level: str) -> TypographyStyle:
    """Return the typography style for ``level``; unknown levels map to ``body``."""
    return TYPOGRAPHY.get(level, TYPOGRAPHY["body"])


BLOCK_TYPOGRAPHY: Final[dict[BlockType, dict[str, str]]] = {
    BlockType.HEADER: {"title": "hero", "subtitle": "body_large", "badge": "badge"},
    BlockType.CLIENT: {"label": "label", "name": "h2", "company": "body"},
    BlockType.SECTION: {"title": "h2", "body": "body"},
    BlockType.TWO_COLUMN: {"title": "h3", "body": "body"},
    BlockType.GRID: {"title": "h2", "index": "caption", "content": "body"},
    BlockType.TIMELINE: {"title": "h2", "phase": "label", "content": "body"},
    BlockType.INVESTMENT: {"label": "label", "amount": "h1"},
    BlockType.FOOTER: {"label": "label", "contact": "body", "brand": "caption"},
    BlockType.DIVIDER: {},
    BlockType.SPACER: {},
}


# --------------------------------------------------------------------------- #
# Page and container geometry
# --------------------------------------------------------------------------- #

PAGE_WIDTH: Final = A4_WIDTH
PAGE_HEIGHT: Final = A4_HEIGHT
PAGE_DPI: Final = 96

PADDED_INSET: Final = SPACING["xl"]
CENTERED_INSET: Final = SPACING["section"]


# --------------------------------------------------------------------------- #
# Color, shadow, radius
# --------------------------------------------------------------------------- #

COLORS: Final[dict[str, str]] = {
    "primary": "#6366f1",
    "primary_dark": "#4f46e5",
    "primary_light": "#818cf8",
    "accent": "#10b981",
    "accent_dark": "#059669",
    "background": "#ffffff",
    "background_alt": "#f8fafc",
    "background_dark": "#1a1a2e",
    "text_primary": "#1a1a2e",
    "text_secondary": "#4a4a6a",
    "text_muted": "#8a8aaa",
    "text_inverse": "#ffffff",
    "border": "#e2e8f0",
    "border_light": "#f1f5f9",
}

SHADOWS: Final[dict[str, str]] = {
    "none": "none",
    "sm": "0 1px 2px rgba(0, 0, 0, 0.05)",
    "md": "0 4px 6px -1px rgba(0, 0, 0, 0.1)",
    "lg": "0 10px 15px -3px rgba(0, 0, 0, 0.1)",
    "xl": "0 20px 25px -5px rgba(0, 0, 0, 0.1)",
    "inner": "inset 0 2px 4px rgba(0, 0, 0, 0.05)",
}

RADIUS: Final[dict[str, int]] = {"none": 0, "sm": 4, "md": 8, "lg": 12, "xl": 16, "full": 9999}


@dataclass(frozen=True, slots=True)
class ContainerStyle:
    background: str
    border_radius: int
    shadow: str
    padding: int


CONTAINERS: Final[dict[str, ContainerStyle]] = {
    "card": ContainerStyle(COLORS["background"], RADIUS["lg"], SHADOWS["md"], SPACING["lg"]),
    "panel": ContainerStyle(COLORS["background_alt"], RADIUS["md"], SHADOWS["none"], SPACING["lg"]),
    "highlight": ContainerStyle(
        f"linear-gradient(135deg, {COLORS['primary']} 0%, {COLORS['primary_dark']} 100%)",
        RADIUS["lg"],
        SHADOWS["lg"],
        SPACING["xl"],
    ),
    "hero": ContainerStyle(
        f"linear-gradient(135deg, {COLORS['background_dark']} 0%, #2d2d44 100%)",
        RADIUS["none"],
        SHADOWS["none"],
        SPACING["hero"],
    ),
    "section": ContainerStyle("transparent", RADIUS["none"], SHADOWS["none"], SPACING["lg"]),
    "section_alt": ContainerStyle(
        COLORS["background_alt"], RADIUS["none"], SHADOWS["none"], SPACING["lg"]
    ),
}

_CONTAINER_BY_TYPE: Final[dict[BlockType, str]] = {
    BlockType.HEADER: "hero",
    BlockType.CLIENT: "panel",
    BlockType.TWO_COLUMN: "section",
    BlockType.SECTION: "section",
    BlockType.GRID: "section",
    BlockType.TIMELINE: "section",
    BlockType.INVESTMENT: "highlight",
    BlockType.FOOTER: "section",
    BlockType.DIVIDER: "section",
    BlockType.SPACER: "section",
}

_ZEBRA_TYPES: Final = frozenset({BlockType.SECTION, BlockType.GRID})


def get_container_style(
    block_type: BlockType, alternate_background: bool = False
) -> ContainerStyle:
    """Return the visual container for ``block_type``.

    Sections and grids flagged ``alternate_background`` use the striped
    ``section_alt`` variant.
    """
    if alternate_background and block_type in _ZEBRA_TYPES:
        return CONTAINERS["section_alt"]
    return CONTAINERS[_CONTAINER_BY_TYPE[block_type]]


__all__ = [
    "BLOCK_TYPOGRAPHY",
    "CENTERED_INSET",
    "COLORS",
    "CONTAINERS",
    "FONT_STACK",
    "PADDED_INSET",
    "PAGE_DPI",
    "PAGE_HEIGHT",
    "PAGE_WIDTH",
    "RADIUS",
    "SHADOWS",
    "SPACING",
    "SPACING_UNIT",
    "TYPOGRAPHY",
    "ContainerStyle",
    "TypographyStyle",
    "get_container_style",
    "get_typography",
]

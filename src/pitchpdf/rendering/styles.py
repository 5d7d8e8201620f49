"""Scoped stylesheet fragments, one per block type, built from design tokens.

Fragments are plain strings so that :func:`pitchpdf.rendering.renderer.combine_styles`
can deduplicate identical fragments emitted by repeated block types.
"""

from __future__ import annotations

from functools import cache

from pitchpdf.engine.tokens import COLORS, FONT_STACK, RADIUS, SPACING

_XL = SPACING["xl"]
_LG = SPACING["lg"]


def global_styles(page_width: float) -> str:
    return f"""
        * {{ box-sizing: border-box; margin: 0; padding: 0; }}
        body {{ font-family: {FONT_STACK}; color: {COLORS['text_primary']}; }}
        .page {{ width: {page_width:g}px; background: {COLORS['background']}; position: relative; page-break-after: always; }}
        .page:last-child {{ page-break-after: auto; }}
    """


@cache
def header_styles() -> str:
    return f"""
        .block-header {{ position: relative; min-height: 280px; background: linear-gradient(135deg, {COLORS['background_dark']} 0%, #2d2d44 100%); overflow: hidden; display: flex; align-items: center; justify-content: center; }}
        .header-overlay {{ position: absolute; inset: 0; background: radial-gradient(circle at 30% 50%, rgba(99, 102, 241, 0.15), transparent 50%); }}
        .header-content {{ position: relative; z-index: 2; text-align: center; padding: {_XL}px; }}
        .header-brand {{ display: flex; align-items: center; justify-content: center; gap: 8px; margin-bottom: {_LG}px; }}
        .brand-dot {{ width: 8px; height: 8px; background: {COLORS['primary']}; border-radius: 50%; }}
        .brand-name {{ font-size: 14px; font-weight: 600; color: rgba(255,255,255,0.7); letter-spacing: 0.05em; }}
        .header-title {{ font-size: 42px; font-weight: 700; color: #fff; line-height: 1.1; margin-bottom: 12px; }}
        .header-subtitle {{ font-size: 16px; color: rgba(255,255,255,0.7); margin-bottom: {_LG}px; }}
        .header-meta {{ display: flex; align-items: center; justify-content: center; gap: 16px; }}
        .header-badge {{ font-size: 10px; font-weight: 700; color: #fff; background: {COLORS['primary']}; padding: 4px 12px; border-radius: {RADIUS['sm']}px; letter-spacing: 0.1em; }}
        .header-date {{ font-size: 13px; color: rgba(255,255,255,0.6); }}
        .header-shape {{ position: absolute; bottom: -50%; right: -10%; width: 60%; height: 200%; background: rgba(99, 102, 241, 0.08); border-radius: 50%; }}
    """


@cache
def client_styles() -> str:
    return f"""
        .block-client {{ background: {COLORS['background_alt']}; padding: {_LG}px {_XL}px; }}
        .client-label {{ font-size: 11px; font-weight: 600; color: {COLORS['text_muted']}; text-transform: uppercase; letter-spacing: 0.05em; }}
        .client-name {{ font-size: 24px; font-weight: 600; color: {COLORS['text_primary']}; margin-top: 8px; }}
        .client-company {{ font-size: 14px; color: {COLORS['text_secondary']}; margin-top: 4px; }}
    """


@cache
def two_column_styles() -> str:
    return f"""
        .block-two-column {{ padding: {_LG}px {_XL}px; }}
        .two-column-grid {{ display: grid; grid-template-columns: 1fr 1fr; gap: {_LG}px; }}
        .column-card {{ background: {COLORS['background']}; border: 1px solid {COLORS['border']}; border-radius: {RADIUS['lg']}px; padding: {_LG}px; }}
        .column-header {{ display: flex; align-items: center; gap: 12px; margin-bottom: 12px; }}
        .column-icon {{ width: 32px; height: 32px; background: {COLORS['background_alt']}; border-radius: {RADIUS['md']}px; display: flex; align-items: center; justify-content: center; }}
        .icon-dot {{ width: 8px; height: 8px; background: {COLORS['primary']}; border-radius: 50%; }}
        .column-title {{ font-size: 18px; font-weight: 600; color: {COLORS['text_primary']}; }}
        .column-body {{ font-size: 14px; line-height: 1.6; color: {COLORS['text_secondary']}; white-space: pre-line; }}
    """


@cache
def section_styles() -> str:
    return f"""
        .block-section {{ padding: {_XL}px; }}
        .block-section.alt-bg {{ background: {COLORS['background_alt']}; }}
        .section-header {{ display: flex; align-items: center; gap: 12px; margin-bottom: 16px; }}
        .section-anchor {{ width: 4px; height: 24px; background: {COLORS['primary']}; border-radius: 2px; }}
        .section-title {{ font-size: 20px; font-weight: 600; color: {COLORS['text_primary']}; }}
        .section-body {{ font-size: 14px; line-height: 1.6; color: {COLORS['text_secondary']}; white-space: pre-line; }}
    """


@cache
def grid_styles() -> str:
    return f"""
        .block-grid {{ padding: {_XL}px; }}
        .block-grid.alt-bg {{ background: {COLORS['background_alt']}; }}
        .grid-header {{ display: flex; align-items: center; gap: 12px; margin-bottom: 20px; }}
        .grid-anchor {{ width: 4px; height: 24px; background: {COLORS['primary']}; border-radius: 2px; }}
        .grid-title {{ font-size: 20px; font-weight: 600; color: {COLORS['text_primary']}; }}
        .grid-container {{ display: grid; grid-template-columns: 1fr 1fr; gap: 16px; }}
        .grid-container.single {{ grid-template-columns: 1fr; }}
        .grid-item {{ background: {COLORS['background']}; border: 1px solid {COLORS['border']}; border-radius: {RADIUS['md']}px; padding: 16px; }}
        .grid-item-header {{ display: flex; align-items: center; gap: 8px; margin-bottom: 8px; }}
        .grid-dot {{ width: 6px; height: 6px; background: {COLORS['primary']}; border-radius: 50%; }}
        .grid-index {{ font-size: 12px; font-weight: 600; color: {COLORS['text_muted']}; }}
        .grid-content {{ font-size: 14px; line-height: 1.5; color: {COLORS['text_secondary']}; }}
    """


@cache
def timeline_styles() -> str:
    return f"""
        .block-timeline {{ padding: {_XL}px; }}
        .timeline-header {{ display: flex; align-items: center; gap: 12px; margin-bottom: 20px; }}
        .timeline-anchor {{ width: 4px; height: 24px; background: {COLORS['primary']}; border-radius: 2px; }}
        .timeline-title {{ font-size: 20px; font-weight: 600; color: {COLORS['text_primary']}; }}
        .timeline-container {{ position: relative; padding-left: 24px; }}
        .timeline-line {{ position: absolute; left: 5px; top: 8px; bottom: 8px; width: 2px; background: {COLORS['border']}; }}
        .timeline-item {{ position: relative; padding-bottom: 16px; }}
        .timeline-item:last-child {{ padding-bottom: 0; }}
        .timeline-marker {{ position: absolute; left: -24px; top: 4px; width: 12px; height: 12px; background: {COLORS['primary']}; border-radius: 50%; border: 2px solid {COLORS['background']}; }}
        .timeline-phase {{ font-size: 11px; font-weight: 600; color: {COLORS['primary']}; text-transform: uppercase; letter-spacing: 0.05em; }}
        .timeline-text {{ font-size: 14px; line-height: 1.5; color: {COLORS['text_secondary']}; margin-top: 4px; }}
    """


@cache
def investment_styles() -> str:
    return f"""
        .block-investment {{ position: relative; min-height: 120px; background: linear-gradient(135deg, {COLORS['primary']} 0%, {COLORS['primary_dark']} 100%); display: flex; align-items: center; justify-content: center; margin: {_LG}px {_XL}px; border-radius: {RADIUS['lg']}px; overflow: hidden; }}
        .investment-overlay {{ position: absolute; inset: 0; background: radial-gradient(circle at 70% 50%, rgba(255,255,255,0.1), transparent 50%); }}
        .investment-content {{ position: relative; z-index: 2; text-align: center; padding: {_XL}px; }}
        .investment-label {{ font-size: 11px; font-weight: 600; color: rgba(255,255,255,0.8); text-transform: uppercase; letter-spacing: 0.1em; }}
        .investment-amount {{ font-size: 32px; font-weight: 700; color: #fff; margin-top: 8px; }}
    """


@cache
def footer_styles() -> str:
    return f"""
        .block-footer {{ padding: 0 {_XL}px {_LG}px {_XL}px; margin-top: 16px; border-top: 1px solid {COLORS['border']}; }}
        .footer-brand-strip {{ height: 3px; background: linear-gradient(90deg, {COLORS['primary']}, {COLORS['accent']}); margin: 0 -{_XL}px {_LG}px; }}
        .footer-content {{ display: flex; justify-content: space-between; align-items: flex-end; margin-bottom: 20px; }}
        .footer-label {{ font-size: 10px; font-weight: 700; color: {COLORS['text_muted']}; text-transform: uppercase; letter-spacing: 0.1em; display: block; margin-bottom: 6px; }}
        .footer-contact {{ font-size: 13px; line-height: 1.5; color: {COLORS['text_primary']}; font-weight: 500; }}
        .signature-box {{ width: 180px; }}
        .signature-line {{ height: 1px; background: {COLORS['border']}; margin-bottom: 8px; }}
        .signature-label {{ font-size: 10px; font-weight: 600; color: {COLORS['text_muted']}; text-transform: uppercase; letter-spacing: 0.05em; display: block; }}
        .footer-bottom {{ display: flex; align-items: center; justify-content: center; gap: 8px; padding-top: 16px; border-top: 1px solid {COLORS['border_light']}; }}
        .footer-logo-mark {{ width: 18px; height: 18px; background: {COLORS['background_dark']}; color: #fff; font-size: 10px; font-weight: 700; display: flex; align-items: center; justify-content: center; border-radius: {RADIUS['sm']}px; }}
        .footer-brand-text {{ font-size: 11px; font-weight: 500; color: {COLORS['text_muted']}; letter-spacing: 0.02em; }}
    """


@cache
def divider_styles() -> str:
    return f"""
        .block-divider {{ padding: {SPACING['sm']}px {_XL}px; }}
        .divider-rule {{ border: 0; border-top: 1px solid {COLORS['border']}; }}
        .divider-rule.dashed {{ border-top-style: dashed; }}
    """


def spacer_styles() -> str:
    return ""


__all__ = [
    "client_styles",
    "divider_styles",
    "footer_styles",
    "global_styles",
    "grid_styles",
    "header_styles",
    "investment_styles",
    "section_styles",
    "spacer_styles",
    "timeline_styles",
    "two_column_styles",
]

"""Jinja2 block templates.

Autoescaping is always on: every user-supplied string passes through
markupsafe before it reaches the markup, including ``'`` and ``"``. The only
intentional markup injected into user text is ``<br>`` via the ``nl2br``
filter, which escapes first and then joins lines.
"""

from __future__ import annotations

from functools import cache

from jinja2 import DictLoader, Environment, StrictUndefined, Template
from markupsafe import Markup, escape

_TEMPLATES: dict[str, str] = {
    "header.html": """
<div class="block-header">
  <div class="header-overlay"></div>
  <div class="header-content">
    <div class="header-brand">
      <span class="brand-dot"></span>
      <span class="brand-name">{{ content.brand }}</span>
    </div>
    <h1 class="header-title">{{ content.title }}</h1>
    <p class="header-subtitle">{{ content.subtitle }}</p>
    <div class="header-meta">
      <span class="header-badge">{{ content.badge }}</span>
      <span class="header-date">{{ content.date }}</span>
    </div>
  </div>
  <div class="header-shape"></div>
</div>
""",
    "client.html": """
<div class="block-client">
  <div class="client-card">
    <span class="client-label">{{ content.label }}</span>
    <h3 class="client-name">{{ content.name }}</h3>
    <p class="client-company">{{ content.company }}</p>
  </div>
</div>
""",
    "two_column.html": """
<div class="block-two-column">
  <div class="two-column-grid">
  {% for col in content.columns %}
    <div class="column-card" data-column="{{ col.id }}">
      <div class="column-header">
        <div class="column-icon"><span class="icon-dot"></span></div>
        <h2 class="column-title">{{ col.title }}</h2>
      </div>
      <p class="column-body">{{ col.body }}</p>
    </div>
  {% endfor %}
  </div>
</div>
""",
    "section.html": """
<div class="block-section{{ ' alt-bg' if alt_bg else '' }}">
  <div class="section-header">
    {% if content.anchor %}<div class="section-anchor"></div>{% endif %}
    <h2 class="section-title">{{ content.title }}</h2>
  </div>
  <p class="section-body">{{ content.body }}</p>
</div>
""",
    "grid.html": """
<div class="block-grid{{ ' alt-bg' if alt_bg else '' }}">
  <div class="grid-header">
    {% if content.anchor %}<div class="grid-anchor"></div>{% endif %}
    <h2 class="grid-title">{{ content.title }}</h2>
  </div>
  <div class="grid-container{{ ' single' if content.columns == 1 else '' }}">
  {% for item in content.items %}
    <div class="grid-item">
      <div class="grid-item-header">
        {% if item.marker %}<span class="grid-dot"></span>{% endif %}
        <span class="grid-index">{{ item.display_index }}</span>
      </div>
      <p class="grid-content">{{ item.content }}</p>
    </div>
  {% endfor %}
  </div>
</div>
""",
    "timeline.html": """
<div class="block-timeline">
  <div class="timeline-header">
    {% if content.anchor %}<div class="timeline-anchor"></div>{% endif %}
    <h2 class="timeline-title">{{ content.title }}</h2>
  </div>
  <div class="timeline-container">
    <div class="timeline-line"></div>
  {% for phase in content.phases %}
    <div class="timeline-item">
      <div class="timeline-marker"></div>
      <div class="timeline-content">
        <span class="timeline-phase">{{ phase.label }}</span>
        <p class="timeline-text">{{ phase.content }}</p>
      </div>
    </div>
  {% endfor %}
  </div>
</div>
""",
    "investment.html": """
<div class="block-investment">
  <div class="investment-overlay"></div>
  <div class="investment-bg"></div>
  <div class="investment-content">
    <span class="investment-label">{{ content.label }}</span>
    <p class="investment-amount">{{ content.amount }}</p>
  </div>
</div>
""",
    "footer.html": """
<div class="block-footer">
  <div class="footer-brand-strip"></div>
  <div class="footer-content">
    <div class="footer-left">
      <span class="footer-label">{{ content.prepared_by.label }}</span>
      <p class="footer-contact">{{ content.prepared_by.contact | nl2br }}</p>
    </div>
    <div class="footer-right">
      <div class="signature-box">
        {% if content.signature.line %}<div class="signature-line"></div>{% endif %}
        <span class="signature-label">{{ content.signature.label }}</span>
      </div>
    </div>
  </div>
  <div class="footer-bottom">
    <span class="footer-logo-mark">{{ content.branding.mark }}</span>
    <span class="footer-brand-text">{{ content.branding.text }}</span>
  </div>
</div>
""",
    "divider.html": """
<div class="block-divider">
  <hr class="divider-rule{{ ' dashed' if content.style == 'dashed' else '' }}">
</div>
""",
    "spacer.html": """
<div class="block-spacer" style="height: {{ '%g' | format(content.height) }}px"></div>
""",
    "document.html": """<!DOCTYPE html>
<html>
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{{ title }}</title>
  <style>{{ styles | safe }}</style>
</head>
<body>
{% for page in pages %}
<div class="page" data-page="{{ page.number }}">
{% for block in page.blocks %}
{{ block.html | safe }}
{% endfor %}
</div>
{% endfor %}
</body>
</html>
""",
}


def nl2br(value: str | None) -> Markup:
    """Escape ``value`` and turn newlines into ``<br>`` tags."""
    if not value:
        return Markup("")
    return Markup("<br>").join(escape(value).split("\n"))


@cache
def get_environment() -> Environment:
    """Return the shared autoescaping template environment."""
    env = Environment(
        loader=DictLoader(_TEMPLATES),
        autoescape=True,
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["nl2br"] = nl2br
    return env


def get_template(name: str) -> Template:
    return get_environment().get_template(name)


__all__ = ["get_environment", "get_template", "nl2br"]

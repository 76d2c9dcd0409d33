"""
Kernel: deck_html_render
Stage: 3 (Rendering)

Renders the laid-out slides into static HTML: one 1280x720 section per
slide for the deck page, plus a thumbnail rail. Text segments go through
an injectable math renderer; block math sits in a horizontally scrollable
container. KaTeX typesets only the emitted .math elements, never plain
text. Media images start hidden behind a loading overlay and flip to
loaded in the browser (onload), so the loaded state never reaches the
document model.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Union

from jinja2 import BaseLoader, Environment, select_autoescape
from markupsafe import Markup, escape

from slidewright.base import Kernel, KernelInput
from slidewright.deck.config import DeckConfig
from slidewright.deck.models import Presentation, Segment, SegmentKind

logger = logging.getLogger(__name__)

MathRenderer = Callable[[str, bool], Markup]

LOADING_TEXT = "Loading..."


# ---------------------------------------------------------------------------
# Math renderers: (expression, block) -> markup
# ---------------------------------------------------------------------------

def katex_renderer(expression: str, block: bool) -> Markup:
    """Delimited source for KaTeX auto-render."""
    if block:
        return Markup('<span class="math math-block">\\[{}\\]</span>').format(expression)
    return Markup('<span class="math math-inline">\\({}\\)</span>').format(expression)


def plain_renderer(expression: str, block: bool) -> Markup:
    """Escaped source in a code element, for pages without a math engine."""
    css = "math math-block" if block else "math math-inline"
    return Markup('<code class="{}">{}</code>').format(css, expression)


MATH_RENDERERS: Dict[str, MathRenderer] = {
    "katex": katex_renderer,
    "plain": plain_renderer,
}


def render_segments(
    segments: Iterable[Union[Segment, Dict[str, Any]]],
    renderer: MathRenderer = katex_renderer,
) -> Markup:
    """Markup for one text field; plain text is escaped, block math is wrapped for scrolling."""
    parts: List[Markup] = []
    for seg in segments:
        if isinstance(seg, dict):
            seg = Segment.from_dict(seg)
        if seg.kind == SegmentKind.PLAIN:
            parts.append(escape(seg.value))
        elif seg.scrollable:
            parts.append(Markup('<div class="math-scroll">{}</div>').format(renderer(seg.value, True)))
        else:
            parts.append(renderer(seg.value, False))
    return Markup("").join(parts)


# ---------------------------------------------------------------------------
# Templates
# ---------------------------------------------------------------------------

_SLIDE_MACRO = """
{%- macro bullets(column) -%}
<ul style="font-size: {{ column.font.size }}px">
{%- for item in column["items"] %}
  <li>{{ item | segments }}</li>
{%- endfor %}
</ul>
{%- endmacro -%}

{%- macro slide(view, anchor="") -%}
<section{% if anchor %} id="{{ anchor }}"{% endif %} class="slide {{ view.arrangement }}{% if view.thumbnail %} thumb{% endif %}" data-slide-id="{{ view.slide_id }}">
{%- if view.arrangement == "title_card" %}
  <div class="title-card">
    <h1 style="font-size: {{ view.title.font.size }}px">{{ view.title.segments | segments }}</h1>
    {%- if view.subtitle %}
    <p class="subtitle" style="font-size: {{ view.subtitle.font.size }}px">{{ view.subtitle.segments | segments }}</p>
    {%- endif %}
  </div>
{%- elif view.arrangement == "quote_card" %}
  <div class="quote-card">
    {%- if view.show_quote_mark %}
    <div class="quote-mark" aria-hidden="true">&ldquo;</div>
    {%- endif %}
    {%- if view.quote %}
    <blockquote style="font-size: {{ view.quote.font.size }}px">{{ view.quote.segments | segments }}</blockquote>
    {%- endif %}
    <p class="attribution" style="font-size: {{ view.attribution.font.size }}px">&mdash; {{ view.attribution.segments | segments }}</p>
  </div>
{%- elif view.arrangement in ("media_left", "media_right") %}
  <div class="columns media-{{ view.image_side }}">
    <div class="column text">
      <h2 class="{{ view.header.css_class }}" style="font-size: {{ view.header.font.size }}px">{{ view.header.segments | segments }}</h2>
      {{ bullets(view.bullets) }}
    </div>
    <div class="column media">
      {%- if view.image.url %}
      <div class="loading">{{ loading_text }}</div>
      <img class="pending" src="{{ view.image.url }}" alt="{{ view.image.alt }}" onload="this.classList.add('loaded');this.previousElementSibling.remove()">
      {%- else %}
      <div class="placeholder">{{ view.image.placeholder }}</div>
      {%- endif %}
    </div>
  </div>
{%- elif view.arrangement == "split_columns" %}
  <h2 class="{{ view.header.css_class }}" style="font-size: {{ view.header.font.size }}px">{{ view.header.segments | segments }}</h2>
  <div class="columns split">
    <div class="column">{{ bullets(view.left) }}</div>
    <div class="column">{{ bullets(view.right) }}</div>
  </div>
{%- else %}
  <h2 class="{{ view.header.css_class }}" style="font-size: {{ view.header.font.size }}px">{{ view.header.segments | segments }}</h2>
  {{ bullets(view.bullets) }}
{%- endif %}
</section>
{%- endmacro -%}
"""

_HEAD = """
<meta charset="utf-8">
<title>{{ title }}</title>
{%- if math == "katex" %}
<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/katex@{{ katex_version }}/dist/katex.min.css">
<script defer src="https://cdn.jsdelivr.net/npm/katex@{{ katex_version }}/dist/katex.min.js"></script>
<script defer src="https://cdn.jsdelivr.net/npm/katex@{{ katex_version }}/dist/contrib/auto-render.min.js"
        onload="document.querySelectorAll('.math').forEach(function (el) { renderMathInElement(el); })"></script>
{%- endif %}
<style>
:root {
  --primary: {{ palette.primary }};
  --secondary: {{ palette.secondary }};
  --accent: {{ palette.accent }};
  --bg: {{ palette.bg }};
  --text: {{ palette.text }};
}
body { margin: 0; background: #e5e7eb; font-family: system-ui, sans-serif; }
body.style-minimalist, body.style-professional { font-family: "Helvetica Neue", Arial, sans-serif; }
body.style-creative, body.style-organic { font-family: Georgia, serif; }
body.style-futuristic { font-family: "Courier New", monospace; }
.slide { box-sizing: border-box; width: {{ width }}px; height: {{ height }}px; overflow: hidden;
         margin: 24px auto; padding: 64px; background: var(--bg); color: var(--text); position: relative; }
.slide.thumb { width: {{ thumb_width }}px; height: {{ thumb_height }}px; padding: 8px; margin: 8px; }
.slide h1, .slide h2 { color: var(--primary); margin: 0 0 0.5em 0; }
.slide ul { margin: 0; padding-left: 1.2em; }
.slide li::marker { color: var(--accent); }
.title-card, .quote-card { height: 100%; display: flex; flex-direction: column; justify-content: center; align-items: center; text-align: center; }
.subtitle { color: var(--secondary); }
.quote-mark { font-size: 120px; line-height: 1; color: var(--accent); opacity: 0.4; }
blockquote { margin: 0; font-style: italic; }
.attribution { color: var(--secondary); }
.columns { display: flex; gap: 32px; height: 100%; }
.column { flex: 1; min-width: 0; }
.media-left .media { order: -1; }
.media { position: relative; display: flex; align-items: center; justify-content: center; }
.media img { max-width: 100%; max-height: 100%; object-fit: cover; }
.media img.pending { opacity: 0; }
.media img.loaded { opacity: 1; transition: opacity 0.3s; }
.loading, .placeholder { position: absolute; inset: 0; display: flex; align-items: center; justify-content: center;
                         background: var(--secondary); color: var(--bg); opacity: 0.6; }
.math-scroll { overflow-x: auto; max-width: 100%; }
.rail { display: flex; flex-direction: column; width: {{ thumb_width + 16 }}px; }
</style>
"""

_DECK_TEMPLATE = _SLIDE_MACRO + """<!DOCTYPE html>
<html lang="en">
<head>""" + _HEAD + """</head>
<body class="style-{{ style | lower }}">
{%- for view in views %}
{{ slide(view, "slide-" ~ loop.index) }}
{%- endfor %}
</body>
</html>
"""

_THUMBNAILS_TEMPLATE = _SLIDE_MACRO + """<!DOCTYPE html>
<html lang="en">
<head>""" + _HEAD + """</head>
<body class="style-{{ style | lower }}">
<nav class="rail">
{%- for view in views %}
  <a href="presentation.html#slide-{{ loop.index }}" title="Slide {{ loop.index }}">{{ slide(view) }}</a>
{%- endfor %}
</nav>
</body>
</html>
"""


def build_environment(renderer: MathRenderer) -> Environment:
    """Jinja2 environment with the ``segments`` filter bound to *renderer*."""
    env = Environment(
        loader=BaseLoader(),
        autoescape=select_autoescape(["html", "xml"]),
    )
    env.filters["segments"] = lambda segs: render_segments(segs, renderer)
    return env


def render_deck(
    presentation: Presentation,
    views: List[Dict[str, Any]],
    config: DeckConfig,
    thumbnails: bool = False,
) -> str:
    """
    Render view dicts (SlideView.to_dict()) into a standalone HTML page.

    Args:
        presentation: Source of the title, style and palette.
        views: Full-mode views for the deck page, thumbnail views for the rail.
        config: Render configuration (math renderer, geometry).
        thumbnails: Render the thumbnail rail instead of the deck page.
    """
    renderer = MATH_RENDERERS[config.render.math]
    env = build_environment(renderer)
    template = env.from_string(_THUMBNAILS_TEMPLATE if thumbnails else _DECK_TEMPLATE)
    width = config.render.slide_width
    height = config.render.slide_height
    thumb_width = config.render.thumbnail_width
    return template.render(
        title=presentation.title,
        style=presentation.theme.value,
        palette=presentation.palette,
        views=views,
        math=config.render.math,
        katex_version=config.render.katex_version,
        width=width,
        height=height,
        thumb_width=thumb_width,
        thumb_height=thumb_width * height // width,
        loading_text=LOADING_TEXT,
    )


# ---------------------------------------------------------------------------
# Kernel
# ---------------------------------------------------------------------------

class DeckHtmlRenderKernel(Kernel):
    """Render slide views into static HTML."""

    name = "deck_html_render"
    version = "1.0.0"
    category = "deck"
    stage = 3
    description = "Slide views → standalone HTML deck and thumbnail rail"

    requires: List[str] = ["deck_load", "deck_layout_plan"]
    provides: List[str] = ["deck_html"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        loaded = input.load("deck_load")
        plan = input.load("deck_layout_plan")
        presentation = Presentation.from_dict(loaded["presentation"])
        config = DeckConfig.from_dict(input.config)

        full_views = [entry["full"] for entry in plan["slides"]]
        thumb_views = [entry["thumbnail"] for entry in plan["slides"] if "thumbnail" in entry]

        html = render_deck(presentation, full_views, config)
        thumbnails_html = ""
        if config.render.thumbnails and thumb_views:
            thumbnails_html = render_deck(presentation, thumb_views, config, thumbnails=True)

        logger.info(
            f"[deck_html_render] {len(full_views)} slides rendered "
            f"(math={config.render.math}, {len(html):,} chars)"
        )

        return {
            "html": html,
            "thumbnails_html": thumbnails_html,
            "math_renderer": config.render.math,
            "slide_count": len(full_views),
            "thumbnail_count": len(thumb_views) if thumbnails_html else 0,
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        parts = [f"HTML: {data.get('slide_count', 0)} slides ({len(data.get('html', '')):,} chars)"]
        if data.get("thumbnails_html"):
            parts.append(f"{data.get('thumbnail_count', 0)} thumbnails")
        parts.append(f"math={data.get('math_renderer', '?')}")
        return " | ".join(parts)

"""
Slidewright Deck Kernels — slide layout and font sizing

Turns a generated presentation document into rendering-ready slide views:
each slide gets a structural template (title card, quote card, media
columns, split columns, content column), every text field is segmented
into plain text / inline math / block math, and every text block gets a
font size that keeps the content inside the 16:9 canvas.

Stage 1 — Load:
    deck_load:          Presentation JSON → validated, normalized document

Stage 2 — Layout:
    deck_layout_plan:   Slide → SlideView (full size + thumbnail)

Stage 3 — Rendering:
    deck_html_render:   SlideViews → standalone HTML deck + thumbnail rail
    deck_export:        HTML + metadata bundle in {workspace}/output/

The layout core (math_segment, font_sizing, templates) is pure and can be
used without the kernels:

    from slidewright.deck.templates import layout_slide
    view = layout_slide(slide, thumbnail=False)
"""

__version__ = "0.1.0"

__all__ = []

"""
Document edits on slides and presentations.

Every function returns a new value; inputs are never mutated.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import replace
from typing import List, Optional

from slidewright.deck.models import LayoutTag, Presentation, Slide

NEW_SLIDE_TITLE = "New Slide"
NEW_SLIDE_CONTENT = "Start typing your content here..."
NEW_SLIDE_NOTES = "Custom added slide."

_WHITESPACE_RUN_RE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Edit normalization
# ---------------------------------------------------------------------------

def normalize_content_text(text: str) -> List[str]:
    """
    Split an edited text area into bullets.

    One bullet per line; lines that are empty or whitespace-only are
    dropped, other lines are kept as typed.

    Examples:
        >>> normalize_content_text("a\\n\\n  \\nb")
        ['a', 'b']
    """
    return [line for line in text.split("\n") if line.strip() != ""]


def content_to_text(content: List[str]) -> str:
    """Bullets as the newline-joined text shown in the editor."""
    return "\n".join(content)


def apply_slide_edit(
    slide: Slide,
    title: str,
    content_text: str,
    subtitle: Optional[str] = None,
) -> Slide:
    """Slide with edited title, bullets and subtitle (empty subtitle clears it)."""
    return replace(
        slide,
        title=title,
        content=normalize_content_text(content_text),
        subtitle=subtitle or None,
    )


# ---------------------------------------------------------------------------
# Slide list edits
# ---------------------------------------------------------------------------

def new_slide(
    slide_id: Optional[str] = None,
    title: str = "",
    layout: str = LayoutTag.CONTENT.value,
) -> Slide:
    """A slide with starter text; an empty title becomes "New Slide"."""
    return Slide(
        id=slide_id or str(uuid.uuid4()),
        title=title or NEW_SLIDE_TITLE,
        content=[NEW_SLIDE_CONTENT],
        layout=layout,
        notes=NEW_SLIDE_NOTES,
    )


def insert_slide(
    presentation: Presentation,
    current_index: int,
    slide: Optional[Slide] = None,
) -> Presentation:
    """
    Insert *slide* (a new blank slide by default) right after *current_index*.

    The index is clamped to the slide list, so an empty deck gets the
    slide at position 0.
    """
    slide = slide or new_slide()
    slides = list(presentation.slides)
    position = max(0, min(current_index + 1, len(slides)))
    slides.insert(position, slide)
    return replace(presentation, slides=slides)


def replace_slide(presentation: Presentation, slide: Slide) -> Presentation:
    """Presentation with the slide of the same id swapped for *slide*."""
    slides = [slide if s.id == slide.id else s for s in presentation.slides]
    return replace(presentation, slides=slides)


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def fallback_image_prompt(slide: Slide) -> str:
    """Prompt used when a slide has none of its own."""
    return f"A professional visual representation of: {slide.title}. {' '.join(slide.content)}"


def detach_image(slide: Slide) -> Slide:
    """Drop the image and its prompt; the slide falls back to the content layout."""
    return replace(
        slide,
        image_url=None,
        image_prompt=None,
        layout=LayoutTag.CONTENT.value,
    )


def attach_generated_image(slide: Slide, image_url: str) -> Slide:
    """Slide showing a freshly generated image on the right."""
    return replace(
        slide,
        image_url=image_url,
        image_prompt=slide.image_prompt or fallback_image_prompt(slide),
        layout=LayoutTag.IMAGE_RIGHT.value,
    )


def attach_uploaded_image(slide: Slide, image_url: str) -> Slide:
    """Slide showing an uploaded image; an image layout is kept, others become image-right."""
    tag = slide.layout_tag
    layout = slide.layout if tag is not None and tag.is_image else LayoutTag.IMAGE_RIGHT.value
    return replace(slide, image_url=image_url, layout=layout)


def slides_needing_images(presentation: Presentation) -> List[Slide]:
    """Image-layout slides that carry a prompt, in presentation order."""
    return [
        s for s in presentation.slides
        if s.layout_tag is not None and s.layout_tag.is_image and s.image_prompt
    ]


# ---------------------------------------------------------------------------
# Export names
# ---------------------------------------------------------------------------

def pdf_filename(title: str, suffix: str = "_Presentation.pdf") -> str:
    """PDF file name: whitespace runs in the title become underscores."""
    return _WHITESPACE_RUN_RE.sub("_", title) + suffix


def slide_png_filename(index: int, prefix: str = "Slide_") -> str:
    """PNG file name of the slide at 0-based *index* (names are 1-based)."""
    return f"{prefix}{index + 1}.png"

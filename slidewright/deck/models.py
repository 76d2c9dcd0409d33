"""
Core data models for the Slidewright deck family.

Presentation documents (Presentation, Slide, ColorPalette, GroundingSource)
use the generator's camelCase JSON keys in to_dict()/from_dict() so that
documents round-trip unchanged. Segment is the derived, per-render unit
produced by the math segmenter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
import uuid


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class LayoutTag(str, Enum):
    """Closed set of slide layout variants."""
    TITLE = "title"
    CONTENT = "content"
    SPLIT = "split"
    QUOTE = "quote"
    IMAGE_LEFT = "image-left"
    IMAGE_RIGHT = "image-right"

    @classmethod
    def parse(cls, tag: Optional[str]) -> Optional[LayoutTag]:
        """Return the matching tag, or None for unknown/empty input."""
        if not tag:
            return None
        try:
            return cls(tag.strip().lower())
        except ValueError:
            return None

    @property
    def is_image(self) -> bool:
        return self in (LayoutTag.IMAGE_LEFT, LayoutTag.IMAGE_RIGHT)


class PresentationStyle(str, Enum):
    """Visual style requested for the deck."""
    PROFESSIONAL = "Professional"
    CREATIVE = "Creative"
    MINIMALIST = "Minimalist"
    FUTURISTIC = "Futuristic"
    ORGANIC = "Organic"

    @classmethod
    def parse(cls, value: Optional[str]) -> PresentationStyle:
        """Case-insensitive lookup, Professional when unknown."""
        if value:
            for member in cls:
                if member.value.lower() == str(value).strip().lower():
                    return member
        return cls.PROFESSIONAL


class SegmentKind(str, Enum):
    """How a run of text is rendered."""
    PLAIN = "plain"
    INLINE_MATH = "inline_math"
    BLOCK_MATH = "block_math"


# ---------------------------------------------------------------------------
# Document models
# ---------------------------------------------------------------------------

@dataclass
class ColorPalette:
    """A named palette with five color roles."""
    name: str
    primary: str
    secondary: str
    accent: str
    bg: str
    text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "primary": self.primary,
            "secondary": self.secondary,
            "accent": self.accent,
            "bg": self.bg,
            "text": self.text,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ColorPalette:
        fallback = DEFAULT_PALETTE
        return cls(
            name=d.get("name", fallback.name),
            primary=d.get("primary", fallback.primary),
            secondary=d.get("secondary", fallback.secondary),
            accent=d.get("accent", fallback.accent),
            bg=d.get("bg", fallback.bg),
            text=d.get("text", fallback.text),
        )


PALETTES: List[ColorPalette] = [
    ColorPalette("Deep Sea", "#1e3a8a", "#1e40af", "#3b82f6", "#f8fafc", "#0f172a"),
    ColorPalette("Sunset", "#9a3412", "#c2410c", "#f97316", "#fffafb", "#431407"),
    ColorPalette("Forest", "#064e3b", "#065f46", "#10b981", "#f0fdf4", "#022c22"),
    ColorPalette("Midnight", "#111827", "#1f2937", "#6366f1", "#030712", "#f9fafb"),
    ColorPalette("Soft Rose", "#881337", "#9f1239", "#fb7185", "#fff1f2", "#4c0519"),
]

DEFAULT_PALETTE = PALETTES[0]


def get_palette(name: str) -> Optional[ColorPalette]:
    """Look up a built-in palette by name (case-insensitive)."""
    for p in PALETTES:
        if p.name.lower() == name.strip().lower():
            return p
    return None


@dataclass
class GroundingSource:
    """Web source cited by the generator (provenance only)."""
    title: str
    uri: str

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "uri": self.uri}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> GroundingSource:
        return cls(title=d.get("title") or "Source", uri=d.get("uri", ""))


@dataclass
class Slide:
    """A single slide of the presentation document."""
    id: str
    title: str
    content: List[str] = field(default_factory=list)    # bullets, order-significant
    layout: str = LayoutTag.CONTENT.value               # raw tag, may be unknown
    subtitle: Optional[str] = None
    notes: Optional[str] = None
    image_url: Optional[str] = None
    image_prompt: Optional[str] = None

    @property
    def layout_tag(self) -> Optional[LayoutTag]:
        return LayoutTag.parse(self.layout)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": list(self.content),
            "layout": self.layout,
        }
        if self.subtitle is not None:
            d["subtitle"] = self.subtitle
        if self.notes is not None:
            d["notes"] = self.notes
        if self.image_url is not None:
            d["imageUrl"] = self.image_url
        if self.image_prompt is not None:
            d["imagePrompt"] = self.image_prompt
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Slide:
        content = d.get("content") or []
        if isinstance(content, str):
            content = content.split("\n")
        return cls(
            id=str(d.get("id") or uuid.uuid4()),
            title=str(d.get("title") or ""),
            content=[str(item) for item in content],
            layout=str(d.get("layout") or LayoutTag.CONTENT.value),
            subtitle=d.get("subtitle"),
            notes=d.get("notes"),
            image_url=d.get("imageUrl", d.get("image_url")),
            image_prompt=d.get("imagePrompt", d.get("image_prompt")),
        )


@dataclass
class Presentation:
    """
    The presentation document: ordered slides plus style and palette.

    Sources are provenance metadata from grounded generation; the layout
    core never reads them.
    """
    id: str
    title: str
    slides: List[Slide] = field(default_factory=list)
    theme: PresentationStyle = PresentationStyle.PROFESSIONAL
    palette: ColorPalette = field(default_factory=lambda: ColorPalette(**DEFAULT_PALETTE.to_dict()))
    sources: List[GroundingSource] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "slides": [s.to_dict() for s in self.slides],
            "theme": self.theme.value,
            "palette": self.palette.to_dict(),
        }
        if self.sources:
            d["sources"] = [s.to_dict() for s in self.sources]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Presentation:
        """
        Build a Presentation from a generator document.

        Raises:
            ValueError: If *d* is not an object, ``slides`` is not a list,
                or ``sources`` is not a list of objects.
        """
        if not isinstance(d, dict):
            raise ValueError(f"Presentation document must be an object, got {type(d).__name__}")
        slides = d.get("slides") or []
        if not isinstance(slides, list):
            raise ValueError("Presentation 'slides' must be a list")
        sources = d.get("sources") or []
        if not isinstance(sources, list) or not all(isinstance(s, dict) for s in sources):
            raise ValueError("Presentation 'sources' must be a list of objects")

        palette = d.get("palette")
        if isinstance(palette, dict):
            palette_obj = ColorPalette.from_dict(palette)
        else:
            builtin = get_palette(palette) if isinstance(palette, str) else None
            palette_obj = ColorPalette.from_dict((builtin or DEFAULT_PALETTE).to_dict())

        return cls(
            id=str(d.get("id") or uuid.uuid4()),
            title=d.get("title") or "Untitled Presentation",
            slides=[Slide.from_dict(s) for s in slides],
            theme=PresentationStyle.parse(d.get("theme")),
            palette=palette_obj,
            sources=[
                GroundingSource.from_dict(s)
                for s in sources
                if s.get("uri")
            ],
        )


# ---------------------------------------------------------------------------
# Derived, per-render models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Segment:
    """One classified run of a text field."""
    kind: SegmentKind
    value: str                  # plain text, or math expression without delimiters

    @property
    def is_math(self) -> bool:
        return self.kind != SegmentKind.PLAIN

    @property
    def scrollable(self) -> bool:
        """Block math may be wider than the slide; the host scrolls it horizontally."""
        return self.kind == SegmentKind.BLOCK_MATH

    def source(self) -> str:
        """The segment as it appeared in the text, delimiters restored."""
        if self.kind == SegmentKind.BLOCK_MATH:
            return f"$${self.value}$$"
        if self.kind == SegmentKind.INLINE_MATH:
            return f"${self.value}$"
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "value": self.value}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> Segment:
        return cls(kind=SegmentKind(d["kind"]), value=d.get("value", ""))


def plain(text: str) -> Segment:
    return Segment(SegmentKind.PLAIN, text)


def inline_math(expr: str) -> Segment:
    return Segment(SegmentKind.INLINE_MATH, expr)


def block_math(expr: str) -> Segment:
    return Segment(SegmentKind.BLOCK_MATH, expr)

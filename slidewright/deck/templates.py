"""
Layout Template Dispatcher and slide views.

select_template() maps a layout tag onto one of six arrangements;
layout_slide() builds the matching view, with every text field segmented
and every text block sized. Views are a closed set of dataclasses:

    title                     → TitleCardView
    quote                     → QuoteCardView
    image-left / image-right  → MediaColumnsView
    split                     → SplitColumnsView
    content / unknown         → ContentColumnView
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from slidewright.deck.config import DeckConfig, FixedSize, get_deck_config
from slidewright.deck.font_sizing import FontSizeDecision, decide_size, fixed_size
from slidewright.deck.math_segment import segment
from slidewright.deck.models import LayoutTag, Segment, Slide

logger = logging.getLogger(__name__)

IMAGE_PLACEHOLDER = "Visual Aid Pending..."


class Arrangement(str, Enum):
    """Structural template of a slide."""
    TITLE_CARD = "title_card"
    QUOTE_CARD = "quote_card"
    MEDIA_LEFT = "media_left"
    MEDIA_RIGHT = "media_right"
    SPLIT_COLUMNS = "split_columns"
    CONTENT_COLUMN = "content_column"


_TAG_TO_ARRANGEMENT: Dict[LayoutTag, Arrangement] = {
    LayoutTag.TITLE: Arrangement.TITLE_CARD,
    LayoutTag.QUOTE: Arrangement.QUOTE_CARD,
    LayoutTag.IMAGE_LEFT: Arrangement.MEDIA_LEFT,
    LayoutTag.IMAGE_RIGHT: Arrangement.MEDIA_RIGHT,
    LayoutTag.SPLIT: Arrangement.SPLIT_COLUMNS,
    LayoutTag.CONTENT: Arrangement.CONTENT_COLUMN,
}


def select_template(layout_tag: Union[str, LayoutTag, None]) -> Arrangement:
    """Arrangement for *layout_tag*; unknown or missing tags get the content column."""
    tag = layout_tag if isinstance(layout_tag, LayoutTag) else LayoutTag.parse(layout_tag)
    if tag is None:
        return Arrangement.CONTENT_COLUMN
    return _TAG_TO_ARRANGEMENT[tag]


# ---------------------------------------------------------------------------
# View building blocks
# ---------------------------------------------------------------------------

@dataclass
class TextBlock:
    """A single text field: its segments and the size it renders at."""
    role: str
    text: str
    segments: List[Segment]
    font: FontSizeDecision
    css_class: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "role": self.role,
            "text": self.text,
            "segments": [s.to_dict() for s in self.segments],
            "font": self.font.to_dict(),
        }
        if self.css_class:
            d["css_class"] = self.css_class
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> TextBlock:
        return cls(
            role=d["role"],
            text=d.get("text", ""),
            segments=[Segment.from_dict(s) for s in d.get("segments", [])],
            font=FontSizeDecision.from_dict(d["font"]),
            css_class=d.get("css_class", ""),
        )


@dataclass
class BulletList:
    """Bullets sharing one font size."""
    items: List[List[Segment]]
    texts: List[str]
    font: FontSizeDecision

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "texts": list(self.texts),
            "items": [[s.to_dict() for s in item] for item in self.items],
            "font": self.font.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> BulletList:
        return cls(
            items=[[Segment.from_dict(s) for s in item] for item in d.get("items", [])],
            texts=list(d.get("texts", [])),
            font=FontSizeDecision.from_dict(d["font"]),
        )


@dataclass
class ImageSlot:
    """Media column: an image reference or a placeholder caption."""
    url: Optional[str]
    alt: str
    placeholder: str = IMAGE_PLACEHOLDER

    @property
    def has_image(self) -> bool:
        return bool(self.url)

    def to_dict(self) -> Dict[str, Any]:
        return {"url": self.url, "alt": self.alt, "placeholder": self.placeholder}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> ImageSlot:
        return cls(
            url=d.get("url"),
            alt=d.get("alt", ""),
            placeholder=d.get("placeholder", IMAGE_PLACEHOLDER),
        )


def _bullets(texts: List[str], font: FontSizeDecision) -> BulletList:
    return BulletList(items=[segment(t) for t in texts], texts=list(texts), font=font)


def _header(text: str, sizes: FixedSize, thumbnail: bool) -> TextBlock:
    return TextBlock(
        role="header",
        text=text,
        segments=segment(text),
        font=fixed_size("header", sizes.pick(thumbnail), thumbnail),
        css_class=sizes.pick_class(thumbnail),
    )


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------

@dataclass
class TitleCardView:
    slide_id: str
    title: TextBlock
    subtitle: Optional[TextBlock] = None
    thumbnail: bool = False
    arrangement: Arrangement = field(default=Arrangement.TITLE_CARD, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrangement": self.arrangement.value,
            "slide_id": self.slide_id,
            "thumbnail": self.thumbnail,
            "title": self.title.to_dict(),
            "subtitle": self.subtitle.to_dict() if self.subtitle else None,
        }


@dataclass
class QuoteCardView:
    """Quote card: the first bullet is the quote, the title is the attribution."""
    slide_id: str
    quote: Optional[TextBlock]
    attribution: TextBlock
    show_quote_mark: bool = True
    thumbnail: bool = False
    arrangement: Arrangement = field(default=Arrangement.QUOTE_CARD, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrangement": self.arrangement.value,
            "slide_id": self.slide_id,
            "thumbnail": self.thumbnail,
            "quote": self.quote.to_dict() if self.quote else None,
            "attribution": self.attribution.to_dict(),
            "show_quote_mark": self.show_quote_mark,
        }


@dataclass
class MediaColumnsView:
    slide_id: str
    header: TextBlock
    bullets: BulletList
    image: ImageSlot
    image_side: str = "right"               # left | right
    thumbnail: bool = False

    @property
    def arrangement(self) -> Arrangement:
        return Arrangement.MEDIA_LEFT if self.image_side == "left" else Arrangement.MEDIA_RIGHT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrangement": self.arrangement.value,
            "slide_id": self.slide_id,
            "thumbnail": self.thumbnail,
            "header": self.header.to_dict(),
            "bullets": self.bullets.to_dict(),
            "image": self.image.to_dict(),
            "image_side": self.image_side,
        }


@dataclass
class SplitColumnsView:
    slide_id: str
    header: TextBlock
    left: BulletList
    right: BulletList
    thumbnail: bool = False
    arrangement: Arrangement = field(default=Arrangement.SPLIT_COLUMNS, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrangement": self.arrangement.value,
            "slide_id": self.slide_id,
            "thumbnail": self.thumbnail,
            "header": self.header.to_dict(),
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


@dataclass
class ContentColumnView:
    slide_id: str
    header: TextBlock
    bullets: BulletList
    thumbnail: bool = False
    arrangement: Arrangement = field(default=Arrangement.CONTENT_COLUMN, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "arrangement": self.arrangement.value,
            "slide_id": self.slide_id,
            "thumbnail": self.thumbnail,
            "header": self.header.to_dict(),
            "bullets": self.bullets.to_dict(),
        }


SlideView = Union[TitleCardView, QuoteCardView, MediaColumnsView, SplitColumnsView, ContentColumnView]


# ---------------------------------------------------------------------------
# Layout builders, one per arrangement
# ---------------------------------------------------------------------------

def _layout_title(slide: Slide, thumbnail: bool, config: DeckConfig) -> TitleCardView:
    sizes, policy = config.sizes, config.sizing
    title = TextBlock(
        role="title",
        text=slide.title,
        segments=segment(slide.title),
        font=decide_size("title", [slide.title], sizes.title_title, thumbnail, policy),
    )
    subtitle = None
    if slide.subtitle:
        subtitle = TextBlock(
            role="subtitle",
            text=slide.subtitle,
            segments=segment(slide.subtitle),
            font=decide_size("subtitle", [slide.subtitle], sizes.title_subtitle, thumbnail, policy),
        )
    return TitleCardView(slide_id=slide.id, title=title, subtitle=subtitle, thumbnail=thumbnail)


def _layout_quote(slide: Slide, thumbnail: bool, config: DeckConfig) -> QuoteCardView:
    sizes = config.sizes
    quote = None
    if slide.content:
        # Only the first bullet is read; the rest are ignored
        text = slide.content[0]
        quote = TextBlock(
            role="quote",
            text=text,
            segments=segment(text),
            font=decide_size("quote", [text], sizes.quote_body, thumbnail, config.sizing),
        )
    attribution = TextBlock(
        role="attribution",
        text=slide.title,
        segments=segment(slide.title),
        font=fixed_size("attribution", sizes.quote_attribution.pick(thumbnail), thumbnail),
    )
    return QuoteCardView(
        slide_id=slide.id,
        quote=quote,
        attribution=attribution,
        show_quote_mark=not thumbnail,
        thumbnail=thumbnail,
    )


def _layout_media(slide: Slide, thumbnail: bool, config: DeckConfig) -> MediaColumnsView:
    sizes = config.sizes
    side = "left" if slide.layout_tag == LayoutTag.IMAGE_LEFT else "right"
    font = decide_size("body", slide.content, sizes.image_body, thumbnail, config.sizing)
    return MediaColumnsView(
        slide_id=slide.id,
        header=_header(slide.title, sizes.image_header, thumbnail),
        bullets=_bullets(slide.content, font),
        image=ImageSlot(url=slide.image_url or None, alt=slide.title),
        image_side=side,
        thumbnail=thumbnail,
    )


def _layout_split(slide: Slide, thumbnail: bool, config: DeckConfig) -> SplitColumnsView:
    sizes = config.sizes
    half = math.ceil(len(slide.content) / 2)
    # One size for both columns, from the combined content
    font = decide_size("body", slide.content, sizes.split_body, thumbnail, config.sizing)
    return SplitColumnsView(
        slide_id=slide.id,
        header=_header(slide.title, sizes.split_header, thumbnail),
        left=_bullets(slide.content[:half], font),
        right=_bullets(slide.content[half:], font),
        thumbnail=thumbnail,
    )


def _layout_content(slide: Slide, thumbnail: bool, config: DeckConfig) -> ContentColumnView:
    sizes = config.sizes
    font = decide_size("body", slide.content, sizes.content_body, thumbnail, config.sizing)
    return ContentColumnView(
        slide_id=slide.id,
        header=_header(slide.title, sizes.content_header, thumbnail),
        bullets=_bullets(slide.content, font),
        thumbnail=thumbnail,
    )


_BUILDERS: Dict[Arrangement, Callable[[Slide, bool, DeckConfig], SlideView]] = {
    Arrangement.TITLE_CARD: _layout_title,
    Arrangement.QUOTE_CARD: _layout_quote,
    Arrangement.MEDIA_LEFT: _layout_media,
    Arrangement.MEDIA_RIGHT: _layout_media,
    Arrangement.SPLIT_COLUMNS: _layout_split,
    Arrangement.CONTENT_COLUMN: _layout_content,
}


def layout_slide(
    slide: Slide,
    thumbnail: bool = False,
    config: Optional[DeckConfig] = None,
) -> SlideView:
    """
    Build the view of *slide* for one render.

    Args:
        slide: Slide to lay out (not modified).
        thumbnail: Thumbnail mode (reduced sizes, no decorations).
        config: Size table and sizing policy; the global config by default.

    Returns:
        One of the five view dataclasses.
    """
    config = config or get_deck_config()
    arrangement = select_template(slide.layout)
    if slide.layout_tag is None:
        logger.debug(f"Unknown layout {slide.layout!r} on slide {slide.id}, using content column")
    return _BUILDERS[arrangement](slide, thumbnail, config)


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------

def view_from_dict(d: Dict[str, Any]) -> SlideView:
    """
    Restore a view from to_dict() output.

    Raises:
        ValueError: If the arrangement is missing or unknown.
    """
    try:
        arrangement = Arrangement(d.get("arrangement"))
    except ValueError:
        raise ValueError(f"Unknown view arrangement: {d.get('arrangement')!r}") from None

    slide_id = d.get("slide_id", "")
    thumbnail = d.get("thumbnail", False)

    if arrangement == Arrangement.TITLE_CARD:
        sub = d.get("subtitle")
        return TitleCardView(
            slide_id=slide_id,
            title=TextBlock.from_dict(d["title"]),
            subtitle=TextBlock.from_dict(sub) if sub else None,
            thumbnail=thumbnail,
        )
    if arrangement == Arrangement.QUOTE_CARD:
        quote = d.get("quote")
        return QuoteCardView(
            slide_id=slide_id,
            quote=TextBlock.from_dict(quote) if quote else None,
            attribution=TextBlock.from_dict(d["attribution"]),
            show_quote_mark=d.get("show_quote_mark", not thumbnail),
            thumbnail=thumbnail,
        )
    if arrangement in (Arrangement.MEDIA_LEFT, Arrangement.MEDIA_RIGHT):
        return MediaColumnsView(
            slide_id=slide_id,
            header=TextBlock.from_dict(d["header"]),
            bullets=BulletList.from_dict(d["bullets"]),
            image=ImageSlot.from_dict(d.get("image", {})),
            image_side="left" if arrangement == Arrangement.MEDIA_LEFT else "right",
            thumbnail=thumbnail,
        )
    if arrangement == Arrangement.SPLIT_COLUMNS:
        return SplitColumnsView(
            slide_id=slide_id,
            header=TextBlock.from_dict(d["header"]),
            left=BulletList.from_dict(d["left"]),
            right=BulletList.from_dict(d["right"]),
            thumbnail=thumbnail,
        )
    return ContentColumnView(
        slide_id=slide_id,
        header=TextBlock.from_dict(d["header"]),
        bullets=BulletList.from_dict(d["bullets"]),
        thumbnail=thumbnail,
    )


def size_table(view: SlideView) -> List[FontSizeDecision]:
    """All sized blocks of a view, in reading order."""
    if isinstance(view, TitleCardView):
        blocks = [view.title, view.subtitle]
        return [b.font for b in blocks if b is not None]
    if isinstance(view, QuoteCardView):
        blocks = [view.quote, view.attribution]
        return [b.font for b in blocks if b is not None]
    if isinstance(view, SplitColumnsView):
        return [view.header.font, view.left.font]
    return [view.header.font, view.bullets.font]

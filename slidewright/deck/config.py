"""
Configuration for the Slidewright deck family.

The sizing heuristic constants and the per-variant size table live here so
the policy can be swapped or tested apart from the layout dispatch. Every
section round-trips through to_dict()/from_dict(); YAML files are loaded
with load_deck_config().
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
import logging

import yaml

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Sizing policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SizingPolicy:
    """Constants of the complexity-weighted font-size heuristic."""
    easy_threshold: int = 300               # complexity at or below: no shrink
    hard_limit: int = 1200                  # complexity where shrink reaches max_shrink
    max_shrink: float = 0.6                 # 1.0 → 0.4 between the two thresholds
    thumbnail_ratio: float = 0.4            # thumbnails: fixed fraction of base size
    line_weight: int = 40                   # each line costs as much as 40 characters

    def __post_init__(self):
        if self.hard_limit <= self.easy_threshold:
            raise ValueError(
                f"hard_limit ({self.hard_limit}) must exceed easy_threshold ({self.easy_threshold})"
            )
        if not 0.0 <= self.max_shrink <= 1.0:
            raise ValueError(f"max_shrink must be within [0, 1], got {self.max_shrink}")
        if not 0.0 < self.thumbnail_ratio <= 1.0:
            raise ValueError(f"thumbnail_ratio must be within (0, 1], got {self.thumbnail_ratio}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "easy_threshold": self.easy_threshold,
            "hard_limit": self.hard_limit,
            "max_shrink": self.max_shrink,
            "thumbnail_ratio": self.thumbnail_ratio,
            "line_weight": self.line_weight,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SizingPolicy":
        return cls(
            easy_threshold=d.get("easy_threshold", 300),
            hard_limit=d.get("hard_limit", 1200),
            max_shrink=d.get("max_shrink", 0.6),
            thumbnail_ratio=d.get("thumbnail_ratio", 0.4),
            line_weight=d.get("line_weight", 40),
        )


DEFAULT_SIZING_POLICY = SizingPolicy()


# ---------------------------------------------------------------------------
# Per-variant size table
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RoleSizes:
    """(base, min) pairs of a complexity-scaled text role, per mode."""
    base: int
    minimum: int
    thumb_base: int
    thumb_minimum: int

    def pick(self, thumbnail: bool) -> Tuple[int, int]:
        if thumbnail:
            return self.thumb_base, self.thumb_minimum
        return self.base, self.minimum

    def to_list(self) -> list:
        return [self.base, self.minimum, self.thumb_base, self.thumb_minimum]

    @classmethod
    def from_list(cls, values) -> "RoleSizes":
        base, minimum, thumb_base, thumb_minimum = (int(v) for v in values)
        return cls(base, minimum, thumb_base, thumb_minimum)


@dataclass(frozen=True)
class FixedSize:
    """A text role that is never complexity-scaled, only switched by mode."""
    size: int
    thumb_size: int
    css_class: str = ""                     # utility class in full mode, e.g. "text-3xl"
    thumb_css_class: str = ""

    def pick(self, thumbnail: bool) -> int:
        return self.thumb_size if thumbnail else self.size

    def pick_class(self, thumbnail: bool) -> str:
        return self.thumb_css_class if thumbnail else self.css_class

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"size": self.size, "thumb_size": self.thumb_size}
        if self.css_class:
            d["css_class"] = self.css_class
        if self.thumb_css_class:
            d["thumb_css_class"] = self.thumb_css_class
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FixedSize":
        return cls(
            size=int(d["size"]),
            thumb_size=int(d["thumb_size"]),
            css_class=d.get("css_class", ""),
            thumb_css_class=d.get("thumb_css_class", ""),
        )


@dataclass
class VariantSizeTable:
    """Size configuration of every layout variant (pixel units)."""
    title_title: RoleSizes = RoleSizes(64, 32, 24, 12)
    title_subtitle: RoleSizes = RoleSizes(28, 16, 12, 8)
    quote_body: RoleSizes = RoleSizes(40, 20, 14, 10)
    quote_attribution: FixedSize = FixedSize(20, 10)
    image_body: RoleSizes = RoleSizes(20, 12, 10, 8)
    image_header: FixedSize = FixedSize(44, 16, "text-3xl", "text-sm")
    split_body: RoleSizes = RoleSizes(18, 12, 9, 7)
    split_header: FixedSize = FixedSize(44, 16, "text-3xl", "text-sm")
    content_body: RoleSizes = RoleSizes(26, 14, 11, 9)
    content_header: FixedSize = FixedSize(44, 16)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": {
                "title": self.title_title.to_list(),
                "subtitle": self.title_subtitle.to_list(),
            },
            "quote": {
                "body": self.quote_body.to_list(),
                "attribution": self.quote_attribution.to_dict(),
            },
            "image": {
                "body": self.image_body.to_list(),
                "header": self.image_header.to_dict(),
            },
            "split": {
                "body": self.split_body.to_list(),
                "header": self.split_header.to_dict(),
            },
            "content": {
                "body": self.content_body.to_list(),
                "header": self.content_header.to_dict(),
            },
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "VariantSizeTable":
        defaults = cls()
        t = d.get("title", {})
        q = d.get("quote", {})
        im = d.get("image", {})
        sp = d.get("split", {})
        co = d.get("content", {})

        def _roles(section: Dict[str, Any], key: str, default: RoleSizes) -> RoleSizes:
            return RoleSizes.from_list(section[key]) if key in section else default

        def _fixed(section: Dict[str, Any], key: str, default: FixedSize) -> FixedSize:
            return FixedSize.from_dict(section[key]) if key in section else default

        return cls(
            title_title=_roles(t, "title", defaults.title_title),
            title_subtitle=_roles(t, "subtitle", defaults.title_subtitle),
            quote_body=_roles(q, "body", defaults.quote_body),
            quote_attribution=_fixed(q, "attribution", defaults.quote_attribution),
            image_body=_roles(im, "body", defaults.image_body),
            image_header=_fixed(im, "header", defaults.image_header),
            split_body=_roles(sp, "body", defaults.split_body),
            split_header=_fixed(sp, "header", defaults.split_header),
            content_body=_roles(co, "body", defaults.content_body),
            content_header=_fixed(co, "header", defaults.content_header),
        )


# ---------------------------------------------------------------------------
# Rendering and export
# ---------------------------------------------------------------------------

@dataclass
class RenderConfig:
    """HTML rendering layer configuration."""
    math: str = "katex"                     # katex | plain
    slide_width: int = 1280
    slide_height: int = 720
    thumbnails: bool = True                 # also render the thumbnail rail
    thumbnail_width: int = 224              # rail width of one thumbnail (px)
    katex_version: str = "0.16.11"

    def __post_init__(self):
        valid = ("katex", "plain")
        if self.math not in valid:
            raise ValueError(f"Invalid math renderer {self.math!r}, must be one of {valid}")


@dataclass
class ExportConfig:
    """Page geometry and file naming handed to the rasterizer."""
    page_width: int = 1280
    page_height: int = 720
    orientation: str = "landscape"          # landscape | portrait
    capture_scale: int = 2
    jpeg_quality: float = 0.95
    pdf_suffix: str = "_Presentation.pdf"
    png_prefix: str = "Slide_"

    def __post_init__(self):
        valid = ("landscape", "portrait")
        if self.orientation not in valid:
            raise ValueError(f"Invalid orientation {self.orientation!r}, must be one of {valid}")


# ---------------------------------------------------------------------------
# Top-level configuration
# ---------------------------------------------------------------------------

@dataclass
class DeckConfig:
    """Top-level configuration for the deck pipeline."""
    sizing: SizingPolicy = field(default_factory=SizingPolicy)
    sizes: VariantSizeTable = field(default_factory=VariantSizeTable)
    render: RenderConfig = field(default_factory=RenderConfig)
    export: ExportConfig = field(default_factory=ExportConfig)

    # Pipeline input
    presentation_path: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the plain dict passed to kernels."""
        return {
            "sizing": self.sizing.to_dict(),
            "sizes": self.sizes.to_dict(),
            "render": {
                "math": self.render.math,
                "slide_width": self.render.slide_width,
                "slide_height": self.render.slide_height,
                "thumbnails": self.render.thumbnails,
                "thumbnail_width": self.render.thumbnail_width,
                "katex_version": self.render.katex_version,
            },
            "export": {
                "page_width": self.export.page_width,
                "page_height": self.export.page_height,
                "orientation": self.export.orientation,
                "capture_scale": self.export.capture_scale,
                "jpeg_quality": self.export.jpeg_quality,
                "pdf_suffix": self.export.pdf_suffix,
                "png_prefix": self.export.png_prefix,
            },
            "presentation_path": self.presentation_path,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DeckConfig":
        """Deserialize from dictionary; missing keys take defaults."""
        rd = d.get("render", {})
        ex = d.get("export", {})
        return cls(
            sizing=SizingPolicy.from_dict(d.get("sizing", {})),
            sizes=VariantSizeTable.from_dict(d.get("sizes", {})),
            render=RenderConfig(
                math=rd.get("math", "katex"),
                slide_width=rd.get("slide_width", 1280),
                slide_height=rd.get("slide_height", 720),
                thumbnails=rd.get("thumbnails", True),
                thumbnail_width=rd.get("thumbnail_width", 224),
                katex_version=rd.get("katex_version", "0.16.11"),
            ),
            export=ExportConfig(
                page_width=ex.get("page_width", 1280),
                page_height=ex.get("page_height", 720),
                orientation=ex.get("orientation", "landscape"),
                capture_scale=ex.get("capture_scale", 2),
                jpeg_quality=ex.get("jpeg_quality", 0.95),
                pdf_suffix=ex.get("pdf_suffix", "_Presentation.pdf"),
                png_prefix=ex.get("png_prefix", "Slide_"),
            ),
            presentation_path=d.get("presentation_path", ""),
        )


def load_deck_config(path: Union[str, Path]) -> DeckConfig:
    """
    Load a DeckConfig from a YAML file.

    An empty file yields the defaults.

    Raises:
        FileNotFoundError: If *path* does not exist
        ValueError: If the YAML top level is not a mapping, or a value is invalid
    """
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    logger.debug(f"Loaded deck config from {path}")
    return DeckConfig.from_dict(data)


# ---------------------------------------------------------------------------
# Global singleton
# ---------------------------------------------------------------------------

_global_config: Optional[DeckConfig] = None


def get_deck_config() -> DeckConfig:
    """Get global deck configuration (lazy-loaded default)."""
    global _global_config
    if _global_config is None:
        _global_config = DeckConfig()
    return _global_config


def set_deck_config(config: DeckConfig) -> None:
    """Set the global deck configuration."""
    global _global_config
    _global_config = config

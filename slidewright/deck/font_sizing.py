"""
Complexity-weighted font-size estimation.

A closed-form proxy for "will this text fit": characters plus a fixed
weight per line. It does not measure rendered glyphs, so unusual glyph
widths can still over- or under-fit.

    complexity = chars + lines * line_weight
    complexity <= easy_threshold           -> base size
    easy_threshold < complexity            -> linear shrink from 1.0 to
                                              1 - max_shrink at hard_limit,
                                              floored at min/base
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from slidewright.deck.config import DEFAULT_SIZING_POLICY, RoleSizes, SizingPolicy


def complexity(content: Sequence[str], policy: Optional[SizingPolicy] = None) -> int:
    """Weighted text complexity: total characters plus line_weight per line."""
    policy = policy or DEFAULT_SIZING_POLICY
    text_length = sum(len(line) for line in content)
    return text_length + len(content) * policy.line_weight


def estimate_size(
    content: Sequence[str],
    base_size: int,
    min_size: int,
    thumbnail: bool = False,
    policy: Optional[SizingPolicy] = None,
) -> int:
    """
    Font size in pixels for a text block.

    Args:
        content: Lines of the block (one per bullet / title line).
        base_size: Nominal size for short content.
        min_size: Lower bound for long content.
        thumbnail: Thumbnail mode ignores content entirely.
        policy: Heuristic constants (defaults to DEFAULT_SIZING_POLICY).

    Returns:
        Integer pixel size, truncated (never rounded up).
    """
    policy = policy or DEFAULT_SIZING_POLICY

    if base_size <= 0:
        return 0

    if thumbnail:
        return math.floor(base_size * policy.thumbnail_ratio)

    c = complexity(content, policy)
    if c <= policy.easy_threshold:
        return base_size

    floor_ratio = min_size / base_size
    span = policy.hard_limit - policy.easy_threshold
    linear = 1 - ((c - policy.easy_threshold) / span) * policy.max_shrink

    # floor(base * min/base) can land one pixel under min_size in floats
    if linear <= floor_ratio:
        return math.floor(min_size)
    return math.floor(base_size * linear)


def px(size: int) -> str:
    """CSS size token."""
    return f"{size}px"


@dataclass(frozen=True)
class FontSizeDecision:
    """Size chosen for one text block in one render."""
    role: str
    size: int
    base: int
    minimum: int
    complexity: int
    thumbnail: bool = False

    @property
    def scaled(self) -> bool:
        return self.size != self.base and not self.thumbnail

    @property
    def token(self) -> str:
        return px(self.size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role,
            "size": self.size,
            "base": self.base,
            "minimum": self.minimum,
            "complexity": self.complexity,
            "thumbnail": self.thumbnail,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> FontSizeDecision:
        return cls(
            role=d["role"],
            size=d["size"],
            base=d.get("base", d["size"]),
            minimum=d.get("minimum", d["size"]),
            complexity=d.get("complexity", 0),
            thumbnail=d.get("thumbnail", False),
        )


def decide_size(
    role: str,
    content: Sequence[str],
    sizes: RoleSizes,
    thumbnail: bool = False,
    policy: Optional[SizingPolicy] = None,
) -> FontSizeDecision:
    """Run estimate_size() with the (base, min) pair of *sizes* for the mode."""
    base, minimum = sizes.pick(thumbnail)
    return FontSizeDecision(
        role=role,
        size=estimate_size(content, base, minimum, thumbnail, policy),
        base=base,
        minimum=minimum,
        complexity=complexity(content, policy),
        thumbnail=thumbnail,
    )


def fixed_size(role: str, size: int, thumbnail: bool = False) -> FontSizeDecision:
    """Decision for a role that is switched by mode but never scaled."""
    return FontSizeDecision(
        role=role, size=size, base=size, minimum=size, complexity=0, thumbnail=thumbnail,
    )

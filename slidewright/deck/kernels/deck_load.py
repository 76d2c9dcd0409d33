"""
Kernel: deck_load
Stage: 1 (Load)

Reads a presentation document (generator JSON), normalizes it into the
Presentation model and reports per-layout statistics. Unknown layout tags
are kept as-is and reported as warnings; they render as the content column.
"""

from __future__ import annotations

import json
import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, List

from slidewright.base import Kernel, KernelInput
from slidewright.deck.math_segment import has_math
from slidewright.deck.models import Presentation

logger = logging.getLogger(__name__)


class DeckLoadKernel(Kernel):
    """Load and normalize a presentation document."""

    name = "deck_load"
    version = "1.0.0"
    category = "deck"
    stage = 1
    description = "Presentation JSON → normalized Presentation model"

    requires: List[str] = []
    provides: List[str] = ["presentation"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        raw_path = input.config.get("presentation_path", "")
        if not raw_path:
            raise ValueError("config 'presentation_path' is required")

        path = Path(raw_path)
        # Relative paths: workspace first, then the current directory
        if not path.is_absolute() and (input.workspace / path).exists():
            path = input.workspace / path
        if not path.exists():
            raise FileNotFoundError(f"Presentation file not found: {path}")

        try:
            document = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e

        presentation = Presentation.from_dict(document)

        warnings: List[str] = []
        layouts: Counter = Counter()
        unknown = 0
        math_slides = 0
        with_images = 0
        for i, slide in enumerate(presentation.slides):
            if slide.layout_tag is None:
                unknown += 1
                warnings.append(
                    f"Slide {i + 1} ({slide.id}): unknown layout {slide.layout!r}, rendered as content"
                )
                layouts["content"] += 1
            else:
                layouts[slide.layout_tag.value] += 1
            fields = [slide.title, slide.subtitle or ""] + slide.content
            if any(has_math(f) for f in fields):
                math_slides += 1
            if slide.image_url:
                with_images += 1

        for w in warnings:
            logger.warning(f"[deck_load] {w}")

        logger.info(
            f"[deck_load] {len(presentation.slides)} slides from {path.name} "
            f"(theme={presentation.theme.value}, palette={presentation.palette.name})"
        )

        return {
            "source_path": str(path),
            "presentation": presentation.to_dict(),
            "statistics": {
                "slide_count": len(presentation.slides),
                "by_layout": dict(sorted(layouts.items())),
                "unknown_layouts": unknown,
                "slides_with_math": math_slides,
                "slides_with_images": with_images,
                "source_count": len(presentation.sources),
            },
            "warnings": warnings,
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        stats = data.get("statistics", {})
        title = data.get("presentation", {}).get("title", "?")
        by_layout = ", ".join(f"{k}={v}" for k, v in stats.get("by_layout", {}).items())
        parts = [f"Loaded '{title}': {stats.get('slide_count', 0)} slides"]
        if by_layout:
            parts.append(by_layout)
        if stats.get("unknown_layouts"):
            parts.append(f"{stats['unknown_layouts']} unknown layouts")
        if stats.get("slides_with_math"):
            parts.append(f"{stats['slides_with_math']} with math")
        return " | ".join(parts)

"""
Kernel: deck_layout_plan
Stage: 2 (Layout)

Runs the layout engine on every slide, in full and thumbnail mode, and
persists the resulting views: arrangement, segmented text and the font
size of each text block.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, List

from slidewright.base import Kernel, KernelInput
from slidewright.deck.config import DeckConfig
from slidewright.deck.models import Presentation
from slidewright.deck.templates import layout_slide, size_table

logger = logging.getLogger(__name__)


class DeckLayoutPlanKernel(Kernel):
    """Lay out every slide of the loaded presentation."""

    name = "deck_layout_plan"
    version = "1.0.0"
    category = "deck"
    stage = 2
    description = "Slides → template views with segmented text and font sizes"

    requires: List[str] = ["deck_load"]
    provides: List[str] = ["slide_views"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        loaded = input.load("deck_load")
        presentation = Presentation.from_dict(loaded["presentation"])
        config = DeckConfig.from_dict(input.config)
        with_thumbnails = config.render.thumbnails

        slides: List[Dict[str, Any]] = []
        arrangements: Counter = Counter()
        scaled = 0
        min_size = None

        for index, slide in enumerate(presentation.slides):
            full = layout_slide(slide, thumbnail=False, config=config)
            arrangements[full.arrangement.value] += 1

            for decision in size_table(full):
                if decision.scaled:
                    scaled += 1
                if min_size is None or decision.size < min_size:
                    min_size = decision.size

            entry: Dict[str, Any] = {
                "index": index,
                "slide_id": slide.id,
                "layout": slide.layout,
                "full": full.to_dict(),
            }
            if with_thumbnails:
                entry["thumbnail"] = layout_slide(slide, thumbnail=True, config=config).to_dict()
            slides.append(entry)

        logger.info(
            f"[deck_layout_plan] {len(slides)} slides laid out, {scaled} text blocks scaled down"
        )

        return {
            "slides": slides,
            "statistics": {
                "slide_count": len(slides),
                "by_arrangement": dict(sorted(arrangements.items())),
                "scaled_blocks": scaled,
                "min_font_size": min_size or 0,
                "thumbnails": with_thumbnails,
            },
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        stats = data.get("statistics", {})
        by_arr = ", ".join(f"{k}={v}" for k, v in stats.get("by_arrangement", {}).items())
        return (
            f"Layout: {stats.get('slide_count', 0)} slides ({by_arr}) | "
            f"{stats.get('scaled_blocks', 0)} scaled blocks, min {stats.get('min_font_size', 0)}px"
        )

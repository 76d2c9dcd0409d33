"""
Kernel: deck_export
Stage: 3 (Rendering)

Bundle the rendered deck into an output folder:
    {workspace}/output/presentation.html
    {workspace}/output/thumbnails.html
    {workspace}/output/metadata.json

metadata.json carries what a rasterizer needs to produce the PDF and PNG
exports: page geometry, capture scale, JPEG quality and file names.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List

from slidewright.base import Kernel, KernelInput
from slidewright.deck.config import DeckConfig
from slidewright.deck.editing import pdf_filename, slide_png_filename
from slidewright.deck.models import Presentation

logger = logging.getLogger(__name__)


class DeckExportKernel(Kernel):
    """Write the HTML deck, thumbnail rail and export metadata."""

    name = "deck_export"
    version = "1.0.0"
    category = "deck"
    stage = 3
    description = "HTML deck → output folder with rasterizer metadata"

    requires: List[str] = ["deck_load", "deck_html_render"]
    provides: List[str] = ["deck_bundle"]

    def compute(self, input: KernelInput) -> Dict[str, Any]:
        loaded = input.load("deck_load")
        rendered = input.load("deck_html_render")
        presentation = Presentation.from_dict(loaded["presentation"])
        export = DeckConfig.from_dict(input.config).export

        output_dir = input.workspace / "output"
        output_dir.mkdir(parents=True, exist_ok=True)

        files: List[str] = []
        total_bytes = 0

        html_file = output_dir / "presentation.html"
        html_file.write_text(rendered["html"], encoding="utf-8")
        files.append(html_file.name)
        total_bytes += html_file.stat().st_size

        thumbnails_file = None
        if rendered.get("thumbnails_html"):
            thumbnails_file = output_dir / "thumbnails.html"
            thumbnails_file.write_text(rendered["thumbnails_html"], encoding="utf-8")
            files.append(thumbnails_file.name)
            total_bytes += thumbnails_file.stat().st_size

        slide_count = len(presentation.slides)
        metadata = {
            "id": presentation.id,
            "title": presentation.title,
            "style": presentation.theme.value,
            "palette": presentation.palette.to_dict(),
            "sources": [s.to_dict() for s in presentation.sources],
            "slide_count": slide_count,
            "page": {
                "width": export.page_width,
                "height": export.page_height,
                "unit": "px",
                "orientation": export.orientation,
                "capture_scale": export.capture_scale,
                "jpeg_quality": export.jpeg_quality,
            },
            "exports": {
                "pdf": pdf_filename(presentation.title, export.pdf_suffix),
                "png": [slide_png_filename(i, export.png_prefix) for i in range(slide_count)],
            },
            "files": list(files),
            "math_renderer": rendered.get("math_renderer", ""),
            "generated_at": datetime.now().isoformat(),
        }
        metadata_file = output_dir / "metadata.json"
        metadata_file.write_text(
            json.dumps(metadata, indent=2, ensure_ascii=False),
            encoding="utf-8",
        )
        files.append(metadata_file.name)
        total_bytes += metadata_file.stat().st_size

        logger.info(f"[deck_export] {len(files)} files ({total_bytes:,} bytes) -> {output_dir}")

        return {
            "output_dir": str(output_dir),
            "html_file": str(html_file),
            "thumbnails_file": str(thumbnails_file) if thumbnails_file else "",
            "metadata_file": str(metadata_file),
            "files": files,
            "total_bytes": total_bytes,
            "pdf_name": metadata["exports"]["pdf"],
            "slide_count": slide_count,
        }

    def summarize(self, data: Dict[str, Any]) -> str:
        return (
            f"Export: {', '.join(data.get('files', []))} "
            f"({data.get('total_bytes', 0):,} bytes) | PDF name: {data.get('pdf_name', '?')} "
            f"| -> {data.get('output_dir', '?')}"
        )

"""
Text-math segmentation for slide text fields.

Splits a string into plain text, inline math ($...$) and block math
($$...$$) segments. Total over all inputs: unmatched dollar signs stay in
plain text, and nothing here raises.
"""

from __future__ import annotations

import re
from typing import List

from slidewright.deck.models import Segment, SegmentKind

# ---------------------------------------------------------------------------
# Compiled regex constants
# ---------------------------------------------------------------------------

# $$...$$ is tried before $...$ at each position; both shortest-match.
MATH_SPAN_RE = re.compile(r"\$\$(.*?)\$\$|\$(.*?)\$")
BLOCK_DELIM = "$$"


def is_whole_block(text: str) -> bool:
    """True when the trimmed text is a single $$...$$ span."""
    stripped = text.strip()
    return (
        len(stripped) >= 2 * len(BLOCK_DELIM)
        and stripped.startswith(BLOCK_DELIM)
        and stripped.endswith(BLOCK_DELIM)
    )


def segment(text: str) -> List[Segment]:
    """
    Partition *text* into ordered segments.

    A field that is entirely wrapped in $$ becomes one block segment.
    Otherwise spans are matched left to right without overlap; text
    between matches is kept as plain segments and empty runs are dropped.

    Examples:
        >>> [s.kind.value for s in segment("a $x$ b $$y$$ c")]
        ['plain', 'inline_math', 'plain', 'block_math', 'plain']
        >>> segment("")
        []
    """
    if not text:
        return []

    if is_whole_block(text):
        stripped = text.strip()
        return [Segment(SegmentKind.BLOCK_MATH, stripped[2:-2])]

    segments: List[Segment] = []
    pos = 0
    for m in MATH_SPAN_RE.finditer(text):
        if m.start() > pos:
            segments.append(Segment(SegmentKind.PLAIN, text[pos:m.start()]))
        if m.group(1) is not None:
            segments.append(Segment(SegmentKind.BLOCK_MATH, m.group(1)))
        else:
            segments.append(Segment(SegmentKind.INLINE_MATH, m.group(2)))
        pos = m.end()
    if pos < len(text):
        segments.append(Segment(SegmentKind.PLAIN, text[pos:]))

    return segments


def has_math(text: str) -> bool:
    """True when segmenting *text* yields at least one math segment."""
    return any(s.is_math for s in segment(text))


def join_segments(segments: List[Segment]) -> str:
    """Inverse of segment() for inputs with balanced delimiters."""
    return "".join(s.source() for s in segments)

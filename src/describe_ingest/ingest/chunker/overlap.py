"""Overlap extraction for chunk boundaries.

When a chunk is finalized because the next unit would not fit, the next
chunk starts with a little trailing context from the previous one. The
overlap is always a suffix of the finalized text, so its source offset is
simply ``end - len(overlap)``.

Boundary preference:
1. Text after the last sentence break in the tail window
2. Shortest whole-word suffix of at least the overlap length
3. Raw character suffix of exactly the overlap length
"""

from __future__ import annotations

import re

# Last sentence break followed by a terminator-free remainder
TRAILING_SENTENCE_PATTERN = re.compile(r"[.!?]\s+([^.!?]+)$")


def _word_start_positions(text: str, window_start: int) -> list[int]:
    """Return word start offsets in text at or after window_start."""
    positions: list[int] = []
    for pos in range(max(window_start, 0), len(text)):
        if text[pos].isspace():
            continue
        if pos == 0 or text[pos - 1].isspace():
            positions.append(pos)
    return positions


def get_overlap_text(text: str, overlap: int) -> str:
    """Get trailing context from text to seed the next chunk.

    Args:
        text: Text of the chunk just finalized
        overlap: Target overlap length in characters

    Returns:
        A suffix of text; empty when overlap <= 0. Sentence-aligned
        overlaps may be up to 2 * overlap long.

    Example:
        >>> get_overlap_text("First sentence. Second one here", 10)
        'Second one here'
    """
    if overlap <= 0 or not text:
        return ""
    if len(text) <= overlap:
        return text

    window_start = max(0, len(text) - overlap * 2)
    tail = text[window_start:]

    match = TRAILING_SENTENCE_PATTERN.search(tail)
    if match and len(match.group(1)) >= overlap / 2:
        return match.group(1)

    # Walk word starts backwards until the suffix is long enough
    for pos in reversed(_word_start_positions(text, window_start)):
        if len(text) - pos >= overlap:
            return text[pos:]

    return text[-overlap:]

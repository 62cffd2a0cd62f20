"""Core document chunking logic.

Chunking is an explicit fold over text units with an immutable state:
each step takes the previous _FoldState and one unit span and returns the
next state, so the finalize step can be exercised on its own.

Design rationale:
- Paragraph breaks (blank lines) are the preferred split points
- Paragraphs longer than max_size are subdivided into sentences, then
  words, then fixed-size character windows
- A chunk is finalized early once it reaches target_size
- A size-triggered split seeds the next chunk with overlap context
- A buffer below min_size is topped up from the next unit, cutting a
  single oversized word where the buffer reaches max_size
- A too-small tail is merged into the previous chunk
- Offsets always point into the line-ending-normalized input, and every
  chunk's text is exactly the slice it covers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from describe_ingest.ingest.chunker.models import Chunk, ChunkOptions
from describe_ingest.ingest.chunker.overlap import get_overlap_text
from describe_ingest.ingest.tokenizers import (
    ParagraphTokenizer,
    SentenceTokenizer,
    Span,
    Tokenizer,
    WhitespaceWordTokenizer,
    normalize_line_endings,
)

logger = logging.getLogger(__name__)

# Subdivision order for oversized units; past the last level, units are
# cut into max_size character windows.
UNIT_TOKENIZERS: tuple[Tokenizer, ...] = (
    ParagraphTokenizer(),
    SentenceTokenizer(),
    WhitespaceWordTokenizer(),
)
WINDOW_LEVEL = len(UNIT_TOKENIZERS)


@dataclass(frozen=True)
class _Buffer:
    """Open chunk: the span [start, end) of the normalized text.

    [start, seed_end) is overlap context copied from the previous chunk;
    seed_end == start when there is none.
    """

    start: int
    end: int
    seed_end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def has_content(self) -> bool:
        return self.end > self.seed_end


@dataclass(frozen=True)
class _FoldState:
    chunks: tuple[Chunk, ...] = ()
    buffer: _Buffer | None = None


def _finalize(
    state: _FoldState,
    text: str,
    options: ChunkOptions,
    carry_overlap: bool,
) -> _FoldState:
    """Emit the open buffer as a chunk.

    Args:
        state: Fold state with a non-empty buffer
        text: Normalized document text
        options: Chunking options
        carry_overlap: Seed the next buffer with overlap from this chunk

    Returns:
        New state with the chunk appended and the buffer reset or seeded
    """
    buf = state.buffer
    if buf is None:
        return state

    chunk = Chunk(
        text=text[buf.start : buf.end],
        chunk_index=len(state.chunks),
        start_char=buf.start,
        end_char=buf.end,
    )

    next_buffer: _Buffer | None = None
    if carry_overlap:
        seed = get_overlap_text(chunk.text, options.overlap)
        seed_start = buf.end - len(seed)
        while seed_start < buf.end and text[seed_start].isspace():
            seed_start += 1
        if seed_start < buf.end:
            next_buffer = _Buffer(start=seed_start, end=buf.end, seed_end=buf.end)

    return _FoldState(chunks=(*state.chunks, chunk), buffer=next_buffer)


def _subdivide(text: str, span: Span, level: int) -> tuple[list[Span], int]:
    """Split a unit into smaller units at the next level that actually splits it.

    Args:
        text: Normalized document text
        span: Unit to split
        level: Level the unit was produced at

    Returns:
        Tuple of (sub-spans, their level). Returns ([span], WINDOW_LEVEL)
        when the unit is already a single window.
    """
    piece = text[span.start : span.end]
    for next_level in range(level + 1, WINDOW_LEVEL):
        parts = [part.shift(span.start) for part in UNIT_TOKENIZERS[next_level].spans(piece)]
        if len(parts) > 1:
            return parts, next_level
    return [span], WINDOW_LEVEL


def _windows(span: Span, size: int) -> list[Span]:
    return [Span(pos, min(pos + size, span.end)) for pos in range(span.start, span.end, size)]


def _fold_parts(
    state: _FoldState,
    text: str,
    parts: list[Span],
    level: int,
    options: ChunkOptions,
) -> _FoldState:
    for part in parts:
        state = _step(state, text, part, level, options)
    return state


def _top_up_with_word(
    state: _FoldState,
    text: str,
    span: Span,
    options: ChunkOptions,
) -> _FoldState:
    """Fill an undersized buffer with the head of an unsplittable unit.

    The unit is cut where the buffer reaches max_size; the rest continues
    as a window-level unit.
    """
    buf = state.buffer
    if buf is None:
        return _step(state, text, span, WINDOW_LEVEL, options)

    cut = buf.start + options.max_size
    if cut <= span.start:
        # Only the whitespace before the unit would fit
        state = _finalize(state, text, options, carry_overlap=False)
        return _step(state, text, span, WINDOW_LEVEL, options)

    state = _step(state, text, Span(span.start, cut), WINDOW_LEVEL, options)
    return _step(state, text, Span(cut, span.end), WINDOW_LEVEL, options)


def _step(
    state: _FoldState,
    text: str,
    span: Span,
    level: int,
    options: ChunkOptions,
) -> _FoldState:
    """Fold one unit into the state.

    Args:
        state: Current fold state
        text: Normalized document text
        span: Unit to append (trimmed, non-empty)
        level: Tokenizer level the unit came from (WINDOW_LEVEL for windows)
        options: Chunking options

    Returns:
        The next fold state
    """
    buf = state.buffer

    if buf is not None and span.end - buf.start > options.max_size:
        if buf.has_content and buf.length >= options.min_size:
            state = _finalize(state, text, options, carry_overlap=True)
            buf = state.buffer

        if buf is not None and span.end - buf.start > options.max_size:
            if not buf.has_content:
                # Overlap seed and unit do not fit together
                state = replace(state, buffer=None)
                buf = None
            else:
                # Undersized buffer: top it up with smaller pieces of the unit
                parts, part_level = _subdivide(text, span, level)
                if part_level < WINDOW_LEVEL:
                    return _fold_parts(state, text, parts, part_level, options)
                return _top_up_with_word(state, text, span, options)

    if buf is None and span.length > options.max_size:
        parts, part_level = _subdivide(text, span, level)
        if part_level == WINDOW_LEVEL:
            parts = [w for part in parts for w in _windows(part, options.max_size)]
        return _fold_parts(state, text, parts, part_level, options)

    if buf is None:
        buf = _Buffer(start=span.start, end=span.end, seed_end=span.start)
    else:
        buf = replace(buf, end=span.end)
    state = replace(state, buffer=buf)

    if buf.length >= options.target_size:
        state = _finalize(state, text, options, carry_overlap=False)
    return state


def _close(state: _FoldState, text: str, options: ChunkOptions) -> list[Chunk]:
    """Flush the remaining buffer, merging a too-small tail into the last chunk."""
    buf = state.buffer
    chunks = list(state.chunks)
    if buf is None or not buf.has_content:
        return chunks

    if buf.length < options.min_size and chunks:
        last = chunks[-1]
        chunks[-1] = replace(last, text=text[last.start_char : buf.end], end_char=buf.end)
        return chunks

    return list(_finalize(state, text, options, carry_overlap=False).chunks)


def chunk_text(text: str, options: ChunkOptions | None = None) -> list[Chunk]:
    """Split text into chunks, preferring paragraph and sentence boundaries.

    Algorithm:
    1. Normalize line endings to LF
    2. Fold paragraphs into a buffer; when the next paragraph would push the
       buffer past max_size, emit the buffer and seed the next one with overlap
    3. Subdivide paragraphs longer than max_size (sentences, words, windows)
    4. Emit early whenever the buffer reaches target_size
    5. Emit the rest, merging it into the previous chunk if below min_size

    Args:
        text: Raw document text (any line-ending convention)
        options: Chunking options (defaults: 1000 / 200 / 1500 / 100)

    Returns:
        List of Chunk objects in document order; empty for blank text.
        Offsets refer to the line-ending-normalized text.
    """
    if options is None:
        options = ChunkOptions()

    if not text or not text.strip():
        return []

    normalized = normalize_line_endings(text)
    paragraphs = UNIT_TOKENIZERS[0].spans(normalized)

    state = _fold_parts(_FoldState(), normalized, paragraphs, 0, options)
    chunks = _close(state, normalized, options)

    logger.debug(
        f"Chunked {len(normalized)} chars ({len(paragraphs)} paragraphs) into {len(chunks)} chunks"
    )
    return chunks

"""Prosody-aware grouping of transcript segments into chunks.

Segments are folded in order into an open group. Before appending a
segment, the open group is closed if adding it would:
- push the summed segment durations past max_chunk_duration (gaps
  between captions do not count)
- push the word count past 1.5x target_word_count
- follow a pause >= pause_threshold once the group has 0.5x target words

The word floor on pause breaks keeps short pauses near the start of a
group from splitting it into fragments. Every segment lands in exactly
one chunk; the last open group is always emitted.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace

from describe_ingest.ingest.numeric import round_half_up
from describe_ingest.ingest.sentiment import SentimentClassifier
from describe_ingest.ingest.tokenizers import count_words
from describe_ingest.ingest.transcript.models import (
    ChunkWithAnalysis,
    EnrichedSegment,
    GroupingOptions,
)

logger = logging.getLogger(__name__)

# Word-count multipliers applied to target_word_count
WORD_CAP_FACTOR = 1.5
PAUSE_BREAK_WORD_FLOOR = 0.5


@dataclass(frozen=True)
class _OpenGroup:
    """Segments accumulated for the chunk being built."""

    members: tuple[EnrichedSegment, ...] = ()
    word_count: int = 0
    duration: int = 0

    def add(self, segment: EnrichedSegment, words: int) -> _OpenGroup:
        if not self.members:
            return _OpenGroup((segment,), words, segment.duration)
        return replace(
            self,
            members=(*self.members, segment),
            word_count=self.word_count + words,
            duration=self.duration + segment.duration,
        )


def should_break(
    group: _OpenGroup,
    segment: EnrichedSegment,
    words: int,
    options: GroupingOptions,
) -> bool:
    """Decide whether to close the open group before appending segment."""
    if not group.members:
        return False

    would_exceed_duration = group.duration + segment.duration > options.max_chunk_duration
    would_exceed_words = group.word_count + words > options.target_word_count * WORD_CAP_FACTOR
    natural_break = (
        segment.prosody.pause_before >= options.pause_threshold
        and group.word_count >= options.target_word_count * PAUSE_BREAK_WORD_FLOOR
    )
    return would_exceed_duration or would_exceed_words or natural_break


def finalize_group(
    members: Sequence[EnrichedSegment],
    classifier: SentimentClassifier,
    options: GroupingOptions,
) -> ChunkWithAnalysis:
    """Build a ChunkWithAnalysis from a non-empty run of segments.

    Args:
        members: Consecutive enriched segments
        classifier: Sentiment classifier applied to the joined text
        options: Grouping options (for the pause threshold)

    Returns:
        The analyzed chunk
    """
    text = " ".join(seg.text for seg in members)
    count = len(members)
    avg_emphasis = sum(seg.prosody.emphasis_score for seg in members) / count
    avg_speed = sum(seg.prosody.relative_speed for seg in members) / count
    significant_pauses = sum(
        1 for seg in members if seg.prosody.pause_before >= options.pause_threshold
    )
    sentiment = classifier.classify(text)

    return ChunkWithAnalysis(
        text=text,
        start_time=members[0].offset,
        end_time=members[-1].end,
        segment_indices=[seg.segment_index for seg in members],
        avg_emphasis=round_half_up(avg_emphasis, 2),
        avg_speed=round_half_up(avg_speed, 2),
        significant_pauses=significant_pauses,
        sentiment=sentiment.label,
        sentiment_score=sentiment.normalized_score,
    )


def group_segments_by_prosody(
    segments: Sequence[EnrichedSegment],
    classifier: SentimentClassifier,
    options: GroupingOptions | None = None,
) -> list[ChunkWithAnalysis]:
    """Group segments into chunks at natural pauses and size limits.

    Args:
        segments: Enriched segments in time order (see compute_prosody)
        classifier: Sentiment classifier for chunk texts
        options: Grouping options (defaults: 60000 ms / 1000 ms / 150 words)

    Returns:
        Chunks in order; segment_indices across chunks cover every input
        segment exactly once. Empty for empty input.
    """
    if options is None:
        options = GroupingOptions()

    chunks: list[ChunkWithAnalysis] = []
    group = _OpenGroup()

    for segment in segments:
        words = count_words(segment.text)
        if should_break(group, segment, words, options):
            chunks.append(finalize_group(group.members, classifier, options))
            group = _OpenGroup()
        group = group.add(segment, words)

    if group.members:
        chunks.append(finalize_group(group.members, classifier, options))

    logger.debug(f"Grouped {len(segments)} segments into {len(chunks)} chunks")
    return chunks

"""Prosody metrics from caption timing.

Speech rate, pauses and emphasis are estimated purely from caption offsets
and durations, not from audio.

Numeric behavior:
- average_wpm is total words / total duration, not a mean of per-segment
  rates, so longer segments weigh more
- Ratios are computed from unrounded values, then every stored metric is
  rounded once here (half-up); grouping averages the rounded values
- Zero durations and wordless segments fall back to 0 (rates) or 1 (ratios)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from describe_ingest.ingest.numeric import round_half_up, round_to_int, safe_ratio
from describe_ingest.ingest.tokenizers import count_words
from describe_ingest.ingest.transcript.models import (
    EnrichedSegment,
    ProsodyMetrics,
    ProsodyResult,
    TranscriptSegment,
    TranscriptSummary,
)

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60000


def pause_before(segments: Sequence[TranscriptSegment], index: int) -> int:
    """Gap in ms between the end of segment index-1 and the start of index.

    Overlapping captions give a negative gap, which is clamped to 0.
    """
    if index == 0:
        return 0
    return max(0, segments[index].offset - segments[index - 1].end)


def compute_prosody(segments: Sequence[TranscriptSegment]) -> ProsodyResult:
    """Calculate prosody metrics for transcript segments.

    Args:
        segments: Time-ordered caption segments

    Returns:
        ProsodyResult with one EnrichedSegment per input segment and the
        transcript-wide average WPM (0 for empty input)
    """
    if not segments:
        return ProsodyResult(segments=[], average_wpm=0)

    word_counts = [count_words(seg.text) for seg in segments]
    rates = [
        safe_ratio(words, seg.duration / MS_PER_MINUTE, 0)
        for words, seg in zip(word_counts, segments)
    ]

    total_words = sum(word_counts)
    total_duration = sum(seg.duration for seg in segments)
    average_wpm = safe_ratio(total_words, total_duration, 0) * MS_PER_MINUTE
    avg_word_duration = safe_ratio(total_duration, total_words, 0)

    enriched: list[EnrichedSegment] = []
    for index, seg in enumerate(segments):
        words = word_counts[index]
        relative_speed = safe_ratio(rates[index], average_wpm, 1)
        if words > 0:
            emphasis = safe_ratio(seg.duration / words, avg_word_duration, 1)
        else:
            emphasis = 1

        enriched.append(
            EnrichedSegment(
                text=seg.text,
                offset=seg.offset,
                duration=seg.duration,
                segment_index=index,
                prosody=ProsodyMetrics(
                    words_per_minute=round_to_int(rates[index]),
                    pause_before=round_to_int(pause_before(segments, index)),
                    relative_speed=round_half_up(relative_speed, 2),
                    emphasis_score=round_half_up(emphasis, 2),
                ),
            )
        )

    logger.debug(
        f"Prosody: {len(segments)} segments, {total_words} words, "
        f"{total_duration} ms, {average_wpm:.1f} wpm"
    )
    return ProsodyResult(segments=enriched, average_wpm=round_to_int(average_wpm))


def summarize_transcript(source_id: str, segments: Sequence[TranscriptSegment]) -> TranscriptSummary:
    """Run prosody analysis and collect transcript-level figures.

    Args:
        source_id: Identifier of the transcript (e.g. a video ID)
        segments: Time-ordered caption segments

    Returns:
        TranscriptSummary with enriched segments, space-joined full text,
        rounded average WPM and the end time of the last segment
    """
    result = compute_prosody(segments)
    return TranscriptSummary(
        source_id=source_id,
        segments=result.segments,
        full_text=" ".join(seg.text for seg in segments),
        average_wpm=result.average_wpm,
        total_duration=segments[-1].end if segments else 0,
    )

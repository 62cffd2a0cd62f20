"""Data models for the transcript pipeline.

- TranscriptSegment: A caption cue as received upstream
- ProsodyMetrics: Timing-derived speech metrics for one segment
- EnrichedSegment: A segment with its metrics and original position
- ProsodyResult: Enriched segments plus the transcript-wide speaking rate
- GroupingOptions: Parameters for prosody-aware grouping
- ChunkWithAnalysis: A group of segments with aggregate metrics and sentiment
- TranscriptSummary: Transcript-level view handed to the embedding side
"""

from __future__ import annotations

from dataclasses import dataclass, field

from describe_ingest.ingest.sentiment import SentimentLabel


@dataclass(frozen=True)
class TranscriptSegment:
    """Caption cue.

    Attributes:
        text: Caption text (newlines already replaced by spaces)
        offset: Start time in ms
        duration: Duration in ms
    """

    text: str
    offset: int
    duration: int

    @property
    def end(self) -> int:
        return self.offset + self.duration


@dataclass(frozen=True)
class ProsodyMetrics:
    """Timing-derived speech metrics for one segment.

    Attributes:
        words_per_minute: Speaking rate of this segment (rounded)
        pause_before: Gap in ms since the previous segment ended (rounded, >= 0)
        relative_speed: Rate relative to the transcript average (1.0 = average)
        emphasis_score: Duration per word relative to the transcript average
            (> 1 = slower, more deliberate speech)
    """

    words_per_minute: int
    pause_before: int
    relative_speed: float
    emphasis_score: float


@dataclass(frozen=True)
class EnrichedSegment:
    """Transcript segment with prosody metrics.

    Attributes:
        text: Caption text
        offset: Start time in ms
        duration: Duration in ms
        segment_index: Position in the original segment sequence
        prosody: Metrics computed for this segment
    """

    text: str
    offset: int
    duration: int
    segment_index: int
    prosody: ProsodyMetrics

    @property
    def end(self) -> int:
        return self.offset + self.duration


@dataclass(frozen=True)
class ProsodyResult:
    """Output of compute_prosody.

    Attributes:
        segments: Enriched segments, in input order
        average_wpm: Transcript-wide words per minute (rounded)
    """

    segments: list[EnrichedSegment]
    average_wpm: int


@dataclass(frozen=True)
class GroupingOptions:
    """Configuration for prosody-aware grouping.

    Attributes:
        max_chunk_duration: Maximum summed segment duration per chunk in ms (default: 60000)
        pause_threshold: Pause in ms that counts as a natural break (default: 1000)
        target_word_count: Target words per chunk (default: 150). Chunks are
            capped at 1.5x this and may break on a pause after 0.5x.
    """

    max_chunk_duration: int = 60000
    pause_threshold: int = 1000
    target_word_count: int = 150


@dataclass(frozen=True)
class ChunkWithAnalysis:
    """Group of consecutive segments with aggregate analysis.

    Attributes:
        text: Member texts joined with spaces
        start_time: Offset of the first member in ms
        end_time: End (offset + duration) of the last member in ms
        segment_indices: Member segment indices, in order
        avg_emphasis: Mean member emphasis score, 2 decimals
        avg_speed: Mean member relative speed, 2 decimals
        significant_pauses: Members whose pause_before meets the threshold
        sentiment: Sentiment label of the chunk text
        sentiment_score: Normalized sentiment score in [-1, 1]
    """

    text: str
    start_time: int
    end_time: int
    segment_indices: list[int]
    avg_emphasis: float
    avg_speed: float
    significant_pauses: int
    sentiment: SentimentLabel
    sentiment_score: float


@dataclass
class TranscriptSummary:
    """Transcript with prosody, ready for grouping.

    Attributes:
        source_id: Video ID or other identifier of the transcript
        segments: Enriched segments
        full_text: All segment texts joined with spaces
        average_wpm: Transcript-wide words per minute
        total_duration: End of the last segment in ms
    """

    source_id: str
    segments: list[EnrichedSegment] = field(default_factory=list)
    full_text: str = ""
    average_wpm: int = 0
    total_duration: int = 0

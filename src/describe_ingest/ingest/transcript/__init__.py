"""Transcript package - prosody analysis and grouping of caption segments.

Public API:
- TranscriptSegment, EnrichedSegment, ProsodyMetrics, ProsodyResult: Segment models
- GroupingOptions, ChunkWithAnalysis: Grouping configuration and output
- TranscriptSummary: Transcript-level figures
- compute_prosody: Per-segment speech rate, pause and emphasis
- summarize_transcript: Prosody plus full text and totals
- group_segments_by_prosody: Pause- and size-aware grouping with sentiment
- format_timestamp: H:MM:SS / M:SS display helper
- extract_video_id, parse_timed_text, parse_transcript_payload: Payload parsing
- write_transcript_chunks_jsonl: JSONL output
"""

from describe_ingest.ingest.transcript.grouping import (
    finalize_group,
    group_segments_by_prosody,
)
from describe_ingest.ingest.transcript.jsonl_writer import (
    build_transcript_record,
    transcript_source,
    write_transcript_chunks_jsonl,
)
from describe_ingest.ingest.transcript.models import (
    ChunkWithAnalysis,
    EnrichedSegment,
    GroupingOptions,
    ProsodyMetrics,
    ProsodyResult,
    TranscriptSegment,
    TranscriptSummary,
)
from describe_ingest.ingest.transcript.prosody import compute_prosody, summarize_transcript
from describe_ingest.ingest.transcript.timed_text import (
    extract_video_id,
    parse_segment_list,
    parse_timed_text,
    parse_transcript_payload,
)
from describe_ingest.ingest.transcript.timestamps import format_timestamp

__all__ = [
    # Models
    "ChunkWithAnalysis",
    "EnrichedSegment",
    "GroupingOptions",
    "ProsodyMetrics",
    "ProsodyResult",
    "TranscriptSegment",
    "TranscriptSummary",
    # Public API - Analysis
    "compute_prosody",
    "finalize_group",
    "group_segments_by_prosody",
    "summarize_transcript",
    # Public API - Parsing
    "extract_video_id",
    "parse_segment_list",
    "parse_timed_text",
    "parse_transcript_payload",
    # Public API - Output
    "build_transcript_record",
    "format_timestamp",
    "transcript_source",
    "write_transcript_chunks_jsonl",
]

"""JSONL output for analyzed transcript chunks."""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from describe_ingest.ingest.chunker.jsonl_writer import generate_record_id
from describe_ingest.ingest.chunker.models import WriteStats
from describe_ingest.ingest.transcript.models import ChunkWithAnalysis, TranscriptSummary

if TYPE_CHECKING:
    from describe_ingest.ingest.token_counting import TokenCounter

logger = logging.getLogger(__name__)


def transcript_source(source_id: str) -> str:
    """Source name used for transcript records, e.g. "youtube:dQw4w9WgXcQ"."""
    return f"youtube:{source_id}"


def build_transcript_record(
    chunk: ChunkWithAnalysis,
    chunk_index: int,
    summary: TranscriptSummary,
) -> dict[str, Any]:
    """Build the storage record for one transcript chunk.

    prosody_wpm is the transcript-wide average; the per-chunk figures are
    the relative speed and emphasis averages.
    """
    source = transcript_source(summary.source_id)
    return {
        "id": generate_record_id(source, chunk_index),
        "text": chunk.text,
        "source": source,
        "source_type": "youtube",
        "chunk_index": chunk_index,
        "segment_indices": chunk.segment_indices,
        "prosody_wpm": summary.average_wpm,
        "prosody_speed": chunk.avg_speed,
        "prosody_emphasis": chunk.avg_emphasis,
        "prosody_pauses": chunk.significant_pauses,
        "prosody_start_time": chunk.start_time,
        "prosody_end_time": chunk.end_time,
        "sentiment": chunk.sentiment,
        "sentiment_score": chunk.sentiment_score,
    }


def write_transcript_chunks_jsonl(
    summary: TranscriptSummary,
    chunks: Sequence[ChunkWithAnalysis],
    output_path: Path,
    token_counter: TokenCounter | None = None,
) -> WriteStats:
    """Write analyzed transcript chunks to a JSONL file.

    Args:
        summary: Transcript the chunks were grouped from
        chunks: Output of group_segments_by_prosody
        output_path: Path for the output JSONL file
        token_counter: Adds a token_count field to each record when given

    Returns:
        WriteStats with the number of records and tokens written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not chunks:
        logger.warning(f"No chunks produced for transcript {summary.source_id}")

    total_tokens = 0
    with output_path.open("w", encoding="utf-8") as f:
        for index, chunk in enumerate(chunks):
            record = build_transcript_record(chunk, index, summary)
            if token_counter is not None:
                token_count = token_counter.count(chunk.text)
                record["token_count"] = token_count
                total_tokens += token_count
            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    return WriteStats(chunks_written=len(chunks), total_tokens=total_tokens)

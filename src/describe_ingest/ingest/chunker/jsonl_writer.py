"""JSONL output for chunked documents.

This module turns chunked documents into records for the embedding and
storage side: one JSON object per line, with a deterministic record ID
derived from the source and chunk index.
"""

from __future__ import annotations

import hashlib
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from describe_ingest.ingest.chunker.core import chunk_text
from describe_ingest.ingest.chunker.models import ChunkedDocument, ChunkOptions, WriteStats
from describe_ingest.ingest.tokenizers import normalize_line_endings

if TYPE_CHECKING:
    from describe_ingest.ingest.token_counting import TokenCounter

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".txt", ".md")


def generate_record_id(source: str, chunk_index: int) -> str:
    """Generate a deterministic record ID.

    Format: first 16 hex characters of sha256("{source}:{chunk_index}").

    Args:
        source: Source identifier (relative file path or "youtube:<id>")
        chunk_index: The chunk index (0-based)

    Returns:
        A 16-character hex identifier

    Example:
        >>> len(generate_record_id("notes/intro.md", 0))
        16
    """
    digest = hashlib.sha256(f"{source}:{chunk_index}".encode()).hexdigest()
    return digest[:16]


def chunk_document(
    path: Path,
    data_dir: Path,
    options: ChunkOptions,
) -> ChunkedDocument:
    """Chunk a UTF-8 text document.

    Args:
        path: Path to a .txt or .md file
        data_dir: Data directory the source name is made relative to
        options: Chunking options

    Returns:
        ChunkedDocument whose source is the POSIX path relative to data_dir

    Raises:
        OSError: If the file cannot be read
        UnicodeDecodeError: If the file is not valid UTF-8
    """
    content = path.read_text(encoding="utf-8")
    source = path.relative_to(data_dir).as_posix()

    return ChunkedDocument(
        source=source,
        chunks=chunk_text(content, options),
        char_count=len(normalize_line_endings(content)),
    )


def write_chunks_jsonl(
    document: ChunkedDocument,
    output_path: Path,
    token_counter: TokenCounter | None = None,
) -> WriteStats:
    """Write a chunked document to a JSONL file.

    Args:
        document: ChunkedDocument to serialize
        output_path: Path for the output JSONL file
        token_counter: Adds a token_count field to each record when given

    Returns:
        WriteStats with the number of records and tokens written
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not document.chunks:
        logger.warning(f"No chunks produced for {document.source} (blank document?)")

    total_tokens = 0
    with output_path.open("w", encoding="utf-8") as f:
        for chunk in document.chunks:
            record: dict[str, Any] = {
                "id": generate_record_id(document.source, chunk.chunk_index),
                "text": chunk.text,
                "source": document.source,
                "source_type": "file",
                "chunk_index": chunk.chunk_index,
                "start_char": chunk.start_char,
                "end_char": chunk.end_char,
            }
            if token_counter is not None:
                token_count = token_counter.count(chunk.text)
                record["token_count"] = token_count
                total_tokens += token_count

            f.write(json.dumps(record, ensure_ascii=False) + "\n")

    return WriteStats(chunks_written=len(document.chunks), total_tokens=total_tokens)

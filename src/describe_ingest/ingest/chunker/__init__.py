"""Chunker package - document text chunking for embedding-ready segments.

This package splits plain document text into bounded, overlapping chunks
that prefer paragraph and sentence boundaries, and writes them as JSONL
records with stable offsets and IDs.

Public API:
- ChunkOptions: Frozen, validated size configuration
- ChunkOptionsError: Raised for inconsistent ChunkOptions
- Chunk: Single chunk with character offsets
- ChunkedDocument: Document with its chunks and source name
- WriteStats: Statistics from JSONL writing
- chunk_text: Main chunking function
- get_overlap_text: Boundary-aware overlap extraction
- chunk_document: File-based chunking
- write_chunks_jsonl: JSONL output
- generate_record_id: Deterministic record ID generation
"""

from describe_ingest.ingest.chunker.core import chunk_text
from describe_ingest.ingest.chunker.jsonl_writer import (
    SUPPORTED_EXTENSIONS,
    chunk_document,
    generate_record_id,
    write_chunks_jsonl,
)
from describe_ingest.ingest.chunker.models import (
    Chunk,
    ChunkedDocument,
    ChunkOptions,
    ChunkOptionsError,
    WriteStats,
)
from describe_ingest.ingest.chunker.overlap import get_overlap_text

__all__ = [
    # Constants
    "SUPPORTED_EXTENSIONS",
    # Models
    "Chunk",
    "ChunkOptions",
    "ChunkOptionsError",
    "ChunkedDocument",
    "WriteStats",
    # Public API - Chunking
    "chunk_document",
    "chunk_text",
    "get_overlap_text",
    # Public API - Output
    "generate_record_id",
    "write_chunks_jsonl",
]

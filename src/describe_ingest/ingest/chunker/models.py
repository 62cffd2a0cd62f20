"""Core data models for the document chunking pipeline.

This module contains the dataclasses used throughout the chunking process:
- ChunkOptions: Validated size parameters for chunking
- Chunk: A single text chunk with its offsets in the source text
- ChunkedDocument: A document split into chunks, tagged with its source
- WriteStats: Statistics from JSONL writing
"""

from __future__ import annotations

from dataclasses import dataclass, field


class ChunkOptionsError(ValueError):
    """Raised when ChunkOptions violate their size invariants."""

    pass


@dataclass(frozen=True)
class ChunkOptions:
    """Configuration for document chunking, in characters.

    Attributes:
        target_size: Buffer length at which a chunk is finalized early (default: 1000)
        min_size: Minimum trimmed length of an emitted chunk (default: 200)
        max_size: Maximum chunk length; longer paragraphs are subdivided (default: 1500)
        overlap: Length of trailing context repeated at the start of the
            next chunk after a size-triggered split (default: 100)

    Raises:
        ChunkOptionsError: Unless 0 <= min_size <= target_size <= max_size,
            max_size > 0 and 0 <= overlap < max_size.
    """

    target_size: int = 1000
    min_size: int = 200
    max_size: int = 1500
    overlap: int = 100

    def __post_init__(self) -> None:
        if self.max_size <= 0:
            raise ChunkOptionsError(f"max_size must be positive, got {self.max_size}")
        if self.min_size < 0:
            raise ChunkOptionsError(f"min_size must not be negative, got {self.min_size}")
        if not self.min_size <= self.target_size <= self.max_size:
            raise ChunkOptionsError(
                "expected min_size <= target_size <= max_size, got "
                f"{self.min_size} / {self.target_size} / {self.max_size}"
            )
        if not 0 <= self.overlap < self.max_size:
            raise ChunkOptionsError(
                f"overlap must be in [0, max_size), got {self.overlap} (max_size={self.max_size})"
            )


@dataclass(frozen=True)
class Chunk:
    """Single chunk of document text.

    Attributes:
        text: Chunk content, equal to normalized_text[start_char:end_char]
        chunk_index: Order within the document (0-indexed)
        start_char: Offset of the first character in the normalized text
        end_char: Offset one past the last character
    """

    text: str
    chunk_index: int
    start_char: int
    end_char: int


@dataclass
class ChunkedDocument:
    """Document split into chunks.

    Attributes:
        source: Document path relative to the data directory (POSIX style)
        chunks: Ordered list of chunks
        char_count: Length of the normalized document text
    """

    source: str
    chunks: list[Chunk] = field(default_factory=list)
    char_count: int = 0


@dataclass
class WriteStats:
    """Statistics from writing chunk records to JSONL.

    Attributes:
        chunks_written: Number of records written
        total_tokens: Sum of token counts (0 when token counting is disabled)
    """

    chunks_written: int
    total_tokens: int = 0

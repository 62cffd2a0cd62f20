"""Project configuration loaded from pyproject.toml."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from describe_ingest.ingest.chunker.models import ChunkOptions
from describe_ingest.ingest.transcript.models import GroupingOptions


class DescribeConfig(BaseModel):
    """Configuration for describe-ingest."""

    # Document chunking (characters)
    chunk_target_size: int = 1000
    chunk_min_size: int = 200
    chunk_max_size: int = 1500
    chunk_overlap: int = 100

    # Transcript grouping
    transcript_max_chunk_duration_ms: int = 60000
    transcript_pause_threshold_ms: int = 1000
    transcript_target_word_count: int = 150

    # Token counting for chunk records
    token_encoding: str = "cl100k_base"

    def chunk_options(self) -> ChunkOptions:
        """Build validated document chunking options.

        Raises:
            ChunkOptionsError: If the configured sizes are inconsistent
        """
        return ChunkOptions(
            target_size=self.chunk_target_size,
            min_size=self.chunk_min_size,
            max_size=self.chunk_max_size,
            overlap=self.chunk_overlap,
        )

    def grouping_options(self) -> GroupingOptions:
        """Build transcript grouping options."""
        return GroupingOptions(
            max_chunk_duration=self.transcript_max_chunk_duration_ms,
            pause_threshold=self.transcript_pause_threshold_ms,
            target_word_count=self.transcript_target_word_count,
        )


@lru_cache(maxsize=1)
def load_config() -> DescribeConfig:
    """Load configuration from pyproject.toml.

    Returns:
        DescribeConfig with settings from [tool.describe-ingest] section,
        falling back to defaults if not found.
    """
    pyproject_path = _find_pyproject()
    if pyproject_path is None:
        return DescribeConfig()

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)

    tool_config: dict[str, Any] = data.get("tool", {}).get("describe-ingest", {})
    return DescribeConfig(**tool_config)


def _find_pyproject() -> Path | None:
    """Find pyproject.toml by walking up from current file."""
    current = Path(__file__).resolve().parent
    for _ in range(10):  # Max 10 levels up
        candidate = current / "pyproject.toml"
        if candidate.exists():
            return candidate
        if current.parent == current:
            break
        current = current.parent
    return None

"""Shared pytest fixtures for describe-ingest tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from describe_ingest.ingest.sentiment import SentimentResult
from describe_ingest.ingest.transcript import TranscriptSegment

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return path to fixtures directory."""
    return FIXTURES_DIR


# =============================================================================
# DOCUMENT FIXTURES
# =============================================================================


def _sentence(i: int) -> str:
    return f"Sentence number {i} talks about the subject at a steady pace."


@pytest.fixture
def make_paragraph() -> Callable[..., str]:
    """Factory fixture building a paragraph of n distinct sentences.

    Usage:
        def test_something(make_paragraph):
            text = make_paragraph(5, start=10)
    """

    def _make(n: int, start: int = 0) -> str:
        return " ".join(_sentence(i) for i in range(start, start + n))

    return _make


@pytest.fixture
def multi_paragraph_text(make_paragraph: Callable[..., str]) -> str:
    """Twelve paragraphs of five sentences each (~310 chars per paragraph)."""
    return "\n\n".join(make_paragraph(5, start=p * 5) for p in range(12))


@pytest.fixture
def long_paragraph_text(make_paragraph: Callable[..., str]) -> str:
    """A single paragraph far longer than the default max size."""
    return make_paragraph(80)


# =============================================================================
# TRANSCRIPT FIXTURES
# =============================================================================


@pytest.fixture
def steady_segments() -> list[TranscriptSegment]:
    """Ten back-to-back 2-second segments of four words each."""
    return [
        TranscriptSegment(text=f"word{i} goes right here", offset=i * 2000, duration=2000)
        for i in range(10)
    ]


class StubClassifier:
    """Deterministic sentiment double that records its inputs."""

    def __init__(self, label: str = "neutral", normalized_score: float = 0.0) -> None:
        self.label = label
        self.normalized_score = normalized_score
        self.calls: list[str] = []

    def classify(self, text: str) -> SentimentResult:
        self.calls.append(text)
        return SentimentResult(
            label=self.label,  # type: ignore[arg-type]
            score=0,
            normalized_score=self.normalized_score,
            comparative=0,
        )


@pytest.fixture
def stub_classifier() -> StubClassifier:
    """Sentiment classifier double returning a fixed neutral result."""
    return StubClassifier()


class FakeTokenCounter:
    """Token counter double: one token per whitespace-separated word."""

    def count(self, text: str) -> int:
        return len(text.split())


@pytest.fixture
def fake_token_counter() -> FakeTokenCounter:
    """Token counter that needs no tokenizer download."""
    return FakeTokenCounter()

"""Sentiment classification for chunk text.

Transcript chunks are tagged positive, negative or neutral. Grouping only
depends on the SentimentClassifier protocol; AfinnSentimentClassifier is
the default implementation, scoring text against the AFINN word list.

Construct the classifier once and pass it to every grouping call; loading
the lexicon is the expensive part.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Protocol

from afinn import Afinn

from describe_ingest.ingest.numeric import round_half_up
from describe_ingest.ingest.tokenizers import count_words

SentimentLabel = Literal["positive", "negative", "neutral"]

# Comparative score (score per word) beyond which text is not neutral
NEUTRAL_BAND = 0.05

# Comparative scores rarely leave [-5, 5]; dividing maps them onto [-1, 1]
COMPARATIVE_SCALE = 5


@dataclass(frozen=True)
class SentimentResult:
    """Sentiment of a piece of text.

    Attributes:
        label: positive, negative or neutral
        score: Raw lexicon score (sum of word valences)
        normalized_score: Comparative score mapped to [-1, 1], 2 decimals
        comparative: Score divided by word count, 3 decimals
    """

    label: SentimentLabel
    score: float
    normalized_score: float
    comparative: float


class SentimentClassifier(Protocol):
    """Deterministic, side-effect-free text classifier."""

    def classify(self, text: str) -> SentimentResult: ...


def label_for_comparative(comparative: float) -> SentimentLabel:
    """Map a comparative score to a sentiment label."""
    if comparative > NEUTRAL_BAND:
        return "positive"
    if comparative < -NEUTRAL_BAND:
        return "negative"
    return "neutral"


class AfinnSentimentClassifier:
    """AFINN lexicon sentiment classifier.

    Args:
        language: AFINN word list language (default: "en")
    """

    def __init__(self, language: str = "en") -> None:
        self._afinn = Afinn(language=language)

    def classify(self, text: str) -> SentimentResult:
        """Classify text as positive, negative or neutral.

        Args:
            text: Text to classify

        Returns:
            SentimentResult; blank text is neutral with zero scores
        """
        word_count = count_words(text)
        if word_count == 0:
            return SentimentResult(label="neutral", score=0, normalized_score=0, comparative=0)

        score = self._afinn.score(text)
        comparative = score / word_count
        normalized = max(-1.0, min(1.0, comparative / COMPARATIVE_SCALE))

        return SentimentResult(
            label=label_for_comparative(comparative),
            score=score,
            normalized_score=round_half_up(normalized, 2),
            comparative=round_half_up(comparative, 3),
        )

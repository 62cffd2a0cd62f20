"""Heuristic tokenizers shared by the document and transcript pipelines.

Three interchangeable variants split text into character spans:
- WhitespaceWordTokenizer: runs of non-whitespace characters
- SentenceTokenizer: breaks after . ! ? followed by whitespace
- ParagraphTokenizer: breaks on blank lines

Spans are trimmed and carry offsets into the text they were computed
from, so callers can slice the original text back out. Splitting is
punctuation-based only; abbreviations ("Dr. Smith") are not special-cased.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Protocol

# Word: any run of non-whitespace characters
WORD_PATTERN = re.compile(r"\S+")

# Sentence break: whitespace preceded by a terminal punctuation mark
SENTENCE_BREAK_PATTERN = re.compile(r"(?<=[.!?])\s+")

# Paragraph break: a newline, optional whitespace, another newline
PARAGRAPH_BREAK_PATTERN = re.compile(r"\n\s*\n")


class Span(NamedTuple):
    """Half-open character range [start, end)."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start

    def shift(self, offset: int) -> Span:
        return Span(self.start + offset, self.end + offset)


class Tokenizer(Protocol):
    """Splits text into ordered, non-overlapping, trimmed spans."""

    def spans(self, text: str) -> list[Span]: ...

    def split(self, text: str) -> list[str]: ...


def normalize_line_endings(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")


def _trimmed_span(text: str, start: int, end: int) -> Span | None:
    """Shrink [start, end) to exclude surrounding whitespace, None if blank."""
    while start < end and text[start].isspace():
        start += 1
    while end > start and text[end - 1].isspace():
        end -= 1
    if start == end:
        return None
    return Span(start, end)


def _spans_between(text: str, pattern: re.Pattern[str]) -> list[Span]:
    """Return the trimmed, non-blank pieces of text between pattern matches."""
    result: list[Span] = []
    pos = 0
    for match in pattern.finditer(text):
        span = _trimmed_span(text, pos, match.start())
        if span is not None:
            result.append(span)
        pos = match.end()
    span = _trimmed_span(text, pos, len(text))
    if span is not None:
        result.append(span)
    return result


class _SpanTokenizer:
    def spans(self, text: str) -> list[Span]:
        raise NotImplementedError

    def split(self, text: str) -> list[str]:
        return [text[start:end] for start, end in self.spans(text)]


class WhitespaceWordTokenizer(_SpanTokenizer):
    """Whitespace-delimited words."""

    def spans(self, text: str) -> list[Span]:
        return [Span(m.start(), m.end()) for m in WORD_PATTERN.finditer(text)]

    def count(self, text: str) -> int:
        """Count whitespace-delimited non-empty tokens."""
        return sum(1 for _ in WORD_PATTERN.finditer(text))


class SentenceTokenizer(_SpanTokenizer):
    """Sentences ending in . ! or ? followed by whitespace.

    Example:
        >>> SentenceTokenizer().split("One. Two!  Three")
        ['One.', 'Two!', 'Three']
    """

    def spans(self, text: str) -> list[Span]:
        return _spans_between(text, SENTENCE_BREAK_PATTERN)


class ParagraphTokenizer(_SpanTokenizer):
    """Paragraphs separated by one or more blank lines.

    Expects LF line endings (see normalize_line_endings).
    """

    def spans(self, text: str) -> list[Span]:
        return _spans_between(text, PARAGRAPH_BREAK_PATTERN)


_WORDS = WhitespaceWordTokenizer()


def count_words(text: str) -> int:
    """Count whitespace-delimited words in text (0 for blank text)."""
    return _WORDS.count(text)

"""Unit tests for the document chunker.

Test strategy:
- Test option defaults and validation
- Test paragraph folding, early finalize and overlap seeding
- Test subdivision of oversized paragraphs (sentences, words, windows)
- Test tail merging and edge cases
- Test offset invariants on realistic input
"""

from collections.abc import Callable

import pytest

from describe_ingest.ingest.chunker import (
    Chunk,
    ChunkOptions,
    ChunkOptionsError,
    chunk_text,
)
from describe_ingest.ingest.chunker.overlap import get_overlap_text

# =============================================================================
# OPTIONS TESTS
# =============================================================================


class TestChunkOptions:
    """Tests for ChunkOptions defaults and validation."""

    @pytest.mark.unit
    def test_defaults(self) -> None:
        """Defaults should be 1000 / 200 / 1500 / 100."""
        options = ChunkOptions()
        assert options.target_size == 1000
        assert options.min_size == 200
        assert options.max_size == 1500
        assert options.overlap == 100

    @pytest.mark.unit
    def test_options_immutable(self) -> None:
        """Options should be a frozen dataclass."""
        options = ChunkOptions()
        with pytest.raises(AttributeError):
            options.target_size = 10  # type: ignore[misc]

    @pytest.mark.unit
    @pytest.mark.parametrize(
        ("target", "minimum", "maximum", "overlap"),
        [
            (100, 200, 1500, 10),  # target below min
            (2000, 200, 1500, 10),  # target above max
            (1000, -1, 1500, 10),  # negative min
            (0, 0, 0, 0),  # zero max
            (1000, 200, 1500, 1500),  # overlap not below max
            (1000, 200, 1500, -5),  # negative overlap
        ],
    )
    def test_invalid_options_rejected(
        self, target: int, minimum: int, maximum: int, overlap: int
    ) -> None:
        """Inconsistent sizes should raise ChunkOptionsError."""
        with pytest.raises(ChunkOptionsError):
            ChunkOptions(target_size=target, min_size=minimum, max_size=maximum, overlap=overlap)

    @pytest.mark.unit
    def test_options_error_is_value_error(self) -> None:
        """Callers catching ValueError should see option errors too."""
        with pytest.raises(ValueError):
            ChunkOptions(target_size=10, min_size=20, max_size=30, overlap=0)

    @pytest.mark.unit
    def test_overlap_may_exceed_min_size(self) -> None:
        """Overlap is bounded by max_size only."""
        options = ChunkOptions(target_size=10, min_size=1, max_size=15, overlap=2)
        assert options.overlap == 2


# =============================================================================
# BASIC CHUNKING TESTS
# =============================================================================


class TestChunkTextBasics:
    """Tests for simple inputs."""

    @pytest.mark.unit
    @pytest.mark.parametrize("text", ["", "   ", "\n\n\n", " \t\r\n "])
    def test_blank_text_returns_no_chunks(self, text: str) -> None:
        """Empty or whitespace-only text should produce no chunks."""
        assert chunk_text(text) == []

    @pytest.mark.unit
    def test_short_text_single_chunk(self) -> None:
        """Text shorter than min_size is still emitted when it is all there is."""
        chunks = chunk_text("Just one short line.")
        assert chunks == [Chunk(text="Just one short line.", chunk_index=0, start_char=0, end_char=20)]

    @pytest.mark.unit
    def test_surrounding_whitespace_excluded(self) -> None:
        """Chunk offsets should skip leading and trailing whitespace."""
        text = "\n\n  Hello there.  \n\n"
        chunks = chunk_text(text)
        assert len(chunks) == 1
        assert chunks[0].text == "Hello there."
        assert chunks[0].start_char == 4
        assert text[chunks[0].start_char : chunks[0].end_char] == "Hello there."

    @pytest.mark.unit
    def test_crlf_line_endings_normalized(self) -> None:
        """CRLF input should chunk like LF input, with offsets into the LF text."""
        crlf = chunk_text("Para one.\r\n\r\nPara two.")
        lf = chunk_text("Para one.\n\nPara two.")
        assert crlf == lf
        assert crlf[0].text == "Para one.\n\nPara two."
        assert crlf[0].end_char == 20

    @pytest.mark.unit
    def test_default_options_used_when_none(self, multi_paragraph_text: str) -> None:
        """Passing None should behave like ChunkOptions()."""
        assert chunk_text(multi_paragraph_text, None) == chunk_text(
            multi_paragraph_text, ChunkOptions()
        )


# =============================================================================
# PARAGRAPH FOLDING TESTS
# =============================================================================


class TestParagraphFolding:
    """Tests for folding paragraphs into chunks."""

    @pytest.mark.unit
    def test_small_paragraphs_with_overlap(self) -> None:
        """A size-triggered split should seed the next chunk with overlap."""
        text = "Para one.\n\nPara two.\n\nPara three."
        options = ChunkOptions(target_size=10, min_size=1, max_size=15, overlap=2)

        chunks = chunk_text(text, options)

        assert [(c.text, c.start_char, c.end_char) for c in chunks] == [
            ("Para one.", 0, 9),
            ("one.\n\nPara two.", 5, 20),
            ("Para three.", 22, 33),
        ]

    @pytest.mark.unit
    def test_paragraphs_merged_until_target(self, multi_paragraph_text: str) -> None:
        """Paragraphs should accumulate until the buffer reaches target_size."""
        chunks = chunk_text(multi_paragraph_text)

        # Four ~300 char paragraphs reach the 1000 char target
        assert len(chunks) == 3
        for chunk in chunks:
            assert chunk.text.count("\n\n") == 3
            assert 1000 <= len(chunk.text) <= 1500

    @pytest.mark.unit
    def test_target_finalize_carries_no_overlap(self, multi_paragraph_text: str) -> None:
        """Chunks finalized at target_size should not overlap the next chunk."""
        chunks = chunk_text(multi_paragraph_text)
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_char > previous.end_char

    @pytest.mark.unit
    def test_max_finalize_carries_overlap(self, multi_paragraph_text: str) -> None:
        """When the next paragraph would exceed max_size, overlap is carried."""
        options = ChunkOptions(target_size=500, min_size=100, max_size=550, overlap=50)

        chunks = chunk_text(multi_paragraph_text, options)

        seed = "number 4 talks about the subject at a steady pace."
        assert chunks[0].text.endswith(seed)
        assert chunks[1].text.startswith(seed)
        assert chunks[1].start_char == chunks[0].end_char - len(seed)

    @pytest.mark.unit
    def test_zero_overlap_never_overlaps(self, multi_paragraph_text: str) -> None:
        """With overlap=0, chunks should be disjoint."""
        options = ChunkOptions(target_size=500, min_size=100, max_size=550, overlap=0)
        chunks = chunk_text(multi_paragraph_text, options)
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_char >= previous.end_char


# =============================================================================
# SUBDIVISION TESTS
# =============================================================================


class TestSubdivision:
    """Tests for paragraphs longer than max_size."""

    @pytest.mark.unit
    def test_long_paragraph_split_at_sentences(self, long_paragraph_text: str) -> None:
        """An oversized paragraph should be split on sentence boundaries."""
        chunks = chunk_text(long_paragraph_text)

        assert len(chunks) > 1
        for chunk in chunks:
            assert len(chunk.text) <= 1500
            assert chunk.text.startswith("Sentence number")
            assert chunk.text.endswith(".")

    @pytest.mark.unit
    def test_long_paragraph_fully_covered(self, long_paragraph_text: str) -> None:
        """The first chunk starts at 0 and the last ends at the text end."""
        chunks = chunk_text(long_paragraph_text)
        assert chunks[0].start_char == 0
        assert chunks[-1].end_char == len(long_paragraph_text)

    @pytest.mark.unit
    def test_long_run_of_words_split_at_words(self) -> None:
        """A paragraph without sentence breaks should split between words."""
        text = " ".join(f"word{i}" for i in range(600))
        options = ChunkOptions(target_size=400, min_size=100, max_size=500, overlap=20)

        chunks = chunk_text(text, options)

        assert len(chunks) > 1
        for chunk in chunks:
            assert len(chunk.text) <= 500
            assert chunk.text.startswith("word")
            assert not chunk.text[-1].isspace()

    @pytest.mark.unit
    def test_giant_word_cut_into_windows(self) -> None:
        """A single unbreakable token is cut into max_size windows."""
        text = "x" * 4000

        chunks = chunk_text(text)

        assert [len(c.text) for c in chunks] == [1500, 1500, 1000]
        assert [c.start_char for c in chunks] == [0, 1500, 3000]

    @pytest.mark.unit
    def test_small_buffer_topped_up_with_giant_word(self) -> None:
        """A short buffer takes the head of an oversized word up to max_size."""
        text = "Intro.\n\n" + "y" * 40
        options = ChunkOptions(target_size=20, min_size=10, max_size=30, overlap=0)

        chunks = chunk_text(text, options)

        assert [c.text for c in chunks] == ["Intro.\n\n" + "y" * 22, "y" * 18]
        assert chunks[1].start_char == chunks[0].end_char == 30

    @pytest.mark.unit
    def test_no_undersized_chunk_before_giant_word(self) -> None:
        """Only a merged tail may fall below min_size."""
        text = "Short para.\n\n" + "z" * 1600 + "\n\n" + "Tail sentence that is fine. " * 10

        chunks = chunk_text(text)

        assert [len(c.text) for c in chunks] == [1500, 394]
        assert chunks[0].text.startswith("Short para.\n\nzzz")
        for chunk in chunks:
            assert len(chunk.text) >= 200
            assert chunk.text == text[chunk.start_char : chunk.end_char]


# =============================================================================
# TAIL TESTS
# =============================================================================


class TestTailHandling:
    """Tests for the final buffer."""

    @pytest.mark.unit
    def test_tiny_tail_merged_into_previous(self, make_paragraph: Callable[..., str]) -> None:
        """A trailing buffer below min_size joins the previous chunk."""
        text = make_paragraph(6) + "\n\nTiny tail."
        options = ChunkOptions(target_size=300, min_size=100, max_size=400, overlap=20)

        chunks = chunk_text(text, options)

        assert len(chunks) == 1
        assert chunks[0].text == text
        assert chunks[0].end_char == len(text)

    @pytest.mark.unit
    def test_large_tail_kept_separate(self, make_paragraph: Callable[..., str]) -> None:
        """A trailing buffer of at least min_size is its own chunk."""
        tail = make_paragraph(2, start=10)
        text = make_paragraph(6) + "\n\n" + tail
        options = ChunkOptions(target_size=300, min_size=100, max_size=400, overlap=20)

        chunks = chunk_text(text, options)

        assert len(chunks) == 2
        assert chunks[1].text == tail


# =============================================================================
# INVARIANT TESTS
# =============================================================================


class TestChunkInvariants:
    """Offset and ordering properties on realistic input."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "options",
        [
            ChunkOptions(),
            ChunkOptions(target_size=500, min_size=100, max_size=550, overlap=50),
            ChunkOptions(target_size=200, min_size=50, max_size=250, overlap=30),
            ChunkOptions(target_size=700, min_size=200, max_size=800, overlap=100),
        ],
    )
    def test_offsets_slice_back_to_text(
        self, multi_paragraph_text: str, long_paragraph_text: str, options: ChunkOptions
    ) -> None:
        """Every chunk's text is exactly the slice its offsets describe."""
        text = multi_paragraph_text + "\n\n" + long_paragraph_text

        chunks = chunk_text(text, options)

        for index, chunk in enumerate(chunks):
            assert chunk.chunk_index == index
            assert chunk.text == text[chunk.start_char : chunk.end_char]
            assert chunk.text == chunk.text.strip()
            assert chunk.start_char < chunk.end_char
            assert len(chunk.text) >= options.min_size
        for previous, current in zip(chunks, chunks[1:]):
            assert current.start_char > previous.start_char
            assert current.end_char > previous.end_char

    @pytest.mark.unit
    def test_rechunking_is_stable(self, multi_paragraph_text: str) -> None:
        """Re-chunking the de-overlapped chunks gives about the same count."""
        options = ChunkOptions(target_size=700, min_size=200, max_size=800, overlap=100)
        first = chunk_text(multi_paragraph_text, options)

        pieces = [first[0].text]
        for previous, current in zip(first, first[1:]):
            seed = get_overlap_text(previous.text, options.overlap)
            if current.start_char < previous.end_char and current.text.startswith(seed.lstrip()):
                pieces.append(current.text[previous.end_char - current.start_char :].strip())
            else:
                pieces.append(current.text)

        second = chunk_text("\n\n".join(pieces), options)

        assert abs(len(second) - len(first)) <= 1

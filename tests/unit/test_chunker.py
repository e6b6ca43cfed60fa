"""Tests for text cleaning and sentence-aligned chunking."""

import pytest

from docrag.core.domain.utils import chunk_text, clean_text, split_sentences

pytestmark = pytest.mark.unit


class TestCleanText:
    """Unit tests for clean_text."""

    def test_removes_bom_and_collapses_whitespace(self):
        assert clean_text("\ufeff  Hello\n\n world \ufffd ") == "Hello world"

    def test_empty_input(self):
        assert clean_text("") == ""

    def test_nfkc_normalization(self):
        """Compatibility characters are folded: the fi ligature becomes two letters."""
        assert clean_text("\ufb01le") == "file"


class TestSplitSentences:
    def test_splits_on_punctuation_runs(self):
        assert split_sentences("One. Two!! Three?! ") == ["One", "Two", "Three"]


class TestChunkText:
    """Unit tests for the chunk_text helper."""

    def test_single_sentence_chunk(self):
        """A sentence shorter than chunk_size becomes one chunk without its period."""
        text = "This sentence is definitely longer than fifty characters in total."
        assert chunk_text(text) == [
            "This sentence is definitely longer than fifty characters in total"
        ]

    def test_empty_text_returns_empty_list(self):
        assert chunk_text("") == []

    def test_short_chunks_are_discarded(self):
        """Chunks below the minimum length are dropped."""
        assert chunk_text("Too short.") == []
        assert chunk_text("Too short.", min_length=0) == ["Too short"]

    def test_sentences_joined_with_period(self):
        text = "Alpha beta gamma. Delta epsilon zeta!"
        assert chunk_text(text, min_length=0) == ["Alpha beta gamma. Delta epsilon zeta"]

    def test_overlap_seeds_next_chunk_with_trailing_words(self):
        """chunk_overlap=20 carries the last two words into the next chunk."""
        text = "one two three four five. six seven eight nine ten."
        chunks = chunk_text(text, chunk_size=30, chunk_overlap=20, min_length=0)
        assert chunks == ["one two three four five", "four five six seven eight nine ten"]

    def test_zero_overlap_carries_nothing(self):
        text = "one two three four five. six seven eight nine ten."
        chunks = chunk_text(text, chunk_size=30, chunk_overlap=0, min_length=0)
        assert chunks == ["one two three four five", "six seven eight nine ten"]

    def test_long_sentence_is_never_cut(self):
        long_sentence = "this sentence is much longer than ten characters"
        text = f"short. {long_sentence}."
        chunks = chunk_text(text, chunk_size=10, chunk_overlap=0, min_length=0)
        assert chunks == ["short", long_sentence]

    def test_first_sentence_longer_than_chunk_size(self):
        sentence = "a single sentence that exceeds the limit"
        assert chunk_text(sentence, chunk_size=5, chunk_overlap=0, min_length=0) == [sentence]

    def test_negative_or_zero_chunk_size_raises(self):
        """chunk_size must be positive."""
        with pytest.raises(ValueError):
            chunk_text("content", chunk_size=0, chunk_overlap=10)

        with pytest.raises(ValueError):
            chunk_text("content", chunk_size=-10, chunk_overlap=1)

    def test_negative_overlap_raises(self):
        """chunk_overlap cannot be negative."""
        with pytest.raises(ValueError):
            chunk_text("content", chunk_size=100, chunk_overlap=-1)

    def test_three_sentences_make_three_chunks(self):
        text = (
            "The support desk is located at the north entrance of the main building. "
            "Visitors must register at the reception before entering the office area. "
            "Backups run every night because the storage cluster is replicated twice."
        )
        chunks = chunk_text(text, chunk_size=100, chunk_overlap=0)
        assert len(chunks) == 3
        assert chunks[0].startswith("The support desk")
        assert chunks[2].startswith("Backups run")


BOUND_TEXTS = [
    " ".join(f"Sentence number {i} talks about topic {i * 7} in some detail." for i in range(30)),
    "Short. " * 40,
    (
        "Alpha beta gamma delta epsilon zeta eta theta. "
        "Iota kappa lambda mu nu xi omicron pi rho! "
        "Sigma tau upsilon phi chi psi omega? "
    )
    * 5,
]


class TestChunkSizeBound:
    """A chunk exceeds chunk_size only by the overlap words carried into it."""

    def test_separator_counts_toward_size(self):
        text = "a" * 60 + ". " + "b" * 40 + "."
        assert chunk_text(text, chunk_size=100, chunk_overlap=0, min_length=0) == [
            "a" * 60,
            "b" * 40,
        ]

    def test_chunk_may_fill_size_exactly(self):
        text = "a" * 58 + ". " + "b" * 40 + "."
        chunks = chunk_text(text, chunk_size=100, chunk_overlap=0, min_length=0)
        assert [len(c) for c in chunks] == [100]

    @pytest.mark.parametrize(
        ("chunk_size", "chunk_overlap"), [(100, 0), (100, 200), (60, 50), (250, 100)]
    )
    @pytest.mark.parametrize("text", BOUND_TEXTS)
    def test_chunks_within_size_plus_seed(self, text, chunk_size, chunk_overlap):
        overlap_words = chunk_overlap // 10
        chunks = chunk_text(text, chunk_size, chunk_overlap, min_length=0)

        assert len(chunks) > 1
        for previous, chunk in zip([None] + chunks, chunks):
            allowance = 0
            if previous is not None and overlap_words:
                allowance = len(" ".join(previous.split(" ")[-overlap_words:])) + 1
            assert len(chunk) <= chunk_size + allowance

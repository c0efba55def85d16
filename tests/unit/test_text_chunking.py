"""Unit tests for sentence-bounded text chunking."""

from __future__ import annotations

from latentvoice.text.chunking import TextChunker


def test_short_text_is_single_collapsed_chunk() -> None:
    """Text within the limit should stay whole with whitespace collapsed."""

    assert TextChunker().split("  Hello   there.\n", 300) == ["Hello there."]


def test_disabled_limit_keeps_text_whole() -> None:
    """A missing or non-positive limit should disable splitting."""

    text = "One. Two. Three."

    assert TextChunker().split(text, None) == [text]
    assert TextChunker().split(text, 0) == [text]


def test_blank_text_yields_one_empty_chunk() -> None:
    """Blank input should still produce one chunk for the language markers."""

    assert TextChunker().split("   ", 10) == [""]


def test_prefers_sentence_boundaries() -> None:
    """Chunks should end at sentence terminators when one is in range."""

    chunks = TextChunker().split("One two three. Four five six seven eight.", 20)

    assert chunks == ["One two three.", "Four five six seven eight."]


def test_abbreviations_do_not_end_sentences() -> None:
    """Common abbreviations should not be treated as sentence ends."""

    chunks = TextChunker().split("Ask Mr. Lee. Then go home now please.", 10)

    assert chunks[0] == "Ask Mr. Lee."


def test_hard_split_without_spaces() -> None:
    """Unbroken text should be split at the size limit."""

    chunks = TextChunker().split("a" * 50, 20)

    assert [len(chunk) for chunk in chunks] == [20, 20, 10]

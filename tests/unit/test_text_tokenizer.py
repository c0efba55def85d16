"""Unit tests for codepoint-indexed tokenization."""

from __future__ import annotations

import json
from pathlib import Path
import unicodedata

import pytest

from latentvoice.errors import ConfigurationError, FormatError
from latentvoice.text.normalizer import TextNormalizer
from latentvoice.text.tokenizer import (
    UnicodeIndexTable,
    UnicodeTokenizer,
    load_unicode_index_table,
)


def _ords(text: str) -> tuple[int, ...]:
    return tuple(ord(character) for character in text)


def test_empty_text_yields_only_language_markers(index_table: UnicodeIndexTable) -> None:
    """Empty input should tokenize to exactly the wrapper markers."""

    tokens = UnicodeTokenizer(index_table).tokenize("", "en")

    assert tokens == _ords("<en></en>")


def test_hangul_is_decomposed_into_jamo(index_table: UnicodeIndexTable) -> None:
    """Composed Hangul should be tokenized as its conjoining jamo."""

    tokenizer = UnicodeTokenizer(index_table)

    tokens = tokenizer.tokenize("한", "ko")

    assert tokens == _ords("<ko>") + (0x1112, 0x1161, 0x11AB) + _ords("</ko>")
    assert tokenizer.detokenize(tokens) == "<ko>" + unicodedata.normalize("NFD", "한") + "</ko>"


def test_unmapped_codepoints_are_dropped() -> None:
    """Characters outside the table should be skipped without placeholders."""

    ascii_only = UnicodeIndexTable(list(range(0x80)))
    tokenizer = UnicodeTokenizer(ascii_only)

    tokens = tokenizer.tokenize("héllo", "en")

    assert tokenizer.detokenize(tokens) == "<en>hello</en>"


def test_negative_entries_are_unmapped() -> None:
    """Negative table entries should behave like missing codepoints."""

    ids = list(range(0x80))
    ids[ord("x")] = -1
    table = UnicodeIndexTable(ids)

    assert table.lookup(ord("x")) == -1
    assert table.lookup(0x10FFFF) == -1
    assert UnicodeTokenizer(table).tokenize("xa", "en") == _ords("<en>a</en>")


def test_emoji_and_whitespace_runs_are_normalized(index_table: UnicodeIndexTable) -> None:
    """Pictographs should be stripped and whitespace collapsed before lookup."""

    tokenizer = UnicodeTokenizer(index_table)

    assert tokenizer.preprocess("  hi \U0001F600\n\tthere ", "en") == "<en>hi there</en>"


def test_nfkd_form_folds_compatibility_characters(index_table: UnicodeIndexTable) -> None:
    """NFKD normalization should fold ligatures that NFD keeps."""

    nfd = UnicodeTokenizer(index_table, TextNormalizer(form="NFD"))
    nfkd = UnicodeTokenizer(index_table, TextNormalizer(form="NFKD"))

    assert nfd.preprocess("ﬁne", "en") == "<en>ﬁne</en>"
    assert nfkd.preprocess("ﬁne", "en") == "<en>fine</en>"


def test_unsupported_normalization_form_is_rejected() -> None:
    """Only decomposition forms should be accepted."""

    with pytest.raises(ValueError, match="Unsupported normalization form"):
        TextNormalizer(form="NFC")


def test_tokenize_without_table_raises_configuration_error() -> None:
    """A tokenizer with no loaded table should fail with a configuration error."""

    with pytest.raises(ConfigurationError) as exc_info:
        UnicodeTokenizer(None).tokenize("hi", "en")

    assert exc_info.value.stage == "tokenize"


@pytest.mark.parametrize("payload", [[], {"a": 1}, [1, "2"], [1, True]])
def test_index_table_rejects_malformed_payloads(payload: object) -> None:
    """Index tables must be non-empty integer arrays."""

    with pytest.raises(FormatError):
        UnicodeIndexTable.from_json(payload)


def test_load_index_table_from_file(tmp_path: Path) -> None:
    """Index tables should load from JSON files and reject invalid JSON."""

    valid = tmp_path / "unicode_indexer.json"
    valid.write_text(json.dumps([-1, 0, 1]), encoding="utf-8")
    invalid = tmp_path / "broken.json"
    invalid.write_text("[1, 2", encoding="utf-8")

    table = load_unicode_index_table(valid)

    assert len(table) == 3
    assert table.reverse() == {0: 1, 1: 2}
    with pytest.raises(FormatError, match="not valid JSON"):
        load_unicode_index_table(invalid)


def test_text_outside_table_yields_only_language_markers(index_table: UnicodeIndexTable) -> None:
    """Text made only of unmapped codepoints should reduce to the wrapper tokens."""

    tokens = UnicodeTokenizer(index_table).tokenize("\U0010FFF0\U0010FFF1", "en")

    assert tokens == _ords("<en></en>")


def test_korean_round_trip_is_decomposed(index_table: UnicodeIndexTable) -> None:
    """Detokenizing Korean should give the jamo form, not the composed syllables."""

    tokenizer = UnicodeTokenizer(index_table)

    decoded = tokenizer.detokenize(tokenizer.tokenize("안녕", "ko"))

    assert decoded == "<ko>" + unicodedata.normalize("NFD", "안녕") + "</ko>"
    assert decoded != "<ko>안녕</ko>"


def test_index_table_rejects_entries_beyond_int64() -> None:
    """Entries that do not fit a 64-bit id should be a format error."""

    with pytest.raises(FormatError, match="out of range"):
        UnicodeIndexTable.from_json([1, 2**63])

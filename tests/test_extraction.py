from __future__ import annotations

import pytest

from lesson_builder.pipeline.extraction import extract_text_from_bytes, parse_words


def test_parse_words_splits_on_commas_whitespace_and_newlines():
    assert parse_words("Cat,dog\n  Bird\tfish") == ["cat", "dog", "bird", "fish"]


def test_parse_words_strips_punctuation_but_keeps_hyphens_and_apostrophes():
    assert parse_words("Hello! well-known, don't; (end).") == ["hello", "well-known", "don't", "end"]


def test_parse_words_drops_tokens_without_letters():
    assert parse_words("123 4-5 a1 --") == ["a1"]


def test_parse_words_keeps_duplicates_for_the_caller():
    assert parse_words("dog dog") == ["dog", "dog"]


def test_parse_words_blank_input():
    assert parse_words("") == []
    assert parse_words(" \n\t ") == []


def test_extract_text_decodes_txt_ignoring_bad_bytes():
    assert extract_text_from_bytes("words.TXT", b"apple\xff\nbanana") == "apple\nbanana"


def test_extract_text_rejects_other_formats():
    with pytest.raises(ValueError):
        extract_text_from_bytes("words.docx", b"")


def test_parse_words_strips_non_ascii_letters():
    assert parse_words("café naïve foo_bar") == ["caf", "nave", "foo_bar"]

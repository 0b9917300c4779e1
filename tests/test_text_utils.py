"""Tests for lexical helpers used by the URL scorer."""

import pytest

from optimuspii.phishing import (
    WordSegmenter,
    consecutive_special_chars,
    levenshtein_distance,
    shannon_entropy,
    trigram_suspicion,
)


@pytest.fixture
def segmenter():
    return WordSegmenter(keywords=["login", "secure"], brands=["paypal"])


class TestEntropy:
    def test_values(self):
        assert shannon_entropy("") == 0.0
        assert shannon_entropy("aaaa") == 0.0
        assert shannon_entropy("aabb") == pytest.approx(1.0)
        assert shannon_entropy("abcd") == pytest.approx(2.0)


class TestLevenshtein:
    def test_distance(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("paypal", "paypal") == 0
        assert levenshtein_distance("", "abc") == 3


class TestConsecutiveSpecialChars:
    def test_longest_run(self):
        assert consecutive_special_chars("https://a.com/?x=1&&&y") == 3
        assert consecutive_special_chars("https://a.com/path") == 0
        assert consecutive_special_chars("") == 0


class TestWordSegmenter:
    """Greedy segmentation against keyword fragments and brands."""

    def test_brand_and_keyword(self, segmenter):
        assert segmenter.segment("paypallogin") == ["paypal", "login"]

    def test_digit_runs_and_short_remainder(self, segmenter):
        assert segmenter.segment("12345abc") == ["12345", "abc"]

    def test_unknown_characters_fall_back_to_single_chars(self, segmenter):
        assert segmenter.segment("qwxzsecure") == ["q", "w", "x", "z", "secure"]

    def test_keyword_fragments_are_known(self, segmenter):
        assert segmenter.is_known("log")
        assert segmenter.is_known("cure")
        assert not segmenter.is_known("lo")

    def test_empty(self, segmenter):
        assert segmenter.segment("") == []


class TestTrigramSuspicion:
    def test_unclassified_url(self):
        assert trigram_suspicion("https://abc", ["log"], ["com"]) == pytest.approx(0.2)

    def test_only_safe_trigrams(self):
        assert trigram_suspicion("https://www.com", ["log"], ["www", "com"]) == 0.0

    def test_suspicious_ratio(self):
        assert trigram_suspicion("https://login.com", ["log"], ["com"]) == pytest.approx(0.5)

    def test_short_input(self):
        assert trigram_suspicion("ab", ["log"], ["com"]) == 0.0

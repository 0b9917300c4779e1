"""Tests for brand impersonation and homograph similarity."""

import pytest

from optimuspii.heuristics import DEFAULT_HOMOGLYPHS
from optimuspii.phishing import DetectorConfig, brand_similarity, homograph_distance, normalize_homoglyphs


@pytest.fixture
def config():
    return DetectorConfig()


class TestBrandSimilarity:
    """Similarity of a host label to the targeted brands."""

    def test_exact_brand(self, config):
        assert brand_similarity("paypal", config) == 1.0

    def test_known_variation(self, config):
        assert brand_similarity("appleid-verify", config) == pytest.approx(0.95)

    def test_brand_with_phishing_suffix(self, config):
        assert brand_similarity("applesecure", config) == pytest.approx(0.9)

    def test_typosquat(self, config):
        assert brand_similarity("paypa1", config) >= 0.8

    def test_cyrillic_homograph_scores_highest(self, config):
        # Cyrillic "а" in place of the first Latin "a".
        assert brand_similarity("pаypal", config) == pytest.approx(0.95)

    def test_short_or_unrelated_labels(self, config):
        assert brand_similarity("ab", config) == 0.0
        assert brand_similarity("", config) == 0.0
        assert brand_similarity("zzqqxx", config) == 0.0

    def test_brand_list_is_configurable(self):
        config = DetectorConfig(targeted_brands=("acme",), brand_variations={})
        assert brand_similarity("acme", config) == 1.0
        assert brand_similarity("paypal", config) == 0.0


class TestHomographs:
    def test_normalize_known_lookalikes(self):
        assert normalize_homoglyphs("gооgle", DEFAULT_HOMOGLYPHS) == "google"

    def test_normalize_fullwidth_via_nfkc(self):
        assert normalize_homoglyphs("ＡＢＣ", DEFAULT_HOMOGLYPHS) == "abc"

    def test_distance_levels(self):
        assert homograph_distance("gооgle", "google", DEFAULT_HOMOGLYPHS) == 0.95
        assert homograph_distance("gооgle-login", "google", DEFAULT_HOMOGLYPHS) == 0.9
        assert homograph_distance("gооglr", "google", DEFAULT_HOMOGLYPHS) == 0.85
        assert homograph_distance("yahoo", "google", DEFAULT_HOMOGLYPHS) == 0.0

"""Tests for the phishing URL scorer."""

import pytest

from optimuspii.phishing import DetectorConfig, PhishingURLDetector, URLFeatures, base_score, sensitivity_to_threshold
from optimuspii.phishing.scorer import js_round

PHISHING_BRAND_URL = "https://appleid-verify.com/account/update"
PHISHING_IP_URL = "http://192.168.1.1/login/verify"
TRUSTED_URL = "https://www.google.com/search?q=test"


class TestAnalyze:
    """End-to-end verdicts at the default threshold."""

    def test_brand_lookalike_is_phishing(self, detector):
        result = detector.analyze(PHISHING_BRAND_URL)
        assert result.error is None
        assert result.is_phishing
        assert result.phishing_score > 0.6
        assert result.confidence == js_round(result.phishing_score * 100)
        assert any("apple phishing pattern" in r for r in result.reasons)

    def test_ip_host_is_phishing(self, detector):
        result = detector.analyze(PHISHING_IP_URL)
        assert result.is_phishing
        assert result.features.has_ip_address == 1
        assert "Raw IP address host" in result.reasons
        assert "IP host over plain HTTP" in result.reasons
        assert "IP host with suspicious path or keywords" in result.reasons

    def test_trusted_domain_is_discounted(self, detector):
        result = detector.analyze(TRUSTED_URL)
        assert not result.is_phishing
        assert result.features.is_domain_trusted == 1
        assert result.phishing_score == pytest.approx(max(0.0, result.base_score - 0.4))

    def test_segments(self, detector):
        result = detector.analyze("https://paypallogin.example/secure/confirm")
        assert "paypal" in result.domain_segments
        assert result.path_segments == ["secure", "confirm"]

    @pytest.mark.parametrize("url", ["not a url", "", "mailto:someone"])
    def test_unparseable_url_never_raises(self, detector, url):
        result = detector.analyze(url)
        assert not result.is_phishing
        assert result.confidence == 0
        assert result.error
        assert result.features is None

    def test_result_serializes(self, detector):
        data = detector.analyze(PHISHING_IP_URL).to_dict()
        assert data["is_phishing"] is True
        assert data["features"]["hasIPAddress"] == 1


class TestScoreProperties:
    """Monotonicity, trust and threshold behavior."""

    def test_score_is_bounded(self, detector):
        for url in (PHISHING_BRAND_URL, PHISHING_IP_URL, TRUSTED_URL, "https://example.com/"):
            score = detector.analyze(url).phishing_score
            assert 0.0 <= score <= 1.0

    @pytest.mark.parametrize(
        "feature",
        [
            "has_suspicious_keywords",
            "has_suspicious_path",
            "is_http",
            "domain_has_dash",
            "tld_is_risky",
            "has_ip_address",
        ],
    )
    def test_adding_a_suspicious_signal_never_lowers_the_score(self, detector, feature):
        features = detector.extract_features("https://shop.example.com/catalog")
        without = features.with_values(**{feature: 0})
        with_signal = features.with_values(**{feature: 1})
        assert base_score(with_signal, detector.config)[0] >= base_score(without, detector.config)[0]

    @pytest.mark.parametrize("url", ["https://example.com/", "https://a-b.xyz/login", "http://x.org/"])
    def test_ip_host_flag_raises_the_score(self, detector, url):
        features = detector.extract_features(url)
        without, _ = base_score(features.with_values(has_ip_address=0), detector.config)
        with_ip, reasons = base_score(features.with_values(has_ip_address=1), detector.config)
        assert with_ip >= without
        assert "Raw IP address host" in reasons

    def test_trust_lowers_the_score(self, detector):
        features = detector.extract_features(PHISHING_BRAND_URL)
        untrusted = detector.calculate_phishing_score(features.with_values(is_domain_trusted=0))
        trusted = detector.calculate_phishing_score(features.with_values(is_domain_trusted=1))
        assert trusted < untrusted
        assert trusted <= 0.6

    def test_threshold_is_strict(self, detector):
        score = detector.analyze(PHISHING_IP_URL).phishing_score
        at_score = PhishingURLDetector(detector.config.with_threshold(score))
        assert not at_score.analyze(PHISHING_IP_URL).is_phishing
        below = PhishingURLDetector(detector.config.with_threshold(score - 0.01))
        assert below.analyze(PHISHING_IP_URL).is_phishing

    def test_empty_weight_table_scores_zero(self):
        detector = PhishingURLDetector(DetectorConfig(feature_weights={}))
        result = detector.analyze(PHISHING_IP_URL)
        assert result.phishing_score == 0.0
        assert not result.is_phishing

    def test_raw_feature_passthrough(self):
        config = DetectorConfig(feature_weights={"domainTokenCount": 1.0})
        score, _ = base_score(URLFeatures(domain_token_count=3), config)
        # Token counts are not normalized; the final clamp keeps the score at 1.
        assert score == 1.0

    def test_normalized_feature(self):
        config = DetectorConfig(feature_weights={"urlLength": 1.0})
        score, reasons = base_score(URLFeatures(url_length=50), config)
        assert score == pytest.approx(0.5)
        assert reasons == []


class TestSensitivity:
    def test_mapping(self):
        assert sensitivity_to_threshold(60) == pytest.approx(0.46)
        assert sensitivity_to_threshold(0) == pytest.approx(0.7)

    def test_clamped(self):
        assert sensitivity_to_threshold(100) == 0.4
        assert sensitivity_to_threshold(-500) == 0.9

    def test_default_threshold_is_not_derived(self):
        assert DetectorConfig().threshold == 0.6
        assert DetectorConfig().with_sensitivity(60).threshold == pytest.approx(0.46)

    def test_update_config_swaps_snapshot(self, detector):
        old = detector.config
        detector.update_config(old.with_threshold(0.95))
        assert detector.threshold == 0.95
        assert old.threshold == 0.6
        assert detector.segment_word("paypallogin") == ["paypal", "login"]

    def test_update_config_rebuilds_segments_for_new_brands(self, detector):
        detector.update_config(DetectorConfig(targeted_brands=("acmebank",)))
        assert detector.segment_word("acmebanklogin") == ["acmebank", "login"]


class TestRounding:
    def test_half_up(self):
        assert js_round(2.5) == 3
        assert js_round(50.5) == 51
        assert js_round(49.4) == 49
        assert js_round(0) == 0

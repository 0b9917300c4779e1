"""Weighted heuristic URL scorer."""

from __future__ import annotations

import logging
import math
from typing import Callable, Optional

from ..exceptions import InvalidURLError
from .features import extract_features, parse_url
from .models import DetectorConfig, ParsedURL, PhishingScoreResult, URLFeatures
from .rules import DEFAULT_BONUS_RULES, BonusRule
from .text import WordSegmenter

logger = logging.getLogger(__name__)

TRUSTED_DOMAIN_DISCOUNT = 0.4


def _capped(divisor: float) -> Callable[[float], float]:
    return lambda value: min(1.0, value / divisor)


# Serialized feature name -> normalizer. Features not listed are used as-is.
FEATURE_NORMALIZERS: dict[str, Callable[[float], float]] = {
    "urlLength": _capped(100),
    "domainLength": _capped(30),
    "pathLength": _capped(30),
    "specialCharCount": _capped(10),
    "digitCount": _capped(15),
    "queryParamCount": _capped(5),
    "domainEntropyScore": _capped(4),
    "urlEntropyScore": _capped(5),
    "consecutiveSpecialChars": _capped(4),
    "avgTokenLength": lambda value: 1.0 if value > 10 else value / 10,
    "hexPatternCount": _capped(5),
    "nonAsciiCharCount": _capped(3),
}


def js_round(value: float) -> int:
    """Round half up, the way browsers round confidence percentages."""
    return int(math.floor(value + 0.5))


def base_score(
    features: URLFeatures,
    config: DetectorConfig,
    parsed: Optional[ParsedURL] = None,
    rules: tuple[BonusRule, ...] = DEFAULT_BONUS_RULES,
) -> tuple[float, list[str]]:
    """Weighted feature sum plus combination bonuses, normalized to [0, 1].

    Only features present in the weight table contribute; an empty table
    scores 0. Returns the score and the reasons of every bonus that fired.
    """
    values = features.as_dict()
    score = 0.0
    total_weight = 0.0

    for name, weight in config.feature_weights.items():
        if name not in values:
            continue
        value = float(values[name])
        normalizer = FEATURE_NORMALIZERS.get(name)
        if normalizer:
            value = normalizer(value)
        score += value * weight
        total_weight += weight

    reasons: list[str] = []
    for rule in rules:
        result = rule.apply(features, parsed, config)
        if result.score:
            score += result.score
            reasons.extend(result.reasons)

    if total_weight <= 0:
        return 0.0, reasons
    return min(1.0, score / total_weight), reasons


class PhishingURLDetector:
    """Scores URLs against a swappable :class:`DetectorConfig` snapshot."""

    def __init__(self, config: Optional[DetectorConfig] = None):
        self._config = config or DetectorConfig()
        self._segmenter = WordSegmenter(self._config.suspicious_keywords, self._config.targeted_brands)

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def threshold(self) -> float:
        return self._config.threshold

    def update_config(self, config: DetectorConfig) -> None:
        """Replace the active snapshot. In-flight analyses keep the old one."""
        segmenter = self._segmenter
        if (
            config.suspicious_keywords != self._config.suspicious_keywords
            or config.targeted_brands != self._config.targeted_brands
        ):
            segmenter = WordSegmenter(config.suspicious_keywords, config.targeted_brands)
        self._segmenter, self._config = segmenter, config

    def segment_word(self, word: str) -> list[str]:
        return self._segmenter.segment(word)

    def extract_features(self, url: str) -> URLFeatures:
        return extract_features(url, self._config, self._segmenter)

    def calculate_phishing_score(
        self,
        features: URLFeatures,
        parsed: Optional[ParsedURL] = None,
    ) -> float:
        """Final score with the trusted-domain discount applied."""
        score, _ = base_score(features, self._config, parsed)
        if features.is_domain_trusted:
            return max(0.0, score - TRUSTED_DOMAIN_DISCOUNT)
        return score

    def analyze(self, url: str) -> PhishingScoreResult:
        """Score ``url``. Never raises; parse failures are reported in ``error``."""
        config = self._config
        segmenter = self._segmenter

        try:
            parsed = parse_url(url)
        except InvalidURLError as exc:
            logger.debug("Skipping unparseable URL %r: %s", url, exc)
            return PhishingScoreResult(url=url, error=str(exc))

        features = extract_features(url, config, segmenter, parsed)
        raw_score, reasons = base_score(features, config, parsed)
        score = raw_score
        if features.is_domain_trusted:
            score = max(0.0, raw_score - TRUSTED_DOMAIN_DISCOUNT)
            reasons.append("Trusted domain")

        result = PhishingScoreResult(
            url=url,
            is_phishing=score > config.threshold,
            confidence=js_round(score * 100),
            phishing_score=score,
            base_score=raw_score,
            features=features,
            domain_segments=segmenter.segment(parsed.hostname),
            path_segments=[p for p in parsed.path.split("/") if p],
            reasons=reasons,
        )
        logger.debug("Scored %s: %.3f features=%s", url, score, features.as_dict())
        return result

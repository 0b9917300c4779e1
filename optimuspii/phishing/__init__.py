"""Heuristic phishing URL scoring and the navigation guard."""

from .brands import brand_similarity, homograph_distance, normalize_homoglyphs
from .features import extract_features, parse_url
from .models import (
    DetectorConfig,
    ParsedURL,
    PhishingScoreResult,
    URLFeatures,
    sensitivity_to_threshold,
)
from .navigation import (
    NavigationDecision,
    NavigationEvent,
    NavigationResult,
    PhishingURLDetection,
    WarningPageContext,
    build_warning_url,
    parse_warning_url,
)
from .scorer import PhishingURLDetector, base_score
from .text import (
    WordSegmenter,
    consecutive_special_chars,
    levenshtein_distance,
    shannon_entropy,
    trigram_suspicion,
)

__all__ = [
    "brand_similarity",
    "homograph_distance",
    "normalize_homoglyphs",
    "extract_features",
    "parse_url",
    "DetectorConfig",
    "ParsedURL",
    "PhishingScoreResult",
    "URLFeatures",
    "sensitivity_to_threshold",
    "NavigationDecision",
    "NavigationEvent",
    "NavigationResult",
    "PhishingURLDetection",
    "WarningPageContext",
    "build_warning_url",
    "parse_warning_url",
    "PhishingURLDetector",
    "base_score",
    "WordSegmenter",
    "consecutive_special_chars",
    "levenshtein_distance",
    "shannon_entropy",
    "trigram_suspicion",
]

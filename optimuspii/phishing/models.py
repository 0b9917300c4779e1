"""Phishing scorer data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Optional

from ..heuristics import (
    DEFAULT_BRAND_PHISHING_PATTERNS,
    DEFAULT_BRAND_SUFFIX_WORDS,
    DEFAULT_BRAND_VARIATIONS,
    DEFAULT_FEATURE_WEIGHTS,
    DEFAULT_HOMOGLYPHS,
    DEFAULT_RISK_TLDS,
    DEFAULT_SAFE_TRIGRAMS,
    DEFAULT_SEARCH_ENGINES,
    DEFAULT_SUSPICIOUS_KEYWORDS,
    DEFAULT_SUSPICIOUS_PATH_SEGMENTS,
    DEFAULT_SUSPICIOUS_SCRIPT_EXTENSIONS,
    DEFAULT_SUSPICIOUS_TRIGRAMS,
    DEFAULT_TARGETED_BRANDS,
    DEFAULT_THRESHOLD,
    DEFAULT_TRUSTED_DOMAINS,
)


def sensitivity_to_threshold(sensitivity: float) -> float:
    """Map the 0-100 sensitivity knob to a classification threshold in [0.4, 0.9]."""
    return max(0.4, min(0.9, 1 - (sensitivity / 100 * 0.4 + 0.3)))


@dataclass(frozen=True)
class DetectorConfig:
    """Immutable snapshot of the tables and threshold the scorer runs with."""

    trusted_domains: tuple[str, ...] = tuple(DEFAULT_TRUSTED_DOMAINS)
    suspicious_keywords: tuple[str, ...] = tuple(DEFAULT_SUSPICIOUS_KEYWORDS)
    targeted_brands: tuple[str, ...] = tuple(DEFAULT_TARGETED_BRANDS)
    risk_tlds: tuple[str, ...] = tuple(DEFAULT_RISK_TLDS)
    feature_weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FEATURE_WEIGHTS))
    threshold: float = DEFAULT_THRESHOLD
    suspicious_path_segments: tuple[str, ...] = tuple(DEFAULT_SUSPICIOUS_PATH_SEGMENTS)
    suspicious_script_extensions: tuple[str, ...] = tuple(DEFAULT_SUSPICIOUS_SCRIPT_EXTENSIONS)
    brand_variations: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BRAND_VARIATIONS.items()}
    )
    brand_suffix_words: tuple[str, ...] = tuple(DEFAULT_BRAND_SUFFIX_WORDS)
    brand_phishing_patterns: tuple[dict, ...] = tuple(DEFAULT_BRAND_PHISHING_PATTERNS)
    suspicious_trigrams: tuple[str, ...] = tuple(DEFAULT_SUSPICIOUS_TRIGRAMS)
    safe_trigrams: tuple[str, ...] = tuple(DEFAULT_SAFE_TRIGRAMS)
    search_engines: tuple[str, ...] = tuple(DEFAULT_SEARCH_ENGINES)
    homoglyphs: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_HOMOGLYPHS.items()}
    )

    def __post_init__(self):
        # Lookups are case-insensitive; store everything lowercased once.
        for name in (
            "trusted_domains",
            "suspicious_keywords",
            "targeted_brands",
            "risk_tlds",
            "suspicious_path_segments",
            "suspicious_script_extensions",
            "brand_suffix_words",
            "suspicious_trigrams",
            "safe_trigrams",
            "search_engines",
        ):
            values = getattr(self, name) or ()
            object.__setattr__(self, name, tuple(str(v).strip().lower() for v in values if str(v).strip()))

    def with_sensitivity(self, sensitivity: float) -> "DetectorConfig":
        return replace(self, threshold=sensitivity_to_threshold(sensitivity))

    def with_threshold(self, threshold: float) -> "DetectorConfig":
        return replace(self, threshold=float(threshold))


@dataclass(frozen=True)
class ParsedURL:
    """The pieces of a URL the scorer looks at."""

    url: str
    scheme: str
    hostname: str
    path: str
    query: str  # Includes the leading "?", empty when absent

    @property
    def labels(self) -> list[str]:
        return self.hostname.split(".")

    @property
    def tld(self) -> str:
        labels = self.labels
        return labels[-1].lower() if len(labels) >= 2 else ""


# Attribute name -> serialized feature name (also the weight table key).
FEATURE_NAMES: dict[str, str] = {
    "url_length": "urlLength",
    "domain_length": "domainLength",
    "path_length": "pathLength",
    "has_subdomain": "hasSubdomain",
    "tld_is_risky": "tldIsRisky",
    "domain_has_dash": "domainHasDash",
    "special_char_count": "specialCharCount",
    "digit_count": "digitCount",
    "has_ip_address": "hasIPAddress",
    "has_suspicious_keywords": "hasSuspiciousKeywords",
    "query_param_count": "queryParamCount",
    "is_http": "isHttp",
    "has_suspicious_path": "hasSuspiciousPath",
    "domain_entropy_score": "domainEntropyScore",
    "url_entropy_score": "urlEntropyScore",
    "domain_token_count": "domainTokenCount",
    "path_token_count": "pathTokenCount",
    "avg_token_length": "avgTokenLength",
    "hex_pattern_count": "hexPatternCount",
    "non_ascii_char_count": "nonAsciiCharCount",
    "consecutive_special_chars": "consecutiveSpecialChars",
    "trigram_suspiciousness": "trigramSuspiciousness",
    "brand_similarity": "brandSimilarity",
    "is_domain_trusted": "isDomainTrusted",
}


@dataclass(frozen=True)
class URLFeatures:
    """Feature vector extracted from a single URL. Binary features are 0/1."""

    url_length: int = 0
    domain_length: int = 0
    path_length: int = 0
    has_subdomain: int = 0
    tld_is_risky: int = 0
    domain_has_dash: int = 0
    special_char_count: int = 0
    digit_count: int = 0
    has_ip_address: int = 0
    has_suspicious_keywords: int = 0
    query_param_count: int = 0
    is_http: int = 0
    has_suspicious_path: int = 0
    domain_entropy_score: float = 0.0
    url_entropy_score: float = 0.0
    domain_token_count: int = 0
    path_token_count: int = 0
    avg_token_length: float = 0.0
    hex_pattern_count: int = 0
    non_ascii_char_count: int = 0
    consecutive_special_chars: int = 0
    trigram_suspiciousness: float = 0.0
    brand_similarity: float = 0.0
    is_domain_trusted: int = 0

    def as_dict(self) -> dict[str, float]:
        """Features keyed by their serialized (weight table) names."""
        return {FEATURE_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "URLFeatures":
        """Accept serialized or attribute names; unknown keys are ignored."""
        by_serialized = {v: k for k, v in FEATURE_NAMES.items()}
        values = {}
        for key, value in data.items():
            attr = key if key in FEATURE_NAMES else by_serialized.get(key)
            if attr:
                values[attr] = value
        return cls(**values)

    def with_values(self, **changes) -> "URLFeatures":
        return replace(self, **changes)


@dataclass
class PhishingScoreResult:
    """Verdict for one URL."""

    url: str
    is_phishing: bool = False
    confidence: int = 0
    phishing_score: float = 0.0
    base_score: float = 0.0
    features: Optional[URLFeatures] = None
    domain_segments: list[str] = field(default_factory=list)
    path_segments: list[str] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["features"] = self.features.as_dict() if self.features else {}
        return data

"""Combination bonuses applied on top of the weighted feature sum."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Protocol

from ..utils.domains import host_matches
from .models import DetectorConfig, ParsedURL, URLFeatures


@dataclass
class RuleResult:
    """Outcome of a single bonus rule."""

    name: str
    score: float = 0.0
    reasons: list[str] = field(default_factory=list)


class BonusRule(Protocol):
    """Interface for bonus rules."""

    name: str

    def apply(
        self,
        features: URLFeatures,
        parsed: Optional[ParsedURL],
        config: DetectorConfig,
    ) -> RuleResult:  # pragma: no cover - interface
        ...


class BrandTargetingRule:
    name = "brand_targeting"

    def apply(self, features, parsed, config) -> RuleResult:
        score = 0.0
        reasons: list[str] = []
        if features.brand_similarity > 0.5:
            score += 0.15
            reasons.append(f"Resembles a targeted brand ({features.brand_similarity:.2f})")
            if features.has_suspicious_keywords:
                score += 0.2
                reasons.append("Brand lookalike with suspicious keywords")
            if features.has_suspicious_path and features.domain_has_dash:
                score += 0.25
                reasons.append("Brand lookalike with dashed host and credential path")
        return RuleResult(self.name, score=score, reasons=reasons)


class BrandPhishingPatternRule:
    """Known brand lure host fragments paired with account-flow paths."""

    name = "brand_phishing_pattern"

    def apply(self, features, parsed, config) -> RuleResult:
        if parsed is None:
            return RuleResult(self.name)

        host = parsed.hostname.lower()
        path = parsed.path.lower()
        for entry in config.brand_phishing_patterns:
            brand = str(entry.get("brand", "")).lower()
            patterns = entry.get("patterns") or []
            paths = entry.get("paths") or []
            if not brand:
                continue
            if host_matches(host, [f"{brand}.com"]):
                continue
            if any(p.lower() in host for p in patterns) and any(p.lower() in path for p in paths):
                return RuleResult(self.name, score=0.3, reasons=[f"Matches {brand} phishing pattern"])
        return RuleResult(self.name)


class IPAddressRule:
    name = "ip_address"

    def apply(self, features, parsed, config) -> RuleResult:
        if not features.has_ip_address:
            return RuleResult(self.name)
        score = 0.1
        reasons = ["Raw IP address host"]
        if features.is_http:
            score += 0.15
            reasons.append("IP host over plain HTTP")
        if features.has_suspicious_path or features.has_suspicious_keywords:
            score += 0.2
            reasons.append("IP host with suspicious path or keywords")
        return RuleResult(self.name, score=score, reasons=reasons)


class RiskyTLDKeywordRule:
    name = "risky_tld_keywords"

    def apply(self, features, parsed, config) -> RuleResult:
        if features.tld_is_risky and features.has_suspicious_keywords:
            return RuleResult(self.name, score=0.1, reasons=["Risky TLD with suspicious keywords"])
        return RuleResult(self.name)


class HomographRule:
    name = "homograph"

    def apply(self, features, parsed, config) -> RuleResult:
        if features.non_ascii_char_count > 0 and features.brand_similarity > 0.5:
            return RuleResult(self.name, score=0.2, reasons=["Non-ASCII characters in a brand lookalike"])
        return RuleResult(self.name)


class TrigramDashRule:
    name = "trigram_dash"

    def apply(self, features, parsed, config) -> RuleResult:
        if features.trigram_suspiciousness > 0.3 and features.domain_has_dash:
            return RuleResult(self.name, score=0.2, reasons=["Suspicious character mix in a dashed host"])
        return RuleResult(self.name)


class StrongBrandKeywordRule:
    name = "strong_brand_keywords"

    def apply(self, features, parsed, config) -> RuleResult:
        if features.brand_similarity > 0.7 and features.has_suspicious_keywords:
            return RuleResult(self.name, score=0.15, reasons=["Close brand match with suspicious keywords"])
        return RuleResult(self.name)


class InsecureTransportRule:
    name = "insecure_transport"

    def apply(self, features, parsed, config) -> RuleResult:
        if features.is_http and (features.has_suspicious_keywords or features.has_suspicious_path):
            return RuleResult(self.name, score=0.1, reasons=["Plain HTTP with suspicious content"])
        return RuleResult(self.name)


# Applied in this order; each adds to the raw score before normalization.
DEFAULT_BONUS_RULES: tuple[BonusRule, ...] = (
    BrandTargetingRule(),
    BrandPhishingPatternRule(),
    IPAddressRule(),
    RiskyTLDKeywordRule(),
    HomographRule(),
    TrigramDashRule(),
    StrongBrandKeywordRule(),
    InsecureTransportRule(),
)

"""Brand impersonation and homograph similarity."""

from __future__ import annotations

import re
import unicodedata
from functools import lru_cache
from typing import Mapping

from .models import DetectorConfig
from .text import levenshtein_distance


@lru_cache(maxsize=8)
def _reverse_table(items: tuple[tuple[str, tuple[str, ...]], ...]) -> dict[str, str]:
    table: dict[str, str] = {}
    for ascii_char, variants in items:
        for variant in variants:
            table[variant] = ascii_char
    return table


def _freeze(homoglyphs: Mapping[str, list[str]]) -> tuple[tuple[str, tuple[str, ...]], ...]:
    return tuple((k, tuple(v)) for k, v in homoglyphs.items())


def normalize_homoglyphs(text: str, homoglyphs: Mapping[str, list[str]]) -> str:
    """Lowercase and replace lookalike characters with their Latin equivalents."""
    table = _reverse_table(_freeze(homoglyphs))
    result = []
    for char in text.lower():
        if char in table:
            result.append(table[char])
        elif char.isascii():
            result.append(char)
        else:
            # Try NFKC normalization for other lookalikes (fullwidth forms etc.)
            result.append(unicodedata.normalize("NFKC", char))
    return "".join(result)


def homograph_distance(domain: str, brand: str, homoglyphs: Mapping[str, list[str]]) -> float:
    """Similarity 0-1 after folding homoglyphs in both strings."""
    normalized_domain = normalize_homoglyphs(domain, homoglyphs)
    normalized_brand = normalize_homoglyphs(brand, homoglyphs)

    if normalized_domain == normalized_brand:
        return 0.95
    if normalized_brand in normalized_domain:
        return 0.9
    if levenshtein_distance(normalized_domain, normalized_brand) <= 2 and len(brand) > 4:
        return 0.85
    return 0.0


@lru_cache(maxsize=512)
def _suffix_pattern(brand: str, words: tuple[str, ...]) -> re.Pattern:
    alternatives = "|".join(re.escape(w) for w in words)
    return re.compile(rf"{re.escape(brand)}[^a-z0-9]?({alternatives})", re.IGNORECASE)


@lru_cache(maxsize=512)
def _noise_pattern(brand: str) -> re.Pattern:
    return re.compile("[^a-zA-Z0-9]?".join(re.escape(c) for c in brand), re.IGNORECASE)


def _score_brand(domain: str, brand: str, config: DetectorConfig) -> float:
    """Best score any single rule gives ``domain`` against one brand."""
    if domain == brand:
        return 1.0

    scores = [0.0]
    if config.brand_suffix_words and _suffix_pattern(brand, config.brand_suffix_words).search(domain):
        scores.append(0.9)

    if len(brand) >= 4:
        if brand in domain:
            coverage = len(brand) / len(domain)
            scores.append(max(0.6, min(0.95, coverage * 1.2)))

        distance = levenshtein_distance(domain, brand)
        if distance <= 2 and len(brand) > 5:
            scores.append(0.8)
        elif distance <= 3 and len(domain) > 0.7 * len(brand):
            scores.append(0.7)

        homograph = homograph_distance(domain, brand, config.homoglyphs)
        if homograph > 0.8:
            scores.append(homograph)

    if len(brand) >= 6 and _noise_pattern(brand).search(domain):
        scores.append(0.65)

    return max(scores)


def brand_similarity(domain: str, config: DetectorConfig) -> float:
    """How strongly a host label looks like one of the targeted brands (0-1).

    Returns the maximum over every targeted brand and the known brand
    variations (``appleid``, ``office365``, ...).
    """
    if not domain or len(domain) < 3:
        return 0.0

    normalized = domain.lower()
    best = 0.0

    for variations in config.brand_variations.values():
        if any(variation.lower() in normalized for variation in variations):
            best = 0.95
            break

    for brand in config.targeted_brands:
        if len(brand) < 3:
            continue
        score = _score_brand(normalized, brand, config)
        if score > best:
            best = score
            if best >= 1.0:
                break

    return best

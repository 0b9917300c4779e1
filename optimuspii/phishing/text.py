"""Lexical primitives: edit distance, entropy, word segmentation, trigrams."""

from __future__ import annotations

import math
import re
from collections import Counter
from typing import Iterable

from rapidfuzz.distance import Levenshtein

MIN_SEGMENT_LENGTH = 3
MAX_SEGMENT_LENGTH = 8

_SCHEME_PREFIX = re.compile(r"^https?://", re.IGNORECASE)
_SPECIAL_RUN = re.compile(r"[^a-zA-Z0-9./:_-]+")
_DIGITS = re.compile(r"[0-9]+")
_RANDOM_TRIGRAM = re.compile(r"[0-9][a-z][0-9]|[a-z][0-9][a-z]")


def levenshtein_distance(a: str, b: str) -> int:
    """Unit-cost edit distance (insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def shannon_entropy(text: str) -> float:
    """Shannon entropy in bits per character."""
    if not text:
        return 0.0
    length = len(text)
    entropy = 0.0
    for count in Counter(text).values():
        probability = count / length
        entropy -= probability * math.log2(probability)
    return entropy


def consecutive_special_chars(url: str) -> int:
    """Length of the longest run of characters outside ``[a-zA-Z0-9./:_-]``."""
    if not url:
        return 0
    return max((len(run) for run in _SPECIAL_RUN.findall(url)), default=0)


class WordSegmenter:
    """Greedy tokenizer that prefers known keyword fragments and brand names.

    The segment cache holds every 3-8 character substring of the suspicious
    keywords plus the full brand names. It is built once and never mutated.
    """

    def __init__(self, keywords: Iterable[str], brands: Iterable[str]):
        self.keywords = frozenset(k.lower() for k in keywords)
        self.brands = frozenset(b.lower() for b in brands)
        self.segments = self._precompute(self.keywords, self.brands)

    @staticmethod
    def _precompute(keywords: frozenset[str], brands: frozenset[str]) -> frozenset[str]:
        cache: set[str] = set()
        for keyword in keywords:
            for length in range(MIN_SEGMENT_LENGTH, min(MAX_SEGMENT_LENGTH, len(keyword)) + 1):
                for start in range(len(keyword) - length + 1):
                    cache.add(keyword[start:start + length])
        cache.update(brands)
        return frozenset(cache)

    def is_known(self, candidate: str) -> bool:
        return candidate in self.segments or candidate in self.keywords or candidate in self.brands

    def segment(self, word: str) -> list[str]:
        """Split ``word`` into known fragments, digit runs and leftovers."""
        if not word:
            return []

        segments: list[str] = []
        position = 0
        length = len(word)

        while position < length:
            longest = min(MAX_SEGMENT_LENGTH, length - position)
            for size in range(longest, MIN_SEGMENT_LENGTH - 1, -1):
                candidate = word[position:position + size].lower()
                if self.is_known(candidate):
                    segments.append(candidate)
                    position += size
                    break
            else:
                if length - position <= 4:
                    segments.append(word[position:])
                    break

                if word[position:position + 3].isascii() and word[position:position + 3].isdigit():
                    digits = _DIGITS.match(word, position)
                    segments.append(digits.group(0))
                    position = digits.end()
                    continue

                segments.append(word[position])
                position += 1

        return segments


def trigram_suspicion(
    url: str,
    suspicious: Iterable[str],
    safe: Iterable[str],
) -> float:
    """Score 0-1 from the share of suspicious vs. safe 3-character windows.

    Letter-digit-letter and digit-letter-digit windows count as random-looking
    and add up to 0.3 on top of the ratio.
    """
    if not url or len(url) < 3:
        return 0.0

    suspicious_set = set(suspicious)
    safe_set = set(safe)
    clean = _SCHEME_PREFIX.sub("", url, count=1).lower()
    trigrams = [clean[i:i + 3] for i in range(len(clean) - 2)]
    if not trigrams:
        return 0.0

    suspicious_count = 0
    safe_count = 0
    random_count = 0
    for trigram in trigrams:
        if trigram.isascii() and trigram.isdigit():
            continue
        if _RANDOM_TRIGRAM.fullmatch(trigram):
            random_count += 1
            continue
        if trigram in suspicious_set:
            suspicious_count += 1
        elif trigram in safe_set:
            safe_count += 1

    classified = suspicious_count + safe_count
    if classified == 0:
        if random_count > 0:
            return min(0.6, random_count / len(trigrams))
        return 0.2

    random_factor = 0.0
    if random_count > 0:
        random_factor = min(0.3, random_count / len(trigrams) * 0.5)

    return min(1.0, suspicious_count / classified + random_factor)

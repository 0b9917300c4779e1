"""Pattern detection, highlighting and redaction."""

from __future__ import annotations

import logging
import re
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..constants import DEFAULT_SAMPLE_VALUE
from ..exceptions import PatternCompileError
from .compiler import compile_pattern
from .models import DetectionResult, MatchSpan, PatternDefinition, PatternError, TextSegment

logger = logging.getLogger(__name__)

PatternCollection = Union[Sequence[PatternDefinition], Mapping[str, PatternDefinition]]


def ordered_patterns(patterns: Optional[PatternCollection]) -> list[PatternDefinition]:
    """Return patterns in evaluation order.

    Patterns with an explicit ``order`` come first (ascending); the rest keep
    their position in the collection. Mappings are read in insertion order.
    """
    if not patterns:
        return []
    items = list(patterns.values()) if isinstance(patterns, Mapping) else list(patterns)
    indexed = list(enumerate(items))
    indexed.sort(key=lambda pair: (pair[1].order is None, pair[1].order or 0, pair[0]))
    return [p for _, p in indexed]


def collect_spans(
    text: str,
    compiled: Iterable[tuple[str, re.Pattern]],
) -> list[MatchSpan]:
    """Find non-overlapping spans; earlier patterns win contested regions.

    Spans are returned in discovery order (pattern by pattern). A candidate
    that overlaps any accepted span is dropped whole, never truncated.
    """
    accepted: list[MatchSpan] = []
    if not text:
        return accepted

    for name, regex in compiled:
        for match in regex.finditer(text):
            if match.end() == match.start():
                continue
            span = MatchSpan(match.start(), match.end(), name, match.group(0))
            if any(span.overlaps(existing) for existing in accepted):
                continue
            accepted.append(span)
    return accepted


def detect(text: str, patterns: Optional[PatternCollection]) -> DetectionResult:
    """Scan ``text`` with every enabled pattern.

    ``matches_by_pattern`` lists every match of each pattern (used for
    display and redaction), while ``spans`` holds the non-overlapping subset
    used for highlighting. A pattern that fails to compile is reported in
    ``errors`` and the remaining patterns still run.
    """
    result = DetectionResult()
    if not text:
        return result

    for definition in ordered_patterns(patterns):
        if not definition.enabled:
            continue
        try:
            regex = compile_pattern(definition.pattern)
        except PatternCompileError as exc:
            logger.warning("Skipping pattern %s: %s", definition.name, exc.message)
            result.errors.append(PatternError(definition.name, definition.pattern, exc.message))
            continue

        result.compiled.append((definition.name, regex))
        found = [m.group(0) for m in regex.finditer(text) if m.group(0)]
        if found:
            result.matches_by_pattern.setdefault(definition.name, []).extend(found)

    result.spans = collect_spans(text, result.compiled)
    if result.has_matches:
        logger.debug(
            "Detected %s matches across %s patterns",
            result.match_count(),
            len(result.matches_by_pattern),
        )
    return result


def highlight(
    text: str,
    compiled: Union[Mapping[str, re.Pattern], Iterable[tuple[str, re.Pattern]]],
) -> list[TextSegment]:
    """Split ``text`` into plain and matched segments, in text order."""
    pairs = compiled.items() if isinstance(compiled, Mapping) else compiled
    spans = sorted(collect_spans(text, pairs), key=lambda s: s.start)

    segments: list[TextSegment] = []
    position = 0
    for span in spans:
        if span.start > position:
            segments.append(TextSegment(text[position:span.start]))
        segments.append(TextSegment(span.matched_text, span.pattern_name))
        position = span.end
    if position < len(text):
        segments.append(TextSegment(text[position:]))
    return segments


def redact(
    text: str,
    matches_by_pattern: Mapping[str, Sequence[str]],
    samples: Optional[Mapping[str, str]] = None,
) -> str:
    """Replace each detected match with its pattern's sample value.

    Within a pattern, matches are substituted right to left by their first
    position in the original text, each replacing the first occurrence left
    in the working string. A sample that itself contains another pattern's
    match can therefore be substituted again.
    """
    if not text:
        return ""

    samples = samples or {}
    redacted = text
    for name, matches in matches_by_pattern.items():
        sample = samples.get(name) or DEFAULT_SAMPLE_VALUE
        for match in sorted(matches, key=text.find, reverse=True):
            if not match:
                continue
            index = redacted.find(match)
            if index != -1:
                redacted = redacted[:index] + sample + redacted[index + len(match):]
    return redacted


def sample_values(
    patterns: Optional[PatternCollection],
    names: Optional[Iterable[str]] = None,
) -> dict[str, str]:
    """Map pattern names to their sample data (``REDACTED`` when unset)."""
    wanted = set(names) if names is not None else None
    samples: dict[str, str] = {}
    for definition in ordered_patterns(patterns):
        if wanted is not None and definition.name not in wanted:
            continue
        samples[definition.name] = definition.sample_data or DEFAULT_SAMPLE_VALUE
    return samples


def redact_text(text: str, patterns: Optional[PatternCollection]) -> tuple[str, DetectionResult]:
    """Detect and redact in one call."""
    result = detect(text, patterns)
    if not result.has_matches:
        return text, result
    samples = sample_values(patterns, result.matches_by_pattern)
    return redact(text, result.matches_by_pattern, samples), result


def validate_patterns(patterns: Optional[PatternCollection]) -> list[PatternError]:
    """Compile every pattern (enabled or not) and report the failures."""
    errors: list[PatternError] = []
    for definition in ordered_patterns(patterns):
        try:
            compile_pattern(definition.pattern)
        except PatternCompileError as exc:
            errors.append(PatternError(definition.name, definition.pattern, exc.message))
    return errors

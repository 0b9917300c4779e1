"""PII pattern detection and redaction."""

from .compiler import compile_pattern, is_valid_pattern
from .engine import (
    collect_spans,
    detect,
    highlight,
    ordered_patterns,
    redact,
    redact_text,
    sample_values,
    validate_patterns,
)
from .models import DetectionResult, MatchSpan, PatternDefinition, PatternError, TextSegment

__all__ = [
    "compile_pattern",
    "is_valid_pattern",
    "collect_spans",
    "detect",
    "highlight",
    "ordered_patterns",
    "redact",
    "redact_text",
    "sample_values",
    "validate_patterns",
    "DetectionResult",
    "MatchSpan",
    "PatternDefinition",
    "PatternError",
    "TextSegment",
]

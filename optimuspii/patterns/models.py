"""Pattern engine data models."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional


def _first(data: dict, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class PatternDefinition:
    """A named, user-editable detection pattern."""

    id: str
    name: str
    pattern: str
    enabled: bool = True
    is_default: bool = False
    sample_data: str = ""
    is_global: bool = False
    # Explicit evaluation order; decides which pattern wins an overlapping span.
    order: Optional[int] = None

    @property
    def can_delete(self) -> bool:
        """Global defaults are locked; everything else may be removed."""
        return not self.is_global or not self.is_default

    @classmethod
    def from_dict(cls, data: dict, key: str = "") -> "PatternDefinition":
        """Build from stored settings (camelCase or snake_case keys)."""
        pattern_id = str(_first(data, "id", default=key) or key)
        name = str(_first(data, "name", default=pattern_id) or pattern_id)
        order = _first(data, "order")
        return cls(
            id=pattern_id,
            name=name,
            pattern=str(_first(data, "pattern", default="")),
            enabled=bool(_first(data, "enabled", default=True)),
            is_default=bool(_first(data, "isDefault", "is_default", default=False)),
            sample_data=str(_first(data, "sampleData", "sample_data", default="") or ""),
            is_global=bool(_first(data, "isGlobal", "is_global", default=False)),
            order=int(order) if order is not None else None,
        )

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "name": self.name,
            "pattern": self.pattern,
            "enabled": self.enabled,
            "isDefault": self.is_default,
            "sampleData": self.sample_data,
            "isGlobal": self.is_global,
        }
        if self.order is not None:
            data["order"] = self.order
        return data


@dataclass(frozen=True)
class MatchSpan:
    """A matched region of the scanned text (``end`` is exclusive)."""

    start: int
    end: int
    pattern_name: str
    matched_text: str

    def overlaps(self, other: "MatchSpan") -> bool:
        return not (self.end <= other.start or self.start >= other.end)


@dataclass(frozen=True)
class PatternError:
    """A pattern that was skipped because it failed to compile."""

    pattern_name: str
    source: str
    message: str


@dataclass
class DetectionResult:
    """Outcome of one detection pass over a text."""

    matches_by_pattern: dict[str, list[str]] = field(default_factory=dict)
    spans: list[MatchSpan] = field(default_factory=list)
    errors: list[PatternError] = field(default_factory=list)
    # (name, regex) in evaluation order; names may repeat
    compiled: list[tuple[str, re.Pattern]] = field(default_factory=list, repr=False)

    @property
    def has_matches(self) -> bool:
        return bool(self.matches_by_pattern)

    @property
    def pattern_names(self) -> list[str]:
        return list(self.matches_by_pattern)

    @property
    def error(self) -> Optional[str]:
        """Summary of compile failures, if any."""
        if not self.errors:
            return None
        return "; ".join(f"{e.pattern_name}: {e.message}" for e in self.errors)

    def match_count(self) -> int:
        return sum(len(items) for items in self.matches_by_pattern.values())


@dataclass(frozen=True)
class TextSegment:
    """A piece of text for rendering; ``pattern_name`` is set for matches."""

    text: str
    pattern_name: Optional[str] = None

    @property
    def is_match(self) -> bool:
        return self.pattern_name is not None

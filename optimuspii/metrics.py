"""Detection metrics tracking.

Counts which PII patterns fire, what paste and upload decisions are made and
how URLs are classified, so thresholds and pattern sets can be tuned from data.
"""

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

logger = logging.getLogger(__name__)


@dataclass
class PatternMetrics:
    """Metrics for a single PII pattern."""

    hits: int = 0  # Individual matches
    events: int = 0  # Texts with at least one match
    last_hit: Optional[datetime] = None

    def record_hit(self, count: int) -> None:
        self.hits += count
        self.events += 1
        self.last_hit = datetime.now()


@dataclass
class URLMetrics:
    """Aggregated URL verdicts."""

    analyzed: int = 0
    phishing: int = 0
    errors: int = 0
    actions: dict = field(default_factory=lambda: defaultdict(int))
    hosts: set = field(default_factory=set)


class DetectionMetrics:
    """Thread-safe metrics collector shared by the policy and navigation layers."""

    _instance: Optional["DetectionMetrics"] = None
    _lock = threading.Lock()

    def __new__(cls) -> "DetectionMetrics":
        """Singleton pattern for global metrics access."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super().__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self) -> None:
        if self._initialized:
            return
        self._initialized = True
        self._lock = threading.Lock()
        self._patterns: dict[str, PatternMetrics] = defaultdict(PatternMetrics)
        self._paste_actions: dict[str, int] = defaultdict(int)
        self._file_blocks: dict[str, int] = defaultdict(int)
        self._urls = URLMetrics()
        self._started: datetime = datetime.now()

    def record_pattern_hit(self, pattern: str, count: int = 1) -> None:
        """Record that ``pattern`` matched ``count`` times in one text."""
        with self._lock:
            self._patterns[pattern].record_hit(count)

    def record_paste_action(self, action: str) -> None:
        with self._lock:
            self._paste_actions[action] += 1

    def record_file_block(self, extension: str) -> None:
        with self._lock:
            self._file_blocks[extension.lower()] += 1

    def record_url_verdict(
        self,
        host: str,
        is_phishing: bool,
        action: str = "",
        error: bool = False,
    ) -> None:
        """Record one URL classification and the navigation action taken."""
        with self._lock:
            self._urls.analyzed += 1
            if error:
                self._urls.errors += 1
            if is_phishing:
                self._urls.phishing += 1
                if host:
                    self._urls.hosts.add(host)
            if action:
                self._urls.actions[action] += 1

    def get_summary(self) -> dict:
        """Get a summary of all metrics."""
        with self._lock:
            uptime = datetime.now() - self._started
            return {
                "uptime_seconds": int(uptime.total_seconds()),
                "patterns": {
                    name: {
                        "hits": m.hits,
                        "events": m.events,
                        "last_hit": m.last_hit.isoformat() if m.last_hit else None,
                    }
                    for name, m in self._patterns.items()
                },
                "top_patterns": self._get_top_patterns(5),
                "paste_actions": dict(self._paste_actions),
                "file_blocks": dict(self._file_blocks),
                "urls": {
                    "analyzed": self._urls.analyzed,
                    "phishing": self._urls.phishing,
                    "errors": self._urls.errors,
                    "unique_phishing_hosts": len(self._urls.hosts),
                    "actions": dict(self._urls.actions),
                },
            }

    def _get_top_patterns(self, n: int) -> list[dict]:
        """Get top N patterns by hit count."""
        sorted_patterns = sorted(
            self._patterns.items(),
            key=lambda x: x[1].hits,
            reverse=True,
        )[:n]
        return [{"pattern": p[:50], "hits": m.hits} for p, m in sorted_patterns]

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._patterns.clear()
            self._paste_actions.clear()
            self._file_blocks.clear()
            self._urls = URLMetrics()
            self._started = datetime.now()


# Global instance
metrics = DetectionMetrics()

"""Navigation guard: turns URL verdicts into allow / warn / block decisions."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, quote, urlsplit

from ..constants import (
    ALLOW_PHISHING_URL_ACTION,
    DEFAULT_EXTENSION_BASE_URL,
    DEFAULT_WHITELIST_TTL_SECONDS,
    INTERNAL_URL_PREFIXES,
    WARNING_PAGE,
    NavigationAction,
    PhishingMode,
)
from ..heuristics import DEFAULT_SENSITIVITY
from ..metrics import metrics
from .models import PhishingScoreResult
from .scorer import PhishingURLDetector

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone besides alphanumerics and "-_."
_URI_COMPONENT_SAFE = "!~*'()"


@dataclass
class NavigationEvent:
    """A committed top-level or sub-frame navigation."""

    url: str
    tab_id: Optional[int] = None
    frame_id: int = 0
    transition_type: str = ""


@dataclass
class NavigationResult:
    """Outcome of analyzing one URL under the current mode."""

    url: str
    action: NavigationAction = NavigationAction.NONE
    is_phishing: bool = False
    confidence: int = 0
    phishing_score: float = 0.0
    message: str = ""
    error: Optional[str] = None
    tab_id: Optional[int] = None
    timestamp: float = 0.0
    score: Optional[PhishingScoreResult] = field(default=None, repr=False)


@dataclass
class NavigationDecision:
    """What the glue should do with a navigation."""

    action: NavigationAction
    redirect_url: Optional[str] = None
    result: Optional[NavigationResult] = field(default=None, repr=False)


@dataclass(frozen=True)
class WarningPageContext:
    """Parameters the warning page renders."""

    url: str
    risk: int
    risk_level: str  # "high", "medium" or "low"


def risk_level(confidence: int) -> str:
    if confidence >= 80:
        return "high"
    if confidence >= 60:
        return "medium"
    return "low"


def build_warning_url(base_url: str, url: str, confidence: int) -> str:
    """Warning page address carrying the blocked URL and its confidence."""
    return f"{base_url}{WARNING_PAGE}?url={quote(url, safe=_URI_COMPONENT_SAFE)}&risk={confidence}"


def parse_warning_url(warning_url: str) -> WarningPageContext:
    """Read back the parameters of a warning page address.

    Missing or non-numeric ``risk`` reads as 0.
    """
    params = parse_qs(urlsplit(warning_url).query)
    url = (params.get("url") or [""])[0]
    raw_risk = (params.get("risk") or [""])[0].strip()
    digits = ""
    for char in raw_risk.lstrip("+-"):
        if not char.isdigit():
            break
        digits += char
    risk = int(digits) if digits else 0
    if raw_risk.startswith("-"):
        risk = -risk
    return WarningPageContext(url=url, risk=risk, risk_level=risk_level(risk))


class PhishingURLDetection:
    """Mode state machine and temporary whitelist around a :class:`PhishingURLDetector`."""

    def __init__(
        self,
        detector: Optional[PhishingURLDetector] = None,
        mode: PhishingMode | str = PhishingMode.DISABLED,
        sensitivity: Optional[float] = None,
        whitelist_ttl: float = DEFAULT_WHITELIST_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
        extension_base_url: str = DEFAULT_EXTENSION_BASE_URL,
    ):
        self.detector = detector or PhishingURLDetector()
        self.mode = PhishingMode.from_string(mode) if isinstance(mode, str) else mode
        self.sensitivity = DEFAULT_SENSITIVITY if sensitivity is None else sensitivity
        self.whitelist_ttl = whitelist_ttl
        self.extension_base_url = extension_base_url
        self._clock = clock
        self._whitelist: dict[str, float] = {}
        self._lock = threading.Lock()

        # The detector's own threshold stands until sensitivity is set explicitly.
        if sensitivity is not None:
            self.detector.update_config(self.detector.config.with_sensitivity(sensitivity))

        logger.info(
            "Phishing detection initialized. Mode: %s, Sensitivity: %s",
            self.mode.value,
            self.sensitivity,
        )

    @property
    def listening(self) -> bool:
        return self.mode in (PhishingMode.WARN, PhishingMode.BLOCK)

    def update_config(
        self,
        mode: PhishingMode | str | None = None,
        sensitivity: Optional[float] = None,
        threshold: Optional[float] = None,
    ) -> None:
        """Apply new settings. Sensitivity recomputes the threshold; an explicit threshold wins."""
        old_mode = self.mode
        if mode is not None:
            self.mode = PhishingMode.from_string(mode) if isinstance(mode, str) else mode

        config = self.detector.config
        if sensitivity is not None:
            self.sensitivity = sensitivity
            config = config.with_sensitivity(sensitivity)
        if threshold is not None:
            config = config.with_threshold(threshold)
        if config is not self.detector.config:
            self.detector.update_config(config)

        logger.debug(
            "Phishing config updated. Mode: %s, Sensitivity: %s, Threshold: %.3f",
            self.mode.value,
            self.sensitivity,
            self.detector.threshold,
        )
        if old_mode != self.mode:
            logger.info("Detection mode changed from '%s' to '%s'", old_mode.value, self.mode.value)

    def allow_temporarily(self, url: str) -> None:
        """Whitelist ``url`` for ``whitelist_ttl`` seconds."""
        with self._lock:
            self._whitelist[url] = self._clock() + self.whitelist_ttl
        logger.info("User approved navigation to flagged URL: %s", url)

    def is_whitelisted(self, url: str) -> bool:
        with self._lock:
            return url in self._whitelist

    def cleanup_whitelist(self) -> None:
        now = self._clock()
        with self._lock:
            for url, expiry in list(self._whitelist.items()):
                if now > expiry:
                    del self._whitelist[url]

    def handle_message(self, message: Any) -> Optional[dict]:
        """Answer runtime messages from the warning page."""
        if not isinstance(message, dict):
            return None
        if message.get("action") == ALLOW_PHISHING_URL_ACTION and message.get("url"):
            self.allow_temporarily(message["url"])
            return {"success": True}
        return None

    def on_navigation(self, event: NavigationEvent) -> Optional[NavigationDecision]:
        """Entry point for committed navigations. Returns None when nothing applies."""
        if event.frame_id != 0 or not self.listening:
            return None
        return self.handle_navigation(event.url, tab_id=event.tab_id)

    def handle_navigation(self, url: str, tab_id: Optional[int] = None) -> NavigationDecision:
        self.cleanup_whitelist()

        if url.startswith(INTERNAL_URL_PREFIXES) or WARNING_PAGE in url:
            return NavigationDecision(NavigationAction.ALLOW)

        if self.is_whitelisted(url):
            logger.debug("URL in temporary whitelist, allowing: %s", url)
            return NavigationDecision(NavigationAction.ALLOW)

        result = self.analyze_url(url, tab_id=tab_id)
        if result.action == NavigationAction.BLOCK:
            return NavigationDecision(
                NavigationAction.BLOCK,
                redirect_url=build_warning_url(self.extension_base_url, url, result.confidence),
                result=result,
            )
        if result.action == NavigationAction.WARN:
            return NavigationDecision(NavigationAction.WARN, result=result)
        return NavigationDecision(NavigationAction.ALLOW, result=result)

    def analyze_url(self, url: str, tab_id: Optional[int] = None) -> NavigationResult:
        """Score ``url`` and pick the action for the current mode. Never raises."""
        if self.mode == PhishingMode.DISABLED:
            return NavigationResult(url=url, message="Phishing detection disabled", tab_id=tab_id)

        started = time.perf_counter()
        score = self.detector.analyze(url)
        elapsed_ms = (time.perf_counter() - started) * 1000

        result = NavigationResult(
            url=url,
            is_phishing=score.is_phishing,
            confidence=score.confidence,
            phishing_score=score.phishing_score,
            error=score.error,
            tab_id=tab_id,
            timestamp=self._clock(),
            score=score,
        )

        if score.error:
            result.message = "Analysis error"
            logger.debug("Could not analyze %s: %s", url, score.error)
        elif score.is_phishing:
            if self.mode == PhishingMode.BLOCK:
                result.action = NavigationAction.BLOCK
                result.message = "Phishing URL blocked"
            else:
                result.action = NavigationAction.WARN
                result.message = "Phishing URL warning"
            self._log_detection(result)

        host = ""
        if score.features is not None:
            host = urlsplit(url).hostname or ""
        metrics.record_url_verdict(
            host,
            score.is_phishing,
            action=result.action.value,
            error=bool(score.error),
        )
        logger.debug("Analyzed %s in %.1fms", url, elapsed_ms)
        return result

    def _log_detection(self, result: NavigationResult) -> None:
        logger.warning(
            "Detected phishing URL (%s%% confidence): %s Score: %.3f, Action: %s",
            result.confidence,
            result.url,
            result.phishing_score,
            result.action.value,
        )
        if result.score and result.score.features:
            details = ", ".join(
                f"{key}: {value:.3f}" if isinstance(value, float) else f"{key}: {value}"
                for key, value in result.score.features.as_dict().items()
            )
            logger.debug("Phishing detection features for %s: %s", result.url, details)

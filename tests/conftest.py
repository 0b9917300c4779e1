"""Global pytest configuration."""

from __future__ import annotations

import pytest

from optimuspii.heuristics import DEFAULT_PATTERNS
from optimuspii.metrics import metrics
from optimuspii.patterns import PatternDefinition
from optimuspii.phishing import PhishingURLDetector

CONFIG_ENV_VARS = (
    "PHISHING_MODE",
    "PHISHING_SENSITIVITY",
    "PHISHING_THRESHOLD",
    "PASTE_MODE",
    "FILE_UPLOAD_MODE",
    "BLOCKED_EXTENSIONS",
    "WHITELIST_TTL_SECONDS",
    "EXTENSION_BASE_URL",
    "LOG_LEVEL",
    "CONFIG_DIR",
)


class FakeClock:
    """Manually advanced replacement for ``time.time``."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_metrics():
    """Start every test with empty counters."""
    metrics.reset()
    yield
    metrics.reset()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No OptimusPII variables and no stray .env in the working directory."""
    for name in CONFIG_ENV_VARS:
        # setenv first so values load_dotenv() adds are removed on teardown
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def default_patterns() -> list[PatternDefinition]:
    return [PatternDefinition.from_dict(p) for p in DEFAULT_PATTERNS]


@pytest.fixture
def patterns_by_id(default_patterns) -> dict[str, PatternDefinition]:
    return {p.id: p for p in default_patterns}


@pytest.fixture
def email_pattern(patterns_by_id) -> PatternDefinition:
    return patterns_by_id["email-address"]


@pytest.fixture
def ssn_pattern(patterns_by_id) -> PatternDefinition:
    return patterns_by_id["social-security-number"]


@pytest.fixture
def detector() -> PhishingURLDetector:
    return PhishingURLDetector()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()

"""Configuration management for OptimusPII."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .constants import (
    DEFAULT_EXTENSION_BASE_URL,
    DEFAULT_WHITELIST_TTL_SECONDS,
    VALID_PASTE_MODES,
    VALID_PHISHING_MODES,
    PolicyType,
)
from .exceptions import ConfigurationError
from .heuristics import (
    DEFAULT_BLOCKED_EXTENSIONS,
    DEFAULT_BRAND_PHISHING_PATTERNS,
    DEFAULT_BRAND_SUFFIX_WORDS,
    DEFAULT_BRAND_VARIATIONS,
    DEFAULT_DOMAIN_MAPPINGS,
    DEFAULT_FEATURE_WEIGHTS,
    DEFAULT_HOMOGLYPHS,
    DEFAULT_PATTERNS,
    DEFAULT_POLICIES,
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
    HEURISTICS_VERSION,
)
from .patterns import PatternDefinition, validate_patterns
from .phishing.models import FEATURE_NAMES, DetectorConfig, sensitivity_to_threshold
from .policy import DomainMapping, Policy
from .utils.domains import canonicalize_domain

logger = logging.getLogger(__name__)

KNOWN_FEATURES = set(FEATURE_NAMES.values())


@dataclass
class Config:
    """Application configuration loaded from environment and heuristics.yaml."""

    # Navigation guard
    phishing_mode: str = "disabled"
    phishing_sensitivity: Optional[float] = None  # 0-100; derives the threshold when set
    phishing_threshold: Optional[float] = None  # Explicit override, wins over sensitivity
    whitelist_ttl_seconds: float = DEFAULT_WHITELIST_TTL_SECONDS
    extension_base_url: str = DEFAULT_EXTENSION_BASE_URL

    # Paste / upload protection (used when no policy table is configured)
    paste_mode: str = "interactive"
    file_upload_mode: str = "interactive"
    blocked_extensions: list[str] = field(default_factory=lambda: list(DEFAULT_BLOCKED_EXTENSIONS))

    log_level: str = "INFO"
    config_dir: Path = field(default_factory=lambda: Path("./config"))
    heuristics_version: str = HEURISTICS_VERSION

    # Phishing heuristics (override via config/heuristics.yaml)
    trusted_domains: list[str] = field(default_factory=lambda: list(DEFAULT_TRUSTED_DOMAINS))
    suspicious_keywords: list[str] = field(default_factory=lambda: list(DEFAULT_SUSPICIOUS_KEYWORDS))
    targeted_brands: list[str] = field(default_factory=lambda: list(DEFAULT_TARGETED_BRANDS))
    risk_tlds: list[str] = field(default_factory=lambda: list(DEFAULT_RISK_TLDS))
    feature_weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_FEATURE_WEIGHTS))
    suspicious_path_segments: list[str] = field(
        default_factory=lambda: list(DEFAULT_SUSPICIOUS_PATH_SEGMENTS)
    )
    suspicious_script_extensions: list[str] = field(
        default_factory=lambda: list(DEFAULT_SUSPICIOUS_SCRIPT_EXTENSIONS)
    )
    brand_variations: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_BRAND_VARIATIONS.items()}
    )
    brand_suffix_words: list[str] = field(default_factory=lambda: list(DEFAULT_BRAND_SUFFIX_WORDS))
    brand_phishing_patterns: list[dict] = field(
        default_factory=lambda: [dict(p) for p in DEFAULT_BRAND_PHISHING_PATTERNS]
    )
    suspicious_trigrams: list[str] = field(default_factory=lambda: list(DEFAULT_SUSPICIOUS_TRIGRAMS))
    safe_trigrams: list[str] = field(default_factory=lambda: list(DEFAULT_SAFE_TRIGRAMS))
    search_engines: list[str] = field(default_factory=lambda: list(DEFAULT_SEARCH_ENGINES))
    homoglyphs: dict[str, list[str]] = field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_HOMOGLYPHS.items()}
    )

    # PII patterns and policy tables
    patterns: list[PatternDefinition] = field(
        default_factory=lambda: [PatternDefinition.from_dict(p) for p in DEFAULT_PATTERNS]
    )
    policies: list[Policy] = field(default_factory=lambda: [Policy.from_dict(p) for p in DEFAULT_POLICIES])
    domain_mappings: list[DomainMapping] = field(
        default_factory=lambda: [DomainMapping.from_dict(m) for m in DEFAULT_DOMAIN_MAPPINGS]
    )

    def __post_init__(self):
        self.config_dir = Path(self.config_dir)
        self._load_lists()

    def _load_lists(self):
        """Extend trusted domains from config/allowlist.txt (optional)."""
        allowlist_path = self.config_dir / "allowlist.txt"
        if not allowlist_path.exists():
            return
        extra = [canonicalize_domain(item) or item for item in self._load_list_file(allowlist_path)]
        known = set(self.trusted_domains)
        self.trusted_domains.extend(sorted(d for d in extra if d not in known))

    @staticmethod
    def _load_list_file(path: Path) -> set[str]:
        """Load a list file, ignoring comments and empty lines."""
        items = set()
        with open(path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#"):
                    items.add(line.lower())
        return items

    @property
    def threshold(self) -> float:
        if self.phishing_threshold is not None:
            return float(self.phishing_threshold)
        if self.phishing_sensitivity is not None:
            return sensitivity_to_threshold(self.phishing_sensitivity)
        return DEFAULT_THRESHOLD

    def detector_config(self) -> DetectorConfig:
        """Immutable snapshot for :class:`PhishingURLDetector`."""
        return DetectorConfig(
            trusted_domains=tuple(self.trusted_domains),
            suspicious_keywords=tuple(self.suspicious_keywords),
            targeted_brands=tuple(self.targeted_brands),
            risk_tlds=tuple(self.risk_tlds),
            feature_weights=dict(self.feature_weights),
            threshold=self.threshold,
            suspicious_path_segments=tuple(self.suspicious_path_segments),
            suspicious_script_extensions=tuple(self.suspicious_script_extensions),
            brand_variations={k: list(v) for k, v in self.brand_variations.items()},
            brand_suffix_words=tuple(self.brand_suffix_words),
            brand_phishing_patterns=tuple(dict(p) for p in self.brand_phishing_patterns),
            suspicious_trigrams=tuple(self.suspicious_trigrams),
            safe_trigrams=tuple(self.safe_trigrams),
            search_engines=tuple(self.search_engines),
            homoglyphs={k: list(v) for k, v in self.homoglyphs.items()},
        )

    def pattern_registry(self) -> dict[str, PatternDefinition]:
        """Patterns keyed by id, in configured order."""
        return {p.id: p for p in self.patterns}

    def policy_for(self, policy_type: PolicyType) -> Optional[Policy]:
        """First enabled policy of ``policy_type`` (ignores domain mappings)."""
        for policy in self.policies:
            if policy.enabled and policy.policy_type == policy_type.value:
                return policy
        return None


def _coerce_str_list(raw) -> Optional[list[str]]:
    if not isinstance(raw, (list, tuple, set)):
        return None
    items = [str(item).strip() for item in raw if str(item).strip()]
    return items or None


def _coerce_weights(raw, default: dict[str, float]) -> dict[str, float]:
    """Merge numeric weight overrides over the defaults."""
    weights = dict(default)
    if not isinstance(raw, dict):
        return weights
    for name, value in raw.items():
        try:
            weights[str(name)] = float(value)
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric weight for %s: %r", name, value)
    return weights


def _coerce_variations(raw) -> Optional[dict[str, list[str]]]:
    if not isinstance(raw, dict):
        return None
    variations: dict[str, list[str]] = {}
    for brand, values in raw.items():
        items = _coerce_str_list(values)
        if items:
            variations[str(brand).lower()] = items
    return variations or None


def _coerce_brand_patterns(raw) -> Optional[list[dict]]:
    if not isinstance(raw, list):
        return None
    entries: list[dict] = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        brand = str(entry.get("brand") or "").strip().lower()
        patterns = _coerce_str_list(entry.get("patterns"))
        paths = _coerce_str_list(entry.get("paths"))
        if brand and patterns and paths:
            entries.append({"brand": brand, "patterns": patterns, "paths": paths})
    return entries or None


def _coerce_patterns(raw, default: list[PatternDefinition]) -> list[PatternDefinition]:
    """Merge pattern entries by id over the defaults; new ids are appended."""
    if not isinstance(raw, list):
        return list(default)
    merged = {p.id: p for p in default}
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        if not str(entry.get("pattern") or "").strip():
            logger.warning("Skipping pattern without a regex: %r", entry.get("id") or entry.get("name"))
            continue
        definition = PatternDefinition.from_dict(entry)
        if not definition.id:
            continue
        merged[definition.id] = definition
    return list(merged.values())


def _coerce_policies(raw, default: list[Policy]) -> list[Policy]:
    if not isinstance(raw, list):
        return list(default)
    policies = [Policy.from_dict(p) for p in raw if isinstance(p, dict)]
    return [p for p in policies if p.policy_id] or list(default)


def _coerce_mappings(raw, default: list[DomainMapping]) -> list[DomainMapping]:
    if not isinstance(raw, list):
        return list(default)
    mappings = [DomainMapping.from_dict(m) for m in raw if isinstance(m, dict)]
    return [m for m in mappings if m.domain_pattern] or list(default)


def _load_heuristics(config_dir: Path) -> dict:
    """Load heuristic overrides from config/heuristics.yaml (optional)."""
    path = Path(config_dir or ".") / "heuristics.yaml"
    if not path.exists():
        return {}

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Failed to parse heuristics.yaml: %s", exc)
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring heuristics.yaml: top level must be a mapping")
        return {}

    phishing_cfg = data.get("phishing") or {}
    files_cfg = data.get("files") or {}
    if not isinstance(phishing_cfg, dict):
        phishing_cfg = {}
    if not isinstance(files_cfg, dict):
        files_cfg = {}

    overrides: dict = {
        "version": str(data.get("version") or HEURISTICS_VERSION),
        "trusted_domains": _coerce_str_list(phishing_cfg.get("trusted_domains")),
        "suspicious_keywords": _coerce_str_list(phishing_cfg.get("suspicious_keywords")),
        "targeted_brands": _coerce_str_list(phishing_cfg.get("targeted_brands")),
        "risk_tlds": _coerce_str_list(phishing_cfg.get("risk_tlds")),
        "feature_weights": _coerce_weights(phishing_cfg.get("feature_weights"), DEFAULT_FEATURE_WEIGHTS),
        "suspicious_path_segments": _coerce_str_list(phishing_cfg.get("suspicious_path_segments")),
        "suspicious_script_extensions": _coerce_str_list(phishing_cfg.get("suspicious_script_extensions")),
        "brand_variations": _coerce_variations(phishing_cfg.get("brand_variations")),
        "brand_suffix_words": _coerce_str_list(phishing_cfg.get("brand_suffix_words")),
        "brand_phishing_patterns": _coerce_brand_patterns(phishing_cfg.get("brand_phishing_patterns")),
        "suspicious_trigrams": _coerce_str_list(phishing_cfg.get("suspicious_trigrams")),
        "safe_trigrams": _coerce_str_list(phishing_cfg.get("safe_trigrams")),
        "search_engines": _coerce_str_list(phishing_cfg.get("search_engines")),
        "homoglyphs": _coerce_variations(phishing_cfg.get("homoglyphs")),
        "blocked_extensions": _coerce_str_list(files_cfg.get("blocked_extensions")),
        "patterns": data.get("patterns"),
        "policies": data.get("policies"),
        "domain_mappings": data.get("domain_mappings"),
    }

    extra_trusted = _coerce_str_list(phishing_cfg.get("extra_trusted_domains"))
    if extra_trusted:
        base = overrides["trusted_domains"] or list(DEFAULT_TRUSTED_DOMAINS)
        overrides["trusted_domains"] = base + [d for d in extra_trusted if d not in base]

    for key in ("threshold", "sensitivity"):
        if phishing_cfg.get(key) is None:
            continue
        try:
            overrides[key] = float(phishing_cfg[key])
        except (TypeError, ValueError):
            logger.warning("Ignoring non-numeric phishing.%s: %r", key, phishing_cfg[key])

    logger.info("Loaded heuristics v%s from %s", overrides["version"], path)
    return overrides


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def load_config() -> Config:
    """Load configuration from environment variables and heuristics.yaml."""
    load_dotenv()

    config_dir = Path(os.getenv("CONFIG_DIR", "./config"))
    heuristics = _load_heuristics(config_dir)

    list_overrides = {
        key: heuristics[key]
        for key in (
            "trusted_domains",
            "suspicious_keywords",
            "targeted_brands",
            "risk_tlds",
            "suspicious_path_segments",
            "suspicious_script_extensions",
            "brand_variations",
            "brand_suffix_words",
            "brand_phishing_patterns",
            "suspicious_trigrams",
            "safe_trigrams",
            "search_engines",
            "homoglyphs",
        )
        if heuristics.get(key)
    }

    blocked_str = os.getenv("BLOCKED_EXTENSIONS", "")
    if blocked_str.strip():
        blocked_extensions = [e.strip() for e in blocked_str.split(",") if e.strip()]
    else:
        blocked_extensions = heuristics.get("blocked_extensions") or list(DEFAULT_BLOCKED_EXTENSIONS)

    sensitivity = _env_float("PHISHING_SENSITIVITY")
    if sensitivity is None:
        sensitivity = heuristics.get("sensitivity")
    threshold = _env_float("PHISHING_THRESHOLD")
    if threshold is None:
        threshold = heuristics.get("threshold")
    ttl = _env_float("WHITELIST_TTL_SECONDS")

    default_patterns = [PatternDefinition.from_dict(p) for p in DEFAULT_PATTERNS]

    config = Config(
        phishing_mode=os.getenv("PHISHING_MODE", "disabled").strip().lower() or "disabled",
        phishing_sensitivity=sensitivity,
        phishing_threshold=threshold,
        whitelist_ttl_seconds=ttl if ttl is not None else DEFAULT_WHITELIST_TTL_SECONDS,
        extension_base_url=os.getenv("EXTENSION_BASE_URL", DEFAULT_EXTENSION_BASE_URL),
        paste_mode=os.getenv("PASTE_MODE", "interactive").strip().lower() or "interactive",
        file_upload_mode=os.getenv("FILE_UPLOAD_MODE", "interactive").strip().lower() or "interactive",
        blocked_extensions=blocked_extensions,
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        config_dir=config_dir,
        heuristics_version=heuristics.get("version", HEURISTICS_VERSION),
        feature_weights=heuristics.get("feature_weights", dict(DEFAULT_FEATURE_WEIGHTS)),
        patterns=_coerce_patterns(heuristics.get("patterns"), default_patterns),
        policies=_coerce_policies(
            heuristics.get("policies"), [Policy.from_dict(p) for p in DEFAULT_POLICIES]
        ),
        domain_mappings=_coerce_mappings(
            heuristics.get("domain_mappings"), [DomainMapping.from_dict(m) for m in DEFAULT_DOMAIN_MAPPINGS]
        ),
        **list_overrides,
    )
    return config


def validate_config(config: Config) -> list[str]:
    """Validate configuration and return list of error messages."""
    errors: list[str] = []

    if config.phishing_mode not in VALID_PHISHING_MODES:
        errors.append(f"PHISHING_MODE must be one of {sorted(VALID_PHISHING_MODES)}, got {config.phishing_mode!r}")
    for name, value in (("PASTE_MODE", config.paste_mode), ("FILE_UPLOAD_MODE", config.file_upload_mode)):
        if value not in VALID_PASTE_MODES:
            errors.append(f"{name} must be one of {sorted(VALID_PASTE_MODES)}, got {value!r}")

    if config.phishing_threshold is not None and not 0 <= config.phishing_threshold <= 1:
        errors.append(f"PHISHING_THRESHOLD must be between 0 and 1, got {config.phishing_threshold}")
    if config.phishing_sensitivity is not None and not 0 <= config.phishing_sensitivity <= 100:
        errors.append(f"PHISHING_SENSITIVITY must be between 0 and 100, got {config.phishing_sensitivity}")
    if config.whitelist_ttl_seconds < 0:
        errors.append("WHITELIST_TTL_SECONDS must not be negative")

    unknown = sorted(set(config.feature_weights) - KNOWN_FEATURES)
    if unknown:
        errors.append(f"Weights for unknown features: {', '.join(unknown)}")

    for error in validate_patterns(config.patterns):
        errors.append(f"Pattern {error.pattern_name!r} does not compile: {error.message}")

    valid_types = {t.value for t in PolicyType}
    for policy in config.policies:
        if policy.policy_type not in valid_types:
            errors.append(f"Policy {policy.policy_id!r} has unknown type {policy.policy_type!r}")

    if not config.patterns:
        logger.info("No PII patterns configured; paste protection will allow everything")

    return errors

"""Tests for configuration loading and validation."""

import logging
import textwrap

import pytest

from optimuspii.config import Config, load_config, validate_config
from optimuspii.constants import PolicyType
from optimuspii.exceptions import ConfigurationError
from optimuspii.heuristics import DEFAULT_FEATURE_WEIGHTS, DEFAULT_PATTERNS, HEURISTICS_VERSION
from optimuspii.patterns import PatternDefinition


def write_heuristics(config_dir, body):
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "heuristics.yaml").write_text(textwrap.dedent(body))


class TestLoadConfig:
    """Environment handling."""

    def test_defaults(self, clean_env):
        config = load_config()
        assert config.phishing_mode == "disabled"
        assert config.paste_mode == "interactive"
        assert config.threshold == 0.6
        assert config.whitelist_ttl_seconds == 30
        assert config.heuristics_version == HEURISTICS_VERSION
        assert [p.id for p in config.patterns] == [p["id"] for p in DEFAULT_PATTERNS]
        assert validate_config(config) == []

    def test_env_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("PHISHING_MODE", " Block ")
        monkeypatch.setenv("PHISHING_SENSITIVITY", "60")
        monkeypatch.setenv("BLOCKED_EXTENSIONS", ".env, .pem,,")
        monkeypatch.setenv("WHITELIST_TTL_SECONDS", "5")
        config = load_config()
        assert config.phishing_mode == "block"
        assert config.threshold == pytest.approx(0.46)
        assert config.blocked_extensions == [".env", ".pem"]
        assert config.whitelist_ttl_seconds == 5.0
        assert config.detector_config().threshold == pytest.approx(0.46)

    def test_threshold_wins_over_sensitivity(self, clean_env, monkeypatch):
        monkeypatch.setenv("PHISHING_SENSITIVITY", "100")
        monkeypatch.setenv("PHISHING_THRESHOLD", "0.75")
        assert load_config().threshold == 0.75

    def test_non_numeric_value_raises(self, clean_env, monkeypatch):
        monkeypatch.setenv("PHISHING_THRESHOLD", "high")
        with pytest.raises(ConfigurationError, match="PHISHING_THRESHOLD"):
            load_config()


class TestHeuristicsFile:
    """Overrides from config/heuristics.yaml."""

    def test_overrides(self, clean_env, monkeypatch):
        config_dir = clean_env / "config"
        write_heuristics(
            config_dir,
            """
            version: "9.9"
            phishing:
              targeted_brands: [acmebank]
              extra_trusted_domains: [intranet.example]
              feature_weights:
                brandSimilarity: 0.5
                urlLength: nope
              threshold: 0.8
            files:
              blocked_extensions: [.pem]
            patterns:
              - id: email-address
                name: Work Email
                pattern: '[a-z]+@corp\\.example'
              - id: employee-id
                name: Employee ID
                pattern: 'EMP-\\d{6}'
                sampleData: EMP-000000
            """,
        )
        monkeypatch.setenv("CONFIG_DIR", str(config_dir))
        config = load_config()

        assert config.heuristics_version == "9.9"
        assert config.targeted_brands == ["acmebank"]
        assert "intranet.example" in config.trusted_domains
        assert "google.com" in config.trusted_domains
        assert config.feature_weights["brandSimilarity"] == 0.5
        assert config.feature_weights["urlLength"] == DEFAULT_FEATURE_WEIGHTS["urlLength"]
        assert config.threshold == 0.8
        assert config.blocked_extensions == [".pem"]

        registry = config.pattern_registry()
        assert registry["email-address"].name == "Work Email"
        assert list(registry)[-1] == "employee-id"
        assert registry["employee-id"].sample_data == "EMP-000000"

    def test_malformed_yaml_falls_back_to_defaults(self, clean_env, monkeypatch, caplog):
        config_dir = clean_env / "config"
        write_heuristics(config_dir, "phishing: [unclosed\n")
        monkeypatch.setenv("CONFIG_DIR", str(config_dir))
        with caplog.at_level(logging.WARNING):
            config = load_config()
        assert "Failed to parse heuristics.yaml" in caplog.text
        assert config.heuristics_version == HEURISTICS_VERSION

    def test_allowlist_is_canonicalized(self, clean_env):
        config_dir = clean_env / "config"
        config_dir.mkdir()
        (config_dir / "allowlist.txt").write_text("# corp\nhttps://WWW.Corp.Example/login\n\ngoogle.com\n")
        config = Config(config_dir=config_dir)
        assert "corp.example" in config.trusted_domains
        assert config.trusted_domains.count("google.com") == 1


class TestValidateConfig:
    def test_bad_modes_and_ranges(self):
        config = Config(
            phishing_mode="paranoid",
            paste_mode="shout",
            phishing_threshold=1.5,
            phishing_sensitivity=-1,
            whitelist_ttl_seconds=-5,
        )
        errors = validate_config(config)
        assert any(e.startswith("PHISHING_MODE must be one of") for e in errors)
        assert any(e.startswith("PASTE_MODE must be one of") for e in errors)
        assert "PHISHING_THRESHOLD must be between 0 and 1, got 1.5" in errors
        assert "PHISHING_SENSITIVITY must be between 0 and 100, got -1" in errors
        assert "WHITELIST_TTL_SECONDS must not be negative" in errors

    def test_unknown_weights(self):
        config = Config(feature_weights={**DEFAULT_FEATURE_WEIGHTS, "pageRank": 1.0})
        assert "Weights for unknown features: pageRank" in validate_config(config)

    def test_broken_pattern(self):
        config = Config(patterns=[PatternDefinition(id="broken", name="Broken", pattern="([a-z")])
        errors = validate_config(config)
        assert len(errors) == 1
        assert errors[0].startswith("Pattern 'Broken' does not compile:")

    def test_policy_lookup(self):
        config = Config()
        assert config.policy_for(PolicyType.PASTE_PROTECTION).policy_id == "default-paste-policy"
        assert config.policy_for(PolicyType.FILE_DOWNLOAD_PROTECTION) is None

"""Tests for paste, file upload and domain policies."""

import pytest

from optimuspii.constants import PasteMode, PolicyAction, PolicyType
from optimuspii.heuristics import DEFAULT_DOMAIN_MAPPINGS, DEFAULT_POLICIES
from optimuspii.metrics import metrics
from optimuspii.policy import (
    DomainMapping,
    Policy,
    evaluate_file_upload,
    evaluate_paste,
    find_blocked_files,
    is_blocked,
    is_monitored,
    resolve_active_policies,
    select_patterns,
    url_matches_pattern,
)

PASTE = "Contact a@b.com"


class TestEvaluatePaste:
    """Per-mode paste decisions."""

    def test_interactive_prompts(self, email_pattern):
        decision = evaluate_paste(PASTE, [email_pattern], PasteMode.INTERACTIVE)
        assert decision.action == PolicyAction.PROMPT
        assert decision.prevent_default
        assert decision.samples == {"Email Address": "example@redacted.com"}
        assert decision.detection.matches_by_pattern == {"Email Address": ["a@b.com"]}

    def test_block_and_alert(self, email_pattern):
        decision = evaluate_paste(PASTE, [email_pattern], "block-and-alert")
        assert decision.action == PolicyAction.BLOCK
        assert decision.prevent_default
        assert decision.notification == "Paste blocked: Sensitive information detected"

    def test_redact_and_paste_uses_samples(self, email_pattern):
        decision = evaluate_paste(PASTE, [email_pattern], PasteMode.REDACT_AND_PASTE)
        assert decision.action == PolicyAction.REDACT
        assert decision.prevent_default
        assert decision.redacted_text == "Contact example@redacted.com"

    def test_warn_only_allows_with_notification(self, email_pattern):
        decision = evaluate_paste(PASTE, [email_pattern], PasteMode.WARN_ONLY, policy_name="Chat")
        assert decision.action == PolicyAction.WARN
        assert decision.allowed
        assert decision.notification == "Warning: Sensitive information detected in paste (Policy: Chat)"

    @pytest.mark.parametrize("mode", [PasteMode.ALERT_ONLY, PasteMode.SILENT_BLOCK])
    def test_modes_without_paste_behavior_allow(self, email_pattern, mode):
        decision = evaluate_paste(PASTE, [email_pattern], mode)
        assert decision.action == PolicyAction.ALLOW
        assert decision.allowed

    def test_always_allowed(self, email_pattern):
        assert evaluate_paste("", [email_pattern], PasteMode.BLOCK_AND_ALERT).allowed
        assert evaluate_paste(PASTE, [email_pattern], PasteMode.DISABLED).allowed
        assert evaluate_paste("no pii here", [email_pattern], PasteMode.BLOCK_AND_ALERT).allowed
        assert evaluate_paste(PASTE, [], PasteMode.BLOCK_AND_ALERT).allowed

    def test_metrics_recorded(self, email_pattern):
        evaluate_paste("a@b.com c@d.com", [email_pattern], PasteMode.BLOCK_AND_ALERT)
        summary = metrics.get_summary()
        assert summary["patterns"]["Email Address"]["hits"] == 2
        assert summary["paste_actions"] == {"block": 1}


class TestSelectPatterns:
    def test_policy_order_and_unknown_ids(self, patterns_by_id):
        selected = select_patterns(patterns_by_id, ["social-security-number", "missing", "email-address"])
        assert [p.name for p in selected] == ["Social Security Number", "Email Address"]

    def test_lookup_by_name(self, default_patterns):
        selected = select_patterns(default_patterns, ["Email Address", "email-address"])
        assert [p.id for p in selected] == ["email-address"]


class TestFileChecks:
    def test_is_blocked(self):
        assert is_blocked("script.PY", [".py"])
        assert is_blocked("script.py", ["py"])
        assert not is_blocked("README", [".py"])
        assert not is_blocked("archive.tar.gz", [".tar"])

    def test_find_blocked_files(self):
        assert find_blocked_files(["a.py", "b.txt"], [".py"]) == ["a.py (.py)"]

    def test_empty_blocklist_uses_fallback(self):
        assert find_blocked_files(["config.yaml", "notes.txt"], []) == ["config.yaml (.yaml)"]


class TestEvaluateFileUpload:
    """Per-mode file selection decisions."""

    FILES = ["main.py", "notes.txt"]

    def test_interactive(self):
        decision = evaluate_file_upload(self.FILES, PasteMode.INTERACTIVE, [".py"])
        assert decision.action == PolicyAction.PROMPT
        assert decision.blocked_files == ["main.py (.py)"]

    def test_block_and_alert(self):
        decision = evaluate_file_upload(self.FILES, "block-and-alert", [".py"], policy_name="Uploads")
        assert decision.action == PolicyAction.BLOCK
        assert decision.clear_selection
        assert decision.notification == "File upload blocked: Sensitive file types detected (Policy: Uploads)"
        assert metrics.get_summary()["file_blocks"] == {".py": 1}

    def test_alert_only_lets_upload_continue(self):
        decision = evaluate_file_upload(self.FILES, PasteMode.ALERT_ONLY, [".py"], policy_name="Uploads")
        assert decision.allowed
        assert decision.notification == "Warning: Uploading sensitive file types: main.py (.py) (Policy: Uploads)"

    def test_silent_block(self):
        decision = evaluate_file_upload(self.FILES, PasteMode.SILENT_BLOCK, [".py"])
        assert decision.action == PolicyAction.BLOCK
        assert decision.notification is None

    def test_warn_only(self):
        decision = evaluate_file_upload(self.FILES, PasteMode.WARN_ONLY, [".py"])
        assert decision.action == PolicyAction.WARN
        assert not decision.allowed

    def test_nothing_blocked_or_disabled(self):
        assert evaluate_file_upload(["notes.txt"], PasteMode.BLOCK_AND_ALERT, [".py"]).allowed
        assert evaluate_file_upload(self.FILES, PasteMode.DISABLED, [".py"]).allowed


class TestDomainPolicies:
    """Policy activation through domain mappings."""

    def test_url_matches_pattern(self):
        assert url_matches_pattern("https://chatgpt.com/c/123", "*://chatgpt.com/*")
        assert not url_matches_pattern("https://chatgptXcom/c/123", "*://chatgpt.com/*")
        assert not url_matches_pattern("https://chatgpt.com", "*://chatgpt.com/*")
        assert url_matches_pattern("https://a.b/?(x)", "https://a.b/?(x)")
        assert not url_matches_pattern("", "*")

    def test_default_mappings(self):
        active = resolve_active_policies("https://claude.ai/chat/1", DEFAULT_DOMAIN_MAPPINGS, DEFAULT_POLICIES)
        assert active[PolicyType.PASTE_PROTECTION.value].policy_id == "default-paste-policy"
        assert active[PolicyType.FILE_UPLOAD_PROTECTION.value].mode == PasteMode.INTERACTIVE
        assert active[PolicyType.FILE_DOWNLOAD_PROTECTION.value] is None

    def test_unmapped_url(self):
        active = resolve_active_policies("https://example.com/", DEFAULT_DOMAIN_MAPPINGS, DEFAULT_POLICIES)
        assert all(policy is None for policy in active.values())
        assert not is_monitored("https://example.com/", DEFAULT_DOMAIN_MAPPINGS)
        assert is_monitored("https://chat.mistral.ai/chat", DEFAULT_DOMAIN_MAPPINGS)

    def test_later_mapping_wins_and_disabled_is_skipped(self):
        policies = [
            Policy("strict", policy_type="pasteProtection", mode=PasteMode.BLOCK_AND_ALERT),
            Policy("lenient", policy_type="pasteProtection", mode=PasteMode.WARN_ONLY),
            Policy("off", policy_type="pasteProtection", enabled=False),
        ]
        mappings = [
            DomainMapping("*://chatgpt.com/*", ["strict"]),
            DomainMapping("https://chatgpt.com/*", ["lenient", "off"]),
        ]
        active = resolve_active_policies("https://chatgpt.com/c/1", mappings, policies)
        assert active["pasteProtection"].policy_id == "lenient"

    def test_policy_round_trip(self):
        stored = DEFAULT_POLICIES[0]
        assert Policy.from_dict(stored).to_dict() == stored

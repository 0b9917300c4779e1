"""Policies and the domain mappings that activate them."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, Mapping, Optional, Union

from ..constants import PasteMode, PolicyType

logger = logging.getLogger(__name__)


@dataclass
class Policy:
    """A paste or file protection policy as stored in settings."""

    policy_id: str
    policy_name: str = ""
    policy_type: str = PolicyType.PASTE_PROTECTION.value
    enabled: bool = True
    mode: PasteMode = PasteMode.DISABLED
    enabled_patterns: list[str] = field(default_factory=list)
    blocked_extensions: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Policy":
        config = data.get("policyConfig") or data.get("policy_config") or {}
        policy_id = str(data.get("policyId") or data.get("policy_id") or "")
        return cls(
            policy_id=policy_id,
            policy_name=str(data.get("policyName") or data.get("policy_name") or policy_id),
            policy_type=str(data.get("policyType") or data.get("policy_type") or PolicyType.PASTE_PROTECTION.value),
            enabled=bool(data.get("enabled", True)),
            mode=PasteMode.from_string(config.get("mode")),
            enabled_patterns=[str(p) for p in config.get("enabledPatterns") or config.get("enabled_patterns") or []],
            blocked_extensions=[
                str(e) for e in config.get("blockedExtensions") or config.get("blocked_extensions") or []
            ],
        )

    def to_dict(self) -> dict:
        config: dict = {"mode": self.mode.value}
        if self.policy_type == PolicyType.PASTE_PROTECTION.value:
            config["enabledPatterns"] = list(self.enabled_patterns)
        else:
            config["blockedExtensions"] = list(self.blocked_extensions)
        return {
            "policyId": self.policy_id,
            "policyName": self.policy_name,
            "policyType": self.policy_type,
            "enabled": self.enabled,
            "policyConfig": config,
        }


@dataclass
class DomainMapping:
    """Glob-style URL pattern and the policy ids applied on matching pages."""

    domain_pattern: str
    applied_policies: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "DomainMapping":
        return cls(
            domain_pattern=str(data.get("domainPattern") or data.get("domain_pattern") or ""),
            applied_policies=[str(p) for p in data.get("appliedPolicies") or data.get("applied_policies") or []],
        )


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern:
    return re.compile(".*".join(re.escape(part) for part in pattern.split("*")))


def url_matches_pattern(url: str, pattern: str) -> bool:
    """Full match of ``url`` against ``pattern`` where ``*`` matches anything."""
    if not url or not pattern:
        return False
    return _glob_regex(pattern).fullmatch(url) is not None


def resolve_active_policies(
    url: str,
    mappings: Iterable[Union[DomainMapping, dict]],
    policies: Union[Mapping[str, Union[Policy, dict]], Iterable[Union[Policy, dict]]],
) -> dict[str, Optional[Policy]]:
    """Enabled policy per policy type for the page at ``url``.

    Every policy type is present in the result (``None`` when nothing
    applies). When several applied policies share a type, the last one wins.
    """
    active: dict[str, Optional[Policy]] = {t.value: None for t in PolicyType}

    if isinstance(policies, Mapping):
        candidates = policies.values()
    else:
        candidates = policies
    by_id: dict[str, Policy] = {}
    for item in candidates:
        policy = item if isinstance(item, Policy) else Policy.from_dict(item)
        by_id[policy.policy_id] = policy

    for item in mappings:
        mapping = item if isinstance(item, DomainMapping) else DomainMapping.from_dict(item)
        if not url_matches_pattern(url, mapping.domain_pattern):
            continue
        for policy_id in mapping.applied_policies:
            policy = by_id.get(policy_id)
            if policy is None:
                logger.debug("Mapping %s references unknown policy %s", mapping.domain_pattern, policy_id)
                continue
            if policy.enabled:
                active[policy.policy_type] = policy

    return active


def is_monitored(url: str, mappings: Iterable[Union[DomainMapping, dict]]) -> bool:
    """True when any mapping covers ``url``."""
    for item in mappings:
        mapping = item if isinstance(item, DomainMapping) else DomainMapping.from_dict(item)
        if url_matches_pattern(url, mapping.domain_pattern):
            return True
    return False

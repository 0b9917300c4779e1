"""Paste protection decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence, Union

from ..constants import PasteMode, PolicyAction
from ..metrics import metrics
from ..patterns import DetectionResult, PatternDefinition, detect, redact, sample_values

logger = logging.getLogger(__name__)

BLOCKED_NOTIFICATION = "Paste blocked: Sensitive information detected"
REDACTED_NOTIFICATION = "Sensitive information redacted from paste"


@dataclass
class PasteDecision:
    """What to do with one paste event."""

    action: PolicyAction = PolicyAction.ALLOW
    prevent_default: bool = False
    redacted_text: Optional[str] = None
    samples: dict[str, str] = field(default_factory=dict)
    notification: Optional[str] = None
    detection: Optional[DetectionResult] = field(default=None, repr=False)

    @property
    def allowed(self) -> bool:
        return not self.prevent_default


def select_patterns(
    registry: Union[Mapping[str, PatternDefinition], Sequence[PatternDefinition]],
    enabled_ids: Iterable[str],
) -> list[PatternDefinition]:
    """Patterns a policy enables, in the policy's order. Unknown ids are skipped."""
    if isinstance(registry, Mapping):
        by_key = dict(registry)
        items = list(registry.values())
    else:
        by_key = {}
        items = list(registry)
    for definition in items:
        by_key.setdefault(definition.id, definition)
        by_key.setdefault(definition.name, definition)

    selected: list[PatternDefinition] = []
    seen: set[str] = set()
    for key in enabled_ids:
        definition = by_key.get(key)
        if definition is None:
            logger.debug("Policy references unknown pattern %s", key)
            continue
        if definition.name in seen:
            continue
        seen.add(definition.name)
        selected.append(definition)
    return selected


def evaluate_paste(
    text: str,
    patterns: Sequence[PatternDefinition],
    mode: Union[PasteMode, str],
    policy_name: str = "",
) -> PasteDecision:
    """Decide how a paste of ``text`` is handled under ``mode``.

    Empty text, disabled mode and text without matches are always allowed.
    """
    if isinstance(mode, str):
        mode = PasteMode.from_string(mode)
    if not text or mode == PasteMode.DISABLED:
        return PasteDecision()

    result = detect(text, patterns)
    if not result.has_matches:
        return PasteDecision(detection=result)

    for name, found in result.matches_by_pattern.items():
        metrics.record_pattern_hit(name, len(found))

    samples = sample_values(patterns, result.matches_by_pattern)
    decision = PasteDecision(samples=samples, detection=result)

    if mode == PasteMode.INTERACTIVE:
        decision.action = PolicyAction.PROMPT
        decision.prevent_default = True
    elif mode == PasteMode.BLOCK_AND_ALERT:
        decision.action = PolicyAction.BLOCK
        decision.prevent_default = True
        decision.notification = BLOCKED_NOTIFICATION
    elif mode == PasteMode.REDACT_AND_PASTE:
        decision.action = PolicyAction.REDACT
        decision.prevent_default = True
        decision.redacted_text = redact(text, result.matches_by_pattern, samples)
        decision.notification = REDACTED_NOTIFICATION
    elif mode == PasteMode.WARN_ONLY:
        decision.action = PolicyAction.WARN
        decision.notification = (
            f"Warning: Sensitive information detected in paste (Policy: {policy_name})"
        )
    # Remaining modes have no paste-specific behavior and let the paste through.

    metrics.record_paste_action(decision.action.value)
    logger.info(
        "Paste with %s sensitive matches: %s (mode %s)",
        result.match_count(),
        decision.action.value,
        mode.value,
    )
    return decision

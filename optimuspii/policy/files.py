"""File upload protection decisions."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

from ..constants import PasteMode, PolicyAction
from ..heuristics import FALLBACK_BLOCKED_EXTENSIONS
from ..metrics import metrics

logger = logging.getLogger(__name__)


def file_extension(filename: str) -> str:
    """Lowercased extension with its dot, or "" when the name has no dot."""
    index = (filename or "").rfind(".")
    if index == -1:
        return ""
    return filename[index:].lower()


def _normalize_extensions(extensions: Iterable[str]) -> set[str]:
    normalized = set()
    for ext in extensions:
        ext = (ext or "").strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


def is_blocked(filename: str, blocked_extensions: Iterable[str]) -> bool:
    """Case-insensitive check of the text after the last dot."""
    ext = file_extension(filename)
    return bool(ext) and ext in _normalize_extensions(blocked_extensions)


def find_blocked_files(filenames: Iterable[str], blocked_extensions: Optional[Iterable[str]] = None) -> list[str]:
    """Describe every blocked file as ``"name (.ext)"``.

    An empty blocklist falls back to the built-in list of source and config
    file types.
    """
    blocked = list(blocked_extensions or [])
    extensions = _normalize_extensions(blocked or FALLBACK_BLOCKED_EXTENSIONS)
    found = []
    for name in filenames:
        ext = file_extension(name)
        if ext and ext in extensions:
            found.append(f"{name} ({ext})")
    return found


@dataclass
class FileUploadDecision:
    """What to do with one file selection."""

    action: PolicyAction = PolicyAction.ALLOW
    prevent_default: bool = False
    clear_selection: bool = False
    blocked_files: list[str] = field(default_factory=list)
    notification: Optional[str] = None

    @property
    def allowed(self) -> bool:
        return not self.prevent_default


def evaluate_file_upload(
    filenames: Iterable[str],
    mode: Union[PasteMode, str],
    blocked_extensions: Optional[Iterable[str]] = None,
    policy_name: str = "",
) -> FileUploadDecision:
    """Decide how a file selection is handled under ``mode``."""
    if isinstance(mode, str):
        mode = PasteMode.from_string(mode)
    if mode == PasteMode.DISABLED:
        return FileUploadDecision()

    blocked = find_blocked_files(list(filenames), blocked_extensions)
    if not blocked:
        return FileUploadDecision()

    decision = FileUploadDecision(blocked_files=blocked)
    if mode == PasteMode.INTERACTIVE:
        decision.action = PolicyAction.PROMPT
        decision.prevent_default = True
    elif mode == PasteMode.BLOCK_AND_ALERT:
        decision.action = PolicyAction.BLOCK
        decision.prevent_default = True
        decision.clear_selection = True
        decision.notification = (
            f"File upload blocked: Sensitive file types detected (Policy: {policy_name})"
        )
    elif mode == PasteMode.ALERT_ONLY:
        decision.action = PolicyAction.WARN
        decision.notification = (
            f"Warning: Uploading sensitive file types: {', '.join(blocked)} (Policy: {policy_name})"
        )
    elif mode == PasteMode.SILENT_BLOCK:
        decision.action = PolicyAction.BLOCK
        decision.prevent_default = True
        decision.clear_selection = True
    elif mode == PasteMode.WARN_ONLY:
        decision.action = PolicyAction.WARN
        decision.prevent_default = True
        decision.notification = (
            f"Warning: Potentially sensitive file types detected (Policy: {policy_name})"
        )
    else:
        return decision

    if decision.action == PolicyAction.BLOCK:
        for description in blocked:
            metrics.record_file_block(description[description.rfind("(") + 1:-1])
    logger.info("File selection with %s blocked types: %s (mode %s)", len(blocked), decision.action.value, mode.value)
    return decision

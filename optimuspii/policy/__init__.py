"""Paste and file-upload policy decisions."""

from .domains import DomainMapping, Policy, is_monitored, resolve_active_policies, url_matches_pattern
from .files import FileUploadDecision, evaluate_file_upload, file_extension, find_blocked_files, is_blocked
from .paste import PasteDecision, evaluate_paste, select_patterns

__all__ = [
    "DomainMapping",
    "Policy",
    "is_monitored",
    "resolve_active_policies",
    "url_matches_pattern",
    "FileUploadDecision",
    "evaluate_file_upload",
    "file_extension",
    "find_blocked_files",
    "is_blocked",
    "PasteDecision",
    "evaluate_paste",
    "select_patterns",
]

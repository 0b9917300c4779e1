"""Centralized constants for OptimusPII.

Mode and action enums shared by the engines, the policy layer and the CLI.
Values are the strings stored in the extension settings, so they can be
compared against raw configuration without conversion.
"""

from __future__ import annotations

from enum import Enum


class PhishingMode(str, Enum):
    """How the navigation guard reacts to a phishing verdict."""

    DISABLED = "disabled"
    WARN = "warn"
    BLOCK = "block"

    @classmethod
    def from_string(cls, value: str | None) -> "PhishingMode":
        """Convert a stored mode string, defaulting to DISABLED."""
        if not value:
            return cls.DISABLED
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.DISABLED


class NavigationAction(str, Enum):
    """Outcome of a navigation check."""

    NONE = "none"  # Analysis skipped or not actionable
    ALLOW = "allow"
    WARN = "warn"  # Notify, keep navigating
    BLOCK = "block"  # Redirect to the warning page


class PasteMode(str, Enum):
    """Policy modes for paste and file-upload protection."""

    INTERACTIVE = "interactive"
    BLOCK_AND_ALERT = "block-and-alert"
    ALERT_ONLY = "alert-only"
    SILENT_BLOCK = "silent-block"
    REDACT_AND_PASTE = "redact-and-paste"
    WARN_ONLY = "warn-only"
    DISABLED = "disabled"

    @classmethod
    def from_string(cls, value: str | None) -> "PasteMode":
        """Convert a stored mode string, defaulting to DISABLED."""
        if not value:
            return cls.DISABLED
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.DISABLED


class PolicyAction(str, Enum):
    """What the glue should do with a paste or file selection."""

    ALLOW = "allow"
    PROMPT = "prompt"  # Show the interactive review popup
    BLOCK = "block"
    REDACT = "redact"  # Insert redacted text instead
    WARN = "warn"  # Allow, but notify


class PolicyType(str, Enum):
    PASTE_PROTECTION = "pasteProtection"
    FILE_UPLOAD_PROTECTION = "fileUploadProtection"
    FILE_DOWNLOAD_PROTECTION = "fileDownloadProtection"


INTERNAL_URL_PREFIXES: tuple[str, ...] = (
    "chrome:",
    "about:",
    "chrome-extension:",
    "moz-extension:",
)

WARNING_PAGE = "warning.html"
DEFAULT_EXTENSION_BASE_URL = "chrome-extension://optimuspii/"
DEFAULT_WHITELIST_TTL_SECONDS = 30
DEFAULT_SAMPLE_VALUE = "REDACTED"

ALLOW_PHISHING_URL_ACTION = "allowPhishingUrl"

VALID_PHISHING_MODES = {m.value for m in PhishingMode}
VALID_PASTE_MODES = {m.value for m in PasteMode}

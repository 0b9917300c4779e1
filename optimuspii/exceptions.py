"""Exception types shared across OptimusPII."""

from __future__ import annotations


class OptimusPIIError(Exception):
    """Base exception for OptimusPII errors."""


class PatternCompileError(OptimusPIIError):
    """Raised when a pattern source cannot be compiled."""

    def __init__(self, source: str, message: str, name: str = ""):
        self.source = source
        self.name = name
        self.message = message
        label = f"'{name}' " if name else ""
        super().__init__(f"Invalid pattern {label}{source!r}: {message}")


class InvalidURLError(OptimusPIIError):
    """Raised when a URL cannot be split into scheme, host and path."""

    def __init__(self, url: str, message: str = "Invalid URL format"):
        self.url = url
        self.message = message
        super().__init__(message)


URLParseError = InvalidURLError


class ConfigurationError(OptimusPIIError):
    """Raised for configuration values that cannot be used at all."""

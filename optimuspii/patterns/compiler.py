"""Compile stored pattern sources into Python regular expressions.

Pattern sources are written for the browser's regex dialect and may be
stored either bare (``\\d{4}``) or in literal form (``/\\d{4}/i``). Literal
flags are honored where Python has an equivalent; matching is always
global, so ``g`` is implied. Character classes use ASCII semantics to match
what the patterns were written against.
"""

from __future__ import annotations

import logging
import re
from functools import lru_cache

from ..exceptions import PatternCompileError

logger = logging.getLogger(__name__)

_DELIMITED = re.compile(r"^/(.*)/([gimsuy]*)$", re.DOTALL)
_NAMED_GROUP = re.compile(r"\(\?<(?![=!])([A-Za-z_][A-Za-z0-9_]*)>")
_NAMED_BACKREF = re.compile(r"\\k<([A-Za-z_][A-Za-z0-9_]*)>")

FLAG_MAP = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "g": 0,
    "u": 0,
    "y": 0,
}


def split_delimiters(source: str) -> tuple[str, str]:
    """Return ``(body, flags)`` for ``/body/flags`` sources, else ``(source, "")``."""
    match = _DELIMITED.match(source)
    if match:
        return match.group(1), match.group(2)
    return source, ""


def translate_syntax(body: str) -> str:
    """Rewrite named groups and named backreferences to Python syntax."""
    body = _NAMED_GROUP.sub(r"(?P<\1>", body)
    return _NAMED_BACKREF.sub(r"(?P=\1)", body)


@lru_cache(maxsize=256)
def compile_pattern(source: str) -> re.Pattern:
    """Compile a stored pattern source.

    Raises:
        PatternCompileError: if the source is empty or not a valid expression.
    """
    if not source:
        raise PatternCompileError(source, "empty pattern")

    body, flag_letters = split_delimiters(source)
    flags = re.ASCII
    for letter in flag_letters:
        flags |= FLAG_MAP.get(letter, 0)

    try:
        return re.compile(translate_syntax(body), flags)
    except re.error as exc:
        raise PatternCompileError(source, str(exc)) from exc


def is_valid_pattern(source: str) -> bool:
    try:
        compile_pattern(source)
    except PatternCompileError:
        return False
    return True

"""Hostname normalization utilities."""

from __future__ import annotations

import logging
from typing import Iterable
from urllib.parse import urlsplit

import idna
import tldextract

logger = logging.getLogger(__name__)

# Bundled public suffix snapshot only; analysis never touches the network.
_extract = tldextract.TLDExtract(suffix_list_urls=())


def canonicalize_domain(value: str) -> str:
    """
    Normalize a domain/URL to a bare host key.

    - Lowercase
    - Strip leading "www."
    - Drop port, path, query and fragment
    """
    raw = (value or "").strip()
    if not raw:
        return ""

    candidate = raw if "://" in raw else f"https://{raw}"
    try:
        host = urlsplit(candidate).hostname or ""
    except ValueError:
        host = raw.split("/")[0]
    host = host.strip().lower().strip(".")
    if not host:
        return ""

    if host.startswith("www.") and len(host) > 4:
        host = host[4:]
    return host


def decode_hostname(host: str) -> str:
    """Decode punycode (``xn--``) labels to Unicode, best-effort."""
    if not host or "xn--" not in host:
        return host
    try:
        decoded = idna.decode(host)
    except (idna.IDNAError, UnicodeError) as exc:
        logger.debug("Could not decode IDN host %s: %s", host, exc)
        return host
    return decoded.lower() if decoded else host


def registrable_label(host: str) -> str:
    """Return the label left of the public suffix (``paypal`` for ``www.paypal.co.uk``).

    Falls back to the second-to-last label, or the whole host for single-label hosts.
    """
    if not host:
        return ""
    extracted = _extract(host)
    if extracted.domain and extracted.suffix:
        return extracted.domain.lower()
    labels = host.split(".")
    if len(labels) >= 2:
        return labels[-2].lower()
    return host.lower()


def host_matches(host: str, domains: Iterable[str]) -> bool:
    """True if ``host`` equals a listed domain or is a subdomain of one."""
    if not host:
        return False
    host = host.lower().strip(".")
    for domain in domains:
        domain = (domain or "").lower().strip(".")
        if not domain:
            continue
        if host == domain or host.endswith(f".{domain}"):
            return True
    return False

"""URL parsing and feature extraction."""

from __future__ import annotations

import logging
import re
from urllib.parse import urlsplit

from ..exceptions import InvalidURLError
from ..utils.domains import decode_hostname, host_matches, registrable_label
from .brands import brand_similarity
from .models import DetectorConfig, ParsedURL, URLFeatures
from .text import (
    WordSegmenter,
    consecutive_special_chars,
    shannon_entropy,
    trigram_suspicion,
)

logger = logging.getLogger(__name__)

IPV4_HOST = re.compile(r"^\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}$", re.ASCII)
SPECIAL_CHAR = re.compile(r"[^a-zA-Z0-9.:/]")
DIGIT = re.compile(r"[0-9]")
NON_ASCII = re.compile(r"[^\x00-\x7F]")
HEX_ESCAPE = re.compile(r"%[0-9a-f]{2}", re.IGNORECASE)
QUERY_PARAM = re.compile(r"[?&][^?&]+")
USER_DIRECTORY = re.compile(r"/~[^/]+")
TOKEN_SEPARATORS = re.compile(r"[/\-_.?=#&]")
SCHEME_PREFIX = re.compile(r"https?://", re.IGNORECASE)


def parse_url(url: str) -> ParsedURL:
    """Split a URL into the parts the scorer needs.

    Raises:
        InvalidURLError: missing scheme or host, or a malformed authority.
    """
    if not url or not isinstance(url, str):
        raise InvalidURLError(str(url))
    try:
        parts = urlsplit(url.strip())
        hostname = parts.hostname or ""
        parts.port  # noqa: B018 - raises ValueError for a malformed port
    except ValueError as exc:
        raise InvalidURLError(url, f"Invalid URL format: {exc}") from exc

    if not parts.scheme or not hostname:
        raise InvalidURLError(url)

    return ParsedURL(
        url=url,
        scheme=parts.scheme.lower(),
        hostname=decode_hostname(hostname),
        path=parts.path or "/",
        query=f"?{parts.query}" if parts.query else "",
    )


def is_ip_host(hostname: str) -> bool:
    return bool(IPV4_HOST.match(hostname or ""))


def is_domain_trusted(hostname: str, config: DetectorConfig) -> bool:
    """Exact match or subdomain of a trusted domain."""
    return host_matches(hostname, config.trusted_domains)


def is_search_engine(hostname: str, config: DetectorConfig) -> bool:
    return host_matches(hostname, config.search_engines)


def check_suspicious_path(path: str, config: DetectorConfig) -> bool:
    """User directories, script-as-directory paths, or credential-flow segments."""
    if USER_DIRECTORY.search(path):
        return True

    if config.suspicious_script_extensions:
        extensions = "|".join(re.escape(e) for e in config.suspicious_script_extensions)
        if re.search(rf"\.({extensions})/", path):
            return True

    segments = set(config.suspicious_path_segments)
    return any(segment in segments for segment in path.lower().split("/"))


def check_suspicious_keywords(
    url: str,
    config: DetectorConfig,
    segmenter: WordSegmenter,
    hostname: str = "",
) -> bool:
    """Keyword hit anywhere in the URL, including inside long glued tokens.

    Trusted hosts never count as carrying suspicious keywords.
    """
    if hostname and is_domain_trusted(hostname, config):
        return False

    normalized = url.lower()
    keywords = set(config.suspicious_keywords)
    if any(keyword in normalized for keyword in keywords):
        return True

    tokens = [t for t in TOKEN_SEPARATORS.sub(" ", SCHEME_PREFIX.sub("", normalized, count=1)).split(" ") if t]
    for token in tokens:
        if len(token) > 8:
            if any(len(s) >= 3 and s in keywords for s in segmenter.segment(token)):
                return True
        elif token in keywords:
            return True
    return False


def count_non_ascii(parsed: ParsedURL) -> int:
    count = len(NON_ASCII.findall(parsed.url))
    # Punycode hosts are decoded for analysis; count the characters they hide.
    if parsed.hostname not in parsed.url.lower():
        count += len(NON_ASCII.findall(parsed.hostname))
    return count


def extract_features(
    url: str,
    config: DetectorConfig,
    segmenter: WordSegmenter,
    parsed: ParsedURL | None = None,
) -> URLFeatures:
    """Compute the full feature vector for ``url``.

    Raises:
        InvalidURLError: if ``url`` cannot be parsed.
    """
    parsed = parsed or parse_url(url)
    hostname = parsed.hostname
    path = parsed.path
    labels = parsed.labels
    has_ip = is_ip_host(hostname)

    domain_label = hostname if has_ip else registrable_label(hostname)

    domain_tokens = segmenter.segment(hostname)
    path_tokens = [p for p in path.split("/") if p]
    all_tokens = domain_tokens + path_tokens
    avg_token_length = sum(len(t) for t in all_tokens) / len(all_tokens) if all_tokens else 0.0

    trusted = is_domain_trusted(hostname, config)

    return URLFeatures(
        url_length=len(url),
        domain_length=len(hostname),
        path_length=len(path),
        has_subdomain=1 if len(labels) > 2 else 0,
        tld_is_risky=1 if parsed.tld in config.risk_tlds else 0,
        domain_has_dash=1 if "-" in hostname else 0,
        special_char_count=len(SPECIAL_CHAR.findall(url)),
        digit_count=len(DIGIT.findall(url)),
        has_ip_address=1 if has_ip else 0,
        has_suspicious_keywords=1 if check_suspicious_keywords(url, config, segmenter, hostname) else 0,
        query_param_count=len(QUERY_PARAM.findall(parsed.query)) if parsed.query else 0,
        is_http=1 if parsed.scheme != "https" else 0,
        has_suspicious_path=1 if check_suspicious_path(path, config) else 0,
        domain_entropy_score=shannon_entropy(hostname),
        url_entropy_score=shannon_entropy(url),
        domain_token_count=len(domain_tokens),
        path_token_count=len(path_tokens),
        avg_token_length=avg_token_length,
        hex_pattern_count=len(HEX_ESCAPE.findall(url)),
        non_ascii_char_count=count_non_ascii(parsed),
        consecutive_special_chars=consecutive_special_chars(url),
        trigram_suspiciousness=trigram_suspicion(url, config.suspicious_trigrams, config.safe_trigrams),
        brand_similarity=brand_similarity(domain_label, config),
        is_domain_trusted=1 if trusted else 0,
    )

"""Conditional request freshness (If-None-Match / If-Modified-Since).

Decides whether a client's cached copy is still valid given the
validators a response would carry, so the caller can answer 304.
"""

import re
from collections.abc import Mapping
from datetime import datetime
from email.utils import format_datetime, parsedate_to_datetime

_NO_CACHE = re.compile(r"(?:^|,)\s*?no-cache\s*?(?:,|$)")


def http_date(moment: datetime) -> str:
    """Format an aware datetime as an IMF-fixdate (``Last-Modified`` style)."""
    return format_datetime(moment, usegmt=True)


def _parse_http_date(value: str) -> float | None:
    try:
        return parsedate_to_datetime(value).timestamp()
    except (TypeError, ValueError, IndexError):
        return None


def _lookup(headers: Mapping[str, str], name: str) -> str | None:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _etag_matches(etag: str, none_match: str) -> bool:
    for candidate in none_match.split(","):
        candidate = candidate.strip()
        if candidate in (etag, f"W/{etag}") or f"W/{candidate}" == etag:
            return True
    return False


def is_fresh(request_headers: Mapping[str, str], response_headers: Mapping[str, str]) -> bool:
    """True if the request's conditional headers match the response validators.

    ``Cache-Control: no-cache`` on the request always forces a stale result.
    """
    modified_since = _lookup(request_headers, "if-modified-since")
    none_match = _lookup(request_headers, "if-none-match")
    if not modified_since and not none_match:
        return False

    cache_control = _lookup(request_headers, "cache-control")
    if cache_control and _NO_CACHE.search(cache_control):
        return False

    if none_match and none_match.strip() != "*":
        etag = _lookup(response_headers, "etag")
        if not etag or not _etag_matches(etag, none_match):
            return False

    if modified_since:
        last_modified = _lookup(response_headers, "last-modified")
        if not last_modified:
            return False
        last = _parse_http_date(last_modified)
        since = _parse_http_date(modified_since)
        if last is None or since is None or last > since:
            return False

    return True

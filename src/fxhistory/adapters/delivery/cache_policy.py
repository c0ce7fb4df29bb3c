# src/fxhistory/adapters/delivery/cache_policy.py
"""
Edge Cache Policy - Cache Lifetimes for Published Files

The published tree is served through an edge cache whose lifetime depends
only on the request path:
- /latest/...                      1 hour
- /data/YYYY-MM-DD.json (today)    1 hour
- /data/YYYY-MM-DD.json (older)    1 year, immutable
- /currencies/...                  1 year
- /history/*.json                  until 01:00 UTC tomorrow (min 60s)
- anything else                    1 hour

History files expire shortly after the daily snapshot job is expected to
have run, so any change to the file names produced by the history service
must be mirrored here.

Files that USE this module:
- tests.test_cache_policy (unit tests)

Files that this module USES:
- None (pure functions)
"""
from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional

ONE_HOUR = 3600
ONE_YEAR = 31536000
MIN_HISTORY_TTL = 60

_LATEST_RE = re.compile(r"^/latest(/|$)", re.IGNORECASE)
_DAILY_RE = re.compile(r"^/data/(\d{4}-\d{2}-\d{2})\.json$")
_CURRENCIES_RE = re.compile(r"^/currencies/.*$", re.IGNORECASE)
_HISTORY_RE = re.compile(r"^/history/.*\.json$", re.IGNORECASE)


def _utc_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


def seconds_until_next_refresh(now: Optional[datetime] = None) -> int:
    """Seconds from ``now`` until 01:00 UTC of the next day, at least 60."""
    now = _utc_now(now)
    next_refresh = datetime(now.year, now.month, now.day, 1, tzinfo=timezone.utc) + timedelta(days=1)
    return max(MIN_HISTORY_TTL, int((next_refresh - now).total_seconds()))


def cache_ttl_seconds(path: str, now: Optional[datetime] = None) -> int:
    """
    Cache lifetime in seconds for a request path.

    Args:
        path: URL path, e.g. "/history/week.json"
        now: Current instant (defaults to now, UTC)
    """
    now = _utc_now(now)
    if _LATEST_RE.match(path):
        return ONE_HOUR

    match = _DAILY_RE.match(path)
    if match:
        return ONE_HOUR if match.group(1) == now.date().isoformat() else ONE_YEAR

    if _CURRENCIES_RE.match(path):
        return ONE_YEAR
    if _HISTORY_RE.match(path):
        return seconds_until_next_refresh(now)
    return ONE_HOUR


def cache_control_header(path: str, now: Optional[datetime] = None) -> str:
    """Cache-Control header value for a request path."""
    ttl = cache_ttl_seconds(path, now)
    header = f"public, max-age={ttl}"
    if ttl >= ONE_YEAR:
        header += ", immutable"
    return header

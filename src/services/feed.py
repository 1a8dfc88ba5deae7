"""
Loading the property's iCal feed.

Tries a direct request first (fastest when the host allows it), then the
same URL through the public proxy, then the fallback URL. When every
attempt fails, the last successfully loaded copy from the SQLite cache is
served instead.
"""

from dataclasses import dataclass

import requests

from core.config import (
    ICAL_REQUEST_TIMEOUT,
    ICAL_URL,
    ICAL_URL_FALLBACK,
    ICAL_USER_AGENT,
    PROXY_URL,
)
from core.database import get_connection, load_cached_ranges, save_cached_ranges
from models.events import DateRange
from services.ical import parse_ics


class FeedError(RuntimeError):
    """Raised when the feed cannot be loaded from any source."""


@dataclass
class FeedResult:
    """Ranges loaded for a feed and where they came from."""

    source_url: str
    ranges: list[DateRange]
    from_cache: bool = False
    cached_at: str | None = None


def fetch_ics_direct(url: str, timeout: int = ICAL_REQUEST_TIMEOUT) -> str:
    """Fetch the feed straight from its host."""
    response = requests.get(url, headers={"User-Agent": ICAL_USER_AGENT}, timeout=timeout)
    response.raise_for_status()
    return response.text


def fetch_ics_via_proxy(url: str, proxy_url: str, timeout: int = ICAL_REQUEST_TIMEOUT) -> str:
    """Fetch the feed through a raw-content proxy (`<proxy>?url=<feed>`)."""
    response = requests.get(
        proxy_url,
        params={"url": url},
        headers={"User-Agent": ICAL_USER_AGENT},
        timeout=timeout,
    )
    response.raise_for_status()
    return response.text


def fetch_ics(
    url: str,
    proxy_url: str | None = PROXY_URL,
    fallback_url: str | None = ICAL_URL_FALLBACK,
    timeout: int = ICAL_REQUEST_TIMEOUT,
) -> str:
    """
    Fetch feed text, trying each source in turn.

    Order: url direct, url via proxy, fallback_url direct, fallback_url via
    proxy. Duplicate or empty sources are skipped.

    Raises:
        FeedError: if every attempt fails
    """
    urls = [url]
    if fallback_url and fallback_url != url:
        urls.append(fallback_url)

    failures = []
    for source in urls:
        try:
            return fetch_ics_direct(source, timeout)
        except requests.RequestException as e:
            print(f"  Direct fetch failed for {source}: {e}")
            failures.append(f"direct {source}: {e}")

        if not proxy_url:
            continue
        try:
            return fetch_ics_via_proxy(source, proxy_url, timeout)
        except requests.RequestException as e:
            print(f"  Proxy fetch failed for {source}: {e}")
            failures.append(f"proxy {source}: {e}")

    raise FeedError("Unable to load calendar feed: " + "; ".join(failures))


def load_ranges(
    url: str | None = None,
    proxy_url: str | None = PROXY_URL,
    fallback_url: str | None = ICAL_URL_FALLBACK,
    use_cache: bool = True,
) -> FeedResult:
    """
    Fetch and parse the feed, keeping the cache up to date.

    Raises:
        FeedError: if no feed URL is configured, or the feed is unreachable
            and nothing is cached for it
    """
    url = url or ICAL_URL
    if not url:
        raise FeedError("No calendar feed configured (set ICAL_URL)")

    try:
        ics_text = fetch_ics(url, proxy_url=proxy_url, fallback_url=fallback_url)
    except FeedError:
        if not use_cache:
            raise
        conn = get_connection()
        try:
            cached = load_cached_ranges(conn, url)
        finally:
            conn.close()
        if cached is None:
            raise
        ranges, cached_at = cached
        print(f"  Serving {len(ranges)} cached range(s) from {cached_at}")
        return FeedResult(source_url=url, ranges=ranges, from_cache=True, cached_at=cached_at)

    ranges = parse_ics(ics_text)
    if use_cache and "BEGIN:VCALENDAR" not in ics_text:
        # Proxy error pages come back as 200, keep the last good copy
        print(f"  Response for {url} is not a calendar, cache left unchanged")
    elif use_cache:
        conn = get_connection()
        try:
            save_cached_ranges(conn, url, ranges)
        finally:
            conn.close()

    return FeedResult(source_url=url, ranges=ranges)

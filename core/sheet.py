from __future__ import annotations

import logging
import time
from typing import Callable, Optional
from urllib.parse import urlsplit

import httpx

from core.errors import ConfigError, TransportError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15.0
CACHE_BUST_PARAM = "t"


def is_valid_source_url(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url.strip())
        parts.port  # raises on non-numeric or out-of-range ports
    except ValueError:
        return False
    if parts.scheme not in {"http", "https"} or not parts.hostname:
        return False
    return not any(ch.isspace() for ch in parts.netloc)


def build_cache_busted_url(url: str, stamp: int) -> str:
    """Append ``t=<stamp>`` so intermediate caches never serve a stale export."""
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{CACHE_BUST_PARAM}={stamp}"


def fetch_sheet_csv(
    url: Optional[str],
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
    clock: Callable[[], float] = time.time,
) -> str:
    """Fetch the raw CSV export body.

    Makes exactly one GET attempt. Raises ConfigError before any request when the
    URL is missing or not absolute, and TransportError on non-2xx responses or
    network failures.
    """
    if not is_valid_source_url(url):
        raise ConfigError("no data source configured")

    target = build_cache_busted_url(url.strip(), int(clock() * 1000))
    owns_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        resp = http.get(target)
    except httpx.HTTPError as exc:
        raise TransportError(f"could not reach data source: {exc}") from exc
    finally:
        if owns_client:
            http.close()

    if not resp.is_success:
        raise TransportError(f"data source returned HTTP {resp.status_code}", status_code=resp.status_code)
    logger.debug("fetched %d bytes from %s", len(resp.content), url)
    return resp.text

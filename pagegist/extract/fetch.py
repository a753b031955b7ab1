from __future__ import annotations

from typing import Optional

import httpx


DEFAULT_TIMEOUT = 30.0
USER_AGENT = "pagegist/0.1"


class FetchError(Exception):
    """Raised when a page cannot be downloaded."""


def fetch_html(
    url: str,
    *,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """Download ``url`` and return the decoded body. Redirects are followed."""
    own_client = client is None
    http = client or httpx.Client(timeout=timeout, follow_redirects=True)
    try:
        response = http.get(
            url,
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=timeout,
        )
        response.raise_for_status()
    except httpx.HTTPError as exc:
        raise FetchError(f"Could not fetch {url}: {exc}") from exc
    finally:
        if own_client:
            http.close()
    return response.text

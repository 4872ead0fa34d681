"""HTTP session helpers for the upstream stats services."""

from __future__ import annotations

import requests

USER_AGENT = "carry-check/0.1"


def create_http_session(api_key: str | None = None) -> requests.Session:
    """Create a requests session; ``api_key`` is sent as ``X-API-Key`` when given."""
    session = requests.Session()
    session.headers["User-Agent"] = USER_AGENT
    session.headers["Accept"] = "application/json"
    if api_key:
        session.headers["X-API-Key"] = api_key
    return session

"""Shared JSON-over-HTTP scaffold for upstream repositories."""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any

import requests

from domain.errors import MalformedResponse, UpstreamUnavailable

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 10.0


class JsonApiClient:
    """GET-and-decode helper shared by every upstream repository.

    Transport failures, HTTP error statuses and bodies that are not JSON all
    surface as ``UpstreamUnavailable``; nothing is retried.
    """

    source = "http"

    def __init__(
        self,
        session: requests.Session,
        *,
        base_url: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        if timeout <= 0.0:
            raise ValueError("timeout must be greater than 0")
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _get_json(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        logger.debug("GET %s params=%s", url, params)
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise UpstreamUnavailable(self.source, f"GET {url} failed: {exc}") from exc

        if response.status_code >= 400:
            raise UpstreamUnavailable(
                self.source, f"GET {url} returned HTTP {response.status_code}"
            )
        if not response.content:
            raise UpstreamUnavailable(self.source, f"GET {url} returned an empty body")
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamUnavailable(self.source, f"GET {url} returned invalid JSON") from exc


def lookup(payload: Any, *path: str, default: Any = None) -> Any:
    """Follow ``path`` through nested mappings, matching keys case-insensitively."""
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return default
        if key in current:
            current = current[key]
            continue
        folded = key.casefold()
        for candidate, value in current.items():
            if isinstance(candidate, str) and candidate.casefold() == folded:
                current = value
                break
        else:
            return default
    return current


def require(source: str, payload: Any, *path: str) -> Any:
    """Like ``lookup`` but a missing path raises ``MalformedResponse``."""
    value = lookup(payload, *path)
    if value is None:
        raise MalformedResponse(source, f"missing field {'.'.join(path)}")
    return value


def as_float(source: str, value: Any, field: str) -> float:
    if value is None:
        return 0.0
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedResponse(source, f"{field}={value!r} is not numeric") from exc
    if not math.isfinite(result):
        raise MalformedResponse(source, f"{field}={value!r} is not a finite number")
    return result


def as_int(source: str, value: Any, field: str) -> int:
    # as_float only returns finite values, so int() cannot overflow here.
    return int(as_float(source, value, field))


__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "JsonApiClient",
    "as_float",
    "as_int",
    "lookup",
    "require",
]

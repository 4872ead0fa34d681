"""Error taxonomy for upstream lookups and identity resolution."""

from __future__ import annotations


class CarryCheckError(Exception):
    """Base class for every error raised by the carry checker."""


class UpstreamError(CarryCheckError):
    """A collaborator call did not produce a usable payload."""

    def __init__(self, source: str, detail: str) -> None:
        super().__init__(f"{source}: {detail}")
        self.source = source
        self.detail = detail


class UpstreamUnavailable(UpstreamError):
    """Transport-level failure: connection error, timeout, bad status or empty body."""


class MalformedResponse(UpstreamError):
    """The payload decoded but its shape does not match what the caller expects."""


class IdentityResolutionError(CarryCheckError):
    """No account or character could be resolved; nothing can be evaluated."""


__all__ = [
    "CarryCheckError",
    "IdentityResolutionError",
    "MalformedResponse",
    "UpstreamError",
    "UpstreamUnavailable",
]

"""Failure taxonomy for the resolution service client.

"No DOI found" is not in here: it is a successful ResolutionResult with doi=None.
"""

from __future__ import annotations

from typing import Optional


class ResolutionError(Exception):
    """Raised by a resolution client when a lookup cannot be completed."""

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "")
        self.message = message


class ResolutionConfigError(ResolutionError):
    """Client is not usable, e.g. the API key is missing."""


class ResolutionNetworkError(ResolutionError):
    pass


class ResolutionTimeoutError(ResolutionError):
    pass


class ResolutionQuotaError(ResolutionError):
    """Upstream rejected the call for rate or quota reasons (HTTP 429)."""


class ResolutionUpstreamError(ResolutionError):
    def __init__(self, message: Optional[str] = None, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class MalformedResponseError(ResolutionError):
    """Upstream answered, but not with anything a result can be built from."""

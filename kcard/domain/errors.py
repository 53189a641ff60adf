"""Domain-level error types for collector failures and startup assets.

Collector failures cross the use-case boundary as ``FetchError`` subclasses so
the scheduler can log which sibling service failed without knowing anything
about the transport that was used to reach it.
"""

from __future__ import annotations


class FetchError(Exception):
    """Base class for failures while collecting one facet of node state.

    Attributes:
        source: Collector name, for example ``"identity"`` or ``"naming"``.
        message: Human-readable reason.
    """

    code = "FETCH_FAILED"

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.message = message


class TransportFailure(FetchError):
    """Request could not be sent or answered (timeout, connection, HTTP status)."""

    code = "TRANSPORT_FAILURE"


class ParseFailure(FetchError):
    """Sibling answered but the payload did not decode into the expected shape."""

    code = "PARSE_FAILURE"


class NotFoundFailure(FetchError):
    """Sibling answered validly but the queried entity does not exist."""

    code = "NOT_FOUND"


class AssetLoadError(RuntimeError):
    """Embedded background or font could not be decoded at startup."""


__all__ = [
    "AssetLoadError",
    "FetchError",
    "NotFoundFailure",
    "ParseFailure",
    "TransportFailure",
]

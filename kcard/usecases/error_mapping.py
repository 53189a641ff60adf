"""Translate adapter and parsing errors into collector ``FetchError`` instances."""

from __future__ import annotations

from kcard.adapters.api_errors import ApiError, ApiTimeoutError
from kcard.domain.errors import FetchError, ParseFailure, TransportFailure

_PARSE_ERRORS = (ValueError, KeyError, TypeError)


def map_fetch_error(exc: Exception, *, source: str) -> FetchError:
    """Map any exception raised while collecting ``source`` to the failure taxonomy.

    Args:
        exc: Exception raised by a port call or payload parsing.
        source: Collector name used for log context.

    Returns:
        FetchError: ``exc`` itself when already mapped, otherwise a
        ``TransportFailure`` or ``ParseFailure``.
    """
    if isinstance(exc, FetchError):
        return exc
    if isinstance(exc, ApiTimeoutError):
        return TransportFailure(source, f"request timed out ({exc})")
    if isinstance(exc, ApiError):
        return TransportFailure(source, str(exc))
    if isinstance(exc, _PARSE_ERRORS):
        return ParseFailure(source, str(exc) or type(exc).__name__)

    message = str(exc) or type(exc).__name__
    return TransportFailure(source, message)


__all__ = ["map_fetch_error"]

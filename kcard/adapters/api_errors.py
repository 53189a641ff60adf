"""Typed transport errors raised by the node adapter and their message helpers."""

from __future__ import annotations

from typing import Any, Mapping, Optional

_DETAIL_KEYS = ("detail", "error", "message")


class ApiError(RuntimeError):
    """Base class for sibling-process transport failures."""

    def __init__(
        self,
        message: str,
        *,
        status: Optional[int] = None,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = payload
        self.context = context


class ApiClientError(ApiError):
    """HTTP 4xx from the node, e.g. the target process is not registered."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiServerError(ApiError):
    """HTTP 5xx from the node."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        payload: Any = None,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, status=status, payload=payload, context=context)


class ApiTimeoutError(ApiError):
    """Transport level timeout or connectivity failure."""

    def __init__(
        self,
        message: str,
        *,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(message, context=context)


def parse_error_payload(resp: Any) -> Any:
    """Best-effort extraction of error payload without raising."""
    try:
        return resp.json()
    except Exception:
        snippet = getattr(resp, "text", "")
        if not snippet:
            return None
        return snippet[:400]


def error_detail(payload: Any) -> Optional[str]:
    """Readable part of a node error body: bare text, or a ``detail``/``error``/``message`` field."""
    if isinstance(payload, Mapping):
        payload = next((payload[key] for key in _DETAIL_KEYS if payload.get(key)), None)
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


def build_error_message(ctx: str, status: int, payload: Any) -> str:
    detail = error_detail(payload)
    if detail:
        return f"{ctx}: {detail} (HTTP {status})"
    return f"{ctx}: HTTP {status}"

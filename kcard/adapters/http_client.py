"""Shared HTTP transport for requests to sibling node processes.

Every sibling process is addressed as ``{node_url}/{process_id}`` and receives
its request as a JSON body. The wrapper owns the timeout policy and turns
``requests`` transport exceptions into ``ApiTimeoutError``. There are no
retries: a failed call fails the refresh cycle and the next cycle tries again.

Dependencies:
    - ``requests`` for network I/O.
    - ``kcard.adapters.api_errors`` for typed transport failures.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests
from requests import exceptions as req_exc

from kcard.adapters.api_errors import ApiError, ApiTimeoutError

DEFAULT_REQUEST_TIMEOUT_S = 60


@dataclass
class HttpConfig:
    """Timeout configuration for sibling requests.

    Attributes:
        request_timeout_s: Timeout in seconds for every request/response pair.
    """
    request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S


class RequestSession:
    """Thin ``requests.Session`` wrapper sending one JSON request per call."""

    def __init__(self, cfg: HttpConfig) -> None:
        self.session = requests.Session()
        self.cfg = cfg

    @staticmethod
    def _headers() -> Dict[str, str]:
        return {"Accept": "application/json", "Content-Type": "application/json"}

    def post(
        self,
        url: str,
        *,
        json_body: Any,
        timeout: Optional[float] = None,
    ) -> requests.Response:
        """Send ``json_body`` and return the raw response.

        Raises:
            ApiTimeoutError: On timeout or connection failure.
            ApiError: On any other ``requests`` failure, e.g. a malformed URL.
        """
        context = f"POST {url}"
        try:
            return self.session.post(
                url,
                data=json.dumps(json_body),
                headers=self._headers(),
                timeout=timeout or self.cfg.request_timeout_s,
            )
        except (req_exc.Timeout, req_exc.ConnectionError) as exc:
            raise ApiTimeoutError(f"Timeout contacting {url}", context=context) from exc
        except req_exc.RequestException as exc:
            # InvalidURL and MissingSchema are also ValueErrors; keep them transport-side
            raise ApiError(f"Request to {url} failed: {exc}", context=context) from exc


__all__ = ["DEFAULT_REQUEST_TIMEOUT_S", "HttpConfig", "RequestSession"]

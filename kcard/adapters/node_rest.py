"""HTTP adapter implementing the sibling-process ports of the local node."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Mapping, Optional

import requests

from kcard.adapters.api_errors import (
    ApiClientError,
    ApiError,
    ApiServerError,
    build_error_message,
    parse_error_payload,
)
from kcard.adapters.http_client import DEFAULT_REQUEST_TIMEOUT_S, HttpConfig, RequestSession
from kcard.domain.models import (
    NamingState,
    NodeIdentity,
    ProviderConfig,
    SubscriptionState,
)

NET_PROCESS = "net:distro:sys"
ETH_PROCESS = "eth:distro:sys"
KERNEL_PROCESS = "kernel:distro:sys"
KIMAP_PROCESS = "kimap-indexer:kimap-indexer:sys"


class NodeRestAdapter:
    """Send tagged JSON requests to ``net``, ``eth``, ``kernel`` and the kimap indexer.

    Requests and responses use the externally tagged enum encoding of the node
    runtime: unit variants are bare strings (``"GetPeers"``), other variants are
    single-key objects (``{"GetPeer": "our.os"}``).
    """

    def __init__(
        self,
        node_url: str,
        *,
        processes: Optional[Dict[str, str]] = None,
        request_timeout_s: float = DEFAULT_REQUEST_TIMEOUT_S,
    ) -> None:
        if not str(node_url or "").strip():
            raise ValueError("NodeRestAdapter requires a node URL")
        self.node_url = str(node_url).rstrip("/")
        self.processes = {
            "net": NET_PROCESS,
            "eth": ETH_PROCESS,
            "kernel": KERNEL_PROCESS,
            "kimap": KIMAP_PROCESS,
        }
        self.processes.update(processes or {})
        self.cfg = HttpConfig(request_timeout_s=request_timeout_s)
        self.session = RequestSession(self.cfg)

    # ---- PeerRegistryPort ----
    def get_peer(self, node_name: str) -> Optional[NodeIdentity]:
        body = self._request("net", {"GetPeer": node_name}, "get_peer")
        peer = self._unwrap(body, "Peer", "get_peer")
        if peer is None:
            return None
        return NodeIdentity.from_payload(peer)

    def get_peers(self) -> List[str]:
        body = self._request("net", "GetPeers", "get_peers")
        peers = self._unwrap(body, "Peers", "get_peers")
        if not isinstance(peers, list):
            raise ValueError("get_peers: expected list of peers")
        names = []
        for entry in peers:
            if isinstance(entry, Mapping):
                name = entry.get("name")
                if not isinstance(name, str) or not name:
                    raise ValueError("get_peers: peer entry without name")
                names.append(name)
            elif isinstance(entry, str):
                names.append(entry)
            else:
                raise ValueError(f"get_peers: unsupported peer entry {entry!r}")
        return names

    # ---- ProviderRegistryPort ----
    def get_providers(self) -> FrozenSet[ProviderConfig]:
        body = self._request("eth", "GetProviders", "get_providers")
        providers = self._unwrap(body, "Providers", "get_providers")
        if not isinstance(providers, list):
            raise ValueError("get_providers: expected list of providers")
        return frozenset(ProviderConfig.from_payload(item) for item in providers)

    def get_state(self) -> SubscriptionState:
        body = self._request("eth", "GetState", "get_state")
        return SubscriptionState.from_payload(self._unwrap(body, "State", "get_state"))

    # ---- ProcessRegistryPort ----
    def process_count(self) -> int:
        body = self._request("kernel", {"Debug": "ProcessMap"}, "process_map")
        debug = self._unwrap(body, "Debug", "process_map")
        process_map = self._unwrap(debug, "ProcessMap", "process_map")
        if not isinstance(process_map, (Mapping, list)):
            raise ValueError("process_map: expected process map")
        return len(process_map)

    # ---- NamingPort ----
    def get_naming_state(self, block: int = 0) -> NamingState:
        body = self._request("kimap", {"GetState": {"block": block}}, "kimap_state")
        return NamingState.from_payload(self._unwrap(body, "State", "kimap_state"))

    # ------------------------------------------------------------------
    def _make_url(self, service: str) -> str:
        process = self.processes.get(service)
        if not process:
            raise ValueError(f"No process configured for service '{service}'")
        return f"{self.node_url}/{process}"

    def _request(self, service: str, request_body: Any, ctx: str) -> Any:
        resp = self.session.post(
            self._make_url(service),
            json_body=request_body,
            timeout=self.cfg.request_timeout_s,
        )
        self._ensure_ok(resp, ctx)
        return self._json_body(resp)

    @staticmethod
    def _unwrap(payload: Any, tag: str, ctx: str) -> Any:
        """Return the body of the expected response variant."""
        if not isinstance(payload, Mapping) or tag not in payload:
            raise ValueError(f"{ctx}: expected '{tag}' response, got {payload!r:.200}")
        return payload[tag]

    @staticmethod
    def _ensure_ok(resp: requests.Response, ctx: str) -> None:
        """Raise typed adapter errors for non-2xx responses."""
        if 200 <= resp.status_code < 300:
            return
        status = resp.status_code
        payload = parse_error_payload(resp)
        message = build_error_message(ctx, status, payload)
        if 400 <= status < 500:
            raise ApiClientError(message, status=status, payload=payload, context=ctx)
        if 500 <= status < 600:
            raise ApiServerError(message, status=status, payload=payload, context=ctx)
        raise ApiError(message, status=status, payload=payload, context=ctx)

    @staticmethod
    def _json_body(resp: requests.Response) -> Any:
        try:
            return resp.json()
        except Exception as exc:
            snippet = getattr(resp, "text", "")[:400]
            raise ValueError(f"Invalid JSON response: {snippet}") from exc


class NamingRestAdapter:
    """``NamingPort`` view over ``NodeRestAdapter``.

    The provider registry and the naming service both expose ``get_state``; this
    wrapper keeps the naming flavor behind its own port.
    """

    def __init__(self, node: NodeRestAdapter) -> None:
        self.node = node

    def get_state(self, block: int = 0) -> NamingState:
        return self.node.get_naming_state(block)


__all__ = [
    "ETH_PROCESS",
    "KERNEL_PROCESS",
    "KIMAP_PROCESS",
    "NET_PROCESS",
    "NamingRestAdapter",
    "NodeRestAdapter",
]

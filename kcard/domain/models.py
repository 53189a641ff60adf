"""Typed domain objects for one refresh cycle of the status card.

Every ``from_payload`` constructor accepts the decoded JSON answer of a sibling
process and raises ``ValueError`` when the payload does not have the expected
shape. Use cases translate those errors into ``ParseFailure``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, FrozenSet, List, Mapping, Tuple, Union

CONTRACT_ADDRESS_LEN = 20


def _require_mapping(payload: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValueError(f"{what}: expected object, got {type(payload).__name__}")
    return payload


def _require_int(value: Any, what: str) -> int:
    # bool is an int subclass but never a valid count or chain id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{what}: expected integer, got {value!r}")
    return value


def _require_text(value: Any, what: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{what}: expected non-empty string, got {value!r}")
    return value.strip()


def _single_variant(payload: Any, what: str) -> Tuple[str, Any]:
    """Split a tagged enum object like ``{"Direct": {...}}`` into tag and body."""
    mapping = _require_mapping(payload, what)
    if len(mapping) != 1:
        raise ValueError(f"{what}: expected exactly one variant, got {sorted(mapping)}")
    tag, body = next(iter(mapping.items()))
    return str(tag), body


@dataclass(frozen=True)
class DirectRouting:
    """Node reachable at a public IP on one or more labeled ports."""

    ip: str
    ports: Tuple[Tuple[str, int], ...] = ()

    @property
    def port_labels(self) -> List[str]:
        return sorted(label for label, _ in self.ports)


@dataclass(frozen=True)
class RoutedRouting:
    """Node reachable only through router nodes."""

    routers: Tuple[str, ...] = ()

    @property
    def router_count(self) -> int:
        return len(self.routers)


Routing = Union[DirectRouting, RoutedRouting]


def parse_routing(payload: Any) -> Routing:
    """Build a routing descriptor from its tagged wire form."""
    tag, body = _single_variant(payload, "routing")
    if tag == "Direct":
        direct = _require_mapping(body, "routing.Direct")
        raw_ports = _require_mapping(direct.get("ports") or {}, "routing.Direct.ports")
        ports = tuple(
            sorted(
                (str(label), _require_int(port, f"routing.Direct.ports[{label}]"))
                for label, port in raw_ports.items()
            )
        )
        return DirectRouting(ip=str(direct.get("ip") or ""), ports=ports)
    if tag == "Routers":
        if not isinstance(body, list):
            raise ValueError("routing.Routers: expected list of router names")
        return RoutedRouting(routers=tuple(str(router) for router in body))
    raise ValueError(f"routing: unknown variant {tag!r}")


@dataclass(frozen=True)
class NodeIdentity:
    """Networking identity of one node at fetch time."""

    name: str
    networking_key: str
    routing: Routing

    @classmethod
    def from_payload(cls, payload: Any) -> "NodeIdentity":
        data = _require_mapping(payload, "identity")
        return cls(
            name=_require_text(data.get("name"), "identity.name"),
            networking_key=_require_text(data.get("networking_key"), "identity.networking_key"),
            routing=parse_routing(data.get("routing")),
        )


@dataclass(frozen=True)
class ProviderConfig:
    """One configured upstream provider.

    ``params`` holds every field except ``chain_id`` as canonical JSON text so
    that two identical configurations compare and hash equal.
    """

    chain_id: int
    params: str = "{}"

    @classmethod
    def from_payload(cls, payload: Any) -> "ProviderConfig":
        data = _require_mapping(payload, "provider")
        chain_id = _require_int(data.get("chain_id"), "provider.chain_id")
        rest = {key: value for key, value in data.items() if key != "chain_id"}
        return cls(chain_id=chain_id, params=json.dumps(rest, sort_keys=True, default=str))


@dataclass(frozen=True)
class SubscriptionState:
    """Active subscription handles per key plus outstanding requests."""

    active: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    outstanding: Tuple[str, ...] = ()

    @property
    def subscription_count(self) -> int:
        return sum(len(handles) for handles in self.active.values())

    @property
    def outstanding_count(self) -> int:
        return len(self.outstanding)

    @classmethod
    def from_payload(cls, payload: Any) -> "SubscriptionState":
        data = _require_mapping(payload, "eth state")
        raw_active = _require_mapping(
            data.get("active_subscriptions") or {}, "eth state.active_subscriptions"
        )
        active: Dict[str, Tuple[str, ...]] = {}
        for key, handles in raw_active.items():
            # handles arrive either as a list or as an id -> detail object
            if isinstance(handles, Mapping):
                active[str(key)] = tuple(str(handle) for handle in handles)
            elif isinstance(handles, list):
                active[str(key)] = tuple(str(handle) for handle in handles)
            else:
                raise ValueError(f"eth state.active_subscriptions[{key}]: expected list")
        raw_outstanding = data.get("outstanding_requests") or []
        if not isinstance(raw_outstanding, list):
            raise ValueError("eth state.outstanding_requests: expected list")
        return cls(active=active, outstanding=tuple(str(item) for item in raw_outstanding))


def parse_contract_address(value: Any) -> bytes:
    """Decode a contract address given as ``0x`` hex text or a list of byte values."""
    if isinstance(value, str):
        text = value.strip()
        if text.lower().startswith("0x"):
            text = text[2:]
        try:
            raw = bytes.fromhex(text)
        except ValueError as exc:
            raise ValueError(f"naming.contract_address: invalid hex {value!r}") from exc
    elif isinstance(value, list):
        try:
            raw = bytes(value)
        except (TypeError, ValueError) as exc:
            raise ValueError("naming.contract_address: invalid byte list") from exc
    else:
        raise ValueError(f"naming.contract_address: unsupported value {value!r}")
    if len(raw) != CONTRACT_ADDRESS_LEN:
        raise ValueError(
            f"naming.contract_address: expected {CONTRACT_ADDRESS_LEN} bytes, got {len(raw)}"
        )
    return raw


@dataclass(frozen=True)
class NamingState:
    """Naming-service index state as of its last processed block."""

    chain_id: int
    contract_address: bytes
    nodes: Dict[str, Any] = field(default_factory=dict)
    names: Dict[str, str] = field(default_factory=dict)
    last_block: int = 0

    @property
    def contract_address_hex(self) -> str:
        return "0x" + self.contract_address.hex()

    @property
    def resolvable_name_count(self) -> int:
        return len(self.nodes)

    @classmethod
    def from_payload(cls, payload: Any) -> "NamingState":
        data = _require_mapping(payload, "naming")
        nodes = _require_mapping(data.get("nodes") or {}, "naming.nodes")
        names = _require_mapping(data.get("names") or {}, "naming.names")
        return cls(
            chain_id=_require_int(data.get("chain_id"), "naming.chain_id"),
            contract_address=parse_contract_address(data.get("contract_address")),
            nodes=dict(nodes),
            names={str(key): str(value) for key, value in names.items()},
            last_block=_require_int(data.get("last_block", 0), "naming.last_block"),
        )


@dataclass(frozen=True)
class StatusSnapshot:
    """Merged result of every collector for one refresh cycle."""

    node_name: str
    identity: NodeIdentity
    peers: Tuple[str, ...]
    providers: FrozenSet[ProviderConfig]
    subscriptions: SubscriptionState
    process_count: int
    naming: NamingState

    @property
    def chain_ids(self) -> List[int]:
        """Distinct provider chain ids, ascending."""
        return sorted({provider.chain_id for provider in self.providers})

    @property
    def provider_count(self) -> int:
        return len(self.providers)

    @property
    def peer_count(self) -> int:
        return len(self.peers)


@dataclass(frozen=True)
class RenderedCard:
    """Encoded card image produced by one successful refresh cycle."""

    data: bytes
    node_name: str
    rendered_at: datetime
    content_type: str = "image/png"


__all__ = [
    "CONTRACT_ADDRESS_LEN",
    "DirectRouting",
    "NamingState",
    "NodeIdentity",
    "ProviderConfig",
    "RenderedCard",
    "RoutedRouting",
    "Routing",
    "StatusSnapshot",
    "SubscriptionState",
    "parse_contract_address",
    "parse_routing",
]

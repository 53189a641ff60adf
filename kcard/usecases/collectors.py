"""Collectors: one use case per facet of node state.

Each collector is a zero-argument callable that returns a typed value or
raises a ``FetchError`` naming the collector in ``source``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, FrozenSet, Tuple, TypeVar

from kcard.domain.errors import FetchError, NotFoundFailure
from kcard.domain.models import NamingState, NodeIdentity, ProviderConfig, SubscriptionState
from kcard.domain.ports import (
    NamingPort,
    PeerRegistryPort,
    ProcessRegistryPort,
    ProviderRegistryPort,
)
from kcard.usecases.error_mapping import map_fetch_error

T = TypeVar("T")

GENESIS_BLOCK = 0


def _guarded(source: str, call: Callable[[], T]) -> T:
    try:
        return call()
    except FetchError:
        raise
    except Exception as exc:
        raise map_fetch_error(exc, source=source) from exc


@dataclass
class CollectIdentity:
    """Fetch the identity record of the local node."""

    peer_port: PeerRegistryPort
    node_name: str
    source: str = "identity"

    def __call__(self) -> NodeIdentity:
        identity = _guarded(self.source, lambda: self.peer_port.get_peer(self.node_name))
        if identity is None:
            raise NotFoundFailure(self.source, f"no identity registered for {self.node_name}")
        return identity


@dataclass
class CollectPeers:
    peer_port: PeerRegistryPort
    source: str = "peers"

    def __call__(self) -> Tuple[str, ...]:
        return _guarded(self.source, lambda: tuple(self.peer_port.get_peers()))


@dataclass
class CollectProviders:
    provider_port: ProviderRegistryPort
    source: str = "providers"

    def __call__(self) -> FrozenSet[ProviderConfig]:
        return _guarded(self.source, lambda: frozenset(self.provider_port.get_providers()))


@dataclass
class CollectSubscriptions:
    provider_port: ProviderRegistryPort
    source: str = "subscriptions"

    def __call__(self) -> SubscriptionState:
        return _guarded(self.source, self.provider_port.get_state)


@dataclass
class CollectProcessCount:
    process_port: ProcessRegistryPort
    source: str = "processes"

    def __call__(self) -> int:
        return _guarded(self.source, self.process_port.process_count)


@dataclass
class CollectNaming:
    """Fetch the naming index state as of the genesis block marker."""

    naming_port: NamingPort
    source: str = "naming"

    def __call__(self) -> NamingState:
        return _guarded(self.source, lambda: self.naming_port.get_state(GENESIS_BLOCK))


__all__ = [
    "CollectIdentity",
    "CollectNaming",
    "CollectPeers",
    "CollectProcessCount",
    "CollectProviders",
    "CollectSubscriptions",
]

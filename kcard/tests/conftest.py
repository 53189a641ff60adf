from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Optional

import pytest

from kcard.adapters.asset_store import load_assets
from kcard.domain.models import (
    DirectRouting,
    NamingState,
    NodeIdentity,
    ProviderConfig,
    StatusSnapshot,
    SubscriptionState,
)

CONTRACT = bytes.fromhex("dead" + "00" * 16 + "beef")


def make_snapshot(**overrides: Any) -> StatusSnapshot:
    values: Dict[str, Any] = {
        "node_name": "ochocinco.os",
        "identity": NodeIdentity(
            name="ochocinco.os",
            networking_key="abc123",
            routing=DirectRouting(ip="10.0.0.1", ports=(("tcp", 9000),)),
        ),
        "peers": tuple(f"peer{i}.os" for i in range(7)),
        "providers": frozenset(
            [ProviderConfig(chain_id=1), ProviderConfig(chain_id=10), ProviderConfig(chain_id=1)]
        ),
        "subscriptions": SubscriptionState(active={"1": ("a", "b"), "10": ("c",)}),
        "process_count": 42,
        "naming": NamingState(
            chain_id=10,
            contract_address=CONTRACT,
            nodes={f"name{i}.os": {} for i in range(100)},
        ),
    }
    values.update(overrides)
    return StatusSnapshot(**values)


class StubNode:
    """In-memory stand-in for every sibling-process port.

    ``fail`` maps a method name to the exception it raises; ``calls`` records
    every port method invoked, in order.
    """

    def __init__(self, snapshot: StatusSnapshot, fail: Optional[Dict[str, Exception]] = None) -> None:
        self.snapshot = snapshot
        self.fail = dict(fail or {})
        self.calls: List[str] = []

    def _enter(self, name: str) -> None:
        self.calls.append(name)
        if name in self.fail:
            raise self.fail[name]

    def get_peer(self, node_name: str) -> Optional[NodeIdentity]:
        self._enter("get_peer")
        if node_name != self.snapshot.node_name:
            return None
        return self.snapshot.identity

    def get_peers(self) -> List[str]:
        self._enter("get_peers")
        return list(self.snapshot.peers)

    def get_providers(self) -> FrozenSet[ProviderConfig]:
        self._enter("get_providers")
        return self.snapshot.providers

    def get_state(self) -> SubscriptionState:
        self._enter("get_state")
        return self.snapshot.subscriptions

    def process_count(self) -> int:
        self._enter("process_count")
        return self.snapshot.process_count


class StubNaming:
    def __init__(self, node: StubNode) -> None:
        self.node = node

    def get_state(self, block: int = 0) -> NamingState:
        self.node._enter("get_naming_state")
        return self.node.snapshot.naming


@pytest.fixture
def snapshot() -> StatusSnapshot:
    return make_snapshot()


@pytest.fixture(name="make_snapshot")
def make_snapshot_fixture():
    return make_snapshot


@pytest.fixture
def stub_node(snapshot: StatusSnapshot) -> StubNode:
    return StubNode(snapshot)


@pytest.fixture
def stub_naming(stub_node: StubNode) -> StubNaming:
    return StubNaming(stub_node)


@pytest.fixture(scope="session")
def small_assets():
    return load_assets(size=(320, 240))

from __future__ import annotations

import pytest

from kcard.domain.models import (
    DirectRouting,
    NamingState,
    NodeIdentity,
    ProviderConfig,
    RoutedRouting,
    SubscriptionState,
    parse_contract_address,
)


def test_identity_parses_direct_routing() -> None:
    identity = NodeIdentity.from_payload(
        {
            "name": "ochocinco.os",
            "networking_key": "0xabc",
            "routing": {"Direct": {"ip": "1.2.3.4", "ports": {"ws": 9001, "tcp": 9000}}},
        }
    )

    assert isinstance(identity.routing, DirectRouting)
    assert identity.routing.ip == "1.2.3.4"
    assert identity.routing.port_labels == ["tcp", "ws"]


def test_identity_parses_router_list() -> None:
    identity = NodeIdentity.from_payload(
        {"name": "a.os", "networking_key": "k", "routing": {"Routers": ["r1.os", "r2.os"]}}
    )

    assert isinstance(identity.routing, RoutedRouting)
    assert identity.routing.router_count == 2


@pytest.mark.parametrize(
    "payload",
    [
        None,
        {"name": "a.os", "routing": {"Routers": []}},
        {"name": "a.os", "networking_key": "k", "routing": {"Both": {}}},
        {"name": "a.os", "networking_key": "k", "routing": {"Direct": {"ports": {"tcp": "x"}}}},
    ],
)
def test_identity_rejects_malformed_payloads(payload) -> None:
    with pytest.raises(ValueError):
        NodeIdentity.from_payload(payload)


def test_identical_provider_configs_collapse_in_a_set() -> None:
    raw = [
        {"chain_id": 1, "trusted": True, "provider": {"RpcUrl": "wss://a"}},
        {"provider": {"RpcUrl": "wss://a"}, "trusted": True, "chain_id": 1},
        {"chain_id": 1, "trusted": False, "provider": {"RpcUrl": "wss://b"}},
    ]

    providers = {ProviderConfig.from_payload(item) for item in raw}

    assert len(providers) == 2
    assert {provider.chain_id for provider in providers} == {1}


def test_provider_requires_integer_chain_id() -> None:
    with pytest.raises(ValueError):
        ProviderConfig.from_payload({"chain_id": "1"})
    with pytest.raises(ValueError):
        ProviderConfig.from_payload({"chain_id": True})


def test_subscription_state_sums_lists_and_maps() -> None:
    state = SubscriptionState.from_payload(
        {
            "active_subscriptions": {"1": ["s1", "s2"], "our@app:pkg:pub": {"7": None, "8": "x"}},
            "outstanding_requests": [11, 12, 13],
        }
    )

    assert state.subscription_count == 4
    assert state.outstanding_count == 3


def test_subscription_state_tolerates_missing_sections() -> None:
    state = SubscriptionState.from_payload({})

    assert state.subscription_count == 0
    assert state.outstanding_count == 0


def test_naming_state_decodes_contract_address() -> None:
    naming = NamingState.from_payload(
        {
            "chain_id": 10,
            "contract_address": "0xDEAD" + "00" * 16 + "BEEF",
            "names": {"0x01": "a.os"},
            "nodes": {"a.os": {"public_key": "k"}, "b.os": {}},
            "last_block": 123,
        }
    )

    assert naming.contract_address_hex == "0xdead" + "00" * 16 + "beef"
    assert naming.resolvable_name_count == 2
    assert naming.last_block == 123


def test_contract_address_accepts_byte_list() -> None:
    assert parse_contract_address(list(range(20))) == bytes(range(20))


@pytest.mark.parametrize("value", ["0x1234", "0xzz" * 10, 42, [300] * 20])
def test_contract_address_rejects_bad_values(value) -> None:
    with pytest.raises(ValueError):
        parse_contract_address(value)

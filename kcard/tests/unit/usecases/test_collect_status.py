from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

import pytest

from kcard.adapters.api_errors import ApiTimeoutError
from kcard.adapters.publisher_memory import CardPublisher
from kcard.domain.errors import FetchError, ParseFailure
from kcard.domain.models import RenderedCard
from kcard.usecases.collect_status import CollectStatus
from kcard.usecases.collectors import (
    CollectIdentity,
    CollectNaming,
    CollectPeers,
    CollectProcessCount,
    CollectProviders,
    CollectSubscriptions,
)
from kcard.usecases.refresh_card import RefreshCard

CALL_ORDER = [
    "get_peer",
    "get_peers",
    "get_providers",
    "get_state",
    "process_count",
    "get_naming_state",
]
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def _collect(node, naming) -> CollectStatus:
    return CollectStatus(
        identity=CollectIdentity(peer_port=node, node_name="ochocinco.os"),
        peers=CollectPeers(peer_port=node),
        providers=CollectProviders(provider_port=node),
        subscriptions=CollectSubscriptions(provider_port=node),
        processes=CollectProcessCount(process_port=node),
        naming=CollectNaming(naming_port=naming),
    )


class _RendererStub:
    def __init__(self) -> None:
        self.calls: List[tuple] = []

    def render(self, node_name: str, report: str, now: datetime) -> bytes:
        self.calls.append((node_name, report, now))
        return b"png-bytes"


class _PublisherStub:
    def __init__(self) -> None:
        self.cards: List[RenderedCard] = []

    def publish(self, card: RenderedCard) -> None:
        self.cards.append(card)

    def current(self) -> Optional[RenderedCard]:
        return self.cards[-1] if self.cards else None


def test_collect_status_calls_collectors_in_fixed_order(stub_node, stub_naming, snapshot) -> None:
    result = _collect(stub_node, stub_naming)()

    assert stub_node.calls == CALL_ORDER
    assert result == snapshot


@pytest.mark.parametrize("failing", CALL_ORDER)
def test_single_failure_aborts_cycle_without_render(stub_node, stub_naming, failing) -> None:
    stub_node.fail[failing] = ApiTimeoutError("Timeout contacting node")
    renderer, publisher = _RendererStub(), _PublisherStub()
    refresh = RefreshCard(
        collect_status=_collect(stub_node, stub_naming),
        renderer=renderer,
        publisher=publisher,
        clock=lambda: NOW,
    )

    with pytest.raises(FetchError):
        refresh()

    assert stub_node.calls == CALL_ORDER[: CALL_ORDER.index(failing) + 1]
    assert renderer.calls == []
    assert publisher.cards == []


def test_refresh_renders_report_and_publishes(stub_node, stub_naming) -> None:
    renderer, publisher = _RendererStub(), _PublisherStub()
    refresh = RefreshCard(
        collect_status=_collect(stub_node, stub_naming),
        renderer=renderer,
        publisher=publisher,
        clock=lambda: NOW,
    )

    card = refresh()

    node_name, report, now = renderer.calls[0]
    assert node_name == "ochocinco.os"
    assert report.startswith("...is running 42 processes\n")
    assert now == NOW
    assert publisher.cards == [card]
    assert card.data == b"png-bytes"
    assert card.rendered_at == NOW


def test_failed_cycle_keeps_previous_card_live(stub_node, stub_naming) -> None:
    publisher = CardPublisher()
    refresh = RefreshCard(
        collect_status=_collect(stub_node, stub_naming),
        renderer=_RendererStub(),
        publisher=publisher,
        clock=lambda: NOW,
    )
    first = refresh()

    stub_node.fail["get_naming_state"] = ValueError("naming.chain_id: expected integer")
    with pytest.raises(ParseFailure):
        refresh()

    assert publisher.current() is first
    assert publisher.version == 1

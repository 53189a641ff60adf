"""Canonical text report rendered from a ``StatusSnapshot``."""

from __future__ import annotations

from typing import Iterable

from kcard.domain.models import DirectRouting, Routing, StatusSnapshot

CHAIN_IDS_PREFIX = "   for chain IDs "
CHAIN_IDS_SEPARATOR = ",\n" + " " * len(CHAIN_IDS_PREFIX)


def describe_routing(routing: Routing) -> str:
    if isinstance(routing, DirectRouting):
        return f"direct routing on {', '.join(routing.port_labels)}"
    return f"indirect routing using {routing.router_count} routers"


def format_chain_ids(chain_ids: Iterable[int]) -> str:
    """Join distinct chain ids ascending, one per line, aligned under the first."""
    return CHAIN_IDS_SEPARATOR.join(str(chain_id) for chain_id in sorted(set(chain_ids)))


def format_report(snapshot: StatusSnapshot) -> str:
    """Return the multi-line report drawn below the node name on the card.

    The output depends only on ``snapshot``; formatting the same snapshot twice
    yields identical text.
    """
    lines = [
        f"...is running {snapshot.process_count} processes",
        "...using public key",
        f"   {snapshot.identity.networking_key}",
        f"...with {describe_routing(snapshot.identity.routing)}",
        f"...with {snapshot.provider_count} eth providers",
        f"{CHAIN_IDS_PREFIX}{format_chain_ids(snapshot.chain_ids)}",
        f"...and has {snapshot.subscriptions.subscription_count} active eth subscriptions.",
        "",
        f"connected to {snapshot.peer_count} peers out of "
        f"{snapshot.naming.resolvable_name_count} known",
        f"from kimap {snapshot.naming.contract_address_hex}",
    ]
    return "\n".join(lines)


__all__ = ["describe_routing", "format_chain_ids", "format_report"]

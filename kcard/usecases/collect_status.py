"""Aggregator use case merging every collector into one ``StatusSnapshot``."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from kcard.domain.models import StatusSnapshot
from kcard.usecases.collectors import (
    CollectIdentity,
    CollectNaming,
    CollectPeers,
    CollectProcessCount,
    CollectProviders,
    CollectSubscriptions,
)

LOGGER = logging.getLogger(__name__)


@dataclass
class CollectStatus:
    """Run collectors in fixed order and stop at the first ``FetchError``.

    Order: identity, peers, providers, subscriptions, processes, naming. A
    failure propagates unchanged so no partial snapshot is ever built.
    """

    identity: CollectIdentity
    peers: CollectPeers
    providers: CollectProviders
    subscriptions: CollectSubscriptions
    processes: CollectProcessCount
    naming: CollectNaming

    def __call__(self) -> StatusSnapshot:
        identity = self.identity()
        LOGGER.debug("identity: %s via %s", identity.name, type(identity.routing).__name__)
        peers = self.peers()
        LOGGER.debug("peers: %d connected", len(peers))
        providers = self.providers()
        LOGGER.debug("providers: %d configured", len(providers))
        subscriptions = self.subscriptions()
        LOGGER.debug(
            "subscriptions: %d active, %d outstanding requests",
            subscriptions.subscription_count,
            subscriptions.outstanding_count,
        )
        process_count = self.processes()
        LOGGER.debug("processes: %d running", process_count)
        naming = self.naming()
        LOGGER.debug(
            "naming: %d names at block %d", naming.resolvable_name_count, naming.last_block
        )

        return StatusSnapshot(
            node_name=self.identity.node_name,
            identity=identity,
            peers=peers,
            providers=providers,
            subscriptions=subscriptions,
            process_count=process_count,
            naming=naming,
        )


__all__ = ["CollectStatus"]

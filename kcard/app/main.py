"""Composition root: wire adapters and use cases, then serve the card.

Startup order: logging, settings, assets (fatal on failure), adapters,
use cases, scheduler. The scheduler thread starts with the web app and is
stopped when the app shuts down.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Optional

import uvicorn
from fastapi import FastAPI

from kcard.adapters.asset_store import CardAssets, load_assets
from kcard.adapters.card_renderer import MatplotlibCardRenderer
from kcard.adapters.node_rest import NamingRestAdapter, NodeRestAdapter
from kcard.adapters.publisher_memory import CardPublisher
from kcard.app.scheduler import RefreshScheduler
from kcard.app.settings import KcardSettings
from kcard.domain.errors import AssetLoadError
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
from kcard.utils import logging as logging_utils
from kcard.web.app import create_app

LOGGER = logging.getLogger(__name__)


@dataclass
class Service:
    """Wired service parts, exposed for the entry point and tests."""

    settings: KcardSettings
    publisher: CardPublisher
    scheduler: RefreshScheduler
    app: FastAPI


def build_collect_status(node: NodeRestAdapter, node_name: str) -> CollectStatus:
    return CollectStatus(
        identity=CollectIdentity(peer_port=node, node_name=node_name),
        peers=CollectPeers(peer_port=node),
        providers=CollectProviders(provider_port=node),
        subscriptions=CollectSubscriptions(provider_port=node),
        processes=CollectProcessCount(process_port=node),
        naming=CollectNaming(naming_port=NamingRestAdapter(node)),
    )


def build_service(settings: KcardSettings, assets: Optional[CardAssets] = None) -> Service:
    """Wire every component; loads assets unless they are supplied."""
    if assets is None:
        assets = load_assets(settings.background_path, settings.font_path)
    node = NodeRestAdapter(settings.node_url, request_timeout_s=settings.request_timeout_s)
    publisher = CardPublisher()
    refresh = RefreshCard(
        collect_status=build_collect_status(node, settings.node_name),
        renderer=MatplotlibCardRenderer(assets),
        publisher=publisher,
    )
    scheduler = RefreshScheduler(refresh, settings.interval_s)
    app = create_app(publisher, on_startup=scheduler.start, on_shutdown=scheduler.stop)
    return Service(settings=settings, publisher=publisher, scheduler=scheduler, app=app)


def main() -> int:
    logging_utils.configure_root()
    settings = KcardSettings.from_env()
    LOGGER.info(
        "Starting kcard for %s (node %s, profile %s, every %.0fs)",
        settings.node_name,
        settings.node_url,
        settings.profile,
        settings.interval_s,
    )
    try:
        service = build_service(settings)
    except AssetLoadError as exc:
        LOGGER.critical("Cannot load card assets: %s", exc)
        return 1
    uvicorn.run(service.app, host=settings.host, port=settings.port, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())

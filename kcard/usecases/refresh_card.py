"""Use case for one refresh cycle: collect, format, render, publish."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable

from kcard.domain.models import RenderedCard
from kcard.domain.ports import CardRendererPort, PublisherPort
from kcard.domain.report import format_report
from kcard.usecases.collect_status import CollectStatus

LOGGER = logging.getLogger(__name__)


def local_now() -> datetime:
    """Timezone-aware local time used for the card caption."""
    return datetime.now().astimezone()


@dataclass
class RefreshCard:
    """Build and publish a fresh card; any ``FetchError`` aborts before rendering."""

    collect_status: CollectStatus
    renderer: CardRendererPort
    publisher: PublisherPort
    clock: Callable[[], datetime] = field(default=local_now)

    def __call__(self) -> RenderedCard:
        snapshot = self.collect_status()
        report = format_report(snapshot)
        now = self.clock()
        data = self.renderer.render(snapshot.node_name, report, now)
        card = RenderedCard(data=data, node_name=snapshot.node_name, rendered_at=now)
        self.publisher.publish(card)
        LOGGER.info("Card for %s rendered at %s", card.node_name, now.isoformat(timespec="seconds"))
        return card


__all__ = ["RefreshCard", "local_now"]

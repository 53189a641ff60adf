"""In-memory ``PublisherPort`` shared between the scheduler and the web app."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from kcard.domain.models import RenderedCard

LOGGER = logging.getLogger(__name__)

CARD_PATH = "/kcard.png"


class CardPublisher:
    """Hold the most recent card; ``publish`` swaps it atomically for readers.

    Cards are immutable, so a reader that obtained the previous card keeps
    serving consistent bytes while a new one is published.
    """

    def __init__(self, path: str = CARD_PATH) -> None:
        self.path = path
        self._lock = threading.Lock()
        self._current: Optional[RenderedCard] = None
        self._version = 0

    def publish(self, card: RenderedCard) -> None:
        with self._lock:
            self._current = card
            self._version += 1
            version = self._version
        LOGGER.info("Published %s v%d (%d bytes)", self.path, version, len(card.data))

    def current(self) -> Optional[RenderedCard]:
        with self._lock:
            return self._current

    @property
    def version(self) -> int:
        with self._lock:
            return self._version


__all__ = ["CARD_PATH", "CardPublisher"]

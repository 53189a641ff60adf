from __future__ import annotations

from datetime import datetime
from typing import FrozenSet, List, Optional, Protocol

from kcard.domain.models import (
    NamingState,
    NodeIdentity,
    ProviderConfig,
    RenderedCard,
    SubscriptionState,
)


# ---- Ports (Hexagonal boundaries) ----
class PeerRegistryPort(Protocol):
    """Identity and connectivity queries against the networking process."""

    def get_peer(self, node_name: str) -> Optional[NodeIdentity]: ...  # None when unknown
    def get_peers(self) -> List[str]: ...  # display names of connected peers


class ProviderRegistryPort(Protocol):
    """Provider configuration and subscription state of the eth process."""

    def get_providers(self) -> FrozenSet[ProviderConfig]: ...
    def get_state(self) -> SubscriptionState: ...


class ProcessRegistryPort(Protocol):
    """Kernel debug queries."""

    def process_count(self) -> int: ...


class NamingPort(Protocol):
    """Naming-resolution index state."""

    def get_state(self, block: int = 0) -> NamingState: ...


class CardRendererPort(Protocol):
    """Compose the status card image."""

    def render(self, node_name: str, report: str, now: datetime) -> bytes: ...


class PublisherPort(Protocol):
    """Holder of the currently served card."""

    def publish(self, card: RenderedCard) -> None: ...
    def current(self) -> Optional[RenderedCard]: ...

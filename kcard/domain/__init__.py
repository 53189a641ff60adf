"""Domain package exports for value objects, errors and report formatting."""

from .errors import (
    AssetLoadError,
    FetchError,
    NotFoundFailure,
    ParseFailure,
    TransportFailure,
)
from .models import (
    DirectRouting,
    NamingState,
    NodeIdentity,
    ProviderConfig,
    RenderedCard,
    RoutedRouting,
    StatusSnapshot,
    SubscriptionState,
)
from .report import format_report

__all__ = [
    "AssetLoadError",
    "DirectRouting",
    "FetchError",
    "NamingState",
    "NodeIdentity",
    "NotFoundFailure",
    "ParseFailure",
    "ProviderConfig",
    "RenderedCard",
    "RoutedRouting",
    "StatusSnapshot",
    "SubscriptionState",
    "TransportFailure",
    "format_report",
]

"""
app/connectors package marker.
"""

from app.connectors.base import (
    ConnectorRequestError,
    DirectTransport,
    MissingConfigurationError,
    ProxyTransport,
    Transport,
)
from app.connectors.commerce_connector import CommerceConnector, SearchFilter, build_search_url
from app.connectors.licensing_client import (
    AccountUpdateResult,
    LicensingClient,
    SubscriptionStatus,
    UsageResult,
)

__all__ = [
    "AccountUpdateResult",
    "CommerceConnector",
    "ConnectorRequestError",
    "DirectTransport",
    "LicensingClient",
    "MissingConfigurationError",
    "ProxyTransport",
    "SearchFilter",
    "SubscriptionStatus",
    "Transport",
    "UsageResult",
    "build_search_url",
]

"""
app/services package marker.
"""

from app.services.connector_service import (
    ConnectorService,
    DataRequest,
    UserFacingError,
    get_connector_service,
    get_licensing_client,
)
from app.services.insight_service import InsightService, get_insight_service

__all__ = [
    "ConnectorService",
    "DataRequest",
    "InsightService",
    "UserFacingError",
    "get_connector_service",
    "get_insight_service",
    "get_licensing_client",
]

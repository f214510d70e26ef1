"""
app/schemas package marker.
"""

from app.schemas.connector import DataRequestBody, SchemaRequest
from app.schemas.insights import InsightRequestBody
from app.schemas.licensing import ConnectedAccountRequest, LicensingUserRequest

__all__ = [
    "ConnectedAccountRequest",
    "DataRequestBody",
    "InsightRequestBody",
    "LicensingUserRequest",
    "SchemaRequest",
]

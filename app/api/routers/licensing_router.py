"""
app/api/routers/licensing_router.py

Licensing and metering endpoints backed by the external licensing service.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from app.connectors import LicensingClient
from app.schemas.licensing import ConnectedAccountRequest, LicensingUserRequest
from app.services.connector_service import get_licensing_client

router = APIRouter(prefix="/licensing", tags=["licensing"])


@router.post("/verify")
def verify_user(
    request: LicensingUserRequest,
    client: LicensingClient = Depends(get_licensing_client),
) -> dict[str, Any]:
    return client.verify_user(request.email, request.sku).to_dict()


@router.post("/api-calls")
def increment_api_calls(
    request: LicensingUserRequest,
    client: LicensingClient = Depends(get_licensing_client),
) -> dict[str, Any]:
    return client.increment_api_calls(request.email, request.sku).to_dict()


@router.post("/connected-accounts")
def update_connected_accounts(
    request: ConnectedAccountRequest,
    client: LicensingClient = Depends(get_licensing_client),
) -> dict[str, Any]:
    return client.update_connected_accounts(
        request.email,
        request.account_name,
        request.account_identifier,
        request.sku,
    ).to_dict()

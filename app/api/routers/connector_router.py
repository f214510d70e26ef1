"""
app/api/routers/connector_router.py

Host connector protocol endpoints.

GET  /connector/config      getConfig
POST /connector/schema      getSchema
POST /connector/data        getData
GET  /connector/auth/type   getAuthType
GET  /connector/auth/valid  isAuthValid
POST /connector/auth/reset  resetAuth

A `UserFacingError` becomes HTTP 400 with
`{"error": {"text": ..., "debugText": ...}}` so the host can show the text
to the end user.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, status

from app.schemas.connector import DataRequestBody, SchemaRequest
from app.services.connector_service import (
    GENERIC_ERROR_TEXT,
    ConnectorService,
    UserFacingError,
    get_connector_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/connector", tags=["connector"])


def _bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


@router.get("/config")
def get_config(
    service: ConnectorService = Depends(get_connector_service),
) -> dict[str, Any]:
    return service.get_config()


@router.post("/schema")
def get_schema(
    request: SchemaRequest | None = None,
    service: ConnectorService = Depends(get_connector_service),
) -> dict[str, Any]:
    return service.get_schema()


@router.post("/data")
def get_data(
    request: DataRequestBody,
    service: ConnectorService = Depends(get_connector_service),
) -> dict[str, Any]:
    """
    Return `{schema, rows}` for the requested fields and date range.
    """

    try:
        return service.get_data(request.to_data_request())
    except UserFacingError as exc:
        logger.warning("getData aborted text=%r debug=%r", exc.text, exc.debug_text)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": exc.to_dict()},
        ) from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Unhandled getData failure")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"error": {"text": GENERIC_ERROR_TEXT, "debugText": None}},
        ) from exc


@router.get("/auth/type")
def get_auth_type(
    service: ConnectorService = Depends(get_connector_service),
) -> dict[str, str]:
    return service.get_auth_type()


@router.get("/auth/valid")
def is_auth_valid(
    authorization: str | None = Header(default=None),
    service: ConnectorService = Depends(get_connector_service),
) -> dict[str, bool]:
    return {"valid": service.is_auth_valid(_bearer_token(authorization))}


@router.post("/auth/reset", status_code=status.HTTP_204_NO_CONTENT)
def reset_auth(
    service: ConnectorService = Depends(get_connector_service),
) -> None:
    service.reset_auth()

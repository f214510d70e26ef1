"""
app/schemas/licensing.py

Request schemas for licensing and metering operations.
"""

from __future__ import annotations

from pydantic import BaseModel


class LicensingUserRequest(BaseModel):
    email: str
    sku: str | None = None


class ConnectedAccountRequest(BaseModel):
    email: str | None = None
    account_name: str | None = None
    account_identifier: str | None = None
    sku: str | None = None

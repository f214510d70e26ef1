"""
app/connectors/licensing_client.py

Client for the licensing/metering backend.

Every call is soft-failing: transport and decode problems are reported in the
returned result's `error` field instead of being raised, and the caller
decides how to present them.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any

import requests

from app.config import ExternalHTTPSettings, LicensingSettings
from app.logging_utils import log_event

logger = logging.getLogger(__name__)

_LIMIT_FIELDS = {
    "token_limit": "token_limit",
    "accounts_limit": "accounts_limit",
    "connected_accounts_count": "connectedAccountsCount",
    "used_api_calls": "usedApiCalls",
    "api_calls_limit": "apicalls_limit",
}


def _compact(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


@dataclass(frozen=True)
class SubscriptionStatus:
    """
    Access decision for one user and product.
    """

    grant_access: bool
    token_limit: int | None = None
    accounts_limit: int | None = None
    connected_accounts_count: int | None = None
    used_api_calls: int | None = None
    api_calls_limit: int | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass(frozen=True)
class UsageResult:
    incremented: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


@dataclass(frozen=True)
class AccountUpdateResult:
    updated: bool = False
    created: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _compact(asdict(self))


class LicensingError(RuntimeError):
    """
    Internal signal for a failed licensing call; never leaves this module.
    """


class LicensingClient:
    """
    Verifies subscriptions and meters usage against the licensing backend.
    """

    def __init__(
        self,
        *,
        settings: LicensingSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds

    @property
    def enabled(self) -> bool:
        return self._settings.enabled

    @property
    def default_sku(self) -> str | None:
        return self._settings.sku

    def verify_user(self, email: str, sku: str | None = None) -> SubscriptionStatus:
        """
        Decide whether `email` may use the product identified by `sku`.

        Free access grants without limits; an active trial or an active paid
        subscription grants with the backend's limits; anything else denies.
        """

        try:
            result = self._post("api/verifyUser", {"email": email, "sku": sku or self.default_sku})
        except LicensingError as exc:
            return SubscriptionStatus(grant_access=False, error=str(exc))

        if not isinstance(result, dict):
            return SubscriptionStatus(grant_access=False)

        if result.get("free_access"):
            return SubscriptionStatus(grant_access=True)

        trial = result.get("trialStatus") or {}
        subscription = result.get("stripeSubscriptionStatus") or {}
        has_trial = isinstance(trial, dict) and bool(trial.get("trial"))
        has_subscription = isinstance(subscription, dict) and bool(
            subscription.get("hasActiveSubscription")
        )
        if has_trial or has_subscription:
            limits = {field: result.get(source) for field, source in _LIMIT_FIELDS.items()}
            return SubscriptionStatus(grant_access=True, **limits)

        return SubscriptionStatus(grant_access=False)

    def increment_api_calls(self, email: str, sku: str | None = None) -> UsageResult:
        """
        Record one metered call for the user.
        """

        try:
            self._post(
                "api/increment-api-calls",
                {"email": email, "sku": sku or self.default_sku},
                expect_json=False,
            )
        except LicensingError as exc:
            return UsageResult(error=str(exc))
        return UsageResult(incremented=True)

    def update_connected_accounts(
        self,
        email: str | None,
        account_name: str | None,
        account_identifier: str | None,
        sku: str | None = None,
    ) -> AccountUpdateResult:
        """
        Register or refresh a connected merchant account for the user.
        """

        if not email or not account_name or not account_identifier:
            return AccountUpdateResult(error="Missing required fields")

        try:
            result = self._post(
                "api/updateConnectedAccounts",
                {
                    "email": email,
                    "account_name": account_name,
                    "account_identifier": account_identifier,
                    "sku": sku or self.default_sku,
                },
            )
        except LicensingError as exc:
            return AccountUpdateResult(error=str(exc))

        if not isinstance(result, dict):
            return AccountUpdateResult(error="Unexpected licensing response.")
        if result.get("updated"):
            return AccountUpdateResult(updated=True)
        if result.get("created"):
            return AccountUpdateResult(created=True)
        if result.get("error"):
            return AccountUpdateResult(error=str(result["error"]))
        return AccountUpdateResult(error="Unexpected licensing response.")

    def _post(self, path: str, body: dict[str, Any], *, expect_json: bool = True) -> Any:
        if not self.enabled:
            raise LicensingError("Licensing backend is not configured.")

        url = f"{self._settings.base_url.rstrip('/')}/{path}"
        try:
            response = self._session.post(
                url,
                json=body,
                headers={
                    "Authorization": f"Bearer {self._settings.api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self._timeout_seconds,
            )
        except requests.RequestException as exc:
            log_event(logger, logging.ERROR, "licensing_request_failed", path=path, error=str(exc))
            raise LicensingError(f"Licensing request failed: {exc}") from exc

        log_event(logger, logging.DEBUG, "licensing_response", path=path, status=response.status_code)
        if not expect_json:
            if response.status_code != 200:
                raise LicensingError(f"Licensing backend returned HTTP {response.status_code}.")
            return None

        try:
            return response.json()
        except ValueError as exc:
            log_event(logger, logging.ERROR, "licensing_invalid_json", path=path, status=response.status_code)
            raise LicensingError("Licensing response was not valid JSON.") from exc

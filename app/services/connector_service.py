"""
app/services/connector_service.py

Reporting-host connector protocol: config, schema, data and auth delegation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Callable

from app.config import (
    CommerceSettings,
    ExternalHTTPSettings,
    get_commerce_settings,
    get_external_http_settings,
    get_licensing_settings,
)
from app.connectors import (
    CommerceConnector,
    ConnectorRequestError,
    DirectTransport,
    LicensingClient,
    MissingConfigurationError,
    ProxyTransport,
    Transport,
)
from app.domain import CART_TRIGGER_FIELD, FIELD_SPECS, DateRange, resolve_fields
from app.mappers import RowMapper

logger = logging.getLogger(__name__)

GENERIC_ERROR_TEXT = (
    "The connector has encountered an unrecoverable error. Please try again later, "
    "or file an issue if this error persists."
)

AUTH_TYPE = "OAUTH2"


class UserFacingError(Exception):
    """
    Fatal error that aborts the request and is shown to the end user.
    """

    def __init__(self, text: str, *, debug_text: str | None = None) -> None:
        super().__init__(text)
        self.text = text
        self.debug_text = debug_text

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "debugText": self.debug_text}


@dataclass(frozen=True)
class DataRequest:
    """
    One `getData` call from the host.
    """

    field_ids: tuple[str, ...]
    base_url: str | None
    api_token: str | None
    date_range: DateRange
    user_email: str | None = None


def _text_input(name: str, display_name: str, help_text: str, placeholder: str) -> dict[str, Any]:
    return {
        "type": "TEXTINPUT",
        "name": name,
        "displayName": display_name,
        "helpText": help_text,
        "placeholder": placeholder,
        "parameterControl": {"allowOverride": True},
    }


ConnectorFactory = Callable[..., CommerceConnector]


class ConnectorService:
    """
    Answers the host's connector calls for one commerce backend.
    """

    def __init__(
        self,
        *,
        transport: Transport,
        mapper: RowMapper | None = None,
        licensing: LicensingClient | None = None,
        connector_factory: ConnectorFactory = CommerceConnector,
    ) -> None:
        self._transport = transport
        self._mapper = mapper or RowMapper()
        self._licensing = licensing
        self._connector_factory = connector_factory

    def get_config(self) -> dict[str, Any]:
        return {
            "configParams": [
                _text_input(
                    "magentoBaseUrl",
                    "Magento Base URL",
                    "Enter the base URL of your Magento store. Example: https://your-magento-site.com",
                    "https://your-magento-site.com",
                ),
                _text_input(
                    "apiToken",
                    "Magento API Token",
                    "Enter your Magento Admin API Token.",
                    "Paste your API token here",
                ),
            ],
            "dateRangeRequired": True,
        }

    def get_schema(self) -> dict[str, Any]:
        return {"schema": [spec.to_host_dict() for spec in FIELD_SPECS]}

    def get_data(self, request: DataRequest) -> dict[str, Any]:
        """
        Fetch and map rows for the requested fields.

        Orders are always fetched; abandoned carts only when `cart_id` is
        requested. Order rows come first, each group in source order. Any
        failure aborts the whole request with a `UserFacingError`.
        """

        field_ids = list(request.field_ids)
        requested_fields = resolve_fields(field_ids)

        try:
            connector = self._connector_factory(
                base_url=request.base_url,
                api_token=request.api_token,
                transport=self._transport,
            )
        except MissingConfigurationError as exc:
            raise UserFacingError(str(exc)) from exc

        self._check_access(request.user_email)

        try:
            orders = connector.fetch_orders(request.date_range)
            cart_rows: list[list[Any]] = []
            if CART_TRIGGER_FIELD in field_ids:
                carts = connector.fetch_abandoned_carts(request.date_range)
                cart_rows = self._mapper.map_abandoned_carts(field_ids, carts)
            order_rows = self._mapper.map_orders(field_ids, orders)
        except ConnectorRequestError as exc:
            logger.error("Commerce fetch failed error=%s", exc)
            raise UserFacingError(
                GENERIC_ERROR_TEXT,
                debug_text=f"Error fetching data from API. Exception details: {exc}",
            ) from exc
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            logger.exception("Row mapping failed")
            raise UserFacingError(
                GENERIC_ERROR_TEXT,
                debug_text=f"Error mapping API data. Exception details: {exc!r}",
            ) from exc

        rows = order_rows + cart_rows
        logger.info(
            "getData completed fields=%d order_rows=%d cart_rows=%d",
            len(field_ids),
            len(order_rows),
            len(cart_rows),
        )
        self._meter_call(request.user_email)

        return {
            "schema": [spec.to_host_dict() for spec in requested_fields],
            "rows": [{"values": row} for row in rows],
        }

    def get_auth_type(self) -> dict[str, str]:
        """
        OAuth is run by the host; the connector only declares it.
        """

        return {"type": AUTH_TYPE}

    def is_auth_valid(self, access_token: str | None) -> bool:
        return bool(access_token and access_token.strip())

    def reset_auth(self) -> None:
        logger.info("Auth reset requested; host-managed OAuth tokens are cleared by the host.")

    def _check_access(self, user_email: str | None) -> None:
        if self._licensing is None or not self._licensing.enabled or not user_email:
            return

        status = self._licensing.verify_user(user_email)
        if status.error is not None:
            raise UserFacingError(
                "Unable to verify your subscription. Please try again later.",
                debug_text=status.error,
            )
        if not status.grant_access:
            raise UserFacingError("An active subscription is required to use this connector.")

    def _meter_call(self, user_email: str | None) -> None:
        if self._licensing is None or not self._licensing.enabled or not user_email:
            return

        usage = self._licensing.increment_api_calls(user_email)
        if usage.error is not None:
            logger.warning("API call metering failed error=%s", usage.error)


def build_transport(
    commerce_settings: CommerceSettings,
    http_settings: ExternalHTTPSettings,
) -> Transport:
    """
    Select the commerce transport configured for this process.
    """

    if commerce_settings.transport == "proxy" and commerce_settings.proxy_url:
        return ProxyTransport(proxy_url=commerce_settings.proxy_url, http_settings=http_settings)
    return DirectTransport(http_settings=http_settings)


@lru_cache(maxsize=1)
def get_licensing_client() -> LicensingClient:
    """
    Build and cache the licensing client.
    """

    return LicensingClient(
        settings=get_licensing_settings(),
        http_settings=get_external_http_settings(),
    )


@lru_cache(maxsize=1)
def get_connector_service() -> ConnectorService:
    """
    Build and cache the connector service.
    """

    http_settings = get_external_http_settings()
    return ConnectorService(
        transport=build_transport(get_commerce_settings(), http_settings),
        licensing=get_licensing_client(),
    )

from __future__ import annotations

import json

import pytest

from app.connectors import ConnectorRequestError, SubscriptionStatus, Transport, UsageResult
from app.domain import DateRange
from app.services.connector_service import (
    GENERIC_ERROR_TEXT,
    ConnectorService,
    DataRequest,
    UserFacingError,
)

ORDER = {
    "increment_id": "100000123",
    "grand_total": 59.99,
    "created_at": "2024-12-24 05:21:58",
    "billing_address": {"city": "Montréal", "region": "Québec"},
}
CART = {
    "id": 10131,
    "updated_at": "2024-12-24 05:36:57",
    "items_count": 2,
    "items": [{"price": 42.97}, {"price": 111.97}],
}


class FakeTransport(Transport):
    """
    Serves canned bodies per endpoint and records requested URLs.
    """

    name = "fake"

    def __init__(self, *, orders=None, carts=None, error: Exception | None = None) -> None:
        self._orders = orders if orders is not None else [ORDER]
        self._carts = carts if carts is not None else [CART]
        self._error = error
        self.urls: list[str] = []

    def get(self, url: str, headers: dict[str, str]) -> str:
        self.urls.append(url)
        if self._error is not None:
            raise self._error
        items = self._carts if "/carts/search" in url else self._orders
        return json.dumps({"items": items, "total_count": len(items)})


class FakeLicensing:
    def __init__(self, status: SubscriptionStatus, usage: UsageResult | None = None) -> None:
        self.enabled = True
        self._status = status
        self._usage = usage or UsageResult(incremented=True)
        self.verified: list[str] = []
        self.metered: list[str] = []

    def verify_user(self, email: str, sku: str | None = None) -> SubscriptionStatus:
        self.verified.append(email)
        return self._status

    def increment_api_calls(self, email: str, sku: str | None = None) -> UsageResult:
        self.metered.append(email)
        return self._usage


def _request(*field_ids: str, base_url="https://shop.example.com", api_token="token", user_email=None):
    return DataRequest(
        field_ids=field_ids,
        base_url=base_url,
        api_token=api_token,
        date_range=DateRange(start="2024-12-01", end="2024-12-31"),
        user_email=user_email,
    )


class TestGetData:
    def test_orders_only_when_cart_id_not_requested(self) -> None:
        transport = FakeTransport()
        service = ConnectorService(transport=transport)

        response = service.get_data(_request("order_id", "grand_total"))

        assert response["rows"] == [{"values": ["100000123", 59.99]}]
        assert len(transport.urls) == 1
        assert "/rest/V1/orders" in transport.urls[0]

    def test_order_rows_precede_cart_rows(self) -> None:
        transport = FakeTransport()
        service = ConnectorService(transport=transport)

        response = service.get_data(_request("order_id", "cart_id", "abandoned_total"))

        rows = [row["values"] for row in response["rows"]]
        assert len(transport.urls) == 2
        assert rows[0] == ["100000123", "", ""]
        assert rows[1][:2] == ["", 10131]
        assert rows[1][2] == pytest.approx(154.94)

    def test_schema_matches_requested_fields(self) -> None:
        service = ConnectorService(transport=FakeTransport())

        response = service.get_data(_request("city", "unknown_field", "created_at"))

        assert [field["name"] for field in response["schema"]] == ["city", "unknown_field", "created_at"]
        assert response["rows"] == [{"values": ["Montréal", "", "20241224"]}]

    def test_every_row_has_one_value_per_field(self) -> None:
        service = ConnectorService(
            transport=FakeTransport(orders=[ORDER, {"increment_id": "2"}], carts=[CART, CART])
        )

        response = service.get_data(_request("cart_id", "order_id", "province", "items_count"))

        assert len(response["rows"]) == 4
        assert all(len(row["values"]) == 4 for row in response["rows"])

    def test_missing_configuration_is_user_facing(self) -> None:
        transport = FakeTransport()
        service = ConnectorService(transport=transport)

        with pytest.raises(UserFacingError) as excinfo:
            service.get_data(_request("order_id", base_url=None))

        assert excinfo.value.text == "Magento Base URL and API Token must be configured."
        assert transport.urls == []

    def test_fetch_failure_is_user_facing_with_debug_text(self) -> None:
        service = ConnectorService(
            transport=FakeTransport(error=ConnectorRequestError("fake: unexpected HTTP status 500."))
        )

        with pytest.raises(UserFacingError) as excinfo:
            service.get_data(_request("order_id"))

        assert excinfo.value.text == GENERIC_ERROR_TEXT
        assert "unexpected HTTP status 500" in excinfo.value.debug_text
        assert excinfo.value.to_dict()["debugText"] == excinfo.value.debug_text

    def test_malformed_base_url_is_reported_as_fetch_error(self) -> None:
        transport = FakeTransport()
        service = ConnectorService(transport=transport)

        with pytest.raises(UserFacingError) as excinfo:
            service.get_data(_request("order_id", base_url="shop.example.com"))

        assert excinfo.value.text == GENERIC_ERROR_TEXT
        assert excinfo.value.debug_text.startswith("Error fetching data from API.")
        assert transport.urls == []


class TestLicensingGate:
    def test_denied_user_gets_no_data(self) -> None:
        transport = FakeTransport()
        licensing = FakeLicensing(SubscriptionStatus(grant_access=False))
        service = ConnectorService(transport=transport, licensing=licensing)

        with pytest.raises(UserFacingError, match="active subscription"):
            service.get_data(_request("order_id", user_email="a@example.com"))

        assert transport.urls == []
        assert licensing.metered == []

    def test_verification_error_is_user_facing(self) -> None:
        licensing = FakeLicensing(SubscriptionStatus(grant_access=False, error="timeout"))
        service = ConnectorService(transport=FakeTransport(), licensing=licensing)

        with pytest.raises(UserFacingError) as excinfo:
            service.get_data(_request("order_id", user_email="a@example.com"))

        assert excinfo.value.debug_text == "timeout"

    def test_granted_user_is_metered_after_fetch(self) -> None:
        licensing = FakeLicensing(SubscriptionStatus(grant_access=True))
        service = ConnectorService(transport=FakeTransport(), licensing=licensing)

        response = service.get_data(_request("order_id", user_email="a@example.com"))

        assert response["rows"] == [{"values": ["100000123"]}]
        assert licensing.verified == ["a@example.com"]
        assert licensing.metered == ["a@example.com"]

    def test_metering_failure_does_not_fail_request(self) -> None:
        licensing = FakeLicensing(
            SubscriptionStatus(grant_access=True),
            usage=UsageResult(error="Licensing backend returned HTTP 503."),
        )
        service = ConnectorService(transport=FakeTransport(), licensing=licensing)

        response = service.get_data(_request("order_id", user_email="a@example.com"))

        assert len(response["rows"]) == 1

    def test_gate_skipped_without_user_email(self) -> None:
        licensing = FakeLicensing(SubscriptionStatus(grant_access=False))
        service = ConnectorService(transport=FakeTransport(), licensing=licensing)

        response = service.get_data(_request("order_id"))

        assert len(response["rows"]) == 1
        assert licensing.verified == []


class TestProtocolMetadata:
    def test_config_declares_two_text_inputs_and_requires_dates(self) -> None:
        config = ConnectorService(transport=FakeTransport()).get_config()

        assert [param["name"] for param in config["configParams"]] == ["magentoBaseUrl", "apiToken"]
        assert all(param["type"] == "TEXTINPUT" for param in config["configParams"])
        assert config["dateRangeRequired"] is True

    def test_schema_lists_full_catalogue(self) -> None:
        schema = ConnectorService(transport=FakeTransport()).get_schema()["schema"]

        assert len(schema) == 11
        assert schema[0]["name"] == "order_id"

    def test_auth_delegation(self) -> None:
        service = ConnectorService(transport=FakeTransport())

        assert service.get_auth_type() == {"type": "OAUTH2"}
        assert service.is_auth_valid("abc") is True
        assert service.is_auth_valid(None) is False
        assert service.is_auth_valid("   ") is False

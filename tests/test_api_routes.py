from __future__ import annotations

import json

import pytest
from fastapi.testclient import TestClient

from app.config import ExternalHTTPSettings, LicensingSettings
from app.connectors import LicensingClient, Transport
from app import main as main_module
from app.main import create_app
from app.services.connector_service import ConnectorService, get_connector_service, get_licensing_client
from app.services.insight_service import InsightService, get_insight_service
from llm_insights import InsightResult, InsightVendor


class FakeTransport(Transport):
    name = "fake"

    def __init__(self) -> None:
        self.urls: list[str] = []

    def get(self, url: str, headers: dict[str, str]) -> str:
        self.urls.append(url)
        return json.dumps({"items": [{"increment_id": "100000123", "grand_total": "59.99"}]})


class FakeRequester:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def request_insight(self, payload, question=None, language=None) -> InsightResult:
        self.calls.append((payload, question, language))
        return InsightResult.success("Insight text")


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def requester() -> FakeRequester:
    return FakeRequester()


@pytest.fixture
def client(transport: FakeTransport, requester: FakeRequester) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_connector_service] = lambda: ConnectorService(transport=transport)
    app.dependency_overrides[get_insight_service] = lambda: InsightService(
        requesters={InsightVendor.CHATGPT: requester}
    )
    app.dependency_overrides[get_licensing_client] = lambda: LicensingClient(
        settings=LicensingSettings(),
        http_settings=ExternalHTTPSettings(),
    )
    return TestClient(app)


def test_healthcheck(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_config_and_schema(client: TestClient) -> None:
    config = client.get("/connector/config").json()
    schema = client.post("/connector/schema", json={"configParams": {}}).json()

    assert config["dateRangeRequired"] is True
    assert len(schema["schema"]) == 11


def test_get_data_returns_rows(client: TestClient, transport: FakeTransport) -> None:
    response = client.post(
        "/connector/data",
        json={
            "fields": [{"name": "order_id"}, {"name": "grand_total"}],
            "configParams": {"magentoBaseUrl": "https://shop.example.com", "apiToken": "t"},
            "dateRange": {"startDate": "2024-12-01", "endDate": "2024-12-31"},
        },
    )

    assert response.status_code == 200
    assert response.json()["rows"] == [{"values": ["100000123", 59.99]}]
    assert len(transport.urls) == 1


def test_get_data_user_facing_error_is_400(client: TestClient, transport: FakeTransport) -> None:
    response = client.post(
        "/connector/data",
        json={"fields": [{"name": "order_id"}], "dateRange": {"startDate": "2024-12-01"}},
    )

    assert response.status_code == 400
    error = response.json()["detail"]["error"]
    assert error["text"] == "Magento Base URL and API Token must be configured."
    assert transport.urls == []


def test_auth_endpoints(client: TestClient) -> None:
    assert client.get("/connector/auth/type").json() == {"type": "OAUTH2"}
    assert client.get("/connector/auth/valid", headers={"Authorization": "Bearer abc"}).json() == {"valid": True}
    assert client.get("/connector/auth/valid").json() == {"valid": False}
    assert client.post("/connector/auth/reset").status_code == 204


def test_insight_request_routes_to_vendor(client: TestClient, requester: FakeRequester) -> None:
    response = client.post(
        "/insights",
        json={"vendor": "chatgpt", "data": [{"a": 1}], "question": "Why?", "language": "German"},
    )

    assert response.json() == {"analysis": "Insight text"}
    assert requester.calls == [([{"a": 1}], "Why?", "German")]


def test_unavailable_vendor_is_error_body(client: TestClient) -> None:
    response = client.post("/insights", json={"vendor": "gemini", "data": [1]})

    assert response.status_code == 200
    assert "not available" in response.json()["error"]


def test_unknown_vendor_is_rejected(client: TestClient) -> None:
    assert client.post("/insights", json={"vendor": "llama", "data": [1]}).status_code == 422


def test_licensing_verify_without_backend(client: TestClient) -> None:
    body = client.post("/licensing/verify", json={"email": "a@example.com"}).json()

    assert body["grant_access"] is False
    assert "not configured" in body["error"]


def test_run_serves_the_app_with_uvicorn(monkeypatch) -> None:
    calls: list[tuple] = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda *args, **kwargs: calls.append((args, kwargs)))
    monkeypatch.setenv("HOST", "127.0.0.1")
    monkeypatch.setenv("PORT", "9001")

    main_module.run()

    assert calls == [(("app.main:app",), {"host": "127.0.0.1", "port": 9001})]

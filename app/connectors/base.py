"""
app/connectors/base.py

Transport abstraction and shared HTTP mechanics for outbound calls.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from app.config import ExternalHTTPSettings
from app.logging_utils import log_event

logger = logging.getLogger(__name__)


class ConnectorRequestError(RuntimeError):
    """
    Raised when an outbound call fails or returns an unusable body.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class MissingConfigurationError(ValueError):
    """
    Raised when required connection settings are absent.
    """


class Transport(ABC):
    """
    Issues one GET against a target URL and returns the raw response body.
    """

    name: str

    def __init__(
        self,
        *,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._session = session or requests.Session()
        self._timeout_seconds = http_settings.timeout_seconds

    @abstractmethod
    def get(self, url: str, headers: dict[str, str]) -> str:
        """
        Fetch `url` with `headers` and return the response text.
        """

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute a single request; no retries.
        """

        try:
            response = self._session.request(
                method=method,
                url=url,
                timeout=self._timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            log_event(
                logger,
                logging.ERROR,
                "outbound_request_failed",
                transport=self.name,
                method=method,
                error=str(exc),
            )
            raise ConnectorRequestError(f"{self.name}: request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            log_event(
                logger,
                logging.ERROR,
                "outbound_request_rejected",
                transport=self.name,
                method=method,
                status=response.status_code,
            )
            raise ConnectorRequestError(
                f"{self.name}: unexpected HTTP status {response.status_code}.",
                status_code=response.status_code,
            )
        return response


class DirectTransport(Transport):
    """
    Calls the commerce API directly.
    """

    name = "direct"

    def get(self, url: str, headers: dict[str, str]) -> str:
        return self._send("GET", url, headers=headers).text


class ProxyTransport(Transport):
    """
    Wraps the target call in a POST envelope for a forwarding endpoint.

    Used when the calling environment cannot reach merchant hosts directly.
    The proxy returns the target's body verbatim.
    """

    name = "proxy"

    def __init__(
        self,
        *,
        proxy_url: str,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(http_settings=http_settings, session=session)
        self._proxy_url = proxy_url

    def get(self, url: str, headers: dict[str, str]) -> str:
        envelope = {"url": url, "headers": headers, "method": "get"}
        return self._send("POST", self._proxy_url, json=envelope).text


def parse_json_body(source: str, body: str) -> Any:
    """
    Parse a response body, wrapping decode failures.
    """

    try:
        return json.loads(body)
    except ValueError as exc:
        raise ConnectorRequestError(f"{source}: response was not valid JSON.") from exc

"""
app/connectors/commerce_connector.py

Magento-style REST connector for orders and abandoned carts.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import requests

from app.connectors.base import (
    ConnectorRequestError,
    MissingConfigurationError,
    Transport,
    parse_json_body,
)
from app.domain.date_range import DateRange
from app.logging_utils import log_event

logger = logging.getLogger(__name__)

ORDERS_ENDPOINT = "/rest/V1/orders"
CARTS_ENDPOINT = "/rest/V1/carts/search"


@dataclass(frozen=True)
class SearchFilter:
    """
    One `searchCriteria` filter condition.
    """

    field: str
    value: str
    condition_type: str


FilterGroup = Sequence[SearchFilter]


def date_filter_group(date_range: DateRange) -> list[SearchFilter]:
    return [
        SearchFilter("created_at", date_range.start, "from"),
        SearchFilter("created_at", date_range.resolved_end, "to"),
    ]


def search_criteria_params(filter_groups: Sequence[FilterGroup]) -> list[tuple[str, str]]:
    """
    Flatten filter groups into ordered `searchCriteria[...]` query pairs.

    Filters within a group are OR-ed by the API; groups are AND-ed.
    """

    params: list[tuple[str, str]] = []
    for group_index, group in enumerate(filter_groups):
        for filter_index, search_filter in enumerate(group):
            prefix = f"searchCriteria[filter_groups][{group_index}][filters][{filter_index}]"
            params.append((f"{prefix}[field]", search_filter.field))
            params.append((f"{prefix}[value]", search_filter.value))
            params.append((f"{prefix}[condition_type]", search_filter.condition_type))
    return params


def build_search_url(base_url: str, endpoint: str, filter_groups: Sequence[FilterGroup]) -> str:
    """
    Build the full listing URL for a search endpoint.
    """

    target = base_url.rstrip("/") + endpoint
    try:
        prepared = requests.Request("GET", target, params=search_criteria_params(filter_groups)).prepare()
    except requests.RequestException as exc:
        raise ConnectorRequestError(f"Invalid commerce API URL {target!r}: {exc}") from exc
    return str(prepared.url)


class CommerceConnector:
    """
    Fetches orders and abandoned carts for one merchant store.
    """

    source = "commerce_api"

    def __init__(self, *, base_url: str | None, api_token: str | None, transport: Transport) -> None:
        if not base_url or not api_token:
            raise MissingConfigurationError("Magento Base URL and API Token must be configured.")
        self._base_url = base_url
        self._api_token = api_token
        self._transport = transport

    def fetch_orders(self, date_range: DateRange) -> list[dict[str, Any]]:
        """
        List orders created within the date range.
        """

        url = build_search_url(self._base_url, ORDERS_ENDPOINT, [date_filter_group(date_range)])
        return self._fetch_items(url, resource="orders")

    def fetch_abandoned_carts(self, date_range: DateRange) -> list[dict[str, Any]]:
        """
        List active carts created within the date range.
        """

        filter_groups = [
            date_filter_group(date_range),
            [SearchFilter("is_active", "1", "eq")],
        ]
        url = build_search_url(self._base_url, CARTS_ENDPOINT, filter_groups)
        return self._fetch_items(url, resource="abandoned_carts")

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_token}",
            "Content-Type": "application/json",
        }

    def _fetch_items(self, url: str, *, resource: str) -> list[dict[str, Any]]:
        body = self._transport.get(url, self._headers())
        payload = parse_json_body(self.source, body)
        items = payload.get("items") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            raise ConnectorRequestError(f"{self.source}: {resource} response has no items list.")

        log_event(
            logger,
            logging.INFO,
            "commerce_fetch_completed",
            resource=resource,
            transport=self._transport.name,
            items=len(items),
            total_count=payload.get("total_count"),
        )
        return items

"""
app/mappers/row_mapper.py

Translates commerce order and abandoned-cart records into host rows.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from app.logging_utils import log_event

logger = logging.getLogger(__name__)

# Default policy for values the source cannot provide.
UNKNOWN_FIELD_VALUE = ""
MISSING_NUMBER_VALUE = 0

Row = list[Any]
Record = Mapping[str, Any]


def format_host_date(timestamp: str | None) -> str:
    """
    Turn `YYYY-MM-DD HH:MM:SS` into the host's `YYYYMMDD` form.
    """

    if not timestamp:
        return UNKNOWN_FIELD_VALUE
    return str(timestamp).split(" ")[0].replace("-", "")


def to_number(value: Any) -> float:
    """
    Coerce a vendor numeric value, falling back to 0 when absent or invalid.
    """

    if value is None or value == "":
        return MISSING_NUMBER_VALUE
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning("Unparsable numeric value %r; defaulting to %s", value, MISSING_NUMBER_VALUE)
        return MISSING_NUMBER_VALUE


def to_int(value: Any) -> int:
    if value is None or value == "":
        return MISSING_NUMBER_VALUE
    try:
        return int(value)
    except (TypeError, ValueError):
        logger.warning("Unparsable integer value %r; defaulting to %s", value, MISSING_NUMBER_VALUE)
        return MISSING_NUMBER_VALUE


def applied_taxes_total(order: Record) -> float:
    """
    Sum every `applied_taxes[].amount` across the order items.
    """

    items = order.get("items")
    if not isinstance(items, list):
        return 0
    total = 0
    for item in items:
        taxes = item.get("applied_taxes") if isinstance(item, Mapping) else None
        if not isinstance(taxes, list):
            continue
        for tax in taxes:
            if isinstance(tax, Mapping):
                total += to_number(tax.get("amount"))
    return total


def abandoned_total(cart: Record) -> float:
    """
    Sum `items[].price` for an abandoned cart.

    Carts normally always carry `items`; a cart without them is reported and
    contributes 0 instead of failing the whole request.
    """

    items = cart.get("items")
    if not isinstance(items, list):
        log_event(
            logger,
            logging.WARNING,
            "abandoned_cart_missing_items",
            cart_id=cart.get("id"),
        )
        return 0
    return sum(to_number(item.get("price")) for item in items)


def _billing_value(order: Record, key: str) -> Any:
    address = order.get("billing_address")
    if not isinstance(address, Mapping):
        return UNKNOWN_FIELD_VALUE
    value = address.get(key)
    return UNKNOWN_FIELD_VALUE if value is None else value


_ORDER_EXTRACTORS: dict[str, Callable[[Record], Any]] = {
    "order_id": lambda order: order.get("increment_id", UNKNOWN_FIELD_VALUE),
    "customer_email": lambda order: order.get("customer_email", UNKNOWN_FIELD_VALUE),
    "grand_total": lambda order: to_number(order.get("grand_total")),
    "created_at": lambda order: format_host_date(order.get("created_at")),
    "applied_taxes_total": applied_taxes_total,
    "city": lambda order: _billing_value(order, "city"),
    "province": lambda order: _billing_value(order, "region"),
}

_CART_EXTRACTORS: dict[str, Callable[[Record], Any]] = {
    "cart_id": lambda cart: cart.get("id", UNKNOWN_FIELD_VALUE),
    "abandoned_at": lambda cart: format_host_date(cart.get("updated_at")),
    "items_count": lambda cart: to_int(cart.get("items_count")),
    "abandoned_total": abandoned_total,
}


class RowMapper:
    """
    Maps one source record into a row aligned with the requested field ids.
    """

    def map_order(self, field_ids: Sequence[str], order: Record) -> Row:
        return self._map(_ORDER_EXTRACTORS, field_ids, order)

    def map_abandoned_cart(self, field_ids: Sequence[str], cart: Record) -> Row:
        return self._map(_CART_EXTRACTORS, field_ids, cart)

    def map_orders(self, field_ids: Sequence[str], orders: Sequence[Record]) -> list[Row]:
        return [self.map_order(field_ids, order) for order in orders]

    def map_abandoned_carts(self, field_ids: Sequence[str], carts: Sequence[Record]) -> list[Row]:
        return [self.map_abandoned_cart(field_ids, cart) for cart in carts]

    @staticmethod
    def _map(
        extractors: Mapping[str, Callable[[Record], Any]],
        field_ids: Sequence[str],
        record: Record,
    ) -> Row:
        row: Row = []
        for field_id in field_ids:
            extractor = extractors.get(field_id)
            row.append(UNKNOWN_FIELD_VALUE if extractor is None else extractor(record))
        return row

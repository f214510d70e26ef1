"""
app/domain/fields.py

Fixed field catalogue exposed to the reporting host.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable


class FieldType(str, Enum):
    """
    Host data types. DATE uses the host's year-month-day convention.
    """

    TEXT = "TEXT"
    NUMBER = "NUMBER"
    DATE = "YEAR_MONTH_DAY"


class FieldConcept(str, Enum):
    DIMENSION = "DIMENSION"
    METRIC = "METRIC"


@dataclass(frozen=True)
class FieldSpec:
    """
    One named, typed column the host may request.
    """

    id: str
    name: str
    field_type: FieldType
    concept: FieldConcept = FieldConcept.DIMENSION
    is_reaggregatable: bool = False

    def to_host_dict(self) -> dict[str, Any]:
        """
        Serialize into the host's field definition shape.
        """

        semantics: dict[str, Any] = {
            "conceptType": self.concept.value,
            "semanticType": self.field_type.value,
        }
        if self.concept is FieldConcept.METRIC:
            semantics["isReaggregatable"] = self.is_reaggregatable
        return {
            "name": self.id,
            "label": self.name,
            "dataType": "STRING" if self.field_type is not FieldType.NUMBER else "NUMBER",
            "semantics": semantics,
        }


FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec("order_id", "Order ID", FieldType.TEXT),
    FieldSpec("customer_email", "Customer email", FieldType.TEXT),
    FieldSpec(
        "grand_total",
        "Grand total",
        FieldType.NUMBER,
        concept=FieldConcept.METRIC,
        is_reaggregatable=True,
    ),
    FieldSpec(
        "applied_taxes_total",
        "Tax Collected",
        FieldType.NUMBER,
        concept=FieldConcept.METRIC,
        is_reaggregatable=True,
    ),
    FieldSpec("created_at", "Order date", FieldType.DATE),
    FieldSpec("cart_id", "Cart ID", FieldType.NUMBER),
    FieldSpec("abandoned_at", "Abandoned At", FieldType.DATE),
    FieldSpec("items_count", "Items Count", FieldType.NUMBER, concept=FieldConcept.METRIC),
    FieldSpec(
        "abandoned_total",
        "Abandoned Total",
        FieldType.NUMBER,
        concept=FieldConcept.METRIC,
        is_reaggregatable=True,
    ),
    FieldSpec("province", "Province", FieldType.TEXT),
    FieldSpec("city", "City", FieldType.TEXT),
)

FIELD_SPECS_BY_ID: dict[str, FieldSpec] = {spec.id: spec for spec in FIELD_SPECS}

CART_TRIGGER_FIELD = "cart_id"


def resolve_fields(field_ids: Iterable[str]) -> list[FieldSpec]:
    """
    Resolve requested ids to specs, keeping order and length.

    Unknown ids become TEXT placeholders so the schema stays aligned with
    the rows, whose values for those ids are empty strings.
    """

    return [
        FIELD_SPECS_BY_ID.get(field_id) or FieldSpec(field_id, field_id, FieldType.TEXT)
        for field_id in field_ids
    ]

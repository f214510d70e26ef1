"""
app/domain package marker.
"""

from app.domain.date_range import DateRange
from app.domain.fields import (
    CART_TRIGGER_FIELD,
    FIELD_SPECS,
    FIELD_SPECS_BY_ID,
    FieldConcept,
    FieldSpec,
    FieldType,
    resolve_fields,
)

__all__ = [
    "CART_TRIGGER_FIELD",
    "DateRange",
    "FIELD_SPECS",
    "FIELD_SPECS_BY_ID",
    "FieldConcept",
    "FieldSpec",
    "FieldType",
    "resolve_fields",
]

"""
app/mappers package marker.
"""

from app.mappers.row_mapper import (
    MISSING_NUMBER_VALUE,
    UNKNOWN_FIELD_VALUE,
    RowMapper,
    abandoned_total,
    applied_taxes_total,
    format_host_date,
)

__all__ = [
    "MISSING_NUMBER_VALUE",
    "UNKNOWN_FIELD_VALUE",
    "RowMapper",
    "abandoned_total",
    "applied_taxes_total",
    "format_host_date",
]

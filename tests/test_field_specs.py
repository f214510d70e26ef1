from __future__ import annotations

import dataclasses

import pytest

from app.domain import FIELD_SPECS, FIELD_SPECS_BY_ID, FieldConcept, FieldType, resolve_fields


def test_catalogue_has_eleven_unique_fields() -> None:
    ids = [spec.id for spec in FIELD_SPECS]
    assert len(ids) == 11
    assert len(set(ids)) == 11


def test_specs_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        FIELD_SPECS[0].name = "changed"  # type: ignore[misc]


@pytest.mark.parametrize(
    "field_id, field_type, reaggregatable",
    [
        ("grand_total", FieldType.NUMBER, True),
        ("applied_taxes_total", FieldType.NUMBER, True),
        ("abandoned_total", FieldType.NUMBER, True),
        ("items_count", FieldType.NUMBER, False),
        ("created_at", FieldType.DATE, False),
        ("abandoned_at", FieldType.DATE, False),
        ("order_id", FieldType.TEXT, False),
    ],
)
def test_field_types(field_id: str, field_type: FieldType, reaggregatable: bool) -> None:
    spec = FIELD_SPECS_BY_ID[field_id]
    assert spec.field_type is field_type
    assert spec.is_reaggregatable is reaggregatable


def test_metric_host_dict_carries_reaggregation_flag() -> None:
    host = FIELD_SPECS_BY_ID["grand_total"].to_host_dict()

    assert host == {
        "name": "grand_total",
        "label": "Grand total",
        "dataType": "NUMBER",
        "semantics": {
            "conceptType": "METRIC",
            "semanticType": "NUMBER",
            "isReaggregatable": True,
        },
    }


def test_date_dimension_uses_year_month_day() -> None:
    host = FIELD_SPECS_BY_ID["created_at"].to_host_dict()

    assert host["dataType"] == "STRING"
    assert host["semantics"]["semanticType"] == "YEAR_MONTH_DAY"
    assert host["semantics"]["conceptType"] == FieldConcept.DIMENSION.value


def test_resolve_fields_keeps_length_and_order() -> None:
    resolved = resolve_fields(["city", "mystery", "order_id"])

    assert [spec.id for spec in resolved] == ["city", "mystery", "order_id"]
    assert resolved[1].field_type is FieldType.TEXT

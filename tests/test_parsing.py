"""Tests for dataset parsing and validation."""

from __future__ import annotations

import json

import pytest
from pulsewrap import parsing
from pulsewrap.models import CategorySpendRecord, KpiDailyRecord

KPI_TEXT = json.dumps(
    [
        {
            "date": "2025-11-01",
            "revenue": 1200,
            "expenses": 700.5,
            "activeUsers": 95,
            "newUsers": 10,
            "cashBalance": 8000,
            "region": "EU",
        },
        {"date": "garbage", "revenue": 900, "expenses": 650, "activeUsers": 102.0, "newUsers": 14},
    ]
)

SPEND_TEXT = json.dumps([{"date": "2025-11-01", "category": "Ads", "amount": 120, "note": "x"}])


def test_parse_dataset_builds_records() -> None:
    dataset = parsing.parse_dataset(KPI_TEXT, SPEND_TEXT)

    assert dataset.daily == [
        KpiDailyRecord("2025-11-01", 1200.0, 700.5, 95, 10, 8000.0),
        KpiDailyRecord("garbage", 900.0, 650.0, 102, 14, None),
    ]
    assert dataset.spend == [CategorySpendRecord("2025-11-01", "Ads", 120.0)]


def test_empty_spend_is_valid() -> None:
    dataset = parsing.parse_dataset(KPI_TEXT, "[]")
    assert dataset.spend == []


def test_empty_kpi_raises_empty_error() -> None:
    with pytest.raises(parsing.EmptyDatasetError) as info:
        parsing.parse_dataset("[]", SPEND_TEXT)
    assert info.value.kind is parsing.DatasetErrorKind.EMPTY
    assert info.value.source == "kpi"


@pytest.mark.parametrize(
    ("kpi_text", "spend_text", "source", "stage"),
    [
        ("[{", "[]", "kpi", "syntax"),
        ('{"date": "2025-11-01"}', "[]", "kpi", "shape"),
        ("[1, 2]", "[]", "kpi", "shape"),
        (KPI_TEXT, "not json", "spend", "syntax"),
        (KPI_TEXT, '{"rows": []}', "spend", "shape"),
    ],
)
def test_malformed_json_and_shapes(kpi_text: str, spend_text: str, source: str, stage: str) -> None:
    with pytest.raises(parsing.MalformedDatasetError) as info:
        parsing.parse_dataset(kpi_text, spend_text)
    assert info.value.kind is parsing.DatasetErrorKind.MALFORMED
    assert info.value.source == source
    assert info.value.stage == stage


@pytest.mark.parametrize(
    ("record", "field"),
    [
        ({"revenue": 1, "expenses": 1, "activeUsers": 1, "newUsers": 1}, "date"),
        ({"date": "2025-11-01", "expenses": 1, "activeUsers": 1, "newUsers": 1}, "revenue"),
        ({"date": "2025-11-01", "revenue": "12", "expenses": 1, "activeUsers": 1, "newUsers": 1}, "revenue"),
        ({"date": "2025-11-01", "revenue": 1, "expenses": True, "activeUsers": 1, "newUsers": 1}, "expenses"),
        ({"date": "2025-11-01", "revenue": 1, "expenses": 1, "activeUsers": 1.5, "newUsers": 1}, "activeUsers"),
        ({"date": 20251101, "revenue": 1, "expenses": 1, "activeUsers": 1, "newUsers": 1}, "date"),
        ({"date": "2025-11-01", "revenue": float("nan"), "expenses": 1, "activeUsers": 1, "newUsers": 1}, "revenue"),
        (
            {"date": "2025-11-01", "revenue": 1, "expenses": 1, "activeUsers": 1, "newUsers": 1, "cashBalance": "lots"},
            "cashBalance",
        ),
    ],
)
def test_kpi_field_errors_name_the_field(record: dict, field: str) -> None:
    with pytest.raises(parsing.MalformedDatasetError) as info:
        parsing.parse_dataset(json.dumps([record]), "[]")
    assert info.value.stage == "field"
    assert info.value.field == field
    assert info.value.index == 0
    assert field in str(info.value)


def test_spend_category_must_be_non_empty() -> None:
    spend = json.dumps([{"date": "2025-11-01", "category": "", "amount": 1}])
    with pytest.raises(parsing.MalformedDatasetError) as info:
        parsing.parse_dataset(KPI_TEXT, spend)
    assert info.value.source == "spend"
    assert info.value.field == "category"


def test_dataset_errors_are_value_errors() -> None:
    with pytest.raises(ValueError):
        parsing.parse_dataset("[]", "[]")


def test_pretty_json_reindents_and_passes_through_invalid_text() -> None:
    assert parsing.pretty_json('[{"a":1}]') == '[\n  {\n    "a": 1\n  }\n]'
    assert parsing.pretty_json("not json") == "not json"


def test_oversized_integers_are_malformed_fields() -> None:
    record = {"date": "2025-11-01", "revenue": 10**400, "expenses": 1, "activeUsers": 1, "newUsers": 1}
    with pytest.raises(parsing.MalformedDatasetError) as info:
        parsing.parse_dataset(json.dumps([record]), "[]")
    assert info.value.stage == "field"
    assert info.value.field == "revenue"


def test_integer_literal_past_conversion_limit_is_a_syntax_error() -> None:
    kpi_text = (
        '[{"date": "2025-11-01", "revenue": ' + "9" * 5000
        + ', "expenses": 1, "activeUsers": 1, "newUsers": 1}]'
    )
    with pytest.raises(parsing.MalformedDatasetError) as info:
        parsing.parse_dataset(kpi_text, "[]")
    assert info.value.source == "kpi"
    assert info.value.stage == "syntax"

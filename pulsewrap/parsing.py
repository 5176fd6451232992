"""Parse and validate raw dataset JSON into typed records.

Parsing is strict about shape (top-level arrays of objects with the required
keys and JSON-number fields) but lenient about dates: date strings are kept
as-is and only checked later by :func:`pulsewrap.insights.compute_insights`,
which drops records whose date does not parse.
"""

from __future__ import annotations

import json
import logging
import math
from enum import Enum
from typing import Any, Callable, TypeVar

from .models import CategorySpendRecord, Dataset, KpiDailyRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatasetErrorKind(str, Enum):
    MALFORMED = "malformed"
    EMPTY = "empty"
    NOT_FOUND = "not_found"


class DatasetError(ValueError):
    """Base error for datasets that cannot be turned into records.

    ``source`` names the dataset (``"kpi"`` or ``"spend"``), ``stage`` the
    step that failed (``"syntax"``, ``"shape"``, ``"field"``, ``"load"``) and
    ``index``/``field`` point at the offending record when known.
    """

    kind = DatasetErrorKind.MALFORMED

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        stage: str | None = None,
        index: int | None = None,
        field: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.source = source
        self.stage = stage
        self.index = index
        self.field = field


class MalformedDatasetError(DatasetError):
    kind = DatasetErrorKind.MALFORMED


class EmptyDatasetError(DatasetError):
    kind = DatasetErrorKind.EMPTY


class DatasetNotFoundError(DatasetError, LookupError):
    kind = DatasetErrorKind.NOT_FOUND


def _is_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        return False


def _require(item: dict[str, Any], key: str, *, source: str, index: int) -> Any:
    if key not in item:
        raise MalformedDatasetError(
            f"{source} record {index} is missing required field '{key}'",
            source=source,
            stage="field",
            index=index,
            field=key,
        )
    return item[key]


def _number(item: dict[str, Any], key: str, *, source: str, index: int) -> float:
    value = _require(item, key, source=source, index=index)
    if not _is_number(value):
        raise MalformedDatasetError(
            f"{source} record {index} field '{key}' must be a number, got {value!r}",
            source=source,
            stage="field",
            index=index,
            field=key,
        )
    return float(value)


def _integer(item: dict[str, Any], key: str, *, source: str, index: int) -> int:
    value = _number(item, key, source=source, index=index)
    if not value.is_integer():
        raise MalformedDatasetError(
            f"{source} record {index} field '{key}' must be a whole number, got {value!r}",
            source=source,
            stage="field",
            index=index,
            field=key,
        )
    return int(value)


def _string(item: dict[str, Any], key: str, *, source: str, index: int) -> str:
    value = _require(item, key, source=source, index=index)
    if not isinstance(value, str):
        raise MalformedDatasetError(
            f"{source} record {index} field '{key}' must be a string, got {value!r}",
            source=source,
            stage="field",
            index=index,
            field=key,
        )
    return value


def _kpi_record(item: dict[str, Any], index: int) -> KpiDailyRecord:
    cash_balance = item.get("cashBalance")
    if cash_balance is not None and not _is_number(cash_balance):
        raise MalformedDatasetError(
            f"kpi record {index} field 'cashBalance' must be a number, got {cash_balance!r}",
            source="kpi",
            stage="field",
            index=index,
            field="cashBalance",
        )
    return KpiDailyRecord(
        date=_string(item, "date", source="kpi", index=index),
        revenue=_number(item, "revenue", source="kpi", index=index),
        expenses=_number(item, "expenses", source="kpi", index=index),
        active_users=_integer(item, "activeUsers", source="kpi", index=index),
        new_users=_integer(item, "newUsers", source="kpi", index=index),
        cash_balance=float(cash_balance) if cash_balance is not None else None,
    )


def _spend_record(item: dict[str, Any], index: int) -> CategorySpendRecord:
    category = _string(item, "category", source="spend", index=index)
    if not category:
        raise MalformedDatasetError(
            f"spend record {index} field 'category' must not be empty",
            source="spend",
            stage="field",
            index=index,
            field="category",
        )
    return CategorySpendRecord(
        date=_string(item, "date", source="spend", index=index),
        category=category,
        amount=_number(item, "amount", source="spend", index=index),
    )


def _parse_array(
    text: str,
    source: str,
    build: Callable[[dict[str, Any], int], T],
) -> list[T]:
    try:
        payload = json.loads(text)
    except (ValueError, TypeError) as exc:
        raise MalformedDatasetError(
            f"{source} dataset is not valid JSON: {exc}",
            source=source,
            stage="syntax",
        ) from exc

    if not isinstance(payload, list):
        raise MalformedDatasetError(
            f"{source} dataset must be a JSON array, got {type(payload).__name__}",
            source=source,
            stage="shape",
        )

    records: list[T] = []
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            raise MalformedDatasetError(
                f"{source} record {index} must be a JSON object",
                source=source,
                stage="shape",
                index=index,
            )
        records.append(build(item, index))
    return records


def parse_dataset(kpi_text: str, spend_text: str) -> Dataset:
    """Parse KPI and spend JSON text into a :class:`Dataset`.

    Raises :class:`MalformedDatasetError` for invalid JSON or shapes and
    :class:`EmptyDatasetError` when the KPI array has no records. An empty
    spend array is valid.
    """

    daily = _parse_array(kpi_text, "kpi", _kpi_record)
    if not daily:
        raise EmptyDatasetError("kpi dataset is empty", source="kpi", stage="shape")

    spend = _parse_array(spend_text, "spend", _spend_record)
    logger.debug("Parsed %d kpi records and %d spend records", len(daily), len(spend))
    return Dataset(daily=daily, spend=spend)


def pretty_json(text: str) -> str:
    """Re-indent JSON text for preview, returning it unchanged if it does not parse."""

    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except (ValueError, TypeError):
        return text

"""Typed records shared by the PulseWrap pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum


@dataclass(frozen=True)
class KpiDailyRecord:
    """One calendar day of business KPIs."""

    date: str
    revenue: float
    expenses: float
    active_users: int
    new_users: int
    cash_balance: float | None = None


@dataclass(frozen=True)
class CategorySpendRecord:
    """A single spend entry attributed to a category."""

    date: str
    category: str
    amount: float


class InsightKind(str, Enum):
    """Catalog of insights, declared in output order."""

    TOTAL_REVENUE = "total_revenue"
    TOTAL_EXPENSES = "total_expenses"
    NET_PROFIT = "net_profit"
    BEST_REVENUE_DAY = "best_revenue_day"
    HIGHEST_EXPENSE_DAY = "highest_expense_day"
    AVG_ACTIVE_USERS = "avg_active_users"
    PEAK_NEW_USERS_DAY = "peak_new_users_day"
    BIGGEST_REVENUE_SPIKE = "biggest_revenue_spike"
    BURN_RATE = "burn_rate"
    RUNWAY_DAYS = "runway_days"
    TOP_SPEND_CATEGORY = "top_spend_category"
    # Fallback for the single error insight returned when no date parses.
    NO_VALID_DATES = "no_valid_dates"


@dataclass(frozen=True)
class Insight:
    """A derived, display-ready metric.

    ``primary_value`` and ``supporting_detail`` are already formatted for
    display. ``raw_value`` and ``context_delta`` keep the unformatted numbers
    so consumers can compare magnitudes.
    """

    title: str
    primary_value: str
    supporting_detail: str
    kind: InsightKind
    context_date: str | None = None
    context_category: str | None = None
    context_delta: float | None = None
    raw_value: float | None = None


@dataclass(frozen=True)
class ReportMeta:
    dataset_name: str
    generation_date: date


@dataclass(frozen=True)
class Dataset:
    """Parsed KPI and spend records for one logical dataset."""

    daily: list[KpiDailyRecord] = field(default_factory=list)
    spend: list[CategorySpendRecord] = field(default_factory=list)

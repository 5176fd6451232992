"""Insight computation for PulseWrap KPI recaps."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd

from . import utils
from .models import CategorySpendRecord, Insight, InsightKind, KpiDailyRecord

logger = logging.getLogger(__name__)

KPI_COLUMNS = ("date", "revenue", "expenses", "active_users", "new_users", "cash_balance")
SPEND_COLUMNS = ("date", "category", "amount")

NO_VALID_DATES_INSIGHT = Insight(
    title="Error",
    primary_value="No valid data",
    supporting_detail="Could not parse any valid dates from the dataset",
    kind=InsightKind.NO_VALID_DATES,
)


def _valid_daily(daily: Sequence[KpiDailyRecord]) -> pd.DataFrame:
    df = utils.ensure_dataframe(daily, columns=KPI_COLUMNS)
    df["parsed_date"] = df["date"].map(utils.parse_iso_date)
    valid = df.loc[df["parsed_date"].notna()].reset_index(drop=True)
    dropped = len(df) - len(valid)
    if dropped:
        logger.debug("Dropped %d kpi records with unparsable dates", dropped)
    return valid


def _peak_day(
    df: pd.DataFrame,
    column: str,
    *,
    title: str,
    kind: InsightKind,
    display: str,
) -> Insight:
    # idxmax returns the first maximal label, so ties go to the earliest input row.
    row = df.loc[df[column].idxmax()]
    formatted_date = utils.format_date(row["parsed_date"])
    value = row[column]
    if display == "currency":
        primary = utils.format_currency(float(value))
    else:
        primary = f"{int(value)} users"
    return Insight(
        title=title,
        primary_value=primary,
        supporting_detail=f"On {formatted_date}",
        kind=kind,
        context_date=formatted_date,
        raw_value=float(value),
    )


def _revenue_spike(df: pd.DataFrame) -> Insight | None:
    if len(df) < 2:
        return None

    ordered = df.sort_values("date", kind="stable").reset_index(drop=True)
    deltas = ordered["revenue"].diff().iloc[1:]
    position = deltas.idxmax()
    delta = float(deltas.loc[position])
    formatted_date = utils.format_date(ordered.loc[position, "parsed_date"])
    return Insight(
        title="Biggest Revenue Spike",
        primary_value=utils.format_currency(delta),
        supporting_detail=f"On {formatted_date}",
        kind=InsightKind.BIGGEST_REVENUE_SPIKE,
        context_date=formatted_date,
        context_delta=delta,
        raw_value=delta,
    )


def _runway(df: pd.DataFrame, burn_rate: float) -> Insight | None:
    # Uses the last record in input order, not the latest date.
    cash_balance = df["cash_balance"].iloc[-1]
    if cash_balance is None or pd.isna(cash_balance) or burn_rate <= 0:
        return None

    runway = float(cash_balance) / burn_rate
    if not np.isfinite(runway):
        logger.debug("Runway of %s days is not finite; omitting", runway)
        return None

    runway_days = int(np.floor(runway))
    return Insight(
        title="Runway",
        primary_value=f"{runway_days} days",
        supporting_detail="Based on current cash balance and burn rate",
        kind=InsightKind.RUNWAY_DAYS,
        raw_value=float(runway_days),
    )


def _top_spend_category(spend: Sequence[CategorySpendRecord]) -> Insight | None:
    if not spend:
        return None

    frame = utils.ensure_dataframe(spend, columns=SPEND_COLUMNS)
    totals = frame.groupby("category", sort=False)["amount"].sum()
    category = str(totals.idxmax())
    total = float(totals.loc[category])
    return Insight(
        title="Top Spending Category",
        primary_value=category,
        supporting_detail=f"Total: {utils.format_currency(total)}",
        kind=InsightKind.TOP_SPEND_CATEGORY,
        context_category=category,
        raw_value=total,
    )


def compute_insights(
    daily: Sequence[KpiDailyRecord],
    spend: Sequence[CategorySpendRecord],
) -> list[Insight]:
    """Compute the insight catalog for the given records.

    Returns an empty list for empty ``daily`` and a single ``"Error"``
    insight when no KPI record has a valid ``YYYY-MM-DD`` date. Otherwise the
    insights follow :class:`InsightKind` declaration order, skipping any whose
    inputs are missing.
    """

    if not daily:
        return []

    df = _valid_daily(daily)
    if df.empty:
        logger.warning("No kpi record has a valid date; returning error insight")
        return [NO_VALID_DATES_INSIGHT]

    days = len(df)
    total_revenue = float(df["revenue"].sum())
    total_expenses = float(df["expenses"].sum())
    net_profit = total_revenue - total_expenses
    burn_rate = total_expenses / days
    avg_active_users = int(df["active_users"].astype(float).mean())

    insights: list[Insight] = [
        Insight(
            title="Total Revenue",
            primary_value=utils.format_currency(total_revenue),
            supporting_detail=f"Across {days} days",
            kind=InsightKind.TOTAL_REVENUE,
            raw_value=total_revenue,
        ),
        Insight(
            title="Total Expenses",
            primary_value=utils.format_currency(total_expenses),
            supporting_detail=f"Across {days} days",
            kind=InsightKind.TOTAL_EXPENSES,
            raw_value=total_expenses,
        ),
        Insight(
            title="Net Profit",
            primary_value=utils.format_currency(net_profit),
            supporting_detail="Profitable period" if net_profit >= 0 else "Loss period",
            kind=InsightKind.NET_PROFIT,
            raw_value=net_profit,
        ),
        _peak_day(
            df,
            "revenue",
            title="Best Revenue Day",
            kind=InsightKind.BEST_REVENUE_DAY,
            display="currency",
        ),
        _peak_day(
            df,
            "expenses",
            title="Highest Expenses Day",
            kind=InsightKind.HIGHEST_EXPENSE_DAY,
            display="currency",
        ),
        Insight(
            title="Average Daily Active Users",
            primary_value=utils.format_number(avg_active_users),
            supporting_detail="Across all days",
            kind=InsightKind.AVG_ACTIVE_USERS,
            raw_value=float(avg_active_users),
        ),
        _peak_day(
            df,
            "new_users",
            title="Peak New Users Day",
            kind=InsightKind.PEAK_NEW_USERS_DAY,
            display="users",
        ),
    ]

    spike = _revenue_spike(df)
    if spike is not None:
        insights.append(spike)

    insights.append(
        Insight(
            title="Burn Rate",
            primary_value=utils.format_currency(burn_rate),
            supporting_detail="Average daily expenses",
            kind=InsightKind.BURN_RATE,
            raw_value=burn_rate,
        )
    )

    runway = _runway(df, burn_rate)
    if runway is not None:
        insights.append(runway)

    top_category = _top_spend_category(spend)
    if top_category is not None:
        insights.append(top_category)

    logger.debug("Computed %d insights from %d days", len(insights), days)
    return insights

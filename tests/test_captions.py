"""Tests for captions and the recap narrative."""

from __future__ import annotations

import pytest
from pulsewrap import captions
from pulsewrap.models import Insight, InsightKind


def _insight(kind: InsightKind, primary: str = "$1.00", **context) -> Insight:
    return Insight(title=kind.value, primary_value=primary, supporting_detail="", kind=kind, **context)


@pytest.mark.parametrize(
    ("insight", "expected"),
    [
        (_insight(InsightKind.NET_PROFIT), "Bottom line after expenses"),
        (_insight(InsightKind.TOTAL_REVENUE), "Total across period"),
        (_insight(InsightKind.BURN_RATE), "Average daily spend"),
        (
            _insight(InsightKind.BEST_REVENUE_DAY, context_date="November 3, 2025"),
            "Your strongest sales day: November 3, 2025",
        ),
        (_insight(InsightKind.BEST_REVENUE_DAY), "Your strongest sales day"),
        (
            _insight(InsightKind.BIGGEST_REVENUE_SPIKE, context_date="November 2, 2025"),
            "Largest day-over-day jump: November 2, 2025",
        ),
        (_insight(InsightKind.HIGHEST_EXPENSE_DAY), "Highest spend day"),
        (_insight(InsightKind.PEAK_NEW_USERS_DAY, context_date="November 1, 2025"), "Record signups: November 1, 2025"),
        (_insight(InsightKind.TOP_SPEND_CATEGORY, context_category="Ads"), "Where most money went: Ads"),
        (_insight(InsightKind.TOP_SPEND_CATEGORY), "Where most money went"),
    ],
)
def test_human_caption(insight: Insight, expected: str) -> None:
    assert captions.human_caption(insight) == expected


def test_every_kind_has_a_caption() -> None:
    for kind in InsightKind:
        assert captions.human_caption(_insight(kind))


def test_narrative_profit_with_big_spike() -> None:
    items = [
        _insight(InsightKind.NET_PROFIT, "$1,630.00"),
        _insight(InsightKind.BEST_REVENUE_DAY, context_date="November 3, 2025"),
        _insight(InsightKind.BIGGEST_REVENUE_SPIKE, context_date="November 3, 2025", context_delta=1450.0),
    ]
    assert captions.generate_narrative(items) == (
        "You were profitable overall ($1,630.00). Your biggest revenue jump came on November 3, 2025."
    )


def test_narrative_small_spike_falls_back_to_best_day() -> None:
    items = [
        _insight(InsightKind.NET_PROFIT, "$1,630.00"),
        _insight(InsightKind.BIGGEST_REVENUE_SPIKE, context_date="November 3, 2025", context_delta=1000.0),
        _insight(InsightKind.BEST_REVENUE_DAY, context_date="November 3, 2025"),
    ]
    assert captions.generate_narrative(items).endswith("Revenue peaked on November 3, 2025.")


def test_narrative_loss_and_zero() -> None:
    loss = captions.generate_narrative([_insight(InsightKind.NET_PROFIT, "-$150.00")])
    zero = captions.generate_narrative([_insight(InsightKind.NET_PROFIT, "$0.00")])
    assert loss == "You ran at a loss (-$150.00)."
    assert zero == "You ran at a loss (-$0.00)."


def test_narrative_without_net_profit_uses_generic_opening() -> None:
    items = [_insight(InsightKind.TOP_SPEND_CATEGORY, context_category="Payroll")]
    assert captions.generate_narrative(items) == "Here's your KPI recap. Spending was concentrated in Payroll."


def test_narrative_peak_users_is_last_resort() -> None:
    items = [_insight(InsightKind.PEAK_NEW_USERS_DAY, context_date="November 3, 2025")]
    assert captions.generate_narrative(items) == (
        "Here's your KPI recap. New user signups peaked on November 3, 2025."
    )


def test_narrative_single_sentence_when_nothing_to_highlight() -> None:
    assert captions.generate_narrative([]) == "Here's your KPI recap."

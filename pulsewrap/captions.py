"""Human captions and the short recap narrative."""

from __future__ import annotations

from typing import Sequence

from .models import Insight, InsightKind

SPIKE_HIGHLIGHT_THRESHOLD = 1000.0

_STATIC_CAPTIONS = {
    InsightKind.TOTAL_REVENUE: "Total across period",
    InsightKind.TOTAL_EXPENSES: "Total across period",
    InsightKind.NET_PROFIT: "Bottom line after expenses",
    InsightKind.AVG_ACTIVE_USERS: "Daily average",
    InsightKind.BURN_RATE: "Average daily spend",
    InsightKind.RUNWAY_DAYS: "Days remaining at current burn",
    InsightKind.NO_VALID_DATES: "Check the dataset dates",
}

_DATED_CAPTIONS = {
    InsightKind.BEST_REVENUE_DAY: "Your strongest sales day",
    InsightKind.HIGHEST_EXPENSE_DAY: "Highest spend day",
    InsightKind.PEAK_NEW_USERS_DAY: "Record signups",
    InsightKind.BIGGEST_REVENUE_SPIKE: "Largest day-over-day jump",
}


def human_caption(insight: Insight) -> str:
    """Return a short phrase describing ``insight`` for display under its value."""

    kind = insight.kind
    if kind in _DATED_CAPTIONS:
        phrase = _DATED_CAPTIONS[kind]
        return f"{phrase}: {insight.context_date}" if insight.context_date else phrase
    if kind is InsightKind.TOP_SPEND_CATEGORY:
        phrase = "Where most money went"
        return f"{phrase}: {insight.context_category}" if insight.context_category else phrase
    return _STATIC_CAPTIONS[kind]


def _find(insights: Sequence[Insight], kind: InsightKind) -> Insight | None:
    return next((insight for insight in insights if insight.kind is kind), None)


def _profit_sentence(net_profit: Insight | None) -> str:
    if net_profit is None:
        return "Here's your KPI recap"

    # Only the formatted value is inspected: a leading minus or an exact zero is a loss.
    value = net_profit.primary_value
    if not value.startswith("-") and value != "$0.00":
        return f"You were profitable overall ({value})"
    loss = value if value.startswith("-") else f"-{value}"
    return f"You ran at a loss ({loss})"


def _highlight_sentence(insights: Sequence[Insight]) -> str | None:
    spike = _find(insights, InsightKind.BIGGEST_REVENUE_SPIKE)
    if (
        spike is not None
        and spike.context_delta is not None
        and spike.context_delta > SPIKE_HIGHLIGHT_THRESHOLD
    ):
        return f"Your biggest revenue jump came on {spike.context_date or 'a notable day'}"

    best_day = _find(insights, InsightKind.BEST_REVENUE_DAY)
    if best_day is not None:
        return f"Revenue peaked on {best_day.context_date or 'a notable day'}"

    top_category = _find(insights, InsightKind.TOP_SPEND_CATEGORY)
    if top_category is not None:
        return f"Spending was concentrated in {top_category.context_category or 'categories'}"

    peak_users = _find(insights, InsightKind.PEAK_NEW_USERS_DAY)
    if peak_users is not None:
        return f"New user signups peaked on {peak_users.context_date or 'a notable day'}"

    return None


def generate_narrative(insights: Sequence[Insight]) -> str:
    """Compose a one or two sentence summary of the recap.

    The first sentence states profitability from the Net Profit insight. The
    second highlights, in priority order, a revenue spike above
    ``SPIKE_HIGHLIGHT_THRESHOLD``, the best revenue day, the top spend
    category or the peak signup day.
    """

    parts = [_profit_sentence(_find(insights, InsightKind.NET_PROFIT))]
    highlight = _highlight_sentence(insights)
    if highlight is not None:
        parts.append(highlight)
    return ". ".join(parts) + "."

"""Assemble a full recap (insights, narrative, Markdown) for a dataset."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Literal, Sequence

from . import captions, dates, insights, report
from .models import Dataset, Insight, InsightKind, ReportMeta

logger = logging.getLogger(__name__)

Tier = Literal[1, 2, 3]

_HEADLINE_KINDS = {InsightKind.NET_PROFIT, InsightKind.BEST_REVENUE_DAY}
_MONEY_KINDS = {
    InsightKind.TOTAL_REVENUE,
    InsightKind.TOTAL_EXPENSES,
    InsightKind.BIGGEST_REVENUE_SPIKE,
    InsightKind.BURN_RATE,
    InsightKind.RUNWAY_DAYS,
}
_USER_KINDS = {InsightKind.AVG_ACTIVE_USERS, InsightKind.PEAK_NEW_USERS_DAY}
_COST_KINDS = {InsightKind.HIGHEST_EXPENSE_DAY, InsightKind.TOP_SPEND_CATEGORY}


@dataclass(frozen=True)
class InsightSection:
    title: str
    insights: list[Insight]
    tier: Tier


@dataclass(frozen=True)
class Recap:
    """Everything a front end needs to show or share one recap."""

    dataset_name: str
    insights: list[Insight]
    narrative: str
    markdown: str
    date_range: str | None
    generated_at: datetime
    sections: list[InsightSection] = field(default_factory=list)


def group_insights(items: Sequence[Insight]) -> list[InsightSection]:
    """Split insights into display sections, keeping their original order.

    Net Profit and Best Revenue Day lead as tier 1 ``Money`` cards; the other
    money metrics follow as tier 2, then ``Users``, ``Costs & Spend`` and a
    tier 3 ``Highlights`` bucket for anything left. Empty sections are dropped.
    """

    buckets: list[tuple[str, Tier, list[Insight]]] = [
        ("Money", 1, [i for i in items if i.kind in _HEADLINE_KINDS]),
        ("Money", 2, [i for i in items if i.kind in _MONEY_KINDS]),
        ("Users", 2, [i for i in items if i.kind in _USER_KINDS]),
        ("Costs & Spend", 2, [i for i in items if i.kind in _COST_KINDS]),
    ]
    grouped = _HEADLINE_KINDS | _MONEY_KINDS | _USER_KINDS | _COST_KINDS
    buckets.append(("Highlights", 3, [i for i in items if i.kind not in grouped]))

    return [
        InsightSection(title=title, insights=members, tier=tier)
        for title, tier, members in buckets
        if members
    ]


def build_recap(
    dataset_name: str,
    dataset: Dataset,
    generation_date: date | None = None,
) -> Recap:
    """Run the full pipeline over ``dataset``.

    ``generation_date`` defaults to today's UTC date and is the only clock
    input; the rest of the recap depends on the records alone.
    """

    generated_at = datetime.now(timezone.utc)
    meta = ReportMeta(
        dataset_name=dataset_name,
        generation_date=generation_date or generated_at.date(),
    )
    computed = insights.compute_insights(dataset.daily, dataset.spend)
    logger.info("Built recap for %s with %d insights", dataset_name, len(computed))
    return Recap(
        dataset_name=dataset_name,
        insights=computed,
        narrative=captions.generate_narrative(computed),
        markdown=report.to_markdown(computed, meta),
        date_range=dates.format_date_range(record.date for record in dataset.daily),
        generated_at=generated_at,
        sections=group_insights(computed),
    )

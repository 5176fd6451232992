"""Markdown report rendering."""

from __future__ import annotations

from typing import Sequence

from . import utils
from .models import Insight, ReportMeta

REPORT_TITLE = "PulseWrap KPI Recap"


def to_markdown(insights: Sequence[Insight], meta: ReportMeta) -> str:
    """Render insights as a Markdown document, one ``##`` section per insight."""

    lines = [
        f"# {REPORT_TITLE}",
        "",
        f"**Dataset:** {meta.dataset_name}",
        f"**Generated:** {utils.format_date(meta.generation_date)}",
        "",
    ]
    for insight in insights:
        lines.extend(
            [
                f"## {insight.title}",
                insight.primary_value,
                insight.supporting_detail,
                "",
            ]
        )
    return "\n".join(lines) + "\n"

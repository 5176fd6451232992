"""Visualization utilities for PulseWrap recaps."""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from . import utils
from .insights import KPI_COLUMNS, SPEND_COLUMNS
from .models import CategorySpendRecord, KpiDailyRecord


def _empty_figure(message: str) -> go.Figure:
    fig = go.Figure()
    fig.add_annotation(
        text=message,
        showarrow=False,
        x=0.5,
        y=0.5,
        xref="paper",
        yref="paper",
        font=dict(size=14, color="#6c757d"),
    )
    fig.update_layout(margin=dict(l=0, r=0, t=20, b=20))
    return fig


def plot_daily_revenue_expenses(daily: Sequence[KpiDailyRecord]) -> go.Figure:
    """Plot revenue and expenses per day with the daily net as a line."""

    df = utils.ensure_dataframe(daily, columns=KPI_COLUMNS)
    if not df.empty:
        df["day"] = pd.to_datetime(df["date"].map(utils.parse_iso_date))
        df = df.dropna(subset=["day"]).sort_values("day", kind="stable")
    if df.empty:
        return _empty_figure("No dated KPI records to chart.")

    fig = go.Figure()
    fig.add_bar(
        name="Revenue",
        x=df["day"],
        y=df["revenue"],
        marker_color="#2a9d8f",
    )
    fig.add_bar(
        name="Expenses",
        x=df["day"],
        y=-df["expenses"],
        marker_color="#e76f51",
    )
    fig.add_trace(
        go.Scatter(
            name="Net",
            x=df["day"],
            y=df["revenue"] - df["expenses"],
            mode="lines+markers",
            line=dict(color="#264653", width=2),
        )
    )
    fig.update_layout(
        barmode="relative",
        title="Daily revenue and expenses",
        yaxis_title="Amount",
        xaxis_title="Day",
        margin=dict(l=0, r=0, t=45, b=0),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, xanchor="right", x=1),
    )
    return fig


def plot_category_donut(spend: Sequence[CategorySpendRecord]) -> go.Figure:
    df = utils.ensure_dataframe(spend, columns=SPEND_COLUMNS)
    if df.empty:
        return _empty_figure("No category spend to display.")

    totals = df.groupby("category", sort=False, as_index=False)["amount"].sum()
    fig = px.pie(
        totals,
        names="category",
        values="amount",
        hole=0.55,
        title="Category spend split",
    )
    fig.update_traces(textinfo="label+percent", pull=[0.03] * len(totals))
    fig.update_layout(margin=dict(l=0, r=0, t=40, b=0))
    return fig


def plot_active_users(daily: Sequence[KpiDailyRecord]) -> go.Figure:
    df = utils.ensure_dataframe(daily, columns=KPI_COLUMNS)
    if not df.empty:
        df["day"] = pd.to_datetime(df["date"].map(utils.parse_iso_date))
        df = df.dropna(subset=["day"]).sort_values("day", kind="stable")
    if df.empty:
        return _empty_figure("No dated KPI records to chart.")

    peak = df["new_users"].to_numpy() == df["new_users"].max()
    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            name="Active users",
            x=df["day"],
            y=df["active_users"],
            mode="lines+markers",
            line=dict(color="#1d3557", width=2),
        )
    )
    fig.add_bar(
        name="New users",
        x=df["day"],
        y=df["new_users"],
        marker_color=np.where(peak, "#f4a261", "#a8dadc").tolist(),
    )
    fig.update_layout(
        title="Users per day",
        xaxis_title="Day",
        yaxis_title="Users",
        margin=dict(l=0, r=0, t=45, b=0),
    )
    return fig

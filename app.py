"""Streamlit entry point for the PulseWrap KPI recap."""

from __future__ import annotations

from datetime import date

import streamlit as st
from pulsewrap import captions, datasets, parsing, recap, utils, viz
from pulsewrap.models import Dataset

_TIER_COLUMNS = {1: 2, 2: 3, 3: 3}


@st.cache_data(show_spinner=False)
def _load_demo(variant: str) -> Dataset:
    return datasets.load_dataset(variant)


def _render_card(insight) -> None:
    st.metric(insight.title, insight.primary_value)
    st.caption(captions.human_caption(insight))


def _uploaded_dataset(kpi_file, spend_file) -> Dataset:
    kpi_text = kpi_file.getvalue().decode("utf-8")
    spend_text = spend_file.getvalue().decode("utf-8") if spend_file is not None else "[]"
    return parsing.parse_dataset(kpi_text, spend_text)


def main() -> None:
    """Render the PulseWrap Streamlit application."""

    st.set_page_config(
        page_title="PulseWrap",
        page_icon="📈",
        layout="wide",
    )

    st.markdown(
        """
        <style>
        div[data-testid="stMetric"] {
            background: #ffffff;
            border-radius: 18px;
            border: 1px solid rgba(226, 232, 240, 0.9);
            padding: 1.15rem 1.25rem;
        }

        .narrative-card {
            background: #eff6ff;
            border-radius: 18px;
            padding: 1rem 1.25rem;
            font-size: 1.1rem;
            font-weight: 600;
            color: #0f172a;
        }
        </style>
        """,
        unsafe_allow_html=True,
    )

    sidebar = st.sidebar
    sidebar.header("Dataset")
    source = sidebar.radio("Source", ["Demo data", "Upload JSON"], index=0)

    try:
        if source == "Demo data":
            variant = sidebar.selectbox(
                "Variant",
                datasets.VARIANTS,
                index=datasets.VARIANTS.index(datasets.DEFAULT_VARIANT)
                if datasets.DEFAULT_VARIANT in datasets.VARIANTS
                else 0,
            )
            dataset_name = f"Demo {variant}"
            dataset = _load_demo(variant)
        else:
            kpi_file = sidebar.file_uploader("Daily KPI JSON", type=["json"])
            spend_file = sidebar.file_uploader("Category spend JSON", type=["json"])
            if kpi_file is None:
                st.info("Upload a daily KPI JSON file to build a recap.")
                return
            dataset_name = kpi_file.name
            dataset = _uploaded_dataset(kpi_file, spend_file)
    except parsing.DatasetError as exc:
        st.error(f"Could not load dataset: {exc.message}")
        return

    generation_date = date.today()
    result = recap.build_recap(dataset_name, dataset, generation_date=generation_date)

    st.title("Your KPI recap")
    st.caption(f"{result.dataset_name} · {result.date_range or 'Date range unavailable'}")
    st.markdown(f'<div class="narrative-card">{result.narrative}</div>', unsafe_allow_html=True)

    for section in result.sections:
        st.markdown(f"### {section.title}")
        columns = st.columns(_TIER_COLUMNS[section.tier])
        for index, insight in enumerate(section.insights):
            with columns[index % len(columns)]:
                _render_card(insight)

    chart_left, chart_right = st.columns([1.2, 0.8], gap="large")
    with chart_left:
        st.plotly_chart(
            viz.plot_daily_revenue_expenses(dataset.daily),
            use_container_width=True,
            config={"displayModeBar": False},
        )
    with chart_right:
        donut_fig = viz.plot_category_donut(dataset.spend)
        donut_fig.update_traces(hovertemplate="%{label}<br>$%{value:,.2f}<extra></extra>")
        st.plotly_chart(donut_fig, use_container_width=True, config={"displayModeBar": False})
    st.plotly_chart(
        viz.plot_active_users(dataset.daily),
        use_container_width=True,
        config={"displayModeBar": False},
    )

    st.markdown("### Markdown report")
    st.code(result.markdown, language="markdown")
    st.download_button(
        "Download report",
        data=result.markdown,
        file_name=f"pulsewrap_recap_{generation_date:%Y%m%d}.md",
        mime="text/markdown",
    )
    sidebar.caption(f"Generated {utils.format_date(generation_date)}")

    if source == "Demo data":
        kpi_name, spend_name = datasets.dataset_files(variant)
        provider = datasets.default_provider()
        with st.expander("Raw data"):
            st.code(parsing.pretty_json(provider.load_text(kpi_name)), language="json")
            st.code(parsing.pretty_json(provider.load_text(spend_name)), language="json")


if __name__ == "__main__":
    main()

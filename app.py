import logging

import numpy as np
import pandas as pd
import plotly.express as px
import requests
import streamlit as st

from africa_covid import charts
from africa_covid.aggregate import country_series
from africa_covid.config import (
    CFR_COL,
    COUNT_COLUMNS,
    COUNTRY_COL,
    DATE_COL,
    LOG_FORMAT,
    RECOVERY_RATE_COL,
    REGION_COL,
    SERIES_STYLES,
    Region,
    ReportConfig,
)
from africa_covid.export import render_html
from africa_covid.geo import load_boundaries
from africa_covid.loader import ParseError, load_cases
from africa_covid.names import unmatched_countries
from africa_covid.report import build_report, default_reference_date
from africa_covid.snapshot import top_countries

CONFIG = ReportConfig.from_env()

logger = logging.getLogger(__name__)
if not logger.hasHandlers():
    logging.basicConfig(level=CONFIG.log_level, format=LOG_FORMAT)

st.set_page_config(page_title="COVID-19 in Africa", page_icon="🦠", layout="wide")

PASTEL_CSS = """
<style>
:root{
  --bg1:#eaf7ee;
  --bg2:#f6fff8;
  --sidebar:#dff3e6;
  --card:#ffffffcc;
  --border:rgba(31,45,42,0.14);
  --text:#1f2d2a;
  --muted:rgba(31,45,42,0.68);
}

[data-testid="stAppViewContainer"]{
  background: linear-gradient(180deg, var(--bg1) 0%, var(--bg2) 65%, #ffffff 100%);
}

[data-testid="stSidebar"]{
  background: var(--sidebar);
  border-right: 1px solid var(--border);
}

div[data-testid="metric-container"]{
  background: var(--card);
  border: 1px solid var(--border);
  padding: 14px 14px;
  border-radius: 18px;
}

.small-note{
  color: var(--muted);
  font-size: 0.92rem;
}
</style>
"""
st.markdown(PASTEL_CSS, unsafe_allow_html=True)


@st.cache_data
def load_data(source):
    return load_cases(source)


@st.cache_data
def load_geojson(source):
    return load_boundaries(source)


def format_number(x):
    if x is None or pd.isna(x):
        return "-"
    return f"{int(float(x)):,}"


def format_rate(x):
    if x is None or pd.isna(x):
        return "-"
    return f"{float(x):.2f}%"


def note(text):
    st.markdown(f"<div class='small-note'>{text}</div>", unsafe_allow_html=True)


st.sidebar.title("🧭 Navigation")

uploaded = st.sidebar.file_uploader("Case CSV (optional)", type=["csv"])
source = uploaded if uploaded is not None else CONFIG.csv_path

try:
    cases = load_data(source)
except (ParseError, FileNotFoundError) as exc:
    st.error(f"Cannot load case data: {exc}")
    st.stop()

if cases.empty:
    st.warning("The case file has no rows.")
    st.stop()

min_date = cases[DATE_COL].min().date()
max_date = cases[DATE_COL].max().date()
max_ref = (pd.Timestamp(max_date) + pd.Timedelta(days=1)).date()
default_ref = CONFIG.reference_date if CONFIG.reference_date is not None else default_reference_date(cases)
default_ref = min(max(pd.Timestamp(default_ref).date(), min_date), max_ref)

reference_date = st.sidebar.date_input(
    "Reference date:",
    value=default_ref,
    min_value=min_date,
    max_value=max_ref,
    help="The snapshot shows the day before this date, the last fully reported day.",
)
report = build_report(cases, reference_date)

page = st.sidebar.radio(
    "Pick a page:",
    (
        "🏠 Overview",
        "🗺️ Regional View",
        "📊 Country Snapshot",
        "🌍 Africa Map",
        "📈 Country Dashboard",
        "📑 Data Explorer",
        "ℹ️ About",
    ),
)

st.sidebar.markdown("---")
st.sidebar.markdown(
    f"**Dataset**: `{getattr(source, 'name', source)}`  \n"
    f"{len(cases):,} rows, {cases[COUNTRY_COL].nunique()} countries, {min_date} to {max_date}"
)


if page == "🏠 Overview":
    st.markdown("<h1 style='text-align:center'>🦠 COVID-19 in Africa</h1>", unsafe_allow_html=True)
    note(f"Continental totals for the last fully reported day, {report.snapshot_date:%d %B %Y}.")

    latest = report.latest_totals
    if latest.empty:
        st.warning(f"No observations on {report.snapshot_date:%Y-%m-%d}; pick another reference date.")

    c1, c2, c3, c4 = st.columns(4)
    with c1:
        st.metric("Total Confirmed", format_number(latest.get("Confirmed")), delta=format_number(latest.get("New cases")))
    with c2:
        st.metric("Total Deaths", format_number(latest.get("Deaths")), delta=format_number(latest.get("New deaths")))
    with c3:
        st.metric("Total Recovered", format_number(latest.get("Recovered")), delta=format_number(latest.get("New recovered")))
    with c4:
        st.metric("Active Cases", format_number(latest.get("Active")))

    r1, r2 = st.columns(2)
    with r1:
        st.metric("Case fatality rate", format_rate(latest.get(CFR_COL)))
    with r2:
        st.metric("Recovery rate", format_rate(latest.get(RECOVERY_RATE_COL)))

    col1, col2 = st.columns(2)
    with col1:
        if not latest.empty:
            st.plotly_chart(charts.composition_chart(latest, title="Case composition"), use_container_width=True)
    with col2:
        if not report.snapshot.empty:
            ranked = top_countries(report.snapshot, "Confirmed", CONFIG.top_n)
            st.plotly_chart(charts.ranking_chart(ranked, "Confirmed"), use_container_width=True)

    st.markdown("### 📈 Continental trend")
    metrics_to_plot = st.multiselect("Metrics:", options=COUNT_COLUMNS, default=["Confirmed", "Deaths", "Recovered"])
    log_y = st.checkbox("Log scale", value=False)
    if metrics_to_plot:
        st.plotly_chart(charts.trend_chart(report.daily, metrics_to_plot, log_y=log_y), use_container_width=True)

    st.markdown("### 📊 New cases per day")
    fig_new = charts.new_cases_chart(report.daily)
    fig_new.add_scatter(x=report.daily[DATE_COL], y=report.daily["New cases 7D"], mode="lines", name="New cases (7-day avg)")
    st.plotly_chart(fig_new, use_container_width=True)

    st.markdown("### ⚖️ Case fatality and recovery rate")
    note("Rates are blank on days with no confirmed cases.")
    st.plotly_chart(charts.rates_chart(report.daily), use_container_width=True)


elif page == "🗺️ Regional View":
    st.header("🗺️ Regional View")
    note("Totals per African sub-region.")

    metric = st.selectbox("Metric:", options=COUNT_COLUMNS + ["New cases", "New deaths", "New recovered"], index=0)
    st.plotly_chart(charts.regional_trend_chart(report.regional, metric), use_container_width=True)

    days = st.slider("Heatmap window (days):", min_value=7, max_value=120, value=30, step=1)
    recent = report.regional[report.regional[DATE_COL] > pd.Timestamp(report.snapshot_date) - pd.Timedelta(days=days)]
    recent = recent[recent[DATE_COL] <= report.snapshot_date]
    if recent.empty:
        st.info("No regional data in this window.")
    else:
        st.plotly_chart(
            charts.heatmap_chart(recent, REGION_COL, DATE_COL, "New cases", title=f"New cases by region, last {days} days"),
            use_container_width=True,
        )

    st.subheader(f"Regional snapshot, {report.snapshot_date:%Y-%m-%d}")
    if report.regional_snapshot.empty:
        st.info("Snapshot is empty for this reference date.")
    else:
        fig = px.bar(
            report.regional_snapshot,
            x=REGION_COL,
            y=["Active", "Recovered", "Deaths"],
            color_discrete_map=charts.series_colors(["Active", "Recovered", "Deaths"]),
            title="Case status by region",
        )
        st.plotly_chart(charts.apply_theme(fig), use_container_width=True)
        st.plotly_chart(charts.table_chart(report.regional_snapshot), use_container_width=True)


elif page == "📊 Country Snapshot":
    st.header("📊 Country Snapshot")
    note(f"Per-country values on {report.snapshot_date:%d %B %Y}.")

    if report.snapshot.empty:
        st.warning(f"No observations on {report.snapshot_date:%Y-%m-%d}.")
    else:
        c1, c2, c3 = st.columns([1.2, 1, 1])
        with c1:
            metric = st.selectbox("Rank by:", options=COUNT_COLUMNS + ["New cases", "New deaths", CFR_COL, RECOVERY_RATE_COL], index=0)
        with c2:
            top_n = st.slider("Top N:", min_value=5, max_value=54, value=CONFIG.top_n, step=1)
        with c3:
            regions = st.multiselect("Regions:", options=Region.labels(), default=Region.labels())

        work = report.snapshot[report.snapshot[REGION_COL].isin(regions)]
        ranked = top_countries(work, metric, top_n)
        if ranked.empty:
            st.info("No countries match this filter.")
        else:
            st.markdown(
                f"<div class='small-note'>The highest {SERIES_STYLES[metric].label} is reported by <b>{ranked.iloc[0][COUNTRY_COL]}</b>.</div>",
                unsafe_allow_html=True,
            )
            st.plotly_chart(charts.ranking_chart(ranked, metric), use_container_width=True)

            st.plotly_chart(charts.rates_heatmap(work), use_container_width=True)

            days = st.slider("Heatmap window (days):", min_value=7, max_value=120, value=30, step=1)
            recent = report.countries[
                report.countries[COUNTRY_COL].isin(ranked[COUNTRY_COL])
                & (report.countries[DATE_COL] > pd.Timestamp(report.snapshot_date) - pd.Timedelta(days=days))
                & (report.countries[DATE_COL] <= report.snapshot_date)
            ]
            st.plotly_chart(
                charts.heatmap_chart(recent, COUNTRY_COL, DATE_COL, "New cases", title=f"New cases, last {days} days"),
                use_container_width=True,
            )

        with st.expander("📋 Snapshot table"):
            st.dataframe(report.snapshot_table(), use_container_width=True)


elif page == "🌍 Africa Map":
    st.header("🌍 Africa Map")
    note("Colour shows the indicator on the latest snapshot.")

    if report.snapshot.empty:
        st.warning(f"No observations on {report.snapshot_date:%Y-%m-%d}.")
    elif not CONFIG.geojson_source:
        st.info("No boundary dataset configured.")
    else:
        try:
            geojson = load_geojson(CONFIG.geojson_source)
        except (requests.RequestException, OSError, ValueError) as exc:
            logger.warning("Boundary data unavailable: %s", exc)
            st.warning(f"Could not load country boundaries: {exc}")
            geojson = None

        if geojson is not None:
            metric = st.selectbox("Indicator:", options=COUNT_COLUMNS + [CFR_COL, RECOVERY_RATE_COL], index=0)
            fig = charts.choropleth_map(report.snapshot, geojson, metric, CONFIG.feature_key)
            st.plotly_chart(fig, use_container_width=True)

            missing = unmatched_countries(report.snapshot, geojson, CONFIG.feature_key)
            if missing:
                note(f"No boundary found for: {', '.join(missing)}.")


elif page == "📈 Country Dashboard":
    st.header("📈 Country Dashboard")
    note("Pick a country to see its case history.")

    all_countries = sorted(cases[COUNTRY_COL].unique())
    c1, c2 = st.columns(2)
    with c1:
        country = st.selectbox("Country:", options=all_countries)
    with c2:
        log_scale = st.checkbox("Use log scale?", value=False)

    country_df = country_series(report.countries, country)
    country_df = country_df[country_df[DATE_COL] <= report.snapshot_date]
    if country_df.empty:
        st.warning("No data for this country up to the snapshot date.")
    else:
        latest = country_df.iloc[-1]
        c1, c2, c3, c4 = st.columns(4)
        with c1:
            st.metric("Total Confirmed", format_number(latest.get("Confirmed")), delta=format_number(latest.get("New cases")))
        with c2:
            st.metric("Total Deaths", format_number(latest.get("Deaths")), delta=format_number(latest.get("New deaths")))
        with c3:
            st.metric("Total Recovered", format_number(latest.get("Recovered")), delta=format_number(latest.get("New recovered")))
        with c4:
            st.metric("CFR", format_rate(latest.get(CFR_COL)))

        col1, col2 = st.columns(2)
        with col1:
            st.plotly_chart(charts.composition_chart(latest, title=f"Case composition in {country}"), use_container_width=True)
        with col2:
            st.plotly_chart(charts.new_cases_chart(country_df, title=f"New cases per day in {country}"), use_container_width=True)

        st.plotly_chart(
            charts.trend_chart(country_df, title=f"Cumulative cases in {country}", log_y=log_scale),
            use_container_width=True,
        )

        with st.expander("📋 Daily country data"):
            st.dataframe(country_df, use_container_width=True)


elif page == "📑 Data Explorer":
    st.header("📑 Data Explorer")
    note("Raw and derived tables.")

    tables = {
        "Case records": cases,
        "Daily totals": report.daily,
        "Regional totals": report.regional,
        "Country snapshot": report.snapshot_table(),
        "Regional snapshot": report.regional_snapshot,
    }
    name = st.selectbox("Table:", options=list(tables))
    df = tables[name].replace([np.inf, -np.inf], np.nan)

    st.write(f"Showing {name}: {df.shape[0]:,} rows, {df.shape[1]} columns.")
    st.dataframe(df.head(500), use_container_width=True)

    csv = df.to_csv(index=False).encode("utf-8")
    st.download_button("💾 Download CSV", data=csv, file_name=f"{name.lower().replace(' ', '_')}.csv", mime="text/csv")

    html_out = render_html(report, top_n=CONFIG.top_n)
    st.download_button("💾 Download HTML report (without map)", data=html_out.encode("utf-8"),
                       file_name="africa_covid_report.html", mime="text/html")


elif page == "ℹ️ About":
    st.title("ℹ️ About")
    st.write(
        "Interactive report of cumulative COVID-19 case counts for African countries: "
        "continental totals, regional totals and per-country snapshots."
    )

    st.subheader("Definitions")
    st.write(
        "- **CFR**: deaths ÷ confirmed × 100, rounded to 2 decimals\n"
        "- **Recovery rate**: recovered ÷ confirmed × 100, rounded to 2 decimals\n"
        "- **Active**: as reported by the source, not recomputed\n"
        "- **Snapshot**: all countries on the day before the reference date"
    )

    st.subheader("Static report")
    st.code("python -m africa_covid data/africa_covid_19.csv -o output/africa_covid_report.html", language="bash")

from typing import Optional, Sequence

import numpy as np
import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

from .config import (
    CFR_COL,
    COUNTRY_COL,
    DATE_COL,
    DEFAULT_FEATURE_KEY,
    GEO_NAME_COL,
    RECOVERY_RATE_COL,
    REGION_COL,
    REGION_COLORS,
    SERIES_STYLES,
)


px.defaults.template = "plotly_white"
px.defaults.color_discrete_sequence = px.colors.qualitative.Pastel
px.defaults.color_continuous_scale = px.colors.sequential.YlGn


def apply_theme(fig):
    fig.update_layout(
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        font=dict(color="#1f2d2a"),
        legend=dict(bgcolor="rgba(255,255,255,0.55)"),
    )
    return fig


def series_colors(metrics: Sequence[str]) -> dict:
    return {SERIES_STYLES[m].label: SERIES_STYLES[m].color for m in metrics if m in SERIES_STYLES}


def _long(frame: pd.DataFrame, metrics: Sequence[str], id_col: str = DATE_COL) -> pd.DataFrame:
    long_df = frame[[id_col] + list(metrics)].melt(
        id_vars=id_col, value_vars=list(metrics), var_name="Metric", value_name="Value"
    )
    long_df["Metric"] = long_df["Metric"].map(lambda m: SERIES_STYLES[m].label if m in SERIES_STYLES else m)
    return long_df


def trend_chart(daily: pd.DataFrame, metrics: Sequence[str] = ("Confirmed", "Deaths", "Recovered", "Active"),
                title: str = "Cumulative cases in Africa", log_y: bool = False):
    metrics = [m for m in metrics if m in daily.columns]
    fig = px.line(
        _long(daily, metrics),
        x=DATE_COL,
        y="Value",
        color="Metric",
        color_discrete_map=series_colors(metrics),
        title=title,
        log_y=log_y,
    )
    fig.update_layout(hovermode="x unified", xaxis_title="Date", yaxis_title="Cases")
    return apply_theme(fig)


def new_cases_chart(daily: pd.DataFrame, metrics: Sequence[str] = ("New cases", "New deaths"),
                    title: str = "New cases per day"):
    metrics = [m for m in metrics if m in daily.columns]
    fig = px.bar(
        _long(daily, metrics),
        x=DATE_COL,
        y="Value",
        color="Metric",
        color_discrete_map=series_colors(metrics),
        barmode="group",
        title=title,
    )
    fig.update_layout(hovermode="x unified", xaxis_title="Date", yaxis_title="Cases")
    return apply_theme(fig)


def rates_chart(frame: pd.DataFrame, title: str = "Case fatality and recovery rate"):
    metrics = [m for m in (CFR_COL, RECOVERY_RATE_COL) if m in frame.columns]
    fig = px.line(
        _long(frame, metrics),
        x=DATE_COL,
        y="Value",
        color="Metric",
        color_discrete_map=series_colors(metrics),
        title=title,
    )
    # undefined rates stay as gaps
    fig.update_traces(connectgaps=False)
    fig.update_layout(hovermode="x unified", xaxis_title="Date", yaxis_title="Percent")
    return apply_theme(fig)


def regional_trend_chart(regional: pd.DataFrame, metric: str = "Confirmed", title: Optional[str] = None):
    style = SERIES_STYLES.get(metric)
    fig = px.line(
        regional,
        x=DATE_COL,
        y=metric,
        color=REGION_COL,
        color_discrete_map=REGION_COLORS,
        title=title or f"{style.title if style else metric} by region",
    )
    fig.update_layout(hovermode="x unified", xaxis_title="Date")
    return apply_theme(fig)


def composition_chart(row, title: str = "Case composition"):
    pie_data = pd.DataFrame(
        {
            "Status": ["Active", "Recovered", "Deaths"],
            "Count": [
                max(float(row.get("Active", 0) or 0), 0),
                max(float(row.get("Recovered", 0) or 0), 0),
                max(float(row.get("Deaths", 0) or 0), 0),
            ],
        }
    )
    fig = px.pie(
        pie_data,
        names="Status",
        values="Count",
        hole=0.45,
        color="Status",
        color_discrete_map={s: SERIES_STYLES[s].color for s in pie_data["Status"]},
        title=title,
    )
    fig.update_traces(textposition="inside", textinfo="percent+label")
    return apply_theme(fig)


def ranking_chart(ranked: pd.DataFrame, metric: str = "Confirmed", title: Optional[str] = None):
    style = SERIES_STYLES.get(metric)
    fig = px.bar(
        ranked,
        x=COUNTRY_COL,
        y=metric,
        color=REGION_COL if REGION_COL in ranked.columns else None,
        color_discrete_map=REGION_COLORS,
        hover_data=[c for c in ("Confirmed", "Deaths", "Recovered", "Active") if c in ranked.columns and c != metric],
        title=title or f"Top {len(ranked)} countries by {style.label if style else metric}",
    )
    fig.update_layout(xaxis_tickangle=-45, xaxis={"categoryorder": "total descending"})
    return apply_theme(fig)


def heatmap_chart(frame: pd.DataFrame, index: str, columns: str, values: str,
                  title: str, color_scale: str = "YlOrRd", text_auto=False):
    pivot = frame.pivot_table(index=index, columns=columns, values=values, aggfunc="sum", observed=True)
    if columns == DATE_COL:
        pivot.columns = [pd.Timestamp(c).strftime("%Y-%m-%d") for c in pivot.columns]
    pivot = pivot.replace([np.inf, -np.inf], np.nan)
    fig = px.imshow(
        pivot.values,
        x=[str(c) for c in pivot.columns],
        y=[str(i) for i in pivot.index],
        color_continuous_scale=color_scale,
        labels=dict(color=SERIES_STYLES[values].label if values in SERIES_STYLES else values),
        title=title,
        aspect="auto",
        text_auto=text_auto,
    )
    fig.update_layout(height=max(320, 22 * len(pivot.index) + 120))
    return apply_theme(fig)


def rates_heatmap(snapshot: pd.DataFrame, title: str = "Case fatality and recovery rate by country"):
    metrics = [m for m in (CFR_COL, RECOVERY_RATE_COL) if m in snapshot.columns]
    heat_df = snapshot.set_index(COUNTRY_COL)[metrics].sort_index()
    fig = px.imshow(
        heat_df.values,
        x=[SERIES_STYLES[m].label for m in metrics],
        y=heat_df.index.tolist(),
        color_continuous_scale="YlGn",
        labels=dict(color="Percent"),
        title=title,
        aspect="auto",
        text_auto=".2f",
    )
    fig.update_layout(height=max(320, 22 * len(heat_df.index) + 120))
    return apply_theme(fig)


def choropleth_map(snapshot: pd.DataFrame, geojson: dict, metric: str = "Confirmed",
                   featureidkey: str = DEFAULT_FEATURE_KEY, title: Optional[str] = None):
    style = SERIES_STYLES.get(metric)
    fig = px.choropleth(
        snapshot,
        geojson=geojson,
        locations=GEO_NAME_COL,
        featureidkey=featureidkey,
        color=metric,
        hover_name=COUNTRY_COL,
        hover_data={GEO_NAME_COL: False, REGION_COL: True},
        scope="africa",
        title=title or f"{style.label if style else metric}, latest snapshot",
    )
    fig.update_geos(fitbounds="locations", visible=False)
    fig.update_layout(margin=dict(l=0, r=0, t=50, b=0), height=560)
    return apply_theme(fig)


def table_chart(frame: pd.DataFrame, title: Optional[str] = None):
    cells = []
    for col in frame.columns:
        values = frame[col]
        if pd.api.types.is_datetime64_any_dtype(values):
            cells.append(values.dt.strftime("%Y-%m-%d").tolist())
        elif pd.api.types.is_float_dtype(values):
            cells.append(["" if pd.isna(v) else f"{v:,.2f}" for v in values])
        elif pd.api.types.is_integer_dtype(values):
            cells.append([f"{int(v):,}" for v in values])
        else:
            cells.append(["" if pd.isna(v) else str(v) for v in values])

    fig = go.Figure(
        data=[
            go.Table(
                header=dict(values=list(frame.columns), fill_color="#dff3e6", align="left"),
                cells=dict(values=cells, fill_color="#f6fff8", align="left"),
            )
        ]
    )
    fig.update_layout(title=title, margin=dict(l=0, r=0, t=50 if title else 0, b=0))
    return apply_theme(fig)

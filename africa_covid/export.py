import logging
from pathlib import Path
from typing import Optional

import pandas as pd
from jinja2 import Environment, PackageLoader, select_autoescape

from .config import DEFAULT_FEATURE_KEY, DEFAULT_TOP_N
from .report import Report


__all__ = ["render_html", "write_report"]


logger = logging.getLogger(__name__)


def _environment():
    env = Environment(
        loader=PackageLoader("africa_covid", "templates"),
        autoescape=select_autoescape(["html", "j2"]),
    )
    env.filters["number"] = _format_number
    return env


def _format_number(x):
    if x is None or pd.isna(x):
        return "-"
    return f"{int(float(x)):,}"


def _table_html(frame: pd.DataFrame) -> str:
    out = frame.copy()
    for col in out.columns:
        if pd.api.types.is_datetime64_any_dtype(out[col]):
            out[col] = out[col].dt.strftime("%Y-%m-%d")
    return out.to_html(index=False, na_rep="", float_format=lambda v: f"{v:,.2f}", classes="data", border=0)


def render_html(report: Report, geojson: Optional[dict] = None, top_n: int = DEFAULT_TOP_N,
                featureidkey: str = DEFAULT_FEATURE_KEY) -> str:
    blocks = []
    plotly_js = "cdn"
    for section in report.sections(geojson=geojson, top_n=top_n, featureidkey=featureidkey):
        block = {"heading": section.heading, "title": section.title, "note": section.note, "html": ""}
        if section.figure is not None:
            block["html"] = section.figure.to_html(full_html=False, include_plotlyjs=plotly_js)
            plotly_js = False
        elif section.table is not None:
            block["html"] = _table_html(section.table)
        blocks.append(block)

    template = _environment().get_template("report.html.j2")
    return template.render(
        title=report.title,
        reference_date=report.reference_date,
        snapshot_date=report.snapshot_date,
        totals=report.latest_totals,
        country_count=len(report.snapshot),
        sections=blocks,
        generated=pd.Timestamp.now().strftime("%Y-%m-%d %H:%M"),
    )


def write_report(report: Report, path, geojson: Optional[dict] = None, top_n: int = DEFAULT_TOP_N,
                 featureidkey: str = DEFAULT_FEATURE_KEY) -> Path:
    html_out = render_html(report, geojson=geojson, top_n=top_n, featureidkey=featureidkey)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(html_out)
    logger.info("Report written to %s", path)
    return path

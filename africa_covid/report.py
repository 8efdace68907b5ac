"""
Report assembly
---------------

Turns the loaded case table into every derived table the report shows and
lists the figures and tables in display order. Both the dashboard and the
HTML export read from a :class:`Report`.
"""

import logging
from typing import List, NamedTuple, Optional

import pandas as pd

from . import charts
from .aggregate import daily_totals, regional_totals
from .config import (
    CFR_COL,
    COUNT_COLUMNS,
    COUNTRY_COL,
    DATE_COL,
    DEFAULT_FEATURE_KEY,
    DEFAULT_TOP_N,
    RECOVERY_RATE_COL,
    REGION_COL,
)
from .metrics import add_daily_deltas, add_rates, add_rolling_mean
from .names import unmatched_countries, with_geo_names
from .snapshot import latest_snapshot, regional_snapshot, snapshot_date, top_countries


__all__ = ["Report", "Section", "build_report", "default_reference_date"]


logger = logging.getLogger(__name__)

HEATMAP_DAYS = 30
SNAPSHOT_COLUMNS = [COUNTRY_COL, REGION_COL] + COUNT_COLUMNS + ["New cases", "New deaths", CFR_COL, RECOVERY_RATE_COL]


class Section(NamedTuple):
    heading: str
    title: str
    figure: object = None
    table: Optional[pd.DataFrame] = None
    note: str = ""


class Report:
    def __init__(self, cases: pd.DataFrame, reference_date):
        """Derived tables for one reference date.

        Args:
            cases (pd.DataFrame): Loaded case records.
            reference_date: "Today"; the snapshot is the day before it.
        """
        self.cases = cases
        self.reference_date = pd.Timestamp(reference_date).normalize()
        self.snapshot_date = snapshot_date(self.reference_date)

        daily = add_daily_deltas(daily_totals(cases))
        self.daily = add_rolling_mean(add_rates(daily), "New cases")

        regional = add_daily_deltas(regional_totals(cases), by=REGION_COL)
        self.regional = add_rates(regional)

        self.countries = add_rates(add_daily_deltas(cases, by=COUNTRY_COL))

        snap = latest_snapshot(self.countries, self.reference_date)
        self.snapshot = with_geo_names(snap)
        self.regional_snapshot = regional_snapshot(snap)

    @property
    def latest_totals(self) -> pd.Series:
        day = self.daily[self.daily[DATE_COL] == self.snapshot_date]
        if day.empty:
            return pd.Series(dtype="object")
        return day.iloc[-1]

    @property
    def title(self) -> str:
        return f"COVID-19 in Africa: situation on {self.snapshot_date:%d %B %Y}"

    def snapshot_table(self) -> pd.DataFrame:
        cols = [c for c in SNAPSHOT_COLUMNS if c in self.snapshot.columns]
        return self.snapshot[cols].sort_values("Confirmed", ascending=False).reset_index(drop=True)

    def sections(self, geojson: Optional[dict] = None, top_n: int = DEFAULT_TOP_N,
                 featureidkey: str = DEFAULT_FEATURE_KEY) -> List[Section]:
        out = []
        if self.daily.empty:
            return out

        out.append(Section("Continent", "Cumulative cases", charts.trend_chart(self.daily)))
        out.append(Section("Continent", "Daily new cases and deaths", charts.new_cases_chart(self.daily)))
        out.append(Section("Continent", "Case fatality and recovery rate", charts.rates_chart(self.daily)))

        out.append(Section("Regions", "Confirmed cases by region",
                           charts.regional_trend_chart(self.regional, "Confirmed")))
        out.append(Section("Regions", "New cases by region",
                           charts.regional_trend_chart(self.regional, "New cases")))
        recent = self.regional[
            (self.regional[DATE_COL] > self.snapshot_date - pd.Timedelta(days=HEATMAP_DAYS))
            & (self.regional[DATE_COL] <= self.snapshot_date)
        ]
        out.append(Section("Regions", f"New cases by region, last {HEATMAP_DAYS} days",
                           charts.heatmap_chart(recent, REGION_COL, DATE_COL, "New cases",
                                                title=f"New cases by region, last {HEATMAP_DAYS} days")))

        if self.snapshot.empty:
            out.append(Section("Countries", "Latest snapshot",
                               note=f"No observations reported on {self.snapshot_date:%Y-%m-%d}."))
            return out

        out.append(Section("Regions", "Regional snapshot", table=self.regional_snapshot))
        out.append(Section("Countries", "Case composition",
                           charts.composition_chart(self.latest_totals,
                                                    title=f"Case composition on {self.snapshot_date:%Y-%m-%d}")))
        for metric in ("Confirmed", "Deaths", "Active"):
            ranked = top_countries(self.snapshot, metric, top_n)
            out.append(Section("Countries", f"Top {top_n} countries by {metric.lower()}",
                               charts.ranking_chart(ranked, metric)))

        ranked = top_countries(self.snapshot, "Confirmed", top_n)
        recent = self.countries[
            self.countries[COUNTRY_COL].isin(ranked[COUNTRY_COL])
            & (self.countries[DATE_COL] > self.snapshot_date - pd.Timedelta(days=HEATMAP_DAYS))
            & (self.countries[DATE_COL] <= self.snapshot_date)
        ]
        out.append(Section("Countries", f"New cases in the top {top_n} countries, last {HEATMAP_DAYS} days",
                           charts.heatmap_chart(recent, COUNTRY_COL, DATE_COL, "New cases",
                                                title=f"New cases, top {top_n} countries")))
        out.append(Section("Countries", "Case fatality and recovery rate by country",
                           charts.rates_heatmap(self.snapshot)))

        out.append(Section("Countries", "Country snapshot", table=self.snapshot_table()))

        if geojson is not None:
            missing = unmatched_countries(self.snapshot, geojson, featureidkey)
            note = f"No boundary found for: {', '.join(missing)}." if missing else ""
            out.append(Section("Map", "Confirmed cases by country",
                               charts.choropleth_map(self.snapshot, geojson, "Confirmed", featureidkey), note=note))
        return out


def default_reference_date(cases: pd.DataFrame) -> pd.Timestamp:
    """Latest observation date, used when no reference date is configured. NaT for an empty table."""
    if cases.empty:
        return pd.NaT
    return cases[DATE_COL].max()


def build_report(cases: pd.DataFrame, reference_date=None) -> Report:
    if reference_date is None:
        reference_date = default_reference_date(cases)
    if pd.isna(reference_date):
        raise ValueError("No observations to take a reference date from; pass one explicitly")
    report = Report(cases, reference_date)
    logger.info("Built report for reference date %s (snapshot %s, %d countries)",
                report.reference_date.date(), report.snapshot_date.date(), len(report.snapshot))
    return report

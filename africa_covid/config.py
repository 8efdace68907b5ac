"""
Constants and run configuration for the Africa COVID-19 report.

Every value that can change between runs is read from the environment,
everything else is fixed here so both the dashboard and the HTML export
draw from the same tables.
"""

from dataclasses import dataclass
from enum import Enum
from os import getenv
from pathlib import Path
from typing import Dict, Optional

import pandas as pd


__all__ = [
    "DATE_COL",
    "COUNTRY_COL",
    "REGION_COL",
    "GEO_NAME_COL",
    "COUNT_COLUMNS",
    "REQUIRED_COLUMNS",
    "DELTA_COLUMNS",
    "CFR_COL",
    "RECOVERY_RATE_COL",
    "RATE_DECIMALS",
    "DATE_FORMAT",
    "COUNTRY_NAME_MAP",
    "Region",
    "SeriesStyle",
    "SERIES_STYLES",
    "REGION_COLORS",
    "ReportConfig",
]


DATE_COL = "ObservationDate"
COUNTRY_COL = "Country"
REGION_COL = "Region"
GEO_NAME_COL = "Geo name"

COUNT_COLUMNS = ["Confirmed", "Deaths", "Recovered", "Active"]
REQUIRED_COLUMNS = [DATE_COL, COUNTRY_COL, REGION_COL] + COUNT_COLUMNS

# cumulative column -> daily delta column
DELTA_COLUMNS = {
    "Confirmed": "New cases",
    "Deaths": "New deaths",
    "Recovered": "New recovered",
}

CFR_COL = "CFR"
RECOVERY_RATE_COL = "Recovery rate"
RATE_DECIMALS = 2

DATE_FORMAT = "%m/%d/%Y"

# case dataset name -> boundary dataset name
COUNTRY_NAME_MAP = {
    "Congo (Kinshasa)": "Democratic Republic of the Congo",
    "Congo (Brazzaville)": "Republic of Congo",
    "Tanzania": "United Republic of Tanzania",
}


class Region(str, Enum):
    NORTHERN = "Northern Africa"
    WESTERN = "Western Africa"
    MIDDLE = "Middle Africa"
    EASTERN = "Eastern Africa"
    SOUTHERN = "Southern Africa"

    @classmethod
    def labels(cls):
        return [r.value for r in cls]


@dataclass(frozen=True)
class SeriesStyle:
    label: str
    color: str
    title: str


SERIES_STYLES: Dict[str, SeriesStyle] = {
    "Confirmed": SeriesStyle("Confirmed", "#6fa8dc", "Confirmed cases"),
    "Deaths": SeriesStyle("Deaths", "#e06666", "Deaths"),
    "Recovered": SeriesStyle("Recovered", "#6fbf9a", "Recovered"),
    "Active": SeriesStyle("Active", "#f6b26b", "Active cases"),
    "New cases": SeriesStyle("New cases", "#3d85c6", "New confirmed cases per day"),
    "New deaths": SeriesStyle("New deaths", "#cc0000", "New deaths per day"),
    "New recovered": SeriesStyle("New recovered", "#2e7d5b", "New recoveries per day"),
    CFR_COL: SeriesStyle("CFR (%)", "#a64d79", "Case fatality rate"),
    RECOVERY_RATE_COL: SeriesStyle("Recovery rate (%)", "#38761d", "Recovery rate"),
}

REGION_COLORS = {
    Region.NORTHERN.value: "#f9cb9c",
    Region.WESTERN.value: "#b6d7a8",
    Region.MIDDLE.value: "#a2c4c9",
    Region.EASTERN.value: "#9fc5e8",
    Region.SOUTHERN.value: "#d5a6bd",
}


ENV_PREFIX = "AFRICA_COVID_"

DEFAULT_CSV = "data/africa_covid_19.csv"
DEFAULT_GEOJSON = (
    "https://raw.githubusercontent.com/nvkelso/natural-earth-vector/"
    "master/geojson/ne_110m_admin_0_countries.geojson"
)
DEFAULT_FEATURE_KEY = "properties.ADMIN"
DEFAULT_OUTPUT = "output/africa_covid_report.html"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_TOP_N = 10
GEOJSON_TIMEOUT = 30

LOG_FORMAT = "%(levelname)s - %(message)s"


class ReportConfig:
    def __init__(self, csv_path: str = DEFAULT_CSV, geojson_source: Optional[str] = DEFAULT_GEOJSON,
                 feature_key: str = DEFAULT_FEATURE_KEY, reference_date: Optional[pd.Timestamp] = None,
                 output_path: str = DEFAULT_OUTPUT, log_level: str = DEFAULT_LOG_LEVEL,
                 top_n: int = DEFAULT_TOP_N):
        """Settings for one report run.

        Args:
            csv_path (str): Path to the case count CSV.
            geojson_source (str, optional): URL or path of the country boundaries. None disables the map.
            feature_key (str): GeoJSON property path the map joins on.
            reference_date (pd.Timestamp, optional): "Today" for snapshot selection. Defaults to None,
                meaning the latest observation date in the data.
            output_path (str): Where the HTML document is written.
            log_level (str): Logging level name.
            top_n (int): Number of countries in ranking charts.
        """
        self.csv_path = csv_path
        self.geojson_source = geojson_source or None
        self.feature_key = feature_key
        self.reference_date = reference_date
        self.output_path = Path(output_path)
        self.log_level = log_level.upper()
        self.top_n = int(top_n)

    @classmethod
    def from_env(cls) -> "ReportConfig":
        reference = getenv(ENV_PREFIX + "REFERENCE_DATE")
        return cls(
            csv_path=getenv(ENV_PREFIX + "CSV", DEFAULT_CSV),
            geojson_source=getenv(ENV_PREFIX + "GEOJSON", DEFAULT_GEOJSON),
            feature_key=getenv(ENV_PREFIX + "FEATURE_KEY", DEFAULT_FEATURE_KEY),
            reference_date=pd.Timestamp(reference) if reference else None,
            output_path=getenv(ENV_PREFIX + "OUTPUT", DEFAULT_OUTPUT),
            log_level=getenv(ENV_PREFIX + "LOG_LEVEL", DEFAULT_LOG_LEVEL),
            top_n=int(getenv(ENV_PREFIX + "TOP_N", DEFAULT_TOP_N)),
        )

    def __repr__(self):
        return f"<ReportConfig: csv={self.csv_path!r} reference_date={self.reference_date}>"

from pathlib import Path

import pandas as pd

from africa_covid.config import COUNT_COLUMNS, DATE_COL, REGION_COL, REQUIRED_COLUMNS, Region


DATA_DIR = Path(__file__).resolve().parent.parent / "data"
SAMPLE_CSV = DATA_DIR / "africa_covid_19.csv"

CSV_HEADER = ",".join(REQUIRED_COLUMNS)


def make_cases(rows):
    """Typed case table from (date, country, region, confirmed, deaths, recovered, active) tuples."""
    df = pd.DataFrame(rows, columns=REQUIRED_COLUMNS)
    df[DATE_COL] = pd.to_datetime(df[DATE_COL])
    df[REGION_COL] = pd.Categorical(df[REGION_COL], categories=Region.labels())
    for col in COUNT_COLUMNS:
        df[col] = df[col].astype("int64")
    return df


def spring_2020_cases():
    """Two countries reporting every day from 22 Jan to 28 May 2020."""
    rows = []
    for i, day in enumerate(pd.date_range("2020-01-22", "2020-05-28", freq="D")):
        rows.append((day, "Kenya", "Eastern Africa", 2 * i, i // 10, i // 2, 2 * i - i // 10 - i // 2))
        rows.append((day, "Nigeria", "Western Africa", 3 * i, i // 5, i, 3 * i - i // 5 - i))
    return make_cases(rows)

import logging
from typing import List, Sequence, Union

import pandas as pd

from .config import COUNT_COLUMNS, COUNTRY_COL, DATE_COL, REGION_COL


__all__ = ["group_totals", "daily_totals", "regional_totals", "country_series"]


logger = logging.getLogger(__name__)


def group_totals(cases: pd.DataFrame, keys: Union[str, Sequence[str]]) -> pd.DataFrame:
    """Sum the case counts per distinct key, one row per key in ascending key order."""
    keys: List[str] = [keys] if isinstance(keys, str) else list(keys)
    missing = [k for k in keys if k not in cases.columns]
    if missing:
        raise KeyError(f"Group keys not found: {missing}. Available: {list(cases.columns)}")

    totals = cases.groupby(keys, as_index=False, observed=True, sort=True)[COUNT_COLUMNS].sum()
    for col in COUNT_COLUMNS:
        totals[col] = totals[col].astype("int64")
    return totals.sort_values(keys, kind="stable").reset_index(drop=True)


def daily_totals(cases: pd.DataFrame) -> pd.DataFrame:
    return group_totals(cases, DATE_COL)


def regional_totals(cases: pd.DataFrame) -> pd.DataFrame:
    return group_totals(cases, [DATE_COL, REGION_COL])


def country_series(cases: pd.DataFrame, country: str) -> pd.DataFrame:
    series = cases[cases[COUNTRY_COL] == country].sort_values(DATE_COL, kind="stable")
    if series.empty:
        logger.debug("No rows for country %r", country)
    return series.reset_index(drop=True)

import logging

import pandas as pd

from .aggregate import group_totals
from .config import COUNTRY_COL, DATE_COL, REGION_COL
from .metrics import add_rates


__all__ = ["snapshot_date", "latest_snapshot", "regional_snapshot", "top_countries"]


logger = logging.getLogger(__name__)


def snapshot_date(reference_date) -> pd.Timestamp:
    # the reference day itself is treated as not fully reported yet
    return pd.Timestamp(reference_date).normalize() - pd.Timedelta(days=1)


def latest_snapshot(cases: pd.DataFrame, reference_date) -> pd.DataFrame:
    """Rows observed on the day before ``reference_date``, one per country."""
    target = snapshot_date(reference_date)
    snap = cases[cases[DATE_COL] == target]
    if snap.empty:
        logger.warning("No observations on %s; snapshot is empty", target.date())
    else:
        logger.debug("Snapshot for %s has %d countries", target.date(), snap[COUNTRY_COL].nunique())
    return snap.reset_index(drop=True)


def regional_snapshot(snapshot: pd.DataFrame) -> pd.DataFrame:
    return add_rates(group_totals(snapshot, REGION_COL))


def top_countries(snapshot: pd.DataFrame, metric: str = "Confirmed", n: int = 10) -> pd.DataFrame:
    ranked = snapshot.dropna(subset=[metric])
    return ranked.sort_values([metric, COUNTRY_COL], ascending=[False, True]).head(n).reset_index(drop=True)

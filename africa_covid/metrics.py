from typing import Optional, Sequence, Union

import numpy as np
import pandas as pd

from .config import CFR_COL, DATE_COL, DELTA_COLUMNS, RATE_DECIMALS, RECOVERY_RATE_COL


__all__ = [
    "daily_delta",
    "add_daily_deltas",
    "rate",
    "rates",
    "add_rates",
    "add_rolling_mean",
]


def daily_delta(values: pd.Series) -> pd.Series:
    """Difference to the previous observation; the first observation keeps its raw value."""
    return values.diff().fillna(values).astype(values.dtype)


def add_daily_deltas(frame: pd.DataFrame, by: Optional[Union[str, Sequence[str]]] = None) -> pd.DataFrame:
    """Add New cases / New deaths / New recovered to a date-ordered frame.

    With ``by`` the series restarts per group, so every group's first date
    carries its cumulative value as the delta.
    """
    keys = [] if by is None else ([by] if isinstance(by, str) else list(by))
    out = frame.sort_values(keys + [DATE_COL], kind="stable").copy()

    for source, target in DELTA_COLUMNS.items():
        if source not in out.columns:
            continue
        if keys:
            diff = out.groupby(keys, observed=True, sort=False)[source].diff()
            out[target] = diff.fillna(out[source]).astype(out[source].dtype)
        else:
            out[target] = daily_delta(out[source])
    return out.reset_index(drop=True)


def rate(numerator, denominator) -> float:
    """numerator / denominator * 100, rounded; NaN when the denominator is not positive."""
    if denominator is None or pd.isna(denominator) or denominator <= 0:
        return np.nan
    return float(np.round(float(numerator) / float(denominator) * 100, RATE_DECIMALS))


def rates(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    den = denominator.astype(float)
    out = numerator.astype(float) / den.where(den > 0) * 100
    return out.round(RATE_DECIMALS)


def add_rates(frame: pd.DataFrame) -> pd.DataFrame:
    out = frame.copy()
    out[CFR_COL] = rates(out["Deaths"], out["Confirmed"])
    out[RECOVERY_RATE_COL] = rates(out["Recovered"], out["Confirmed"])
    return out


def add_rolling_mean(frame: pd.DataFrame, column: str, window: int = 7,
                     by: Optional[Union[str, Sequence[str]]] = None) -> pd.DataFrame:
    out = frame.copy()
    name = f"{column} {window}D"
    min_periods = max(1, window // 2)
    if by is None:
        out[name] = out[column].rolling(window, min_periods=min_periods).mean()
    else:
        out[name] = (
            out.groupby(by, observed=True, sort=False)[column]
            .transform(lambda s: s.rolling(window, min_periods=min_periods).mean())
        )
    return out

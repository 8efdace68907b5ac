import logging

import numpy as np
import pandas as pd

from .config import (
    COUNT_COLUMNS,
    COUNTRY_COL,
    DATE_COL,
    DATE_FORMAT,
    REGION_COL,
    REQUIRED_COLUMNS,
    Region,
)


__all__ = ["ParseError", "load_cases", "validate_cases"]


logger = logging.getLogger(__name__)


class ParseError(ValueError):
    """Raised when the case CSV cannot be turned into typed case records."""


def load_cases(source, date_format=DATE_FORMAT) -> pd.DataFrame:
    """Read the case CSV into a typed, date-ordered table.

    Args:
        source (str | Path | file-like): CSV path or an open buffer.
        date_format (str): strptime format of ObservationDate.

    Raises:
        ParseError: Malformed or non-UTF-8 CSV, missing columns, unparseable dates,
            bad counts or unknown regions.
        FileNotFoundError: The path does not exist.
    """
    try:
        raw = pd.read_csv(source, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as exc:
        raise ParseError("Input file is empty") from exc
    except pd.errors.ParserError as exc:
        raise ParseError(f"Malformed CSV: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ParseError(f"Input is not UTF-8 text: {exc}") from exc

    cases = validate_cases(raw, date_format=date_format)
    if cases.empty:
        logger.warning("Loaded 0 case records")
    else:
        logger.info(
            "Loaded %d case records for %d countries (%s to %s)",
            len(cases),
            cases[COUNTRY_COL].nunique(),
            cases[DATE_COL].min().date(),
            cases[DATE_COL].max().date(),
        )
    return cases


def validate_cases(raw: pd.DataFrame, date_format=DATE_FORMAT) -> pd.DataFrame:
    missing = [c for c in REQUIRED_COLUMNS if c not in raw.columns]
    if missing:
        raise ParseError(f"Missing required columns: {missing}. Found: {list(raw.columns)}")

    df = raw[REQUIRED_COLUMNS].copy()

    dates = pd.to_datetime(df[DATE_COL].str.strip(), format=date_format, errors="coerce")
    bad = df.loc[dates.isna(), DATE_COL]
    if not bad.empty:
        raise ParseError(f"{len(bad)} unparseable {DATE_COL} value(s), first: {bad.iloc[0]!r}")
    df[DATE_COL] = dates.dt.normalize()

    df[COUNTRY_COL] = df[COUNTRY_COL].str.strip()
    if (df[COUNTRY_COL] == "").any():
        raise ParseError(f"Blank {COUNTRY_COL} in {int((df[COUNTRY_COL] == '').sum())} row(s)")

    regions = df[REGION_COL].str.strip()
    unknown = sorted(set(regions) - set(Region.labels()))
    if unknown:
        raise ParseError(f"Unknown {REGION_COL} value(s): {unknown}")
    df[REGION_COL] = pd.Categorical(regions, categories=Region.labels())

    for col in COUNT_COLUMNS:
        df[col] = _parse_count(df[col], col)

    return df.sort_values([DATE_COL, COUNTRY_COL], kind="stable").reset_index(drop=True)


def _parse_count(values: pd.Series, name: str) -> pd.Series:
    nums = pd.to_numeric(values.str.strip(), errors="coerce")
    if nums.isna().any():
        first = values[nums.isna()].iloc[0]
        raise ParseError(f"Non-numeric {name} in {int(nums.isna().sum())} row(s), first: {first!r}")
    if (nums < 0).any():
        raise ParseError(f"Negative {name} in {int((nums < 0).sum())} row(s)")
    if not np.all(np.mod(nums.to_numpy(dtype=float), 1) == 0):
        raise ParseError(f"Fractional {name} value(s)")
    return nums.astype("int64")

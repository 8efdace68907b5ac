import logging
from typing import List, Optional

import pandas as pd

from .config import COUNTRY_COL, COUNTRY_NAME_MAP, DEFAULT_FEATURE_KEY, GEO_NAME_COL
from .geo import feature_names


__all__ = ["normalize_country", "with_geo_names", "unmatched_countries"]


logger = logging.getLogger(__name__)


def normalize_country(name: str) -> str:
    return COUNTRY_NAME_MAP.get(name, name)


def with_geo_names(snapshot: pd.DataFrame) -> pd.DataFrame:
    out = snapshot.copy()
    out[GEO_NAME_COL] = out[COUNTRY_COL].map(normalize_country)
    return out


def unmatched_countries(snapshot: pd.DataFrame, geojson: Optional[dict],
                        featureidkey: str = DEFAULT_FEATURE_KEY) -> List[str]:
    """Countries of the snapshot that will show no value on the map."""
    if geojson is None or snapshot.empty:
        return []
    known = feature_names(geojson, featureidkey)
    names = snapshot[GEO_NAME_COL] if GEO_NAME_COL in snapshot.columns else snapshot[COUNTRY_COL].map(normalize_country)
    missing = sorted(set(names) - known)
    if missing:
        logger.info("%d country name(s) not found in boundary data: %s", len(missing), ", ".join(missing))
    return missing

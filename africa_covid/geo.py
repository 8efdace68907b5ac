import json
import logging
from pathlib import Path
from typing import Set

import requests

from .config import DEFAULT_FEATURE_KEY, GEOJSON_TIMEOUT


__all__ = ["load_boundaries", "feature_names"]


logger = logging.getLogger(__name__)


def load_boundaries(source: str, timeout: int = GEOJSON_TIMEOUT) -> dict:
    """Load a GeoJSON FeatureCollection from a URL or a local file.

    Args:
        source (str): http(s) URL or filesystem path.
        timeout (int): Request timeout in seconds for URLs.

    Raises:
        requests.RequestException: The download failed.
        OSError: The local file could not be read.
        ValueError: The payload is not a FeatureCollection.
    """
    if str(source).startswith(("http://", "https://")):
        logger.info("Downloading country boundaries from %s", source)
        response = requests.get(source, timeout=timeout)
        response.raise_for_status()
        geojson = response.json()
    else:
        with open(Path(source), "r", encoding="utf-8") as f:
            geojson = json.load(f)

    if not isinstance(geojson, dict) or geojson.get("type") != "FeatureCollection":
        raise ValueError(f"{source} is not a GeoJSON FeatureCollection")
    logger.debug("Loaded %d boundary features", len(geojson.get("features", [])))
    return geojson


def feature_names(geojson: dict, featureidkey: str = DEFAULT_FEATURE_KEY) -> Set[str]:
    path = featureidkey.split(".")
    names = set()
    for feature in geojson.get("features", []):
        value = feature
        for part in path:
            value = value.get(part) if isinstance(value, dict) else None
        if value is not None:
            names.add(value)
    return names

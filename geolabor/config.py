"""
geolabor/config.py

This file is the "single source of truth" for:

1) Where the BLS API lives and how much it accepts per call
2) Which reference boundary layers ship with the project (data/)
3) The defaults shared by every statistic (buffer distance)

Important vocabulary:
- A "layer" is one reference boundary dataset (counties, metro areas, ...).
  Each BLS program keys its series on a different kind of area, so each
  statistic in geolabor/series.py names the layer it selects regions from.
- Buffer distances are expressed in the units of the reference layer's CRS.
  The shipped Census cartographic boundary files are in NAD83 degrees, so the
  default of 0.09 is roughly 10 km.

Environment variables:
- BLS_API_KEY (optional): BLS v2 registration key.
- GEOLABOR_DATA_DIR (optional): directory holding the reference layers,
  if they are not in the repo's data/ folder.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

ROOT = Path(__file__).resolve().parents[1]

# Public API endpoint (v2 accepts up to 50 series per request).
BLS_ENDPOINT = "https://api.bls.gov/publicAPI/v2/timeseries/data/"
MAX_SERIES_PER_REQUEST = 50

# Default outward buffer used by the "contains" predicate.
DEFAULT_BUFFER = 0.09

DATA_DIR = Path(os.getenv("GEOLABOR_DATA_DIR", str(ROOT / "data")))

# Reference layers shipped with the project.
#
# - county:  Census cartographic boundary counties (GEOID = 5-digit FIPS)
# - cbsa:    Census cartographic boundary metro/micro areas (GEOID = CBSA code)
# - oes_msa: BLS OEWS metropolitan areas (GEOID = OEWS area code)
REFERENCE_LAYERS: dict[str, str] = {
    "county": "cb_2018_us_county_5m.shp",
    "cbsa": "cb_2018_us_cbsa_5m.shp",
    "oes_msa": "OES 2019 Shapefile.shp",
}


def get_api_key() -> Optional[str]:
    """Return the BLS registration key from the environment, if set."""
    return os.getenv("BLS_API_KEY") or None


def reference_path(layer: str) -> Path:
    """Resolve a reference layer name to its file under DATA_DIR."""
    if layer not in REFERENCE_LAYERS:
        raise KeyError(f"Unknown reference layer {layer!r}; expected one of {list(REFERENCE_LAYERS)}")
    return DATA_DIR / REFERENCE_LAYERS[layer]

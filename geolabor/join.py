"""
geolabor/join.py

Join BLS observations back onto the selected regions.

The area code of an observation is recovered by slicing its series ID with the
statistic's area_code_range. Regions are then left-joined to the observations
on that code, so every selected region shows up in the result even when BLS
has nothing for it.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import geopandas as gpd
import pandas as pd

logger = logging.getLogger(__name__)

MISSING_WARNING = (
    "There are missing values in the data. "
    "This often happens when a particular series does not exist."
)
UNDISCLOSED_WARNING = (
    "There are undisclosed values in the data. "
    "This usually happens when data are not disclosable."
)


def _warn(message: str, diagnostics: Optional[list[str]]) -> None:
    logger.warning(message)
    if diagnostics is not None:
        diagnostics.append(message)


def with_area_codes(frame: pd.DataFrame, area_code_range: tuple[int, int]) -> pd.DataFrame:
    """Copy of `frame` with an area_code column sliced out of series_id."""
    start, stop = area_code_range
    out = frame.copy()
    out["area_code"] = out["series_id"].astype(str).str.slice(start, stop)
    return out


def join_results(
    regions: gpd.GeoDataFrame,
    observations: pd.DataFrame,
    area_code_range: tuple[int, int],
    *,
    region_key: str = "GEOID",
    series_ids: Optional[Sequence[str]] = None,
    diagnostics: Optional[list[str]] = None,
) -> gpd.GeoDataFrame:
    """
    Left-join observations onto regions by area code.

    Parameters
    ----------
    regions:
        Selected reference regions.
    observations:
        Output of fetch_observations (must have a series_id column).
    area_code_range:
        (start, stop) slice of the series ID holding the area code.
    region_key:
        Column of `regions` holding the area code as it appears in series IDs.
    series_ids:
        The IDs that were requested. When given, the result has one row per
        requested series (series BLS did not return get empty observation
        fields) instead of one row per returned series.
    diagnostics:
        Optional list that non-fatal warnings are appended to.

    Returns
    -------
    GeoDataFrame with the region columns plus area_code and the observation
    columns. Every region appears at least once, in input order.
    """
    obs = with_area_codes(observations, area_code_range)
    left = regions.assign(area_code=regions[region_key].astype(str)).reset_index(drop=True)

    if series_ids is None:
        joined = left.merge(obs, how="left", on="area_code", indicator=True)
    else:
        requested = pd.DataFrame({"series_id": pd.Series(list(series_ids), dtype=object)})
        requested = with_area_codes(requested, area_code_range)
        requested = requested.drop_duplicates()
        left = left.merge(requested, how="left", on="area_code")
        joined = left.merge(obs.drop(columns="area_code"), how="left", on="series_id", indicator=True)

    matched = joined["_merge"] == "both"
    joined = joined.drop(columns="_merge")

    if (~matched).any():
        _warn(MISSING_WARNING, diagnostics)
    if "value" in joined and (matched & joined["value"].isna()).any():
        _warn(UNDISCLOSED_WARNING, diagnostics)

    return gpd.GeoDataFrame(joined, geometry=regions.geometry.name, crs=regions.crs)

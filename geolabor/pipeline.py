"""
geolabor/pipeline.py

Public entry points: one function per BLS program.

Each call runs the same four steps:
1) Load the user's boundary and the program's reference layer (config.py).
2) Select the reference regions that intersect / are contained in the boundary.
3) Build one series ID per region per combination of parameter codes.
4) Fetch the series from BLS in batches and left-join them onto the regions.

Example:
    from geolabor import laus
    result = laus("research_triangle.geojson", measure=[3, 4])
    result.data          # GeoDataFrame, one row per requested series
    result.diagnostics   # non-fatal warnings (missing / undisclosed values)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Union

import geopandas as gpd
import requests

from geolabor.bls_api import fetch_observations
from geolabor.config import DEFAULT_BUFFER, reference_path
from geolabor.join import join_results
from geolabor.regions import (
    InvalidArgumentError,
    Predicate,
    load_boundary,
    load_reference,
    select_regions,
)
from geolabor.series import STATISTICS, StatisticSpec, build_series_ids

logger = logging.getLogger(__name__)

Boundary = Union[str, Path, gpd.GeoDataFrame]


@dataclass
class LaborResult:
    """What every entry point returns."""
    data: gpd.GeoDataFrame
    series_ids: list[str]
    diagnostics: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------
# Options (one dataclass per program)
# ---------------------------------------------------------------------
# Shared fields:
# - predicate: "intersects" (default) keeps regions touching the boundary;
#              "contains" keeps regions inside the boundary buffered by `buffer`.
# - buffer:    outward buffer for "contains", in reference CRS units (0.09).
# - latest:    True (default) requests only the latest period of each series;
#              False requests the whole series.
@dataclass
class _Options:
    predicate: Union[Predicate, str] = Predicate.INTERSECTS
    buffer: float = DEFAULT_BUFFER
    latest: bool = True

    def parameter_overrides(self) -> dict[str, Any]:
        shared = {f.name for f in fields(_Options)}
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name not in shared}


@dataclass
class LausOptions(_Options):
    # LAUS measure codes; 3 = unemployment rate, 4 = unemployment,
    # 5 = employment, 6 = labor force.
    measure: list[int] = field(default_factory=lambda: [3])


@dataclass
class QcewOptions(_Options):
    # QCEW data type (1 = all employees), establishment size (0 = all sizes),
    # ownership (5 = private) and industry (10 = total, all industries).
    data_type: list[int] = field(default_factory=lambda: [1])
    size: list[int] = field(default_factory=lambda: [0])
    ownership: list[int] = field(default_factory=lambda: [5])
    industry: list[Union[int, str]] = field(default_factory=lambda: [10])


@dataclass
class OewsOptions(_Options):
    # SOC occupation code ("000000" = all occupations) and OEWS data type
    # ("01" = employment).
    occupation: list[str] = field(default_factory=lambda: ["000000"])
    data_type: list[str] = field(default_factory=lambda: ["01"])


@dataclass
class CesOptions(_Options):
    # CES supersector+industry code ("00000000" = total nonfarm) and data type
    # ("01" = all employees, thousands).
    industry: list[str] = field(default_factory=lambda: ["00000000"])
    data_type: list[str] = field(default_factory=lambda: ["01"])


OPTIONS: dict[str, type[_Options]] = {
    "laus": LausOptions,
    "qcew": QcewOptions,
    "oews": OewsOptions,
    "ces": CesOptions,
}


# ---------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------
def _as_frame(boundary: Boundary) -> gpd.GeoDataFrame:
    if isinstance(boundary, gpd.GeoDataFrame):
        return boundary
    return load_boundary(boundary)


def fetch_statistic(
    name: str,
    boundary: Boundary,
    api_key: Optional[str] = None,
    options: Optional[_Options] = None,
    *,
    reference: Optional[Union[str, Path, gpd.GeoDataFrame]] = None,
    session: Optional[requests.Session] = None,
) -> LaborResult:
    """
    Run the full pipeline for one BLS program.

    Parameters
    ----------
    name:
        Program name ("laus", "qcew", "oews" or "ces").
    boundary:
        Path to the user's boundary file, or an already loaded GeoDataFrame.
    api_key:
        BLS registration key (defaults to the BLS_API_KEY environment variable).
    options:
        The program's options dataclass; defaults when None.
    reference:
        Override for the program's reference layer (path or GeoDataFrame).
    session:
        Optional requests.Session used for the BLS calls.
    """
    if name not in STATISTICS:
        raise InvalidArgumentError(f"Unknown statistic: {name!r}. Expected one of {list(STATISTICS)}")
    spec: StatisticSpec = STATISTICS[name]
    options = options if options is not None else OPTIONS[name]()

    # Validate everything cheap before touching any file or the network.
    predicate = Predicate.parse(options.predicate)
    grid = spec.parameter_grid(**options.parameter_overrides())

    user_shape = _as_frame(boundary)
    if reference is None:
        reference = reference_path(spec.layer)
    ref = reference if isinstance(reference, gpd.GeoDataFrame) else load_reference(reference)

    regions = select_regions(user_shape, ref, predicate, options.buffer)
    regions = regions.assign(area_code=spec.area_codes(regions))

    series_ids = build_series_ids(regions, grid, spec)
    logger.info("Built %d %s series IDs for %d regions", len(series_ids), spec.name.upper(), len(regions))

    diagnostics: list[str] = []
    observations = fetch_observations(
        series_ids,
        api_key,
        options.latest,
        session=session,
        diagnostics=diagnostics,
    )
    data = join_results(
        regions,
        observations,
        spec.area_code_range,
        region_key="area_code",
        series_ids=series_ids,
        diagnostics=diagnostics,
    )
    return LaborResult(data=data, series_ids=series_ids, diagnostics=diagnostics)


def laus(boundary: Boundary, api_key: Optional[str] = None, **kwargs: Any) -> LaborResult:
    """
    Local Area Unemployment Statistics for the counties around `boundary`.

    Keyword arguments are LausOptions fields: measure, predicate, buffer, latest.
    """
    return fetch_statistic("laus", boundary, api_key, LausOptions(**kwargs))


def qcew(boundary: Boundary, api_key: Optional[str] = None, **kwargs: Any) -> LaborResult:
    """
    Quarterly Census of Employment and Wages for the counties around `boundary`.

    Keyword arguments are QcewOptions fields: data_type, size, ownership,
    industry, predicate, buffer, latest.
    """
    return fetch_statistic("qcew", boundary, api_key, QcewOptions(**kwargs))


def oews(boundary: Boundary, api_key: Optional[str] = None, **kwargs: Any) -> LaborResult:
    """
    Occupational Employment and Wage Statistics for the OEWS metro areas
    around `boundary`.

    Keyword arguments are OewsOptions fields: occupation, data_type,
    predicate, buffer, latest.
    """
    return fetch_statistic("oews", boundary, api_key, OewsOptions(**kwargs))


def ces(boundary: Boundary, api_key: Optional[str] = None, **kwargs: Any) -> LaborResult:
    """
    Current Employment Statistics for the metro areas (CBSAs) around `boundary`.

    Keyword arguments are CesOptions fields: industry, data_type, predicate,
    buffer, latest.
    """
    return fetch_statistic("ces", boundary, api_key, CesOptions(**kwargs))

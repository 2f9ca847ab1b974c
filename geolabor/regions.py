"""
geolabor/regions.py

Spatial selection of reference regions (counties, metro areas) against a
user-supplied boundary.

Two predicates are supported:

- intersects: keep every reference region touching any user geometry.
- contains:   buffer each user geometry outward, then keep every reference
              region lying entirely inside at least one buffered geometry.

Note the direction of "contains": the *buffered user geometry* contains the
*reference region*. The buffer lets a county whose border wiggles slightly
outside the user shape still count as inside.
"""

from __future__ import annotations

import logging
import warnings
from enum import Enum
from pathlib import Path
from typing import Union

import geopandas as gpd
import pandas as pd

from geolabor.config import DATA_DIR, DEFAULT_BUFFER

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class InvalidArgumentError(ValueError):
    """Raised when a caller passes an option value we do not support."""
    pass


class Predicate(str, Enum):
    INTERSECTS = "intersects"
    CONTAINS = "contains"

    @classmethod
    def parse(cls, value: Union["Predicate", str]) -> "Predicate":
        """Accept an enum member or its (case-insensitive) string value."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidArgumentError(
            f"Invalid predicate: {value!r}. Expected one of {[p.value for p in cls]}"
        )


def load_boundary(path: PathLike) -> gpd.GeoDataFrame:
    """Read the user's boundary file (any format geopandas can open)."""
    return gpd.read_file(path)


def load_reference(path: PathLike) -> gpd.GeoDataFrame:
    """
    Read a reference region layer.

    Relative paths are resolved against DATA_DIR so callers can pass the plain
    file name of a shipped layer.
    """
    path = Path(path)
    if not path.is_absolute() and not path.exists():
        path = DATA_DIR / path
    return gpd.read_file(path)


def _align_crs(user_shape: gpd.GeoDataFrame, reference: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    # Buffer distances are in reference units, so the user shape follows the reference.
    if user_shape.crs is not None and reference.crs is not None and user_shape.crs != reference.crs:
        logger.info("Reprojecting boundary from %s to %s", user_shape.crs, reference.crs)
        return user_shape.to_crs(reference.crs)
    return user_shape


def intersecting_regions(user_shape: gpd.GeoDataFrame, reference: gpd.GeoDataFrame) -> gpd.GeoDataFrame:
    """Reference rows whose geometry intersects any user geometry."""
    user_union = user_shape.geometry.union_all()
    mask = reference.geometry.intersects(user_union)
    return reference.loc[mask.to_numpy()]


def buffer_geometries(user_shape: gpd.GeoDataFrame, buffer: float) -> gpd.GeoSeries:
    """
    Buffer every user geometry outward by `buffer` (CRS units).

    The shipped layers are in geographic coordinates and the buffer is meant in
    degrees, so geopandas' "geographic CRS" warning is expected and muted.
    """
    with warnings.catch_warnings():
        warnings.filterwarnings("ignore", message="Geometry is in a geographic CRS", category=UserWarning)
        return user_shape.geometry.buffer(buffer)


def contained_regions(
    user_shape: gpd.GeoDataFrame,
    reference: gpd.GeoDataFrame,
    buffer: float = DEFAULT_BUFFER,
) -> gpd.GeoDataFrame:
    """Reference rows fully inside at least one user geometry buffered by `buffer`."""
    buffered = buffer_geometries(user_shape, buffer)
    buffered = buffered[buffered.notna() & ~buffered.is_empty]
    if reference.crs is not None:
        buffered = buffered.set_crs(reference.crs, allow_override=True)

    # Reference region "within" buffered shape; one row per (region, shape) pair.
    regions = reference[[reference.geometry.name]].reset_index(drop=True)
    pairs = gpd.sjoin(regions, gpd.GeoDataFrame(geometry=buffered), how="inner", predicate="within")
    mask = pd.RangeIndex(len(reference)).isin(pairs.index)
    return reference.loc[mask]


def select_regions(
    user_shape: gpd.GeoDataFrame,
    reference: gpd.GeoDataFrame,
    predicate: Union[Predicate, str] = Predicate.INTERSECTS,
    buffer: float = DEFAULT_BUFFER,
) -> gpd.GeoDataFrame:
    """
    Select the reference regions matching `predicate` against the user shape.

    Parameters
    ----------
    user_shape:
        GeoDataFrame with one or more user geometries.
    reference:
        GeoDataFrame of reference regions (must have a unique region code column).
    predicate:
        "intersects" or "contains" (or a Predicate member).
    buffer:
        Outward buffer applied to the user geometries for "contains", in the
        reference CRS's units. Ignored for "intersects".

    Returns
    -------
    GeoDataFrame with the selected reference rows, in reference order.

    Raises
    ------
    InvalidArgumentError:
        If `predicate` is not one we support. Raised before any geometry work.
    """
    pred = Predicate.parse(predicate)
    user_shape = _align_crs(user_shape, reference)

    if pred is Predicate.INTERSECTS:
        selected = intersecting_regions(user_shape, reference)
    else:
        selected = contained_regions(user_shape, reference, buffer)

    logger.info("Selected %d of %d reference regions (%s)", len(selected), len(reference), pred.value)
    return selected

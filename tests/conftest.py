"""Shared fixtures: a 3x3 grid of square "counties" and fake BLS responses."""
import json
from unittest.mock import Mock

import geopandas as gpd
import pytest
from shapely.geometry import box

CRS = "EPSG:4269"


def make_response(payload=None, status_code=200, text=None):
    """Build a stand-in for requests.Response."""
    resp = Mock()
    resp.status_code = status_code
    resp.text = text if text is not None else json.dumps(payload)
    resp.json.return_value = payload
    return resp


def bls_payload(series):
    """series: mapping of series ID -> list of data points."""
    return {
        "status": "REQUEST_SUCCEEDED",
        "message": [],
        "Results": {
            "series": [{"seriesID": sid, "data": data} for sid, data in series.items()]
        },
    }


def data_point(value="4.1", year="2024", period="M06", period_name="June", latest="true", footnotes=None):
    return {
        "year": year,
        "period": period,
        "periodName": period_name,
        "latest": latest,
        "value": value,
        "footnotes": footnotes if footnotes is not None else [{}],
    }


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    monkeypatch.delenv("BLS_API_KEY", raising=False)


@pytest.fixture
def counties():
    """Unit squares on a 3x3 grid; GEOIDs 37001..37009 in row-major order."""
    rows = []
    n = 1
    for y in range(3):
        for x in range(3):
            rows.append(
                {
                    "STATEFP": "37",
                    "GEOID": f"37{n:03d}",
                    "NAME": f"County {n}",
                    "geometry": box(x, y, x + 1, y + 1),
                }
            )
            n += 1
    return gpd.GeoDataFrame(rows, geometry="geometry", crs=CRS)


@pytest.fixture
def boundary():
    """A polygon straddling the shared corner of counties 37001, 37002, 37004, 37005."""
    return gpd.GeoDataFrame({"name": ["study area"]}, geometry=[box(0.5, 0.5, 1.5, 1.5)], crs=CRS)


@pytest.fixture
def boundary_file(boundary, tmp_path):
    path = tmp_path / "boundary.geojson"
    boundary.to_file(path, driver="GeoJSON")
    return path

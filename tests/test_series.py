"""Unit tests for series-ID construction."""
import pandas as pd
import pytest

from geolabor.regions import InvalidArgumentError
from geolabor.series import CES, LAUS, OEWS, QCEW, STATISTICS, build_series_ids


@pytest.fixture
def regions():
    return pd.DataFrame({"STATEFP": ["37", "37"], "GEOID": ["37063", "37183"]})


class TestTemplates:
    """Test the per-program ID layouts."""

    def test_laus(self, regions):
        ids = build_series_ids(regions, LAUS.parameter_grid(), LAUS)

        assert ids == ["LAUCN370630000000003", "LAUCN371830000000003"]

    def test_laus_two_digit_measure(self, regions):
        ids = build_series_ids(regions.head(1), LAUS.parameter_grid(measure=[3, 10]), LAUS)

        assert ids == ["LAUCN370630000000003", "LAUCN370630000000010"]
        assert {len(i) for i in ids} == {20}

    def test_qcew(self, regions):
        ids = build_series_ids(regions.head(1), QCEW.parameter_grid(), QCEW)

        assert ids == ["ENU3706310510"]

    def test_oews_pads_area(self):
        regions = pd.DataFrame({"GEOID": ["39580"]})

        ids = build_series_ids(regions, OEWS.parameter_grid(), OEWS)

        assert ids == ["OEUM003958000000000000001"]
        assert OEWS.extract_area_code(ids[0]) == "0039580"

    def test_ces(self):
        regions = pd.DataFrame({"STATEFP": ["37"], "GEOID": ["39580"]})

        ids = build_series_ids(regions, CES.parameter_grid(), CES)

        assert ids == ["SMU37395800000000001"]
        assert CES.extract_area_code(ids[0]) == "39580"

    def test_registry(self):
        assert set(STATISTICS) == {"laus", "qcew", "oews", "ces"}


class TestBuildSeriesIds:
    """Test ordering, cardinality and determinism."""

    def test_cartesian_product_length(self, regions):
        grid = QCEW.parameter_grid(data_type=[1, 2], ownership=[0, 5, 1], industry=["10", "1012"])

        ids = build_series_ids(regions, grid, QCEW)

        assert len(ids) == len(regions) * 2 * 3 * 2
        assert len(set(ids)) == len(ids)

    def test_region_outer_parameter_inner(self, regions):
        ids = build_series_ids(regions, LAUS.parameter_grid(measure=[3, 4]), LAUS)

        assert ids == [
            "LAUCN370630000000003",
            "LAUCN370630000000004",
            "LAUCN371830000000003",
            "LAUCN371830000000004",
        ]

    def test_deterministic(self, regions):
        grid = LAUS.parameter_grid(measure=[3, 4, 5])

        assert build_series_ids(regions, grid, LAUS) == build_series_ids(regions, grid, LAUS)

    def test_area_code_round_trip(self, regions):
        for spec in (LAUS, QCEW, CES):
            for sid in build_series_ids(regions, spec.parameter_grid(), spec):
                assert spec.extract_area_code(sid) in set(regions["GEOID"])

    def test_no_regions(self):
        empty = pd.DataFrame({"STATEFP": [], "GEOID": []})

        assert build_series_ids(empty, LAUS.parameter_grid(), LAUS) == []


class TestParameterGrid:
    """Test parameter resolution."""

    def test_defaults(self):
        assert QCEW.parameter_grid() == [{"data_type": 1, "size": 0, "ownership": 5, "industry": 10}]

    def test_first_parameter_varies_slowest(self):
        grid = OEWS.parameter_grid(occupation=["000000", "151252"], data_type=["01", "04"])

        assert [(g["occupation"], g["data_type"]) for g in grid] == [
            ("000000", "01"),
            ("000000", "04"),
            ("151252", "01"),
            ("151252", "04"),
        ]

    def test_repeated_codes_collapse(self):
        grid = LAUS.parameter_grid(measure=[3, 4, 3])

        assert grid == [{"measure": 3}, {"measure": 4}]

    def test_unknown_parameter(self):
        with pytest.raises(InvalidArgumentError):
            LAUS.parameter_grid(industry=[10])

    def test_empty_list(self):
        with pytest.raises(InvalidArgumentError):
            LAUS.parameter_grid(measure=[])

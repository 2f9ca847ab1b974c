"""
geolabor/series.py

Series-ID construction for the four BLS programs we support.

Every BLS series ID is a fixed-width string: a program prefix, an area code and
a handful of program-specific parameter codes. Each program is described here
by a StatisticSpec holding:

- template:        a str.format template. Fixed-width fields carry a
                   zero-padding format spec (e.g. "{measure:0>2}").
- area_code_range: where the area code sits inside the rendered ID
                   (0-based, half-open). The joiner slices it back out to
                   match observations to regions.
- parameters:      parameter name -> default list of codes. Callers may pass
                   several codes per parameter; we request the Cartesian
                   product.

Code lists:
- LAUS measures:   https://download.bls.gov/pub/time.series/la/la.measure
- QCEW codes:      https://www.bls.gov/cew/classifications/
- OEWS codes:      https://download.bls.gov/pub/time.series/oe/
- CES (SM) codes:  https://download.bls.gov/pub/time.series/sm/
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence

import pandas as pd

from geolabor.regions import InvalidArgumentError


@dataclass(frozen=True)
class StatisticSpec:
    name: str
    title: str
    layer: str
    template: str
    area_code_range: tuple[int, int]
    parameters: Mapping[str, Sequence[Any]]
    area_width: int = 5
    region_fields: Mapping[str, str] = field(default_factory=lambda: {"area": "GEOID"})

    def area_code(self, value: Any) -> str:
        """Zero-pad a region code to the width the template expects."""
        return str(value).zfill(self.area_width)

    def area_codes(self, regions: pd.DataFrame) -> pd.Series:
        return regions[self.region_fields["area"]].map(self.area_code)

    def extract_area_code(self, series_id: str) -> str:
        start, stop = self.area_code_range
        return series_id[start:stop]

    def parameter_grid(self, **overrides: Iterable[Any]) -> list[dict[str, Any]]:
        """
        Resolve parameter lists (defaults + overrides) into their Cartesian product.

        Combinations are ordered with the first declared parameter varying
        slowest, matching the order series IDs are built and requested in.
        """
        unknown = set(overrides) - set(self.parameters)
        if unknown:
            raise InvalidArgumentError(
                f"Unknown {self.name} parameter(s): {sorted(unknown)}; expected {list(self.parameters)}"
            )

        lists: dict[str, list[Any]] = {}
        for name, default in self.parameters.items():
            values = overrides.get(name)
            # Repeated codes would request the same series twice.
            values = list(dict.fromkeys(default if values is None else values))
            if not values:
                raise InvalidArgumentError(f"{self.name} parameter {name!r} needs at least one code")
            lists[name] = values

        names = list(lists)
        return [dict(zip(names, combo)) for combo in itertools.product(*lists.values())]

    def render(self, region: Mapping[str, Any], params: Mapping[str, Any]) -> str:
        fields = {key: region[column] for key, column in self.region_fields.items()}
        fields["area"] = self.area_code(fields["area"])
        return self.template.format(**fields, **params)


def build_series_ids(
    regions: pd.DataFrame,
    parameter_grid: Sequence[Mapping[str, Any]],
    spec: StatisticSpec,
) -> list[str]:
    """
    Render one series ID per region per parameter combination.

    Regions form the outer loop (in dataset order), parameter combinations the
    inner loop, so the result has len(regions) * len(parameter_grid) entries.
    Pure: no I/O.
    """
    columns = list(dict.fromkeys(spec.region_fields.values()))
    return [
        spec.render(region, params)
        for region in regions[columns].to_dict("records")
        for params in parameter_grid
    ]


# ---------------------------------------------------------------------
# Supported programs
# ---------------------------------------------------------------------
LAUS = StatisticSpec(
    name="laus",
    title="Local Area Unemployment Statistics",
    layer="county",
    template="LAUCN{area}00000000{measure:0>2}",
    area_code_range=(5, 10),
    parameters={"measure": [3]},
)

QCEW = StatisticSpec(
    name="qcew",
    title="Quarterly Census of Employment and Wages",
    layer="county",
    template="ENU{area}{data_type}{size}{ownership}{industry}",
    area_code_range=(3, 8),
    parameters={"data_type": [1], "size": [0], "ownership": [5], "industry": [10]},
)

OEWS = StatisticSpec(
    name="oews",
    title="Occupational Employment and Wage Statistics",
    layer="oes_msa",
    template="OEUM{area}000000{occupation:0>6}{data_type:0>2}",
    area_code_range=(4, 11),
    area_width=7,
    parameters={"occupation": ["000000"], "data_type": ["01"]},
)

CES = StatisticSpec(
    name="ces",
    title="Current Employment Statistics (State and Metro Area)",
    layer="cbsa",
    template="SMU{state:0>2}{area}{industry:0>8}{data_type:0>2}",
    area_code_range=(5, 10),
    parameters={"industry": ["00000000"], "data_type": ["01"]},
    region_fields={"area": "GEOID", "state": "STATEFP"},
)

STATISTICS: dict[str, StatisticSpec] = {spec.name: spec for spec in (LAUS, QCEW, OEWS, CES)}

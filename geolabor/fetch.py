"""
geolabor/fetch.py

Command-line runner around the pipeline.

What it does:
1) Runs one BLS program (laus, qcew, oews or ces) for a boundary file.
2) Writes the joined table:
   - .csv                      -> plain table (geometry column dropped)
   - .geojson / .gpkg / .shp   -> vector file with the region geometries
3) Prints a short summary plus any data-quality warnings.

How to run locally:
  python -m geolabor.fetch laus data/research_triangle.geojson

You can override parameter codes (repeat --param, comma-separate values):
  python -m geolabor.fetch qcew area.geojson --param industry=10,1012 --param ownership=5

Environment variables:
- BLS_API_KEY (optional): BLS v2 registration key (or pass --api-key).
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

from geolabor.config import DEFAULT_BUFFER
from geolabor.pipeline import OPTIONS, LaborResult, fetch_statistic
from geolabor.regions import InvalidArgumentError, Predicate
from geolabor.series import STATISTICS

VECTOR_DRIVERS = {
    ".geojson": "GeoJSON",
    ".json": "GeoJSON",
    ".gpkg": "GPKG",
    ".shp": "ESRI Shapefile",
}


def parse_param_overrides(statistic: str, items: Sequence[str]) -> dict[str, list[Any]]:
    """
    Turn ["measure=3,4", ...] into {"measure": [3, 4], ...}.

    Numeric values are converted to int when the statistic's default codes are
    ints, otherwise kept as strings (leading zeros matter for string codes).
    """
    spec = STATISTICS[statistic]
    overrides: dict[str, list[Any]] = {}
    for item in items:
        name, sep, raw = item.partition("=")
        name = name.strip()
        if not sep or name not in spec.parameters:
            raise InvalidArgumentError(
                f"Bad --param {item!r}; expected NAME=V1,V2 with NAME in {list(spec.parameters)}"
            )
        values = [v.strip() for v in raw.split(",") if v.strip()]
        if all(isinstance(d, int) for d in spec.parameters[name]):
            values = [int(v) if v.isdigit() else v for v in values]
        overrides[name] = values
    return overrides


def write_result(result: LaborResult, output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    driver = VECTOR_DRIVERS.get(output.suffix.lower())
    if driver is not None:
        result.data.to_file(output, driver=driver)
    else:
        geometry = result.data.geometry.name
        result.data.drop(columns=geometry).to_csv(output, index=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch BLS series for the areas around a boundary file.")
    parser.add_argument("statistic", choices=sorted(STATISTICS))
    parser.add_argument("boundary", help="Boundary file (any vector format geopandas can read)")
    parser.add_argument("--api-key", default=None, help="BLS registration key (default: $BLS_API_KEY)")
    parser.add_argument("--param", action="append", default=[], metavar="NAME=V1,V2")
    parser.add_argument("--predicate", choices=[p.value for p in Predicate], default=Predicate.INTERSECTS.value)
    parser.add_argument("--buffer", type=float, default=DEFAULT_BUFFER)
    parser.add_argument("--full-series", action="store_true", help="Request whole series, not only the latest period")
    parser.add_argument("--output", default=None, help="Output file (.csv, .geojson, .gpkg, .shp)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def run(argv: Optional[Sequence[str]] = None) -> LaborResult:
    """Parse `argv`, run the pipeline, write the output file and return the result."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    options = OPTIONS[args.statistic](
        predicate=args.predicate,
        buffer=args.buffer,
        latest=not args.full_series,
        **parse_param_overrides(args.statistic, args.param),
    )
    result = fetch_statistic(args.statistic, args.boundary, args.api_key, options)

    output = Path(args.output) if args.output else Path(f"{args.statistic}_{Path(args.boundary).stem}.csv")
    write_result(result, output)

    print(
        f"Wrote {len(result.data)} rows ({len(result.series_ids)} series requested) to {output}"
    )
    for warning in result.diagnostics:
        print(f"[warn] {warning}")
    return result


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    CLI entrypoint so the runner can be used with:
        python -m geolabor.fetch STATISTIC BOUNDARY [options]
    """
    run(argv)


if __name__ == "__main__":
    main()

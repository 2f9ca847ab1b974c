"""geolabor: BLS labor statistics for the areas around a boundary file."""

from geolabor.bls_api import BLSError, DataFormatError, ExternalServiceError
from geolabor.pipeline import (
    CesOptions,
    LaborResult,
    LausOptions,
    OewsOptions,
    QcewOptions,
    ces,
    fetch_statistic,
    laus,
    oews,
    qcew,
)
from geolabor.regions import InvalidArgumentError, Predicate

__all__ = [
    "BLSError",
    "CesOptions",
    "DataFormatError",
    "ExternalServiceError",
    "InvalidArgumentError",
    "LaborResult",
    "LausOptions",
    "OewsOptions",
    "Predicate",
    "QcewOptions",
    "ces",
    "fetch_statistic",
    "laus",
    "oews",
    "qcew",
]

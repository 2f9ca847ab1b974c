"""
geolabor/bls_api.py

Small wrapper around the BLS Public Data API (v2).

Why this file exists:
- Keeps API request/response parsing isolated from the geometry code
- Handles the API's 50-series-per-request limit by batching
- Provides a consistent pandas DataFrame output format for the joiner

Main output:
- fetch_observations(...): long/tidy format (one row per series per period)

Notes about BLS API responses:
- Values come back as strings. Undisclosed or unavailable values are marked
  with non-numeric placeholders such as "-"; we keep those rows with a NaN
  value instead of failing.
- Requests for series that do not exist still succeed; BLS lists them in the
  top-level "message" array and simply omits them from "series".
- With "latest": true, BLS returns only the most recent period per series.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Iterator, Optional, Sequence

import pandas as pd
import requests

from geolabor.config import BLS_ENDPOINT, MAX_SERIES_PER_REQUEST, get_api_key

logger = logging.getLogger(__name__)

OBSERVATION_COLUMNS = [
    "series_id",
    "year",
    "period",
    "period_name",
    "latest",
    "value",
    "footnotes",
]

NO_DATA_WARNING = "No data found for the selected geometries."


class BLSError(RuntimeError):
    """Base class for failures talking to the BLS API."""
    pass


class ExternalServiceError(BLSError):
    """Raised when the BLS API answers with a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error: {status_code} - {body}")


class DataFormatError(BLSError):
    """Raised when a BLS response does not have the shape we expect."""
    pass


def chunk_series_ids(series_ids: Sequence[str], size: int = MAX_SERIES_PER_REQUEST) -> Iterator[list[str]]:
    """Yield consecutive chunks of at most `size` IDs, preserving order."""
    if size < 1:
        raise ValueError("chunk size must be positive")
    for start in range(0, len(series_ids), size):
        yield list(series_ids[start:start + size])


def _parse_latest(raw: Any) -> bool:
    return str(raw).strip().lower() == "true"


def _join_footnotes(footnotes: Any) -> str:
    """Footnotes: list of dicts like {"code":"...","text":"..."}; keep the texts."""
    texts: list[str] = []
    for fn in footnotes or []:
        if fn and fn.get("text"):
            texts.append(fn["text"])
    return ", ".join(texts)


def parse_series(payload: dict[str, Any]) -> list[dict[str, Any]]:
    """
    Turn one decoded BLS response into observation rows.

    Raises DataFormatError if the response is missing any of the keys we rely on.
    """
    try:
        series_list = payload["Results"]["series"]
        rows: list[dict[str, Any]] = []
        for series in series_list:
            sid = series["seriesID"]
            for item in series["data"]:
                rows.append(
                    {
                        "series_id": sid,
                        "year": item["year"],
                        "period": item["period"],
                        "period_name": item["periodName"],
                        "latest": _parse_latest(item.get("latest", False)),
                        # Values come back as strings; "-" and friends become NaN.
                        "value": pd.to_numeric(item["value"], errors="coerce"),
                        "footnotes": _join_footnotes(item.get("footnotes")),
                    }
                )
    except (KeyError, TypeError, AttributeError) as e:
        raise DataFormatError(f"Unexpected BLS response structure: {e!r}") from e
    return rows


def _post_chunk(
    chunk: list[str],
    api_key: Optional[str],
    latest: bool,
    session: Optional[requests.Session],
    timeout_s: Optional[float],
) -> dict[str, Any]:
    headers = {"Content-type": "application/json"}
    payload: dict[str, Any] = {"seriesid": chunk, "latest": latest}
    if api_key:
        payload["registrationkey"] = api_key

    post = session.post if session is not None else requests.post
    resp = post(BLS_ENDPOINT, json=payload, headers=headers, timeout=timeout_s)

    if resp.status_code != 200:
        raise ExternalServiceError(resp.status_code, resp.text)

    try:
        data = resp.json()
    except ValueError as e:
        raise DataFormatError(f"BLS response was not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DataFormatError(f"Unexpected BLS response structure: {type(data).__name__}")

    # BLS includes a "status" field indicating success/failure.
    status = data.get("status")
    if status is not None and status != "REQUEST_SUCCEEDED":
        raise ExternalServiceError(resp.status_code, json.dumps(data))

    for msg in data.get("message", []) or []:
        logger.info("BLS: %s", msg)

    return data


def fetch_observations(
    series_ids: Sequence[str],
    api_key: Optional[str] = None,
    latest: bool = True,
    *,
    session: Optional[requests.Session] = None,
    diagnostics: Optional[list[str]] = None,
    timeout_s: Optional[float] = None,
) -> pd.DataFrame:
    """
    Request every series in `series_ids` and return the observations.

    Parameters
    ----------
    series_ids:
        BLS series IDs. Split into consecutive batches of at most 50, one POST
        per batch, sent one after another.
    api_key:
        BLS registration key. Falls back to the BLS_API_KEY environment
        variable; if neither is set the request is sent without a key.
    latest:
        True to request only the most recent period of each series, False for
        the whole series.
    session:
        Optional requests.Session to send the calls through.
    diagnostics:
        Optional list that non-fatal warnings are appended to.
    timeout_s:
        HTTP timeout seconds (None waits for the transport).

    Returns
    -------
    pd.DataFrame with columns:
      - series_id
      - year, period, period_name (strings, as BLS reports them)
      - latest (bool)
      - value (float; NaN when BLS reports a non-numeric placeholder)
      - footnotes (comma-separated string; may be empty)

    Raises
    ------
    ExternalServiceError:
        Any batch answered with a non-200 status (or a failed request status).
        Nothing fetched so far is returned; there is no retry.
    DataFormatError:
        Any batch whose body is not the JSON structure described above.
    """
    if api_key is None:
        api_key = get_api_key()

    total_calls = math.ceil(len(series_ids) / MAX_SERIES_PER_REQUEST)
    rows: list[dict[str, Any]] = []

    for current_call, chunk in enumerate(chunk_series_ids(series_ids), start=1):
        logger.info("Performing call %d of %d to the BLS API...", current_call, total_calls)
        data = _post_chunk(chunk, api_key, latest, session, timeout_s)
        rows.extend(parse_series(data))

    df = pd.DataFrame(rows, columns=OBSERVATION_COLUMNS)
    df["value"] = df["value"].astype(float)
    df["latest"] = df["latest"].astype(bool)

    if df.empty:
        logger.warning(NO_DATA_WARNING)
        if diagnostics is not None:
            diagnostics.append(NO_DATA_WARNING)

    return df

# analysis/series.py
# Splits a year -> value mapping into "actual" and "forecast" chart points.
# The split is pinned to a fixed boundary year (config.BOUNDARY_YEAR), not to today's date.

from __future__ import annotations

from typing import Any, List, Mapping, Sequence, Union

from config import BOUNDARY_YEAR
from schemas.market_schema import ChartPoint, MarketRecord, is_year_key


RecordLike = Union[MarketRecord, Mapping[str, Any]]


def _as_mapping(record: RecordLike) -> Mapping[str, Any]:
    if isinstance(record, MarketRecord):
        return record.raw
    return record or {}


def year_keys(record: RecordLike) -> List[str]:
    """
    All 4-digit year keys, ascending.
    Lexicographic order on 4-digit strings equals numeric order.
    """
    return sorted(k for k in _as_mapping(record).keys() if is_year_key(k))


def boundary_index(years: Sequence[str], boundary_year: str = BOUNDARY_YEAR) -> int:
    """
    Position of the boundary year in the sorted year list, or -1 if missing.

    A missing boundary year makes every point a forecast. This mirrors the
    pinned-year policy and is kept as-is until product decides otherwise.
    """
    try:
        return list(years).index(boundary_year)
    except ValueError:
        return -1


def classify_series(record: RecordLike, boundary_year: str = BOUNDARY_YEAR) -> List[ChartPoint]:
    """
    Build ordered chart points from a market record.

    Years up to and including the boundary go to `actual`, later years go to
    `forecast`; the other field stays None. Values are passed through without
    coercion, so non-numeric or null values reach the chart unchanged.
    """
    data = _as_mapping(record)
    years = year_keys(data)
    cut = boundary_index(years, boundary_year)

    points: List[ChartPoint] = []
    for i, year in enumerate(years):
        value = data[year]
        points.append(
            ChartPoint(
                year=year,
                actual=value if i <= cut else None,
                forecast=value if i > cut else None,
            )
        )
    return points

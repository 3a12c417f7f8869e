# exports/exporter.py
# Export the shown market data as CSV/JSON for Streamlit downloads.

from __future__ import annotations

import json
from datetime import datetime
from typing import Any, List, Optional

from schemas.market_schema import ChartPoint, MarketRecord
from utils.helpers import file_stem, utc_today_compact
from utils.vis import chart_points_to_df


def _json_safe(obj: Any) -> Any:
    """
    Convert values a pasted/remote record may carry into JSON-safe forms.
    Handles numpy/pandas scalars, datetimes, tuples/sets; falls back to str().
    """
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(k): _json_safe(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_json_safe(x) for x in obj]
    if isinstance(obj, set):
        return [_json_safe(x) for x in sorted(obj, key=str)]
    # numpy / pandas scalars
    if hasattr(obj, "item") and callable(getattr(obj, "item")):
        try:
            return obj.item()
        except (TypeError, ValueError):
            pass
    return str(obj)


def chart_points_to_csv_bytes(points: List[ChartPoint]) -> bytes:
    """
    Columns: year, actual, forecast. Empty cells where a series has no value.
    """
    df = chart_points_to_df(points)
    df["year"] = df["year"].astype(str)
    # utf-8-sig so Excel opens Japanese headers/units correctly
    return df.to_csv(index=False).encode("utf-8-sig")


def record_to_json_bytes(record: Optional[MarketRecord]) -> bytes:
    """
    Full record export (years + metadata), key order preserved.
    """
    raw = record.to_dict() if record is not None else {}
    return json.dumps(_json_safe(raw), indent=2, ensure_ascii=False).encode("utf-8")


def export_file_name(display_market: str, suffix: str) -> str:
    return f"{file_stem(display_market)}_{utc_today_compact()}.{suffix}"

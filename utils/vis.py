# utils/vis.py
# Chart/visual helpers for the Streamlit UI (presentation-only).
# Purpose: turn a MarketRecord + its classified points into a Plotly bar chart and display strings.
# NOTE: No acquisition logic here; Streamlit rendering stays in app.py.

from __future__ import annotations

from dataclasses import dataclass, field
from numbers import Number
from typing import Any, List, Optional

import pandas as pd
import plotly.graph_objects as go

from analysis.series import classify_series
from config import (
    ACTUAL_SHORT_LABEL,
    BOUNDARY_YEAR,
    CHART_CFG,
    FORECAST_SHORT_LABEL,
    SOURCES_PREFIX,
)
from schemas.market_schema import ChartPoint, MarketRecord


# -----------------------------
# Value formatting
# -----------------------------
def format_number(value: Any) -> str:
    """
    Grouping separators like the browser's toLocaleString():
      1250 -> "1,250", 1250.5 -> "1,250.5", None -> "".
    Non-numeric values are shown as-is.
    """
    if value is None:
        return ""
    if isinstance(value, bool) or not isinstance(value, Number):
        return str(value)
    try:
        f = float(value)
    except (TypeError, ValueError):
        return str(value)
    if f != f:  # NaN
        return ""
    if f.is_integer():
        return f"{int(f):,}"
    return f"{f:,.3f}".rstrip("0").rstrip(".")


def format_value(value: Any, units: str) -> str:
    """Tooltip text: localized number followed by the unit label."""
    text = format_number(value)
    if not text:
        return ""
    return f"{text} {units}".strip()


def sources_line(urls: List[str]) -> Optional[str]:
    """'出典: url1, url2' in original order, or None when there are no sources."""
    if not urls:
        return None
    return SOURCES_PREFIX + ", ".join(urls)


def chart_title(display_market: str) -> str:
    label = (display_market or "").strip()
    return f"{label}の市場規模" if label else "市場規模"


# -----------------------------
# Presentation bundle
# -----------------------------
@dataclass(frozen=True)
class MarketPresentation:
    points: List[ChartPoint]
    units: str
    title: str
    actual_label: str = CHART_CFG.actual_label
    forecast_label: str = CHART_CFG.forecast_label
    predict_summary: Optional[str] = None
    summary: Optional[str] = None
    sources: Optional[str] = None
    explicit_units: Optional[str] = None   # only set when the record carried its own unit label
    notes: List[str] = field(default_factory=list)

    @property
    def y_axis_title(self) -> str:
        return f"市場規模（{self.units}）"


def build_presentation(
    record: MarketRecord,
    display_market: str = "",
    *,
    boundary_year: str = BOUNDARY_YEAR,
) -> MarketPresentation:
    points = classify_series(record, boundary_year)

    notes: List[str] = []
    if points and all(p.actual is None for p in points):
        notes.append(f"{boundary_year}年のデータがないため、すべての年を予測として表示しています。")

    return MarketPresentation(
        points=points,
        units=record.display_units,
        title=chart_title(display_market),
        predict_summary=record.predict_summary,
        summary=record.summary,
        sources=sources_line(record.source_urls),
        explicit_units=record.units,
        notes=notes,
    )


# -----------------------------
# DataFrame / chart
# -----------------------------
def chart_points_to_df(points: List[ChartPoint]) -> pd.DataFrame:
    """
    points -> DataFrame(year, actual, forecast), order preserved.
    Values are kept as given; plotting coerces separately.
    """
    if not points:
        return pd.DataFrame(columns=["year", "actual", "forecast"])
    return pd.DataFrame([p.to_dict() for p in points], columns=["year", "actual", "forecast"])


def _hover_texts(values: pd.Series, short_label: str, units: str) -> List[str]:
    out: List[str] = []
    for v in values:
        text = format_value(v, units)
        out.append(f"{short_label}: {text}" if text else "")
    return out


def build_market_chart(presentation: MarketPresentation, *, height: int = CHART_CFG.height) -> go.Figure:
    """
    Grouped bar chart: actual (strong red) and forecast (light red).
    Tooltips show '<year>年' and the localized value with its unit.
    """
    df = chart_points_to_df(presentation.points)
    years = df["year"].astype(str).tolist()

    fig = go.Figure()
    series = [
        ("actual", presentation.actual_label, ACTUAL_SHORT_LABEL, CHART_CFG.actual_color),
        ("forecast", presentation.forecast_label, FORECAST_SHORT_LABEL, CHART_CFG.forecast_color),
    ]
    for col, name, short_label, color in series:
        fig.add_trace(
            go.Bar(
                x=years,
                y=pd.to_numeric(df[col], errors="coerce"),
                name=name,
                marker_color=color,
                customdata=_hover_texts(df[col], short_label, presentation.units),
                hovertemplate="%{x}年<br>%{customdata}<extra></extra>",
            )
        )

    fig.update_layout(
        barmode="group",
        template="plotly_white",
        height=height,
        margin=dict(t=20, r=30, l=20, b=5),
        xaxis=dict(title=None, type="category"),
        yaxis=dict(title=presentation.y_axis_title, tickformat=",", gridcolor="#e5e5e5", griddash="dash"),
        legend=dict(orientation="h", yanchor="top", y=-0.12, xanchor="center", x=0.5),
    )
    return fig

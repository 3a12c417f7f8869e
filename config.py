# config.py
# Central configuration for the Market Forecast Chart app.
# Boundary year and example delay are pinned constants (not derived from "today").

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict


# -----------------------------
# App-wide constants / defaults
# -----------------------------

APP_TITLE: str = "市場予測分析システム"
CHART_PAGE_TITLE: str = "市場規模の推移と将来予測"
APP_VERSION: str = "v1.0"

LOG_LEVEL: str = "INFO"


# -----------------------------
# Acquisition rules
# -----------------------------

# Years <= BOUNDARY_YEAR are "actual", later years are "forecast".
BOUNDARY_YEAR: str = "2023"

# Example mode waits this long before showing the sample dataset.
EXAMPLE_DELAY_MS: int = 20000

MARKET_LOOKUP_URL: str = "https://satyr-teaching-ghastly.ngrok-free.app/api/search_market"

# The lookup generates the dataset on demand, so keep this generous.
LOOKUP_TIMEOUT_SECONDS: float = 120.0

FORM_FIELDS = ("company", "service", "market")

EXAMPLE_FORM: Dict[str, str] = {
    "company": "ダイアナ",
    "service": "靴",
    "market": "婦人靴",
}


# -----------------------------
# User-facing messages
# -----------------------------

MSG_FIELDS_REQUIRED: str = "すべての項目を入力してください。"
MSG_JSON_EMPTY: str = "JSONデータを入力してください。"
MSG_JSON_INVALID: str = "無効なJSON形式です。正しいJSON形式で入力してください。"
MSG_JSON_NOT_OBJECT: str = "JSONはオブジェクト形式（{...}）で入力してください。"
MSG_HTTP_ERROR: str = "HTTP error! status: {status}"
MSG_EXAMPLE_FAILED: str = "生成中に問題が発生しました。"

MSG_LOADING_REMOTE: str = "データを読み込んでいます..."
MSG_LOADING_EXAMPLE: str = "データを生成中..."


# -----------------------------
# Chart labels / colours
# -----------------------------

DEFAULT_UNITS: str = "億円"
ACTUAL_LABEL: str = "市場規模（実績）"
FORECAST_LABEL: str = "市場規模（予測）"
ACTUAL_SHORT_LABEL: str = "実績"
FORECAST_SHORT_LABEL: str = "予測"
SOURCES_PREFIX: str = "出典: "

ACTUAL_COLOR: str = "rgba(229, 9, 20, 0.8)"
FORECAST_COLOR: str = "rgba(229, 9, 20, 0.4)"
CHART_HEIGHT: int = 350


# -----------------------------
# Built-in sample dataset (example mode + "insert sample JSON")
# -----------------------------

SAMPLE_MARKET_RECORD: Dict[str, Any] = {
    "2019": 1200,
    "2020": 1150,
    "2021": 1180,
    "2022": 1220,
    "2023": 1250,
    "2024": 1280,
    "2025": 1310,
    "2026": 1340,
    "2027": 1375,
    "y-axis_units": "億円",
    "market_predict_summary": (
        "婦人靴市場は2023年の1,250億円から、2027年には1,375億円へと成長が見込まれており、"
        "安定した成長が期待される"
    ),
    "market_summary": (
        "国内婦人靴市場は、EC化の進展と高付加価値商品の需要増により堅調に推移しています。"
        "特に機能性とファッション性を両立した商品カテゴリーが市場を牽引しています。"
    ),
    "source_url": [
        "https://www.yano.co.jp/press-release/show/press_id/3645",
        "https://pando.life/article/1813796",
    ],
}


# -----------------------------
# Small dataclasses for typed config
# -----------------------------

@dataclass(frozen=True)
class AcquisitionConfig:
    boundary_year: str = BOUNDARY_YEAR
    example_delay_ms: int = EXAMPLE_DELAY_MS
    lookup_url: str = MARKET_LOOKUP_URL
    lookup_timeout_s: float = LOOKUP_TIMEOUT_SECONDS
    example_form: Dict[str, str] = field(default_factory=lambda: dict(EXAMPLE_FORM))


@dataclass(frozen=True)
class ChartConfig:
    default_units: str = DEFAULT_UNITS
    actual_label: str = ACTUAL_LABEL
    forecast_label: str = FORECAST_LABEL
    actual_color: str = ACTUAL_COLOR
    forecast_color: str = FORECAST_COLOR
    height: int = CHART_HEIGHT


# Convenient bundles used by later modules
ACQUISITION_CFG = AcquisitionConfig()
CHART_CFG = ChartConfig()

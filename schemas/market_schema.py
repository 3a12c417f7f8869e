"""
Typed shapes for the market dataset and the acquisition form.

A MarketRecord wraps the JSON object returned by the lookup service (or pasted
as test data). Year keys ("2019", "2020", ...) carry market-size values; a few
fixed metadata keys carry the unit label, narrative summaries and sources.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from config import DEFAULT_UNITS, FORM_FIELDS, MSG_FIELDS_REQUIRED, MSG_JSON_NOT_OBJECT
from schemas.errors import RecordFormatError, ValidationError


# ASCII digits only, whole key (no trailing newline, no full-width digits)
YEAR_KEY_RE = re.compile(r"[0-9]{4}")

UNITS_KEY = "y-axis_units"
PREDICT_SUMMARY_KEY = "market_predict_summary"
SUMMARY_KEY = "market_summary"
SOURCE_URL_KEY = "source_url"


def is_year_key(key: Any) -> bool:
    return isinstance(key, str) and YEAR_KEY_RE.fullmatch(key) is not None


# -----------------------------
# Modes
# -----------------------------

class Mode(str, Enum):
    INPUT = "input"
    LOADING = "loading"
    CHART = "chart"


class SubMode(str, Enum):
    FORM = "form"
    TEST_JSON = "test_json"


# -----------------------------
# Form input
# -----------------------------

@dataclass(frozen=True)
class FormInput:
    company: str = ""
    service: str = ""
    market: str = ""

    def with_field(self, name: str, value: str) -> "FormInput":
        if name not in FORM_FIELDS:
            raise ValueError(f"Unknown form field: {name!r}")
        return replace(self, **{name: value})

    def missing_fields(self) -> List[str]:
        return [name for name in FORM_FIELDS if not (getattr(self, name) or "").strip()]

    def validate(self) -> None:
        """Raise ValidationError if any of the three fields is blank."""
        if self.missing_fields():
            raise ValidationError(MSG_FIELDS_REQUIRED)

    def to_payload(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in FORM_FIELDS}


# -----------------------------
# Chart point
# -----------------------------

@dataclass(frozen=True)
class ChartPoint:
    year: str
    actual: Any = None      # value when year <= boundary year
    forecast: Any = None    # value when year > boundary year

    def to_dict(self) -> Dict[str, Any]:
        return {"year": self.year, "actual": self.actual, "forecast": self.forecast}


# -----------------------------
# Market record
# -----------------------------

@dataclass(frozen=True)
class MarketRecord:
    raw: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "MarketRecord":
        """
        Build a record from a decoded JSON document.

        Only the top-level shape is checked: it must be an object. Year values
        and metadata are kept as-is so the chart shows exactly what was sent.
        """
        if isinstance(payload, MarketRecord):
            return payload
        if not isinstance(payload, Mapping):
            raise RecordFormatError(MSG_JSON_NOT_OBJECT)
        return cls(raw={str(k): v for k, v in payload.items()})

    def __getitem__(self, key: str) -> Any:
        return self.raw[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def keys(self):
        return self.raw.keys()

    @property
    def years(self) -> Dict[str, Any]:
        return {k: v for k, v in self.raw.items() if is_year_key(k)}

    @property
    def units(self) -> Optional[str]:
        units = self.raw.get(UNITS_KEY)
        return str(units) if units else None

    @property
    def display_units(self) -> str:
        return self.units or DEFAULT_UNITS

    @property
    def predict_summary(self) -> Optional[str]:
        return self.raw.get(PREDICT_SUMMARY_KEY) or None

    @property
    def summary(self) -> Optional[str]:
        return self.raw.get(SUMMARY_KEY) or None

    @property
    def source_urls(self) -> List[str]:
        urls = self.raw.get(SOURCE_URL_KEY)
        if not urls:
            return []
        if isinstance(urls, str):
            return [urls]
        if isinstance(urls, (list, tuple)):
            return [str(u) for u in urls if u]
        return []

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.raw)

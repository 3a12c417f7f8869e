# utils/helpers.py
# Common helper utilities: text cleaning, form labels, timestamps.

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Dict


# -----------------------------
# Text cleaning
# -----------------------------

_WS_RE = re.compile(r"\s+")
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\s]+')


def clean_text(raw: str) -> str:
    """
    Trims and collapses whitespace. Non-ASCII text (e.g. 婦人靴) is kept.
    """
    if raw is None:
        return ""
    return _WS_RE.sub(" ", str(raw).strip())


def file_stem(label: str, default: str = "market") -> str:
    """
    Filename-safe stem for downloads: '婦人 靴/2024' -> '婦人_靴_2024'.
    """
    s = _UNSAFE_FILENAME_RE.sub("_", clean_text(label)).strip("_")
    return s or default


# -----------------------------
# Form labels
# -----------------------------

FIELD_LABELS: Dict[str, str] = {
    "company": "会社名",
    "service": "サービス・商品",
    "market": "市場",
}

FIELD_PLACEHOLDERS: Dict[str, str] = {
    "company": "例: ダイアナ",
    "service": "例: 靴",
    "market": "例: 婦人靴",
}


def field_label(name: str) -> str:
    return FIELD_LABELS.get(name, name)


def field_placeholder(name: str) -> str:
    return FIELD_PLACEHOLDERS.get(name, "")


# -----------------------------
# Date/time utilities
# -----------------------------

def utc_today_compact() -> str:
    """YYYYMMDD in UTC, used in download file names."""
    return datetime.now(timezone.utc).strftime("%Y%m%d")

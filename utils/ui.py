# utils/ui.py
# Slide-style UI helpers for Streamlit (no acquisition logic).
# Drop-in utilities: theme CSS, slide header, summary text, black title bar, source caption.

from __future__ import annotations

import streamlit as st


# -----------------------------
# Core styling (CSS)
# -----------------------------
_DEFAULT_CSS = """
<style>
/* --- Page --- */
.stApp { background-color: #f0f2f5; }
.block-container { max-width: 1280px; padding-top: 1.6rem; padding-bottom: 2rem; }

/* --- Slide header --- */
.mf-slide-header {
  background: #f8f9fa;
  border-bottom: 3px solid #E50914;
  padding: 20px 40px;
  text-align: center;
  margin-bottom: 18px;
}
.mf-slide-header h1 {
  font-size: 2.2rem;
  font-weight: 700;
  color: #000000;
  margin: 0;
  font-family: 'Yu Gothic UI', 'YuGothic', 'Meiryo', 'Noto Sans JP', 'Inter', sans-serif;
}

/* --- Narrative text above the chart --- */
.mf-summary {
  font-size: 1.3rem;
  font-weight: 600;
  color: #333333;
  text-align: center;
  line-height: 1.7;
  max-width: 800px;
  margin: 0 auto 20px auto;
}

/* --- Black title bar above the chart --- */
.mf-title-bar {
  width: 85%;
  max-width: 980px;
  margin: 0 auto 12px auto;
  background: #111111;
  color: #ffffff;
  text-align: center;
  padding: 10px 16px;
  border-radius: 8px;
  font-size: 0.95rem;
  font-weight: 700;
  letter-spacing: 0.03em;
}

/* --- Sources --- */
.mf-sources {
  text-align: right;
  font-size: 0.75rem;
  color: #777777;
  margin-top: 4px;
}

/* --- Primary button colour --- */
div.stButton > button[kind="primary"] { background-color: #E50914; border-color: #E50914; }
div.stButton > button[kind="primary"]:hover { background-color: #b8070f; border-color: #b8070f; }
</style>
"""


def inject_global_css(css: str = _DEFAULT_CSS) -> None:
    """Inject global CSS once per page render."""
    st.markdown(css, unsafe_allow_html=True)


# -----------------------------
# UI Components
# -----------------------------
def slide_header(title: str) -> None:
    st.markdown(
        f'<div class="mf-slide-header"><h1>{_escape(title)}</h1></div>',
        unsafe_allow_html=True,
    )


def summary_text(text: str) -> None:
    """Prediction summary shown above the chart."""
    if not text:
        return
    st.markdown(f'<p class="mf-summary">{_escape(text)}</p>', unsafe_allow_html=True)


def title_bar(text: str) -> None:
    st.markdown(f'<div class="mf-title-bar">{_escape(text)}</div>', unsafe_allow_html=True)


def source_caption(text: str) -> None:
    if not text:
        return
    st.markdown(f'<p class="mf-sources">{_escape(text)}</p>', unsafe_allow_html=True)


# -----------------------------
# Utilities
# -----------------------------
def _escape(s: str) -> str:
    """Minimal HTML escaping for safe string interpolation."""
    if s is None:
        return ""
    return (
        str(s)
        .replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#39;")
    )

# app.py
# Streamlit UI for the Market Forecast Chart.
# The page is a thin shell over services.acquisition: every widget event becomes one controller
# action, the resulting AcquisitionState lives in st.session_state, and the page renders from it.
# LOADING is its own rerun: the pending operation runs under a spinner, then the page reruns.

from __future__ import annotations

import asyncio
import logging

import streamlit as st

from config import (
    APP_TITLE,
    APP_VERSION,
    CHART_CFG,
    CHART_PAGE_TITLE,
    FORM_FIELDS,
    LOG_LEVEL,
    MSG_LOADING_EXAMPLE,
    MSG_LOADING_REMOTE,
)
from exports.exporter import chart_points_to_csv_bytes, export_file_name, record_to_json_bytes
from schemas.market_schema import Mode, SubMode
from services.acquisition import AcquisitionController, AcquisitionState, PendingOperation
from utils.helpers import field_label, field_placeholder
from utils.ui import inject_global_css, slide_header, source_caption, summary_text, title_bar
from utils.vis import build_market_chart, build_presentation


logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# -----------------------------
# App config
# -----------------------------
st.set_page_config(page_title=APP_TITLE, layout="wide")
inject_global_css()

STATE_KEY = "acq_state"
TEST_JSON_KEY = "test_json_text"
TEST_MODE_KEY = "test_mode"


def _field_key(name: str) -> str:
    return f"field_{name}"


# -----------------------------
# State plumbing
# -----------------------------
def _controller() -> AcquisitionController:
    if STATE_KEY not in st.session_state:
        st.session_state[STATE_KEY] = AcquisitionState()
    return AcquisitionController(st.session_state[STATE_KEY])


def _commit(ctrl: AcquisitionController) -> AcquisitionState:
    st.session_state[STATE_KEY] = ctrl.state
    return ctrl.state


def _sync_widgets(state: AcquisitionState) -> None:
    """Widgets show the controller's values (fill-example and reset rewrite them)."""
    for name in FORM_FIELDS:
        st.session_state[_field_key(name)] = getattr(state.form, name)
    st.session_state[TEST_JSON_KEY] = state.test_json_text
    st.session_state[TEST_MODE_KEY] = state.sub_mode is SubMode.TEST_JSON


# -----------------------------
# Widget callbacks (one controller action each)
# -----------------------------
def _on_field_change(name: str) -> None:
    ctrl = _controller()
    ctrl.set_field(name, st.session_state.get(_field_key(name), ""))
    _commit(ctrl)


def _on_fill_example() -> None:
    ctrl = _controller()
    ctrl.fill_example()
    _commit(ctrl)


def _on_clear_example() -> None:
    ctrl = _controller()
    ctrl.clear_example()
    _commit(ctrl)


def _on_submit() -> None:
    ctrl = _controller()
    ctrl.begin_submit()
    _commit(ctrl)


def _on_test_json_change() -> None:
    ctrl = _controller()
    ctrl.set_test_json_text(st.session_state.get(TEST_JSON_KEY, ""))
    _commit(ctrl)


def _on_insert_sample() -> None:
    ctrl = _controller()
    ctrl.insert_sample_json()
    _commit(ctrl)


def _on_submit_test_json() -> None:
    ctrl = _controller()
    ctrl.submit_test_json(st.session_state.get(TEST_JSON_KEY, ""))
    _commit(ctrl)


def _on_toggle_test_mode() -> None:
    ctrl = _controller()
    ctrl.toggle_test_mode()
    _commit(ctrl)


def _on_reset() -> None:
    ctrl = _controller()
    ctrl.reset()
    _commit(ctrl)


# -----------------------------
# Views
# -----------------------------
def render_loading(state: AcquisitionState) -> None:
    message = MSG_LOADING_EXAMPLE if state.pending is PendingOperation.EXAMPLE else MSG_LOADING_REMOTE
    with st.spinner(message):
        ctrl = _controller()
        asyncio.run(ctrl.run_pending())
        _commit(ctrl)
    st.rerun()


def _render_error(state: AcquisitionState) -> None:
    if state.error:
        st.error(state.error)


def render_form(state: AcquisitionState) -> None:
    cols = st.columns(len(FORM_FIELDS))
    for col, name in zip(cols, FORM_FIELDS):
        with col:
            st.text_input(
                field_label(name),
                key=_field_key(name),
                placeholder=field_placeholder(name),
                on_change=_on_field_change,
                args=(name,),
            )

    hint_col, btn_col = st.columns([3, 2])
    with hint_col:
        if state.example_flag:
            st.caption("例（ダイアナ）が入力されています。")
        else:
            st.caption("必要事項を入力するか、右の「例を入力」を押してください。")
    with btn_col:
        c1, c2 = st.columns(2)
        with c1:
            if state.example_flag:
                st.button("例モード解除", on_click=_on_clear_example, use_container_width=True)
        with c2:
            st.button("例を入力", on_click=_on_fill_example, use_container_width=True)

    _render_error(state)

    c1, c2 = st.columns(2)
    with c1:
        st.button("分析開始", type="primary", on_click=_on_submit, use_container_width=True)
    with c2:
        st.button("リセット", on_click=_on_reset, use_container_width=True, key="reset_form")


def render_test_json(state: AcquisitionState) -> None:
    label_col, btn_col = st.columns([4, 1])
    with label_col:
        st.markdown("**JSONデータ入力**")
    with btn_col:
        st.button("サンプルJSON挿入", on_click=_on_insert_sample, use_container_width=True)

    st.text_area(
        "JSONデータ",
        key=TEST_JSON_KEY,
        height=240,
        label_visibility="collapsed",
        placeholder='{\n  "2022": 1220,\n  "2023": 1250,\n  "2024": 1280,\n  "y-axis_units": "億円"\n}',
        on_change=_on_test_json_change,
    )

    _render_error(state)

    c1, c2 = st.columns(2)
    with c1:
        st.button("グラフ表示", type="primary", on_click=_on_submit_test_json, use_container_width=True)
    with c2:
        st.button("リセット", on_click=_on_reset, use_container_width=True, key="reset_test_json")


def render_input(state: AcquisitionState) -> None:
    slide_header(APP_TITLE)
    st.toggle("テストモード（JSON入力）", key=TEST_MODE_KEY, on_change=_on_toggle_test_mode)

    if state.sub_mode is SubMode.TEST_JSON:
        render_test_json(state)
    else:
        render_form(state)


def render_chart(state: AcquisitionState) -> None:
    record = state.record
    display_market = state.display_market or state.form.market
    pres = build_presentation(record, display_market)

    slide_header(CHART_PAGE_TITLE)
    summary_text(pres.predict_summary)
    title_bar(pres.title)
    st.plotly_chart(build_market_chart(pres, height=CHART_CFG.height), use_container_width=True)
    for note in pres.notes:
        st.caption(note)
    source_caption(pres.sources)

    if pres.summary:
        st.markdown("### 市場概況")
        st.write(pres.summary)
        if pres.explicit_units:
            st.caption(f"※ 数値の単位: {pres.explicit_units}")

    c1, c2, c3 = st.columns(3)
    with c1:
        st.download_button(
            "CSVをダウンロード",
            data=chart_points_to_csv_bytes(pres.points),
            file_name=export_file_name(display_market, "csv"),
            mime="text/csv",
            use_container_width=True,
        )
    with c2:
        st.download_button(
            "JSONをダウンロード",
            data=record_to_json_bytes(record),
            file_name=export_file_name(display_market, "json"),
            mime="application/json",
            use_container_width=True,
        )
    with c3:
        st.button("リセット", on_click=_on_reset, use_container_width=True, key="reset_chart")


# -----------------------------
# Page
# -----------------------------
def main() -> None:
    state = _controller().state
    _sync_widgets(state)

    if state.mode is Mode.LOADING:
        render_loading(state)
    elif state.mode is Mode.CHART:
        render_chart(state)
    else:
        render_input(state)

    st.caption(APP_VERSION)


main()

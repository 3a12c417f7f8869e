"""Tests for the acquisition state machine and controller."""

import asyncio
import json

import pytest

from config import (
    EXAMPLE_FORM,
    MSG_EXAMPLE_FAILED,
    MSG_FIELDS_REQUIRED,
    MSG_JSON_EMPTY,
    MSG_JSON_INVALID,
    MSG_JSON_NOT_OBJECT,
    SAMPLE_MARKET_RECORD,
)
from analysis.series import classify_series
from schemas.errors import BusyError, StateTransitionError, TransportError
from schemas.market_schema import ChartPoint, FormInput, MarketRecord, Mode, SubMode
from services.acquisition import (
    AcquisitionController,
    AcquisitionState,
    LoadFailed,
    LoadSucceeded,
    PendingOperation,
    Reset,
    SetField,
    SubmitForm,
    reduce,
)
from services.market_lookup import simulate_example


@pytest.fixture
def remote_record():
    return MarketRecord.from_payload({"2022": 10, "2023": 20, "2024": 30, "y-axis_units": "百万円"})


@pytest.fixture
def controller_factory(make_lookup, fake_sleep):
    def _make(state=None, lookup=None):
        lookup = lookup or make_lookup(result=MarketRecord.from_payload({"2023": 1}))
        ctrl = AcquisitionController(
            state,
            lookup=lookup,
            run_example=lambda: simulate_example(sleep=fake_sleep),
        )
        return ctrl, lookup

    return _make


def _fill(ctrl, form):
    for name, value in form.to_payload().items():
        ctrl.set_field(name, value)


class TestInitialState:

    def test_defaults(self):
        state = AcquisitionState()
        assert state.mode is Mode.INPUT
        assert state.sub_mode is SubMode.FORM
        assert state.example_flag is False
        assert state.form == FormInput()
        assert state.record is None
        assert state.error is None
        assert state.display_market == ""
        assert state.test_json_text == ""
        assert state.pending is None


class TestFormEditing:

    def test_set_field(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.set_field("company", "Acme")
        assert ctrl.state.form.company == "Acme"

    def test_fill_example(self, controller_factory):
        ctrl, _ = controller_factory(AcquisitionState(error="old"))
        state = ctrl.fill_example()

        assert state.form == FormInput(**EXAMPLE_FORM)
        assert state.example_flag is True
        assert state.error is None

    def test_edit_cancels_example_mode_only(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.fill_example()
        before = ctrl.state

        state = ctrl.set_field("market", "紳士靴")

        assert state.example_flag is False
        assert state.mode is before.mode
        assert state.record is before.record
        assert state.form.company == EXAMPLE_FORM["company"]

    def test_clear_example_keeps_form(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.fill_example()
        state = ctrl.clear_example()
        assert state.example_flag is False
        assert state.form == FormInput(**EXAMPLE_FORM)

    def test_toggle_test_mode(self, controller_factory, sample_record):
        ctrl, _ = controller_factory(AcquisitionState(record=sample_record))
        assert ctrl.toggle_test_mode().sub_mode is SubMode.TEST_JSON
        assert ctrl.state.mode is Mode.INPUT
        assert ctrl.state.record is sample_record
        assert ctrl.toggle_test_mode().sub_mode is SubMode.FORM


class TestSubmitForm:

    @pytest.mark.parametrize("missing", ["company", "service", "market"])
    def test_empty_field_sets_error_and_stays_in_input(self, controller_factory, filled_form, missing):
        ctrl, lookup = controller_factory()
        _fill(ctrl, filled_form.with_field(missing, ""))

        state = asyncio.run(ctrl.submit_form())

        assert state.mode is Mode.INPUT
        assert state.error == MSG_FIELDS_REQUIRED
        assert lookup.calls == []

    def test_begin_submit_enters_loading(self, controller_factory, filled_form):
        ctrl, _ = controller_factory(AcquisitionState(error="stale"))
        _fill(ctrl, filled_form)

        state = ctrl.begin_submit()

        assert state.mode is Mode.LOADING
        assert state.pending is PendingOperation.REMOTE
        assert state.error is None
        assert state.display_market == filled_form.market

    def test_remote_success(self, controller_factory, make_lookup, filled_form, remote_record):
        ctrl, lookup = controller_factory(lookup=make_lookup(result=remote_record))
        _fill(ctrl, filled_form)

        state = asyncio.run(ctrl.submit_form())

        assert lookup.calls == [filled_form]
        assert state.mode is Mode.CHART
        assert state.record == remote_record
        assert state.pending is None
        assert state.error is None

    def test_remote_failure_returns_to_input(self, controller_factory, make_lookup, filled_form):
        lookup = make_lookup(error=TransportError("HTTP error! status: 500"))
        ctrl, _ = controller_factory(lookup=lookup)
        _fill(ctrl, filled_form)

        state = asyncio.run(ctrl.submit_form())

        assert state.mode is Mode.INPUT
        assert state.error == "HTTP error! status: 500"
        assert state.record is None
        assert state.pending is None

    def test_example_mode_uses_delay_and_fixture(self, controller_factory, fake_sleep, sample_record):
        ctrl, lookup = controller_factory()
        ctrl.fill_example()

        state = asyncio.run(ctrl.submit_form())

        assert lookup.calls == []
        assert fake_sleep.calls == [20.0]
        assert state.mode is Mode.CHART
        assert state.record == sample_record
        assert state.display_market == EXAMPLE_FORM["market"]

    def test_unexpected_lookup_error_returns_to_input(self, controller_factory, make_lookup, filled_form):
        ctrl, _ = controller_factory(lookup=make_lookup(error=KeyError("2023")))
        _fill(ctrl, filled_form)

        state = asyncio.run(ctrl.submit_form())

        assert state.mode is Mode.INPUT
        assert state.pending is None
        assert state.error == str(KeyError("2023"))
        assert state.record is None
        assert ctrl.reset() == AcquisitionState()

    def test_unexpected_example_error_uses_generation_message(self, make_lookup):
        async def broken_example():
            raise RuntimeError("fixture missing")

        ctrl = AcquisitionController(lookup=make_lookup(), run_example=broken_example)
        ctrl.fill_example()

        state = asyncio.run(ctrl.submit_form())

        assert state.mode is Mode.INPUT
        assert state.error == MSG_EXAMPLE_FAILED

    def test_example_failure_uses_generation_message(self, make_lookup):
        async def broken_example():
            raise TransportError("boom")

        ctrl = AcquisitionController(lookup=make_lookup(), run_example=broken_example)
        ctrl.fill_example()

        state = asyncio.run(ctrl.submit_form())

        assert state.mode is Mode.INPUT
        assert state.error == MSG_EXAMPLE_FAILED

    def test_edited_example_goes_remote(self, controller_factory, fake_sleep):
        ctrl, lookup = controller_factory()
        ctrl.fill_example()
        ctrl.set_field("market", "紳士靴")

        asyncio.run(ctrl.submit_form())

        assert len(lookup.calls) == 1
        assert fake_sleep.calls == []

    def test_run_pending_outside_loading_is_noop(self, controller_factory):
        ctrl, lookup = controller_factory()
        state = asyncio.run(ctrl.run_pending())
        assert state == AcquisitionState()
        assert lookup.calls == []


class TestSubmitTestJson:

    def test_valid_json_goes_straight_to_chart(self, controller_factory):
        ctrl, lookup = controller_factory()
        ctrl.toggle_test_mode()
        ctrl.set_field("market", "婦人靴")

        state = ctrl.submit_test_json('{"2023": 100}')

        assert state.mode is Mode.CHART
        assert state.display_market == "婦人靴"
        assert classify_series(state.record) == [ChartPoint(year="2023", actual=100, forecast=None)]
        assert lookup.calls == []

    def test_invalid_json_keeps_record(self, controller_factory):
        ctrl, _ = controller_factory()
        state = ctrl.submit_test_json("not json")

        assert state.mode is Mode.INPUT
        assert state.error == MSG_JSON_INVALID
        assert state.record is None

    def test_empty_text(self, controller_factory):
        ctrl, _ = controller_factory()
        state = ctrl.submit_test_json("   ")
        assert state.error == MSG_JSON_EMPTY
        assert state.mode is Mode.INPUT

    def test_array_rejected(self, controller_factory):
        ctrl, _ = controller_factory()
        state = ctrl.submit_test_json("[1, 2]")
        assert state.error == MSG_JSON_NOT_OBJECT
        assert state.record is None

    def test_latest_error_wins(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.submit_test_json("")
        state = ctrl.submit_test_json("{bad")
        assert state.error == MSG_JSON_INVALID

    def test_insert_sample_json(self, controller_factory):
        ctrl, _ = controller_factory()
        state = ctrl.insert_sample_json()
        assert json.loads(state.test_json_text) == SAMPLE_MARKET_RECORD
        assert "婦人靴" in state.test_json_text


class TestReset:

    def test_reset_from_chart(self, controller_factory, filled_form):
        ctrl, _ = controller_factory()
        _fill(ctrl, filled_form)
        ctrl.set_test_json_text('{"2023": 1}')
        ctrl.submit_test_json('{"2023": 1}')
        assert ctrl.state.mode is Mode.CHART

        state = ctrl.reset()

        assert state == AcquisitionState()

    def test_reset_from_input_with_error(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.fill_example()
        ctrl.submit_test_json("nope")

        assert ctrl.reset() == AcquisitionState()

    def test_reset_keeps_sub_mode(self, controller_factory):
        ctrl, _ = controller_factory()
        ctrl.toggle_test_mode()
        assert ctrl.reset().sub_mode is SubMode.TEST_JSON


class TestGuards:

    def test_actions_rejected_while_loading(self, filled_form):
        loading = AcquisitionState(mode=Mode.LOADING, pending=PendingOperation.REMOTE, form=filled_form)
        for action in (Reset(), SubmitForm(), SetField("market", "x")):
            with pytest.raises(BusyError):
                reduce(loading, action)

    def test_controller_rejects_reset_while_loading(self, controller_factory, filled_form):
        ctrl, _ = controller_factory()
        _fill(ctrl, filled_form)
        ctrl.begin_submit()

        with pytest.raises(BusyError):
            ctrl.reset()
        assert ctrl.state.mode is Mode.LOADING

    def test_submit_from_chart_rejected(self, sample_record):
        chart = AcquisitionState(mode=Mode.CHART, record=sample_record)
        with pytest.raises(StateTransitionError):
            reduce(chart, SubmitForm())

    def test_load_outcome_outside_loading_rejected(self, sample_record):
        with pytest.raises(StateTransitionError):
            reduce(AcquisitionState(), LoadSucceeded(sample_record))
        with pytest.raises(StateTransitionError):
            reduce(AcquisitionState(), LoadFailed("x"))

    def test_reduce_is_pure(self, filled_form):
        state = AcquisitionState(form=filled_form)
        after = reduce(state, SubmitForm())
        assert state.mode is Mode.INPUT
        assert after.mode is Mode.LOADING

    def test_unknown_action(self):
        with pytest.raises(TypeError):
            reduce(AcquisitionState(), object())

# services/acquisition.py
# Acquisition state machine: Input -> Loading -> Chart, with an error slot.
# All transitions go through reduce(state, action); AcquisitionController adds the async side.

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Awaitable, Callable, Optional, Union

from config import ACQUISITION_CFG, MSG_EXAMPLE_FAILED, MSG_JSON_EMPTY, MSG_JSON_INVALID, SAMPLE_MARKET_RECORD
from schemas.errors import AcquisitionError, BusyError, ParseError, StateTransitionError
from schemas.market_schema import FormInput, MarketRecord, Mode, SubMode
from services.market_lookup import fetch_market_record, simulate_example


logger = logging.getLogger(__name__)


class PendingOperation(str, Enum):
    EXAMPLE = "example"
    REMOTE = "remote"


# -----------------------------
# State
# -----------------------------

@dataclass(frozen=True)
class AcquisitionState:
    mode: Mode = Mode.INPUT
    sub_mode: SubMode = SubMode.FORM
    example_flag: bool = False
    form: FormInput = field(default_factory=FormInput)
    record: Optional[MarketRecord] = None
    error: Optional[str] = None
    display_market: str = ""
    test_json_text: str = ""
    pending: Optional[PendingOperation] = None   # set only while mode is LOADING

    @property
    def is_loading(self) -> bool:
        return self.mode is Mode.LOADING


# -----------------------------
# Actions
# -----------------------------

@dataclass(frozen=True)
class SetField:
    name: str
    value: str


@dataclass(frozen=True)
class FillExample:
    example_form: Optional[FormInput] = None


@dataclass(frozen=True)
class ClearExample:
    pass


@dataclass(frozen=True)
class SubmitForm:
    pass


@dataclass(frozen=True)
class SubmitTestJson:
    raw_text: str


@dataclass(frozen=True)
class SetTestJsonText:
    text: str


@dataclass(frozen=True)
class InsertSampleJson:
    pass


@dataclass(frozen=True)
class ToggleTestMode:
    pass


@dataclass(frozen=True)
class Reset:
    pass


@dataclass(frozen=True)
class LoadSucceeded:
    record: MarketRecord


@dataclass(frozen=True)
class LoadFailed:
    message: str


Action = Union[
    SetField,
    FillExample,
    ClearExample,
    SubmitForm,
    SubmitTestJson,
    SetTestJsonText,
    InsertSampleJson,
    ToggleTestMode,
    Reset,
    LoadSucceeded,
    LoadFailed,
]

_LOAD_OUTCOMES = (LoadSucceeded, LoadFailed)


def default_example_form() -> FormInput:
    return FormInput(**ACQUISITION_CFG.example_form)


def sample_json_text() -> str:
    return json.dumps(SAMPLE_MARKET_RECORD, indent=2, ensure_ascii=False)


def parse_test_json(raw_text: str) -> MarketRecord:
    """
    Parse pasted test data. The parser's own message is never shown;
    the user only sees the fixed invalid-JSON message.
    """
    if not (raw_text or "").strip():
        raise ParseError(MSG_JSON_EMPTY)
    try:
        data = json.loads(raw_text)
    except ValueError as e:
        raise ParseError(MSG_JSON_INVALID) from e
    return MarketRecord.from_payload(data)


# -----------------------------
# Reducer
# -----------------------------

def _submit_form(state: AcquisitionState) -> AcquisitionState:
    try:
        state.form.validate()
    except AcquisitionError as e:
        return replace(state, error=str(e))

    pending = PendingOperation.EXAMPLE if state.example_flag else PendingOperation.REMOTE
    return replace(
        state,
        mode=Mode.LOADING,
        pending=pending,
        error=None,
        display_market=state.form.market,
    )


def _submit_test_json(state: AcquisitionState, raw_text: str) -> AcquisitionState:
    try:
        record = parse_test_json(raw_text)
    except AcquisitionError as e:
        return replace(state, error=str(e), test_json_text=raw_text)

    return replace(
        state,
        mode=Mode.CHART,
        record=record,
        error=None,
        display_market=state.form.market,
        test_json_text=raw_text,
    )


def reduce(state: AcquisitionState, action: Action) -> AcquisitionState:
    """
    Apply one action and return the next state. Pure: never mutates `state`.

    While LOADING only LoadSucceeded/LoadFailed are accepted (BusyError
    otherwise). Load outcomes outside LOADING, and submits from CHART, raise
    StateTransitionError. User mistakes never raise; they fill `error`.
    """
    if state.mode is Mode.LOADING:
        if not isinstance(action, _LOAD_OUTCOMES):
            raise BusyError(f"{type(action).__name__} rejected while loading")
    elif isinstance(action, _LOAD_OUTCOMES):
        raise StateTransitionError(f"{type(action).__name__} received outside loading")

    if isinstance(action, SetField):
        form = state.form.with_field(action.name, action.value)
        return replace(state, form=form, example_flag=False)

    if isinstance(action, FillExample):
        return replace(
            state,
            form=action.example_form or default_example_form(),
            example_flag=True,
            error=None,
        )

    if isinstance(action, ClearExample):
        return replace(state, example_flag=False)

    if isinstance(action, (SubmitForm, SubmitTestJson)):
        if state.mode is Mode.CHART:
            raise StateTransitionError("Chart is shown; reset before submitting again")
        if isinstance(action, SubmitForm):
            return _submit_form(state)
        return _submit_test_json(state, action.raw_text)

    if isinstance(action, SetTestJsonText):
        return replace(state, test_json_text=action.text)

    if isinstance(action, InsertSampleJson):
        return replace(state, test_json_text=sample_json_text())

    if isinstance(action, ToggleTestMode):
        sub_mode = SubMode.FORM if state.sub_mode is SubMode.TEST_JSON else SubMode.TEST_JSON
        return replace(state, sub_mode=sub_mode)

    if isinstance(action, Reset):
        return AcquisitionState(sub_mode=state.sub_mode)

    if isinstance(action, LoadSucceeded):
        return replace(state, mode=Mode.CHART, record=action.record, pending=None, error=None)

    if isinstance(action, LoadFailed):
        return replace(state, mode=Mode.INPUT, pending=None, error=action.message)

    raise TypeError(f"Unknown action: {action!r}")


# -----------------------------
# Controller
# -----------------------------

RemoteLookup = Callable[[FormInput], Awaitable[MarketRecord]]
ExampleRunner = Callable[[], Awaitable[MarketRecord]]


class AcquisitionController:
    """
    Owns the current AcquisitionState and runs the single async operation a
    form submission needs (remote lookup or simulated example delay).

    The operations are injectable so callers (and tests) can swap the HTTP
    call or the 20 s wait without touching the state machine.
    """

    def __init__(
        self,
        state: Optional[AcquisitionState] = None,
        *,
        lookup: Optional[RemoteLookup] = None,
        run_example: Optional[ExampleRunner] = None,
    ) -> None:
        self._state = state or AcquisitionState()
        self._lookup = lookup or fetch_market_record
        self._run_example = run_example or (lambda: simulate_example(ACQUISITION_CFG.example_delay_ms))

    @property
    def state(self) -> AcquisitionState:
        return self._state

    def dispatch(self, action: Action) -> AcquisitionState:
        before = self._state.mode
        try:
            self._state = reduce(self._state, action)
        except StateTransitionError as e:
            logger.warning("Rejected action: %s", e)
            raise
        logger.debug("%s: %s -> %s", type(action).__name__, before.value, self._state.mode.value)
        return self._state

    # ---- user actions ----

    def set_field(self, name: str, value: str) -> AcquisitionState:
        return self.dispatch(SetField(name, value))

    def fill_example(self) -> AcquisitionState:
        return self.dispatch(FillExample())

    def clear_example(self) -> AcquisitionState:
        return self.dispatch(ClearExample())

    def toggle_test_mode(self) -> AcquisitionState:
        return self.dispatch(ToggleTestMode())

    def set_test_json_text(self, text: str) -> AcquisitionState:
        return self.dispatch(SetTestJsonText(text))

    def insert_sample_json(self) -> AcquisitionState:
        return self.dispatch(InsertSampleJson())

    def submit_test_json(self, raw_text: str) -> AcquisitionState:
        state = self.dispatch(SubmitTestJson(raw_text))
        if state.error:
            logger.info("Test JSON rejected: %s", state.error)
        return state

    def reset(self) -> AcquisitionState:
        return self.dispatch(Reset())

    def begin_submit(self) -> AcquisitionState:
        """Validate the form and enter LOADING; the caller then awaits run_pending()."""
        state = self.dispatch(SubmitForm())
        if state.is_loading:
            logger.info("Submitted market=%r via %s path", state.display_market, state.pending.value)
        return state

    async def run_pending(self) -> AcquisitionState:
        """Await the one operation chosen at submit time and apply its outcome."""
        state = self._state
        if not state.is_loading:
            return state

        try:
            if state.pending is PendingOperation.EXAMPLE:
                record = await self._run_example()
            else:
                record = await self._lookup(state.form)
        except AcquisitionError as e:
            logger.warning("Acquisition failed (%s): %s", state.pending.value, e)
            if state.pending is PendingOperation.EXAMPLE:
                return self.dispatch(LoadFailed(MSG_EXAMPLE_FAILED))
            return self.dispatch(LoadFailed(str(e)))
        except Exception as e:
            # Any failure must leave LOADING, otherwise every later action is rejected.
            logger.exception("Unexpected acquisition failure (%s)", state.pending.value)
            if state.pending is PendingOperation.EXAMPLE:
                return self.dispatch(LoadFailed(MSG_EXAMPLE_FAILED))
            return self.dispatch(LoadFailed(str(e) or type(e).__name__))

        return self.dispatch(LoadSucceeded(record))

    async def submit_form(self) -> AcquisitionState:
        state = self.begin_submit()
        if not state.is_loading:
            return state
        return await self.run_pending()

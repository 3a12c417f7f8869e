import copy

import pytest

from config import SAMPLE_MARKET_RECORD
from schemas.market_schema import FormInput, MarketRecord


class FakeSleep:
    """Records requested sleeps instead of waiting."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeLookup:
    """Stands in for fetch_market_record; returns a record or raises the given error."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def __call__(self, form):
        self.calls.append(form)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def sample_payload():
    return copy.deepcopy(SAMPLE_MARKET_RECORD)


@pytest.fixture
def sample_record(sample_payload):
    return MarketRecord.from_payload(sample_payload)


@pytest.fixture
def filled_form():
    return FormInput(company="Acme", service="Shoes", market="Women's shoes")


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def make_lookup():
    return FakeLookup

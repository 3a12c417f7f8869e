# services/market_lookup.py
# The two asynchronous acquisition operations:
# - fetch_market_record: one POST to the market lookup service
# - simulate_example: fixed delay, then the built-in sample dataset (never touches the network)

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import requests

from config import (
    EXAMPLE_DELAY_MS,
    LOOKUP_TIMEOUT_SECONDS,
    MARKET_LOOKUP_URL,
    MSG_HTTP_ERROR,
    SAMPLE_MARKET_RECORD,
)
from schemas.errors import TransportError
from schemas.market_schema import FormInput, MarketRecord


logger = logging.getLogger(__name__)

Sleeper = Callable[[float], Awaitable[Any]]


def _post_lookup(url: str, payload: Dict[str, str], timeout: float) -> Any:
    """
    Blocking part of the lookup. Single request, no retries.
    Returns the decoded JSON body.
    """
    try:
        resp = requests.post(url, json=payload, timeout=timeout)
    except requests.RequestException as e:
        raise TransportError(str(e) or type(e).__name__) from e

    if not resp.ok:
        raise TransportError(MSG_HTTP_ERROR.format(status=resp.status_code))

    try:
        return resp.json()
    except ValueError as e:
        raise TransportError(str(e) or "Invalid JSON response") from e


async def fetch_market_record(
    form: FormInput,
    *,
    url: str = MARKET_LOOKUP_URL,
    timeout: float = LOOKUP_TIMEOUT_SECONDS,
) -> MarketRecord:
    """
    POST {company, service, market} to the lookup service and parse the body.

    Raises:
      TransportError: non-2xx status ("HTTP error! status: <code>"), network
        failure (native message) or unreadable body.
      RecordFormatError: body decoded but is not a JSON object.
    """
    payload = form.to_payload()
    logger.info("Market lookup requested for market=%r", form.market)

    data = await asyncio.to_thread(_post_lookup, url, payload, timeout)
    record = MarketRecord.from_payload(data)

    logger.info("Market lookup returned %d year values", len(record.years))
    return record


async def simulate_example(
    delay_ms: int = EXAMPLE_DELAY_MS,
    *,
    sleep: Optional[Sleeper] = None,
    sample: Optional[Dict[str, Any]] = None,
) -> MarketRecord:
    """
    Demo path: wait `delay_ms`, then return the built-in sample record.
    `sleep` is injectable so tests can skip the real wait.
    """
    sleeper = sleep or asyncio.sleep
    logger.info("Example mode: simulating generation for %d ms", delay_ms)
    await sleeper(delay_ms / 1000.0)
    return MarketRecord.from_payload(copy.deepcopy(sample if sample is not None else SAMPLE_MARKET_RECORD))

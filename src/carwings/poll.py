"""Wait for remote operations that complete asynchronously on the vehicle."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from .const import DEFAULT_OPERATION_TIMEOUT, INITIAL_POLL_DELAY, POLL_INTERVAL
from .exceptions import CarwingsOperationCancelled, CarwingsOperationTimedOut

_LOGGER = logging.getLogger(__name__)


async def wait_for_result(
    check: Callable[[str], Awaitable[bool]],
    result_key: str,
    *,
    timeout: float = DEFAULT_OPERATION_TIMEOUT,
    initial_delay: float = INITIAL_POLL_DELAY,
    interval: float = POLL_INTERVAL,
    cancel_event: asyncio.Event | None = None,
) -> None:
    """Poll `check(result_key)` until it reports completion.

    The first poll happens after `initial_delay`, later ones every
    `interval`. Errors raised by `check` propagate immediately; only the
    "not finished yet" answer is retried.

    Raises:
        CarwingsOperationTimedOut: `timeout` seconds passed without completion
        CarwingsOperationCancelled: `cancel_event` was set while waiting
    """
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout

    await _sleep(min(initial_delay, timeout), cancel_event)
    polls = 0
    while True:
        polls += 1
        _LOGGER.debug("Checking result %s (poll %d)", result_key, polls)
        if await check(result_key):
            _LOGGER.debug("Result %s finished after %d polls", result_key, polls)
            return

        remaining = deadline - loop.time()
        if remaining <= 0:
            raise CarwingsOperationTimedOut(timeout)
        await _sleep(min(interval, remaining), cancel_event)


async def _sleep(delay: float, cancel_event: asyncio.Event | None) -> None:
    """Sleep for `delay` seconds, waking early if `cancel_event` is set."""
    if cancel_event is None:
        await asyncio.sleep(delay)
        return

    if cancel_event.is_set():
        raise CarwingsOperationCancelled("cancelled while waiting for the vehicle")
    try:
        await asyncio.wait_for(cancel_event.wait(), delay)
    except asyncio.TimeoutError:
        return
    raise CarwingsOperationCancelled("cancelled while waiting for the vehicle")

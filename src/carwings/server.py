"""HTTP server exposing a Carwings session."""

from __future__ import annotations

import asyncio
import dataclasses
import functools
import json
import logging
import signal
from collections.abc import Awaitable
from datetime import date, datetime, timedelta
from typing import Any

from aiohttp import web

from .carwings import Carwings
from .const import DEFAULT_OPERATION_TIMEOUT, OperationKind
from .exceptions import CarwingsApiException, CarwingsDataUnavailable

_LOGGER = logging.getLogger(__name__)

# How long a command request waits before answering 202 Accepted
RESPONSE_TIMEOUT = 5.0

CARWINGS_KEY = web.AppKey("carwings", Carwings)
LOCK_KEY = web.AppKey("lock", asyncio.Lock)
TASKS_KEY = web.AppKey("tasks", set)
UPDATE_INTERVAL_KEY = web.AppKey("update_interval", float)
OPERATION_TIMEOUT_KEY = web.AppKey("operation_timeout", float)
RESPONSE_TIMEOUT_KEY = web.AppKey("response_timeout", float)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, timedelta):
        return value.total_seconds()
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def _json_response(snapshot: Any) -> web.Response:
    return web.json_response(
        dataclasses.asdict(snapshot),
        dumps=functools.partial(json.dumps, default=_json_default),
    )


def _error_response(exception: CarwingsApiException) -> web.Response:
    status = 503 if isinstance(exception, CarwingsDataUnavailable) else 500
    return web.Response(status=status, text=str(exception))


async def _locked(app: web.Application, operation: Awaitable[Any]) -> Any:
    """Run a session operation; the session is not safe for concurrent use."""
    async with app[LOCK_KEY]:
        return await operation


async def get_battery(request: web.Request) -> web.Response:
    app = request.app
    try:
        status = await _locked(app, app[CARWINGS_KEY].battery_status())
    except CarwingsApiException as exception:
        return _error_response(exception)
    return _json_response(status)


async def get_climate(request: web.Request) -> web.Response:
    app = request.app
    try:
        status = await _locked(app, app[CARWINGS_KEY].climate_control_status())
    except CarwingsApiException as exception:
        return _error_response(exception)
    return _json_response(status)


async def _run_command(
    app: web.Application, operation: Awaitable[Any], name: str
) -> web.Response:
    """Run `operation`, answering 202 if it outlasts the response timeout.

    The operation keeps running in the background after a 202.
    """
    _LOGGER.info("%s request", name)
    task = asyncio.create_task(_locked(app, operation))
    app[TASKS_KEY].add(task)
    task.add_done_callback(app[TASKS_KEY].discard)
    task.add_done_callback(functools.partial(_log_task_result, name))

    try:
        await asyncio.wait_for(asyncio.shield(task), app[RESPONSE_TIMEOUT_KEY])
    except asyncio.TimeoutError:
        return web.Response(status=202)
    except CarwingsApiException as exception:
        return _error_response(exception)
    return web.Response(status=200)


def _log_task_result(name: str, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    if exception := task.exception():
        _LOGGER.error("%s request failed: %s", name, exception)


async def post_charging_on(request: web.Request) -> web.Response:
    app = request.app
    return await _run_command(
        app, app[CARWINGS_KEY].charging_request(), "Charging"
    )


async def post_climate_on(request: web.Request) -> web.Response:
    app = request.app
    return await _run_command(
        app,
        app[CARWINGS_KEY].perform(
            OperationKind.CLIMATE_ON, timeout=app[OPERATION_TIMEOUT_KEY]
        ),
        "Climate control on",
    )


async def post_climate_off(request: web.Request) -> web.Response:
    app = request.app
    return await _run_command(
        app,
        app[CARWINGS_KEY].perform(
            OperationKind.CLIMATE_OFF, timeout=app[OPERATION_TIMEOUT_KEY]
        ),
        "Climate control off",
    )


async def update_loop(app: web.Application) -> None:
    """Ask the vehicle for fresh data now and then every update interval."""
    carwings = app[CARWINGS_KEY]
    while True:
        try:
            await _locked(app, carwings.update_status())
        except CarwingsApiException as exception:
            _LOGGER.error("Error updating status: %s", exception)
        await asyncio.sleep(app[UPDATE_INTERVAL_KEY])


async def _background_tasks(app: web.Application):
    update_task = None
    if app[UPDATE_INTERVAL_KEY] > 0:
        update_task = asyncio.create_task(update_loop(app))
    yield
    tasks = set(app[TASKS_KEY])
    if update_task:
        tasks.add(update_task)
    for task in tasks:
        task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)


def create_app(
    carwings: Carwings,
    *,
    update_interval: float = 0,
    operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
    response_timeout: float = RESPONSE_TIMEOUT,
) -> web.Application:
    """Build the web application around a connected session."""
    app = web.Application()
    app[CARWINGS_KEY] = carwings
    app[LOCK_KEY] = asyncio.Lock()
    app[TASKS_KEY] = set()
    app[UPDATE_INTERVAL_KEY] = float(update_interval)
    app[OPERATION_TIMEOUT_KEY] = float(operation_timeout)
    app[RESPONSE_TIMEOUT_KEY] = float(response_timeout)
    app.cleanup_ctx.append(_background_tasks)
    app.add_routes(
        [
            web.get("/battery", get_battery),
            web.get("/climate", get_climate),
            web.post("/charging/on", post_charging_on),
            web.post("/climate/on", post_climate_on),
            web.post("/climate/off", post_climate_off),
        ]
    )
    return app


def parse_address(address: str) -> tuple[str, int]:
    """Split `host:port`; an empty host listens on all interfaces."""
    host, _, port = address.rpartition(":")
    return host or "0.0.0.0", int(port)


async def serve(
    carwings: Carwings,
    address: str,
    *,
    update_interval: float = 0,
    operation_timeout: float = DEFAULT_OPERATION_TIMEOUT,
) -> None:
    """Serve until SIGINT or SIGTERM."""
    host, port = parse_address(address)
    runner = web.AppRunner(
        create_app(
            carwings,
            update_interval=update_interval,
            operation_timeout=operation_timeout,
        )
    )
    await runner.setup()

    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(signum, stop.set)
        except NotImplementedError:
            # Windows event loops have no signal handlers
            pass

    try:
        await web.TCPSite(runner, host, port).start()
        print(f"Starting HTTP server on {host}:{port}...")
        await stop.wait()
    finally:
        await runner.cleanup()

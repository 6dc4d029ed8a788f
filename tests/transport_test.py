"""Tests for `carwings.transport`."""

from __future__ import annotations

import pytest
from aiohttp import web
from aresponses import ResponsesMockServer
from carwings.const import BASE_URL, Endpoint
from carwings.exceptions import (
    CarwingsAuthenticationExpired,
    CarwingsBackendError,
    CarwingsDecodeError,
)
from carwings.transport import ApiResponse, Outcome, Transport

from .responses import (
    EXPIRED_RESPONSE,
    HOST,
    INITIAL_APP_RESPONSE,
    SERVER_ERROR_RESPONSE,
    TIMEOUT_RESPONSE,
    path,
)


@pytest.mark.parametrize(
    ("status", "outcome"),
    [
        (200, Outcome.SUCCESS),
        ("200", Outcome.SUCCESS),
        (401, Outcome.AUTHENTICATION_EXPIRED),
        ("408", Outcome.AUTHENTICATION_EXPIRED),
        (500, Outcome.BACKEND_ERROR),
        ("-2000", Outcome.BACKEND_ERROR),
        (None, Outcome.BACKEND_ERROR),
        ("ok", Outcome.BACKEND_ERROR),
        (True, Outcome.BACKEND_ERROR),
    ],
)
def test_classify(status, outcome: Outcome) -> None:
    """Test the embedded status classification."""
    assert ApiResponse("Test.php", {"status": status}).classify() is outcome


def test_raise_for_status() -> None:
    ApiResponse("Test.php", {"status": 200}).raise_for_status()
    with pytest.raises(CarwingsAuthenticationExpired):
        ApiResponse("Test.php", {"status": 408}).raise_for_status()
    with pytest.raises(CarwingsBackendError) as exc_info:
        ApiResponse("Test.php", {"status": "500", "message": "Down"}).raise_for_status()
    assert exc_info.value.code == 500
    assert exc_info.value.message == "Down"
    assert exc_info.value.endpoint == "Test.php"
    assert str(exc_info.value) == "received status code 500 (Down)"


@pytest.mark.parametrize("value", [None, [], "", {}])
def test_is_empty(value) -> None:
    assert ApiResponse("Test.php", {"status": 200, "Records": value}).is_empty(
        "Records"
    )


def test_is_not_empty() -> None:
    assert not ApiResponse("Test.php", {"Records": {"a": 1}}).is_empty("Records")


async def test_request(aresponses: ResponsesMockServer) -> None:
    """Test a form POST with the expected headers."""
    seen: dict = {}

    async def handler(request: web.Request) -> web.Response:
        seen["form"] = dict(await request.post())
        seen["content_type"] = request.content_type
        return web.json_response(INITIAL_APP_RESPONSE)

    aresponses.add(HOST, path(Endpoint.INITIAL_APP), "POST", response=handler)
    transport = Transport(debug=True)
    response = await transport.request(Endpoint.INITIAL_APP, {"initial_app_str": "abc"})
    await transport.close()

    assert response.status == 200
    assert response["baseprm"] == "uyI5Dj9g8VCOFDnBRUbr3g"
    assert seen["form"] == {"initial_app_str": "abc"}
    assert seen["content_type"] == "application/x-www-form-urlencoded"


async def test_request_base_url_without_slash(aresponses: ResponsesMockServer) -> None:
    aresponses.add(HOST, path(Endpoint.LOGIN), "POST", response=INITIAL_APP_RESPONSE)
    transport = Transport(BASE_URL.rstrip("/"))
    await transport.request(Endpoint.LOGIN, {})
    await transport.close()
    aresponses.assert_plan_strictly_followed()


@pytest.mark.parametrize("body", [EXPIRED_RESPONSE, TIMEOUT_RESPONSE])
async def test_request_expired(aresponses: ResponsesMockServer, body: dict) -> None:
    aresponses.add(HOST, path(Endpoint.LOGIN), "POST", response=body)
    transport = Transport()
    with pytest.raises(CarwingsAuthenticationExpired):
        await transport.request(Endpoint.LOGIN, {})
    await transport.close()


async def test_request_backend_error(aresponses: ResponsesMockServer) -> None:
    aresponses.add(HOST, path(Endpoint.LOGIN), "POST", response=SERVER_ERROR_RESPONSE)
    transport = Transport()
    with pytest.raises(CarwingsBackendError, match="Internal error"):
        await transport.request(Endpoint.LOGIN, {})
    await transport.close()


@pytest.mark.parametrize("body", ["<html>Maintenance</html>", "[]"])
async def test_request_invalid_body(aresponses: ResponsesMockServer, body: str) -> None:
    """Test bodies that are not a JSON object."""
    aresponses.add(
        HOST,
        path(Endpoint.LOGIN),
        "POST",
        response=aresponses.Response(text=body, content_type="text/html"),
    )
    transport = Transport()
    with pytest.raises(CarwingsDecodeError) as exc_info:
        await transport.request(Endpoint.LOGIN, {})
    await transport.close()
    assert exc_info.value.raw == body

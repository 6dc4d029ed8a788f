"""Form POST transport and response envelope for the Carwings API."""

from __future__ import annotations

import asyncio
import json
import logging
import socket
import sys
from enum import Enum
from typing import Any

import aiohttp

from .const import (
    BASE_URL,
    DEFAULT_REQUEST_TIMEOUT,
    STATUS_OK,
    STATUS_REQUEST_TIMEOUT,
    STATUS_UNAUTHORIZED,
)
from .exceptions import (
    CarwingsApiException,
    CarwingsAuthenticationExpired,
    CarwingsBackendError,
    CarwingsDecodeError,
)

if sys.version_info >= (3, 11):
    import asyncio as async_timeout
else:
    import async_timeout

_LOGGER = logging.getLogger(__name__)

BASE_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "User-Agent": "",
}


class Outcome(Enum):
    """Classification of the status embedded in a response body."""

    SUCCESS = "success"
    AUTHENTICATION_EXPIRED = "authentication_expired"
    BACKEND_ERROR = "backend_error"


class ApiResponse:
    """A decoded response body.

    The backend reports its own status inside the JSON payload, as either a
    number or a numeric string, independent of the HTTP status line.
    """

    def __init__(self, endpoint: str, data: dict[str, Any]) -> None:
        self.endpoint = endpoint
        self.data = data

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    @property
    def status(self) -> int:
        """Embedded status code, 0 when missing or garbled."""
        value = self.data.get("status")
        if isinstance(value, bool):
            return 0
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return 0
        return 0

    @property
    def message(self) -> str:
        return str(self.data.get("message") or "")

    def classify(self) -> Outcome:
        """Classify the embedded status."""
        status = self.status
        if status == STATUS_OK:
            return Outcome.SUCCESS
        # 408 shows up when the session id has gone stale
        if status in (STATUS_UNAUTHORIZED, STATUS_REQUEST_TIMEOUT):
            return Outcome.AUTHENTICATION_EXPIRED
        return Outcome.BACKEND_ERROR

    def raise_for_status(self) -> None:
        """Raise the exception matching the embedded status, if any."""
        outcome = self.classify()
        if outcome is Outcome.AUTHENTICATION_EXPIRED:
            raise CarwingsAuthenticationExpired(
                f"{self.endpoint}: session expired (status {self.status})"
            )
        if outcome is Outcome.BACKEND_ERROR:
            raise CarwingsBackendError(self.status, self.message, self.endpoint)

    def is_empty(self, key: str) -> bool:
        """Whether `key` holds a "no data" sentinel instead of a record.

        Some endpoints send an empty list (or an empty string) where an
        object is expected when nothing has been cached yet.
        """
        return self.data.get(key) in (None, [], "", {})


class Transport:
    """Executes single request/response exchanges against the backend."""

    def __init__(
        self,
        base_url: str = BASE_URL,
        *,
        debug: bool = False,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        if not base_url.endswith("/"):
            base_url += "/"
        self.base_url = base_url
        self.debug = debug
        self.request_timeout = request_timeout
        self._session = session
        self._close_session = False

    async def request(self, endpoint: str, params: dict[str, str]) -> ApiResponse:
        """POST form parameters to `endpoint` and return the checked envelope.

        Raises:
            CarwingsAuthenticationExpired: status 401 or 408
            CarwingsBackendError: any other non-200 status
            CarwingsDecodeError: the body is not a JSON object
            CarwingsApiException: network failure or timeout
        """
        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._close_session = True

        url = self.base_url + endpoint
        if self.debug:
            _LOGGER.debug("POST %s %s", url, params)

        try:
            async with async_timeout.timeout(self.request_timeout):
                async with self._session.post(
                    url, data=params, headers=BASE_HEADERS
                ) as response:
                    body = await response.text()
        except asyncio.TimeoutError as exception:
            raise CarwingsApiException(
                f"Timeout occurred while connecting to Carwings ({endpoint})."
            ) from exception
        except (aiohttp.ClientError, socket.gaierror) as exception:
            raise CarwingsApiException(
                f"Error occurred while communicating with Carwings ({endpoint})."
            ) from exception

        if self.debug:
            _LOGGER.debug("%s HTTP %s: %s", endpoint, response.status, body)

        try:
            data = json.loads(body)
        except ValueError as exception:
            raise CarwingsDecodeError(
                f"{endpoint} returned a non-JSON body", body
            ) from exception
        if not isinstance(data, dict):
            raise CarwingsDecodeError(f"{endpoint} returned a non-object body", body)

        api_response = ApiResponse(endpoint, data)
        api_response.raise_for_status()
        return api_response

    async def close(self) -> None:
        """Close the client session if we opened it."""
        if self._session and self._close_session:
            await self._session.close()
            self._session = None
            self._close_session = False

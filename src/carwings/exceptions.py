"""Exceptions raised by the Carwings client."""

from __future__ import annotations


class CarwingsApiException(Exception):
    """Base exception for Carwings API errors."""


class CarwingsAuthenticationExpired(CarwingsApiException):
    """The backend rejected the session id (status 401 or 408).

    Consumed by the session to re-login, never raised to callers of
    `Carwings` methods.
    """


class CarwingsAuthenticationFailed(CarwingsApiException):
    """Login did not produce a usable session."""


class CarwingsNotLoggedIn(CarwingsApiException):
    """An operation was invoked before connecting."""


class CarwingsBackendError(CarwingsApiException):
    """The backend answered with a non-success status code."""

    def __init__(self, code: int, message: str = "", endpoint: str = "") -> None:
        self.code = code
        self.message = message
        self.endpoint = endpoint
        text = f"received status code {code}"
        if message:
            text += f" ({message})"
        super().__init__(text)


class CarwingsDataUnavailable(CarwingsApiException):
    """The backend has no cached data for the requested record yet."""


class CarwingsOperationTimedOut(CarwingsApiException):
    """A remote operation did not complete within the allowed time."""

    def __init__(self, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"timed out after {timeout:g}s waiting for the vehicle")


class CarwingsOperationCancelled(CarwingsApiException):
    """Waiting for a remote operation was cancelled."""


class CarwingsVehicleLinkFailure(CarwingsApiException):
    """The backend could not reach the vehicle over its radio link."""


class CarwingsDecodeError(CarwingsApiException):
    """A response field matched none of the tolerated encodings."""

    def __init__(self, message: str, raw: object = None) -> None:
        self.raw = raw
        super().__init__(f"{message}: {raw!r}")

"""Encoding helpers for the Carwings API."""

from __future__ import annotations

import base64
import logging
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from cryptography.hazmat.decrepit.ciphers.algorithms import Blowfish
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from .exceptions import CarwingsDecodeError

_LOGGER = logging.getLogger(__name__)

# Carwings uses at least five different date formats, tried in this order
TIMESTAMP_FORMATS = (
    "%Y/%m/%d %H:%M",  # 2018/08/04 15:08
    "%Y-%m-%d %H:%M:%S",  # 2018-08-04 15:08:33
    "%Y-%m-%dT%H:%M:%SZ",  # UserVehicleBoundTime
    "%Y-%m-%dT%H:%M:%S",  # GpsDatetime in monthly statistics
    "%b %d, %Y %I:%M %p",  # LastScheduledTime, e.g. "Aug  4, 2018 03:08 PM"
)


def encrypt_password(password: str, key: str) -> str:
    """Encrypt the password the way the login endpoint expects.

    Blowfish in ECB mode with PKCS#5 padding, base64 encoded. The key is
    handed out by the `InitialApp` bootstrap call.
    """
    padder = padding.PKCS7(Blowfish.block_size).padder()
    data = padder.update(password.encode("utf-8")) + padder.finalize()

    encryptor = Cipher(Blowfish(key.encode("utf-8")), modes.ECB()).encryptor()
    encrypted = encryptor.update(data) + encryptor.finalize()
    return base64.b64encode(encrypted).decode()


def parse_timestamp(raw: str | None) -> datetime | None:
    """Parse a backend timestamp as UTC.

    Returns None for an empty value. Raises `CarwingsDecodeError` when no
    known format matches.
    """
    if raw is None or raw in ("", '""'):
        return None
    if not isinstance(raw, str):
        raise CarwingsDecodeError("cannot parse as carwings time", raw)

    for fmt in TIMESTAMP_FORMATS:
        try:
            parsed = datetime.strptime(raw.strip(), fmt)
        except ValueError:
            continue
        return parsed.replace(tzinfo=timezone.utc)

    raise CarwingsDecodeError("cannot parse as carwings time", raw)


def fix_location(value: datetime | None, zone: tzinfo) -> datetime | None:
    """Attach `zone` to a timestamp without changing its wall clock fields.

    All timestamps are parsed as UTC, but some are in fact local to the
    vehicle's time zone.
    """
    if value is None:
        return None
    return value.replace(tzinfo=zone)


def to_int(value: Any) -> int:
    """Decode an integer sent as a JSON number or a numeric string."""
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise CarwingsDecodeError("cannot decode as integer", value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
        try:
            return int(float(value))
        except ValueError as exception:
            raise CarwingsDecodeError("cannot decode as integer", value) from exception
    raise CarwingsDecodeError("cannot decode as integer", value)


def to_float(value: Any) -> float:
    """Decode a float sent as a JSON number or a numeric string."""
    if value is None or value == "":
        return 0.0
    if isinstance(value, bool):
        raise CarwingsDecodeError("cannot decode as float", value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exception:
            raise CarwingsDecodeError("cannot decode as float", value) from exception
    raise CarwingsDecodeError("cannot decode as float", value)


def duration_from_parts(hours: Any, minutes: Any) -> timedelta | None:
    """Combine hour and minute fields into a duration.

    Zero hours and zero minutes means the backend has no estimate and
    returns None.
    """
    hours, minutes = to_int(hours), to_int(minutes)
    if hours == 0 and minutes == 0:
        return None
    return timedelta(hours=hours, minutes=minutes)


def resolve_timezone(name: str | None) -> tzinfo:
    """Resolve an IANA time zone name, falling back to UTC."""
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        _LOGGER.warning("Unknown time zone %r, using UTC", name)
        return timezone.utc

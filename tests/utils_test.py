"""Tests for `carwings.utils`."""

from __future__ import annotations

import base64
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest
from carwings.exceptions import CarwingsDecodeError
from carwings.utils import (
    duration_from_parts,
    encrypt_password,
    fix_location,
    parse_timestamp,
    resolve_timezone,
    to_float,
    to_int,
)
from cryptography.hazmat.decrepit.ciphers.algorithms import Blowfish
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, modes

KEY = "uyI5Dj9g8VCOFDnBRUbr3g"


def decrypt(encrypted: str, key: str) -> str:
    decryptor = Cipher(Blowfish(key.encode()), modes.ECB()).decryptor()
    data = decryptor.update(base64.b64decode(encrypted)) + decryptor.finalize()
    unpadder = padding.PKCS7(Blowfish.block_size).unpadder()
    return (unpadder.update(data) + unpadder.finalize()).decode()


@pytest.mark.parametrize("password", ["", "secret", "exactly8", "pass#word with spaces"])
def test_encrypt_password(password: str) -> None:
    """Test the password survives a Blowfish round trip with padding."""
    encrypted = encrypt_password(password, KEY)
    raw = base64.b64decode(encrypted)
    assert len(raw) % 8 == 0
    assert len(raw) > len(password.encode())
    assert decrypt(encrypted, KEY) == password


def test_encrypt_password_is_deterministic() -> None:
    """Test that ECB mode gives the same output for the same input."""
    assert encrypt_password("secret", KEY) == encrypt_password("secret", KEY)
    assert encrypt_password("secret", KEY) != encrypt_password("secret", KEY[::-1])


def test_encrypt_password_bad_key() -> None:
    """Test that an empty key is rejected."""
    with pytest.raises(ValueError):
        encrypt_password("secret", "")


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("2018/08/04 15:08", datetime(2018, 8, 4, 15, 8)),
        ("2018-08-04 15:08:33", datetime(2018, 8, 4, 15, 8, 33)),
        ("2018-08-04T15:08:33Z", datetime(2018, 8, 4, 15, 8, 33)),
        ("2018-08-04T15:08:33", datetime(2018, 8, 4, 15, 8, 33)),
        ("Aug 04, 2018 03:08 PM", datetime(2018, 8, 4, 15, 8)),
        ("Aug  4, 2018 03:08 PM", datetime(2018, 8, 4, 15, 8)),
    ],
)
def test_parse_timestamp(raw: str, expected: datetime) -> None:
    """Test every timestamp format is read as UTC."""
    assert parse_timestamp(raw) == expected.replace(tzinfo=timezone.utc)


@pytest.mark.parametrize("raw", [None, "", '""'])
def test_parse_timestamp_absent(raw: str | None) -> None:
    assert parse_timestamp(raw) is None


@pytest.mark.parametrize("raw", ["yesterday", "2018.08.04", 1533395280])
def test_parse_timestamp_invalid(raw) -> None:
    with pytest.raises(CarwingsDecodeError) as exc_info:
        parse_timestamp(raw)
    assert exc_info.value.raw == raw


def test_fix_location() -> None:
    """Test that the wall clock fields are kept."""
    zone = ZoneInfo("Europe/London")
    fixed = fix_location(datetime(2018, 8, 4, 15, 8, tzinfo=timezone.utc), zone)
    assert fixed == datetime(2018, 8, 4, 15, 8, tzinfo=zone)
    assert fixed.hour == 15
    assert fix_location(None, zone) is None


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 0), ("", 0), (12, 12), ("12", 12), ("107136.0", 107136), (3.9, 3)],
)
def test_to_int(value, expected: int) -> None:
    assert to_int(value) == expected


@pytest.mark.parametrize("value", ["twelve", True, [1], {"Value": 1}])
def test_to_int_invalid(value) -> None:
    with pytest.raises(CarwingsDecodeError):
        to_int(value)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(None, 0.0), ("", 0.0), (2, 2.0), ("0.15", 0.15), (113600.0, 113600.0)],
)
def test_to_float(value, expected: float) -> None:
    assert to_float(value) == expected


def test_to_float_invalid() -> None:
    with pytest.raises(CarwingsDecodeError):
        to_float("N/A")


def test_duration_from_parts() -> None:
    assert duration_from_parts("18", "30") == timedelta(hours=18, minutes=30)
    assert duration_from_parts(0, "45") == timedelta(minutes=45)
    assert duration_from_parts("0", "0") is None
    assert duration_from_parts(None, None) is None


def test_resolve_timezone() -> None:
    assert resolve_timezone("America/Denver") == ZoneInfo("America/Denver")
    assert resolve_timezone("") is timezone.utc
    assert resolve_timezone(None) is timezone.utc
    assert resolve_timezone("Mars/Olympus_Mons") is timezone.utc

"""Persist the authenticated session between runs."""

from __future__ import annotations

import json
import logging
import os
from typing import Any

from .const import Units
from .models import AuthenticatedIdentity

_LOGGER = logging.getLogger(__name__)


class SessionStore:
    """Load and save the session identity as a small JSON file.

    The session id is a bearer credential, so the file is written with
    owner-only permissions.
    """

    def __init__(self, filename: str) -> None:
        self.filename = os.path.expanduser(filename)

    def load(self) -> tuple[AuthenticatedIdentity, Units | None] | None:
        """Return the stored identity and unit preference.

        Returns None when the file is missing, unreadable or does not hold
        a complete identity.
        """
        try:
            with open(self.filename, encoding="utf-8") as session_file:
                record = json.load(session_file)
        except FileNotFoundError:
            _LOGGER.debug("No session file at %s", self.filename)
            return None
        except (OSError, ValueError) as exception:
            _LOGGER.debug("Error loading session from %s: %s", self.filename, exception)
            return None

        if not isinstance(record, dict):
            _LOGGER.debug("Ignoring malformed session file %s", self.filename)
            return None

        identity = AuthenticatedIdentity(
            vin=_as_str(record.get("vin")),
            custom_session_id=_as_str(record.get("customSessionID")),
            timezone=_as_str(record.get("tz")),
            region=_as_str(record.get("region")),
        )
        if not identity.is_valid:
            _LOGGER.debug("Ignoring incomplete session in %s", self.filename)
            return None

        try:
            units = Units(record["units"]) if record.get("units") else None
        except ValueError:
            units = None
        return identity, units

    def save(self, identity: AuthenticatedIdentity, units: Units | None = None) -> bool:
        """Write the identity, returning whether it was saved.

        Failures are logged, the session stays usable in memory.
        """
        record = {
            "vin": identity.vin,
            "customSessionID": identity.custom_session_id,
            "tz": identity.timezone,
            "region": identity.region,
            "units": str(units) if units else "",
        }
        try:
            directory = os.path.dirname(self.filename)
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd = os.open(
                self.filename, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600
            )
        except OSError as exception:
            _LOGGER.warning("Unable to save session to %s: %s", self.filename, exception)
            return False

        try:
            with os.fdopen(fd, "w", encoding="utf-8") as session_file:
                # An existing file keeps its old mode through os.open
                os.fchmod(session_file.fileno(), 0o600)
                json.dump(record, session_file)
        except (OSError, TypeError, ValueError) as exception:
            _LOGGER.warning("Unable to save session to %s: %s", self.filename, exception)
            try:
                os.remove(self.filename)
            except OSError:
                pass
            return False

        _LOGGER.debug("Saved session to %s", self.filename)
        return True


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""

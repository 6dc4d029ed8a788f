"""Asynchronous Python client for the Carwings API."""

from .carwings import Carwings
from .const import ChargingStatus, OperationKind, PluginState, Region, Units

__all__ = [
    "Carwings",
    "ChargingStatus",
    "OperationKind",
    "PluginState",
    "Region",
    "Units",
]

"""Unit conversions for displaying Carwings values."""

from __future__ import annotations

from .const import Units

MILES_PER_METER = 0.000621371
MILES_PER_KM = 0.621371


def meters_to_miles(meters: int) -> int:
    """Convert Carwings distances (in meters) to whole miles."""
    return int(meters * MILES_PER_METER)


def meters_to_km(meters: int) -> int:
    return int(meters / 1000)


def format_distance(meters: int, units: Units | None) -> str:
    if units is Units.METRIC:
        return f"{meters_to_km(meters)} km"
    return f"{meters_to_miles(meters)} mi"


def efficiency_to_miles_per_kwh(value: float, scale: str) -> float | None:
    """Convert an efficiency figure in `scale` to miles per kWh.

    Returns None for an unknown scale or a zero consumption figure.
    """
    if scale == "kWh/100km":
        return 100 * MILES_PER_KM / value if value else None
    if scale == "km/kWh":
        return value * MILES_PER_KM
    if scale == "miles/kWh":
        return value
    return None


def format_efficiency(value: float, scale: str, units: Units | None) -> str:
    if units is Units.METRIC or not scale:
        return f"{value:g} {scale}".rstrip()
    converted = efficiency_to_miles_per_kwh(value, scale)
    if converted is None:
        return f"{value:g} {scale}"
    return f"{converted:.1f} mi/kWh"

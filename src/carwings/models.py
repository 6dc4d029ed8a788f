"""Typed values decoded from Carwings responses."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from .const import ChargingStatus, OperationKind, PluginState


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """What the backend hands out on login.

    Only usable when both the VIN and the session id are present.
    """

    vin: str = ""
    custom_session_id: str = ""
    timezone: str = ""
    region: str = ""

    @property
    def is_valid(self) -> bool:
        """Whether the identity can be used for authenticated requests."""
        return bool(self.vin and self.custom_session_id)


@dataclass(frozen=True)
class AsyncOperation:
    """A submitted remote operation and the result key used to poll it."""

    kind: OperationKind
    result_key: str


@dataclass(frozen=True)
class TimeToFull:
    """Time to fully charge the battery, per charging method.

    None means the backend has no estimate for that method.
    """

    # 1.4 kW Level 1 (120V 12A) trickle charge
    level1: timedelta | None = None
    # 3.3 kW Level 2 (240V ~15A)
    level2: timedelta | None = None
    # 6.6 kW Level 2 (240V ~30A)
    level2_at_6kw: timedelta | None = None


@dataclass(frozen=True)
class BatteryStatus:
    """State of charge, plug state, charging status and time to full.

    Cached by the backend: `timestamp` is when the vehicle last reported.
    """

    timestamp: datetime | None
    capacity: int
    remaining: int
    remaining_wh: int
    state_of_charge: int
    cruising_range_ac_on: int
    cruising_range_ac_off: int
    plugin_state: PluginState
    charging_status: ChargingStatus
    time_to_full: TimeToFull = field(default_factory=TimeToFull)


@dataclass(frozen=True)
class ClimateStatus:
    """Climate control (AC or heater) status."""

    last_operation_time: datetime | None
    running: bool
    plugin_state: PluginState
    # Seconds the climate control runs on battery or while plugged in
    battery_duration: int
    plugged_duration: int
    temperature_unit: str
    temperature: int
    # When the AC stopped, or is scheduled to stop while running
    ac_stop_time: datetime | None
    cruising_range_ac_on: int
    cruising_range_ac_off: int


@dataclass(frozen=True)
class VehicleLocation:
    """Last reported vehicle position."""

    timestamp: datetime | None
    latitude: str
    longitude: str

    @property
    def map_url(self) -> str:
        return f"https://www.google.com/maps/place/{self.latitude},{self.longitude}"


@dataclass(frozen=True)
class ClimateSchedule:
    """The scheduled climate control start, if any."""

    execute_time: datetime | None
    last_scheduled_time: datetime | None = None
    display_execute_time: str = ""


@dataclass(frozen=True)
class CabinTemperature:
    """Interior temperature reported by the vehicle."""

    temperature: int
    timestamp: datetime | None = None


@dataclass(frozen=True)
class TripDetail:
    """A single trip from the monthly statistics."""

    trip_id: int
    power_consumed_total: float
    power_consumed_motor: float
    power_regenerated: float
    meters: int
    efficiency: float
    co2_reduction: int
    map_display_flag: str
    started: datetime | None


@dataclass(frozen=True)
class DateDetail:
    """Trips made on a single date."""

    target_date: str
    trips: tuple[TripDetail, ...] = ()


@dataclass(frozen=True)
class MonthlyTotals:
    """Totals for a whole month."""

    trips: int = 0
    power_consumed: float = 0.0
    power_consumed_motor: float = 0.0
    power_regenerated: float = 0.0
    meters_travelled: int = 0
    efficiency: float = 0.0
    co2_reduction: int = 0


@dataclass(frozen=True)
class MonthlyStatistics:
    """Trips and totals for a month, with the configured electricity rate."""

    efficiency_scale: str
    electricity_rate: float
    electricity_bill: float
    dates: tuple[DateDetail, ...]
    total: MonthlyTotals


@dataclass(frozen=True)
class DailyStatistics:
    """Driving efficiency summary for a day."""

    target_date: date | None
    efficiency_scale: str
    efficiency: float
    efficiency_level: int
    power_consumed_motor: float
    power_consumed_motor_level: int
    power_regeneration: float
    power_regeneration_level: int
    power_consumed_aux: float
    power_consumed_aux_level: int

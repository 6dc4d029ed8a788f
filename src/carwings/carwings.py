"""Asynchronous Python client for the Carwings API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta, timezone
from typing import Any

import aiohttp

from .const import (
    BASE_URL,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    INITIAL_APP_STR,
    INITIAL_POLL_DELAY,
    OPERATION_ELECTRIC_WAVE_ABNORMAL,
    OPERATION_START,
    POLL_INTERVAL,
    ChargingStatus,
    Endpoint,
    OperationKind,
    PluginState,
    Region,
    SessionState,
    Units,
)
from .exceptions import (
    CarwingsApiException,
    CarwingsAuthenticationExpired,
    CarwingsAuthenticationFailed,
    CarwingsDataUnavailable,
    CarwingsNotLoggedIn,
    CarwingsVehicleLinkFailure,
)
from .models import (
    AsyncOperation,
    AuthenticatedIdentity,
    BatteryStatus,
    CabinTemperature,
    ClimateSchedule,
    ClimateStatus,
    DailyStatistics,
    DateDetail,
    MonthlyStatistics,
    MonthlyTotals,
    TimeToFull,
    TripDetail,
    VehicleLocation,
)
from .poll import wait_for_result
from .store import SessionStore
from .transport import ApiResponse, Transport
from .utils import (
    duration_from_parts,
    encrypt_password,
    fix_location,
    parse_timestamp,
    resolve_timezone,
    to_float,
    to_int,
)

_LOGGER = logging.getLogger(__name__)


def _lookup(mapping: Any, key: str, default: Any = None) -> Any:
    """Case-insensitive key lookup; the backend is not consistent about case."""
    if not isinstance(mapping, dict):
        return default
    if key in mapping:
        return mapping[key]
    lowered = key.lower()
    for name, value in mapping.items():
        if name.lower() == lowered:
            return value
    return default


def _first(value: Any) -> Any:
    """First element of a non-empty list, or the value itself if it is a dict."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _as_list(value: Any) -> list:
    """Lists stay lists, a lone object becomes a list, sentinels become empty."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict):
        return [value]
    return []


# The login response has carried the vehicle info in each of these places
# over the backend's revisions. The first one with a VIN wins.
VEHICLE_INFO_SHAPES: tuple[tuple[str, Callable[[dict], Any]], ...] = (
    ("vehicleInfo", lambda data: _first(_lookup(data, "vehicleInfo"))),
    (
        "vehicleInfoList",
        lambda data: _first(_lookup(_lookup(data, "vehicleInfoList"), "vehicleInfo")),
    ),
    (
        "CustomerInfo.VehicleInfo",
        lambda data: _lookup(_lookup(data, "CustomerInfo"), "VehicleInfo"),
    ),
    ("VehicleInfo", lambda data: _lookup(data, "VehicleInfo")),
)


def extract_vehicle_info(data: dict[str, Any]) -> tuple[str, str]:
    """Return the VIN and session id from a login response.

    Raises:
        CarwingsAuthenticationFailed: no known shape holds a VIN
    """
    for shape, extract in VEHICLE_INFO_SHAPES:
        info = extract(data)
        if not isinstance(info, dict):
            continue
        vin = _lookup(info, "vin")
        if isinstance(vin, str) and vin:
            _LOGGER.debug("Vehicle info found in %s", shape)
            session_id = _lookup(info, "custom_sessionid")
            return vin, session_id if isinstance(session_id, str) else ""
    raise CarwingsAuthenticationFailed("vehicle info unavailable")


class Carwings:
    """Session with the Carwings service.

    Owns the login credentials and the session identity, and adds the
    common parameters to every request. Not safe for concurrent use by
    unrelated callers; serialize access to one instance.
    """

    def __init__(
        self,
        region: str = Region.USA,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: aiohttp.client.ClientSession | None = None,
        *,
        session_file: str | None = None,
        timezone_override: str | None = None,
        units: Units | None = None,
        base_url: str = BASE_URL,
        debug: bool = False,
        vin: str = "",
        custom_session_id: str = "",
        tz: str = "",
        poll_initial_delay: float = INITIAL_POLL_DELAY,
        poll_interval: float = POLL_INTERVAL,
    ) -> None:
        self.region = str(region)
        self.units = units
        self.poll_initial_delay = poll_initial_delay
        self.poll_interval = poll_interval

        self._transport = Transport(
            base_url, debug=debug, request_timeout=request_timeout, session=session
        )
        self._store = SessionStore(session_file) if session_file else None
        self._timezone_override = timezone_override

        self._username = ""
        self._encrypted_password = ""
        self._login_lock = asyncio.Lock()
        self._cabin_temp: CabinTemperature | None = None

        self._identity = AuthenticatedIdentity()
        self._zone = resolve_timezone(timezone_override)
        self.state = SessionState.UNAUTHENTICATED
        if vin or custom_session_id:
            self._adopt(
                AuthenticatedIdentity(
                    vin=vin,
                    custom_session_id=custom_session_id,
                    timezone=tz,
                    region=self.region,
                )
            )

    @property
    def identity(self) -> AuthenticatedIdentity:
        return self._identity

    @property
    def vin(self) -> str:
        return self._identity.vin

    @property
    def zone(self):
        """Time zone of the vehicle, used to localize timestamps."""
        return self._zone

    @property
    def is_authenticated(self) -> bool:
        return self.state is SessionState.AUTHENTICATED

    @property
    def cabin_temperature(self) -> CabinTemperature | None:
        """Latest cabin temperature fetched with `check_cabin_temp_request`."""
        return self._cabin_temp

    def _adopt(self, identity: AuthenticatedIdentity) -> None:
        """Switch to a new identity, all fields or nothing."""
        if not identity.is_valid:
            self._identity = AuthenticatedIdentity()
            self.state = SessionState.UNAUTHENTICATED
            return
        self._identity = identity
        self._zone = resolve_timezone(self._timezone_override or identity.timezone)
        self.state = SessionState.AUTHENTICATED

    async def connect(self, username: str, password: str) -> None:
        """Establish an authenticated session.

        The password is encrypted straight away with a key handed out by
        the backend; only the encrypted form is kept, for re-logins. A
        usable session in the session file skips the login request.
        """
        try:
            response = await self._transport.request(
                Endpoint.INITIAL_APP, {"initial_app_str": INITIAL_APP_STR}
            )
        except CarwingsAuthenticationExpired as exception:
            raise CarwingsAuthenticationFailed("bootstrap rejected") from exception
        key = response.get("baseprm")
        if not isinstance(key, str) or not key:
            raise CarwingsAuthenticationFailed("no encryption key in InitialApp response")
        try:
            encrypted = encrypt_password(password, key)
        except ValueError as exception:
            raise CarwingsAuthenticationFailed(
                f"unusable encryption key {key!r}"
            ) from exception

        self._username = username
        self._encrypted_password = encrypted

        if self._store and (stored := self._store.load()):
            identity, units = stored
            if identity.region and identity.region != self.region:
                _LOGGER.debug(
                    "Stored session is for region %s, not %s",
                    identity.region,
                    self.region,
                )
            else:
                _LOGGER.debug("Using stored session for %s", identity.vin)
                self._adopt(
                    AuthenticatedIdentity(
                        vin=identity.vin,
                        custom_session_id=identity.custom_session_id,
                        timezone=identity.timezone,
                        region=self.region,
                    )
                )
                if self.units is None:
                    self.units = units
                return

        await self.login()

    async def login(self) -> None:
        """Log in with the credentials given to `connect`.

        Raises:
            CarwingsNotLoggedIn: `connect` was never called
            CarwingsAuthenticationFailed: rejected credentials or no vehicle
                in the response
        """
        if not self._username or not self._encrypted_password:
            raise CarwingsNotLoggedIn("not logged in")

        previous_state = self.state
        self.state = SessionState.AUTHENTICATING
        try:
            response = await self._transport.request(
                Endpoint.LOGIN,
                {
                    "initial_app_str": INITIAL_APP_STR,
                    "UserId": self._username,
                    "Password": self._encrypted_password,
                    "RegionCode": self.region,
                },
            )
            vin, session_id = extract_vehicle_info(response.data)
        except CarwingsAuthenticationExpired as exception:
            self._adopt(AuthenticatedIdentity())
            raise CarwingsAuthenticationFailed("login rejected") from exception
        except CarwingsAuthenticationFailed:
            self._adopt(AuthenticatedIdentity())
            raise
        except CarwingsApiException:
            self.state = previous_state
            raise

        tz = _lookup(_lookup(response.data, "CustomerInfo"), "Timezone")
        identity = AuthenticatedIdentity(
            vin=vin,
            custom_session_id=session_id,
            timezone=tz if isinstance(tz, str) else "",
            region=self.region,
        )
        if not identity.is_valid:
            self._adopt(AuthenticatedIdentity())
            raise CarwingsAuthenticationFailed("login returned no session id")

        self._adopt(identity)
        _LOGGER.debug("Logged in, vehicle %s", vin)
        if self._store:
            self._store.save(identity, self.units)

    def _common_params(self, params: dict[str, str] | None) -> dict[str, str]:
        return {
            **(params or {}),
            "RegionCode": self.region,
            "VIN": self._identity.vin,
            "custom_sessionid": self._identity.custom_session_id,
            "tz": self._identity.timezone,
        }

    async def api_request(
        self, endpoint: str, params: dict[str, str] | None = None
    ) -> ApiResponse:
        """Make an authenticated request.

        An expired session is renewed once and the request retried once.
        """
        if not self._identity.is_valid:
            raise CarwingsNotLoggedIn("not logged in")

        session_id = self._identity.custom_session_id
        try:
            return await self._transport.request(endpoint, self._common_params(params))
        except CarwingsAuthenticationExpired:
            _LOGGER.debug("Session expired during %s, logging in again", endpoint)

        async with self._login_lock:
            # Someone else may have renewed the session while we waited
            if self._identity.custom_session_id == session_id:
                await self.login()

        try:
            return await self._transport.request(endpoint, self._common_params(params))
        except CarwingsAuthenticationExpired as exception:
            raise CarwingsAuthenticationFailed(
                f"session expired again after logging in ({endpoint})"
            ) from exception

    async def _result_key(self, endpoint: str) -> str:
        response = await self.api_request(endpoint)
        key = response.get("resultKey")
        if not isinstance(key, str) or not key:
            raise CarwingsApiException(f"{endpoint} returned no result key")
        return key

    async def _response_flag(
        self, endpoint: str, result_key: str
    ) -> tuple[bool, ApiResponse]:
        response = await self.api_request(endpoint, {"resultKey": result_key})
        return to_int(response.get("responseFlag")) == 1, response

    async def update_status(self) -> str:
        """Ask the service to fetch fresh data from the vehicle.

        Returns the result key to poll with `check_update`.
        """
        return await self._result_key(Endpoint.BATTERY_STATUS_CHECK)

    async def check_update(self, result_key: str) -> bool:
        """Whether the update for `result_key` has finished.

        Raises:
            CarwingsVehicleLinkFailure: the service could not reach the vehicle
        """
        done, response = await self._response_flag(
            Endpoint.BATTERY_STATUS_CHECK_RESULT, result_key
        )
        if response.get("operationResult") == OPERATION_ELECTRIC_WAVE_ABNORMAL:
            raise CarwingsVehicleLinkFailure(
                "failed to retrieve updated info from vehicle"
            )
        return done

    async def climate_on_request(self) -> str:
        """Turn on the climate control, returning the result key."""
        return await self._result_key(Endpoint.AC_REMOTE_ON)

    async def check_climate_on_request(self, result_key: str) -> bool:
        done, _ = await self._response_flag(Endpoint.AC_REMOTE_ON_RESULT, result_key)
        return done

    async def climate_off_request(self) -> str:
        """Turn off the climate control, returning the result key."""
        return await self._result_key(Endpoint.AC_REMOTE_OFF)

    async def check_climate_off_request(self, result_key: str) -> bool:
        done, _ = await self._response_flag(Endpoint.AC_REMOTE_OFF_RESULT, result_key)
        return done

    async def locate_request(self) -> str:
        """Ask the vehicle for its position, returning the result key."""
        return await self._result_key(Endpoint.LOCATE)

    async def check_locate_request(self, result_key: str) -> bool:
        done, _ = await self._response_flag(Endpoint.LOCATE_RESULT, result_key)
        return done

    async def cabin_temp_request(self) -> str:
        """Ask the vehicle for its cabin temperature, returning the result key."""
        return await self._result_key(Endpoint.CABIN_TEMP)

    async def check_cabin_temp_request(self, result_key: str) -> bool:
        """Whether the cabin temperature request has finished.

        The reading is kept in `cabin_temperature`.
        """
        done, response = await self._response_flag(
            Endpoint.CABIN_TEMP_RESULT, result_key
        )
        if done:
            self._cabin_temp = CabinTemperature(
                temperature=to_int(response.get("Inc_temp")),
                timestamp=datetime.now(self._zone),
            )
        return done

    def _operation_calls(
        self, kind: OperationKind
    ) -> tuple[Callable[[], Awaitable[str]], Callable[[str], Awaitable[bool]]]:
        return {
            OperationKind.UPDATE: (self.update_status, self.check_update),
            OperationKind.CLIMATE_ON: (
                self.climate_on_request,
                self.check_climate_on_request,
            ),
            OperationKind.CLIMATE_OFF: (
                self.climate_off_request,
                self.check_climate_off_request,
            ),
            OperationKind.LOCATE: (self.locate_request, self.check_locate_request),
            OperationKind.CABIN_TEMP: (
                self.cabin_temp_request,
                self.check_cabin_temp_request,
            ),
        }[kind]

    async def start_operation(self, kind: OperationKind) -> AsyncOperation:
        """Submit a remote operation."""
        submit, _ = self._operation_calls(kind)
        return AsyncOperation(kind=kind, result_key=await submit())

    async def check_operation(self, operation: AsyncOperation) -> bool:
        """Poll once with the check call matching the operation kind."""
        _, check = self._operation_calls(operation.kind)
        return await check(operation.result_key)

    async def wait_for_operation(
        self,
        operation: AsyncOperation,
        timeout: float = DEFAULT_OPERATION_TIMEOUT,
        cancel_event: asyncio.Event | None = None,
    ) -> None:
        """Poll until the operation completes, times out or is cancelled."""
        _, check = self._operation_calls(operation.kind)
        await wait_for_result(
            check,
            operation.result_key,
            timeout=timeout,
            initial_delay=self.poll_initial_delay,
            interval=self.poll_interval,
            cancel_event=cancel_event,
        )

    async def perform(
        self,
        kind: OperationKind,
        timeout: float = DEFAULT_OPERATION_TIMEOUT,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncOperation:
        """Submit a remote operation and wait for it to complete."""
        operation = await self.start_operation(kind)
        _LOGGER.debug("Started %s with result key %s", kind, operation.result_key)
        await self.wait_for_operation(operation, timeout, cancel_event)
        return operation

    async def battery_status(self) -> BatteryStatus:
        """Most recent battery status cached by the service.

        Not real time: call `update_status` first to refresh it.

        Raises:
            CarwingsDataUnavailable: nothing cached yet
        """
        response = await self.api_request(Endpoint.BATTERY_STATUS_RECORDS)
        if response.is_empty("BatteryStatusRecords"):
            raise CarwingsDataUnavailable("battery status unavailable")

        record = response["BatteryStatusRecords"]
        battery = _lookup(record, "BatteryStatus", {})
        capacity = to_int(_lookup(battery, "BatteryCapacity"))
        remaining = to_int(_lookup(battery, "BatteryRemainingAmount"))

        soc = to_int(_lookup(_lookup(battery, "SOC"), "Value"))
        if soc == 0 and capacity:
            soc = round(remaining / capacity * 100)

        def time_to_full(name: str) -> timedelta | None:
            value = _lookup(record, name, {})
            return duration_from_parts(
                _lookup(value, "HourRequiredToFull"),
                _lookup(value, "MinutesRequiredToFull"),
            )

        timestamp = parse_timestamp(_lookup(record, "NotificationDateAndTime"))
        return BatteryStatus(
            timestamp=timestamp.astimezone(self._zone) if timestamp else None,
            capacity=capacity,
            remaining=remaining,
            remaining_wh=to_int(_lookup(battery, "BatteryRemainingAmountWH")),
            state_of_charge=soc,
            cruising_range_ac_on=int(to_float(_lookup(record, "CruisingRangeAcOn"))),
            cruising_range_ac_off=int(to_float(_lookup(record, "CruisingRangeAcOff"))),
            plugin_state=PluginState(_lookup(record, "PluginState") or ""),
            charging_status=ChargingStatus(
                _lookup(battery, "BatteryChargingStatus") or ""
            ),
            time_to_full=TimeToFull(
                level1=time_to_full("TimeRequiredToFull"),
                level2=time_to_full("TimeRequiredToFull200"),
                level2_at_6kw=time_to_full("TimeRequiredToFull200_6kW"),
            ),
        )

    async def climate_control_status(self) -> ClimateStatus:
        """Most recent climate control status cached by the service.

        Raises:
            CarwingsDataUnavailable: nothing cached yet
        """
        response = await self.api_request(Endpoint.AC_RECORDS)
        if response.is_empty("RemoteACRecords"):
            raise CarwingsDataUnavailable("climate status unavailable")

        record = response["RemoteACRecords"]
        plugin_state = PluginState(_lookup(record, "PluginState") or "")
        battery_duration = to_int(_lookup(record, "ACDurationBatterySec"))
        plugged_duration = to_int(_lookup(record, "ACDurationPluggedSec"))

        running = _lookup(record, "RemoteACOperation") == OPERATION_START
        ac_stop_time = parse_timestamp(_lookup(record, "ACStartStopDateAndTime"))
        if ac_stop_time:
            ac_stop_time = ac_stop_time.astimezone(self._zone)
            if running:
                if plugin_state is PluginState.NOT_CONNECTED:
                    ac_stop_time += timedelta(seconds=battery_duration)
                else:
                    ac_stop_time += timedelta(seconds=plugged_duration)

        return ClimateStatus(
            last_operation_time=fix_location(
                parse_timestamp(_lookup(record, "OperationDateAndTime")), self._zone
            ),
            running=running,
            plugin_state=plugin_state,
            battery_duration=battery_duration,
            plugged_duration=plugged_duration,
            temperature_unit=_lookup(record, "PreAC_unit") or "",
            temperature=to_int(_lookup(record, "PreAC_temp")),
            ac_stop_time=ac_stop_time,
            cruising_range_ac_on=int(to_float(_lookup(record, "CruisingRangeAcOn"))),
            cruising_range_ac_off=int(to_float(_lookup(record, "CruisingRangeAcOff"))),
        )

    async def locate_vehicle(self) -> VehicleLocation:
        """Most recent position fetched with `locate_request`."""
        response = await self.api_request(Endpoint.LOCATE_LATLNG)
        latitude = _lookup(response.data, "lat") or ""
        longitude = _lookup(response.data, "lng") or ""
        if not latitude or not longitude:
            raise CarwingsDataUnavailable("vehicle location unavailable")

        timestamp = parse_timestamp(_lookup(response.data, "receivedDate"))
        return VehicleLocation(
            timestamp=timestamp.astimezone(self._zone) if timestamp else None,
            latitude=str(latitude),
            longitude=str(longitude),
        )

    async def charging_request(self) -> None:
        """Begin charging a plugged-in vehicle."""
        await self.api_request(
            Endpoint.BATTERY_REMOTE_CHARGING,
            {"ExecuteTime": datetime.now(self._zone).strftime("%Y-%m-%d")},
        )

    def _schedule_time(self, start: datetime) -> str:
        # TODO: confirm whether the backend reads ExecuteTime as UTC or as the
        # vehicle's local time; UTC has been sent so far.
        if start.tzinfo is None:
            start = start.replace(tzinfo=self._zone)
        return start.astimezone(timezone.utc).strftime("%Y-%m-%d %H:%M")

    async def get_climate_control_schedule(self) -> ClimateSchedule:
        """The scheduled climate control start."""
        response = await self.api_request(Endpoint.AC_SCHEDULE_GET)
        return ClimateSchedule(
            execute_time=parse_timestamp(_lookup(response.data, "ExecuteTime")),
            last_scheduled_time=parse_timestamp(
                _lookup(response.data, "LastScheduledTime")
            ),
            display_execute_time=_lookup(response.data, "DisplayExecuteTime") or "",
        )

    async def set_climate_control_schedule(self, start: datetime) -> None:
        """Schedule the climate control to start at `start`."""
        await self.api_request(
            Endpoint.AC_SCHEDULE_NEW, {"ExecuteTime": self._schedule_time(start)}
        )

    async def update_climate_control_schedule(self, start: datetime) -> None:
        """Move the scheduled climate control start to `start`."""
        await self.api_request(
            Endpoint.AC_SCHEDULE_UPDATE, {"ExecuteTime": self._schedule_time(start)}
        )

    async def cancel_climate_control_schedule(self) -> None:
        await self.api_request(Endpoint.AC_SCHEDULE_CANCEL)

    async def get_monthly_statistics(self, month: date) -> MonthlyStatistics:
        """Trips and totals for the month containing `month`."""
        if isinstance(month, datetime) and month.tzinfo is not None:
            month = month.astimezone(self._zone)
        response = await self.api_request(
            Endpoint.MONTHLY_STATISTICS, {"TargetMonth": month.strftime("%Y%m")}
        )

        data = _lookup(response.data, "PriceSimulatorDetailInfoResponsePersonalData")
        if not isinstance(data, dict):
            raise CarwingsDataUnavailable("monthly statistics unavailable")

        # The date list is an empty string instead of an object without trips
        date_list = _lookup(
            _lookup(data, "PriceSimulatorDetailInfoDateList"),
            "PriceSimulatorDetailInfoDate",
        )
        dates = []
        for detail in _as_list(date_list):
            trips = _lookup(
                _lookup(detail, "PriceSimulatorDetailInfoTripList"),
                "PriceSimulatorDetailInfoTrip",
            )
            dates.append(
                DateDetail(
                    target_date=_lookup(detail, "TargetDate") or "",
                    trips=tuple(_decode_trip(trip) for trip in _as_list(trips)),
                )
            )

        total = _lookup(data, "PriceSimulatorTotalInfo", {})
        return MonthlyStatistics(
            efficiency_scale=_lookup(data, "ElectricCostScale") or "",
            electricity_rate=to_float(_lookup(data, "ElectricPrice")),
            electricity_bill=to_float(_lookup(data, "ElectricBill")),
            dates=tuple(dates),
            total=MonthlyTotals(
                trips=to_int(_lookup(total, "TotalNumberOfTrips")),
                power_consumed=to_float(_lookup(total, "TotalPowerConsumptTotal")),
                power_consumed_motor=to_float(
                    _lookup(total, "TotalPowerConsumptMoter")
                ),
                power_regenerated=to_float(_lookup(total, "TotalPowerConsumptMinus")),
                meters_travelled=to_int(_lookup(total, "TotalTravelDistance")),
                efficiency=to_float(_lookup(total, "TotalElectricMileage")),
                co2_reduction=to_int(_lookup(total, "TotalCO2Reductiont")),
            ),
        )

    async def get_daily_statistics(self, day: date | None = None) -> DailyStatistics:
        """Driving statistics for today.

        The backend only answers for the current day: the name of the
        parameter selecting another date is unknown, so `day` is not sent.
        """
        if day is not None and day != datetime.now(self._zone).date():
            _LOGGER.warning("Daily statistics are only available for today")

        response = await self.api_request(Endpoint.DAILY_STATISTICS)
        data = _lookup(response.data, "DriveAnalysisBasicScreenResponsePersonalData")
        stats = _lookup(data, "DateSummary")
        target_date = _lookup(stats, "TargetDate")
        if not target_date:
            raise CarwingsDataUnavailable("daily driving statistics not available")

        try:
            parsed_date = date.fromisoformat(target_date)
        except (TypeError, ValueError):
            parsed_date = None

        return DailyStatistics(
            target_date=parsed_date,
            efficiency_scale=_lookup(data, "ElectricCostScale") or "",
            efficiency=to_float(_lookup(stats, "ElectricMileage")),
            efficiency_level=to_int(_lookup(stats, "ElectricMileageLevel")),
            power_consumed_motor=to_float(_lookup(stats, "PowerConsumptMoter")),
            power_consumed_motor_level=to_int(
                _lookup(stats, "PowerConsumptMoterLevel")
            ),
            power_regeneration=to_float(_lookup(stats, "PowerConsumptMinus")),
            power_regeneration_level=to_int(_lookup(stats, "PowerConsumptMinusLevel")),
            power_consumed_aux=to_float(_lookup(stats, "PowerConsumptAUX")),
            power_consumed_aux_level=to_int(_lookup(stats, "PowerConsumptAUXLevel")),
        )

    async def close(self) -> None:
        """Close open client session."""
        await self._transport.close()

    async def __aenter__(self) -> Carwings:
        """Async enter.
        Returns:
            The Carwings object.
        """
        return self

    async def __aexit__(self, *_exc_info) -> None:
        """Async exit.
        Args:
            _exc_info: Exec type.
        """
        await self.close()


def _decode_trip(trip: dict[str, Any]) -> TripDetail:
    return TripDetail(
        trip_id=to_int(_lookup(trip, "TripId")),
        power_consumed_total=to_float(_lookup(trip, "PowerConsumptTotal")),
        power_consumed_motor=to_float(_lookup(trip, "PowerConsumptMoter")),
        power_regenerated=to_float(_lookup(trip, "PowerConsumptMinus")),
        meters=to_int(_lookup(trip, "TravelDistance")),
        efficiency=to_float(_lookup(trip, "ElectricMileage")),
        co2_reduction=to_int(_lookup(trip, "CO2Reduction")),
        map_display_flag=_lookup(trip, "MapDisplayFlg") or "",
        started=parse_timestamp(_lookup(trip, "GpsDatetime")),
    )

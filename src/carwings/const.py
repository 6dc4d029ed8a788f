"""Constants for the Carwings API."""

import sys

if sys.version_info >= (3, 11):
    from enum import StrEnum
else:
    from backports.strenum import StrEnum

# Nissan moves the API to a new versioned path from time to time
BASE_URL = "https://gdcportalgw.its-mo.com/api_v200413_NE/gdc/"

INITIAL_APP_STR = "9s5rfKVuMrT03RtzajWNcA"

DEFAULT_SESSION_FILE = "~/.carwings-session"
DEFAULT_REQUEST_TIMEOUT = 30

# Remote operations never complete on the vehicle in under a few seconds
INITIAL_POLL_DELAY = 5.0
POLL_INTERVAL = 5.0
DEFAULT_OPERATION_TIMEOUT = 120.0

STATUS_OK = 200
STATUS_UNAUTHORIZED = 401
STATUS_REQUEST_TIMEOUT = 408

OPERATION_START = "START"
OPERATION_ELECTRIC_WAVE_ABNORMAL = "ELECTRIC_WAVE_ABNORMAL"


class Region(StrEnum):
    """Carwings region codes."""

    USA = "NNA"
    EUROPE = "NE"
    CANADA = "NCI"
    AUSTRALIA = "NMA"
    JAPAN = "NML"


class Units(StrEnum):
    """Display unit preference."""

    IMPERIAL = "imperial"
    METRIC = "metric"


class PluginState(StrEnum):
    """Whether and how the vehicle is plugged in.

    Separate from `ChargingStatus`: a vehicle can be plugged in without
    actively charging.
    """

    NOT_CONNECTED = "NOT_CONNECTED"
    CONNECTED = "CONNECTED"
    QC_CONNECTED = "QC_CONNECTED"
    INVALID = "INVALID"
    UNKNOWN = ""

    @property
    def description(self) -> str:
        """Human readable description."""
        return {
            PluginState.NOT_CONNECTED: "not connected",
            PluginState.CONNECTED: "connected",
            PluginState.QC_CONNECTED: "connected to quick charger",
            PluginState.INVALID: "invalid",
            PluginState.UNKNOWN: "unknown",
        }[self]

    @classmethod
    def _missing_(cls, value: object) -> "PluginState":
        return cls.UNKNOWN


class ChargingStatus(StrEnum):
    """Whether and how the vehicle is charging."""

    NOT_CHARGING = "NOT_CHARGING"
    NORMAL_CHARGING = "NORMAL_CHARGING"
    RAPIDLY_CHARGING = "RAPIDLY_CHARGING"
    INVALID = "INVALID"
    UNKNOWN = ""

    @property
    def description(self) -> str:
        """Human readable description."""
        return {
            ChargingStatus.NOT_CHARGING: "not charging",
            ChargingStatus.NORMAL_CHARGING: "charging",
            ChargingStatus.RAPIDLY_CHARGING: "rapidly charging",
            ChargingStatus.INVALID: "invalid",
            ChargingStatus.UNKNOWN: "unknown",
        }[self]

    @classmethod
    def _missing_(cls, value: object) -> "ChargingStatus":
        return cls.UNKNOWN


class SessionState(StrEnum):
    """Authentication state of a session."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class OperationKind(StrEnum):
    """Remote operations that complete asynchronously on the vehicle."""

    UPDATE = "update"
    CLIMATE_ON = "climate_on"
    CLIMATE_OFF = "climate_off"
    LOCATE = "locate"
    CABIN_TEMP = "cabin_temp"


class Endpoint(StrEnum):
    """Backend endpoint names, relative to the base URL."""

    INITIAL_APP = "InitialApp_v2.php"
    LOGIN = "UserLoginRequest.php"
    BATTERY_STATUS_CHECK = "BatteryStatusCheckRequest.php"
    BATTERY_STATUS_CHECK_RESULT = "BatteryStatusCheckResultRequest.php"
    BATTERY_STATUS_RECORDS = "BatteryStatusRecordsRequest.php"
    BATTERY_REMOTE_CHARGING = "BatteryRemoteChargingRequest.php"
    AC_REMOTE_ON = "ACRemoteRequest.php"
    AC_REMOTE_ON_RESULT = "ACRemoteResult.php"
    AC_REMOTE_OFF = "ACRemoteOffRequest.php"
    AC_REMOTE_OFF_RESULT = "ACRemoteOffResult.php"
    AC_RECORDS = "RemoteACRecordsRequest.php"
    AC_SCHEDULE_GET = "GetScheduledACRemoteRequest.php"
    AC_SCHEDULE_NEW = "ACRemoteNewRequest.php"
    AC_SCHEDULE_UPDATE = "ACRemoteUpdateRequest.php"
    AC_SCHEDULE_CANCEL = "ACRemoteCancelRequest.php"
    LOCATE = "MyCarFinderRequest.php"
    LOCATE_RESULT = "MyCarFinderResultRequest.php"
    LOCATE_LATLNG = "MyCarFinderLatLng.php"
    CABIN_TEMP = "GetInteriorTemperatureRequestForNsp.php"
    CABIN_TEMP_RESULT = "GetInteriorTemperatureResultForNsp.php"
    MONTHLY_STATISTICS = "PriceSimulatorDetailInfoRequest.php"
    DAILY_STATISTICS = "DriveAnalysisBasicScreenRequestEx.php"

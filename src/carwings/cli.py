"""Command line interface for the Carwings API."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from datetime import date, datetime

from dotenv import load_dotenv

from .carwings import Carwings
from .const import (
    BASE_URL,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_SESSION_FILE,
    OperationKind,
    Region,
    Units,
)
from .exceptions import CarwingsApiException
from .server import serve
from .units import format_distance, format_efficiency

CONFIG_FILE = "~/.carwings"
ENV_PREFIX = "CARWINGS_"

DEFAULTS = {
    "username": "",
    "password": "",
    "region": str(Region.USA),
    "session-file": DEFAULT_SESSION_FILE,
    "units": str(Units.IMPERIAL),
    "timeout": str(int(DEFAULT_OPERATION_TIMEOUT)),
    "debug": "false",
    "base-url": BASE_URL,
    "server-addr": ":8040",
    "server-update-interval": "0",
}


@dataclass
class Settings:
    """Resolved command line settings."""

    username: str
    password: str
    region: str
    session_file: str
    units: Units
    timeout: float
    debug: bool
    base_url: str
    server_addr: str
    server_update_interval: float


def parse_config_file(lines) -> dict[str, str]:
    """Parse `name value` lines.

    Blank lines and lines starting with `#` are skipped; a `#` later in the
    line is part of the value, since passwords may contain one. A trailing
    colon on the name is dropped for older config files, and a name
    without a value is a boolean option.
    """
    config = {}
    for line in lines:
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        name, _, value = line.partition(" ")
        value = value.strip() if value else "true"
        config[name.rstrip(":")] = value
    return config


def read_config_file(path: str = CONFIG_FILE) -> dict[str, str]:
    try:
        with open(os.path.expanduser(path), encoding="utf-8") as config_file:
            return parse_config_file(config_file)
    except FileNotFoundError:
        return {}


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def resolve_settings(
    args: argparse.Namespace,
    environ: Mapping[str, str],
    file_config: dict[str, str],
) -> Settings:
    """Flags win over environment variables, which win over the config file."""

    def value(name: str) -> str:
        flag = getattr(args, name.replace("-", "_"), None)
        if flag is not None:
            return str(flag)
        env_name = ENV_PREFIX + name.replace("-", "_").upper()
        if env_name in environ:
            return environ[env_name]
        return file_config.get(name, DEFAULTS[name])

    return Settings(
        username=value("username"),
        password=value("password"),
        region=value("region"),
        session_file=value("session-file"),
        units=Units(value("units")),
        timeout=float(value("timeout")),
        debug=_parse_bool(value("debug")),
        base_url=value("base-url"),
        server_addr=value("server-addr"),
        server_update_interval=float(value("server-update-interval")),
    )


async def run_operation(
    carwings: Carwings, kind: OperationKind, settings: Settings, what: str
) -> None:
    operation = await carwings.start_operation(kind)
    print(f"Checking if {what} finished...")
    await carwings.wait_for_operation(operation, timeout=settings.timeout)


async def run_update(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Requesting update from Carwings...")
    await run_operation(carwings, OperationKind.UPDATE, settings, "update")
    print("Update complete")


async def run_battery(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Getting latest retrieved battery status...")
    status = await carwings.battery_status()

    def estimate(value) -> str:
        return str(value) if value is not None else "unavailable"

    print(f"Battery status as of {status.timestamp}:")
    print(
        f"  Capacity: {status.remaining} / {status.capacity} ({status.state_of_charge}%)"
    )
    print(
        f"  Cruising range: {format_distance(status.cruising_range_ac_off, settings.units)}"
        f" ({format_distance(status.cruising_range_ac_on, settings.units)} with AC)"
    )
    print(f"  Plug-in state: {status.plugin_state.description}")
    print(f"  Charging status: {status.charging_status.description}")
    print("  Time to full:")
    print(f"    Level 1 charge: {estimate(status.time_to_full.level1)}")
    print(f"    Level 2 charge: {estimate(status.time_to_full.level2)}")
    print(f"    Level 2 at 6 kW: {estimate(status.time_to_full.level2_at_6kw)}")
    print()


async def run_charge(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Sending charging request...")
    await carwings.charging_request()
    print("Charging request sent")


async def run_climate_status(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    print("Getting latest retrieved climate control status...")
    status = await carwings.climate_control_status()

    print("Climate control status:")
    print(f"  Running: {'yes' if status.running else 'no'}")
    if status.plugin_state:
        print(f"  Plug-in state: {status.plugin_state.description}")
    if status.temperature:
        print(f"  Temperature setting: {status.temperature} {status.temperature_unit}")
    if status.running and status.ac_stop_time:
        print(f"  Running until: {status.ac_stop_time}")
    print()


async def run_climate_on(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Sending climate control on request...")
    await run_operation(
        carwings, OperationKind.CLIMATE_ON, settings, "climate control update"
    )
    print("Climate control turned on")


async def run_climate_off(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    print("Sending climate control off request...")
    await run_operation(
        carwings, OperationKind.CLIMATE_OFF, settings, "climate control update"
    )
    print("Climate control turned off")


async def run_locate(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Sending locate request...")
    await run_operation(carwings, OperationKind.LOCATE, settings, "locate request")

    print("Getting latest vehicle position...")
    location = await carwings.locate_vehicle()
    print(f"Vehicle location as of {location.timestamp}:")
    print(f"  Latitude: {location.latitude}")
    print(f"  Longitude: {location.longitude}")
    print(f"  Link: {location.map_url}")
    print()


async def run_cabin_temp(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    print("Sending cabin temperature request...")
    await run_operation(
        carwings, OperationKind.CABIN_TEMP, settings, "cabin temperature request"
    )
    cabin = carwings.cabin_temperature
    if cabin is not None:
        print(f"Cabin temperature: {cabin.temperature}")


async def run_monthly(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    try:
        month = datetime.strptime(args[0], "%Y-%m").date() if args else date.today()
    except ValueError as exception:
        raise CarwingsApiException(f"invalid month {args[0]!r}") from exception
    print(f"Getting driving statistics for {month:%B %Y}...")
    stats = await carwings.get_monthly_statistics(month)

    total = stats.total
    print(f"Monthly statistics for {month:%B %Y}:")
    print(f"  Trips: {total.trips}")
    print(f"  Distance: {format_distance(total.meters_travelled, settings.units)}")
    print(f"  Energy used: {total.power_consumed:g} kWh")
    print(f"  Regenerated: {total.power_regenerated:g} kWh")
    print(
        "  Efficiency: "
        f"{format_efficiency(total.efficiency, stats.efficiency_scale, settings.units)}"
    )
    if stats.electricity_rate:
        print(f"  Electricity bill: {stats.electricity_bill:.2f}")
    for detail in stats.dates:
        print(f"  {detail.target_date}:")
        for trip in detail.trips:
            print(
                f"    Trip {trip.trip_id}: {format_distance(trip.meters, settings.units)}, "
                f"{format_efficiency(trip.efficiency, stats.efficiency_scale, settings.units)}"
            )
    print()


async def run_daily(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    print("Getting today's driving statistics...")
    stats = await carwings.get_daily_statistics()
    print(f"Daily statistics for {stats.target_date}:")
    print(
        "  Efficiency: "
        f"{format_efficiency(stats.efficiency, stats.efficiency_scale, settings.units)}"
        f" (level {stats.efficiency_level})"
    )
    print(f"  Motor: {stats.power_consumed_motor:g} (level {stats.power_consumed_motor_level})")
    print(
        f"  Regeneration: {stats.power_regeneration:g}"
        f" (level {stats.power_regeneration_level})"
    )
    print(f"  Auxiliary: {stats.power_consumed_aux:g} (level {stats.power_consumed_aux_level})")
    print()


async def run_schedule(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    schedule = await carwings.get_climate_control_schedule()
    if schedule.execute_time is None:
        print("No climate control scheduled")
    else:
        print(f"Climate control scheduled for {schedule.execute_time}")


def _schedule_start(args: list[str]) -> datetime:
    if not args:
        raise CarwingsApiException('a start time ("YYYY-MM-DD HH:MM") is required')
    try:
        return datetime.strptime(" ".join(args), "%Y-%m-%d %H:%M")
    except ValueError as exception:
        raise CarwingsApiException(f"invalid start time {' '.join(args)!r}") from exception


async def run_schedule_set(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    start = _schedule_start(args)
    await carwings.set_climate_control_schedule(start)
    print(f"Climate control scheduled for {start:%Y-%m-%d %H:%M}")


async def run_schedule_update(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    start = _schedule_start(args)
    await carwings.update_climate_control_schedule(start)
    print(f"Climate control rescheduled for {start:%Y-%m-%d %H:%M}")


async def run_schedule_cancel(
    carwings: Carwings, settings: Settings, args: list[str]
) -> None:
    await carwings.cancel_climate_control_schedule()
    print("Climate control schedule cancelled")


async def run_server(carwings: Carwings, settings: Settings, args: list[str]) -> None:
    await serve(
        carwings,
        settings.server_addr,
        update_interval=settings.server_update_interval,
        operation_timeout=settings.timeout,
    )


Command = Callable[[Carwings, Settings, list[str]], Awaitable[None]]

COMMANDS: dict[str, tuple[Command, str]] = {
    "update": (run_update, "Load latest data from vehicle"),
    "battery": (run_battery, "Get most recently loaded battery status"),
    "charge": (run_charge, "Begin charging plugged-in vehicle"),
    "climate": (run_climate_status, "Get most recently loaded climate control status"),
    "climate-off": (run_climate_off, "Turn off climate control"),
    "climate-on": (run_climate_on, "Turn on climate control"),
    "locate": (run_locate, "Locate vehicle"),
    "cabin-temp": (run_cabin_temp, "Get cabin temperature"),
    "monthly": (run_monthly, "Get driving statistics for a month [YYYY-MM]"),
    "daily": (run_daily, "Get today's driving statistics"),
    "schedule": (run_schedule, "Show scheduled climate control"),
    "schedule-set": (run_schedule_set, "Schedule climate control <YYYY-MM-DD HH:MM>"),
    "schedule-update": (
        run_schedule_update,
        "Reschedule climate control <YYYY-MM-DD HH:MM>",
    ),
    "schedule-cancel": (run_schedule_cancel, "Cancel scheduled climate control"),
    "server": (run_server, "Run an HTTP server"),
}


def build_parser() -> argparse.ArgumentParser:
    epilog = "commands:\n" + "\n".join(
        f"  {name:<18}{description}" for name, (_, description) in COMMANDS.items()
    )
    parser = argparse.ArgumentParser(
        prog="carwings",
        description="Nissan Carwings command line client.",
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("command", help="command to run, see below")
    parser.add_argument("args", nargs="*", help="command arguments")
    parser.add_argument("--username", help="carwings username")
    parser.add_argument("--password", help="carwings password")
    parser.add_argument(
        "--region", choices=[str(region) for region in Region], help="carwings region"
    )
    parser.add_argument("--session-file", help="carwings session file")
    parser.add_argument(
        "--units", choices=[str(units) for units in Units], help="display units"
    )
    parser.add_argument(
        "--timeout", type=float, help="seconds to wait for remote operations"
    )
    parser.add_argument(
        "--debug", action="store_const", const="true", help="debug mode"
    )
    parser.add_argument("--base-url", help="carwings API base URL")
    parser.add_argument("--server-addr", help="HTTP server address")
    parser.add_argument(
        "--server-update-interval",
        type=float,
        help="seconds between automatic updates in server mode, 0 to disable",
    )
    return parser


async def _run(command: Command, settings: Settings, args: list[str]) -> None:
    print("Logging into Carwings...")
    async with Carwings(
        settings.region,
        session_file=settings.session_file,
        units=settings.units,
        base_url=settings.base_url,
        debug=settings.debug,
    ) as carwings:
        await carwings.connect(settings.username, settings.password)
        await command(carwings, settings, args)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args, os.environ, read_config_file())
    except ValueError as exception:
        parser.print_usage(sys.stderr)
        print(f"ERROR: {exception}", file=sys.stderr)
        return 1

    logging.basicConfig(level=logging.DEBUG if settings.debug else logging.WARNING)

    command = COMMANDS.get(args.command.lower())
    if command is None:
        parser.print_help(sys.stderr)
        return 1
    if not settings.username:
        print("ERROR: --username must be provided", file=sys.stderr)
        return 1
    if not settings.password:
        print("ERROR: --password must be provided", file=sys.stderr)
        return 1

    try:
        asyncio.run(_run(command[0], settings, args.args))
    except CarwingsApiException as exception:
        print(f"ERROR: {exception}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()

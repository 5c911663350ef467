"""Render stations and sessions as CSV for download."""
import csv
from io import StringIO
from typing import Any, Iterable, Mapping

from models.charging_session import ChargingSession
from models.station import Station
from utils.timestamps import as_utc

STATION_COLUMNS = [
    "Name",
    "Location",
    "Power",
    "Connector Type",
    "Status",
    "Uptime",
    "Total Sessions",
    "Latitude",
    "Longitude",
]

SESSION_COLUMNS = [
    "Session ID",
    "Station",
    "User",
    "Date",
    "Start Time",
    "End Time",
    "Duration (min)",
    "Energy (kWh)",
    "Cost (R)",
    "Status",
]


def _or_na(value: Any) -> Any:
    return "N/A" if value is None else value


def _write_csv(columns: list[str], rows: Iterable[dict[str, Any]]) -> str:
    """Write rows to a CSV string with a header line."""
    buf = StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row)
    return buf.getvalue()


def station_row(station: Station, session_count: int) -> dict[str, Any]:
    """One CSV row for a station."""
    return {
        "Name": station.name,
        "Location": station.location,
        "Power": station.power,
        "Connector Type": station.connector_type,
        "Status": station.status.value,
        "Uptime": f"{station.uptime:g}%",
        "Total Sessions": session_count,
        "Latitude": _or_na(station.latitude),
        "Longitude": _or_na(station.longitude),
    }


def session_row(s: ChargingSession) -> dict[str, Any]:
    """One CSV row for a session. Times are UTC."""
    start = as_utc(s.start_time)
    end = as_utc(s.end_time)
    return {
        "Session ID": s.session_code,
        "Station": s.station.name,
        "User": s.user.name or s.user.email,
        "Date": start.strftime("%Y/%m/%d"),
        "Start Time": start.strftime("%H:%M:%S"),
        "End Time": end.strftime("%H:%M:%S") if end else "In Progress",
        "Duration (min)": _or_na(s.duration),
        "Energy (kWh)": f"{s.energy_kwh:.2f}",
        "Cost (R)": f"{s.cost:.2f}",
        "Status": s.status.value,
    }


def stations_to_csv(stations: Iterable[Station], session_counts: Mapping[str, int]) -> str:
    """CSV export of stations with their session totals."""
    return _write_csv(STATION_COLUMNS, (station_row(s, session_counts.get(s.id, 0)) for s in stations))


def sessions_to_csv(sessions: Iterable[ChargingSession]) -> str:
    """CSV export of sessions."""
    return _write_csv(SESSION_COLUMNS, (session_row(s) for s in sessions))

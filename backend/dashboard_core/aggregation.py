"""Dashboard aggregation engine.

Pure functions that turn the full station and session collections into the
views the dashboard renders: summary counters, status distribution, top
stations by energy, a 7-day daily series and a recent-activity feed.
Wall-clock time enters only through the ``now`` argument.
"""
import math
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any, Optional
from zoneinfo import ZoneInfo

from utils.config import DASHBOARD_TZ
from utils.timestamps import as_utc

# (bucket label, station status, chart color)
STATUS_BUCKETS = (
    ("Active", "ACTIVE", "#10b981"),
    ("Idle", "OFFLINE", "#64748b"),
    ("Maintenance", "MAINTENANCE", "#f59e0b"),
)

TOP_STATIONS = 5
DAILY_WINDOW_DAYS = 7
RECENT_ACTIVITY_LIMIT = 4

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class StationRecord:
    """Station fields the engine reads."""

    id: str
    name: str
    status: str
    uptime: float = 0.0


@dataclass(frozen=True)
class SessionRecord:
    """Session fields the engine reads, with the station name denormalized for display."""

    id: str
    station_id: str
    station_name: str
    user_id: str
    start_time: datetime
    energy_kwh: float
    cost: float
    status: str
    created_at: datetime


def system_now() -> datetime:
    """Wall-clock time in the dashboard zone (DASHBOARD_TZ), carrying its DST rules."""
    return datetime.now(ZoneInfo(DASHBOARD_TZ))


def round_half_up(value: float) -> int:
    """Round to the nearest integer; halves always round up (2.5 -> 3, not banker's 2)."""
    return int(math.floor(value + 0.5))


def _aware(now: datetime) -> datetime:
    """Naive clocks are read as UTC; aware ones keep their zone."""
    return as_utc(now) if now.tzinfo is None else now


def _local_date(value: datetime, now: datetime) -> date:
    """Calendar date of value in now's timezone."""
    return as_utc(value).astimezone(now.tzinfo).date()


def relative_time(then: datetime, now: datetime) -> str:
    """Render the elapsed time between then and now, e.g. "5 min ago" or "2 days ago"."""
    elapsed = (as_utc(now) - as_utc(then)).total_seconds()
    minutes = math.floor(elapsed / 60)
    hours = minutes // 60
    days = hours // 24

    if minutes < 1:
        return "Just now"
    if minutes < 60:
        return f"{minutes} min ago"
    if hours < 24:
        return f"{hours} hour{'s' if hours > 1 else ''} ago"
    return f"{days} day{'s' if days > 1 else ''} ago"


def summary_stats(stations: Sequence[StationRecord], sessions: Sequence[SessionRecord]) -> dict[str, Any]:
    """All-time totals."""
    return {
        "totalSessions": len(sessions),
        "activeStations": sum(1 for s in stations if s.status == "ACTIVE"),
        "totalStations": len(stations),
        "energyDelivered": sum(s.energy_kwh for s in sessions),
        "revenue": sum(s.cost for s in sessions),
    }


def status_distribution(stations: Sequence[StationRecord]) -> list[dict[str, Any]]:
    """Station counts per status bucket, in fixed chart order."""
    return [
        {
            "name": label,
            "value": sum(1 for s in stations if s.status == status),
            "color": color,
        }
        for label, status, color in STATUS_BUCKETS
    ]


def energy_by_station(
    stations: Sequence[StationRecord],
    sessions: Sequence[SessionRecord],
    limit: int = TOP_STATIONS,
) -> list[dict[str, Any]]:
    """Top stations by delivered energy, joined on station id.

    Ties keep the input station order (sorted() is stable).
    """
    totals: dict[str, float] = {}
    for s in sessions:
        totals[s.station_id] = totals.get(s.station_id, 0.0) + s.energy_kwh
    ranked = [
        {
            "station": station.name,
            "kwh": round_half_up(totals.get(station.id, 0.0)),
            "efficiency": station.uptime,
        }
        for station in stations
    ]
    ranked = sorted(ranked, key=lambda row: row["kwh"], reverse=True)
    return ranked[:limit]


def daily_sessions(
    sessions: Sequence[SessionRecord],
    now: datetime,
    days: int = DAILY_WINDOW_DAYS,
) -> list[dict[str, Any]]:
    """Session count and rounded energy per calendar day, oldest first, ending today."""
    now = _aware(now)
    today = now.date()
    window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
    counts = {d: 0 for d in window}
    energy = {d: 0.0 for d in window}
    for s in sessions:
        d = _local_date(s.start_time, now)
        if d in counts:
            counts[d] += 1
            energy[d] += s.energy_kwh
    return [
        {
            "day": _WEEKDAYS[d.weekday()],
            "sessions": counts[d],
            "energy": round_half_up(energy[d]),
        }
        for d in window
    ]


def mask_user(user_id: str) -> str:
    """Display label that reveals only the last 4 characters of a user id."""
    return f"User #{user_id[-4:]}"


def recent_activity(
    sessions: Sequence[SessionRecord],
    now: datetime,
    limit: int = RECENT_ACTIVITY_LIMIT,
) -> list[dict[str, Any]]:
    """The most recently created sessions, projected for the activity feed."""
    now = _aware(now)
    newest = sorted(sessions, key=lambda s: as_utc(s.created_at), reverse=True)[:limit]
    return [
        {
            "id": s.id,
            "station": s.station_name,
            "user": mask_user(s.user_id),
            "time": relative_time(s.start_time, now),
            "status": s.status.lower(),
        }
        for s in newest
    ]


def build_dashboard(
    stations: Sequence[StationRecord],
    sessions: Sequence[SessionRecord],
    now: Optional[datetime] = None,
) -> dict[str, Any]:
    """Compute every dashboard view from the full collections."""
    if now is None:
        now = system_now()
    return {
        "stats": summary_stats(stations, sessions),
        "statusData": status_distribution(stations),
        "energyByStation": energy_by_station(stations, sessions),
        "sessionData": daily_sessions(sessions, now),
        "recentActivity": recent_activity(sessions, now),
    }

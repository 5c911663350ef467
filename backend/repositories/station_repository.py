"""Station repository: list, get, create, update, delete."""
from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.charging_session import ChargingSession
from models.station import Station, StationStatus

# Columns a partial update may touch.
_UPDATABLE_FIELDS = frozenset(
    {"name", "location", "power", "connector_type", "status", "uptime", "latitude", "longitude"}
)


def list_stations(session: Session, oldest_first: bool = False) -> list[Station]:
    """Return all stations, newest first (or in insertion order with oldest_first)."""
    order = Station.created_at.asc() if oldest_first else Station.created_at.desc()
    result = session.execute(select(Station).order_by(order))
    return list(result.scalars().all())


def get_station(session: Session, station_id: str) -> Optional[Station]:
    """Return a station by id or None."""
    return session.get(Station, station_id)


def create_station(
    session: Session,
    *,
    name: str,
    location: str,
    power: str,
    connector_type: str,
    status: StationStatus = StationStatus.ACTIVE,
    uptime: float = 0.0,
    latitude: float | None = None,
    longitude: float | None = None,
    station_id: str | None = None,
) -> Station:
    """Create a station, commit, and return it. Id is generated if not provided."""
    station = Station(
        name=name,
        location=location,
        power=power,
        connector_type=connector_type,
        status=status,
        uptime=uptime,
        latitude=latitude,
        longitude=longitude,
    )
    if station_id:
        station.id = station_id
    session.add(station)
    session.commit()
    session.refresh(station)
    return station


def update_station(session: Session, station_id: str, **fields: Any) -> Optional[Station]:
    """Apply the given fields to a station. Returns updated station or None if not found."""
    station = get_station(session, station_id)
    if station is None:
        return None
    unknown = set(fields) - _UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update station fields: {', '.join(sorted(unknown))}")
    for key, value in fields.items():
        setattr(station, key, value)
    session.commit()
    session.refresh(station)
    return station


def delete_station(session: Session, station_id: str) -> bool:
    """Delete a station and its sessions. Returns True if deleted, False if not found."""
    station = get_station(session, station_id)
    if station is None:
        return False
    session.delete(station)
    session.commit()
    return True


def count_stations(session: Session) -> int:
    """Return the number of stations (for seeding)."""
    result = session.execute(select(func.count()).select_from(Station))
    return result.scalar() or 0


def count_sessions_by_station(session: Session, station_id: str) -> int:
    """Return the number of sessions recorded at a station."""
    result = session.execute(
        select(func.count()).select_from(ChargingSession).where(ChargingSession.station_id == station_id)
    )
    return result.scalar() or 0


def session_counts_by_station(session: Session) -> dict[str, int]:
    """Return {station_id: session count} for every station that has sessions."""
    result = session.execute(
        select(ChargingSession.station_id, func.count()).group_by(ChargingSession.station_id)
    )
    return {station_id: count for station_id, count in result.all()}

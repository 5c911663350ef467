"""Dashboard API route: aggregates over all stations and sessions."""
from datetime import datetime

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from api.deps import authenticated, get_now
from api.errors import store_errors
from dashboard_core.aggregation import SessionRecord, StationRecord, build_dashboard
from dashboard_core.auth import Identity
from db import get_db
from models.charging_session import ChargingSession
from models.station import Station
from repositories.session_repository import list_sessions
from repositories.station_repository import list_stations
from schemas.dashboard import DashboardResponse

router = APIRouter(tags=["dashboard"])


def _station_record(s: Station) -> StationRecord:
    return StationRecord(id=s.id, name=s.name, status=s.status.value, uptime=s.uptime)


def _session_record(s: ChargingSession) -> SessionRecord:
    return SessionRecord(
        id=s.id,
        station_id=s.station_id,
        station_name=s.station.name,
        user_id=s.user_id,
        start_time=s.start_time,
        energy_kwh=s.energy_kwh,
        cost=s.cost,
        status=s.status.value,
        created_at=s.created_at,
    )


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
    now: datetime = Depends(get_now),
) -> DashboardResponse:
    """Summary counters, status distribution, top stations, 7-day series and recent activity."""
    with store_errors(db, "Failed to fetch dashboard data"):
        # Insertion order, so equal-energy stations keep it in the ranking.
        stations = [_station_record(s) for s in list_stations(db, oldest_first=True)]
        sessions = [_session_record(s) for s in list_sessions(db)]
    return DashboardResponse(**build_dashboard(stations, sessions, now=now))

"""CSV export routes. Registered before the station/session routers so /export is not taken as an id."""
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from api.deps import authenticated
from api.errors import store_errors
from dashboard_core.auth import Identity
from db import get_db
from repositories.session_repository import list_sessions
from repositories.station_repository import list_stations, session_counts_by_station
from utils.export import sessions_to_csv, stations_to_csv

router = APIRouter(tags=["exports"])


def _csv_response(content: str, filename: str) -> Response:
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stations/export")
def export_stations(
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> Response:
    """Download all stations as CSV."""
    with store_errors(db, "Failed to export stations"):
        content = stations_to_csv(list_stations(db), session_counts_by_station(db))
    return _csv_response(content, "stations-export.csv")


@router.get("/sessions/export")
def export_sessions(
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> Response:
    """Download all sessions as CSV."""
    with store_errors(db, "Failed to export sessions"):
        content = sessions_to_csv(list_sessions(db))
    return _csv_response(content, "sessions-export.csv")

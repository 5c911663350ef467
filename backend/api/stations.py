"""Station API routes."""
import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import admin_only, authenticated
from api.errors import store_errors
from dashboard_core.auth import Identity
from db import get_db
from models.station import Station, StationStatus
from repositories.session_repository import list_recent_sessions_by_station
from repositories.station_repository import (
    count_sessions_by_station,
    create_station as repo_create_station,
    delete_station as repo_delete_station,
    get_station as repo_get_station,
    list_stations as repo_list_stations,
    session_counts_by_station,
    update_station as repo_update_station,
)
from schemas.common import MessageResponse
from schemas.stations import (
    StationCreate,
    StationDetail,
    StationEnvelope,
    StationListResponse,
    StationResponse,
    StationSessionItem,
    StationUpdate,
)
from utils.timestamps import as_utc

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/stations", tags=["stations"])

RECENT_SESSIONS_PER_STATION = 10

_NOT_FOUND = "Station not found"


def _station_fields(station: Station, session_count: int) -> dict[str, Any]:
    """Response fields shared by list and detail views."""
    return dict(
        id=station.id,
        name=station.name,
        location=station.location,
        power=station.power,
        connectorType=station.connector_type,
        status=station.status.value,
        uptime=station.uptime,
        latitude=station.latitude,
        longitude=station.longitude,
        createdAt=as_utc(station.created_at),
        updatedAt=as_utc(station.updated_at),
        sessionCount=session_count,
    )


def _station_to_response(station: Station, session_count: int) -> StationResponse:
    return StationResponse(**_station_fields(station, session_count))


def _station_to_detail(db: Session, station: Station) -> StationDetail:
    """Build StationDetail with session count and latest sessions."""
    recent = list_recent_sessions_by_station(db, station.id, RECENT_SESSIONS_PER_STATION)
    return StationDetail(
        **_station_fields(station, count_sessions_by_station(db, station.id)),
        sessions=[
            StationSessionItem(
                id=s.id,
                sessionId=s.session_code,
                userId=s.user_id,
                startTime=as_utc(s.start_time),
                endTime=as_utc(s.end_time),
                duration=s.duration,
                energyKwh=s.energy_kwh,
                cost=s.cost,
                status=s.status.value,
            )
            for s in recent
        ],
    )


def _update_fields(body: StationUpdate) -> dict[str, Any]:
    """Map an update payload onto column values. Empty text and null uptime are ignored; null coordinates clear."""
    sent = body.model_dump(exclude_unset=True)
    fields: dict[str, Any] = {}
    for key, column in (("name", "name"), ("location", "location"), ("power", "power"), ("connectorType", "connector_type")):
        if sent.get(key):
            fields[column] = sent[key]
    if sent.get("status"):
        fields["status"] = StationStatus(sent["status"])
    if sent.get("uptime") is not None:
        fields["uptime"] = sent["uptime"]
    for key in ("latitude", "longitude"):
        if key in sent:
            fields[key] = sent[key]
    return fields


@router.get("", response_model=StationListResponse)
def list_stations(
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> StationListResponse:
    """List all stations, newest first, with their session counts."""
    with store_errors(db, "Failed to fetch stations"):
        stations = repo_list_stations(db)
        counts = session_counts_by_station(db)
        return StationListResponse(
            stations=[_station_to_response(s, counts.get(s.id, 0)) for s in stations]
        )


@router.post("", response_model=StationEnvelope, status_code=status.HTTP_201_CREATED)
def create_station(
    body: StationCreate,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> StationEnvelope:
    """Create a new station."""
    if not body.name or not body.location or not body.power or not body.connectorType:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    with store_errors(db, "Failed to create station"):
        station = repo_create_station(
            db,
            name=body.name,
            location=body.location,
            power=body.power,
            connector_type=body.connectorType,
            status=StationStatus(body.status or StationStatus.ACTIVE.value),
            uptime=body.uptime if body.uptime is not None else 0.0,
            latitude=body.latitude,
            longitude=body.longitude,
        )
        LOG.info("Station %s (%s) created by %s", station.id, station.name, identity.id)
        return StationEnvelope(station=_station_to_detail(db, station))


@router.get("/{station_id}", response_model=StationEnvelope)
def get_station(
    station_id: str,
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> StationEnvelope:
    """Get one station with its latest sessions."""
    with store_errors(db, "Failed to fetch station"):
        station = repo_get_station(db, station_id)
        if station is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
        return StationEnvelope(station=_station_to_detail(db, station))


@router.put("/{station_id}", response_model=StationEnvelope)
def update_station(
    station_id: str,
    body: StationUpdate,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> StationEnvelope:
    """Update station metadata, status or uptime."""
    with store_errors(db, "Failed to update station"):
        station = repo_update_station(db, station_id, **_update_fields(body))
        if station is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
        LOG.info("Station %s updated by %s", station_id, identity.id)
        return StationEnvelope(station=_station_to_detail(db, station))


@router.delete("/{station_id}", response_model=MessageResponse)
def delete_station(
    station_id: str,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a station by id. Its sessions are deleted with it."""
    with store_errors(db, "Failed to delete station"):
        if not repo_delete_station(db, station_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    LOG.info("Station %s deleted by %s", station_id, identity.id)
    return MessageResponse(message="Station deleted successfully")

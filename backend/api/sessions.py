"""Charging session API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from api.deps import admin_only, authenticated
from api.errors import store_errors
from dashboard_core.auth import Identity
from db import get_db
from models.charging_session import ChargingSession, SessionStatus
from repositories.session_repository import (
    create_session as repo_create_session,
    delete_session as repo_delete_session,
    get_session as repo_get_session,
    get_session_by_code as repo_get_session_by_code,
    list_sessions as repo_list_sessions,
    update_session as repo_update_session,
)
from repositories.station_repository import get_station
from schemas.common import MessageResponse
from schemas.sessions import (
    SessionCreate,
    SessionEnvelope,
    SessionListResponse,
    SessionResponse,
    SessionStationRef,
    SessionUpdate,
    SessionUserRef,
)
from utils.timestamps import as_utc

LOG = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["sessions"])

_NOT_FOUND = "Session not found"
_DUPLICATE = "Session ID already exists"


def _session_to_response(s: ChargingSession) -> SessionResponse:
    """Build SessionResponse from model instance (station and user are loaded lazily if needed)."""
    return SessionResponse(
        id=s.id,
        sessionId=s.session_code,
        stationId=s.station_id,
        userId=s.user_id,
        startTime=as_utc(s.start_time),
        endTime=as_utc(s.end_time),
        duration=s.duration,
        energyKwh=s.energy_kwh,
        cost=s.cost,
        status=s.status.value,
        createdAt=as_utc(s.created_at),
        updatedAt=as_utc(s.updated_at),
        station=SessionStationRef(id=s.station.id, name=s.station.name, location=s.station.location),
        user=SessionUserRef(id=s.user.id, name=s.user.name, email=s.user.email),
    )


@router.get("", response_model=SessionListResponse)
def list_sessions(
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> SessionListResponse:
    """List all sessions, newest first."""
    with store_errors(db, "Failed to fetch sessions"):
        return SessionListResponse(sessions=[_session_to_response(s) for s in repo_list_sessions(db)])


@router.post("", response_model=SessionEnvelope, status_code=status.HTTP_201_CREATED)
def create_session(
    body: SessionCreate,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> SessionEnvelope:
    """Start a session at a station on behalf of the caller."""
    if not body.sessionId or not body.stationId or body.startTime is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing required fields")
    with store_errors(db, "Failed to create session"):
        if get_station(db, body.stationId) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Station not found")
        if repo_get_session_by_code(db, body.sessionId) is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_DUPLICATE)
        try:
            charging_session = repo_create_session(
                db,
                session_code=body.sessionId,
                station_id=body.stationId,
                user_id=identity.id,
                start_time=as_utc(body.startTime),
                end_time=as_utc(body.endTime),
                duration=body.duration,
                energy_kwh=body.energyKwh or 0.0,
                cost=body.cost or 0.0,
                status=SessionStatus(body.status or SessionStatus.CHARGING.value),
            )
        except IntegrityError as e:
            # A concurrent insert won the unique session_code.
            if "session_code" in str(e) or "unique" in str(e).lower():
                db.rollback()
                raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_DUPLICATE) from e
            raise
        LOG.info("Session %s started at station %s by %s", body.sessionId, body.stationId, identity.id)
        return SessionEnvelope(session=_session_to_response(charging_session))


@router.get("/{session_id}", response_model=SessionEnvelope)
def get_session(
    session_id: str,
    _: Identity = Depends(authenticated),
    db: Session = Depends(get_db),
) -> SessionEnvelope:
    """Get one session with its station and user."""
    with store_errors(db, "Failed to fetch session"):
        charging_session = repo_get_session(db, session_id)
        if charging_session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
        return SessionEnvelope(session=_session_to_response(charging_session))


@router.put("/{session_id}", response_model=SessionEnvelope)
def update_session(
    session_id: str,
    body: SessionUpdate,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> SessionEnvelope:
    """Record session progress: end time, duration, energy, cost, status."""
    with store_errors(db, "Failed to update session"):
        charging_session = repo_update_session(
            db,
            session_id,
            end_time=as_utc(body.endTime),
            duration=body.duration,
            energy_kwh=body.energyKwh,
            cost=body.cost,
            status=SessionStatus(body.status) if body.status else None,
        )
        if charging_session is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
        LOG.info("Session %s updated by %s", session_id, identity.id)
        return SessionEnvelope(session=_session_to_response(charging_session))


@router.delete("/{session_id}", response_model=MessageResponse)
def delete_session(
    session_id: str,
    identity: Identity = Depends(admin_only),
    db: Session = Depends(get_db),
) -> MessageResponse:
    """Delete a session by id."""
    with store_errors(db, "Failed to delete session"):
        if not repo_delete_session(db, session_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    LOG.info("Session %s deleted by %s", session_id, identity.id)
    return MessageResponse(message="Session deleted successfully")

"""Charging session repository: list, get, create, update, delete."""
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from models.charging_session import ChargingSession, SessionStatus


def list_sessions(session: Session) -> list[ChargingSession]:
    """Return all charging sessions, newest first, with station and user loaded."""
    result = session.execute(
        select(ChargingSession)
        .order_by(ChargingSession.created_at.desc())
        .options(selectinload(ChargingSession.station), selectinload(ChargingSession.user))
    )
    return list(result.scalars().all())


def list_recent_sessions_by_station(session: Session, station_id: str, limit: int = 10) -> list[ChargingSession]:
    """Return the latest sessions at a station, newest first."""
    result = session.execute(
        select(ChargingSession)
        .where(ChargingSession.station_id == station_id)
        .order_by(ChargingSession.created_at.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def get_session(session: Session, session_id: str) -> Optional[ChargingSession]:
    """Return a charging session by id or None."""
    return session.get(ChargingSession, session_id)


def get_session_by_code(session: Session, session_code: str) -> Optional[ChargingSession]:
    """Return a charging session by its human-assigned code or None."""
    return session.execute(
        select(ChargingSession).where(ChargingSession.session_code == session_code)
    ).scalar_one_or_none()


def create_session(
    session: Session,
    *,
    session_code: str,
    station_id: str,
    user_id: str,
    start_time: datetime,
    end_time: datetime | None = None,
    duration: int | None = None,
    energy_kwh: float = 0.0,
    cost: float = 0.0,
    status: SessionStatus = SessionStatus.CHARGING,
) -> ChargingSession:
    """Create a charging session, commit, and return it."""
    charging_session = ChargingSession(
        session_code=session_code,
        station_id=station_id,
        user_id=user_id,
        start_time=start_time,
        end_time=end_time,
        duration=duration,
        energy_kwh=energy_kwh,
        cost=cost,
        status=status,
    )
    session.add(charging_session)
    session.commit()
    session.refresh(charging_session)
    return charging_session


def update_session(
    session: Session,
    session_id: str,
    *,
    end_time: Optional[datetime] = None,
    duration: Optional[int] = None,
    energy_kwh: Optional[float] = None,
    cost: Optional[float] = None,
    status: Optional[SessionStatus] = None,
) -> Optional[ChargingSession]:
    """Update progress fields of a session. Returns updated session or None if not found."""
    charging_session = get_session(session, session_id)
    if charging_session is None:
        return None
    if end_time is not None:
        charging_session.end_time = end_time
    if duration is not None:
        charging_session.duration = duration
    if energy_kwh is not None:
        charging_session.energy_kwh = energy_kwh
    if cost is not None:
        charging_session.cost = cost
    if status is not None:
        charging_session.status = status
    session.commit()
    session.refresh(charging_session)
    return charging_session


def delete_session(session: Session, session_id: str) -> bool:
    """Delete a charging session by id. Returns True if deleted, False if not found."""
    charging_session = get_session(session, session_id)
    if charging_session is None:
        return False
    session.delete(charging_session)
    session.commit()
    return True

"""Pydantic schemas for charging session API."""
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

SessionStatusLiteral = Literal["CHARGING", "COMPLETED", "FAILED"]


class SessionCreate(BaseModel):
    """Payload for starting a session. sessionId, stationId, startTime are checked in the handler."""

    sessionId: str | None = None
    stationId: str | None = None
    startTime: datetime | None = None
    endTime: datetime | None = None
    duration: int | None = Field(default=None, ge=0)
    energyKwh: float | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    status: SessionStatusLiteral | None = None


class SessionUpdate(BaseModel):
    """Payload for progressing a session (all fields optional)."""

    endTime: datetime | None = None
    duration: int | None = Field(default=None, ge=0)
    energyKwh: float | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    status: SessionStatusLiteral | None = None


class SessionStationRef(BaseModel):
    """Station fields embedded in a session."""

    id: str
    name: str
    location: str


class SessionUserRef(BaseModel):
    """User fields embedded in a session."""

    id: str
    name: str | None = None
    email: str


class SessionResponse(BaseModel):
    """Charging session in list/detail responses."""

    id: str
    sessionId: str
    stationId: str
    userId: str
    startTime: datetime
    endTime: datetime | None = None
    duration: int | None = None
    energyKwh: float
    cost: float
    status: SessionStatusLiteral
    createdAt: datetime
    updatedAt: datetime
    station: SessionStationRef
    user: SessionUserRef


class SessionListResponse(BaseModel):
    """Response for GET /sessions."""

    sessions: list[SessionResponse]


class SessionEnvelope(BaseModel):
    """Single session wrapped under "session"."""

    session: SessionResponse

"""Pydantic schemas for station API."""
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

StationStatusLiteral = Literal["ACTIVE", "OFFLINE", "MAINTENANCE"]


class StationFields(BaseModel):
    """Editable station fields, all optional."""

    name: str | None = None
    location: str | None = None
    power: str | None = None
    connectorType: str | None = None
    status: StationStatusLiteral | None = None
    uptime: float | None = Field(default=None, ge=0, le=100)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)

    @field_validator("uptime", "latitude", "longitude", mode="before")
    @classmethod
    def blank_number_to_none(cls, value: Any) -> Any:
        """Form posts send "" for untouched numeric inputs; treat as absent."""
        if isinstance(value, str) and not value.strip():
            return None
        return value


class StationCreate(StationFields):
    """Payload for creating a station. Required text fields are checked in the handler (400, not 422)."""


class StationUpdate(StationFields):
    """Payload for updating a station (only fields present in the body are applied)."""


class StationSessionItem(BaseModel):
    """A session as listed under its station."""

    id: str
    sessionId: str
    userId: str
    startTime: datetime
    endTime: datetime | None = None
    duration: int | None = None
    energyKwh: float
    cost: float
    status: str


class StationResponse(BaseModel):
    """Station in list responses."""

    id: str
    name: str
    location: str
    power: str
    connectorType: str
    status: StationStatusLiteral
    uptime: float
    latitude: float | None = None
    longitude: float | None = None
    createdAt: datetime
    updatedAt: datetime
    sessionCount: int = 0


class StationDetail(StationResponse):
    """Station with its most recent sessions."""

    sessions: list[StationSessionItem] = []


class StationListResponse(BaseModel):
    """Response for GET /stations."""

    stations: list[StationResponse]


class StationEnvelope(BaseModel):
    """Single station wrapped under "station"."""

    station: StationDetail

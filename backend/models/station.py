"""Station model for DB persistence."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models import Base
from utils.timestamps import utc_now


class StationStatus(str, Enum):
    """Operational status of a charging station."""
    ACTIVE = "ACTIVE"
    OFFLINE = "OFFLINE"
    MAINTENANCE = "MAINTENANCE"


class Station(Base):
    """Station table: id, name, location, power, connector_type, status, uptime, coordinates."""

    __tablename__ = "station"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    location: Mapped[str] = mapped_column(String(512), nullable=False)
    # Free-text rating label, e.g. "22 kW".
    power: Mapped[str] = mapped_column(String(64), nullable=False)
    connector_type: Mapped[str] = mapped_column(String(64), nullable=False)
    status: Mapped[StationStatus] = mapped_column(
        SAEnum(StationStatus, name="station_status", native_enum=False, length=16),
        nullable=False,
        default=StationStatus.ACTIVE,
    )
    # Percentage 0..100.
    uptime: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    sessions: Mapped[list["ChargingSession"]] = relationship(
        "ChargingSession",
        back_populates="station",
        cascade="all, delete-orphan",
    )

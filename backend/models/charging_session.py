"""Charging session model for DB persistence."""
import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, ForeignKey, Integer, String
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models import Base
from utils.timestamps import utc_now


class SessionStatus(str, Enum):
    """Lifecycle status of a charging session."""
    CHARGING = "CHARGING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class ChargingSession(Base):
    """Charging session table. session_code is the human-assigned, globally unique sessionId."""

    __tablename__ = "charging_session"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    session_code: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    station_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("station.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("app_user.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Minutes.
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    energy_kwh: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cost: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    status: Mapped[SessionStatus] = mapped_column(
        SAEnum(SessionStatus, name="session_status", native_enum=False, length=16),
        nullable=False,
        default=SessionStatus.CHARGING,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    station: Mapped["Station"] = relationship("Station", back_populates="sessions")
    user: Mapped["User"] = relationship("User")

"""Pydantic schemas for the dashboard aggregate."""
from pydantic import BaseModel


class DashboardStats(BaseModel):
    """All-time totals."""

    totalSessions: int
    activeStations: int
    totalStations: int
    energyDelivered: float
    revenue: float


class StatusBucket(BaseModel):
    """One slice of the station status chart."""

    name: str
    value: int
    color: str


class StationEnergy(BaseModel):
    """Energy delivered by one station."""

    station: str
    kwh: int
    efficiency: float


class DailySessions(BaseModel):
    """Sessions started on one calendar day."""

    day: str
    sessions: int
    energy: int


class ActivityItem(BaseModel):
    """One row of the recent activity feed."""

    id: str
    station: str
    user: str
    time: str
    status: str


class DashboardResponse(BaseModel):
    """Response for GET /dashboard."""

    stats: DashboardStats
    statusData: list[StatusBucket]
    energyByStation: list[StationEnergy]
    sessionData: list[DailySessions]
    recentActivity: list[ActivityItem]

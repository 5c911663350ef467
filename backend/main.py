"""EV Charging Dashboard — FastAPI backend."""
import logging
import os
import subprocess
import sys
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Request logs plus station/session mutations (INFO level)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from api.auth import router as auth_router
from api.dashboard import router as dashboard_router
from api.exports import router as exports_router
from api.routes import router
from api.sessions import router as sessions_router
from api.stations import router as stations_router
from dashboard_core.auth import Role
from dashboard_core.security import hash_password
from db import SessionLocal
from models.charging_session import SessionStatus
from models.station import StationStatus
from repositories.session_repository import create_session as repo_create_session
from repositories.station_repository import count_stations, create_station as repo_create_station
from repositories.user_repository import create_user, get_user_by_email
from utils.config import CORS_ORIGINS, SEED_DEMO_DATA, TESTING
from utils.timestamps import utc_now

LOG = logging.getLogger(__name__)

app = FastAPI(
    title="EV Charging Dashboard",
    description="Stations, charging sessions and dashboard analytics for fleet operators",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Exports first: /stations/export must not be captured by /stations/{station_id}.
app.include_router(router, prefix="/api")
app.include_router(auth_router, prefix="/api")
app.include_router(exports_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")
app.include_router(stations_router, prefix="/api")
app.include_router(sessions_router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed request bodies are client validation errors (400), like missing fields."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


@app.on_event("startup")
def startup() -> None:
    """Run DB migrations and seed demo data."""
    if TESTING:
        # Tests create tables from model metadata.
        return
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    result = subprocess.run(
        [sys.executable, "-m", "alembic", "upgrade", "head"],
        cwd=backend_dir,
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        raise RuntimeError(f"Alembic upgrade failed: {result.stderr or result.stdout}")
    if SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_data_if_empty(db)
        finally:
            db.close()


_DEMO_PASSWORD = "password123"

_DEMO_STATIONS = [
    ("Station A - Sandton City", "Sandton", "22 kW", "Type 2", StationStatus.ACTIVE, -26.1076, 28.0567, 99.2),
    ("Station B - Rosebank Mall", "Rosebank", "7 kW", "Type 2", StationStatus.OFFLINE, -26.1476, 28.0415, 0.0),
    ("Station C - Menlyn Park", "Pretoria", "50 kW", "CCS", StationStatus.ACTIVE, -25.7863, 28.2773, 98.5),
    ("Station D - CBD Center", "Johannesburg CBD", "22 kW", "Type 2", StationStatus.ACTIVE, -26.2041, 28.0473, 97.8),
    ("Station E - Midrand Plaza", "Midrand", "50 kW", "CCS", StationStatus.MAINTENANCE, -25.9953, 28.1289, 0.0),
    ("Station F - Centurion Mall", "Centurion", "7 kW", "Type 2", StationStatus.ACTIVE, -25.8601, 28.1894, 96.3),
]

# (code, station index, user: 0 admin / 1 user, hours ago, duration min or None, kWh, cost, status)
_DEMO_SESSIONS = [
    ("S-001", 0, 0, 3, 40, 12.0, 84.0, SessionStatus.COMPLETED),
    ("S-002", 0, 1, 1, None, 4.0, 28.0, SessionStatus.CHARGING),
    ("S-003", 2, 0, 5, 30, 7.0, 49.0, SessionStatus.COMPLETED),
    ("S-004", 0, 1, 6, 50, 15.0, 105.0, SessionStatus.COMPLETED),
    ("S-005", 3, 0, 4, 5, 0.0, 0.0, SessionStatus.FAILED),
    ("S-006", 2, 1, 28, 75, 22.0, 154.0, SessionStatus.COMPLETED),
    ("S-007", 5, 0, 22, 70, 18.0, 126.0, SessionStatus.COMPLETED),
]


def seed_demo_data_if_empty(db: Session) -> bool:
    """Seed demo users, stations and sessions so a fresh install has something to show.

    Returns False without writing when any station already exists.
    """
    if count_stations(db) > 0:
        return False
    users = []
    for email, name, role in (
        ("admin@evdashboard.com", "Admin", Role.ADMIN),
        ("user@evdashboard.com", "Regular User", Role.USER),
    ):
        user = get_user_by_email(db, email)
        if user is None:
            user = create_user(db, email=email, password_hash=hash_password(_DEMO_PASSWORD), name=name, role=role)
        users.append(user)
    stations = [
        repo_create_station(
            db,
            name=name,
            location=location,
            power=power,
            connector_type=connector,
            status=station_status,
            latitude=lat,
            longitude=lon,
            uptime=uptime,
        )
        for name, location, power, connector, station_status, lat, lon, uptime in _DEMO_STATIONS
    ]
    now = utc_now()
    for code, station_idx, user_idx, hours_ago, duration, kwh, cost, session_status in _DEMO_SESSIONS:
        start = now - timedelta(hours=hours_ago)
        repo_create_session(
            db,
            session_code=code,
            station_id=stations[station_idx].id,
            user_id=users[user_idx].id,
            start_time=start,
            end_time=start + timedelta(minutes=duration) if duration is not None else None,
            duration=duration,
            energy_kwh=kwh,
            cost=cost,
            status=session_status,
        )
    LOG.info("Seeded %d demo stations and %d sessions", len(stations), len(_DEMO_SESSIONS))
    return True


@app.get("/")
def root() -> dict:
    """Root redirect/info."""
    return {"service": "ev-dashboard", "docs": "/docs", "health": "/api/health"}

# Set test environment before any application or db imports.
import os

os.environ["TESTING"] = "true"
os.environ["TESTING_DATABASE_URL"] = "sqlite:///:memory:"

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import event
from sqlalchemy.orm import Session

from api.deps import get_now
from dashboard_core.auth import Role
from dashboard_core.security import hash_password, make_access_token
from db import SessionLocal, get_db
from main import app
from models import Base
from models.charging_session import ChargingSession  # noqa: F401 - register with Base
from models.station import Station  # noqa: F401
from models.user import User  # noqa: F401
from repositories.session_repository import create_session
from repositories.station_repository import create_station
from repositories.user_repository import create_user

TEST_PASSWORD = "password123"

# Monday; sessions in API tests are placed relative to this instant.
FROZEN_NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)


def _get_engine():
    """Engine used by the app (in-memory when TESTING=true)."""
    return SessionLocal.kw["bind"]


# pysqlite emits BEGIN lazily and ignores SAVEPOINT semantics; take over
# transaction control so commits inside a test only release a savepoint.
@event.listens_for(_get_engine(), "connect")
def _sqlite_manual_transactions(dbapi_conn, connection_record):
    dbapi_conn.isolation_level = None


@event.listens_for(_get_engine(), "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


@pytest.fixture(scope="session")
def engine():
    """One in-memory engine per test run; create tables once."""
    eng = _get_engine()
    Base.metadata.create_all(eng)
    return eng


@pytest.fixture(scope="session")
def password_hash():
    """bcrypt is slow on purpose; hash the shared test password once."""
    return hash_password(TEST_PASSWORD)


@pytest.fixture
def db_session(engine):
    """Function-scoped session; each test runs in a transaction that is rolled back.

    Repository commits and rollbacks only touch a savepoint inside that transaction.
    """
    connection = engine.connect()
    trans = connection.begin()
    session = Session(bind=connection, join_transaction_mode="create_savepoint")
    try:
        yield session
    finally:
        session.close()
        if trans.is_active:
            trans.rollback()
        connection.close()


def _override_get_db(session):
    """Return a generator that yields the given session (for dependency override)."""
    def override():
        yield session
    return override


@pytest.fixture
def client(db_session):
    """API test client; overrides get_db to use the test db_session, cleared on teardown."""
    app.dependency_overrides[get_db] = _override_get_db(db_session)
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def frozen_now(client):
    """Pin the clock used by the dashboard to FROZEN_NOW."""
    app.dependency_overrides[get_now] = lambda: FROZEN_NOW
    return FROZEN_NOW


@pytest.fixture
def admin_user(db_session, password_hash):
    return create_user(
        db_session,
        email="admin@evdashboard.com",
        password_hash=password_hash,
        name="Admin",
        role=Role.ADMIN,
    )


@pytest.fixture
def regular_user(db_session, password_hash):
    return create_user(
        db_session,
        email="driver@evdashboard.com",
        password_hash=password_hash,
        name="Driver",
        role=Role.USER,
    )


@pytest.fixture
def admin_headers(admin_user):
    """Authorization header carrying an ADMIN token."""
    return {"Authorization": f"Bearer {make_access_token(admin_user.id, admin_user.role.value)}"}


@pytest.fixture
def user_headers(regular_user):
    """Authorization header carrying a USER token."""
    return {"Authorization": f"Bearer {make_access_token(regular_user.id, regular_user.role.value)}"}


@pytest.fixture
def make_station(db_session):
    """Factory: create a station with sensible defaults."""
    def _make(name="Station A", **kwargs):
        fields = dict(location="Sandton", power="22 kW", connector_type="Type 2")
        fields.update(kwargs)
        return create_station(db_session, name=name, **fields)
    return _make


@pytest.fixture
def make_session(db_session, admin_user):
    """Factory: create a charging session owned by admin_user unless user_id is given."""
    def _make(station, session_code, **kwargs):
        fields = dict(user_id=admin_user.id, start_time=FROZEN_NOW)
        fields.update(kwargs)
        return create_session(db_session, session_code=session_code, station_id=station.id, **fields)
    return _make

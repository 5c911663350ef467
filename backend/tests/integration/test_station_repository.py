"""Integration tests: station repository with test DB session."""
from datetime import datetime, timezone

import pytest

from models.station import StationStatus
from repositories.session_repository import get_session
from repositories.station_repository import (
    count_sessions_by_station,
    count_stations,
    create_station,
    delete_station,
    get_station,
    list_stations,
    session_counts_by_station,
    update_station,
)

pytestmark = pytest.mark.integration


def test_create_and_list_stations(db_session):
    """Create stations and list them newest first."""
    create_station(db_session, name="Site A", location="Sandton", power="22 kW", connector_type="Type 2")
    create_station(db_session, name="Site B", location="Pretoria", power="50 kW", connector_type="CCS")
    names = [s.name for s in list_stations(db_session)]
    assert sorted(names) == ["Site A", "Site B"]
    assert count_stations(db_session) == 2


def test_list_stations_order(db_session):
    old = create_station(db_session, name="Old", location="L", power="7 kW", connector_type="Type 2")
    new = create_station(db_session, name="New", location="L", power="7 kW", connector_type="Type 2")
    old.created_at = datetime(2026, 1, 1, tzinfo=timezone.utc)
    new.created_at = datetime(2026, 2, 1, tzinfo=timezone.utc)
    db_session.commit()
    assert [s.name for s in list_stations(db_session)] == ["New", "Old"]
    assert [s.name for s in list_stations(db_session, oldest_first=True)] == ["Old", "New"]


def test_create_station_defaults(db_session):
    station = create_station(db_session, name="Defaults", location="L", power="7 kW", connector_type="Type 2")
    assert station.status == StationStatus.ACTIVE
    assert station.uptime == 0.0
    assert station.latitude is None
    assert station.created_at is not None


def test_update_station_fields(db_session):
    create_station(db_session, name="Old", location="L", power="7 kW", connector_type="Type 2", station_id="st-upd")
    updated = update_station(db_session, "st-upd", name="New", status=StationStatus.MAINTENANCE, uptime=50.5)
    assert updated.name == "New"
    assert updated.status == StationStatus.MAINTENANCE
    assert updated.uptime == 50.5
    assert update_station(db_session, "st-missing", name="x") is None


def test_update_station_rejects_unknown_fields(db_session):
    create_station(db_session, name="S", location="L", power="7 kW", connector_type="Type 2", station_id="st-bad")
    with pytest.raises(ValueError):
        update_station(db_session, "st-bad", id="other")


def test_delete_station_cascades_sessions(db_session, make_station, make_session):
    """Deleting a station removes its sessions and leaves others alone."""
    doomed = make_station("Doomed")
    kept = make_station("Kept")
    s1 = make_session(doomed, "CASCADE-1")
    s2 = make_session(doomed, "CASCADE-2")
    s3 = make_session(kept, "CASCADE-3")
    ids = (s1.id, s2.id, s3.id)
    assert delete_station(db_session, doomed.id) is True
    db_session.expire_all()
    assert get_station(db_session, doomed.id) is None
    assert get_session(db_session, ids[0]) is None
    assert get_session(db_session, ids[1]) is None
    assert get_session(db_session, ids[2]) is not None
    assert delete_station(db_session, doomed.id) is False


def test_session_counts(db_session, make_station, make_session):
    a = make_station("A")
    b = make_station("B")
    make_station("C")
    make_session(a, "CNT-1")
    make_session(a, "CNT-2")
    make_session(b, "CNT-3")
    counts = session_counts_by_station(db_session)
    assert counts[a.id] == 2
    assert counts[b.id] == 1
    assert count_sessions_by_station(db_session, a.id) == 2

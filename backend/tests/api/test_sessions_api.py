"""API tests: charging session endpoints using test DB."""
import pytest

from repositories.session_repository import get_session_by_code, list_sessions

pytestmark = pytest.mark.api


def _body(station_id, session_id="S-API-1", **extra):
    body = {"sessionId": session_id, "stationId": station_id, "startTime": "2026-10-19T11:00:00Z"}
    body.update(extra)
    return body


def test_create_session_success(client, admin_headers, admin_user, make_station):
    """POST /api/sessions starts a CHARGING session owned by the caller."""
    station = make_station("Sandton")
    r = client.post("/api/sessions", json=_body(station.id), headers=admin_headers)
    assert r.status_code == 201
    session = r.json()["session"]
    assert session["sessionId"] == "S-API-1"
    assert session["status"] == "CHARGING"
    assert session["energyKwh"] == 0
    assert session["cost"] == 0
    assert session["endTime"] is None
    assert session["userId"] == admin_user.id
    assert session["station"] == {"id": station.id, "name": "Sandton", "location": "Sandton"}
    assert session["user"]["email"] == admin_user.email
    assert session["startTime"].startswith("2026-10-19T11:00:00")


def test_create_session_with_progress_fields(client, admin_headers, make_station):
    station = make_station()
    r = client.post(
        "/api/sessions",
        json=_body(
            station.id,
            endTime="2026-10-19T11:40:00Z",
            duration=40,
            energyKwh="12.5",
            cost=84,
            status="COMPLETED",
        ),
        headers=admin_headers,
    )
    assert r.status_code == 201
    session = r.json()["session"]
    assert session["energyKwh"] == 12.5
    assert session["cost"] == 84
    assert session["duration"] == 40
    assert session["status"] == "COMPLETED"


@pytest.mark.parametrize("missing", ["sessionId", "stationId", "startTime"])
def test_create_session_missing_fields_400(client, admin_headers, make_station, missing):
    station = make_station()
    body = {k: v for k, v in _body(station.id).items() if k != missing}
    r = client.post("/api/sessions", json=body, headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Missing required fields"


def test_create_session_unknown_station_404(client, admin_headers, db_session):
    """A session for a station that does not exist is rejected and nothing is stored."""
    r = client.post("/api/sessions", json=_body("no-such-station", "S-ORPHAN"), headers=admin_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Station not found"
    assert get_session_by_code(db_session, "S-ORPHAN") is None


def test_create_session_duplicate_code_400(client, admin_headers, db_session, make_station, make_session):
    station = make_station()
    make_session(station, "S-DUP")
    r = client.post("/api/sessions", json=_body(station.id, "S-DUP"), headers=admin_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Session ID already exists"
    assert [s.session_code for s in list_sessions(db_session)].count("S-DUP") == 1


@pytest.mark.parametrize("patch", [{"energyKwh": -1}, {"cost": -0.5}, {"status": "PAUSED"}])
def test_create_session_invalid_values_400(client, admin_headers, make_station, patch):
    station = make_station()
    r = client.post("/api/sessions", json=_body(station.id, **patch), headers=admin_headers)
    assert r.status_code == 400


def test_list_sessions(client, user_headers, make_station, make_session):
    station = make_station("Listed")
    make_session(station, "S-L1")
    make_session(station, "S-L2")
    r = client.get("/api/sessions", headers=user_headers)
    assert r.status_code == 200
    sessions = r.json()["sessions"]
    codes = [s["sessionId"] for s in sessions]
    assert "S-L1" in codes and "S-L2" in codes
    assert all(s["station"]["name"] == "Listed" for s in sessions)


def test_get_session_and_404(client, user_headers, make_station, make_session):
    station = make_station()
    s = make_session(station, "S-GET")
    r = client.get(f"/api/sessions/{s.id}", headers=user_headers)
    assert r.status_code == 200
    assert r.json()["session"]["sessionId"] == "S-GET"
    assert client.get("/api/sessions/unknown", headers=user_headers).status_code == 404


def test_update_session_completes(client, admin_headers, make_station, make_session):
    station = make_station()
    s = make_session(station, "S-UPD")
    r = client.put(
        f"/api/sessions/{s.id}",
        json={"endTime": "2026-10-19T12:45:00Z", "duration": 45, "energyKwh": 15, "cost": 105, "status": "COMPLETED"},
        headers=admin_headers,
    )
    assert r.status_code == 200
    data = r.json()["session"]
    assert data["status"] == "COMPLETED"
    assert data["duration"] == 45
    assert data["energyKwh"] == 15
    assert data["endTime"].startswith("2026-10-19T12:45:00")


def test_update_session_404(client, admin_headers):
    r = client.put("/api/sessions/unknown", json={"status": "FAILED"}, headers=admin_headers)
    assert r.status_code == 404


def test_delete_session(client, admin_headers, make_station, make_session):
    station = make_station()
    s = make_session(station, "S-DEL")
    r = client.delete(f"/api/sessions/{s.id}", headers=admin_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Session deleted successfully"}
    assert client.delete(f"/api/sessions/{s.id}", headers=admin_headers).status_code == 404


def test_user_cannot_create_session(client, user_headers, db_session, make_station):
    station = make_station()
    r = client.post("/api/sessions", json=_body(station.id, "S-FORBIDDEN"), headers=user_headers)
    assert r.status_code == 403
    assert get_session_by_code(db_session, "S-FORBIDDEN") is None

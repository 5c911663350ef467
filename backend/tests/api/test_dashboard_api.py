"""API tests: dashboard aggregate endpoint with a pinned clock."""
from datetime import timedelta

import pytest

from models.station import StationStatus

pytestmark = pytest.mark.api


def test_dashboard_empty_store(client, user_headers, frozen_now):
    """No stations or sessions: zeros everywhere and seven empty days."""
    r = client.get("/api/dashboard", headers=user_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["stats"]["totalSessions"] == 0
    assert data["stats"]["totalStations"] == 0
    assert sum(b["value"] for b in data["statusData"]) == 0
    assert data["energyByStation"] == []
    assert len(data["sessionData"]) == 7
    assert all(d == {"day": d["day"], "sessions": 0, "energy": 0} for d in data["sessionData"])
    assert data["recentActivity"] == []


def test_dashboard_aggregates(client, user_headers, frozen_now, db_session, make_station, make_session, regular_user):
    now = frozen_now
    sandton = make_station("Sandton", uptime=99.2)
    make_station("Rosebank", status=StationStatus.OFFLINE, uptime=0.0)
    menlyn = make_station("Menlyn", status=StationStatus.MAINTENANCE, uptime=98.5)
    sessions = [
        make_session(sandton, "D-1", start_time=now - timedelta(seconds=45), energy_kwh=12.0, cost=84.0),
        make_session(menlyn, "D-2", start_time=now - timedelta(minutes=90), energy_kwh=22.4, cost=154.0),
        make_session(sandton, "D-3", start_time=now - timedelta(hours=25), energy_kwh=15.0, cost=105.0,
                     user_id=regular_user.id),
    ]
    # Pin creation order: D-1 newest.
    for offset, s in enumerate(sessions):
        s.created_at = now - timedelta(minutes=offset)
    db_session.commit()

    r = client.get("/api/dashboard", headers=user_headers)
    assert r.status_code == 200
    data = r.json()

    assert data["stats"] == {
        "totalSessions": 3,
        "activeStations": 1,
        "totalStations": 3,
        "energyDelivered": pytest.approx(49.4),
        "revenue": pytest.approx(343.0),
    }
    assert [b["value"] for b in data["statusData"]] == [1, 1, 1]
    assert data["energyByStation"] == [
        {"station": "Sandton", "kwh": 27, "efficiency": 99.2},
        {"station": "Menlyn", "kwh": 22, "efficiency": 98.5},
        {"station": "Rosebank", "kwh": 0, "efficiency": 0.0},
    ]
    today, yesterday = data["sessionData"][-1], data["sessionData"][-2]
    assert today == {"day": "Mon", "sessions": 2, "energy": 34}
    assert yesterday == {"day": "Sun", "sessions": 1, "energy": 15}

    feed = data["recentActivity"]
    assert [item["time"] for item in feed] == ["Just now", "1 hour ago", "1 day ago"]
    assert feed[0]["station"] == "Sandton"
    assert feed[0]["status"] == "charging"
    assert feed[2]["user"] == f"User #{regular_user.id[-4:]}"


def test_dashboard_energy_ties_keep_insertion_order(client, user_headers, frozen_now, db_session, make_station):
    stations = [make_station(name) for name in ("Oldest", "Middle", "Newest")]
    for offset, station in enumerate(stations):
        station.created_at = frozen_now - timedelta(days=3 - offset)
    db_session.commit()

    r = client.get("/api/dashboard", headers=user_headers)
    assert r.status_code == 200
    assert [row["station"] for row in r.json()["energyByStation"]] == ["Oldest", "Middle", "Newest"]


def test_dashboard_requires_identity(client):
    r = client.get("/api/dashboard")
    assert r.status_code == 401


def test_dashboard_store_failure_500(client, user_headers, monkeypatch):
    def boom(_db):
        raise RuntimeError("boom")

    monkeypatch.setattr("api.dashboard.list_stations", boom)
    r = client.get("/api/dashboard", headers=user_headers)
    assert r.status_code == 500
    assert r.json() == {"detail": "Failed to fetch dashboard data"}

import json
from pathlib import Path

from fastapi.testclient import TestClient

from cwl_app.core.config import Settings


def _register(client: TestClient, name: str, th_level: str = "th12"):
    return client.post("/api/player-registrations", json={"player_name": name, "th_level": th_level})


def test_health(client: TestClient):
    assert client.get("/health").json() == {"status": "ok"}


def test_register_and_list(client: TestClient, settings: Settings):
    resp = _register(client, "  Ann  ", "th12")
    assert resp.status_code == 200
    created = resp.json()
    assert created["player_name"] == "Ann"
    assert created["th_level"] == "th12"
    assert created["id"]

    _register(client, "Bo", "th10")
    listed = client.get("/api/player-registrations").json()
    assert [r["player_name"] for r in listed] == ["Ann", "Bo"]

    mirror = Path(settings.data_dir) / settings.registrations_file
    assert mirror.read_text(encoding="utf-8") == "Ann th12\nBo th10\n"


def test_duplicate_names_are_accepted(client: TestClient):
    assert _register(client, "Ann").status_code == 200
    assert _register(client, "Ann").status_code == 200
    assert len(client.get("/api/player-registrations").json()) == 2


def test_register_rejects_invalid_payload(client: TestClient):
    assert _register(client, "   ").status_code == 422
    assert _register(client, "Ann", "th99").status_code == 422
    assert client.post("/api/player-registrations", json={"player_name": "Ann"}).status_code == 422


def test_delete_registration_rewrites_mirror(client: TestClient, settings: Settings, admin_headers):
    ann = _register(client, "Ann", "th12").json()
    _register(client, "Bo", "th10")

    resp = client.delete(f"/api/player-registrations/{ann['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert [r["player_name"] for r in client.get("/api/player-registrations").json()] == ["Bo"]

    mirror = Path(settings.data_dir) / settings.registrations_file
    assert mirror.read_text(encoding="utf-8") == "Bo th10\n"

    missing = client.delete(f"/api/player-registrations/{ann['id']}", headers=admin_headers)
    assert missing.status_code == 404


def test_clear_registrations(client: TestClient, settings: Settings, admin_headers):
    _register(client, "Ann")
    _register(client, "Bo")

    assert client.delete("/api/player-registrations").status_code == 401
    resp = client.delete("/api/player-registrations", headers=admin_headers)
    assert resp.status_code == 200
    assert client.get("/api/player-registrations").json() == []

    mirror = Path(settings.data_dir) / settings.registrations_file
    assert mirror.read_text(encoding="utf-8") == ""


def test_registrations_file_status(client: TestClient):
    empty = client.get("/api/registrations-file").json()
    assert empty["is_empty"] is True
    assert empty["count"] == 0
    assert empty["storage"] == "SQLite Database"

    _register(client, "Ann")
    status = client.get("/api/registrations-file").json()
    assert status["count"] == 1
    assert json.loads(status["content"])[0]["player_name"] == "Ann"


def test_login(client: TestClient, admin_headers):
    ok = client.post("/api/login", json={"password": admin_headers["X-Admin-Password"]})
    assert ok.status_code == 200
    assert ok.json() == {"authenticated": True}

    assert client.post("/api/login", json={"password": "nope"}).status_code == 401


def test_clans_and_leagues(client: TestClient, admin_headers):
    leagues = client.get("/api/leagues").json()
    assert "Gold League" in leagues
    assert "Legend League" in leagues

    payload = {"name": "Eclipse", "participants": 15, "league": "Gold League"}
    assert client.post("/api/clans", json=payload).status_code == 401

    resp = client.post("/api/clans", json=payload, headers=admin_headers)
    assert resp.status_code == 200
    assert client.get("/api/clans").json()[0]["name"] == "Eclipse"

    bad = client.post(
        "/api/clans",
        json={"name": "Eclipse", "participants": 0, "league": "Gold League"},
        headers=admin_headers,
    )
    assert bad.status_code == 422
    bad_league = client.post(
        "/api/clans",
        json={"name": "Eclipse", "participants": 10, "league": "Wood League"},
        headers=admin_headers,
    )
    assert bad_league.status_code == 422


def test_clan_configuration_defaults_and_update(client: TestClient, settings: Settings, admin_headers):
    config = client.get("/api/clan-configuration").json()
    assert config["clan_name"] == "Eclipse Clan"
    assert (Path(settings.data_dir) / settings.clan_config_file).exists()

    config["clan_name"] = "Nova"
    config["win_rate"] = 90
    resp = client.post("/api/clan-configuration", json=config, headers=admin_headers)
    assert resp.status_code == 200
    assert client.get("/api/clan-configuration").json()["clan_name"] == "Nova"

    config["max_members"] = 80
    assert client.post("/api/clan-configuration", json=config, headers=admin_headers).status_code == 422


def test_large_clans_are_accepted(client: TestClient, admin_headers):
    payload = {"name": "Eclipse", "participants": 60, "league": "Gold League"}
    assert client.post("/api/clans", json=payload, headers=admin_headers).status_code == 200

    client.post("/api/player-registrations", json={"player_name": "Ann", "th_level": "th12"})
    resp = client.post("/api/roster-sessions", json={"clans": [payload]}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["clans"][0]["missing"] == 59

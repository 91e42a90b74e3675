"""Tests for the HTTP endpoints."""

import random

import pytest
from fastapi.testclient import TestClient

from engine.storage import Storage
from models.catalog import WeaponType
from models.characters import InventoryKind


@pytest.fixture
def app():
    """The app with an empty in-memory store and a seeded Random."""
    from main import app
    old_storage = app.state.storage
    app.state.storage = Storage()
    app.state.rng = random.Random(3)
    yield app
    app.state.storage = old_storage
    del app.state.rng


@pytest.fixture
def client(app):
    return TestClient(app)


def _create(client, name: str = "Gruk", points=(10, 0, 0)) -> dict:
    strength, dexterity, constitution = points
    resp = client.post("/characters", json={
        "name": name,
        "strength": strength,
        "dexterity": dexterity,
        "constitution": constitution,
    })
    assert resp.status_code == 201
    return resp.json()


def _headers(credentials: dict) -> dict:
    return {
        "X-Character-Id": credentials["id"],
        "Authorization": f"Bearer {credentials['secret']}",
    }


class TestRoot:
    """Tests for / and /health."""

    def test_root(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.json()["name"] == "Deepdelve Server"

    def test_health(self, client):
        assert client.get("/health").json() == {"healthy": True}


class TestCharacters:
    """Tests for /characters."""

    def test_create_and_read_sheet(self, client):
        credentials = _create(client)
        resp = client.get("/characters/me", headers=_headers(credentials))
        assert resp.status_code == 200
        sheet = resp.json()
        assert sheet["name"] == "Gruk"
        assert "secret" not in sheet
        assert sheet["ability_scores"]["strength"] == 18
        assert sheet["level"] == 0
        assert sheet["can_level_up"] is False
        assert sheet["gold"] == 100

    def test_bad_point_buy(self, client):
        resp = client.post("/characters", json={"name": "Gruk", "strength": 11})
        assert resp.status_code == 400
        assert resp.json()["error"] == "AbilitySumError"

    def test_missing_headers(self, client):
        assert client.get("/characters/me").status_code == 401
        resp = client.get("/characters/me", headers={"X-Character-Id": "someone"})
        assert resp.status_code == 401

    def test_wrong_secret(self, client):
        credentials = _create(client)
        resp = client.get("/characters/me", headers=_headers({**credentials, "secret": "nope"}))
        assert resp.status_code == 401
        assert resp.json()["error"] == "Unauthorized"

    def test_unknown_character(self, client):
        resp = client.get("/characters/me", headers=_headers({"id": "nobody", "secret": "x"}))
        assert resp.status_code == 404
        assert resp.json()["error"] == "CharacterNotFound"

    def test_equip(self, app, client):
        credentials = _create(client)
        app.state.storage.add_inventory_item(credentials["id"], InventoryKind.WEAPON, WeaponType.GREATAXE)
        resp = client.post(
            "/characters/me/equip",
            json={"slot": "main_hand", "name": "Greataxe"},
            headers=_headers(credentials),
        )
        assert resp.status_code == 200
        assert resp.json()["equipped_weapon"] == WeaponType.GREATAXE.value

    def test_equip_unknown_weapon(self, client):
        credentials = _create(client)
        resp = client.post(
            "/characters/me/equip",
            json={"slot": "main_hand", "name": "spork"},
            headers=_headers(credentials),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "UnknownWeapon"
        assert "dagger" in resp.json()["detail"]

    def test_only_jewelry_unequips(self, client):
        credentials = _create(client)
        resp = client.post(
            "/characters/me/equip",
            json={"slot": "armor", "name": "leather", "unequip": True},
            headers=_headers(credentials),
        )
        assert resp.status_code == 400

    def test_rest(self, app, client):
        credentials = _create(client)
        app.state.storage.set_health(credentials["id"], 1)
        resp = client.post("/characters/me/rest", json={"kind": "short"}, headers=_headers(credentials))
        assert resp.status_code == 200
        assert resp.json()["short_rests_available"] == 1

        resp = client.post("/characters/me/rest", json={"kind": "long"}, headers=_headers(credentials))
        assert resp.json()["current_health"] == resp.json()["max_health"]
        assert resp.json()["short_rests_available"] == 2

    def test_level_up_needs_experience(self, client):
        credentials = _create(client)
        resp = client.post(
            "/characters/me/level-up",
            json={"ability": "strength"},
            headers=_headers(credentials),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "InsufficientExperience"

    def test_level_up(self, app, client):
        credentials = _create(client)
        app.state.storage.set_experience(credentials["id"], 100)
        resp = client.post(
            "/characters/me/level-up",
            json={"ability": "Constitution", "class_name": "fighter"},
            headers=_headers(credentials),
        )
        assert resp.status_code == 200
        assert resp.json()["level"] == 1


class TestEncounter:
    """Tests for /encounter."""

    def _start(self, app, client, monsters=("test monster",)) -> dict:
        credentials = _create(client)
        app.state.storage.set_health(credentials["id"], 100)
        resp = client.post(
            "/encounter", json={"monsters": list(monsters)}, headers=_headers(credentials),
        )
        assert resp.status_code == 201
        assert resp.json()["status"] == "fighting"
        return credentials

    def test_full_fight(self, app, client):
        credentials = self._start(app, client)

        view = client.get("/encounter", headers=_headers(credentials)).json()
        assert view["your_turn"] is True
        assert view["character"]["secret"] == ""
        (enemy,) = view["enemies"]
        assert enemy["name"] == "Test monster"

        resp = client.post(
            "/encounter/turn",
            json={"action": {"kind": "attack", "target_id": enemy["id"]}},
            headers=_headers(credentials),
        )
        assert resp.status_code == 200
        assert resp.json()["events"][0]["kind"] == "turn_started"

        if resp.json()["status"] == "fighting":
            resp = client.post("/encounter/auto", json={}, headers=_headers(credentials))
            assert resp.status_code == 200
        assert resp.json()["status"] == "questing"

    def test_not_fighting(self, client):
        credentials = _create(client)
        resp = client.get("/encounter", headers=_headers(credentials))
        assert resp.status_code == 409
        assert resp.json()["error"] == "NotFighting"

    def test_already_fighting(self, app, client):
        credentials = self._start(app, client)
        resp = client.post("/encounter", json={"monsters": ["wolf"]}, headers=_headers(credentials))
        assert resp.status_code == 409
        assert resp.json()["error"] == "AlreadyFighting"

    def test_unknown_monster(self, client):
        credentials = _create(client)
        resp = client.post("/encounter", json={"monsters": ["dragon"]}, headers=_headers(credentials))
        assert resp.status_code == 400
        assert resp.json()["error"] == "UnknownMonster"

    def test_no_monsters(self, client):
        credentials = _create(client)
        resp = client.post("/encounter", json={"monsters": []}, headers=_headers(credentials))
        assert resp.status_code == 422

    def test_unknown_action(self, app, client):
        credentials = self._start(app, client)
        resp = client.post(
            "/encounter/turn",
            json={"action": {"kind": "dance"}},
            headers=_headers(credentials),
        )
        assert resp.status_code == 400
        assert resp.json()["error"] == "UnknownAction"

    def test_scripts_disabled(self, app, client):
        credentials = self._start(app, client)
        resp = client.post(
            "/encounter/auto", json={"script": "random:choice"}, headers=_headers(credentials),
        )
        assert resp.status_code == 403

"""Mini README: Tests for the FastAPI drone API.

Exercises every route through ``TestClient``: the response envelope, status
codes for each error family, image stripping on the cargo route and the
demo fleet preload.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from dronedispatch.configuration import DispatchSettings
from dronedispatch.fleet import FleetRegistry
from dronedispatch.interface import create_application


@pytest.fixture()
def client() -> TestClient:
    settings = DispatchSettings(preload_demo_fleet=False)
    return TestClient(create_application(settings=settings, registry=FleetRegistry()))


def _register(client: TestClient, serial: str = "A1", **overrides: object):
    payload = {
        "serial_number": serial,
        "model": "Lightweight",
        "weight_limit": 100,
        "battery_capacity": 100,
        "state": "IDLE",
    }
    payload.update(overrides)
    return client.post("/drone/register", json=payload)


def test_register_drone(client: TestClient) -> None:
    response = _register(client)
    assert response.status_code == 200
    assert response.json() == {"ok": True, "details": "new drone with serial number A1 added"}


def test_register_duplicate_is_rejected(client: TestClient) -> None:
    _register(client)
    response = _register(client)
    assert response.status_code == 400
    body = response.json()
    assert body["ok"] is False
    assert "already exists" in body["details"]
    assert "drones" not in body


def test_register_invalid_model(client: TestClient) -> None:
    response = _register(client, model="Paperweight")
    assert response.status_code == 400
    assert "not a valid model" in response.json()["details"]


def test_register_malformed_json(client: TestClient) -> None:
    response = client.post(
        "/drone/register",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"ok": False, "details": "could not decode drone json object"}


def test_load_and_read_cargo(client: TestClient) -> None:
    _register(client)
    response = client.post(
        "/drone/load",
        json={
            "serial_number": "A1",
            "medications": [
                {"name": "Medication-A", "code": "MED_A", "weight": 30, "image": "aW1hZ2U="},
                {"name": "Medication-B", "code": "MED_B", "weight": 20},
            ],
        },
    )
    assert response.status_code == 200
    assert response.json()["ok"] is True

    cargo = client.get("/drone/medications", params={"serial_number": "A1"}).json()
    assert cargo["drones"] == [
        {
            "serial_number": "A1",
            "medications": [
                {"name": "Medication-A", "weight": 30, "code": "MED_A"},
                {"name": "Medication-B", "weight": 20, "code": "MED_B"},
            ],
        }
    ]

    with_images = client.get(
        "/drone/medications", params={"serial_number": "A1", "include_images": "true"}
    ).json()
    assert with_images["drones"][0]["medications"][0]["image"] == "aW1hZ2U="

    everything = client.get("/drone/all").json()["drones"]
    assert everything[0]["medications"][0]["image"] == "aW1hZ2U="
    assert everything[0]["state"] == "LOADED"


def test_load_over_capacity(client: TestClient) -> None:
    _register(client)
    response = client.post(
        "/drone/load",
        json={
            "serial_number": "A1",
            "medications": [
                {"name": "M1", "code": "M1", "weight": 60},
                {"name": "M2", "code": "M2", "weight": 60},
            ],
        },
    )
    assert response.status_code == 400
    assert "successfully loaded medications: 1 of 2" in response.json()["details"]


def test_load_unknown_drone(client: TestClient) -> None:
    response = client.post("/drone/load", json={"serial_number": "ghost", "medications": []})
    assert response.status_code == 404


def test_cargo_errors(client: TestClient) -> None:
    assert client.get("/drone/medications").status_code == 400
    assert client.get("/drone/medications", params={"serial_number": "ghost"}).status_code == 404
    _register(client)
    response = client.get("/drone/medications", params={"serial_number": "A1"})
    assert response.status_code == 404
    assert "has not loaded medications" in response.json()["details"]


def test_battery_route(client: TestClient) -> None:
    _register(client, battery_capacity=55)
    response = client.get("/drone/battery", params={"serial_number": "A1"})
    assert response.status_code == 200
    assert response.json()["drones"] == [{"serial_number": "A1", "battery_capacity": 55}]
    missing = client.get("/drone/battery")
    assert missing.status_code == 400
    assert missing.json()["details"] == "request lacks of parameter 'serial_number'"


def test_available_drones_route(client: TestClient) -> None:
    assert client.get("/drone/all/availables").status_code == 404
    _register(client, "ready")
    _register(client, "low", battery_capacity=20)
    body = client.get("/drone/all/availables").json()
    assert body["drones"] == [{"serial_number": "ready"}]


def test_demo_fleet_is_preloaded() -> None:
    app = create_application(settings=DispatchSettings(preload_demo_fleet=True))
    client = TestClient(app)
    drones = client.get("/drone/all").json()["drones"]
    assert len(drones) == 5
    assert all(len(drone["serial_number"]) == 50 for drone in drones)
    assert len(client.get("/drone/all/availables").json()["drones"]) == 2


def test_lifespan_runs_battery_monitor() -> None:
    app = create_application(
        settings=DispatchSettings(preload_demo_fleet=False), registry=FleetRegistry()
    )
    with TestClient(app):
        assert app.state.battery_monitor.running
    assert not app.state.battery_monitor.running

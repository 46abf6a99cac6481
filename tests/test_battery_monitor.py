"""Mini README: Tests for the periodic battery report and the demo fleet.

The monitor must log a snapshot of every drone, survive serialisation
failures and stop promptly. The demo fleet must respect every weight limit.
"""

from __future__ import annotations

import base64
import json
import logging
import random
import time
from pathlib import Path

import pytest

from dronedispatch.fleet import DroneState, FleetRegistry, new_drone
from dronedispatch.fleet.demo import build_demo_fleet, load_sample_image
from dronedispatch.reporting import BatteryMonitor


def _registry() -> FleetRegistry:
    return FleetRegistry(
        [
            new_drone("one", "Lightweight", 100, 80, "IDLE"),
            new_drone("two", "Heavyweight", 500, 15, "RETURNING"),
        ]
    )


def test_report_once_serialises_battery_views() -> None:
    report = BatteryMonitor(_registry()).report_once()
    assert report is not None
    entries = sorted(json.loads(report), key=lambda entry: entry["serial_number"])
    assert entries == [
        {"serial_number": "one", "battery_capacity": 80},
        {"serial_number": "two", "battery_capacity": 15},
    ]


def test_serialisation_failure_is_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    def broken(payload: object) -> str:
        raise TypeError("not serialisable")

    monitor = BatteryMonitor(_registry(), serialiser=broken)
    with caplog.at_level(logging.ERROR):
        assert monitor.report_once() is None
    assert "could not be serialised" in caplog.text


def test_monitor_reports_periodically_and_stops() -> None:
    reports = []
    monitor = BatteryMonitor(
        _registry(),
        interval_seconds=0.01,
        serialiser=lambda payload: reports.append(payload) or "ok",
    )
    monitor.start()
    deadline = time.monotonic() + 2.0
    while len(reports) < 2 and time.monotonic() < deadline:
        time.sleep(0.01)
    monitor.stop()

    assert len(reports) >= 2
    assert not monitor.running


def test_interval_must_be_positive() -> None:
    with pytest.raises(ValueError):
        BatteryMonitor(FleetRegistry(), interval_seconds=0)


def test_demo_fleet_respects_limits() -> None:
    drones = build_demo_fleet("aW1n", rng=random.Random(7))
    assert [drone.weight_limit for drone in drones] == [150, 500, 300, 400, 125]
    assert all(drone.current_weight <= drone.weight_limit for drone in drones)
    codes = [item.code for drone in drones for item in drone.cargo]
    assert codes and all(len(code) == 32 and code == code.upper() for code in codes)
    assert all(item.image == "aW1n" for drone in drones for item in drone.cargo)
    assert [drone.state for drone in drones] == [
        DroneState.LOADED,
        DroneState.LOADED,
        DroneState.IDLE,
        DroneState.LOADED,
        DroneState.IDLE,
    ]
    assert [drone.is_available_for_loading() for drone in drones].count(True) == 2


def test_load_sample_image(tmp_path: Path) -> None:
    picture = tmp_path / "case.jpg"
    picture.write_bytes(b"\xff\xd8jpeg")
    assert base64.b64decode(load_sample_image(picture)) == b"\xff\xd8jpeg"
    assert load_sample_image(tmp_path / "missing.jpg") is None
    assert load_sample_image(None) is None

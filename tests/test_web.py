#!/usr/bin/env python3
"""Tests for the Flask JSON API."""

import pytest

from models import (
    MaintenanceItemConfig,
    ServiceLineItem,
    ServiceRecord,
    Vehicle,
    load_vehicles,
    save_vehicles,
)
from web.app import app

OIL = MaintenanceItemConfig("oil", "Engine oil", 10000)
AIR = MaintenanceItemConfig("air", "Air filter", 20000)


@pytest.fixture
def data_file(tmp_path):
    path = tmp_path / "garage.yaml"
    vehicle = Vehicle(
        "v1",
        "Hilux",
        19500,
        "2025-01-15T12:00:00+00:00",
        [OIL, AIR],
        [ServiceRecord("r1", "2024-06-01", 10000, [ServiceLineItem("oil", "Engine oil", "5W30")])],
    )
    save_vehicles(path, [vehicle])
    return path


@pytest.fixture
def client(data_file):
    app.config["TESTING"] = True
    app.config["DATA_FILE"] = data_file
    with app.test_client() as client:
        yield client


class TestIndex:
    """Tests for the vehicle list."""

    def test_lists_vehicles_with_counts(self, client):
        data = client.get("/").get_json()
        vehicle = data["vehicles"][0]
        assert vehicle["name"] == "Hilux"
        assert vehicle["services"] == 1
        assert vehicle["lastService"] == "2024-06-01"
        assert (vehicle["overdue"], vehicle["due_soon"], vehicle["ok"]) == (0, 1, 1)


class TestCreateVehicle:
    """Tests for POST /vehicles."""

    def test_creates_with_defaults(self, client, data_file):
        response = client.post("/vehicles", json={"name": "Corolla", "currentOdometer": "45.000"})
        assert response.status_code == 201
        payload = response.get_json()
        assert payload["vehicle"]["currentOdometer"] == 45000
        assert len(payload["vehicle"]["configs"]) == 7
        assert len(load_vehicles(data_file)) == 2

    def test_creates_with_items(self, client):
        response = client.post(
            "/vehicles",
            json={
                "name": "Moto",
                "currentOdometer": 1200,
                "items": [{"name": "Chain", "intervalDistance": 1000}, {"name": " ", "intervalDistance": 5}],
            },
        )
        assert response.status_code == 201
        configs = response.get_json()["vehicle"]["configs"]
        assert [c["name"] for c in configs] == ["Chain"]

    def test_blank_name(self, client):
        response = client.post("/vehicles", json={"name": "", "currentOdometer": 0})
        assert response.status_code == 400
        assert response.get_json()["error"] == "blank-name"

    def test_missing_odometer(self, client):
        response = client.post("/vehicles", json={"name": "Corolla"})
        assert response.status_code == 400
        assert response.get_json()["error"] == "bad-request"

    @pytest.mark.parametrize("items", [None, "Chain", [1000], [None]])
    def test_malformed_items(self, client, data_file, items):
        response = client.post(
            "/vehicles", json={"name": "Moto", "currentOdometer": 0, "items": items}
        )
        if items is None:
            # null behaves like an explicitly empty list
            assert response.status_code == 201
            assert response.get_json()["vehicle"]["configs"] == []
        else:
            assert response.status_code == 400
            assert response.get_json()["error"] == "bad-request"
            assert len(load_vehicles(data_file)) == 1

    def test_non_string_name(self, client):
        response = client.post("/vehicles", json={"name": 7, "currentOdometer": 0})
        assert response.status_code == 400
        assert response.get_json()["error"] == "bad-request"

    def test_not_json(self, client):
        response = client.post("/vehicles", data="hello")
        assert response.status_code == 400

    def test_garage_full(self, client):
        for name in ("A", "B"):
            assert client.post("/vehicles", json={"name": name, "currentOdometer": 0}).status_code == 201
        response = client.post("/vehicles", json={"name": "C", "currentOdometer": 0})
        assert response.status_code == 400
        assert response.get_json()["error"] == "garage-full"


class TestVehicleDetail:
    """Tests for GET and DELETE /vehicle/<id>."""

    def test_status_most_urgent_first(self, client):
        payload = client.get("/vehicle/hilux").get_json()
        assert [s["configId"] for s in payload["status"]] == ["oil", "air"]
        oil = payload["status"][0]
        assert oil["status"] == "due-soon"
        assert oil["remaining"] == 500
        assert oil["nextDueOdometer"] == 20000
        assert oil["lastServiceDate"] == "2024-06-01"

    def test_status_filter(self, client):
        payload = client.get("/vehicle/v1?status=ok").get_json()
        assert [s["configId"] for s in payload["status"]] == ["air"]

    def test_unknown(self, client):
        response = client.get("/vehicle/nope")
        assert response.status_code == 404
        assert response.get_json()["error"] == "not-found"

    def test_delete(self, client, data_file):
        assert client.delete("/vehicle/v1").status_code == 204
        assert load_vehicles(data_file) == []


class TestOdometer:
    """Tests for POST /vehicle/<id>/odometer."""

    def test_update(self, client, data_file):
        response = client.post("/vehicle/v1/odometer", json={"odometer": 21000})
        assert response.status_code == 200
        assert response.get_json()["status"][0]["status"] == "overdue"
        assert load_vehicles(data_file)[0].current_odometer == 21000

    def test_below_history(self, client, data_file):
        response = client.post("/vehicle/v1/odometer", json={"odometer": 5000})
        assert response.status_code == 400
        assert response.get_json()["error"] == "odometer-below-history"
        assert load_vehicles(data_file)[0].current_odometer == 19500

    def test_negative(self, client):
        response = client.post("/vehicle/v1/odometer", json={"odometer": -5})
        assert response.get_json()["error"] == "invalid-odometer"


class TestServices:
    """Tests for recording and editing services."""

    def test_add_service(self, client, data_file):
        response = client.post(
            "/vehicle/v1/services",
            json={
                "date": "01/02/2025",
                "odometer": 20000,
                "items": [{"configId": "oil", "observation": "Shell"}],
            },
        )
        assert response.status_code == 201
        vehicle = load_vehicles(data_file)[0]
        record = vehicle.history[-1]
        assert record.date == "2025-02-01"
        assert record.line_items == (ServiceLineItem("oil", "Engine oil", "Shell"),)
        assert vehicle.current_odometer == 20000

    def test_odometer_defaults_to_current(self, client, data_file):
        response = client.post("/vehicle/v1/services", json={"specialWork": "Brakes"})
        assert response.status_code == 201
        assert load_vehicles(data_file)[0].history[-1].odometer == 19500

    def test_vacuous_rejected(self, client, data_file):
        response = client.post("/vehicle/v1/services", json={"odometer": 20000})
        assert response.status_code == 400
        assert response.get_json()["error"] == "vacuous-record"
        assert len(load_vehicles(data_file)[0].history) == 1

    def test_unknown_item(self, client):
        response = client.post("/vehicle/v1/services", json={"items": [{"configId": "zz"}]})
        assert response.get_json()["error"] == "unknown-config"

    def test_bad_date(self, client):
        response = client.post(
            "/vehicle/v1/services", json={"date": "whenever", "items": [{"configId": "oil"}]}
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "bad-request"

    def test_edit_service(self, client, data_file):
        response = client.put(
            "/vehicle/v1/services/r1",
            json={"date": "2024-06-01", "odometer": 12000, "items": [{"configId": "air"}]},
        )
        assert response.status_code == 200
        history = load_vehicles(data_file)[0].history
        assert len(history) == 1
        assert history[0].id == "r1"
        assert history[0].odometer == 12000
        assert history[0].line_items[0].config_id == "air"

    def test_partial_edit_keeps_existing_fields(self, client, data_file):
        response = client.put(
            "/vehicle/v1/services/r1",
            json={"items": [{"configId": "oil", "observation": "0W20"}]},
        )
        assert response.status_code == 200
        record = load_vehicles(data_file)[0].get_record("r1")
        assert record.odometer == 10000
        assert record.date == "2024-06-01"
        assert record.line_items == (ServiceLineItem("oil", "Engine oil", "0W20"),)
        oil = response.get_json()["status"][0]
        assert oil["lastServiceOdometer"] == 10000

    def test_edit_without_items_keeps_items(self, client, data_file):
        response = client.put("/vehicle/v1/services/r1", json={"specialWork": "Wipers"})
        assert response.status_code == 200
        record = load_vehicles(data_file)[0].get_record("r1")
        assert record.line_items == (ServiceLineItem("oil", "Engine oil", "5W30"),)
        assert record.special_work == "Wipers"

    def test_non_string_special_work(self, client, data_file):
        response = client.post(
            "/vehicle/v1/services", json={"odometer": 19600, "specialWork": 123}
        )
        assert response.status_code == 400
        assert response.get_json()["error"] == "bad-request"
        assert len(load_vehicles(data_file)[0].history) == 1

    @pytest.mark.parametrize("items", [None, "oil", [42], {"configId": "oil"}])
    def test_items_must_be_objects(self, client, items):
        response = client.post(
            "/vehicle/v1/services", json={"odometer": 19600, "specialWork": "Brakes", "items": items}
        )
        if items is None:
            # null is treated as no items
            assert response.status_code == 201
        else:
            assert response.status_code == 400
            assert response.get_json()["error"] == "bad-request"

    def test_edit_unknown_service(self, client):
        response = client.put("/vehicle/v1/services/zz", json={"items": [{"configId": "oil"}]})
        assert response.status_code == 404


class TestHistory:
    """Tests for GET /vehicle/<id>/history."""

    def test_display_name_prefers_current_config(self, client, data_file):
        vehicle = load_vehicles(data_file)[0]
        renamed = Vehicle(
            vehicle.id,
            vehicle.name,
            vehicle.current_odometer,
            vehicle.last_updated,
            [MaintenanceItemConfig("oil", "Motor oil", 10000)],
            vehicle.history,
        )
        save_vehicles(data_file, [renamed])

        item = client.get("/vehicle/v1/history").get_json()["history"][0]["lineItems"][0]
        assert item["name"] == "Engine oil"
        assert item["displayName"] == "Motor oil"

    def test_descending(self, client):
        client.post("/vehicle/v1/services", json={"odometer": 19000, "specialWork": "Brakes"})
        history = client.get("/vehicle/v1/history?order=desc").get_json()["history"]
        assert [h["odometer"] for h in history] == [19000, 10000]

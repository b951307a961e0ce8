"""
Test Fleet Routes - store-backed endpoints

Tests for:
- /api/aircraft - registration format, uniqueness, delete detaches components
- /api/components - aircraft references, ground usage, sign-off persistence
- GET /api/predictions, /summary, /advisory-context over the stored fleet

MongoDB is replaced by an in-memory mongomock-motor database through
app.dependency_overrides; the app lifespan is not run.
"""

import asyncio
import pytest
from fastapi.testclient import TestClient
from mongomock_motor import AsyncMongoMockClient

from database.mongodb import get_database
from server import app


@pytest.fixture
def db():
    return AsyncMongoMockClient()["skyguard_test"]


@pytest.fixture
def client(db):
    app.dependency_overrides[get_database] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def create_aircraft(client, registration="I-MAUR", **extra):
    payload = {
        "registration": registration,
        "model": "Cessna 172S",
        "total_flight_hours": 40,
        "total_operating_hours": 40,
        "total_cycles": 40,
        "avg_monthly_fh": 30.44,
        "avg_monthly_cycles": 30.44,
        **extra
    }
    response = client.post("/api/aircraft", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_component(client, requirements, aircraft_id=None, **extra):
    payload = {
        "name": "Engine Overhaul",
        "serial_number": "L-24501-21",
        "aircraft_id": aircraft_id,
        "criticality": "High",
        "lead_time_days": 45,
        "requirements": requirements,
        **extra
    }
    response = client.post("/api/components", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


TBO = {"id": "req-fh", "type": "FH", "description": "TBO Overhaul",
       "interval": 2000, "next_due_value": 100}

BATTERY = {"id": "req-cal", "type": "CAL", "description": "Battery Expiry",
           "interval": 730, "next_due_date": "2025-01-05"}

LANDING_GEAR = {"id": "req-c", "type": "C", "description": "Landing gear LLP",
                "interval": 1000, "next_due_value": 500}


class TestAircraftRoutes:

    def test_registration_is_uppercased(self, client):
        aircraft = create_aircraft(client, registration="  i-maur ")

        assert aircraft["registration"] == "I-MAUR"
        assert aircraft["_id"].startswith("ac-")

        fetched = client.get(f"/api/aircraft/{aircraft['_id']}").json()
        assert fetched["registration"] == "I-MAUR"

    def test_duplicate_registration_rejected(self, client):
        create_aircraft(client, registration="I-MAUR")

        response = client.post("/api/aircraft", json={"registration": "i-maur"})

        assert response.status_code == 400
        assert "I-MAUR" in response.json()["detail"]
        assert len(client.get("/api/aircraft").json()) == 1

    def test_ids_are_unique(self, client):
        first = create_aircraft(client, registration="I-MAUR")
        second = create_aircraft(client, registration="I-FLYH")

        assert first["_id"] != second["_id"]

    def test_delete_moves_components_to_ground_storage(self, client):
        aircraft = create_aircraft(client)
        installed = create_component(client, [TBO], aircraft_id=aircraft["_id"])
        spare = create_component(client, [LANDING_GEAR], name="Spare Magneto")

        response = client.delete(f"/api/aircraft/{aircraft['_id']}")

        assert response.status_code == 204
        assert client.get(f"/api/aircraft/{aircraft['_id']}").status_code == 404
        assert client.get(f"/api/components/{installed['_id']}").json()["aircraft_id"] is None
        assert client.get(f"/api/components/{spare['_id']}").json()["aircraft_id"] is None
        assert len(client.get("/api/components").json()) == 2

    def test_delete_unknown_aircraft(self, client):
        assert client.delete("/api/aircraft/ac-missing").status_code == 404

    def test_usage_update(self, client):
        aircraft = create_aircraft(client)

        response = client.put(f"/api/aircraft/{aircraft['_id']}/usage", json={
            "total_flight_hours": 55.5,
            "total_operating_hours": 58,
            "total_cycles": 61
        })

        assert response.status_code == 200
        stored = client.get(f"/api/aircraft/{aircraft['_id']}").json()
        assert stored["total_flight_hours"] == 55.5
        assert stored["total_cycles"] == 61


class TestComponentRoutes:

    def test_create_with_unknown_aircraft(self, client):
        response = client.post("/api/components", json={
            "name": "Engine Overhaul",
            "aircraft_id": "ac-missing",
            "requirements": [TBO]
        })

        assert response.status_code == 404
        assert client.get("/api/components").json() == []

    def test_update_with_unknown_aircraft(self, client):
        component = create_component(client, [TBO])

        response = client.put(f"/api/components/{component['_id']}", json={"aircraft_id": "ac-missing"})

        assert response.status_code == 404
        assert client.get(f"/api/components/{component['_id']}").json()["aircraft_id"] is None

    def test_update_moves_component_between_locations(self, client):
        aircraft = create_aircraft(client)
        component = create_component(client, [TBO])

        installed = client.put(f"/api/components/{component['_id']}", json={"aircraft_id": aircraft["_id"]})
        grounded = client.put(f"/api/components/{component['_id']}", json={"aircraft_id": None})

        assert installed.json()["aircraft_id"] == aircraft["_id"]
        assert grounded.json()["aircraft_id"] is None

    def test_ground_usage_on_installed_component(self, client):
        aircraft = create_aircraft(client)
        component = create_component(client, [TBO], aircraft_id=aircraft["_id"])

        response = client.put(f"/api/components/{component['_id']}/ground-usage", json={
            "current_fh": 10, "current_oh": 10, "current_cycles": 10
        })

        assert response.status_code == 400

    def test_ground_usage_on_stored_component(self, client):
        component = create_component(client, [LANDING_GEAR])

        response = client.put(f"/api/components/{component['_id']}/ground-usage", json={
            "current_fh": 10, "current_oh": 12, "current_cycles": 7
        })

        assert response.status_code == 200
        stored = client.get(f"/api/components/{component['_id']}").json()
        assert stored["current_oh"] == 12
        assert stored["current_cycles"] == 7

    def test_sign_off_unknown_component(self, client):
        response = client.post(
            "/api/components/cmp-missing/requirements/req-cal/sign-off",
            json={"completion_value": "2025-01-10"}
        )
        assert response.status_code == 404

    def test_sign_off_unknown_requirement(self, client):
        component = create_component(client, [BATTERY])

        response = client.post(
            f"/api/components/{component['_id']}/requirements/req-missing/sign-off",
            json={"completion_value": "2025-01-10"}
        )

        assert response.status_code == 404
        assert response.json()["detail"] == "Requirement not found"

    def test_sign_off_with_mismatched_completion(self, client):
        component = create_component(client, [BATTERY])

        response = client.post(
            f"/api/components/{component['_id']}/requirements/req-cal/sign-off",
            json={"completion_value": 1200}
        )

        assert response.status_code == 400

    def test_calendar_sign_off_is_persisted_as_iso_dates(self, client, db):
        component = create_component(client, [BATTERY])

        response = client.post(
            f"/api/components/{component['_id']}/requirements/req-cal/sign-off",
            json={"completion_value": "2025-01-10"}
        )

        assert response.status_code == 200
        assert response.json()["requirements"][0]["next_due_date"] == "2027-01-10"

        stored = asyncio.run(db.components.find_one({"_id": component["_id"]}))
        assert stored["requirements"][0]["last_performed_date"] == "2025-01-10"
        assert stored["requirements"][0]["next_due_date"] == "2027-01-10"
        assert stored["criticality"] == "High"

    def test_counter_sign_off(self, client):
        component = create_component(client, [TBO])

        response = client.post(
            f"/api/components/{component['_id']}/requirements/req-fh/sign-off",
            json={"completion_value": 1200}
        )

        requirement = response.json()["requirements"][0]
        assert requirement["last_performed_value"] == 1200
        assert requirement["next_due_value"] == 3200


class TestStoredPredictions:
    """I-MAUR flies 1 FH per day; the spare sits in ground storage"""

    @pytest.fixture
    def fleet(self, client):
        aircraft = create_aircraft(client)
        create_component(client, [TBO], aircraft_id=aircraft["_id"])
        create_component(client, [BATTERY, LANDING_GEAR], name="Spare Battery", lead_time_days=10)
        return aircraft

    def test_predictions_most_urgent_first(self, client, fleet):
        response = client.get("/api/predictions", params={"reference_date": "2025-01-01"})

        assert response.status_code == 200
        predictions = response.json()
        assert [p["requirement_id"] for p in predictions] == ["req-cal", "req-fh", "req-c"]
        assert [p["days_remaining"] for p in predictions] == [4, 60, 9999]

        battery, tbo, gear = predictions
        assert battery["action_required"] == "Immediate"
        assert battery["aircraft_registration"] == "Storage"
        assert tbo["aircraft_registration"] == "I-MAUR"
        assert tbo["estimated_due_date"] == "2025-03-02"
        assert gear["indeterminate"] is True

    def test_summary(self, client, fleet):
        summary = client.get("/api/predictions/summary", params={"reference_date": "2025-01-01"}).json()

        assert summary["reference_date"] == "2025-01-01"
        assert summary["total"] == 3
        assert summary["immediate_count"] == 1
        assert summary["procure_count"] == 0
        assert summary["indeterminate_count"] == 1
        assert summary["most_urgent"][0]["requirement_id"] == "req-cal"

    def test_advisory_context(self, client, fleet):
        context = client.get("/api/predictions/advisory-context", params={"reference_date": "2025-01-01"}).json()

        assert context["horizon_days"] == 60
        assert [p["requirement_id"] for p in context["predictions"]] == ["req-cal"]
        assert sorted(c["name"] for c in context["components"]) == ["Engine Overhaul", "Spare Battery"]

    def test_empty_store(self, client):
        assert client.get("/api/predictions").json() == []

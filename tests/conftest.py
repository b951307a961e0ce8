import pytest
from datetime import date

from models.aircraft import Aircraft
from models.component import Component


REFERENCE_DATE = date(2025, 1, 1)


@pytest.fixture
def reference_date():
    return REFERENCE_DATE


@pytest.fixture
def make_aircraft():
    """Aircraft factory with utilisation of exactly 1 FH and 1 cycle per day"""
    def _make(**overrides):
        data = {
            "id": "ac1",
            "registration": "I-MAUR",
            "model": "Cessna 172S",
            "total_flight_hours": 40.0,
            "total_operating_hours": 40.0,
            "total_cycles": 40,
            "avg_monthly_fh": 30.44,
            "avg_monthly_cycles": 30.44,
        }
        data.update(overrides)
        return Aircraft(**data)
    return _make


@pytest.fixture
def make_component():
    def _make(requirements, **overrides):
        data = {
            "id": "cmp1",
            "name": "Engine Overhaul",
            "serial_number": "L-24501-21",
            "aircraft_id": "ac1",
            "criticality": "High",
            "lead_time_days": 45,
            "requirements": requirements,
        }
        data.update(overrides)
        return Component(**data)
    return _make

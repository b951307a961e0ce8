"""
Component Model

Removable components tracked against recurring maintenance requirements.
A component is either installed on an aircraft or held in ground storage
(aircraft_id = None).

Collection: components
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Union, Literal, Annotated
from datetime import datetime, date
from enum import Enum
import uuid


class MaintenanceType(str, Enum):
    """Counter (or calendar) that governs a requirement"""
    FLIGHT_HOURS = "FH"
    OPERATING_HOURS = "OH"
    CYCLES = "C"
    CALENDAR = "CAL"


class Criticality(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


def _new_requirement_id() -> str:
    return f"req-{uuid.uuid4().hex[:12]}"


# ============================================================
# REQUIREMENTS (tagged by "type")
# ============================================================

class CounterRequirementBase(BaseModel):
    """Requirement measured on a usage counter (hours or cycles)"""
    id: str = Field(default_factory=_new_requirement_id)
    description: str
    interval: float = Field(..., gt=0, allow_inf_nan=False, description="Recurrence in hours or cycles")
    last_performed_value: Optional[float] = Field(None, allow_inf_nan=False, description="Counter at last sign-off")
    next_due_value: float = Field(..., allow_inf_nan=False, description="Counter at which the requirement is due")


class FlightHoursRequirement(CounterRequirementBase):
    type: Literal["FH"] = MaintenanceType.FLIGHT_HOURS.value


class OperatingHoursRequirement(CounterRequirementBase):
    type: Literal["OH"] = MaintenanceType.OPERATING_HOURS.value


class CyclesRequirement(CounterRequirementBase):
    type: Literal["C"] = MaintenanceType.CYCLES.value


class CalendarRequirement(BaseModel):
    """Requirement measured in calendar days (shelf life, expiry, ...)"""
    id: str = Field(default_factory=_new_requirement_id)
    description: str
    type: Literal["CAL"] = MaintenanceType.CALENDAR.value
    interval: int = Field(..., gt=0, description="Recurrence in days")
    last_performed_date: Optional[date] = None
    next_due_date: date


Requirement = Annotated[
    Union[
        FlightHoursRequirement,
        OperatingHoursRequirement,
        CyclesRequirement,
        CalendarRequirement,
    ],
    Field(discriminator="type"),
]

CounterRequirement = Union[
    FlightHoursRequirement,
    OperatingHoursRequirement,
    CyclesRequirement,
]


# ============================================================
# COMPONENTS
# ============================================================

class ComponentBase(BaseModel):
    """Base model for a tracked component"""
    name: str
    serial_number: str = Field(default="UNKNOWN", description="Serial number")
    aircraft_id: Optional[str] = Field(None, description="None when held in ground storage")
    criticality: Criticality = Criticality.MEDIUM
    lead_time_days: int = Field(default=0, ge=0, description="Procurement lead time (days)")
    requirements: List[Requirement] = []


class ComponentCreate(ComponentBase):
    """Model for registering a component; ground counters start at zero"""
    pass


class ComponentUpdate(BaseModel):
    name: Optional[str] = None
    serial_number: Optional[str] = None
    aircraft_id: Optional[str] = None
    criticality: Optional[Criticality] = None
    lead_time_days: Optional[int] = Field(default=None, ge=0)
    requirements: Optional[List[Requirement]] = None


class GroundUsageUpdate(BaseModel):
    """Manual counter update for a component in ground storage"""
    current_fh: float = Field(..., ge=0, allow_inf_nan=False)
    current_oh: float = Field(..., ge=0, allow_inf_nan=False)
    current_cycles: float = Field(..., ge=0, allow_inf_nan=False)


class SignOffRequest(BaseModel):
    """Completion of a requirement: a counter value or an ISO date"""
    completion_value: Union[date, float]


class Component(ComponentBase):
    """Full component document"""
    id: str = Field(alias="_id")

    # Tracking for ground items
    current_fh: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    current_oh: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    current_cycles: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True

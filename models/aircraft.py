from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class AircraftStatus(str, Enum):
    """Operational state of an aircraft (informational, not used by predictions)"""
    ACTIVE = "A"
    REPAIR = "R"
    MAINTENANCE = "M"
    INEFFICIENT = "I"

class AircraftBase(BaseModel):
    registration: str  # Format: I-MAUR (always UPPERCASE)
    model: Optional[str] = None
    status: AircraftStatus = AircraftStatus.ACTIVE

    # Absolute counters, updated manually
    total_flight_hours: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    total_operating_hours: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    total_cycles: float = Field(default=0, ge=0, allow_inf_nan=False)

    # Utilisation rates used to project counters forward
    avg_monthly_fh: Optional[float] = Field(default=0.0, ge=0, allow_inf_nan=False)
    avg_monthly_cycles: Optional[float] = Field(default=0.0, ge=0, allow_inf_nan=False)

class AircraftCreate(AircraftBase):
    pass

class AircraftUpdate(BaseModel):
    registration: Optional[str] = None
    model: Optional[str] = None
    status: Optional[AircraftStatus] = None
    avg_monthly_fh: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    avg_monthly_cycles: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)

class AircraftUsageUpdate(BaseModel):
    """Manual counter update - no automatic accrual"""
    total_flight_hours: float = Field(..., ge=0, allow_inf_nan=False)
    total_operating_hours: float = Field(..., ge=0, allow_inf_nan=False)
    total_cycles: float = Field(..., ge=0, allow_inf_nan=False)

class Aircraft(AircraftBase):
    id: str = Field(alias="_id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        populate_by_name = True

from pydantic import BaseModel, Field
from typing import List
from datetime import date
from enum import Enum

from models.aircraft import Aircraft
from models.component import Component, Criticality

# Emitted days_remaining when no usage rate exists (grounded / no data)
INDETERMINATE_DAYS = 9999

# Consumers treat anything above this as "no meaningful countdown"
INDETERMINATE_DISPLAY_THRESHOLD = 3000

# Registration reported for components held in ground storage
GROUND_STORAGE = "Storage"


class ActionRequired(str, Enum):
    MONITOR = "Monitor"
    PROCURE = "Procure"
    IMMEDIATE = "Immediate"


class PredictionResult(BaseModel):
    """
    One forecast per requirement - disposable, never stored.

    A finite countdown can exceed INDETERMINATE_DAYS (up to 999,999,999 for
    far-future projections), so use the indeterminate flag rather than a
    days threshold to detect "no countdown".
    """
    component_id: str
    component_name: str
    aircraft_registration: str = GROUND_STORAGE
    requirement_id: str
    requirement_description: str
    estimated_due_date: date
    days_remaining: int = Field(..., ge=0)
    action_required: ActionRequired = ActionRequired.MONITOR
    indeterminate: bool = False


class PredictionSummary(BaseModel):
    """Dashboard counters"""
    reference_date: date
    total: int
    immediate_count: int
    procure_count: int
    indeterminate_count: int
    most_urgent: List[PredictionResult] = []


class ComponentLeadTime(BaseModel):
    name: str
    lead_time_days: int
    criticality: Criticality


class AdvisoryContext(BaseModel):
    """JSON context handed to the maintenance advisory text generator"""
    reference_date: date
    horizon_days: int
    predictions: List[PredictionResult]
    components: List[ComponentLeadTime]


class FleetSnapshot(BaseModel):
    """Self-contained fleet state for stateless evaluation"""
    aircraft: List[Aircraft] = []
    components: List[Component] = []

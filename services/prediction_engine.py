"""
Maintenance Prediction Engine

Projects every maintenance requirement of a component forward in time by
linear extrapolation of the aircraft's average monthly utilisation, then
classifies how urgently the requirement needs attention.

RULES:
- Installed components are measured on the aircraft counters
- Ground components are measured on their own (static) counters
- No usage rate = no countdown (INDETERMINATE, always Monitor)
- Pure computation: no database, no settings, no global state
"""

import math
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional, Union

from pydantic import BaseModel

from models.aircraft import Aircraft
from models.component import (
    Component,
    CalendarRequirement,
    CounterRequirement,
    CyclesRequirement,
    FlightHoursRequirement,
    OperatingHoursRequirement,
)
from models.prediction import (
    ActionRequired,
    PredictionResult,
    GROUND_STORAGE,
    INDETERMINATE_DAYS,
)

logger = logging.getLogger(__name__)

# Average days in a month (365.25 / 12)
DAYS_PER_MONTH = 30.44

# Operating hours = flight hours + ground running / taxi overhead
OPERATING_HOURS_FACTOR = 1.05

# At or below this many days the requirement is Immediate
IMMEDIATE_THRESHOLD_DAYS = 7


# ============================================================
# LOCATION - where counters are read from
# ============================================================

class Installed(BaseModel):
    aircraft: Aircraft

    class Config:
        frozen = True


class Ground(BaseModel):
    class Config:
        frozen = True


Location = Union[Installed, Ground]


def locate(aircraft: Optional[Aircraft]) -> Location:
    """Installed on the given aircraft, or in ground storage when None"""
    if aircraft is None:
        return Ground()
    return Installed(aircraft=aircraft)


# ============================================================
# OUTLOOK - projection before it is flattened into a result
# ============================================================

class Determinate(BaseModel):
    """Raw (unfloored, possibly negative) day count and due date"""
    days: float
    due_date: date


class Indeterminate(BaseModel):
    """No usable consumption rate; the due date stays on the reference date"""
    due_date: date


Outlook = Union[Determinate, Indeterminate]


def _current_value(
    requirement: CounterRequirement,
    component: Component,
    location: Location
) -> float:
    if isinstance(location, Installed):
        aircraft = location.aircraft
        if isinstance(requirement, FlightHoursRequirement):
            return aircraft.total_flight_hours
        if isinstance(requirement, OperatingHoursRequirement):
            return aircraft.total_operating_hours
        return aircraft.total_cycles

    if isinstance(requirement, FlightHoursRequirement):
        return component.current_fh
    if isinstance(requirement, OperatingHoursRequirement):
        return component.current_oh
    return component.current_cycles


def _daily_rate(requirement: CounterRequirement, location: Location) -> float:
    """Counter units consumed per day; grounded assets never accrue"""
    if not isinstance(location, Installed):
        return 0.0

    aircraft = location.aircraft
    monthly_fh = aircraft.avg_monthly_fh or 0.0
    monthly_cycles = aircraft.avg_monthly_cycles or 0.0

    if isinstance(requirement, FlightHoursRequirement):
        return monthly_fh / DAYS_PER_MONTH
    if isinstance(requirement, OperatingHoursRequirement):
        return (monthly_fh * OPERATING_HOURS_FACTOR) / DAYS_PER_MONTH
    if isinstance(requirement, CyclesRequirement):
        return monthly_cycles / DAYS_PER_MONTH
    return 0.0


# Largest day offset a timedelta can hold
MAX_PROJECTION_DAYS = 999_999_999


def _whole_days(days: float) -> int:
    """floor(days), saturating at +/- MAX_PROJECTION_DAYS (also for infinities)"""
    if days >= MAX_PROJECTION_DAYS:
        return MAX_PROJECTION_DAYS
    if days <= -MAX_PROJECTION_DAYS:
        return -MAX_PROJECTION_DAYS
    return math.floor(days)


def _add_days(start: date, days: int) -> date:
    """start + days, saturating at the calendar bounds"""
    try:
        return start + timedelta(days=days)
    except OverflowError:
        return date.max if days > 0 else date.min


def project(
    requirement,
    component: Component,
    location: Location,
    reference_date: date
) -> Outlook:
    """Project one requirement from reference_date"""
    if isinstance(requirement, CalendarRequirement):
        days = float((requirement.next_due_date - reference_date).days)
        return Determinate(days=days, due_date=requirement.next_due_date)

    remaining = requirement.next_due_value - _current_value(requirement, component, location)
    rate = _daily_rate(requirement, location)

    if rate <= 0:
        return Indeterminate(due_date=reference_date)

    days = remaining / rate
    if math.isnan(days):
        return Indeterminate(due_date=reference_date)

    # days may overflow to +/-inf; the due date saturates instead
    return Determinate(
        days=days,
        due_date=_add_days(reference_date, _whole_days(days))
    )


def classify(days: float, lead_time_days: int) -> ActionRequired:
    """
    Urgency tier from the raw day count.
    Immediate wins over Procure; an infinite count is always Monitor.
    """
    action = ActionRequired.MONITOR
    if days <= lead_time_days:
        action = ActionRequired.PROCURE
    if days <= IMMEDIATE_THRESHOLD_DAYS:
        action = ActionRequired.IMMEDIATE
    return action


def to_result(
    outlook: Outlook,
    requirement,
    component: Component,
    location: Location
) -> PredictionResult:
    if isinstance(outlook, Determinate):
        raw_days = outlook.days
        days_remaining = max(0, _whole_days(raw_days))
    else:
        raw_days = math.inf
        days_remaining = INDETERMINATE_DAYS

    registration = (
        location.aircraft.registration if isinstance(location, Installed)
        else GROUND_STORAGE
    )

    return PredictionResult(
        component_id=component.id,
        component_name=component.name,
        aircraft_registration=registration or GROUND_STORAGE,
        requirement_id=requirement.id,
        requirement_description=requirement.description,
        estimated_due_date=outlook.due_date,
        days_remaining=days_remaining,
        action_required=classify(raw_days, component.lead_time_days),
        indeterminate=isinstance(outlook, Indeterminate)
    )


def predict_at_location(
    component: Component,
    location: Location,
    reference_date: date
) -> List[PredictionResult]:
    """One result per requirement, in requirement order"""
    results = []
    for requirement in component.requirements:
        outlook = project(requirement, component, location, reference_date)
        results.append(to_result(outlook, requirement, component, location))

    logger.debug(
        f"Predicted {len(results)} requirement(s) for component {component.id} "
        f"({'installed' if isinstance(location, Installed) else 'ground'})"
    )
    return results


def predict(
    component: Component,
    aircraft: Optional[Aircraft] = None,
    reference_date: Optional[date] = None
) -> List[PredictionResult]:
    """
    Predict every requirement of a component.

    Args:
        component: Component with its requirement list.
        aircraft: Aircraft the component is installed on, or None for
                  ground storage.
        reference_date: "Today" for the forecast. Defaults to the current
                        UTC date; pin it per batch so results compare.

    Returns:
        List of PredictionResult, same order as component.requirements.
    """
    if reference_date is None:
        reference_date = datetime.utcnow().date()
    return predict_at_location(component, locate(aircraft), reference_date)

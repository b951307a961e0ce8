"""
Fleet Service

Fleet-level workflows around the prediction engine:
- batch prediction over a fleet snapshot (one pinned reference date)
- dashboard summary and advisory context
- sign-off of a requirement (recomputes the next due threshold)
- manual counter updates (aircraft / ground storage)
- detaching components when their aircraft is deleted

All functions are pure: they take models and return new models.
Persistence is done by the routes.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Union

from models.aircraft import Aircraft
from models.component import CalendarRequirement, Component
from models.prediction import (
    ActionRequired,
    AdvisoryContext,
    ComponentLeadTime,
    PredictionResult,
    PredictionSummary,
)
from services.prediction_engine import (
    Ground,
    Installed,
    Location,
    predict_at_location,
)

logger = logging.getLogger(__name__)

MOST_URGENT_LIMIT = 5


# ============================================================
# PREDICTIONS
# ============================================================

def resolve_location(
    component: Component,
    aircraft_by_id: Dict[str, Aircraft]
) -> Location:
    """Installed when aircraft_id resolves in the snapshot, else Ground"""
    if component.aircraft_id is None:
        return Ground()

    aircraft = aircraft_by_id.get(component.aircraft_id)
    if aircraft is None:
        logger.warning(
            f"Component {component.id} references unknown aircraft "
            f"{component.aircraft_id} - treated as ground storage"
        )
        return Ground()

    return Installed(aircraft=aircraft)


def predict_fleet(
    aircraft: Iterable[Aircraft],
    components: Iterable[Component],
    reference_date: Optional[date] = None
) -> List[PredictionResult]:
    """Predict every requirement of every component, in input order"""
    if reference_date is None:
        reference_date = datetime.utcnow().date()

    aircraft_by_id = {a.id: a for a in aircraft}
    predictions: List[PredictionResult] = []
    for component in components:
        location = resolve_location(component, aircraft_by_id)
        predictions.extend(predict_at_location(component, location, reference_date))

    logger.info(
        f"Fleet prediction at {reference_date.isoformat()}: "
        f"{len(predictions)} requirement(s) over {len(aircraft_by_id)} aircraft"
    )
    return predictions


def sort_by_urgency(predictions: Iterable[PredictionResult]) -> List[PredictionResult]:
    """Most urgent first (stable on ties)"""
    return sorted(predictions, key=lambda p: p.days_remaining)


def summarize(
    predictions: List[PredictionResult],
    reference_date: date
) -> PredictionSummary:
    return PredictionSummary(
        reference_date=reference_date,
        total=len(predictions),
        immediate_count=sum(1 for p in predictions if p.action_required == ActionRequired.IMMEDIATE),
        procure_count=sum(1 for p in predictions if p.action_required == ActionRequired.PROCURE),
        indeterminate_count=sum(1 for p in predictions if p.indeterminate),
        most_urgent=sort_by_urgency(predictions)[:MOST_URGENT_LIMIT]
    )


def build_advisory_context(
    predictions: List[PredictionResult],
    components: Iterable[Component],
    reference_date: date,
    horizon_days: int = 60
) -> AdvisoryContext:
    """Near-term predictions plus component lead times for the advisory generator"""
    return AdvisoryContext(
        reference_date=reference_date,
        horizon_days=horizon_days,
        predictions=[p for p in predictions if p.days_remaining < horizon_days],
        components=[
            ComponentLeadTime(
                name=c.name,
                lead_time_days=c.lead_time_days,
                criticality=c.criticality
            )
            for c in components
        ]
    )


# ============================================================
# MUTATIONS
# ============================================================

def sign_off(
    component: Component,
    requirement_id: str,
    completion_value: Union[date, float]
) -> Component:
    """
    Record completion of a requirement and roll its threshold forward.

    Counter requirements: next_due = completion + interval.
    Calendar requirements: next_due = completion date + interval days.

    Raises:
        KeyError: requirement_id is not on the component.
        ValueError: completion_value does not match the requirement type.
    """
    updated = []
    found = False
    for requirement in component.requirements:
        if requirement.id != requirement_id:
            updated.append(requirement)
            continue

        found = True
        if isinstance(requirement, CalendarRequirement):
            if not isinstance(completion_value, date):
                raise ValueError(
                    f"Requirement {requirement_id} is calendar based - completion must be a date"
                )
            updated.append(requirement.model_copy(update={
                "last_performed_date": completion_value,
                "next_due_date": completion_value + timedelta(days=requirement.interval)
            }))
        else:
            if isinstance(completion_value, date) or isinstance(completion_value, bool):
                raise ValueError(
                    f"Requirement {requirement_id} is counter based - completion must be a number"
                )
            value = float(completion_value)
            updated.append(requirement.model_copy(update={
                "last_performed_value": value,
                "next_due_value": value + requirement.interval
            }))

    if not found:
        raise KeyError(requirement_id)

    logger.info(f"Requirement {requirement_id} signed off on component {component.id}")
    return component.model_copy(update={
        "requirements": updated,
        "updated_at": datetime.utcnow()
    })


def update_ground_usage(
    component: Component,
    current_fh: float,
    current_oh: float,
    current_cycles: float
) -> Component:
    """Replace the counters of a component held in ground storage"""
    if component.aircraft_id is not None:
        raise ValueError(
            f"Component {component.id} is installed on {component.aircraft_id} - "
            "update the aircraft counters instead"
        )
    return component.model_copy(update={
        "current_fh": current_fh,
        "current_oh": current_oh,
        "current_cycles": current_cycles,
        "updated_at": datetime.utcnow()
    })


def update_aircraft_usage(
    aircraft: Aircraft,
    total_flight_hours: float,
    total_operating_hours: float,
    total_cycles: float
) -> Aircraft:
    return aircraft.model_copy(update={
        "total_flight_hours": total_flight_hours,
        "total_operating_hours": total_operating_hours,
        "total_cycles": total_cycles,
        "updated_at": datetime.utcnow()
    })


def detach_components(
    components: Iterable[Component],
    aircraft_id: str
) -> List[Component]:
    """Move every component installed on aircraft_id to ground storage"""
    result = []
    detached = 0
    for component in components:
        if component.aircraft_id == aircraft_id:
            component = component.model_copy(update={
                "aircraft_id": None,
                "updated_at": datetime.utcnow()
            })
            detached += 1
        result.append(component)

    logger.info(f"{detached} component(s) moved to ground storage from aircraft {aircraft_id}")
    return result

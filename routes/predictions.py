"""
Prediction Routes
Due-date forecasts for every maintenance requirement of the fleet.
INFORMATIONAL ONLY - estimates from average utilisation
"""

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import date, datetime
from typing import List, Optional
import logging

from config import get_settings
from database.mongodb import get_database
from models.aircraft import Aircraft
from models.component import Component
from models.prediction import (
    AdvisoryContext,
    FleetSnapshot,
    PredictionResult,
    PredictionSummary
)
from services.fleet_service import (
    build_advisory_context,
    predict_fleet,
    sort_by_urgency,
    summarize
)

router = APIRouter(prefix="/api/predictions", tags=["predictions"])
logger = logging.getLogger(__name__)


async def load_snapshot(db: AsyncIOMotorDatabase) -> FleetSnapshot:
    """Read aircraft and components once so a batch sees a single snapshot"""
    aircraft_docs = await db.aircrafts.find({}).to_list(length=500)
    component_docs = await db.components.find({}).sort("created_at", 1).to_list(length=1000)
    return FleetSnapshot(
        aircraft=[Aircraft(**doc) for doc in aircraft_docs],
        components=[Component(**doc) for doc in component_docs]
    )


def pinned(reference_date: Optional[date]) -> date:
    return reference_date or datetime.utcnow().date()


@router.get("", response_model=List[PredictionResult])
async def get_fleet_predictions(
    reference_date: Optional[date] = None,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """All predictions, most urgent first"""
    snapshot = await load_snapshot(db)
    predictions = predict_fleet(snapshot.aircraft, snapshot.components, pinned(reference_date))
    return sort_by_urgency(predictions)


@router.get("/summary", response_model=PredictionSummary)
async def get_prediction_summary(
    reference_date: Optional[date] = None,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Immediate / Procure counters and the five most urgent items"""
    reference_date = pinned(reference_date)
    snapshot = await load_snapshot(db)
    predictions = predict_fleet(snapshot.aircraft, snapshot.components, reference_date)
    return summarize(predictions, reference_date)


@router.get("/advisory-context", response_model=AdvisoryContext)
async def get_advisory_context(
    reference_date: Optional[date] = None,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Context consumed by the maintenance advisory text generator"""
    reference_date = pinned(reference_date)
    snapshot = await load_snapshot(db)
    predictions = predict_fleet(snapshot.aircraft, snapshot.components, reference_date)
    return build_advisory_context(
        predictions,
        snapshot.components,
        reference_date,
        horizon_days=get_settings().advisory_horizon_days
    )


@router.post("/evaluate", response_model=List[PredictionResult])
async def evaluate_snapshot(
    snapshot: FleetSnapshot,
    reference_date: Optional[date] = None
):
    """
    Evaluate a posted fleet snapshot without touching the store.
    Results keep input order (component order, then requirement order).
    """
    predictions = predict_fleet(snapshot.aircraft, snapshot.components, pinned(reference_date))
    logger.info(f"Evaluated snapshot: {len(predictions)} prediction(s)")
    return predictions

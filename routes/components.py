"""
Component Routes
Registration, ground usage updates and requirement sign-off
"""

from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from datetime import datetime
from typing import List
import logging
import uuid

from models.component import (
    Component,
    ComponentCreate,
    ComponentUpdate,
    GroundUsageUpdate,
    SignOffRequest
)
from services.fleet_service import sign_off, update_ground_usage
from database.mongodb import get_database

router = APIRouter(prefix="/api/components", tags=["components"])
logger = logging.getLogger(__name__)


def component_document(component: Component) -> dict:
    """Mongo document for a component (enums as values, requirement dates as ISO strings)"""
    doc = component.model_dump(by_alias=True, mode="json")
    # Timestamps stay BSON dates so the store can sort on them
    doc["created_at"] = component.created_at
    doc["updated_at"] = component.updated_at
    return doc


async def get_component_or_404(db: AsyncIOMotorDatabase, component_id: str) -> Component:
    doc = await db.components.find_one({"_id": component_id})
    if not doc:
        raise HTTPException(status_code=404, detail="Component not found")
    return Component(**doc)


async def ensure_aircraft_exists(db: AsyncIOMotorDatabase, aircraft_id):
    if aircraft_id is None:
        return
    aircraft = await db.aircrafts.find_one({"_id": aircraft_id})
    if not aircraft:
        raise HTTPException(status_code=404, detail="Aircraft not found")


@router.post("", response_model=Component, status_code=status.HTTP_201_CREATED)
async def create_component(
    data: ComponentCreate,
    db = Depends(get_database)
):
    """Register a component - ground counters start at zero"""
    await ensure_aircraft_exists(db, data.aircraft_id)

    now = datetime.utcnow()
    component = Component(
        _id=f"cmp-{uuid.uuid4().hex[:12]}",
        **data.model_dump(),
        created_at=now,
        updated_at=now
    )

    await db.components.insert_one(component_document(component))
    logger.info(
        f"Component {component.name} ({component.serial_number}) registered "
        f"{'on ' + component.aircraft_id if component.aircraft_id else 'in ground storage'}"
    )
    return component


@router.get("", response_model=List[Component])
async def list_components(
    db = Depends(get_database)
):
    """Get all components, installed and in storage"""
    docs = await db.components.find({}).sort("created_at", 1).to_list(length=1000)
    return [Component(**doc) for doc in docs]


@router.get("/{component_id}", response_model=Component)
async def get_component(
    component_id: str,
    db = Depends(get_database)
):
    return await get_component_or_404(db, component_id)


@router.put("/{component_id}", response_model=Component)
async def update_component(
    component_id: str,
    data: ComponentUpdate,
    db = Depends(get_database)
):
    """Update a component (aircraft_id = null moves it to ground storage)"""
    component = await get_component_or_404(db, component_id)

    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("aircraft_id") is not None:
        await ensure_aircraft_exists(db, update_data["aircraft_id"])

    update_data["updated_at"] = datetime.utcnow()
    updated = Component(**{**component.model_dump(by_alias=True), **update_data})

    await db.components.replace_one({"_id": component_id}, component_document(updated))
    logger.info(f"Component {component_id} updated")
    return updated


@router.delete("/{component_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_component(
    component_id: str,
    db = Depends(get_database)
):
    result = await db.components.delete_one({"_id": component_id})
    if result.deleted_count == 0:
        raise HTTPException(status_code=404, detail="Component not found")

    logger.info(f"Component {component_id} deleted")
    return None


@router.put("/{component_id}/ground-usage", response_model=Component)
async def update_component_ground_usage(
    component_id: str,
    usage: GroundUsageUpdate,
    db = Depends(get_database)
):
    """Manual counter update for a component in ground storage"""
    component = await get_component_or_404(db, component_id)

    try:
        updated = update_ground_usage(
            component,
            usage.current_fh,
            usage.current_oh,
            usage.current_cycles
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await db.components.update_one(
        {"_id": component_id},
        {"$set": {
            "current_fh": updated.current_fh,
            "current_oh": updated.current_oh,
            "current_cycles": updated.current_cycles,
            "updated_at": updated.updated_at
        }}
    )

    logger.info(f"Ground usage updated for component {component_id}")
    return updated


@router.post("/{component_id}/requirements/{requirement_id}/sign-off", response_model=Component)
async def sign_off_requirement(
    component_id: str,
    requirement_id: str,
    data: SignOffRequest,
    db = Depends(get_database)
):
    """Record maintenance sign-off - next due value/date is recalculated from the interval"""
    component = await get_component_or_404(db, component_id)

    try:
        updated = sign_off(component, requirement_id, data.completion_value)
    except KeyError:
        raise HTTPException(status_code=404, detail="Requirement not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    await db.components.replace_one({"_id": component_id}, component_document(updated))
    return updated

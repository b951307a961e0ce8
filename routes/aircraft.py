from fastapi import APIRouter, Depends, HTTPException, status
from motor.motor_asyncio import AsyncIOMotorDatabase
from database.mongodb import get_database
from models.aircraft import Aircraft, AircraftCreate, AircraftUpdate, AircraftUsageUpdate
from models.component import Component
from routes.components import component_document
from services.fleet_service import detach_components, update_aircraft_usage
from datetime import datetime
from typing import List
import logging
import uuid

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/aircraft", tags=["aircraft"])

def format_registration(registration: str) -> str:
    """Format registration to uppercase"""
    return registration.upper().strip()

async def get_aircraft_or_404(db: AsyncIOMotorDatabase, aircraft_id: str) -> Aircraft:
    aircraft_doc = await db.aircrafts.find_one({"_id": aircraft_id})
    if not aircraft_doc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Aircraft not found"
        )
    return Aircraft(**aircraft_doc)

@router.post("", response_model=Aircraft, status_code=status.HTTP_201_CREATED)
async def create_aircraft(
    aircraft: AircraftCreate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Register a new aircraft"""
    registration = format_registration(aircraft.registration)

    existing = await db.aircrafts.find_one({"registration": registration})
    if existing:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Aircraft with registration {registration} already exists"
        )

    now = datetime.utcnow()
    aircraft_dict = {
        "_id": f"ac-{uuid.uuid4().hex[:12]}",
        **aircraft.model_dump(mode="json"),
        "registration": registration,
        "created_at": now,
        "updated_at": now
    }

    await db.aircrafts.insert_one(aircraft_dict)
    logger.info(f"Aircraft {registration} registered")

    return Aircraft(**aircraft_dict)

@router.get("", response_model=List[Aircraft])
async def list_aircraft(
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get the whole fleet"""
    cursor = db.aircrafts.find({}).sort("registration", 1)
    aircraft_list = await cursor.to_list(length=500)
    return [Aircraft(**aircraft) for aircraft in aircraft_list]

@router.get("/{aircraft_id}", response_model=Aircraft)
async def get_aircraft(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Get a specific aircraft by ID"""
    return await get_aircraft_or_404(db, aircraft_id)

@router.put("/{aircraft_id}", response_model=Aircraft)
async def update_aircraft(
    aircraft_id: str,
    aircraft_update: AircraftUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Update identity, status or utilisation rates"""
    await get_aircraft_or_404(db, aircraft_id)

    update_data = aircraft_update.model_dump(exclude_unset=True, mode="json")

    if "registration" in update_data:
        update_data["registration"] = format_registration(update_data["registration"])

    if update_data:
        update_data["updated_at"] = datetime.utcnow()
        await db.aircrafts.update_one(
            {"_id": aircraft_id},
            {"$set": update_data}
        )

    logger.info(f"Aircraft {aircraft_id} updated")
    return await get_aircraft_or_404(db, aircraft_id)

@router.put("/{aircraft_id}/usage", response_model=Aircraft)
async def update_usage(
    aircraft_id: str,
    usage: AircraftUsageUpdate,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Manual counter update (flight hours, operating hours, cycles)"""
    aircraft = await get_aircraft_or_404(db, aircraft_id)

    updated = update_aircraft_usage(
        aircraft,
        usage.total_flight_hours,
        usage.total_operating_hours,
        usage.total_cycles
    )

    await db.aircrafts.update_one(
        {"_id": aircraft_id},
        {"$set": {
            "total_flight_hours": updated.total_flight_hours,
            "total_operating_hours": updated.total_operating_hours,
            "total_cycles": updated.total_cycles,
            "updated_at": updated.updated_at
        }}
    )

    logger.info(
        f"Aircraft {aircraft.registration} counters: "
        f"{updated.total_flight_hours} FH / {updated.total_operating_hours} OH / {updated.total_cycles} C"
    )
    return updated

@router.delete("/{aircraft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_aircraft(
    aircraft_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database)
):
    """Delete an aircraft - installed components move to ground storage"""
    result = await db.aircrafts.delete_one({"_id": aircraft_id})

    if result.deleted_count == 0:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Aircraft not found"
        )

    installed = await db.components.find({"aircraft_id": aircraft_id}).to_list(length=1000)
    for component in detach_components([Component(**doc) for doc in installed], aircraft_id):
        await db.components.replace_one(
            {"_id": component.id},
            component_document(component)
        )

    logger.info(f"Aircraft {aircraft_id} deleted")
    return None

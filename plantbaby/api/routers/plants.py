"""Plants router — CRUD, care logging, schedule and photos."""

import uuid

from fastapi import APIRouter, Depends, Request

from plantbaby.api.deps import get_plantbaby
from plantbaby.api.schemas import (
    CareEventResponse,
    CareLogRequest,
    CareLogResponse,
    PlantCreate,
    PlantMutationResponse,
    PlantResponse,
    PlantScheduleResponse,
    PlantUpdate,
    ScheduleEntry,
    StatusResponse,
)
from plantbaby.core.core import PlantBaby
from plantbaby.core.schedule import utcnow
from plantbaby.models.care import CareType
from plantbaby.models.plant import Plant

router = APIRouter()


def _plant_response(plant: Plant, plantbaby: PlantBaby) -> PlantResponse:
    """Convert a Plant to PlantResponse, resolving its display image."""
    return PlantResponse(**plant.model_dump(), image=plantbaby.images.resolve(plant))


def _mutation_response(plant: Plant, persisted: bool, plantbaby: PlantBaby) -> PlantMutationResponse:
    return PlantMutationResponse(plant=_plant_response(plant, plantbaby), persisted=persisted)


@router.post("", response_model=PlantMutationResponse, status_code=201)
def create_plant(
    body: PlantCreate,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Register a new plant."""
    attributes = body.model_dump(exclude={"name"}, exclude_none=True)
    plant, result = plantbaby.create_plant(body.name, **attributes)
    return _mutation_response(plant, result.persisted, plantbaby)


@router.get("", response_model=list[PlantResponse])
def list_plants(
    q: str = "",
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """List plants, optionally filtered by name or scientific name."""
    plants = plantbaby.repository.search(q) if q else plantbaby.repository.plants
    return [_plant_response(p, plantbaby) for p in plants]


@router.get("/{plant_id}", response_model=PlantResponse)
def get_plant(
    plant_id: uuid.UUID,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Get plant details."""
    return _plant_response(plantbaby.require_plant(plant_id), plantbaby)


@router.put("/{plant_id}", response_model=PlantMutationResponse)
def update_plant(
    plant_id: uuid.UUID,
    body: PlantUpdate,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Update plant details. Fields sent as null are cleared."""
    plant, result = plantbaby.edit_plant(plant_id, body.model_dump(exclude_unset=True))
    return _mutation_response(plant, result.persisted, plantbaby)


@router.delete("/{plant_id}", response_model=StatusResponse)
def delete_plant(
    plant_id: uuid.UUID,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Delete a plant and its care history."""
    result = plantbaby.delete_plant(plant_id)
    return StatusResponse(status="ok", message="Plant deleted", persisted=result.persisted)


@router.post("/{plant_id}/care", response_model=CareLogResponse, status_code=201)
def log_care(
    plant_id: uuid.UUID,
    body: CareLogRequest,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Log a care action, optionally setting the next care reminder."""
    plant, event, result = plantbaby.log_care(
        plant_id,
        body.type,
        date=body.date,
        note=body.note,
        next_care_date=body.next_care_date,
    )
    return CareLogResponse(
        event=CareEventResponse(**event.model_dump()),
        plant=_plant_response(plant, plantbaby),
        persisted=result.persisted,
    )


@router.get("/{plant_id}/schedule", response_model=PlantScheduleResponse)
def get_schedule(
    plant_id: uuid.UUID,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Stored reminder plus the per-type next due dates."""
    plant = plantbaby.require_plant(plant_id)
    now = utcnow()
    return PlantScheduleResponse(
        plant_id=plant.id,
        plant_name=plant.name,
        next_care_date=plant.next_care_date,
        entries=[
            ScheduleEntry(
                care_type=care_type,
                label=care_type.label,
                last_done=plant.last_care_date(care_type),
                next_due=plant.next_care_date_for(care_type),
                is_due=plant.is_due(care_type, now),
            )
            for care_type in CareType
        ],
    )


@router.put("/{plant_id}/image", response_model=PlantMutationResponse)
async def upload_image(
    plant_id: uuid.UUID,
    request: Request,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Store the request body as the plant's photo (any common image format)."""
    image_bytes = await request.body()
    plant, result = plantbaby.attach_image(plant_id, image_bytes)
    return _mutation_response(plant, result.persisted, plantbaby)

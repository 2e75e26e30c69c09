"""Statistics router — collection-wide counts and due plants."""

from fastapi import APIRouter, Depends

from plantbaby.api.deps import get_plantbaby
from plantbaby.api.schemas import DuePlantsResponse, PlantSummary
from plantbaby.core.core import PlantBaby
from plantbaby.core.repository import PlantStatistics
from plantbaby.models.care import CareType

router = APIRouter()


@router.get("", response_model=PlantStatistics)
def get_statistics(plantbaby: PlantBaby = Depends(get_plantbaby)):
    """Totals shown on the dashboard and statistics screens."""
    return plantbaby.repository.statistics()


@router.get("/due", response_model=DuePlantsResponse)
def get_due_plants(
    care_type: CareType = CareType.WATERING,
    plantbaby: PlantBaby = Depends(get_plantbaby),
):
    """Plants that need the given care now."""
    plants = plantbaby.repository.due_plants(care_type)
    return DuePlantsResponse(
        care_type=care_type,
        count=len(plants),
        plants=[
            PlantSummary(
                id=p.id,
                name=p.name,
                scientific_name=p.scientific_name,
                last_done=p.last_care_date(care_type),
                care_events=len(p.care_history),
            )
            for p in plants
        ],
    )

"""PlantBaby API — Pydantic request/response schemas."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from plantbaby.core.images import ImageRef
from plantbaby.models.care import CareType


# ── Plant schemas ─────────────────────────────────────────────────────────────

class PlantCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100, description="User-given plant name")
    scientific_name: str | None = None
    description: str | None = None
    age: str | None = None
    image_url: str | None = Field(None, description="Remote URL or bundled asset name")
    temp: str | None = None
    light: str | None = None
    humidity: str | None = None
    fertilizer: str | None = None
    notes: str | None = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class PlantUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    scientific_name: str | None = None
    description: str | None = None
    age: str | None = None
    image_url: str | None = None
    temp: str | None = None
    light: str | None = None
    humidity: str | None = None
    fertilizer: str | None = None
    notes: str | None = None
    next_care_date: datetime | None = None


class CareEventResponse(BaseModel):
    id: uuid.UUID
    type: CareType
    date: datetime
    note: str | None


class PlantResponse(BaseModel):
    id: uuid.UUID
    name: str
    scientific_name: str | None
    description: str | None
    age: str | None
    image_url: str | None
    image_path: str | None
    temp: str | None
    light: str | None
    humidity: str | None
    fertilizer: str | None
    notes: str | None
    care_history: list[CareEventResponse]
    next_care_date: datetime | None
    last_watered: datetime | None
    last_fertilized: datetime | None
    last_pruned: datetime | None
    last_repotted: datetime | None
    image: ImageRef


class PlantMutationResponse(BaseModel):
    plant: PlantResponse
    persisted: bool = Field(..., description="False when the change is only held in memory")


# ── Care schemas ──────────────────────────────────────────────────────────────

class CareLogRequest(BaseModel):
    type: CareType
    date: datetime | None = Field(None, description="When the care happened; defaults to now")
    note: str | None = None
    next_care_date: datetime | None = Field(None, description="Optional reminder for the next care")


class CareLogResponse(BaseModel):
    event: CareEventResponse
    plant: PlantResponse
    persisted: bool


class ScheduleEntry(BaseModel):
    care_type: CareType
    label: str
    last_done: datetime | None
    next_due: datetime | None
    is_due: bool


class PlantScheduleResponse(BaseModel):
    plant_id: uuid.UUID
    plant_name: str
    next_care_date: datetime | None = Field(
        None, description="The single reminder set when care was logged"
    )
    entries: list[ScheduleEntry]


# ── Statistics schemas ────────────────────────────────────────────────────────

class PlantSummary(BaseModel):
    id: uuid.UUID
    name: str
    scientific_name: str | None
    last_done: datetime | None
    care_events: int


class DuePlantsResponse(BaseModel):
    care_type: CareType
    count: int
    plants: list[PlantSummary]


# ── Identification schemas ────────────────────────────────────────────────────

class SimilarImageResponse(BaseModel):
    url: str
    similarity: float | None


class SuggestionResponse(BaseModel):
    id: int | str | None = None
    name: str
    probability: float = Field(..., ge=0.0, le=1.0)
    common_names: list[str] = []
    scientific_name: str | None = None
    description: str | None = None
    wiki_description: str | None = None
    similar_images: list[SimilarImageResponse] = []


# ── Generic response ──────────────────────────────────────────────────────────

class StatusResponse(BaseModel):
    status: str
    message: str | None = None
    persisted: bool | None = None

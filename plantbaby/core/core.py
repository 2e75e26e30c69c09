"""PlantBaby Core — wires storage, repository, images and identification together."""

import logging
import uuid
from datetime import datetime

from plantbaby.core.config import Settings
from plantbaby.core.errors import InvalidPlantError, PlantNotFoundError
from plantbaby.core.identification import PlantIdClient, Suggestion
from plantbaby.core.images import ImageStore
from plantbaby.core.repository import PlantRepository, WriteResult
from plantbaby.core.schedule import LastCarePolicy, utcnow
from plantbaby.core.storage import create_blob_store
from plantbaby.models.care import CareEvent, CareType
from plantbaby.models.plant import Plant

logger = logging.getLogger("plantbaby.core")


class PlantBaby:
    """One per process: owns the repository and its collaborators.

    The presentation layer goes through this object (or its repository) for
    every read and write; close() releases storage.
    """

    def __init__(self, settings: Settings, store=None):
        self.settings = settings
        self.store = store if store is not None else create_blob_store(settings)
        self.repository = PlantRepository(
            self.store,
            key=settings.storage_key,
            policy=LastCarePolicy(settings.care_date_policy),
        )
        self.images = ImageStore(settings.images_dir, quality=settings.image_jpeg_quality)
        self.identifier = PlantIdClient(settings)
        logger.info("PlantBaby initialized")

    def close(self) -> None:
        self.repository.close()
        logger.info("PlantBaby closed")

    def require_plant(self, plant_id: uuid.UUID) -> Plant:
        plant = self.repository.get(plant_id)
        if plant is None:
            raise PlantNotFoundError()
        return plant

    # ── Plant records ─────────────────────────────────────────────────────────

    @staticmethod
    def _clean_name(name: str | None) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidPlantError()
        return name

    def create_plant(self, name: str, **attributes) -> tuple[Plant, WriteResult]:
        """Create and store a plant; the name must not be blank."""
        plant = Plant(name=self._clean_name(name), **attributes)
        return plant, self.repository.add(plant)

    def edit_plant(self, plant_id: uuid.UUID, changes: dict) -> tuple[Plant, WriteResult]:
        """Apply descriptive attribute changes to a plant."""
        plant = self.require_plant(plant_id)
        if "name" in changes:
            changes = {**changes, "name": self._clean_name(changes["name"])}
        for key, value in changes.items():
            setattr(plant, key, value)
        return plant, self.repository.update(plant)

    def delete_plant(self, plant_id: uuid.UUID) -> WriteResult:
        return self.repository.delete(self.require_plant(plant_id))

    def log_care(
        self,
        plant_id: uuid.UUID,
        care_type: CareType,
        date: datetime | None = None,
        note: str | None = None,
        next_care_date: datetime | None = None,
    ) -> tuple[Plant, CareEvent, WriteResult]:
        """Record a care action and optionally set the plant's next care reminder."""
        plant = self.require_plant(plant_id)
        event = CareEvent(type=care_type, date=date or utcnow(), note=note or None)
        result = self.repository.add_care_event(event, plant, next_care_date=next_care_date)
        return self.require_plant(plant_id), event, result

    def attach_image(self, plant_id: uuid.UUID, image_bytes: bytes) -> tuple[Plant, WriteResult]:
        """Save a photo for the plant; it becomes the plant's image_path."""
        plant = self.require_plant(plant_id)
        plant.image_path = self.images.save(image_bytes, str(plant.id))
        return plant, self.repository.update(plant)

    # ── Identification ────────────────────────────────────────────────────────

    async def identify(self, image_bytes: bytes) -> list[Suggestion]:
        suggestions = await self.identifier.identify(image_bytes)
        return suggestions[: self.settings.identification_max_suggestions]

    def adopt_suggestion(
        self, suggestion: Suggestion, image_bytes: bytes | None = None
    ) -> tuple[Plant, WriteResult]:
        """Create a plant from an identification suggestion, keeping the photo if given."""
        name = self._clean_name(suggestion.name)
        plant = suggestion.to_plant()
        plant.name = name
        if image_bytes:
            plant.image_path = self.images.save(image_bytes, str(plant.id))
        return plant, self.repository.add(plant)

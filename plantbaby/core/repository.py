"""PlantBaby Repository — the plant collection, write-through persistence and statistics."""

import logging
import threading
import uuid
from collections import Counter
from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ValidationError

from plantbaby.core.errors import StorageError
from plantbaby.core.schedule import LastCarePolicy, utcnow
from plantbaby.models.care import CareEvent, CareType, as_utc
from plantbaby.models.plant import Plant, decode_plants, encode_plants

logger = logging.getLogger("plantbaby.repository")

DEFAULT_STORAGE_KEY = "SavedPlants"


@dataclass(frozen=True)
class WriteResult:
    """Outcome of a mutating call.

    applied: the in-memory collection changed.
    persisted: the collection was written to durable storage afterwards.
    """

    applied: bool
    persisted: bool
    error: str | None = None

    @property
    def durable(self) -> bool:
        return self.applied and self.persisted


NOT_APPLIED = WriteResult(applied=False, persisted=False)


class PlantStatistics(BaseModel):
    total_plants: int
    plants_needing_water: int
    plants_needing_fertilizer: int
    most_common_plant: str | None
    total_care_events: int


class PlantRepository:
    """Owns the canonical plant collection.

    Reads hand out deep copies; changes take effect only through add, update,
    delete or add_care_event. Every applied change rewrites the whole
    collection under one storage key. Calls are serialized by a lock so the
    repository can be shared between request threads.
    """

    def __init__(
        self,
        store,
        key: str = DEFAULT_STORAGE_KEY,
        policy: LastCarePolicy = LastCarePolicy.OVERWRITE,
    ):
        self.store = store
        self.key = key
        self.policy = policy
        self._lock = threading.RLock()
        self._plants: list[Plant] = []
        self.load()

    # ── Persistence ───────────────────────────────────────────────────────────

    def load(self) -> None:
        """Replace the collection with the stored one; fall back to empty."""
        with self._lock:
            try:
                data = self.store.read(self.key)
            except StorageError as e:
                logger.warning(f"Could not read plants, starting empty: {e}")
                data = None

            plants: list[Plant] = []
            if data:
                try:
                    plants = decode_plants(data)
                except (ValidationError, ValueError) as e:
                    logger.warning(f"Stored plants under {self.key!r} could not be decoded, starting empty: {e}")
            self._plants = plants
            logger.info(f"Loaded {len(self._plants)} plants")

    def _save(self) -> WriteResult:
        try:
            self.store.write(self.key, encode_plants(self._plants))
        except StorageError as e:
            logger.error(f"Plants changed in memory but were not persisted: {e}")
            return WriteResult(applied=True, persisted=False, error=e.message)
        return WriteResult(applied=True, persisted=True)

    def close(self) -> None:
        self.store.close()

    # ── Reads ─────────────────────────────────────────────────────────────────

    def _index_of(self, plant_id: uuid.UUID) -> int | None:
        for idx, plant in enumerate(self._plants):
            if plant.id == plant_id:
                return idx
        return None

    @property
    def plants(self) -> list[Plant]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._plants]

    def get(self, plant_id: uuid.UUID) -> Plant | None:
        with self._lock:
            idx = self._index_of(plant_id)
            return self._plants[idx].model_copy(deep=True) if idx is not None else None

    def search(self, query: str) -> list[Plant]:
        with self._lock:
            return [p.model_copy(deep=True) for p in self._plants if p.matches(query)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._plants)

    def __contains__(self, plant) -> bool:
        plant_id = plant.id if isinstance(plant, Plant) else plant
        with self._lock:
            return self._index_of(plant_id) is not None

    # ── Mutations ─────────────────────────────────────────────────────────────

    def add(self, plant: Plant) -> WriteResult:
        with self._lock:
            if self._index_of(plant.id) is not None:
                logger.warning(f"Plant {plant.id} is already in the collection — use update()")
                return NOT_APPLIED
            self._plants.append(plant.model_copy(deep=True))
            logger.info(f"Added plant: {plant.id} ({plant.name})")
            return self._save()

    def update(self, plant: Plant) -> WriteResult:
        with self._lock:
            idx = self._index_of(plant.id)
            if idx is None:
                return NOT_APPLIED
            self._plants[idx] = plant.model_copy(deep=True)
            return self._save()

    def delete(self, plant: Plant) -> WriteResult:
        with self._lock:
            idx = self._index_of(plant.id)
            if idx is None:
                return NOT_APPLIED
            del self._plants[idx]
            logger.info(f"Deleted plant: {plant.id} ({plant.name})")
            return self._save()

    def add_care_event(
        self,
        event: CareEvent,
        plant: Plant,
        next_care_date: datetime | None = None,
    ) -> WriteResult:
        """Append an event to the given plant and write it back.

        The caller's copy of the plant is the base, so other pending edits on
        it are saved too. Unknown plants are ignored.
        """
        with self._lock:
            idx = self._index_of(plant.id)
            if idx is None:
                return NOT_APPLIED
            updated = plant.model_copy(deep=True)
            updated.apply_care_event(event, self.policy)
            if next_care_date is not None:
                updated.next_care_date = next_care_date
            self._plants[idx] = updated
            logger.info(f"Logged {event.type.value} for plant {plant.id} at {event.date.isoformat()}")
            return self._save()

    # ── Statistics ────────────────────────────────────────────────────────────

    @property
    def total_plants(self) -> int:
        with self._lock:
            return len(self._plants)

    def due_plants(self, care_type: CareType, now: datetime | None = None) -> list[Plant]:
        """Plants that never had this care or whose interval has fully elapsed."""
        now = as_utc(now) if now is not None else utcnow()
        with self._lock:
            return [p.model_copy(deep=True) for p in self._plants if p.is_due(care_type, now)]

    def plants_needing_water(self, now: datetime | None = None) -> int:
        return len(self.due_plants(CareType.WATERING, now))

    def plants_needing_fertilizer(self, now: datetime | None = None) -> int:
        return len(self.due_plants(CareType.FERTILIZING, now))

    @property
    def most_common_plant(self) -> str | None:
        with self._lock:
            counts = Counter(p.name for p in self._plants)
        if not counts:
            return None
        # Counter keeps first-seen order, so ties go to the earliest name
        return counts.most_common(1)[0][0]

    @property
    def total_care_events(self) -> int:
        with self._lock:
            return sum(len(p.care_history) for p in self._plants)

    def statistics(self, now: datetime | None = None) -> PlantStatistics:
        now = as_utc(now) if now is not None else utcnow()
        with self._lock:
            return PlantStatistics(
                total_plants=self.total_plants,
                plants_needing_water=self.plants_needing_water(now),
                plants_needing_fertilizer=self.plants_needing_fertilizer(now),
                most_common_plant=self.most_common_plant,
                total_care_events=self.total_care_events,
            )

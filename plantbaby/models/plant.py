"""Plant model — descriptive attributes, care history and schedule derivations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from plantbaby.core.schedule import (
    LAST_CARE_FIELDS,
    LastCarePolicy,
    is_due,
    next_due,
    refresh_last_care,
)
from plantbaby.models.care import CareEvent, CareType, as_utc


class Plant(BaseModel):
    """A tracked houseplant.

    Stored with camelCase keys; constructed and read in Python with snake_case.
    The last_* fields cache the latest date per care type and are written only
    through apply_care_event / record_care.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
    )

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    name: str
    scientific_name: str | None = None
    description: str | None = None
    age: str | None = None
    image_url: str | None = None
    image_path: str | None = None
    temp: str | None = None
    light: str | None = None
    humidity: str | None = None
    fertilizer: str | None = None
    notes: str | None = None
    care_history: list[CareEvent] = Field(default_factory=list)
    next_care_date: datetime | None = None
    last_watered: datetime | None = None
    last_fertilized: datetime | None = None
    last_pruned: datetime | None = None
    last_repotted: datetime | None = None

    @field_validator(
        "next_care_date", "last_watered", "last_fertilized", "last_pruned", "last_repotted"
    )
    @classmethod
    def _normalize_dates(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    def last_care_date(self, care_type: CareType) -> datetime | None:
        return getattr(self, LAST_CARE_FIELDS[care_type])

    def next_care_date_for(self, care_type: CareType) -> datetime | None:
        """Per-type projection: last care of this type plus its interval.

        Independent of the stored next_care_date field, which is a single
        caller-chosen reminder.
        """
        return next_due(self.last_care_date(care_type), care_type)

    def is_due(self, care_type: CareType, now: datetime | None = None) -> bool:
        return is_due(self.last_care_date(care_type), care_type, now)

    def apply_care_event(
        self, event: CareEvent, policy: LastCarePolicy = LastCarePolicy.OVERWRITE
    ) -> None:
        self.care_history.append(event)
        refresh_last_care(self, event, policy)

    def record_care(
        self,
        care_type: CareType,
        date: datetime,
        note: str | None = None,
        policy: LastCarePolicy = LastCarePolicy.OVERWRITE,
    ) -> CareEvent:
        """Append a new care event and refresh the matching last-care date."""
        event = CareEvent(type=care_type, date=date, note=note)
        self.apply_care_event(event, policy)
        return event

    def matches(self, query: str) -> bool:
        """Case-insensitive search on name and scientific name."""
        if not query:
            return True
        needle = query.casefold()
        if needle in self.name.casefold():
            return True
        return bool(self.scientific_name) and needle in self.scientific_name.casefold()

    def __repr__(self) -> str:
        return f"<Plant {self.name!r} id={self.id} events={len(self.care_history)}>"


_PLANT_LIST = TypeAdapter(list[Plant])


def encode_plants(plants: list[Plant]) -> bytes:
    """Serialize a plant collection to the stored JSON array."""
    return _PLANT_LIST.dump_json(plants, by_alias=True, exclude_none=True)


def decode_plants(data: bytes | str) -> list[Plant]:
    """Parse a stored JSON array. Raises pydantic.ValidationError on bad input."""
    return _PLANT_LIST.validate_json(data)

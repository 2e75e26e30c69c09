"""Care models — CareType and CareEvent."""

import uuid
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CareType(str, Enum):
    WATERING = "watering"
    FERTILIZING = "fertilizing"
    PRUNING = "pruning"
    REPOTTING = "repotting"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def as_utc(value: datetime) -> datetime:
    """Return a tz-aware UTC datetime. Naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CareEvent(BaseModel):
    """One care action performed on one plant. Immutable; identity is the id."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    type: CareType
    date: datetime
    note: str | None = None

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return as_utc(value)

    def __eq__(self, other) -> bool:
        if isinstance(other, CareEvent):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<CareEvent {self.type.value!r} at {self.date.isoformat()} id={self.id}>"

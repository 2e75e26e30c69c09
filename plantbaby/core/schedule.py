"""PlantBaby care scheduling — intervals, next-due arithmetic and the last-care cache."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING

from dateutil.relativedelta import relativedelta

from plantbaby.models.care import CareEvent, CareType, as_utc

if TYPE_CHECKING:
    from plantbaby.models.plant import Plant

logger = logging.getLogger("plantbaby.schedule")

# Calendar intervals: month/year steps clamp to the end of shorter months
CARE_INTERVALS: dict[CareType, relativedelta] = {
    CareType.WATERING: relativedelta(days=7),
    CareType.FERTILIZING: relativedelta(months=1),
    CareType.PRUNING: relativedelta(months=3),
    CareType.REPOTTING: relativedelta(years=1),
}

LAST_CARE_FIELDS: dict[CareType, str] = {
    CareType.WATERING: "last_watered",
    CareType.FERTILIZING: "last_fertilized",
    CareType.PRUNING: "last_pruned",
    CareType.REPOTTING: "last_repotted",
}


class LastCarePolicy(str, Enum):
    """How a new event updates the cached last-care date.

    OVERWRITE: always take the event date, even when it is older than the
    cached value (backdated entries move the date backwards).
    LATEST: keep whichever date is more recent.
    """

    OVERWRITE = "overwrite"
    LATEST = "latest"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def next_due(last: datetime | None, care_type: CareType) -> datetime | None:
    """Return the date the next care of this type is due, or None if never done."""
    if last is None:
        return None
    return as_utc(last) + CARE_INTERVALS[care_type]


def is_due(last: datetime | None, care_type: CareType, now: datetime | None = None) -> bool:
    """A plant needs care when it never had it or a full interval has elapsed."""
    if last is None:
        return True
    now = as_utc(now) if now is not None else utcnow()
    return now >= next_due(last, care_type)


def refresh_last_care(
    plant: "Plant",
    event: CareEvent,
    policy: LastCarePolicy = LastCarePolicy.OVERWRITE,
) -> None:
    """Update the plant's cached last-care date for the event's type.

    This is the only place the last_* fields are written after creation.
    """
    field = LAST_CARE_FIELDS[event.type]
    current = getattr(plant, field)
    if policy == LastCarePolicy.LATEST and current is not None and current >= event.date:
        return
    if current is not None and event.date < current:
        logger.debug(f"Backdated {event.type.value} event overwrites {field} for plant {plant.id}")
    setattr(plant, field, event.date)

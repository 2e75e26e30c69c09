"""Models package — storage tables and care records.

Plant lives in plantbaby.models.plant and is imported from there; it depends
on the scheduling rules in plantbaby.core.schedule, which in turn import the
care records below.
"""

from plantbaby.models.base import Base, create_session_factory
from plantbaby.models.blob import StoredBlob
from plantbaby.models.care import CareEvent, CareType

__all__ = ["Base", "create_session_factory", "StoredBlob", "CareEvent", "CareType"]

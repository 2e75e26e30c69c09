"""PlantBaby Storage — durable key-value blob stores."""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from plantbaby.core.config import Settings
from plantbaby.core.errors import StorageError
from plantbaby.models.base import Base, create_session_factory
from plantbaby.models.blob import StoredBlob

logger = logging.getLogger("plantbaby.storage")

MEMORY_URL = "memory://"


class SqlBlobStore:
    """Blob store backed by a single SQLAlchemy table.

    All database access goes through this class; SQLAlchemy errors leave it
    as StorageError.
    """

    def __init__(self, session_factory, engine=None):
        self.session_factory = session_factory
        self.engine = engine

    def _session(self) -> Session:
        return self.session_factory()

    def read(self, key: str) -> bytes | None:
        try:
            with self._session() as session:
                blob = session.get(StoredBlob, key)
                return bytes(blob.value) if blob else None
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read {key!r}: {e}") from e

    def write(self, key: str, data: bytes) -> None:
        try:
            with self._session() as session:
                blob = session.get(StoredBlob, key)
                if blob:
                    blob.value = data
                    blob.updated_at = datetime.now(timezone.utc)
                else:
                    session.add(StoredBlob(key=key, value=data))
                session.commit()
        except SQLAlchemyError as e:
            raise StorageError(f"Could not write {key!r}: {e}") from e
        logger.debug(f"Stored {len(data)} bytes under {key!r}")

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


class MemoryBlobStore:
    """Process-local blob store. Nothing survives a restart."""

    def __init__(self):
        self._blobs: dict[str, bytes] = {}

    def read(self, key: str) -> bytes | None:
        return self._blobs.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._blobs[key] = bytes(data)

    def close(self) -> None:
        self._blobs.clear()


class UnavailableBlobStore:
    """Stand-in used when storage could not be opened.

    Every read and write fails with StorageError, so the repository starts
    empty and reports each change as not persisted.
    """

    def __init__(self, reason: str):
        self.reason = reason

    def read(self, key: str) -> bytes | None:
        raise StorageError(self.reason)

    def write(self, key: str, data: bytes) -> None:
        raise StorageError(self.reason)

    def close(self) -> None:
        pass


def create_blob_store(settings: Settings) -> SqlBlobStore | MemoryBlobStore | UnavailableBlobStore:
    """Open the blob store named by settings.storage_url.

    A store that cannot be opened is logged and replaced by an
    UnavailableBlobStore; startup does not fail.
    """
    if settings.storage_url == MEMORY_URL:
        logger.info("Using in-memory storage — data will not be persisted")
        return MemoryBlobStore()

    engine = None
    try:
        engine, SessionFactory = create_session_factory(settings.storage_url)
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        if engine is not None:
            engine.dispose()
        logger.warning(f"Could not initialize storage, changes will not be persisted: {e}")
        return UnavailableBlobStore(f"Could not initialize storage: {e}")
    logger.info(f"Storage initialized at {engine.url.render_as_string(hide_password=True)}")
    return SqlBlobStore(SessionFactory, engine)

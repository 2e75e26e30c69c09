import io
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from plantbaby.api.main import create_app
from plantbaby.core.config import Settings
from plantbaby.core.repository import PlantRepository
from plantbaby.core.storage import MemoryBlobStore


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings isolated from the developer's environment and disk."""
    return Settings(
        _env_file=None,
        storage_url="memory://",
        images_dir=str(tmp_path / "images"),
        plant_id_api_key="test-key",
        plant_id_endpoint="https://plant.test/v2/identify",
    )


@pytest.fixture
def store() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def repository(store: MemoryBlobStore) -> PlantRepository:
    return PlantRepository(store)


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGBA", (8, 8), (0, 128, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    """TestClient bound to an app using in-memory storage."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client

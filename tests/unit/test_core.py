from datetime import datetime, timedelta, timezone

import pytest

from plantbaby.core.core import PlantBaby
from plantbaby.core.errors import InvalidPlantError, PlantNotFoundError
from plantbaby.core.identification import Suggestion
from plantbaby.models.care import CareType

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def plantbaby(settings):
    pb = PlantBaby(settings)
    yield pb
    pb.close()


class FakeIdentifier:
    def __init__(self, suggestions):
        self.suggestions = suggestions

    async def identify(self, image_bytes):
        return self.suggestions


def test_create_plant_trims_name(plantbaby):
    plant, result = plantbaby.create_plant("  Fern  ", light="low")
    assert result.durable
    assert plant.name == "Fern"
    assert plantbaby.require_plant(plant.id).light == "low"


@pytest.mark.parametrize("name", ["", "   ", None])
def test_create_plant_rejects_blank_name(plantbaby, name):
    with pytest.raises(InvalidPlantError):
        plantbaby.create_plant(name)
    assert plantbaby.repository.total_plants == 0


def test_edit_plant(plantbaby):
    plant, _ = plantbaby.create_plant("Fern")
    edited, result = plantbaby.edit_plant(plant.id, {"name": " Boston fern ", "humidity": "high"})
    assert result.durable
    assert edited.name == "Boston fern"
    assert plantbaby.require_plant(plant.id).humidity == "high"


def test_edit_plant_rejects_blank_name(plantbaby):
    plant, _ = plantbaby.create_plant("Fern")
    with pytest.raises(InvalidPlantError):
        plantbaby.edit_plant(plant.id, {"name": " "})
    assert plantbaby.require_plant(plant.id).name == "Fern"


def test_unknown_plant_raises(plantbaby):
    plant, _ = plantbaby.create_plant("Fern")
    plantbaby.delete_plant(plant.id)
    with pytest.raises(PlantNotFoundError):
        plantbaby.require_plant(plant.id)
    with pytest.raises(PlantNotFoundError):
        plantbaby.log_care(plant.id, CareType.WATERING)


def test_log_care(plantbaby):
    plant, _ = plantbaby.create_plant("Fern")
    reminder = NOW + timedelta(days=6)

    stored, event, result = plantbaby.log_care(
        plant.id, CareType.FERTILIZING, date=NOW, note="half strength", next_care_date=reminder
    )

    assert result.durable
    assert event.note == "half strength"
    assert stored.care_history == [event]
    assert stored.last_fertilized == NOW
    assert stored.next_care_date == reminder


def test_log_care_defaults_to_now(plantbaby):
    plant, _ = plantbaby.create_plant("Fern")
    _, event, _ = plantbaby.log_care(plant.id, CareType.WATERING, note="")
    assert event.note is None
    assert datetime.now(timezone.utc) - event.date < timedelta(minutes=1)


def test_latest_policy_from_settings(settings):
    pb = PlantBaby(settings.model_copy(update={"care_date_policy": "latest"}))
    try:
        plant, _ = pb.create_plant("Fern")
        pb.log_care(plant.id, CareType.WATERING, date=NOW)
        stored, _, _ = pb.log_care(plant.id, CareType.WATERING, date=NOW - timedelta(days=2))
        assert stored.last_watered == NOW
    finally:
        pb.close()


def test_attach_image(plantbaby, png_bytes):
    plant, _ = plantbaby.create_plant("Fern")
    stored, result = plantbaby.attach_image(plant.id, png_bytes)
    assert result.durable
    assert stored.image_path.startswith(f"{plant.id}-")
    assert plantbaby.images.path_for(stored.image_path).is_file()


@pytest.mark.asyncio
async def test_identify_keeps_best_suggestions(plantbaby, png_bytes):
    plantbaby.identifier = FakeIdentifier(
        [Suggestion(name=f"Plant {i}", probability=0.1) for i in range(5)]
    )
    suggestions = await plantbaby.identify(png_bytes)
    assert [s.name for s in suggestions] == ["Plant 0", "Plant 1", "Plant 2"]


def test_adopt_suggestion_with_photo(plantbaby, png_bytes):
    suggestion = Suggestion(
        name="Monstera deliciosa",
        probability=0.9,
        details={"scientific_name": "Monstera deliciosa"},
    )
    plant, result = plantbaby.adopt_suggestion(suggestion, png_bytes)

    assert result.durable
    stored = plantbaby.require_plant(plant.id)
    assert stored.scientific_name == "Monstera deliciosa"
    assert plantbaby.images.path_for(stored.image_path).is_file()


def test_adopt_suggestion_without_photo(plantbaby):
    plant, _ = plantbaby.adopt_suggestion(Suggestion(name="Fern", probability=0.5))
    assert plantbaby.require_plant(plant.id).image_path is None


@pytest.mark.parametrize("name", ["", "   "])
def test_adopt_blank_suggestion_saves_no_photo(plantbaby, png_bytes, name):
    with pytest.raises(InvalidPlantError):
        plantbaby.adopt_suggestion(Suggestion(name=name, probability=0.5), png_bytes)
    assert plantbaby.repository.total_plants == 0
    assert not plantbaby.images.images_dir.exists()

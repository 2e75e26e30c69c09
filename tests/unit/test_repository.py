import json
import threading
from datetime import datetime, timedelta, timezone

from hypothesis import given, settings as hypothesis_settings, strategies as st

from plantbaby.core.errors import StorageError
from plantbaby.core.repository import PlantRepository
from plantbaby.core.schedule import LastCarePolicy, utcnow
from plantbaby.core.storage import MemoryBlobStore
from plantbaby.models.care import CareEvent, CareType
from plantbaby.models.plant import Plant

NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)


class WriteFailingStore(MemoryBlobStore):
    def write(self, key, data):
        raise StorageError("disk full")


class ReadFailingStore(MemoryBlobStore):
    def read(self, key):
        raise StorageError("disk gone")


def test_empty_repository(repository):
    assert repository.plants == []
    assert repository.total_plants == 0
    assert repository.most_common_plant is None
    assert repository.total_care_events == 0
    assert repository.plants_needing_water(NOW) == 0


def test_watering_a_new_fern(repository):
    fern = Plant(name="Fern")
    assert repository.add(fern).durable
    assert repository.total_plants == 1
    assert repository.plants_needing_water() == 1

    now = utcnow()
    result = repository.add_care_event(CareEvent(type=CareType.WATERING, date=now), fern)
    assert result.durable
    assert repository.plants_needing_water(now) == 0
    stored = repository.get(fern.id)
    assert stored.last_watered == now
    assert len(stored.care_history) == 1


def test_most_common_plant(repository):
    for name in ["Monstera", "Monstera", "Fern"]:
        repository.add(Plant(name=name))
    assert repository.most_common_plant == "Monstera"


def test_most_common_plant_tie_goes_to_first_seen(repository):
    for name in ["Fern", "Monstera", "Monstera", "Fern"]:
        repository.add(Plant(name=name))
    assert repository.most_common_plant == "Fern"


def test_delete_unknown_plant_is_a_no_op(repository, store):
    repository.add(Plant(name="Fern"))
    before = store.read(repository.key)

    result = repository.delete(Plant(name="Stranger"))

    assert not result.applied
    assert not result.persisted
    assert repository.total_plants == 1
    assert store.read(repository.key) == before


def test_update_unknown_plant_is_a_no_op(repository, store):
    result = repository.update(Plant(name="Stranger"))
    assert not result.applied
    assert repository.total_plants == 0
    assert store.read(repository.key) is None


def test_add_care_event_for_unknown_plant_is_a_no_op(repository):
    result = repository.add_care_event(CareEvent(type=CareType.PRUNING, date=NOW), Plant(name="Stranger"))
    assert not result.applied
    assert repository.total_care_events == 0


def test_add_rejects_duplicate_id(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    assert not repository.add(fern).applied
    assert repository.total_plants == 1


def test_update_replaces_stored_plant(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    fern.notes = "north window"
    assert repository.update(fern).durable
    assert repository.get(fern.id).notes == "north window"


def test_delete_removes_plant(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    assert repository.delete(fern).durable
    assert fern not in repository
    assert repository.get(fern.id) is None


def test_reads_return_copies(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    fern.name = "Changed before update"

    copy = repository.get(fern.id)
    copy.name = "Also changed"
    repository.plants[0].care_history.append(CareEvent(type=CareType.WATERING, date=NOW))

    stored = repository.get(fern.id)
    assert stored.name == "Fern"
    assert stored.care_history == []


def test_add_care_event_sets_next_care_date(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    reminder = NOW + timedelta(days=5)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW), fern, next_care_date=reminder)
    assert repository.get(fern.id).next_care_date == reminder


def test_add_care_event_keeps_pending_edits_on_working_copy(repository):
    fern = Plant(name="Fern")
    repository.add(fern)
    fern.light = "bright indirect"
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW), fern)
    assert repository.get(fern.id).light == "bright indirect"


def test_latest_policy_repository(store):
    repository = PlantRepository(store, policy=LastCarePolicy.LATEST)
    fern = Plant(name="Fern")
    repository.add(fern)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW), fern)
    fern = repository.get(fern.id)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW - timedelta(days=3)), fern)
    stored = repository.get(fern.id)
    assert stored.last_watered == NOW
    assert len(stored.care_history) == 2


def test_collection_survives_reload(repository, store):
    fern = Plant(name="Fern", scientific_name="Nephrolepis exaltata", humidity="high")
    monstera = Plant(name="Monstera", next_care_date=NOW + timedelta(days=1))
    repository.add(fern)
    repository.add(monstera)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW, note="soak"), fern)
    repository.add_care_event(CareEvent(type=CareType.REPOTTING, date=NOW - timedelta(days=40)), monstera)

    reloaded = PlantRepository(store)

    assert [p.model_dump() for p in reloaded.plants] == [p.model_dump() for p in repository.plants]
    restored = reloaded.get(fern.id)
    assert restored.care_history[0].note == "soak"
    assert restored.last_watered == NOW
    assert reloaded.get(monstera.id).next_care_date == NOW + timedelta(days=1)


def test_stored_document_uses_camel_case_and_omits_absent_fields(repository, store):
    fern = Plant(name="Fern")
    repository.add(fern)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW), fern)

    document = json.loads(store.read("SavedPlants"))

    assert isinstance(document, list)
    entry = document[0]
    assert entry["name"] == "Fern"
    assert entry["id"] == str(fern.id)
    assert "lastWatered" in entry
    assert entry["careHistory"][0]["type"] == "watering"
    assert "scientificName" not in entry
    assert "lastFertilized" not in entry


def test_snake_case_documents_are_accepted(store):
    store.write(
        "SavedPlants",
        json.dumps(
            [{"id": "6f1c2b9e-3a41-4c7e-9a55-0d9a3b7c1e11", "name": "Fern", "care_history": [], "last_watered": "2024-06-01T00:00:00Z"}]
        ).encode(),
    )
    repository = PlantRepository(store)
    assert repository.plants[0].last_watered == datetime(2024, 6, 1, tzinfo=timezone.utc)


def test_corrupt_document_loads_as_empty(store):
    store.write("SavedPlants", b"not json at all")
    assert PlantRepository(store).plants == []


def test_wrong_shape_loads_as_empty(store):
    store.write("SavedPlants", b'{"plants": 1}')
    assert PlantRepository(store).plants == []


def test_unreadable_store_loads_as_empty():
    assert PlantRepository(ReadFailingStore()).plants == []


def test_write_failure_is_reported_and_memory_keeps_change():
    repository = PlantRepository(WriteFailingStore())
    fern = Plant(name="Fern")

    result = repository.add(fern)

    assert result.applied
    assert not result.persisted
    assert not result.durable
    assert "disk full" in result.error
    assert fern in repository


def test_due_plants_and_statistics(repository):
    fern = Plant(name="Fern")
    cactus = Plant(name="Cactus")
    repository.add(fern)
    repository.add(cactus)
    repository.add_care_event(CareEvent(type=CareType.WATERING, date=NOW - timedelta(days=1)), fern)
    repository.add_care_event(CareEvent(type=CareType.FERTILIZING, date=NOW - timedelta(days=10)), cactus)

    assert [p.name for p in repository.due_plants(CareType.WATERING, NOW)] == ["Cactus"]
    stats = repository.statistics(NOW)
    assert stats.total_plants == 2
    assert stats.plants_needing_water == 1
    assert stats.plants_needing_fertilizer == 1
    assert stats.total_care_events == 2
    assert stats.most_common_plant == "Fern"


def test_search(repository):
    repository.add(Plant(name="Monstera", scientific_name="Monstera deliciosa"))
    repository.add(Plant(name="Fern"))
    assert [p.name for p in repository.search("DELIC")] == ["Monstera"]
    assert len(repository.search("")) == 2


operations = st.lists(
    st.tuples(
        st.sampled_from(["add", "update", "delete", "care"]),
        st.integers(min_value=0, max_value=5),
        st.sampled_from(list(CareType)),
    ),
    max_size=30,
)


@hypothesis_settings(max_examples=50, deadline=None)
@given(operations)
def test_total_care_events_matches_histories(ops):
    repository = PlantRepository(MemoryBlobStore())
    for op, idx, care_type in ops:
        plants = repository.plants
        target = plants[idx % len(plants)] if plants else Plant(name=f"plant-{idx}")
        if op == "add":
            repository.add(Plant(name=f"plant-{idx}"))
        elif op == "update":
            target.care_history.append(CareEvent(type=care_type, date=NOW))
            repository.update(target)
        elif op == "delete":
            repository.delete(target)
        else:
            repository.add_care_event(CareEvent(type=care_type, date=NOW), target)
        assert repository.total_care_events == sum(len(p.care_history) for p in repository.plants)


def test_length_reads_wait_for_lock(repository):
    repository.add(Plant(name="Fern"))
    results = []

    def read_lengths():
        results.append((len(repository), repository.total_plants))

    with repository._lock:
        reader = threading.Thread(target=read_lengths)
        reader.start()
        reader.join(timeout=0.2)
        assert reader.is_alive()
        repository._plants.append(Plant(name="Monstera"))
    reader.join(timeout=5)

    assert results == [(2, 2)]

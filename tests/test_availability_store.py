from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

import pytest

from inkbook.domain.errors import StorageError
from inkbook.domain.models import TimeSlot
from inkbook.repository.data_repository import DataRepository
from inkbook.repository.memory_repository import InMemoryRepository
from inkbook.utils.config import get_settings


ALL_SLOTS = (TimeSlot.MORNING, TimeSlot.AFTERNOON, TimeSlot.EVENING)


def _build_test_settings(tmp_path, filename: str):
    return replace(get_settings(), database_path=tmp_path / filename)


@pytest.fixture(params=["sqlite", "memory"])
def repository(request, tmp_path):
    if request.param == "sqlite":
        repo = DataRepository(_build_test_settings(tmp_path, "availability.db"))
    else:
        repo = InMemoryRepository()
    repo.initialize_database()
    return repo


def _available_slots(repository, date: str) -> set[TimeSlot]:
    return {
        record.time_slot
        for record in repository.list_availability_for_date(date)
        if record.is_available
    }


def test_set_then_read_returns_single_record(repository):
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, True)

    records = repository.list_availability()

    assert len(records) == 1
    assert records[0].date == "2025-06-01"
    assert records[0].time_slot is TimeSlot.MORNING
    assert records[0].is_available is True


def test_repeated_upserts_update_the_first_record(repository):
    first = repository.upsert_availability("2025-06-01", TimeSlot.EVENING, True)
    for flag in (False, True, False):
        latest = repository.upsert_availability("2025-06-01", TimeSlot.EVENING, flag)
        assert latest.availability_id == first.availability_id

    records = repository.list_availability()
    assert len(records) == 1
    assert records[0].is_available is False


def test_same_slot_on_different_dates_are_separate_records(repository):
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, True)
    repository.upsert_availability("2025-06-02", TimeSlot.MORNING, True)

    assert len(repository.list_availability()) == 2


def test_list_is_ordered_by_date_then_time_of_day(repository):
    repository.upsert_availability("2025-06-02", TimeSlot.MORNING, True)
    repository.upsert_availability("2025-06-01", TimeSlot.EVENING, True)
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, False)

    keys = [(record.date, record.time_slot) for record in repository.list_availability()]

    assert keys == [
        ("2025-06-01", TimeSlot.MORNING),
        ("2025-06-01", TimeSlot.EVENING),
        ("2025-06-02", TimeSlot.MORNING),
    ]


def test_replace_leaves_exactly_the_selection_available(repository):
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, True)
    repository.upsert_availability("2025-06-01", TimeSlot.AFTERNOON, True)
    repository.upsert_availability("2025-06-01", TimeSlot.EVENING, False)

    records = repository.replace_availability_for_date(
        "2025-06-01",
        [TimeSlot.AFTERNOON, TimeSlot.EVENING],
    )

    state = {record.time_slot: record.is_available for record in records}
    assert state == {
        TimeSlot.MORNING: False,
        TimeSlot.AFTERNOON: True,
        TimeSlot.EVENING: True,
    }


@pytest.mark.parametrize(
    "prior",
    [(), (TimeSlot.MORNING,), (TimeSlot.MORNING, TimeSlot.EVENING), ALL_SLOTS],
)
@pytest.mark.parametrize(
    "selection",
    [(), (TimeSlot.AFTERNOON,), (TimeSlot.MORNING, TimeSlot.AFTERNOON), ALL_SLOTS],
)
def test_replace_result_is_independent_of_prior_state(repository, prior, selection):
    for slot in prior:
        repository.upsert_availability("2025-06-01", slot, True)

    repository.replace_availability_for_date("2025-06-01", selection)

    assert _available_slots(repository, "2025-06-01") == set(selection)


def test_replace_with_empty_selection_clears_the_date(repository):
    for slot in ALL_SLOTS:
        repository.upsert_availability("2025-06-01", slot, True)

    repository.replace_availability_for_date("2025-06-01", [])

    assert _available_slots(repository, "2025-06-01") == set()
    assert len(repository.list_availability()) == 3


def test_replace_twice_matches_replace_once(repository):
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, True)
    once = repository.replace_availability_for_date("2025-06-01", [TimeSlot.EVENING])
    twice = repository.replace_availability_for_date("2025-06-01", [TimeSlot.EVENING])

    assert once == twice
    assert repository.list_availability() == twice


def test_replace_does_not_touch_other_dates(repository):
    repository.upsert_availability("2025-06-02", TimeSlot.MORNING, True)

    repository.replace_availability_for_date("2025-06-01", [TimeSlot.EVENING])

    assert _available_slots(repository, "2025-06-02") == {TimeSlot.MORNING}


def test_replace_failure_midway_rolls_back_every_write(repository, monkeypatch):
    repository.upsert_availability("2025-06-01", TimeSlot.MORNING, True)
    repository.upsert_availability("2025-06-01", TimeSlot.AFTERNOON, True)
    before = repository.list_availability()

    original_write = repository._write_slot
    calls = {"count": 0}

    def flaky_write(*args):
        calls["count"] += 1
        if calls["count"] == 2:
            raise StorageError("simulated write failure")
        return original_write(*args)

    monkeypatch.setattr(repository, "_write_slot", flaky_write)

    with pytest.raises(StorageError):
        repository.replace_availability_for_date("2025-06-01", [TimeSlot.EVENING])

    assert calls["count"] == 2
    assert repository.list_availability() == before


def test_concurrent_upserts_never_duplicate_a_pair(repository):
    def write(flag: bool):
        return repository.upsert_availability("2025-06-01", TimeSlot.AFTERNOON, flag)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(write, [index % 2 == 0 for index in range(40)]))

    assert len({record.availability_id for record in results}) == 1
    assert len(repository.list_availability()) == 1


def test_concurrent_replaces_end_in_one_callers_selection(repository):
    selections = [
        (TimeSlot.MORNING,),
        (TimeSlot.AFTERNOON, TimeSlot.EVENING),
        ALL_SLOTS,
        (),
    ]

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(
            pool.map(
                lambda selection: repository.replace_availability_for_date(
                    "2025-06-01",
                    selection,
                ),
                selections * 5,
            )
        )

    assert _available_slots(repository, "2025-06-01") in [set(item) for item in selections]


def test_sqlite_state_survives_a_new_repository_instance(tmp_path):
    settings = _build_test_settings(tmp_path, "durable.db")
    first = DataRepository(settings)
    first.initialize_database()
    first.upsert_availability("2025-06-01", TimeSlot.MORNING, True)

    second = DataRepository(settings)
    second.initialize_database()

    assert [record.time_slot for record in second.list_availability()] == [TimeSlot.MORNING]


def test_sqlite_unreachable_database_raises_storage_error(tmp_path):
    # A directory cannot be opened as a database file.
    repository = DataRepository(replace(get_settings(), database_path=tmp_path))

    with pytest.raises(StorageError):
        repository.list_availability()

import threading
from datetime import datetime, timezone

import pytest

from app.errors import DuplicateFileId, FileNotFound
from app.models.file_record import FileRecord
from app.services.file_registry import FileRegistry
from app.utils.naming import generate_file_id


def make_record(name="a.txt", size=5, file_id=None):
    return FileRecord(
        id=file_id or generate_file_id(),
        name=name,
        size=size,
        type="text/plain",
        upload_date=datetime.now(timezone.utc),
        storage_key=f"1-1-{name}",
    )


def test_insert_returns_total_and_get_finds_record():
    registry = FileRegistry()
    record = make_record()

    assert registry.insert(record) == 1
    assert registry.insert(make_record("b.txt")) == 2
    assert registry.get(record.id) is record
    assert record.id in registry


def test_list_keeps_insertion_order():
    registry = FileRegistry()
    records = [make_record(f"{i}.txt") for i in range(5)]
    for record in records:
        registry.insert(record)

    assert [r.name for r in registry.list()] == [f"{i}.txt" for i in range(5)]


def test_list_is_a_snapshot():
    registry = FileRegistry()
    registry.insert(make_record("first.txt"))

    snapshot = registry.list()
    registry.insert(make_record("second.txt"))
    registry.clear()

    assert [r.name for r in snapshot] == ["first.txt"]


def test_duplicate_id_is_rejected():
    registry = FileRegistry()
    registry.insert(make_record(file_id="1-abc"))

    with pytest.raises(DuplicateFileId):
        registry.insert(make_record("other.txt", file_id="1-abc"))
    assert len(registry) == 1


def test_get_and_remove_unknown_id():
    registry = FileRegistry()

    with pytest.raises(FileNotFound) as exc_info:
        registry.get("nope")
    assert exc_info.value.file_id == "nope"

    with pytest.raises(FileNotFound):
        registry.remove("nope")


def test_remove_returns_prior_record():
    registry = FileRegistry()
    record = make_record()
    registry.insert(record)

    assert registry.remove(record.id) is record
    assert len(registry) == 0
    with pytest.raises(FileNotFound):
        registry.get(record.id)


def test_clear_returns_count():
    registry = FileRegistry()
    for i in range(3):
        registry.insert(make_record(f"{i}.txt"))

    assert registry.clear() == 3
    assert registry.clear() == 0
    assert registry.list() == []


def test_concurrent_inserts_are_not_lost():
    registry = FileRegistry()

    def worker():
        for _ in range(50):
            registry.insert(make_record())

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 400
    assert len({r.id for r in registry.list()}) == 400

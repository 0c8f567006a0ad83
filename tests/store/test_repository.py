"""
Tests for the storage repositories.

Covers:
- JSON file layout (fixed key, other keys preserved)
- Round trip through the file
- Corrupt, non-UTF-8 or partly invalid stored data
- Write failures surfacing as StorageError
- Store integration with a real file
"""

import json

import pytest

from icuni.models import DraftProject, PersistedState, TalentRef
from icuni.store import AppStore, JsonFileRepository, MemoryRepository, StorageError


def test_load_missing_file_returns_none(file_repo):
    assert file_repo.load() is None


def test_save_writes_under_fixed_key(file_repo, storage_file):
    file_repo.save(PersistedState(draft=DraftProject(name="Promo")))

    data = json.loads(storage_file.read_text())
    assert list(data) == ["icuni-app-storage"]
    assert data["icuni-app-storage"]["draft"]["name"] == "Promo"
    assert data["icuni-app-storage"]["isSidebarCollapsed"] is False
    assert data["icuni-app-storage"]["version"] == 1


def test_save_preserves_other_keys(file_repo, storage_file):
    storage_file.write_text(json.dumps({"icuni_token": "abc"}))

    file_repo.save(PersistedState())

    data = json.loads(storage_file.read_text())
    assert data["icuni_token"] == "abc"
    assert "icuni-app-storage" in data


def test_round_trip(file_repo):
    state = PersistedState(
        is_sidebar_collapsed=True,
        draft=DraftProject(name="Doc", selected_talents=[TalentRef(talent_id="t1")]),
    )
    file_repo.save(state)

    loaded = file_repo.load()
    assert loaded == state


def test_corrupt_file_is_ignored(file_repo, storage_file):
    storage_file.write_text("{not json")
    assert file_repo.load() is None

    file_repo.save(PersistedState(draft=DraftProject(name="fresh")))
    assert file_repo.load().draft.name == "fresh"


def test_non_utf8_file_is_ignored(file_repo, storage_file):
    storage_file.write_bytes(b'{"x": "\xff\xfe"}')
    assert file_repo.load() is None

    file_repo.save(PersistedState(draft=DraftProject(name="fresh")))
    assert file_repo.load().draft.name == "fresh"


def test_store_survives_non_utf8_file(storage_file):
    storage_file.write_bytes(b'{"x": "\xff\xfe"}')
    store = AppStore(JsonFileRepository(storage_file, "k"))

    store.update_draft(name="ok")

    assert store.draft.name == "ok"
    assert AppStore(JsonFileRepository(storage_file, "k")).draft.name == "ok"


def test_invalid_fields_fall_back_to_defaults(file_repo, storage_file):
    blob = {
        "isSidebarCollapsed": "sometimes",
        "draft": {
            "name": "Highlife Nights",
            "schedule": [],
            "ambition": 42,
            "startDate": "March 1st",
            "selectedTalents": [{"talent_id": "t1"}, {"display_name": "no id"}],
        },
    }
    storage_file.write_text(json.dumps({"icuni-app-storage": blob}))

    loaded = file_repo.load()

    assert loaded.is_sidebar_collapsed is False
    assert loaded.draft.name == "Highlife Nights"
    assert loaded.draft.ambition == 5
    assert loaded.draft.start_date is None
    assert loaded.draft.schedule == DraftProject().schedule
    assert [t.talent_id for t in loaded.draft.selected_talents] == ["t1"]


def test_non_object_blob_is_discarded(file_repo, storage_file):
    storage_file.write_text(json.dumps({"icuni-app-storage": "garbage"}))
    assert file_repo.load() is None


def test_non_object_file_is_ignored(file_repo, storage_file):
    storage_file.write_text("[1, 2, 3]")
    assert file_repo.load() is None


def test_clear_removes_only_our_key(file_repo, storage_file):
    storage_file.write_text(json.dumps({"other": 1}))
    file_repo.save(PersistedState())

    file_repo.clear()

    assert json.loads(storage_file.read_text()) == {"other": 1}


def test_creates_parent_directory(tmp_path):
    repo = JsonFileRepository(tmp_path / "nested" / "dir" / "storage.json", "k")
    repo.save(PersistedState())
    assert (tmp_path / "nested" / "dir" / "storage.json").exists()


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    repo = JsonFileRepository(blocker / "storage.json", "k")

    with pytest.raises(StorageError):
        repo.save(PersistedState())


def test_store_survives_unwritable_file(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory")
    store = AppStore(JsonFileRepository(blocker / "storage.json", "k"))

    store.update_draft(name="kept in memory")

    assert store.draft.name == "kept in memory"


def test_defaults_come_from_config(isolated_config):
    repo = JsonFileRepository()
    assert repo.path == isolated_config.storage_path
    assert repo.key == "icuni-app-storage"


def test_store_round_trip_through_file(file_repo):
    store = AppStore(file_repo)
    store.update_draft(name="Highlife Nights")
    store.update_schedule_item(2, enabled=False)
    store.add_to_project(TalentRef(talent_id="t1", display_name="Ama"))

    reopened = AppStore(JsonFileRepository(file_repo.path, file_repo.key))

    assert reopened.draft.name == "Highlife Nights"
    assert reopened.total_duration_weeks == 24
    assert reopened.draft.selected_talents[0].display_name == "Ama"


def test_memory_repository_round_trip():
    repo = MemoryRepository()
    assert repo.load() is None

    repo.save(PersistedState(draft=DraftProject(name="x")))
    assert repo.load().draft.name == "x"
    assert repo.save_count == 1

    repo.clear()
    assert repo.load() is None
    assert repo.raw is None

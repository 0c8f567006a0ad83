"""
Shared test fixtures for the ICUNI draft project store.

Every test gets its own store and repository; nothing touches the user's
real storage file.
"""

from pathlib import Path

import pytest

from icuni.config import config
from icuni.models import TalentRef
from icuni.store import AppStore, JsonFileRepository, MemoryRepository


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the global config at a temporary storage file and no API."""
    monkeypatch.setattr(config, "storage_path", tmp_path / "storage.json")
    monkeypatch.setattr(config, "storage_key", "icuni-app-storage")
    monkeypatch.setattr(config, "api_base_url", "")
    monkeypatch.setattr(config, "api_token", "")
    return config


@pytest.fixture
def memory_repo():
    return MemoryRepository()


@pytest.fixture
def store(memory_repo):
    """A fresh store backed by an in-memory repository."""
    return AppStore(repository=memory_repo)


@pytest.fixture
def storage_file(tmp_path) -> Path:
    return tmp_path / "storage.json"


@pytest.fixture
def file_repo(storage_file):
    return JsonFileRepository(storage_file, "icuni-app-storage")


@pytest.fixture
def talent_a():
    return TalentRef(talent_id="t1", display_name="Ama Mensah", city="Accra")


@pytest.fixture
def talent_b():
    return TalentRef(talent_id="t2", display_name="Kofi Boateng", city="Kumasi")

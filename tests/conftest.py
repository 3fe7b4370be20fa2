"""Shared test fixtures for Mission Control tests."""

import pytest

from mission_control.board import BoardStore
from mission_control.persistence import ProjectPersistence
from mission_control.storage import KeyValueStorage, StorageUnavailable


@pytest.fixture
def storage(tmp_path):
    return KeyValueStorage(str(tmp_path / "board.db"))


@pytest.fixture
def persistence(storage):
    return ProjectPersistence(storage)


@pytest.fixture
def board(persistence):
    """Board loaded with the seed dataset."""
    return BoardStore(persistence).load()


@pytest.fixture
def empty_board(storage):
    """Board with no projects (seeding disabled)."""
    return BoardStore(ProjectPersistence(storage, seed_on_first_run=False)).load()


class BrokenStorage(KeyValueStorage):
    """Storage whose every read and write fails."""

    def __init__(self):
        super().__init__("/nonexistent/board.db")
        self.write_attempts = 0

    def get(self, key):
        raise StorageUnavailable("disk on fire")

    def set(self, key, value):
        self.write_attempts += 1
        raise StorageUnavailable("quota exceeded")


@pytest.fixture
def broken_storage():
    return BrokenStorage()

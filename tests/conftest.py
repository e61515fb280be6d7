"""Pytest configuration and fixtures."""

import tempfile
from datetime import date, time
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from time_log_sync.config import Config
from time_log_sync.sync import ReferenceDataCache, TaskForest
from time_log_sync.timecamp import TimeCampClient, TimeCampEntry, TimeCampTask, TimeCampUser
from time_log_sync.timelog import TimeLogEntry
from time_log_sync.utils import StorageManager


@pytest.fixture
def temp_config_dir() -> Path:
    """Create a temporary configuration directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def storage_manager(temp_config_dir: Path) -> StorageManager:
    """Create a storage manager with temporary directory."""
    return StorageManager(temp_config_dir)


@pytest.fixture
def config(temp_config_dir: Path) -> Config:
    """Create a config instance with temporary directory."""
    return Config(temp_config_dir)


@pytest.fixture
def sample_user() -> TimeCampUser:
    """Create a sample TimeCamp user."""
    return TimeCampUser(user_id="42")


@pytest.fixture
def sample_tasks() -> list[TimeCampTask]:
    """Create a small task hierarchy.

    ProjectX (1)
        Design (2)
        Build (3)
    Design (4)
    Internal (5)
        Meetings (6)
            Weekly (7)
    """
    return [
        TimeCampTask(task_id=1, parent_id=0, name="ProjectX"),
        TimeCampTask(task_id=2, parent_id=1, name="Design"),
        TimeCampTask(task_id=3, parent_id=1, name="Build"),
        TimeCampTask(task_id=4, parent_id=0, name="Design"),
        TimeCampTask(task_id=5, parent_id=0, name="Internal"),
        TimeCampTask(task_id=6, parent_id=5, name="Meetings"),
        TimeCampTask(task_id=7, parent_id=6, name="Weekly"),
    ]


@pytest.fixture
def task_forest(sample_tasks: list[TimeCampTask]) -> TaskForest:
    """Create a task forest from the sample tasks."""
    return TaskForest(sample_tasks)


@pytest.fixture
def mock_client(sample_user: TimeCampUser, sample_tasks: list[TimeCampTask]) -> AsyncMock:
    """Create a mock TimeCampClient with an empty entry list."""
    client = AsyncMock(spec=TimeCampClient)
    client.get_current_user.return_value = sample_user
    client.get_tasks.return_value = sample_tasks
    client.get_entries.return_value = []
    return client


@pytest.fixture
def cache(mock_client: AsyncMock) -> ReferenceDataCache:
    """Create a reference data cache over the mock client."""
    return ReferenceDataCache(mock_client)


@pytest.fixture
def sample_time_log_entry() -> TimeLogEntry:
    """Create a sample time log entry."""
    return TimeLogEntry(
        date=date(2024, 1, 2),
        start=time(9, 0),
        end=time(10, 0),
        service="Design",
        description="spec",
    )


@pytest.fixture
def sample_timecamp_entry() -> TimeCampEntry:
    """Create a TimeCamp entry matching the sample time log entry."""
    return TimeCampEntry(
        id=1001,
        user_id="42",
        date=date(2024, 1, 2),
        start_time=time(9, 0),
        end_time=time(10, 0),
        task_id=4,
        name="Design",
        description="spec",
    )

"""Shared fixtures for API tests."""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest  # type: ignore[import-not-found]
from fastapi.testclient import TestClient  # type: ignore[import-untyped]

from time_ledger.analysis.bucketing import to_ms
from time_ledger.api import create_app
from time_ledger.core.config import ConfigManager
from time_ledger.core.models import Client, Project, TimeEntry, User
from time_ledger.core.storage import StorageManager


@pytest.fixture
def temp_data_dir():
    """Create temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_data_dir: Path):
    """Create test configuration pointing at the temporary data directory."""
    with tempfile.TemporaryDirectory() as config_tmpdir:
        config = ConfigManager(Path(config_tmpdir) / "config.yml")
        config.set("general.data_dir", str(temp_data_dir))
        yield config


@pytest.fixture
def storage(temp_data_dir: Path) -> StorageManager:
    return StorageManager(temp_data_dir)


@pytest.fixture
def client(test_config: ConfigManager):
    """Create test client."""
    return TestClient(create_app(test_config))


@pytest.fixture
def seeded(storage: StorageManager) -> StorageManager:
    """Two entries at the start of today and one eight days ago."""
    midnight = datetime.now().replace(hour=0, minute=0, second=0, microsecond=0)

    def entry(start: datetime, hours: float, project_id: str, billable: bool, user_id: str):
        return TimeEntry(
            start_time=to_ms(start),
            end_time=to_ms(start + timedelta(hours=hours)),
            description=f"Work on {project_id}",
            project_id=project_id,
            billable=billable,
            user_id=user_id,
        )

    storage.save_projects(
        [
            Project(id="p1", name="Website", client_id="c1", is_billable=True, hourly_rate=50),
            Project(id="p2", name="Internal", client_id="c2"),
        ]
    )
    storage.save_clients(
        [
            Client(id="c1", name="Acme"),
            Client(id="c2", name="Beta Corp"),
            Client(id="c3", name="Idle Ltd"),
        ]
    )
    storage.save_users([User(id="u1", name="Zoe"), User(id="u2", name="Adam")])
    storage.save_entries(
        [
            entry(midnight, 2.0, "p1", True, "u1"),
            entry(midnight, 1.0, "p2", False, "u2"),
            entry(midnight - timedelta(days=8), 1.0, "p1", True, "u1"),
        ]
    )
    return storage

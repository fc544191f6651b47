"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest  # type: ignore[import-not-found]

from time_ledger.analysis.bucketing import to_ms
from time_ledger.core.models import Client, Project, Snapshot, TimeEntry, User

# Wednesday afternoon, mid-way through Q4
NOW = datetime(2025, 11, 19, 15, 0)


@pytest.fixture  # type: ignore[misc]
def now() -> datetime:
    """Fixed reference time for period and bucket calculations."""
    return NOW


@pytest.fixture  # type: ignore[misc]
def make_entry() -> Callable[..., TimeEntry]:
    """Factory building an entry from a local start datetime and hours."""

    def _make(
        start: datetime,
        hours: float = 1.0,
        project_id: Optional[str] = "p1",
        billable: bool = True,
        user_id: str = "u1",
        description: str = "Work",
    ) -> TimeEntry:
        return TimeEntry(
            start_time=to_ms(start),
            end_time=to_ms(start + timedelta(hours=hours)),
            description=description,
            project_id=project_id,
            billable=billable,
            user_id=user_id,
        )

    return _make


@pytest.fixture  # type: ignore[misc]
def projects() -> list[Project]:
    """Two billable projects of one client, plus an internal project."""
    return [
        Project(id="p1", name="Website", client_id="c1", is_billable=True, hourly_rate=50.0),
        Project(id="p2", name="Mobile App", client_id="c1", is_billable=True, hourly_rate=80.0),
        Project(id="p3", name="Internal", client_id="c2", is_billable=False, hourly_rate=0.0),
    ]


@pytest.fixture  # type: ignore[misc]
def clients() -> list[Client]:
    return [
        Client(id="c1", name="Acme"),
        Client(id="c2", name="Beta Corp"),
        Client(id="c3", name="Idle Ltd"),
    ]


@pytest.fixture  # type: ignore[misc]
def users() -> list[User]:
    return [User(id="u1", name="Zoe"), User(id="u2", name="adam")]


@pytest.fixture  # type: ignore[misc]
def entries(make_entry: Callable[..., TimeEntry], now: datetime) -> list[TimeEntry]:
    """A handful of entries spread over the last weeks."""
    today = now.replace(hour=9)
    return [
        make_entry(today, 2.0, "p1", True, "u1"),
        make_entry(today - timedelta(days=1), 1.0, "p2", True, "u2"),
        make_entry(today - timedelta(days=3), 1.0, "p3", False, "u1"),
        make_entry(today - timedelta(days=10), 0.5, "p1", False, "u2"),
        make_entry(today - timedelta(days=200), 4.0, "p1", True, "u1"),
    ]


@pytest.fixture  # type: ignore[misc]
def snapshot(
    entries: list[TimeEntry],
    projects: list[Project],
    clients: list[Client],
    users: list[User],
) -> Snapshot:
    return Snapshot.of(entries, projects, clients, users)

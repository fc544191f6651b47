"""Core data models for time reporting."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from uuid import uuid4

MS_PER_HOUR = 3_600_000


def _parse_bool(value: Any, default: bool = False) -> bool:
    """Parse a boolean stored as text in a CSV cell."""
    if isinstance(value, bool):
        return value
    if value is None or value == "":
        return default
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class TimeEntry:
    """A recorded span of tracked time.

    Attributes:
        id: Unique identifier
        description: Free text describing the work
        start_time: Start timestamp in milliseconds since epoch
        end_time: End timestamp in milliseconds since epoch
        project_id: Linked project (None if unassigned)
        task_id: Linked task (not used by reports)
        billable: Whether the time should be invoiced
        user_id: Owning user
        is_manual: Whether the entry was added by hand
    """

    start_time: int
    end_time: int
    description: str = ""
    id: str = field(default_factory=lambda: str(uuid4()))
    project_id: Optional[str] = None
    task_id: Optional[str] = None
    billable: bool = False
    user_id: str = ""
    is_manual: bool = False

    def __post_init__(self) -> None:
        if self.end_time < self.start_time:
            raise ValueError(
                f"Entry {self.id} ends before it starts "
                f"({self.end_time} < {self.start_time})"
            )

    @property
    def duration_ms(self) -> int:
        """Duration of the entry in milliseconds."""
        return self.end_time - self.start_time

    @property
    def duration_hours(self) -> float:
        """Duration of the entry in fractional hours."""
        return self.duration_ms / MS_PER_HOUR

    @property
    def start(self) -> datetime:
        """Start time as a local datetime."""
        return datetime.fromtimestamp(self.start_time / 1000)

    @property
    def end(self) -> datetime:
        """End time as a local datetime."""
        return datetime.fromtimestamp(self.end_time / 1000)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV/JSON serialization."""
        return {
            "id": self.id,
            "description": self.description,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "project_id": self.project_id or "",
            "task_id": self.task_id or "",
            "billable": self.billable,
            "user_id": self.user_id,
            "is_manual": self.is_manual,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TimeEntry":
        """Create TimeEntry from dictionary (CSV/JSON deserialization)."""
        return cls(
            id=data["id"],
            description=data.get("description") or "",
            start_time=int(data["start_time"]),
            end_time=int(data["end_time"]),
            project_id=data["project_id"] if data.get("project_id") else None,
            task_id=data["task_id"] if data.get("task_id") else None,
            billable=_parse_bool(data.get("billable")),
            user_id=data.get("user_id") or "",
            is_manual=_parse_bool(data.get("is_manual")),
        )


@dataclass(frozen=True)
class Project:
    """Project definition with its billing configuration.

    Attributes:
        id: Project identifier
        name: Display name
        client_id: Owning client
        is_billable: Project-level billing toggle
        hourly_rate: Currency units per hour
        active: Whether the project is active
    """

    id: str
    name: str
    client_id: str = ""
    is_billable: bool = False
    hourly_rate: float = 0.0
    active: bool = True

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for CSV/JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "client_id": self.client_id,
            "is_billable": self.is_billable,
            "hourly_rate": self.hourly_rate,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Project":
        """Create Project from dictionary (CSV/JSON deserialization)."""
        return cls(
            id=data["id"],
            name=data["name"],
            client_id=data.get("client_id") or "",
            is_billable=_parse_bool(data.get("is_billable")),
            hourly_rate=float(data["hourly_rate"]) if data.get("hourly_rate") else 0.0,
            active=_parse_bool(data.get("active"), default=True),
        )


@dataclass(frozen=True)
class Client:
    """Client, used as a grouping key for projects."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Client":
        return cls(id=data["id"], name=data["name"])


@dataclass(frozen=True)
class User:
    """Team member, used as a grouping key for the team report."""

    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        return cls(id=data["id"], name=data["name"])


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of entries, projects, clients and users.

    Every report computation receives one snapshot and never reads from
    storage while it runs. Being frozen and built from tuples, a snapshot
    is hashable and can key a memoization cache.
    """

    entries: tuple[TimeEntry, ...] = ()
    projects: tuple[Project, ...] = ()
    clients: tuple[Client, ...] = ()
    users: tuple[User, ...] = ()

    @classmethod
    def of(
        cls,
        entries: Any = (),
        projects: Any = (),
        clients: Any = (),
        users: Any = (),
    ) -> "Snapshot":
        """Build a snapshot from any iterables."""
        return cls(tuple(entries), tuple(projects), tuple(clients), tuple(users))

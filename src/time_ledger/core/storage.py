"""CSV storage manager with atomic writes and locked reads."""

import csv
import logging
import os
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional

from time_ledger.core.models import Client, Project, Snapshot, TimeEntry, User

logger = logging.getLogger(__name__)

ENTRY_FIELDS = [
    "id",
    "description",
    "start_time",
    "end_time",
    "project_id",
    "task_id",
    "billable",
    "user_id",
    "is_manual",
]
PROJECT_FIELDS = ["id", "name", "client_id", "is_billable", "hourly_rate", "active"]
CLIENT_FIELDS = ["id", "name"]
USER_FIELDS = ["id", "name"]


def _lock_file(file_obj: Any, exclusive: bool = True) -> None:
    """Lock a file in a cross-platform way.

    Args:
        file_obj: File object to lock
        exclusive: If True, acquire exclusive lock; if False, acquire shared lock
    """
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        mode = msvcrt.LK_NBLCK if exclusive else msvcrt.LK_NBRLCK
        msvcrt.locking(file_obj.fileno(), mode, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        mode = fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH
        fcntl.flock(file_obj.fileno(), mode)


def _unlock_file(file_obj: Any) -> None:
    """Unlock a file in a cross-platform way."""
    if sys.platform == "win32":
        import msvcrt  # type: ignore[import-not-found]

        msvcrt.locking(file_obj.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # type: ignore[import-not-found]

        fcntl.flock(file_obj.fileno(), fcntl.LOCK_UN)


class StorageManager:
    """CSV files holding entries, projects, clients and users.

    Reports only read; the save methods exist for imports and fixtures and
    replace a whole file at once.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize storage manager.

        Args:
            data_dir: Custom data directory. Defaults to ~/.time-ledger/data
        """
        if data_dir is None:
            data_dir = Path.home() / ".time-ledger" / "data"

        self.data_dir = data_dir
        self.entries_file = self.data_dir / "entries.csv"
        self.projects_file = self.data_dir / "projects.csv"
        self.clients_file = self.data_dir / "clients.csv"
        self.users_file = self.data_dir / "users.csv"

        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _write_csv_atomic(
        self, file_path: Path, fieldnames: list[str], rows: list[dict[str, Any]]
    ) -> None:
        """Write CSV file atomically using temporary file and rename.

        Args:
            file_path: Target file path
            fieldnames: CSV field names
            rows: List of row dictionaries
        """
        temp_file = file_path.with_suffix(".tmp")

        try:
            with open(temp_file, "w", newline="", encoding="utf-8") as f:
                _lock_file(f, exclusive=True)

                writer = csv.DictWriter(f, fieldnames=fieldnames)
                writer.writeheader()
                writer.writerows(rows)

                f.flush()
                os.fsync(f.fileno())

                _unlock_file(f)

            temp_file.replace(file_path)
            logger.debug(f"Wrote {len(rows)} rows to {file_path}")

        except Exception:
            if temp_file.exists():
                temp_file.unlink()
            raise

    def _read_csv(self, file_path: Path) -> list[dict[str, Any]]:
        """Read CSV file with locking.

        Args:
            file_path: CSV file to read

        Returns:
            List of row dictionaries, empty if the file does not exist
        """
        if not file_path.exists():
            return []

        with open(file_path, encoding="utf-8") as f:
            _lock_file(f, exclusive=False)

            try:
                reader = csv.DictReader(f)
                rows = list(reader)
            finally:
                _unlock_file(f)

        logger.debug(f"Read {len(rows)} rows from {file_path}")
        return rows

    # Entry operations

    def load_entries(self) -> list[TimeEntry]:
        """Load all entries, oldest first."""
        entries = [TimeEntry.from_dict(row) for row in self._read_csv(self.entries_file)]
        entries.sort(key=lambda e: e.start_time)
        return entries

    def save_entries(self, entries: Iterable[TimeEntry]) -> None:
        """Replace all stored entries."""
        rows = [entry.to_dict() for entry in entries]
        self._write_csv_atomic(self.entries_file, ENTRY_FIELDS, rows)

    # Project operations

    def load_projects(self) -> list[Project]:
        return [Project.from_dict(row) for row in self._read_csv(self.projects_file)]

    def save_projects(self, projects: Iterable[Project]) -> None:
        rows = [project.to_dict() for project in projects]
        self._write_csv_atomic(self.projects_file, PROJECT_FIELDS, rows)

    # Client and user operations

    def load_clients(self) -> list[Client]:
        return [Client.from_dict(row) for row in self._read_csv(self.clients_file)]

    def save_clients(self, clients: Iterable[Client]) -> None:
        rows = [client.to_dict() for client in clients]
        self._write_csv_atomic(self.clients_file, CLIENT_FIELDS, rows)

    def load_users(self) -> list[User]:
        return [User.from_dict(row) for row in self._read_csv(self.users_file)]

    def save_users(self, users: Iterable[User]) -> None:
        rows = [user.to_dict() for user in users]
        self._write_csv_atomic(self.users_file, USER_FIELDS, rows)

    def load_snapshot(self, user_id: Optional[str] = None) -> Snapshot:
        """Load everything into one immutable snapshot.

        Args:
            user_id: Keep only this user's entries (None keeps all)

        Returns:
            Snapshot of the stored data
        """
        entries = self.load_entries()
        if user_id is not None:
            entries = [e for e in entries if e.user_id == user_id]

        snapshot = Snapshot.of(
            entries, self.load_projects(), self.load_clients(), self.load_users()
        )
        logger.info(
            f"Loaded snapshot: {len(snapshot.entries)} entries, "
            f"{len(snapshot.projects)} projects, {len(snapshot.clients)} clients"
        )
        return snapshot

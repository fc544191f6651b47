"""Grouped totals by project, client and user for tabular reports."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from time_ledger.analysis.earnings import (
    Projects,
    entry_earnings,
    finite,
    project_index,
    total_duration,
    total_earnings,
)
from time_ledger.analysis.periods import filter_by_range
from time_ledger.core.models import Client, TimeEntry, User

UNKNOWN_PROJECT = "Unknown Project"


class CompareBy(str, Enum):
    PROJECTS = "projects"
    CLIENTS = "clients"


@dataclass(frozen=True)
class SummaryRow:
    """One row of a grouped report. Times are in milliseconds."""

    id: str
    name: str
    total_time: int = 0
    total_earnings: float = 0.0
    billable_time: int = 0


@dataclass(frozen=True)
class EntryTotals:
    total_time: int
    total_earnings: float
    entries_found: int


@dataclass
class _Accumulator:
    name: str
    total_time: int = 0
    total_earnings: float = 0.0
    billable_time: int = 0

    def add(self, entry: TimeEntry, earnings: float) -> None:
        self.total_time += entry.duration_ms
        self.total_earnings += earnings
        if entry.billable:
            self.billable_time += entry.duration_ms

    def row(self, key: str) -> SummaryRow:
        return SummaryRow(
            id=key,
            name=self.name,
            total_time=self.total_time,
            total_earnings=finite(self.total_earnings),
            billable_time=self.billable_time,
        )


def _by_name(row: SummaryRow) -> tuple[str, str]:
    return (row.name.casefold(), row.name)


def _by_earnings(row: SummaryRow) -> tuple[float, str]:
    return (-row.total_earnings, row.name.casefold())


def by_project(entries: Iterable[TimeEntry], projects: Projects) -> list[SummaryRow]:
    """Totals per project, highest earnings first.

    Unassigned entries are skipped. An entry pointing at a deleted project
    still gets a row, named ``Unknown Project``.
    """
    index = project_index(projects)
    groups: dict[str, _Accumulator] = {}
    for entry in entries:
        if not entry.project_id:
            continue
        if entry.project_id not in groups:
            project = index.get(entry.project_id)
            groups[entry.project_id] = _Accumulator(project.name if project else UNKNOWN_PROJECT)
        groups[entry.project_id].add(entry, entry_earnings(entry, index))

    return sorted((acc.row(key) for key, acc in groups.items()), key=_by_earnings)


def by_client(
    entries: Iterable[TimeEntry], projects: Projects, clients: Iterable[Client]
) -> list[SummaryRow]:
    """Totals per client over the client's projects, sorted by client name.

    Every client gets a row, including clients with no tracked time.
    """
    index = project_index(projects)
    entries = list(entries)
    rows = []
    for client in clients:
        project_ids = {p.id for p in index.values() if p.client_id == client.id}
        acc = _Accumulator(client.name)
        for entry in entries:
            if entry.project_id and entry.project_id in project_ids:
                acc.add(entry, entry_earnings(entry, index))
        rows.append(acc.row(client.id))
    return sorted(rows, key=_by_name)


def compare(
    entries: Iterable[TimeEntry],
    projects: Projects,
    clients: Iterable[Client],
    by: Union[str, CompareBy] = CompareBy.PROJECTS,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    now: Optional[datetime] = None,
) -> list[SummaryRow]:
    """Side-by-side totals of projects or clients over a date range.

    Only known projects or clients are counted. Rows without tracked time
    are dropped and the rest sorted by earnings, highest first.
    """
    by = CompareBy(by)
    index = project_index(projects)
    selected = filter_by_range(entries, index, start_date, end_date, now=now)

    groups: dict[str, _Accumulator]
    if by is CompareBy.PROJECTS:
        groups = {p.id: _Accumulator(p.name) for p in index.values()}
        owner = {p.id: p.id for p in index.values()}
    else:
        groups = {c.id: _Accumulator(c.name) for c in clients}
        owner = {p.id: p.client_id for p in index.values()}

    for entry in selected:
        key = owner.get(entry.project_id or "")
        if key in groups:
            groups[key].add(entry, entry_earnings(entry, index))

    rows = [acc.row(key) for key, acc in groups.items() if acc.total_time > 0]
    return sorted(rows, key=_by_earnings)


def by_user(
    entries: Iterable[TimeEntry], projects: Projects, users: Iterable[User]
) -> list[SummaryRow]:
    """Totals per team member, sorted by name."""
    index = project_index(projects)
    groups = {user.id: _Accumulator(user.name) for user in users}
    for entry in entries:
        if entry.user_id in groups:
            groups[entry.user_id].add(entry, entry_earnings(entry, index))
    return sorted((acc.row(key) for key, acc in groups.items()), key=_by_name)


def totals(entries: Iterable[TimeEntry], projects: Projects) -> EntryTotals:
    """Overall time, earnings and entry count."""
    entries = list(entries)
    return EntryTotals(
        total_time=total_duration(entries),
        total_earnings=total_earnings(entries, projects),
        entries_found=len(entries),
    )

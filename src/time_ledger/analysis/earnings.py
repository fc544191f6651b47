"""Billable earnings of time entries."""

import math
from collections.abc import Iterable, Mapping
from typing import Union

from time_ledger.core.models import MS_PER_HOUR, Project, TimeEntry

Projects = Union[Iterable[Project], Mapping[str, Project]]


def finite(value: float) -> float:
    """Coerce NaN and infinities to 0."""
    if value is None or math.isnan(value) or math.isinf(value):
        return 0.0
    return value


def project_index(projects: Projects) -> Mapping[str, Project]:
    """Index projects by id. Mappings are returned unchanged."""
    if isinstance(projects, Mapping):
        return projects
    return {project.id: project for project in projects}


def entry_earnings(entry: TimeEntry, projects: Projects) -> float:
    """Earnings of a single entry.

    An entry earns only when it is billable, its project exists and is
    billable, and the project has a positive hourly rate. Otherwise it
    earns exactly 0.

    Args:
        entry: Entry to price
        projects: Project snapshot, as a sequence or an id mapping

    Returns:
        Duration in hours times the hourly rate, unrounded
    """
    if not entry.billable or not entry.project_id:
        return 0.0

    project = project_index(projects).get(entry.project_id)
    if project is None or not project.is_billable or not project.hourly_rate > 0:
        return 0.0

    return finite(entry.duration_ms / MS_PER_HOUR * project.hourly_rate)


def total_earnings(entries: Iterable[TimeEntry], projects: Projects) -> float:
    """Summed earnings of many entries."""
    index = project_index(projects)
    return finite(sum(entry_earnings(entry, index) for entry in entries))


def total_duration(entries: Iterable[TimeEntry]) -> int:
    """Summed duration of many entries, in milliseconds."""
    return sum(entry.duration_ms for entry in entries)


def billable_duration(entries: Iterable[TimeEntry]) -> int:
    """Summed duration of billable entries, in milliseconds."""
    return sum(entry.duration_ms for entry in entries if entry.billable)

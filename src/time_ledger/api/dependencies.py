"""Dependency injection for FastAPI endpoints.

These dependencies give endpoints the configuration, storage and a
ReportService built over a snapshot loaded for the current request.
"""

from pathlib import Path

from fastapi import Query, Request  # type: ignore[import-untyped]

from time_ledger.analysis.bucketing import WEEKDAYS
from time_ledger.analysis.service import ReportService
from time_ledger.core.config import ConfigManager
from time_ledger.core.storage import StorageManager

WEEKDAY_PATTERN = f"^({'|'.join(WEEKDAYS)})$"


def get_config(request: Request = None) -> ConfigManager:  # type: ignore[assignment,misc]
    """Get configuration manager instance.

    Returns:
        ConfigManager from app state, or a default one for direct calls
    """
    if request is not None and hasattr(request, "app"):
        if hasattr(request.app.state, "config"):
            config: ConfigManager = request.app.state.config
            return config
    return ConfigManager()


def get_storage(request: Request = None) -> StorageManager:  # type: ignore[assignment,misc]
    """Get storage for the served data directory."""
    data_dir: Path = getattr(request.app.state, "data_dir", None) if request else None
    return StorageManager(data_dir or get_config(request).data_dir)


def get_service(
    request: Request,
    week_start: str = Query(None, pattern=WEEKDAY_PATTERN, description="First day of week"),
) -> ReportService:
    """Build a ReportService over a fresh snapshot.

    Args:
        request: FastAPI request (injected)
        week_start: Optional override of the served first day of week

    Returns:
        ReportService sharing the application's report cache
    """
    config = get_config(request)
    snapshot = get_storage(request).load_snapshot(user_id=config.get("general.user_id"))
    served_week_start = getattr(request.app.state, "week_start", None)
    return ReportService(
        snapshot,
        first_day_of_week=(
            week_start or served_week_start or config.get("general.week_start", "monday")
        ),
        cache=getattr(request.app.state, "report_cache", None),
    )

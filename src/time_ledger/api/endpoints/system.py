"""System endpoints for health checks."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends  # type: ignore[import-untyped]

from time_ledger import __version__
from time_ledger.api.dependencies import get_storage
from time_ledger.api.models import HealthResponse
from time_ledger.core.storage import StorageManager

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(storage: StorageManager = Depends(get_storage)) -> HealthResponse:
    """Health check endpoint.

    Returns:
        Health status information

    Example:
        >>> GET /api/v1/health
        {
            "status": "healthy",
            "timestamp": "2025-11-16T10:30:00Z",
            "version": "0.3.0",
            "entries": 42
        }
    """
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
        entries=len(storage.load_entries()),
    )

"""FastAPI application server."""

import os
from pathlib import Path
from typing import Optional

from fastapi import FastAPI  # type: ignore[import-untyped]
from fastapi.responses import JSONResponse  # type: ignore[import-untyped]

from time_ledger import __version__
from time_ledger.analysis.bucketing import day_offset
from time_ledger.analysis.cache import ReportCache
from time_ledger.api.middleware import setup_middleware
from time_ledger.core.config import ConfigManager

# Read by the app factory; uvicorn workers and the reloader inherit them
CONFIG_ENV = "TIME_LEDGER_CONFIG"
DATA_DIR_ENV = "TIME_LEDGER_DATA_DIR"
WEEK_START_ENV = "TIME_LEDGER_WEEK_START"


def create_app(
    config: Optional[ConfigManager] = None,
    data_dir: Optional[Path] = None,
    week_start: Optional[str] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Arguments left as None fall back to the ``TIME_LEDGER_*`` environment
    variables set by :func:`run_server`, then to the configuration.

    Args:
        config: Optional configuration manager (creates default if None)
        data_dir: Data directory overriding ``general.data_dir``
        week_start: First day of week overriding ``general.week_start``

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If ``week_start`` is not a weekday name
    """
    if config is None:
        config_path = os.environ.get(CONFIG_ENV)
        config = ConfigManager(Path(config_path) if config_path else None)
    if data_dir is None and os.environ.get(DATA_DIR_ENV):
        data_dir = Path(os.environ[DATA_DIR_ENV])
    week_start = week_start or os.environ.get(WEEK_START_ENV) or None
    if week_start is not None:
        day_offset(week_start)

    app = FastAPI(
        title="Time Ledger API",
        description="Read-only reports over Time Ledger time entries",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.config = config
    # Overrides only; None defers to the config on every request
    app.state.data_dir = Path(data_dir).expanduser() if data_dir else None
    app.state.week_start = week_start
    # Shared by every request; keys include the snapshot, so new data misses
    app.state.report_cache = ReportCache(config.get("reports.cache_size", 128))

    setup_middleware(app, config)

    from time_ledger.api.endpoints import analytics, reports, system

    app.include_router(system.router, prefix="/api/v1", tags=["system"])
    app.include_router(reports.router, prefix="/api/v1/reports", tags=["reports"])
    app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Root endpoint - points at the docs."""
        return JSONResponse(
            {
                "message": "Time Ledger API",
                "version": __version__,
                "docs": "/docs",
                "health": "/api/v1/health",
            }
        )

    return app


def run_server(
    host: str = "localhost",
    port: int = 8000,
    reload: bool = False,
    config: Optional[ConfigManager] = None,
    data_dir: Optional[Path] = None,
    week_start: Optional[str] = None,
) -> None:
    """Run the API server using Uvicorn.

    Args:
        host: Interface to bind
        port: Port to bind
        reload: Restart on code changes
        config: Configuration to serve (default config file if None)
        data_dir: Data directory overriding ``general.data_dir``
        week_start: First day of week overriding ``general.week_start``

    Note:
        This function blocks until the server is stopped. Each worker builds
        its app from the factory, which finds these settings in the
        ``TIME_LEDGER_*`` environment variables.
    """
    import uvicorn  # type: ignore[import-untyped]

    if config is None:
        config = ConfigManager()

    os.environ[CONFIG_ENV] = str(config.config_path)
    os.environ[DATA_DIR_ENV] = str(data_dir or config.data_dir)
    if week_start:
        os.environ[WEEK_START_ENV] = week_start

    workers = config.get("api.workers", 1)
    uvicorn.run(
        "time_ledger.api.server:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        workers=workers if not reload else 1,
        log_level=config.get("api.advanced.log_level", "info"),
        access_log=config.get("api.advanced.access_log", True),
    )

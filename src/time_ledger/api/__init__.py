"""REST API for Time Ledger.

This module provides a read-only FastAPI application exposing the report
engine over HTTP. Every request loads a fresh snapshot of the data
directory and answers from it.

Usage:
    # Start server
    time-ledger serve

    # Access API docs
    http://localhost:8000/docs
"""

__all__ = ["create_app", "run_server"]

from time_ledger.api.server import create_app, run_server  # noqa: F401

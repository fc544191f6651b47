"""API endpoints.

Available routers:
- system: Health checks
- reports: Grouped summaries and detailed listings
- analytics: Chart series, productivity and dashboard figures
"""

__all__ = ["system", "reports", "analytics"]

from time_ledger.api.endpoints import analytics, reports, system  # noqa: F401

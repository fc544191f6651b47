"""Time Ledger - time tracking reports, earnings and productivity trends."""

__version__ = "0.3.0"

"""Core data models, storage and configuration."""

from time_ledger.core.models import Client, Project, Snapshot, TimeEntry, User

__all__ = ["TimeEntry", "Project", "Client", "User", "Snapshot"]

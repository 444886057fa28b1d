"""taskdeck: console client for a remote task-management service."""

__version__ = "0.1.0"

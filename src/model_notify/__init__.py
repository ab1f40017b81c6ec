"""Model switch notifications for agent sessions."""

__version__ = "0.1.0"

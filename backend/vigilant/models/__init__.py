"""Database models."""
from .monitor import Monitor
from .monitor_history import MonitorHistory

__all__ = ["Monitor", "MonitorHistory"]

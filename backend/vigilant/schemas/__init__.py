"""Pydantic schemas for API request/response models."""
from .monitor import (
    HistoryEntry,
    MonitorState,
    MonitorCreate,
    MonitorUpdate,
    SweepResult,
    DeleteResponse,
    normalize_url,
)
from .report import (
    MonitorReport,
    ReportSummary,
)

__all__ = [
    "HistoryEntry",
    "MonitorState",
    "MonitorCreate",
    "MonitorUpdate",
    "SweepResult",
    "DeleteResponse",
    "normalize_url",
    "MonitorReport",
    "ReportSummary",
]

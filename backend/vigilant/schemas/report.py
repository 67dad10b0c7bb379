"""Report schemas for the fleet summary."""
from typing import List, Optional
from pydantic import BaseModel


class MonitorReport(BaseModel):
    """Per-monitor figures in the fleet report."""
    id: str
    name: str
    status: str
    latest_latency_ms: int
    uptime_percent: Optional[float] = None  # None when no history yet
    checks: int


class ReportSummary(BaseModel):
    """Fleet-wide availability summary."""
    total_monitors: int
    monitors_up: int
    monitors_down: int
    monitors_pending: int
    monitors_maintenance: int
    total_checks: int
    average_uptime_percent: float
    monitors: List[MonitorReport]

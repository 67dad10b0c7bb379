"""Fleet report API for the dashboard."""
from fastapi import APIRouter, Depends

from ..dependencies import get_store
from ..schemas.report import MonitorReport, ReportSummary
from ..services.store import MonitorStore

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/summary", response_model=ReportSummary)
async def get_report_summary(store: MonitorStore = Depends(get_store)):
    """Get status counts, uptime and latest latency across all monitors."""
    monitors = await store.list()

    counts = {"UP": 0, "DOWN": 0, "PENDING": 0, "MAINTENANCE": 0}
    reports = []
    total_uptime = 0.0

    for monitor in monitors:
        counts[monitor.status] = counts.get(monitor.status, 0) + 1

        checks = len(monitor.history)
        if checks:
            up_count = sum(1 for h in monitor.history if h.status == "UP")
            uptime = (up_count / checks) * 100
        else:
            uptime = None

        # Monitors without history count as fully available
        total_uptime += uptime if uptime is not None else 100

        reports.append(MonitorReport(
            id=monitor.id,
            name=monitor.name,
            status=monitor.status,
            latest_latency_ms=monitor.history[0].latency if monitor.history else 0,
            uptime_percent=round(uptime, 1) if uptime is not None else None,
            checks=checks,
        ))

    average_uptime = (total_uptime / len(monitors)) if monitors else 0

    return ReportSummary(
        total_monitors=len(monitors),
        monitors_up=counts["UP"],
        monitors_down=counts["DOWN"],
        monitors_pending=counts["PENDING"],
        monitors_maintenance=counts["MAINTENANCE"],
        total_checks=sum(r.checks for r in reports),
        average_uptime_percent=round(average_uptime, 1),
        monitors=reports,
    )

"""History recorder - decides whether a check becomes a history entry.

On the sweep path a full entry is written only when it carries information:
the status changed, the monitor is still PENDING, or the heartbeat window
since the last check attempt has passed. Otherwise only last_checked moves.
Manual checks always write a full entry.
"""
from ..schemas.monitor import HistoryEntry, MonitorState

HISTORY_LIMIT = 50
HEARTBEAT_MS = 5 * 60 * 1000


class HistoryRecorder:
    """Applies check results to monitor state with bounded, newest-first history."""

    def __init__(self, limit: int = HISTORY_LIMIT, heartbeat_ms: int = HEARTBEAT_MS):
        self.limit = limit
        self.heartbeat_ms = heartbeat_ms

    def should_persist(self, monitor: MonitorState, entry: HistoryEntry, now: int) -> bool:
        if monitor.status == "PENDING":
            return True
        if monitor.status != entry.status:
            return True
        # Measured from the last check attempt, not the last written entry
        if monitor.last_checked is None:
            return True
        return now - monitor.last_checked >= self.heartbeat_ms

    def append(self, monitor: MonitorState, entry: HistoryEntry) -> MonitorState:
        """Prepend an entry, truncate history and take over its status."""
        history = [entry, *monitor.history][: self.limit]
        return monitor.model_copy(update={
            "status": entry.status,
            "last_checked": _latest(monitor.last_checked, entry.timestamp),
            "history": history,
        })

    def refresh(self, monitor: MonitorState, now: int) -> MonitorState:
        """Move last_checked only."""
        return monitor.model_copy(update={"last_checked": _latest(monitor.last_checked, now)})

    def record(self, monitor: MonitorState, entry: HistoryEntry, now: int, suppress: bool = True) -> MonitorState:
        if not suppress or self.should_persist(monitor, entry, now):
            return self.append(monitor, entry)
        return self.refresh(monitor, now)


def _latest(current, candidate: int) -> int:
    if current is None:
        return candidate
    return max(current, candidate)

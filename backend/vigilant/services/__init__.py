"""Services for probing, classifying, recording and scheduling checks."""
from .prober import Prober, ProbeOutcome
from .classifier import FailureClassifier
from .recorder import HistoryRecorder
from .store import MonitorStore, MonitorNotFoundError
from .engine import MonitorEngine
from .scheduler import SchedulerService

__all__ = [
    "Prober",
    "ProbeOutcome",
    "FailureClassifier",
    "HistoryRecorder",
    "MonitorStore",
    "MonitorNotFoundError",
    "MonitorEngine",
    "SchedulerService",
]

"""Failure classifier - turns a probe outcome into a history entry.

Checks in order:
1. Probe error (transport failure, timeout, simulated outage) - down
2. HTTP status code outside 2xx - down
3. Text responses containing a failure pattern ("fake 200") - down
4. Otherwise - up

Latency is only kept for up results.
"""
from typing import Iterable, Optional, Tuple

from ..config import DEFAULT_FAILURE_PATTERNS
from ..schemas.monitor import HistoryEntry
from ..utils.clock import Clock, IdFactory, epoch_ms, new_id
from .prober import ProbeOutcome


class FailureClassifier:
    """Classifies probe outcomes as UP or DOWN."""

    def __init__(
        self,
        patterns: Iterable[str] = DEFAULT_FAILURE_PATTERNS,
        clock: Clock = epoch_ms,
        id_factory: IdFactory = new_id,
    ):
        self.patterns = [p.lower() for p in patterns]
        self.clock = clock
        self.id_factory = id_factory

    def match_pattern(self, body: str) -> Optional[str]:
        """Return the first failure pattern found in the body, if any."""
        body = body.lower()
        for pattern in self.patterns:
            if pattern in body:
                return pattern
        return None

    def evaluate(self, outcome: ProbeOutcome) -> Tuple[str, Optional[str]]:
        """Return (status, message) for a probe outcome."""
        if outcome.error is not None:
            return "DOWN", outcome.error

        code = outcome.status_code
        if code is None or not (200 <= code < 300):
            reason = outcome.reason_phrase or ""
            return "DOWN", f"HTTP Error: {code} {reason}".rstrip()

        if outcome.body and "text" in (outcome.content_type or "").lower():
            matched = self.match_pattern(outcome.body)
            if matched:
                return "DOWN", f"Pattern Match: {matched}"

        return "UP", None

    def classify(self, outcome: ProbeOutcome) -> HistoryEntry:
        """Build the history entry for a probe outcome."""
        status, message = self.evaluate(outcome)
        return HistoryEntry(
            id=self.id_factory(),
            timestamp=self.clock(),
            latency=outcome.latency_ms if status == "UP" else 0,
            status=status,
            message=message,
            status_code=outcome.status_code,
        )

"""Prober service - performs a single HTTP probe against a monitor URL."""
import asyncio
import time
from dataclasses import dataclass
from typing import Optional

import httpx

SIMULATED_OUTAGE = "Simulated Outage (Drill)"
CONNECTION_FAILED = "Connection Failed"

PROBE_HEADERS = {
    "User-Agent": "VigilantMonitor/1.0 (HealthCheck; +https://vigilant.io)",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
}


@dataclass
class ProbeOutcome:
    """Raw result of one probe, before classification."""
    latency_ms: int
    status_code: Optional[int] = None
    reason_phrase: Optional[str] = None
    content_type: Optional[str] = None
    body: Optional[str] = None
    error: Optional[str] = None  # set when the probe failed before a response was evaluated


class Prober:
    """Issues one GET per probe with a hard deadline."""

    def __init__(
        self,
        timeout: float = 10,
        verify: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.verify = verify
        self.transport = transport

    @property
    def timeout_message(self) -> str:
        return f"Timeout (>{self.timeout:g}s)"

    async def probe(self, url: str, simulate_failure: bool = False) -> ProbeOutcome:
        """Probe a URL.

        A simulated failure makes no network call. Otherwise the request is
        cancelled once the deadline passes, and transport errors are turned
        into an outcome carrying the error text instead of being raised.
        """
        start = time.perf_counter()

        if simulate_failure:
            return ProbeOutcome(
                latency_ms=self._elapsed_ms(start),
                status_code=503,
                error=SIMULATED_OUTAGE,
            )

        try:
            response = await asyncio.wait_for(self._get(url), timeout=self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            return ProbeOutcome(latency_ms=self._elapsed_ms(start), error=self.timeout_message)
        except (httpx.HTTPError, httpx.InvalidURL, OSError) as e:
            return ProbeOutcome(latency_ms=self._elapsed_ms(start), error=str(e) or CONNECTION_FAILED)

        content_type = response.headers.get("content-type", "")
        return ProbeOutcome(
            latency_ms=self._elapsed_ms(start),
            status_code=response.status_code,
            reason_phrase=response.reason_phrase,
            content_type=content_type,
            # Only text payloads are decoded; nothing else is scanned
            body=response.text if "text" in content_type.lower() else None,
        )

    async def _get(self, url: str) -> httpx.Response:
        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            verify=self.verify,
            headers=PROBE_HEADERS,
            transport=self.transport,
        ) as client:
            return await client.get(url)

    @staticmethod
    def _elapsed_ms(start: float) -> int:
        return int(round((time.perf_counter() - start) * 1000))

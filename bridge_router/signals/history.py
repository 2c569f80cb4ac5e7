"""Rolling network history and the reliability score derived from it.

Each chain keeps its most recent health check results (newest first). Reliability
combines average latency and uptime over a time window:

    latency_score = max(0, 50 - avg_latency_ms / 20)   # 0ms -> 50, >=1000ms -> 0
    uptime_score  = uptime_percent / 2                  # 100% -> 50
    reliability   = round(latency_score + uptime_score)
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bridge_router.config import DAY_MS
from bridge_router.models.types import round_half_up

# Maximum number of data points kept per network
MAX_HISTORY_ENTRIES = 100

# Entries older than this are discarded
HISTORY_EXPIRY_MS = 7 * DAY_MS


class NetworkStatus(str, Enum):
    """Observed status of a network at check time."""

    ONLINE = "online"
    DEGRADED = "degraded"
    OFFLINE = "offline"


@dataclass(frozen=True)
class HistoryEntry:
    """One health check result."""

    timestamp_ms: float
    latency_ms: float
    status: NetworkStatus
    success: bool
    error: str | None = None


@dataclass(frozen=True)
class NetworkSummary:
    """Digest of a chain's history over the last day and week."""

    total_entries: int
    latest_status: NetworkStatus
    latest_latency_ms: float | None
    avg_latency_24h: int | None
    uptime_24h: int
    reliability_24h: int | None
    avg_latency_7d: int | None
    uptime_7d: int
    reliability_7d: int | None
    latency_trend_ms: float


class NetworkHistory:
    """Per-chain health check history.

    Implements ReliabilityProvider.

    Args:
        clock: Returns current epoch seconds; injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._history: dict[int, tuple[HistoryEntry, ...]] = {}
        self._lock = threading.Lock()

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def add_entry(
        self,
        chain_id: int,
        latency_ms: float,
        success: bool = True,
        status: NetworkStatus | None = None,
        error: str | None = None,
    ) -> HistoryEntry:
        """Record a health check result as the newest entry for a chain."""
        if status is None:
            status = NetworkStatus.ONLINE if success else NetworkStatus.OFFLINE
        entry = HistoryEntry(
            timestamp_ms=self._now_ms(),
            latency_ms=latency_ms,
            status=status,
            success=success,
            error=error,
        )
        with self._lock:
            existing = self._history.get(chain_id, ())
            updated = dict(self._history)
            updated[chain_id] = ((entry,) + existing)[:MAX_HISTORY_ENTRIES]
            self._history = updated
        return entry

    def entries(self, chain_id: int) -> tuple[HistoryEntry, ...]:
        """Unexpired entries for a chain, newest first."""
        now = self._now_ms()
        return tuple(
            e for e in self._history.get(chain_id, ()) if now - e.timestamp_ms < HISTORY_EXPIRY_MS
        )

    def _window(self, chain_id: int, period_ms: float) -> list[HistoryEntry]:
        now = self._now_ms()
        return [e for e in self.entries(chain_id) if now - e.timestamp_ms < period_ms]

    def average_latency(self, chain_id: int, period_ms: float = DAY_MS) -> int | None:
        """Mean latency of successful checks in the window, or None."""
        successful = [e for e in self._window(chain_id, period_ms) if e.success]
        if not successful:
            return None
        return round_half_up(sum(e.latency_ms for e in successful) / len(successful))

    def uptime_percentage(self, chain_id: int, period_ms: float = DAY_MS) -> int:
        """Percentage of successful checks in the window; 0 with no data."""
        relevant = self._window(chain_id, period_ms)
        if not relevant:
            return 0
        successful = sum(1 for e in relevant if e.success)
        return round_half_up(successful / len(relevant) * 100)

    def reliability_score(self, chain_id: int, window_ms: int = DAY_MS) -> float | None:
        """Reliability score (0-100) over the window.

        Returns None when the window holds no checks at all, so the engine
        applies its neutral default. A chain whose every check failed scores 0.
        """
        if not self._window(chain_id, window_ms):
            return None
        avg_latency = self.average_latency(chain_id, window_ms)
        uptime = self.uptime_percentage(chain_id, window_ms)
        if avg_latency is None or uptime == 0:
            return 0
        latency_score = max(0.0, 50 - avg_latency / 20)
        uptime_score = uptime / 2
        return round_half_up(latency_score + uptime_score)

    def summary(self, chain_id: int) -> NetworkSummary:
        """Summarize the last day and week of history for a chain."""
        entries = self.entries(chain_id)
        week = 7 * DAY_MS
        latest = entries[:10]
        trend = latest[0].latency_ms - latest[-1].latency_ms if len(latest) >= 2 else 0.0
        reliability_24h = self.reliability_score(chain_id, DAY_MS)
        reliability_7d = self.reliability_score(chain_id, week)
        return NetworkSummary(
            total_entries=len(entries),
            latest_status=entries[0].status if entries else NetworkStatus.OFFLINE,
            latest_latency_ms=entries[0].latency_ms if entries else None,
            avg_latency_24h=self.average_latency(chain_id, DAY_MS),
            uptime_24h=self.uptime_percentage(chain_id, DAY_MS),
            reliability_24h=int(reliability_24h) if reliability_24h is not None else None,
            avg_latency_7d=self.average_latency(chain_id, week),
            uptime_7d=self.uptime_percentage(chain_id, week),
            reliability_7d=int(reliability_7d) if reliability_7d is not None else None,
            latency_trend_ms=trend,
        )

    def clear(self, chain_id: int | None = None) -> None:
        """Forget one chain's history, or everything when chain_id is None."""
        with self._lock:
            if chain_id is None:
                self._history = {}
            else:
                updated = dict(self._history)
                updated.pop(chain_id, None)
                self._history = updated


__all__ = [
    "NetworkHistory",
    "NetworkStatus",
    "HistoryEntry",
    "NetworkSummary",
    "MAX_HISTORY_ENTRIES",
    "HISTORY_EXPIRY_MS",
]

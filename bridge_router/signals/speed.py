"""In-memory latency store.

Keeps the most recent network-speed sample per chain. Probing itself
(RPC round trips) happens outside the engine; results are pushed in with
record().
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable

import structlog

from bridge_router.signals.base import LatencySample

logger = structlog.get_logger()

# Samples older than this are considered stale
CACHE_EXPIRY_SECONDS = 5 * 60


class LatencyStore:
    """Latest latency sample per chain.

    Implements LatencyProvider.

    Args:
        clock: Returns current epoch seconds; injectable for tests
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._samples: dict[int, LatencySample] = {}
        self._lock = threading.Lock()

    def record(
        self,
        chain_id: int,
        milliseconds: float,
        success: bool = True,
        error: str | None = None,
    ) -> LatencySample:
        """Store a new sample, replacing any previous one for the chain."""
        sample = LatencySample(
            chain_id=chain_id,
            milliseconds=milliseconds if success else -1,
            success=success,
            sampled_at=self._clock(),
            error=error,
        )
        with self._lock:
            updated = dict(self._samples)
            updated[chain_id] = sample
            self._samples = updated
        if not success:
            logger.debug("latency_sample_failed", chain_id=chain_id, error=error)
        return sample

    def add_sample(self, sample: LatencySample) -> None:
        """Store an externally built sample as-is."""
        with self._lock:
            updated = dict(self._samples)
            updated[sample.chain_id] = sample
            self._samples = updated

    def latency_sample(self, chain_id: int) -> LatencySample | None:
        """Return the latest sample for a chain, fresh or not."""
        return self._samples.get(chain_id)

    def is_fresh(self, chain_id: int) -> bool:
        """True if the chain has a sample younger than the expiry window."""
        sample = self._samples.get(chain_id)
        if sample is None:
            return False
        return self._clock() - sample.sampled_at < CACHE_EXPIRY_SECONDS

    def fastest_chains(self, limit: int = 3) -> list[int]:
        """Chains with the lowest successful latency, fastest first."""
        candidates = [s for s in self._samples.values() if s.success and s.milliseconds > 0]
        candidates.sort(key=lambda s: (s.milliseconds, s.chain_id))
        return [s.chain_id for s in candidates[:limit]]

    def prune_stale(self) -> int:
        """Drop samples past the expiry window.

        Returns:
            Number of samples removed
        """
        now = self._clock()
        with self._lock:
            kept = {
                chain_id: sample
                for chain_id, sample in self._samples.items()
                if now - sample.sampled_at < CACHE_EXPIRY_SECONDS
            }
            removed = len(self._samples) - len(kept)
            self._samples = kept
        return removed


__all__ = ["LatencyStore", "CACHE_EXPIRY_SECONDS"]

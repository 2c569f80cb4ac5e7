"""Collaborator interfaces for network signals.

The routing engine consumes these as pure lookups. Implementations may be
backed by live measurements, caches or fixtures; the engine never assumes
an answer exists and applies documented defaults when one does not.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class LatencySample:
    """A single network-speed measurement.

    Attributes:
        chain_id: Chain that was measured
        milliseconds: Round-trip latency; -1 for failed samples
        success: Whether the measurement succeeded
        sampled_at: Epoch seconds when the sample was taken
        error: Failure detail, if any
    """

    chain_id: int
    milliseconds: float
    success: bool
    sampled_at: float
    error: str | None = None


class LatencyProvider(Protocol):
    """Source of the freshest latency sample per chain."""

    def latency_sample(self, chain_id: int) -> LatencySample | None:
        """Return the latest sample, or None if the chain was never measured."""
        ...


class ReliabilityProvider(Protocol):
    """Source of historical per-chain reliability scores."""

    def reliability_score(self, chain_id: int, window_ms: int) -> float | None:
        """Return a 0-100 score over the window, or None without history."""
        ...


class SecurityRatingProvider(Protocol):
    """Source of independently computed chain security scores."""

    def security_rating(self, chain_id: int) -> float | None:
        """Return a 0-100 score, or None for an unrated chain."""
        ...


__all__ = [
    "LatencySample",
    "LatencyProvider",
    "ReliabilityProvider",
    "SecurityRatingProvider",
]

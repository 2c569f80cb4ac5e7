"""Network signal providers.

Interfaces for the three signals the engine consumes (latency, reliability
history, security rating), in-memory reference implementations of each, and
the concurrent fan-out that resolves them into a per-request snapshot.
"""

from .base import LatencyProvider, LatencySample, ReliabilityProvider, SecurityRatingProvider
from .history import NetworkHistory, NetworkStatus, NetworkSummary
from .security import ChainSecurityData, NetworkCategory, SecurityRating, SecurityRatings
from .snapshot import SignalSnapshot, collect_signals, signal_executor
from .speed import LatencyStore

__all__ = [
    "LatencySample",
    "LatencyProvider",
    "ReliabilityProvider",
    "SecurityRatingProvider",
    "LatencyStore",
    "NetworkHistory",
    "NetworkStatus",
    "NetworkSummary",
    "SecurityRatings",
    "SecurityRating",
    "ChainSecurityData",
    "NetworkCategory",
    "SignalSnapshot",
    "collect_signals",
    "signal_executor",
]

"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, field

from bridge_router.models.types import RiskTier


@dataclass(frozen=True)
class BridgeStep:
    """A scored traversal of one bridge edge."""

    source_chain_id: int
    dest_chain_id: int
    protocol: str
    estimated_time_seconds: float
    estimated_fee_usd: float
    trust_assumptions: tuple[str, ...]
    security_score: int
    reliability_score: int


@dataclass(frozen=True)
class CrossChainRoute:
    """An ordered sequence of bridge steps from source to destination.

    Routes produced by the aggregator are contiguous. Instances are never
    mutated; re-scoring produces a new route. Invariants are not enforced
    here so that the validator can inspect hand-built routes.
    """

    steps: tuple[BridgeStep, ...]
    source_chain_id: int
    destination_chain_id: int
    total_time_seconds: float
    total_fee_usd: float
    security_score: int
    reliability_score: int
    risk: RiskTier

    @property
    def hop_count(self) -> int:
        """Number of bridge hops."""
        return len(self.steps)

    @property
    def path(self) -> list[int]:
        """Chain ids visited, in order."""
        if not self.steps:
            return [self.source_chain_id]
        return [self.steps[0].source_chain_id] + [s.dest_chain_id for s in self.steps]

    @property
    def protocols(self) -> list[str]:
        """Protocol used for each hop."""
        return [s.protocol for s in self.steps]


@dataclass(frozen=True)
class RoutingResult:
    """Result of routing a request.

    `routes` is ordered for display (risk tier, then fee); `selected` is the
    best route for the requested criterion, or None when nothing connects.
    """

    routes: tuple[CrossChainRoute, ...] = ()
    selected: CrossChainRoute | None = None

    @property
    def found(self) -> bool:
        """True if at least one route was found."""
        return self.selected is not None


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of structural route validation."""

    ok: bool
    issues: tuple[str, ...] = field(default_factory=tuple)


__all__ = ["BridgeStep", "CrossChainRoute", "RoutingResult", "ValidationResult"]

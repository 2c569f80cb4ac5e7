"""Route aggregation: combine scored steps into a CrossChainRoute.

Times and fees add up. Security and reliability are weighted by each step's
share of the total fee, so the hop that carries most of the cost dominates;
with a zero total fee every step weighs the same. The risk tier is derived
from both aggregate scores with inclusive thresholds.
"""

from __future__ import annotations

from collections.abc import Sequence

from bridge_router.models.types import RiskTier, round_half_up
from bridge_router.routing.types import BridgeStep, CrossChainRoute

# Inclusive lower bounds on both security and reliability
LOW_RISK_THRESHOLD = 80
MEDIUM_RISK_THRESHOLD = 60


def classify_risk(security: float, reliability: float) -> RiskTier:
    """Risk tier for a pair of aggregate scores."""
    if security >= LOW_RISK_THRESHOLD and reliability >= LOW_RISK_THRESHOLD:
        return RiskTier.LOW
    if security >= MEDIUM_RISK_THRESHOLD and reliability >= MEDIUM_RISK_THRESHOLD:
        return RiskTier.MEDIUM
    return RiskTier.HIGH


def _weighted(steps: Sequence[BridgeStep], total_fee: float, attr: str) -> int:
    if total_fee > 0:
        value = sum(getattr(s, attr) * (s.estimated_fee_usd / total_fee) for s in steps)
    else:
        value = sum(getattr(s, attr) for s in steps) / len(steps)
    return round_half_up(value)


def aggregate(steps: Sequence[BridgeStep]) -> CrossChainRoute:
    """Build a route from an ordered, contiguous list of steps.

    Raises:
        ValueError: If steps is empty
    """
    if not steps:
        raise ValueError("Cannot aggregate a route with no steps")

    total_time = sum(s.estimated_time_seconds for s in steps)
    total_fee = sum(s.estimated_fee_usd for s in steps)
    security = _weighted(steps, total_fee, "security_score")
    reliability = _weighted(steps, total_fee, "reliability_score")

    return CrossChainRoute(
        steps=tuple(steps),
        source_chain_id=steps[0].source_chain_id,
        destination_chain_id=steps[-1].dest_chain_id,
        total_time_seconds=total_time,
        total_fee_usd=total_fee,
        security_score=security,
        reliability_score=reliability,
        risk=classify_risk(security, reliability),
    )


__all__ = ["aggregate", "classify_risk", "LOW_RISK_THRESHOLD", "MEDIUM_RISK_THRESHOLD"]

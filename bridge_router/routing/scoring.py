"""Per-edge scoring: turn (source, destination, protocol) into a BridgeStep.

time        = baseline * lf(source) * lf(dest)
fee         = base_fee + amount * variable_fee
              + gas(source, bridge leg) + gas(dest, transfer leg)
security    = round(0.6 * protocol + 0.2 * chain(source) + 0.2 * chain(dest))
reliability = same shape, using reliability history for the chains

lf(chain) is max(1, 1 + ms / 1000) for a fresh, successful latency sample
and the configured default (1.5) otherwise. Missing, non-finite or zero chain
scores fall back to the configured default (50).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import TYPE_CHECKING

import structlog

from bridge_router.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from bridge_router.models.types import (
    BRIDGE_LEG,
    TRANSFER_LEG,
    PriorityLevel,
    TransactionCategory,
    clamp_score,
    finite_or_none,
    round_half_up,
)
from bridge_router.routing.types import BridgeStep

if TYPE_CHECKING:
    from bridge_router.catalog.catalog import BridgeCatalog
    from bridge_router.catalog.protocols import BridgeProtocolProfile
    from bridge_router.fees.estimator import GasCostEstimator
    from bridge_router.routing.pathfinding import ChainGraph
    from bridge_router.signals.base import (
        LatencyProvider,
        ReliabilityProvider,
        SecurityRatingProvider,
    )

logger = structlog.get_logger()


def choose_protocol(
    graph: ChainGraph,
    source: int,
    destination: int,
    catalog: BridgeCatalog,
) -> BridgeProtocolProfile | None:
    """Pick the protocol used for one edge.

    Highest raw security score wins; ties go to the protocol listed first on
    the edge. If the edge carries pinned custom bridges, only those are
    candidates. Protocol ids without a catalog profile are skipped.

    Returns:
        The chosen profile, or None if no listed protocol is usable
    """
    candidates = graph.pinned_protocols(source, destination) or graph.protocols(
        source, destination
    )
    best: BridgeProtocolProfile | None = None
    for protocol_id in candidates:
        if not catalog.has_protocol(protocol_id):
            logger.warning(
                "edge_protocol_unknown",
                source=source,
                destination=destination,
                protocol=protocol_id,
            )
            continue
        profile = catalog.get_profile(protocol_id)
        # Strict comparison keeps the first-listed protocol on ties
        if best is None or profile.security_score > best.security_score:
            best = profile
    return best


class StepScorer:
    """Scores single bridge steps from a profile and network signals.

    The scorer holds no per-request state; the providers it wraps may be
    live stores or a SignalSnapshot resolved for one request.
    """

    def __init__(
        self,
        catalog: BridgeCatalog,
        latency: LatencyProvider,
        reliability: ReliabilityProvider,
        security: SecurityRatingProvider,
        gas: GasCostEstimator,
        config: RouterConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.catalog = catalog
        self.latency = latency
        self.reliability = reliability
        self.security = security
        self.gas = gas
        self.config = config or DEFAULT_ROUTER_CONFIG
        self._clock = clock

    def latency_factor(self, chain_id: int) -> float:
        """Time multiplier for a chain, from its latest latency sample."""
        sample = self.latency.latency_sample(chain_id)
        if sample is None or not sample.success:
            return self.config.default_latency_factor

        milliseconds = finite_or_none(sample.milliseconds)
        sampled_at = finite_or_none(sample.sampled_at)
        if milliseconds is None or sampled_at is None:
            return self.config.default_latency_factor
        if self._clock() - sampled_at > self.config.latency_max_age_seconds:
            return self.config.default_latency_factor

        return max(1.0, 1.0 + milliseconds / 1000.0)

    def _chain_score(self, value: float | None) -> float:
        # Zero scores (every health check failed) count as missing
        value = finite_or_none(value)
        if value is None or value == 0:
            return self.config.default_chain_score
        return clamp_score(value)

    def chain_security(self, chain_id: int) -> float:
        """Security rating for a chain, or the default when unrated."""
        return self._chain_score(self.security.security_rating(chain_id))

    def chain_reliability(self, chain_id: int) -> float:
        """Reliability over the configured window, or the default without history."""
        return self._chain_score(
            self.reliability.reliability_score(chain_id, self.config.reliability_window_ms)
        )

    def _gas(self, chain_id: int, leg: TransactionCategory, priority: PriorityLevel) -> float:
        value = finite_or_none(self.gas.estimate_gas_cost_usd(chain_id, leg, priority))
        if value is None:
            return 0.0
        return max(0.0, value)

    def _blend(self, protocol_score: float, source_score: float, dest_score: float) -> int:
        cfg = self.config
        return round_half_up(
            cfg.protocol_weight * protocol_score
            + cfg.chain_weight * source_score
            + cfg.chain_weight * dest_score
        )

    def score_step(
        self,
        source: int,
        destination: int,
        protocol: BridgeProtocolProfile | str,
        amount: float,
        priority: PriorityLevel = PriorityLevel.MEDIUM,
    ) -> BridgeStep:
        """Score traversing source -> destination with one protocol.

        Args:
            source: Source chain
            destination: Destination chain
            protocol: Profile, or a protocol id resolved through the catalog
            amount: Transfer amount in USD
            priority: Priority used for the two gas legs

        Returns:
            BridgeStep with time > 0, fee >= 0 and scores in [0, 100]

        Raises:
            UnknownProtocolError: If a protocol id is not in the catalog
        """
        profile = (
            self.catalog.get_profile(protocol) if isinstance(protocol, str) else protocol
        )

        time_seconds = (
            profile.baseline_time_seconds
            * self.latency_factor(source)
            * self.latency_factor(destination)
        )
        time_seconds = max(self.config.min_step_time_seconds, time_seconds)

        fee = (
            profile.base_fee_usd
            + amount * profile.variable_fee_fraction
            + self._gas(source, BRIDGE_LEG, priority)
            + self._gas(destination, TRANSFER_LEG, priority)
        )

        security = self._blend(
            profile.security_score, self.chain_security(source), self.chain_security(destination)
        )
        reliability = self._blend(
            profile.reliability_score,
            self.chain_reliability(source),
            self.chain_reliability(destination),
        )

        step = BridgeStep(
            source_chain_id=source,
            dest_chain_id=destination,
            protocol=profile.protocol_id,
            estimated_time_seconds=time_seconds,
            estimated_fee_usd=max(0.0, fee),
            trust_assumptions=tuple(profile.trust_assumptions),
            security_score=security,
            reliability_score=reliability,
        )
        logger.debug(
            "step_scored",
            source=source,
            destination=destination,
            protocol=step.protocol,
            time_seconds=round(step.estimated_time_seconds, 3),
            fee_usd=round(step.estimated_fee_usd, 4),
            security=security,
            reliability=reliability,
        )
        return step


__all__ = ["StepScorer", "choose_protocol"]

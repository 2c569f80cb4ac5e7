"""Gas cost estimation for the on-chain legs of a bridge step.

cost_usd = gas_units * gas_price_gwei * priority_mult * congestion_mult / 1e9
           * native_token_price_usd

Congestion is inferred from the chain's latest latency sample.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import structlog

from bridge_router.catalog.chains import DEFAULT_BLOCK_TIME_SECONDS, DEFAULT_GAS_PRICE_GWEI
from bridge_router.fees.config import DEFAULT_GAS_CONFIG, CongestionLevel, GasConfig
from bridge_router.models.types import PriorityLevel, TransactionCategory

if TYPE_CHECKING:
    from bridge_router.catalog.chains import ChainRegistry
    from bridge_router.signals.base import LatencyProvider

logger = structlog.get_logger()

GWEI_PER_NATIVE = 1e9

# Blocks to wait for inclusion, by priority
_CONFIRMATION_BLOCKS = {
    PriorityLevel.URGENT: 1,
    PriorityLevel.HIGH: 2,
    PriorityLevel.MEDIUM: 3,
    PriorityLevel.LOW: 5,
}


class GasCostEstimator(Protocol):
    """Protocol for value-denominated gas cost of one on-chain leg."""

    def estimate_gas_cost_usd(
        self,
        chain_id: int,
        category: TransactionCategory,
        priority: PriorityLevel,
    ) -> float:
        """Return the cost (>= 0) of one transaction on the chain."""
        ...


@dataclass(frozen=True)
class TransactionEstimate:
    """Full breakdown of a single transaction estimate."""

    chain_id: int
    gas_units: int
    gas_price_gwei: float
    cost_native: float
    cost_usd: float
    confirmation_seconds: float
    priority: PriorityLevel
    congestion: str


class DefaultGasEstimator:
    """Gas estimator driven by the chain registry and latency samples.

    Implements GasCostEstimator.

    Attributes:
        chains: Registry supplying gas price, native symbol and block time
        latency: Provider used to infer congestion; None means unmeasured
        config: Gas configuration
    """

    def __init__(
        self,
        chains: ChainRegistry,
        latency: LatencyProvider | None = None,
        config: GasConfig | None = None,
    ) -> None:
        self.chains = chains
        self.latency = latency
        self.config = config or DEFAULT_GAS_CONFIG

    def congestion_level(self, chain_id: int) -> str:
        """Bucket the chain's latest sampled latency into a congestion level."""
        sample = self.latency.latency_sample(chain_id) if self.latency is not None else None
        if sample is None:
            return self.config.unmeasured_congestion
        if not sample.success:
            return CongestionLevel.EXTREME
        low, medium, high = self.config.congestion_thresholds_ms
        if sample.milliseconds < low:
            return CongestionLevel.LOW
        if sample.milliseconds < medium:
            return CongestionLevel.MEDIUM
        if sample.milliseconds < high:
            return CongestionLevel.HIGH
        return CongestionLevel.EXTREME

    def estimate(
        self,
        chain_id: int,
        category: TransactionCategory = TransactionCategory.TRANSFER,
        priority: PriorityLevel = PriorityLevel.MEDIUM,
        custom_gas_units: int | None = None,
    ) -> TransactionEstimate:
        """Estimate cost and confirmation time of one transaction."""
        chain = self.chains.get(chain_id)
        if chain is None:
            logger.debug("gas_estimate_unknown_chain", chain_id=chain_id)
        gas_price = chain.gas_price_gwei if chain is not None else DEFAULT_GAS_PRICE_GWEI
        block_time = chain.block_time_seconds if chain is not None else DEFAULT_BLOCK_TIME_SECONDS
        symbol = chain.symbol if chain is not None else ""

        if category == TransactionCategory.CUSTOM and custom_gas_units is not None:
            gas_units = custom_gas_units
        else:
            gas_units = self.config.gas_units[category]

        congestion = self.congestion_level(chain_id)
        congestion_mult = self.config.congestion_multipliers[congestion]
        adjusted_price = gas_price * self.config.priority_multipliers[priority] * congestion_mult

        cost_native = gas_units * adjusted_price / GWEI_PER_NATIVE
        token_price = self.config.token_prices_usd.get(symbol, self.config.default_token_price_usd)
        cost_usd = round(max(0.0, cost_native * token_price), self.config.cost_decimals)

        confirmation = _CONFIRMATION_BLOCKS[priority] * block_time * congestion_mult

        return TransactionEstimate(
            chain_id=chain_id,
            gas_units=gas_units,
            gas_price_gwei=adjusted_price,
            cost_native=cost_native,
            cost_usd=cost_usd,
            confirmation_seconds=confirmation,
            priority=priority,
            congestion=congestion,
        )

    def estimate_gas_cost_usd(
        self,
        chain_id: int,
        category: TransactionCategory,
        priority: PriorityLevel,
    ) -> float:
        """USD cost of one transaction on the chain."""
        return self.estimate(chain_id, category, priority).cost_usd


class ZeroGasEstimator:
    """Estimator that charges nothing; for fee-free simulations and tests."""

    def estimate_gas_cost_usd(
        self,
        chain_id: int,  # noqa: ARG002
        category: TransactionCategory,  # noqa: ARG002
        priority: PriorityLevel,  # noqa: ARG002
    ) -> float:
        return 0.0


__all__ = [
    "GasCostEstimator",
    "DefaultGasEstimator",
    "ZeroGasEstimator",
    "TransactionEstimate",
]

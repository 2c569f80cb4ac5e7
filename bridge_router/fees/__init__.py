"""Gas cost estimation module for the bridge router.

Usage:
    from bridge_router.fees import DefaultGasEstimator

    estimator = DefaultGasEstimator(chains=registry, latency=latency_store)
    cost = estimator.estimate_gas_cost_usd(1, TransactionCategory.BRIDGE, PriorityLevel.HIGH)
"""

from bridge_router.fees.config import DEFAULT_GAS_CONFIG, CongestionLevel, GasConfig
from bridge_router.fees.estimator import (
    DefaultGasEstimator,
    GasCostEstimator,
    TransactionEstimate,
    ZeroGasEstimator,
)

__all__ = [
    # Estimator
    "GasCostEstimator",
    "DefaultGasEstimator",
    "ZeroGasEstimator",
    "TransactionEstimate",
    # Config
    "GasConfig",
    "DEFAULT_GAS_CONFIG",
    "CongestionLevel",
]

"""Gas cost configuration."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from bridge_router.models.types import PriorityLevel, TransactionCategory


class CongestionLevel:
    """Congestion buckets derived from sampled latency."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    EXTREME = "extreme"


def _frozen(mapping: dict) -> Mapping:  # type: ignore[type-arg]
    return MappingProxyType(mapping)


@dataclass(frozen=True)
class GasConfig:
    """Centralized configuration for gas cost estimation.

    Attributes:
        gas_units: Gas consumed per transaction category
        priority_multipliers: Gas price multiplier per priority level
        congestion_multipliers: Gas price multiplier per congestion level
        congestion_thresholds_ms: Upper latency bound (exclusive) for the
            low, medium and high buckets; anything slower is extreme
        token_prices_usd: Native token prices by symbol
        default_token_price_usd: Price used for symbols not in the table
        unmeasured_congestion: Congestion assumed when no latency sample exists
        cost_decimals: Decimal places the USD cost is rounded to
    """

    gas_units: Mapping[TransactionCategory, int] = field(
        default_factory=lambda: _frozen(
            {
                TransactionCategory.TRANSFER: 21_000,
                TransactionCategory.SWAP: 150_000,
                TransactionCategory.MINT: 200_000,
                TransactionCategory.STAKE: 100_000,
                TransactionCategory.LENDING: 180_000,
                TransactionCategory.BRIDGE: 250_000,
                TransactionCategory.CUSTOM: 100_000,
            }
        )
    )
    priority_multipliers: Mapping[PriorityLevel, float] = field(
        default_factory=lambda: _frozen(
            {
                PriorityLevel.LOW: 0.8,
                PriorityLevel.MEDIUM: 1.0,
                PriorityLevel.HIGH: 1.2,
                PriorityLevel.URGENT: 1.5,
            }
        )
    )
    congestion_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen(
            {
                CongestionLevel.LOW: 1.0,
                CongestionLevel.MEDIUM: 1.3,
                CongestionLevel.HIGH: 1.8,
                CongestionLevel.EXTREME: 3.0,
            }
        )
    )
    congestion_thresholds_ms: tuple[float, float, float] = (100, 300, 800)
    token_prices_usd: Mapping[str, float] = field(
        default_factory=lambda: _frozen({"ETH": 3000.0, "MATIC": 0.80})
    )
    default_token_price_usd: float = 1.0
    unmeasured_congestion: str = CongestionLevel.MEDIUM
    cost_decimals: int = 4


# Default configuration instance
DEFAULT_GAS_CONFIG = GasConfig()

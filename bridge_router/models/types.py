"""Shared type definitions for the bridge router.

These types are used across the catalog, scoring and API models.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Annotated

from pydantic import Field

# Positive integer network identifier
ChainId = Annotated[int, Field(gt=0, description="Network chain id")]

# Upper bound for all 0-100 scores
MAX_SCORE = 100.0


class PriorityLevel(str, Enum):
    """Urgency of the on-chain legs; scales gas price."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class OptimizationCriterion(str, Enum):
    """Metric used to pick the recommended route."""

    SECURITY = "security"
    COST = "cost"
    SPEED = "speed"
    BALANCED = "balanced"


class RiskTier(str, Enum):
    """Coarse classification of a route's combined security and reliability."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        """Sort key: low < medium < high."""
        return _RISK_RANK[self]


_RISK_RANK = {RiskTier.LOW: 0, RiskTier.MEDIUM: 1, RiskTier.HIGH: 2}


class TransactionCategory(str, Enum):
    """Kind of on-chain transaction, determines gas units."""

    TRANSFER = "transfer"
    SWAP = "swap"
    MINT = "mint"
    STAKE = "stake"
    LENDING = "lending"
    BRIDGE = "bridge"
    CUSTOM = "custom"


# Legs of a single bridge step
BRIDGE_LEG = TransactionCategory.BRIDGE
TRANSFER_LEG = TransactionCategory.TRANSFER


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's round() uses banker's rounding; scores must round 80.5 to 81.
    """
    return int(Decimal(repr(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100]."""
    return clamp(value, 0.0, MAX_SCORE)


def finite_or_none(value: float | None) -> float | None:
    """Return value if it is a finite number, else None.

    Collaborators may hand back NaN or infinity; those count as missing data.
    """
    if value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number

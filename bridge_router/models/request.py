"""Routing request value object.

Requests are validated on construction so that malformed input is rejected
synchronously, before any path search begins.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from bridge_router.errors import InvalidRequestError
from bridge_router.models.types import OptimizationCriterion, PriorityLevel

# Routes pass through at most one intermediate chain
DEFAULT_MAX_HOPS = 2
SUPPORTED_MAX_HOPS = (1, 2)


def parse_criterion(value: OptimizationCriterion | str) -> OptimizationCriterion:
    """Coerce a criterion name, rejecting unknown values."""
    try:
        return OptimizationCriterion(value)
    except ValueError as err:
        valid = ", ".join(c.value for c in OptimizationCriterion)
        raise InvalidRequestError(
            f"Unknown optimization criterion '{value}' (expected one of: {valid})"
        ) from err


def parse_priority(value: PriorityLevel | str) -> PriorityLevel:
    """Coerce a priority name, rejecting unknown values."""
    try:
        return PriorityLevel(value)
    except ValueError as err:
        valid = ", ".join(p.value for p in PriorityLevel)
        raise InvalidRequestError(
            f"Unknown priority level '{value}' (expected one of: {valid})"
        ) from err


@dataclass(frozen=True)
class RoutingRequest:
    """A request to move `amount` from one chain to another.

    Attributes:
        source_chain_id: Chain the value starts on
        destination_chain_id: Chain the value must end on
        amount: Transfer amount in value units (USD), must be > 0
        priority: Priority level for gas sub-estimates
        max_hops: Maximum number of bridge hops (1 or 2)

    Raises:
        InvalidRequestError: On equal chains, non-positive amount, unknown
            priority or unsupported hop count.
    """

    source_chain_id: int
    destination_chain_id: int
    amount: float
    priority: PriorityLevel = PriorityLevel.MEDIUM
    max_hops: int = DEFAULT_MAX_HOPS

    def __post_init__(self) -> None:
        for name in ("source_chain_id", "destination_chain_id"):
            chain_id = getattr(self, name)
            if isinstance(chain_id, bool) or not isinstance(chain_id, int) or chain_id <= 0:
                raise InvalidRequestError(f"{name} must be a positive integer, got {chain_id!r}")

        if self.source_chain_id == self.destination_chain_id:
            raise InvalidRequestError(
                f"Source and destination chain are the same ({self.source_chain_id})"
            )

        if isinstance(self.amount, bool) or not isinstance(self.amount, int | float):
            raise InvalidRequestError(f"Amount must be a number, got {self.amount!r}")
        if not math.isfinite(self.amount) or self.amount <= 0:
            raise InvalidRequestError(f"Amount must be positive and finite, got {self.amount}")

        # Frozen dataclass: normalize the enum through object.__setattr__
        object.__setattr__(self, "priority", parse_priority(self.priority))

        if self.max_hops not in SUPPORTED_MAX_HOPS:
            raise InvalidRequestError(
                f"max_hops must be one of {SUPPORTED_MAX_HOPS}, got {self.max_hops}"
            )

    @property
    def chain_ids(self) -> tuple[int, int]:
        """(source, destination) pair."""
        return (self.source_chain_id, self.destination_chain_id)


__all__ = [
    "RoutingRequest",
    "DEFAULT_MAX_HOPS",
    "SUPPORTED_MAX_HOPS",
    "parse_criterion",
    "parse_priority",
]

"""Value types, the routing request, and HTTP payload models."""

from bridge_router.models.request import (
    DEFAULT_MAX_HOPS,
    SUPPORTED_MAX_HOPS,
    RoutingRequest,
    parse_criterion,
    parse_priority,
)
from bridge_router.models.types import (
    ChainId,
    OptimizationCriterion,
    PriorityLevel,
    RiskTier,
    TransactionCategory,
)

__all__ = [
    # Types
    "ChainId",
    "OptimizationCriterion",
    "PriorityLevel",
    "RiskTier",
    "TransactionCategory",
    # Request
    "RoutingRequest",
    "DEFAULT_MAX_HOPS",
    "SUPPORTED_MAX_HOPS",
    "parse_criterion",
    "parse_priority",
]

"""Route discovery and scoring.

Module structure:
- router.py: CrossChainRouter facade class
- types.py: BridgeStep, CrossChainRoute, RoutingResult, ValidationResult
- pathfinding.py: ChainGraph and PathFinder for path enumeration
- scoring.py: StepScorer and per-edge protocol choice
- aggregation.py: Step totals, fee-weighted scores and risk tier
- selection.py: Recommended route per criterion and display ordering
- validation.py: Structural route checks
- formatting.py: Human-readable durations and steps
"""

from bridge_router.routing.aggregation import aggregate, classify_risk
from bridge_router.routing.formatting import format_route_step, format_time
from bridge_router.routing.pathfinding import ChainGraph, PathFinder, find_paths
from bridge_router.routing.router import CrossChainRouter, get_default_router
from bridge_router.routing.scoring import StepScorer, choose_protocol
from bridge_router.routing.selection import balanced_scores, select_route, sort_routes
from bridge_router.routing.types import BridgeStep, CrossChainRoute, RoutingResult, ValidationResult
from bridge_router.routing.validation import validate_route

__all__ = [
    "BridgeStep",
    "ChainGraph",
    "CrossChainRoute",
    "CrossChainRouter",
    "PathFinder",
    "RoutingResult",
    "StepScorer",
    "ValidationResult",
    "aggregate",
    "balanced_scores",
    "choose_protocol",
    "classify_risk",
    "find_paths",
    "format_route_step",
    "format_time",
    "get_default_router",
    "select_route",
    "sort_routes",
    "validate_route",
]

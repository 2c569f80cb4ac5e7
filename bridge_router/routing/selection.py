"""Route selection and display ordering.

Selection picks a single recommended route for an optimization criterion.
Every comparison keeps the earlier route on ties, so the result depends only
on the input order and the route values.
"""

from __future__ import annotations

from collections.abc import Sequence

from bridge_router.models.types import MAX_SCORE, OptimizationCriterion
from bridge_router.routing.types import CrossChainRoute

# Balanced criterion weights: security, reliability, cost, speed
BALANCED_WEIGHTS = (0.30, 0.20, 0.25, 0.25)


def _normalized_inverse(value: float, maximum: float) -> float:
    """1 - value/maximum, or 1 when every candidate is zero."""
    if maximum <= 0:
        return 1.0
    return 1.0 - value / maximum


def balanced_scores(routes: Sequence[CrossChainRoute]) -> list[float]:
    """Balanced utility of each route, relative to the candidate set.

    Fee and time are normalized against the largest value among the
    candidates, so the scores are unchanged when all fees (or all times)
    are scaled by the same positive factor.
    """
    if not routes:
        return []
    w_security, w_reliability, w_cost, w_speed = BALANCED_WEIGHTS
    max_fee = max(r.total_fee_usd for r in routes)
    max_time = max(r.total_time_seconds for r in routes)
    return [
        w_security * (r.security_score / MAX_SCORE)
        + w_reliability * (r.reliability_score / MAX_SCORE)
        + w_cost * _normalized_inverse(r.total_fee_usd, max_fee)
        + w_speed * _normalized_inverse(r.total_time_seconds, max_time)
        for r in routes
    ]


def select_route(
    routes: Sequence[CrossChainRoute],
    criterion: OptimizationCriterion,
) -> CrossChainRoute | None:
    """Best route for the criterion, or None when there are no routes.

    - security: highest security; ties by lowest fee, then input order
    - cost: lowest total fee
    - speed: lowest total time
    - balanced: highest balanced utility (see balanced_scores)
    """
    if not routes:
        return None

    criterion = OptimizationCriterion(criterion)
    best_index = 0

    if criterion == OptimizationCriterion.SECURITY:
        for i, route in enumerate(routes[1:], start=1):
            best = routes[best_index]
            if route.security_score > best.security_score or (
                route.security_score == best.security_score
                and route.total_fee_usd < best.total_fee_usd
            ):
                best_index = i
    elif criterion == OptimizationCriterion.COST:
        for i, route in enumerate(routes[1:], start=1):
            if route.total_fee_usd < routes[best_index].total_fee_usd:
                best_index = i
    elif criterion == OptimizationCriterion.SPEED:
        for i, route in enumerate(routes[1:], start=1):
            if route.total_time_seconds < routes[best_index].total_time_seconds:
                best_index = i
    else:
        scores = balanced_scores(routes)
        for i, score in enumerate(scores[1:], start=1):
            if score > scores[best_index]:
                best_index = i

    return routes[best_index]


def sort_routes(routes: Sequence[CrossChainRoute]) -> list[CrossChainRoute]:
    """Display order: ascending risk tier, then ascending fee (stable)."""
    return sorted(routes, key=lambda r: (r.risk.rank, r.total_fee_usd))


__all__ = ["select_route", "sort_routes", "balanced_scores", "BALANCED_WEIGHTS"]

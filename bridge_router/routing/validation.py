"""Structural route validation.

Reports problems as data; never raises and never mutates the route.
"""

from __future__ import annotations

from collections.abc import Collection

from bridge_router.routing.types import CrossChainRoute, ValidationResult


def _route_chains(route: CrossChainRoute) -> list[int]:
    """Every chain the route references, first occurrence order."""
    chains = [route.source_chain_id, route.destination_chain_id]
    for step in route.steps:
        chains.extend((step.source_chain_id, step.dest_chain_id))
    return list(dict.fromkeys(chains))


def validate_route(route: CrossChainRoute, known_chains: Collection[int]) -> ValidationResult:
    """Check a route for structural consistency.

    Checks, in order: every referenced chain (declared source and
    destination included) is known, at least one step, consecutive steps
    connect, the first step leaves the route source and the last step
    arrives at the route destination.
    """
    issues = [
        f"Route references unknown chain {chain_id}"
        for chain_id in _route_chains(route)
        if chain_id not in known_chains
    ]
    steps = route.steps

    if not steps:
        issues.append("Route has no steps")
        return ValidationResult(ok=False, issues=tuple(issues))

    for index in range(1, len(steps)):
        previous, current = steps[index - 1], steps[index]
        if current.source_chain_id != previous.dest_chain_id:
            issues.append(
                f"Step {index + 1} starts on chain {current.source_chain_id} "
                f"but step {index} ends on chain {previous.dest_chain_id}"
            )

    if steps[0].source_chain_id != route.source_chain_id:
        issues.append(
            f"First step starts on chain {steps[0].source_chain_id}, "
            f"route source is {route.source_chain_id}"
        )
    if steps[-1].dest_chain_id != route.destination_chain_id:
        issues.append(
            f"Last step ends on chain {steps[-1].dest_chain_id}, "
            f"route destination is {route.destination_chain_id}"
        )

    return ValidationResult(ok=not issues, issues=tuple(issues))


__all__ = ["validate_route"]

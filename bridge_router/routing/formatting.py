"""Human-readable rendering of durations and route steps."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from bridge_router.models.types import round_half_up

if TYPE_CHECKING:
    from bridge_router.catalog.catalog import BridgeCatalog
    from bridge_router.catalog.chains import ChainRegistry
    from bridge_router.routing.types import BridgeStep

MINUTE = 60
HOUR = 3600
DAY = 86400


def format_time(seconds: float) -> str:
    """Render a duration: "45 seconds", "12 minutes", "2h 5m", "1d 3h"."""
    if seconds < MINUTE:
        return f"{round_half_up(seconds)} seconds"
    if seconds < HOUR:
        return f"{round_half_up(seconds / MINUTE)} minutes"
    if seconds < DAY:
        hours = math.floor(seconds / HOUR)
        minutes = round_half_up((seconds % HOUR) / MINUTE)
        return f"{hours}h {minutes}m"
    days = math.floor(seconds / DAY)
    hours = round_half_up((seconds % DAY) / HOUR)
    return f"{days}d {hours}h"


def format_route_step(step: BridgeStep, chains: ChainRegistry, catalog: BridgeCatalog) -> str:
    """One-line summary, e.g. "Ethereum → Base via Base Bridge (~15 minutes, $3.20)"."""
    if catalog.has_protocol(step.protocol):
        protocol_name = catalog.get_profile(step.protocol).name
    else:
        protocol_name = step.protocol
    return (
        f"{chains.name_of(step.source_chain_id)} → {chains.name_of(step.dest_chain_id)} "
        f"via {protocol_name} "
        f"(~{format_time(step.estimated_time_seconds)}, ${step.estimated_fee_usd:.2f})"
    )


__all__ = ["format_time", "format_route_step"]

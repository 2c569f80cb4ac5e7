"""Routing configuration."""

from dataclasses import dataclass

# One day, the default reliability history window
DAY_MS = 24 * 60 * 60 * 1000


@dataclass(frozen=True)
class RouterConfig:
    """Centralized configuration for step scoring and signal gathering.

    The scoring weights and defaults are part of the observable ranking
    behavior; changing them changes which route is recommended.

    Attributes:
        default_latency_factor: Time multiplier for a chain with no fresh,
            successful latency sample (moderately degraded, never 1.0)
        default_chain_score: Security/reliability used for unrated or zero-scored chains
        latency_max_age_seconds: Samples older than this are not fresh
        reliability_window_ms: History window passed to the reliability provider
        protocol_weight: Weight of the protocol's own score in a step score
        chain_weight: Weight of each endpoint chain's score in a step score
        min_step_time_seconds: Floor for step time so it stays strictly positive
        signal_timeout_seconds: Per-fetch timeout during signal fan-out
    """

    default_latency_factor: float = 1.5
    default_chain_score: float = 50.0
    latency_max_age_seconds: float = 5 * 60
    reliability_window_ms: int = DAY_MS

    protocol_weight: float = 0.6
    chain_weight: float = 0.2

    min_step_time_seconds: float = 1e-6

    signal_timeout_seconds: float = 2.0


# Default configuration instance
DEFAULT_ROUTER_CONFIG = RouterConfig()

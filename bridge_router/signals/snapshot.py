"""Concurrent signal gathering.

Before scoring, a request needs latency, reliability, security and gas data
for every chain its candidate paths touch. Each lookup is independent, so
they fan out concurrently on a bounded thread pool, each bounded by its own
timeout, and fan back in to an immutable SignalSnapshot. A lookup that times
out, fails, or is still pending when the request deadline expires or the
request is cancelled is simply absent from the snapshot; the scorer then
applies its documented defaults.

A timeout stops the wait, not the lookup: the worker thread runs until the
provider returns. Lookups use a dedicated pool (SIGNAL_WORKERS threads unless
the caller passes its own executor) so a hung provider can pin at most that
many threads and never starves the event loop's default executor.
"""

from __future__ import annotations

import asyncio
import functools
import time
from collections.abc import Callable, Iterable, Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

import structlog

from bridge_router.config import DEFAULT_ROUTER_CONFIG
from bridge_router.models.types import BRIDGE_LEG, TRANSFER_LEG, PriorityLevel, TransactionCategory
from bridge_router.signals.base import (
    LatencyProvider,
    LatencySample,
    ReliabilityProvider,
    SecurityRatingProvider,
)

if TYPE_CHECKING:
    from bridge_router.fees.estimator import GasCostEstimator

logger = structlog.get_logger()

GasKey = tuple[int, TransactionCategory, PriorityLevel]

# Size of the shared signal lookup pool
SIGNAL_WORKERS = 16

_executor: ThreadPoolExecutor | None = None


def signal_executor() -> ThreadPoolExecutor:
    """Shared pool for signal lookups, created on first use."""
    global _executor
    if _executor is None:
        _executor = ThreadPoolExecutor(
            max_workers=SIGNAL_WORKERS, thread_name_prefix="signal-fetch"
        )
    return _executor


@dataclass(frozen=True)
class SignalSnapshot:
    """Resolved signals for one routing request.

    Implements LatencyProvider, ReliabilityProvider, SecurityRatingProvider
    and GasCostEstimator over the resolved values, so it can be handed to the
    step scorer in place of the live providers.

    Attributes:
        latency: chain -> latest sample
        reliability: chain -> reliability score
        security: chain -> security rating
        gas: (chain, category, priority) -> USD cost
        gas_fallback: Estimator for gas keys that did not resolve; None means 0
        missing: Descriptions of lookups that did not resolve
    """

    latency: Mapping[int, LatencySample] = field(default_factory=dict)
    reliability: Mapping[int, float] = field(default_factory=dict)
    security: Mapping[int, float] = field(default_factory=dict)
    gas: Mapping[GasKey, float] = field(default_factory=dict)
    gas_fallback: GasCostEstimator | None = None
    missing: tuple[str, ...] = ()

    def latency_sample(self, chain_id: int) -> LatencySample | None:
        return self.latency.get(chain_id)

    def reliability_score(self, chain_id: int, window_ms: int) -> float | None:  # noqa: ARG002
        # Window was applied when the value was fetched
        return self.reliability.get(chain_id)

    def security_rating(self, chain_id: int) -> float | None:
        return self.security.get(chain_id)

    def estimate_gas_cost_usd(
        self,
        chain_id: int,
        category: TransactionCategory,
        priority: PriorityLevel,
    ) -> float:
        cost = self.gas.get((chain_id, category, priority))
        if cost is not None:
            return cost
        if self.gas_fallback is not None:
            return self.gas_fallback.estimate_gas_cost_usd(chain_id, category, priority)
        return 0.0

    @property
    def is_complete(self) -> bool:
        """True if every requested lookup resolved."""
        return not self.missing


async def _fetch(
    label: str,
    fn: Callable[..., Any],
    args: tuple[Any, ...],
    timeout: float,
    executor: Executor,
) -> Any:
    """Run one blocking lookup on the executor, bounded by timeout.

    Raises whatever the lookup raises; TimeoutError when it overruns,
    including time spent queued for a free worker.
    """
    logger.debug("signal_fetch_started", signal=label)
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(executor, functools.partial(fn, *args))
    return await asyncio.wait_for(future, timeout=timeout)


async def collect_signals(
    chain_ids: Iterable[int],
    *,
    latency: LatencyProvider,
    reliability: ReliabilityProvider,
    security: SecurityRatingProvider,
    gas: GasCostEstimator,
    priority: PriorityLevel = PriorityLevel.MEDIUM,
    window_ms: int = DEFAULT_ROUTER_CONFIG.reliability_window_ms,
    fetch_timeout: float = DEFAULT_ROUTER_CONFIG.signal_timeout_seconds,
    deadline: float | None = None,
    cancel_event: asyncio.Event | None = None,
    gas_fallback: GasCostEstimator | None = None,
    executor: Executor | None = None,
) -> SignalSnapshot:
    """Fan out independent signal lookups and fan in to a snapshot.

    Args:
        chain_ids: Chains whose signals are needed
        latency: Latency provider
        reliability: Reliability provider
        security: Security rating provider
        gas: Gas cost estimator
        priority: Priority level for the gas lookups
        window_ms: Reliability history window
        fetch_timeout: Per-lookup timeout in seconds
        deadline: Absolute time.monotonic() deadline for the whole fan-in
        cancel_event: When set, stop waiting and use what resolved so far
        gas_fallback: Carried into the snapshot for unresolved gas keys
        executor: Pool that runs the blocking lookups; defaults to signal_executor()

    Returns:
        SignalSnapshot of every lookup that resolved in time
    """
    chains = sorted(set(chain_ids))
    specs: dict[str, tuple[str, Any, Callable[..., Any], tuple[Any, ...]]] = {}
    for chain_id in chains:
        specs[f"latency:{chain_id}"] = ("latency", chain_id, latency.latency_sample, (chain_id,))
        specs[f"reliability:{chain_id}"] = (
            "reliability",
            chain_id,
            reliability.reliability_score,
            (chain_id, window_ms),
        )
        specs[f"security:{chain_id}"] = ("security", chain_id, security.security_rating, (chain_id,))
        for category in (BRIDGE_LEG, TRANSFER_LEG):
            specs[f"gas:{chain_id}:{category.value}"] = (
                "gas",
                (chain_id, category, priority),
                gas.estimate_gas_cost_usd,
                (chain_id, category, priority),
            )

    pool = executor if executor is not None else signal_executor()
    tasks: dict[asyncio.Task[Any], str] = {
        asyncio.create_task(_fetch(label, fn, args, fetch_timeout, pool)): label
        for label, (_, _, fn, args) in specs.items()
    }
    cancel_waiter: asyncio.Task[Any] | None = (
        asyncio.create_task(cancel_event.wait()) if cancel_event is not None else None
    )

    pending: set[asyncio.Task[Any]] = set(tasks)
    try:
        while pending:
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                logger.warning("signal_deadline_expired", pending=len(pending))
                break
            waiting = pending | ({cancel_waiter} if cancel_waiter is not None else set())
            done, _ = await asyncio.wait(
                waiting, timeout=remaining, return_when=asyncio.FIRST_COMPLETED
            )
            pending -= done
            if cancel_waiter is not None and cancel_waiter in done:
                logger.warning("signal_fetch_cancelled", pending=len(pending))
                break
    finally:
        for task in pending:
            task.cancel()
        if cancel_waiter is not None and not cancel_waiter.done():
            cancel_waiter.cancel()

    resolved: dict[str, dict[Any, Any]] = {"latency": {}, "reliability": {}, "security": {}, "gas": {}}
    missing: list[str] = []
    for task, label in tasks.items():
        kind, key, _, _ = specs[label]
        if task in pending or task.cancelled():
            missing.append(label)
            continue
        error = task.exception()
        if isinstance(error, TimeoutError):
            logger.warning("signal_fetch_timeout", signal=label, timeout_seconds=fetch_timeout)
            missing.append(label)
            continue
        if error is not None:
            logger.warning("signal_fetch_failed", signal=label, error=str(error))
            missing.append(label)
            continue
        value = task.result()
        if value is None:
            continue
        resolved[kind][key] = value

    snapshot = SignalSnapshot(
        latency=MappingProxyType(resolved["latency"]),
        reliability=MappingProxyType(resolved["reliability"]),
        security=MappingProxyType(resolved["security"]),
        gas=MappingProxyType(resolved["gas"]),
        gas_fallback=gas_fallback,
        missing=tuple(sorted(missing)),
    )
    logger.debug(
        "signals_collected",
        chains=len(chains),
        requested=len(specs),
        missing=len(missing),
    )
    return snapshot


__all__ = ["SignalSnapshot", "collect_signals", "signal_executor", "SIGNAL_WORKERS"]

"""Cross-chain router: the engine's public facade.

CrossChainRouter ties the pieces together for one request:
1. Validate the request against the chain registry
2. Enumerate candidate chain paths
3. Score each edge with its chosen protocol
4. Aggregate paths into routes, drop paths with an unusable edge
5. Select the recommended route and order the rest for display

route() scores against the live providers. route_async() first resolves
every needed signal concurrently into a SignalSnapshot, then scores against
the snapshot so that a slow or failing provider degrades to defaults instead
of stalling the request.
"""

from __future__ import annotations

import asyncio
import threading
import time
from collections.abc import Callable, Collection, Sequence
from typing import TYPE_CHECKING

import structlog

from bridge_router.catalog.catalog import DEFAULT_BRIDGE_CATALOG, BridgeCatalog
from bridge_router.catalog.chains import ChainRegistry
from bridge_router.catalog.connectivity import CustomBridge, CustomBridgeRegistry
from bridge_router.catalog.protocols import BridgeProtocol
from bridge_router.config import DEFAULT_ROUTER_CONFIG, RouterConfig
from bridge_router.errors import InvalidRequestError
from bridge_router.fees.estimator import DefaultGasEstimator
from bridge_router.models.request import RoutingRequest, parse_criterion
from bridge_router.models.types import OptimizationCriterion
from bridge_router.routing.aggregation import aggregate
from bridge_router.routing.pathfinding import PathFinder
from bridge_router.routing.scoring import StepScorer, choose_protocol
from bridge_router.routing.selection import select_route, sort_routes
from bridge_router.routing.types import BridgeStep, CrossChainRoute, RoutingResult, ValidationResult
from bridge_router.routing.validation import validate_route
from bridge_router.signals.history import NetworkHistory
from bridge_router.signals.security import SecurityRatings
from bridge_router.signals.snapshot import collect_signals
from bridge_router.signals.speed import LatencyStore

if TYPE_CHECKING:
    from bridge_router.fees.estimator import GasCostEstimator
    from bridge_router.signals.base import (
        LatencyProvider,
        ReliabilityProvider,
        SecurityRatingProvider,
    )

logger = structlog.get_logger()


class CrossChainRouter:
    """Discovers, scores and ranks routes between chains.

    Every collaborator is injectable; omitted ones default to the built-in
    catalog, chain table and in-memory signal stores. The router holds no
    per-request state, so one instance may serve concurrent requests.

    Args:
        catalog: Bridge protocol catalog and direct bridge table
        chains: Registry of known chains
        custom_bridges: Registry of user-added bridges
        latency: Latency sample provider
        reliability: Reliability history provider
        security: Chain security rating provider
        gas: Gas cost estimator for the on-chain legs
        config: Scoring weights, defaults and timeouts
        clock: Epoch-seconds clock used for latency freshness
    """

    def __init__(
        self,
        catalog: BridgeCatalog | None = None,
        chains: ChainRegistry | None = None,
        custom_bridges: CustomBridgeRegistry | None = None,
        latency: LatencyProvider | None = None,
        reliability: ReliabilityProvider | None = None,
        security: SecurityRatingProvider | None = None,
        gas: GasCostEstimator | None = None,
        config: RouterConfig | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.catalog = catalog or DEFAULT_BRIDGE_CATALOG
        self.chains = chains if chains is not None else ChainRegistry()
        self.custom_bridges = custom_bridges if custom_bridges is not None else CustomBridgeRegistry()
        self.latency = latency if latency is not None else LatencyStore(clock=clock)
        self.reliability = reliability if reliability is not None else NetworkHistory(clock=clock)
        self.security = security if security is not None else SecurityRatings(clock=clock)
        self.gas = gas if gas is not None else DefaultGasEstimator(self.chains, self.latency)
        self.config = config or DEFAULT_ROUTER_CONFIG
        self._clock = clock
        self.path_finder = PathFinder(self.catalog, self.custom_bridges)

        # Static estimate for gas lookups that do not resolve during fan-out
        self._gas_fallback = DefaultGasEstimator(self.chains)

    @property
    def known_chains(self) -> frozenset[int]:
        """Chain ids known to the registry (built-in and custom)."""
        return self.chains.known_chains

    def _live_scorer(self) -> StepScorer:
        return StepScorer(
            self.catalog,
            self.latency,
            self.reliability,
            self.security,
            self.gas,
            self.config,
            self._clock,
        )

    def _check_chains(self, request: RoutingRequest) -> None:
        """Reject requests naming chains the registry does not know."""
        for chain_id in request.chain_ids:
            if chain_id not in self.chains:
                raise InvalidRequestError(f"Unknown chain id {chain_id}")

    def find_paths(self, request: RoutingRequest) -> list[list[int]]:
        """Candidate chain sequences for a validated request."""
        return self.path_finder.find_paths(
            request.source_chain_id,
            request.destination_chain_id,
            request.max_hops,
            self.known_chains,
        )

    def _build_routes(
        self,
        paths: Sequence[Sequence[int]],
        request: RoutingRequest,
        scorer: StepScorer,
    ) -> list[CrossChainRoute]:
        """Score and aggregate every path; paths with an unusable edge are dropped."""
        graph = self.path_finder.graph
        # Edges shared between paths are scored once per request
        scored: dict[tuple[int, int], BridgeStep | None] = {}
        routes: list[CrossChainRoute] = []

        for path in paths:
            steps: list[BridgeStep] = []
            for source, destination in zip(path, path[1:], strict=False):
                edge = (source, destination)
                if edge not in scored:
                    profile = choose_protocol(graph, source, destination, self.catalog)
                    scored[edge] = (
                        scorer.score_step(
                            source, destination, profile, request.amount, request.priority
                        )
                        if profile is not None
                        else None
                    )
                step = scored[edge]
                if step is None:
                    logger.debug(
                        "path_dropped_unusable_edge",
                        path=list(path),
                        source=source,
                        destination=destination,
                    )
                    break
                steps.append(step)
            else:
                routes.append(aggregate(steps))

        return routes

    def _finish(
        self,
        routes: list[CrossChainRoute],
        request: RoutingRequest,
        criterion: OptimizationCriterion,
    ) -> RoutingResult:
        selected = select_route(routes, criterion)
        result = RoutingResult(routes=tuple(sort_routes(routes)), selected=selected)
        if selected is None:
            logger.info(
                "no_route_found",
                source_chain_id=request.source_chain_id,
                destination_chain_id=request.destination_chain_id,
                max_hops=request.max_hops,
            )
        else:
            logger.info(
                "route_found",
                source_chain_id=request.source_chain_id,
                destination_chain_id=request.destination_chain_id,
                criterion=criterion.value,
                route_count=len(routes),
                path=selected.path,
                protocols=selected.protocols,
                total_fee_usd=round(selected.total_fee_usd, 4),
                total_time_seconds=round(selected.total_time_seconds, 1),
                risk=selected.risk.value,
            )
        return result

    def route(
        self,
        request: RoutingRequest,
        criterion: OptimizationCriterion | str = OptimizationCriterion.BALANCED,
    ) -> RoutingResult:
        """Find, score and rank routes for a request using the live providers.

        Args:
            request: Validated routing request
            criterion: Metric used to pick the recommended route

        Returns:
            RoutingResult with routes in display order and the selected route;
            empty with selected=None when nothing connects

        Raises:
            InvalidRequestError: Unknown chain or criterion
        """
        criterion = parse_criterion(criterion)
        self._check_chains(request)
        logger.info(
            "route_request_received",
            source_chain_id=request.source_chain_id,
            destination_chain_id=request.destination_chain_id,
            amount=request.amount,
            priority=request.priority.value,
            max_hops=request.max_hops,
            criterion=criterion.value,
        )
        paths = self.find_paths(request)
        routes = self._build_routes(paths, request, self._live_scorer())
        return self._finish(routes, request, criterion)

    async def route_async(
        self,
        request: RoutingRequest,
        criterion: OptimizationCriterion | str = OptimizationCriterion.BALANCED,
        deadline: float | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> RoutingResult:
        """Like route(), but resolve signals concurrently first.

        Args:
            request: Validated routing request
            criterion: Metric used to pick the recommended route
            deadline: Absolute time.monotonic() bound for signal gathering
            cancel_event: When set, stop gathering and score with what resolved

        Raises:
            InvalidRequestError: Unknown chain or criterion
        """
        criterion = parse_criterion(criterion)
        self._check_chains(request)
        logger.info(
            "route_request_received",
            source_chain_id=request.source_chain_id,
            destination_chain_id=request.destination_chain_id,
            amount=request.amount,
            priority=request.priority.value,
            max_hops=request.max_hops,
            criterion=criterion.value,
            concurrent_signals=True,
        )
        paths = self.find_paths(request)
        if not paths:
            return self._finish([], request, criterion)

        chain_ids = {chain_id for path in paths for chain_id in path}
        snapshot = await collect_signals(
            chain_ids,
            latency=self.latency,
            reliability=self.reliability,
            security=self.security,
            gas=self.gas,
            priority=request.priority,
            window_ms=self.config.reliability_window_ms,
            fetch_timeout=self.config.signal_timeout_seconds,
            deadline=deadline,
            cancel_event=cancel_event,
            gas_fallback=self._gas_fallback,
        )
        if not snapshot.is_complete:
            logger.warning("routing_with_partial_signals", missing=list(snapshot.missing))

        scorer = StepScorer(
            self.catalog, snapshot, snapshot, snapshot, snapshot, self.config, self._clock
        )
        routes = self._build_routes(paths, request, scorer)
        return self._finish(routes, request, criterion)

    def register_custom_bridge(
        self,
        source_chain_id: int,
        dest_chain_id: int,
        protocol: BridgeProtocol | str = BridgeProtocol.CUSTOM,
        pin: bool = False,
    ) -> CustomBridge:
        """Add a bridge to the connectivity used by later requests.

        Custom bridges only add edges; catalog entries are never removed.
        With pin=True the edge's protocol choice is restricted to pinned
        protocols.

        Raises:
            UnknownChainError: If either chain is not in the registry
            UnknownProtocolError: If the protocol is not in the catalog
            InvalidRequestError: If source and destination are the same chain
        """
        self.chains.require(source_chain_id)
        self.chains.require(dest_chain_id)
        profile = self.catalog.get_profile(protocol)
        if source_chain_id == dest_chain_id:
            raise InvalidRequestError(
                f"Custom bridge source and destination are the same ({source_chain_id})"
            )
        return self.custom_bridges.add(source_chain_id, dest_chain_id, profile.protocol_id, pin)

    def validate_route(
        self,
        route: CrossChainRoute,
        known_chains: Collection[int] | None = None,
    ) -> ValidationResult:
        """Structural validation against known_chains (default: the registry)."""
        return validate_route(route, self.known_chains if known_chains is None else known_chains)


_default_router: CrossChainRouter | None = None
_default_router_lock = threading.Lock()


def get_default_router(config: RouterConfig | None = None) -> CrossChainRouter:
    """Process-wide router with the built-in catalog and in-memory signal stores.

    ``config`` only applies to the call that builds the router.
    """
    global _default_router
    with _default_router_lock:
        if _default_router is None:
            _default_router = CrossChainRouter(config=config)
            logger.info(
                "default_router_created",
                protocols=len(_default_router.catalog),
                chains=len(_default_router.chains),
            )
        return _default_router


__all__ = ["CrossChainRouter", "get_default_router"]

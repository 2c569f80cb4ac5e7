"""End-to-end routing scenarios through the router and the HTTP API."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from bridge_router.api.endpoints import get_router
from bridge_router.api.main import app
from bridge_router.catalog.chains import ChainInfo
from bridge_router.config import RouterConfig
from bridge_router.models.request import RoutingRequest
from bridge_router.models.types import OptimizationCriterion, RiskTier, round_half_up
from bridge_router.routing.formatting import format_route_step
from bridge_router.routing.router import CrossChainRouter
from bridge_router.signals.history import NetworkHistory
from bridge_router.signals.security import SecurityRatings
from bridge_router.signals.speed import LatencyStore
from tests.helpers import SlowSecurity, fixed_clock


class TestReferenceScenario:
    """Chains 1, 2, 3 linked 1 -> 2 -> 3 by one 80/80 protocol, chains rated 80."""

    def test_single_one_hop_route(self, router) -> None:
        paths = router.find_paths(RoutingRequest(1, 3, 1000))
        assert paths == [[1, 2, 3]]

        result = router.route(RoutingRequest(1, 3, 1000), OptimizationCriterion.SECURITY)
        route = result.selected

        assert len(result.routes) == 1
        assert route.hop_count == 2
        assert route.total_fee_usd == pytest.approx(2 + 2 * (1000 * 0.01))
        # 2 steps * 600s * 1.5 * 1.5 (no latency samples)
        assert route.total_time_seconds == pytest.approx(2700)
        assert route.security_score == 80
        assert route.reliability_score == 80
        assert route.risk == RiskTier.LOW
        assert router.validate_route(route).ok

    def test_fresh_latency_speeds_up_route(self, router) -> None:
        for chain_id in (1, 2, 3):
            router.latency.record(chain_id, 0)
        route = router.route(RoutingRequest(1, 3, 1000)).selected
        assert route.total_time_seconds == pytest.approx(1200)

    def test_every_criterion_selects_the_only_route(self, router) -> None:
        request = RoutingRequest(1, 3, 1000)
        selections = {router.route(request, c).selected for c in OptimizationCriterion}
        assert len(selections) == 1


class TestDefaultCatalog:
    """Routing over the built-in catalog, chains and reference providers."""

    def make_router(self) -> CrossChainRouter:
        latency = LatencyStore(clock=fixed_clock)
        history = NetworkHistory(clock=fixed_clock)
        for chain_id, ms in {1: 120, 137: 80, 42161: 60, 10: 70, 8453: 90}.items():
            latency.record(chain_id, ms)
            history.add_entry(chain_id, ms)
        return CrossChainRouter(
            latency=latency,
            reliability=history,
            security=SecurityRatings(clock=fixed_clock),
            clock=fixed_clock,
        )

    def test_direct_route_across_protocols(self) -> None:
        router = self.make_router()
        result = router.route(RoutingRequest(1, 42161, 5000), OptimizationCriterion.SECURITY)

        assert len(result.routes) == 1
        route = result.selected
        assert route.path == [1, 42161]
        # Highest-security protocol on the edge
        assert route.protocols == ["layerzero"]
        assert route.total_fee_usd > 0
        assert 0 <= route.security_score <= 100

    def test_custom_chain_reachable_through_intermediates(self) -> None:
        router = self.make_router()
        router.chains.add_custom_chain(ChainInfo(7777, "Devnet", "DEV"))
        router.register_custom_bridge(42161, 7777, "layerzero")
        router.register_custom_bridge(10, 7777, "hop")

        result = router.route(RoutingRequest(1, 7777, 100))
        paths = [route.path for route in result.routes]

        assert sorted(paths) == [[1, 10, 7777], [1, 42161, 7777]]
        assert result.selected in result.routes
        assert "Devnet" in format_route_step(
            result.selected.steps[-1], router.chains, router.catalog
        )

    def test_unrated_custom_chain_uses_defaults(self) -> None:
        router = self.make_router()
        router.chains.add_custom_chain(ChainInfo(7777, "Devnet", "DEV"))
        router.register_custom_bridge(1, 7777, "across")

        step = router.route(RoutingRequest(1, 7777, 100)).selected.steps[0]
        # Chain 7777 has no latency sample, no history and no security data
        across = router.catalog.get_profile("across")
        assert step.estimated_time_seconds == pytest.approx(
            across.baseline_time_seconds * 1.12 * 1.5
        )

    def test_slow_security_provider_degrades_gracefully(self) -> None:
        router = self.make_router()
        router.security = SlowSecurity(delay_seconds=0.5)
        router.config = RouterConfig(signal_timeout_seconds=0.05)

        result = asyncio.run(router.route_async(RoutingRequest(1, 8453, 1000)))

        assert result.found
        # Every chain rating timed out; only the protocol score moves the result
        chosen = router.catalog.get_profile("layerzero")
        expected = round_half_up(0.6 * chosen.security_score + 0.2 * 50 + 0.2 * 50)
        assert result.selected.protocols == ["layerzero"]
        assert result.selected.security_score == expected


def test_api_round_trip(router) -> None:
    app.dependency_overrides[get_router] = lambda: router
    try:
        client = TestClient(app)
        body = {
            "sourceChainId": 1,
            "destinationChainId": 3,
            "amount": 1000,
            "priority": "high",
            "maxHops": 2,
            "criterion": "balanced",
        }
        data = client.post("/routes", json=body).json()
        assert data["selected"]["path"] == [1, 2, 3]
        assert data["selected"]["totalTimeSeconds"] == pytest.approx(2700)

        check = client.post("/routes/validate", json=data["selected"]).json()
        assert check["ok"] is True
    finally:
        app.dependency_overrides.clear()


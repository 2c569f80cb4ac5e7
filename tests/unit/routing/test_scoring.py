"""Tests for step scoring and edge protocol choice."""

import math
from unittest.mock import MagicMock

import pytest

from bridge_router.catalog.connectivity import CustomBridge
from bridge_router.config import DAY_MS, RouterConfig
from bridge_router.errors import UnknownProtocolError
from bridge_router.models.types import BRIDGE_LEG, TRANSFER_LEG, PriorityLevel
from bridge_router.routing.pathfinding import ChainGraph
from bridge_router.routing.scoring import StepScorer, choose_protocol
from bridge_router.signals.base import LatencySample, SecurityRatingProvider
from bridge_router.signals.history import NetworkHistory
from tests.helpers import (
    NOW,
    StaticGas,
    StaticLatency,
    StaticReliability,
    StaticSecurity,
    fixed_clock,
    make_catalog,
    make_profile,
)


def make_scorer(
    latency=None,
    reliability=None,
    security=None,
    gas=None,
    catalog=None,
    config=None,
) -> StepScorer:
    return StepScorer(
        catalog or make_catalog(),
        latency or StaticLatency(),
        reliability or StaticReliability({1: 80, 2: 80, 3: 80}),
        security or StaticSecurity({1: 80, 2: 80, 3: 80}),
        gas or StaticGas(0.0),
        config,
        fixed_clock,
    )


class TestLatencyFactor:
    """Tests for the per-chain time multiplier."""

    def test_missing_sample_uses_default(self) -> None:
        assert make_scorer().latency_factor(1) == 1.5

    def test_fresh_sample(self) -> None:
        scorer = make_scorer(latency=StaticLatency({1: 250.0}))
        assert scorer.latency_factor(1) == pytest.approx(1.25)

    def test_factor_never_below_one(self) -> None:
        scorer = make_scorer(latency=StaticLatency({1: 0.0}))
        assert scorer.latency_factor(1) == 1.0

    def test_failed_sample_uses_default(self) -> None:
        latency = StaticLatency()
        latency.samples[1] = LatencySample(1, -1, False, NOW, "timeout")
        assert make_scorer(latency=latency).latency_factor(1) == 1.5

    def test_stale_sample_uses_default(self) -> None:
        latency = StaticLatency({1: 100.0}, now=NOW - 301)
        assert make_scorer(latency=latency).latency_factor(1) == 1.5

    def test_sample_at_max_age_is_fresh(self) -> None:
        latency = StaticLatency({1: 100.0}, now=NOW - 300)
        assert make_scorer(latency=latency).latency_factor(1) == pytest.approx(1.1)

    def test_non_finite_sample_uses_default(self) -> None:
        latency = StaticLatency({1: math.nan})
        assert make_scorer(latency=latency).latency_factor(1) == 1.5


class TestScoreStep:
    """Tests for StepScorer.score_step."""

    def test_reference_step(self) -> None:
        step = make_scorer().score_step(1, 2, "alpha", 1000)

        assert step.source_chain_id == 1
        assert step.dest_chain_id == 2
        assert step.protocol == "alpha"
        assert step.estimated_time_seconds == pytest.approx(600 * 1.5 * 1.5)
        assert step.estimated_fee_usd == pytest.approx(11.0)
        assert step.security_score == 80
        assert step.reliability_score == 80
        assert step.trust_assumptions == ("Relayer",)

    def test_latency_scales_time(self) -> None:
        scorer = make_scorer(latency=StaticLatency({1: 200.0, 2: 500.0}))
        step = scorer.score_step(1, 2, "alpha", 1000)
        assert step.estimated_time_seconds == pytest.approx(600 * 1.2 * 1.5)

    def test_gas_legs_added_to_fee(self) -> None:
        gas = StaticGas(2.5)
        step = make_scorer(gas=gas).score_step(1, 2, "alpha", 1000, PriorityLevel.HIGH)

        assert step.estimated_fee_usd == pytest.approx(11.0 + 5.0)
        assert gas.calls == [
            (1, BRIDGE_LEG, PriorityLevel.HIGH),
            (2, TRANSFER_LEG, PriorityLevel.HIGH),
        ]

    def test_negative_gas_clamped(self) -> None:
        step = make_scorer(gas=StaticGas(-5.0)).score_step(1, 2, "alpha", 1000)
        assert step.estimated_fee_usd == pytest.approx(11.0)

    def test_non_finite_gas_treated_as_zero(self) -> None:
        step = make_scorer(gas=StaticGas(math.inf)).score_step(1, 2, "alpha", 1000)
        assert step.estimated_fee_usd == pytest.approx(11.0)

    def test_missing_chain_scores_default_to_fifty(self) -> None:
        scorer = make_scorer(reliability=StaticReliability(), security=StaticSecurity())
        step = scorer.score_step(1, 2, "alpha", 1000)
        # 0.6 * 80 + 0.2 * 50 + 0.2 * 50
        assert step.security_score == 68
        assert step.reliability_score == 68

    def test_non_finite_rating_treated_as_missing(self) -> None:
        scorer = make_scorer(security=StaticSecurity({1: math.nan, 2: 80}))
        # 0.6 * 80 + 0.2 * 50 + 0.2 * 80
        assert scorer.score_step(1, 2, "alpha", 1000).security_score == 74

    def test_ratings_clamped(self) -> None:
        scorer = make_scorer(security=StaticSecurity({1: 250, 2: -40}))
        # 0.6 * 80 + 0.2 * 100 + 0.2 * 0
        assert scorer.score_step(1, 2, "alpha", 1000).security_score == 68

    def test_zero_chain_scores_use_default(self) -> None:
        scorer = make_scorer(
            reliability=StaticReliability({1: 0, 2: 0}),
            security=StaticSecurity({1: 0, 2: 80}),
        )
        step = scorer.score_step(1, 2, "alpha", 1000)
        # 0.6 * 80 + 0.2 * 50 + 0.2 * 50
        assert step.reliability_score == 68
        # 0.6 * 80 + 0.2 * 50 + 0.2 * 80
        assert step.security_score == 74

    def test_all_failed_history_uses_default(self) -> None:
        history = NetworkHistory(clock=fixed_clock)
        for chain_id in (1, 2):
            history.add_entry(chain_id, 0, success=False)
        assert history.reliability_score(1, DAY_MS) == 0

        step = make_scorer(reliability=history).score_step(1, 2, "alpha", 1000)
        assert step.reliability_score == 68

    def test_scores_round_half_up(self) -> None:
        catalog = make_catalog([make_profile("alpha", security=85)], {1: {2: ["alpha"]}})
        scorer = make_scorer(catalog=catalog, security=StaticSecurity({1: 80, 2: 82.5}))
        # 51 + 16 + 16.5 = 83.5
        assert scorer.score_step(1, 2, "alpha", 1000).security_score == 84

    def test_reliability_window_passed_through(self) -> None:
        reliability = StaticReliability({1: 80, 2: 80})
        config = RouterConfig(reliability_window_ms=3_600_000)
        make_scorer(reliability=reliability, config=config).score_step(1, 2, "alpha", 1)
        assert reliability.windows == [3_600_000, 3_600_000]

    def test_zero_baseline_floored(self) -> None:
        catalog = make_catalog([make_profile("alpha", baseline_seconds=0)], {1: {2: ["alpha"]}})
        step = make_scorer(catalog=catalog).score_step(1, 2, "alpha", 1000)
        assert step.estimated_time_seconds == pytest.approx(1e-6)
        assert step.estimated_time_seconds > 0

    def test_unknown_protocol_raises(self) -> None:
        with pytest.raises(UnknownProtocolError):
            make_scorer().score_step(1, 2, "nope", 1000)

    def test_accepts_profile(self) -> None:
        profile = make_profile("beta", base_fee=0.0, variable_fee=0.0)
        step = make_scorer().score_step(1, 2, profile, 1000)
        assert step.protocol == "beta"
        assert step.estimated_fee_usd == 0.0

    def test_provider_queried_for_both_endpoints(self) -> None:
        security = MagicMock(spec=SecurityRatingProvider)
        security.security_rating.return_value = 90.0
        step = make_scorer(security=security).score_step(1, 2, "alpha", 1000)

        assert [c.args for c in security.security_rating.call_args_list] == [(1,), (2,)]
        # 0.6 * 80 + 0.2 * 90 + 0.2 * 90
        assert step.security_score == 84

    def test_provider_exception_propagates(self) -> None:
        security = MagicMock(spec=SecurityRatingProvider)
        security.security_rating.side_effect = RuntimeError("ratings offline")
        with pytest.raises(RuntimeError, match="ratings offline"):
            make_scorer(security=security).score_step(1, 2, "alpha", 1000)


class TestChooseProtocol:
    """Tests for per-edge protocol choice."""

    def _catalog(self):
        return make_catalog(
            [
                make_profile("alpha", security=80),
                make_profile("beta", security=90),
                make_profile("gamma", security=90),
                make_profile("custom", security=50),
            ],
            {1: {2: ["alpha", "gamma", "beta"]}},
        )

    def test_highest_security_first_listed_on_tie(self) -> None:
        catalog = self._catalog()
        graph = ChainGraph.from_sources(catalog)
        assert choose_protocol(graph, 1, 2, catalog).protocol_id == "gamma"

    def test_unpinned_custom_bridge_competes(self) -> None:
        catalog = self._catalog()
        graph = ChainGraph.from_sources(catalog, [CustomBridge(1, 2, "custom")])
        assert choose_protocol(graph, 1, 2, catalog).protocol_id == "gamma"

    def test_pinned_custom_bridge_restricts_choice(self) -> None:
        catalog = self._catalog()
        graph = ChainGraph.from_sources(catalog, [CustomBridge(1, 2, "custom", pin=True)])
        assert choose_protocol(graph, 1, 2, catalog).protocol_id == "custom"

    def test_unknown_protocol_skipped(self) -> None:
        catalog = self._catalog()
        graph = ChainGraph.from_sources(catalog, [CustomBridge(1, 3, "ghost")])
        assert choose_protocol(graph, 1, 3, catalog) is None

    def test_no_edge(self) -> None:
        catalog = self._catalog()
        graph = ChainGraph.from_sources(catalog)
        assert choose_protocol(graph, 2, 1, catalog) is None

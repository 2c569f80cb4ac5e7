"""Tests for route aggregation and risk classification."""

import pytest

from bridge_router.models.types import RiskTier
from bridge_router.routing.aggregation import aggregate, classify_risk
from tests.helpers import make_step


class TestClassifyRisk:
    """Risk tier thresholds are inclusive."""

    @pytest.mark.parametrize(
        ("security", "reliability", "expected"),
        [
            (80, 80, RiskTier.LOW),
            (100, 80, RiskTier.LOW),
            (79, 95, RiskTier.MEDIUM),
            (95, 79, RiskTier.MEDIUM),
            (60, 60, RiskTier.MEDIUM),
            (59, 90, RiskTier.HIGH),
            (90, 59, RiskTier.HIGH),
            (0, 0, RiskTier.HIGH),
        ],
    )
    def test_thresholds(self, security, reliability, expected) -> None:
        assert classify_risk(security, reliability) == expected


class TestAggregate:
    """Tests for aggregate()."""

    def test_single_step_route(self) -> None:
        step = make_step(1, 2, time_seconds=900, fee=12.5, security=85, reliability=70)
        route = aggregate([step])

        assert route.steps == (step,)
        assert route.source_chain_id == 1
        assert route.destination_chain_id == 2
        assert route.total_time_seconds == 900
        assert route.total_fee_usd == 12.5
        assert route.security_score == 85
        assert route.reliability_score == 70
        assert route.risk == RiskTier.MEDIUM
        assert route.hop_count == 1
        assert route.path == [1, 2]

    def test_totals_are_sums(self) -> None:
        route = aggregate(
            [make_step(1, 2, time_seconds=100, fee=3), make_step(2, 3, time_seconds=250, fee=7)]
        )
        assert route.total_time_seconds == 350
        assert route.total_fee_usd == 10
        assert route.path == [1, 2, 3]
        assert route.protocols == ["alpha", "alpha"]

    def test_scores_weighted_by_fee(self) -> None:
        route = aggregate(
            [
                make_step(1, 2, fee=1, security=100, reliability=40),
                make_step(2, 3, fee=3, security=60, reliability=80),
            ]
        )
        # 100 * 0.25 + 60 * 0.75 = 70; 40 * 0.25 + 80 * 0.75 = 70
        assert route.security_score == 70
        assert route.reliability_score == 70
        assert route.risk == RiskTier.MEDIUM

    def test_zero_fee_falls_back_to_unweighted_mean(self) -> None:
        route = aggregate(
            [
                make_step(1, 2, fee=0, security=90, reliability=85),
                make_step(2, 3, fee=0, security=71, reliability=60),
            ]
        )
        # (90 + 71) / 2 = 80.5 rounds up
        assert route.security_score == 81
        assert route.reliability_score == 73
        assert route.total_fee_usd == 0

    def test_scores_stay_between_step_extremes(self) -> None:
        steps = [
            make_step(1, 2, fee=2.2, security=64, reliability=91),
            make_step(2, 3, fee=7.9, security=88, reliability=55),
        ]
        route = aggregate(steps)
        assert 64 <= route.security_score <= 88
        assert 55 <= route.reliability_score <= 91

    def test_empty_steps_raise(self) -> None:
        with pytest.raises(ValueError, match="no steps"):
            aggregate([])

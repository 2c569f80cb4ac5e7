"""Tests for routing request validation and payload models."""

import math

import pytest
from pydantic import ValidationError

from bridge_router.errors import InvalidRequestError
from bridge_router.models.api import RouteModel, RouteRequestBody, StepModel
from bridge_router.models.request import RoutingRequest, parse_criterion, parse_priority
from bridge_router.models.types import OptimizationCriterion, PriorityLevel, round_half_up
from bridge_router.routing.aggregation import aggregate
from tests.helpers import make_step


class TestRoutingRequest:
    """Tests for RoutingRequest construction."""

    def test_defaults(self) -> None:
        request = RoutingRequest(1, 137, 500)
        assert request.priority == PriorityLevel.MEDIUM
        assert request.max_hops == 2
        assert request.chain_ids == (1, 137)

    def test_priority_normalized_from_string(self) -> None:
        assert RoutingRequest(1, 137, 500, priority="urgent").priority == PriorityLevel.URGENT

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            ((1, 1, 100), "same"),
            ((1, 137, 0), "positive"),
            ((1, 137, -5), "positive"),
            ((1, 137, math.inf), "finite"),
            ((1, 137, math.nan), "finite"),
            ((0, 137, 100), "positive integer"),
            ((1, 137, True), "number"),
        ],
    )
    def test_invalid_requests(self, args, message) -> None:
        with pytest.raises(InvalidRequestError, match=message):
            RoutingRequest(*args)

    def test_invalid_priority(self) -> None:
        with pytest.raises(InvalidRequestError, match="priority"):
            RoutingRequest(1, 137, 100, priority="asap")

    @pytest.mark.parametrize("max_hops", [0, 3])
    def test_unsupported_max_hops(self, max_hops) -> None:
        with pytest.raises(InvalidRequestError, match="max_hops"):
            RoutingRequest(1, 137, 100, max_hops=max_hops)

    def test_invalid_request_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RoutingRequest(1, 1, 100)


class TestParsers:
    def test_parse_criterion(self) -> None:
        assert parse_criterion("cost") == OptimizationCriterion.COST
        with pytest.raises(InvalidRequestError):
            parse_criterion("cheapest")

    def test_parse_priority(self) -> None:
        assert parse_priority(PriorityLevel.LOW) == PriorityLevel.LOW
        with pytest.raises(InvalidRequestError):
            parse_priority("whenever")


class TestRoundHalfUp:
    @pytest.mark.parametrize(("value", "expected"), [(80.5, 81), (80.49, 80), (0.5, 1), (2.5, 3)])
    def test_halves_round_up(self, value, expected) -> None:
        assert round_half_up(value) == expected


class TestPayloadModels:
    """Tests for the camelCase API payloads."""

    def test_request_body_aliases(self) -> None:
        body = RouteRequestBody.model_validate(
            {"sourceChainId": 1, "destinationChainId": 10, "amount": 250, "maxHops": 1}
        )
        request = body.to_request()
        assert request.max_hops == 1
        assert body.criterion == OptimizationCriterion.BALANCED

    def test_request_body_accepts_field_names(self) -> None:
        body = RouteRequestBody(source_chain_id=1, destination_chain_id=10, amount=1)
        assert body.source_chain_id == 1

    def test_request_body_rejects_non_positive_amount(self) -> None:
        with pytest.raises(ValidationError):
            RouteRequestBody.model_validate(
                {"sourceChainId": 1, "destinationChainId": 10, "amount": 0}
            )

    def test_route_model_round_trip(self) -> None:
        route = aggregate([make_step(1, 2, fee=4), make_step(2, 3, fee=6)])
        model = RouteModel.from_route(route)

        assert model.path == [1, 2, 3]
        assert model.to_route() == route

    def test_route_model_dumps_camel_case(self) -> None:
        data = StepModel.from_step(make_step()).model_dump(by_alias=True)
        assert "estimatedFeeUsd" in data
        assert "sourceChainId" in data

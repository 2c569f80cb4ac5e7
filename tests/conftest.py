"""Pytest configuration and fixtures."""

import pytest

from bridge_router.catalog.connectivity import CustomBridgeRegistry
from bridge_router.fees.estimator import ZeroGasEstimator
from bridge_router.routing.router import CrossChainRouter
from bridge_router.signals.speed import LatencyStore
from tests.helpers import (
    StaticReliability,
    StaticSecurity,
    fixed_clock,
    make_catalog,
    make_chains,
)


@pytest.fixture
def catalog():
    """Single protocol 'alpha' (80/80, $1 + 1%, 10 min) on 1 -> 2 -> 3."""
    return make_catalog()


@pytest.fixture
def chains():
    """Registry of test chains 1, 2 and 3."""
    return make_chains(1, 2, 3)


@pytest.fixture
def router(catalog, chains) -> CrossChainRouter:
    """Router over the reference scenario: every chain rated 80, no gas, no latency."""
    return CrossChainRouter(
        catalog=catalog,
        chains=chains,
        custom_bridges=CustomBridgeRegistry(),
        latency=LatencyStore(clock=fixed_clock),
        reliability=StaticReliability({1: 80, 2: 80, 3: 80}),
        security=StaticSecurity({1: 80, 2: 80, 3: 80}),
        gas=ZeroGasEstimator(),
        clock=fixed_clock,
    )


@pytest.fixture
def default_router() -> CrossChainRouter:
    """Router over the built-in catalog and chains, with no gas and no signals."""
    return CrossChainRouter(
        latency=LatencyStore(clock=fixed_clock),
        reliability=StaticReliability(),
        security=StaticSecurity(),
        gas=ZeroGasEstimator(),
        clock=fixed_clock,
    )

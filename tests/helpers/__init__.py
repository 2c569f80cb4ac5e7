"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- providers: Static and misbehaving signal providers
- factories: Profile, catalog, step and route factory functions
"""

from tests.helpers.factories import (
    make_catalog,
    make_chains,
    make_profile,
    make_route,
    make_step,
)
from tests.helpers.providers import (
    NOW,
    FailingReliability,
    SlowSecurity,
    StaticGas,
    StaticLatency,
    StaticReliability,
    StaticSecurity,
    fixed_clock,
)

__all__ = [
    # Providers
    "NOW",
    "fixed_clock",
    "StaticLatency",
    "StaticReliability",
    "StaticSecurity",
    "StaticGas",
    "SlowSecurity",
    "FailingReliability",
    # Factories
    "make_profile",
    "make_catalog",
    "make_chains",
    "make_step",
    "make_route",
]

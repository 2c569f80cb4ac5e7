"""Tests for the bridge catalog, chain registry and custom bridge registry."""

import threading

import pytest

from bridge_router.catalog.catalog import DEFAULT_BRIDGE_CATALOG, BridgeCatalog
from bridge_router.catalog.chains import BUILTIN_CHAINS, ChainInfo, ChainRegistry
from bridge_router.catalog.connectivity import CustomBridge, CustomBridgeRegistry
from bridge_router.catalog.protocols import DEFAULT_PROTOCOLS, BridgeProtocol
from bridge_router.errors import DuplicateChainError, UnknownChainError, UnknownProtocolError
from tests.helpers import make_profile


class TestBridgeProtocolProfile:
    """Tests for profile clamping."""

    def test_scores_clamped(self) -> None:
        profile = make_profile(security=140, reliability=-5)
        assert profile.security_score == 100
        assert profile.reliability_score == 0

    def test_variable_fee_clamped(self) -> None:
        assert make_profile(variable_fee=2.0).variable_fee_fraction == 1.0
        assert make_profile(variable_fee=-0.1).variable_fee_fraction == 0.0

    def test_touches(self) -> None:
        profile = make_profile(chains=(1, 10))
        assert profile.touches(10)
        assert not profile.touches(137)


class TestBridgeCatalog:
    """Tests for BridgeCatalog."""

    def test_default_catalog_contents(self) -> None:
        assert len(DEFAULT_BRIDGE_CATALOG) == len(DEFAULT_PROTOCOLS) == 13
        assert list(DEFAULT_BRIDGE_CATALOG.profiles)[0] == "layerzero"
        assert "custom" in DEFAULT_BRIDGE_CATALOG
        assert DEFAULT_BRIDGE_CATALOG.chain_ids == frozenset({1, 137, 42161, 10, 8453})

    def test_direct_bridges_listing_order(self) -> None:
        assert DEFAULT_BRIDGE_CATALOG.direct_bridges(1, 8453) == ("base", "layerzero", "hop", "across")
        assert DEFAULT_BRIDGE_CATALOG.direct_bridges(1, 56) == ()

    def test_get_profile(self) -> None:
        profile = DEFAULT_BRIDGE_CATALOG.get_profile(BridgeProtocol.HOP)
        assert profile.name == "Hop Protocol"
        assert profile.baseline_time_seconds == 25 * 60

    def test_unknown_protocol_lookup(self) -> None:
        with pytest.raises(UnknownProtocolError, match="nope"):
            DEFAULT_BRIDGE_CATALOG.get_profile("nope")

    def test_direct_bridge_with_unknown_protocol_rejected(self) -> None:
        with pytest.raises(UnknownProtocolError):
            BridgeCatalog([make_profile("alpha")], {1: {2: ["alpha", "beta"]}})

    def test_duplicate_profile_rejected(self) -> None:
        with pytest.raises(ValueError, match="Duplicate"):
            BridgeCatalog([make_profile("alpha"), make_profile("alpha")], {})

    def test_duplicate_direct_entries_collapsed(self) -> None:
        catalog = BridgeCatalog([make_profile("alpha")], {1: {2: ["alpha", "alpha"]}})
        assert catalog.direct_bridges(1, 2) == ("alpha",)


class TestChainRegistry:
    """Tests for ChainRegistry."""

    def test_builtin_chains(self) -> None:
        registry = ChainRegistry()
        assert len(registry) == len(BUILTIN_CHAINS) == 10
        assert registry.require(8453).name == "Base"
        assert 59144 in registry.known_chains

    def test_unknown_chain(self) -> None:
        registry = ChainRegistry()
        assert registry.get(4242) is None
        assert registry.name_of(4242) == "Chain 4242"
        with pytest.raises(UnknownChainError):
            registry.require(4242)

    def test_add_custom_chain(self) -> None:
        registry = ChainRegistry()
        added = registry.add_custom_chain(ChainInfo(7777, "Devnet", "DEV"))

        assert added.is_custom
        assert 7777 in registry
        assert registry.custom_chains() == [added]

    def test_duplicate_chain_rejected(self) -> None:
        registry = ChainRegistry()
        with pytest.raises(DuplicateChainError):
            registry.add_custom_chain(ChainInfo(1, "Fake Ethereum", "FETH"))

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"chain_id": 0, "name": "Zero", "symbol": "Z"},
            {"chain_id": 5, "name": " ", "symbol": "Z"},
            {"chain_id": 5, "name": "Five", "symbol": "Z", "block_time_seconds": 0},
            {"chain_id": 5, "name": "Five", "symbol": "Z", "gas_price_gwei": -1},
        ],
    )
    def test_invalid_chain_info(self, kwargs) -> None:
        with pytest.raises(ValueError):
            ChainInfo(**kwargs)


class TestCustomBridgeRegistry:
    """Tests for CustomBridgeRegistry."""

    def test_append_only_in_order(self) -> None:
        registry = CustomBridgeRegistry()
        registry.add(1, 2, "hop")
        registry.add(2, 3)

        assert registry.snapshot() == (
            CustomBridge(1, 2, "hop"),
            CustomBridge(2, 3, "custom"),
        )

    def test_identical_entries_registered_once(self) -> None:
        registry = CustomBridgeRegistry()
        registry.add(1, 2, BridgeProtocol.HOP)
        registry.add(1, 2, "hop")
        assert len(registry) == 1

    def test_snapshot_is_immutable_view(self) -> None:
        registry = CustomBridgeRegistry()
        before = registry.snapshot()
        registry.add(1, 2)
        assert before == ()
        assert len(registry.snapshot()) == 1

    def test_concurrent_adds(self) -> None:
        registry = CustomBridgeRegistry()

        def worker(offset: int) -> None:
            for i in range(50):
                registry.add(offset, 1000 + i)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(registry) == 8 * 50

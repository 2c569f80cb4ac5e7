"""Bridge catalog: protocol profiles plus the officially supported direct bridges.

The catalog is a closed, validated table. Unknown protocol ids are rejected
at construction and on lookup rather than silently defaulted during scoring.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from types import MappingProxyType

from bridge_router.catalog.protocols import (
    DEFAULT_PROTOCOLS,
    BridgeProtocol,
    BridgeProtocolProfile,
    protocol_key,
)
from bridge_router.errors import UnknownProtocolError

# Direct bridge support between chains, in preference-listing order.
# source chain -> destination chain -> protocols
_P = BridgeProtocol
DEFAULT_DIRECT_BRIDGES: dict[int, dict[int, list[BridgeProtocol]]] = {
    # Ethereum
    1: {
        137: [_P.POLYGON, _P.LAYERZERO, _P.WORMHOLE, _P.HOP, _P.CELER, _P.MULTICHAIN],
        42161: [_P.ARBITRUM, _P.LAYERZERO, _P.HOP, _P.ACROSS, _P.CELER, _P.MULTICHAIN],
        10: [_P.OPTIMISM, _P.LAYERZERO, _P.HOP, _P.ACROSS, _P.CELER, _P.MULTICHAIN],
        8453: [_P.BASE, _P.LAYERZERO, _P.HOP, _P.ACROSS],
    },
    # Polygon
    137: {
        1: [_P.POLYGON, _P.LAYERZERO, _P.WORMHOLE, _P.HOP, _P.CELER, _P.MULTICHAIN],
        42161: [_P.LAYERZERO, _P.HOP, _P.CELER, _P.MULTICHAIN],
        10: [_P.LAYERZERO, _P.HOP, _P.CELER, _P.MULTICHAIN],
        8453: [_P.LAYERZERO, _P.HOP],
    },
    # Arbitrum
    42161: {
        1: [_P.ARBITRUM, _P.LAYERZERO, _P.HOP, _P.ACROSS, _P.CELER, _P.MULTICHAIN],
        137: [_P.LAYERZERO, _P.HOP, _P.CELER, _P.MULTICHAIN],
        10: [_P.LAYERZERO, _P.HOP, _P.CELER],
        8453: [_P.LAYERZERO, _P.HOP],
    },
    # Optimism
    10: {
        1: [_P.OPTIMISM, _P.LAYERZERO, _P.HOP, _P.ACROSS, _P.CELER, _P.MULTICHAIN],
        137: [_P.LAYERZERO, _P.HOP, _P.CELER, _P.MULTICHAIN],
        42161: [_P.LAYERZERO, _P.HOP, _P.CELER],
        8453: [_P.LAYERZERO, _P.HOP],
    },
    # Base
    8453: {
        1: [_P.BASE, _P.LAYERZERO, _P.HOP, _P.ACROSS],
        137: [_P.LAYERZERO, _P.HOP],
        42161: [_P.LAYERZERO, _P.HOP],
        10: [_P.LAYERZERO, _P.HOP],
    },
}


class BridgeCatalog:
    """Closed registry of bridge protocols and direct bridge support.

    Usage:
        catalog = BridgeCatalog(profiles, {1: {137: ["polygon", "hop"]}})
        catalog.get_profile("hop")
        catalog.direct_bridges(1, 137)  # ("polygon", "hop")
    """

    def __init__(
        self,
        profiles: Iterable[BridgeProtocolProfile],
        direct_bridges: Mapping[int, Mapping[int, Sequence[BridgeProtocol | str]]],
    ) -> None:
        """Build the catalog.

        Args:
            profiles: Protocol profiles, in declaration order
            direct_bridges: source -> destination -> protocol ids

        Raises:
            UnknownProtocolError: If a direct bridge names a protocol with no profile
            ValueError: If two profiles share an id
        """
        table: dict[str, BridgeProtocolProfile] = {}
        for profile in profiles:
            if profile.protocol_id in table:
                raise ValueError(f"Duplicate protocol id in catalog: {profile.protocol_id}")
            table[profile.protocol_id] = profile
        self._profiles: Mapping[str, BridgeProtocolProfile] = MappingProxyType(table)

        edges: dict[tuple[int, int], tuple[str, ...]] = {}
        for source, destinations in direct_bridges.items():
            for destination, protocols in destinations.items():
                ids: list[str] = []
                for protocol in protocols:
                    key = protocol_key(protocol)
                    if key not in table:
                        raise UnknownProtocolError(
                            f"Direct bridge {source}->{destination} names unknown protocol '{key}'"
                        )
                    if key not in ids:
                        ids.append(key)
                if ids and source != destination:
                    edges[(source, destination)] = tuple(ids)
        self._direct: Mapping[tuple[int, int], tuple[str, ...]] = MappingProxyType(edges)

    @property
    def profiles(self) -> Mapping[str, BridgeProtocolProfile]:
        """Read-only view of protocol profiles keyed by id, in declaration order."""
        return self._profiles

    @property
    def direct_edges(self) -> Mapping[tuple[int, int], tuple[str, ...]]:
        """Read-only view of (source, destination) -> protocol ids."""
        return self._direct

    def has_protocol(self, protocol: BridgeProtocol | str) -> bool:
        """Check whether a protocol id is in the catalog."""
        return protocol_key(protocol) in self._profiles

    def get_profile(self, protocol: BridgeProtocol | str) -> BridgeProtocolProfile:
        """Look up a protocol profile.

        Raises:
            UnknownProtocolError: If the id is not in the catalog
        """
        key = protocol_key(protocol)
        try:
            return self._profiles[key]
        except KeyError:
            raise UnknownProtocolError(f"Unknown bridge protocol '{key}'") from None

    def direct_bridges(self, source: int, destination: int) -> tuple[str, ...]:
        """Protocols officially serving source -> destination, in listing order."""
        return self._direct.get((source, destination), ())

    @property
    def chain_ids(self) -> frozenset[int]:
        """Every chain id that appears in the direct bridge table."""
        chains: set[int] = set()
        for source, destination in self._direct:
            chains.add(source)
            chains.add(destination)
        return frozenset(chains)

    def __len__(self) -> int:
        return len(self._profiles)

    def __contains__(self, protocol: object) -> bool:
        if not isinstance(protocol, str):
            return False
        return protocol_key(protocol) in self._profiles


DEFAULT_BRIDGE_CATALOG = BridgeCatalog(DEFAULT_PROTOCOLS, DEFAULT_DIRECT_BRIDGES)


__all__ = ["BridgeCatalog", "DEFAULT_BRIDGE_CATALOG", "DEFAULT_DIRECT_BRIDGES"]

"""Custom bridge registry.

Callers extend connectivity at runtime with (source, destination, protocol)
triples. The registry is append-only: entries never remove or replace a
catalog bridge. A single writer appends under a lock while any number of
readers take immutable snapshots without locking (copy-on-write).
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from bridge_router.catalog.protocols import BridgeProtocol, protocol_key

logger = structlog.get_logger()


@dataclass(frozen=True)
class CustomBridge:
    """A user-registered directed bridge edge.

    Attributes:
        source_chain_id: Chain the bridge departs from
        dest_chain_id: Chain the bridge arrives at
        protocol: Catalog protocol id serving the edge
        pin: If True, protocol choice on this edge is restricted to pinned
            custom protocols instead of the highest-security candidate
    """

    source_chain_id: int
    dest_chain_id: int
    protocol: str = BridgeProtocol.CUSTOM.value
    pin: bool = False

    @property
    def edge(self) -> tuple[int, int]:
        """(source, destination) key."""
        return (self.source_chain_id, self.dest_chain_id)


class CustomBridgeRegistry:
    """Append-only, lock-guarded list of custom bridges.

    Usage:
        registry = CustomBridgeRegistry()
        registry.add(1, 56, "custom")
        for bridge in registry.snapshot():
            ...
    """

    def __init__(self) -> None:
        self._entries: tuple[CustomBridge, ...] = ()
        self._lock = threading.Lock()

    def add(
        self,
        source_chain_id: int,
        dest_chain_id: int,
        protocol: BridgeProtocol | str = BridgeProtocol.CUSTOM,
        pin: bool = False,
    ) -> CustomBridge:
        """Append a custom bridge.

        Identical entries are registered once.

        Returns:
            The registered (or already present) entry
        """
        bridge = CustomBridge(source_chain_id, dest_chain_id, protocol_key(protocol), pin)
        with self._lock:
            for existing in self._entries:
                if existing == bridge:
                    return existing
            self._entries = self._entries + (bridge,)
        logger.info(
            "custom_bridge_registered",
            source_chain_id=source_chain_id,
            dest_chain_id=dest_chain_id,
            protocol=bridge.protocol,
            pin=pin,
        )
        return bridge

    def snapshot(self) -> tuple[CustomBridge, ...]:
        """Immutable view of current entries, in registration order."""
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)


__all__ = ["CustomBridge", "CustomBridgeRegistry"]

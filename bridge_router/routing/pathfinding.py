"""Chain graph and path enumeration for cross-chain routing.

This module separates the bridge-connectivity graph and the path search from
the catalog and custom-bridge storage. Edges are directed: a bridge from A to
B says nothing about B to A.

Search policy:
- A direct edge always wins and is returned alone.
- Otherwise, with max_hops >= 2, every one-intermediate path is returned,
  ordered by ascending intermediate chain id.
- Longer paths are never searched.
"""

from __future__ import annotations

import threading
from collections.abc import Collection, Iterable
from typing import TYPE_CHECKING

import structlog

from bridge_router.catalog.connectivity import CustomBridge

if TYPE_CHECKING:
    from bridge_router.catalog.catalog import BridgeCatalog
    from bridge_router.catalog.connectivity import CustomBridgeRegistry

logger = structlog.get_logger()


class ChainGraph:
    """Directed graph of chains connected by bridge protocols.

    Each edge carries its protocols in listing order: catalog protocols first,
    then custom protocols in registration order, de-duplicated. Edges whose
    custom registration was pinned also remember the pinned protocols.

    This is a pure data structure with no caching; caching is handled by
    PathFinder which owns ChainGraph instances.
    """

    def __init__(self) -> None:
        """Initialize an empty chain graph."""
        self._edges: dict[int, dict[int, list[str]]] = {}
        self._pinned: dict[tuple[int, int], list[str]] = {}

    @classmethod
    def from_sources(
        cls,
        catalog: BridgeCatalog,
        custom_bridges: Iterable[CustomBridge] = (),
    ) -> ChainGraph:
        """Build the union of catalog direct bridges and custom bridges.

        Args:
            catalog: Catalog supplying the official direct bridges
            custom_bridges: User-registered bridges (additive only)

        Returns:
            ChainGraph with every usable edge
        """
        graph = cls()
        for (source, destination), protocols in catalog.direct_edges.items():
            for protocol in protocols:
                graph._add_edge(source, destination, protocol)
        for bridge in custom_bridges:
            graph._add_edge(bridge.source_chain_id, bridge.dest_chain_id, bridge.protocol)
            if bridge.pin:
                pinned = graph._pinned.setdefault(bridge.edge, [])
                if bridge.protocol not in pinned:
                    pinned.append(bridge.protocol)
        return graph

    def _add_edge(self, source: int, destination: int, protocol: str) -> None:
        """Add a protocol to a directed edge, keeping first-listed order."""
        if source == destination:
            return
        protocols = self._edges.setdefault(source, {}).setdefault(destination, [])
        if protocol not in protocols:
            protocols.append(protocol)

    def protocols(self, source: int, destination: int) -> tuple[str, ...]:
        """Protocols serving source -> destination, in listing order."""
        return tuple(self._edges.get(source, {}).get(destination, ()))

    def pinned_protocols(self, source: int, destination: int) -> tuple[str, ...]:
        """Protocols a caller pinned on this edge (empty if none)."""
        return tuple(self._pinned.get((source, destination), ()))

    def has_edge(self, source: int, destination: int) -> bool:
        """True if at least one protocol serves source -> destination."""
        return bool(self._edges.get(source, {}).get(destination))

    def get_neighbors(self, chain_id: int) -> set[int]:
        """Chains reachable from chain_id in one hop."""
        return {dst for dst, protocols in self._edges.get(chain_id, {}).items() if protocols}

    @property
    def chains(self) -> frozenset[int]:
        """Every chain with at least one incident edge."""
        chains: set[int] = set(self._edges)
        for destinations in self._edges.values():
            chains.update(destinations)
        return frozenset(chains)

    @property
    def edge_count(self) -> int:
        """Number of directed edges."""
        return sum(len(d) for d in self._edges.values())


def find_paths(
    source: int,
    destination: int,
    graph: ChainGraph,
    max_hops: int = 2,
    known_chains: Collection[int] | None = None,
) -> list[list[int]]:
    """Enumerate candidate chain sequences from source to destination.

    Args:
        source: Starting chain
        destination: Target chain
        graph: Connectivity to search
        max_hops: 1 for direct only; 2 allows one intermediate chain
        known_chains: Universe of chains eligible as intermediates;
            defaults to every chain in the graph

    Returns:
        [[source, destination]] when a direct edge exists; otherwise every
        [source, mid, destination] with both legs connected, ascending by mid.
        Empty when nothing connects within max_hops.
    """
    if source == destination:
        return []

    if graph.has_edge(source, destination):
        return [[source, destination]]

    if max_hops < 2:
        return []

    universe = graph.chains if known_chains is None else known_chains
    paths: list[list[int]] = []
    for intermediate in sorted(universe):
        if intermediate == source or intermediate == destination:
            continue
        if graph.has_edge(source, intermediate) and graph.has_edge(intermediate, destination):
            paths.append([source, intermediate, destination])
    return paths


class PathFinder:
    """Facade for pathfinding operations with caching.

    PathFinder owns a ChainGraph built from a catalog plus a custom bridge
    registry. The registry is append-only, so its length identifies its
    content; the graph and path caches are rebuilt when it grows.

    Usage:
        finder = PathFinder(catalog, custom_bridges)
        paths = finder.find_paths(1, 8453, max_hops=2, known_chains=registry.known_chains)
    """

    def __init__(
        self,
        catalog: BridgeCatalog,
        custom_bridges: CustomBridgeRegistry | None = None,
    ) -> None:
        """Initialize PathFinder.

        Args:
            catalog: Bridge catalog
            custom_bridges: Optional custom bridge registry
        """
        self._catalog = catalog
        self._custom_bridges = custom_bridges
        self._graph: ChainGraph | None = None
        self._graph_version = -1
        # (source, destination, max_hops, known_chains) -> paths
        self._path_cache: dict[tuple[int, int, int, frozenset[int] | None], list[list[int]]] = {}
        self._lock = threading.RLock()

    def invalidate(self) -> None:
        """Drop the cached graph and path cache."""
        with self._lock:
            self._graph = None
            self._graph_version = -1
            self._path_cache.clear()

    @property
    def graph(self) -> ChainGraph:
        """Get or rebuild the chain graph (lazy, version-checked)."""
        entries = self._custom_bridges.snapshot() if self._custom_bridges is not None else ()
        with self._lock:
            if self._graph is None or self._graph_version != len(entries):
                self._path_cache.clear()
                self._graph = ChainGraph.from_sources(self._catalog, entries)
                self._graph_version = len(entries)
                logger.debug(
                    "chain_graph_built",
                    chains=len(self._graph.chains),
                    edges=self._graph.edge_count,
                    custom_bridges=len(entries),
                )
            return self._graph

    def find_paths(
        self,
        source: int,
        destination: int,
        max_hops: int = 2,
        known_chains: Collection[int] | None = None,
    ) -> list[list[int]]:
        """Find candidate paths, cached per query.

        Returns copies so callers cannot corrupt the cache.
        """
        universe = frozenset(known_chains) if known_chains is not None else None
        cache_key = (source, destination, max_hops, universe)
        with self._lock:
            graph = self.graph
            cached = self._path_cache.get(cache_key)
            if cached is None:
                cached = find_paths(source, destination, graph, max_hops, universe)
                self._path_cache[cache_key] = cached
        return [list(path) for path in cached]


__all__ = ["ChainGraph", "PathFinder", "find_paths"]

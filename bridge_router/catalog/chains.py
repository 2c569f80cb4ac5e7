"""Chain registry: the universe of configured networks.

Built-in chains are fixed; custom chains may be added at runtime. The
registry's id set is the `known_chains` collaborator consumed by the path
finder (intermediate hop discovery) and by the route validator.
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

import structlog

from bridge_router.errors import DuplicateChainError, UnknownChainError

logger = structlog.get_logger()

# Block time used when a chain does not declare one
DEFAULT_BLOCK_TIME_SECONDS = 12.0

# Gas price used when a chain does not declare one
DEFAULT_GAS_PRICE_GWEI = 30.0


@dataclass(frozen=True)
class ChainInfo:
    """Static description of a network.

    Attributes:
        chain_id: Positive network id
        name: Display name
        symbol: Native currency symbol (prices gas)
        gas_price_gwei: Typical gas price in gwei
        block_time_seconds: Average block time
        is_custom: True for user-added networks
    """

    chain_id: int
    name: str
    symbol: str
    gas_price_gwei: float = DEFAULT_GAS_PRICE_GWEI
    block_time_seconds: float = DEFAULT_BLOCK_TIME_SECONDS
    is_custom: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.chain_id, bool) or not isinstance(self.chain_id, int):
            raise ValueError(f"Chain id must be an integer, got {self.chain_id!r}")
        if self.chain_id <= 0:
            raise ValueError(f"Chain id must be positive, got {self.chain_id}")
        if not self.name.strip():
            raise ValueError("Chain name is required")
        if not self.symbol.strip():
            raise ValueError("Chain currency symbol is required")
        if self.gas_price_gwei < 0:
            raise ValueError(f"Gas price cannot be negative: {self.gas_price_gwei}")
        if self.block_time_seconds <= 0:
            raise ValueError(f"Block time must be positive: {self.block_time_seconds}")


BUILTIN_CHAINS: tuple[ChainInfo, ...] = (
    ChainInfo(1, "Ethereum", "ETH", gas_price_gwei=25, block_time_seconds=12),
    ChainInfo(137, "Polygon", "MATIC", gas_price_gwei=80, block_time_seconds=2),
    ChainInfo(42161, "Arbitrum", "ETH", gas_price_gwei=0.1, block_time_seconds=0.3),
    ChainInfo(10, "Optimism", "ETH", gas_price_gwei=0.001, block_time_seconds=2),
    ChainInfo(8453, "Base", "ETH", gas_price_gwei=0.01, block_time_seconds=2),
    ChainInfo(56, "BNB Chain", "BNB", gas_price_gwei=5),
    ChainInfo(43114, "Avalanche", "AVAX", gas_price_gwei=25),
    ChainInfo(250, "Fantom", "FTM", gas_price_gwei=100),
    ChainInfo(59144, "Linea", "ETH", gas_price_gwei=0.001),
    ChainInfo(1101, "Polygon zkEVM", "ETH", gas_price_gwei=0.001),
)


class ChainRegistry:
    """Thread-safe registry of built-in and custom chains.

    Writers hold a lock and replace the table; readers see an immutable
    snapshot, so lookups never block on a concurrent add.

    Usage:
        registry = ChainRegistry()
        registry.add_custom_chain(ChainInfo(7777, "Devnet", "DEV"))
        7777 in registry.known_chains  # True
    """

    def __init__(self, chains: Iterable[ChainInfo] = BUILTIN_CHAINS) -> None:
        table: dict[int, ChainInfo] = {}
        for chain in chains:
            if chain.chain_id in table:
                raise DuplicateChainError(f"Chain ID {chain.chain_id} is already in use")
            table[chain.chain_id] = chain
        self._chains: dict[int, ChainInfo] = table
        self._lock = threading.Lock()

    @property
    def known_chains(self) -> frozenset[int]:
        """Ids of every configured chain."""
        return frozenset(self._chains)

    def get(self, chain_id: int) -> ChainInfo | None:
        """Look up a chain, returning None when unknown."""
        return self._chains.get(chain_id)

    def require(self, chain_id: int) -> ChainInfo:
        """Look up a chain.

        Raises:
            UnknownChainError: If the chain is not configured
        """
        chain = self._chains.get(chain_id)
        if chain is None:
            raise UnknownChainError(f"Chain ID {chain_id} is not a configured network")
        return chain

    def add_custom_chain(self, chain: ChainInfo) -> ChainInfo:
        """Register a user-added network.

        Raises:
            DuplicateChainError: If the id is already in use
        """
        custom = chain if chain.is_custom else _as_custom(chain)
        with self._lock:
            if custom.chain_id in self._chains:
                raise DuplicateChainError(f"Chain ID {custom.chain_id} is already in use")
            updated = dict(self._chains)
            updated[custom.chain_id] = custom
            self._chains = updated
        logger.info("custom_chain_added", chain_id=custom.chain_id, name=custom.name)
        return custom

    def custom_chains(self) -> list[ChainInfo]:
        """User-added chains, in registration order."""
        return [c for c in self._chains.values() if c.is_custom]

    def name_of(self, chain_id: int) -> str:
        """Display name, falling back to 'Chain <id>'."""
        chain = self._chains.get(chain_id)
        return chain.name if chain is not None else f"Chain {chain_id}"

    def __contains__(self, chain_id: object) -> bool:
        return chain_id in self._chains

    def __iter__(self) -> Iterator[ChainInfo]:
        return iter(list(self._chains.values()))

    def __len__(self) -> int:
        return len(self._chains)


def _as_custom(chain: ChainInfo) -> ChainInfo:
    return ChainInfo(
        chain_id=chain.chain_id,
        name=chain.name,
        symbol=chain.symbol,
        gas_price_gwei=chain.gas_price_gwei,
        block_time_seconds=chain.block_time_seconds,
        is_custom=True,
    )


__all__ = [
    "ChainInfo",
    "ChainRegistry",
    "BUILTIN_CHAINS",
    "DEFAULT_BLOCK_TIME_SECONDS",
    "DEFAULT_GAS_PRICE_GWEI",
]

"""Bridge protocol profiles.

Each profile describes one bridge mechanism: how secure and reliable it is,
which chains it touches, what it charges, and how long a transfer takes.
The default table reflects publicly documented properties of each protocol
and is intentionally coarse; callers needing fresher numbers build their
own BridgeCatalog.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from bridge_router.models.types import clamp, clamp_score


class BridgeProtocol(str, Enum):
    """Identifiers of the protocols in the default catalog."""

    LAYERZERO = "layerzero"
    WORMHOLE = "wormhole"
    STARGATE = "stargate"
    HOP = "hop"
    SYNAPSE = "synapse"
    ACROSS = "across"
    CELER = "celer"
    MULTICHAIN = "multichain"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    OPTIMISM = "optimism"
    BASE = "base"
    CUSTOM = "custom"


def protocol_key(protocol: BridgeProtocol | str) -> str:
    """Normalize a protocol identifier to its plain string id.

    Catalog tables are keyed by plain strings; str() of a str-mixin enum
    member yields "BridgeProtocol.X" rather than its value.
    """
    if isinstance(protocol, BridgeProtocol):
        return protocol.value
    return str(protocol)


@dataclass(frozen=True)
class BridgeProtocolProfile:
    """Immutable description of a bridge protocol.

    Scores are clamped to [0, 100] and the variable fee to [0, 1] on
    construction. Fees and times are floored at zero.

    Attributes:
        protocol_id: Catalog key (e.g. "layerzero")
        name: Display name
        security_score: Protocol security, 0-100
        reliability_score: Protocol reliability, 0-100
        supported_chains: Chain ids the protocol can touch
        base_fee_usd: Flat fee per transfer
        variable_fee_fraction: Fraction of the transfer amount charged
        baseline_time_seconds: Typical transfer time
        trust_assumptions: Human-readable trust assumptions
        description: One-line description
        website: Project URL
    """

    protocol_id: str
    name: str
    security_score: float
    reliability_score: float
    supported_chains: frozenset[int]
    base_fee_usd: float
    variable_fee_fraction: float
    baseline_time_seconds: float
    trust_assumptions: tuple[str, ...] = field(default_factory=tuple)
    description: str = ""
    website: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "protocol_id", protocol_key(self.protocol_id))
        object.__setattr__(self, "security_score", clamp_score(self.security_score))
        object.__setattr__(self, "reliability_score", clamp_score(self.reliability_score))
        object.__setattr__(
            self, "variable_fee_fraction", clamp(self.variable_fee_fraction, 0.0, 1.0)
        )
        object.__setattr__(self, "base_fee_usd", max(0.0, self.base_fee_usd))
        object.__setattr__(self, "baseline_time_seconds", max(0.0, self.baseline_time_seconds))
        object.__setattr__(self, "supported_chains", frozenset(self.supported_chains))
        object.__setattr__(self, "trust_assumptions", tuple(self.trust_assumptions))

    def touches(self, chain_id: int) -> bool:
        """True if the protocol lists this chain as supported."""
        return chain_id in self.supported_chains


def _profile(
    protocol: BridgeProtocol,
    name: str,
    description: str,
    security: float,
    reliability: float,
    chains: list[int],
    website: str,
    trust: list[str],
    minutes: float,
    base_fee: float,
    variable_fee: float,
) -> BridgeProtocolProfile:
    return BridgeProtocolProfile(
        protocol_id=protocol.value,
        name=name,
        description=description,
        security_score=security,
        reliability_score=reliability,
        supported_chains=frozenset(chains),
        website=website,
        trust_assumptions=tuple(trust),
        baseline_time_seconds=minutes * 60,
        base_fee_usd=base_fee,
        variable_fee_fraction=variable_fee,
    )


# Declaration order matters: it is the tie-break order for protocol choice.
DEFAULT_PROTOCOLS: tuple[BridgeProtocolProfile, ...] = (
    _profile(
        BridgeProtocol.LAYERZERO,
        "LayerZero",
        "A cross-chain messaging protocol with a focus on security and reliability.",
        85, 90, [1, 56, 137, 42161, 10, 8453, 43114],
        "https://layerzero.network",
        ["Ultra Light Node validators", "Oracle relayers"],
        15, 2.5, 0.05,
    ),
    _profile(
        BridgeProtocol.WORMHOLE,
        "Wormhole",
        "A generic message-passing protocol that connects multiple blockchains.",
        80, 85, [1, 56, 137, 42161, 10, 43114, 250],
        "https://wormhole.com",
        ["Guardian network", "2/3 majority honest"],
        10, 2.0, 0.06,
    ),
    _profile(
        BridgeProtocol.STARGATE,
        "Stargate",
        "A fully composable liquidity transport protocol built on LayerZero.",
        82, 88, [1, 56, 137, 42161, 10, 43114, 250],
        "https://stargate.finance",
        ["LayerZero security assumptions", "Liquidity providers"],
        20, 3.0, 0.08,
    ),
    _profile(
        BridgeProtocol.HOP,
        "Hop Protocol",
        "A scalable rollup-to-rollup general token bridge.",
        80, 83, [1, 137, 42161, 10, 8453],
        "https://hop.exchange",
        ["Bonder network", "Challenge period"],
        25, 1.8, 0.07,
    ),
    _profile(
        BridgeProtocol.SYNAPSE,
        "Synapse Protocol",
        "A cross-chain layer for bridging assets between blockchains.",
        78, 80, [1, 56, 137, 42161, 10, 43114, 250],
        "https://synapseprotocol.com",
        ["Validators", "Liquidity providers"],
        30, 2.2, 0.09,
    ),
    _profile(
        BridgeProtocol.ACROSS,
        "Across Protocol",
        "A fast, secure, capital-efficient bridge secured by UMA.",
        75, 78, [1, 137, 42161, 10, 8453],
        "https://across.to",
        ["UMA Optimistic Oracle", "Relayers"],
        40, 1.5, 0.06,
    ),
    _profile(
        BridgeProtocol.CELER,
        "Celer Network",
        "A liquidity network that enables fast, secure cross-chain token transfers.",
        75, 80, [1, 56, 137, 42161, 10, 43114],
        "https://celer.network",
        ["State Guardian Network", "Multi-sig security"],
        15, 1.0, 0.05,
    ),
    _profile(
        BridgeProtocol.MULTICHAIN,
        "Multichain",
        "A cross-chain router protocol that enables assets to flow between blockchains.",
        70, 75, [1, 56, 137, 42161, 10, 43114, 250],
        "https://multichain.org",
        ["SMPC network", "Validators"],
        35, 1.2, 0.07,
    ),
    _profile(
        BridgeProtocol.POLYGON,
        "Polygon Bridge",
        "The official bridge for Polygon PoS chain.",
        75, 80, [1, 137],
        "https://polygon.technology",
        ["Polygon validators", "2/3 majority honest"],
        45, 0.5, 0.02,
    ),
    _profile(
        BridgeProtocol.ARBITRUM,
        "Arbitrum Bridge",
        "The official bridge for Arbitrum.",
        80, 85, [1, 42161],
        "https://arbitrum.io",
        ["Optimistic rollup security", "Challenge period"],
        60, 0.8, 0.02,
    ),
    _profile(
        BridgeProtocol.OPTIMISM,
        "Optimism Bridge",
        "The official bridge for Optimism.",
        80, 85, [1, 10],
        "https://optimism.io",
        ["Optimistic rollup security", "Challenge period"],
        60, 0.8, 0.02,
    ),
    _profile(
        BridgeProtocol.BASE,
        "Base Bridge",
        "The official bridge for Base.",
        80, 80, [1, 8453],
        "https://base.org",
        ["Optimistic rollup security", "Challenge period"],
        60, 0.8, 0.02,
    ),
    _profile(
        BridgeProtocol.CUSTOM,
        "Custom Bridge",
        "User-defined custom bridge.",
        50, 50, [],
        "",
        ["Unknown"],
        30, 2.0, 0.1,
    ),
)


__all__ = [
    "BridgeProtocol",
    "BridgeProtocolProfile",
    "DEFAULT_PROTOCOLS",
    "protocol_key",
]

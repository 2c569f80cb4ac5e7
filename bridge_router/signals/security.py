"""Rule-based chain security ratings.

A chain's rating starts from its network category's base profile, is
overridden by any chain-specific factors, and has four factors computed from
evidence: attack history, audits, TVL and decentralization metrics. The
overall score is a fixed weighted sum of the eight factors.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum

import structlog

from bridge_router.models.types import clamp_score, round_half_up

logger = structlog.get_logger()

SECONDS_PER_YEAR = 60 * 60 * 24 * 365
SECONDS_PER_MONTH = 60 * 60 * 24 * 30


class SecurityFactor(str, Enum):
    """Factors contributing to a chain's security score."""

    DECENTRALIZATION = "decentralization"
    VALIDATORS = "validators"
    ATTACKS = "attacks"
    BOUNTY = "bounty"
    AUDIT = "audit"
    AGE = "age"
    COMMUNITY = "community"
    TVL = "tvl"


class NetworkCategory(str, Enum):
    """Network categories with distinct base security profiles."""

    L1_MAINCHAIN = "l1_mainchain"
    L2_ROLLUP = "l2_rollup"
    SIDECHAIN = "sidechain"
    APPCHAIN = "appchain"
    BRIDGE = "bridge"


class SecurityRiskLevel(str, Enum):
    """Five-level interpretation of an overall security score."""

    VERY_LOW = "very_low"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"


F = SecurityFactor

BASE_SECURITY_PROFILES: dict[NetworkCategory, dict[SecurityFactor, float]] = {
    NetworkCategory.L1_MAINCHAIN: {F.DECENTRALIZATION: 85, F.VALIDATORS: 90, F.AGE: 95, F.COMMUNITY: 90},
    NetworkCategory.L2_ROLLUP: {F.DECENTRALIZATION: 65, F.VALIDATORS: 75, F.AGE: 70, F.COMMUNITY: 75},
    NetworkCategory.SIDECHAIN: {F.DECENTRALIZATION: 60, F.VALIDATORS: 70, F.AGE: 65, F.COMMUNITY: 65},
    NetworkCategory.APPCHAIN: {F.DECENTRALIZATION: 50, F.VALIDATORS: 60, F.AGE: 55, F.COMMUNITY: 60},
    NetworkCategory.BRIDGE: {F.DECENTRALIZATION: 45, F.VALIDATORS: 55, F.AGE: 50, F.COMMUNITY: 50},
}

DEFAULT_FACTOR_SCORE = 50.0

# Weights sum to 1.0
FACTOR_WEIGHTS: dict[SecurityFactor, float] = {
    F.DECENTRALIZATION: 0.20,
    F.VALIDATORS: 0.15,
    F.ATTACKS: 0.15,
    F.BOUNTY: 0.10,
    F.AUDIT: 0.15,
    F.AGE: 0.05,
    F.COMMUNITY: 0.05,
    F.TVL: 0.15,
}


@dataclass(frozen=True)
class AttackRecord:
    """A past security incident."""

    date: str  # ISO date
    description: str
    fund_loss_usd: float
    mitigated: bool
    attack_vector: str


@dataclass(frozen=True)
class AuditRecord:
    """A published security audit and its findings."""

    auditor: str
    date: str  # ISO date
    report: str
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0


@dataclass(frozen=True)
class DecentralizationMetrics:
    """Decentralization indicators; defaults describe a single-operator chain."""

    validator_count: int = 1
    nakamoto_coefficient: float = 0
    geographic_distribution: float = 0
    ownership_concentration: float = 100


@dataclass(frozen=True)
class ChainSecurityData:
    """Evidence used to rate one chain."""

    category: NetworkCategory = NetworkCategory.APPCHAIN
    custom_factors: Mapping[SecurityFactor, float] = field(default_factory=dict)
    tvl_usd: float = 0.0
    attack_history: tuple[AttackRecord, ...] = ()
    security_audits: tuple[AuditRecord, ...] = ()
    decentralization: DecentralizationMetrics = field(default_factory=DecentralizationMetrics)


@dataclass(frozen=True)
class SecurityRating:
    """Computed rating for one chain."""

    chain_id: int
    overall_score: int
    risk_level: SecurityRiskLevel
    factors: Mapping[SecurityFactor, float]
    tvl_usd: float
    rated_at: float


CHAIN_SECURITY_DATA: dict[int, ChainSecurityData] = {
    # Ethereum
    1: ChainSecurityData(
        category=NetworkCategory.L1_MAINCHAIN,
        custom_factors={F.BOUNTY: 95, F.AUDIT: 95, F.TVL: 100},
        tvl_usd=100_000_000_000,
        decentralization=DecentralizationMetrics(550_000, 95, 90, 20),
        security_audits=(
            AuditRecord("ConsenSys Diligence", "2023-01-15",
                        "https://consensys.io/diligence/audits/ethereum", 0, 0, 3, 5),
            AuditRecord("Trail of Bits", "2022-07-01",
                        "https://www.trailofbits.com/reports/ethereum-pos", 0, 1, 4, 7),
        ),
    ),
    # Polygon
    137: ChainSecurityData(
        category=NetworkCategory.SIDECHAIN,
        custom_factors={F.BOUNTY: 85, F.AUDIT: 80, F.TVL: 80},
        tvl_usd=1_500_000_000,
        decentralization=DecentralizationMetrics(100, 65, 70, 40),
        security_audits=(
            AuditRecord("Quantstamp", "2022-05-02", "https://quantstamp.com/audits/polygon", 0, 2, 5, 10),
        ),
        attack_history=(
            AttackRecord("2021-12-05", "Vulnerability in the Polygon Plasma Bridge",
                         2_000_000, True, "Smart Contract Vulnerability"),
        ),
    ),
    # Arbitrum
    42161: ChainSecurityData(
        category=NetworkCategory.L2_ROLLUP,
        custom_factors={F.BOUNTY: 80, F.AUDIT: 85, F.TVL: 85},
        tvl_usd=3_000_000_000,
        decentralization=DecentralizationMetrics(1, 30, 30, 90),
        security_audits=(
            AuditRecord("Trail of Bits", "2022-08-15", "https://www.trailofbits.com/reports/arbitrum", 0, 1, 3, 8),
        ),
    ),
    # Optimism
    10: ChainSecurityData(
        category=NetworkCategory.L2_ROLLUP,
        custom_factors={F.BOUNTY: 80, F.AUDIT: 85, F.TVL: 80},
        tvl_usd=2_000_000_000,
        decentralization=DecentralizationMetrics(1, 30, 30, 90),
        security_audits=(
            AuditRecord("OpenZeppelin", "2022-06-20",
                        "https://blog.openzeppelin.com/optimism-security-audit", 0, 1, 4, 9),
        ),
    ),
    # Base
    8453: ChainSecurityData(
        category=NetworkCategory.L2_ROLLUP,
        custom_factors={F.BOUNTY: 75, F.AUDIT: 80, F.TVL: 70},
        tvl_usd=500_000_000,
        decentralization=DecentralizationMetrics(1, 25, 20, 95),
        security_audits=(
            AuditRecord("Consensys Diligence", "2023-01-05",
                        "https://consensys.io/diligence/audits/base", 0, 1, 5, 8),
        ),
    ),
}


def _epoch(date: str) -> float:
    parsed = datetime.fromisoformat(date)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.timestamp()


def risk_level_for(score: float) -> SecurityRiskLevel:
    """Map an overall score to a risk level."""
    if score >= 90:
        return SecurityRiskLevel.VERY_LOW
    if score >= 75:
        return SecurityRiskLevel.LOW
    if score >= 50:
        return SecurityRiskLevel.MEDIUM
    if score >= 30:
        return SecurityRiskLevel.HIGH
    return SecurityRiskLevel.VERY_HIGH


def attack_score(history: tuple[AttackRecord, ...], now: float) -> float:
    """100 for a clean record; each attack subtracts a decayed, loss-scaled penalty."""
    score = 100.0
    for attack in history:
        years_ago = (now - _epoch(attack.date)) / SECONDS_PER_YEAR
        # Impact decays linearly over five years, never below 20%
        time_decay = min(1.0, max(0.2, 1 - years_ago / 5))
        loss_severity = min(50.0, math.log10(attack.fund_loss_usd + 1) * 5)
        mitigation = 0.3 if attack.mitigated else 1.0
        score = max(0.0, score - loss_severity * time_decay * mitigation)
    return score


def audit_score(audits: tuple[AuditRecord, ...], now: float) -> float:
    """Score audit coverage, recency and findings. No audits scores 40."""
    if not audits:
        return 40.0
    score = 50.0 + min(20, len(audits) * 5)
    most_recent = max(_epoch(a.date) for a in audits)
    months_ago = (now - most_recent) / SECONDS_PER_MONTH
    score += max(0.0, 20 - months_ago)
    deduction = sum(a.critical * 10 + a.high * 5 + a.medium * 2 + a.low * 0.5 for a in audits)
    return clamp_score(score - deduction)


def tvl_score(tvl_usd: float) -> float:
    """Log-scale TVL score: 100 at $10B and above."""
    if tvl_usd <= 0:
        return 0.0
    return clamp_score(math.log10(tvl_usd) * 10)


def decentralization_score(metrics: DecentralizationMetrics) -> float:
    """Weighted blend of validator count, Nakamoto coefficient, geography, ownership."""
    validators = 100.0 if metrics.validator_count > 1000 else min(100.0, metrics.validator_count / 10)
    return (
        validators * 0.3
        + metrics.nakamoto_coefficient * 0.3
        + metrics.geographic_distribution * 0.2
        + (100 - metrics.ownership_concentration) * 0.2
    )


class SecurityRatings:
    """Computes and caches chain security ratings.

    Implements SecurityRatingProvider. Chains without security data are
    unrated (None) so the engine applies its neutral default instead of
    guessing a category.

    Args:
        data: Per-chain evidence; defaults to the built-in table
        clock: Returns current epoch seconds; injectable for tests
    """

    def __init__(
        self,
        data: Mapping[int, ChainSecurityData] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._data: dict[int, ChainSecurityData] = dict(CHAIN_SECURITY_DATA if data is None else data)
        self._clock = clock
        self._cache: dict[int, SecurityRating] = {}
        self._lock = threading.Lock()

    def generate_rating(self, chain_id: int, data: ChainSecurityData | None = None) -> SecurityRating:
        """Compute a rating from evidence (unknown chains rate as an appchain)."""
        evidence = data or self._data.get(chain_id) or ChainSecurityData()
        now = self._clock()

        factors: dict[SecurityFactor, float] = {f: DEFAULT_FACTOR_SCORE for f in SecurityFactor}
        factors.update(BASE_SECURITY_PROFILES.get(evidence.category, {}))
        factors.update(evidence.custom_factors)
        factors[F.ATTACKS] = attack_score(evidence.attack_history, now)
        factors[F.AUDIT] = audit_score(evidence.security_audits, now)
        factors[F.TVL] = tvl_score(evidence.tvl_usd)
        factors[F.DECENTRALIZATION] = decentralization_score(evidence.decentralization)

        overall = round_half_up(sum(score * FACTOR_WEIGHTS[f] for f, score in factors.items()))
        return SecurityRating(
            chain_id=chain_id,
            overall_score=overall,
            risk_level=risk_level_for(overall),
            factors=factors,
            tvl_usd=evidence.tvl_usd,
            rated_at=now,
        )

    def add_security_data(self, chain_id: int, data: ChainSecurityData) -> None:
        """Register or merge evidence for a chain and drop its cached rating."""
        with self._lock:
            existing = self._data.get(chain_id)
            if existing is not None:
                merged_factors = {**existing.custom_factors, **data.custom_factors}
                data = replace(data, custom_factors=merged_factors)
            self._data[chain_id] = data
            self._cache.pop(chain_id, None)
        logger.info("security_data_added", chain_id=chain_id, category=data.category.value)

    def rating(self, chain_id: int) -> SecurityRating | None:
        """Cached rating for a chain with evidence, or None."""
        cached = self._cache.get(chain_id)
        if cached is not None:
            return cached
        if chain_id not in self._data:
            return None
        rating = self.generate_rating(chain_id)
        with self._lock:
            self._cache[chain_id] = rating
        return rating

    def security_rating(self, chain_id: int) -> float | None:
        """Overall 0-100 score, or None for an unrated chain."""
        rating = self.rating(chain_id)
        return float(rating.overall_score) if rating is not None else None


__all__ = [
    "SecurityRatings",
    "SecurityRating",
    "SecurityFactor",
    "SecurityRiskLevel",
    "NetworkCategory",
    "ChainSecurityData",
    "AttackRecord",
    "AuditRecord",
    "DecentralizationMetrics",
    "CHAIN_SECURITY_DATA",
    "FACTOR_WEIGHTS",
    "attack_score",
    "audit_score",
    "tvl_score",
    "decentralization_score",
    "risk_level_for",
]

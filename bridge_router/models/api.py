"""Pydantic models for the HTTP API payloads.

Field names are snake_case in Python and camelCase on the wire; both are
accepted on input.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from bridge_router.catalog.chains import ChainInfo
from bridge_router.catalog.protocols import BridgeProtocol, BridgeProtocolProfile
from bridge_router.models.request import DEFAULT_MAX_HOPS, RoutingRequest
from bridge_router.models.types import ChainId, OptimizationCriterion, PriorityLevel, RiskTier
from bridge_router.routing.types import BridgeStep, CrossChainRoute, RoutingResult, ValidationResult


class RouteRequestBody(BaseModel):
    """Body of POST /routes."""

    source_chain_id: ChainId = Field(alias="sourceChainId")
    destination_chain_id: ChainId = Field(alias="destinationChainId")
    amount: float = Field(gt=0, allow_inf_nan=False, description="Transfer amount in USD")
    priority: PriorityLevel = PriorityLevel.MEDIUM
    max_hops: int = Field(default=DEFAULT_MAX_HOPS, alias="maxHops")
    criterion: OptimizationCriterion = OptimizationCriterion.BALANCED

    model_config = {"populate_by_name": True}

    def to_request(self) -> RoutingRequest:
        """Build the engine request.

        Raises:
            InvalidRequestError: If the request fails engine validation
        """
        return RoutingRequest(
            source_chain_id=self.source_chain_id,
            destination_chain_id=self.destination_chain_id,
            amount=self.amount,
            priority=self.priority,
            max_hops=self.max_hops,
        )


class StepModel(BaseModel):
    """One bridge hop."""

    source_chain_id: int = Field(alias="sourceChainId")
    dest_chain_id: int = Field(alias="destChainId")
    protocol: str
    estimated_time_seconds: float = Field(default=0.0, alias="estimatedTimeSeconds")
    estimated_fee_usd: float = Field(default=0.0, alias="estimatedFeeUsd")
    trust_assumptions: list[str] = Field(default_factory=list, alias="trustAssumptions")
    security_score: int = Field(default=0, alias="securityScore")
    reliability_score: int = Field(default=0, alias="reliabilityScore")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_step(cls, step: BridgeStep) -> StepModel:
        return cls(
            source_chain_id=step.source_chain_id,
            dest_chain_id=step.dest_chain_id,
            protocol=step.protocol,
            estimated_time_seconds=step.estimated_time_seconds,
            estimated_fee_usd=step.estimated_fee_usd,
            trust_assumptions=list(step.trust_assumptions),
            security_score=step.security_score,
            reliability_score=step.reliability_score,
        )

    def to_step(self) -> BridgeStep:
        return BridgeStep(
            source_chain_id=self.source_chain_id,
            dest_chain_id=self.dest_chain_id,
            protocol=self.protocol,
            estimated_time_seconds=self.estimated_time_seconds,
            estimated_fee_usd=self.estimated_fee_usd,
            trust_assumptions=tuple(self.trust_assumptions),
            security_score=self.security_score,
            reliability_score=self.reliability_score,
        )


class RouteModel(BaseModel):
    """A scored route.

    Metrics default so that hand-built routes can be posted for validation.
    `path` is informational and ignored on input.
    """

    steps: list[StepModel] = Field(default_factory=list)
    source_chain_id: int = Field(alias="sourceChainId")
    destination_chain_id: int = Field(alias="destinationChainId")
    total_time_seconds: float = Field(default=0.0, alias="totalTimeSeconds")
    total_fee_usd: float = Field(default=0.0, alias="totalFeeUsd")
    security_score: int = Field(default=0, alias="securityScore")
    reliability_score: int = Field(default=0, alias="reliabilityScore")
    risk: RiskTier = RiskTier.HIGH
    path: list[int] = Field(default_factory=list)

    model_config = {"populate_by_name": True}

    @classmethod
    def from_route(cls, route: CrossChainRoute) -> RouteModel:
        return cls(
            steps=[StepModel.from_step(s) for s in route.steps],
            source_chain_id=route.source_chain_id,
            destination_chain_id=route.destination_chain_id,
            total_time_seconds=route.total_time_seconds,
            total_fee_usd=route.total_fee_usd,
            security_score=route.security_score,
            reliability_score=route.reliability_score,
            risk=route.risk,
            path=route.path,
        )

    def to_route(self) -> CrossChainRoute:
        return CrossChainRoute(
            steps=tuple(s.to_step() for s in self.steps),
            source_chain_id=self.source_chain_id,
            destination_chain_id=self.destination_chain_id,
            total_time_seconds=self.total_time_seconds,
            total_fee_usd=self.total_fee_usd,
            security_score=self.security_score,
            reliability_score=self.reliability_score,
            risk=self.risk,
        )


class RouteResponse(BaseModel):
    """Response of POST /routes."""

    routes: list[RouteModel] = Field(default_factory=list)
    selected: RouteModel | None = None

    @classmethod
    def empty(cls) -> RouteResponse:
        """Response with no routes."""
        return cls(routes=[], selected=None)

    @classmethod
    def from_result(cls, result: RoutingResult) -> RouteResponse:
        return cls(
            routes=[RouteModel.from_route(r) for r in result.routes],
            selected=RouteModel.from_route(result.selected) if result.selected else None,
        )


class ValidateResponse(BaseModel):
    """Response of POST /routes/validate."""

    ok: bool
    issues: list[str] = Field(default_factory=list)

    @classmethod
    def from_result(cls, result: ValidationResult) -> ValidateResponse:
        return cls(ok=result.ok, issues=list(result.issues))


class CustomBridgeBody(BaseModel):
    """Body (and response) of POST /bridges/custom."""

    source_chain_id: ChainId = Field(alias="sourceChainId")
    destination_chain_id: ChainId = Field(alias="destinationChainId")
    protocol: str = BridgeProtocol.CUSTOM.value
    pin: bool = False

    model_config = {"populate_by_name": True}


class ChainModel(BaseModel):
    """A configured chain."""

    chain_id: int = Field(alias="chainId")
    name: str
    symbol: str
    gas_price_gwei: float = Field(alias="gasPriceGwei")
    block_time_seconds: float = Field(alias="blockTimeSeconds")
    is_custom: bool = Field(default=False, alias="isCustom")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_chain(cls, chain: ChainInfo) -> ChainModel:
        return cls(
            chain_id=chain.chain_id,
            name=chain.name,
            symbol=chain.symbol,
            gas_price_gwei=chain.gas_price_gwei,
            block_time_seconds=chain.block_time_seconds,
            is_custom=chain.is_custom,
        )


class ProtocolModel(BaseModel):
    """A bridge protocol profile."""

    id: str
    name: str
    description: str = ""
    security_score: float = Field(alias="securityScore")
    reliability_score: float = Field(alias="reliabilityScore")
    supported_chains: list[int] = Field(default_factory=list, alias="supportedChains")
    base_fee_usd: float = Field(alias="baseFeeUsd")
    variable_fee_fraction: float = Field(alias="variableFeeFraction")
    baseline_time_seconds: float = Field(alias="baselineTimeSeconds")
    trust_assumptions: list[str] = Field(default_factory=list, alias="trustAssumptions")
    website: str = ""

    model_config = {"populate_by_name": True}

    @classmethod
    def from_profile(cls, profile: BridgeProtocolProfile) -> ProtocolModel:
        return cls(
            id=profile.protocol_id,
            name=profile.name,
            description=profile.description,
            security_score=profile.security_score,
            reliability_score=profile.reliability_score,
            supported_chains=sorted(profile.supported_chains),
            base_fee_usd=profile.base_fee_usd,
            variable_fee_fraction=profile.variable_fee_fraction,
            baseline_time_seconds=profile.baseline_time_seconds,
            trust_assumptions=list(profile.trust_assumptions),
            website=profile.website,
        )


__all__ = [
    "RouteRequestBody",
    "StepModel",
    "RouteModel",
    "RouteResponse",
    "ValidateResponse",
    "CustomBridgeBody",
    "ChainModel",
    "ProtocolModel",
]

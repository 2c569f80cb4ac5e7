"""API endpoints for the bridge router."""

import asyncio
import os
import time

import structlog
from fastapi import APIRouter, Depends, HTTPException

from bridge_router.config import RouterConfig
from bridge_router.errors import InvalidRequestError, RoutingError
from bridge_router.models.api import (
    ChainModel,
    CustomBridgeBody,
    ProtocolModel,
    RouteModel,
    RouteRequestBody,
    RouteResponse,
    ValidateResponse,
)
from bridge_router.routing.router import CrossChainRouter, get_default_router

logger = structlog.get_logger()

router = APIRouter()

# Per-lookup timeout during signal fan-out, seconds
SIGNAL_TIMEOUT_SECONDS = float(os.environ.get("ROUTER_SIGNAL_TIMEOUT_SECONDS", "2.0"))

# Overall bound on signal gathering per request, seconds
REQUEST_DEADLINE_SECONDS = float(os.environ.get("ROUTER_REQUEST_DEADLINE_SECONDS", "5.0"))


def get_router() -> CrossChainRouter:
    """Dependency provider for the router instance.

    Override this in tests to inject a custom router:
        app.dependency_overrides[get_router] = lambda: test_router

    Returns:
        The router instance to use for routing requests.
    """
    return get_default_router(RouterConfig(signal_timeout_seconds=SIGNAL_TIMEOUT_SECONDS))


@router.post("/routes")
async def find_routes(
    body: RouteRequestBody,
    router_instance: CrossChainRouter = Depends(get_router),
) -> RouteResponse:
    """Find, score and rank routes between two chains.

    Error Handling:
        - Invalid request schema: Returns 422 Validation Error (Pydantic)
        - Same chains, unknown chain, unsupported hop count: Returns 422
        - Router exception: Logs error, returns empty routes
    """
    try:
        request = body.to_request()
    except InvalidRequestError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err

    deadline = time.monotonic() + REQUEST_DEADLINE_SECONDS

    try:
        result = await router_instance.route_async(request, body.criterion, deadline=deadline)
    except InvalidRequestError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err
    except Exception:
        # Log with full traceback; the caller gets an empty result rather than a 500
        logger.exception(
            "router_error",
            source_chain_id=request.source_chain_id,
            destination_chain_id=request.destination_chain_id,
            message="Router raised an exception, returning empty result",
        )
        return RouteResponse.empty()

    logger.info(
        "returning_routes",
        route_count=len(result.routes),
        found=result.found,
    )
    return RouteResponse.from_result(result)


@router.post("/routes/validate")
async def validate_route(
    body: RouteModel,
    router_instance: CrossChainRouter = Depends(get_router),
) -> ValidateResponse:
    """Check a route for structural consistency."""
    result = router_instance.validate_route(body.to_route())
    if not result.ok:
        logger.info("route_validation_failed", issues=list(result.issues))
    return ValidateResponse.from_result(result)


@router.post("/bridges/custom")
async def register_custom_bridge(
    body: CustomBridgeBody,
    router_instance: CrossChainRouter = Depends(get_router),
) -> CustomBridgeBody:
    """Register a custom bridge; unknown chains or protocols return 422."""
    try:
        bridge = await asyncio.to_thread(
            router_instance.register_custom_bridge,
            body.source_chain_id,
            body.destination_chain_id,
            body.protocol,
            body.pin,
        )
    except RoutingError as err:
        raise HTTPException(status_code=422, detail=str(err)) from err

    return CustomBridgeBody(
        source_chain_id=bridge.source_chain_id,
        destination_chain_id=bridge.dest_chain_id,
        protocol=bridge.protocol,
        pin=bridge.pin,
    )


@router.get("/chains")
async def list_chains(
    router_instance: CrossChainRouter = Depends(get_router),
) -> list[ChainModel]:
    """Every configured chain, built-in and custom."""
    return [ChainModel.from_chain(chain) for chain in router_instance.chains]


@router.get("/protocols")
async def list_protocols(
    router_instance: CrossChainRouter = Depends(get_router),
) -> list[ProtocolModel]:
    """Every bridge protocol in the catalog, in declaration order."""
    return [ProtocolModel.from_profile(p) for p in router_instance.catalog.profiles.values()]

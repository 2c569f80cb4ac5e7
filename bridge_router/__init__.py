"""Cross-chain bridge route discovery and scoring engine."""

from bridge_router.models.request import RoutingRequest
from bridge_router.routing.router import CrossChainRouter, get_default_router

__version__ = "0.1.0"
__all__ = ["CrossChainRouter", "RoutingRequest", "get_default_router", "__version__"]

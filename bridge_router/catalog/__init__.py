"""Bridge catalog package.

Provides the protocol catalog, the chain registry and the custom bridge
registry that together define which chains can be connected.
"""

from .catalog import DEFAULT_BRIDGE_CATALOG, DEFAULT_DIRECT_BRIDGES, BridgeCatalog
from .chains import BUILTIN_CHAINS, ChainInfo, ChainRegistry
from .connectivity import CustomBridge, CustomBridgeRegistry
from .protocols import DEFAULT_PROTOCOLS, BridgeProtocol, BridgeProtocolProfile, protocol_key

__all__ = [
    "BridgeCatalog",
    "DEFAULT_BRIDGE_CATALOG",
    "DEFAULT_DIRECT_BRIDGES",
    "BridgeProtocol",
    "BridgeProtocolProfile",
    "DEFAULT_PROTOCOLS",
    "protocol_key",
    "ChainInfo",
    "ChainRegistry",
    "BUILTIN_CHAINS",
    "CustomBridge",
    "CustomBridgeRegistry",
]

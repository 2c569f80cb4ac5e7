"""Error classes for the bridge router.

Only structurally invalid input raises. Missing or stale signal data is
resolved to defaults and never surfaces as an error.
"""


class RoutingError(Exception):
    """Base error for routing operations."""

    pass


class InvalidRequestError(RoutingError, ValueError):
    """Routing request rejected before any path search."""

    pass


class UnknownChainError(RoutingError, KeyError):
    """Chain id is not present in the chain registry."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep messages readable
        return str(self.args[0]) if self.args else ""


class UnknownProtocolError(RoutingError, KeyError):
    """Protocol id is not present in the bridge catalog."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class DuplicateChainError(RoutingError, ValueError):
    """Chain id is already in use (built-in or custom)."""

    pass


__all__ = [
    "RoutingError",
    "InvalidRequestError",
    "UnknownChainError",
    "UnknownProtocolError",
    "DuplicateChainError",
]

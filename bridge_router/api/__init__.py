"""HTTP API for the bridge router."""

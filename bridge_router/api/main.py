"""FastAPI application for the bridge router."""

import os

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bridge_router import __version__
from bridge_router.api.endpoints import router

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("ROUTER_HOST", "0.0.0.0")
PORT = int(os.environ.get("ROUTER_PORT", "8000"))
DEBUG = os.environ.get("ROUTER_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (1 MB)
MAX_REQUEST_SIZE = 1024 * 1024

app = FastAPI(
    title="Cross-Chain Bridge Router",
    description="Discovers, scores and ranks bridge routes between chains",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the router API server.

    Configuration via environment variables:
    - ROUTER_HOST: Host to bind to (default: 0.0.0.0)
    - ROUTER_PORT: Port to bind to (default: 8000)
    - ROUTER_DEBUG: Enable debug/reload mode (default: false)
    """
    uvicorn.run(
        "bridge_router.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()

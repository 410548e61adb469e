from fastapi import APIRouter, Request

from .. import __version__
from ..events import now_iso
from ..mcp_server import SERVER_NAME

router = APIRouter()


@router.get(
    "/health",
    summary="Health check",
    description="Returns the current status of the server. Use this for uptime monitoring.",
    tags=["System"],
)
async def health(request: Request):
    """Simple health check for load balancers and monitoring."""
    settings = request.app.state.settings
    return {
        "status": "ok",
        "server": SERVER_NAME,
        "version": __version__,
        "port": settings.port,
        "endpoints": {
            "stream": "/stream",
            "tools": "/tools",
            "sse": "/sse",
            "health": "/health",
        },
        "active_connections": len(request.app.state.registry),
        "timestamp": now_iso(),
    }

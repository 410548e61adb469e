"""
kluster verify HTTP server -- Application factory.

Run with:
    kluster-verify-mcp http --port 3001

This file:
  1. Creates the FastAPI application
  2. Adds CORS middleware (permissive, so browser-based workflow tools can call it)
  3. Puts the shared dispatcher, catalog and SSE registry on app.state
  4. Mounts the route modules (stream, tools, health)
"""

from typing import Optional

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .catalog import ToolCatalog
from .config import Settings
from .dispatch import build_dispatcher
from .events import ConnectionRegistry
from .routes import health, stream, tools


def create_app(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> FastAPI:
    """Build the HTTP front-end.

    ``transport`` is handed to every upstream client the app creates;
    tests use it to fake the verification API."""
    app = FastAPI(
        title="kluster verify MCP server",
        version=__version__,
        description=(
            "Fact-checking tools backed by the kluster.ai verification API.\n\n"
            "| Endpoint | Purpose |\n"
            "|----------|--------|\n"
            "| `POST /stream` | MCP JSON-RPC (initialize, tools/list, tools/call) |\n"
            "| `GET /tools` | List tools |\n"
            "| `POST /tools/{name}` | Run a tool with a JSON argument object |\n"
            "| `GET /sse` | Server-Sent Events feed of tool executions |\n"
            "| `GET /health` | Health check |\n"
        ),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Cache-Control", "x-api-key"],
    )

    catalog = ToolCatalog()
    app.state.settings = settings
    app.state.transport = transport
    app.state.catalog = catalog
    app.state.dispatcher = build_dispatcher(settings, transport=transport, catalog=catalog)
    app.state.registry = ConnectionRegistry()

    app.include_router(stream.router)
    app.include_router(tools.router)
    app.include_router(health.router)

    return app

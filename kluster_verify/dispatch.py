"""
Tool dispatch -- the one entry point every transport calls.

handle(name, arguments) looks the tool up in the catalog, checks the
argument object against the tool's declared properties, and hands off to
the gateway. It always returns a ToolOutcome; transports only decide how
to wrap it.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .catalog import ToolCatalog
from .client import KlusterClient
from .config import Settings
from .errors import UnknownToolError, ValidationError
from .gateway import ToolOutcome, VerificationGateway

logger = logging.getLogger(__name__)


class ToolDispatcher:
    def __init__(self, gateway: VerificationGateway, catalog: Optional[ToolCatalog] = None):
        self.gateway = gateway
        self.catalog = catalog or ToolCatalog()

    async def handle(self, name: str, arguments: Any = None) -> ToolOutcome:
        descriptor = self.catalog.get(name)
        if descriptor is None:
            logger.warning("Unknown tool requested: %s", name)
            return ToolOutcome.failure(UnknownToolError(f"Unknown tool: {name}"))

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            return ToolOutcome.failure(ValidationError("Arguments must be an object"))

        unexpected = sorted(set(arguments) - descriptor.properties)
        if unexpected:
            return ToolOutcome.failure(
                ValidationError(f"Unexpected argument(s) for {name}: {', '.join(unexpected)}")
            )

        logger.info("Executing tool %s", name)
        return await self.gateway.execute(
            descriptor.mode,
            arguments.get("claim"),
            document_content=arguments.get("documentContent"),
            return_search_results=arguments.get("returnSearchResults", True),
        )


def build_dispatcher(
    settings: Settings,
    api_key: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    catalog: Optional[ToolCatalog] = None,
) -> ToolDispatcher:
    """Wire client -> gateway -> dispatcher. ``api_key`` overrides the configured key."""
    client = KlusterClient(
        api_key or settings.api_key,
        base_url=settings.base_url,
        endpoint_path=settings.endpoint_path,
        timeout=settings.timeout,
        transport=transport,
    )
    return ToolDispatcher(VerificationGateway(client), catalog)

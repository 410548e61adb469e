"""
kluster verify MCP Server

Exposes the two verification tools over the Model Context Protocol. Built
on the SDK's low-level Server so that clients see the catalog's exact
input schemas (including additionalProperties: false).

No business logic lives here -- tool calls go straight to the dispatcher
and come back as text content.

Run with:
    kluster-verify-mcp stdio
"""

import logging

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from pydantic import AnyUrl

from .catalog import ToolCatalog
from .dispatch import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "kluster-verify"
INFO_URI = "info://server"
INFO_TEXT = (
    "kluster.ai Verify MCP server. Provides fact-checking tools: 'verify' checks a claim "
    "against reliable sources, 'verify_document' checks a claim against a supplied document."
)


class ToolCallError(Exception):
    """Raised inside a tool handler so the SDK answers with isError: true.

    The message is the outcome text, already in "Error: ..." form."""


def build_server(dispatcher: ToolDispatcher, catalog: ToolCatalog | None = None) -> Server:
    catalog = catalog or dispatcher.catalog
    server = Server(SERVER_NAME)

    # -----------------------------------------------------------------------
    # Tools
    # -----------------------------------------------------------------------

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [d.to_mcp_tool() for d in catalog.list()]

    # Arguments are checked by the dispatcher, not the SDK.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict | None) -> list[types.TextContent]:
        outcome = await dispatcher.handle(name, arguments)
        if outcome.is_error:
            raise ToolCallError(outcome.text)
        return [types.TextContent(type="text", text=outcome.text)]

    # -----------------------------------------------------------------------
    # Resources
    # -----------------------------------------------------------------------

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        return [
            types.Resource(
                uri=AnyUrl(INFO_URI),
                name="info",
                description="What this server is and which tools it provides",
                mimeType="text/plain",
            )
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> list[ReadResourceContents]:
        if str(uri).rstrip("/") != INFO_URI:
            raise ValueError(f"Unknown resource: {uri}")
        return [ReadResourceContents(content=INFO_TEXT, mime_type="text/plain")]

    return server


async def serve_stdio(dispatcher: ToolDispatcher) -> None:
    """Run the MCP server on stdin/stdout until the client disconnects."""
    server = build_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("kluster verify MCP server started on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())

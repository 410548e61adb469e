"""
kluster verify -- fact-checking tools for MCP clients

Exposes two tools backed by the kluster.ai verification API:

    verify           -- check a claim against reliable sources
    verify_document  -- check a claim against a supplied document

Serve them over stdio (for desktop MCP clients) or HTTP (JSON-RPC, REST
and Server-Sent Events):

    kluster-verify-mcp --api-key kl_... stdio
    kluster-verify-mcp --api-key kl_... http --port 3001

Or call the gateway directly:

    from kluster_verify import KlusterClient, VerificationGateway, VerificationMode

    gateway = VerificationGateway(KlusterClient("kl_..."))
    result = await gateway.verify(VerificationMode.claim_only, "The Eiffel Tower is in Rome")
    print(result.is_accurate, result.explanation)
"""

__version__ = "1.0.0"

from .catalog import ToolCatalog, ToolDescriptor
from .client import KlusterClient, build_payload
from .dispatch import ToolDispatcher, build_dispatcher
from .errors import (
    ConfigurationError,
    UnknownToolError,
    UpstreamError,
    ValidationError,
    VerifyError,
)
from .gateway import ToolOutcome, VerificationGateway, VerificationMode
from .schemas import ClientResult, SearchResult, UpstreamPayload, UpstreamResult, Usage

__all__ = [
    "ClientResult",
    "ConfigurationError",
    "KlusterClient",
    "SearchResult",
    "ToolCatalog",
    "ToolDescriptor",
    "ToolDispatcher",
    "ToolOutcome",
    "UnknownToolError",
    "UpstreamError",
    "UpstreamPayload",
    "UpstreamResult",
    "Usage",
    "ValidationError",
    "VerificationGateway",
    "VerificationMode",
    "VerifyError",
    "build_dispatcher",
    "build_payload",
]

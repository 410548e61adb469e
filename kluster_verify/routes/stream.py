"""
POST /stream -- MCP over HTTP, one JSON-RPC message per request.

Send an ``x-api-key`` header to verify with your own kluster.ai key
instead of the one the server was started with.
"""

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from .. import __version__
from ..jsonrpc import PARSE_ERROR, JsonRpcHandler, error_response
from ..mcp_server import SERVER_NAME
from .deps import dispatcher_for

router = APIRouter()


@router.post("/stream", tags=["MCP"], summary="MCP JSON-RPC endpoint")
async def stream(request: Request):
    try:
        message = await request.json()
    except ValueError:
        return JSONResponse(error_response(None, PARSE_ERROR, "Parse error"))

    handler = JsonRpcHandler(dispatcher_for(request), SERVER_NAME, __version__)
    response = await handler.handle(message)
    if response is None:
        return Response(status_code=204)
    return JSONResponse(response)

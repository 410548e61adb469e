"""
REST tool access plus the SSE feed for workflow tools that cannot speak MCP.

GET  /tools          -- list tools
POST /tools/{name}   -- run a tool; the JSON body is the argument object
GET  /sse            -- every execution, success or failure, as an event
"""

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse

from .. import __version__
from ..events import event_stream, now_iso
from ..mcp_server import SERVER_NAME
from .deps import dispatcher_for

router = APIRouter()

ERROR_STATUS = {
    "ValidationError": 400,
    "UnknownToolError": 404,
    "UpstreamError": 502,
}


@router.get("/tools", tags=["Tools"], summary="List available tools")
async def list_tools(request: Request):
    return {
        "tools": [d.to_dict() for d in request.app.state.catalog.list()],
        "server": SERVER_NAME,
        "version": __version__,
    }


@router.post("/tools/{tool_name}", tags=["Tools"], summary="Execute a tool")
async def execute_tool(tool_name: str, request: Request):
    body = await request.body()
    if body.strip():
        try:
            arguments = await request.json()
        except ValueError:
            arguments = body.decode(errors="replace")  # rejected by the dispatcher
    else:
        arguments = {}

    outcome = await dispatcher_for(request).handle(tool_name, arguments)

    if outcome.is_error:
        status = ERROR_STATUS.get(outcome.error_kind, 500)
        payload = {
            "success": False,
            "tool": tool_name,
            "error": outcome.error_message,
            "kind": outcome.error_kind,
            "timestamp": now_iso(),
        }
    else:
        status = 200
        payload = {
            "success": True,
            "tool": tool_name,
            "result": outcome.result.model_dump(),
            "timestamp": now_iso(),
        }

    request.app.state.registry.broadcast({"type": "tool_execution", **payload})
    return JSONResponse(payload, status_code=status)


@router.get("/sse", tags=["Tools"], summary="Server-Sent Events feed")
async def sse(request: Request):
    return StreamingResponse(
        event_stream(
            request.app.state.registry,
            request.is_disconnected,
            tool_names=request.app.state.catalog.names,
        ),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )

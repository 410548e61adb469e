"""
JSON-RPC message handling for the HTTP streamable endpoint.

Answers the handful of MCP methods an HTTP client needs (initialize,
tools/list, tools/call, ping) with single JSON responses. A tool that
fails is still a successful JSON-RPC call: the failure travels inside the
result as isError: true, so the calling agent can read the message.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .dispatch import ToolDispatcher

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2025-03-26"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


def _result(msg_id: Any, result: dict) -> dict:
    return {"jsonrpc": "2.0", "id": msg_id, "result": result}


def error_response(msg_id: Any, code: int, message: str) -> dict:
    return {"jsonrpc": "2.0", "id": msg_id, "error": {"code": code, "message": message}}


class JsonRpcHandler:
    def __init__(self, dispatcher: ToolDispatcher, server_name: str, server_version: str):
        self.dispatcher = dispatcher
        self.server_name = server_name
        self.server_version = server_version

    async def handle(self, message: Any) -> Optional[dict]:
        """Answer one JSON-RPC message. Returns None for notifications."""
        if not isinstance(message, dict) or not isinstance(message.get("method"), str):
            return error_response(None, INVALID_REQUEST, "Invalid Request")

        msg_id = message.get("id")
        method = message["method"]
        params = message.get("params") or {}

        if method.startswith("notifications/"):
            logger.debug("Notification received: %s", method)
            return None

        try:
            if method == "initialize":
                return _result(msg_id, self._initialize())
            if method == "ping":
                return _result(msg_id, {})
            if method == "tools/list":
                return _result(
                    msg_id,
                    {"tools": [d.to_dict() for d in self.dispatcher.catalog.list()]},
                )
            if method == "tools/call":
                name = params.get("name") if isinstance(params, dict) else None
                if not isinstance(name, str):
                    return error_response(msg_id, INVALID_PARAMS, "Missing tool name")
                outcome = await self.dispatcher.handle(name, params.get("arguments"))
                return _result(msg_id, outcome.envelope())
        except Exception as e:
            logger.exception("JSON-RPC %s failed", method)
            return error_response(msg_id, INTERNAL_ERROR, str(e) or "Internal error")

        return error_response(msg_id, METHOD_NOT_FOUND, f"Method not found: {method}")

    def _initialize(self) -> dict:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}, "prompts": {}, "resources": {}},
            "serverInfo": {"name": self.server_name, "version": self.server_version},
        }

"""
Command line entry point.

Usage:
    kluster-verify-mcp [--api-key KEY] [--base-url URL] stdio
    kluster-verify-mcp [--api-key KEY] [--base-url URL] http [--host HOST] [--port PORT]

Without a subcommand the stdio MCP server is started.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from . import __version__
from .config import Settings, configure_logging, load_settings
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kluster-verify-mcp",
        description="MCP server for kluster.ai Verify",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--api-key", help="kluster.ai API key (or KLUSTER_API_KEY)")
    parser.add_argument("--base-url", help="kluster.ai base URL (or KLUSTER_AI_BASE_URL)")
    parser.add_argument("--endpoint-path", help="Verify endpoint path (or KLUSTER_VERIFY_PATH)")
    parser.add_argument("--timeout", help="Upstream timeout in seconds (or KLUSTER_TIMEOUT)")
    parser.add_argument("--log-level", help="Logging level (or LOG_LEVEL)")

    sub = parser.add_subparsers(dest="transport")
    sub.add_parser("stdio", help="Serve MCP over stdin/stdout (default)")
    http = sub.add_parser("http", help="Serve JSON-RPC, REST and SSE over HTTP")
    http.add_argument("--host", help="Bind address (or KLUSTER_HOST)")
    http.add_argument("--port", help="Port (or KLUSTER_PORT)")
    return parser


def run_stdio(settings: Settings) -> None:
    from .dispatch import build_dispatcher
    from .mcp_server import serve_stdio

    asyncio.run(serve_stdio(build_dispatcher(settings)))


def run_http(settings: Settings) -> None:
    import uvicorn

    from .app import create_app

    logger.info("MCP endpoint: http://%s:%d/stream", settings.host, settings.port)
    logger.info("SSE endpoint: http://%s:%d/sse", settings.host, settings.port)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    transport = args.transport or "stdio"

    try:
        settings = load_settings(
            api_key=args.api_key,
            base_url=args.base_url,
            endpoint_path=args.endpoint_path,
            timeout=args.timeout,
            host=getattr(args, "host", None),
            port=getattr(args, "port", None),
            log_level=args.log_level,
        )
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.log_level)
    logger.info(
        "Starting kluster verify %s (transport=%s, base_url=%s%s, api_key=%s)",
        __version__, transport, settings.base_url, settings.endpoint_path, settings.masked_api_key,
    )

    try:
        if transport == "http":
            run_http(settings)
        else:
            run_stdio(settings)
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())

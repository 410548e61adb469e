"""
Configuration -- CLI flags first, then environment, then defaults.

Environment variables:
    KLUSTER_API_KEY      -- kluster.ai API key (KLUSTER_AI_API_KEY also accepted). Required.
    KLUSTER_AI_BASE_URL  -- Base URL of the API (default: https://api.kluster.ai/v1)
    KLUSTER_VERIFY_PATH  -- Verify endpoint path (default: /verify/reliability)
    KLUSTER_TIMEOUT      -- Upstream request timeout in seconds (default: 30)
    KLUSTER_HOST         -- HTTP server bind address (default: 0.0.0.0)
    KLUSTER_PORT         -- HTTP server port (default: 3001)
    LOG_LEVEL            -- Logging level (default: INFO)
"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from .client import DEFAULT_BASE_URL, DEFAULT_ENDPOINT_PATH, DEFAULT_TIMEOUT
from .errors import ConfigurationError

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3001
LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    api_key: str
    base_url: str = DEFAULT_BASE_URL
    endpoint_path: str = DEFAULT_ENDPOINT_PATH
    timeout: float = DEFAULT_TIMEOUT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def masked_api_key(self) -> str:
        return f"{self.api_key[:8]}..."


def _first(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value is not None and value.strip():
            return value.strip()
    return None


def load_settings(
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    endpoint_path: Optional[str] = None,
    timeout: Optional[str] = None,
    host: Optional[str] = None,
    port: Optional[str] = None,
    log_level: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve settings from explicit values (CLI flags) and the environment.

    Raises:
        ConfigurationError: if no API key is found or a number does not parse.
    """
    env = os.environ if environ is None else environ

    key = _first(api_key, env.get("KLUSTER_API_KEY"), env.get("KLUSTER_AI_API_KEY"))
    if not key:
        raise ConfigurationError(
            "API key is required. Provide it via --api-key or the KLUSTER_API_KEY environment variable."
        )

    raw_timeout = _first(None if timeout is None else str(timeout), env.get("KLUSTER_TIMEOUT"))
    raw_port = _first(None if port is None else str(port), env.get("KLUSTER_PORT"))
    try:
        timeout_s = float(raw_timeout) if raw_timeout else DEFAULT_TIMEOUT
    except ValueError:
        raise ConfigurationError(f"Invalid timeout: {raw_timeout!r}")
    try:
        port_n = int(raw_port) if raw_port else DEFAULT_PORT
    except ValueError:
        raise ConfigurationError(f"Invalid port: {raw_port!r}")
    if timeout_s <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {timeout_s:g}")
    level = (_first(log_level, env.get("LOG_LEVEL")) or "INFO").upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigurationError(f"Invalid log level: {level!r}")

    return Settings(
        api_key=key,
        base_url=_first(base_url, env.get("KLUSTER_AI_BASE_URL")) or DEFAULT_BASE_URL,
        endpoint_path=_first(endpoint_path, env.get("KLUSTER_VERIFY_PATH")) or DEFAULT_ENDPOINT_PATH,
        timeout=timeout_s,
        host=_first(host, env.get("KLUSTER_HOST")) or DEFAULT_HOST,
        port=port_n,
        log_level=level,
    )


def configure_logging(level: str = "INFO") -> None:
    """Log to stderr. Stdout is reserved for the stdio MCP transport."""
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)

"""
Exception types shared by the client, gateway and transports.

Every error carries a ``kind`` (the class name) so that a failed tool call
can be rendered into any wire format without guessing what went wrong.
"""

from __future__ import annotations

from typing import Any, Optional


class VerifyError(Exception):
    """Base exception for kluster verify errors."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.body = body

    @property
    def kind(self) -> str:
        return type(self).__name__


class ValidationError(VerifyError):
    """Tool arguments failed a type or shape check."""


class UpstreamError(VerifyError):
    """The verification API could not be reached or returned an unusable response."""


class ConfigurationError(VerifyError):
    """Mandatory configuration is missing or invalid. Fatal at startup."""


class UnknownToolError(VerifyError):
    """A tool name that the catalog does not know."""

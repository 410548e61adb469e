"""Static descriptors for the two verification tools."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import mcp.types as types

from .gateway import VerificationMode

_RETURN_SEARCH_RESULTS = {
    "type": "boolean",
    "description": "Whether to return the search results used for verification",
    "default": True,
}


@dataclass(frozen=True)
class ToolDescriptor:
    name: str
    description: str
    mode: VerificationMode
    input_schema: dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> frozenset[str]:
        return frozenset(self.input_schema.get("required", ()))

    @property
    def properties(self) -> frozenset[str]:
        return frozenset(self.input_schema.get("properties", {}))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }

    def to_mcp_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=self.input_schema,
        )


VERIFY = ToolDescriptor(
    name="verify",
    description="Fact-check a claim against reliable sources using kluster.ai Verify",
    mode=VerificationMode.claim_only,
    input_schema={
        "type": "object",
        "properties": {
            "claim": {
                "type": "string",
                "description": "The claim to fact-check",
            },
            "returnSearchResults": _RETURN_SEARCH_RESULTS,
        },
        "required": ["claim"],
        "additionalProperties": False,
    },
)

VERIFY_DOCUMENT = ToolDescriptor(
    name="verify_document",
    description=(
        "Verify if a user's claim accurately reflects the content of a source document. "
        "Use this when a user makes a statement about what a document says or contains. "
        "Provide the document content and the user's interpretation to check for accuracy."
    ),
    mode=VerificationMode.claim_against_document,
    input_schema={
        "type": "object",
        "properties": {
            "claim": {
                "type": "string",
                "description": "The user's claim or interpretation about what the document contains",
            },
            "documentContent": {
                "type": "string",
                "description": (
                    "The full text content of the source document that the claim is about. "
                    "Include the complete document text for accurate verification."
                ),
            },
            "returnSearchResults": _RETURN_SEARCH_RESULTS,
        },
        "required": ["claim", "documentContent"],
        "additionalProperties": False,
    },
)


class ToolCatalog:
    """Ordered, immutable set of tool descriptors."""

    def __init__(self, descriptors: tuple[ToolDescriptor, ...] = (VERIFY, VERIFY_DOCUMENT)):
        self._descriptors = tuple(descriptors)
        self._by_name = {d.name: d for d in self._descriptors}

    def get(self, name: str) -> Optional[ToolDescriptor]:
        return self._by_name.get(name)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(d.name for d in self._descriptors)

    def list(self) -> tuple[ToolDescriptor, ...]:
        return self._descriptors

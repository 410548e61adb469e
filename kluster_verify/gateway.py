"""
Verification gateway: tool arguments in, client-facing verdict out.

The gateway is the only place that knows how a claim becomes an upstream
request and how the upstream verdict becomes a ClientResult. Transports
(stdio MCP, JSON-RPC over HTTP, REST + SSE) all call into it through the
dispatcher and never talk to the API themselves.

No business logic lives in the transports -- just envelopes.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .client import KlusterClient, build_payload
from .errors import ValidationError, VerifyError
from .schemas import ClientResult

logger = logging.getLogger(__name__)


class VerificationMode(str, Enum):
    """The two ways a claim can be checked. Only the prompt differs."""

    claim_only = "claim_only"
    claim_against_document = "claim_against_document"

    @property
    def prompt(self) -> str:
        return PROMPTS[self]


PROMPTS = {
    VerificationMode.claim_only: "Please verify this claim for accuracy:",
    VerificationMode.claim_against_document: (
        "Does this claim accurately reflect the provided document content?"
    ),
}


# ---------------------------------------------------------------------------
# Outcome -- what every transport gets back
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ToolOutcome:
    """Either a ClientResult or a tagged error. Never both."""

    result: Optional[ClientResult] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, result: ClientResult) -> "ToolOutcome":
        return cls(result=result)

    @classmethod
    def failure(cls, error: VerifyError) -> "ToolOutcome":
        return cls(error_kind=error.kind, error_message=error.message)

    @property
    def is_error(self) -> bool:
        return self.error_kind is not None

    @property
    def text(self) -> str:
        if self.is_error:
            return f"Error: {self.error_message}"
        return json.dumps(self.result.model_dump(), indent=2)

    def envelope(self) -> dict[str, Any]:
        """MCP tool-result shape: text content blocks plus isError on failure."""
        envelope: dict[str, Any] = {"content": [{"type": "text", "text": self.text}]}
        if self.is_error:
            envelope["isError"] = True
        return envelope


# ---------------------------------------------------------------------------
# Gateway
# ---------------------------------------------------------------------------

class VerificationGateway:
    """Translates a verification request into one upstream call."""

    def __init__(self, client: KlusterClient):
        self.client = client

    async def verify(
        self,
        mode: VerificationMode,
        claim: Any,
        document_content: Any = None,
        return_search_results: Any = True,
    ) -> ClientResult:
        """Verify a claim, raising on failure.

        Args:
            mode: claim_only or claim_against_document.
            claim: The statement to verify. Must be a string.
            document_content: Reference text. Required (as a string) in
                document mode, ignored otherwise.
            return_search_results: Ask for the sources used. None means True.

        Raises:
            ValidationError: before any upstream call, on bad arguments.
            UpstreamError: when the API call fails.
        """
        try:
            mode = VerificationMode(mode)
        except ValueError:
            raise ValidationError(f"Unknown verification mode: {mode!r}")
        if not isinstance(claim, str):
            raise ValidationError("Claim must be a string")
        if not claim.strip():
            raise ValidationError("Claim must not be empty")
        if mode is VerificationMode.claim_against_document:
            if not isinstance(document_content, str):
                raise ValidationError("Document content must be a string")
            context = document_content
        else:
            context = None
        if return_search_results is None:
            return_search_results = True
        if not isinstance(return_search_results, bool):
            raise ValidationError("returnSearchResults must be a boolean")

        payload = build_payload(mode.prompt, claim, context, return_search_results)
        logger.info(
            "Verifying claim (mode=%s, claim_chars=%d, context_chars=%d, search_results=%s)",
            mode.value, len(claim), len(context or ""), payload.return_search_results,
        )
        upstream = await self.client.verify(payload)
        result = ClientResult.from_upstream(claim, upstream)
        logger.info(
            "Verdict: is_accurate=%s, sources=%d, tokens=%d",
            result.is_accurate, len(result.search_results), result.confidence.total_tokens,
        )
        return result

    async def execute(
        self,
        mode: VerificationMode,
        claim: Any,
        document_content: Any = None,
        return_search_results: Any = True,
    ) -> ToolOutcome:
        """Same as verify(), but failures come back as an error outcome."""
        try:
            result = await self.verify(mode, claim, document_content, return_search_results)
        except VerifyError as e:
            logger.warning("Verification failed (%s): %s", e.kind, e.message)
            return ToolOutcome.failure(e)
        return ToolOutcome.success(result)

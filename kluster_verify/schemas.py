"""
kluster verify -- Pydantic Data Models

Every payload that crosses the upstream boundary, and every result handed
back to a tool caller, is defined here. Pydantic gives us:
  - Validation of the upstream response (a malformed body is an UpstreamError)
  - Serialization that omits absent keys instead of sending nulls

All models are request-scoped values: built per call and thrown away.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ---------------------------------------------------------------------------
# Shared pieces
# ---------------------------------------------------------------------------

class SearchResult(BaseModel):
    """One web source the verification agent consulted."""

    model_config = ConfigDict(extra="ignore")

    title: str = Field(default="", description="Page title.")
    snippet: str = Field(default="", description="Excerpt relevant to the claim.")
    link: str = Field(default="", description="URL of the source.")


class Usage(BaseModel):
    """Token accounting reported by the verification API."""

    model_config = ConfigDict(extra="ignore")

    completion_tokens: int = 0
    prompt_tokens: int = 0
    total_tokens: int = 0


# ---------------------------------------------------------------------------
# Upstream request / response
# ---------------------------------------------------------------------------

class UpstreamPayload(BaseModel):
    """Body POSTed to the verification API.

    ``return_search_results`` is a string literal, not a boolean: the API
    only understands "true" and "false". ``context`` is left out of the
    serialized body entirely when there is no document."""

    model: str = Field(description="Verification model identifier.")
    prompt: str = Field(description="Instruction telling the agent what to check.")
    output: str = Field(description="The claim under verification.")
    context: str | None = Field(
        default=None,
        description="Reference document for document-mode verification.",
    )
    return_search_results: Literal["true", "false"] = "true"

    def to_json(self) -> dict:
        return self.model_dump(exclude_none=True)


class UpstreamResult(BaseModel):
    """What the verification API answers with."""

    model_config = ConfigDict(extra="ignore")

    is_hallucination: bool
    explanation: str
    usage: Usage = Field(default_factory=Usage)
    search_results: list[SearchResult] = Field(default_factory=list)

    @field_validator("search_results", mode="before")
    @classmethod
    def _null_search_results(cls, value):
        # The API sends null as well as omitting the key when there are none.
        return [] if value is None else value


# ---------------------------------------------------------------------------
# Client-facing result
# ---------------------------------------------------------------------------

class ClientResult(BaseModel):
    """The result a tool caller sees.

    Polarity: ``is_accurate`` is the negation of the API's
    ``is_hallucination``. ``confidence`` is the API's ``usage`` block,
    copied as-is."""

    claim: str
    is_accurate: bool
    explanation: str
    confidence: Usage
    search_results: list[SearchResult] = Field(default_factory=list)

    @classmethod
    def from_upstream(cls, claim: str, upstream: UpstreamResult) -> "ClientResult":
        return cls(
            claim=claim,
            is_accurate=not upstream.is_hallucination,
            explanation=upstream.explanation,
            confidence=upstream.usage,
            search_results=list(upstream.search_results),
        )

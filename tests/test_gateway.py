"""
Tests for the verification gateway.

Covers argument validation (which must happen before any upstream call),
the mapping from the API verdict to the client result, and the error
outcomes that transports wrap.
"""

import json

import pytest

from conftest import BASE_URL, TEST_KEY, FakeVerifyAPI
from kluster_verify.client import KlusterClient
from kluster_verify.errors import UpstreamError, ValidationError
from kluster_verify.gateway import ToolOutcome, VerificationGateway, VerificationMode


def make_gateway(api: FakeVerifyAPI) -> VerificationGateway:
    return VerificationGateway(KlusterClient(TEST_KEY, base_url=BASE_URL, transport=api.transport))


class TestValidation:

    @pytest.mark.asyncio
    async def test_non_string_claim_is_rejected_without_upstream_call(self, gateway, fake_api):
        outcome = await gateway.execute(VerificationMode.claim_only, 123)

        assert outcome.is_error
        assert outcome.error_kind == "ValidationError"
        assert "Claim must be a string" in outcome.error_message
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_document_mode_requires_document(self, gateway, fake_api):
        with pytest.raises(ValidationError, match="Document content must be a string"):
            await gateway.verify(VerificationMode.claim_against_document, "The NDA lasts a year")
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_document_mode_rejects_non_string_document(self, gateway, fake_api):
        outcome = await gateway.execute(
            VerificationMode.claim_against_document, "claim", document_content=["not", "text"]
        )
        assert outcome.error_kind == "ValidationError"
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_return_search_results_must_be_boolean(self, gateway, fake_api):
        outcome = await gateway.execute(VerificationMode.claim_only, "claim", return_search_results="yes")
        assert outcome.error_kind == "ValidationError"
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_unknown_mode_is_an_error_outcome(self, gateway, fake_api):
        outcome = await gateway.execute("bogus", "claim")

        assert outcome.is_error
        assert outcome.error_kind == "ValidationError"
        assert "Unknown verification mode: 'bogus'" in outcome.error_message
        assert fake_api.requests == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("claim", ["", "   \n\t"])
    async def test_blank_claim_is_rejected(self, gateway, fake_api, claim):
        outcome = await gateway.execute(VerificationMode.claim_only, claim)

        assert outcome.error_kind == "ValidationError"
        assert outcome.error_message == "Claim must not be empty"
        assert fake_api.requests == []


class TestPayload:

    @pytest.mark.asyncio
    async def test_claim_only_payload(self, gateway, fake_api):
        await gateway.verify(VerificationMode.claim_only, "The Eiffel Tower is in Paris")

        body = fake_api.payloads[0]
        assert body["prompt"] == "Please verify this claim for accuracy:"
        assert body["output"] == "The Eiffel Tower is in Paris"
        assert body["model"] == "klusterai/verify-agent"
        assert "context" not in body

    @pytest.mark.asyncio
    async def test_claim_only_ignores_document(self, gateway, fake_api):
        await gateway.verify(VerificationMode.claim_only, "claim", document_content="ignored")
        assert "context" not in fake_api.payloads[0]

    @pytest.mark.asyncio
    async def test_document_payload(self, gateway, fake_api):
        document = "Section 3.2: Non-compete limited to British Columbia for 30 days."
        await gateway.verify(
            VerificationMode.claim_against_document,
            "The non-compete covers all of North America",
            document_content=document,
        )

        body = fake_api.payloads[0]
        assert body["prompt"] == "Does this claim accurately reflect the provided document content?"
        assert body["context"] == document

    @pytest.mark.asyncio
    @pytest.mark.parametrize("flag, expected", [(True, "true"), (False, "false"), (None, "true")])
    async def test_search_results_flag(self, gateway, fake_api, flag, expected):
        await gateway.verify(VerificationMode.claim_only, "claim", return_search_results=flag)
        assert fake_api.payloads[0]["return_search_results"] == expected


class TestResultMapping:

    @pytest.mark.asyncio
    async def test_accurate_verdict(self, gateway):
        result = await gateway.verify(VerificationMode.claim_only, "The Eiffel Tower is in Paris")

        assert result.claim == "The Eiffel Tower is in Paris"
        assert result.is_accurate is True
        assert result.explanation == "Confirmed accurate"
        assert result.confidence.total_tokens == 600
        assert result.search_results[0].link == "https://en.wikipedia.org/wiki/Eiffel_Tower"

    @pytest.mark.asyncio
    async def test_hallucination_flips_polarity(self):
        api = FakeVerifyAPI(body={
            "is_hallucination": True,
            "explanation": "The Eiffel Tower is in Paris, not Rome.",
            "usage": {"completion_tokens": 1, "prompt_tokens": 2, "total_tokens": 3},
            "search_results": [],
        })
        result = await make_gateway(api).verify(VerificationMode.claim_only, "The Eiffel Tower is in Rome")
        assert result.is_accurate is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("search_results", ["absent", None])
    async def test_missing_search_results_become_empty_list(self, search_results):
        body = {
            "is_hallucination": False,
            "explanation": "ok",
            "usage": {"completion_tokens": 1, "prompt_tokens": 2, "total_tokens": 3},
        }
        if search_results != "absent":
            body["search_results"] = search_results
        result = await make_gateway(FakeVerifyAPI(body=body)).verify(VerificationMode.claim_only, "c")

        assert result.search_results == []
        assert result.model_dump()["search_results"] == []

    @pytest.mark.asyncio
    async def test_success_outcome_renders_json(self, gateway):
        outcome = await gateway.execute(VerificationMode.claim_only, "The Eiffel Tower is in Paris")

        assert not outcome.is_error
        data = json.loads(outcome.text)
        assert set(data) == {"claim", "is_accurate", "explanation", "confidence", "search_results"}
        assert data["confidence"] == {"completion_tokens": 120, "prompt_tokens": 480, "total_tokens": 600}
        assert outcome.envelope() == {"content": [{"type": "text", "text": outcome.text}]}


class TestUpstreamFailure:

    @pytest.mark.asyncio
    async def test_server_error_becomes_error_outcome(self):
        api = FakeVerifyAPI(status=500, body={"error": "boom"})
        outcome = await make_gateway(api).execute(VerificationMode.claim_only, "claim")

        assert outcome.error_kind == "UpstreamError"
        assert "API returned 500" in outcome.error_message
        assert outcome.text.startswith("Error: Failed to verify claim")
        envelope = outcome.envelope()
        assert envelope["isError"] is True
        assert envelope["content"][0]["type"] == "text"

    @pytest.mark.asyncio
    async def test_verify_raises_upstream_error(self):
        api = FakeVerifyAPI(status=503, raw="unavailable")
        with pytest.raises(UpstreamError) as exc_info:
            await make_gateway(api).verify(VerificationMode.claim_only, "claim")
        assert exc_info.value.status_code == 503
        assert len(api.requests) == 1


class TestToolOutcome:

    def test_failure_text(self):
        outcome = ToolOutcome.failure(ValidationError("Claim must be a string"))
        assert outcome.text == "Error: Claim must be a string"
        assert outcome.result is None

"""Shared fixtures: a fake verification API and a ready-made gateway."""

import json

import httpx
import pytest

from kluster_verify.client import KlusterClient
from kluster_verify.config import Settings
from kluster_verify.gateway import VerificationGateway

TEST_KEY = "kl_test_0123456789"
BASE_URL = "https://verify.test/v1"

VERDICT_ACCURATE = {
    "is_hallucination": False,
    "explanation": "Confirmed accurate",
    "usage": {"completion_tokens": 120, "prompt_tokens": 480, "total_tokens": 600},
    "search_results": [
        {
            "title": "Eiffel Tower - Wikipedia",
            "snippet": "The Eiffel Tower is a wrought-iron lattice tower in Paris, France.",
            "link": "https://en.wikipedia.org/wiki/Eiffel_Tower",
        }
    ],
}


class FakeVerifyAPI:
    """Records every request and answers with a canned response."""

    def __init__(self, status: int = 200, body=None, raw: str | None = None, exc: Exception | None = None):
        self.status = status
        self.body = VERDICT_ACCURATE if body is None else body
        self.raw = raw
        self.exc = exc
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status, text=self.raw)
        return httpx.Response(self.status, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def payloads(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def fake_api():
    return FakeVerifyAPI()


@pytest.fixture
def settings():
    return Settings(api_key=TEST_KEY, base_url=BASE_URL)


@pytest.fixture
def gateway(fake_api):
    client = KlusterClient(TEST_KEY, base_url=BASE_URL, transport=fake_api.transport)
    return VerificationGateway(client)

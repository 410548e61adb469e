"""
kluster.ai verification API client.

Thin async client for the upstream verify endpoint. One call, one POST:
no retries, no caching. Every failure comes back as an UpstreamError that
carries the upstream status code and body when there was one.

Usage:

    client = KlusterClient("kl_...", base_url="https://api.kluster.ai/v1")
    payload = build_payload("Please verify this claim for accuracy:", "The sky is green")
    result = await client.verify(payload)
    print(result.is_hallucination, result.explanation)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
import pydantic

from .errors import UpstreamError
from .schemas import UpstreamPayload, UpstreamResult

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.kluster.ai/v1"
DEFAULT_ENDPOINT_PATH = "/verify/reliability"
DEFAULT_TIMEOUT = 30.0
VERIFY_MODEL = "klusterai/verify-agent"


# ── Payload ───────────────────────────────────────────────────────────────


def build_payload(
    prompt: str,
    output: str,
    context: Optional[str] = None,
    return_search_results: bool = True,
) -> UpstreamPayload:
    """Build the request body for the verify endpoint.

    Args:
        prompt: Instruction for the verification agent.
        output: The claim to fact-check.
        context: Reference document. Omitted from the body when None.
        return_search_results: Ask the API to include the sources it used.
    """
    return UpstreamPayload(
        model=VERIFY_MODEL,
        prompt=prompt,
        output=output,
        context=context,
        return_search_results="true" if return_search_results else "false",
    )


# ── Client ────────────────────────────────────────────────────────────────


class KlusterClient:
    """
    Client for the kluster.ai verification API.

    Args:
        api_key: kluster.ai API key, sent as a bearer token.
        base_url: API base URL. Defaults to https://api.kluster.ai/v1.
        endpoint_path: Path of the verify endpoint under base_url.
        timeout: Request timeout in seconds. Defaults to 30.
        transport: Optional httpx transport (tests pass a MockTransport).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        endpoint_path: str = DEFAULT_ENDPOINT_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.endpoint_path = "/" + endpoint_path.lstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.endpoint_path}"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def verify(self, payload: UpstreamPayload) -> UpstreamResult:
        """POST the payload and parse the verdict.

        Raises:
            UpstreamError: on transport failure, timeout, non-2xx status,
                or a body that is not a valid verification response.
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                r = await client.post(self.url, headers=self.headers, json=payload.to_json())
                r.raise_for_status()
                data = r.json()
        except httpx.ConnectError as e:
            logger.error("Cannot connect to verification API at %s: %s", self.base_url, e)
            raise UpstreamError(
                f"Failed to verify claim: cannot connect to verification API at {self.base_url}"
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Verification API timed out after %.1fs", self.timeout)
            raise UpstreamError(
                f"Failed to verify claim: request timed out after {self.timeout:g}s"
            ) from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            body = _response_body(e.response)
            logger.error("Verification API error: status=%d body=%s", status, body)
            raise UpstreamError(
                f"Failed to verify claim: API returned {status}: {body}",
                status_code=status,
                body=body,
            ) from e
        except httpx.HTTPError as e:
            logger.error("Verification API request failed: %s", e)
            raise UpstreamError(f"Failed to verify claim: {e}") from e
        except ValueError as e:
            # r.json() on a body that is not JSON
            logger.error("Verification API returned a non-JSON body (status=%d)", r.status_code)
            raise UpstreamError(
                "Failed to verify claim: response body is not valid JSON",
                status_code=r.status_code,
                body=r.text,
            ) from e

        try:
            return UpstreamResult.model_validate(data)
        except pydantic.ValidationError as e:
            logger.error("Verification API returned an unexpected body: %s", data)
            raise UpstreamError(
                f"Failed to verify claim: malformed response ({e.error_count()} invalid field(s))",
                status_code=r.status_code,
                body=data,
            ) from e


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text

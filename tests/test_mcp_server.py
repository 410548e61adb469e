"""
MCP server tests, run in-process.

A client session is connected to the server over memory streams, so tool
discovery and tool calls go through the real MCP protocol handling.
"""

import json

import pytest
from mcp.shared.memory import create_connected_server_and_client_session

from conftest import FakeVerifyAPI
from kluster_verify.dispatch import ToolDispatcher, build_dispatcher
from kluster_verify.mcp_server import INFO_TEXT, build_server


@pytest.fixture
def server(gateway):
    return build_server(ToolDispatcher(gateway))


class TestMcpServer:

    @pytest.mark.asyncio
    async def test_tool_discovery(self, server):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.list_tools()

        tools = {t.name: t for t in result.tools}
        assert sorted(tools) == ["verify", "verify_document"]
        assert tools["verify_document"].inputSchema["required"] == ["claim", "documentContent"]
        assert tools["verify"].inputSchema["additionalProperties"] is False

    @pytest.mark.asyncio
    async def test_verify(self, server, fake_api):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("verify", {"claim": "The Eiffel Tower is in Paris"})

        assert not result.isError
        data = json.loads(result.content[0].text)
        assert data["claim"] == "The Eiffel Tower is in Paris"
        assert data["is_accurate"] is True
        assert data["explanation"] == "Confirmed accurate"
        assert len(fake_api.requests) == 1

    @pytest.mark.asyncio
    async def test_verify_document(self, server, fake_api):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("verify_document", {
                "claim": "The non-compete lasts 30 days",
                "documentContent": "Section 3.2: Non-compete limited to 30 days.",
                "returnSearchResults": False,
            })

        assert not result.isError
        body = fake_api.payloads[0]
        assert body["context"] == "Section 3.2: Non-compete limited to 30 days."
        assert body["return_search_results"] == "false"

    @pytest.mark.asyncio
    async def test_upstream_failure_is_a_tool_error(self, settings):
        api = FakeVerifyAPI(status=500, body={"error": "boom"})
        server = build_server(build_dispatcher(settings, transport=api.transport))

        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("verify", {"claim": "x"})

        assert result.isError
        assert result.content[0].type == "text"
        assert result.content[0].text.startswith("Error: Failed to verify claim: API returned 500")

    @pytest.mark.asyncio
    async def test_non_string_claim_reports_gateway_message(self, server, fake_api):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("verify", {"claim": 123})

        assert result.isError
        assert result.content[0].text == "Error: Claim must be a string"
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_missing_document_reports_gateway_message(self, server, fake_api):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("verify_document", {"claim": "x"})

        assert result.isError
        assert result.content[0].text == "Error: Document content must be a string"
        assert fake_api.requests == []

    @pytest.mark.asyncio
    async def test_unknown_tool_is_a_tool_error(self, server):
        async with create_connected_server_and_client_session(server) as session:
            result = await session.call_tool("fact_check", {"claim": "x"})

        assert result.isError

    @pytest.mark.asyncio
    async def test_info_resource(self, server):
        async with create_connected_server_and_client_session(server) as session:
            listed = await session.list_resources()
            assert [str(r.uri).rstrip("/") for r in listed.resources] == ["info://server"]

            contents = await session.read_resource(listed.resources[0].uri)

        assert contents.contents[0].text == INFO_TEXT

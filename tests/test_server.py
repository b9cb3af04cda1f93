"""Tests for the MCP protocol layer."""

from __future__ import annotations

import mcp.types as types
import pytest
from mcp.shared.exceptions import McpError

from lazyskills.server import create_server, to_call_tool_result, to_mcp_tool
from lazyskills.tools import ToolDefinition, ToolResponse

from conftest import FakeBridgeClient, Switch, write_skill


@pytest.fixture
def app(make_app, skills_root):
    write_skill(
        skills_root, "weather",
        name="weather", description="reports weather",
        body="Always answer in Celsius.",
    )
    return make_app()


class TestConversions:
    def test_tool(self):
        tool = to_mcp_tool(ToolDefinition(
            name="weather",
            description="reports weather",
            input_schema={"type": "object", "properties": {}},
        ))
        assert tool.name == "weather"
        assert tool.inputSchema == {"type": "object", "properties": {}}

    def test_result_passes_blocks_through(self):
        result = to_call_tool_result(ToolResponse(
            content=[
                {"type": "text", "text": "hello"},
                {"type": "image", "data": "aGk=", "mimeType": "image/png"},
            ],
            is_error=True,
            structured_content={"ok": False},
        ))

        assert result.isError is True
        assert result.content[0].text == "hello"
        assert result.content[1].mimeType == "image/png"
        assert result.structuredContent == {"ok": False}


class TestHandlers:
    @pytest.mark.asyncio
    async def test_list_tools(self, app):
        server = create_server(app)
        handler = server.request_handlers[types.ListToolsRequest]

        result = await handler(types.ListToolsRequest(method="tools/list"))

        assert [t.name for t in result.root.tools] == ["weather"]
        assert result.root.tools[0].description == "reports weather"

    @pytest.mark.asyncio
    async def test_call_skill(self, app):
        server = create_server(app)
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="weather", arguments={}),
        ))

        assert result.root.isError is False
        assert result.root.content[0].text == "Always answer in Celsius."

    @pytest.mark.asyncio
    async def test_call_unknown_is_protocol_error(self, app):
        server = create_server(app)
        handler = server.request_handlers[types.CallToolRequest]

        with pytest.raises(McpError) as exc_info:
            await handler(types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="nope", arguments={}),
            ))

        assert exc_info.value.error.code == types.INVALID_PARAMS
        assert exc_info.value.error.message == "Tool 'nope' not found"
        assert exc_info.value.error.data == {"tool": "nope"}

    @pytest.mark.asyncio
    async def test_bridge_failure_is_protocol_error(
        self, app, switch: Switch, fake_bridge: FakeBridgeClient
    ):
        switch.on = True
        fake_bridge.execute_error = RuntimeError("upstream 500")
        server = create_server(app)
        handler = server.request_handlers[types.CallToolRequest]

        with pytest.raises(McpError) as exc_info:
            await handler(types.CallToolRequest(
                method="tools/call",
                params=types.CallToolRequestParams(name="read_file", arguments={}),
            ))

        assert exc_info.value.error.code == types.INTERNAL_ERROR
        assert "Tool 'read_file' execution failed: upstream 500" in exc_info.value.error.message

    @pytest.mark.asyncio
    async def test_call_bridge_tool(self, app, switch: Switch):
        switch.on = True
        server = create_server(app)
        handler = server.request_handlers[types.CallToolRequest]

        result = await handler(types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(name="read_file", arguments={"path": "/etc/hosts"}),
        ))

        assert result.root.content[0].text == "ran filesystem.read_file"
        assert result.root.structuredContent == {"arguments": {"path": "/etc/hosts"}}

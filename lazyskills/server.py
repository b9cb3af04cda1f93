"""MCP stdio server exposing the catalog and router."""

from __future__ import annotations

import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server
from mcp.shared.exceptions import McpError

from lazyskills import __version__
from lazyskills.errors import LazySkillsError, ToolNotFoundError
from lazyskills.factory import SkillsApp
from lazyskills.tools import ToolDefinition, ToolResponse
from lazyskills.utils import get_logger

logger = get_logger(__name__)

SERVER_NAME = "lazyskills"


def to_mcp_tool(definition: ToolDefinition) -> types.Tool:
    return types.Tool.model_validate(definition.to_mcp_format())


def to_call_tool_result(response: ToolResponse) -> types.CallToolResult:
    return types.CallToolResult.model_validate({
        "content": response.content,
        "isError": response.is_error,
        "structuredContent": response.structured_content,
    })


def to_error_data(error: LazySkillsError) -> types.ErrorData:
    code = types.INVALID_PARAMS if isinstance(error, ToolNotFoundError) else types.INTERNAL_ERROR
    data = {"tool": error.tool_name} if hasattr(error, "tool_name") else None
    return types.ErrorData(code=code, message=str(error), data=data)


def create_server(app: SkillsApp) -> Server:
    """Create the MCP server with ``tools/list`` and ``tools/call`` handlers.

    A call the router cannot complete (unknown tool, bridge failure) is
    answered with a JSON-RPC error, not an ``isError`` result. Bridge results
    that carry ``isError`` themselves are passed through unchanged.
    """
    server = Server(SERVER_NAME, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        catalog = await app.composer.build_catalog()
        return [to_mcp_tool(definition) for definition in catalog]

    # not @server.call_tool(): it would turn router errors into isError
    # results. Arguments are not validated here, lazy-mcp checks its own.
    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        name = request.params.name
        try:
            response = await app.router.invoke(name, request.params.arguments or {})
        except LazySkillsError as e:
            logger.warning(f"tools/call {name} failed: {e}")
            raise McpError(to_error_data(e)) from e
        return types.ServerResult(to_call_tool_result(response))

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def run_stdio(app: SkillsApp) -> None:
    """Serve over stdin/stdout until the client disconnects."""
    settings = app.settings
    bridge_enabled = await app.bridge.sync_with_flag()

    logger.info(f"lazyskills MCP server v{__version__} starting...")
    logger.info(f"Skills directory: {settings.skills_dir}")
    logger.info(f"Lazy-MCP integration: {'ENABLED' if bridge_enabled else 'DISABLED'}")
    if bridge_enabled:
        logger.info(f"Lazy-MCP command: {settings.lazy_bridge_command}")

    server = create_server(app)
    try:
        async with stdio_server() as (read_stream, write_stream):
            logger.info("lazyskills MCP server running on stdio")
            await server.run(
                read_stream,
                write_stream,
                server.create_initialization_options(),
            )
    finally:
        await app.aclose()

"""MCP stdio server exposing the award search tools.

Binds ``ToolDispatcher`` to the MCP SDK's low-level server. stdout carries
the protocol, so all logging goes to stderr. Each call runs in a worker
thread so the blocking HTTP client does not stall the protocol loop.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import anyio
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from awards.tools.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)

SERVER_NAME = "seats-aero-mcp"
SERVER_VERSION = "1.0.0"


def to_mcp_tools(dispatcher: ToolDispatcher) -> list[types.Tool]:
    return [
        types.Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
        for tool in dispatcher.tools
    ]


async def handle_call(
    dispatcher: ToolDispatcher, name: str, arguments: Optional[dict[str, Any]],
) -> types.CallToolResult:
    """Run one call off the event loop; the error flag travels with the text."""
    response = await anyio.to_thread.run_sync(dispatcher.call_tool, name, arguments or {})
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=block.text) for block in response.content],
        isError=response.is_error,
    )


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Build an MCP server whose tool handlers delegate to ``dispatcher``."""
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return to_mcp_tools(dispatcher)

    # The dispatcher validates arguments itself and reports failures as text
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        return await handle_call(dispatcher, name, arguments)

    return server


async def serve(dispatcher: ToolDispatcher) -> None:
    """Serve tool calls on stdin/stdout until the client disconnects."""
    server = create_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Seats.aero MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())

"""Tool catalog and dispatcher for the award search tool server."""

from awards.tools.catalog import TOOL_DEFINITIONS, TOOLS, ToolDefinition, ToolSpec, get_tool
from awards.tools.dispatcher import TextContent, ToolDispatcher, ToolResponse

__all__ = [
    "TOOLS",
    "TOOL_DEFINITIONS",
    "TextContent",
    "ToolDefinition",
    "ToolDispatcher",
    "ToolResponse",
    "ToolSpec",
    "get_tool",
]

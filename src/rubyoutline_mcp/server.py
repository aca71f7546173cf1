"""MCP server for rubyoutline-mcp."""

import asyncio
import json

import structlog
from mcp.server import Server
from mcp.types import Tool, TextContent

from .log import configure_logging
from .tools.get_document_symbols import get_document_symbols
from .tools.get_folding_ranges import get_folding_ranges
from .tools.outline_folder import outline_folder

logger = structlog.get_logger()


# Create server
server = Server("rubyoutline-mcp")


@server.list_tools()
async def list_tools() -> list[Tool]:
    """List all available tools."""
    return [
        Tool(
            name="get_document_symbols",
            description="Get the outline of a Ruby file: classes, modules, methods, constants, instance/class variables and attribute accessors, nested by scope. Ranges are 0-indexed.",
            inputSchema={
                "type": "object",
                "properties": {
                    "file_path": {
                        "type": "string",
                        "description": "Path to a Ruby file (supports ~ for home directory)"
                    },
                    "content": {
                        "type": "string",
                        "description": "Inline Ruby source; used instead of file_path when given"
                    },
                    "flat": {
                        "type": "boolean",
                        "description": "Return a flat list annotated with nesting depth instead of a tree",
                        "default": False
                    }
                }
            }
        ),
        Tool(
            name="get_folding_ranges",
            description="Get the line ranges an editor can fold in a Ruby file. Consecutive require statements are merged into a single 'imports' range.",
            inputSchema={
                "type": "object",
                "properties": {
                    "file_path": {
                        "type": "string",
                        "description": "Path to a Ruby file (supports ~ for home directory)"
                    },
                    "content": {
                        "type": "string",
                        "description": "Inline Ruby source; used instead of file_path when given"
                    }
                }
            }
        ),
        Tool(
            name="outline_folder",
            description="Outline every Ruby file in a local folder. Skips vendored, generated and temporary directories.",
            inputSchema={
                "type": "object",
                "properties": {
                    "path": {
                        "type": "string",
                        "description": "Path to local folder (absolute or relative, supports ~ for home directory)"
                    },
                    "max_files": {
                        "type": "integer",
                        "description": "Maximum number of files to outline",
                        "default": 500
                    }
                },
                "required": ["path"]
            }
        ),
    ]


@server.call_tool()
async def call_tool(name: str, arguments: dict) -> list[TextContent]:
    """Handle tool calls."""
    try:
        if name == "get_document_symbols":
            result = get_document_symbols(
                file_path=arguments.get("file_path"),
                content=arguments.get("content"),
                flat=arguments.get("flat", False),
            )
        elif name == "get_folding_ranges":
            result = get_folding_ranges(
                file_path=arguments.get("file_path"),
                content=arguments.get("content"),
            )
        elif name == "outline_folder":
            result = outline_folder(
                path=arguments["path"],
                max_files=arguments.get("max_files", 500),
            )
        else:
            result = {"error": f"Unknown tool: {name}"}

        return [TextContent(type="text", text=json.dumps(result, indent=2))]

    except Exception as e:
        logger.exception("tool_failed", tool=name)
        return [TextContent(type="text", text=json.dumps({"error": str(e)}, indent=2))]


async def run_server():
    """Run the MCP server."""
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(
            read_stream,
            write_stream,
            server.create_initialization_options()
        )


def main():
    """Main entry point."""
    configure_logging()
    asyncio.run(run_server())


if __name__ == "__main__":
    main()

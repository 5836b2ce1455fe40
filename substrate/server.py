"""
Substrate MCP Server

Exposes substrate's introspection tools to MCP clients over stdio.

This file is intentionally kept as a thin routing layer.
All handler logic is in handlers.py, and every tool call runs in its
own worker process via the executor.
"""

import asyncio
from pathlib import Path
from typing import Optional

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent, Tool

from . import __version__
from .config import load_config
from .executor import ToolExecutor
from .handlers import Handlers
from .project import find_project_root
from .registry import ToolRegistry

INSTRUCTIONS = (
    "Python application introspection server: application info, installed packages, "
    "entry points, configuration values, .env variable names, log entries and the "
    "last logged error. Each tool runs in an isolated process."
)


def create_server(handlers: Handlers) -> Server:
    server = Server("substrate", version=__version__, instructions=INSTRUCTIONS)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List available substrate tools."""
        return await handlers.list_tools()

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        """Route a tool call through the isolated executor."""
        return await handlers.call_tool(name, arguments)

    return server


def build_handlers(project_root: Optional[Path] = None) -> Handlers:
    root = find_project_root(project_root)
    config = load_config(root)
    return Handlers(
        registry=ToolRegistry(config),
        executor=ToolExecutor(project_root=root, config=config),
    )


def main(project_root: Optional[Path] = None):
    """Main entry point."""
    server = create_server(build_handlers(project_root))

    async def run():
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())

    asyncio.run(run())

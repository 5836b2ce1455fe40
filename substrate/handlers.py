"""
Substrate Handlers - Request processing logic

Each MCP tool call:
1. Maps the client-facing short name to a registered identifier
2. Runs it through the ToolExecutor (in a thread, the executor blocks)
3. Returns MCP content, or raises so the SDK marks the result as an error

Keeping this separate from server.py keeps the routing layer thin.
"""

import asyncio
import logging
from typing import Optional

from mcp.types import TextContent, Tool

from .exceptions import SubstrateError, UnknownTool
from .executor import ToolExecutor
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


class Handlers:
    """Central handler for all substrate MCP requests."""

    def __init__(self, registry: ToolRegistry, executor: ToolExecutor):
        self.registry = registry
        self.executor = executor

    async def list_tools(self) -> list[Tool]:
        return self.registry.definitions()

    async def call_tool(self, name: str, arguments: Optional[dict]) -> list[TextContent]:
        identifier = self.registry.by_short_name(name)
        if identifier is None:
            raise UnknownTool(name)

        response = await asyncio.to_thread(self.executor.execute, identifier, arguments or {})

        if response.is_error:
            raise SubstrateError(response.message)
        return response.to_text_content()

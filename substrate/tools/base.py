"""Base class every substrate tool implements."""

import copy
from abc import ABC, abstractmethod

from mcp.types import Tool as McpTool, ToolAnnotations

from ..schema import ToolContext, ToolResponse

TIMEOUT_PROPERTY = {
    "type": "integer",
    "description": "Max seconds to run (1-600, default 180)",
}


class Tool(ABC):
    """
    A named, read-mostly introspection operation.

    Subclasses set `name`, `description` and `input_schema`, and implement
    handle(). Raising from handle() is fine: the worker turns it into an
    error response.
    """

    name: str = ""
    description: str = ""
    input_schema: dict = {"type": "object", "properties": {}, "required": []}
    read_only: bool = True

    @classmethod
    def identifier(cls) -> str:
        """Import string the worker uses to find this tool."""
        return f"{cls.__module__}:{cls.__qualname__}"

    @abstractmethod
    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        ...

    def definition(self) -> McpTool:
        schema = copy.deepcopy(self.input_schema)
        schema.setdefault("properties", {}).setdefault("timeout", TIMEOUT_PROPERTY)
        return McpTool(
            name=self.name,
            description=self.description,
            inputSchema=schema,
            annotations=ToolAnnotations(readOnlyHint=self.read_only),
        )

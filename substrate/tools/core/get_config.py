"""Read a single configuration value."""

import os

from ...project import read_pyproject
from ...schema import ToolContext, ToolResponse
from ..base import Tool


class GetConfig(Tool):
    name = "get-config"
    description = (
        'Get configuration values. Dotted keys read pyproject.toml (e.g. "project.name", '
        '"tool.pytest.ini_options"), "env:NAME" reads an environment variable, and '
        '"substrate:key" reads substrate\'s own settings (e.g. "substrate:tools.exclude").'
    )
    input_schema = {
        "type": "object",
        "properties": {
            "key": {"type": "string", "description": "The config key"},
        },
        "required": ["key"],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        key = str(arguments.get("key") or "").strip()
        if not key:
            return ToolResponse.error('The "key" argument is required.')

        prefix, sep, name = key.partition(":")
        if not sep:
            prefix, name = "pyproject", key

        match prefix:
            case "env":
                value = os.environ.get(name)
                if value is None:
                    return ToolResponse.error(f"Config key '{key}' not found.")
            case "substrate":
                try:
                    value = context.config.get(name)
                except KeyError:
                    return ToolResponse.error(f"Config key '{key}' not found.")
            case "pyproject":
                value = self._lookup(read_pyproject(context.project_root), name)
                if value is None:
                    return ToolResponse.error(f"Config key '{key}' not found.")
            case _:
                return ToolResponse.error(f"Unknown config prefix '{prefix}'. Use env:, substrate: or a dotted key.")

        return ToolResponse.structured({
            "key": key,
            "type": prefix,
            "value": value,
        })

    def _lookup(self, data: dict, dotted_key: str):
        node = data
        for part in dotted_key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

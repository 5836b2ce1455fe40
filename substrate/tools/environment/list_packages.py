"""List installed distributions."""

from importlib import metadata

from ...schema import ToolContext, ToolResponse
from ..base import Tool


class ListPackages(Tool):
    name = "list-packages"
    description = "List installed Python packages with their versions. Optionally filter by name substring."
    input_schema = {
        "type": "object",
        "properties": {
            "filter": {"type": "string", "description": "Only include packages whose name contains this"},
        },
        "required": [],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        needle = (arguments.get("filter") or "").lower()

        packages = {}
        for dist in metadata.distributions():
            name = dist.metadata["Name"]
            if not name or (needle and needle not in name.lower()):
                continue
            packages.setdefault(name, dist.version)

        return ToolResponse.structured({
            "count": len(packages),
            "packages": [
                {"name": name, "version": packages[name]}
                for name in sorted(packages, key=str.lower)
            ],
        })

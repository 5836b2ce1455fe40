"""List entry points (console scripts, plugins) registered in the environment."""

from importlib import metadata

from ...schema import ToolContext, ToolResponse
from ..base import Tool


class ListEntryPoints(Tool):
    name = "list-entry-points"
    description = (
        "List registered entry points, grouped by group name (console_scripts, "
        "pytest11, ...). Pass a group to list just that one."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "group": {"type": "string", "description": "Entry point group, e.g. console_scripts"},
        },
        "required": [],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        group = arguments.get("group")
        entry_points = metadata.entry_points()
        if group:
            entry_points = entry_points.select(group=group)

        groups: dict[str, list[dict]] = {}
        for ep in entry_points:
            groups.setdefault(ep.group, []).append({"name": ep.name, "value": ep.value})

        if group and not groups:
            return ToolResponse.error(f"No entry points registered in group '{group}'.")

        return ToolResponse.structured({
            "groups": {name: sorted(items, key=lambda item: item["name"]) for name, items in sorted(groups.items())},
            "count": sum(len(items) for items in groups.values()),
        })

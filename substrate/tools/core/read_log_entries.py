"""Read the last N entries from the application log."""

from ...exceptions import LogFileNotFoundError
from ...logs import resolve_log_file
from ...schema import ToolContext, ToolResponse
from ..base import Tool


class ReadLogEntries(Tool):
    name = "read-log-entries"
    description = (
        "Read the last N log entries from the application log. "
        "Multi-line entries (stack traces under a timestamped header) are kept together."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "entries": {"type": "integer", "description": "Number of log entries to return"},
            "source": {
                "type": "string",
                "description": 'Log source: "auto" (default) or a name from log_sources (e.g. "app")',
            },
        },
        "required": ["entries"],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        try:
            max_entries = int(arguments.get("entries", 0))
        except (TypeError, ValueError):
            max_entries = 0

        if max_entries <= 0:
            return ToolResponse.error('The "entries" argument must be greater than 0.')

        log_file = resolve_log_file(context.project_root, context.config, arguments.get("source", "auto"))

        try:
            entries = context.logs.read_last_entries(log_file, max_entries)
        except LogFileNotFoundError as e:
            return ToolResponse.error(e.message)

        if not entries:
            return ToolResponse.text("Unable to retrieve log entries, or no entries yet.")

        return ToolResponse.text("\n\n".join(entries))

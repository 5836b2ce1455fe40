"""Find the most recent error in the project's log files."""

from ...exceptions import LogFileNotFoundError
from ...logs import resolve_log_file
from ...schema import ToolContext, ToolResponse
from ..base import Tool


class LastError(Tool):
    name = "last-error"
    description = (
        "Get details of the last error/exception from the application logs. "
        "Checks every configured log source, most specific first."
    )

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        sources = {"auto": resolve_log_file(context.project_root, context.config, "auto")}
        for source in context.config.log_sources:
            sources[source] = resolve_log_file(context.project_root, context.config, source)

        checked = set()
        for source, log_file in sources.items():
            if log_file in checked:
                continue
            checked.add(log_file)

            try:
                entry = context.logs.read_last_error_entry(log_file)
            except LogFileNotFoundError:
                continue

            if entry is not None:
                return ToolResponse.text(f"[Source: {source}]\n{entry}")

        return ToolResponse.error("No error entries found in the inspected log files.")

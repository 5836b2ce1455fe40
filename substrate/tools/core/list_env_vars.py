"""List variable names (never values) defined in a .env file."""

from dotenv import dotenv_values

from ...schema import ToolContext, ToolResponse
from ..base import Tool


class ListEnvVars(Tool):
    name = "list-env-vars"
    description = (
        "List all environment variable names from a .env file. "
        "Returns only the variable names, not their values."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "filename": {
                "type": "string",
                "description": "The .env file to read (e.g. .env, .env.example). Defaults to .env",
            },
        },
        "required": [],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        filename = arguments.get("filename") or ".env"

        if ".env" not in filename:
            return ToolResponse.error("This tool can only read .env files")

        file_path = (context.project_root / filename).resolve()
        if context.project_root.resolve() not in file_path.parents:
            return ToolResponse.error("This tool can only read files inside the project")

        if not file_path.is_file():
            return ToolResponse.error(f"File not found at '{file_path}'")

        names = sorted(dotenv_values(file_path))
        if not names:
            return ToolResponse.error("No environment variables found in file.")

        return ToolResponse.structured({
            "file": filename,
            "variables": names,
            "count": len(names),
        })

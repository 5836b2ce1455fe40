"""Overview of the interpreter, platform and project."""

import platform
import sys
from importlib import metadata

from packaging.requirements import InvalidRequirement, Requirement

from ...project import read_pyproject
from ...schema import ToolContext, ToolResponse
from ..base import Tool


class ApplicationInfo(Tool):
    name = "application-info"
    description = (
        "Get comprehensive application information: Python version, platform, "
        "project metadata from pyproject.toml, and installed versions of the "
        "project's dependencies. Use this at the start of each chat to understand the project."
    )

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        project = read_pyproject(context.project_root).get("project", {})

        return ToolResponse.structured({
            "python": {
                "version": platform.python_version(),
                "implementation": platform.python_implementation(),
                "executable": sys.executable,
                "virtualenv": sys.prefix != sys.base_prefix,
            },
            "platform": platform.platform(),
            "project": {
                "root": str(context.project_root),
                "name": project.get("name"),
                "version": project.get("version"),
                "requires_python": project.get("requires-python"),
            },
            "dependencies": self._dependency_versions(project.get("dependencies", [])),
        })

    def _dependency_versions(self, requirements: list[str]) -> dict:
        """Declared requirement -> installed version (None if missing)."""
        versions = {}
        for spec in requirements:
            try:
                name = Requirement(spec).name
            except InvalidRequirement:
                continue
            try:
                versions[name] = metadata.version(name)
            except metadata.PackageNotFoundError:
                versions[name] = None
        return versions

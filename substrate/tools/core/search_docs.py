"""
Search Docs - Point the agent at the right documentation

Builds search/reference links for the configured documentation sites and,
for package-shaped queries, asks the package index for the project's own
documentation URL.
"""

import re
from urllib.parse import quote_plus

from ...package_index import PackageIndexClient
from ...schema import ToolContext, ToolResponse
from ..base import Tool

PACKAGE_NAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


class SearchDocs(Tool):
    name = "search-docs"
    description = (
        "Search documentation for Python, packaging, and installed packages. "
        "Use this to find up-to-date documentation before implementing features."
    )
    input_schema = {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "The search query"},
            "source": {
                "type": "string",
                "description": 'Documentation source name from config (e.g. "python", "pypi") or "all" (default)',
            },
            "package": {
                "type": "string",
                "description": "Package to look up on the package index (defaults to the query when it looks like a package name)",
            },
        },
        "required": ["query"],
    }

    def handle(self, arguments: dict, context: ToolContext) -> ToolResponse:
        query = str(arguments.get("query") or "").strip()
        source = arguments.get("source") or "all"

        if not query:
            return ToolResponse.error("Please provide a search query.")

        docs = context.config.docs
        sources = {source: docs[source]} if source in docs else dict(docs)

        results = {
            name: {"base_url": base_url, "suggested_links": self._links(name, base_url.rstrip("/"), query)}
            for name, base_url in sources.items()
        }

        package = arguments.get("package") or (query if PACKAGE_NAME_RE.match(query) else None)
        if package and (source == "all" or source == "pypi"):
            with PackageIndexClient(context.config.pypi_url, context.config.http_timeout) as client:
                results["package"] = client.project_info(package)

        return ToolResponse.structured({
            "query": query,
            "results": results,
        })

    def _links(self, source: str, base_url: str, query: str) -> dict:
        slug = query.lower().replace(" ", "-").replace("_", "-")
        q = quote_plus(query)

        match source:
            case "python":
                return {
                    "Search": f"{base_url}/search.html?q={q}",
                    "Library": f"{base_url}/library/{query.lower().replace(' ', '')}.html",
                }
            case "pypi":
                return {
                    "Project": f"{base_url}/project/{slug}/",
                    "Search": f"{base_url}/search/?q={q}",
                }
            case _:
                return {"Search": f"{base_url}/search.html?q={q}"}

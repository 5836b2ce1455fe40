"""
Package Index Client for Substrate

Looks up project metadata (summary, documentation links) on a PyPI-style
JSON API. Used by the search-docs tool.

Environment variables:
- SUBSTRATE_PYPI_URL: JSON API base URL (default: https://pypi.org/pypi)

One attempt per lookup; callers decide what a failure means.
"""

import httpx
import os
from typing import Optional


DEFAULT_PYPI_URL = "https://pypi.org/pypi"
DEFAULT_TIMEOUT = 10.0


class PackageIndexClient:
    """Client for the package index JSON API."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = (base_url or os.environ.get("SUBSTRATE_PYPI_URL", DEFAULT_PYPI_URL)).rstrip("/")
        self.timeout = timeout if timeout is not None else DEFAULT_TIMEOUT
        self._client = httpx.Client(timeout=self.timeout, transport=transport)

    def project_info(self, name: str) -> dict:
        """
        Fetch metadata for one project.

        Returns a dict with:
        - found: bool
        - name, version, summary, docs_url, project_urls (if found)
        - error: str (if the lookup failed)
        """
        try:
            response = self._client.get(f"{self.base_url}/{name}/json")
        except httpx.TimeoutException:
            return {"found": False, "error": f"Timeout after {self.timeout}s"}
        except httpx.HTTPError as e:
            return {"found": False, "error": str(e)}

        if response.status_code == 404:
            return {"found": False}
        if response.status_code != 200:
            return {"found": False, "error": f"HTTP {response.status_code}"}

        info = response.json().get("info", {})
        project_urls = info.get("project_urls") or {}

        return {
            "found": True,
            "name": info.get("name", name),
            "version": info.get("version"),
            "summary": info.get("summary"),
            "docs_url": info.get("docs_url") or project_urls.get("Documentation"),
            "project_urls": project_urls,
        }

    def close(self):
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

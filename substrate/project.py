"""Project root detection and project metadata."""

import tomllib
from pathlib import Path
from typing import Optional, Union

# Any of these marks the root of the application being introspected
ROOT_MARKERS = ("substrate.json", "pyproject.toml", "setup.cfg", "setup.py")


def find_project_root(start: Optional[Union[str, Path]] = None) -> Path:
    """
    Walk up from `start` (default: cwd) looking for a project marker.

    Falls back to `start` itself when no ancestor has one.
    """
    base = Path(start or Path.cwd()).resolve()

    for path in (base, *base.parents):
        if any((path / marker).exists() for marker in ROOT_MARKERS):
            return path

    return base


def read_pyproject(project_root: Union[str, Path]) -> dict:
    """Parsed pyproject.toml, or {} if the project has none."""
    path = Path(project_root) / "pyproject.toml"
    if not path.is_file():
        return {}
    with open(path, "rb") as f:
        return tomllib.load(f)

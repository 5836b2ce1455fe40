"""Tools describing the Python environment the project runs in."""

from .list_entry_points import ListEntryPoints
from .list_packages import ListPackages

TOOLS = [
    ListPackages,
    ListEntryPoints,
]

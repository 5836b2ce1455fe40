"""
Tool Registry - Which tools exist and which may run

Tools are discovered from category packages (each exports an explicit
TOOLS list) plus any extra identifiers from config. The result is cached
until clear_cache() is called.

Identifiers are import strings like "substrate.tools.core.last_error:LastError".
Short names ("last-error") are what MCP clients see.
"""

import importlib
import inspect
import logging
import threading
from typing import Callable, Iterable, Optional

from .config import SubstrateConfig
from .tools.base import Tool

logger = logging.getLogger(__name__)


def filter_primitives(
    candidates: Iterable[str],
    exclude: Iterable[str],
    include: Iterable[str],
    is_resolvable: Callable[[str], bool],
) -> list[str]:
    """
    Apply (candidates - exclude) + include.

    Candidate order is kept, includes go after, duplicates collapse to the
    first occurrence. Includes that don't resolve are dropped.
    """
    excluded = set(exclude)
    result = []
    seen = set()

    for item in candidates:
        if item in excluded or item in seen:
            continue
        seen.add(item)
        result.append(item)

    for item in include:
        if item in seen:
            continue
        if not is_resolvable(item):
            logger.warning("Ignoring included tool %r: it does not resolve to a Tool", item)
            continue
        seen.add(item)
        result.append(item)

    return result


def load_tool_class(identifier: str) -> Optional[type[Tool]]:
    """Import "module:ClassName" and return it if it is a concrete Tool."""
    module_name, _, attr_path = identifier.partition(":")
    if not module_name or not attr_path:
        return None

    try:
        obj = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            obj = getattr(obj, attr)
    except Exception as e:
        logger.warning("Could not load tool %r: %s", identifier, e)
        return None

    if not (inspect.isclass(obj) and issubclass(obj, Tool)) or inspect.isabstract(obj):
        return None
    return obj


class ToolRegistry:
    """
    Discovers tools and answers "is this identifier allowed to run?".

    Usage:
        registry = ToolRegistry(config)
        registry.available_tools()           # ['substrate.tools.core...:LastError', ...]
        registry.by_short_name("last-error")  # identifier or None
        tool = registry.resolve(identifier)   # Tool instance or None
    """

    def __init__(self, config: Optional[SubstrateConfig] = None):
        self.config = config or SubstrateConfig()
        self._lock = threading.Lock()
        self._tools: Optional[dict[str, type[Tool]]] = None

    def available_tools(self) -> list[str]:
        """All allowed identifiers, in discovery order."""
        return list(self._cached())

    def resolve(self, identifier: str) -> Optional[Tool]:
        """Instantiate an allowed tool, or None if it isn't registered."""
        tool_class = self._cached().get(identifier)
        return tool_class() if tool_class else None

    def is_allowed(self, identifier: str) -> bool:
        return identifier in self._cached()

    def clear_cache(self):
        with self._lock:
            self._tools = None

    def tool_names(self) -> dict[str, str]:
        """Short name -> identifier; the first tool discovered keeps a shared name."""
        names = {}
        for identifier, tool_class in self._cached().items():
            names.setdefault(tool_class.name, identifier)
        return names

    def by_short_name(self, name: str) -> Optional[str]:
        return self.tool_names().get(name)

    def definitions(self) -> list:
        """MCP tool definitions for everything available."""
        return [tool_class().definition() for tool_class in self._cached().values()]

    def _cached(self) -> dict[str, type[Tool]]:
        tools = self._tools
        if tools is None:
            with self._lock:
                if self._tools is None:
                    self._tools = self._discover()
                tools = self._tools
        return tools

    def _discover(self) -> dict[str, type[Tool]]:
        found: dict[str, type[Tool]] = {}

        for category in self.config.categories:
            for tool_class in self._discover_category(category):
                found.setdefault(tool_class.identifier(), tool_class)

        # Exclusions may name either the identifier or the short name
        exclude = set(self.config.tools.exclude)
        exclude.update(
            identifier for identifier, tool_class in found.items()
            if tool_class.name in exclude
        )

        loaded: dict[str, type[Tool]] = dict(found)

        def is_resolvable(identifier: str) -> bool:
            tool_class = load_tool_class(identifier)
            if tool_class is None:
                return False
            loaded[identifier] = tool_class
            return True

        allowed = filter_primitives(found, exclude, self.config.tools.include, is_resolvable)
        logger.debug("Discovered %d tools", len(allowed))

        return {identifier: loaded[identifier] for identifier in allowed}

    def _discover_category(self, category: str) -> list[type[Tool]]:
        try:
            module = importlib.import_module(category)
        except ImportError as e:
            logger.warning("Skipping tool category %r: %s", category, e)
            return []

        tools = []
        for tool_class in getattr(module, "TOOLS", []):
            if inspect.isclass(tool_class) and issubclass(tool_class, Tool):
                tools.append(tool_class)
            else:
                logger.warning("%s.TOOLS contains a non-Tool entry: %r", category, tool_class)
        return tools

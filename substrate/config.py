"""
Substrate configuration.

Loaded from `substrate.json` in the project root, then overridden by
environment variables:
- SUBSTRATE_TIMEOUT: Default tool timeout in seconds (default: 180)
- SUBSTRATE_TOOLS_INCLUDE: Comma-separated extra tool identifiers
- SUBSTRATE_TOOLS_EXCLUDE: Comma-separated identifiers or short names to hide
- SUBSTRATE_LOG_LEVEL: Level for substrate's own stderr logging (default: WARNING)
- SUBSTRATE_PYPI_URL: Package index JSON API (default: https://pypi.org/pypi)
"""

import json
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigError

CONFIG_FILENAME = "substrate.json"

DEFAULT_CATEGORIES = [
    "substrate.tools.core",
    "substrate.tools.environment",
]

# Nothing is allowed to run longer than this, whatever the config says
HARD_MAX_TIMEOUT = 600


class ToolFilter(BaseModel):
    """Explicit include/exclude lists applied on top of discovery."""
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)


class SubstrateConfig(BaseModel):
    enabled: bool = True

    tools: ToolFilter = Field(default_factory=ToolFilter)
    categories: list[str] = Field(default_factory=lambda: list(DEFAULT_CATEGORIES))

    # Executor
    default_timeout: int = 180
    min_timeout: int = 1
    max_timeout: int = HARD_MAX_TIMEOUT
    env_file: str = ".env"

    # Log reading
    log_dir: str = "logs"
    log_file: str = "app.log"
    log_sources: dict[str, str] = Field(default_factory=lambda: {"app": "logs/app.log"})
    log_chunk_size_start: int = 64 * 1024
    log_chunk_size_max: int = 1024 * 1024

    log_level: str = "WARNING"

    # Documentation search
    docs: dict[str, str] = Field(default_factory=lambda: {
        "python": "https://docs.python.org/3",
        "pypi": "https://pypi.org",
        "packaging": "https://packaging.python.org/en/latest",
    })
    pypi_url: str = "https://pypi.org/pypi"
    http_timeout: float = 10.0

    def clamp_timeout(self, timeout: int) -> int:
        upper = min(self.max_timeout, HARD_MAX_TIMEOUT)
        return max(self.min_timeout, min(upper, timeout))

    def get(self, dotted_key: str):
        """Look up a dotted key like "tools.include"; KeyError if missing."""
        node = self.model_dump()
        for part in dotted_key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(dotted_key)
            node = node[part]
        return node


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(
    project_root: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> SubstrateConfig:
    """
    Build the effective config for a project.

    Raises ConfigError if substrate.json is malformed or an override is
    not a valid value.
    """
    environ = os.environ if environ is None else environ
    data = {}

    if project_root is not None:
        config_path = Path(project_root) / CONFIG_FILENAME
        if config_path.exists():
            try:
                data = json.loads(config_path.read_text())
            except (OSError, json.JSONDecodeError) as e:
                raise ConfigError(f"Could not read {config_path}: {e}", cause=e)
            if not isinstance(data, dict):
                raise ConfigError(f"{config_path} must contain a JSON object")

    try:
        config = SubstrateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid substrate configuration: {e}", cause=e)

    if environ.get("SUBSTRATE_TIMEOUT"):
        try:
            config.default_timeout = int(environ["SUBSTRATE_TIMEOUT"])
        except ValueError as e:
            raise ConfigError(f"SUBSTRATE_TIMEOUT must be an integer, got {environ['SUBSTRATE_TIMEOUT']!r}", cause=e)

    if environ.get("SUBSTRATE_TOOLS_INCLUDE"):
        config.tools.include.extend(_split_list(environ["SUBSTRATE_TOOLS_INCLUDE"]))
    if environ.get("SUBSTRATE_TOOLS_EXCLUDE"):
        config.tools.exclude.extend(_split_list(environ["SUBSTRATE_TOOLS_EXCLUDE"]))

    if environ.get("SUBSTRATE_LOG_LEVEL"):
        config.log_level = environ["SUBSTRATE_LOG_LEVEL"].upper()
    if environ.get("SUBSTRATE_PYPI_URL"):
        config.pypi_url = environ["SUBSTRATE_PYPI_URL"]

    return config

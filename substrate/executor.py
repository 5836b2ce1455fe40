"""
Tool Executor - Run each tool call in its own process

A crashing, hanging or memory-hungry tool must not take the MCP server
down with it, so every call:
1. Resolves a timeout (arguments["timeout"], default 180s, clamped to 1-600)
2. Neutralizes the project's .env variables in the child environment
3. Spawns `python -m substrate execute-tool` with base64 encoded arguments
4. Turns whatever comes back (or doesn't) into exactly one ToolResponse

execute() never raises.
"""

import json
import logging
import os
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, Optional

from dotenv import dotenv_values

from .config import HARD_MAX_TIMEOUT, SubstrateConfig, load_config
from .exceptions import (
    ArgumentParseError,
    InvalidOutputError,
    ProcessLaunchError,
    SubstrateError,
    ToolTimeoutError,
)
from .project import find_project_root
from .schema import ToolResponse
from .worker import EXIT_FAILURE, encode_transport

logger = logging.getLogger(__name__)

# Value given to every .env name so the real one can't leak in from our environment
UNSET_MARKER = "false"


class ToolExecutor:
    """Execute registered tools in isolated worker processes."""

    def __init__(
        self,
        project_root: Optional[Path] = None,
        config: Optional[SubstrateConfig] = None,
        python: Optional[str] = None,
    ):
        self.project_root = Path(project_root) if project_root else find_project_root()
        self.config = config or load_config(self.project_root)
        self.python = python or sys.executable

    def execute(self, identifier: str, arguments: Optional[dict[str, Any]] = None) -> ToolResponse:
        """Run one tool to completion and return its response."""
        arguments = dict(arguments or {})
        timeout = self.get_timeout(arguments)
        start_time = time.time()

        logger.debug("Executing %s (timeout %ss)", identifier, timeout)

        try:
            response = self._run(identifier, arguments, timeout)
        except SubstrateError as e:
            response = ToolResponse.error(e.message)
        except Exception as e:
            # Anything unexpected still has to come back as a response
            logger.exception("Unexpected failure executing %s", identifier)
            response = ToolResponse.error(ProcessLaunchError(str(e)).message)

        elapsed_ms = int((time.time() - start_time) * 1000)
        if response.is_error:
            logger.info("Tool %s failed after %dms: %s", identifier, elapsed_ms, response.message)
        else:
            logger.debug("Tool %s finished in %dms", identifier, elapsed_ms)

        return response

    def get_timeout(self, arguments: dict[str, Any]) -> int:
        raw = arguments.get("timeout", self.config.default_timeout)
        try:
            timeout = int(raw)
        except OverflowError:
            # +/-inf: clamped to the nearest bound below
            timeout = HARD_MAX_TIMEOUT if raw > 0 else self.config.min_timeout
        except (TypeError, ValueError):
            timeout = self.config.default_timeout
        return self.config.clamp_timeout(timeout)

    def get_clean_environment(self) -> Optional[dict[str, str]]:
        """
        Environment for the worker, or None to inherit ours unchanged.

        Every name defined in the project's .env is present but set to
        UNSET_MARKER; the worker re-reads the file itself.
        """
        env_file = self.project_root / self.config.env_file
        if not env_file.is_file():
            return None

        env = dict(os.environ)
        for name in dotenv_values(env_file):
            env[name] = UNSET_MARKER
        return env

    def build_command(self, identifier: str, arguments: dict[str, Any]) -> list[str]:
        try:
            arguments_json = json.dumps(arguments)
        except (TypeError, ValueError) as e:
            raise ArgumentParseError(f"arguments are not JSON serializable: {e}", cause=e)

        return [
            self.python,
            "-m",
            "substrate",
            "execute-tool",
            encode_transport(identifier),
            encode_transport(arguments_json),
        ]

    def _run(self, identifier: str, arguments: dict[str, Any], timeout: int) -> ToolResponse:
        command = self.build_command(identifier, arguments)

        try:
            result = subprocess.run(
                command,
                cwd=str(self.project_root),
                env=self.get_clean_environment(),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except subprocess.TimeoutExpired:
            # subprocess.run() has already killed the worker; partial output is dropped
            raise ToolTimeoutError(timeout)
        except OSError as e:
            raise ProcessLaunchError(str(e))

        stdout = result.stdout or ""

        if result.returncode != 0:
            # The worker reports rejected requests with an envelope and status 1
            if result.returncode == EXIT_FAILURE:
                response = self._envelope_or_none(stdout)
                if response is not None:
                    return response
            raise ProcessLaunchError((result.stderr or "") + stdout, result.returncode)

        return self.reconstruct_response(stdout)

    def reconstruct_response(self, output: str) -> ToolResponse:
        try:
            decoded = json.loads(output)
        except json.JSONDecodeError as e:
            raise InvalidOutputError(str(e))

        return ToolResponse.from_envelope(decoded)

    def _envelope_or_none(self, output: str) -> Optional[ToolResponse]:
        try:
            return self.reconstruct_response(output)
        except SubstrateError:
            return None

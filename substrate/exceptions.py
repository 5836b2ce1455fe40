"""
Substrate exception hierarchy.

Every failure the executor or the worker can hit has its own class here.
None of them is allowed to escape ToolExecutor.execute(): they are turned
into an error ToolResponse at the nearest boundary, and the message is
what the MCP client ends up showing.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

logger = logging.getLogger(__name__)


class SubstrateError(Exception):
    """Base exception for all substrate errors."""

    def __init__(
        self,
        message: str,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to JSON-serializable dict."""
        result = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result

    def log(self, level: int = logging.ERROR):
        """Log this exception with context."""
        logger.log(
            level,
            "%s: %s",
            self.__class__.__name__,
            self.message,
            extra={"details": self.details, "cause": self.cause},
        )


class ConfigError(SubstrateError):
    """substrate.json or an environment override could not be parsed."""


class DecodeError(SubstrateError):
    """A base64 transport value could not be decoded."""

    def __init__(self, what: str, value: str, cause: Optional[BaseException] = None):
        super().__init__(
            f"Failed to decode {what}: {value}",
            details={"what": what},
            cause=cause,
        )


class UnknownTool(SubstrateError):
    """Identifier does not resolve in the registry, or is excluded."""

    def __init__(self, identifier: str):
        super().__init__(f"Invalid tool: {identifier}", details={"tool": identifier})
        self.identifier = identifier


class ArgumentParseError(SubstrateError):
    """Argument payload is not a JSON object."""

    def __init__(self, reason: str, cause: Optional[BaseException] = None):
        super().__init__(f"Invalid arguments format: {reason}", cause=cause)


class ToolExecutionError(SubstrateError):
    """The handler raised while running inside the worker."""

    def __init__(self, cause: BaseException):
        super().__init__(
            f"Tool execution failed ({type(cause).__name__}): {cause}",
            cause=cause,
        )


class ToolTimeoutError(SubstrateError):
    """Worker did not finish inside the resolved timeout."""

    def __init__(self, timeout: int):
        super().__init__(
            f"Tool execution timed out after {timeout} seconds",
            details={"timeout": timeout},
        )
        self.timeout = timeout


class ProcessLaunchError(SubstrateError):
    """Worker could not be started, or died without emitting an envelope."""

    def __init__(self, output: str, returncode: Optional[int] = None):
        super().__init__(
            f"Process tool execution failed: {output}",
            details={"returncode": returncode},
        )
        self.returncode = returncode


class InvalidOutputError(SubstrateError):
    """Worker stdout is not a JSON document at all."""

    def __init__(self, reason: str):
        super().__init__(f"Invalid JSON output from tool process: {reason}")


class EnvelopeFormatError(SubstrateError):
    """Worker stdout parsed as JSON but is not a result envelope."""

    def __init__(self):
        super().__init__("Invalid tool response format.")


class LogFileNotFoundError(SubstrateError, FileNotFoundError):
    """The resolved log file does not exist."""

    def __init__(self, path):
        SubstrateError.__init__(self, f"Log file not found at {path}", details={"path": str(path)})
        self.path = str(path)

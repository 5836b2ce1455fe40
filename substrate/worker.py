"""
Worker - Runs exactly one tool inside a throwaway process

Invoked by the executor as:
    python -m substrate execute-tool <base64 identifier> <base64 JSON arguments>

Whatever happens, the worker writes exactly one JSON envelope to stdout:
    {"isError": bool, "content": [{"type": "text", "text": "..."}]}

Exit status is 0 whenever the tool ran, even if it reported an error or
raised. It is 1 when the worker rejected the request before running it
(undecodable input, unknown tool, malformed arguments).
"""

import base64
import binascii
import contextlib
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, TextIO

from dotenv import load_dotenv

from .config import load_config
from .exceptions import (
    ArgumentParseError,
    DecodeError,
    SubstrateError,
    ToolExecutionError,
    UnknownTool,
)
from .project import find_project_root
from .registry import ToolRegistry
from .schema import ToolContext, ToolResponse

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def encode_transport(value: str) -> str:
    """Base64 so nothing in the value is reinterpreted on the command line."""
    return base64.b64encode(value.encode("utf-8")).decode("ascii")


def decode_transport(value: str, what: str) -> str:
    try:
        return base64.b64decode(value.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as e:
        raise DecodeError(what, value, cause=e)


def parse_arguments(arguments_json: str) -> dict:
    try:
        arguments = json.loads(arguments_json)
    except json.JSONDecodeError as e:
        raise ArgumentParseError(str(e), cause=e)

    if arguments is None:
        return {}
    if not isinstance(arguments, dict):
        raise ArgumentParseError(f"expected a JSON object, got {type(arguments).__name__}")
    return arguments


def bootstrap_context(project_root: Optional[Path] = None) -> ToolContext:
    """
    Build the tool context for this process.

    The executor hands us the project's .env names set to a placeholder;
    re-reading the file restores the project's own values.
    """
    root = Path(project_root) if project_root else find_project_root()

    # SUBSTRATE_* names from .env still hold the placeholder here, so only
    # substrate.json is consulted for where the file lives
    env_path = root / load_config(root, environ={}).env_file
    if env_path.is_file():
        load_dotenv(env_path, override=True)

    return ToolContext(project_root=root, config=load_config(root))


def coerce_response(result: Any) -> ToolResponse:
    """Accept plain str/dict/list from lenient tools."""
    if isinstance(result, ToolResponse):
        return result
    if isinstance(result, (dict, list)):
        return ToolResponse.structured(result)
    if result is None:
        return ToolResponse.text("")
    return ToolResponse.text(str(result))


def emit(response: ToolResponse, stream: TextIO) -> None:
    stream.write(json.dumps(response.to_envelope()))
    stream.flush()


def execute_tool(
    encoded_tool: str,
    encoded_arguments: str,
    project_root: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> int:
    """Decode, resolve, parse, execute, emit. Returns the exit status."""
    stream = stream or sys.stdout

    try:
        identifier = decode_transport(encoded_tool, "tool")
        arguments_json = decode_transport(encoded_arguments, "arguments")

        context = bootstrap_context(project_root)
        registry = ToolRegistry(context.config)

        tool = registry.resolve(identifier)
        if tool is None:
            raise UnknownTool(identifier)

        arguments = parse_arguments(arguments_json)
    except SubstrateError as e:
        e.log(logging.DEBUG)
        emit(ToolResponse.error(e.message), stream)
        return EXIT_FAILURE

    try:
        # Stray prints from a tool must not corrupt the envelope
        with contextlib.redirect_stdout(sys.stderr):
            response = coerce_response(tool.handle(arguments, context))
    except Exception as e:
        logger.debug("Tool %s raised", identifier, exc_info=True)
        emit(ToolResponse.error(ToolExecutionError(e).message), stream)
        return EXIT_SUCCESS

    emit(response, stream)
    return EXIT_SUCCESS

"""
Substrate command line.

Usage:
  substrate mcp [--project-root PATH]     Start the MCP server on stdio
  substrate tools [--project-root PATH]   List tool short names and identifiers

Internal (spawned by the executor):
  substrate execute-tool <tool> <arguments>
"""

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import load_config
from .exceptions import ConfigError
from .project import find_project_root
from .registry import ToolRegistry
from .worker import execute_tool


def configure_logging(level: str):
    """Log to stderr: stdout belongs to MCP and to the worker envelope."""
    logging.basicConfig(
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="substrate", description="Application introspection MCP server")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="{mcp,tools}")

    mcp_parser = subparsers.add_parser("mcp", help="Start the MCP server on stdio")
    mcp_parser.add_argument("--project-root", type=Path, default=None)

    tools_parser = subparsers.add_parser("tools", help="List available tools")
    tools_parser.add_argument("--project-root", type=Path, default=None)

    execute_parser = subparsers.add_parser("execute-tool", help=argparse.SUPPRESS)
    execute_parser.add_argument("tool", help="base64 encoded tool identifier")
    execute_parser.add_argument("arguments", help="base64 encoded JSON arguments")

    return parser


def list_tools(project_root: Optional[Path]) -> int:
    root = find_project_root(project_root)
    registry = ToolRegistry(load_config(root))

    names = registry.tool_names()
    if not names:
        print("No tools available.")
        return 0

    width = max(len(name) for name in names)
    for name, identifier in sorted(names.items()):
        print(f"{name.ljust(width)}  {identifier}")
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(os.environ.get("SUBSTRATE_LOG_LEVEL", "WARNING"))

    if args.command == "execute-tool":
        return execute_tool(args.tool, args.arguments)

    try:
        if args.command == "tools":
            return list_tools(args.project_root)

        if args.command == "mcp":
            from .server import main as serve
            serve(args.project_root)
            return 0
    except ConfigError as e:
        print(f"substrate: {e.message}", file=sys.stderr)
        return 2

    build_parser().print_help()
    return 1

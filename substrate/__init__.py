"""
Substrate - Application introspection for AI agents.

Substrate exposes read-mostly facts about a Python project and its host
environment over MCP:
- Application, package and entry point information
- Configuration values and .env variable names
- Recent log entries and the last logged error

Every tool call runs in its own short-lived worker process.
"""

__version__ = "0.1.0"

"""Shared pytest fixtures."""

import json
import os
import textwrap
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parent.parent

SAMPLE_TOOLS = textwrap.dedent('''
    import os
    import time

    from substrate.schema import ToolResponse
    from substrate.tools import Tool


    class EchoTool(Tool):
        name = "echo"
        description = "Echo the value argument"

        def handle(self, arguments, context):
            return ToolResponse.text(arguments.get("value", ""))


    class JsonTool(Tool):
        name = "json-echo"
        description = "Return the arguments as JSON"

        def handle(self, arguments, context):
            return ToolResponse.structured({"received": arguments})


    class SlowTool(Tool):
        name = "slow"
        description = "Never finishes in time"

        def handle(self, arguments, context):
            time.sleep(60)
            return ToolResponse.text("done")


    class BrokenTool(Tool):
        name = "broken"
        description = "Always raises"

        def handle(self, arguments, context):
            raise RuntimeError("boom")


    class ChattyTool(Tool):
        name = "chatty"
        description = "Prints to stdout before returning"

        def handle(self, arguments, context):
            print("noise on stdout")
            return ToolResponse.text("quiet result")


    class EnvTool(Tool):
        name = "env"
        description = "Report environment values"

        def handle(self, arguments, context):
            return ToolResponse.structured({n: os.environ.get(n) for n in arguments.get("names", [])})


    class RecordingTool(Tool):
        name = "recording"
        description = "Leaves a file behind when it runs"

        def handle(self, arguments, context):
            (context.project_root / "recorded.txt").write_text("called")
            return ToolResponse.text("recorded")
''')

INCLUDED_TOOLS = [
    "sample_tools:EchoTool",
    "sample_tools:JsonTool",
    "sample_tools:SlowTool",
    "sample_tools:BrokenTool",
    "sample_tools:ChattyTool",
    "sample_tools:EnvTool",
]

SUBSTRATE_ENV_VARS = [
    "SUBSTRATE_TIMEOUT",
    "SUBSTRATE_TOOLS_INCLUDE",
    "SUBSTRATE_TOOLS_EXCLUDE",
    "SUBSTRATE_LOG_LEVEL",
    "SUBSTRATE_PYPI_URL",
]


@pytest.fixture(autouse=True)
def clean_substrate_env(monkeypatch):
    for name in SUBSTRATE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def project(tmp_path, monkeypatch) -> Path:
    """A throwaway project with pyproject.toml, substrate.json and sample tools."""
    (tmp_path / "pyproject.toml").write_text(textwrap.dedent('''
        [project]
        name = "demo-app"
        version = "1.2.3"
        requires-python = ">=3.11"
        dependencies = ["pytest>=8", "definitely-not-installed-pkg==0.1"]

        [tool.demo]
        answer = 42
    '''))
    (tmp_path / "sample_tools.py").write_text(SAMPLE_TOOLS)
    (tmp_path / "substrate.json").write_text(json.dumps({"tools": {"include": INCLUDED_TOOLS}}))

    # In-process tests import sample_tools directly; workers find it via their cwd
    monkeypatch.syspath_prepend(str(tmp_path))
    pythonpath = os.environ.get("PYTHONPATH")
    monkeypatch.setenv("PYTHONPATH", os.pathsep.join(filter(None, [str(REPO_ROOT), pythonpath])))

    return tmp_path


@pytest.fixture
def write_env(project, monkeypatch):
    """
    Write a .env file into the project.

    Every name is first set in our own environment so that anything a test
    loads from the file is rolled back afterwards.
    """
    def _write(lines: dict, parent_value: str = "from-parent"):
        content = []
        for name, value in lines.items():
            content.append(name if value is None else f"{name}={value}")
            monkeypatch.setenv(name, parent_value)
        (project / ".env").write_text("\n".join(content) + "\n")
        return project / ".env"

    return _write


@pytest.fixture
def log_dir(project) -> Path:
    path = project / "logs"
    path.mkdir()
    return path

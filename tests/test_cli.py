"""Tests for the command line entry point."""

import json

from substrate.cli import main
from substrate.worker import EXIT_SUCCESS, encode_transport


def test_tools_lists_names_and_identifiers(project, capsys):
    assert main(["tools", "--project-root", str(project)]) == 0

    out = capsys.readouterr().out
    assert "last-error" in out
    assert "substrate.tools.core.last_error:LastError" in out
    assert "sample_tools:EchoTool" in out


def test_tools_reports_bad_config(project, capsys):
    (project / "substrate.json").write_text("{broken")

    assert main(["tools", "--project-root", str(project)]) == 2
    assert capsys.readouterr().err.startswith("substrate: Could not read ")


def test_execute_tool(project, monkeypatch, capsys):
    monkeypatch.chdir(project)

    status = main([
        "execute-tool",
        encode_transport("sample_tools:EchoTool"),
        encode_transport(json.dumps({"value": "from cli"})),
    ])

    assert status == EXIT_SUCCESS
    envelope = json.loads(capsys.readouterr().out)
    assert envelope["content"][0]["text"] == "from cli"


def test_no_command_prints_help(capsys):
    assert main([]) == 1
    assert "usage: substrate" in capsys.readouterr().out

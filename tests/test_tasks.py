"""Task runner tests; subprocess is patched out."""

import sys
from unittest.mock import MagicMock, patch

import pytest

import tasks


@patch("tasks.subprocess.run")
def test_run_cli_forwards_tool_and_arguments(mock_run: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["tasks.py", "run-cli", "convert-currency", '{"amount": 1}'])

    tasks.main()

    mock_run.assert_called_once_with(
        [sys.executable, "main.py", "convert-currency", '{"amount": 1}'],
        check=True,
    )


@patch("tasks.subprocess.run")
def test_lint_compiles_project_sources(mock_run: MagicMock, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(sys, "argv", ["tasks.py", "lint"])

    tasks.main()

    command = mock_run.call_args.args[0]
    assert command[:4] == [sys.executable, "-m", "compileall", "-q"]
    assert {"core", "tools", "tests"} <= set(command)

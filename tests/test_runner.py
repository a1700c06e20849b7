# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Tests for external command execution."""

import io
import logging
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from helmt.errors import ExternalToolError
from helmt.runner import MASK, ProcessRunner, RunnerConfig, redact

SECRET = "s3cr3t-p@ss"


def make_runner(secrets: tuple[str, ...] = (SECRET,)) -> tuple[ProcessRunner, io.StringIO, io.StringIO]:
    stdout = io.StringIO()
    stderr = io.StringIO()
    runner = ProcessRunner(RunnerConfig(stdout=stdout, stderr=stderr, secrets=secrets))
    return runner, stdout, stderr


def test_redact_replaces_every_occurrence() -> None:
    text = f"{SECRET} --password {SECRET} --other{SECRET}"
    result = redact(text, [SECRET])
    assert SECRET not in result
    assert result.count(MASK) == 3


def test_redact_ignores_empty_secrets() -> None:
    assert redact("helm version", ["", ""]) == "helm version"


def test_redact_longer_secret_first() -> None:
    result = redact("user=abc password=abcdef", ["abc", "abcdef"])
    assert "def" not in result
    assert result == f"user={MASK} password={MASK}"


@pytest.mark.parametrize(
    "args",
    [
        ["fetch", "--password", SECRET, "nginx"],
        [SECRET, "fetch"],
        ["fetch", "--username", "admin", "--password", SECRET, SECRET],
        ["fetch", f"--password={SECRET}"],
    ],
)
@patch("helmt.runner.subprocess.run")
def test_secret_never_logged(
    mock_run: MagicMock, args: list[str], caplog: pytest.LogCaptureFixture
) -> None:
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    runner, _, _ = make_runner()

    with caplog.at_level(logging.DEBUG):
        runner.run("helm", args)

    assert caplog.records
    for record in caplog.records:
        assert SECRET not in record.getMessage()
    assert MASK in caplog.text
    # the real value is still passed to the command
    assert mock_run.call_args[0][0] == ["helm", *args]


@patch("helmt.runner.subprocess.run")
def test_output_goes_to_configured_sinks(mock_run: MagicMock) -> None:
    mock_run.return_value = MagicMock(returncode=0, stdout="v3.15.0\n", stderr="warning\n")
    runner, stdout, stderr = make_runner()

    runner.run("helm", ["version"])

    assert stdout.getvalue() == "v3.15.0\n"
    assert stderr.getvalue() == "warning\n"


@patch("helmt.runner.subprocess.run")
def test_output_override(mock_run: MagicMock) -> None:
    mock_run.return_value = MagicMock(returncode=0, stdout="rendered\n", stderr="")
    runner, stdout, _ = make_runner()
    captured = io.StringIO()

    runner.run("helm", ["template"], output=captured)

    assert captured.getvalue() == "rendered\n"
    assert stdout.getvalue() == ""


@patch("helmt.runner.subprocess.run")
def test_working_directory(mock_run: MagicMock, tmp_path: Path) -> None:
    mock_run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    runner, _, _ = make_runner()

    runner.run("helm", ["version"], cwd=tmp_path)

    assert mock_run.call_args.kwargs["cwd"] == tmp_path


@patch("helmt.runner.subprocess.run")
def test_non_zero_exit_raises(mock_run: MagicMock) -> None:
    mock_run.return_value = MagicMock(
        returncode=2, stdout="", stderr=f"bad credentials {SECRET}\n"
    )
    runner, _, stderr = make_runner()

    with pytest.raises(ExternalToolError) as exc:
        runner.run("helm", ["fetch", "--password", SECRET, "nginx"])

    assert exc.value.returncode == 2
    assert "bad credentials" in exc.value.stderr
    assert SECRET not in str(exc.value)
    assert SECRET not in exc.value.stderr
    assert SECRET not in exc.value.command
    assert SECRET not in stderr.getvalue()


@patch("helmt.runner.subprocess.run")
def test_missing_executable(mock_run: MagicMock) -> None:
    mock_run.side_effect = FileNotFoundError("helm")
    runner, _, _ = make_runner()

    with pytest.raises(ExternalToolError, match="not installed") as exc:
        runner.run("helm", ["version"])
    assert exc.value.returncode is None
    assert isinstance(exc.value, RuntimeError)

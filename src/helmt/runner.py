# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""External command execution with credential redaction."""

import logging
import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import TextIO

from helmt.errors import ExternalToolError

logger = logging.getLogger(__name__)

MASK = "*****"


def redact(text: str, secrets: tuple[str, ...] | list[str]) -> str:
    """
    Replace every verbatim occurrence of each secret with a fixed mask.

    Longer secrets are replaced first so that a secret containing another
    secret is never partially revealed.

    Args:
        text: Text that may contain secrets
        secrets: Secret values; empty values are ignored

    Returns:
        The text with all secrets masked
    """
    for secret in sorted((s for s in secrets if s), key=len, reverse=True):
        text = text.replace(secret, MASK)
    return text


@dataclass
class RunnerConfig:
    """Sinks and secrets used by a ProcessRunner.

    stdout and stderr default to the process streams at the time the runner
    executes a command.
    """

    stdout: TextIO | None = None
    stderr: TextIO | None = None
    secrets: tuple[str, ...] = field(default_factory=tuple)


class ProcessRunner:
    """Runs external commands, logging each invocation with secrets masked."""

    def __init__(self, config: RunnerConfig | None = None) -> None:
        self.config = config or RunnerConfig()

    def redact(self, text: str) -> str:
        return redact(text, self.config.secrets)

    def run(
        self,
        name: str,
        args: list[str],
        cwd: Path | str | None = None,
        output: TextIO | None = None,
    ) -> None:
        """
        Run a command and wait for it to finish.

        stdout is written to ``output`` if given, otherwise to the configured
        stdout sink. stderr is written to the configured stderr sink and is
        also kept for the error raised on failure.

        Both streams are buffered until the command exits, so a long running
        command shows no output until it finishes.

        Args:
            name: Executable to run
            args: Arguments passed to the executable, in order
            cwd: Working directory; defaults to the current directory
            output: Sink for the command's stdout

        Raises:
            ExternalToolError: If the command cannot be started or exits non-zero
        """
        command = self.redact(" ".join([name, *args]))
        logger.info(command)

        try:
            result = subprocess.run(
                [name, *args],
                cwd=cwd,
                capture_output=True,
                text=True,
            )
        except FileNotFoundError as e:
            raise ExternalToolError(
                command,
                None,
                hint=f"{name} is not installed or not available in PATH",
            ) from e
        except OSError as e:
            raise ExternalToolError(command, None, hint=self.redact(str(e))) from e

        stdout = self.redact(result.stdout or "")
        stderr = self.redact(result.stderr or "")
        if stdout:
            (output or self.config.stdout or sys.stdout).write(stdout)
        if stderr:
            (self.config.stderr or sys.stderr).write(stderr)

        if result.returncode != 0:
            raise ExternalToolError(command, result.returncode, stderr)

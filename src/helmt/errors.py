# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Exceptions raised by the chart processing pipeline."""

__all__ = [
    "HelmtError",
    "ParseError",
    "ValidationError",
    "ExternalToolError",
    "UnexpectedArtifactError",
]


class HelmtError(Exception):
    """Generic base exception used for this package."""


class ParseError(HelmtError, ValueError):
    """Raised when the chart descriptor is not valid YAML."""

    def __init__(self, path: str, problem: str) -> None:
        super().__init__(f"Failed to parse {path}: {problem}")
        self.path = path
        self.problem = problem


class ValidationError(HelmtError, ValueError):
    """Raised when the chart descriptor is missing required fields."""

    def __init__(self, path: str, fields: list[str], problems: list[str]) -> None:
        super().__init__(f"Invalid chart descriptor {path}: {'; '.join(problems)}")
        self.path = path
        self.fields = fields
        self.problems = problems


class ExternalToolError(HelmtError, RuntimeError):
    """Raised when an external command exits with a non-zero status.

    The command and stderr are stored with secrets already masked.
    """

    def __init__(
        self, command: str, returncode: int | None, stderr: str = "", hint: str = ""
    ) -> None:
        if returncode is None:
            message = f"Failed to run {command}"
        else:
            message = f"Command failed with exit status {returncode}: {command}"
        if hint:
            message += f"\n  {hint}"
        if stderr.strip():
            message += f"\n  Error: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class UnexpectedArtifactError(HelmtError, RuntimeError):
    """Raised when a chart fetch does not stage exactly one file."""

    def __init__(self, directory: str, entries: list[str]) -> None:
        super().__init__(
            f"Unexpected content in temporary directory {directory}: "
            f"expected exactly one chart archive, found {len(entries)}"
            + (f" ({', '.join(entries)})" if entries else "")
        )
        self.directory = directory
        self.entries = entries

# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Helm command execution for fetching and rendering charts."""

import logging
import os
import tempfile
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from helmt.errors import UnexpectedArtifactError
from helmt.runner import ProcessRunner

logger = logging.getLogger(__name__)

TEMP_PREFIX = "helmt"


def build_fetch_args(
    repository: str,
    chart: str,
    version: str,
    destination: Path | str,
    username: str = "",
    password: str = "",
) -> list[str]:
    """Build the arguments for ``helm fetch``; credentials only when set."""
    args = [
        "fetch",
        "--repo",
        repository,
        "--version",
        version,
        "--destination",
        str(destination),
    ]
    if username:
        args.extend(["--username", username])
    if password:
        args.extend(["--password", password])
    args.append(chart)
    return args


def build_template_args(
    name: str,
    chart_path: Path | str,
    values: Sequence[str] = (),
    namespace: str = "",
    skip_crds: bool = False,
    output_dir: str = "",
    api_versions: Sequence[str] = (),
) -> list[str]:
    """
    Build the arguments for ``helm template``.

    Args:
        name: Release name
        chart_path: Path to the fetched chart archive
        values: Values files, applied in order
        namespace: Target namespace, omitted when empty
        skip_crds: Leave out custom resource definitions
        output_dir: Directory to render into, "." when empty
        api_versions: Extra API versions made available to the templates

    Returns:
        The argument list, without the helm executable
    """
    args = ["template", name, str(chart_path)]
    if namespace:
        args.extend(["--namespace", namespace])
    if not skip_crds:
        args.append("--include-crds")
    args.append("--skip-tests")
    for values_file in values:
        args.extend(["--values", values_file])
    args.extend(["--output-dir", output_dir or "."])
    for api_version in api_versions:
        args.extend(["--api-versions", api_version])
    return args


def single_entry(directory: Path) -> Path:
    """Return the only entry of a directory.

    Raises:
        UnexpectedArtifactError: If the directory does not hold exactly one entry
    """
    entries = sorted(os.listdir(directory))
    if len(entries) != 1:
        raise UnexpectedArtifactError(str(directory), entries)
    return directory / entries[0]


class Helm:
    """Wrapper around the helm executable."""

    def __init__(self, runner: ProcessRunner, binary: str = "helm") -> None:
        self.runner = runner
        self.binary = binary

    def version(self) -> None:
        """Check that helm can be run at all.

        Raises:
            ExternalToolError: If helm is missing or fails
        """
        self.runner.run(self.binary, ["version"])

    @contextmanager
    def fetch(
        self,
        repository: str,
        chart: str,
        version: str,
        username: str = "",
        password: str = "",
        keep: bool = False,
    ) -> Iterator[Path]:
        """
        Fetch a chart archive into a fresh temporary directory.

        The directory is removed when the context exits, unless ``keep`` is set.

        Args:
            repository: Chart repository URL
            chart: Chart name within the repository
            version: Exact chart version
            username: Repository username, omitted when empty
            password: Repository password, omitted when empty
            keep: Leave the temporary directory behind

        Yields:
            Path to the fetched chart archive

        Raises:
            ExternalToolError: If helm fetch fails
            UnexpectedArtifactError: If the fetch did not produce exactly one file
        """
        with tempfile.TemporaryDirectory(prefix=TEMP_PREFIX, delete=not keep) as d:
            destination = Path(d)
            self.runner.run(
                self.binary,
                build_fetch_args(
                    repository, chart, version, destination, username, password
                ),
            )
            artifact = single_entry(destination)
            logger.info(f"Downloaded {artifact}")
            try:
                yield artifact
            finally:
                if keep:
                    logger.info(f"Keeping temporary directory {destination}")

    def template(
        self,
        name: str,
        chart_path: Path | str,
        values: Sequence[str] = (),
        namespace: str = "",
        skip_crds: bool = False,
        output_dir: str = "",
        api_versions: Sequence[str] = (),
    ) -> None:
        """Render a fetched chart into the output directory.

        Raises:
            ExternalToolError: If helm template fails
        """
        self.runner.run(
            self.binary,
            build_template_args(
                name,
                chart_path,
                values,
                namespace,
                skip_crds,
                output_dir,
                api_versions,
            ),
        )

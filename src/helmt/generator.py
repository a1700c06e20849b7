# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Chart processing pipeline orchestration."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from helmt.config import ChartSpec, load_chart_spec
from helmt.helm import Helm
from helmt.kustomization import generate_kustomization
from helmt.output import remove_output, render_root
from helmt.runner import ProcessRunner, RunnerConfig

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with a formatter for console output.

    Args:
        verbose: If True, set log level to DEBUG; otherwise INFO
    """
    formatter = logging.Formatter(
        "[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S %z",
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.DEBUG if verbose else logging.INFO)


@dataclass
class Pipeline:
    """The stages run for one chart descriptor.

    Each stage can be replaced independently, which is how the tests drive
    the pipeline without helm installed.
    """

    helm: Helm
    load: Callable[[Path], ChartSpec] = load_chart_spec
    clean: Callable[[ChartSpec], None] = remove_output
    kustomize: Callable[[Path], Path] = generate_kustomization

    def run(
        self,
        descriptor: Path,
        clean: bool = False,
        username: str = "",
        password: str = "",
        keep_temp: bool = False,
    ) -> ChartSpec:
        """
        Render the chart described by a descriptor file.

        Stages run in order: load, helm version check, fetch, optional clean,
        template, optional kustomization. The first failure aborts the run.

        Args:
            descriptor: Path to the chart descriptor
            clean: Remove previously rendered output before rendering
            username: Chart repository username
            password: Chart repository password
            keep_temp: Leave the fetch directory behind

        Returns:
            The chart specification that was rendered
        """
        spec = self.load(descriptor)
        logger.info(f"Rendering {spec.chart} {spec.version} as {spec.name}")

        self.helm.version()

        with self.helm.fetch(
            spec.repository,
            spec.chart,
            spec.version,
            username=username,
            password=password,
            keep=keep_temp,
        ) as chart_path:
            if clean:
                self.clean(spec)

            self.helm.template(
                spec.name,
                chart_path,
                values=spec.values,
                namespace=spec.namespace,
                skip_crds=spec.skip_crds,
                output_dir=spec.output_dir,
                api_versions=spec.api_versions,
            )

        if spec.post_process.generate_kustomization:
            self.kustomize(render_root(spec))

        logger.info(f"✓ {spec.name} -> {render_root(spec)}")
        return spec


def helm_template(
    descriptor: Path,
    clean: bool = False,
    username: str = "",
    password: str = "",
    helm_binary: str = "helm",
    keep_temp: bool = False,
) -> ChartSpec:
    """
    Render a chart descriptor with the real helm executable.

    The password is registered as a secret, so it never appears in logs.

    Raises:
        ParseError: If the descriptor is not valid YAML
        ValidationError: If the descriptor is missing required fields
        ExternalToolError: If a helm command fails
        UnexpectedArtifactError: If the fetch did not produce exactly one file
        OSError: If output cannot be removed or written
    """
    runner = ProcessRunner(
        RunnerConfig(secrets=(password,) if password else ())
    )
    pipeline = Pipeline(helm=Helm(runner, binary=helm_binary))
    return pipeline.run(
        descriptor,
        clean=clean,
        username=username,
        password=password,
        keep_temp=keep_temp,
    )

# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Command-line interface for helmt."""

import sys
from pathlib import Path

import click

from helmt._version import __version__
from helmt.generator import helm_template, setup_logging


@click.command()
@click.version_option(version=__version__, prog_name="helmt")
@click.argument(
    "descriptor",
    type=click.Path(exists=False, path_type=Path),
    default=Path("helm-chart.yaml"),
)
@click.option(
    "--clean",
    is_flag=True,
    help="Remove previously rendered output for the chart before rendering",
)
@click.option(
    "--username",
    "-u",
    envvar="HELMT_USERNAME",
    default="",
    help="Chart repository username",
)
@click.option(
    "--password",
    "-p",
    envvar="HELMT_PASSWORD",
    default="",
    help="Chart repository password",
)
@click.option(
    "--helm-binary",
    envvar="HELMT_HELM",
    default="helm",
    help="Helm executable to run",
    show_default=True,
)
@click.option(
    "--keep-temp",
    is_flag=True,
    help="Keep the temporary directory the chart is fetched into",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show detailed output",
)
def main(
    descriptor: Path,
    clean: bool,
    username: str,
    password: str,
    helm_binary: str,
    keep_temp: bool,
    verbose: bool,
) -> None:
    """Render the Helm chart described by DESCRIPTOR into plain manifests."""
    setup_logging(verbose=verbose)

    try:
        helm_template(
            descriptor,
            clean=clean,
            username=username,
            password=password,
            helm_binary=helm_binary,
            keep_temp=keep_temp,
        )
    except ValueError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    except RuntimeError as e:
        click.echo(f"Runtime error: {e}", err=True)
        sys.exit(1)
    except OSError as e:
        click.echo(f"Filesystem error: {e}", err=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

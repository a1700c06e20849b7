# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Output directory handling for rendered charts."""

import logging
import shutil
from pathlib import Path

from helmt.config import ChartSpec

logger = logging.getLogger(__name__)


def render_root(spec: ChartSpec) -> Path:
    """
    Return the directory a chart is rendered into.

    helm template writes into ``<output-dir>/<chart>``, so cleaning and
    kustomization generation both work on that directory.

    Args:
        spec: Validated chart specification

    Returns:
        Path to the rendered chart directory
    """
    return Path(spec.output_dir or ".") / spec.chart


def remove_output(spec: ChartSpec) -> None:
    """Remove previously rendered output for a chart; a missing directory is fine.

    Raises:
        OSError: If the directory exists but cannot be removed
    """
    directory = render_root(spec)
    if not directory.exists() and not directory.is_symlink():
        logger.debug(f"Nothing to remove at {directory}")
        return

    logger.info(f"Removing folder {directory}")
    if directory.is_dir() and not directory.is_symlink():
        shutil.rmtree(directory)
    else:
        directory.unlink()

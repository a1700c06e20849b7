# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Kustomization generation for rendered manifests."""

import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

KUSTOMIZATION_FILE = "kustomization.yaml"

HEADER = """\
apiVersion: kustomize.config.k8s.io/v1beta1
kind: Kustomization
resources:
"""


def _walk_files(directory: Path) -> Iterator[Path]:
    """Yield regular files depth first, entries sorted by name at every level."""
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if entry.is_dir() and not entry.is_symlink():
            yield from _walk_files(entry)
        elif entry.is_file():
            yield entry


def list_resources(directory: Path) -> list[str]:
    """
    List every file below a directory as a path relative to it.

    The kustomization file itself is left out.

    Args:
        directory: Root of the rendered manifests

    Returns:
        Relative paths with "/" separators, in walk order

    Raises:
        OSError: If a directory cannot be read
    """
    resources = []
    for path in _walk_files(directory):
        rel = path.relative_to(directory).as_posix()
        if rel == KUSTOMIZATION_FILE:
            continue
        resources.append(rel)
    return resources


def generate_kustomization(directory: Path) -> Path:
    """
    Write a kustomization.yaml listing every rendered file as a resource.

    The whole tree is walked before anything is written, so an error while
    walking leaves any previous kustomization.yaml untouched.

    Args:
        directory: Root of the rendered manifests

    Returns:
        Path to the written kustomization file

    Raises:
        OSError: If the tree cannot be read or the file cannot be written
    """
    resources = list_resources(directory)
    content = HEADER + "".join(f"  - {rel}\n" for rel in resources)

    path = directory / KUSTOMIZATION_FILE
    path.write_text(content, encoding="utf-8")
    logger.info(f"Wrote {path} with {len(resources)} resource(s)")
    return path

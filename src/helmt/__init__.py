# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Render a single Helm chart into plain manifest files."""

from helmt._version import __version__

__all__ = ["__version__"]

# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Tests for kustomization generation."""

from pathlib import Path

import pytest
import yaml

from helmt.kustomization import generate_kustomization, list_resources


def make_tree(root: Path, files: list[str]) -> None:
    for name in files:
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("kind: ConfigMap\n")


def test_lists_files_relative_to_root(tmp_path: Path) -> None:
    make_tree(tmp_path, ["a.yaml", "sub/b.yaml"])

    path = generate_kustomization(tmp_path)

    assert path == tmp_path / "kustomization.yaml"
    assert path.read_text() == (
        "apiVersion: kustomize.config.k8s.io/v1beta1\n"
        "kind: Kustomization\n"
        "resources:\n"
        "  - a.yaml\n"
        "  - sub/b.yaml\n"
    )


def test_output_is_valid_kustomization(tmp_path: Path) -> None:
    make_tree(tmp_path, ["a.yaml", "sub/b.yaml"])

    data = yaml.safe_load(generate_kustomization(tmp_path).read_text())

    assert data["apiVersion"] == "kustomize.config.k8s.io/v1beta1"
    assert data["kind"] == "Kustomization"
    assert data["resources"] == ["a.yaml", "sub/b.yaml"]


def test_second_run_is_identical(tmp_path: Path) -> None:
    make_tree(tmp_path, ["a.yaml", "sub/b.yaml"])

    first = generate_kustomization(tmp_path).read_bytes()
    second = generate_kustomization(tmp_path).read_bytes()

    assert first == second
    assert b"kustomization.yaml" not in second


def test_walk_order_is_lexical_depth_first(tmp_path: Path) -> None:
    make_tree(
        tmp_path,
        [
            "nginx/templates/service.yaml",
            "nginx/templates/deployment.yaml",
            "nginx/crds/crd.yaml",
            "z.yaml",
            "b/x.yaml",
            "a.yaml",
        ],
    )

    assert list_resources(tmp_path) == [
        "a.yaml",
        "b/x.yaml",
        "nginx/crds/crd.yaml",
        "nginx/templates/deployment.yaml",
        "nginx/templates/service.yaml",
        "z.yaml",
    ]


def test_nested_kustomization_is_listed(tmp_path: Path) -> None:
    make_tree(tmp_path, ["sub/kustomization.yaml"])
    assert list_resources(tmp_path) == ["sub/kustomization.yaml"]


def test_empty_directory(tmp_path: Path) -> None:
    path = generate_kustomization(tmp_path)
    assert path.read_text().endswith("resources:\n")


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        generate_kustomization(tmp_path / "missing")
    assert not (tmp_path / "missing").exists()

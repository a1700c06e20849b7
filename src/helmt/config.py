# SPDX-License-Identifier: MIT
# SPDX-FileCopyrightText: The helmt contributors
"""Chart descriptor parsing and validation."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from helmt.errors import ParseError, ValidationError

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("chart", "version", "repository", "name")
TEXT_FIELDS = (*REQUIRED_FIELDS, "namespace", "outputDir")
TEXT_LIST_FIELDS = ("values", "apiVersions")

NULL_TAG = "tag:yaml.org,2002:null"


@dataclass(frozen=True)
class PostProcess:
    """Steps run after the chart has been rendered."""

    generate_kustomization: bool = False


@dataclass(frozen=True)
class ChartSpec:
    """A validated chart descriptor."""

    chart: str
    version: str
    repository: str
    name: str
    namespace: str = ""
    values: tuple[str, ...] = ()
    skip_crds: bool = False
    output_dir: str = ""
    api_versions: tuple[str, ...] = ()
    post_process: PostProcess = field(default_factory=PostProcess)


def load_chart_spec(path: Path) -> ChartSpec:
    """
    Load and validate a chart descriptor.

    Unknown keys are ignored. An empty file is treated as an empty mapping,
    so it fails validation on the required fields.

    Args:
        path: Path to the YAML descriptor

    Returns:
        The validated, immutable chart specification

    Raises:
        OSError: If the file cannot be read
        ParseError: If the file is not valid YAML
        ValidationError: If required fields are missing or fields have the wrong type
    """
    with open(path, "rb") as f:
        content = f.read()

    try:
        data = yaml.safe_load(content)
        root = yaml.compose(content)
    except yaml.YAMLError as e:
        raise ParseError(str(path), str(e)) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValidationError(
            str(path), [], ["descriptor must be a YAML mapping"]
        )
    if isinstance(root, yaml.MappingNode):
        data = {**data, **_scalar_text(root)}

    spec = parse_chart_spec(data, str(path))
    logger.debug(f"Loaded chart {spec.chart} {spec.version} from {path}")
    return spec


def parse_chart_spec(data: dict, source: str = "<descriptor>") -> ChartSpec:
    """Build a ChartSpec from already parsed YAML data, collecting every problem."""
    fields: list[str] = []
    problems: list[str] = []

    def problem(key: str, message: str) -> None:
        fields.append(key)
        problems.append(message)

    strings: dict[str, str] = {}
    for key in TEXT_FIELDS:
        value = _string(data.get(key))
        if value is None:
            problem(key, f"field '{key}' must be a string")
            continue
        if key in REQUIRED_FIELDS and not value:
            problem(key, f"missing required field '{key}'")
        strings[key] = value

    lists: dict[str, tuple[str, ...]] = {}
    for key in TEXT_LIST_FIELDS:
        items = _string_list(data.get(key))
        if items is None:
            problem(key, f"field '{key}' must be a list of strings")
        else:
            lists[key] = items

    skip_crds = data.get("skipCRDs", False)
    if skip_crds is None:
        skip_crds = False
    if not isinstance(skip_crds, bool):
        problem("skipCRDs", "field 'skipCRDs' must be a boolean")

    post_process = data.get("postProcess") or {}
    generate_kustomization = False
    if not isinstance(post_process, dict):
        problem("postProcess", "field 'postProcess' must be a mapping")
    else:
        generate_kustomization = post_process.get("generateKustomization", False)
        if generate_kustomization is None:
            generate_kustomization = False
        if not isinstance(generate_kustomization, bool):
            problem(
                "postProcess.generateKustomization",
                "field 'postProcess.generateKustomization' must be a boolean",
            )

    if problems:
        raise ValidationError(source, fields, problems)

    return ChartSpec(
        chart=strings["chart"],
        version=strings["version"],
        repository=strings["repository"],
        name=strings["name"],
        namespace=strings["namespace"],
        values=lists["values"],
        skip_crds=skip_crds,
        output_dir=strings["outputDir"],
        api_versions=lists["apiVersions"],
        post_process=PostProcess(generate_kustomization=generate_kustomization),
    )


def _scalar_text(root: yaml.MappingNode) -> dict[str, str | list[str]]:
    """Return the source text of the string fields.

    Plain scalars like `version: 1.10` or `name: on` are read as the text
    they were written as, not as the float or boolean YAML resolves them to.
    """
    text: dict[str, str | list[str]] = {}
    for key_node, value_node in root.value:
        key = key_node.value
        if key in TEXT_FIELDS and _is_text(value_node):
            text[key] = value_node.value
        elif key in TEXT_LIST_FIELDS and isinstance(value_node, yaml.SequenceNode):
            if all(_is_text(item) for item in value_node.value):
                text[key] = [item.value for item in value_node.value]
    return text


def _is_text(node: yaml.Node) -> bool:
    return isinstance(node, yaml.ScalarNode) and node.tag != NULL_TAG


def _string(value: object) -> str | None:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return None


def _string_list(value: object) -> tuple[str, ...] | None:
    if value is None:
        return ()
    if not isinstance(value, list):
        return None
    items = [_string(v) for v in value]
    if any(item is None or item == "" for item in items):
        return None
    return tuple(items)  # type: ignore[arg-type]

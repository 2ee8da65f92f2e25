"""Terraform JSON rendering of a topology."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ecs_topology.core.errors import TopologyConstructionError
from ecs_topology.core.models import Ref, ResourceNode, ResourceType, Template, Topology

# Attributes the AWS provider takes as JSON documents rather than blocks.
JSON_ENCODED_ATTRIBUTES = frozenset({"container_definitions", "assume_role_policy"})
AWS_PROVIDER_SOURCE = "hashicorp/aws"
# Empty inline rule lists are left out so standalone rule resources own the group.
INLINE_RULE_ATTRIBUTES = frozenset({"ingress", "egress"})


def render_value(value: Any, types: Mapping[str, ResourceType]) -> Any:
    """Render an attribute value, turning references into interpolations.

    Args:
        value: Attribute value, possibly holding `Ref` or `Template` values.
        types: Resource type of every logical id in the topology.

    Returns:
        The JSON-compatible value.
    """
    if isinstance(value, Ref):
        return "${" + _expression(value, types) + "}"
    if isinstance(value, Template):
        return "".join(str(render_value(part, types)) for part in value.parts)
    if isinstance(value, dict):
        return {key: render_value(item, types) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [render_value(item, types) for item in value]
    return value


def render_terraform(topology: Topology) -> dict[str, Any]:
    """Render the topology as a Terraform JSON configuration."""
    types = {node.logical_id: node.type for node in topology.nodes}

    resources: dict[str, dict[str, Any]] = {}
    for node in topology.nodes:
        block = resources.setdefault(node.type.terraform_type, {})
        block[node.logical_id] = _render_node(node, types)

    return {
        "terraform": {
            "required_providers": {"aws": {"source": AWS_PROVIDER_SOURCE}},
            "backend": {
                "s3": {
                    "bucket": topology.backend.bucket,
                    "key": topology.backend.key,
                    "region": topology.backend.region,
                }
            },
        },
        "provider": {"aws": [{"region": topology.region}]},
        "resource": resources,
        "output": {
            name: {"value": render_value(value, types)}
            for name, value in topology.outputs.items()
        },
    }


def write_terraform(topology: Topology, path: Path) -> Path:
    """Write the rendered topology to a file.

    Args:
        topology: Topology to render.
        path: Destination file. Parent directories are created.

    Returns:
        The written path.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(render_terraform(topology), indent=2) + "\n", encoding="utf-8")
    return path


def _render_node(node: ResourceNode, types: Mapping[str, ResourceType]) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for key, value in node.attributes.items():
        if _is_empty_inline_rules(node, key, value):
            continue
        rendered = render_value(value, types)
        body[key] = json.dumps(rendered) if key in JSON_ENCODED_ATTRIBUTES else rendered
    if node.tags is not None:
        body["tags"] = dict(node.tags)
    if node.depends_on:
        body["depends_on"] = [_address(node_id, types) for node_id in node.depends_on]
    return body


def _is_empty_inline_rules(node: ResourceNode, key: str, value: Any) -> bool:
    return (
        node.type is ResourceType.SECURITY_GROUP
        and key in INLINE_RULE_ATTRIBUTES
        and not value
    )


def _address(node_id: str, types: Mapping[str, ResourceType]) -> str:
    if node_id not in types:
        raise TopologyConstructionError(f"Unknown logical id: {node_id}")
    return f"{types[node_id].terraform_type}.{node_id}"


def _expression(ref: Ref, types: Mapping[str, ResourceType]) -> str:
    expression = f"{_address(ref.node_id, types)}.{ref.attribute}"
    if ref.path and isinstance(ref.path[0], int):
        # Set-typed attributes must be converted before they can be indexed.
        expression = f"tolist({expression})"
    for item in ref.path:
        expression += f"[{item}]" if isinstance(item, int) else f".{item}"
    return expression

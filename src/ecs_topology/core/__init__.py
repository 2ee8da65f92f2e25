"""Topology synthesis core."""

from ecs_topology.core.errors import (
    ConfigurationError,
    DeferredProvisioningError,
    TopologyConstructionError,
    TopologyError,
)
from ecs_topology.core.models import (
    Backend,
    ListenerMode,
    Ref,
    ResourceNode,
    ResourceType,
    Template,
    Topology,
)
from ecs_topology.core.render import render_terraform, render_value, write_terraform
from ecs_topology.core.settings import EnvConfig, ImageTagPolicy, build_config, load_config
from ecs_topology.core.synth import synthesize
from ecs_topology.core.tagging import TaggingPolicy
from ecs_topology.core.validation import REQUIRED_ENV_VARS, validate_env

__all__ = [
    "Backend",
    "ConfigurationError",
    "DeferredProvisioningError",
    "EnvConfig",
    "ImageTagPolicy",
    "ListenerMode",
    "REQUIRED_ENV_VARS",
    "Ref",
    "ResourceNode",
    "ResourceType",
    "TaggingPolicy",
    "Template",
    "Topology",
    "TopologyConstructionError",
    "TopologyError",
    "build_config",
    "load_config",
    "render_terraform",
    "render_value",
    "synthesize",
    "validate_env",
    "write_terraform",
]

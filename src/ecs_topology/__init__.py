"""ECS Topology - synthesize a two-tier VPC, load balancer, and Fargate service."""

from ecs_topology.core import (
    ConfigurationError,
    EnvConfig,
    ImageTagPolicy,
    ListenerMode,
    ResourceNode,
    ResourceType,
    Topology,
    TopologyConstructionError,
    load_config,
    render_terraform,
    synthesize,
)

__all__ = [
    "ConfigurationError",
    "EnvConfig",
    "ImageTagPolicy",
    "ListenerMode",
    "ResourceNode",
    "ResourceType",
    "Topology",
    "TopologyConstructionError",
    "load_config",
    "render_terraform",
    "synthesize",
]

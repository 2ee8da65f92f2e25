"""Topology builders, in dependency order."""

from ecs_topology.core.topology.compute import build_compute
from ecs_topology.core.topology.edge import build_edge, select_listener_mode
from ecs_topology.core.topology.models import (
    ComputeTopology,
    EdgeTopology,
    NetworkTopology,
    SecurityGroups,
)
from ecs_topology.core.topology.network import build_network
from ecs_topology.core.topology.observability import build_cpu_alarm, build_log_group
from ecs_topology.core.topology.outputs import collect_outputs
from ecs_topology.core.topology.security_groups import build_security_groups

__all__ = [
    "ComputeTopology",
    "EdgeTopology",
    "NetworkTopology",
    "SecurityGroups",
    "build_compute",
    "build_cpu_alarm",
    "build_edge",
    "build_log_group",
    "build_network",
    "build_security_groups",
    "collect_outputs",
    "select_listener_mode",
]

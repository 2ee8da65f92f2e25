"""Single-pass synthesis of a topology from configuration."""

import logging
from collections.abc import Callable

from ecs_topology.core.models import Backend, Topology
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.tagging import TaggingPolicy
from ecs_topology.core.topology import (
    build_compute,
    build_cpu_alarm,
    build_edge,
    build_log_group,
    build_network,
    build_security_groups,
    collect_outputs,
    select_listener_mode,
)

logger = logging.getLogger(__name__)


def synthesize(
    config: EnvConfig,
    reporter: Callable[[str], None] | None = None,
) -> Topology:
    """Build the full topology for one configuration.

    Args:
        config: Validated configuration. Nothing else is read.
        reporter: Optional callback for stage progress messages.

    Returns:
        The finalized, acyclic topology.
    """
    report = reporter or _log_stage
    stack = Stack(TaggingPolicy.from_config(config))
    mode = select_listener_mode(config)

    report(f"Declaring network in {', '.join(config.availability_zones)}")
    network = build_network(stack, config)

    report("Wiring security groups")
    security_groups = build_security_groups(stack, config, network, mode)

    report(f"Declaring load balancer ({mode.value})")
    edge = build_edge(stack, config, network, security_groups, mode)

    report("Declaring container service")
    log_group = build_log_group(stack, config)
    compute = build_compute(stack, config, network, security_groups, edge, log_group)

    report("Declaring CPU alarm")
    build_cpu_alarm(stack, config, compute)

    collect_outputs(stack, config, network, edge, compute)
    topology = stack.finalize(mode, backend_for(config))
    report(f"Synthesized {len(topology.nodes)} resources")
    return topology


def backend_for(config: EnvConfig) -> Backend:
    """Return the remote state location for this configuration."""
    return Backend(
        bucket=config.state_bucket,
        key=config.state_key or f"{config.cluster_name}/terraform.tfstate",
        region=config.region,
    )


def _log_stage(message: str) -> None:
    logger.info(message)

"""Edge and compute security groups."""

import logging
from typing import Any

from ecs_topology.core.models import ListenerMode, ResourceNode, ResourceType
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.models import NetworkTopology, SecurityGroups

logger = logging.getLogger(__name__)

HTTPS_PORT = 443


def build_security_groups(
    stack: Stack,
    config: EnvConfig,
    network: NetworkTopology,
    mode: ListenerMode = ListenerMode.HTTP_ONLY,
) -> SecurityGroups:
    """Declare the edge and compute groups.

    Neither group carries inline rules; every rule is its own node, since the
    provider cannot manage inline rules and rule resources on one group. The
    only way into compute is the paired rule set: edge egress to compute, and
    compute ingress from edge, both on the container port.
    """
    listener_ports = [config.alb_port]
    if mode is ListenerMode.HTTPS_ENABLED and HTTPS_PORT not in listener_ports:
        listener_ports.append(HTTPS_PORT)

    edge = stack.add(
        ResourceType.SECURITY_GROUP,
        "alb_security_group",
        {
            "name": f"{config.cluster_name}-alb-sg",
            "description": "Allow inbound HTTP traffic to ALB",
            "vpc_id": network.vpc_id,
            "ingress": [],
            "egress": [],
        },
        name=f"{config.cluster_name}-alb-sg",
    )
    compute = stack.add(
        ResourceType.SECURITY_GROUP,
        "ecs_security_group",
        {
            "name": f"{config.cluster_name}-ecs-tasks-sg",
            "description": "Allow only ALB to ECS traffic",
            "vpc_id": network.vpc_id,
            "ingress": [],
            "egress": [],
        },
        name=f"{config.cluster_name}-ecs-tasks-sg",
    )

    edge_ingress = [
        stack.add(
            ResourceType.SECURITY_GROUP_RULE,
            f"alb_ingress_{port}_{index}",
            {
                "type": "ingress",
                "description": f"Listener port {port} from {cidr}",
                "from_port": port,
                "to_port": port,
                "protocol": "tcp",
                "cidr_blocks": [cidr],
                "security_group_id": edge.ref("id"),
            },
        )
        for port in listener_ports
        for index, cidr in enumerate(config.alb_allowed_cidrs)
    ]
    edge_egress = _open_egress(stack, "alb_open_egress", edge, config.sg_egress_cidrs)
    compute_egress = _open_egress(stack, "ecs_open_egress", compute, config.sg_egress_cidrs)

    edge_egress_to_compute = stack.add(
        ResourceType.SECURITY_GROUP_RULE,
        "alb_to_ecs_egress",
        {
            "type": "egress",
            "description": "ALB to ECS tasks on the container port",
            "from_port": config.container_port,
            "to_port": config.container_port,
            "protocol": "tcp",
            "security_group_id": edge.ref("id"),
            "source_security_group_id": compute.ref("id"),
        },
    )
    compute_ingress_from_edge = stack.add(
        ResourceType.SECURITY_GROUP_RULE,
        "ecs_from_alb_ingress",
        {
            "type": "ingress",
            "description": "ECS tasks from ALB on the container port",
            "from_port": config.container_port,
            "to_port": config.container_port,
            "protocol": "tcp",
            "security_group_id": compute.ref("id"),
            "source_security_group_id": edge.ref("id"),
        },
    )
    logger.debug(
        f"Edge admits ports {listener_ports} from {len(config.alb_allowed_cidrs)} CIDRs; "
        f"compute admits edge on {config.container_port}"
    )

    return SecurityGroups(
        edge=edge,
        compute=compute,
        edge_egress_to_compute=edge_egress_to_compute,
        compute_ingress_from_edge=compute_ingress_from_edge,
        edge_ingress=edge_ingress,
        edge_egress=edge_egress,
        compute_egress=compute_egress,
    )


def _open_egress(
    stack: Stack, logical_id: str, group: ResourceNode, cidrs: tuple[str, ...]
) -> ResourceNode:
    rule: dict[str, Any] = {
        "type": "egress",
        "description": "Outbound traffic",
        "from_port": 0,
        "to_port": 0,
        "protocol": "-1",
        "cidr_blocks": list(cidrs),
        "security_group_id": group.ref("id"),
    }
    return stack.add(ResourceType.SECURITY_GROUP_RULE, logical_id, rule)

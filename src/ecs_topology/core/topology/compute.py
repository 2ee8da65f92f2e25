"""Container registry, cluster, task definition, and service."""

import logging
from typing import Any

from ecs_topology.core.errors import ConfigurationError
from ecs_topology.core.models import ResourceNode, ResourceType
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.models import (
    ComputeTopology,
    EdgeTopology,
    NetworkTopology,
    SecurityGroups,
)

logger = logging.getLogger(__name__)

CONTAINER_NAME = "app"
EXECUTION_POLICY_ARN = "arn:aws:iam::aws:policy/service-role/AmazonECSTaskExecutionRolePolicy"
LOG_STREAM_PREFIX = "ecs"


def build_compute(
    stack: Stack,
    config: EnvConfig,
    network: NetworkTopology,
    security_groups: SecurityGroups,
    edge: EdgeTopology,
    log_group: ResourceNode,
) -> ComputeTopology:
    """Declare the Fargate service behind the target group.

    The service waits on the load balancer, the target group, and every
    listener, so it is never declared before its network path exists.
    """
    if not config.image_tag.strip():
        raise ConfigurationError(missing=["APP_IMAGE_TAG"])

    repository = stack.add(
        ResourceType.ECR_REPOSITORY,
        "app_repository",
        {"name": config.repo_name, "image_tag_mutability": "MUTABLE"},
        name=config.repo_name,
    )
    cluster = stack.add(
        ResourceType.ECS_CLUSTER,
        "ecs_cluster",
        {"name": config.cluster_name},
        name=config.cluster_name,
    )

    role_name = f"{config.cluster_name}-ecs-task-execution"
    execution_role = stack.add(
        ResourceType.IAM_ROLE,
        "ecs_task_execution_role",
        {"name": role_name, "assume_role_policy": _ecs_trust_policy()},
        name=role_name,
    )
    stack.add(
        ResourceType.IAM_ROLE_POLICY_ATTACHMENT,
        "ecs_task_execution_policy",
        {"role": execution_role.ref("name"), "policy_arn": EXECUTION_POLICY_ARN},
    )

    logger.debug(f"Task image: {config.image_uri}")
    task_definition = stack.add(
        ResourceType.TASK_DEFINITION,
        "ecs_task_definition",
        {
            "family": f"{config.cluster_name}-task",
            "requires_compatibilities": ["FARGATE"],
            "network_mode": "awsvpc",
            "cpu": config.ecs_cpu,
            "memory": config.ecs_memory,
            "execution_role_arn": execution_role.ref("arn"),
            "container_definitions": [_container_definition(config, log_group)],
        },
        name=f"{config.cluster_name}-task",
    )

    service = stack.add(
        ResourceType.ECS_SERVICE,
        "ecs_service",
        {
            "name": config.service_name,
            "cluster": cluster.ref("id"),
            "task_definition": task_definition.ref("arn"),
            "desired_count": config.desired_tasks,
            "launch_type": "FARGATE",
            "network_configuration": {
                "subnets": network.private_subnet_ids,
                "security_groups": [security_groups.compute.ref("id")],
                "assign_public_ip": False,
            },
            "load_balancer": [
                {
                    "target_group_arn": edge.target_group.ref("arn"),
                    "container_name": CONTAINER_NAME,
                    "container_port": config.container_port,
                }
            ],
        },
        name=config.service_name,
        depends_on=[edge.load_balancer, edge.target_group, *edge.listeners],
    )

    return ComputeTopology(
        repository=repository,
        cluster=cluster,
        execution_role=execution_role,
        task_definition=task_definition,
        service=service,
    )


def _container_definition(config: EnvConfig, log_group: ResourceNode) -> dict[str, Any]:
    return {
        "name": CONTAINER_NAME,
        "image": config.image_uri,
        "essential": True,
        "portMappings": [
            {
                "containerPort": config.container_port,
                "hostPort": config.container_port,
                "protocol": "tcp",
            }
        ],
        "logConfiguration": {
            "logDriver": "awslogs",
            "options": {
                "awslogs-group": log_group.ref("name"),
                "awslogs-region": config.region,
                "awslogs-stream-prefix": LOG_STREAM_PREFIX,
            },
        },
    }


def _ecs_trust_policy() -> dict[str, Any]:
    """Return the ECS task trust policy."""
    return {
        "Version": "2012-10-17",
        "Statement": [
            {
                "Effect": "Allow",
                "Principal": {"Service": "ecs-tasks.amazonaws.com"},
                "Action": "sts:AssumeRole",
            }
        ],
    }

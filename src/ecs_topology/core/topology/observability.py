"""Log group and CPU alarm."""

import logging

from ecs_topology.core.models import ResourceNode, ResourceType
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.models import ComputeTopology

logger = logging.getLogger(__name__)

CPU_THRESHOLD_PERCENT = 80
CPU_PERIOD_SECONDS = 300
CPU_EVALUATION_PERIODS = 2


def build_log_group(stack: Stack, config: EnvConfig) -> ResourceNode:
    """Declare the task log group at `/ecs/<cluster>`."""
    logger.debug(f"Log group {config.log_group_name} keeps {config.log_retention_days} days")
    return stack.add(
        ResourceType.LOG_GROUP,
        "ecs_log_group",
        {
            "name": config.log_group_name,
            "retention_in_days": config.log_retention_days,
        },
        name=config.log_group_name,
    )


def build_cpu_alarm(stack: Stack, config: EnvConfig, compute: ComputeTopology) -> ResourceNode:
    """Declare an observational alarm on average service CPU. No actions are wired."""
    logger.debug(
        f"CPU alarm on {config.service_name} above {CPU_THRESHOLD_PERCENT}% "
        f"for {CPU_EVALUATION_PERIODS} periods"
    )
    return stack.add(
        ResourceType.METRIC_ALARM,
        "cpu_alarm",
        {
            "alarm_name": f"{config.cluster_name}-high-cpu",
            "alarm_description": (
                f"Average CPU above {CPU_THRESHOLD_PERCENT}% for {config.service_name}"
            ),
            "comparison_operator": "GreaterThanThreshold",
            "evaluation_periods": CPU_EVALUATION_PERIODS,
            "metric_name": "CPUUtilization",
            "namespace": "AWS/ECS",
            "period": CPU_PERIOD_SECONDS,
            "statistic": "Average",
            "threshold": CPU_THRESHOLD_PERCENT,
            "alarm_actions": [],
            "dimensions": {
                "ClusterName": compute.cluster.ref("name"),
                "ServiceName": compute.service.ref("name"),
            },
        },
        name=f"{config.cluster_name}-high-cpu",
    )

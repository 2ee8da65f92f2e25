"""Named outputs handed to downstream consumers."""

from ecs_topology.core.models import ListenerMode, Template
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.edge import HEALTH_CHECK_PATH
from ecs_topology.core.topology.models import ComputeTopology, EdgeTopology, NetworkTopology


def collect_outputs(
    stack: Stack,
    config: EnvConfig,
    network: NetworkTopology,
    edge: EdgeTopology,
    compute: ComputeTopology,
) -> None:
    """Register the load balancer, registry, cluster, and VPC outputs."""
    dns_name = edge.load_balancer.ref("dns_name")
    stack.output("albDnsName", dns_name)
    stack.output("appUrl", Template(parts=("http://", dns_name, HEALTH_CHECK_PATH)))
    stack.output("ecrRepoUrl", compute.repository.ref("repository_url"))
    stack.output("ecsClusterName", compute.cluster.ref("name"))
    stack.output("vpcId", network.vpc_id)
    stack.output("vpcUsed", network.vpc_id)
    if edge.mode is ListenerMode.HTTPS_ENABLED and config.domain_name:
        stack.output("httpsUrl", f"https://{config.domain_name}{HEALTH_CHECK_PATH}")

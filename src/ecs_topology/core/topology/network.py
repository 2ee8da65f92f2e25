"""VPC, subnets, and routing across two availability zones."""

import logging

from ecs_topology.core.models import ResourceNode, ResourceType
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.models import NetworkTopology

logger = logging.getLogger(__name__)

DEFAULT_ROUTE_CIDR = "0.0.0.0/0"
ZONE_SUFFIXES = ("a", "b")


def build_network(stack: Stack, config: EnvConfig) -> NetworkTopology:
    """Declare a two-tier VPC with one NAT gateway for both private subnets.

    The single NAT gateway in public subnet A is a deliberate cost tradeoff:
    private egress from both zones depends on zone A.
    """
    public_cidrs = (config.public_subnet_cidr_a, config.public_subnet_cidr_b)
    private_cidrs = (config.private_subnet_cidr_a, config.private_subnet_cidr_b)
    zones = config.availability_zones

    vpc = stack.add(
        ResourceType.VPC,
        "vpc",
        {
            "cidr_block": config.vpc_cidr,
            "enable_dns_hostnames": True,
            "enable_dns_support": True,
        },
        name=f"{config.cluster_name}-vpc",
    )
    igw = stack.add(
        ResourceType.INTERNET_GATEWAY,
        "internet_gateway",
        {"vpc_id": vpc.ref("id")},
        name=f"{config.cluster_name}-igw",
    )

    logger.debug(f"Declaring public subnets in {', '.join(zones)}")
    public_subnets = [
        _subnet(stack, vpc, "public", suffix, cidr, zone, map_public_ip=True)
        for suffix, cidr, zone in zip(ZONE_SUFFIXES, public_cidrs, zones, strict=True)
    ]
    public_rt = _route_table(stack, vpc, "public", config.cluster_name)
    stack.add(
        ResourceType.ROUTE,
        "public_internet_route",
        {
            "route_table_id": public_rt.ref("id"),
            "destination_cidr_block": DEFAULT_ROUTE_CIDR,
            "gateway_id": igw.ref("id"),
        },
    )
    _associate(stack, public_rt, public_subnets)

    nat_eip = stack.add(
        ResourceType.EIP,
        "nat_eip",
        {"domain": "vpc"},
        name=f"{config.cluster_name}-nat-eip",
        depends_on=[igw],
    )
    nat_gw = stack.add(
        ResourceType.NAT_GATEWAY,
        "nat_gateway",
        {
            "allocation_id": nat_eip.ref("allocation_id"),
            "subnet_id": public_subnets[0].ref("id"),
        },
        name=f"{config.cluster_name}-nat",
        depends_on=[igw],
    )

    logger.debug(f"Declaring private subnets in {', '.join(zones)}")
    private_subnets = [
        _subnet(stack, vpc, "private", suffix, cidr, zone, map_public_ip=False)
        for suffix, cidr, zone in zip(ZONE_SUFFIXES, private_cidrs, zones, strict=True)
    ]
    private_rt = _route_table(stack, vpc, "private", config.cluster_name)
    stack.add(
        ResourceType.ROUTE,
        "private_nat_route",
        {
            "route_table_id": private_rt.ref("id"),
            "destination_cidr_block": DEFAULT_ROUTE_CIDR,
            "nat_gateway_id": nat_gw.ref("id"),
        },
    )
    _associate(stack, private_rt, private_subnets)

    return NetworkTopology(
        vpc=vpc,
        internet_gateway=igw,
        nat_gateway=nat_gw,
        public_subnets=public_subnets,
        private_subnets=private_subnets,
    )


def _subnet(
    stack: Stack,
    vpc: ResourceNode,
    tier: str,
    suffix: str,
    cidr: str,
    zone: str,
    *,
    map_public_ip: bool,
) -> ResourceNode:
    """Declare one subnet of a tier in one zone."""
    return stack.add(
        ResourceType.SUBNET,
        f"{tier}_subnet_{suffix}",
        {
            "vpc_id": vpc.ref("id"),
            "cidr_block": cidr,
            "availability_zone": zone,
            "map_public_ip_on_launch": map_public_ip,
        },
        name=f"{tier}-subnet-{suffix}",
    )


def _route_table(stack: Stack, vpc: ResourceNode, tier: str, cluster_name: str) -> ResourceNode:
    return stack.add(
        ResourceType.ROUTE_TABLE,
        f"{tier}_route_table",
        {"vpc_id": vpc.ref("id")},
        name=f"{cluster_name}-{tier}-rt",
    )


def _associate(stack: Stack, route_table: ResourceNode, subnets: list[ResourceNode]) -> None:
    """Associate each subnet with the route table."""
    tier = route_table.logical_id.removesuffix("_route_table")
    for subnet in subnets:
        suffix = subnet.logical_id.rsplit("_", 1)[-1]
        stack.add(
            ResourceType.ROUTE_TABLE_ASSOCIATION,
            f"{tier}_route_assoc_{suffix}",
            {
                "subnet_id": subnet.ref("id"),
                "route_table_id": route_table.ref("id"),
            },
        )

"""Tests for the VPC, subnets, and routing."""

from ecs_topology.core import EnvConfig, Ref, ResourceType, Topology, build_config, synthesize


def test_two_public_and_two_private_subnets_across_two_zones(topology: Topology) -> None:
    subnets = topology.of_type(ResourceType.SUBNET)
    public = [node for node in subnets if node.attributes["map_public_ip_on_launch"]]
    private = [node for node in subnets if not node.attributes["map_public_ip_on_launch"]]

    assert len(public) == 2
    assert len(private) == 2
    assert [node.attributes["availability_zone"] for node in public] == ["us-east-1a", "us-east-1b"]
    assert [node.attributes["availability_zone"] for node in private] == [
        "us-east-1a",
        "us-east-1b",
    ]


def test_subnet_names_and_cidrs(topology: Topology) -> None:
    """Test the scenario subnet tags and CIDR placement."""
    public_a = topology.get("public_subnet_a")
    public_b = topology.get("public_subnet_b")

    assert public_a.tags is not None and public_a.tags["Name"] == "public-subnet-a"
    assert public_b.tags is not None and public_b.tags["Name"] == "public-subnet-b"
    assert public_a.attributes["cidr_block"] == "10.0.0.0/24"
    assert topology.get("private_subnet_b").attributes["cidr_block"] == "10.0.3.0/24"


def test_zones_follow_the_region(base_env: dict[str, str]) -> None:
    topology = synthesize(build_config({**base_env, "AWS_REGION": "eu-west-2"}))

    zones = {node.attributes["availability_zone"] for node in topology.of_type(ResourceType.SUBNET)}
    assert zones == {"eu-west-2a", "eu-west-2b"}


def test_vpc_enables_dns(topology: Topology, config: EnvConfig) -> None:
    vpc = topology.get("vpc")

    assert vpc.attributes["cidr_block"] == config.vpc_cidr
    assert vpc.attributes["enable_dns_hostnames"] is True
    assert vpc.attributes["enable_dns_support"] is True


def test_single_nat_gateway_in_public_subnet_a(topology: Topology) -> None:
    """Test that one NAT gateway in zone A serves both private subnets."""
    nat_gateways = topology.of_type(ResourceType.NAT_GATEWAY)

    assert len(nat_gateways) == 1
    nat = nat_gateways[0]
    assert nat.attributes["subnet_id"] == Ref(node_id="public_subnet_a", attribute="id")
    assert nat.attributes["allocation_id"] == Ref(node_id="nat_eip", attribute="allocation_id")
    assert "internet_gateway" in nat.dependencies


def test_default_routes(topology: Topology) -> None:
    public_route = topology.get("public_internet_route")
    private_route = topology.get("private_nat_route")

    assert public_route.attributes["destination_cidr_block"] == "0.0.0.0/0"
    assert public_route.attributes["gateway_id"] == Ref(node_id="internet_gateway", attribute="id")
    assert private_route.attributes["nat_gateway_id"] == Ref(node_id="nat_gateway", attribute="id")
    assert private_route.attributes["route_table_id"] == Ref(
        node_id="private_route_table", attribute="id"
    )
    assert topology.dependencies_of("private_nat_route") == ("nat_gateway", "private_route_table")


def test_every_subnet_is_associated_with_its_tier_route_table(topology: Topology) -> None:
    associations = {
        node.attributes["subnet_id"].node_id: node.attributes["route_table_id"].node_id
        for node in topology.of_type(ResourceType.ROUTE_TABLE_ASSOCIATION)
    }

    assert associations == {
        "public_subnet_a": "public_route_table",
        "public_subnet_b": "public_route_table",
        "private_subnet_a": "private_route_table",
        "private_subnet_b": "private_route_table",
    }

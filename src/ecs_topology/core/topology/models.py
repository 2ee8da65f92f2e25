"""Builder results passed between topology stages."""

from dataclasses import dataclass, field

from ecs_topology.core.models import ListenerMode, Ref, ResourceNode


@dataclass
class NetworkTopology:
    """VPC, subnets, and routing."""

    vpc: ResourceNode
    internet_gateway: ResourceNode
    nat_gateway: ResourceNode
    public_subnets: list[ResourceNode] = field(default_factory=list)
    private_subnets: list[ResourceNode] = field(default_factory=list)

    @property
    def vpc_id(self) -> Ref:
        """Return a reference to the VPC id."""
        return self.vpc.ref("id")

    @property
    def public_subnet_ids(self) -> list[Ref]:
        """Return references to the public subnet ids, zone a first."""
        return [subnet.ref("id") for subnet in self.public_subnets]

    @property
    def private_subnet_ids(self) -> list[Ref]:
        """Return references to the private subnet ids, zone a first."""
        return [subnet.ref("id") for subnet in self.private_subnets]


@dataclass
class SecurityGroups:
    """Edge and compute security groups with their paired rules."""

    edge: ResourceNode
    compute: ResourceNode
    edge_egress_to_compute: ResourceNode
    compute_ingress_from_edge: ResourceNode
    edge_ingress: list[ResourceNode] = field(default_factory=list)
    edge_egress: ResourceNode | None = None
    compute_egress: ResourceNode | None = None


@dataclass
class EdgeTopology:
    """Load balancer, target group, and listeners."""

    mode: ListenerMode
    load_balancer: ResourceNode
    target_group: ResourceNode
    http_listener: ResourceNode
    https_listener: ResourceNode | None = None
    certificate: ResourceNode | None = None

    @property
    def listeners(self) -> list[ResourceNode]:
        """Return the declared listeners, HTTP first."""
        if self.https_listener is None:
            return [self.http_listener]
        return [self.http_listener, self.https_listener]


@dataclass
class ComputeTopology:
    """Registry, cluster, task definition, and service."""

    repository: ResourceNode
    cluster: ResourceNode
    execution_role: ResourceNode
    task_definition: ResourceNode
    service: ResourceNode

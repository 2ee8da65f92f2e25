"""Data models for synthesized topologies."""

from collections.abc import Iterator
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ecs_topology.core.errors import TopologyConstructionError


class Ref(BaseModel):
    """Reference to an attribute of another resource node."""

    model_config = ConfigDict(frozen=True)

    node_id: str = Field(description="Logical id of the referenced node")
    attribute: str = Field(description="Attribute read from the referenced node")
    path: tuple[int | str, ...] = Field(
        default=(),
        description="Element indexes and keys applied to a collection attribute",
    )


class Template(BaseModel):
    """String composed from literal parts and references."""

    model_config = ConfigDict(frozen=True)

    parts: tuple[str | Ref, ...] = Field(description="Literal strings and references, in order")


OutputValue = Ref | Template | str


class ResourceType(str, Enum):
    """The fixed resource vocabulary."""

    VPC = "vpc"
    INTERNET_GATEWAY = "internet-gateway"
    SUBNET = "subnet"
    ROUTE_TABLE = "route-table"
    ROUTE = "route"
    ROUTE_TABLE_ASSOCIATION = "route-table-association"
    EIP = "eip"
    NAT_GATEWAY = "nat-gateway"
    SECURITY_GROUP = "security-group"
    SECURITY_GROUP_RULE = "security-group-rule"
    LOAD_BALANCER = "lb"
    TARGET_GROUP = "lb-target-group"
    LISTENER = "lb-listener"
    CERTIFICATE = "acm-certificate"
    CERTIFICATE_VALIDATION = "acm-certificate-validation"
    DNS_RECORD = "route53-record"
    ECR_REPOSITORY = "ecr-repository"
    ECS_CLUSTER = "ecs-cluster"
    IAM_ROLE = "iam-role"
    IAM_ROLE_POLICY_ATTACHMENT = "iam-role-policy-attachment"
    LOG_GROUP = "cloudwatch-log-group"
    TASK_DEFINITION = "ecs-task-definition"
    ECS_SERVICE = "ecs-service"
    METRIC_ALARM = "cloudwatch-metric-alarm"

    @property
    def taggable(self) -> bool:
        """Return whether the provider accepts a tag map on this type."""
        return self not in _UNTAGGABLE

    @property
    def terraform_type(self) -> str:
        """Return the Terraform resource type name."""
        return _TERRAFORM_TYPES[self]


_UNTAGGABLE = frozenset(
    {
        ResourceType.ROUTE,
        ResourceType.ROUTE_TABLE_ASSOCIATION,
        ResourceType.SECURITY_GROUP_RULE,
        ResourceType.IAM_ROLE_POLICY_ATTACHMENT,
        ResourceType.CERTIFICATE_VALIDATION,
        ResourceType.DNS_RECORD,
    }
)

_TERRAFORM_TYPES = {
    ResourceType.VPC: "aws_vpc",
    ResourceType.INTERNET_GATEWAY: "aws_internet_gateway",
    ResourceType.SUBNET: "aws_subnet",
    ResourceType.ROUTE_TABLE: "aws_route_table",
    ResourceType.ROUTE: "aws_route",
    ResourceType.ROUTE_TABLE_ASSOCIATION: "aws_route_table_association",
    ResourceType.EIP: "aws_eip",
    ResourceType.NAT_GATEWAY: "aws_nat_gateway",
    ResourceType.SECURITY_GROUP: "aws_security_group",
    ResourceType.SECURITY_GROUP_RULE: "aws_security_group_rule",
    ResourceType.LOAD_BALANCER: "aws_lb",
    ResourceType.TARGET_GROUP: "aws_lb_target_group",
    ResourceType.LISTENER: "aws_lb_listener",
    ResourceType.CERTIFICATE: "aws_acm_certificate",
    ResourceType.CERTIFICATE_VALIDATION: "aws_acm_certificate_validation",
    ResourceType.DNS_RECORD: "aws_route53_record",
    ResourceType.ECR_REPOSITORY: "aws_ecr_repository",
    ResourceType.ECS_CLUSTER: "aws_ecs_cluster",
    ResourceType.IAM_ROLE: "aws_iam_role",
    ResourceType.IAM_ROLE_POLICY_ATTACHMENT: "aws_iam_role_policy_attachment",
    ResourceType.LOG_GROUP: "aws_cloudwatch_log_group",
    ResourceType.TASK_DEFINITION: "aws_ecs_task_definition",
    ResourceType.ECS_SERVICE: "aws_ecs_service",
    ResourceType.METRIC_ALARM: "aws_cloudwatch_metric_alarm",
}


def iter_refs(value: Any) -> Iterator[Ref]:
    """Yield every reference nested in an attribute value."""
    if isinstance(value, Ref):
        yield value
    elif isinstance(value, Template):
        for part in value.parts:
            yield from iter_refs(part)
    elif isinstance(value, dict):
        for item in value.values():
            yield from iter_refs(item)
    elif isinstance(value, (list, tuple)):
        for item in value:
            yield from iter_refs(item)


class ResourceNode(BaseModel):
    """One logical infrastructure unit."""

    model_config = ConfigDict(frozen=True)

    type: ResourceType
    logical_id: str = Field(min_length=1)
    attributes: dict[str, Any] = Field(default_factory=dict)
    tags: dict[str, str] | None = None
    depends_on: tuple[str, ...] = Field(
        default=(),
        description="Edges that no attribute reference expresses",
    )

    @model_validator(mode="after")
    def _check_tags(self) -> "ResourceNode":
        if self.type.taggable and self.tags is None:
            raise TopologyConstructionError(f"{self.logical_id}: {self.type.value} needs tags")
        if not self.type.taggable and self.tags is not None:
            raise TopologyConstructionError(
                f"{self.logical_id}: {self.type.value} does not support tags"
            )
        return self

    def ref(self, attribute: str, *path: int | str) -> Ref:
        """Return a reference to one of this node's attributes."""
        return Ref(node_id=self.logical_id, attribute=attribute, path=path)

    def references(self) -> list[Ref]:
        """Return every reference in the attribute map."""
        return list(iter_refs(self.attributes))

    @property
    def dependencies(self) -> tuple[str, ...]:
        """Return the ids this node depends on, implicit and explicit, sorted."""
        ids = {ref.node_id for ref in self.references()} | set(self.depends_on)
        ids.discard(self.logical_id)
        return tuple(sorted(ids))


class ListenerMode(str, Enum):
    """Listener set selected once per synthesis run."""

    HTTP_ONLY = "HTTP_ONLY"
    HTTPS_ENABLED = "HTTPS_ENABLED"


class Backend(BaseModel):
    """Remote state location handed to the provisioning engine."""

    model_config = ConfigDict(frozen=True)

    bucket: str
    key: str
    region: str


class Topology(BaseModel):
    """The complete resource graph and its named outputs."""

    model_config = ConfigDict(frozen=True)

    region: str
    backend: Backend
    listener_mode: ListenerMode
    nodes: tuple[ResourceNode, ...]
    outputs: dict[str, OutputValue] = Field(default_factory=dict)

    def get(self, logical_id: str) -> ResourceNode:
        """Return the node with this logical id, or raise KeyError."""
        for node in self.nodes:
            if node.logical_id == logical_id:
                return node
        raise KeyError(logical_id)

    def of_type(self, resource_type: ResourceType) -> list[ResourceNode]:
        """Return the nodes of one type, in declaration order."""
        return [node for node in self.nodes if node.type is resource_type]

    def dependencies_of(self, logical_id: str) -> tuple[str, ...]:
        """Return the sorted dependency ids of one node."""
        return self.get(logical_id).dependencies

    def topological_order(self) -> list[str]:
        """Return logical ids with every dependency before its dependents.

        Ties keep declaration order, so the result is deterministic.

        Raises:
            TopologyConstructionError: On an unknown reference or a cycle.
        """
        known = {node.logical_id for node in self.nodes}
        pending: dict[str, set[str]] = {}
        for node in self.nodes:
            unknown = [dep for dep in node.dependencies if dep not in known]
            if unknown:
                raise TopologyConstructionError(
                    f"{node.logical_id} references undeclared nodes: {', '.join(unknown)}"
                )
            pending[node.logical_id] = set(node.dependencies)

        order: list[str] = []
        while pending:
            ready = [node_id for node_id, deps in pending.items() if not deps]
            if not ready:
                raise TopologyConstructionError(
                    f"Dependency cycle between: {', '.join(sorted(pending))}"
                )
            for node_id in ready:
                order.append(node_id)
                del pending[node_id]
            for deps in pending.values():
                deps.difference_update(ready)
        return order

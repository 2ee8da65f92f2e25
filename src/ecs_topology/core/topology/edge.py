"""Internet-facing load balancer, target group, and listeners."""

import logging
from typing import Any

from ecs_topology.core.errors import ConfigurationError
from ecs_topology.core.models import ListenerMode, Ref, ResourceNode, ResourceType
from ecs_topology.core.settings import EnvConfig
from ecs_topology.core.stack import Stack
from ecs_topology.core.topology.models import EdgeTopology, NetworkTopology, SecurityGroups
from ecs_topology.core.topology.security_groups import HTTPS_PORT

logger = logging.getLogger(__name__)

HEALTH_CHECK_PATH = "/health"
TLS_POLICY = "ELBSecurityPolicy-TLS13-1-2-2021-06"
MAX_LB_NAME_LENGTH = 32


def select_listener_mode(config: EnvConfig) -> ListenerMode:
    """Pick the listener set for this run.

    HTTPS needs both the flag and a domain; anything else stays HTTP only.
    """
    if config.https_requested:
        return ListenerMode.HTTPS_ENABLED
    if config.enable_https:
        logger.warning("HTTPS requested without DOMAIN_NAME; falling back to HTTP only")
    return ListenerMode.HTTP_ONLY


def build_edge(
    stack: Stack,
    config: EnvConfig,
    network: NetworkTopology,
    security_groups: SecurityGroups,
    mode: ListenerMode = ListenerMode.HTTP_ONLY,
) -> EdgeTopology:
    """Declare the load balancer over both public subnets and its listeners."""
    logger.info(f"Listener mode: {mode.value}")

    alb = stack.add(
        ResourceType.LOAD_BALANCER,
        "alb",
        {
            "name": lb_name(config.cluster_name, "alb"),
            "internal": False,
            "load_balancer_type": "application",
            "subnets": network.public_subnet_ids,
            "security_groups": [security_groups.edge.ref("id")],
        },
        name=f"{config.cluster_name}-alb",
    )
    target_group = stack.add(
        ResourceType.TARGET_GROUP,
        "target_group",
        {
            "name": lb_name(config.cluster_name, "tg"),
            "port": config.container_port,
            "protocol": "HTTP",
            "vpc_id": network.vpc_id,
            "target_type": "ip",
            "health_check": {
                "path": HEALTH_CHECK_PATH,
                "healthy_threshold": 2,
                "unhealthy_threshold": 2,
                "interval": 30,
                "timeout": 5,
            },
        },
        name=f"{config.cluster_name}-tg",
    )
    http_listener = stack.add(
        ResourceType.LISTENER,
        "http_listener",
        {
            "load_balancer_arn": alb.ref("arn"),
            "port": config.alb_port,
            "protocol": "HTTP",
            "default_action": [_forward(target_group)],
        },
        name=f"{config.cluster_name}-http",
    )

    edge = EdgeTopology(
        mode=mode,
        load_balancer=alb,
        target_group=target_group,
        http_listener=http_listener,
    )
    if mode is ListenerMode.HTTPS_ENABLED:
        _build_https(stack, config, edge)
    return edge


def lb_name(cluster_name: str, suffix: str) -> str:
    """Return a load balancer resource name within the 32 character limit."""
    base = cluster_name[: MAX_LB_NAME_LENGTH - len(suffix) - 1].rstrip("-")
    return f"{base}-{suffix}"


def _build_https(stack: Stack, config: EnvConfig, edge: EdgeTopology) -> None:
    """Declare the certificate path and the HTTPS listener.

    A supplied certificate ARN is reused. Otherwise a certificate is issued
    and the listener waits for its DNS validation.
    """
    domain = config.domain_name
    if not domain:
        raise ConfigurationError(missing=["DOMAIN_NAME"])

    certificate_arn: str | Ref
    if config.certificate_arn:
        logger.info("Reusing the configured certificate")
        certificate_arn = config.certificate_arn
    else:
        if not config.hosted_zone_id:
            raise ConfigurationError(missing=["HOSTED_ZONE_ID"])
        logger.info(f"Issuing a DNS-validated certificate for {domain}")
        certificate = stack.add(
            ResourceType.CERTIFICATE,
            "certificate",
            {"domain_name": domain, "validation_method": "DNS"},
            name=domain,
        )
        record = stack.add(
            ResourceType.DNS_RECORD,
            "certificate_validation_record",
            {
                "zone_id": config.hosted_zone_id,
                "name": certificate.ref("domain_validation_options", 0, "resource_record_name"),
                "type": certificate.ref("domain_validation_options", 0, "resource_record_type"),
                "records": [
                    certificate.ref("domain_validation_options", 0, "resource_record_value")
                ],
                "ttl": 60,
                "allow_overwrite": True,
            },
        )
        validation = stack.add(
            ResourceType.CERTIFICATE_VALIDATION,
            "certificate_validation",
            {
                "certificate_arn": certificate.ref("arn"),
                "validation_record_fqdns": [record.ref("fqdn")],
            },
        )
        certificate_arn = validation.ref("certificate_arn")
        edge.certificate = certificate

    edge.https_listener = stack.add(
        ResourceType.LISTENER,
        "https_listener",
        {
            "load_balancer_arn": edge.load_balancer.ref("arn"),
            "port": HTTPS_PORT,
            "protocol": "HTTPS",
            "ssl_policy": TLS_POLICY,
            "certificate_arn": certificate_arn,
            "default_action": [_forward(edge.target_group)],
        },
        name=f"{config.cluster_name}-https",
    )

    if config.hosted_zone_id:
        stack.add(
            ResourceType.DNS_RECORD,
            "app_alias_record",
            {
                "zone_id": config.hosted_zone_id,
                "name": domain,
                "type": "A",
                "alias": {
                    "name": edge.load_balancer.ref("dns_name"),
                    "zone_id": edge.load_balancer.ref("zone_id"),
                    "evaluate_target_health": True,
                },
            },
        )


def _forward(target_group: ResourceNode) -> dict[str, Any]:
    return {"type": "forward", "target_group_arn": target_group.ref("arn")}

"""Shared fixtures for topology tests."""

import pytest

from ecs_topology.core import EnvConfig, Topology, build_config, synthesize


@pytest.fixture
def base_env() -> dict[str, str]:
    """Return a complete set of required variables."""
    return {
        "AWS_REGION": "us-east-1",
        "AWS_ACCOUNT_ID": "123456789012",
        "APP_REPO_NAME": "demo-app",
        "APP_CLUSTER_NAME": "demo",
        "CUSTOM_VPC_CIDR": "10.0.0.0/16",
        "PUBLIC_SUBNET_CIDR_A": "10.0.0.0/24",
        "PUBLIC_SUBNET_CIDR_B": "10.0.1.0/24",
        "PRIVATE_SUBNET_CIDR_A": "10.0.2.0/24",
        "PRIVATE_SUBNET_CIDR_B": "10.0.3.0/24",
        "TF_STATE_BUCKET": "demo-tf-state",
        "APP_IMAGE_TAG": "v1.2.3",
    }


@pytest.fixture
def https_env(base_env: dict[str, str]) -> dict[str, str]:
    """Return variables that enable HTTPS with certificate issuance."""
    return {
        **base_env,
        "ENABLE_HTTPS": "true",
        "DOMAIN_NAME": "app.example.com",
        "HOSTED_ZONE_ID": "Z123EXAMPLE",
    }


@pytest.fixture
def config(base_env: dict[str, str]) -> EnvConfig:
    return build_config(base_env)


@pytest.fixture
def topology(config: EnvConfig) -> Topology:
    return synthesize(config)

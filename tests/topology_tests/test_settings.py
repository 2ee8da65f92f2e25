"""Tests for configuration loading and defaults."""

from pathlib import Path

import pytest

from pydantic import ValidationError

from ecs_topology.core import (
    ConfigurationError,
    EnvConfig,
    ImageTagPolicy,
    build_config,
    load_config,
)


def test_defaults_are_applied(base_env: dict[str, str]) -> None:
    """Test the documented defaults for optional variables."""
    config = build_config(base_env)

    assert config.container_port == 3000
    assert config.desired_tasks == 1
    assert config.alb_port == 80
    assert config.ecs_cpu == "256"
    assert config.ecs_memory == "512"
    assert config.log_retention_days == 7
    assert config.alb_allowed_cidrs == ("0.0.0.0/0",)
    assert config.sg_egress_cidrs == ("0.0.0.0/0",)
    assert config.enable_https is False
    assert config.app_name == "demo-app"


def test_comma_separated_cidrs_are_split(base_env: dict[str, str]) -> None:
    """Test that CIDR lists are split and trimmed."""
    config = build_config(
        {
            **base_env,
            "ALB_ALLOWED_CIDRS": "10.1.0.0/16, 192.168.0.0/24,",
            "SG_EGRESS_CIDRS": "10.0.0.0/8",
        }
    )

    assert config.alb_allowed_cidrs == ("10.1.0.0/16", "192.168.0.0/24")
    assert config.sg_egress_cidrs == ("10.0.0.0/8",)


def test_image_tag_is_required_by_default(base_env: dict[str, str]) -> None:
    """Test that the required policy reports a missing image tag."""
    env = {key: value for key, value in base_env.items() if key != "APP_IMAGE_TAG"}

    with pytest.raises(ConfigurationError) as exc_info:
        build_config(env)

    assert exc_info.value.missing == ["APP_IMAGE_TAG"]


def test_default_latest_policy_fills_the_image_tag(base_env: dict[str, str]) -> None:
    """Test that the default-latest policy supplies 'latest'."""
    env = {key: value for key, value in base_env.items() if key != "APP_IMAGE_TAG"}

    config = build_config(env, ImageTagPolicy.DEFAULT_LATEST)

    assert config.image_tag == "latest"


def test_default_latest_policy_keeps_an_explicit_tag(base_env: dict[str, str]) -> None:
    config = build_config(base_env, ImageTagPolicy.DEFAULT_LATEST)

    assert config.image_tag == "v1.2.3"


def test_malformed_values_are_reported_together(base_env: dict[str, str]) -> None:
    """Test that every malformed value is reported by its variable name."""
    env = {
        **base_env,
        "CONTAINER_PORT": "abc",
        "DESIRED_TASKS": "0",
        "ECS_CPU": "-256",
        "LOG_RETENTION_DAYS": "seven",
    }

    with pytest.raises(ConfigurationError) as exc_info:
        build_config(env)

    assert exc_info.value.missing == []
    assert set(exc_info.value.invalid) == {
        "CONTAINER_PORT",
        "DESIRED_TASKS",
        "ECS_CPU",
        "LOG_RETENTION_DAYS",
    }


def test_missing_and_malformed_are_reported_in_one_error(base_env: dict[str, str]) -> None:
    env = {key: value for key, value in base_env.items() if key != "AWS_REGION"}
    env["ALB_PORT"] = "not-a-port"

    with pytest.raises(ConfigurationError) as exc_info:
        build_config(env)

    assert exc_info.value.missing == ["AWS_REGION"]
    assert list(exc_info.value.invalid) == ["ALB_PORT"]
    assert "Missing env vars: AWS_REGION" in str(exc_info.value)


def test_https_issuance_requires_a_hosted_zone(https_env: dict[str, str]) -> None:
    """Test that issuing a certificate needs a zone for its validation record."""
    env = {key: value for key, value in https_env.items() if key != "HOSTED_ZONE_ID"}

    with pytest.raises(ConfigurationError) as exc_info:
        build_config(env)

    assert exc_info.value.missing == ["HOSTED_ZONE_ID"]


def test_supplied_certificate_does_not_need_a_hosted_zone(https_env: dict[str, str]) -> None:
    env = {key: value for key, value in https_env.items() if key != "HOSTED_ZONE_ID"}
    env["CERTIFICATE_ARN"] = "arn:aws:acm:us-east-1:123456789012:certificate/abc"

    config = build_config(env)

    assert config.https_requested
    assert config.hosted_zone_id is None


def test_derived_names(base_env: dict[str, str]) -> None:
    config = build_config(base_env)

    assert config.availability_zones == ("us-east-1a", "us-east-1b")
    assert config.service_name == "demo-service"
    assert config.log_group_name == "/ecs/demo"
    assert config.image_uri == "123456789012.dkr.ecr.us-east-1.amazonaws.com/demo-app:v1.2.3"


def test_config_is_immutable(base_env: dict[str, str]) -> None:
    config = build_config(base_env)

    with pytest.raises(ValueError):
        config.cluster_name = "other"  # type: ignore[misc]


def test_load_config_overlays_environment_on_env_file(
    tmp_path: Path, base_env: dict[str, str]
) -> None:
    """Test that the environment wins over the env file, and blanks do not override."""
    env_file = tmp_path / "stack.env"
    env_file.write_text(
        "\n".join(f"{key}={value}" for key, value in base_env.items()) + "\nDESIRED_TASKS=2\n",
        encoding="utf-8",
    )

    config = load_config(
        env_file=env_file,
        environ={"APP_CLUSTER_NAME": "override", "AWS_REGION": ""},
    )

    assert config.cluster_name == "override"
    assert config.region == "us-east-1"
    assert config.desired_tasks == 2


def test_load_config_reports_missing_when_env_file_is_absent(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env_file=tmp_path / "missing.env", environ={})

    assert "AWS_REGION" in exc_info.value.missing


def _write_env(path: Path, values: dict[str, str]) -> Path:
    path.write_text("".join(f"{key}={value}\n" for key, value in values.items()), encoding="utf-8")
    return path


def test_image_tag_policy_is_read_from_the_env_file(
    tmp_path: Path, base_env: dict[str, str]
) -> None:
    values = {key: value for key, value in base_env.items() if key != "APP_IMAGE_TAG"}
    env_file = _write_env(
        tmp_path / "stack.env", {**values, "APP_IMAGE_TAG_POLICY": "default-latest"}
    )

    config = load_config(env_file=env_file, environ={})

    assert config.image_tag == "latest"


def test_environment_policy_wins_over_env_file(
    tmp_path: Path, base_env: dict[str, str]
) -> None:
    values = {key: value for key, value in base_env.items() if key != "APP_IMAGE_TAG"}
    env_file = _write_env(
        tmp_path / "stack.env", {**values, "APP_IMAGE_TAG_POLICY": "default-latest"}
    )

    with pytest.raises(ConfigurationError) as exc_info:
        load_config(env_file=env_file, environ={"APP_IMAGE_TAG_POLICY": "required"})

    assert exc_info.value.missing == ["APP_IMAGE_TAG"]


def test_unknown_image_tag_policy_is_a_configuration_error(base_env: dict[str, str]) -> None:
    values = {key: value for key, value in base_env.items() if key != "AWS_REGION"}

    with pytest.raises(ConfigurationError) as exc_info:
        build_config(values, "bogus")

    assert exc_info.value.missing == ["AWS_REGION"]
    assert list(exc_info.value.invalid) == ["APP_IMAGE_TAG_POLICY"]
    assert "default-latest" in exc_info.value.invalid["APP_IMAGE_TAG_POLICY"]


def test_blank_image_tag_is_rejected_at_config_time(base_env: dict[str, str]) -> None:
    with pytest.raises(ValidationError):
        EnvConfig.model_validate({**base_env, "APP_IMAGE_TAG": "   "})

"""Configuration loading for topology synthesis."""

import logging
from collections.abc import Mapping
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PositiveInt,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from ecs_topology.core.env import DEFAULT_ENV_FILE, load_env_values
from ecs_topology.core.errors import ConfigurationError
from ecs_topology.core.validation import REQUIRED_ENV_VARS, missing_variables

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_TAG = "latest"
OPEN_CIDR = "0.0.0.0/0"
IMAGE_TAG_POLICY_VAR = "APP_IMAGE_TAG_POLICY"


class ImageTagPolicy(str, Enum):
    """How an unset `APP_IMAGE_TAG` is treated."""

    REQUIRED = "required"
    DEFAULT_LATEST = "default-latest"


class LoaderSettings(BaseSettings):
    """Options for the configuration loader itself.

    Only the env file location is read here, since it has to be known before
    the env file can be read. The image tag policy comes from the merged env
    file and environment values, and is validated with the rest of them.
    """

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)

    env_file: Path = Field(default=Path(DEFAULT_ENV_FILE), alias="ENV_FILE")


class EnvConfig(BaseModel):
    """Validated, immutable configuration for one synthesis run."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="ignore", str_strip_whitespace=True
    )

    # Required
    region: str = Field(alias="AWS_REGION", min_length=1)
    account_id: str = Field(alias="AWS_ACCOUNT_ID", min_length=1)
    repo_name: str = Field(alias="APP_REPO_NAME", min_length=1)
    cluster_name: str = Field(alias="APP_CLUSTER_NAME", min_length=1)
    vpc_cidr: str = Field(alias="CUSTOM_VPC_CIDR", min_length=1)
    public_subnet_cidr_a: str = Field(alias="PUBLIC_SUBNET_CIDR_A", min_length=1)
    public_subnet_cidr_b: str = Field(alias="PUBLIC_SUBNET_CIDR_B", min_length=1)
    private_subnet_cidr_a: str = Field(alias="PRIVATE_SUBNET_CIDR_A", min_length=1)
    private_subnet_cidr_b: str = Field(alias="PRIVATE_SUBNET_CIDR_B", min_length=1)
    state_bucket: str = Field(alias="TF_STATE_BUCKET", min_length=1)
    image_tag: str = Field(alias="APP_IMAGE_TAG", min_length=1)

    # Optional with defaults
    container_port: PositiveInt = Field(default=3000, alias="CONTAINER_PORT", le=65535)
    desired_tasks: PositiveInt = Field(default=1, alias="DESIRED_TASKS")
    alb_port: PositiveInt = Field(default=80, alias="ALB_PORT", le=65535)
    alb_allowed_cidrs: tuple[str, ...] = Field(
        default=(OPEN_CIDR,), alias="ALB_ALLOWED_CIDRS", min_length=1
    )
    sg_egress_cidrs: tuple[str, ...] = Field(
        default=(OPEN_CIDR,), alias="SG_EGRESS_CIDRS", min_length=1
    )
    ecs_cpu: str = Field(default="256", alias="ECS_CPU")
    ecs_memory: str = Field(default="512", alias="ECS_MEMORY")
    log_retention_days: PositiveInt = Field(default=7, alias="LOG_RETENTION_DAYS")
    state_key: str | None = Field(default=None, alias="TF_STATE_KEY")

    # Tagging
    project_name: str = Field(default="tv-devops", alias="PROJECT_NAME")
    environment: str = Field(default="dev", alias="ENVIRONMENT")
    owner: str = Field(default="devops", alias="OWNER")
    cost_center: str = Field(default="engineering", alias="COST_CENTER")
    app_name: str = Field(default="", alias="APP_NAME")

    # HTTPS
    enable_https: bool = Field(default=False, alias="ENABLE_HTTPS")
    domain_name: str | None = Field(default=None, alias="DOMAIN_NAME")
    certificate_arn: str | None = Field(default=None, alias="CERTIFICATE_ARN")
    hosted_zone_id: str | None = Field(default=None, alias="HOSTED_ZONE_ID")

    @model_validator(mode="before")
    @classmethod
    def _default_app_name(cls, data: Any) -> Any:
        """Fall back to the repository name for the AppName tag."""
        if not isinstance(data, Mapping):
            return data
        if data.get("APP_NAME") or data.get("app_name"):
            return data
        repo_name = data.get("APP_REPO_NAME") or data.get("repo_name")
        if not repo_name:
            return data
        return {**data, "APP_NAME": repo_name}

    @field_validator("alb_allowed_cidrs", "sg_egress_cidrs", mode="before")
    @classmethod
    def _split_cidrs(cls, value: Any) -> Any:
        """Split comma-separated CIDR lists."""
        if isinstance(value, str):
            return tuple(item.strip() for item in value.split(",") if item.strip())
        return value

    @field_validator("ecs_cpu", "ecs_memory", mode="before")
    @classmethod
    def _positive_integer_string(cls, value: Any) -> str:
        """Accept a positive integer, kept in its string form for the task definition."""
        text = str(value).strip()
        if not text.isdigit() or int(text) <= 0:
            raise ValueError("must be a positive integer")
        return str(int(text))

    @field_validator("domain_name", "certificate_arn", "hosted_zone_id", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def availability_zones(self) -> tuple[str, str]:
        """Return the two availability zones used by the subnet pairs."""
        return f"{self.region}a", f"{self.region}b"

    @property
    def image_uri(self) -> str:
        """Return the registry image the service runs."""
        return (
            f"{self.account_id}.dkr.ecr.{self.region}.amazonaws.com/"
            f"{self.repo_name}:{self.image_tag}"
        )

    @property
    def service_name(self) -> str:
        """Return the ECS service name, `<cluster>-service`."""
        return f"{self.cluster_name}-service"

    @property
    def log_group_name(self) -> str:
        """Return the task log group name, `/ecs/<cluster>`."""
        return f"/ecs/{self.cluster_name}"

    @property
    def https_requested(self) -> bool:
        """Return true when the HTTPS flag is set and a domain is configured."""
        return self.enable_https and bool(self.domain_name)


def required_variables(
    values: Mapping[str, str],
    image_tag_policy: ImageTagPolicy = ImageTagPolicy.REQUIRED,
) -> list[str]:
    """Return the variable names that must be set for these values.

    Args:
        values: Raw environment values.
        image_tag_policy: How an unset image tag is treated.

    Returns:
        The required names, base list first.
    """
    names = list(REQUIRED_ENV_VARS)
    if image_tag_policy is ImageTagPolicy.REQUIRED:
        names.append("APP_IMAGE_TAG")
    if (
        _flag(values.get("ENABLE_HTTPS"))
        and values.get("DOMAIN_NAME", "").strip()
        and not values.get("CERTIFICATE_ARN", "").strip()
    ):
        names.append("HOSTED_ZONE_ID")
    return names
def build_config(
    values: Mapping[str, str],
    image_tag_policy: ImageTagPolicy | str = ImageTagPolicy.REQUIRED,
) -> EnvConfig:
    """Validate raw values and build the configuration.

    Args:
        values: Raw environment values keyed by variable name.
        image_tag_policy: How an unset image tag is treated, as a policy or its
            raw `APP_IMAGE_TAG_POLICY` value.

    Returns:
        The validated configuration.

    Raises:
        ConfigurationError: With every missing and malformed variable.
    """
    raw = {key: value for key, value in values.items() if value is not None and value.strip()}
    invalid: dict[str, str] = {}

    try:
        policy = ImageTagPolicy(image_tag_policy.strip())
    except ValueError:
        choices = ", ".join(item.value for item in ImageTagPolicy)
        invalid[IMAGE_TAG_POLICY_VAR] = f"must be one of: {choices}"
        policy = ImageTagPolicy.REQUIRED

    missing = missing_variables(required_variables(raw, policy), raw)

    if policy is ImageTagPolicy.DEFAULT_LATEST and "APP_IMAGE_TAG" not in raw:
        raw["APP_IMAGE_TAG"] = DEFAULT_IMAGE_TAG

    config: EnvConfig | None = None
    try:
        config = EnvConfig.model_validate(raw)
    except ValidationError as exc:
        for error in exc.errors():
            name = str(error["loc"][0]) if error["loc"] else "config"
            if error["type"] == "missing":
                if name not in missing:
                    missing.append(name)
                continue
            if name not in missing:
                invalid.setdefault(name, error["msg"])

    if missing or invalid or config is None:
        raise ConfigurationError(missing=missing, invalid=invalid)

    return config


def load_config(
    env_file: Path | None = None,
    image_tag_policy: ImageTagPolicy | None = None,
    environ: Mapping[str, str] | None = None,
) -> EnvConfig:
    """Load the configuration from the env file and the environment.

    Args:
        env_file: Env file override. Defaults to `ENV_FILE`, then `.env`.
        image_tag_policy: Image tag policy override. Defaults to
            `APP_IMAGE_TAG_POLICY` from the environment or the env file.
        environ: Environment to read instead of the process environment.

    Returns:
        The validated configuration.
    """
    path = env_file if env_file is not None else _loader_settings(environ).env_file
    logger.info(f"Loading env file: {path}")
    values = load_env_values(path, environ)
    policy = image_tag_policy or values.get(IMAGE_TAG_POLICY_VAR, ImageTagPolicy.REQUIRED)
    return build_config(values, policy)


def _loader_settings(environ: Mapping[str, str] | None) -> LoaderSettings:
    """Read loader options, preferring `environ` over the process environment."""
    if environ is None or not environ.get("ENV_FILE", "").strip():
        return LoaderSettings()
    return LoaderSettings(env_file=Path(environ["ENV_FILE"].strip()))


def _flag(value: str | None) -> bool:
    """Parse a boolean flag leniently; malformed flags are reported by validation."""
    if value is None or not value.strip():
        return False
    try:
        return TypeAdapter(bool).validate_python(value.strip())
    except ValidationError:
        return False

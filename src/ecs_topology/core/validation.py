"""Required environment variable checks."""

from collections.abc import Iterable, Mapping

from ecs_topology.core.errors import ConfigurationError

REQUIRED_ENV_VARS: tuple[str, ...] = (
    "AWS_REGION",
    "AWS_ACCOUNT_ID",
    "APP_REPO_NAME",
    "APP_CLUSTER_NAME",
    "CUSTOM_VPC_CIDR",
    "PUBLIC_SUBNET_CIDR_A",
    "PUBLIC_SUBNET_CIDR_B",
    "PRIVATE_SUBNET_CIDR_A",
    "PRIVATE_SUBNET_CIDR_B",
    "TF_STATE_BUCKET",
)


def missing_variables(names: Iterable[str], environ: Mapping[str, str]) -> list[str]:
    """Return the names that are unset or blank, in the order given.

    Args:
        names: Variable names to check.
        environ: Environment values to check against.

    Returns:
        The missing names, without duplicates.
    """
    missing: list[str] = []
    for name in names:
        if name in missing:
            continue
        value = environ.get(name)
        if value is None or not str(value).strip():
            missing.append(name)
    return missing


def validate_env(names: Iterable[str], environ: Mapping[str, str]) -> None:
    """Fail with every missing variable at once.

    Args:
        names: Variable names that must be set.
        environ: Environment values to check against.

    Raises:
        ConfigurationError: If any of the names is unset or blank.
    """
    missing = missing_variables(names, environ)
    if missing:
        raise ConfigurationError(missing=missing)

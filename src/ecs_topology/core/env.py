"""Env file helpers."""

import os
from collections.abc import Mapping
from pathlib import Path

from dotenv import dotenv_values

DEFAULT_ENV_FILE = ".env"


def read_env_file(path: Path) -> dict[str, str]:
    """Read key/value pairs from an env file.

    Args:
        path: Path to the env file.

    Returns:
        Parsed key/value pairs. Keys without a value are skipped.
    """
    if not path.exists():
        return {}
    return {key: value for key, value in dotenv_values(path).items() if value is not None}


def load_env_values(
    env_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Load env file values and overlay environment variables.

    Empty values count as unset, so they never override the env file.

    Args:
        env_file: Env file to read. Defaults to `.env` in the working directory.
        environ: Environment to overlay. Defaults to the process environment.

    Returns:
        Combined env file and environment variable values.
    """
    path = env_file if env_file is not None else Path(DEFAULT_ENV_FILE)
    values = {key: value for key, value in read_env_file(path).items() if value.strip()}
    source = os.environ if environ is None else environ
    for key, value in source.items():
        if value and value.strip():
            values[key] = value
    return values

"""Tests for the topology CLI."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from ecs_topology.cli.main import cli
from ecs_topology.core.settings import EnvConfig

ENV_NAMES = [field.alias for field in EnvConfig.model_fields.values() if field.alias] + [
    "ENV_FILE",
    "APP_IMAGE_TAG_POLICY",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the process environment from leaking into the loaded configuration."""
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _write_env(path: Path, values: dict[str, str]) -> Path:
    path.write_text("".join(f"{key}={value}\n" for key, value in values.items()))
    return path


def test_synth_writes_terraform(tmp_path: Path, base_env: dict[str, str]) -> None:
    env_file = _write_env(tmp_path / ".env", base_env)
    output = tmp_path / "cdktf.out" / "stack.tf.json"

    result = CliRunner().invoke(
        cli, ["--env-file", str(env_file), "synth", "--output", str(output)]
    )

    assert result.exit_code == 0, result.output
    document = json.loads(output.read_text())
    assert "public_subnet_a" in document["resource"]["aws_subnet"]
    assert document["output"]["appUrl"]["value"] == "http://${aws_lb.alb.dns_name}/health"
    assert "albDnsName" in result.output


def test_missing_variables_exit_with_configuration_code(
    tmp_path: Path, base_env: dict[str, str]
) -> None:
    values = {
        key: value
        for key, value in base_env.items()
        if key not in {"AWS_ACCOUNT_ID", "TF_STATE_BUCKET"}
    }
    env_file = _write_env(tmp_path / ".env", values)
    output = tmp_path / "stack.tf.json"

    result = CliRunner().invoke(
        cli, ["--env-file", str(env_file), "synth", "--output", str(output)]
    )

    assert result.exit_code == 2
    assert "AWS_ACCOUNT_ID" in result.output
    assert "TF_STATE_BUCKET" in result.output
    assert not output.exists()


def test_environment_overrides_env_file(
    tmp_path: Path, base_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = _write_env(tmp_path / ".env", base_env)
    monkeypatch.setenv("APP_CLUSTER_NAME", "override")

    result = CliRunner().invoke(cli, ["--env-file", str(env_file), "validate"])

    assert result.exit_code == 0, result.output
    assert "override" in result.output


def test_image_tag_policy_option(tmp_path: Path, base_env: dict[str, str]) -> None:
    values = {key: value for key, value in base_env.items() if key != "APP_IMAGE_TAG"}
    env_file = _write_env(tmp_path / ".env", values)
    runner = CliRunner()

    required = runner.invoke(cli, ["--env-file", str(env_file), "validate"])
    defaulted = runner.invoke(
        cli, ["--env-file", str(env_file), "--image-tag-policy", "default-latest", "validate"]
    )

    assert required.exit_code == 2
    assert "APP_IMAGE_TAG" in required.output
    assert defaulted.exit_code == 0, defaulted.output
    assert "latest" in defaulted.output


def test_outputs_lists_https_url(tmp_path: Path, https_env: dict[str, str]) -> None:
    env_file = _write_env(tmp_path / ".env", https_env)

    result = CliRunner().invoke(cli, ["--env-file", str(env_file), "outputs"])

    assert result.exit_code == 0, result.output
    assert "httpsUrl" in result.output
    assert "HTTPS_ENABLED" in result.output


def test_unknown_image_tag_policy_exits_with_configuration_code(
    tmp_path: Path, base_env: dict[str, str], monkeypatch: pytest.MonkeyPatch
) -> None:
    env_file = _write_env(tmp_path / ".env", base_env)
    monkeypatch.setenv("APP_IMAGE_TAG_POLICY", "bogus")

    result = CliRunner().invoke(cli, ["--env-file", str(env_file), "validate"])

    assert result.exit_code == 2
    assert "APP_IMAGE_TAG_POLICY" in result.output

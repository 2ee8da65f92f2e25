"""CLI entrypoint for topology synthesis."""

import logging
from pathlib import Path

import click

from ecs_topology.cli.errors import report_error
from ecs_topology.cli.ui import console, outputs_table, report_step
from ecs_topology.core import (
    ConfigurationError,
    EnvConfig,
    ImageTagPolicy,
    TopologyConstructionError,
    load_config,
    synthesize,
    write_terraform,
)

DEFAULT_OUTPUT = Path("cdktf.out") / "stack.tf.json"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Log every declared resource.")
@click.option(
    "--env-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Env file to load. Defaults to ENV_FILE, then .env.",
)
@click.option(
    "--image-tag-policy",
    type=click.Choice([policy.value for policy in ImageTagPolicy]),
    default=None,
    help="Whether APP_IMAGE_TAG is required or defaults to 'latest'.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    env_file: Path | None,
    image_tag_policy: str | None,
) -> None:
    """Synthesize the VPC, load balancer, and ECS service topology."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)
    ctx.ensure_object(dict)
    ctx.obj["env_file"] = env_file
    ctx.obj["image_tag_policy"] = ImageTagPolicy(image_tag_policy) if image_tag_policy else None


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Check the configuration without declaring any resource."""
    config = _load(ctx)
    console.print(
        f"[green]Configuration is valid[/green] "
        f"(cluster {config.cluster_name} in {config.region}, image tag {config.image_tag})"
    )


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Where to write the Terraform JSON.",
)
@click.pass_context
def synth(ctx: click.Context, output: Path) -> None:
    """Synthesize the topology and write it as Terraform JSON."""
    config = _load(ctx)
    try:
        topology = synthesize(config, reporter=report_step)
    except (ConfigurationError, TopologyConstructionError) as exc:
        raise click.exceptions.Exit(report_error(exc)) from exc

    path = write_terraform(topology, output)
    console.print(f"[green]Wrote {len(topology.nodes)} resources to {path}[/green]")
    console.print(outputs_table(topology))


@cli.command()
@click.pass_context
def outputs(ctx: click.Context) -> None:
    """Print the topology outputs without writing anything."""
    config = _load(ctx)
    try:
        topology = synthesize(config)
    except (ConfigurationError, TopologyConstructionError) as exc:
        raise click.exceptions.Exit(report_error(exc)) from exc
    console.print(outputs_table(topology))


def _load(ctx: click.Context) -> EnvConfig:
    """Load the configuration, exiting with a report on failure."""
    try:
        return load_config(
            env_file=ctx.obj.get("env_file"),
            image_tag_policy=ctx.obj.get("image_tag_policy"),
        )
    except ConfigurationError as exc:
        raise click.exceptions.Exit(report_error(exc)) from exc


def main() -> None:
    """Run the CLI."""
    cli()

"""Error reporting for the CLI."""

from ecs_topology.cli.ui import console
from ecs_topology.core import ConfigurationError, TopologyConstructionError

EXIT_CONFIGURATION = 2
EXIT_CONSTRUCTION = 1


def report_error(exc: ConfigurationError | TopologyConstructionError) -> int:
    """Render a synthesis error and return the process exit code.

    Args:
        exc: Raised configuration or construction error.

    Returns:
        The exit code for the error.
    """
    if isinstance(exc, ConfigurationError):
        console.print(f"[red]Configuration error: {exc}[/red]")
        if exc.missing:
            console.print("[dim]Set the missing variables in the env file or environment.[/dim]")
        return EXIT_CONFIGURATION

    console.print(f"[red]Topology construction failed: {exc}[/red]")
    console.print("[dim]This is a defect in the builders, not in your configuration.[/dim]")
    return EXIT_CONSTRUCTION

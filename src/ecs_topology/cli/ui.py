"""Shared Rich console and tables for the CLI."""

from rich.console import Console
from rich.table import Table

from ecs_topology.core import Topology, render_value

console = Console()


def outputs_table(topology: Topology) -> Table:
    """Build a table of the topology outputs.

    Args:
        topology: Synthesized topology.

    Returns:
        A two-column table of output names and rendered values.
    """
    types = {node.logical_id: node.type for node in topology.nodes}
    table = Table(title=f"Outputs ({topology.listener_mode.value})")
    table.add_column("Output", style="cyan")
    table.add_column("Value")
    for name, value in topology.outputs.items():
        table.add_row(name, str(render_value(value, types)))
    return table


def report_step(message: str) -> None:
    """Print a synthesis progress message."""
    console.print(f"[dim]- {message}[/dim]")

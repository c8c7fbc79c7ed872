"""
Traceroute CLI commands.
"""

import click
from rich.console import Console
from rich.table import Table

from connectioncheck.config import get_config
from connectioncheck.trace.core import ProbeKind, run_probe, select_tool


@click.command("probe")
@click.argument("host")
@click.option("-t", "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Timeout in seconds (default: configured probe timeout)")
def probe_cmd(host: str, timeout: float | None):
    """Run a single traceroute and print its raw output.

    Examples:
        connectioncheck probe chicago.dathost.net
        connectioncheck probe 1.1.1.1 -t 30
    """
    console = Console()
    config = get_config()
    if timeout is None:
        timeout = config.probe_timeout

    with console.status(f"[cyan]Tracing route to {host}...[/cyan]"):
        outcome = run_probe(host, timeout, tools=config.trace_tools)

    if outcome.kind is not ProbeKind.NONE:
        console.print(f"[red]Error:[/red] {outcome.error}")
        raise SystemExit(1)

    console.print(outcome.output, markup=False, highlight=False)
    console.print(f"[dim]Completed in {outcome.duration.total_seconds():.1f}s[/dim]")


@click.command("targets")
def targets_cmd():
    """List the configured traceroute targets.

    Examples:
        connectioncheck targets
    """
    console = Console()
    config = get_config()

    table = Table(title=f"Targets ({len(config.targets)})", box=None)
    table.add_column("#", style="cyan", width=4)
    table.add_column("Hostname", style="white")

    for index, host in enumerate(config.targets, 1):
        table.add_row(str(index), host)

    console.print(table)

    tool = select_tool(config.trace_tools)
    if tool:
        console.print(f"\n[dim]Using {tool} for probes[/dim]")
    else:
        console.print(f"\n[yellow]No traceroute tool found (tried: {', '.join(config.trace_tools)})[/yellow]")

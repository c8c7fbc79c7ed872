"""
Public IP CLI commands.
"""

import click
from rich.console import Console

from connectioncheck.config import get_config
from connectioncheck.ip.core import IPLookupError, resolve_public_ip


@click.command("myip")
@click.option("-t", "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Lookup timeout in seconds")
def myip_cmd(timeout: float | None):
    """Show the public IP address that will appear in the report.

    Examples:
        connectioncheck myip
    """
    console = Console()
    config = get_config()

    if timeout is None:
        timeout = config.ip_lookup_timeout

    with console.status("[cyan]Looking up public IP...[/cyan]"):
        try:
            ip = resolve_public_ip(config.ip_lookup_url, timeout)
        except IPLookupError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)

    console.print(f"[cyan]Public IP Address:[/cyan] [green]{ip}[/green]")

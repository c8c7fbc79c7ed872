"""
ConnectionChecker command line interface.

Running the bare command (or `connectioncheck run`) performs the full
check: pick a save location, look up the public IP, trace every target
in parallel, and write the report.
"""

from datetime import datetime
from functools import partial
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from connectioncheck import __version__
from connectioncheck.config import get_config, load_targets_file
from connectioncheck.ip.cli import myip_cmd
from connectioncheck.ip.core import resolve_public_ip_or_placeholder
from connectioncheck.logging_config import configure_logging, get_logger
from connectioncheck.report.dialog import ensure_extension, select_output_path
from connectioncheck.report.writer import (
    ReportHeader,
    ReportWriteError,
    create_report_file,
    describe_timeout,
    format_duration,
    render_report,
    summarize,
    write_report,
)
from connectioncheck.trace.cli import probe_cmd, targets_cmd
from connectioncheck.trace.core import ProbeOutcome, run_probe
from connectioncheck.trace.runner import run_concurrent_probes

logger = get_logger(__name__)


@click.group(invoke_without_command=True)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--log-file", type=click.Path(dir_okay=False, path_type=Path),
              help="Also write logs to this file")
@click.version_option(__version__, prog_name="connectioncheck")
@click.pass_context
def main(ctx: click.Context, debug: bool, log_file: Path | None):
    """Network path diagnostics for support requests.

    Examples:
        connectioncheck
        connectioncheck run -o results.txt --no-pause
        connectioncheck probe chicago.dathost.net
    """
    configure_logging(debug=debug, log_file=log_file)

    try:
        get_config()
    except ValueError as e:
        Console().print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


def _progress_printer(console: Console, timeout: float):
    timeout_desc = describe_timeout(timeout)

    def on_progress(completed: int, total: int, outcome: ProbeOutcome) -> None:
        host = escape(outcome.target)
        prefix = f"[{completed}/{total}]"
        if outcome.timed_out:
            console.print(f"[yellow]TIMEOUT[/yellow] {escape(prefix)} {host} - Timed out (exceeded {timeout_desc} limit)")
        elif outcome.failed:
            console.print(f"[red]FAILED[/red]  {escape(prefix)} {host} - Error: {escape(outcome.error or '')}")
        else:
            console.print(
                f"[green]OK[/green]      {escape(prefix)} {host} - "
                f"Completed in {format_duration(outcome.duration)}"
            )

    return on_progress


@main.command("run")
@click.option("-o", "--output", type=click.Path(dir_okay=False, path_type=Path),
              help="Report path (skips the save dialog)")
@click.option("-t", "--timeout", type=click.FloatRange(min=0, min_open=True), default=None,
              help="Per-traceroute timeout in seconds (default: 120)")
@click.option("--targets-file", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="File with one hostname per line, replacing the built-in list")
@click.option("--no-pause", is_flag=True, help="Exit without waiting for Enter")
def run(output: Path | None = None, timeout: float | None = None,
        targets_file: Path | None = None, no_pause: bool = False):
    """Trace every target and save the combined report.

    Examples:
        connectioncheck run
        connectioncheck run -o ~/Desktop/results.txt
        connectioncheck run --targets-file hosts.txt -t 60
    """
    console = Console()

    targets = None
    if targets_file is not None:
        try:
            targets = load_targets_file(targets_file)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--targets-file")

    config = get_config().with_overrides(targets=targets, probe_timeout=timeout)

    console.print(f"[bold cyan]=== {escape(config.brand)} ConnectionChecker ===[/bold cyan]")
    console.print("This tool will run traceroutes to game servers worldwide.")
    console.print(f"Total locations to test: {len(config.targets)}\n")

    if output is not None:
        path = ensure_extension(output, config.report_extension)
    else:
        console.print("Opening file save dialog...")
        console.print("[dim]Please choose where to save the traceroute results file.[/dim]")
        path = select_output_path(config.brand, config.report_extension)
        if path is None:
            console.print("[yellow]File selection cancelled, nothing was saved.[/yellow]")
            raise SystemExit(1)

    console.print(f"Selected file: [cyan]{escape(str(path))}[/cyan]\n")

    try:
        handle = create_report_file(path)
    except ReportWriteError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)

    with handle:
        generated_at = datetime.now().astimezone()

        with console.status("[cyan]Looking up public IP...[/cyan]"):
            public_ip = resolve_public_ip_or_placeholder(
                config.ip_lookup_url, config.ip_lookup_timeout,
            )

        console.print(f"Starting {len(config.targets)} traceroutes...")
        console.print("[dim]This may take several minutes depending on your network connection.[/dim]")
        console.print("[dim]Please do not close this window until the traceroutes are complete.[/dim]\n")

        started = datetime.now().astimezone()
        with console.status("[cyan]Waiting for traceroutes to finish...[/cyan]"):
            results = run_concurrent_probes(
                config.targets,
                config.probe_timeout,
                probe=partial(run_probe, tools=config.trace_tools),
                on_progress=_progress_printer(console, config.probe_timeout),
            )
        finished_at = datetime.now().astimezone()

        console.print(
            f"\n[green]All traceroutes completed in "
            f"{format_duration(finished_at - started)}[/green]"
        )

        header = ReportHeader(
            generated_at=generated_at,
            public_ip=public_ip,
            probe_timeout=config.probe_timeout,
        )
        text = render_report(results, header, finished_at, brand=config.brand)

        try:
            write_report(handle, text)
        except ReportWriteError as e:
            console.print(f"[red]Error:[/red] {escape(str(e))}")
            raise SystemExit(1)

    logger.info("Report written to %s", path)

    summary = summarize(results)
    console.print(f"\n[green]Traceroute results saved to:[/green] {escape(str(path))}")
    console.print(
        f"\n[bold]IMPORTANT:[/bold] Please send the results file to {escape(config.brand)} support as requested."
    )
    console.print(Panel(
        f"[green]Successful:[/green] {summary.successful}/{summary.total}\n"
        f"[yellow]Timed out:[/yellow] {summary.timed_out}/{summary.total}\n"
        f"[red]Failed:[/red] {summary.failed}/{summary.total}",
        title="Results Summary",
    ))

    if not no_pause:
        click.pause("Press Enter to close this window...")


main.add_command(probe_cmd)
main.add_command(targets_cmd)
main.add_command(myip_cmd)


if __name__ == "__main__":
    main()

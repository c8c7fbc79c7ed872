"""
Plain-text report rendering.

The report is built in one pass from a complete ResultSet and written to
disk once. Sections appear in target order regardless of which probe
finished first.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, TextIO

from connectioncheck.config import DEFAULT_BRAND
from connectioncheck.trace.core import ProbeOutcome

RULE_WIDTH = 80
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S %Z"
CLOCK_FORMAT = "%H:%M:%S"


class ReportWriteError(Exception):
    """The report file could not be created or written."""


@dataclass
class ReportHeader:
    """Values shown above the per-target sections."""
    generated_at: datetime
    public_ip: str
    probe_timeout: float


@dataclass
class RunSummary:
    """Outcome counts for a finished run."""
    total: int = 0
    successful: int = 0
    timed_out: int = 0
    failed: int = 0


def summarize(outcomes: Iterable[ProbeOutcome]) -> RunSummary:
    summary = RunSummary()
    for outcome in outcomes:
        summary.total += 1
        if outcome.timed_out:
            summary.timed_out += 1
        elif outcome.failed:
            summary.failed += 1
        else:
            summary.successful += 1
    return summary


def format_duration(value: timedelta | float) -> str:
    """Round to whole seconds and format like '1m5s' or '0s'."""
    seconds = value.total_seconds() if isinstance(value, timedelta) else float(value)
    negative = seconds < 0
    total = int(abs(seconds) + 0.5)

    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)

    if hours:
        text = f"{hours}h{minutes}m{secs}s"
    elif minutes:
        text = f"{minutes}m{secs}s"
    else:
        text = f"{secs}s"
    return f"-{text}" if negative and total else text


def describe_timeout(seconds: float) -> str:
    """'2-minute' for 120, '45-second' for 45."""
    if seconds >= 60 and float(seconds) % 60 == 0:
        return f"{int(seconds // 60)}-minute"
    if float(seconds).is_integer():
        return f"{int(seconds)}-second"
    return f"{seconds:g}-second"


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT).rstrip()


def _render_section(outcome: ProbeOutcome, timeout_desc: str) -> list[str]:
    banner = f"TRACEROUTE TO: {outcome.target}"
    lines = [
        banner,
        "~" * len(banner),
        f"Started at: {outcome.started_at.strftime(CLOCK_FORMAT)}",
        f"Completed at: {outcome.finished_at.strftime(CLOCK_FORMAT)}",
        f"Duration: {format_duration(outcome.duration)}",
    ]

    if outcome.timed_out:
        lines.append(f"Status: TIMED OUT (exceeded {timeout_desc} limit)")
    else:
        lines.append("Status: COMPLETED")
    lines.append("")

    if outcome.error is not None:
        lines.append(f"Error running traceroute to {outcome.target}: {outcome.error}")
    else:
        lines.append(outcome.output.rstrip("\n"))

    lines.append("")
    lines.append("-" * RULE_WIDTH)
    lines.append("")
    return lines


def render_report(
    outcomes: Iterable[ProbeOutcome],
    header: ReportHeader,
    finished_at: datetime,
    brand: str = DEFAULT_BRAND,
) -> str:
    """Render the full report text.

    Args:
        outcomes: Probe outcomes in target order (a ResultSet works)
        header: Timestamp, public IP and timeout for the header block
        finished_at: When the last probe finished
        brand: Support team name used in the title and notes

    Returns:
        The report as a single string
    """
    outcomes = list(outcomes)
    timeout_desc = describe_timeout(header.probe_timeout)

    title = f"{brand} ConnectionChecker Results - {format_timestamp(header.generated_at)}"
    lines = [
        title,
        "=" * len(title),
        "",
        f"Public IP Address: {header.public_ip}",
        "",
        f"NOTE: This report contains network diagnostic information for {brand} support.",
        f"Please send this file to {brand} support as requested.",
        "",
        f"TIMEOUT SETTING: Each traceroute has a {timeout_desc} timeout limit.",
        "",
        "-" * RULE_WIDTH,
        "",
    ]

    for outcome in outcomes:
        lines.extend(_render_section(outcome, timeout_desc))

    summary = summarize(outcomes)
    lines.extend([
        "SUMMARY",
        f"Successful: {summary.successful}/{summary.total}",
        f"Timed out: {summary.timed_out}/{summary.total}",
        f"Failed: {summary.failed}/{summary.total}",
        "",
        f"All traceroutes completed at: {format_timestamp(finished_at)}",
        "",
        "=" * RULE_WIDTH,
        f"END OF REPORT - Please send this file to {brand} support",
    ])

    return "\n".join(lines) + "\n"


def create_report_file(path: str | Path) -> TextIO:
    """Open the report destination for writing, truncating it."""
    try:
        return open(path, "w", encoding="utf-8", newline="")
    except OSError as e:
        raise ReportWriteError(f"Failed to create output file {path}: {e}") from e


def write_report(handle: TextIO, text: str) -> None:
    try:
        handle.write(text)
        handle.flush()
    except OSError as e:
        raise ReportWriteError(f"Failed to write report: {e}") from e

"""
Report Module

Renders the traceroute results into a plain-text report and asks the
user where to save it.
"""

from connectioncheck.report.dialog import (
    DialogUnavailable,
    default_filename,
    ensure_extension,
    select_output_path,
)
from connectioncheck.report.writer import (
    ReportHeader,
    ReportWriteError,
    RunSummary,
    create_report_file,
    describe_timeout,
    format_duration,
    render_report,
    summarize,
    write_report,
)

__all__ = [
    "DialogUnavailable",
    "default_filename",
    "ensure_extension",
    "select_output_path",
    "ReportHeader",
    "ReportWriteError",
    "RunSummary",
    "create_report_file",
    "describe_timeout",
    "format_duration",
    "render_report",
    "summarize",
    "write_report",
]

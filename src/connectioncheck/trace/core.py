"""
Core traceroute probe.

A probe runs the platform's traceroute utility against one host and keeps
its output verbatim. Failures are recorded on the outcome, never raised.
"""

import shutil
import subprocess
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from connectioncheck.config import TRACE_TOOLS
from connectioncheck.logging_config import get_logger

logger = get_logger(__name__)


class ProbeKind(str, Enum):
    """How a probe finished."""
    NONE = "none"                # Completed, output captured
    TIMEOUT = "timeout"          # Deadline hit, output discarded
    ERROR = "error"              # Tool ran but failed
    UNAVAILABLE = "unavailable"  # No traceroute tool on PATH


@dataclass(frozen=True)
class ProbeOutcome:
    """Result of a single traceroute against one target."""
    target: str
    index: int
    started_at: datetime
    finished_at: datetime
    output: str = ""
    kind: ProbeKind = ProbeKind.NONE
    error: str | None = None

    @property
    def duration(self) -> timedelta:
        return self.finished_at - self.started_at

    @property
    def timed_out(self) -> bool:
        return self.kind is ProbeKind.TIMEOUT

    @property
    def succeeded(self) -> bool:
        return self.kind is ProbeKind.NONE

    @property
    def failed(self) -> bool:
        """Errored without timing out (includes a missing tool)."""
        return self.kind in (ProbeKind.ERROR, ProbeKind.UNAVAILABLE)


def select_tool(candidates: tuple[str, ...] = TRACE_TOOLS) -> str | None:
    """Return the first traceroute program found on PATH, if any."""
    for name in candidates:
        if shutil.which(name):
            return name
    return None


def _now() -> datetime:
    return datetime.now().astimezone()


def _format_seconds(seconds: float) -> str:
    if float(seconds).is_integer():
        return f"{int(seconds)}s"
    return f"{seconds:g}s"


def _missing_tool_message(tools: tuple[str, ...]) -> str:
    if len(tools) == 2:
        return f"neither {tools[0]} nor {tools[1]} command found"
    return f"none of {', '.join(tools)} found on PATH"


def run_probe(
    host: str,
    timeout: float,
    index: int = 0,
    tools: tuple[str, ...] = TRACE_TOOLS,
) -> ProbeOutcome:
    """Trace the route to a host, bounded by a wall-clock timeout.

    Spawns exactly one process. On timeout the process is killed and any
    partial output is dropped.
    """
    started_at = _now()

    tool = select_tool(tools)
    if tool is None:
        return ProbeOutcome(
            target=host,
            index=index,
            started_at=started_at,
            finished_at=_now(),
            kind=ProbeKind.UNAVAILABLE,
            error=_missing_tool_message(tools),
        )

    cmd = [tool, host]
    logger.debug("Running %s", " ".join(cmd))

    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", host, timeout)
        return ProbeOutcome(
            target=host,
            index=index,
            started_at=started_at,
            finished_at=_now(),
            kind=ProbeKind.TIMEOUT,
            error=f"traceroute timed out after {_format_seconds(timeout)}",
        )
    except OSError as e:
        return ProbeOutcome(
            target=host,
            index=index,
            started_at=started_at,
            finished_at=_now(),
            kind=ProbeKind.ERROR,
            error=f"command execution failed: {e}",
        )

    finished_at = _now()

    if proc.returncode != 0:
        detail = f"exit status {proc.returncode}"
        stderr = (proc.stderr or "").strip()
        if stderr:
            detail += f": {stderr.splitlines()[0]}"
        return ProbeOutcome(
            target=host,
            index=index,
            started_at=started_at,
            finished_at=finished_at,
            kind=ProbeKind.ERROR,
            error=f"command execution failed: {detail}",
        )

    return ProbeOutcome(
        target=host,
        index=index,
        started_at=started_at,
        finished_at=finished_at,
        output=proc.stdout or "",
    )

"""
Traceroute Module

Runs the platform traceroute utility against a set of targets in
parallel and collects the outcomes in target order.
"""

from connectioncheck.trace.core import (
    ProbeKind,
    ProbeOutcome,
    run_probe,
    select_tool,
)
from connectioncheck.trace.runner import (
    CompletionCounter,
    IncompleteResultSetError,
    ResultSet,
    ResultSetError,
    run_concurrent_probes,
)

__all__ = [
    "ProbeKind",
    "ProbeOutcome",
    "run_probe",
    "select_tool",
    "CompletionCounter",
    "IncompleteResultSetError",
    "ResultSet",
    "ResultSetError",
    "run_concurrent_probes",
]

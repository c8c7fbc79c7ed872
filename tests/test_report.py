import time
from datetime import timedelta

import pytest

from conftest import BASE_TIME
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
from connectioncheck.trace.core import ProbeKind
from connectioncheck.trace.runner import run_concurrent_probes


@pytest.fixture
def header():
    return ReportHeader(generated_at=BASE_TIME, public_ip="203.0.113.7", probe_timeout=120)


@pytest.mark.parametrize("seconds, expected", [
    (0, "0s"),
    (0.4, "0s"),
    (0.5, "1s"),
    (59.6, "1m0s"),
    (65, "1m5s"),
    (120, "2m0s"),
    (3725, "1h2m5s"),
    (timedelta(seconds=12.2), "12s"),
])
def test_format_duration(seconds, expected):
    assert format_duration(seconds) == expected


def test_describe_timeout():
    assert describe_timeout(120) == "2-minute"
    assert describe_timeout(60) == "1-minute"
    assert describe_timeout(90) == "90-second"
    assert describe_timeout(2.5) == "2.5-second"


def test_sections_follow_target_order_not_completion_order(header, outcome_factory):
    delays = {"A": 0.2, "B": 0.35, "C": 0.0}

    def probe(host, timeout, index=0):
        time.sleep(delays[host])
        return outcome_factory(host, index, output=f"route to {host}\n")

    results = run_concurrent_probes(["A", "B", "C"], timeout=5, probe=probe)
    text = render_report(results, header, BASE_TIME + timedelta(minutes=1))

    positions = [text.index(f"TRACEROUTE TO: {host}") for host in ("A", "B", "C")]
    assert positions == sorted(positions)


def test_header_and_footer(header, outcome_factory):
    text = render_report(
        [outcome_factory("chicago.dathost.net", output="1  hop\n")],
        header,
        BASE_TIME + timedelta(minutes=2),
        brand="Refrag",
    )
    lines = text.splitlines()

    assert lines[0] == "Refrag ConnectionChecker Results - 2025-03-14 09:30:00 UTC"
    assert lines[1] == "=" * len(lines[0])
    assert "Public IP Address: 203.0.113.7" in lines
    assert "TIMEOUT SETTING: Each traceroute has a 2-minute timeout limit." in lines
    assert "All traceroutes completed at: 2025-03-14 09:32:00 UTC" in lines
    assert lines[-1] == "END OF REPORT - Please send this file to Refrag support"
    assert lines[-2] == "=" * 80


def test_section_layout(header, outcome_factory):
    outcome = outcome_factory("miami.dathost.net", output="1  10.0.0.1\n2  10.0.0.2\n", seconds=7.6)
    text = render_report([outcome], header, BASE_TIME)

    expected = "\n".join([
        "TRACEROUTE TO: miami.dathost.net",
        "~" * len("TRACEROUTE TO: miami.dathost.net"),
        "Started at: 09:30:00",
        "Completed at: 09:30:07",
        "Duration: 8s",
        "Status: COMPLETED",
        "",
        "1  10.0.0.1",
        "2  10.0.0.2",
        "",
        "-" * 80,
    ])
    assert expected in text


def test_end_to_end_mixed_outcomes(header, outcome_factory):
    planned = {
        "one.example": dict(kind=ProbeKind.NONE, output="hop1\nhop2", seconds=1),
        "two.example": dict(kind=ProbeKind.TIMEOUT, error="traceroute timed out after 120s", seconds=120),
        "three.example": dict(kind=ProbeKind.ERROR, error="command not found", seconds=0),
    }

    def probe(host, timeout, index=0):
        return outcome_factory(host, index, **planned[host])

    results = run_concurrent_probes(list(planned), timeout=120, probe=probe)
    text = render_report(results, header, BASE_TIME + timedelta(minutes=2))

    sections = text.split("TRACEROUTE TO: ")[1:]
    assert [s.splitlines()[0] for s in sections] == ["one.example", "two.example", "three.example"]

    assert "Status: COMPLETED" in sections[0]
    assert "hop1\nhop2" in sections[0]

    assert "Status: TIMED OUT (exceeded 2-minute limit)" in sections[1]
    assert "Duration: 2m0s" in sections[1]

    assert "Status: COMPLETED" in sections[2]
    assert "Error running traceroute to three.example: command not found" in sections[2]

    summary = summarize(results)
    assert (summary.successful, summary.timed_out, summary.failed, summary.total) == (1, 1, 1, 3)
    assert "Successful: 1/3" in text
    assert "Timed out: 1/3" in text
    assert "Failed: 1/3" in text


def test_unavailable_tool_counts_as_failed(outcome_factory):
    summary = summarize([
        outcome_factory("a", kind=ProbeKind.UNAVAILABLE, error="neither traceroute nor tracert command found"),
        outcome_factory("b"),
    ])
    assert summary.failed == 1
    assert summary.successful == 1


def test_render_is_deterministic(header, outcome_factory):
    outcomes = [outcome_factory("a", 0, output="x"), outcome_factory("b", 1, output="y")]
    finished = BASE_TIME + timedelta(seconds=5)
    assert render_report(outcomes, header, finished) == render_report(outcomes, header, finished)


def test_write_report_utf8(tmp_path):
    path = tmp_path / "report.txt"
    with create_report_file(path) as handle:
        write_report(handle, "São Paulo hop\n")

    assert path.read_text(encoding="utf-8") == "São Paulo hop\n"


def test_create_report_file_failure_is_fatal(tmp_path):
    with pytest.raises(ReportWriteError, match="Failed to create output file"):
        create_report_file(tmp_path / "missing-dir" / "report.txt")

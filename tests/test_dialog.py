from datetime import datetime
from pathlib import Path

import click

from connectioncheck.report import dialog
from connectioncheck.report.dialog import (
    DialogUnavailable,
    default_filename,
    ensure_extension,
    select_output_path,
)

NOW = datetime(2025, 3, 14, 9, 30, 5)


def _unexpected_prompt(default_path):
    raise AssertionError("terminal prompt should not be used")


def test_default_filename_embeds_timestamp():
    assert default_filename(NOW) == "refrag_traceroute_results_2025-03-14_09-30-05.txt"
    assert default_filename(NOW, brand="Acme Gaming") == "acme_gaming_traceroute_results_2025-03-14_09-30-05.txt"


def test_ensure_extension():
    assert ensure_extension("/tmp/results") == Path("/tmp/results.txt")
    assert ensure_extension("/tmp/results.txt") == Path("/tmp/results.txt")
    assert ensure_extension("/tmp/results.log") == Path("/tmp/results.log")


def test_dialog_choice_gets_extension(monkeypatch, tmp_path):
    seen = {}

    def fake_dialog(title, initial_dir, initial_file, extension):
        seen.update(title=title, initial_dir=initial_dir, initial_file=initial_file)
        return str(tmp_path / "my-report")

    monkeypatch.setattr(dialog, "_ask_with_dialog", fake_dialog)

    chosen = select_output_path(initial_dir=tmp_path, now=NOW)

    assert chosen == tmp_path / "my-report.txt"
    assert seen["title"] == "Save Refrag Traceroute Results"
    assert seen["initial_dir"] == tmp_path
    assert seen["initial_file"] == "refrag_traceroute_results_2025-03-14_09-30-05.txt"


def test_dialog_cancel_returns_none(monkeypatch, tmp_path):
    monkeypatch.setattr(dialog, "_ask_with_dialog", lambda *args: None)
    monkeypatch.setattr(dialog, "_ask_in_terminal", _unexpected_prompt)

    assert select_output_path(initial_dir=tmp_path) is None


def test_falls_back_to_terminal_without_display(monkeypatch, tmp_path):
    def no_display(*args):
        raise DialogUnavailable("no display name and no $DISPLAY environment variable")

    prompted = {}

    def fake_prompt(default_path):
        prompted["default"] = default_path
        return str(tmp_path / "picked")

    monkeypatch.setattr(dialog, "_ask_with_dialog", no_display)
    monkeypatch.setattr(dialog, "_ask_in_terminal", fake_prompt)

    chosen = select_output_path(initial_dir=tmp_path, now=NOW)

    assert chosen == tmp_path / "picked.txt"
    assert prompted["default"] == tmp_path / "refrag_traceroute_results_2025-03-14_09-30-05.txt"


def test_terminal_abort_is_cancel(monkeypatch, tmp_path):
    def no_display(*args):
        raise DialogUnavailable("tkinter is not installed")

    def abort(default_path):
        raise click.Abort()

    monkeypatch.setattr(dialog, "_ask_with_dialog", no_display)
    monkeypatch.setattr(dialog, "_ask_in_terminal", abort)

    assert select_output_path(initial_dir=tmp_path) is None

"""
Save-location picker for the report file.

Uses the native save dialog when a display is available and falls back
to a terminal prompt otherwise. Returns None when the user cancels.
"""

from datetime import datetime
from pathlib import Path

import click

from connectioncheck.config import DEFAULT_BRAND, REPORT_EXTENSION
from connectioncheck.logging_config import get_logger

logger = get_logger(__name__)


def default_filename(now: datetime | None = None, brand: str = DEFAULT_BRAND,
                     extension: str = REPORT_EXTENSION) -> str:
    now = now or datetime.now()
    prefix = brand.strip().lower().replace(" ", "_") or "connectioncheck"
    return f"{prefix}_traceroute_results_{now.strftime('%Y-%m-%d_%H-%M-%S')}{extension}"


def ensure_extension(path: str | Path, extension: str = REPORT_EXTENSION) -> Path:
    """Append the report extension when the chosen name has none."""
    path = Path(path)
    if not path.suffix:
        path = path.with_name(path.name + extension)
    return path


class DialogUnavailable(Exception):
    """No native dialog can be shown (no Tk, or no display)."""


def _ask_with_dialog(title: str, initial_dir: Path, initial_file: str,
                     extension: str) -> str | None:
    """Show the native save dialog and return the chosen path, if any."""
    try:
        import tkinter
        from tkinter import filedialog
    except ImportError as e:
        raise DialogUnavailable(f"tkinter is not installed: {e}") from e

    try:
        root = tkinter.Tk()
    except tkinter.TclError as e:
        raise DialogUnavailable(str(e)) from e

    root.withdraw()
    root.attributes("-topmost", True)
    try:
        chosen = filedialog.asksaveasfilename(
            parent=root,
            title=title,
            initialdir=str(initial_dir),
            initialfile=initial_file,
            defaultextension=extension,
            filetypes=[("Text files", f"*{extension}"), ("All files", "*")],
        )
    finally:
        root.destroy()
    return chosen or None


def _ask_in_terminal(default_path: Path) -> str | None:
    answer = click.prompt(
        "Save report to",
        default=str(default_path),
        show_default=True,
    )
    return answer.strip() or None


def select_output_path(
    brand: str = DEFAULT_BRAND,
    extension: str = REPORT_EXTENSION,
    initial_dir: Path | None = None,
    now: datetime | None = None,
) -> Path | None:
    """Ask the user where to save the report.

    Returns:
        The chosen path with the report extension enforced, or None if cancelled
    """
    initial_dir = initial_dir or Path.home()
    initial_file = default_filename(now, brand, extension)
    title = f"Save {brand} Traceroute Results"

    try:
        chosen = _ask_with_dialog(title, initial_dir, initial_file, extension)
        return ensure_extension(chosen, extension) if chosen else None
    except DialogUnavailable as e:
        logger.info("Save dialog unavailable (%s), prompting in terminal", e)

    try:
        chosen = _ask_in_terminal(initial_dir / initial_file)
    except click.Abort:
        return None
    return ensure_extension(chosen, extension) if chosen else None

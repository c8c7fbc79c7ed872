"""Allow `python -m connectioncheck`."""

from connectioncheck.cli import main

main(prog_name="connectioncheck")

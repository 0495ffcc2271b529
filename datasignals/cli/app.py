"""Main Typer application — imports and registers all CLI commands.

Entry point: ``datasignals`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer

from datasignals.cli.commands.check import check_group_cmd, check_signal_cmd
from datasignals.cli.commands.demo import demo_cmd
from datasignals.config import config

app = typer.Typer(
    name="datasignals",
    help="Datasignals: in-process publish/subscribe signaling between chips.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="demo", help="Run a small scene of chips exchanging signals.")(demo_cmd)
app.command(name="check-signal", help="Check whether a signal name is valid.")(check_signal_cmd)
app.command(name="check-group", help="Parse a group name and show its scope.")(check_group_cmd)


def main() -> None:
    """CLI entry point."""
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app()


if __name__ == "__main__":
    main()

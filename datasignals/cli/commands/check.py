"""``datasignals check-signal`` / ``check-group`` — validate names."""

from __future__ import annotations

import typer
from rich.console import Console

from datasignals.core.errors import DataSignalError
from datasignals.models.groups import GroupName
from datasignals.models.signals import DEFAULT_SIGNAL, is_valid_signal

console = Console()


def check_signal_cmd(
    name: str = typer.Argument(..., help="Signal name to check."),
) -> None:
    """Report whether NAME can be sent, only listened to, or neither."""
    if is_valid_signal(name):
        console.print(f"[green]'{name}' is a valid signal name.[/green]")
    elif name == DEFAULT_SIGNAL:
        console.print(
            f"[yellow]'{name}' is the wildcard: listen only, cannot be sent.[/yellow]"
        )
    else:
        console.print(f"[red]Invalid data signal name '{name}'[/red]")
        raise typer.Exit(code=1)


def check_group_cmd(
    name: str = typer.Argument(..., help="Group name, optionally with :public or :private."),
) -> None:
    """Parse NAME and print its canonical form."""
    try:
        group = GroupName.parse(name)
    except DataSignalError as exc:
        console.print(f"[red]{type(exc).__name__}:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    console.print(f"[cyan]{group}[/cyan] (name={group.name}, scope={group.scope.value})")

"""``datasignals demo`` — run a small scene of chips exchanging signals.

Two players each own a couple of chips.  The chips join private and
public groups, register listeners (one on ``$default``, one that always
fails) and a few signals are sent to show group scoping, wildcard
delivery and failure counting.
"""

from __future__ import annotations

from typing import Any

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from datasignals.config import SignalsConfig
from datasignals.core.hub import SignalHub
from datasignals.host import Chip
from datasignals.models.signals import DEFAULT_SIGNAL, Vector

console = Console()


def demo_cmd(
    quiet_failures: bool = typer.Option(
        False,
        "--quiet-failures",
        help="Do not log failing listeners (they are still counted).",
    ),
) -> None:
    """Run the demo scene and print every delivery."""
    hub = SignalHub(SignalsConfig(log_delivery_failures=not quiet_failures))
    deliveries: list[tuple[str, str, str, str]] = []

    def recorder(label: str):
        def on_signal(signal: str, data: Any, sender: Chip) -> None:
            deliveries.append((label, signal, repr(data), repr(sender)))

        return on_signal

    def broken(signal: str, data: Any, sender: Chip) -> None:
        raise RuntimeError("listener crashed")

    alice_door = Chip("alice", name="door")
    alice_lamp = Chip("alice", name="lamp")
    bob_turret = Chip("bob", name="turret")
    bob_radar = Chip("bob", name="radar")

    hub.join("base", alice_door)
    hub.join("base", alice_lamp)
    hub.join("base", bob_turret)
    hub.join("alerts:public", alice_lamp)
    hub.join("alerts:public", bob_turret)

    hub.listen("OPEN", alice_door, recorder("door"))
    hub.listen(DEFAULT_SIGNAL, alice_lamp, recorder("lamp*"))
    hub.listen("ALARM", bob_turret, recorder("turret"))
    hub.listen("ALARM", bob_turret, broken)

    sends = [
        ("base", "OPEN", True, alice_door),
        ("base", "OPEN", True, bob_radar),
        ("alerts:public", "ALARM", Vector(x=1, y=2, z=3), bob_radar),
        ([alice_door, ["alerts:public"]], "OPEN", "manual", bob_radar),
    ]

    console.print()
    console.print(Panel("[bold]Datasignals demo[/bold]", expand=False))

    summary = Table(title="Sends")
    summary.add_column("Target", style="cyan")
    summary.add_column("Signal")
    summary.add_column("Sender")
    summary.add_column("Recipients", justify="right")
    summary.add_column("Errors", justify="right")

    for target, signal, data, sender in sends:
        report = hub.send_report(target, signal, data, sender)
        errors = f"[red]{report.error_count}[/red]" if report.error_count else "0"
        summary.add_row(repr(target), signal, repr(sender), str(report.recipients), errors)

    console.print(summary)

    table = Table(title="Deliveries")
    table.add_column("Listener", style="green")
    table.add_column("Signal")
    table.add_column("Data")
    table.add_column("Sender")
    for row in deliveries:
        table.add_row(*row)
    console.print(table)

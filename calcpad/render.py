"""Rich rendering for calcpad: the two-line display, key traces and binding tables."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from calcpad.keys import BUTTON_LABELS, KEY_BINDINGS
from calcpad.models import Display


def display_panel(display: Display) -> Panel:
    """Build the calculator screen: dim previous line over a bold current line."""
    body = Text(justify="right")
    body.append(display.previous or " ", style="dim")
    body.append("\n")
    body.append(display.current or " ", style="bold")
    return Panel(body, title="calcpad", expand=False, padding=(0, 2))


def render_display(display: Display, console: Console) -> None:
    console.print(display_panel(display))


def render_trace(rows: list[tuple[str, Display]], console: Console) -> None:
    """Render one table row per key press with the display after it."""
    table = Table(title="Key trace", show_header=True, header_style="bold")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Previous", justify="right")
    table.add_column("Current", justify="right", style="bold")

    for i, (key, display) in enumerate(rows, start=1):
        table.add_row(str(i), escape(key), escape(display.previous), escape(display.current))

    console.print()
    console.print(table)
    console.print()


def render_bindings(console: Console) -> None:
    """Render keyboard bindings and button labels side by side."""
    table = Table(title="Bindings", show_header=True, header_style="bold")
    table.add_column("Source", style="dim")
    table.add_column("Key", style="green")
    table.add_column("Action")

    for key, binding in KEY_BINDINGS.items():
        table.add_row("keyboard", escape(key), binding.description)
    for label, binding in BUTTON_LABELS.items():
        table.add_row("button", escape(label), binding.description)

    console.print()
    console.print(table)
    console.print()

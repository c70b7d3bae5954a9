"""CLI for the calcpad calculator.

Usage:
    python -m calcpad press "5+3*2="              # Final display
    python -m calcpad press "0.1+0.2=" --trace    # Display after every key
    python -m calcpad press "1000000" -g western  # Different digit grouping
    python -m calcpad repl                        # Interactive session
    python -m calcpad keys                        # Show key bindings
"""

from __future__ import annotations

from dataclasses import replace
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from calcpad.config import Settings
from calcpad.formatting import get_grouping
from calcpad.keys import parse_key_sequence, press_keys
from calcpad.logging_setup import setup_logging
from calcpad.render import render_bindings, render_display, render_trace

app = typer.Typer(
    name="calcpad",
    help="Two-line calculator driven by key presses",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_QUIT_WORDS = ("quit", "exit")


def _fail(message: str) -> typer.Exit:
    err_console.print(f"[red]Error:[/red] {escape(message)}")
    return typer.Exit(1)


def _load_settings(grouping: Optional[str]) -> Settings:
    """Read settings from the environment, apply CLI overrides, set up logging."""
    try:
        settings = Settings.from_env()
        if grouping:
            get_grouping(grouping)
            settings = replace(settings, grouping=grouping)
        setup_logging(settings.log_level, console=err_console)
    except ValueError as e:
        raise _fail(str(e))
    return settings


@app.command("press")
def cmd_press(
    keys: str = typer.Argument(help="Key sequence, e.g. '5+3*2=' or '12{Backspace}{Enter}'"),
    trace: bool = typer.Option(False, "--trace", "-t", help="Show the display after every key"),
    grouping: Optional[str] = typer.Option(None, "--grouping", "-g", help="Digit grouping: south-asian, western"),
) -> None:
    """Press a sequence of keys and show the resulting display."""
    settings = _load_settings(grouping)
    engine = settings.build_engine()
    try:
        sequence = parse_key_sequence(keys)
    except ValueError as e:
        raise _fail(str(e))

    rows = list(press_keys(engine, sequence))
    if trace:
        render_trace(rows, console)
    render_display(engine.render_display(), console)


@app.command("repl")
def cmd_repl(
    grouping: Optional[str] = typer.Option(None, "--grouping", "-g", help="Digit grouping: south-asian, western"),
) -> None:
    """Interactive session: each line is a key sequence ('quit' to leave)."""
    settings = _load_settings(grouping)
    engine = settings.build_engine()

    console.print("[dim]Type keys and press return. {Backspace} deletes, {Escape} clears, 'quit' exits.[/dim]")
    render_display(engine.render_display(), console)
    while True:
        try:
            line = console.input("[bold]>[/bold] ")
        except (EOFError, KeyboardInterrupt):
            console.print()
            break
        if line.strip().lower() in _QUIT_WORDS:
            break
        try:
            sequence = parse_key_sequence(line)
        except ValueError as e:
            err_console.print(f"[red]{escape(str(e))}[/red]")
            continue
        for _ in press_keys(engine, sequence):
            pass
        render_display(engine.render_display(), console)


@app.command("keys")
def cmd_keys() -> None:
    """Show keyboard bindings and button labels."""
    render_bindings(console)


if __name__ == "__main__":
    app()

"""
CLI entry point using Typer.

Provides commands for weekly plan management:
- init / profile / add-injury / remove-injury: set up the athlete
- readiness: today's check-in
- generate / plan: build and show this week's sessions
- log-session / history: record and review sessions
- quick-action / adjust-load: coach adjustments
- triage / status: adherence and red flags
- next-week: advance the program
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from . import views
from .app import app
from .commands import analysis, planning, profile, sessions  # noqa: F401  (registers commands)


def _configure_logging(verbose: bool) -> None:
    """Send library logs through Rich; WARNING by default, DEBUG when verbose."""
    root = logging.getLogger("move_coach")
    root.handlers.clear()
    root.addHandler(RichHandler(console=views.console, show_path=False, rich_tracebacks=True))
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Weekly strength planner for grapplers. Run without a command for interactive mode.
    """
    _configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # A sub-command was given — let it handle things

    # ── Interactive main menu ───────────────────────────────────────────────
    views.console.print()
    views.console.print("[bold cyan]move-coach[/bold cyan] — weekly strength planner")
    views.console.print()

    menu = {
        "1": ("plan",        "Show this week's plan"),
        "2": ("generate",    "Generate this week"),
        "3": ("log-session", "Log a session"),
        "4": ("triage",      "Triage: adherence and red flags"),
        "5": ("status",      "Current status"),
        "6": ("history",     "Session history"),
        "r": ("readiness",   "Show readiness"),
        "p": ("profile",     "Show profile"),
        "n": ("next-week",   "Advance to next week"),
        "0": ("quit",        "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    choice = views.console.input("Choose [1]: ").strip() or "1"

    if choice == "0":
        raise typer.Exit(0)

    chosen = {k: v[0] for k, v in menu.items()}.get(choice)
    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    commands = {
        "plan": planning.plan,
        "generate": planning.generate,
        "log-session": sessions.log_session,
        "triage": analysis.triage,
        "status": analysis.status,
        "history": sessions.history,
        "readiness": profile.readiness,
        "profile": profile.profile,
        "next-week": planning.next_week,
    }
    ctx.invoke(commands[chosen])


if __name__ == "__main__":
    app()

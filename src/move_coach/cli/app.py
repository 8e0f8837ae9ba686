"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.program import ProgramController
from ..io.state_store import StateStore, get_default_state_path

# Shared --state-path option type used across all commands
StatePathOption = Annotated[
    Optional[Path],
    typer.Option("--state-path", "-p", help="Path to the JSON state file"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="move-coach",
    help="Weekly strength planning for grapplers: plan, log, triage, adjust.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(state_path: Path | None) -> StateStore:
    """Get state store from path or default location."""
    if state_path is None:
        state_path = get_default_state_path()
    return StateStore(state_path)


def get_controller(state_path: Path | None) -> ProgramController:
    """Build a controller over the state file at ``state_path``."""
    return ProgramController(get_store(state_path))

"""Process-wide CLI state shared between the typer callback and commands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class CliState:
    """Options given before the subcommand on the command line."""

    config_path: Path | None = None


_state = CliState()


def configure(config_path: Path | None) -> None:
    """Record the global CLI options for the current invocation."""
    _state.config_path = config_path


def reset() -> None:
    configure(None)


def get_config_path() -> Path | None:
    """Config file given with --config, if any."""
    return _state.config_path

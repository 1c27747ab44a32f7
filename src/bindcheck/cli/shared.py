# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors, configuration)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer
from rich.console import Console, RenderableType

from ..config import Config, load_config
from ..errors import ConfigError
from ..logging import fail as core_fail
from ..logging import ok as core_ok
from ..logging import warn as core_warn

SETUP_EXIT_CODE = 2


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around the progress helpers honouring CLI output settings."""

    console: Console
    use_emoji: bool
    use_color: bool = True

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    def render(self, renderable: RenderableType) -> None:
        """Print a rich renderable (table, panel) on the bound console."""

        self.console.print(renderable)


def build_cli_logger(*, emoji: bool, no_color: bool = False) -> CLILogger:
    """Return a ``CLILogger`` bound to a dedicated rich console."""

    console = Console(no_color=no_color, highlight=False)
    return CLILogger(console=console, use_emoji=emoji, use_color=not no_color)


def load_cli_config(path: Path | None, *, emoji: bool | None = None, color: bool | None = None) -> Config:
    """Load the configuration for a CLI command, applying flag overrides.

    Raises:
        CLIError: If the configuration cannot be loaded.
    """

    try:
        config = load_config(path)
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=SETUP_EXIT_CODE) from exc
    if emoji is not None:
        config.output.emoji = emoji
    if color is not None:
        config.output.color = color
    return config


__all__ = ["CLIError", "CLILogger", "SETUP_EXIT_CODE", "build_cli_logger", "load_cli_config"]

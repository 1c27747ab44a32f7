# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shell-free wrapper around ``subprocess`` for running the external build."""

from __future__ import annotations

import shutil

# Bandit: the harness runs the configured build tool with an argument list and
# never goes through a shell.
import subprocess  # nosec B404
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final

TIMEOUT_RETURNCODE: Final[int] = 124


@dataclass(slots=True, frozen=True)
class CommandOptions:
    """Immutable command execution options.

    When ``output`` is set, stdout and stderr are streamed into that file in
    the order the command emits them and are not captured in memory.
    """

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    timeout: float | None = None
    output: Path | None = None

    def __post_init__(self) -> None:
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")


@dataclass(slots=True, frozen=True)
class CommandResult:
    """Outcome of a finished (or timed out) command."""

    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False
    duration: float = field(default=0.0, compare=False)

    @property
    def ok(self) -> bool:
        """Return ``True`` when the command exited with status zero."""

        return self.returncode == 0 and not self.timed_out


CommandRunner = Callable[[Sequence[str], CommandOptions], CommandResult]


def _ensure_text(value: str | bytes | None) -> str:
    """Return ``value`` decoded to text, treating ``None`` as empty."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return value.decode(errors="ignore")


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Resolve the executable of ``args`` against ``PATH``.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be found.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        if not head_path.exists():
            raise FileNotFoundError(f"Executable '{head}' does not exist")
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(args: Sequence[str], options: CommandOptions | None = None) -> CommandResult:
    """Execute ``args`` and capture its output.

    A timeout is not raised: the partial output is returned (or left in
    ``options.output``) with ``returncode`` set to :data:`TIMEOUT_RETURNCODE`
    and ``timed_out`` set.

    Args:
        args: Command and argument sequence to execute.
        options: Working directory, environment, timeout and output file
            settings.

    Returns:
        CommandResult: Exit status and captured streams. Both streams are
        empty, apart from a timeout notice, when output is streamed to a file.

    Raises:
        FileNotFoundError: If the executable cannot be resolved.
    """

    normalized = _normalize_args(args)
    resolved = options or CommandOptions()
    if resolved.output is None:
        return _run(normalized, resolved, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
    resolved.output.parent.mkdir(parents=True, exist_ok=True)
    with resolved.output.open("w", encoding="utf-8", errors="replace") as handle:
        return _run(normalized, resolved, stdout=handle, stderr=subprocess.STDOUT)


def _run(normalized: list[str], options: CommandOptions, *, stdout: Any, stderr: Any) -> CommandResult:
    started = time.monotonic()
    try:
        # Bandit: arguments come from harness configuration, not user input.
        completed = subprocess.run(  # nosec B603
            normalized,
            cwd=str(options.cwd) if options.cwd is not None else None,
            env=dict(options.env) if options.env is not None else None,
            check=False,
            stdout=stdout,
            stderr=stderr,
            text=True,
            errors="replace",
            timeout=options.timeout,
            stdin=subprocess.DEVNULL,
        )
    except subprocess.TimeoutExpired as exc:
        timeout_msg = f"Command timed out after {options.timeout:.1f}s"
        captured_stderr = _ensure_text(exc.stderr)
        return CommandResult(
            args=tuple(normalized),
            returncode=TIMEOUT_RETURNCODE,
            stdout=_ensure_text(exc.stdout),
            stderr=f"{captured_stderr}\n{timeout_msg}" if captured_stderr else timeout_msg,
            timed_out=True,
            duration=time.monotonic() - started,
        )

    return CommandResult(
        args=tuple(normalized),
        returncode=completed.returncode,
        stdout=_ensure_text(completed.stdout),
        stderr=_ensure_text(completed.stderr),
        duration=time.monotonic() - started,
    )


__all__ = [
    "CommandOptions",
    "CommandResult",
    "CommandRunner",
    "TIMEOUT_RETURNCODE",
    "run_command",
]

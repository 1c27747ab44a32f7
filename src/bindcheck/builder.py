# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Invocation of the external build system against the sample solution."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .config import BuildConfig
from .errors import EnvironmentSetupError
from .process import CommandOptions, CommandResult, CommandRunner, run_command

PARALLEL_BUILD_PROPERTY: Final[str] = "ForceParallelBuild=true"
EXTRA_CONSTANTS_PROPERTY: Final[str] = "ExtraConstants"


def build_properties(parallel: bool, *extra_constants: str) -> tuple[str, ...]:
    """Return the ``key=value`` build properties for a scenario.

    Args:
        parallel: Whether the binding generator should be forced into its
            parallel mode.
        *extra_constants: Preprocessor constants injected into the sample
            sources, joined with ``;``.

    Returns:
        tuple[str, ...]: Ordered property strings.
    """

    properties: list[str] = []
    if parallel:
        properties.append(PARALLEL_BUILD_PROPERTY)
    constants = [constant for constant in extra_constants if constant]
    if constants:
        properties.append(f"{EXTRA_CONSTANTS_PROPERTY}={';'.join(constants)}")
    return tuple(properties)


@dataclass(slots=True, frozen=True)
class BuildResult:
    """Outcome of a single build invocation."""

    success: bool
    log_path: Path
    returncode: int
    command: tuple[str, ...]
    timed_out: bool = False
    duration: float = field(default=0.0, compare=False)


class BuildInvoker:
    """Run the configured build command and write its diagnostic log.

    The runner is injectable so tests can stand in for the external tool.
    """

    def __init__(self, config: BuildConfig, *, runner: CommandRunner = run_command) -> None:
        """Initialise the invoker.

        Args:
            config: Build command, verbosity and timeout settings.
            runner: Callable executing a command; defaults to
                :func:`bindcheck.process.run_command`.
        """

        self._config = config
        self._runner = runner

    def command_for(self, project_path: Path, target: str, parameters: Sequence[str] = ()) -> list[str]:
        """Return the argument list used to build ``target`` of ``project_path``.

        When a binary log is configured the build is asked to write it next to
        ``project_path``.
        """

        command = [*self._config.command, str(project_path), f"-t:{target}", f"-v:{self._config.verbosity}"]
        if self._config.binary_log:
            command.append(f"-bl:{project_path.parent / self._config.binary_log}")
        command.extend(f"-p:{parameter}" for parameter in parameters)
        return command

    def build(
        self,
        project_path: Path,
        target: str,
        log_path: Path,
        parameters: Sequence[str] = (),
        environment: Mapping[str, str] | None = None,
    ) -> BuildResult:
        """Build ``target`` of ``project_path`` and stream its output to ``log_path``.

        ``parameters`` are passed through unmodified; a malformed one is the
        build tool's failure to report. A failed or timed out build is not an
        error here, it is reported through :attr:`BuildResult.success`.

        Besides the build log, a process record (command line, working
        directory, exit status and duration) is written to the configured
        ``process_log`` in the project directory.

        Args:
            project_path: Project or solution file.
            target: Build target name.
            log_path: File receiving the interleaved stdout and stderr.
            parameters: Ordered ``key=value`` build properties.
            environment: Variables overriding the inherited environment.

        Returns:
            BuildResult: Success flag and invocation metadata.

        Raises:
            EnvironmentSetupError: If the build executable cannot be found.
        """

        command = self.command_for(project_path, target, parameters)
        env = {**os.environ, **environment} if environment else None
        options = CommandOptions(cwd=project_path.parent, env=env, timeout=self._config.timeout, output=log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            result: CommandResult = self._runner(command, options)
        except FileNotFoundError as exc:
            raise EnvironmentSetupError(str(exc)) from exc

        # Anything not streamed (a timeout notice, a runner that captures) is appended.
        with log_path.open("a", encoding="utf-8") as handle:
            for text in (result.stdout, result.stderr):
                if text:
                    handle.write(text if text.endswith("\n") else f"{text}\n")

        if self._config.process_log:
            self._write_process_log(project_path.parent / self._config.process_log, options, result)

        return BuildResult(
            success=result.ok,
            log_path=log_path,
            returncode=result.returncode,
            command=result.args,
            timed_out=result.timed_out,
            duration=result.duration,
        )

    @staticmethod
    def _write_process_log(path: Path, options: CommandOptions, result: CommandResult) -> None:
        lines = [
            f"command: {shlex.join(result.args)}",
            f"working directory: {options.cwd}",
            f"exit status: {result.returncode}",
            f"timed out: {'yes' if result.timed_out else 'no'}",
            f"duration: {result.duration:.1f}s",
            f"output: {options.output}",
        ]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")


__all__ = [
    "BuildInvoker",
    "BuildResult",
    "EXTRA_CONSTANTS_PROPERTY",
    "PARALLEL_BUILD_PROPERTY",
    "build_properties",
]

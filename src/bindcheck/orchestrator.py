# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scenario orchestration: reset, build, archive and assert.

Each scenario moves through a fixed, linear sequence of steps::

    RESET -> INVOKE_BUILD -> ARCHIVE_LOGS -> ASSERT_OUTCOME
          -> ASSERT_ARTIFACTS | ASSERT_DIAGNOSTICS
          -> ASSERT_CONCURRENCY_EVIDENCE

Log archival happens right after the build and is guaranteed on every exit
path by :meth:`ScenarioRunner.archived`, so logs are on disk before any
assertion failure propagates. Artifact, diagnostic and concurrency problems
are collected and raised together so a single run shows every miss.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .builder import BuildInvoker, BuildResult
from .clean import ResetResult, reset_scenario
from .config import Config
from .errors import BuildTimeoutError, EnvironmentSetupError, Problem, ProblemKind, ScenarioAssertionError
from .expectations import ExpectedSourceFile
from .layout import ProjectLayout
from .logging import info, section, step, warn
from .scanner import (
    CompilerDiagnostic,
    has_compiler_error,
    read_compiler_diagnostics,
    was_generated_in_parallel,
    was_parsed_in_parallel,
)
from .scenarios import Scenario, sample_binaries, sample_generated_sources
from .verifier import ArtifactVerifier


class Step(str, Enum):
    """Orchestration steps in the order a scenario visits them."""

    RESET = "reset"
    INVOKE_BUILD = "invoke-build"
    ARCHIVE_LOGS = "archive-logs"
    ASSERT_OUTCOME = "assert-outcome"
    ASSERT_ARTIFACTS = "assert-artifacts"
    ASSERT_DIAGNOSTICS = "assert-diagnostics"
    ASSERT_CONCURRENCY_EVIDENCE = "assert-concurrency-evidence"


@dataclass(slots=True)
class ScenarioOutcome:
    """Everything observed while running one scenario."""

    scenario: str
    log_path: Path
    success: bool | None = None
    timed_out: bool = False
    duration: float = 0.0
    archived: set[Path] = field(default_factory=set)
    parsed_in_parallel: bool | None = None
    generated_in_parallel: bool | None = None
    diagnostics: list[CompilerDiagnostic] = field(default_factory=list)
    problems: list[Problem] = field(default_factory=list)
    steps: list[Step] = field(default_factory=list)
    error: ScenarioAssertionError | None = None

    @property
    def passed(self) -> bool:
        """Return ``True`` when the scenario met every expectation."""

        return self.error is None and not self.problems


@dataclass(slots=True)
class LogArchive:
    """Copies a scenario's logs into its archive directory once."""

    layout: ProjectLayout
    scenario: str
    log_files: tuple[str, ...]
    outcome: ScenarioOutcome
    collected: bool = False

    def collect(self, *, required: bool) -> list[Problem]:
        """Copy the scenario log and extra logs into the archive directory.

        Args:
            required: When ``True`` every missing log becomes a problem;
                otherwise missing logs are skipped silently, which is what the
                failure path wants.

        Returns:
            list[Problem]: Missing-log problems (always empty when not required).
        """

        self.collected = True
        destination = self.layout.archive_dir(self.scenario)
        problems: list[Problem] = []
        for name in (self.layout.log_name(self.scenario), *self.log_files):
            source = self.layout.root / name
            if not source.is_file():
                if required:
                    problems.append(
                        Problem(kind=ProblemKind.MISSING_LOG, subject=name, message=f"file {source} should exist")
                    )
                continue
            destination.mkdir(parents=True, exist_ok=True)
            target = destination / source.name
            shutil.copy2(source, target)
            self.outcome.archived.add(target)
        return problems


class ScenarioRunner:
    """Run scenarios against the sample project one at a time."""

    def __init__(
        self,
        config: Config,
        *,
        invoker: BuildInvoker | None = None,
        layout: ProjectLayout | None = None,
        sources: Sequence[ExpectedSourceFile] | None = None,
        binaries: Sequence[Path] | None = None,
    ) -> None:
        """Initialise the runner.

        Args:
            config: Harness configuration.
            invoker: Build invoker; built from ``config.build`` when omitted.
            layout: Filesystem layout; derived from ``config.paths`` when omitted.
            sources: Generated sources a successful build must contain;
                defaults to the code-behind sample's.
            binaries: Binaries a successful build must produce, relative to
                the project root; defaults to the code-behind sample's.
        """

        self._config = config
        self._layout = layout or ProjectLayout.from_config(config.paths)
        self._invoker = invoker or BuildInvoker(config.build)
        self._sources = tuple(sources) if sources is not None else sample_generated_sources(self._layout)
        self._binaries = tuple(binaries) if binaries is not None else sample_binaries(self._layout)
        self._verifier = ArtifactVerifier(self._layout.root)

    @property
    def layout(self) -> ProjectLayout:
        return self._layout

    @property
    def sources(self) -> tuple[ExpectedSourceFile, ...]:
        return self._sources

    @property
    def binaries(self) -> tuple[Path, ...]:
        return self._binaries

    def check_environment(self) -> None:
        """Fail fast when the sample solution is missing.

        Raises:
            EnvironmentSetupError: If the project file does not exist.
        """

        project = self._layout.project_path
        if not project.is_file():
            raise EnvironmentSetupError(f"Test project '{project}' not found")

    def reset(self, scenario: str, *, dry_run: bool = False) -> ResetResult:
        """Remove intermediate, output, archive and log state of ``scenario``.

        Raises:
            ValueError: If ``scenario`` is not a single path segment.
        """

        return reset_scenario(self._layout, scenario, log_files=self._config.build.produced_logs(), dry_run=dry_run)

    @contextmanager
    def archived(self, scenario: str, outcome: ScenarioOutcome) -> Iterator[LogArchive]:
        """Guarantee log archival for ``scenario`` on every exit path.

        The body is expected to call :meth:`LogArchive.collect` once the build
        returns. If the body leaves before that, normally or by raising, the
        logs that exist are archived here before control continues.
        """

        archive = LogArchive(
            layout=self._layout,
            scenario=scenario,
            log_files=tuple(self._config.build.produced_logs()),
            outcome=outcome,
        )
        try:
            yield archive
        finally:
            if not archive.collected:
                archive.collect(required=False)

    def run(self, scenario: Scenario, *, raise_on_failure: bool = True) -> ScenarioOutcome:
        """Run ``scenario`` through every step.

        Args:
            scenario: Scenario to run.
            raise_on_failure: When ``False`` an assertion failure is stored on
                :attr:`ScenarioOutcome.error` instead of being raised.

        Returns:
            ScenarioOutcome: Observations made during the run.

        Raises:
            ScenarioAssertionError: When the scenario fails and
                ``raise_on_failure`` is true.
            EnvironmentSetupError: When the environment is broken (missing
                build executable or log). Always raised.
        """

        outcome = ScenarioOutcome(scenario=scenario.name, log_path=self._layout.log_path(scenario.name))
        try:
            self._execute(scenario, outcome)
        except ScenarioAssertionError as exc:
            outcome.error = exc
            if raise_on_failure:
                raise
        return outcome

    def run_all(self, scenarios: Iterable[Scenario]) -> list[ScenarioOutcome]:
        """Check the environment once, then run every scenario in order."""

        self.check_environment()
        return [self.run(scenario, raise_on_failure=False) for scenario in scenarios]

    def _enter(self, outcome: ScenarioOutcome, current: Step) -> None:
        outcome.steps.append(current)
        output = self._config.output
        step(outcome.scenario, current.value, use_emoji=output.emoji, use_color=output.color)

    def _execute(self, scenario: Scenario, outcome: ScenarioOutcome) -> None:
        output = self._config.output
        section(scenario.name, use_color=output.color)
        self._enter(outcome, Step.RESET)
        self.reset(scenario.name)

        with self.archived(scenario.name, outcome) as archive:
            self._enter(outcome, Step.INVOKE_BUILD)
            result = self._invoker.build(
                self._layout.project_path,
                self._config.build.target,
                outcome.log_path,
                scenario.parameters(),
            )
            outcome.success = result.success
            outcome.timed_out = result.timed_out
            outcome.duration = result.duration
            info(
                f"{scenario.name}: build exited with status {result.returncode} after {result.duration:.1f}s",
                use_emoji=output.emoji,
            )

            self._enter(outcome, Step.ARCHIVE_LOGS)
            outcome.problems.extend(archive.collect(required=True))

            self._enter(outcome, Step.ASSERT_OUTCOME)
            self._assert_outcome(scenario, result, outcome)

            if scenario.expect_success:
                self._enter(outcome, Step.ASSERT_ARTIFACTS)
                outcome.problems.extend(self._assert_artifacts(scenario))
            else:
                self._enter(outcome, Step.ASSERT_DIAGNOSTICS)
                outcome.diagnostics = read_compiler_diagnostics(outcome.log_path)
                outcome.problems.extend(self._assert_diagnostics(scenario, outcome.log_path))

            self._enter(outcome, Step.ASSERT_CONCURRENCY_EVIDENCE)
            outcome.problems.extend(self._assert_concurrency(scenario, outcome))

            if outcome.problems:
                raise ScenarioAssertionError(scenario.name, outcome.problems)

    def _assert_outcome(self, scenario: Scenario, result: BuildResult, outcome: ScenarioOutcome) -> None:
        if result.timed_out:
            problem = Problem(
                kind=ProblemKind.BUILD_TIMEOUT,
                subject=scenario.name,
                message=f"Build timed out after {self._config.build.timeout}s",
            )
            outcome.problems.append(problem)
            raise BuildTimeoutError(scenario.name, outcome.problems)
        if result.success != scenario.expect_success:
            expected = "succeeded" if scenario.expect_success else "failed"
            outcome.problems.append(
                Problem(
                    kind=ProblemKind.BUILD_OUTCOME,
                    subject=scenario.name,
                    message=f"Build should have {expected} (exit status {result.returncode})",
                )
            )
            raise ScenarioAssertionError(scenario.name, outcome.problems)

    def _assert_artifacts(self, scenario: Scenario) -> list[Problem]:
        problems = self._verifier.verify_sources(self._sources)
        problems.extend(self._verifier.verify_binaries(self._binaries))
        copied = self._verifier.copy_generated_sources(
            self._sources, self._layout.archive_generated_dir(scenario.name)
        )
        if len(copied) != len(self._sources):
            output = self._config.output
            warn(
                f"{scenario.name}: archived {len(copied)} of {len(self._sources)} generated sources",
                use_emoji=output.emoji,
                use_color=output.color,
            )
        return problems

    def _assert_diagnostics(self, scenario: Scenario, log_path: Path) -> list[Problem]:
        problems: list[Problem] = []
        for expected in scenario.expected_errors:
            found = has_compiler_error(
                log_path,
                expected.source_file,
                expected.line,
                expected.type_from,
                expected.type_to,
                code=expected.code,
            )
            if not found:
                problems.append(
                    Problem(
                        kind=ProblemKind.MISSING_DIAGNOSTIC,
                        subject=f"{expected.source_file}:{expected.line}",
                        message=f"Expected {expected.describe()}",
                    )
                )
        return problems

    def _assert_concurrency(self, scenario: Scenario, outcome: ScenarioOutcome) -> list[Problem]:
        outcome.parsed_in_parallel = was_parsed_in_parallel(outcome.log_path)
        outcome.generated_in_parallel = was_generated_in_parallel(outcome.log_path)
        mode = "in parallel" if scenario.parallel else "in serial manner"
        checks = (
            ("parsed", outcome.parsed_in_parallel),
            ("generated", outcome.generated_in_parallel),
        )
        return [
            Problem(
                kind=ProblemKind.CONCURRENCY_EVIDENCE,
                subject=f"{scenario.name}:{what}",
                message=f"Should have been {what} {mode}",
            )
            for what, observed in checks
            if observed != scenario.parallel
        ]


__all__ = ["LogArchive", "ScenarioOutcome", "ScenarioRunner", "Step"]

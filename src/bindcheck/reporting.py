# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Rich rendering of scenario outcomes and package catalogs."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .config import OutputConfig
from .orchestrator import ScenarioOutcome
from .packages import PackageRegistry
from .scenarios import Scenario


@dataclass(slots=True)
class SuiteSummary:
    """Aggregate counts over a run of scenarios."""

    total: int
    passed: int
    failed: int
    problems: int

    @property
    def ok(self) -> bool:
        return self.failed == 0


def summarize(outcomes: Sequence[ScenarioOutcome]) -> SuiteSummary:
    """Return the aggregate counts for ``outcomes``."""

    passed = sum(1 for outcome in outcomes if outcome.passed)
    return SuiteSummary(
        total=len(outcomes),
        passed=passed,
        failed=len(outcomes) - passed,
        problems=sum(len(outcome.problems) for outcome in outcomes),
    )


def _styled(value: str, style: str | None) -> Text:
    return Text(value, style=style) if style else Text(value)


def _flag(value: bool | None) -> str:
    if value is None:
        return "-"
    return "yes" if value else "no"


def create_outcome_table(outcomes: Sequence[ScenarioOutcome], cfg: OutputConfig) -> Table:
    """Return a table with one row per scenario outcome."""

    table = Table(box=box.SIMPLE, pad_edge=False, expand=False)
    table.add_column("Scenario", no_wrap=True)
    table.add_column("Result", no_wrap=True)
    table.add_column("Build", no_wrap=True)
    table.add_column("Parsed ∥", justify="center")
    table.add_column("Generated ∥", justify="center")
    table.add_column("Problems", justify="right")
    table.add_column("Seconds", justify="right")

    for outcome in outcomes:
        if outcome.passed:
            result = _styled("PASS", "green" if cfg.color else None)
        else:
            result = _styled("FAIL", "red" if cfg.color else None)
        if outcome.timed_out:
            build = "timeout"
        elif outcome.success is None:
            build = "-"
        else:
            build = "ok" if outcome.success else "failed"
        table.add_row(
            outcome.scenario,
            result,
            build,
            _flag(outcome.parsed_in_parallel),
            _flag(outcome.generated_in_parallel),
            str(len(outcome.problems)),
            f"{outcome.duration:.1f}",
        )
    return table


def create_problem_panel(outcome: ScenarioOutcome, cfg: OutputConfig) -> Panel:
    """Return a panel listing every problem of a failed scenario."""

    text = Text()
    for index, problem in enumerate(outcome.problems):
        if index:
            text.append("\n")
        text.append(f"[{problem.kind.value}] ", style="bold yellow" if cfg.color else None)
        text.append(problem.message)
    for diagnostic in outcome.diagnostics:
        text.append("\n")
        text.append(
            f"{diagnostic.file}({diagnostic.line},{diagnostic.column}): {diagnostic.severity} {diagnostic.code}",
            style="dim" if cfg.color else None,
        )
    return Panel(text, title=outcome.scenario, border_style="red" if cfg.color else "none", box=box.ROUNDED)


def create_scenario_table(scenarios: Sequence[Scenario]) -> Table:
    """Return a table describing the configured scenarios."""

    table = Table(box=box.SIMPLE, pad_edge=False, expand=False)
    table.add_column("Scenario", no_wrap=True)
    table.add_column("Mode")
    table.add_column("Expect")
    table.add_column("Parameters")
    table.add_column("Diagnostics")
    for scenario in scenarios:
        table.add_row(
            scenario.name,
            "parallel" if scenario.parallel else "serial",
            "success" if scenario.expect_success else "failure",
            " ".join(scenario.parameters()) or "-",
            ", ".join(f"{err.source_file}:{err.line}" for err in scenario.expected_errors) or "-",
        )
    return table


def create_package_table(registry: PackageRegistry) -> Table:
    """Return a table with one row per registered package descriptor."""

    table = Table(box=box.SIMPLE, pad_edge=False, expand=False)
    table.add_column("Name", no_wrap=True)
    table.add_column("Id")
    table.add_column("Version")
    table.add_column("Framework")
    table.add_column("References")
    for name, descriptor in registry.items():
        references = ", ".join(
            f"{ref.identifier} ({ref.hint_path})" if ref.hint_path else ref.identifier for ref in descriptor.references
        )
        table.add_row(name, descriptor.identifier, descriptor.version, descriptor.target_framework, references or "-")
    return table


__all__ = [
    "SuiteSummary",
    "create_outcome_table",
    "create_package_table",
    "create_problem_panel",
    "create_scenario_table",
    "summarize",
]

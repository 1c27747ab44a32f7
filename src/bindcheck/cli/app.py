# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the harness commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..errors import ConfigError, EnvironmentSetupError
from ..orchestrator import ScenarioRunner
from ..packages import load_package_catalog
from ..reporting import (
    create_outcome_table,
    create_package_table,
    create_problem_panel,
    create_scenario_table,
    summarize,
)
from ..scenarios import Scenario, default_scenarios, scenario_index
from .shared import SETUP_EXIT_CODE, CLIError, build_cli_logger, load_cli_config

app = typer.Typer(
    name="bindcheck",
    help="Build-verification harness for Android code-behind binding generation.",
    no_args_is_help=True,
    add_completion=False,
)

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="TOML configuration file (pyproject.toml or bindcheck.toml)."),
]
EmojiOption = Annotated[Optional[bool], typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")]
ColorOption = Annotated[Optional[bool], typer.Option("--color/--no-color", help="Toggle colour in output.")]


def _select(names: list[str] | None) -> list[Scenario]:
    scenarios = default_scenarios()
    if not names:
        return list(scenarios)
    index = scenario_index(scenarios)
    unknown = [name for name in names if name not in index]
    if unknown:
        raise CLIError(f"Unknown scenario(s): {', '.join(unknown)}", exit_code=SETUP_EXIT_CODE)
    return [index[name] for name in names]


@app.command("run")
def run_command(
    scenarios: Annotated[Optional[list[str]], typer.Argument(help="Scenario names; all when omitted.")] = None,
    config: ConfigOption = None,
    emoji: EmojiOption = None,
    color: ColorOption = None,
) -> None:
    """Build the sample project for each scenario and verify the results."""

    try:
        cfg = load_cli_config(config, emoji=emoji, color=color)
        selected = _select(scenarios)
    except CLIError as exc:
        build_cli_logger(emoji=emoji is not False).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger = build_cli_logger(emoji=cfg.output.emoji, no_color=not cfg.output.color)
    runner = ScenarioRunner(cfg)
    try:
        outcomes = runner.run_all(selected)
    except EnvironmentSetupError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=SETUP_EXIT_CODE) from exc

    logger.render(create_outcome_table(outcomes, cfg.output))
    for outcome in outcomes:
        if not outcome.passed:
            logger.render(create_problem_panel(outcome, cfg.output))
    summary = summarize(outcomes)
    if summary.ok:
        logger.ok(f"{summary.passed} of {summary.total} scenario(s) passed")
        raise typer.Exit(code=0)
    logger.fail(f"{summary.failed} of {summary.total} scenario(s) failed with {summary.problems} problem(s)")
    raise typer.Exit(code=1)


@app.command("list")
def list_command(
    emoji: EmojiOption = None,
    color: ColorOption = None,
) -> None:
    """List the scenarios of the code-behind build suite."""

    logger = build_cli_logger(emoji=emoji is not False, no_color=color is False)
    logger.render(create_scenario_table(default_scenarios()))


@app.command("reset")
def reset_command(
    scenario: Annotated[str, typer.Argument(help="Scenario whose build state is removed.")],
    config: ConfigOption = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Only list what would be removed.")] = False,
    emoji: EmojiOption = None,
) -> None:
    """Remove intermediate, output, archive and log state of a scenario."""

    try:
        cfg = load_cli_config(config, emoji=emoji)
        (selected,) = _select([scenario])
    except CLIError as exc:
        build_cli_logger(emoji=emoji is not False).fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger = build_cli_logger(emoji=cfg.output.emoji, no_color=not cfg.output.color)
    result = ScenarioRunner(cfg).reset(selected.name, dry_run=dry_run)
    if dry_run:
        for path in result.skipped:
            logger.warn(f"DRY RUN: would remove {path}")
        logger.ok(f"Dry run complete; {len(result.skipped)} paths would be removed")
    else:
        logger.ok(f"Removed {len(result.removed)} paths")


@app.command("packages")
def packages_command(
    catalog: Annotated[Path, typer.Argument(help="TOML file with a [packages] table.")],
    name: Annotated[Optional[str], typer.Option("--name", "-n", help="Show a single package.")] = None,
    emoji: EmojiOption = None,
) -> None:
    """Show the package descriptors of a catalog file."""

    logger = build_cli_logger(emoji=emoji is not False)
    try:
        registry = load_package_catalog(catalog)
    except ConfigError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=SETUP_EXIT_CODE) from exc

    if name is None:
        logger.render(create_package_table(registry))
        return
    descriptor = registry.try_get(name)
    if descriptor is None:
        logger.fail(f"Package '{name}' not found in {catalog}")
        raise typer.Exit(code=1)
    logger.echo(f"{name}: {descriptor.identifier} {descriptor.version} ({descriptor.target_framework})")
    for reference in descriptor.references:
        hint = f" -> {reference.hint_path}" if reference.hint_path else ""
        logger.echo(f"  {reference.identifier}{hint}")


__all__ = ["app"]

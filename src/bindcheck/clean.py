# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Removal of prior build state before a scenario runs."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from .layout import ProjectLayout


@dataclass(slots=True)
class ResetPlan:
    """Paths scheduled for removal for one scenario."""

    scenario: str
    paths: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class ResetResult:
    """Capture the outcome of a reset."""

    removed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    def register_removed(self, path: Path) -> None:
        """Record a path removed during the reset."""

        self.removed.append(path)

    def register_skipped(self, path: Path) -> None:
        """Record a path that would be removed during a dry run."""

        self.skipped.append(path)


def plan_reset(layout: ProjectLayout, scenario: str, log_files: Iterable[str] = ()) -> ResetPlan:
    """Return the paths a reset of ``scenario`` removes.

    Only paths that currently exist are planned, so planning again right after
    a reset yields an empty plan.

    Args:
        layout: Project layout resolving every candidate path.
        scenario: Scenario whose archive directory and log are removed.
        log_files: Extra log file names, relative to the project root.

    Returns:
        ResetPlan: Existing intermediate, output, archive and log paths.
    """

    candidates = [
        layout.obj_dir,
        layout.bin_dir,
        layout.archive_dir(scenario),
        layout.log_path(scenario),
        *(layout.root / name for name in log_files),
    ]
    if layout.root.is_dir():
        candidates.extend(sorted(layout.root.glob(layout.stale_log_glob())))
    unique = dict.fromkeys(path for path in candidates if path.exists() or path.is_symlink())
    return ResetPlan(scenario=scenario, paths=list(unique))


def reset_scenario(
    layout: ProjectLayout,
    scenario: str,
    *,
    log_files: Iterable[str] = (),
    dry_run: bool = False,
) -> ResetResult:
    """Remove the prior build state of ``scenario``.

    Paths that are already absent are not an error, which makes the reset
    idempotent.
    """

    plan = plan_reset(layout, scenario, log_files)
    result = ResetResult()
    for path in plan.paths:
        if dry_run:
            result.register_skipped(path)
            continue
        _remove_path(path)
        result.register_removed(path)
    return result


def _remove_path(path: Path) -> None:
    """Remove ``path`` from disk, tolerating its disappearance."""

    if path.is_dir() and not path.is_symlink():
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass
    else:
        path.unlink(missing_ok=True)


__all__ = ["ResetPlan", "ResetResult", "plan_reset", "reset_scenario"]

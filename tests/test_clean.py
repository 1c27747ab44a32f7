# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for resetting scenario build state."""

from __future__ import annotations

from pathlib import Path

import pytest

from bindcheck.clean import plan_reset, reset_scenario
from bindcheck.layout import ProjectLayout


def _populate(layout: ProjectLayout, scenario: str) -> list[Path]:
    paths = [
        layout.obj_dir / "generated" / "Binding.Main.g.cs",
        layout.bin_dir / "CodeBehindBuildTests.dll",
        layout.archive_dir(scenario) / "process.log",
        layout.log_path(scenario),
        layout.log_path("OtherScenario"),
        layout.root / "process.log",
    ]
    for path in paths:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x", encoding="utf-8")
    return paths


def test_reset_removes_build_state(layout: ProjectLayout) -> None:
    _populate(layout, "SuccessfulBuildFew")
    other_archive = layout.archive_dir("SuccessfulBuildMany") / "process.log"
    other_archive.parent.mkdir(parents=True)
    other_archive.write_text("keep", encoding="utf-8")

    result = reset_scenario(layout, "SuccessfulBuildFew", log_files=["process.log", "msbuild.binlog"])

    assert not layout.obj_dir.exists()
    assert not layout.bin_dir.exists()
    assert not layout.archive_dir("SuccessfulBuildFew").exists()
    assert not layout.log_path("SuccessfulBuildFew").exists()
    assert not layout.log_path("OtherScenario").exists()
    assert not (layout.root / "process.log").exists()
    assert other_archive.exists()
    assert layout.project_path.exists()
    assert layout.log_path("SuccessfulBuildFew") in result.removed
    assert layout.root / "msbuild.binlog" not in result.removed


def test_reset_is_idempotent(layout: ProjectLayout) -> None:
    _populate(layout, "SuccessfulBuildFew")
    reset_scenario(layout, "SuccessfulBuildFew")

    second = reset_scenario(layout, "SuccessfulBuildFew")

    assert second.removed == []
    assert plan_reset(layout, "SuccessfulBuildFew").paths == []


def test_reset_on_missing_root(tmp_path: Path) -> None:
    layout = ProjectLayout(
        root=tmp_path / "absent",
        project_name="CodeBehindBuildTests",
        configuration="Debug",
        archive_root=tmp_path / "archive",
    )
    assert reset_scenario(layout, "SuccessfulBuildFew").removed == []


def test_dry_run_keeps_files(layout: ProjectLayout) -> None:
    paths = _populate(layout, "SuccessfulBuildFew")

    result = reset_scenario(layout, "SuccessfulBuildFew", dry_run=True)

    assert result.removed == []
    assert layout.obj_dir in result.skipped
    assert layout.log_path("SuccessfulBuildFew") in result.skipped
    assert all(path.exists() for path in paths)


def test_plan_lists_each_path_once(layout: ProjectLayout) -> None:
    _populate(layout, "SuccessfulBuildFew")
    plan = plan_reset(layout, "SuccessfulBuildFew", ["CodeBehindBuildTests.SuccessfulBuildFew.log"])
    assert len(plan.paths) == len(set(plan.paths))


@pytest.mark.parametrize("name", ["..", ".", "", "a/b"])
def test_reset_rejects_names_outside_archive(layout: ProjectLayout, name: str) -> None:
    sibling = layout.archive_root.parent / "Debug" / "keep"
    sibling.mkdir(parents=True)

    with pytest.raises(ValueError, match="single path segment"):
        reset_scenario(layout, name)

    assert sibling.is_dir()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the scenario catalog of the code-behind sample."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from bindcheck.layout import ProjectLayout
from bindcheck.scenarios import (
    ExpectedCompilerError,
    Scenario,
    default_scenarios,
    sample_binaries,
    sample_generated_sources,
    scenario_index,
)


def test_default_scenarios_cover_both_modes() -> None:
    scenarios = default_scenarios()
    names = [scenario.name for scenario in scenarios]

    assert len(scenarios) == 12
    assert names[:2] == ["SuccessfulBuildFew", "SuccessfulBuildMany"]
    assert "FailedBuildFew_ConflictingFragment" in names
    assert "FailedBuildMany_ConflictingRelativeLayout" in names
    for scenario in scenarios:
        assert scenario.parallel == scenario.name.startswith(("SuccessfulBuildMany", "FailedBuildMany"))
        assert scenario.expect_success == (not scenario.expected_errors)


def test_scenario_parameters() -> None:
    index = scenario_index(default_scenarios())
    assert index["SuccessfulBuildFew"].parameters() == ()
    assert index["SuccessfulBuildMany"].parameters() == ("ForceParallelBuild=true",)
    assert index["FailedBuildMany_ConflictingButton"].parameters() == (
        "ForceParallelBuild=true",
        "ExtraConstants=NOT_CONFLICTING_BUTTON",
    )


def test_conflicting_fragment_expectations() -> None:
    scenario = scenario_index(default_scenarios())["FailedBuildFew_ConflictingFragment"]
    assert [(err.source_file, err.line) for err in scenario.expected_errors] == [
        ("MainActivity.cs", 26),
        ("AnotherMainActivity.cs", 23),
    ]
    first = scenario.expected_errors[0]
    assert (first.type_from, first.type_to, first.code) == (
        "Android.App.Fragment",
        "CommonSampleLibrary.LogFragment",
        "CS0266",
    )
    assert first.describe() == "compiler error CS0266 in MainActivity.cs(26,?)"


def test_scenario_index_rejects_duplicates() -> None:
    with pytest.raises(ValueError, match="defined twice"):
        scenario_index([Scenario(name="A"), Scenario(name="A", parallel=True)])


@pytest.mark.parametrize("name", ["", "  ", ".", "..", "a/b", "a\\b"])
def test_scenario_names_are_path_segments(name: str) -> None:
    with pytest.raises(ValidationError):
        Scenario(name=name)


def test_compiler_error_line_must_be_positive() -> None:
    with pytest.raises(ValidationError):
        ExpectedCompilerError(source_file="MainActivity.cs", line=0, type_from="A", type_to="B")


def test_sample_expectations_follow_layout(tmp_path: Path) -> None:
    layout = ProjectLayout(
        root=tmp_path,
        project_name="CodeBehindBuildTests",
        configuration="Release",
        archive_root=tmp_path / "archive",
    )
    sources = sample_generated_sources(layout)
    assert len(sources) == 7
    assert all(src.path.parent == Path("obj/Release/generated") for src in sources)
    main = next(src for src in sources if src.path.name == "Binding.Main.g.cs")
    assert [member.name for member in main.properties()] == [
        "myButton",
        "log_fragment",
        "secondary_log_fragment",
        "tertiary_log_fragment",
    ]
    activity = next(src for src in sources if src.path.name.endswith("MainActivity.Main.g.cs"))
    assert len(list(activity.methods())) == 6

    binaries = sample_binaries(layout)
    assert Path("bin/Release/com.xamarin.CodeBehindBuildTests-Signed.apk") in binaries
    assert len(binaries) == 4

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Scenario definitions and the expectations for the code-behind sample project."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .builder import build_properties
from .expectations import ExpectedMethod, ExpectedProperty, ExpectedSourceFile, method, prop, source
from .layout import ProjectLayout, check_scenario_name


class ExpectedCompilerError(BaseModel):
    """A compiler diagnostic a failing scenario must report at an exact location."""

    model_config = ConfigDict(frozen=True)

    source_file: str
    line: int = Field(gt=0)
    type_from: str
    type_to: str
    code: str = "CS0266"

    def describe(self) -> str:
        return f"compiler error {self.code} in {self.source_file}({self.line},?)"


class Scenario(BaseModel):
    """One build of the sample project and what it should produce."""

    model_config = ConfigDict(frozen=True)

    name: str
    parallel: bool = False
    extra_constants: tuple[str, ...] = ()
    expect_success: bool = True
    expected_errors: tuple[ExpectedCompilerError, ...] = ()

    @field_validator("name")
    @classmethod
    def _require_name(cls, value: str) -> str:
        return check_scenario_name(value)

    def parameters(self) -> tuple[str, ...]:
        """Return the build properties passed to the build tool."""

        return build_properties(self.parallel, *self.extra_constants)


_FRAGMENT: Final[str] = "Android.App.Fragment"
_LOG_FRAGMENT: Final[str] = "CommonSampleLibrary.LogFragment"
_VIEW: Final[str] = "Android.Views.View"

# label, constant, type from, type to, ((file, line), ...)
_CONFLICTS: Final[tuple[tuple[str, str, str, str, tuple[tuple[str, int], ...]], ...]] = (
    ("Fragment", "NOT_CONFLICTING_FRAGMENT", _FRAGMENT, _LOG_FRAGMENT,
     (("MainActivity.cs", 26), ("AnotherMainActivity.cs", 23))),
    ("TextView", "NOT_CONFLICTING_TEXTVIEW", _VIEW, "Android.Widget.TextView",
     (("OnboardingActivityPartial.cs", 32), ("OnboardingActivity.cs", 26))),
    ("Button", "NOT_CONFLICTING_BUTTON", _VIEW, "Android.Widget.Button",
     (("OnboardingActivityPartial.cs", 34), ("OnboardingActivity.cs", 28))),
    ("LinearLayout", "NOT_CONFLICTING_LINEARLAYOUT", _VIEW, "Android.Widget.LinearLayout",
     (("OnboardingActivityPartial.cs", 41), ("OnboardingActivity.cs", 35))),
    ("RelativeLayout", "NOT_CONFLICTING_RELATIVELAYOUT", _VIEW, "Android.Widget.RelativeLayout",
     (("OnboardingActivityPartial.cs", 43), ("OnboardingActivity.cs", 37))),
)  # fmt: skip


def _variant(parallel: bool) -> str:
    return "Many" if parallel else "Few"


def default_scenarios() -> tuple[Scenario, ...]:
    """Return the scenarios of the code-behind build suite in run order."""

    scenarios = [Scenario(name=f"SuccessfulBuild{_variant(parallel)}", parallel=parallel) for parallel in (False, True)]
    for label, constant, type_from, type_to, locations in _CONFLICTS:
        for parallel in (False, True):
            scenarios.append(
                Scenario(
                    name=f"FailedBuild{_variant(parallel)}_Conflicting{label}",
                    parallel=parallel,
                    extra_constants=(constant,),
                    expect_success=False,
                    expected_errors=tuple(
                        ExpectedCompilerError(source_file=file, line=line, type_from=type_from, type_to=type_to)
                        for file, line in locations
                    ),
                )
            )
    return tuple(scenarios)


def scenario_index(scenarios: Iterable[Scenario]) -> Mapping[str, Scenario]:
    """Return ``scenarios`` keyed by name.

    Raises:
        ValueError: If two scenarios share a name.
    """

    index: dict[str, Scenario] = {}
    for scenario in scenarios:
        if scenario.name in index:
            raise ValueError(f"Scenario '{scenario.name}' defined twice")
        index[scenario.name] = scenario
    return index


_VIEW_T: Final[str] = "global::Android.Views.View"
_FRAGMENT_T: Final[str] = "global::Android.App.Fragment"
_LAYOUT_PARAMS_T: Final[str] = "global::Android.Views.ViewGroup.LayoutParams"


def _main_properties() -> tuple[ExpectedProperty, ...]:
    return (
        prop("public", "Button", "myButton"),
        prop("public", _LOG_FRAGMENT, "log_fragment"),
        prop("public", _FRAGMENT_T, "secondary_log_fragment"),
        prop("public", _LOG_FRAGMENT, "tertiary_log_fragment"),
    )


def _onboarding_intro_properties() -> tuple[ExpectedProperty, ...]:
    return (
        prop("public", "LinearLayout", "onboarding_intro_View"),
        prop("public", "TextView", "title"),
        prop("public", "TextView", "welcome"),
        prop("public", _VIEW_T, "different_view_types"),
        prop("public", _VIEW_T, "onboarding_info"),
        prop("public", "TextView", "intro_highlighted_text"),
        prop("public", "TextView", "intro_primary_text"),
        prop("public", "TextView", "intro_secondary_text"),
        prop("public", "RelativeLayout", "more_info"),
        prop("public", "TextView", "more_highlighted_text"),
        prop("public", "TextView", "more_intro_primary_text"),
        prop("public", "TextView", "more_intro_secondary_text"),
    )


def _activity_methods() -> tuple[ExpectedMethod, ...]:
    return (
        method("public override", "void", "SetContentView", f"{_VIEW_T} view"),
        method("public override", "void", "SetContentView", f"{_VIEW_T} view, {_LAYOUT_PARAMS_T} @params"),
        method("public override", "void", "SetContentView", "int layoutResID"),
        method("partial", "void", "OnSetContentView", f"{_VIEW_T} view, ref bool callBaseAfterReturn"),
        method(
            "partial",
            "void",
            "OnSetContentView",
            f"{_VIEW_T} view, {_LAYOUT_PARAMS_T} @params, ref bool callBaseAfterReturn",
        ),
        method("partial", "void", "OnSetContentView", "int layoutResID, ref bool callBaseAfterReturn"),
    )


def sample_generated_sources(layout: ProjectLayout) -> tuple[ExpectedSourceFile, ...]:
    """Return the generated sources a successful sample build must contain."""

    generated = layout.relative_generated_dir
    activity_ns = f"Xamarin.Android.Tests.{layout.project_name}"
    return (
        source(generated / "Binding.Main.g.cs", *_main_properties()),
        source(
            generated / "Binding.onboarding_info.g.cs",
            prop("public", "LinearLayout", "onboarding_stations_info_inner"),
            prop("public", "ImageView", "icon_view"),
            prop("public", "TextView", "intro_highlighted_text"),
            prop("public", "TextView", "intro_primary_text"),
        ),
        source(generated / "Binding.onboarding_intro.g.cs", *_onboarding_intro_properties()),
        source(
            generated / "Binding.settings.g.cs",
            prop("public", "ScrollView", "settings_container"),
            prop("public", "TextView", "title"),
            prop("public", "TextView", "account_type"),
            prop("public", "TextView", "account_type_subtitle"),
            prop("public", "TextView", "account_email"),
            prop("public", "Button", "subscribe_button"),
            prop("public", "TextView", "stream_quality_item_title"),
        ),
        source(
            generated / f"{activity_ns}.AnotherMainActivity.Main.g.cs",
            *_main_properties(),
            *_activity_methods(),
        ),
        source(
            generated / f"{activity_ns}.MainActivity.Main.g.cs",
            *_main_properties(),
            *_activity_methods(),
        ),
        source(
            generated / f"{activity_ns}.OnboardingActivityPartial.onboarding_intro.g.cs",
            *_onboarding_intro_properties(),
            *_activity_methods(),
        ),
    )


def sample_binaries(layout: ProjectLayout) -> tuple[Path, ...]:
    """Return the binaries (relative to the project root) a successful build produces."""

    bin_dir = layout.relative_bin_dir
    name = layout.project_name
    return (
        bin_dir / f"{name}.dll",
        bin_dir / "CommonSampleLibrary.dll",
        bin_dir / f"com.xamarin.{name}-Signed.apk",
        bin_dir / f"com.xamarin.{name}.apk",
    )


__all__ = [
    "ExpectedCompilerError",
    "Scenario",
    "default_scenarios",
    "sample_binaries",
    "sample_generated_sources",
    "scenario_index",
]

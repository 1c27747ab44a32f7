# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Fake external build tool used as an injected command runner."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from bindcheck.expectations import ExpectedMethod, ExpectedSourceFile
from bindcheck.layout import ProjectLayout
from bindcheck.process import TIMEOUT_RETURNCODE, CommandOptions, CommandResult
from bindcheck.scenarios import default_scenarios, sample_binaries, sample_generated_sources


def render_source(expected: ExpectedSourceFile) -> str:
    """Return C#-like text declaring every member of ``expected``."""

    lines = ["namespace Binding", "{", "\tsealed partial class Generated", "\t{"]
    for member in expected.members:
        if isinstance(member, ExpectedMethod):
            lines.append(f"\t\t{member.visibility} {member.type_name} {member.name} ({member.arguments})")
            lines.append("\t\t{")
            lines.append("\t\t}")
        elif member.expression_body:
            lines.append(f"\t\t{member.visibility} {member.type_name} {member.name} => FindView ();")
        else:
            lines.append(f"\t\t{member.visibility} {member.type_name} {member.name} {{")
            lines.append("\t\t\tget { return null; }")
            lines.append("\t\t}")
    lines.extend(["\t}", "}"])
    return "\n".join(lines) + "\n"


def conflict_lines(constant: str, project: Path) -> list[str]:
    """Return the CS0266 lines a build with ``constant`` reports."""

    lines: list[str] = []
    for scenario in default_scenarios():
        if constant not in scenario.extra_constants:
            continue
        for err in scenario.expected_errors:
            lines.append(
                f"{err.source_file}({err.line},13): error {err.code}: Cannot implicitly convert type "
                f"'{err.type_from}' to '{err.type_to}'. An explicit conversion exists "
                f"(are you missing a cast?) [{project}]"
            )
        break
    return lines


def _properties(args: Sequence[str]) -> dict[str, str]:
    props: dict[str, str] = {}
    for arg in args:
        if arg.startswith("-p:"):
            key, _, value = arg[3:].partition("=")
            props[key] = value
    return props


class FakeBuildTool:
    """Stand-in for the external build tool, injected as the command runner.

    Like the real tool it streams its output into ``options.output`` and
    writes a binary log only when asked to with ``-bl:<path>``.
    """

    def __init__(
        self,
        layout: ProjectLayout,
        *,
        emit_parallel_markers: bool = True,
        always_parallel: bool = False,
        skip_sources: Sequence[str] = (),
        skip_binaries: int = 0,
        timed_out: bool = False,
        write_binary_log: bool = True,
    ) -> None:
        self.layout = layout
        self.emit_parallel_markers = emit_parallel_markers
        self.always_parallel = always_parallel
        self.skip_sources = set(skip_sources)
        self.skip_binaries = skip_binaries
        self.timed_out = timed_out
        self.write_binary_log = write_binary_log
        self.calls: list[tuple[tuple[str, ...], CommandOptions]] = []

    def __call__(self, args: Sequence[str], options: CommandOptions) -> CommandResult:
        self.calls.append((tuple(args), options))
        root = self.layout.root
        binary_log = next((arg[len("-bl:") :] for arg in args if arg.startswith("-bl:")), None)
        if binary_log is not None and self.write_binary_log:
            Path(binary_log).write_bytes(b"\x00binlog")

        props = _properties(args)
        parallel = self.always_parallel or props.get("ForceParallelBuild") == "true"
        constants = [item for item in props.get("ExtraConstants", "").split(";") if item]

        lines = ["Build started.", "  Project \"CodeBehindBuildTests.sln\" on node 1 (SignAndroidPackage target(s))."]
        if parallel and self.emit_parallel_markers:
            lines.append("    Parsing layouts in parallel (4 layouts).")
            lines.append("    Generating binding code in parallel (7 files).")
        else:
            lines.append("    Parsing layouts (4 layouts).")

        if self.timed_out:
            _stream(options, lines)
            return CommandResult(
                args=tuple(args),
                returncode=TIMEOUT_RETURNCODE,
                stderr="Command timed out after 1.0s",
                timed_out=True,
            )

        errors = [line for constant in constants for line in conflict_lines(constant, self.layout.project_path)]
        if errors:
            lines.extend(errors)
            lines.append("Build FAILED.")
            lines.extend(errors)
            _stream(options, lines)
            return CommandResult(args=tuple(args), returncode=1)

        for expected in sample_generated_sources(self.layout):
            if expected.path.name in self.skip_sources:
                continue
            path = root / expected.path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(render_source(expected), encoding="utf-8")
        binaries = sample_binaries(self.layout)
        for relative in binaries[: len(binaries) - self.skip_binaries]:
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(b"MZ")
        lines.append("Build succeeded.")
        _stream(options, lines)
        return CommandResult(args=tuple(args), returncode=0)


def _stream(options: CommandOptions, lines: Sequence[str]) -> None:
    assert options.output is not None, "build output must be streamed to a log file"
    options.output.write_text("\n".join(lines) + "\n", encoding="utf-8")

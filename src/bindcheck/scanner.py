# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line-by-line scanning of build logs and generated sources."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .errors import MissingLogError
from .patterns import (
    COMPILER_DIAGNOSTIC_PATTERN,
    PARALLEL_GENERATION_PATTERN,
    PARALLEL_PARSING_PATTERN,
    compiler_error_pattern,
)


class CompilerDiagnostic(BaseModel):
    """Compiler diagnostic recovered from a build log line."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    column: int
    severity: str
    code: str
    message: str

    @property
    def is_error(self) -> bool:
        return self.severity.lower() == "error"


def iter_lines(path: Path) -> Iterator[str]:
    """Yield the lines of ``path`` without their line terminators.

    Raises:
        MissingLogError: If ``path`` does not exist.
    """

    try:
        handle = path.open(encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise MissingLogError(path) from exc
    with handle:
        for raw_line in handle:
            yield raw_line.rstrip("\r\n")


def file_matches(pattern: re.Pattern[str], path: Path) -> bool:
    """Return ``True`` as soon as one line of ``path`` matches ``pattern``.

    The pattern is matched against each line on its own; nothing spans lines.

    Raises:
        MissingLogError: If ``path`` does not exist. A missing file is a broken
            environment, not a failed match.
    """

    return any(pattern.match(line) for line in iter_lines(path))


def was_parsed_in_parallel(log_path: Path) -> bool:
    """Return whether the log announces parallel layout parsing."""

    return file_matches(PARALLEL_PARSING_PATTERN, log_path)


def was_generated_in_parallel(log_path: Path) -> bool:
    """Return whether the log announces parallel binding code generation."""

    return file_matches(PARALLEL_GENERATION_PATTERN, log_path)


def has_compiler_error(
    log_path: Path,
    source_file: str,
    line: int,
    type_from: str,
    type_to: str,
    *,
    code: str = "CS0266",
) -> bool:
    """Return whether ``code`` was reported for ``source_file`` at ``line``.

    The diagnostic line must name both ``type_from`` and ``type_to`` in single
    quotes, in that order.
    """

    return file_matches(compiler_error_pattern(source_file, line, type_from, type_to, code=code), log_path)


def iter_compiler_diagnostics(lines: Iterable[str]) -> Iterator[CompilerDiagnostic]:
    """Yield a :class:`CompilerDiagnostic` for every diagnostic-shaped line."""

    for line in lines:
        match = COMPILER_DIAGNOSTIC_PATTERN.match(line)
        if match is None:
            continue
        yield CompilerDiagnostic(
            file=match.group("file").strip(),
            line=int(match.group("line")),
            column=int(match.group("column")),
            severity=match.group("severity"),
            code=match.group("code"),
            message=match.group("message").strip(),
        )


def read_compiler_diagnostics(log_path: Path) -> list[CompilerDiagnostic]:
    """Return the unique diagnostics of ``log_path`` in first-seen order.

    MSBuild repeats every error in its closing summary, so duplicates are
    dropped.
    """

    return list(dict.fromkeys(iter_compiler_diagnostics(iter_lines(log_path))))


__all__ = [
    "CompilerDiagnostic",
    "file_matches",
    "has_compiler_error",
    "iter_compiler_diagnostics",
    "iter_lines",
    "read_compiler_diagnostics",
    "was_generated_in_parallel",
    "was_parsed_in_parallel",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Verification of generated binding sources and produced binaries."""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

from .errors import MissingLogError, Problem, ProblemKind
from .expectations import ExpectedMethod, ExpectedProperty, ExpectedSourceFile
from .scanner import file_matches


def source_has_member(source_path: Path, member: ExpectedProperty | ExpectedMethod) -> bool:
    """Return whether ``source_path`` declares ``member``.

    Raises:
        MissingLogError: If ``source_path`` does not exist.
    """

    return file_matches(member.pattern(), source_path)


def _missing_file(expected: ExpectedSourceFile, path: Path) -> Problem:
    return Problem(
        kind=ProblemKind.MISSING_FILE,
        subject=expected.path.as_posix(),
        message=f"generated file {path} should exist",
    )


class ArtifactVerifier:
    """Check generated sources and binaries relative to a project root.

    Every check reports all of its misses; nothing stops at the first one.
    """

    def __init__(self, project_root: Path) -> None:
        self._root = project_root

    @property
    def project_root(self) -> Path:
        return self._root

    def verify_source(self, expected: ExpectedSourceFile) -> list[Problem]:
        """Return the problems found in one generated source file.

        A missing file, including one that disappears while it is scanned,
        yields a single ``missing-file`` problem instead of one per member.
        """

        path = self._root / expected.path
        if not path.is_file():
            return [_missing_file(expected, path)]
        problems: list[Problem] = []
        for member in expected.members:
            try:
                found = source_has_member(path, member)
            except MissingLogError:
                return [_missing_file(expected, path)]
            if not found:
                problems.append(
                    Problem(
                        kind=ProblemKind.MISSING_MEMBER,
                        subject=f"{expected.path.as_posix()}:{member.name}",
                        message=f"{member.describe()} must exist in {expected.path.as_posix()}",
                    )
                )
        return problems

    def verify_sources(self, sources: Iterable[ExpectedSourceFile]) -> list[Problem]:
        """Return the problems across every expected generated source."""

        problems: list[Problem] = []
        for expected in sources:
            problems.extend(self.verify_source(expected))
        return problems

    def verify_binaries(self, binaries: Iterable[Path]) -> list[Problem]:
        """Return one problem per expected binary missing on disk."""

        problems: list[Problem] = []
        for relative in binaries:
            path = self._root / relative
            if not path.is_file():
                problems.append(
                    Problem(
                        kind=ProblemKind.MISSING_BINARY,
                        subject=relative.as_posix(),
                        message=f"file {path} should exist",
                    )
                )
        return problems

    def copy_generated_sources(self, sources: Iterable[ExpectedSourceFile], destination: Path) -> list[Path]:
        """Copy each existing generated source into ``destination``.

        Returns:
            list[Path]: Paths of the copies written.
        """

        copied: list[Path] = []
        for expected in sources:
            path = self._root / expected.path
            if not path.is_file():
                continue
            destination.mkdir(parents=True, exist_ok=True)
            target = destination / path.name
            shutil.copy2(path, target)
            copied.append(target)
        return copied


__all__ = ["ArtifactVerifier", "source_has_member"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error taxonomy shared by the harness components."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class HarnessError(RuntimeError):
    """Base class for harness failures that are not assertion failures."""


class ConfigError(HarnessError):
    """Raised when configuration input is invalid."""


class EnvironmentSetupError(HarnessError):
    """Raised when a prerequisite of the test environment is missing.

    These abort the whole run: a missing project, a missing build executable
    or a log that was never written all mean the harness cannot judge the
    build under test.
    """


class MissingLogError(EnvironmentSetupError):
    """Raised when a log file expected by the scanner does not exist."""

    def __init__(self, path: Path) -> None:
        """Initialise the error with the absent log path.

        Args:
            path: Log file that could not be found.
        """

        super().__init__(f"Log file '{path}' not found")
        self.path = path


class ProblemKind(str, Enum):
    """Categories of assertion problems reported by a scenario."""

    BUILD_OUTCOME = "build-outcome"
    BUILD_TIMEOUT = "build-timeout"
    MISSING_FILE = "missing-file"
    MISSING_MEMBER = "missing-member"
    MISSING_BINARY = "missing-binary"
    MISSING_LOG = "missing-log"
    MISSING_DIAGNOSTIC = "missing-diagnostic"
    CONCURRENCY_EVIDENCE = "concurrency-evidence"


@dataclass(slots=True, frozen=True)
class Problem:
    """Single missing or unexpected item found while verifying a scenario."""

    kind: ProblemKind
    subject: str
    message: str

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class ScenarioAssertionError(AssertionError):
    """Raised when a scenario's observed behaviour differs from its expectation."""

    def __init__(self, scenario: str, problems: Iterable[Problem]) -> None:
        """Initialise the error with every problem found for ``scenario``.

        Args:
            scenario: Name of the scenario that failed.
            problems: Problems collected while asserting the scenario.
        """

        self.scenario = scenario
        self.problems: tuple[Problem, ...] = tuple(problems)
        lines = [f"Scenario '{scenario}' failed with {len(self.problems)} problem(s):"]
        lines.extend(f"  - {problem}" for problem in self.problems)
        super().__init__("\n".join(lines))

    def kinds(self) -> set[ProblemKind]:
        """Return the distinct problem kinds carried by the error."""

        return {problem.kind for problem in self.problems}


class BuildTimeoutError(ScenarioAssertionError):
    """Raised when the external build exceeded its configured timeout."""


__all__ = [
    "BuildTimeoutError",
    "ConfigError",
    "EnvironmentSetupError",
    "HarnessError",
    "MissingLogError",
    "Problem",
    "ProblemKind",
    "ScenarioAssertionError",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Filesystem layout of the sample project and of the archive tree."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .config import PathsConfig


def check_scenario_name(name: str) -> str:
    """Return ``name`` when it can serve as a single path segment.

    Raises:
        ValueError: If ``name`` is blank, is ``.`` or ``..``, or contains a
            path separator.
    """

    if not name.strip() or name in {".", ".."} or any(sep in name for sep in ("/", "\\")):
        raise ValueError(f"scenario name {name!r} must be a single path segment")
    return name


@dataclass(slots=True, frozen=True)
class ProjectLayout:
    """Resolve every path the harness reads, writes or removes.

    Paths named ``*_dir`` or ``*_path`` are absolute; ``relative_*`` values
    are relative to :attr:`root`.
    """

    root: Path
    project_name: str
    configuration: str
    archive_root: Path

    @classmethod
    def from_config(cls, paths: PathsConfig) -> ProjectLayout:
        """Build the layout described by ``paths``."""

        top = paths.top_directory.expanduser()
        return cls(
            root=(top / paths.project_subdirectory).absolute(),
            project_name=paths.project_name,
            configuration=paths.configuration,
            archive_root=(paths.resolved_test_output_directory() / paths.archive_subdirectory).absolute(),
        )

    @property
    def project_path(self) -> Path:
        """Return the solution file built by every scenario."""

        return self.root / f"{self.project_name}.sln"

    @property
    def relative_obj_dir(self) -> Path:
        return Path("obj") / self.configuration

    @property
    def relative_bin_dir(self) -> Path:
        return Path("bin") / self.configuration

    @property
    def relative_generated_dir(self) -> Path:
        return self.relative_obj_dir / "generated"

    @property
    def obj_dir(self) -> Path:
        return self.root / self.relative_obj_dir

    @property
    def bin_dir(self) -> Path:
        return self.root / self.relative_bin_dir

    def log_name(self, scenario: str) -> str:
        """Return the build log file name for ``scenario``."""

        return f"{self.project_name}.{check_scenario_name(scenario)}.log"

    def log_path(self, scenario: str) -> Path:
        return self.root / self.log_name(scenario)

    def stale_log_glob(self) -> str:
        """Return the glob matching every per-scenario log in :attr:`root`."""

        return f"{self.project_name}.*.log"

    def archive_dir(self, scenario: str) -> Path:
        """Return the directory receiving the archived artifacts of ``scenario``."""

        return self.archive_root / check_scenario_name(scenario) / self.configuration

    def archive_generated_dir(self, scenario: str) -> Path:
        return self.archive_dir(scenario) / "generated"


__all__ = ["ProjectLayout", "check_scenario_name"]

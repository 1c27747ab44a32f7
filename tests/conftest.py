# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from bindcheck.config import Config, OutputConfig, PathsConfig
from bindcheck.layout import ProjectLayout


@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Return a configuration rooted in ``tmp_path`` with plain output."""

    return Config(
        paths=PathsConfig(top_directory=tmp_path),
        output=OutputConfig(emoji=False, color=False),
    )


@pytest.fixture
def layout(config: Config) -> ProjectLayout:
    """Return the project layout with an existing solution file."""

    resolved = ProjectLayout.from_config(config.paths)
    resolved.root.mkdir(parents=True, exist_ok=True)
    resolved.project_path.write_text("Microsoft Visual Studio Solution File\n", encoding="utf-8")
    return resolved

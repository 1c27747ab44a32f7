# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading helpers for the build-verification harness."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

CONFIG_KEY: Final[str] = "bindcheck"
PYPROJECT_NAME: Final[str] = "pyproject.toml"
TOP_DIRECTORY_ENV: Final[str] = "BINDCHECK_TOP_DIRECTORY"
CONFIGURATION_ENV: Final[str] = "BINDCHECK_CONFIGURATION"


class PathsConfig(BaseModel):
    """Locations of the sample project and of the archive tree."""

    model_config = ConfigDict(validate_assignment=True)

    top_directory: Path = Field(default_factory=Path)
    configuration: str = "Debug"
    project_subdirectory: Path = Path("tests/CodeBehind/BuildTests")
    project_name: str = "CodeBehindBuildTests"
    test_output_directory: Path | None = None
    archive_subdirectory: str = "CodeBehind"

    @field_validator("configuration", "project_name", "archive_subdirectory")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("value must not be empty")
        return value

    def resolved_test_output_directory(self) -> Path:
        """Return the archive root, defaulting to ``bin/Test<Configuration>``."""

        if self.test_output_directory is not None:
            return self.test_output_directory
        return self.top_directory / "bin" / f"Test{self.configuration}"


class BuildConfig(BaseModel):
    """How the external build system is invoked."""

    model_config = ConfigDict(validate_assignment=True)

    command: list[str] = Field(default_factory=lambda: ["msbuild"])
    target: str = "SignAndroidPackage"
    verbosity: str = "diag"
    timeout: float | None = 3600.0
    binary_log: str | None = "msbuild.binlog"
    process_log: str | None = "process.log"
    log_files: list[str] = Field(default_factory=list)

    @field_validator("command")
    @classmethod
    def _require_command(cls, value: list[str]) -> list[str]:
        if not value or not value[0].strip():
            raise ValueError("build command requires at least an executable")
        return value

    @field_validator("timeout")
    @classmethod
    def _positive_timeout(cls, value: float | None) -> float | None:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive")
        return value

    @field_validator("binary_log", "process_log")
    @classmethod
    def _blank_disables(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value

    def produced_logs(self) -> list[str]:
        """Return every log file name a build leaves in the project directory.

        The process record and the binary log come first, followed by
        ``log_files``; disabled entries are skipped and duplicates dropped.
        """

        names = (self.process_log, self.binary_log, *self.log_files)
        return list(dict.fromkeys(name for name in names if name))


class OutputConfig(BaseModel):
    """Console output preferences."""

    model_config = ConfigDict(validate_assignment=True)

    emoji: bool = True
    color: bool = True


class Config(BaseModel):
    """Top-level harness configuration."""

    model_config = ConfigDict(validate_assignment=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    build: BuildConfig = Field(default_factory=BuildConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as exc:
        raise ConfigError(f"Configuration file '{path}' not found") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration file '{path}' is not valid TOML: {exc}") from exc
    if path.name == PYPROJECT_NAME:
        tool = data.get("tool", {})
        return dict(tool.get(CONFIG_KEY, {})) if isinstance(tool, Mapping) else {}
    section = data.get(CONFIG_KEY, data)
    if not isinstance(section, Mapping):
        raise ConfigError(f"'{CONFIG_KEY}' in '{path}' must be a table")
    return dict(section)


def _apply_environment(data: dict[str, Any], env: Mapping[str, str]) -> dict[str, Any]:
    paths = dict(data.get("paths") or {})
    if top := env.get(TOP_DIRECTORY_ENV):
        paths["top_directory"] = top
    if configuration := env.get(CONFIGURATION_ENV):
        paths["configuration"] = configuration
    if paths:
        data = {**data, "paths": paths}
    return data


def load_config(path: Path | None = None, *, env: Mapping[str, str] | None = None) -> Config:
    """Return the harness configuration built from ``path`` and ``env``.

    Relative ``top_directory`` and ``test_output_directory`` values in a file
    are resolved against the directory containing that file.

    Args:
        path: Optional TOML file. ``pyproject.toml`` is read from its
            ``[tool.bindcheck]`` table, any other file from ``[bindcheck]``
            or its top level.
        env: Environment mapping consulted for overrides. Defaults to
            :data:`os.environ`.

    Returns:
        Config: Validated configuration.

    Raises:
        ConfigError: If the file is missing, malformed or fails validation.
    """

    data: dict[str, Any] = _read_toml(path) if path is not None else {}
    data = _apply_environment(data, os.environ if env is None else env)
    try:
        config = Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
    if path is not None:
        base = path.parent
        paths = config.paths
        if not paths.top_directory.is_absolute():
            paths.top_directory = base / paths.top_directory
        if paths.test_output_directory is not None and not paths.test_output_directory.is_absolute():
            paths.test_output_directory = base / paths.test_output_directory
    return config


__all__ = [
    "BuildConfig",
    "Config",
    "CONFIGURATION_ENV",
    "OutputConfig",
    "PathsConfig",
    "TOP_DIRECTORY_ENV",
    "load_config",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Read-only catalog of versioned package descriptors used by test fixtures."""

from __future__ import annotations

import tomllib
from collections.abc import Iterable, Iterator, Mapping
from pathlib import Path, PureWindowsPath
from types import MappingProxyType
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError

HINT_PATH_KEY: Final[str] = "HintPath"


class ReferenceEntry(BaseModel):
    """Named pointer to a library file together with its item metadata."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    metadata: Mapping[str, str] = Field(default_factory=dict)

    @field_validator("identifier")
    @classmethod
    def _require_identifier(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("reference identifier must not be empty")
        return value

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))

    @classmethod
    def from_metadata_string(cls, identifier: str, metadata: str) -> ReferenceEntry:
        """Build an entry from the ``Key=Value;Key=Value`` metadata form.

        Args:
            identifier: Reference identifier (usually the assembly name).
            metadata: Semicolon separated ``Key=Value`` pairs. Blank segments
                are ignored; a segment without ``=`` is rejected.

        Returns:
            ReferenceEntry: Entry carrying the parsed metadata.

        Raises:
            ValueError: If a segment is not a ``Key=Value`` pair.
        """

        values: dict[str, str] = {}
        for segment in metadata.split(";"):
            segment = segment.strip()
            if not segment:
                continue
            key, sep, value = segment.partition("=")
            if not sep or not key.strip():
                raise ValueError(f"metadata segment '{segment}' is not a Key=Value pair")
            values[key.strip()] = value.strip()
        return cls(identifier=identifier, metadata=values)

    @property
    def hint_path(self) -> PureWindowsPath | None:
        """Return the ``HintPath`` metadata as a Windows-style path when present."""

        raw = self.metadata.get(HINT_PATH_KEY)
        return PureWindowsPath(raw) if raw else None


class PackageDescriptor(BaseModel):
    """Immutable metadata describing one version of a third-party package."""

    model_config = ConfigDict(frozen=True)

    identifier: str
    version: str
    target_framework: str
    references: tuple[ReferenceEntry, ...] = ()

    @field_validator("identifier", "version", "target_framework")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("package fields must not be empty")
        return value

    @property
    def is_prerelease(self) -> bool:
        """Return ``True`` when the version carries a prerelease suffix."""

        return "-" in self.version

    @property
    def folder_name(self) -> str:
        """Return the ``<id>.<version>`` directory name used by package restore."""

        return f"{self.identifier}.{self.version}"


class PackageRegistry(Mapping[str, PackageDescriptor]):
    """Read-only mapping from symbolic names to package descriptors.

    Registries are built explicitly and handed to the fixtures that need them;
    once :meth:`freeze` has been called no further registration is accepted.
    """

    def __init__(self, entries: Iterable[tuple[str, PackageDescriptor]] = ()) -> None:
        """Initialise the registry, registering any supplied ``entries``.

        Args:
            entries: Optional ``(name, descriptor)`` pairs registered in order.
        """

        self._packages: dict[str, PackageDescriptor] = {}
        self._frozen = False
        for name, descriptor in entries:
            self.register(name, descriptor)

    def register(self, name: str, descriptor: PackageDescriptor) -> None:
        """Register ``descriptor`` under ``name``.

        Args:
            name: Unique symbolic name of the descriptor.
            descriptor: Package metadata.

        Raises:
            ValueError: If ``name`` is blank or already registered.
            RuntimeError: If the registry has been frozen.
        """

        if self._frozen:
            raise RuntimeError("package registry is frozen")
        if not name.strip():
            raise ValueError("package name must not be empty")
        if name in self._packages:
            raise ValueError(f"Package '{name}' already registered")
        self._packages[name] = descriptor

    def freeze(self) -> PackageRegistry:
        """Reject further registration and return ``self``."""

        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        """Return whether registration has been closed."""

        return self._frozen

    def try_get(self, name: str) -> PackageDescriptor | None:
        """Return the descriptor registered as ``name`` or ``None``."""

        return self._packages.get(name)

    def versions_of(self, identifier: str) -> tuple[PackageDescriptor, ...]:
        """Return every descriptor whose package identifier is ``identifier``."""

        return tuple(pkg for pkg in self._packages.values() if pkg.identifier == identifier)

    def __getitem__(self, key: str) -> PackageDescriptor:
        return self._packages[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)


def _reference_from_raw(raw: Any) -> ReferenceEntry:
    if isinstance(raw, str):
        return ReferenceEntry(identifier=raw)
    if not isinstance(raw, Mapping):
        raise ConfigError(f"reference entry must be a table or string, got {type(raw).__name__}")
    metadata = raw.get("metadata", {})
    if isinstance(metadata, str):
        return ReferenceEntry.from_metadata_string(str(raw.get("identifier", "")), metadata)
    return ReferenceEntry(identifier=str(raw.get("identifier", "")), metadata=metadata)


def load_package_catalog(path: Path) -> PackageRegistry:
    """Load a frozen :class:`PackageRegistry` from the ``[packages]`` table of ``path``.

    Each ``[packages.<Name>]`` table provides ``identifier``, ``version``,
    ``target_framework`` and an optional ``references`` array whose items are
    either plain identifiers or tables with ``identifier`` and ``metadata``
    (a table, or a ``Key=Value;...`` string).

    Raises:
        ConfigError: If the file cannot be read or an entry is invalid.
    """

    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Cannot read package catalog '{path}': {exc}") from exc

    packages = data.get("packages", {})
    if not isinstance(packages, Mapping):
        raise ConfigError(f"'packages' in '{path}' must be a table")

    registry = PackageRegistry()
    for name, raw in packages.items():
        if not isinstance(raw, Mapping):
            raise ConfigError(f"package '{name}' must be a table")
        try:
            references = tuple(_reference_from_raw(item) for item in raw.get("references", ()))
            descriptor = PackageDescriptor(
                identifier=raw.get("identifier", ""),
                version=raw.get("version", ""),
                target_framework=raw.get("target_framework", ""),
                references=references,
            )
        except (ValidationError, ValueError) as exc:
            raise ConfigError(f"Invalid package '{name}' in '{path}': {exc}") from exc
        registry.register(name, descriptor)
    return registry.freeze()


__all__ = [
    "HINT_PATH_KEY",
    "PackageDescriptor",
    "PackageRegistry",
    "ReferenceEntry",
    "load_package_catalog",
]

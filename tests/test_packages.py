# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the package descriptor catalog."""

from __future__ import annotations

from pathlib import Path, PureWindowsPath

import pytest
from pydantic import ValidationError

from bindcheck.errors import ConfigError
from bindcheck.packages import PackageDescriptor, PackageRegistry, ReferenceEntry, load_package_catalog

SUPPORT_V4_HINT = (
    "..\\packages\\Xamarin.Android.Support.v4.21.0.3.0\\lib\\MonoAndroid10\\Xamarin.Android.Support.v4.dll"
)


def _support_v4(version: str = "21.0.3.0") -> PackageDescriptor:
    return PackageDescriptor(
        identifier="Xamarin.Android.Support.v4",
        version=version,
        target_framework="MonoAndroid10",
        references=(ReferenceEntry.from_metadata_string("Xamarin.Android.Support.v4", f"HintPath={SUPPORT_V4_HINT}"),),
    )


def test_registry_behaves_like_mapping() -> None:
    descriptor = _support_v4()
    registry = PackageRegistry([("AndroidSupportV4_21_0_3_0", descriptor)])

    assert len(registry) == 1
    assert "AndroidSupportV4_21_0_3_0" in registry
    assert registry["AndroidSupportV4_21_0_3_0"] is descriptor
    assert list(registry) == ["AndroidSupportV4_21_0_3_0"]
    assert registry.try_get("missing") is None
    with pytest.raises(KeyError):
        registry["missing"]


def test_registry_rejects_duplicate_names() -> None:
    registry = PackageRegistry()
    registry.register("AndroidSupportV4", _support_v4())
    with pytest.raises(ValueError, match="already registered"):
        registry.register("AndroidSupportV4", _support_v4("22.1.1.1"))


def test_frozen_registry_rejects_registration() -> None:
    registry = PackageRegistry().freeze()
    assert registry.frozen
    with pytest.raises(RuntimeError):
        registry.register("AndroidSupportV4", _support_v4())


def test_versions_of_groups_by_identifier() -> None:
    registry = PackageRegistry(
        [
            ("AndroidSupportV4_21_0_3_0", _support_v4()),
            ("AndroidSupportV4Beta", _support_v4("21.0.0.0-beta1")),
        ]
    )
    versions = [pkg.version for pkg in registry.versions_of("Xamarin.Android.Support.v4")]
    assert versions == ["21.0.3.0", "21.0.0.0-beta1"]
    assert registry["AndroidSupportV4Beta"].is_prerelease
    assert not registry["AndroidSupportV4_21_0_3_0"].is_prerelease


def test_descriptor_is_immutable_and_validated() -> None:
    descriptor = _support_v4()
    with pytest.raises(ValidationError):
        descriptor.version = "1.0"  # type: ignore[misc]
    with pytest.raises(ValidationError):
        PackageDescriptor(identifier="", version="1.0", target_framework="MonoAndroid10")
    assert descriptor.folder_name == "Xamarin.Android.Support.v4.21.0.3.0"


def test_reference_metadata_string_parsing() -> None:
    entry = ReferenceEntry.from_metadata_string("Lib", "HintPath=..\\lib\\Lib.dll; Private = True ;")
    assert entry.metadata == {"HintPath": "..\\lib\\Lib.dll", "Private": "True"}
    assert entry.hint_path == PureWindowsPath("..\\lib\\Lib.dll")
    assert entry.hint_path is not None and entry.hint_path.name == "Lib.dll"
    assert ReferenceEntry(identifier="Lib").hint_path is None
    with pytest.raises(ValueError):
        ReferenceEntry.from_metadata_string("Lib", "HintPath")


def test_reference_metadata_is_read_only() -> None:
    entry = ReferenceEntry(identifier="Lib", metadata={"HintPath": "a.dll"})
    with pytest.raises(TypeError):
        entry.metadata["HintPath"] = "b.dll"  # type: ignore[index]


def test_load_package_catalog(tmp_path: Path) -> None:
    catalog = tmp_path / "packages.toml"
    catalog.write_text(
        """
[packages.AndroidSupportV4_21_0_3_0]
identifier = "Xamarin.Android.Support.v4"
version = "21.0.3.0"
target_framework = "MonoAndroid10"
references = [
  { identifier = "Xamarin.Android.Support.v4", metadata = 'HintPath=..\\packages\\Xamarin.Android.Support.v4.21.0.3.0\\lib\\MonoAndroid10\\Xamarin.Android.Support.v4.dll' },
]

[packages.SupportV7AppCompat]
identifier = "Xamarin.Android.Support.v7.AppCompat"
version = "25.4.0.1"
target_framework = "MonoAndroid70"
references = [
  { identifier = "Xamarin.Android.Support.v7.AppCompat", metadata = { HintPath = "..\\\\packages\\\\appcompat.dll" } },
  "Xamarin.Android.Support.Compat",
]
""",
        encoding="utf-8",
    )

    registry = load_package_catalog(catalog)

    assert registry.frozen
    assert list(registry) == ["AndroidSupportV4_21_0_3_0", "SupportV7AppCompat"]
    v4 = registry["AndroidSupportV4_21_0_3_0"]
    assert v4.references[0].hint_path == PureWindowsPath(SUPPORT_V4_HINT)
    appcompat = registry["SupportV7AppCompat"]
    assert [ref.identifier for ref in appcompat.references] == [
        "Xamarin.Android.Support.v7.AppCompat",
        "Xamarin.Android.Support.Compat",
    ]
    assert appcompat.references[0].hint_path == PureWindowsPath("..\\packages\\appcompat.dll")


def test_load_package_catalog_rejects_invalid_entries(tmp_path: Path) -> None:
    catalog = tmp_path / "packages.toml"
    catalog.write_text('[packages.Broken]\nidentifier = "X"\nversion = ""\ntarget_framework = "MonoAndroid10"\n')
    with pytest.raises(ConfigError, match="Broken"):
        load_package_catalog(catalog)
    with pytest.raises(ConfigError):
        load_package_catalog(tmp_path / "absent.toml")

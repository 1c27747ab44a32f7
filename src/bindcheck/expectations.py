# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Expected members of generated binding sources."""

from __future__ import annotations

import re
from collections.abc import Iterator
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .patterns import method_pattern, property_pattern


class _MemberBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    visibility: str
    type_name: str
    name: str

    @field_validator("visibility", "type_name", "name")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("member visibility, type and name must not be empty")
        return value


class ExpectedProperty(_MemberBase):
    """Generated property, either expression-bodied (``=>``) or block-bodied."""

    kind: Literal["property"] = "property"
    expression_body: bool = True

    def pattern(self) -> re.Pattern[str]:
        """Return the declaration line pattern for this property."""

        return property_pattern(self.visibility, self.type_name, self.name, expression_body=self.expression_body)

    def describe(self) -> str:
        return f"Property {self.name}"


class ExpectedMethod(_MemberBase):
    """Generated method with its exact parameter list."""

    kind: Literal["method"] = "method"
    arguments: str = ""

    def pattern(self) -> re.Pattern[str]:
        """Return the declaration line pattern for this method."""

        return method_pattern(self.visibility, self.type_name, self.name, self.arguments)

    def describe(self) -> str:
        return f"Method {self.name} ({self.arguments})"


ExpectedMember = Annotated[ExpectedProperty | ExpectedMethod, Field(discriminator="kind")]


class ExpectedSourceFile(BaseModel):
    """A generated source file and the members it must declare.

    ``path`` is relative to the project root.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    for_many: bool = False
    members: tuple[ExpectedMember, ...] = ()

    @field_validator("path")
    @classmethod
    def _relative_path(cls, value: Path) -> Path:
        if value == Path():
            raise ValueError("source path must not be empty")
        if value.is_absolute():
            raise ValueError("source path must be relative to the project root")
        return value

    def properties(self) -> Iterator[ExpectedProperty]:
        """Yield the expected properties in declaration order."""

        return (member for member in self.members if isinstance(member, ExpectedProperty))

    def methods(self) -> Iterator[ExpectedMethod]:
        """Yield the expected methods in declaration order."""

        return (member for member in self.members if isinstance(member, ExpectedMethod))


def prop(visibility: str, type_name: str, name: str, *, expression_body: bool = True) -> ExpectedProperty:
    """Shorthand for :class:`ExpectedProperty`."""

    return ExpectedProperty(visibility=visibility, type_name=type_name, name=name, expression_body=expression_body)


def method(visibility: str, type_name: str, name: str, arguments: str = "") -> ExpectedMethod:
    """Shorthand for :class:`ExpectedMethod`."""

    return ExpectedMethod(visibility=visibility, type_name=type_name, name=name, arguments=arguments)


def source(path: Path | str, *members: ExpectedProperty | ExpectedMethod, for_many: bool = False) -> ExpectedSourceFile:
    """Shorthand for :class:`ExpectedSourceFile`."""

    return ExpectedSourceFile(path=Path(path), for_many=for_many, members=members)


__all__ = [
    "ExpectedMember",
    "ExpectedMethod",
    "ExpectedProperty",
    "ExpectedSourceFile",
    "method",
    "prop",
    "source",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Line-anchored regular expressions recognised in logs and generated sources."""

from __future__ import annotations

import re
from typing import Final

PARALLEL_PARSING_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*Parsing layouts in parallel.*$")
PARALLEL_GENERATION_PATTERN: Final[re.Pattern[str]] = re.compile(r"^\s*Generating binding code in parallel.*$")

# <file>(<line>,<col>): <severity> <code>: <message>
COMPILER_DIAGNOSTIC_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"^\s*(?P<file>[^\s(][^(]*?)\((?P<line>\d+),(?P<column>\d+)\):\s+"
    r"(?P<severity>[^\s:]+)\s+(?P<code>[A-Za-z]+\d+):\s*(?P<message>.*)$"
)

EXPRESSION_BODY_MARKER: Final[str] = "=>"
BLOCK_BODY_MARKER: Final[str] = "{"


def literal_pattern(text: str) -> str:
    """Return ``text`` escaped for literal use inside a regular expression.

    Periods, parentheses, brackets, braces and every other metacharacter are
    escaped; identifiers such as ``global::Android.App.Fragment`` or
    ``@params`` come through matching only themselves.

    Raises:
        TypeError: If ``text`` is ``None``.
    """

    if text is None:
        raise TypeError("cannot escape None")
    return re.escape(text)


def _words(text: str) -> str:
    return r"\s+".join(literal_pattern(word) for word in text.split())


def property_pattern(visibility: str, type_name: str, name: str, *, expression_body: bool) -> re.Pattern[str]:
    """Return the pattern matching a generated property declaration line."""

    marker = EXPRESSION_BODY_MARKER if expression_body else BLOCK_BODY_MARKER
    return re.compile(
        rf"^\s+{_words(visibility)}\s+{literal_pattern(type_name)}\s+{literal_pattern(name)}\s+"
        rf"{literal_pattern(marker)}.*$"
    )


def method_pattern(visibility: str, type_name: str, name: str, arguments: str) -> re.Pattern[str]:
    """Return the pattern matching a generated method declaration line."""

    return re.compile(
        rf"^\s+{_words(visibility)}\s+{literal_pattern(type_name)}\s+{literal_pattern(name)}\s+"
        rf"\({literal_pattern(arguments)}\).*$"
    )


def compiler_error_pattern(
    source_file: str,
    line: int,
    type_from: str,
    type_to: str,
    *,
    code: str = "CS0266",
) -> re.Pattern[str]:
    """Return the pattern for a type-conversion error reported at ``source_file(line,*)``."""

    return re.compile(
        rf"^{literal_pattern(source_file)}\({line},\d+\): \S+ {literal_pattern(code)}:"
        rf"[^']+'{literal_pattern(type_from)}'[^']+'{literal_pattern(type_to)}'.*$"
    )


__all__ = [
    "BLOCK_BODY_MARKER",
    "COMPILER_DIAGNOSTIC_PATTERN",
    "EXPRESSION_BODY_MARKER",
    "PARALLEL_GENERATION_PATTERN",
    "PARALLEL_PARSING_PATTERN",
    "compiler_error_pattern",
    "literal_pattern",
    "method_pattern",
    "property_pattern",
]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""User-facing progress output with optional colour and emoji support."""

from __future__ import annotations

import sys
from typing import Final

ANSI: Final[dict[str, str]] = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "blue": "\033[34;1m",
    "cyan": "\033[36;1m",
    "red": "\033[31;1m",
    "green": "\033[32;1m",
    "yellow": "\033[33;1m",
}

_PREFIXES: Final[dict[str, tuple[str, str]]] = {
    "info": ("ℹ️ ", ""),
    "ok": ("✅ ", "green"),
    "warn": ("⚠️ ", "yellow"),
    "fail": ("❌ ", "red"),
    "step": ("▶ ", "cyan"),
}


def is_tty() -> bool:
    """Return ``True`` when stdout appears to be a TTY."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):  # pragma: no cover - closed stream
        return False


def colorize(text: str, code: str, enable: bool) -> str:
    """Wrap ``text`` in ANSI colour codes when *enable* is truthy."""

    if not enable or not code or not is_tty():
        return text
    return f"{ANSI.get(code, '')}{text}{ANSI['reset']}"


def emoji(symbol: str, enable: bool) -> str:
    """Return *symbol* when emoji output is enabled, otherwise blank."""

    return symbol if enable else ""


def _emit(level: str, msg: str, *, use_emoji: bool, use_color: bool = False) -> None:
    symbol, color = _PREFIXES[level]
    print(f"{emoji(symbol, use_emoji)}{colorize(msg, color, use_color)}")


def section(title: str, *, use_color: bool) -> None:
    """Print a section header, typically one per scenario."""

    print(
        f"\n{colorize('───', 'blue', use_color)} "
        f"{colorize(title, 'cyan', use_color)} "
        f"{colorize('───', 'blue', use_color)}"
    )


def step(scenario: str, name: str, *, use_emoji: bool, use_color: bool = False) -> None:
    """Announce that ``scenario`` entered orchestration step ``name``."""

    _emit("step", f"{scenario}: {name}", use_emoji=use_emoji, use_color=use_color)


def info(msg: str, *, use_emoji: bool) -> None:
    """Emit an informational message."""

    _emit("info", msg, use_emoji=use_emoji)


def ok(msg: str, *, use_emoji: bool, use_color: bool = False) -> None:
    """Emit a success message."""

    _emit("ok", msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool, use_color: bool = False) -> None:
    """Emit a warning message."""

    _emit("warn", msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool, use_color: bool = False) -> None:
    """Emit an error message."""

    _emit("fail", msg, use_emoji=use_emoji, use_color=use_color)


__all__ = ["ANSI", "colorize", "emoji", "fail", "info", "is_tty", "ok", "section", "step", "warn"]

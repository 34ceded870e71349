"""Leveled console logging for the logstreamd daemon.

Messages at ``warning`` and above go to stderr. The daemon stamps each
line with the local time so long-running output can be correlated with
the stream reader files it reacted to.
"""

from __future__ import annotations

import os
import sys
from datetime import datetime
from enum import IntEnum

from rich.console import Console
from rich.text import Text


class LogLevel(IntEnum):
    TRACE = 10
    DEBUG = 20
    INFO = 30
    SUCCESS = 35
    WARNING = 40
    ERROR = 50


LEVEL_NAMES = ("trace", "debug", "info", "success", "warning", "error")
_ALIASES = {"warn": LogLevel.WARNING}
_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "",
    LogLevel.SUCCESS: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "bold red",
}
_DEFAULT_LEVEL = LogLevel.INFO
_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured_level: LogLevel | None = None
_no_color_override: bool | None = None
_timestamps_override: bool | None = None


def parse_level(value: str | None) -> LogLevel:
    """Map a level name to a ``LogLevel``; unknown or empty names mean ``info``."""
    normalized = (value or "").strip().lower()
    if normalized in LEVEL_NAMES:
        return LogLevel[normalized.upper()]
    return _ALIASES.get(normalized, _DEFAULT_LEVEL)


def configured_level() -> LogLevel:
    global _configured_level
    if _configured_level is None:
        _configured_level = parse_level(os.environ.get("LOGSTREAMD_LOG_LEVEL"))
    return _configured_level


def set_level(value: str | None) -> None:
    """Set the active log level."""
    global _configured_level
    _configured_level = parse_level(value)


def set_no_color(value: bool) -> None:
    """Force colorless output regardless of environment."""
    global _no_color_override
    _no_color_override = value


def set_timestamps(value: bool) -> None:
    """Prefix every line with the local time."""
    global _timestamps_override
    _timestamps_override = value


def is_enabled(level: LogLevel) -> bool:
    return level >= configured_level()


def _no_color() -> bool:
    if _no_color_override is not None:
        return _no_color_override
    return bool(os.environ.get("NO_COLOR") or os.environ.get("LOGSTREAMD_NO_COLOR"))


def _timestamps() -> bool:
    if _timestamps_override is not None:
        return _timestamps_override
    return bool(os.environ.get("LOGSTREAMD_LOG_TIME"))


def _render(level: LogLevel, message: str, style: str | None) -> Text:
    text = Text()
    if _timestamps():
        text.append(f"{datetime.now().strftime(_TIME_FORMAT)} ", style="dim")
    text.append(message, style=style if style is not None else _STYLES[level])
    return text


def emit(
    level: LogLevel,
    message: str,
    *,
    style: str | None = None,
    stderr: bool | None = None,
) -> None:
    if not is_enabled(level):
        return
    to_stderr = level >= LogLevel.WARNING if stderr is None else stderr
    console = Console(
        file=sys.stderr if to_stderr else sys.stdout,
        soft_wrap=True,
        highlight=False,
        no_color=_no_color(),
    )
    console.print(_render(level, message, style))


def trace(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.TRACE, message, style=style)


def debug(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.DEBUG, message, style=style)


def info(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.INFO, message, style=style)


def success(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.SUCCESS, message, style=style)


def warning(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.WARNING, message, style=style)


def error(message: str, *, style: str | None = None) -> None:
    emit(LogLevel.ERROR, message, style=style)


def report(exc: BaseException) -> None:
    """Log ``exc`` as an error line, with its recovery hint when it has one."""
    hint = getattr(exc, "recovery_hint", None)
    message = str(exc)
    if hint:
        message = f"{message} (hint: {hint})"
    error(message)

"""Failure contracts for the directory reconciler.

Components raise ``LogstreamdError`` subclasses on expected failures. The
scanner and reconciler decide per class whether a failure is reported and
skipped or propagated out of the pass. Programmer bugs raise normal
exceptions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

LogstreamdErrorCode = Literal[
    "load_failed",
    "registration_failed",
    "duplicate_name",
    "walk_failed",
    "reentrant_pass",
    "factory_failed",
    "settings_invalid",
]


class LogstreamdError(Exception):
    """Expected failure with a stable code.

    Use ``raise LogstreamdError(...) from exc`` to chain a causing exception;
    it is available as ``__cause__``.
    """

    def __init__(
        self,
        code: LogstreamdErrorCode,
        message: str,
        *,
        recovery_hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.recovery_hint = recovery_hint


class ConfigLoadError(LogstreamdError):
    """A stream reader file could not be turned into a runnable worker."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("load_failed", message, recovery_hint=recovery_hint)


class DecodeError(ConfigLoadError):
    """The file is unreadable or not valid TOML."""


class NoMatchingSectionError(ConfigLoadError):
    """No section declares the expected worker type."""


class AmbiguousSectionError(ConfigLoadError):
    """More than one section declares the expected worker type."""

    def __init__(self, message: str, *, candidates: tuple[str, ...]) -> None:
        super().__init__(message, recovery_hint="keep one worker section per file")
        self.candidates = candidates


class MakerError(ConfigLoadError):
    """The matched section failed typed decoding or preparation."""


class RegistrationError(LogstreamdError):
    """The host refused to register or start a worker."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("registration_failed", message, recovery_hint=recovery_hint)


class DuplicateNameError(LogstreamdError):
    """Two files declare the same worker name.

    Carries every conflict seen during a pass as
    ``(name, running_path, conflicting_path)`` triples.
    """

    def __init__(self, conflicts: tuple[tuple[str, Path, Path], ...]) -> None:
        details = "; ".join(
            f"input with name [{name}] already exists in {running}. "
            f"Not loading input file: {conflicting}"
            for name, running, conflicting in conflicts
        )
        super().__init__(
            "duplicate_name",
            f"duplicate name: {details}",
            recovery_hint="rename the worker section in one of the files",
        )
        self.conflicts = conflicts


class WalkError(LogstreamdError):
    """The root directory could not be walked at all."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("walk_failed", message, recovery_hint=recovery_hint)


class ReconcileInProgressError(LogstreamdError):
    """A pass was requested while another pass holds the execution token."""

    def __init__(self) -> None:
        super().__init__("reentrant_pass", "a reconcile pass is already running")


class WorkerFactoryError(LogstreamdError):
    """The configured worker factory could not be resolved."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("factory_failed", message, recovery_hint=recovery_hint)


class SettingsError(LogstreamdError):
    """The daemon settings file is unreadable or invalid."""

    def __init__(self, message: str, *, recovery_hint: str | None = None) -> None:
        super().__init__("settings_invalid", message, recovery_hint=recovery_hint)

"""Typed ports used by the reconciler and control loop."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .entry import Entry
    from .maker import WorkerMaker


class WorkerHandle(Protocol):
    """Live worker handle owned by an ``Entry``."""

    @property
    def name(self) -> str: ...

    @property
    def transient(self) -> bool: ...

    def set_transient(self, value: bool) -> None: ...


class WorkerRegistry(Protocol):
    """Host-side registration of worker handles."""

    def add_worker(self, handle: WorkerHandle) -> None: ...

    def remove_worker(self, handle: WorkerHandle) -> None:
        """Stop ``handle``; raises ``RegistrationError`` if it is still running."""
        ...


ReportFn = Callable[[BaseException], None]
EmitFn = Callable[[str], None]
LoadFn = Callable[[Path], "WorkerMaker"]
ScanFn = Callable[[Path], Mapping[Path, "Entry"]]

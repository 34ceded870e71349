"""Reconcile the running workers against the specified set.

One pass prunes workers whose declaration or file disappeared, rejects
name conflicts between files, keeps equivalent workers untouched,
restarts changed ones, and starts new ones. Passes are serialized by a
single-slot token; a concurrent pass is refused rather than queued.
"""

from __future__ import annotations

import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from . import log
from .entry import Entry
from .errors import DuplicateNameError, ReconcileInProgressError, RegistrationError
from .ports import EmitFn, ReportFn, WorkerRegistry


@dataclass(frozen=True)
class PassSummary:
    """Names affected by one reconcile pass."""

    added: tuple[str, ...] = ()
    removed: tuple[str, ...] = ()
    restarted: tuple[str, ...] = ()
    unchanged: tuple[str, ...] = ()
    failed: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.restarted)


class Reconciler:
    """Owns the running set and applies specified sets to the host."""

    def __init__(
        self,
        host: WorkerRegistry,
        *,
        emit: EmitFn = log.info,
        report_error: ReportFn = log.report,
    ) -> None:
        self._host = host
        self._emit = emit
        self._report_error = report_error
        self._running: dict[str, Entry] = {}
        self._token = threading.Lock()

    @property
    def running(self) -> Mapping[str, Entry]:
        """Read-only view of the running set keyed by worker name."""
        return MappingProxyType(self._running)

    @property
    def in_progress(self) -> bool:
        return self._token.locked()

    def reconcile(self, specified: Mapping[Path, Entry]) -> PassSummary:
        """Apply ``specified`` to the running set.

        Returns:
            Summary of the names touched by the pass.

        Raises:
            ReconcileInProgressError: If another pass holds the token.
            DuplicateNameError: If two files declared the same name. Every
                non-conflicting change of the pass has been applied.
        """
        if not self._token.acquire(blocking=False):
            raise ReconcileInProgressError()
        try:
            return self._reconcile(specified)
        finally:
            self._token.release()

    def _stop(self, entry: Entry) -> bool:
        """Stop ``entry``'s worker; on failure it stays in the running set."""
        try:
            self._host.remove_worker(entry.runner)
        except RegistrationError as exc:
            self._report_error(
                RegistrationError(
                    f"stopping input '{entry.name}': {exc}", recovery_hint=exc.recovery_hint
                )
            )
            return False
        del self._running[entry.name]
        self._emit(f"Removed: {entry.name}")
        return True

    def _prune(self, specified: Mapping[Path, Entry]) -> tuple[list[str], set[str]]:
        removed: list[str] = []
        stuck: set[str] = set()
        for name, entry in list(self._running.items()):
            declared = specified.get(entry.path)
            if declared is not None and declared.name == name:
                continue
            if self._stop(entry):
                removed.append(name)
            else:
                stuck.add(name)
        return removed, stuck

    def _reconcile(self, specified: Mapping[Path, Entry]) -> PassSummary:
        removed, stuck = self._prune(specified)
        added: list[str] = []
        restarted: list[str] = []
        unchanged: list[str] = []
        failed: list[str] = []
        conflicts: list[tuple[str, Path, Path]] = []
        conflicted: set[str] = set()

        for path in sorted(specified):
            entry = specified[path]
            if entry.name in conflicted:
                log.debug(f"skipping {path}: name '{entry.name}' conflicted in this pass")
                continue
            if entry.name in stuck:
                failed.append(entry.name)
                continue
            current = self._running.get(entry.name)
            if current is not None and current.path != entry.path:
                self._stop(current)
                conflict = (entry.name, current.path, entry.path)
                conflicts.append(conflict)
                conflicted.add(entry.name)
                self._report_error(DuplicateNameError((conflict,)))
                continue

            if current is not None:
                if not conflicts and current.equivalent(entry):
                    unchanged.append(entry.name)
                    continue
                if not self._stop(current):
                    failed.append(entry.name)
                    continue

            try:
                self._host.add_worker(entry.runner)
            except RegistrationError as exc:
                self._report_error(RegistrationError(f"creating input '{entry.name}': {exc}"))
                failed.append(entry.name)
                if current is not None:
                    removed.append(entry.name)
                continue
            self._running[entry.name] = entry
            self._emit(f"Added: {entry.name}")
            if current is not None:
                restarted.append(entry.name)
            else:
                added.append(entry.name)

        if conflicts:
            raise DuplicateNameError(tuple(conflicts))
        return PassSummary(
            added=tuple(added),
            removed=tuple(removed),
            restarted=tuple(restarted),
            unchanged=tuple(unchanged),
            failed=tuple(failed),
        )

"""Periodic scan-and-reconcile control loop."""

from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path

from . import log
from .ports import EmitFn, ScanFn
from .reconciler import PassSummary, Reconciler


class LoopState(Enum):
    IDLE = "idle"
    SCANNING = "scanning"
    STOPPED = "stopped"


class ControlLoop:
    """Runs one pass on start, then one pass per tick until stopped.

    Cancellation is cooperative: ``stop()`` takes effect at the next wait,
    never in the middle of a pass. Stopping leaves registered workers to the
    host, which tears them down separately.
    """

    def __init__(
        self,
        root: Path,
        interval: float,
        *,
        scan: ScanFn,
        reconciler: Reconciler,
        stop_event: threading.Event | None = None,
        emit: EmitFn = log.debug,
    ) -> None:
        self.root = root
        self.interval = interval
        self._scan = scan
        self._reconciler = reconciler
        self._stop_event = stop_event or threading.Event()
        self._emit = emit
        self.state = LoopState.IDLE
        self.passes = 0

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def run_pass(self) -> PassSummary:
        """Scan the root once and reconcile the result.

        Raises:
            WalkError: If the root cannot be walked.
            DuplicateNameError: If files conflicted during the pass.
            ReconcileInProgressError: If another pass is running.
        """
        self.state = LoopState.SCANNING
        try:
            specified = self._scan(self.root)
            summary = self._reconciler.reconcile(specified)
        except BaseException:
            self.state = LoopState.STOPPED
            raise
        self.passes += 1
        self.state = LoopState.IDLE
        self._emit(
            f"[loop] pass {self.passes}: {len(specified)} specified, "
            f"{len(summary.added)} added, {len(summary.removed)} removed, "
            f"{len(summary.restarted)} restarted"
        )
        return summary

    def run(self) -> None:
        """Run passes until ``stop()`` is called or a pass raises."""
        if self.stopped:
            self.state = LoopState.STOPPED
            return
        self.run_pass()
        while not self._stop_event.wait(self.interval):
            self.run_pass()
        self.state = LoopState.STOPPED

    def stop(self) -> None:
        self._stop_event.set()

    def cleanup_for_restart(self) -> None:
        self.stop()

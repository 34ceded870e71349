"""Threaded worker runners and the registry that owns them.

Each ``WorkerRunner`` drives one worker on its own daemon thread and
applies the worker's retry policy when it fails. ``WorkerHost`` is the
registry the reconciler adds workers to and removes them from.
"""

from __future__ import annotations

import threading
from enum import Enum

from . import log
from .errors import RegistrationError
from .models import CommonInputConfig, RetryOptions, StreamReaderConfig
from .worker import WorkerFactory

DEFAULT_STOP_TIMEOUT = 5.0


class RunnerState(Enum):
    """Worker runner lifecycle states."""

    PENDING = "pending"
    RUNNING = "running"
    RETRYING = "retrying"
    EXITED = "exited"
    STOPPED = "stopped"
    FAILED = "failed"


class WorkerRunner:
    """Runs one worker with retry and exit policy.

    Attributes:
        name: Worker name, unique within a host.
        plugin_type: Declared worker type.
        config: Prepared worker configuration.
        common: Prepared host-level configuration.
        transient: Whether the lifecycle is owned by the directory reconciler.
        state: Current ``RunnerState``.
        failures: Number of failed attempts so far.
    """

    def __init__(
        self,
        name: str,
        *,
        plugin_type: str,
        config: StreamReaderConfig,
        common: CommonInputConfig,
        factory: WorkerFactory,
    ) -> None:
        self._name = name
        self.plugin_type = plugin_type
        self.config = config
        self.common = common
        self._factory = factory
        self._transient = False
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self.state = RunnerState.PENDING
        self.failures = 0

    def __repr__(self) -> str:
        return f"WorkerRunner(name={self._name!r}, state={self.state.value})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def transient(self) -> bool:
        return self._transient

    def set_transient(self, value: bool) -> None:
        self._transient = value

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start the worker thread.

        Raises:
            RuntimeError: If the runner was already started or the thread
                cannot be spawned.
        """
        if self._thread is not None:
            raise RuntimeError(f"{self._name}: already started")
        thread = threading.Thread(target=self._run, name=f"logstreamd-{self._name}", daemon=True)
        self._thread = thread
        self.state = RunnerState.RUNNING
        thread.start()

    def stop(self, timeout: float | None = DEFAULT_STOP_TIMEOUT) -> bool:
        """Signal the worker to stop and wait for its thread.

        Returns:
            ``True`` once the thread has exited, ``False`` on timeout.
        """
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            self.state = RunnerState.STOPPED
            return True
        thread.join(timeout)
        if thread.is_alive():
            log.warning(f"[{self._name}] did not stop within {timeout}s")
            return False
        if self.state not in (RunnerState.EXITED, RunnerState.FAILED):
            self.state = RunnerState.STOPPED
        return True

    def _run(self) -> None:
        retries = self.common.retries or RetryOptions()
        can_exit = self.common.can_exit is not False
        delay = retries.delay_seconds
        attempts = 0
        while not self._stop_event.is_set():
            try:
                worker = self._factory(self._name, self.config)
                worker.run(self._stop_event)
            except Exception as exc:
                log.error(f"[{self._name}] worker failed: {exc}")
            else:
                if self._stop_event.is_set():
                    break
                if can_exit:
                    self.state = RunnerState.EXITED
                    log.info(f"[{self._name}] exited")
                    return
                log.error(f"[{self._name}] exited but is not allowed to exit")
            if 0 <= retries.max_retries <= attempts:
                self.state = RunnerState.FAILED
                log.error(f"[{self._name}] giving up after {attempts} retries")
                return
            attempts += 1
            self.failures = attempts
            self.state = RunnerState.RETRYING
            log.debug(f"[{self._name}] retrying in {delay:g}s (attempt {attempts})")
            if self._stop_event.wait(delay):
                break
            delay = min(delay * 2, retries.max_delay_seconds)
            self.state = RunnerState.RUNNING
        self.state = RunnerState.STOPPED


class WorkerHost:
    """Registry of running workers keyed by name."""

    def __init__(
        self,
        *,
        max_workers: int | None = None,
        stop_timeout: float | None = DEFAULT_STOP_TIMEOUT,
    ) -> None:
        self._max_workers = max_workers
        self._stop_timeout = stop_timeout
        self._runners: dict[str, WorkerRunner] = {}
        self._lock = threading.Lock()

    def add_worker(self, runner: WorkerRunner) -> None:
        """Register and start ``runner``.

        Raises:
            RegistrationError: If the name is taken, the host is full, or the
                runner fails to start.
        """
        with self._lock:
            if runner.name in self._runners:
                raise RegistrationError(f"worker '{runner.name}' is already registered")
            if self._max_workers is not None and len(self._runners) >= self._max_workers:
                raise RegistrationError(
                    f"cannot start '{runner.name}': {self._max_workers} workers already running",
                    recovery_hint="raise max_workers",
                )
            try:
                runner.start()
            except RuntimeError as exc:
                raise RegistrationError(f"starting '{runner.name}': {exc}") from exc
            self._runners[runner.name] = runner
        log.debug(f"[host] registered {runner.name}")

    def remove_worker(self, runner: WorkerRunner) -> None:
        """Stop and unregister ``runner``; unknown runners are ignored.

        A runner whose thread outlives the stop timeout stays registered, so
        no replacement with the same name can start next to it.

        Raises:
            RegistrationError: If the runner did not stop in time.
        """
        with self._lock:
            if self._runners.get(runner.name) is not runner:
                return
        if not runner.stop(self._stop_timeout):
            raise RegistrationError(
                f"worker '{runner.name}' did not stop within {self._stop_timeout}s",
                recovery_hint="it is retried on the next pass",
            )
        with self._lock:
            if self._runners.get(runner.name) is runner:
                del self._runners[runner.name]
        log.debug(f"[host] unregistered {runner.name}")

    def get(self, name: str) -> WorkerRunner | None:
        with self._lock:
            return self._runners.get(name)

    def workers(self) -> tuple[WorkerRunner, ...]:
        with self._lock:
            return tuple(self._runners.values())

    def shutdown(self, timeout: float | None = None) -> None:
        """Stop every registered worker."""
        with self._lock:
            runners = list(self._runners.values())
            self._runners.clear()
        wait = self._stop_timeout if timeout is None else timeout
        for runner in runners:
            runner.stop(wait)
        if runners:
            log.info(f"Stopped {len(runners)} worker(s).")

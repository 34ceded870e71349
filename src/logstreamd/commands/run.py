"""Run the directory reconciler until interrupted."""

from __future__ import annotations

import signal
from dataclasses import dataclass
from functools import partial
from types import FrameType

from .. import config, log
from ..errors import LogstreamdError
from ..host import WorkerHost
from ..io import die
from ..loader import load_record
from ..loop import ControlLoop
from ..models import DirectoryInputConfig
from ..reconciler import Reconciler
from ..scanner import scan_directory
from ..worker import resolve_worker_factory
from .common import settings_from_args

_STOP_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass(frozen=True)
class Runtime:
    """Wired components of one daemon run."""

    host: WorkerHost
    reconciler: Reconciler
    loop: ControlLoop


def build_runtime(settings: DirectoryInputConfig) -> Runtime:
    """Wire the host, reconciler, and control loop for ``settings``.

    Raises:
        WorkerFactoryError: If the configured worker factory cannot be imported.
    """
    factory = resolve_worker_factory(settings.worker_factory)
    root = config.resolve_logstreamer_dir(settings)
    host = WorkerHost(max_workers=settings.max_workers)
    reconciler = Reconciler(host)
    scan = partial(scan_directory, load=partial(load_record, worker_factory=factory))
    loop = ControlLoop(root, settings.ticker_interval, scan=scan, reconciler=reconciler)
    return Runtime(host=host, reconciler=reconciler, loop=loop)


def _install_stop_handlers(loop: ControlLoop) -> dict[int, object]:
    def handle(signum: int, _frame: FrameType | None) -> None:
        log.info(f"Received {signal.Signals(signum).name}, stopping.")
        loop.stop()

    previous: dict[int, object] = {}
    for signum in _STOP_SIGNALS:
        previous[signum] = signal.signal(signum, handle)
    return previous


def _restore_handlers(previous: dict[int, object]) -> None:
    for signum, handler in previous.items():
        signal.signal(signum, handler)


def run_daemon(args: object) -> None:
    """Scan and reconcile on every tick until a stop signal arrives.

    Args:
        args: CLI argument object with ``config``, ``dir``, ``interval``,
            ``share_dir``, ``worker_factory``, ``max_workers`` and
            ``timestamps`` attributes.

    Returns:
        None. Exits with status 1 when the loop stops on an error.
    """
    if getattr(args, "timestamps", True):
        log.set_timestamps(True)
    try:
        settings = settings_from_args(args)
        runtime = build_runtime(settings)
    except LogstreamdError as exc:
        die(exc)

    loop = runtime.loop
    log.info(f"Watching {loop.root} every {loop.interval}s")
    previous = _install_stop_handlers(loop)
    try:
        loop.run()
    except LogstreamdError as exc:
        die(exc)
    finally:
        _restore_handlers(previous)
        runtime.host.shutdown()
    log.success("Stopped.")

"""Worker contracts and the factory seam for stream reader implementations."""

from __future__ import annotations

import importlib
import threading
from collections.abc import Callable
from typing import Protocol

from . import log
from .errors import WorkerFactoryError
from .models import StreamReaderConfig


class Worker(Protocol):
    """A long-running unit of work driven by a ``WorkerRunner``.

    ``run`` blocks until the work finishes or ``stop_event`` is set. Raising
    marks the attempt as failed and subject to the retry policy.
    """

    def run(self, stop_event: threading.Event) -> None: ...


WorkerFactory = Callable[[str, StreamReaderConfig], Worker]


class NullStreamReader:
    """Stream reader that only announces what it would tail."""

    def __init__(self, name: str, config: StreamReaderConfig) -> None:
        self.name = name
        self.config = config

    def run(self, stop_event: threading.Event) -> None:
        log.info(
            f"[{self.name}] watching {self.config.log_directory} "
            f"for {self.config.file_match!r}"
        )
        stop_event.wait()
        log.debug(f"[{self.name}] stopped")


def resolve_worker_factory(import_path: str) -> WorkerFactory:
    """Import a worker factory from a ``module:attr`` path.

    Args:
        import_path: Import path such as ``"logstreamd.worker:NullStreamReader"``.

    Returns:
        The callable found at ``import_path``.

    Raises:
        WorkerFactoryError: If the path is malformed, the import fails, or
            the attribute is not callable.
    """
    module_name, sep, attr_path = import_path.strip().partition(":")
    if not sep or not module_name or not attr_path:
        raise WorkerFactoryError(
            f"invalid worker factory {import_path!r}",
            recovery_hint="use the form 'package.module:attribute'",
        )
    try:
        target: object = importlib.import_module(module_name)
    except ImportError as exc:
        raise WorkerFactoryError(f"cannot import {module_name!r}: {exc}") from exc
    for attr in attr_path.split("."):
        try:
            target = getattr(target, attr)
        except AttributeError as exc:
            raise WorkerFactoryError(f"{module_name!r} has no attribute {attr_path!r}") from exc
    if not callable(target):
        raise WorkerFactoryError(f"worker factory {import_path!r} is not callable")
    return target

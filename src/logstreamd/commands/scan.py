"""List the workers a directory tree declares without starting them."""

from __future__ import annotations

from collections import defaultdict
from functools import partial
from pathlib import Path

from .. import config, log
from ..errors import DuplicateNameError, LogstreamdError
from ..io import die, say
from ..loader import load_record
from ..scanner import scan_directory
from ..worker import NullStreamReader
from .common import settings_from_args


def find_conflicts(paths_by_name: dict[str, list[Path]]) -> tuple[tuple[str, Path, Path], ...]:
    """Return ``(name, first_path, other_path)`` for names declared more than once."""
    conflicts: list[tuple[str, Path, Path]] = []
    for name in sorted(paths_by_name):
        first, *others = sorted(paths_by_name[name])
        conflicts.extend((name, first, other) for other in others)
    return tuple(conflicts)


def scan_once(args: object) -> None:
    """Print ``<path> -> <name>`` for every loadable stream reader file.

    Exits with status 1 if any file failed to load or two files declare the
    same worker name.
    """
    failures: list[BaseException] = []

    def report(exc: BaseException) -> None:
        failures.append(exc)
        log.report(exc)

    try:
        settings = settings_from_args(args)
        root = config.resolve_logstreamer_dir(settings)
        load = partial(load_record, worker_factory=NullStreamReader)
        specified = scan_directory(root, load=load, report_error=report)
    except LogstreamdError as exc:
        die(exc)

    paths_by_name: dict[str, list[Path]] = defaultdict(list)
    for path in sorted(specified):
        entry = specified[path]
        paths_by_name[entry.name].append(path)
        say(f"{path} -> {entry.name}")

    conflicts = find_conflicts(paths_by_name)
    if conflicts:
        report(DuplicateNameError(conflicts))
    if not specified:
        log.warning(f"No stream reader files found under {root}")
    if failures:
        raise SystemExit(1)

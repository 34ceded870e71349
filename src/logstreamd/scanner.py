"""Walk the stream reader directory and build the specified set."""

from __future__ import annotations

import os
from pathlib import Path

from . import log
from .entry import Entry, make_entry
from .errors import ConfigLoadError, WalkError
from .paths import is_stream_reader_file
from .ports import LoadFn, ReportFn


def _check_root(root: Path) -> None:
    try:
        is_dir = root.is_dir()
    except OSError as exc:
        raise WalkError(f"cannot stat stream reader directory {root}: {exc}") from exc
    if not is_dir:
        raise WalkError(
            f"stream reader directory {root} does not exist or is not a directory",
            recovery_hint="create the directory or point logstreamer_dir elsewhere",
        )
    if not os.access(root, os.R_OK | os.X_OK):
        raise WalkError(f"stream reader directory {root} is not readable")


def iter_candidate_files(root: Path, *, report_error: ReportFn = log.report) -> list[Path]:
    """Return stream reader files under ``root`` in sorted walk order.

    Errors visiting individual entries are reported and skipped.

    Raises:
        WalkError: If ``root`` cannot be walked at all.
    """
    _check_root(root)

    def on_error(exc: OSError) -> None:
        location = exc.filename or root
        report_error(WalkError(f"walking '{location}': {exc.strerror or exc}"))

    candidates: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if is_stream_reader_file(path):
                candidates.append(path)
    return candidates


def scan_directory(
    root: Path,
    *,
    load: LoadFn,
    report_error: ReportFn = log.report,
) -> dict[Path, Entry]:
    """Load every stream reader file under ``root``.

    Files that cannot be inspected or fail to load are reported and skipped;
    the rest of the scan continues.

    Returns:
        Entries keyed by source file path.

    Raises:
        WalkError: If ``root`` cannot be walked at all.
    """
    specified: dict[Path, Entry] = {}
    for path in iter_candidate_files(root, report_error=report_error):
        try:
            is_file = path.is_file()
        except OSError as exc:
            report_error(WalkError(f"walking '{path}': {exc.strerror or exc}"))
            continue
        if not is_file:
            continue
        try:
            entry = make_entry(load(path), path)
        except ConfigLoadError as exc:
            report_error(ConfigLoadError(f"loading stream reader file '{path}': {exc}"))
            continue
        specified[path] = entry
    return specified

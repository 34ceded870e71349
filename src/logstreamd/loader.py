"""Load stream reader files into worker makers.

Each file is a TOML document holding one or more named sections. A
section's declared type is its ``type`` key, or the section name when the
key is absent. Exactly one section must declare the expected type.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path

from .errors import AmbiguousSectionError, DecodeError, NoMatchingSectionError
from .maker import WorkerMaker, apply_managed_defaults
from .models import STREAM_READER_TYPE
from .worker import WorkerFactory


def decode_sections(path: Path) -> dict[str, dict[str, object]]:
    """Decode ``path`` into a mapping of section name to raw section.

    Top-level values that are not tables are ignored.

    Raises:
        DecodeError: If the file cannot be read or is not valid TOML.
    """
    try:
        with path.open("rb") as fh:
            payload = tomllib.load(fh)
    except OSError as exc:
        raise DecodeError(f"cannot read {path}: {exc.strerror or exc}") from exc
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"invalid TOML: {exc}") from exc
    return {name: value for name, value in payload.items() if isinstance(value, dict)}


def section_identity(name: str, section: Mapping[str, object]) -> tuple[str, str]:
    """Return the ``(name, type)`` a section declares.

    Example:
        >>> section_identity("web_logs", {"type": "LogstreamerInput"})
        ('web_logs', 'LogstreamerInput')
        >>> section_identity("LogstreamerInput", {})
        ('LogstreamerInput', 'LogstreamerInput')
    """
    declared = section.get("type")
    if isinstance(declared, str) and declared.strip():
        return name, declared.strip()
    return name, name


def select_section(
    sections: Mapping[str, Mapping[str, object]],
    expected_type: str = STREAM_READER_TYPE,
) -> tuple[str, Mapping[str, object]]:
    """Pick the single section declaring ``expected_type``.

    Raises:
        NoMatchingSectionError: If no section declares the type.
        AmbiguousSectionError: If several sections declare it.
    """
    matches = [
        (name, section)
        for name, section in sections.items()
        if section_identity(name, section)[1] == expected_type
    ]
    if not matches:
        raise NoMatchingSectionError(f"no `{expected_type}` section")
    if len(matches) > 1:
        candidates = tuple(sorted(name for name, _section in matches))
        raise AmbiguousSectionError(
            f"multiple `{expected_type}` sections: {', '.join(candidates)}",
            candidates=candidates,
        )
    return matches[0]


def load_record(
    path: Path,
    *,
    worker_factory: WorkerFactory,
    expected_type: str = STREAM_READER_TYPE,
) -> WorkerMaker:
    """Build a maker for the worker section declared in ``path``.

    The maker is named after the section, not the file, and carries the
    managed-defaults preparer. Nothing is started.
    """
    sections = decode_sections(path)
    name, section = select_section(sections, expected_type)
    maker = WorkerMaker(plugin_type=expected_type, section=dict(section), factory=worker_factory)
    return maker.set_name(name).with_common_preparer(apply_managed_defaults)

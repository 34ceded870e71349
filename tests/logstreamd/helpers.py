# ruff: noqa: E402

from __future__ import annotations

import json
import sys
import threading
from dataclasses import dataclass, field
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from logstreamd.entry import Entry
from logstreamd.errors import RegistrationError
from logstreamd.maker import apply_managed_defaults
from logstreamd.models import CommonInputConfig, StreamReaderConfig

BASE_FIELDS: dict[str, object] = {
    "log_directory": "/var/log/nginx",
    "file_match": r"access\.log",
    "hostname": "testhost",
}


def _toml_value(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, dict):
        items = ", ".join(f"{json.dumps(key)} = {_toml_value(val)}" for key, val in value.items())
        return "{ " + items + " }"
    return json.dumps(value)


def stream_reader_toml(section: str = "web_logs", *, typed: bool = True, **fields: object) -> str:
    lines = [f"[{section}]"]
    if typed:
        lines.append('type = "LogstreamerInput"')
    for key, value in {**BASE_FIELDS, **fields}.items():
        lines.append(f"{key} = {_toml_value(value)}")
    return "\n".join(lines) + "\n"


def write_stream_file(
    root: Path, relative: str, section: str = "web_logs", **fields: object
) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(stream_reader_toml(section, **fields), encoding="utf-8")
    return path


@dataclass
class FakeHandle:
    name: str
    transient: bool = False

    def set_transient(self, value: bool) -> None:
        self.transient = value


class FakeHost:
    """Records registry calls.

    Names in ``refuse`` cannot be added; names in ``stuck`` cannot be removed.
    """

    def __init__(self, *, refuse: tuple[str, ...] = (), stuck: tuple[str, ...] = ()) -> None:
        self.active: dict[str, FakeHandle] = {}
        self.events: list[tuple[str, str]] = []
        self.refuse = set(refuse)
        self.stuck = set(stuck)

    def add_worker(self, handle: FakeHandle) -> None:
        if handle.name in self.refuse:
            raise RegistrationError("refused by test host")
        if handle.name in self.active:
            raise RegistrationError(f"worker '{handle.name}' is already registered")
        self.active[handle.name] = handle
        self.events.append(("add", handle.name))

    def remove_worker(self, handle: FakeHandle) -> None:
        if handle.name in self.stuck:
            raise RegistrationError(f"worker '{handle.name}' did not stop within 0.1s")
        if self.active.get(handle.name) is handle:
            del self.active[handle.name]
        self.events.append(("remove", handle.name))


def fake_entry(name: str, path: str | Path, **fields: object) -> Entry:
    config = StreamReaderConfig.model_validate({**BASE_FIELDS, **fields})
    common = apply_managed_defaults(CommonInputConfig(type="LogstreamerInput"))
    return Entry(
        name=name,
        path=Path(path),
        config=config,
        common=common,
        runner=FakeHandle(name, transient=True),
    )


def specified_set(*entries: Entry) -> dict[Path, Entry]:
    return {entry.path: entry for entry in entries}


class BlockingWorker:
    """Worker that runs until stopped."""

    def __init__(self, name: str, config: StreamReaderConfig) -> None:
        self.name = name
        self.config = config

    def run(self, stop_event: threading.Event) -> None:
        stop_event.wait()


@dataclass
class SlowStop:
    """Worker factory whose workers keep running until ``release`` is set."""

    release: threading.Event = field(default_factory=threading.Event)
    live: list[str] = field(default_factory=list)

    def __call__(self, name: str, config: StreamReaderConfig) -> SlowStopWorker:
        return SlowStopWorker(name, self)


class SlowStopWorker:
    def __init__(self, name: str, owner: SlowStop) -> None:
        self.name = name
        self.owner = owner

    def run(self, stop_event: threading.Event) -> None:
        self.owner.live.append(self.name)
        try:
            stop_event.wait()
            self.owner.release.wait(5.0)
        finally:
            self.owner.live.remove(self.name)
